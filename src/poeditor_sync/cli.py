"""Command line interface for poeditor-sync.

Two commands:

- ``sync`` (alias ``upload``, the default): reconcile the project's terms
  with the keys declared in a local source file.
- ``download``: export one language and write it to a local file.

User-facing messages and logs go to stderr; reports go to stdout.
"""

import argparse
import json
import logging
import sys
from collections.abc import Sequence

import requests
import yaml
from dotenv import load_dotenv

from . import __version__
from .config import (
    DEFAULT_ENUM_NAME,
    DEFAULT_EXPORT_TYPE,
    DEFAULT_LANGUAGE,
    Config,
    load_config,
    load_download_options,
    load_sync_options,
)
from .config_loader import load_hierarchical_config
from .config_schema import UnifiedConfig, build_config, section_fallbacks
from .core.client import PoeditorClient
from .core.schema import ExportType
from .errors import PoeditorSyncError, SettingsDeclined
from .export import ExportDownloader
from .logger import setup_logging
from .sync import TermsSyncEngine, format_sync_report, report_to_json

logger = logging.getLogger(__name__)

COMMANDS = ("sync", "upload", "download")
DEFAULT_COMMAND = "sync"

# Options accepted before the command
_GLOBAL_FLAGS = ("--debug",)
_GLOBAL_VALUE_OPTIONS = ("--log-file", "--log-format")

_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off")


def _stderr_print(msg: str) -> None:
    print(msg, file=sys.stderr, flush=True)


def str_to_bool(value: str) -> bool:
    """argparse ``type`` for explicit boolean option values."""
    lowered = value.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise argparse.ArgumentTypeError(
        f"expected one of {', '.join(_TRUE_STRINGS + _FALSE_STRINGS)}, got '{value}'"
    )


def mask_token(token: str) -> str:
    """Hide all but the last four characters of an API token."""
    if len(token) <= 8:
        return "*" * len(token)
    return "*" * (len(token) - 4) + token[-4:]


# ---------------------------------------------------------------------------
# Settings confirmation
# ---------------------------------------------------------------------------


def print_settings(settings: dict[str, object]) -> None:
    _stderr_print("")
    _stderr_print("Current settings that will be used:")
    for name, value in settings.items():
        _stderr_print(f"  {name}: {value}")
    _stderr_print("")


def confirm_settings(assume_yes: bool) -> None:
    """Ask the user to confirm the printed settings.

    Raises:
        SettingsDeclined: The user answered no, or stdin is not interactive
            and ``--yes`` was not given.
    """
    if assume_yes:
        return
    if not sys.stdin.isatty():
        raise SettingsDeclined(
            "Cannot confirm settings without a terminal. Pass --yes to skip confirmation"
        )
    answer = input("Please check all settings carefully. Everything is correct? [y/N] ")
    if answer.strip().lower() not in ("y", "yes"):
        raise SettingsDeclined()


def _connection_settings(config: Config) -> dict[str, object]:
    return {
        "token": mask_token(config.api_token),
        "id": config.project_id,
        "language": config.language,
    }


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_sync(args: argparse.Namespace, unified: UnifiedConfig) -> int:
    config = load_config(
        token=args.token,
        project_id=args.id,
        language=args.language,
        yaml_fallbacks=section_fallbacks(unified.poeditor),
    )
    options = load_sync_options(
        path=args.path,
        enum_name=args.name,
        lowercased=args.lowercased,
        delete_removals=args.delete_removals,
        yaml_fallbacks=section_fallbacks(unified.sync),
    )

    print_settings(
        {
            "path": options.source_path,
            "name": options.enum_name,
            "lowercased mode": options.lowercased,
            **_connection_settings(config),
            "delete removals": options.delete_removals,
        }
    )
    confirm_settings(args.yes)

    with PoeditorClient(config) as client:
        engine = TermsSyncEngine(client, config, options)
        report = engine.run(dry_run=args.dry_run)

    if args.json:
        print(json.dumps(report_to_json(report), indent=2))
    else:
        print(format_sync_report(report))

    if not report.success:
        logger.warning("Sync finished with failed or partial stages")
        if args.strict:
            return 2
    return 0


def cmd_download(args: argparse.Namespace, unified: UnifiedConfig) -> int:
    config = load_config(
        token=args.token,
        project_id=args.id,
        language=args.language,
        yaml_fallbacks=section_fallbacks(unified.poeditor),
    )
    options = load_download_options(
        destination=args.destination,
        export_type=args.export_type,
        yaml_fallbacks=section_fallbacks(unified.download),
    )

    print_settings(
        {
            **_connection_settings(config),
            "destination": options.destination,
            "export type": options.export_type.value,
        }
    )
    confirm_settings(args.yes)

    with PoeditorClient(config) as client:
        result = ExportDownloader(client, config, options).run()

    print(f"Download url: {result.url}")
    print(
        f"Saved {result.language} localization ({result.export_type.value}) "
        f"to {result.destination} ({result.bytes_written} bytes)"
    )
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-t",
        "--token",
        help="POEditor API token (prefer POEDITOR_API_TOKEN env var; "
        "arguments are visible in the process list)",
    )
    parser.add_argument("-i", "--id", help="POEditor project id")
    parser.add_argument(
        "-l",
        "--language",
        help=f"POEditor language code (default: {DEFAULT_LANGUAGE})",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help='Automatically answer "yes" to the settings confirmation',
    )


def _add_logging_arguments(
    parser: argparse.ArgumentParser, suppress_defaults: bool = False
) -> None:
    # Accepted before and after the command; the command-level copies must
    # not reset values given before the command.
    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress_defaults else value

    parser.add_argument(
        "--debug",
        action="store_true",
        default=default(False),
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        default=default(None),
        help="Also append logs to this file",
    )
    parser.add_argument(
        "--log-format",
        choices=("text", "json"),
        default=default("text"),
        help="Log output format (default: text)",
    )


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    _add_logging_arguments(common, suppress_defaults=True)

    parser = argparse.ArgumentParser(
        prog="poeditor-sync",
        description="Sync local localization keys with POEditor terms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync terms declared in the I18n class of a Python module
  poeditor-sync sync --path app/i18n.py --id 12345

  # Preview changes without touching the project
  poeditor-sync sync --path app/i18n.py --dry-run --yes

  # Keep terms that were removed locally
  poeditor-sync sync --path app/i18n.py --delete-removals false

  # Download the German strings file
  poeditor-sync download -l de -d Resources/de.lproj/Localizable.strings

Settings can also come from POEDITOR_* environment variables, a .env file
or .poeditor_sync/config.yml. Without a command, "sync" is used.
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"poeditor-sync version {__version__}",
    )
    _add_logging_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    sync_parser = subparsers.add_parser(
        "sync",
        aliases=["upload"],
        parents=[common],
        help="Sync POEditor terms with the local key declaration",
    )
    sync_parser.add_argument(
        "-p", "--path", help="Path to the Python file declaring the keys"
    )
    sync_parser.add_argument(
        "-n",
        "--name",
        help=f"Name of the root declaration class (default: {DEFAULT_ENUM_NAME})",
    )
    _add_connection_arguments(sync_parser)
    sync_parser.add_argument(
        "-c",
        "--lowercased",
        type=str_to_bool,
        metavar="BOOL",
        help="Lowercase all key components (default: true)",
    )
    sync_parser.add_argument(
        "-d",
        "--delete-removals",
        type=str_to_bool,
        metavar="BOOL",
        help="Delete remote terms that were removed locally (default: true)",
    )
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without calling add/delete",
    )
    sync_parser.add_argument(
        "--json", action="store_true", help="Print the report as JSON"
    )
    sync_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when a stage fails or partially succeeds",
    )
    sync_parser.set_defaults(handler=cmd_sync)

    download_parser = subparsers.add_parser(
        "download",
        parents=[common],
        help="Export a language from POEditor and save it locally",
    )
    _add_connection_arguments(download_parser)
    download_parser.add_argument(
        "-d", "--destination", help="Destination file path"
    )
    download_parser.add_argument(
        "-e",
        "--export-type",
        choices=[t.value for t in ExportType],
        metavar="FORMAT",
        help=f"Export format (default: {DEFAULT_EXPORT_TYPE.value})",
    )
    download_parser.set_defaults(handler=cmd_download)

    return parser


def with_default_command(argv: Sequence[str]) -> list[str]:
    """Prepend the default command unless one (or top-level help) is given.

    Only tokens before the first command-level option or positional are
    inspected, so option values such as ``-n download`` never count as a
    command.
    """
    args = list(argv)
    tokens = iter(args)
    for arg in tokens:
        if arg in COMMANDS or arg in ("-h", "--help", "--version"):
            return args
        if arg in _GLOBAL_FLAGS or arg.startswith(
            tuple(f"{o}=" for o in _GLOBAL_VALUE_OPTIONS)
        ):
            continue
        if arg in _GLOBAL_VALUE_OPTIONS:
            next(tokens, None)
            continue
        break
    return [DEFAULT_COMMAND, *args]


def _load_unified_config() -> UnifiedConfig:
    # .env first so ${VAR} interpolation in YAML can use its values
    load_dotenv()
    return build_config(load_hierarchical_config())


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run a command and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(
        with_default_command(sys.argv[1:] if argv is None else argv)
    )

    try:
        # CLI flags only until the config files have been read
        setup_logging(
            debug=args.debug,
            log_file=args.log_file,
            debug_format=args.log_format,
        )
        unified = _load_unified_config()
        setup_logging(
            debug=args.debug,
            log_file=args.log_file or unified.logging.file,
            debug_format=args.log_format,
            level=unified.logging.level,
        )
        return args.handler(args, unified)
    except (
        PoeditorSyncError,
        requests.RequestException,
        yaml.YAMLError,
        ValueError,
        OSError,
    ) as e:
        logger.debug("Command failed", exc_info=True)
        _stderr_print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        _stderr_print("\nInterrupted.")
        return 130


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
