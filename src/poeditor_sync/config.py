"""Runtime configuration for poeditor-sync.

Reads POEditor connection settings and per-command options from CLI args,
environment variables, .env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    POEDITOR_API_TOKEN: POEditor API token (required)
    POEDITOR_PROJECT_ID: POEditor project id (required)
    POEDITOR_LANGUAGE: Reference language code (optional, default: en)
    POEDITOR_API_URL: API base URL (optional, default: https://api.poeditor.com/v2)
    POEDITOR_SYNC_SOURCE: Path to the declaration source file (sync)
    POEDITOR_SYNC_ENUM_NAME: Root declaration name (sync, default: I18n)
    POEDITOR_SYNC_LOWERCASED: Lowercase generated keys (sync, default: true)
    POEDITOR_SYNC_DELETE_REMOVALS: Delete remote terms removed locally (sync, default: true)
    POEDITOR_DOWNLOAD_DESTINATION: Where the exported file is written (download)
    POEDITOR_DOWNLOAD_EXPORT_TYPE: Export format (download, default: apple_strings)
"""

import logging
import os
from dataclasses import dataclass

from .core.schema import ExportType
from .errors import SettingsInvalid
from .validators import (
    validate_api_token,
    validate_api_url,
    validate_enum_name,
    validate_language_code,
    validate_project_id,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.poeditor.com/v2"
DEFAULT_LANGUAGE = "en"
DEFAULT_ENUM_NAME = "I18n"
DEFAULT_LOWERCASED = True
DEFAULT_DELETE_REMOVALS = True
DEFAULT_EXPORT_TYPE = ExportType.APPLE_STRINGS


@dataclass
class Config:
    api_token: str
    project_id: str
    language: str = DEFAULT_LANGUAGE
    api_url: str = DEFAULT_API_URL


@dataclass
class SyncOptions:
    source_path: str
    enum_name: str = DEFAULT_ENUM_NAME
    lowercased: bool = DEFAULT_LOWERCASED
    delete_removals: bool = DEFAULT_DELETE_REMOVALS


@dataclass
class DownloadOptions:
    destination: str
    export_type: ExportType = DEFAULT_EXPORT_TYPE


def parse_bool(value: str) -> bool:
    """Interpret a config string as a boolean (true/1/yes/on)."""
    return value.strip().lower() in ("true", "1", "yes", "on")


def get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return parse_bool(val)


def _check(result: tuple[bool, str], hint: str = "") -> None:
    is_valid, message = result
    if not is_valid:
        raise SettingsInvalid(f"{message}. {hint}" if hint else message)


def validate_config(config: Config) -> None:
    """Validate connection settings and raise SettingsInvalid if impossible.

    Args:
        config: Config instance to validate (normalized in place).

    Raises:
        SettingsInvalid: If the token, project id, language or URL is invalid.
    """
    config.api_token = config.api_token.strip()
    config.project_id = config.project_id.strip()
    config.language = config.language.strip()
    config.api_url = config.api_url.strip()

    _check(
        validate_api_token(config.api_token),
        "Set POEDITOR_API_TOKEN or pass --token.",
    )
    _check(
        validate_project_id(config.project_id),
        "Set POEDITOR_PROJECT_ID or pass --id.",
    )
    _check(validate_language_code(config.language))
    _check(validate_api_url(config.api_url))

    config.api_url = config.api_url.removesuffix("/")


def validate_sync_options(options: SyncOptions) -> None:
    """Validate sync options.

    Raises:
        SettingsInvalid: If the source path is empty or the enum name is invalid.
    """
    if not options.source_path or not options.source_path.strip():
        raise SettingsInvalid(
            "Declaration source path cannot be empty. "
            "Set POEDITOR_SYNC_SOURCE or pass --path."
        )
    options.enum_name = options.enum_name.strip()
    _check(validate_enum_name(options.enum_name))


def validate_download_options(options: DownloadOptions) -> None:
    """Validate download options.

    Raises:
        SettingsInvalid: If the destination is empty.
    """
    if not options.destination or not options.destination.strip():
        raise SettingsInvalid(
            "Destination path cannot be empty. "
            "Set POEDITOR_DOWNLOAD_DESTINATION or pass --destination."
        )


def load_config(
    token: str | None = None,
    project_id: str | None = None,
    language: str | None = None,
    api_url: str | None = None,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load connection settings with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        token: Override API token.
        project_id: Override project id.
        language: Override language code.
        api_url: Override API base URL.
        yaml_fallbacks: Dict of values from the YAML ``poeditor`` section.

    Returns:
        Validated Config instance.

    Raises:
        SettingsInvalid: If required settings are missing or invalid after
            checking all sources.
    """
    fb = yaml_fallbacks or {}

    api_token = token or os.getenv("POEDITOR_API_TOKEN") or fb.get("api_token")
    if not api_token:
        raise SettingsInvalid(
            "POEditor API token not found. Set POEDITOR_API_TOKEN environment "
            "variable, pass --token CLI argument, or add 'api_token' to config.yml."
        )

    final_project_id = (
        project_id or os.getenv("POEDITOR_PROJECT_ID") or fb.get("project_id")
    )
    if not final_project_id:
        raise SettingsInvalid(
            "POEditor project id not found. Set POEDITOR_PROJECT_ID environment "
            "variable, pass --id CLI argument, or add 'project_id' to config.yml."
        )

    final_language = (
        language
        or os.getenv("POEDITOR_LANGUAGE")
        or fb.get("language")
        or DEFAULT_LANGUAGE
    )
    final_api_url = (
        api_url
        or os.getenv("POEDITOR_API_URL")
        or fb.get("api_url")
        or DEFAULT_API_URL
    )

    config = Config(
        api_token=str(api_token),
        project_id=str(final_project_id),
        language=str(final_language),
        api_url=str(final_api_url),
    )

    validate_config(config)

    return config


def load_sync_options(
    path: str | None = None,
    enum_name: str | None = None,
    lowercased: bool | None = None,
    delete_removals: bool | None = None,
    yaml_fallbacks: dict | None = None,
) -> SyncOptions:
    """Load sync options with the same precedence as ``load_config()``.

    Boolean arguments use ``None`` for "not given on the command line".

    Raises:
        SettingsInvalid: If the source path is missing or the name is invalid.
    """
    fb = yaml_fallbacks or {}

    source_path = path or os.getenv("POEDITOR_SYNC_SOURCE") or fb.get("source")
    if not source_path:
        raise SettingsInvalid(
            "Declaration source file not found. Set POEDITOR_SYNC_SOURCE "
            "environment variable, pass --path CLI argument, or add 'source' "
            "to the sync section of config.yml."
        )

    final_name = (
        enum_name
        or os.getenv("POEDITOR_SYNC_ENUM_NAME")
        or fb.get("enum_name")
        or DEFAULT_ENUM_NAME
    )

    def resolve_bool(cli_value: bool | None, env_key: str, fb_key: str, default: bool) -> bool:
        if cli_value is not None:
            return cli_value
        env_value = get_bool_env(env_key)
        if env_value is not None:
            return env_value
        if fb.get(fb_key) is not None:
            return bool(fb[fb_key])
        return default

    options = SyncOptions(
        source_path=str(source_path),
        enum_name=str(final_name),
        lowercased=resolve_bool(
            lowercased,
            "POEDITOR_SYNC_LOWERCASED",
            "lowercased",
            DEFAULT_LOWERCASED,
        ),
        delete_removals=resolve_bool(
            delete_removals,
            "POEDITOR_SYNC_DELETE_REMOVALS",
            "delete_removals",
            DEFAULT_DELETE_REMOVALS,
        ),
    )

    validate_sync_options(options)

    return options


def load_download_options(
    destination: str | None = None,
    export_type: str | None = None,
    yaml_fallbacks: dict | None = None,
) -> DownloadOptions:
    """Load download options with the same precedence as ``load_config()``.

    Raises:
        SettingsInvalid: If the destination is missing or the export type
            is unknown.
    """
    fb = yaml_fallbacks or {}

    final_destination = (
        destination
        or os.getenv("POEDITOR_DOWNLOAD_DESTINATION")
        or fb.get("destination")
    )
    if not final_destination:
        raise SettingsInvalid(
            "Destination path not found. Set POEDITOR_DOWNLOAD_DESTINATION "
            "environment variable, pass --destination CLI argument, or add "
            "'destination' to the download section of config.yml."
        )

    raw_type = (
        export_type
        or os.getenv("POEDITOR_DOWNLOAD_EXPORT_TYPE")
        or fb.get("export_type")
        or DEFAULT_EXPORT_TYPE.value
    )
    try:
        final_type = ExportType(str(raw_type))
    except ValueError:
        allowed = ", ".join(t.value for t in ExportType)
        raise SettingsInvalid(
            f"Invalid export type '{raw_type}': must be one of {allowed}"
        ) from None

    options = DownloadOptions(
        destination=str(final_destination), export_type=final_type
    )

    validate_download_options(options)

    return options
