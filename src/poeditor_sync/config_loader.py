"""
YAML config file discovery and loading for poeditor-sync.

Config files are optional. When present they are searched in a fixed
order, loaded with ``!include`` support, merged section by section (the
project file wins over the global one) and finally have ``${VAR}``
references replaced from the environment.

Usage:
    from poeditor_sync.config_loader import load_hierarchical_config

    raw = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "POEDITOR_SYNC_CONFIG"
PROJECT_CONFIG_DIR = ".poeditor_sync"
GLOBAL_CONFIG_DIR = Path(".config") / "poeditor_sync"

# ${VAR} or ${VAR:-default}
_ENV_REFERENCE = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


# ---------------------------------------------------------------------------
# Environment references
# ---------------------------------------------------------------------------


def interpolate_env_vars(value: str) -> str:
    """Expand ``${VAR}`` and ``${VAR:-default}`` references in *value*.

    An unset or empty variable expands to its default, or to ``""`` when
    no default is given. An unterminated ``${`` is kept literally.
    """

    def _expand(match: re.Match) -> str:
        name, default = match.group(1), match.group(2)
        current = os.environ.get(name)
        if current:
            return current
        return default if default is not None else ""

    return _ENV_REFERENCE.sub(_expand, value)


def _interpolate_recursive(obj: Any) -> Any:
    """Apply ``interpolate_env_vars`` to every string in a YAML document."""
    match obj:
        case str():
            return interpolate_env_vars(obj)
        case dict():
            return {key: _interpolate_recursive(val) for key, val in obj.items()}
        case list():
            return [_interpolate_recursive(item) for item in obj]
        case _:
            return obj


# ---------------------------------------------------------------------------
# !include
# ---------------------------------------------------------------------------


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader with an ``!include`` tag.

    The tag is registered on this subclass only, so plain
    ``yaml.safe_load`` keeps rejecting it.
    """


def _include_constructor(loader: ConfigLoader, node: yaml.ScalarNode) -> Any:
    """Load the file named by ``!include <path>`` in place of the node.

    Relative paths are resolved against the including file.
    """
    target = Path(loader.construct_scalar(node))
    including_file = Path(loader.name).resolve()
    if not target.is_absolute():
        target = including_file.parent / target
    target = target.resolve()

    chain: list[Path] = getattr(loader, "_include_stack", [])
    if target in chain:
        cycle = " -> ".join(str(p) for p in [*chain, target])
        raise ValueError(f"Circular include detected: {cycle}")
    if not target.exists():
        raise FileNotFoundError(
            f"Include file not found: {target} (referenced from {including_file})"
        )

    return _load_yaml_with_includes(target, _include_stack=[*chain, target])


ConfigLoader.add_constructor("!include", _include_constructor)


def _load_yaml_with_includes(
    path: Path, *, _include_stack: list[Path] | None = None
) -> Any:
    """Parse one YAML file with ``ConfigLoader``."""
    path = path.resolve()
    with open(path, "r", encoding="utf-8") as fh:
        loader = ConfigLoader(fh)
        loader._include_stack = _include_stack or [path]  # type: ignore[attr-defined]
        try:
            return loader.get_single_data()
        finally:
            loader.dispose()


# ---------------------------------------------------------------------------
# Discovery and merge
# ---------------------------------------------------------------------------


def _candidate_paths() -> list[Path]:
    candidates: list[Path] = []

    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit).expanduser().resolve()
        if not path.exists():
            logger.warning("%s points to a missing file: %s", CONFIG_ENV_VAR, path)
        candidates.append(path)

    project_dir = Path.cwd() / PROJECT_CONFIG_DIR
    candidates.append(project_dir / "config.yml")
    candidates.append(project_dir / "config.yaml")
    candidates.append(Path.home() / GLOBAL_CONFIG_DIR / "config.yml")
    return candidates


def discover_config_files() -> list[Path]:
    """Return the config files that exist, highest precedence first.

    Order:
        1. The file named by ``POEDITOR_SYNC_CONFIG``.
        2. ``.poeditor_sync/config.yml`` in the current directory.
        3. ``.poeditor_sync/config.yaml`` in the current directory.
        4. ``~/.config/poeditor_sync/config.yml``.
    """
    found: list[Path] = []
    for path in _candidate_paths():
        if path.exists() and path not in found:
            found.append(path)
    return found


def load_hierarchical_config() -> dict[str, Any]:
    """Load every discovered config file and merge them.

    Files are applied from lowest to highest precedence. A top-level
    section from a higher file replaces the whole section from a lower
    one; sections are not deep-merged. Files whose root is not a mapping
    are skipped with a warning.

    Returns:
        The merged mapping, or ``{}`` when no config file exists.

    Raises:
        yaml.YAMLError: A file is not valid YAML.
        FileNotFoundError: An ``!include`` target is missing.
        ValueError: ``!include`` files form a cycle.
    """
    paths = discover_config_files()
    if not paths:
        logger.debug("No config files found, using defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        data = _load_yaml_with_includes(path)
        if isinstance(data, dict):
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Skipping config file %s: root is a %s, not a mapping",
                path,
                type(data).__name__,
            )

    return _interpolate_recursive(merged)
