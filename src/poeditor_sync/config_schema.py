"""Unified configuration schema for poeditor_sync.

Defines Pydantic models for the YAML config structure with dedicated
sections for the POEditor connection, the ``sync`` and ``download``
commands, and logging. Section values serve as fallbacks for
``config.load_config()`` and friends.

Usage:
    from poeditor_sync.config_schema import build_config, section_fallbacks

    raw = load_hierarchical_config()
    unified = build_config(raw)
    fallbacks = section_fallbacks(unified.poeditor)
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class PoeditorConfig(BaseModel):
    """POEditor connection settings.

    All fields are optional to support zero-config: env vars and CLI args
    can supply them at runtime instead.
    """

    api_token: str | None = Field(
        default=None, description="POEditor API token"
    )
    project_id: str | None = Field(
        default=None, description="POEditor project id"
    )
    language: str | None = Field(
        default=None, description="Reference language code"
    )
    api_url: str | None = Field(
        default=None, description="POEditor API base URL"
    )

    model_config = {"frozen": True}

    @field_validator("project_id", mode="before")
    @classmethod
    def _coerce_project_id(cls, value: object) -> object:
        # YAML reads unquoted ids as integers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class SyncSectionConfig(BaseModel):
    """Defaults for the ``sync`` command."""

    source: str | None = Field(
        default=None, description="Path to the declaration source file"
    )
    enum_name: str | None = Field(
        default=None, description="Name of the root declaration container"
    )
    lowercased: bool | None = Field(
        default=None, description="Lowercase generated keys"
    )
    delete_removals: bool | None = Field(
        default=None,
        description="Delete remote terms that were removed locally",
    )

    model_config = {"frozen": True}


class DownloadSectionConfig(BaseModel):
    """Defaults for the ``download`` command."""

    destination: str | None = Field(
        default=None, description="Destination file path"
    )
    export_type: str | None = Field(
        default=None, description="POEditor export format"
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Aggregates all config sections. Every section has sensible defaults,
    so ``UnifiedConfig()`` (zero-config) is always valid.
    """

    poeditor: PoeditorConfig = Field(default_factory=PoeditorConfig)
    sync: SyncSectionConfig = Field(default_factory=SyncSectionConfig)
    download: DownloadSectionConfig = Field(
        default_factory=DownloadSectionConfig
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory and helpers
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully; absent sections get defaults.
    Unknown top-level sections are ignored with a debug message.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    known = set(UnifiedConfig.model_fields)
    unknown = sorted(k for k in raw_data if k not in known)
    if unknown:
        logger.debug("Ignoring unknown config sections: %s", unknown)

    return UnifiedConfig(
        **{k: v for k, v in raw_data.items() if k in known and v is not None}
    )


def section_fallbacks(section: BaseModel) -> dict:
    """Return the non-None values of a config section as a fallback dict."""
    return {
        k: v for k, v in section.model_dump().items() if v is not None
    }
