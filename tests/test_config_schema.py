"""Tests for the unified config schema and its helper functions.

Tests the Pydantic models in config_schema.py (UnifiedConfig, PoeditorConfig,
SyncSectionConfig, DownloadSectionConfig, LoggingConfig), the build_config()
factory and section_fallbacks().
"""

import pytest
from pydantic import ValidationError

from poeditor_sync.config_schema import (
    DownloadSectionConfig,
    LoggingConfig,
    PoeditorConfig,
    SyncSectionConfig,
    UnifiedConfig,
    build_config,
    section_fallbacks,
)

# ---------------------------------------------------------------------------
# UnifiedConfig tests
# ---------------------------------------------------------------------------


class TestUnifiedConfig:
    """Tests for the top-level UnifiedConfig model."""

    def test_empty_dict_produces_valid_defaults(self):
        config = UnifiedConfig()
        assert config.poeditor.api_token is None
        assert config.sync.source is None
        assert config.download.export_type is None
        assert config.logging.level == "INFO"
        assert config.logging.file is None

    def test_frozen_model_prevents_mutation(self):
        config = UnifiedConfig()
        with pytest.raises(ValidationError):
            config.poeditor = PoeditorConfig(api_token="changed")


class TestPoeditorConfig:
    def test_integer_project_id_coerced(self):
        config = PoeditorConfig(project_id=12345)
        assert config.project_id == "12345"

    def test_string_project_id_kept(self):
        assert PoeditorConfig(project_id="42").project_id == "42"

    def test_frozen_model(self):
        config = PoeditorConfig(language="en")
        with pytest.raises(ValidationError):
            config.language = "de"


class TestSectionModels:
    def test_sync_section_booleans(self):
        section = SyncSectionConfig(lowercased=False, delete_removals=True)
        assert section.lowercased is False
        assert section.delete_removals is True

    def test_sync_section_rejects_non_boolean(self):
        with pytest.raises(ValidationError):
            SyncSectionConfig(lowercased="sometimes")

    def test_download_section(self):
        section = DownloadSectionConfig(
            destination="out.xml", export_type="android_strings"
        )
        assert section.destination == "out.xml"

    def test_logging_defaults(self):
        assert LoggingConfig().level == "INFO"


# ---------------------------------------------------------------------------
# build_config()
# ---------------------------------------------------------------------------


class TestBuildConfig:
    def test_empty_dict_returns_defaults(self):
        assert build_config({}) == UnifiedConfig()

    def test_full_config(self):
        config = build_config(
            {
                "poeditor": {
                    "api_token": "tok",
                    "project_id": 12345,
                    "language": "de",
                },
                "sync": {"source": "app/i18n.py", "enum_name": "Strings"},
                "download": {"destination": "de.strings"},
                "logging": {"level": "DEBUG", "file": "/tmp/sync.log"},
            }
        )
        assert config.poeditor.project_id == "12345"
        assert config.sync.enum_name == "Strings"
        assert config.download.destination == "de.strings"
        assert config.logging.level == "DEBUG"

    def test_unknown_sections_ignored(self):
        config = build_config(
            {"poeditor": {"language": "fr"}, "future_section": {"key": "v"}}
        )
        assert config.poeditor.language == "fr"
        assert not hasattr(config, "future_section")

    def test_empty_section_uses_defaults(self):
        # "sync:" with nothing under it loads as None
        config = build_config({"sync": None})
        assert config.sync == SyncSectionConfig()

    def test_invalid_section_raises(self):
        with pytest.raises(ValidationError):
            build_config({"sync": {"delete_removals": "maybe"}})


# ---------------------------------------------------------------------------
# section_fallbacks()
# ---------------------------------------------------------------------------


class TestSectionFallbacks:
    def test_none_values_dropped(self):
        section = SyncSectionConfig(source="i18n.py", lowercased=False)
        assert section_fallbacks(section) == {
            "source": "i18n.py",
            "lowercased": False,
        }

    def test_empty_section(self):
        assert section_fallbacks(PoeditorConfig()) == {}
