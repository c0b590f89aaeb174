"""Tests for poeditor_sync.config_loader: YAML discovery, includes and merge."""

import textwrap

import pytest
import yaml

from poeditor_sync.config_loader import (
    _interpolate_recursive,
    _load_yaml_with_includes,
    discover_config_files,
    interpolate_env_vars,
    load_hierarchical_config,
)


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Run with an empty working directory and an empty home."""
    project = tmp_path / "project"
    home = tmp_path / "home"
    project.mkdir()
    home.mkdir()
    monkeypatch.chdir(project)
    monkeypatch.setenv("HOME", str(home))
    return project, home


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text))
    return path


# -------------------------------------------------------------------------
# Env var interpolation
# -------------------------------------------------------------------------


class TestInterpolateEnvVars:
    def test_replaces_set_var(self, monkeypatch):
        monkeypatch.setenv("POE_TOKEN", "abc")
        assert interpolate_env_vars("${POE_TOKEN}") == "abc"

    def test_unset_var_becomes_empty(self, monkeypatch):
        monkeypatch.delenv("POE_UNSET_XYZ", raising=False)
        assert interpolate_env_vars("id=${POE_UNSET_XYZ}") == "id="

    def test_default_when_unset_or_empty(self, monkeypatch):
        monkeypatch.delenv("POE_UNSET_XYZ", raising=False)
        monkeypatch.setenv("POE_EMPTY", "")
        assert interpolate_env_vars("${POE_UNSET_XYZ:-en}") == "en"
        assert interpolate_env_vars("${POE_EMPTY:-en}") == "en"

    def test_default_ignored_when_set(self, monkeypatch):
        monkeypatch.setenv("POE_LANG", "de")
        assert interpolate_env_vars("${POE_LANG:-en}") == "de"

    def test_unterminated_reference_kept(self):
        assert interpolate_env_vars("${NO_CLOSE") == "${NO_CLOSE"

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("POE_ID", "12345")
        data = {"poeditor": {"project_id": "${POE_ID}", "n": 1}, "l": ["${POE_ID}", 2]}
        assert _interpolate_recursive(data) == {
            "poeditor": {"project_id": "12345", "n": 1},
            "l": ["12345", 2],
        }


# -------------------------------------------------------------------------
# YAML !include support
# -------------------------------------------------------------------------


class TestIncludeDirective:
    def test_include_relative_file(self, tmp_path):
        _write(tmp_path / "secrets.yml", "api_token: secret123\n")
        main = _write(tmp_path / "config.yml", "poeditor: !include secrets.yml\n")
        assert _load_yaml_with_includes(main) == {
            "poeditor": {"api_token": "secret123"}
        }

    def test_include_absolute_path(self, tmp_path):
        secrets = _write(tmp_path / "abs.yml", "api_token: abc\n")
        main = _write(tmp_path / "config.yml", f"poeditor: !include {secrets}\n")
        assert _load_yaml_with_includes(main) == {"poeditor": {"api_token": "abc"}}

    def test_missing_include_raises(self, tmp_path):
        main = _write(tmp_path / "config.yml", "poeditor: !include missing.yml\n")
        with pytest.raises(FileNotFoundError, match="missing.yml"):
            _load_yaml_with_includes(main)

    def test_circular_include_raises(self, tmp_path):
        _write(tmp_path / "b.yml", "y: !include a.yml\n")
        a = _write(tmp_path / "a.yml", "x: !include b.yml\n")
        with pytest.raises(ValueError, match="Circular include"):
            _load_yaml_with_includes(a)

    def test_safe_load_does_not_know_include(self, tmp_path):
        cfg = _write(tmp_path / "config.yml", "x: !include other.yml\n")
        with pytest.raises(yaml.constructor.ConstructorError):
            with open(cfg) as fh:
                yaml.safe_load(fh)


# -------------------------------------------------------------------------
# Discovery
# -------------------------------------------------------------------------


class TestDiscoverConfigFiles:
    def test_nothing_found(self, isolated_dirs):
        assert discover_config_files() == []

    def test_precedence_order(self, isolated_dirs, monkeypatch, tmp_path):
        project, home = isolated_dirs
        explicit = _write(tmp_path / "custom.yml", "a: 1\n")
        yml = _write(project / ".poeditor_sync" / "config.yml", "b: 1\n")
        yaml_ext = _write(project / ".poeditor_sync" / "config.yaml", "c: 1\n")
        global_cfg = _write(
            home / ".config" / "poeditor_sync" / "config.yml", "d: 1\n"
        )
        monkeypatch.setenv("POEDITOR_SYNC_CONFIG", str(explicit))

        assert discover_config_files() == [
            explicit.resolve(),
            yml.resolve(),
            yaml_ext.resolve(),
            global_cfg.resolve(),
        ]

    def test_missing_explicit_file_warns(self, isolated_dirs, monkeypatch, caplog):
        project, _home = isolated_dirs
        monkeypatch.setenv("POEDITOR_SYNC_CONFIG", str(project / "nope.yml"))
        assert discover_config_files() == []
        assert "missing file" in caplog.text


# -------------------------------------------------------------------------
# Hierarchical merge
# -------------------------------------------------------------------------


class TestLoadHierarchicalConfig:
    def test_zero_config(self, isolated_dirs):
        assert load_hierarchical_config() == {}

    def test_project_section_replaces_global_section(self, isolated_dirs):
        project, home = isolated_dirs
        _write(
            home / ".config" / "poeditor_sync" / "config.yml",
            """\
            poeditor:
              api_token: globaltoken
              language: fr
            logging:
              level: WARNING
            """,
        )
        _write(
            project / ".poeditor_sync" / "config.yml",
            """\
            poeditor:
              project_id: 12345
            """,
        )

        result = load_hierarchical_config()

        assert result["poeditor"] == {"project_id": 12345}
        assert result["logging"] == {"level": "WARNING"}

    def test_env_interpolation_after_merge(self, isolated_dirs, monkeypatch):
        project, _home = isolated_dirs
        monkeypatch.setenv("MY_POEDITOR_TOKEN", "s3cret")
        _write(
            project / ".poeditor_sync" / "config.yml",
            """\
            poeditor:
              api_token: "${MY_POEDITOR_TOKEN}"
              language: "${MY_LANG:-en}"
            """,
        )

        result = load_hierarchical_config()

        assert result["poeditor"] == {"api_token": "s3cret", "language": "en"}

    def test_include_within_project_config(self, isolated_dirs):
        project, _home = isolated_dirs
        _write(project / ".poeditor_sync" / "secrets.yml", "api_token: key123\n")
        _write(
            project / ".poeditor_sync" / "config.yml",
            """\
            poeditor: !include secrets.yml
            sync:
              source: app/i18n.py
            """,
        )

        result = load_hierarchical_config()

        assert result["poeditor"]["api_token"] == "key123"
        assert result["sync"]["source"] == "app/i18n.py"

    def test_non_mapping_root_skipped(self, isolated_dirs, monkeypatch, tmp_path):
        bad = _write(tmp_path / "bad.yml", "- item1\n- item2\n")
        monkeypatch.setenv("POEDITOR_SYNC_CONFIG", str(bad))
        assert load_hierarchical_config() == {}

    def test_invalid_yaml_raises(self, isolated_dirs):
        project, _home = isolated_dirs
        _write(project / ".poeditor_sync" / "config.yml", "poeditor: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_hierarchical_config()
