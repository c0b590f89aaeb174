"""Tests for input validation functions."""

import pytest

from poeditor_sync.validators import (
    format_validation_error,
    validate_api_token,
    validate_api_url,
    validate_enum_name,
    validate_language_code,
    validate_project_id,
)


def test_format_validation_error():
    assert (
        format_validation_error("Project id", "cannot be empty")
        == "Project id cannot be empty"
    )


class TestValidateApiToken:
    def test_valid(self):
        assert validate_api_token("0123456789abcdef") == (True, "")

    @pytest.mark.parametrize("token", ["", "   "])
    def test_empty(self, token):
        is_valid, msg = validate_api_token(token)
        assert not is_valid
        assert msg == "API token cannot be empty"

    def test_inner_whitespace(self):
        is_valid, msg = validate_api_token("abc def")
        assert not is_valid
        assert "whitespace" in msg


class TestValidateProjectId:
    def test_valid(self):
        assert validate_project_id("12345") == (True, "")

    def test_empty(self):
        assert validate_project_id("")[0] is False

    @pytest.mark.parametrize("project_id", ["abc", "12a", "-5", "1.5"])
    def test_non_numeric(self, project_id):
        is_valid, msg = validate_project_id(project_id)
        assert not is_valid
        assert "must be numeric" in msg


class TestValidateLanguageCode:
    @pytest.mark.parametrize("code", ["en", "de", "pt-br", "zh-Hans", "en_US", "fil"])
    def test_valid(self, code):
        assert validate_language_code(code) == (True, "")

    @pytest.mark.parametrize("code", ["", "e", "English", "EN", "en-"])
    def test_invalid(self, code):
        assert validate_language_code(code)[0] is False


class TestValidateEnumName:
    @pytest.mark.parametrize("name", ["I18n", "Strings", "L10n_Keys"])
    def test_valid(self, name):
        assert validate_enum_name(name) == (True, "")

    @pytest.mark.parametrize("name", ["", "I18n.Sub", "1st", "two words"])
    def test_invalid(self, name):
        assert validate_enum_name(name)[0] is False


class TestValidateApiUrl:
    def test_valid(self):
        assert validate_api_url("https://api.poeditor.com/v2") == (True, "")

    def test_bad_scheme(self):
        is_valid, msg = validate_api_url("api.poeditor.com")
        assert not is_valid
        assert "must start with http:// or https://" in msg

    def test_missing_host(self):
        is_valid, msg = validate_api_url("https://")
        assert not is_valid
        assert "must include a hostname" in msg
