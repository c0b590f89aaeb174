"""Shared pytest fixtures for poeditor-sync tests."""

import textwrap
from unittest.mock import MagicMock, Mock

import pytest

from poeditor_sync.config import Config

_SETTINGS_ENV_VARS = (
    "POEDITOR_API_TOKEN",
    "POEDITOR_PROJECT_ID",
    "POEDITOR_LANGUAGE",
    "POEDITOR_API_URL",
    "POEDITOR_SYNC_SOURCE",
    "POEDITOR_SYNC_ENUM_NAME",
    "POEDITOR_SYNC_LOWERCASED",
    "POEDITOR_SYNC_DELETE_REMOVALS",
    "POEDITOR_DOWNLOAD_DESTINATION",
    "POEDITOR_DOWNLOAD_EXPORT_TYPE",
    "POEDITOR_SYNC_CONFIG",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep the developer's own POEditor settings out of the tests."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_config():
    """Create a Config instance for testing."""
    return Config(
        api_token="0123456789abcdef",
        project_id="12345",
        language="en",
        api_url="https://api.poeditor.com/v2",
    )


@pytest.fixture
def mock_poeditor_client(mock_config):
    """Create a mock PoeditorClient instance for testing."""
    from poeditor_sync.core.client import PoeditorClient

    client = MagicMock(spec=PoeditorClient)
    client.config = mock_config
    return client


@pytest.fixture
def mock_json_response():
    """Factory fixture for POEditor API response mocks."""

    def _create_response(result=None, status="success", code="200", message="OK"):
        body = {
            "response": {"status": status, "code": code, "message": message}
        }
        if result is not None:
            body["result"] = result

        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = body
        mock_response.raise_for_status.return_value = None
        return mock_response

    return _create_response


@pytest.fixture
def declarations_file(tmp_path):
    """Write a small declaration module and return its path."""
    source = tmp_path / "i18n.py"
    source.write_text(
        textwrap.dedent(
            """\
            class I18n:
                \"\"\"App strings.\"\"\"

                ok = "ok"
                cancel: str

                class Onboarding:
                    title = "title"
                    subtitle = "subtitle"
            """
        ),
        encoding="utf-8",
    )
    return source
