"""Tests for logger.py: setup_logging() and JsonFormatter.

Strategy: mock logging.basicConfig to verify setup_logging passes correct
args, since pytest's log capture plugin interferes with real basicConfig
calls.
"""

import json
import logging
import sys
from unittest.mock import patch

from poeditor_sync.logger import JsonFormatter, setup_logging


# ---------------------------------------------------------------------------
# setup_logging tests
# ---------------------------------------------------------------------------


class TestSetupLogging:
    """Tests for setup_logging()."""

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_logs_to_stderr(self, mock_basic):
        setup_logging()

        mock_basic.assert_called_once()
        kwargs = mock_basic.call_args[1]
        handlers = kwargs["handlers"]
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr
        assert kwargs["force"] is True

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_default_level_is_info(self, mock_basic):
        setup_logging()
        assert mock_basic.call_args[1]["level"] == logging.INFO

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_debug_overrides_level(self, mock_basic):
        setup_logging(debug=True)
        assert mock_basic.call_args[1]["level"] == logging.DEBUG

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_config_level_used(self, mock_basic):
        setup_logging(level="warning")
        assert mock_basic.call_args[1]["level"] == logging.WARNING

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_env_log_level_beats_config(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging(level="DEBUG")
        assert mock_basic.call_args[1]["level"] == logging.ERROR

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_debug_beats_env(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging(debug=True)
        assert mock_basic.call_args[1]["level"] == logging.DEBUG

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_unknown_level_falls_back_to_info(self, mock_basic, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "CHATTY")
        setup_logging()
        assert mock_basic.call_args[1]["level"] == logging.INFO

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_log_file_adds_file_handler(self, mock_basic, tmp_path):
        log_file = str(tmp_path / "sync.log")
        setup_logging(log_file=log_file)

        handlers = mock_basic.call_args[1]["handlers"]
        file_handlers = [
            h for h in handlers if isinstance(h, logging.FileHandler)
        ]
        assert len(handlers) == 2
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == log_file
        for h in file_handlers:
            h.close()

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_json_format_uses_json_formatter(self, mock_basic):
        setup_logging(debug_format="json")

        handlers = mock_basic.call_args[1]["handlers"]
        assert all(isinstance(h.formatter, JsonFormatter) for h in handlers)

    @patch("poeditor_sync.logger.logging.basicConfig")
    def test_third_party_silenced(self, _mock_basic):
        setup_logging()

        assert logging.getLogger("urllib3").level == logging.WARNING
        assert (
            logging.getLogger("charset_normalizer").level == logging.WARNING
        )


# ---------------------------------------------------------------------------
# JsonFormatter tests
# ---------------------------------------------------------------------------


def _record(msg, args=(), level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="poeditor_sync.sync.engine",
        level=level,
        pathname="engine.py",
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_basic_output(self):
        formatter = JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S")
        data = json.loads(formatter.format(_record("Added %d terms", (3,))))

        assert "ts" in data
        assert data["level"] == "INFO"
        assert data["logger"] == "poeditor_sync.sync.engine"
        assert data["msg"] == "Added 3 terms"

    def test_includes_exception(self):
        formatter = JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S")
        try:
            raise RuntimeError("listing failed")
        except RuntimeError:
            exc_info = sys.exc_info()

        output = formatter.format(
            _record("boom", level=logging.ERROR, exc_info=exc_info)
        )
        data = json.loads(output)

        assert "RuntimeError" in data["exc"]
        assert "listing failed" in data["exc"]
        assert "\n" not in output
