"""Tests for logging service configuration."""

import logging

import pytest

from rentledger.config import settings
from rentledger.services.logging import resolve_level, setup_server_logging


@pytest.fixture
def root_logger():
    """Root logger with its handlers and level restored after the test."""
    root = logging.getLogger()
    original_handlers = root.handlers.copy()
    original_level = root.level
    yield root
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    for handler in original_handlers:
        root.addHandler(handler)
    root.setLevel(original_level)


class TestResolveLevel:
    @pytest.mark.parametrize(
        "name,expected",
        [("DEBUG", logging.DEBUG), (" warning ", logging.WARNING), ("bogus", logging.INFO)],
    )
    def test_level_names(self, name, expected):
        assert resolve_level(name) == expected


class TestServerLogging:
    """Test server logging configuration."""

    def test_level_and_file_from_settings(self, root_logger, tmp_path, monkeypatch):
        log_file = tmp_path / "nested" / "ledger.log"
        monkeypatch.setattr(settings, "log_level", "WARNING")
        monkeypatch.setattr(settings, "log_file", str(log_file))

        setup_server_logging()

        assert log_file.parent.exists()
        assert root_logger.level == logging.WARNING
        assert all(h.level == logging.WARNING for h in root_logger.handlers)

    def test_explicit_arguments_win(self, root_logger, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "log_level", "WARNING")

        setup_server_logging("DEBUG", str(tmp_path / "server.log"))

        assert root_logger.level == logging.DEBUG

    def test_stdout_and_file_handlers(self, root_logger, tmp_path):
        setup_server_logging("INFO", str(tmp_path / "server.log"))

        kinds = sorted(type(h).__name__ for h in root_logger.handlers)
        assert kinds == ["FileHandler", "StreamHandler"]

    def test_repeat_setup_does_not_duplicate_handlers(self, root_logger, tmp_path):
        dummy = logging.StreamHandler()
        root_logger.addHandler(dummy)

        setup_server_logging("INFO", str(tmp_path / "server.log"))
        setup_server_logging("INFO", str(tmp_path / "server.log"))

        assert len(root_logger.handlers) == 2
        assert dummy not in root_logger.handlers

    def test_uvicorn_logs_go_through_root(self, root_logger, tmp_path):
        uvicorn_logger = logging.getLogger("uvicorn.error")
        uvicorn_logger.addHandler(logging.NullHandler())
        uvicorn_logger.propagate = False

        setup_server_logging("INFO", str(tmp_path / "server.log"))

        assert uvicorn_logger.handlers == []
        assert uvicorn_logger.propagate is True

    def test_ledger_messages_reach_file(self, root_logger, tmp_path):
        log_file = tmp_path / "server.log"
        setup_server_logging("INFO", str(log_file))

        logging.getLogger("rentledger.services.allocation_service").warning("Conflict on period 7")

        contents = log_file.read_text()
        assert "rentledger.services.allocation_service - WARNING - Conflict on period 7" in contents
        # [YYYY-MM-DD HH:MM:SS]
        assert contents.startswith("[")
