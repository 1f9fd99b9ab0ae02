"""
Tests for the process entry point and logging setup.
"""

import logging

import pytest
from rich.logging import RichHandler

import main
from config import settings
from server import mcp
from utils import logger as logger_module
from utils.logger import setup_logger


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logger_writes_to_stderr():
    logger = setup_logger("youtube_transcript_mcp.test", level="debug")

    root = logging.getLogger()
    assert logger.name == "youtube_transcript_mcp.test"
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], RichHandler)
    assert root.handlers[0].console.stderr


def test_main_serves_stdio(monkeypatch):
    transports = []
    monkeypatch.setattr(mcp, "run", lambda transport: transports.append(transport))

    main.main()

    assert transports == ["stdio"]


def test_main_exits_with_status_1_on_startup_failure(monkeypatch):
    def broken_run(transport):
        raise OSError("stdin closed")

    monkeypatch.setattr(mcp, "run", broken_run)

    with pytest.raises(SystemExit) as excinfo:
        main.main()

    assert excinfo.value.code == 1


def test_startup_line_is_written_even_when_info_is_silenced(monkeypatch, capsys):
    monkeypatch.setattr(settings, "LOG_LEVEL", "WARNING")
    monkeypatch.setattr(mcp, "run", lambda transport: None)

    main.main()

    assert capsys.readouterr().err.splitlines().count(main.STARTUP_MESSAGE) == 1


def test_main_exits_with_status_1_when_setup_fails(monkeypatch):
    def broken_setup(*args, **kwargs):
        raise ValueError("invalid YT_TRANSCRIPT_LOG_LEVEL")

    monkeypatch.setattr(logger_module, "setup_logger", broken_setup)

    with pytest.raises(SystemExit) as excinfo:
        main.main()

    assert excinfo.value.code == 1
