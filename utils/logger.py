"""Logging setup shared by the server entry point and its modules.

Standard output carries the MCP stdio frames, so every handler here
writes to standard error.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from config import settings


def setup_logger(name: str = "youtube_transcript_mcp", level: str | None = None) -> logging.Logger:
    # force=True: the MCP SDK installs its own root handler on import
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )
    return logging.getLogger(name)
