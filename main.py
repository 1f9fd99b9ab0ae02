"""
Entry point for running the YouTube transcript MCP server.

To start the server, run this module directly (or the installed
``youtube-transcript-mcp`` script).  It imports the shared server
instance from ``server.py`` and serves it over stdio.  When running
via Claude for Desktop, your configuration should specify something
akin to::

    "command": "python",
    "args": ["main.py"]

or use a tool like ``uv run`` if you have ``uv`` installed. The
server blocks until it is terminated by the client.
"""

from __future__ import annotations

import logging
import sys


STARTUP_MESSAGE = "YouTube Transcript MCP Server running on stdio"

logger = logging.getLogger("youtube_transcript_mcp")


def main() -> None:
    try:
        # Settings are read when these modules are first imported, so
        # a bad environment fails here like any other startup error.
        from utils.logger import setup_logger

        setup_logger()
        from server import mcp

        # Written directly so the line appears whatever the log level.
        print(STARTUP_MESSAGE, file=sys.stderr, flush=True)
        mcp.run("stdio")
    except Exception as e:
        logger.error("Server error: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
