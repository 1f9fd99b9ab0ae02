"""MCP tool for retrieving YouTube transcripts.

This module exposes a single tool, ``get_transcript``, that accepts a
YouTube URL (or a bare video ID) and returns the video's transcript
as text.  It uses the utilities in ``utils.video_transcript`` to
extract the video ID and download the caption track, and
``utils.formatting`` to render the segments.

Three output formats are available:

* ``plain`` – readable paragraph text (the default).
* ``timestamped`` – one line per caption, prefixed with ``[MM:SS]``.
* ``json`` – structured data with timestamp, offset, duration and
  text for every caption.

Example call:

.. code-block:: json

    {
      "url": "https://www.youtube.com/watch?v=DFlm3_EIbko",
      "lang": "en",
      "format": "timestamped"
    }

Failures to fetch a transcript (invalid ID, captions disabled,
language unavailable, network errors) do not raise.  They come back
as a normal text result starting with ``Error fetching transcript:``
with the ``isError`` flag set.
"""

from __future__ import annotations

import functools
import logging
from typing import Annotated

import requests
from anyio import to_thread
from mcp.types import CallToolResult, TextContent
from pydantic import BeforeValidator, Field

from server import mcp  # Shared FastMCP instance
from utils.formatting import TranscriptFormat, format_transcript
from utils.video_transcript import TranscriptError, extract_video_id, fetch_transcript


logger = logging.getLogger(__name__)

DEFAULT_LANG = "en"
DEFAULT_FORMAT = "plain"

TOOL_DESCRIPTION = (
    "Fetch and format YouTube video transcript. Supports multiple output formats: "
    "plain text (readable paragraphs), timestamped text (each line with timestamp), "
    "or structured JSON."
)


def _or_default(default: str):
    """Replace an empty or null argument with ``default`` before validation."""
    return BeforeValidator(lambda value: value or default)


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


@mcp.tool(name="get_transcript", description=TOOL_DESCRIPTION)
async def get_transcript(
    url: Annotated[str, Field(description="YouTube video URL or video ID")],
    lang: Annotated[
        str,
        _or_default(DEFAULT_LANG),
        Field(description="Language code for transcript (e.g., 'en', 'es', 'fr'). Defaults to 'en'."),
    ] = DEFAULT_LANG,
    format: Annotated[
        TranscriptFormat,
        _or_default(DEFAULT_FORMAT),
        Field(
            description=(
                "Output format: 'plain' for readable text (default), 'timestamped' "
                "for text with timestamps, 'json' for structured data"
            )
        ),
    ] = DEFAULT_FORMAT,
) -> CallToolResult:
    """Fetch a YouTube transcript and render it as text.

    Args:
        url: A YouTube watch, ``youtu.be``, embed or shorts URL, or a
            bare video ID.
        lang: Language code of the caption track.  Empty or null
            means ``en``.
        format: ``plain``, ``timestamped`` or ``json``.  Empty or
            null means ``plain``.

    Returns:
        A ``CallToolResult`` with one text content block.  On failure
        the text describes the problem and ``isError`` is set.
    """
    url = str(url or "")
    lang = str(lang or DEFAULT_LANG)
    if not url:
        return _text_result("URL parameter is required", is_error=True)

    video_id = extract_video_id(url)
    try:
        segments = await to_thread.run_sync(functools.partial(fetch_transcript, video_id, lang))
    except (TranscriptError, requests.RequestException) as e:
        logger.warning("Transcript fetch failed for %s (%s): %s", video_id, lang, e)
        message = str(e) or "Unknown error occurred"
        return _text_result(f"Error fetching transcript: {message}", is_error=True)

    logger.info("Fetched %d segments for %s (%s) as %s", len(segments), video_id, lang, format)
    return _text_result(format_transcript(segments, format))
