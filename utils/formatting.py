"""Rendering of transcript segments into text.

Three output formats are supported:

* ``plain`` – the segment texts joined into one readable paragraph.
* ``timestamped`` – one ``[MM:SS] text`` line per segment.
* ``json`` – a pretty-printed array of objects with ``timestamp``,
  ``offset``, ``duration`` and ``text`` fields.

All functions are pure and keep segments in the order they were given.
"""

from __future__ import annotations

import json
from typing import Literal, Sequence, Tuple

from utils.video_transcript import TranscriptSegment


TranscriptFormat = Literal["plain", "timestamped", "json"]
TRANSCRIPT_FORMATS: Tuple[str, ...] = ("plain", "timestamped", "json")


def format_timestamp(seconds: float) -> str:
    """Format an offset in seconds as ``HH:MM:SS`` or ``MM:SS``.

    The hours field only appears when it is non-zero.  Fractional
    seconds are truncated.

    Examples::

        >>> format_timestamp(65)
        '01:05'
        >>> format_timestamp(3661.9)
        '01:01:01'
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_plain_text(segments: Sequence[TranscriptSegment]) -> str:
    return " ".join(segment.text.strip() for segment in segments)


def format_timestamped(segments: Sequence[TranscriptSegment]) -> str:
    return "\n".join(
        f"[{format_timestamp(segment.offset)}] {segment.text.strip()}" for segment in segments
    )


def format_json(segments: Sequence[TranscriptSegment]) -> str:
    formatted = [
        {
            "timestamp": format_timestamp(segment.offset),
            "offset": segment.offset,
            "duration": segment.duration,
            "text": segment.text.strip(),
        }
        for segment in segments
    ]
    return json.dumps(formatted, indent=2, ensure_ascii=False)


def format_transcript(segments: Sequence[TranscriptSegment], fmt: str = "plain") -> str:
    """Render segments in the requested format.

    Unrecognised format names fall back to ``plain``.
    """
    if fmt == "timestamped":
        return format_timestamped(segments)
    if fmt == "json":
        return format_json(segments)
    return format_plain_text(segments)
