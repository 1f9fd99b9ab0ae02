"""
Tests for timestamp and transcript formatting.
"""

import json

from utils.formatting import (
    format_json,
    format_plain_text,
    format_timestamp,
    format_timestamped,
    format_transcript,
)
from utils.video_transcript import TranscriptSegment


def test_format_timestamp():
    """Test time formatting."""

    assert format_timestamp(0) == "00:00"
    assert format_timestamp(65) == "01:05"
    assert format_timestamp(3661) == "01:01:01"


def test_format_timestamp_truncates_fractions():
    assert format_timestamp(59.99) == "00:59"
    assert format_timestamp(3599.9) == "59:59"
    assert format_timestamp(3600) == "01:00:00"
    assert format_timestamp(36000 + 125.5) == "10:02:05"


def test_plain_text(segments):
    assert format_plain_text(segments) == "Hi there"


def test_timestamped(segments):
    assert format_timestamped(segments) == "[00:00] Hi\n[01:05] there"


def test_json(segments):
    output = format_json(segments)

    assert json.loads(output) == [
        {"timestamp": "00:00", "offset": 0, "duration": 1, "text": "Hi"},
        {"timestamp": "01:05", "offset": 65, "duration": 2, "text": "there"},
    ]
    # Pretty-printed with two-space indentation
    assert output.startswith('[\n  {\n    "timestamp": "00:00",')


def test_json_keeps_non_ascii_text():
    output = format_json([TranscriptSegment(text="café ñ", offset=1.5, duration=0.5)])
    assert "café ñ" in output
    assert json.loads(output)[0]["offset"] == 1.5


def test_empty_transcript():
    assert format_plain_text([]) == ""
    assert format_timestamped([]) == ""
    assert format_json([]) == "[]"


def test_format_transcript_dispatch(segments):
    assert format_transcript(segments) == "Hi there"
    assert format_transcript(segments, "plain") == "Hi there"
    assert format_transcript(segments, "timestamped") == "[00:00] Hi\n[01:05] there"
    assert len(json.loads(format_transcript(segments, "json"))) == 2
    # Unknown selectors render as plain text
    assert format_transcript(segments, "srt") == "Hi there"


def test_segments_are_not_mutated(segments):
    before = list(segments)
    format_transcript(segments, "json")
    format_transcript(segments, "timestamped")
    assert segments == before
    assert segments[0].text == " Hi "
