"""Utility functions to resolve YouTube video IDs and download transcripts.

This module fetches the caption track of a YouTube video using the
Innertube API: the watch page is scraped for the Innertube API key,
the ``player`` endpoint is queried with an Android client context to
list the caption tracks, and the chosen track's timedtext XML is
downloaded and parsed into timed segments.

Failures are raised as subclasses of :class:`TranscriptError` with a
human readable message.  The tool layer turns them into error
responses, so nothing here swallows an error or returns a partial
result.

Functions:
    extract_video_id(url_or_id: str) -> str:
        Parse a YouTube URL and return the video ID, or the input
        unchanged when no ID can be found.

    list_caption_tracks(video_id: str) -> List[CaptionTrack]:
        Return the caption tracks advertised for a video.

    fetch_transcript(video_id: str, lang: str = "en") -> List[TranscriptSegment]:
        Download the transcript for a video in the given language.
"""

from __future__ import annotations

import html
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

from config import settings


logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
INNERTUBE_PLAYER_URL = "https://www.youtube.com/youtubei/v1/player?key={api_key}"
INNERTUBE_CONTEXT = {
    "client": {
        "clientName": "ANDROID",
        "clientVersion": "20.10.38",
    }
}

# Characters that only appear in URLs, never in a bare video ID
_URL_CHARS = re.compile(r"[/:.]")

# Patterns to match typical YouTube URL formats, tried in order
_VIDEO_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&?/]+)"),
    re.compile(r"youtube\.com/shorts/([^&?/]+)"),
]

_VALID_VIDEO_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")
_API_KEY_RE = re.compile(r'"INNERTUBE_API_KEY":\s*"([^"]+)"')


@dataclass(frozen=True)
class TranscriptSegment:
    """One timed unit of transcript text.

    ``offset`` and ``duration`` are expressed in seconds.
    """

    text: str
    duration: float
    offset: float
    lang: Optional[str] = None


@dataclass(frozen=True)
class CaptionTrack:
    language_code: str
    base_url: str
    is_generated: bool = False


class TranscriptError(Exception):
    """Base class for every failure to retrieve a transcript."""

    def __init__(self, message: str, video_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.video_id = video_id


class InvalidVideoIdError(TranscriptError):
    def __init__(self, video_id: str) -> None:
        super().__init__(f"Invalid YouTube video ID or URL: {video_id!r}", video_id)


class TooManyRequestsError(TranscriptError):
    def __init__(self, video_id: str) -> None:
        super().__init__(
            "YouTube is receiving too many requests from this IP and now "
            "requires solving a captcha to continue",
            video_id,
        )


class VideoUnavailableError(TranscriptError):
    def __init__(self, video_id: str, reason: Optional[str] = None) -> None:
        message = f"The video is no longer available ({video_id})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, video_id)


class TranscriptsDisabledError(TranscriptError):
    def __init__(self, video_id: str) -> None:
        super().__init__(f"Transcript is disabled on this video ({video_id})", video_id)


class TranscriptNotAvailableError(TranscriptError):
    def __init__(self, video_id: str) -> None:
        super().__init__(f"No transcripts are available for this video ({video_id})", video_id)


class LanguageNotAvailableError(TranscriptError):
    def __init__(self, video_id: str, lang: str, tracks: List[CaptionTrack]) -> None:
        labels = [f"{t.language_code} (auto-generated)" if t.is_generated else t.language_code for t in tracks]
        super().__init__(
            f"No transcripts are available in {lang} for this video ({video_id}). "
            f"Available languages: {', '.join(labels)}",
            video_id,
        )
        self.lang = lang
        self.available_languages = [t.language_code for t in tracks]


def extract_video_id(url_or_id: str) -> str:
    """Extract the YouTube video ID from a URL, or pass a bare ID through.

    Args:
        url_or_id: A YouTube watch, short-link, embed or shorts URL, or
            an ID on its own.

    Returns:
        The captured video ID.  Input that looks like a bare ID (no
        ``/``, ``:`` or ``.``) and URLs that match no known form are
        returned unchanged; validation happens when fetching.

    Examples::

        >>> extract_video_id("https://www.youtube.com/watch?v=abc123def45&t=10")
        'abc123def45'
        >>> extract_video_id("https://youtu.be/abc123def45")
        'abc123def45'
        >>> extract_video_id("abc123def45")
        'abc123def45'
    """
    if not _URL_CHARS.search(url_or_id):
        return url_or_id
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url_or_id)
        if match:
            return match.group(1)
    return url_or_id


def _headers() -> Dict[str, str]:
    return {
        "User-Agent": settings.USER_AGENT,
        "Accept-Language": settings.ACCEPT_LANGUAGE,
    }


def _get_innertube_api_key(video_id: str, http: Any) -> str:
    """Retrieve the Innertube API key embedded in the video watch page."""
    url = WATCH_URL.format(video_id=video_id)
    logger.debug("Fetching watch page %s", url)
    resp = http.get(url, headers=_headers(), timeout=settings.REQUEST_TIMEOUT)
    if resp.status_code == 429:
        raise TooManyRequestsError(video_id)
    if resp.status_code >= 400:
        raise TranscriptError(
            f"YouTube returned HTTP {resp.status_code} for video {video_id}", video_id
        )
    page = resp.text
    if 'class="g-recaptcha"' in page:
        raise TooManyRequestsError(video_id)
    match = _API_KEY_RE.search(page)
    if not match:
        raise VideoUnavailableError(video_id)
    return match.group(1)


def _get_player_response(video_id: str, api_key: str, http: Any) -> Dict[str, Any]:
    url = INNERTUBE_PLAYER_URL.format(api_key=api_key)
    body = {"context": INNERTUBE_CONTEXT, "videoId": video_id}
    logger.debug("Querying Innertube player for %s", video_id)
    resp = http.post(url, json=body, headers=_headers(), timeout=settings.REQUEST_TIMEOUT)
    if resp.status_code == 429:
        raise TooManyRequestsError(video_id)
    if resp.status_code >= 400:
        raise TranscriptError(
            f"Innertube player request failed with HTTP {resp.status_code} for video {video_id}",
            video_id,
        )
    try:
        data = resp.json()
    except ValueError as e:
        raise TranscriptError(f"Unreadable player response for video {video_id}", video_id) from e
    if not isinstance(data, dict):
        raise TranscriptError(f"Unexpected player response for video {video_id}", video_id)
    return data


def _section(data: Dict[str, Any], key: str, video_id: str) -> Dict[str, Any]:
    """Return ``data[key]`` as a mapping; absent keys give an empty one."""
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise TranscriptError(f"Unexpected player response for video {video_id}", video_id)
    return value


def list_caption_tracks(video_id: str, session: Optional[requests.Session] = None) -> List[CaptionTrack]:
    """Return the caption tracks YouTube advertises for a video.

    Args:
        video_id: The 11-character YouTube video ID.
        session: Optional ``requests.Session`` used for all HTTP calls.

    Raises:
        InvalidVideoIdError: ``video_id`` is not a well-formed ID.
        TooManyRequestsError: YouTube is rate limiting this client.
        VideoUnavailableError: The video cannot be played.
        TranscriptsDisabledError: The video has no captions at all.
        TranscriptNotAvailableError: The captions list is empty.
        TranscriptError: The player response has an unexpected shape.
    """
    if not _VALID_VIDEO_ID.match(video_id):
        raise InvalidVideoIdError(video_id)
    http = session or requests
    api_key = _get_innertube_api_key(video_id, http)
    data = _get_player_response(video_id, api_key, http)

    status = _section(data, "playabilityStatus", video_id)
    if status.get("status", "OK") != "OK":
        raise VideoUnavailableError(video_id, status.get("reason"))

    captions = _section(data, "captions", video_id)
    if not captions:
        raise TranscriptsDisabledError(video_id)
    raw_tracks = _section(captions, "playerCaptionsTracklistRenderer", video_id).get("captionTracks") or []
    if not isinstance(raw_tracks, list):
        raise TranscriptError(f"Unexpected player response for video {video_id}", video_id)
    tracks: List[CaptionTrack] = []
    for t in raw_tracks:
        if not isinstance(t, dict) or not t.get("baseUrl"):
            continue
        tracks.append(
            CaptionTrack(
                language_code=str(t.get("languageCode", "")),
                base_url=str(t["baseUrl"]),
                is_generated=t.get("kind") == "asr",
            )
        )
    if not tracks:
        raise TranscriptNotAvailableError(video_id)
    return tracks


def _xml_caption_url(base_url: str) -> str:
    """Drop the ``fmt`` query parameter so the timedtext endpoint answers with XML."""
    parts = urlsplit(base_url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "fmt"]
    return urlunsplit(parts._replace(query=urlencode(query)))


def _parse_timedtext(xml_text: str, lang: str, video_id: str) -> List[TranscriptSegment]:
    """Parse timedtext XML into segments, in document order.

    Two layouts exist: the classic ``<text start dur>`` form in
    seconds and the ``format="3"`` form with ``<p t d>`` in
    milliseconds.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise TranscriptError(f"Malformed transcript data for video {video_id}", video_id) from e

    segments: List[TranscriptSegment] = []
    for item in root.iter():
        try:
            if item.tag == "text":
                offset = float(item.get("start", 0))
                duration = float(item.get("dur", 0))
            elif item.tag == "p":
                offset = float(item.get("t", 0)) / 1000
                duration = float(item.get("d", 0)) / 1000
            else:
                continue
        except ValueError as e:
            raise TranscriptError(f"Malformed caption timing for video {video_id}", video_id) from e
        text = html.unescape("".join(item.itertext()))
        segments.append(TranscriptSegment(text=text, duration=duration, offset=offset, lang=lang))
    return segments


def fetch_transcript(
    video_id: str,
    lang: str = "en",
    session: Optional[requests.Session] = None,
) -> List[TranscriptSegment]:
    """Download the transcript of a YouTube video.

    Args:
        video_id: The 11-character YouTube video ID.
        lang: Language code of the caption track to download.
        session: Optional ``requests.Session`` used for all HTTP calls.

    Returns:
        The caption segments in chronological order.

    Raises:
        TranscriptError: Or one of its subclasses, when the transcript
            cannot be retrieved.  ``requests`` exceptions for network
            failures are propagated unchanged.
    """
    http = session or requests
    tracks = list_caption_tracks(video_id, session=session)
    track = next((t for t in tracks if t.language_code == lang), None)
    if track is None:
        raise LanguageNotAvailableError(video_id, lang, tracks)

    base_url = _xml_caption_url(track.base_url)
    logger.debug("Downloading %s captions for %s", track.language_code, video_id)
    resp = http.get(base_url, headers=_headers(), timeout=settings.REQUEST_TIMEOUT)
    if resp.status_code == 429:
        raise TooManyRequestsError(video_id)
    if resp.status_code >= 400:
        raise TranscriptError(
            f"Caption download failed with HTTP {resp.status_code} for video {video_id}", video_id
        )
    segments = _parse_timedtext(resp.text, track.language_code, video_id)
    logger.debug("Fetched %d segments for %s", len(segments), video_id)
    return segments
