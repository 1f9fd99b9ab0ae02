import json
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so `import server` works during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from utils.video_transcript import TranscriptSegment  # noqa: E402


WATCH_PAGE = '<html><script>ytcfg.set({"INNERTUBE_API_KEY":"test-key","X":1});</script></html>'

TIMEDTEXT_XML = (
    '<?xml version="1.0" encoding="utf-8" ?><transcript>'
    '<text start="0.0" dur="1.5">Hello &amp;amp; welcome</text>'
    '<text start="65.2" dur="2.0">It&amp;#39;s a test</text>'
    "</transcript>"
)


class FakeResponse:
    def __init__(self, text="", status_code=200, payload=None):
        self.text = text
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeSession:
    """Stands in for ``requests.Session``, answering by URL prefix."""

    def __init__(self, watch=None, player=None, captions=None):
        self.watch = watch or FakeResponse(WATCH_PAGE)
        self.player = player
        self.captions = captions or FakeResponse(TIMEDTEXT_XML)
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(("GET", url))
        if url.startswith("https://www.youtube.com/watch"):
            return self.watch
        return self.captions

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs.get("json")))
        return self.player


def player_payload(tracks=None, status="OK", captions=True):
    data = {"playabilityStatus": {"status": status, "reason": "Video unavailable"}}
    if captions:
        data["captions"] = {
            "playerCaptionsTracklistRenderer": {"captionTracks": tracks if tracks is not None else []}
        }
    return data


def caption_track(code, kind=None):
    track = {
        "baseUrl": f"https://www.youtube.com/api/timedtext?v=abc&lang={code}&fmt=srv3",
        "languageCode": code,
        "name": {"simpleText": code.upper()},
    }
    if kind:
        track["kind"] = kind
    return track


@pytest.fixture
def segments():
    return [
        TranscriptSegment(text=" Hi ", offset=0, duration=1),
        TranscriptSegment(text="there", offset=65, duration=2),
    ]
