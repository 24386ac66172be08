"""Shared fakes for the test suite."""

from vibing_cli.api.client import CatalogClient
from vibing_cli.core.playback import AudioBackend, AudioSession


def track_payload(track_id, **overrides):
    """A track as the catalog service serializes it."""
    data = {
        "id": track_id,
        "path": f"/srv/music/{track_id}.mp3",
        "title": f"Track {track_id}",
        "author": "Lofi Girl",
        "genre": "lofi",
        "duration": 185,
        "vibes": [{"group_name": "weather", "name": "rainy"}],
        "average_rating": 4.5,
        "download_count": 3,
    }
    data.update(overrides)
    return data


class RecordingSession(AudioSession):
    def __init__(self, track_id, events):
        self.track_id = track_id
        self.events = events
        self.active = False

    def start(self):
        self.active = True
        self.events.append(("start", self.track_id))

    def stop(self):
        self.active = False
        self.events.append(("stop", self.track_id))

    def set_volume(self, level):
        self.events.append(("volume", self.track_id, level))


class RecordingBackend(AudioBackend):
    """Logs every session call, in order, to ``events``."""

    def __init__(self):
        self.events = []
        self.sessions = []
        self.urls = []

    def open(self, track_id, source_url):
        self.urls.append(source_url)
        session = RecordingSession(track_id, self.events)
        self.sessions.append(session)
        return session

    def active_sessions(self):
        return [s for s in self.sessions if s.active]


class GatedClient(CatalogClient):
    """Replaces the network read with replies released by hand, per pattern."""

    def __init__(self, page_size=10):
        super().__init__("http://catalog.test", page_size=page_size)
        self.gates = {}
        self.replies = {}
        self.requests = []

    async def _get_json(self, path, params):
        self.requests.append((path, params))
        pattern = dict(params).get("pattern", "")
        if pattern in self.gates:
            await self.gates[pattern].wait()
        reply = self.replies[pattern]
        if isinstance(reply, Exception):
            raise reply
        return reply
