"""Tests for vibing_cli/core/browser.py: the components working together."""

import asyncio

import pytest

from helpers import GatedClient, RecordingBackend, track_payload
from vibing_cli.core.browser import CatalogBrowser
from vibing_cli.exceptions import TransientNetworkError
from vibing_cli.models.playback import IDLE, Playing
from vibing_cli.models.query import SearchQuery
from vibing_cli.utils.structured_logger import PlaybackLogger, create_structured_logger


@pytest.fixture
def client():
    client = GatedClient(page_size=2)
    client.replies[""] = [track_payload(1), track_payload(2)]
    client.replies["rain"] = [track_payload(7)]
    return client


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def browser(client, backend):
    return CatalogBrowser(client, backend=backend)


class TestSearching:
    def test_initial_load(self, browser):
        asyncio.run(browser.initial())
        assert [t.id for t in browser.results.tracks] == [1, 2]

    def test_search_uses_configured_page_size(self, browser, client):
        asyncio.run(browser.search(SearchQuery(pattern="rain", vibes=("rainy",))))
        _, params = client.requests[-1]
        assert params == [
            ("pattern", "rain"),
            ("vibes", "rainy"),
            ("page", "1"),
            ("size", "2"),
        ]

    def test_failure_propagates_and_keeps_results(self, browser, client):
        asyncio.run(browser.initial())
        client.replies["down"] = TransientNetworkError("refused")
        with pytest.raises(TransientNetworkError):
            asyncio.run(browser.search(SearchQuery(pattern="down")))
        assert browser.results.count == 2

    def test_newer_search_wins(self, browser, client):
        async def run():
            client.gates = {"": asyncio.Event(), "rain": asyncio.Event()}
            older = asyncio.create_task(browser.initial())
            await asyncio.sleep(0)
            newer = asyncio.create_task(browser.search(SearchQuery(pattern="rain")))
            await asyncio.sleep(0)
            client.gates["rain"].set()
            await newer
            client.gates[""].set()
            return await older

        assert asyncio.run(run()) is None
        assert [t.id for t in browser.results.tracks] == [7]


class TestPaging:
    def test_next_page_keeps_filters(self, browser, client):
        asyncio.run(browser.search(SearchQuery(pattern="rain")))
        asyncio.run(browser.next_page())
        _, params = client.requests[-1]
        assert ("pattern", "rain") in params
        assert ("page", "2") in params

    def test_previous_page_stops_at_first(self, browser, client):
        asyncio.run(browser.initial())
        asyncio.run(browser.previous_page())
        assert len(client.requests) == 1

    def test_next_page_without_history_loads_initial(self, browser, client):
        asyncio.run(browser.next_page())
        assert client.requests[-1][1] == [("page", "1"), ("size", "2")]


class TestPlaybackAcrossSearches:
    def test_new_results_do_not_stop_playing_track(self, browser, backend):
        asyncio.run(browser.initial())
        browser.play_pause(2)
        asyncio.run(browser.search(SearchQuery(pattern="rain")))
        assert browser.results.find(2) is None
        assert browser.state == Playing(2, 0.0)
        assert [s.track_id for s in backend.active_sessions()] == [2]

    def test_play_pause_toggle(self, browser):
        browser.play_pause(1)
        assert browser.play_pause(1) == IDLE

    def test_switching_tracks(self, browser, backend):
        browser.play_pause(3)
        browser.playback.update_position(3, 12)
        assert browser.play_pause(5) == Playing(5, 0.0)
        assert backend.events.index(("stop", 3)) < backend.events.index(("start", 5))

    def test_volume_follows_active_track(self, browser, backend):
        browser.play_pause(1)
        assert browser.set_volume(150) == 100
        assert backend.events[-1] == ("volume", 1, 100)

    def test_stream_url_comes_from_client(self, browser, backend):
        browser.play_pause(4)
        assert backend.urls == ["http://catalog.test/tracks/stream?track_id=4"]

    def test_close_stops_playback(self, browser, backend):
        browser.play_pause(1)
        asyncio.run(browser.close())
        assert browser.state == IDLE
        assert backend.active_sessions() == []


class FailingBackend(RecordingBackend):
    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = fail_on

    def open(self, track_id, source_url):
        if track_id == self.fail_on:
            raise RuntimeError("no audio device")
        return super().open(track_id, source_url)


class RecordingPlaybackLogger(PlaybackLogger):
    def __init__(self):
        base, _, _ = create_structured_logger()
        super().__init__(base)
        self.stopped = []

    def playback_stopped(self, track_id):
        self.stopped.append(track_id)


class TestPlaybackEvents:
    def test_stop_event_when_switching(self, client, backend):
        events = RecordingPlaybackLogger()
        browser = CatalogBrowser(client, backend=backend, playback_logger=events)
        browser.play_pause(3)
        browser.play_pause(5)
        assert events.stopped == [3]

    def test_stop_event_when_next_track_fails_to_open(self, client):
        events = RecordingPlaybackLogger()
        backend = FailingBackend(fail_on=5)
        browser = CatalogBrowser(client, backend=backend, playback_logger=events)
        browser.play_pause(3)
        with pytest.raises(RuntimeError):
            browser.play_pause(5)
        assert browser.state == IDLE
        assert events.stopped == [3]
        assert backend.active_sessions() == []
