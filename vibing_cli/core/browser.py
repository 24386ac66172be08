"""
The shared browsing context handed to every piece of presentation code.
"""

from pathlib import Path

from vibing_cli.api.client import CatalogClient
from vibing_cli.api.query_builder import build_from_query
from vibing_cli.exceptions import CatalogError
from vibing_cli.media.downloader import Downloader
from vibing_cli.models.playback import PlaybackState
from vibing_cli.models.query import CatalogRequest, ResultSet, SearchQuery
from vibing_cli.models.track import Track
from vibing_cli.utils.structured_logger import (
    CatalogLogger,
    PlaybackLogger,
    create_structured_logger,
)

from .playback import AudioBackend, NullAudioBackend, PlaybackCoordinator
from .volume import VolumeController


class CatalogBrowser:
    """
    Composes catalog access, playback and volume for one session.

    Track-rendering code holds a reference to this object and only ever goes
    through its operations. Playback and volume are keyed by track id, so a
    new search replacing the visible list never stops or restarts a track.
    """

    def __init__(
        self,
        client: CatalogClient,
        backend: AudioBackend | None = None,
        volume: VolumeController | None = None,
        downloader: Downloader | None = None,
        catalog_logger: CatalogLogger | None = None,
        playback_logger: PlaybackLogger | None = None,
    ):
        if catalog_logger is None or playback_logger is None:
            _, default_catalog, default_playback = create_structured_logger()
            catalog_logger = catalog_logger or default_catalog
            playback_logger = playback_logger or default_playback

        self.client = client
        self.volume = volume or VolumeController()
        self.downloader = downloader or Downloader()
        self._catalog_log = catalog_logger
        self._playback_log = playback_logger
        self.playback = PlaybackCoordinator(
            backend or NullAudioBackend(),
            self.volume,
            stream_url=client.stream_url,
            download_listener=self._playback_log.download_requested,
        )

    @property
    def results(self) -> ResultSet:
        return self.client.results

    @property
    def state(self) -> PlaybackState:
        return self.playback.state

    async def _run(self, request: CatalogRequest) -> list[Track] | None:
        query = request.to_query_string()
        try:
            tracks = await self.client.search(request)
        except CatalogError as e:
            self._catalog_log.search_failed(query, request.page, e)
            raise
        if tracks is None:
            self._catalog_log.search_discarded(query, request.page)
        else:
            self._catalog_log.search_applied(query, request.page, len(tracks))
        return tracks

    async def search(self, query: SearchQuery, page: int = 1) -> list[Track] | None:
        """Runs a search; returns None if a newer search overtook it."""
        request = build_from_query(query, page=page, page_size=self.client.page_size)
        return await self._run(request)

    async def initial(self) -> list[Track] | None:
        return await self.search(SearchQuery())

    async def next_page(self) -> list[Track] | None:
        """Fetches the page after the one on display, keeping the same filters."""
        return await self._goto_page(1)

    async def previous_page(self) -> list[Track] | None:
        """Fetches the page before the one on display; stays put on page 1."""
        return await self._goto_page(-1)

    async def _goto_page(self, offset: int) -> list[Track] | None:
        current = self.results.request
        if current is None:
            return await self.initial()
        page = max(1, current.page + offset)
        if page == current.page:
            return self.results.tracks
        return await self._run(current.with_page(page))

    def play_pause(self, track_id: int) -> PlaybackState:
        previous = self.playback.current_track_id
        try:
            state = self.playback.play(track_id)
        finally:
            # The old session is gone even when the new one fails to open.
            if previous is not None and not self.playback.is_playing(previous):
                self._playback_log.playback_stopped(previous)
        if self.playback.is_playing(track_id):
            self._playback_log.playback_started(track_id, self.volume.level)
        return state

    def set_volume(self, level: float) -> int:
        applied = self.volume.set_volume(level)
        self._playback_log.volume_changed(level, applied)
        return applied

    async def download(self, track_id: int, destination_dir: Path) -> Path:
        """Signals the download and fetches the asset into ``destination_dir``."""
        self.playback.request_download(track_id)
        path, size = await self.downloader.download_track(
            self.client.download_url(track_id), track_id, destination_dir
        )
        self._playback_log.download_completed(track_id, path, size)
        return path

    async def close(self) -> None:
        self.playback.pause()
        await self.client.close()
        self._catalog_log.logger.close()
        self._playback_log.logger.close()
