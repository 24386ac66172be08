"""
Single source of truth for what is playing.

The coordinator enforces that at most one audio session is alive at any time
and keys everything by track id, so replacing the displayed result set never
disturbs playback.
"""

import logging
from collections.abc import Callable

from vibing_cli.models.playback import IDLE, PlaybackState, Playing

from .volume import VolumeController

log = logging.getLogger(__name__)


class AudioSession:
    """One track's stream in the audio engine."""

    def start(self) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError

    def set_volume(self, level: int) -> None:
        """``level`` is in [0, 100]."""
        raise NotImplementedError


class AudioBackend:
    """Creates audio sessions. Decoding and transport live behind this seam."""

    def open(self, track_id: int, source_url: str) -> AudioSession:
        raise NotImplementedError


class NullAudioSession(AudioSession):
    def __init__(self, track_id: int, source_url: str):
        self.track_id = track_id
        self.source_url = source_url

    def start(self) -> None:
        log.debug(f"(headless) start {self.source_url}")

    def stop(self) -> None:
        log.debug(f"(headless) stop track {self.track_id}")

    def set_volume(self, level: int) -> None:
        log.debug(f"(headless) volume {level} on track {self.track_id}")


class NullAudioBackend(AudioBackend):
    """Headless backend: tracks state transitions without producing sound."""

    def open(self, track_id: int, source_url: str) -> AudioSession:
        return NullAudioSession(track_id, source_url)


class PlaybackCoordinator:
    """
    Two-state machine: ``Idle`` or ``Playing(track_id, elapsed_seconds)``.

    ``play`` on the playing track pauses it; ``play`` on any other track stops
    the current session before the new one is opened. Pausing discards the
    elapsed time, so playing the same track again restarts at zero.
    """

    def __init__(
        self,
        backend: AudioBackend,
        volume: VolumeController,
        stream_url: Callable[[int], str] | None = None,
        download_listener: Callable[[int], None] | None = None,
    ):
        """
        Args:
            backend: Opens audio sessions for tracks.
            volume: The process-wide volume; its level is applied to every new
                session and pushed to the active one on change.
            stream_url: Maps a track id to its stream URL.
            download_listener: Told about every initiated download.
        """
        self._backend = backend
        self._volume = volume
        self._stream_url = stream_url or (lambda track_id: str(track_id))
        self._download_listener = download_listener

        self._state: PlaybackState = IDLE
        self._session: AudioSession | None = None

        volume.subscribe(self._apply_volume)

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_track_id(self) -> int | None:
        if isinstance(self._state, Playing):
            return self._state.track_id
        return None

    def is_playing(self, track_id: int) -> bool:
        return self.current_track_id == track_id

    def elapsed(self, track_id: int) -> float:
        """Seconds into ``track_id``; zero for any track that is not playing."""
        if isinstance(self._state, Playing) and self._state.track_id == track_id:
            return self._state.elapsed_seconds
        return 0.0

    def play(self, track_id: int) -> PlaybackState:
        """Starts ``track_id``, or pauses it if it is the one already playing."""
        if self.is_playing(track_id):
            return self.pause()

        self._stop_session()

        session = self._backend.open(track_id, self._stream_url(track_id))
        session.set_volume(self._volume.level)
        session.start()

        self._session = session
        self._state = Playing(track_id, 0.0)
        log.debug(f"Playing track {track_id} at volume {self._volume.level}.")
        return self._state

    def pause(self) -> PlaybackState:
        """Stops whatever is playing. A no-op when idle."""
        if isinstance(self._state, Playing):
            log.debug(
                f"Paused track {self._state.track_id} at "
                f"{self._state.elapsed_seconds:.1f}s (position discarded)."
            )
        self._stop_session()
        return self._state

    def stop(self, track_id: int) -> PlaybackState:
        """Pauses only if ``track_id`` is the playing track."""
        if self.is_playing(track_id):
            return self.pause()
        return self._state

    def update_position(self, track_id: int, elapsed_seconds: float) -> None:
        """
        Records the position reported by the audio engine.

        Reports for a track that is not playing, or that would move the
        position backwards, are ignored.
        """
        if not isinstance(self._state, Playing) or self._state.track_id != track_id:
            return
        if elapsed_seconds < self._state.elapsed_seconds:
            return
        self._state = Playing(track_id, float(elapsed_seconds))

    def request_download(self, track_id: int) -> None:
        """Signals that a download of ``track_id`` started. Playback is unaffected."""
        log.debug(f"Download requested for track {track_id}.")
        if self._download_listener:
            self._download_listener(track_id)

    def _stop_session(self) -> None:
        # State goes idle even if the engine fails to stop cleanly.
        session, self._session = self._session, None
        self._state = IDLE
        if session is not None:
            session.stop()

    def _apply_volume(self, level: int) -> None:
        if self._session is not None:
            self._session.set_volume(level)
