"""
Playback state values. There is exactly one of these per process, owned by
``core.playback.PlaybackCoordinator``.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Idle:
    """Nothing is playing."""


@dataclass(frozen=True)
class Playing:
    """``track_id`` is playing, ``elapsed_seconds`` into the track."""

    track_id: int
    elapsed_seconds: float = 0.0


PlaybackState = Idle | Playing

IDLE = Idle()
