"""
Process-wide volume level.
"""

import logging
from collections.abc import Callable

from vibing_cli.models.config import DEFAULT_VOLUME

log = logging.getLogger(__name__)

MIN_VOLUME = 0
MAX_VOLUME = 100


def clamp_volume(level: float) -> int:
    """Rounds to an integer and clamps into [0, 100]."""
    return max(MIN_VOLUME, min(MAX_VOLUME, round(level)))


class VolumeController:
    """
    Owns the single volume value for the session.

    Out-of-range values are clamped, never rejected. Subscribers (normally the
    playback coordinator) are told about every change so they can push the
    level to the active audio session.
    """

    def __init__(self, initial: int = DEFAULT_VOLUME):
        self._level = clamp_volume(initial)
        self._subscribers: list[Callable[[int], None]] = []

    @property
    def level(self) -> int:
        return self._level

    def subscribe(self, callback: Callable[[int], None]) -> None:
        self._subscribers.append(callback)

    def set_volume(self, level: float) -> int:
        """Stores the clamped level, applies it, and returns what was applied."""
        applied = clamp_volume(level)
        if applied != level:
            log.debug(f"Volume {level} clamped to {applied}.")
        self._level = applied
        for callback in self._subscribers:
            callback(applied)
        return applied

    def step_up(self, amount: int = 5) -> int:
        return self.set_volume(self._level + amount)

    def step_down(self, amount: int = 5) -> int:
        return self.set_volume(self._level - amount)
