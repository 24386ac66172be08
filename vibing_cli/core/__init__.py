"""
Core session logic.

The `CatalogBrowser` is the session-wide context; it delegates playback
exclusivity to the `PlaybackCoordinator` and the shared level to the
`VolumeController`.
"""

from .browser import CatalogBrowser
from .playback import AudioBackend, AudioSession, NullAudioBackend, PlaybackCoordinator
from .volume import VolumeController, clamp_volume

__all__ = [
    "AudioBackend",
    "AudioSession",
    "CatalogBrowser",
    "NullAudioBackend",
    "PlaybackCoordinator",
    "VolumeController",
    "clamp_volume",
]
