"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the core
data structures used throughout the application: catalog tracks, search
requests, playback state and configuration.
"""

from .config import ClientConfig
from .playback import IDLE, Idle, PlaybackState, Playing
from .query import (
    DEFAULT_PAGE_SIZE,
    VIBE_GROUPS,
    CatalogRequest,
    ResultSet,
    SearchQuery,
    SortKey,
)
from .track import Track, Vibe

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "IDLE",
    "VIBE_GROUPS",
    "CatalogRequest",
    "ClientConfig",
    "Idle",
    "PlaybackState",
    "Playing",
    "ResultSet",
    "SearchQuery",
    "SortKey",
    "Track",
    "Vibe",
]
