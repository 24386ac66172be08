"""
Search intent, its canonical request form, and the visible result set.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from urllib.parse import urlencode

from .track import Track

DEFAULT_PAGE_SIZE = 10


class SortKey(str, Enum):
    """Sort keys understood by the catalog service."""

    RATING = "rating"
    MOST_DOWNLOAD = "most download"


# Facet groups offered by the web front-end filter dialog.
VIBE_GROUPS: dict[str, list[str]] = {
    "seasonal": ["spring", "summer", "autumn", "winter"],
    "daytime": ["dawn", "morning", "noon", "afternoon", "dusk", "evening", "night"],
    "weather": ["sunny", "rainy", "cloudy", "stormy", "hotty", "coldy"],
    "mood": ["joy", "sad"],
    "event": ["new year", "independent day", "wedding"],
    "duration": ["< 2 mins", "2-4 mins", "> 4 mins"],
}


def known_vibes() -> set[str]:
    """Returns every tag name from the facet table."""
    return {name for names in VIBE_GROUPS.values() for name in names}


@dataclass(frozen=True)
class SearchQuery:
    """What the user asked for. Every field is optional."""

    pattern: str | None = None
    order_by: str | None = None
    vibes: tuple[str, ...] = ()
    author: str | None = None


@dataclass(frozen=True)
class CatalogRequest:
    """
    A search query plus pagination, in the exact parameter order it is sent.

    ``filters`` never contains empty values; see ``api.query_builder``.
    """

    filters: tuple[tuple[str, str], ...]
    page: int
    page_size: int

    @property
    def query_params(self) -> list[tuple[str, str]]:
        return [
            *self.filters,
            ("page", str(self.page)),
            ("size", str(self.page_size)),
        ]

    def to_query_string(self) -> str:
        return urlencode(self.query_params)

    def with_page(self, page: int) -> "CatalogRequest":
        """Same filters, different page."""
        return replace(self, page=page)


@dataclass
class ResultSet:
    """The result set currently on display."""

    tracks: list[Track] = field(default_factory=list)
    request: CatalogRequest | None = None
    error: Exception | None = None

    @property
    def count(self) -> int:
        return len(self.tracks)

    def find(self, track_id: int) -> Track | None:
        return next((t for t in self.tracks if t.id == track_id), None)
