"""
Turns search intent into the canonical ``CatalogRequest`` sent to ``GET /tracks``.
"""

from collections.abc import Iterable

from vibing_cli.models.query import (
    DEFAULT_PAGE_SIZE,
    CatalogRequest,
    SearchQuery,
    SortKey,
)


def build_request(
    pattern: str | None = None,
    order_by: str | SortKey | None = None,
    vibes: Iterable[str] | None = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    author: str | None = None,
) -> CatalogRequest:
    """
    Builds a request descriptor.

    Empty or missing ``pattern``, ``author`` and ``order_by`` are left out
    entirely rather than sent as empty strings. Each selected vibe becomes its
    own ``vibes`` parameter, in selection order. ``page`` and ``page_size`` are
    always present and are not range-checked here; the service answers
    out-of-range values with an error status.
    """
    filters: list[tuple[str, str]] = []

    if pattern and pattern.strip():
        filters.append(("pattern", pattern.strip()))
    if author and author.strip():
        filters.append(("author", author.strip()))
    if order_by:
        if isinstance(order_by, SortKey):
            order_by = order_by.value
        filters.append(("order_by", order_by))
    for vibe in vibes or ():
        if vibe:
            filters.append(("vibes", vibe))

    return CatalogRequest(filters=tuple(filters), page=page, page_size=page_size)


def build_from_query(
    query: SearchQuery, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
) -> CatalogRequest:
    return build_request(
        pattern=query.pattern,
        order_by=query.order_by,
        vibes=query.vibes,
        page=page,
        page_size=page_size,
        author=query.author,
    )
