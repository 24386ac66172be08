"""
Async client for the vibing-storage catalog service, with stale-response protection.
"""

import asyncio
import logging
import time
from typing import Any

import aiohttp
from pydantic import ValidationError

from vibing_cli.exceptions import (
    CatalogError,
    MalformedResponseError,
    TransientNetworkError,
)
from vibing_cli.models.query import DEFAULT_PAGE_SIZE, CatalogRequest, ResultSet
from vibing_cli.models.track import Track

from .query_builder import build_request

log = logging.getLogger(__name__)


class CatalogClient:
    """
    Async client for the catalog's ``/tracks`` endpoints.

    Features:
    - One pooled aiohttp session per client
    - Classified errors (transient network vs. malformed payload)
    - Sequenced searches: only the newest search may update ``results``
    """

    def __init__(
        self,
        base_url: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout: float = 30.0,
    ):
        """
        Initializes the catalog client.

        Args:
            base_url: Root URL of the catalog service, e.g. ``http://localhost:3001``.
            page_size: Number of tracks per page sent as ``size``.
            timeout: Total timeout in seconds for a single catalog read.
        """
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.timeout = timeout

        self._session: aiohttp.ClientSession | None = None
        self._generation = 0
        self._results = ResultSet()

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def results(self) -> ResultSet:
        """The result set currently on display."""
        return self._results

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Accept": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self.timeout, connect=10),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def stream_url(self, track_id: int) -> str:
        return f"{self.base_url}/tracks/stream?track_id={track_id}"

    def download_url(self, track_id: int) -> str:
        return f"{self.base_url}/tracks/download?track_id={track_id}"

    async def _get_json(self, path: str, params: list[tuple[str, str]]) -> Any:
        """
        Performs the one network read behind every catalog call.

        Raises:
            TransientNetworkError: connection failure, timeout or non-2xx status.
            MalformedResponseError: the body is not JSON.
        """
        await self._initialize_session()
        url = self.base_url + path
        start_time = time.monotonic()

        try:
            async with self._session.get(url, params=params) as r:
                duration_ms = (time.monotonic() - start_time) * 1000
                log.debug(f"GET {path} -> {r.status} in {duration_ms:.0f}ms")

                if r.status >= 300:
                    raise TransientNetworkError(
                        f"Catalog returned HTTP {r.status} for {path}.",
                        status=r.status,
                    )
                try:
                    return await r.json(content_type=None)
                except ValueError as e:
                    raise MalformedResponseError(
                        f"Catalog response for {path} is not valid JSON: {e}"
                    ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransientNetworkError(
                f"Could not reach the catalog at {url}: {e or type(e).__name__}"
            ) from e

    async def fetch(self, request: CatalogRequest) -> list[Track]:
        """
        Fetches one page of tracks, in the order the server returned them.

        Does not touch ``results``; use ``search`` for that.
        """
        payload = await self._get_json("/tracks", request.query_params)

        if not isinstance(payload, list):
            raise MalformedResponseError(
                f"Expected a JSON array of tracks, got {type(payload).__name__}."
            )
        try:
            return [Track.model_validate(item) for item in payload]
        except ValidationError as e:
            raise MalformedResponseError(f"Catalog returned an invalid track: {e}") from e

    async def search(self, request: CatalogRequest) -> list[Track] | None:
        """
        Fetches a page and, if no newer search was issued meanwhile, puts it on display.

        Returns:
            The fetched tracks, or None when the response was superseded and
            discarded.

        Raises:
            CatalogError: The fetch failed and this was still the newest search.
            ``results`` keeps its previous tracks and records the error.
        """
        self._generation += 1
        generation = self._generation

        try:
            tracks = await self.fetch(request)
        except CatalogError as e:
            if generation != self._generation:
                log.debug(f"Discarding failure of superseded search #{generation}: {e}")
                return None
            self._results.error = e
            log.warning(f"[yellow]Search failed, keeping previous results: {e}[/yellow]")
            raise

        if generation != self._generation:
            log.debug(
                f"Discarding stale response for search #{generation} "
                f"(newest is #{self._generation})."
            )
            return None

        self._results = ResultSet(tracks=tracks, request=request)
        log.debug(f"Search #{generation} applied: {len(tracks)} tracks.")
        return tracks

    async def initial(self) -> list[Track] | None:
        """Loads the first page with no filters."""
        return await self.search(build_request(page=1, page_size=self.page_size))
