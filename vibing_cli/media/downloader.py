"""
Handles the low-level downloading of track assets over HTTP with retries.
"""

import asyncio
import logging
import os
from pathlib import Path

import aiofiles
import aiohttp
from pathvalidate import sanitize_filename

from vibing_cli.exceptions import TransientNetworkError

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool() -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession for downloads.

    Downloads can be large, so unlike catalog reads there is no total timeout,
    only connect and per-read limits.
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=4,
            ttl_dns_cache=600,
            keepalive_timeout=30,
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
        _connection_pool = aiohttp.ClientSession(connector=connector, timeout=timeout)
        log.debug("Created download connection pool.")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared downloader connection pool closed.")


def filename_for(track_id: int, suggested: str | None) -> str:
    """
    Picks a safe local file name: the server's suggestion when it survives
    sanitizing, ``track_<id>`` otherwise.
    """
    if suggested:
        name = sanitize_filename(Path(suggested).name)
        if name:
            return name
    return f"track_{track_id}"


class Downloader:
    """A low-level file downloader with retry logic."""

    CHUNK_SIZE = 131072  # 128 KB

    def __init__(self, max_attempts: int = 3, base_delay: float = 1.5):
        self.max_attempts = max_attempts
        self.base_delay = base_delay

    async def _write_body(
        self, response: aiohttp.ClientResponse, temp_path: Path
    ) -> int:
        bytes_written = 0
        async with aiofiles.open(temp_path, "wb") as f:
            async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                await f.write(chunk)
                bytes_written += len(chunk)
        return bytes_written

    async def download_track(
        self, url: str, track_id: int, destination_dir: Path
    ) -> tuple[Path, int]:
        """
        Downloads a track asset into ``destination_dir``.

        The body goes to a temporary file that replaces the destination only once
        it is complete, so a failed download leaves any existing file as it was.

        Returns:
            The written path and the number of bytes written.

        Raises:
            TransientNetworkError: Every attempt failed.
        """
        destination_dir.mkdir(parents=True, exist_ok=True)
        last_exception = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                session = await get_connection_pool()
                async with session.get(url, allow_redirects=True) as response:
                    response.raise_for_status()

                    disposition = response.content_disposition
                    destination = destination_dir / filename_for(
                        track_id, disposition.filename if disposition else None
                    )

                    temp_path = destination.with_suffix(f".{track_id}.tmp")
                    try:
                        bytes_written = await self._write_body(response, temp_path)
                        temp_path.replace(destination)
                    finally:
                        if temp_path.exists():
                            try:
                                os.remove(temp_path)
                            except OSError:
                                pass
                return destination, bytes_written
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                log.debug(
                    f"Download attempt {attempt}/{self.max_attempts} for track "
                    f"{track_id} failed: {e}. Retrying..."
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.base_delay * (2 ** (attempt - 1)))

        status = getattr(last_exception, "status", None)
        raise TransientNetworkError(
            f"Download of track {track_id} failed after {self.max_attempts} "
            f"attempts: {last_exception}",
            status=status,
        ) from last_exception
