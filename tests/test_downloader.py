"""Tests for vibing_cli/media/downloader.py against a local aiohttp server."""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from vibing_cli.exceptions import TransientNetworkError
from vibing_cli.media.downloader import Downloader, close_connection_pool, filename_for

AUDIO = b"ID3" + bytes(range(256)) * 1024


async def drop_mid_body(request):
    response = web.StreamResponse(
        headers={
            "Content-Length": "1000000",
            "Content-Disposition": 'attachment; filename="Rainy Night.mp3"',
        }
    )
    await response.prepare(request)
    await response.write(AUDIO[:5000])
    request.transport.close()
    return response


def serve():
    async def download(request):
        track_id = request.query["track_id"]
        if track_id == "404":
            return web.Response(status=404)
        if track_id == "500":
            return await drop_mid_body(request)
        headers = {}
        if track_id == "1":
            headers["Content-Disposition"] = 'attachment; filename="Rainy Night.mp3"'
        return web.Response(body=AUDIO, headers=headers, content_type="audio/mpeg")

    app = web.Application()
    app.router.add_get("/tracks/download", download)
    return TestServer(app)


def run_download(track_id, destination, max_attempts=3):
    async def run():
        try:
            async with serve() as server:
                url = str(server.make_url(f"/tracks/download?track_id={track_id}"))
                downloader = Downloader(max_attempts=max_attempts, base_delay=0)
                return await downloader.download_track(url, track_id, destination)
        finally:
            await close_connection_pool()

    return asyncio.run(run())


class TestDownloadTrack:
    def test_uses_server_filename(self, tmp_path):
        path, size = run_download(1, tmp_path)
        assert path == tmp_path / "Rainy Night.mp3"
        assert size == len(AUDIO)
        assert path.read_bytes() == AUDIO

    def test_falls_back_to_track_id(self, tmp_path):
        path, _ = run_download(2, tmp_path / "nested")
        assert path == tmp_path / "nested" / "track_2"

    def test_gives_up_after_retries(self, tmp_path):
        with pytest.raises(TransientNetworkError) as excinfo:
            run_download(404, tmp_path, max_attempts=2)
        assert excinfo.value.status == 404

    def test_interrupted_download_keeps_existing_file(self, tmp_path):
        existing = tmp_path / "Rainy Night.mp3"
        existing.write_bytes(b"good copy")
        with pytest.raises(TransientNetworkError):
            run_download(500, tmp_path, max_attempts=2)
        assert existing.read_bytes() == b"good copy"
        assert list(tmp_path.iterdir()) == [existing]

    def test_replaces_existing_file_when_complete(self, tmp_path):
        (tmp_path / "Rainy Night.mp3").write_bytes(b"old")
        path, _ = run_download(1, tmp_path)
        assert path.read_bytes() == AUDIO
        assert list(tmp_path.iterdir()) == [path]


class TestFilenameFor:
    def test_strips_directories(self):
        assert filename_for(1, "../../etc/passwd") == "passwd"

    def test_sanitizes_reserved_characters(self):
        assert filename_for(1, 'a<b>:c?.mp3') == "abc.mp3"

    def test_empty_suggestion(self):
        assert filename_for(9, None) == "track_9"
        assert filename_for(9, "") == "track_9"
