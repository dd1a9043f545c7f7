"""Downloads concorrentes contra um servidor local lento.

Com o limite de concorrência acima do tamanho do pool de conexões, os
itens que esperam conexão livre não podem estourar o timeout de 1s do
download.
"""

from __future__ import annotations

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from app.bootstrap.clients import DEFAULT_MAX_CONNECTIONS, create_download_http_client
from app.infra.roblox.asset_downloader import AssetDownloader
from app.services.migration_scheduler import MigrationScheduler
from config.settings import MigrationSettings, RobloxSettings
from tests.fakes.fake_roblox_services import FakeUploader, animation_record

RESPONSE_DELAY_SECONDS = 0.6
SETTINGS = MigrationSettings(upload_retry_delay_seconds=0.0)


class _SlowHandler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:  # noqa: N802
        time.sleep(RESPONSE_DELAY_SECONDS)
        body = self.path.encode()
        self.send_response(200)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        return


class _SlowServer(ThreadingHTTPServer):
    daemon_threads = True
    request_queue_size = 512


@pytest.fixture
def slow_server(monkeypatch):
    """Servidor HTTP local que responde cada GET após 0,6s."""
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
    server = _SlowServer(("127.0.0.1", 0), _SlowHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def _records(base_url: str, count: int):
    return [animation_record(i, location=f"{base_url}/asset/{i}") for i in range(1, count + 1)]


class TestDownloadPool:
    @pytest.mark.asyncio
    async def test_limit_above_default_pool_has_no_false_rate_limit(self, slow_server) -> None:
        """150 itens em voo com o pool dimensionado como no bootstrap."""
        limit = DEFAULT_MAX_CONNECTIONS + 50
        client = create_download_http_client(
            RobloxSettings(), max_connections=max(limit, DEFAULT_MAX_CONNECTIONS)
        )
        async with client:
            downloader = AssetDownloader(client, max_attempts=3, timeout_seconds=1.0)
            scheduler = MigrationScheduler(downloader, FakeUploader(), settings=SETTINGS)

            result = await scheduler.migrate(_records(slow_server, limit), concurrency_limit=limit)

        assert result.errors == []
        assert len(result.mapping) == limit

    @pytest.mark.asyncio
    async def test_waiting_for_pool_does_not_count_as_timeout(self, slow_server) -> None:
        """Pool de 2 conexões e 6 itens: a fila espera ~1,8s sem RateLimitedError."""
        client = create_download_http_client(RobloxSettings(), max_connections=2)
        async with client:
            downloader = AssetDownloader(client, max_attempts=1, timeout_seconds=1.0)
            scheduler = MigrationScheduler(downloader, FakeUploader(), settings=SETTINGS)

            result = await scheduler.migrate(_records(slow_server, 6), concurrency_limit=6)

        assert result.errors == []
        assert sorted(result.mapping) == [str(i) for i in range(1, 7)]
