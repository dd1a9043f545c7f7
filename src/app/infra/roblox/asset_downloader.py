"""Downloader do payload de assets a partir da URL de download.

As URLs vêm do serviço de metadados e são pré-assinadas: o GET é feito
sem cookie, por um httpx.AsyncClient separado do cliente autenticado.
"""

from __future__ import annotations

import logging

import httpx

from utils.errors import AssetDownloadError, MigrationError, RateLimitedError

logger = logging.getLogger(__name__)


class AssetDownloader:
    """Implementa AssetDownloaderProtocol com retry próprio.

    Política: ``max_attempts`` tentativas, timeout curto por tentativa, sem
    pausa entre elas. Esgotar por timeout vira RateLimitedError (o CDN
    passa a segurar conexões quando há excesso de requisições).

    O corpo é lido em stream: ``max_size_bytes`` é checado contra o
    Content-Length declarado e contra o total recebido, antes de acumular
    o payload inteiro em memória.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        max_attempts: int = 3,
        timeout_seconds: float = 1.0,
        max_size_bytes: int | None = None,
    ) -> None:
        self._client = client
        self._max_attempts = max(1, max_attempts)
        # Sem limite para esperar conexão livre do pool
        self._timeout = httpx.Timeout(timeout_seconds, pool=None)
        self._max_size_bytes = max_size_bytes

    async def download(self, url: str) -> bytes:
        """Baixa os bytes de ``url``.

        Raises:
            RateLimitedError: Última tentativa terminou em timeout ou 429.
            AssetDownloadError: Última tentativa falhou por outro motivo,
                ou o payload excede o tamanho máximo (sem retry).
        """
        last_error: MigrationError = AssetDownloadError(f"Download não executado: {url}")
        for attempt in range(1, self._max_attempts + 1):
            try:
                return await self._attempt_download(url)
            except httpx.TimeoutException:
                logger.warning(
                    "asset_download_timeout",
                    extra={"attempt": attempt, "max_attempts": self._max_attempts},
                )
                last_error = RateLimitedError(
                    f"Download expirou {attempt}x seguidas: {url}"
                )
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                logger.warning(
                    "asset_download_failed",
                    extra={"status_code": status, "attempt": attempt},
                )
                if status == 429:
                    last_error = RateLimitedError(f"Rate limit no download: {url}")
                else:
                    last_error = AssetDownloadError(f"Download falhou com HTTP {status}: {url}")
            except httpx.TransportError as exc:
                logger.warning(
                    "asset_download_failed",
                    extra={"error_type": type(exc).__name__, "attempt": attempt},
                )
                last_error = AssetDownloadError(f"Falha de transporte no download: {url}")

        raise last_error

    async def _attempt_download(self, url: str) -> bytes:
        async with self._client.stream("GET", url, timeout=self._timeout) as response:
            response.raise_for_status()
            if self._declares_too_large(response):
                raise AssetDownloadError(
                    f"Payload excede {self._max_size_bytes} bytes: {url}"
                )

            chunks: list[bytes] = []
            received = 0
            async for chunk in response.aiter_bytes():
                received += len(chunk)
                # Content-Length ausente ou incorreto: corta durante a leitura
                if self._max_size_bytes is not None and received > self._max_size_bytes:
                    raise AssetDownloadError(
                        f"Payload excede {self._max_size_bytes} bytes: {url}"
                    )
                chunks.append(chunk)
        return b"".join(chunks)

    def _declares_too_large(self, response: httpx.Response) -> bool:
        if self._max_size_bytes is None:
            return False
        content_length = response.headers.get("content-length", "")
        return content_length.isdigit() and int(content_length) > self._max_size_bytes
