"""Factories de clientes HTTP externos.

Dois httpx.AsyncClient por execução: um autenticado (APIs) e um anônimo
para as URLs de download, para o cookie nunca sair para o CDN.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from api.connectors.roblox import HttpClientConfig, RobloxHttpClient, RobloxSession

if TYPE_CHECKING:
    from config.settings import RobloxSettings

logger = logging.getLogger(__name__)

# Piso do pool quando o concurrency_limit é menor
DEFAULT_MAX_CONNECTIONS = 100
MAX_KEEPALIVE_CONNECTIONS = 20


def _pool_limits(max_connections: int) -> httpx.Limits:
    return httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
    )


def _client_timeout(settings: RobloxSettings) -> httpx.Timeout:
    # Espera por conexão livre não conta como timeout do request
    return httpx.Timeout(settings.request_timeout_seconds, pool=None)


def create_api_http_client(
    settings: RobloxSettings,
    transport: httpx.AsyncBaseTransport | None = None,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
) -> httpx.AsyncClient:
    """Cria o httpx.AsyncClient usado pelas APIs autenticadas.

    ``max_connections`` acompanha o concurrency_limit: cada item em voo
    segura no máximo uma conexão de upload.
    """
    return httpx.AsyncClient(
        transport=transport,
        timeout=_client_timeout(settings),
        limits=_pool_limits(max_connections),
        headers={"User-Agent": settings.user_agent},
    )


def create_download_http_client(
    settings: RobloxSettings,
    transport: httpx.AsyncBaseTransport | None = None,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
) -> httpx.AsyncClient:
    """Cria o httpx.AsyncClient anônimo dos downloads (segue redirects)."""
    return httpx.AsyncClient(
        transport=transport,
        timeout=_client_timeout(settings),
        limits=_pool_limits(max_connections),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
    )


def create_roblox_http_client(
    settings: RobloxSettings,
    client: httpx.AsyncClient,
) -> RobloxHttpClient:
    """Envolve o cliente httpx com sessão (cookie + X-CSRF)."""
    session = RobloxSession(settings.roblosecurity)
    logger.info(
        "roblox_http_client_created",
        extra={"has_credential": session.has_credential},
    )
    return RobloxHttpClient(
        session,
        HttpClientConfig(timeout_seconds=settings.request_timeout_seconds),
        client=client,
    )
