"""Cliente HTTP base para os conectores Roblox.

Um único httpx.AsyncClient por instância (injetável em testes). Não faz
retry de pipeline: cada componente tem sua política. Só repete o request
uma vez quando o servidor rotaciona o token X-CSRF (403 + header novo).

Timeouts valem para conectar, ler e escrever; a espera por uma conexão
livre do pool não tem limite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from api.connectors.roblox.session import CSRF_HEADER, RobloxSession
from utils.errors import NetworkError, RequestTimeoutError

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class RobloxHttpClient:
    """Transporte request/response com cookie e rotação de X-CSRF."""

    def __init__(
        self,
        session: RobloxSession,
        config: HttpClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._session = session
        self._config = config or HttpClientConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            verify=self._config.verify_ssl,
            timeout=httpx.Timeout(self._config.timeout_seconds, pool=None),
        )

    @property
    def session(self) -> RobloxSession:
        return self._session

    async def __aenter__(self) -> RobloxHttpClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Fecha o httpx.AsyncClient se foi criado aqui."""
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        """Executa o request e devolve a resposta crua (qualquer status).

        Raises:
            CredentialNotSetError: authenticated=True sem cookie configurado.
            RequestTimeoutError: Timeout do httpx.
            NetworkError: Outras falhas de transporte.
        """
        base_headers = {**self._config.default_headers, **(headers or {})}
        if authenticated:
            base_headers["Cookie"] = self._session.cookie_header()

        # No máximo uma repetição, quando o servidor entrega token novo
        for _ in range(2):
            sent_token = self._session.csrf_token
            merged_headers = dict(base_headers)
            if authenticated and sent_token:
                merged_headers[CSRF_HEADER] = sent_token

            response = await self._send(
                method,
                url,
                params=params,
                json=json,
                content=content,
                headers=merged_headers,
                timeout=timeout,
            )
            if authenticated and response.status_code == 403:
                new_token = response.headers.get(CSRF_HEADER, "")
                if await self._session.rotate_csrf_token(sent_token, new_token):
                    logger.debug("roblox_csrf_rotated", extra={"url": url})
                    continue
            return response
        return response

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None,
        json: Any,
        content: bytes | None,
        headers: dict[str, str],
        timeout: float | None,
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                url,
                params=params,
                json=json,
                content=content,
                headers=headers,
                timeout=httpx.Timeout(
                    timeout if timeout is not None else self._config.timeout_seconds,
                    pool=None,
                ),
            )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"Timeout em {method} {url}") from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"Falha de transporte em {method} {url}: {exc}") from exc
