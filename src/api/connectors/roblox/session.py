"""Sessão autenticada: cookie .ROBLOSECURITY e token anti-forgery atual.

Sem estado global: cada RobloxHttpClient recebe sua própria sessão.
"""

from __future__ import annotations

import asyncio

from utils.errors import CredentialNotSetError

COOKIE_NAME = ".ROBLOSECURITY"
CSRF_HEADER = "x-csrf-token"


class RobloxSession:
    """Credencial opaca + token X-CSRF rotacionado pelo servidor."""

    def __init__(self, roblosecurity: str | None = None) -> None:
        self._roblosecurity = (roblosecurity or "").strip()
        self._csrf_token = ""
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"RobloxSession(has_credential={self.has_credential})"

    @property
    def has_credential(self) -> bool:
        return bool(self._roblosecurity)

    @property
    def csrf_token(self) -> str:
        return self._csrf_token

    def cookie_header(self) -> str:
        """Valor do header Cookie.

        Raises:
            CredentialNotSetError: Se a sessão não tem credencial.
        """
        if not self._roblosecurity:
            raise CredentialNotSetError("ROBLOSECURITY não configurado")
        return f"{COOKIE_NAME}={self._roblosecurity}"

    async def rotate_csrf_token(self, sent_token: str, new_token: str) -> bool:
        """Grava o token novo se ainda não foi trocado por outra task.

        Returns:
            True se o request deve ser repetido com o token atual.
        """
        if not new_token:
            return False
        async with self._lock:
            if self._csrf_token == sent_token:
                self._csrf_token = new_token
            return self._csrf_token != sent_token
