"""Settings de acesso às APIs Roblox.

Credencial e URLs base dos serviços externos usados pela migração.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

ASSET_DELIVERY_BASE_URL: str = "https://assetdelivery.roblox.com"
ASSET_DETAILS_BASE_URL: str = "https://apis.roblox.com"
GAMES_BASE_URL: str = "https://games.roblox.com"
PUBLISH_BASE_URL: str = "https://www.roblox.com"

DEFAULT_USER_AGENT: str = "asset-migrator/1.0"


@dataclass(frozen=True)
class RobloxSettings:
    """Configurações das APIs Roblox.

    Attributes:
        roblosecurity: Cookie .ROBLOSECURITY (nunca logar)
        asset_delivery_base_url: URL base do serviço de metadados em lote
        asset_details_base_url: URL base da consulta de criador do asset
        games_base_url: URL base da listagem pública de experiências
        publish_base_url: URL base do upload de novos assets
        request_timeout_seconds: Timeout padrão para chamadas sem timeout próprio
        user_agent: User-Agent enviado em todas as chamadas
    """

    roblosecurity: str = field(default="", repr=False)

    asset_delivery_base_url: str = ASSET_DELIVERY_BASE_URL
    asset_details_base_url: str = ASSET_DETAILS_BASE_URL
    games_base_url: str = GAMES_BASE_URL
    publish_base_url: str = PUBLISH_BASE_URL

    request_timeout_seconds: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def has_credential(self) -> bool:
        """Retorna True se o cookie foi configurado."""
        return bool(self.roblosecurity.strip())

    def validate(self) -> list[str]:
        """Valida configurações mínimas.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.has_credential:
            errors.append("ROBLOSECURITY não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("ROBLOX_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        for name, url in (
            ("ROBLOX_ASSET_DELIVERY_URL", self.asset_delivery_base_url),
            ("ROBLOX_ASSET_DETAILS_URL", self.asset_details_base_url),
            ("ROBLOX_GAMES_URL", self.games_base_url),
            ("ROBLOX_PUBLISH_URL", self.publish_base_url),
        ):
            if not url.startswith(("http://", "https://")):
                errors.append(f"{name} deve ser uma URL http(s)")

        return errors


def _load_from_env() -> RobloxSettings:
    """Carrega RobloxSettings a partir de variáveis de ambiente."""
    return RobloxSettings(
        roblosecurity=os.getenv("ROBLOSECURITY", ""),
        asset_delivery_base_url=os.getenv(
            "ROBLOX_ASSET_DELIVERY_URL", ASSET_DELIVERY_BASE_URL
        ),
        asset_details_base_url=os.getenv(
            "ROBLOX_ASSET_DETAILS_URL", ASSET_DETAILS_BASE_URL
        ),
        games_base_url=os.getenv("ROBLOX_GAMES_URL", GAMES_BASE_URL),
        publish_base_url=os.getenv("ROBLOX_PUBLISH_URL", PUBLISH_BASE_URL),
        request_timeout_seconds=float(
            os.getenv("ROBLOX_REQUEST_TIMEOUT_SECONDS", "30")
        ),
        user_agent=os.getenv("ROBLOX_USER_AGENT", DEFAULT_USER_AGENT),
    )


@lru_cache(maxsize=1)
def get_roblox_settings() -> RobloxSettings:
    """Retorna instância cacheada de RobloxSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
