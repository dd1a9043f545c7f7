"""Conector Roblox - adapter de borda para as APIs de assets.

Este pacote é o único ponto de IO autenticado da migração.
Responsabilidades:
- Transporte HTTP com cookie e rotação de X-CSRF
- Metadados em lote (asset delivery)
- Criador do asset e listagem de experiências
- Publicação de novos assets
- Classificação de erros HTTP em utils.errors
"""

from .asset_delivery import AssetDeliveryClient
from .asset_details import AssetDetailsClient
from .games import GamesClient
from .http_base import HttpClientConfig, RobloxHttpClient
from .publish import AssetPublishClient
from .roblox_errors import RobloxApiError, error_for_status, parse_roblox_errors
from .session import RobloxSession

__all__ = [
    "AssetDeliveryClient",
    "AssetDetailsClient",
    "AssetPublishClient",
    "GamesClient",
    "HttpClientConfig",
    "RobloxApiError",
    "RobloxHttpClient",
    "RobloxSession",
    "error_for_status",
    "parse_roblox_errors",
]
