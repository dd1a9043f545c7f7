"""Factories do use case de migração - wiring das implementações concretas.

Sem estado global de cliente: cada chamada cria (ou recebe) seus próprios
clientes HTTP e os fecha ao sair do context manager.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from api.connectors.roblox import (
    AssetDeliveryClient,
    AssetDetailsClient,
    AssetPublishClient,
    GamesClient,
)
from app.bootstrap.clients import (
    DEFAULT_MAX_CONNECTIONS,
    create_api_http_client,
    create_download_http_client,
    create_roblox_http_client,
)
from app.domain.asset import AssetType
from app.infra.roblox.asset_downloader import AssetDownloader
from app.services import (
    BatchMetadataResolver,
    HostingContextResolver,
    MigrationScheduler,
)
from app.use_cases.migrate_assets import MigrateAssetsUseCase
from config.settings import get_migration_settings, get_roblox_settings
from utils.errors import CredentialNotSetError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from config.settings import MigrationSettings, RobloxSettings

logger = logging.getLogger(__name__)


def build_migrate_assets_use_case(
    api_client: httpx.AsyncClient,
    download_client: httpx.AsyncClient,
    roblox_settings: RobloxSettings,
    migration_settings: MigrationSettings,
) -> MigrateAssetsUseCase:
    """Conecta conectores, serviços e use case.

    Raises:
        CredentialNotSetError: ROBLOSECURITY ausente.
        ValueError: Settings de migração inválidas.
    """
    if not roblox_settings.has_credential:
        raise CredentialNotSetError("ROBLOSECURITY não configurado")
    errors = migration_settings.validate()
    if errors:
        raise ValueError("Settings de migração inválidas: " + "; ".join(errors))

    http = create_roblox_http_client(roblox_settings, api_client)

    resolver = BatchMetadataResolver(
        AssetDeliveryClient(http, roblox_settings.asset_delivery_base_url),
        HostingContextResolver(
            AssetDetailsClient(http, roblox_settings.asset_details_base_url),
            GamesClient(http, roblox_settings.games_base_url),
        ),
        settings=migration_settings,
        target_type=AssetType.from_name(migration_settings.target_asset_type),
    )
    scheduler = MigrationScheduler(
        AssetDownloader(
            download_client,
            max_attempts=migration_settings.download_max_attempts,
            timeout_seconds=migration_settings.download_timeout_seconds,
            max_size_bytes=migration_settings.download_max_size_bytes,
        ),
        AssetPublishClient(
            http,
            roblox_settings.publish_base_url,
            name=migration_settings.asset_name,
            description=migration_settings.asset_description,
        ),
        settings=migration_settings,
    )
    logger.info(
        "migrate_assets_use_case_built",
        extra={
            "target_asset_type": migration_settings.target_asset_type,
            "concurrency_limit": migration_settings.concurrency_limit,
        },
    )
    return MigrateAssetsUseCase(resolver, scheduler, settings=migration_settings)


@asynccontextmanager
async def open_migrate_assets_use_case(
    roblox_settings: RobloxSettings | None = None,
    migration_settings: MigrationSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[MigrateAssetsUseCase]:
    """Abre os clientes HTTP, entrega o use case e fecha tudo na saída.

    Args:
        roblox_settings: None carrega do ambiente
        migration_settings: None carrega do ambiente
        transport: Transport httpx alternativo (ex: httpx.MockTransport)
    """
    roblox = roblox_settings or get_roblox_settings()
    migration = migration_settings or get_migration_settings()

    # Pool no mínimo do tamanho do limite: um item em voo usa uma conexão
    max_connections = max(migration.concurrency_limit, DEFAULT_MAX_CONNECTIONS)

    async with (
        create_api_http_client(roblox, transport, max_connections) as api_client,
        create_download_http_client(roblox, transport, max_connections) as download_client,
    ):
        yield build_migrate_assets_use_case(api_client, download_client, roblox, migration)
