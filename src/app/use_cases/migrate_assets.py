"""Use case: migrar assets referenciados para novos assets do destino.

Pipeline:
1. BatchMetadataResolver → registros do tipo alvo com URL de download
2. MigrationScheduler → download + upload por item (concorrência limitada)
3. aggregate_outcomes → mapa {id antigo → id novo} + erros

Erros fatais da resolução abortam antes de agendar qualquer item. Falhas
por item voltam em ``MigrationResult.errors``; cabe ao chamador decidir
se uma lista não vazia é falha geral.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.observability import correlation_scope, record_migration_result
from config.settings.migration import MAX_CONCURRENCY_LIMIT, MigrationSettings
from utils.errors import ApiRequestError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.asset import AssetId, MigrationResult
    from app.services.hosting_context import HostingContextCache
    from app.services.metadata_resolver import BatchMetadataResolver
    from app.services.migration_scheduler import MigrationScheduler

logger = logging.getLogger(__name__)


class MigrateAssetsUseCase:
    """Orquestra resolução, migração e agregação."""

    def __init__(
        self,
        resolver: BatchMetadataResolver,
        scheduler: MigrationScheduler,
        *,
        settings: MigrationSettings | None = None,
    ) -> None:
        self._resolver = resolver
        self._scheduler = scheduler
        self._settings = settings or MigrationSettings()

    async def execute(
        self,
        asset_ids: Iterable[AssetId],
        destination_group_id: int | None = None,
        concurrency_limit: int | None = None,
        *,
        context_cache: HostingContextCache | None = None,
        correlation_id: str | None = None,
    ) -> MigrationResult:
        """Migra todos os ids e devolve o mapa + erros.

        Args:
            asset_ids: IDs candidatos (duplicados são ignorados)
            destination_group_id: Grupo dono dos novos assets; None usa o
                valor das settings
            concurrency_limit: Override do limite de concorrência
            context_cache: Cache de contexto compartilhado entre chamadas
                (None = cache novo por chamada)
            correlation_id: ID da execução para os logs (None = gera)

        Raises:
            ValueError: concurrency_limit fora do intervalo aceito.
            FatalError: Falha fatal na resolução de metadados.
        """
        limit = (
            concurrency_limit
            if concurrency_limit is not None
            else self._settings.concurrency_limit
        )
        if not 1 <= limit <= MAX_CONCURRENCY_LIMIT:
            raise ValueError(
                f"concurrency_limit deve estar entre 1 e {MAX_CONCURRENCY_LIMIT}: {limit}"
            )
        group_id = (
            destination_group_id
            if destination_group_id is not None
            else self._settings.destination_group_id
        )

        with correlation_scope(correlation_id):
            requested = set(asset_ids)
            logger.info(
                "migration_started",
                extra={
                    "requested": len(requested),
                    "concurrency_limit": limit,
                    "has_destination_group": group_id is not None,
                },
            )

            records = await self._resolver.resolve(requested, context_cache)
            result = await self._scheduler.migrate(
                records,
                concurrency_limit=limit,
                destination_group_id=group_id,
            )

            record_migration_result(len(requested), len(result.mapping), len(result.errors))
            logger.info(
                "migration_completed",
                extra={
                    "resolved": len(records),
                    "migrated": len(result.mapping),
                    "failed": len(result.errors),
                },
            )
            return result

    async def reupload_asset(
        self,
        asset_id: AssetId,
        destination_group_id: int | None = None,
    ) -> AssetId:
        """Migra um único asset e devolve o novo id.

        Raises:
            MigrationError: Erro terminal do item.
            ApiRequestError: Asset fora do tipo alvo ou sem URL de download.
        """
        result = await self.execute(
            [asset_id],
            destination_group_id=destination_group_id,
            concurrency_limit=1,
        )
        new_asset_id = result.mapping.get(str(asset_id))
        if new_asset_id is not None:
            return new_asset_id
        if result.errors:
            raise result.errors[0].error
        raise ApiRequestError(
            f"Asset {asset_id} não é {self._settings.target_asset_type} "
            "ou não tem URL de download"
        )
