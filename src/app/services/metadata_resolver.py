"""Resolução de metadados em lote com retry por lote.

Regras por lote (até 250 ids):
- timeout escalonado: inicial + passo x tentativa
- TransientError (timeout, resposta malformada, rate limit, 5xx) → nova
  tentativa após pausa curta
- FatalError → aborta a resolução inteira
- algum item com 403 → descobre o contexto de hospedagem do primeiro item
  negado e reenvia o lote INTEIRO com o place anexado; nada do lote é
  aproveitado enquanto houver item negado
- todas as tentativas (inclusive as de 403) saem do mesmo orçamento
- esgotar o orçamento → RetriesExhaustedError com a última causa

Lotes são resolvidos em sequência, então o cache de contexto não sofre
escrita concorrente aqui.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from app.domain.asset import AssetType
from app.observability import record_latency
from app.services.hosting_context import HostingContextCache
from config.logging import log_retry
from config.settings.migration import MigrationSettings
from utils.errors import (
    MalformedResponseError,
    MigrationError,
    PermissionDeniedError,
    RetriesExhaustedError,
    TransientError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.asset import AssetId, MetadataRecord
    from app.protocols.asset_services import AssetMetadataServiceProtocol
    from app.services.hosting_context import HostingContextResolver

logger = logging.getLogger(__name__)

COMPONENT = "metadata_resolver"


def chunk_ids(asset_ids: Iterable[AssetId], size: int) -> list[list[AssetId]]:
    """Particiona ids (deduplicados e ordenados) em lotes de até ``size``."""
    if size < 1:
        raise ValueError("size deve ser >= 1")
    ordered = sorted(set(asset_ids))
    return [ordered[i : i + size] for i in range(0, len(ordered), size)]


class BatchMetadataResolver:
    """Resolve MetadataRecords filtrados pelo tipo alvo."""

    def __init__(
        self,
        metadata_service: AssetMetadataServiceProtocol,
        context_resolver: HostingContextResolver,
        *,
        settings: MigrationSettings | None = None,
        target_type: AssetType = AssetType.ANIMATION,
    ) -> None:
        self._service = metadata_service
        self._contexts = context_resolver
        self._settings = settings or MigrationSettings()
        self._target_type = target_type

    async def resolve(
        self,
        asset_ids: Iterable[AssetId],
        cache: HostingContextCache | None = None,
    ) -> list[MetadataRecord]:
        """Resolve metadados de todos os ids.

        Args:
            asset_ids: Conjunto de AssetIds candidatos
            cache: Cache de contexto; None cria um novo só para esta chamada

        Returns:
            Registros do tipo alvo, agrupados por lote.

        Raises:
            FatalError: Erro fatal em qualquer lote (inclui orçamento esgotado).
        """
        cache = cache if cache is not None else HostingContextCache()
        chunks = chunk_ids(asset_ids, self._settings.batch_size)
        started = time.perf_counter()

        records: list[MetadataRecord] = []
        for index, chunk in enumerate(chunks):
            records.extend(await self._resolve_chunk(index, chunk, cache))

        record_latency(COMPONENT, "resolve", (time.perf_counter() - started) * 1000)
        logger.info(
            "metadata_resolution_completed",
            extra={"chunks": len(chunks), "records": len(records)},
        )
        return records

    async def _resolve_chunk(
        self,
        index: int,
        chunk: list[AssetId],
        cache: HostingContextCache,
    ) -> list[MetadataRecord]:
        max_attempts = self._settings.metadata_max_attempts
        place_id: int | None = None
        last_error: MigrationError | None = None

        for attempt in range(max_attempts):
            try:
                batch = await self._service.fetch_batch(
                    chunk,
                    place_id=place_id,
                    timeout_seconds=self._settings.metadata_timeout_for(attempt),
                )
            except TransientError as exc:
                last_error = exc
                log_retry(
                    logger,
                    COMPONENT,
                    attempt + 1,
                    max_attempts,
                    type(exc).__name__,
                    chunk_index=index,
                )
                if attempt + 1 < max_attempts:
                    await asyncio.sleep(self._settings.metadata_retry_delay_seconds)
                continue

            denied = next((record for record in batch if record.is_permission_denied), None)
            if denied is None:
                return [record for record in batch if record.asset_type is self._target_type]

            if not denied.request_id.isdigit():
                last_error = MalformedResponseError(
                    f"requestId não numérico em item negado: {denied.request_id!r}"
                )
                continue

            last_error = PermissionDeniedError(
                f"Asset {denied.request_id} exige contexto de hospedagem",
                item_id=denied.request_id,
            )
            place_id = await self._contexts.resolve(int(denied.request_id), cache)
            logger.info(
                "metadata_chunk_permission_denied",
                extra={
                    "chunk_index": index,
                    "request_id": denied.request_id,
                    "place_id": place_id,
                    "attempt": attempt + 1,
                },
            )

        raise RetriesExhaustedError(
            f"Lote {index} esgotou {max_attempts} tentativas",
            last_error=last_error or MigrationError("nenhuma tentativa executada"),
        )
