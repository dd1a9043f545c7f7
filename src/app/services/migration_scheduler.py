"""Scheduler de migração: download + upload com concorrência limitada.

Uma task por item; um asyncio.Semaphore de ``concurrency_limit`` permite
no máximo N itens no estágio download/upload ao mesmo tempo. Criar tasks
além do limite é permitido: elas ficam suspensas no semáforo.

Cada item entrega seu próprio resultado: a falha de um item nunca cancela
nem bloqueia os outros. Exceções inesperadas dentro de uma task viram
SchedulerError para aquele item.

Políticas por item:
- download: retry próprio do downloader (tentativas curtas)
- upload: até ``upload_max_attempts`` tentativas com pausa fixa entre elas
  (sem pausa após a última); PublishNotAllowedError e erros de credencial
  não são repetidos
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from app.domain.asset import MigrationOutcome
from app.observability import record_latency, record_progress
from app.services.result_aggregator import aggregate_outcomes
from config.logging import log_retry
from config.settings.migration import MAX_CONCURRENCY_LIMIT, MigrationSettings
from utils.errors import (
    CredentialNotSetError,
    InvalidCredentialError,
    MigrationError,
    PublishNotAllowedError,
    SchedulerError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.asset import AssetId, MetadataRecord, MigrationResult
    from app.protocols.asset_services import (
        AssetDownloaderProtocol,
        AssetUploaderProtocol,
    )

logger = logging.getLogger(__name__)

COMPONENT = "migration_scheduler"

# Repetir não muda o resultado para estes erros
_NON_RETRYABLE_UPLOAD_ERRORS = (
    PublishNotAllowedError,
    CredentialNotSetError,
    InvalidCredentialError,
)


class MigrationScheduler:
    """Executa o pipeline por item e coleta um outcome por item agendado."""

    def __init__(
        self,
        downloader: AssetDownloaderProtocol,
        uploader: AssetUploaderProtocol,
        *,
        settings: MigrationSettings | None = None,
    ) -> None:
        self._downloader = downloader
        self._uploader = uploader
        self._settings = settings or MigrationSettings()

    async def migrate(
        self,
        records: Sequence[MetadataRecord],
        concurrency_limit: int | None = None,
        destination_group_id: int | None = None,
    ) -> MigrationResult:
        """Migra os registros e devolve o mapa agregado + erros."""
        outcomes = await self.run(records, concurrency_limit, destination_group_id)
        return aggregate_outcomes(outcomes)

    async def run(
        self,
        records: Sequence[MetadataRecord],
        concurrency_limit: int | None = None,
        destination_group_id: int | None = None,
    ) -> list[MigrationOutcome]:
        """Agenda os registros com URL de download e devolve os outcomes.

        Registros sem URL são ignorados (não geram outcome). A lista sai em
        ordem de conclusão.

        Raises:
            ValueError: concurrency_limit fora de 1..MAX_CONCURRENCY_LIMIT.
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

        scheduled = [record for record in records if record.download_location]
        skipped = len(records) - len(scheduled)
        if skipped:
            logger.info("migration_records_skipped", extra={"skipped": skipped})
        if not scheduled:
            return []

        semaphore = asyncio.Semaphore(limit)
        total = len(scheduled)
        started = time.perf_counter()
        tasks = [
            asyncio.create_task(
                self._run_guarded(record, position, total, semaphore, destination_group_id)
            )
            for position, record in enumerate(scheduled, start=1)
        ]

        outcomes: list[MigrationOutcome] = []
        try:
            for finished in asyncio.as_completed(tasks):
                outcomes.append(await finished)
        finally:
            # Só sobra task pendente se a coleta foi interrompida (cancelamento)
            for task in tasks:
                if not task.done():
                    task.cancel()

        record_latency(COMPONENT, "migrate", (time.perf_counter() - started) * 1000)
        return outcomes

    async def _run_guarded(
        self,
        record: MetadataRecord,
        position: int,
        total: int,
        semaphore: asyncio.Semaphore,
        group_id: int | None,
    ) -> MigrationOutcome:
        try:
            return await self._migrate_one(record, position, total, semaphore, group_id)
        except Exception as exc:
            logger.exception(
                "migration_task_crashed",
                extra={"request_id": record.request_id},
            )
            return MigrationOutcome.failed(
                record.request_id,
                SchedulerError(f"Task do item {record.request_id} falhou: {exc!r}"),
            )

    async def _migrate_one(
        self,
        record: MetadataRecord,
        position: int,
        total: int,
        semaphore: asyncio.Semaphore,
        group_id: int | None,
    ) -> MigrationOutcome:
        async with semaphore:
            record_progress(COMPONENT, position, total)
            try:
                content = await self._downloader.download(record.download_location or "")
                new_asset_id = await self._upload_with_retry(record, content, group_id)
            except MigrationError as exc:
                logger.warning(
                    "asset_migration_failed",
                    extra={
                        "request_id": record.request_id,
                        "error_type": type(exc).__name__,
                    },
                )
                return MigrationOutcome.failed(record.request_id, exc)

        logger.debug(
            "asset_migrated",
            extra={"request_id": record.request_id, "new_asset_id": new_asset_id},
        )
        return MigrationOutcome.succeeded(record.request_id, new_asset_id)

    async def _upload_with_retry(
        self,
        record: MetadataRecord,
        content: bytes,
        group_id: int | None,
    ) -> AssetId:
        max_attempts = self._settings.upload_max_attempts
        last_error: MigrationError = SchedulerError("Upload não executado")

        for attempt in range(1, max_attempts + 1):
            try:
                return await self._uploader.upload(
                    content,
                    asset_type=record.asset_type,
                    group_id=group_id,
                )
            except _NON_RETRYABLE_UPLOAD_ERRORS:
                raise
            except MigrationError as exc:
                last_error = exc
                if attempt < max_attempts:
                    log_retry(
                        logger,
                        "asset_upload",
                        attempt,
                        max_attempts,
                        type(exc).__name__,
                        request_id=record.request_id,
                    )
                    await asyncio.sleep(self._settings.upload_retry_delay_seconds)

        raise last_error
