"""Settings do pipeline de migração.

Políticas de retry por estágio, tamanho de lote e limite de concorrência.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Limite rígido do serviço de metadados em lote
MAX_BATCH_SIZE: int = 250

MAX_CONCURRENCY_LIMIT: int = 1000


@dataclass(frozen=True)
class MigrationSettings:
    """Configurações do pipeline de migração.

    Attributes:
        batch_size: IDs por chamada ao serviço de metadados (máx. 250)
        metadata_max_attempts: Tentativas por lote (inclui a primeira)
        metadata_initial_timeout_seconds: Timeout da primeira tentativa do lote
        metadata_timeout_step_seconds: Incremento de timeout por nova tentativa
        metadata_retry_delay_seconds: Pausa entre tentativas do lote
        download_max_attempts: Tentativas de download por item
        download_timeout_seconds: Timeout por tentativa de download
        download_max_size_bytes: Tamanho máximo aceito por payload
        upload_max_attempts: Tentativas de upload por item
        upload_retry_delay_seconds: Pausa fixa entre tentativas de upload
        concurrency_limit: Máximo de itens em download/upload simultâneo
        destination_group_id: Grupo dono dos novos assets (None = usuário)
        asset_name: Nome aplicado aos assets recriados
        asset_description: Descrição aplicada aos assets recriados
        target_asset_type: Tipo de asset migrado (ex: Animation)
    """

    batch_size: int = MAX_BATCH_SIZE
    metadata_max_attempts: int = 9
    metadata_initial_timeout_seconds: float = 3.0
    metadata_timeout_step_seconds: float = 1.0
    metadata_retry_delay_seconds: float = 2.0

    download_max_attempts: int = 3
    download_timeout_seconds: float = 1.0
    download_max_size_bytes: int = 50 * 1024 * 1024  # 50MB

    upload_max_attempts: int = 5
    upload_retry_delay_seconds: float = 1.0

    concurrency_limit: int = 5
    destination_group_id: int | None = None

    asset_name: str = "Migrated Animation"
    asset_description: str = "Re-uploaded by asset_migrator"
    target_asset_type: str = "Animation"

    def metadata_timeout_for(self, attempt: int) -> float:
        """Timeout da tentativa ``attempt`` (0-based) de um lote."""
        return self.metadata_initial_timeout_seconds + (
            attempt * self.metadata_timeout_step_seconds
        )

    def validate(self) -> list[str]:
        """Valida configurações de migração.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if not 1 <= self.batch_size <= MAX_BATCH_SIZE:
            errors.append(f"MIGRATION_BATCH_SIZE deve estar entre 1 e {MAX_BATCH_SIZE}")

        if self.metadata_max_attempts < 1:
            errors.append("MIGRATION_METADATA_MAX_ATTEMPTS deve ser >= 1")

        if self.metadata_initial_timeout_seconds <= 0:
            errors.append("MIGRATION_METADATA_TIMEOUT_SECONDS deve ser > 0")

        if self.download_max_attempts < 1:
            errors.append("MIGRATION_DOWNLOAD_MAX_ATTEMPTS deve ser >= 1")

        if self.download_timeout_seconds <= 0:
            errors.append("MIGRATION_DOWNLOAD_TIMEOUT_SECONDS deve ser > 0")

        if self.download_max_size_bytes <= 0:
            errors.append("MIGRATION_DOWNLOAD_MAX_SIZE_BYTES deve ser > 0")

        if self.upload_max_attempts < 1:
            errors.append("MIGRATION_UPLOAD_MAX_ATTEMPTS deve ser >= 1")

        if not 1 <= self.concurrency_limit <= MAX_CONCURRENCY_LIMIT:
            errors.append(
                f"MIGRATION_CONCURRENCY_LIMIT deve estar entre 1 e {MAX_CONCURRENCY_LIMIT}"
            )

        if self.destination_group_id is not None and self.destination_group_id <= 0:
            errors.append("MIGRATION_DESTINATION_GROUP_ID deve ser > 0")

        if not self.asset_name.strip():
            errors.append("MIGRATION_ASSET_NAME não pode ser vazio")

        return errors


def _optional_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    return int(value)


def _load_from_env() -> MigrationSettings:
    """Carrega MigrationSettings a partir de variáveis de ambiente."""
    return MigrationSettings(
        batch_size=int(os.getenv("MIGRATION_BATCH_SIZE", str(MAX_BATCH_SIZE))),
        metadata_max_attempts=int(os.getenv("MIGRATION_METADATA_MAX_ATTEMPTS", "9")),
        metadata_initial_timeout_seconds=float(
            os.getenv("MIGRATION_METADATA_TIMEOUT_SECONDS", "3")
        ),
        metadata_timeout_step_seconds=float(
            os.getenv("MIGRATION_METADATA_TIMEOUT_STEP_SECONDS", "1")
        ),
        metadata_retry_delay_seconds=float(
            os.getenv("MIGRATION_METADATA_RETRY_DELAY_SECONDS", "2")
        ),
        download_max_attempts=int(os.getenv("MIGRATION_DOWNLOAD_MAX_ATTEMPTS", "3")),
        download_timeout_seconds=float(
            os.getenv("MIGRATION_DOWNLOAD_TIMEOUT_SECONDS", "1")
        ),
        download_max_size_bytes=int(
            os.getenv("MIGRATION_DOWNLOAD_MAX_SIZE_BYTES", str(50 * 1024 * 1024))
        ),
        upload_max_attempts=int(os.getenv("MIGRATION_UPLOAD_MAX_ATTEMPTS", "5")),
        upload_retry_delay_seconds=float(
            os.getenv("MIGRATION_UPLOAD_RETRY_DELAY_SECONDS", "1")
        ),
        concurrency_limit=int(os.getenv("MIGRATION_CONCURRENCY_LIMIT", "5")),
        destination_group_id=_optional_int(os.getenv("MIGRATION_DESTINATION_GROUP_ID")),
        asset_name=os.getenv("MIGRATION_ASSET_NAME", "Migrated Animation"),
        asset_description=os.getenv(
            "MIGRATION_ASSET_DESCRIPTION", "Re-uploaded by asset_migrator"
        ),
        target_asset_type=os.getenv("MIGRATION_TARGET_ASSET_TYPE", "Animation"),
    )


@lru_cache(maxsize=1)
def get_migration_settings() -> MigrationSettings:
    """Retorna instância cacheada de MigrationSettings."""
    return _load_from_env()
