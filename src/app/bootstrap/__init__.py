"""Bootstrap da aplicação - inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, open_migrate_assets_use_case

    initialize_app()

    async with open_migrate_assets_use_case() as use_case:
        result = await use_case.execute(asset_ids)
"""

from __future__ import annotations

import logging

from app.bootstrap.dependencies import (
    build_migrate_assets_use_case,
    open_migrate_assets_use_case,
)
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_migration_settings,
    get_roblox_settings,
)

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)

__all__ = [
    "build_migrate_assets_use_case",
    "initialize_app",
    "open_migrate_assets_use_case",
    "validate_runtime_settings",
]


def initialize_app() -> None:
    """Inicializa logging estruturado e valida settings.

    Deve ser chamada uma vez no início do processo.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
    )
    validate_runtime_settings()


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir execução inválida.
    """
    base = get_base_settings()
    strict_mode = base.environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"roblox: {error}" for error in get_roblox_settings().validate())
    errors.extend(f"migration: {error}" for error in get_migration_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")
