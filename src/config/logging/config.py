"""Setup de logging do migrador de assets.

Um único handler JSON em stderr: o stdout fica livre para o relatório
final do CLI. O nível vem de ``Settings.log_level`` (env ``LOG_LEVEL``).

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", correlation_id_getter=get_correlation_id)

    logger = get_logger(__name__)
    logger.info("migration_completed", extra={"migrated": 42})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "asset_migrator"

# Logam uma linha por request; num lote de milhares de assets viram ruído
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Instala o handler JSON no root logger, substituindo os existentes.

    Chamar de novo (ex.: testes, CLI com ``--log-level``) reconfigura sem
    duplicar linhas.

    Raises:
        ValueError: Nível fora de VALID_LOG_LEVELS.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_retry(
    logger: logging.Logger,
    component: str,
    attempt: int,
    max_attempts: int,
    reason: str,
    **fields: object,
) -> None:
    """WARNING de nova tentativa de lote de metadados ou de upload.

    Args:
        component: "metadata_resolver", "asset_uploader", ...
        attempt: Tentativa que falhou (1-based).
        max_attempts: Orçamento total de tentativas.
        reason: Nome da classe da falha (ex: "RequestTimeoutError").
        **fields: chunk_index, request_id e afins.

    Exemplo:
        log_retry(logger, "asset_uploader", 2, 5, "ServerError", request_id="77")
    """
    extra: dict[str, object] = {
        "component": component,
        "attempt": attempt,
        "max_attempts": max_attempts,
        "reason": reason,
    }
    extra.update(fields)
    logger.warning(
        "Retrying %s (%d/%d)",
        component,
        attempt,
        max_attempts,
        extra=extra,
    )
