"""Registro de métricas via structured logging.

As métricas são logs estruturados agregáveis depois (BigQuery,
CloudWatch Insights, etc.). Nada aqui faz parte do contrato do pipeline.

Métricas suportadas:
- Latência: tempo por componente/operação
- Progresso: itens atuais/restantes do scheduler
- Resultado: contagem final de migrados/falhos
"""

from __future__ import annotations

import logging

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "metadata_resolver")
        operation: Nome da operação (ex: "resolve", "migrate")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (default: contexto atual)
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id or get_correlation_id(),
        },
    )


def record_progress(
    component: str,
    current: int,
    total: int,
) -> None:
    """Registra aviso de progresso (atual/restante).

    Args:
        component: Nome do componente (ex: "migration_scheduler")
        current: Posição 1-based do item que entrou em processamento
        total: Total de itens agendados
    """
    logger.info(
        "metric_progress",
        extra={
            "metric_type": "progress",
            "component": component,
            "current": current,
            "total": total,
            "remaining": max(total - current, 0),
            "correlation_id": get_correlation_id(),
        },
    )


def record_migration_result(
    requested: int,
    migrated: int,
    failed: int,
) -> None:
    """Registra o resumo de uma execução de migração."""
    logger.info(
        "metric_migration_result",
        extra={
            "metric_type": "migration_result",
            "component": "migrate_assets",
            "requested": requested,
            "migrated": migrated,
            "failed": failed,
            "correlation_id": get_correlation_id(),
        },
    )
