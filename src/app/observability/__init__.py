"""Observabilidade - correlation_id e métricas via logs estruturados.

Uso:
    from app.observability import correlation_scope, get_correlation_id
    from app.observability import record_latency, record_progress
"""

from app.observability.correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_latency,
    record_migration_result,
    record_progress,
)

__all__ = [
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "record_latency",
    "record_migration_result",
    "record_progress",
    "reset_correlation_id",
    "set_correlation_id",
]
