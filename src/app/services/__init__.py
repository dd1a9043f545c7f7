"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em api/connectors/ e app/infra/.
"""

from app.services.hosting_context import HostingContextCache, HostingContextResolver
from app.services.metadata_resolver import BatchMetadataResolver, chunk_ids
from app.services.migration_scheduler import MigrationScheduler
from app.services.result_aggregator import aggregate_outcomes

__all__ = [
    "BatchMetadataResolver",
    "HostingContextCache",
    "HostingContextResolver",
    "MigrationScheduler",
    "aggregate_outcomes",
    "chunk_ids",
]
