"""Formatter JSON dos logs da migração.

Cada linha é um objeto JSON autocontido, pronto para filtrar por
``correlation_id`` (uma execução) e por ``chunk_index``/``request_id``
(um lote ou um asset). Os campos de ``extra`` entram como chaves de
primeiro nível ao lado dos campos fixos.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Presentes em toda linha, mesmo sem extra
REQUIRED_LOG_FIELDS = frozenset(
    {
        "asctime",
        "levelname",
        "name",
        "message",
        "correlation_id",
        "service",
    }
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Formatter com os campos fixos em ordem estável.

    Mensagens em português saem sem escape (``json_ensure_ascii=False``).

    Linha típica de retry de lote:
        {"asctime": "2026-10-19 10:30:00,120", "correlation_id": "5f0c...",
         "level": "WARNING", "logger": "app.services.metadata_resolver",
         "message": "Retrying metadata_resolver (2/9)",
         "service": "asset_migrator", "chunk_index": 1, "attempt": 2,
         "reason": "RequestTimeoutError"}
    """
    format_string = " ".join(f"%({field})s" for field in sorted(REQUIRED_LOG_FIELDS))
    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
        json_ensure_ascii=False,
    )
