"""Filter que carimba execução e serviço em cada record.

O correlation_id vem da ContextVar aberta por MigrateAssetsUseCase.execute,
então logs de tasks do scheduler e de conectores saem agrupados por
execução sem que ninguém repasse o id manualmente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "[redacted]"

# Nomes de extra que carregariam o cookie .ROBLOSECURITY ou o token X-CSRF
SENSITIVE_ATTRS = frozenset({"roblosecurity", "cookie", "csrf_token"})


class CorrelationIdFilter(logging.Filter):
    """Injeta ``correlation_id`` e ``service``; mascara credenciais.

    Args:
        service_name: Valor fixo do campo ``service``.
        correlation_id_getter: Lê o id da execução corrente; sem getter o
            campo sai vazio.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Sempre True. Um correlation_id explícito em ``extra`` prevalece."""
        if not getattr(record, "correlation_id", None):
            record.correlation_id = self._get_correlation_id()
        record.service = self._service_name
        for attr in SENSITIVE_ATTRS.intersection(record.__dict__):
            setattr(record, attr, REDACTED)
        return True
