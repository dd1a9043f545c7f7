"""Correlation_id por execução de migração.

MigrateAssetsUseCase.execute abre um escopo por chamada; as tasks do
scheduler herdam o valor porque asyncio copia o contexto ao criar a task.
Duas execuções concorrentes no mesmo processo não se misturam.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o id da execução corrente; None gera um novo."""
    return _correlation_id.set(correlation_id or generate_correlation_id())


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Escopo de uma execução: define o id e restaura o anterior na saída.

    Uso:
        with correlation_scope() as run_id:
            logger.info("migration_started", extra={"run_id": run_id})
    """
    token = set_correlation_id(correlation_id)
    try:
        yield _correlation_id.get()
    finally:
        reset_correlation_id(token)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex
