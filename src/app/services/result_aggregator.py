"""Agregação dos resultados por item em um MigrationResult."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.asset import MigrationFailure, MigrationResult
from utils.errors import SchedulerError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.asset import MigrationOutcome

logger = logging.getLogger(__name__)


def aggregate_outcomes(outcomes: Iterable[MigrationOutcome]) -> MigrationResult:
    """Junta sucessos no mapa e falhas na lista de erros.

    Nunca levanta por falha de item. Sucesso sem requestId é descartado
    (não há como correlacionar). O resultado não depende da ordem de
    chegada dos outcomes, exceto pela ordem da lista de erros.
    """
    result = MigrationResult()
    dropped = 0

    for outcome in outcomes:
        if not outcome.is_success:
            error = outcome.error or SchedulerError("Item terminou sem novo id e sem erro")
            result.errors.append(MigrationFailure(outcome.request_id, error))
            continue

        if not outcome.request_id:
            dropped += 1
            logger.warning(
                "migration_outcome_uncorrelated",
                extra={"new_asset_id": outcome.new_asset_id},
            )
            continue

        previous = result.mapping.get(outcome.request_id)
        if previous is not None and previous != outcome.new_asset_id:
            logger.warning(
                "migration_outcome_duplicated",
                extra={"request_id": outcome.request_id},
            )
        result.mapping[outcome.request_id] = outcome.new_asset_id

    logger.info(
        "migration_outcomes_aggregated",
        extra={
            "migrated": len(result.mapping),
            "failed": len(result.errors),
            "uncorrelated": dropped,
        },
    )
    return result
