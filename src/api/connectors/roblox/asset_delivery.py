"""Conector do serviço de metadados em lote (asset delivery v2).

Uma chamada = um lote de até 250 itens. Timeout e retry ficam com o
BatchMetadataResolver; aqui só se monta o request e se classifica a
resposta.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from api.connectors.roblox.models import AssetBatchPayload, AssetBatchResponse
from api.connectors.roblox.roblox_errors import ensure_success, parse_json
from config.settings.migration import MAX_BATCH_SIZE
from utils.errors import ApiRequestError, MalformedResponseError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from api.connectors.roblox.http_base import RobloxHttpClient
    from app.domain.asset import MetadataRecord

logger = logging.getLogger(__name__)

BATCH_PATH = "/v2/assets/batch"
PLACE_ID_HEADER = "Roblox-Place-Id"

_BATCH_ADAPTER: TypeAdapter[list[AssetBatchResponse]] = TypeAdapter(
    list[AssetBatchResponse]
)


class AssetDeliveryClient:
    """Implementa AssetMetadataServiceProtocol sobre RobloxHttpClient."""

    def __init__(self, http: RobloxHttpClient, base_url: str) -> None:
        self._http = http
        self._endpoint = f"{base_url.rstrip('/')}{BATCH_PATH}"

    async def fetch_batch(
        self,
        asset_ids: Sequence[int],
        *,
        place_id: int | None = None,
        timeout_seconds: float | None = None,
    ) -> list[MetadataRecord]:
        """Busca metadados de um lote.

        Args:
            asset_ids: Até 250 AssetIds
            place_id: Contexto de hospedagem anexado ao lote inteiro
            timeout_seconds: Timeout desta tentativa

        Returns:
            Registros na ordem devolvida pelo serviço (sem filtro de tipo).

        Raises:
            ApiRequestError: Lote acima do limite ou erro de API não retentável.
            MalformedResponseError: Corpo fora do schema esperado.
            RequestTimeoutError: Timeout da tentativa.
        """
        if len(asset_ids) > MAX_BATCH_SIZE:
            raise ApiRequestError(
                f"Lote com {len(asset_ids)} itens excede o limite de {MAX_BATCH_SIZE}"
            )

        payload = [
            AssetBatchPayload.for_asset(asset_id).model_dump(by_alias=True)
            for asset_id in asset_ids
        ]
        headers = {"Accept": "application/json"}
        if place_id is not None:
            headers[PLACE_ID_HEADER] = str(place_id)

        response = await self._http.request(
            "POST",
            self._endpoint,
            json=payload,
            headers=headers,
            timeout=timeout_seconds,
        )
        ensure_success(response, self._endpoint)

        try:
            items = _BATCH_ADAPTER.validate_python(parse_json(response, self._endpoint))
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Resposta do lote fora do schema: {exc.error_count()} erro(s)"
            ) from exc

        logger.debug(
            "asset_batch_fetched",
            extra={
                "requested": len(asset_ids),
                "returned": len(items),
                "has_place_id": place_id is not None,
            },
        )
        return [item.to_record() for item in items]
