"""Conector da consulta de criador de um asset (requer credencial)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from api.connectors.roblox.models import AssetDetailsResponse
from api.connectors.roblox.roblox_errors import ensure_success, parse_json
from utils.errors import MalformedResponseError, OwnerNotFoundError

if TYPE_CHECKING:
    from api.connectors.roblox.http_base import RobloxHttpClient
    from app.domain.asset import AssetOwner

logger = logging.getLogger(__name__)

DETAILS_PATH = "/assets/user-auth/v1/assets/{asset_id}"


class AssetDetailsClient:
    """Implementa AssetOwnerServiceProtocol."""

    def __init__(self, http: RobloxHttpClient, base_url: str) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    async def fetch_owner(self, asset_id: int) -> AssetOwner:
        """Retorna o criador (grupo ou usuário) do asset.

        Raises:
            OwnerNotFoundError: Resposta sem userId/groupId utilizável.
            MigrationError: Qualquer falha de transporte ou de API.
        """
        endpoint = self._base_url + DETAILS_PATH.format(asset_id=asset_id)
        response = await self._http.request(
            "GET",
            endpoint,
            headers={"Accept": "application/json"},
        )
        ensure_success(response, endpoint)

        try:
            details = AssetDetailsResponse.model_validate(parse_json(response, endpoint))
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Detalhes do asset {asset_id} fora do schema"
            ) from exc

        owner = details.creation_context.creator.to_owner()
        if owner is None:
            raise OwnerNotFoundError(
                f"Nenhum criador válido para o asset {asset_id}", asset_id=asset_id
            )

        logger.debug(
            "asset_owner_resolved",
            extra={"asset_id": asset_id, "owner_kind": owner.kind},
        )
        return owner
