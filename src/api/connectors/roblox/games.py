"""Conector da listagem pública de experiências (não requer credencial)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from api.connectors.roblox.models import GamesResponse
from api.connectors.roblox.roblox_errors import ensure_success, parse_json
from utils.errors import MalformedResponseError

if TYPE_CHECKING:
    from api.connectors.roblox.http_base import RobloxHttpClient
    from app.domain.asset import AssetOwner

logger = logging.getLogger(__name__)

USER_GAMES_PATH = "/v2/users/{owner_id}/games"
GROUP_GAMES_PATH = "/v2/groups/{owner_id}/gamesv2"

# Limites aceitos por cada endpoint
USER_GAMES_LIMIT = "50"
GROUP_GAMES_LIMIT = "100"


class GamesClient:
    """Implementa ExperienceDirectoryProtocol."""

    def __init__(self, http: RobloxHttpClient, base_url: str) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    async def list_root_place_ids(self, owner: AssetOwner) -> list[int]:
        """IDs dos root places das experiências do criador, mais recentes primeiro."""
        if owner.kind == "group":
            path, limit = GROUP_GAMES_PATH, GROUP_GAMES_LIMIT
        else:
            path, limit = USER_GAMES_PATH, USER_GAMES_LIMIT
        endpoint = self._base_url + path.format(owner_id=owner.owner_id)

        response = await self._http.request(
            "GET",
            endpoint,
            params={"limit": limit, "sortOrder": "Desc"},
            headers={"Accept": "application/json"},
            authenticated=False,
        )
        ensure_success(response, endpoint)

        try:
            games = GamesResponse.model_validate(parse_json(response, endpoint))
        except ValidationError as exc:
            raise MalformedResponseError("Listagem de experiências fora do schema") from exc

        place_ids = [game.root_place.id for game in games.data if game.root_place]
        logger.debug(
            "owner_experiences_listed",
            extra={"owner_kind": owner.kind, "count": len(place_ids)},
        )
        return place_ids
