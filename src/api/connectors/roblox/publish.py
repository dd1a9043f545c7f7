"""Conector de publicação de novos assets (upload de bytes brutos).

Uma chamada = uma tentativa. O retry de upload fica no MigrationScheduler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.roblox.roblox_errors import ensure_success, first_error
from utils.errors import MalformedResponseError, PublishNotAllowedError

if TYPE_CHECKING:
    from api.connectors.roblox.http_base import RobloxHttpClient
    from app.domain.asset import AssetType

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/ide/publish/uploadnewanimation"


class AssetPublishClient:
    """Implementa AssetUploaderProtocol."""

    def __init__(
        self,
        http: RobloxHttpClient,
        base_url: str,
        *,
        name: str,
        description: str,
        timeout_seconds: float | None = None,
    ) -> None:
        self._http = http
        self._endpoint = f"{base_url.rstrip('/')}{UPLOAD_PATH}"
        self._name = name
        self._description = description
        self._timeout = timeout_seconds

    def _build_params(self, asset_type: AssetType, group_id: int | None) -> dict[str, str]:
        params = {
            "assetTypeName": asset_type.api_name,
            "name": self._name,
            "description": self._description,
            "AllID": "1",
            "ispublic": "False",
            "allowComments": "True",
            "isGamesAsset": "False",
        }
        if group_id is not None:
            params["groupId"] = str(group_id)
        return params

    async def upload(
        self,
        content: bytes,
        *,
        asset_type: AssetType,
        group_id: int | None = None,
    ) -> int:
        """Publica ``content`` como novo asset e devolve o id criado.

        Raises:
            PublishNotAllowedError: 403 depois da rotação de X-CSRF.
            MalformedResponseError: Corpo não é um id numérico.
            MigrationError: Demais falhas classificadas na fronteira.
        """
        response = await self._http.request(
            "POST",
            self._endpoint,
            params=self._build_params(asset_type, group_id),
            content=content,
            headers={"Content-Type": "application/octet-stream"},
            timeout=self._timeout,
        )

        if response.status_code == 403:
            api_error = first_error(response)
            detail = api_error.message if api_error else response.text[:200]
            logger.warning(
                "asset_publish_not_allowed",
                extra={"group_id": group_id, "asset_type": asset_type.api_name},
            )
            raise PublishNotAllowedError(f"Sem permissão para publicar: {detail}")

        ensure_success(response, self._endpoint)

        body = response.text.strip()
        if not body.isdigit():
            raise MalformedResponseError(f"Upload não devolveu um id numérico: {body[:80]!r}")
        return int(body)
