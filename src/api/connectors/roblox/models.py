"""Modelos de wire das APIs Roblox (pydantic v2).

Campos em camelCase via alias; campos desconhecidos são ignorados.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.asset import AssetOwner, AssetType, MetadataRecord


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ──────────────────────────────────────────────────────────────────────────────
# Asset delivery - lote de metadados
# ──────────────────────────────────────────────────────────────────────────────


class AssetBatchPayload(_WireModel):
    """Item do request em lote. ``request_id`` ecoa o AssetId."""

    asset_id: str = Field(alias="assetId")
    request_id: str = Field(alias="requestId")

    @classmethod
    def for_asset(cls, asset_id: int) -> AssetBatchPayload:
        token = str(asset_id)
        return cls(asset_id=token, request_id=token)


class AssetLocation(_WireModel):
    asset_format: str | None = Field(default=None, alias="assetFormat")
    location: str | None = None


class AssetBatchError(_WireModel):
    code: int = 0
    message: str = ""


class AssetBatchResponse(_WireModel):
    """Item da resposta em lote."""

    request_id: str | None = Field(default=None, alias="requestId")
    asset_type_id: int | None = Field(default=None, alias="assetTypeId")
    locations: list[AssetLocation] = Field(default_factory=list)
    errors: list[AssetBatchError] = Field(default_factory=list)
    is_archived: bool = Field(default=False, alias="isArchived")

    def to_record(self) -> MetadataRecord:
        """Converte para o tipo de domínio."""
        return MetadataRecord(
            request_id=self.request_id or "",
            asset_type=AssetType.from_type_id(self.asset_type_id),
            download_locations=tuple(
                loc.location for loc in self.locations if loc.location
            ),
            error_code=self.errors[0].code if self.errors else None,
        )


# ──────────────────────────────────────────────────────────────────────────────
# Criador do asset
# ──────────────────────────────────────────────────────────────────────────────


class AssetCreator(_WireModel):
    user_id: str | None = Field(default=None, alias="userId")
    group_id: str | None = Field(default=None, alias="groupId")

    def to_owner(self) -> AssetOwner | None:
        """Grupo tem precedência; None quando nenhum id é numérico."""
        if self.group_id and self.group_id.isdigit():
            return AssetOwner(kind="group", owner_id=int(self.group_id))
        if self.user_id and self.user_id.isdigit():
            return AssetOwner(kind="user", owner_id=int(self.user_id))
        return None


class CreationContext(_WireModel):
    creator: AssetCreator = Field(default_factory=AssetCreator)


class AssetDetailsResponse(_WireModel):
    asset_id: str | None = Field(default=None, alias="assetId")
    creation_context: CreationContext = Field(
        default_factory=CreationContext, alias="creationContext"
    )


# ──────────────────────────────────────────────────────────────────────────────
# Experiências (games)
# ──────────────────────────────────────────────────────────────────────────────


class RootPlace(_WireModel):
    id: int


class GameEntry(_WireModel):
    id: int
    name: str | None = None
    root_place: RootPlace | None = Field(default=None, alias="rootPlace")


class GamesResponse(_WireModel):
    data: list[GameEntry] = Field(default_factory=list)
    next_page_cursor: str | None = Field(default=None, alias="nextPageCursor")
