"""Protocolos dos serviços externos usados pela migração.

Evita dependência direta da camada api; testes usam fakes em memória.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.asset import AssetOwner, AssetType, MetadataRecord


class AssetMetadataServiceProtocol(Protocol):
    """Serviço de metadados em lote (até 250 itens por chamada)."""

    async def fetch_batch(
        self,
        asset_ids: Sequence[int],
        *,
        place_id: int | None = None,
        timeout_seconds: float | None = None,
    ) -> list[MetadataRecord]: ...


class AssetOwnerServiceProtocol(Protocol):
    """Consulta o criador (usuário ou grupo) de um asset."""

    async def fetch_owner(self, asset_id: int) -> AssetOwner: ...


class ExperienceDirectoryProtocol(Protocol):
    """Listagem pública das experiências de um criador."""

    async def list_root_place_ids(self, owner: AssetOwner) -> list[int]: ...


class AssetDownloaderProtocol(Protocol):
    """Baixa o payload bruto de uma URL de download."""

    async def download(self, url: str) -> bytes: ...


class AssetUploaderProtocol(Protocol):
    """Publica bytes como um novo asset e devolve o id criado."""

    async def upload(
        self,
        content: bytes,
        *,
        asset_type: AssetType,
        group_id: int | None = None,
    ) -> int: ...
