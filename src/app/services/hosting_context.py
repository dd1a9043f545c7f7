"""Descoberta e cache do contexto de hospedagem (place) de um asset.

Quando o serviço de metadados nega um item com 403, o acesso é liberado
anexando o id do root place de uma experiência do criador do asset.

Fluxo de um miss:
1. consulta o criador (usuário ou grupo)
2. lista as experiências públicas do criador
3. usa o root place da primeira (mais recente)

O cache vale por chamada de resolução, salvo quando o chamador passa a
mesma instância entre chamadas. Misses concorrentes para a mesma chave
são serializados por um lock por chave: só o primeiro faz IO.
"""

from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from utils.errors import (
    HostingContextError,
    MigrationError,
    NoHostedExperiencesError,
    OwnerLookupError,
    OwnerNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.asset import AssetId, HostingContextId
    from app.protocols.asset_services import (
        AssetOwnerServiceProtocol,
        ExperienceDirectoryProtocol,
    )

logger = logging.getLogger(__name__)


class HostingContextCache:
    """Mapa AssetId (string) → HostingContextId com lock por chave."""

    def __init__(self, entries: dict[str, HostingContextId] | None = None) -> None:
        self._entries: dict[str, HostingContextId] = entries if entries is not None else {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Mapping[str, HostingContextId]:
        """Visão somente leitura do conteúdo."""
        return MappingProxyType(self._entries)

    def get(self, key: str) -> HostingContextId | None:
        return self._entries.get(key)

    def put(self, key: str, value: HostingContextId) -> None:
        self._entries[key] = value

    def lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock


class HostingContextResolver:
    """Resolve o HostingContextId de um asset, consultando o cache primeiro."""

    def __init__(
        self,
        owners: AssetOwnerServiceProtocol,
        experiences: ExperienceDirectoryProtocol,
    ) -> None:
        self._owners = owners
        self._experiences = experiences

    async def resolve(self, asset_id: AssetId, cache: HostingContextCache) -> HostingContextId:
        """Retorna o place id do asset, gravando no cache em caso de miss.

        Raises:
            OwnerNotFoundError: Asset sem criador identificável.
            OwnerLookupError: Consulta do criador falhou.
            NoHostedExperiencesError: Criador sem experiências listadas.
            HostingContextError: Listagem de experiências falhou.
        """
        key = str(asset_id)
        cached = cache.get(key)
        if cached is not None:
            return cached

        async with cache.lock_for(key):
            # Outra task pode ter preenchido enquanto esperávamos o lock
            cached = cache.get(key)
            if cached is not None:
                return cached

            place_id = await self._discover(asset_id)
            cache.put(key, place_id)

        logger.info(
            "hosting_context_resolved",
            extra={"asset_id": asset_id, "place_id": place_id},
        )
        return place_id

    async def _discover(self, asset_id: AssetId) -> HostingContextId:
        try:
            owner = await self._owners.fetch_owner(asset_id)
        except OwnerNotFoundError:
            raise
        except MigrationError as exc:
            raise OwnerLookupError(
                f"Falha ao consultar o criador do asset {asset_id}: {exc}",
                asset_id=asset_id,
            ) from exc

        try:
            place_ids = await self._experiences.list_root_place_ids(owner)
        except MigrationError as exc:
            raise HostingContextError(
                f"Falha ao listar experiências do {owner.kind} {owner.owner_id}: {exc}",
                asset_id=asset_id,
            ) from exc

        if not place_ids:
            raise NoHostedExperiencesError(
                f"Nenhuma experiência encontrada para o {owner.kind} {owner.owner_id}",
                asset_id=asset_id,
            )
        return place_ids[0]
