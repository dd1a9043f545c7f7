"""Tipos de domínio da migração de assets.

AssetId é um ``int`` fornecido externamente (não necessariamente válido).
Registros e resultados são imutáveis depois de produzidos, exceto
MigrationResult, que é o acumulador devolvido ao chamador.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from utils.errors import MigrationError

AssetId = int
HostingContextId = int

# Código embutido por item quando o asset exige contexto de hospedagem
PERMISSION_DENIED_CODE = 403

OwnerKind = Literal["user", "group"]


class AssetType(IntEnum):
    """Tipos de asset conhecidos (assetTypeId da plataforma)."""

    UNKNOWN = 0
    IMAGE = 1
    TSHIRT = 2
    AUDIO = 3
    MESH = 4
    LUA = 5
    HAT = 8
    PLACE = 9
    MODEL = 10
    SHIRT = 11
    PANTS = 12
    DECAL = 13
    ANIMATION = 24
    VIDEO = 62

    @classmethod
    def from_type_id(cls, type_id: int | None) -> AssetType:
        """Converte assetTypeId; ids desconhecidos viram UNKNOWN."""
        if type_id is None:
            return cls.UNKNOWN
        try:
            return cls(type_id)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def from_name(cls, name: str) -> AssetType:
        """Converte nome de API (ex: "Animation", "TShirt").

        Raises:
            ValueError: Se o nome não corresponde a nenhum tipo.
        """
        normalized = name.strip().upper()
        if normalized in cls.__members__:
            return cls[normalized]
        raise ValueError(f"Tipo de asset desconhecido: {name}")

    @property
    def api_name(self) -> str:
        """Nome usado pelas APIs de publicação (ex: "Animation")."""
        if self is AssetType.TSHIRT:
            return "TShirt"
        return self.name.capitalize()


@dataclass(frozen=True, slots=True)
class MetadataRecord:
    """Metadado classificado de um asset, vindo do serviço em lote.

    Attributes:
        request_id: Token de correlação (é o AssetId em string)
        asset_type: Tipo do asset
        download_locations: URLs de download; a primeira é a autoritativa
        error_code: Código de erro por item (ex: 403), se houver
    """

    request_id: str
    asset_type: AssetType = AssetType.UNKNOWN
    download_locations: tuple[str, ...] = ()
    error_code: int | None = None

    @property
    def download_location(self) -> str | None:
        """Primeira URL de download ou None."""
        return self.download_locations[0] if self.download_locations else None

    @property
    def is_permission_denied(self) -> bool:
        return self.error_code == PERMISSION_DENIED_CODE


@dataclass(frozen=True, slots=True)
class AssetOwner:
    """Criador de um asset (usuário ou grupo)."""

    kind: OwnerKind
    owner_id: int


@dataclass(frozen=True, slots=True)
class MigrationOutcome:
    """Resultado de um item do scheduler: sucesso (novo id) ou erro terminal."""

    request_id: str | None
    new_asset_id: AssetId | None = None
    error: MigrationError | None = None

    @classmethod
    def succeeded(cls, request_id: str | None, new_asset_id: AssetId) -> MigrationOutcome:
        return cls(request_id=request_id, new_asset_id=new_asset_id)

    @classmethod
    def failed(cls, request_id: str | None, error: MigrationError) -> MigrationOutcome:
        return cls(request_id=request_id, error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None and self.new_asset_id is not None


@dataclass(frozen=True, slots=True)
class MigrationFailure:
    """Entrada da lista de erros de MigrationResult."""

    request_id: str | None
    error: MigrationError

    @property
    def reason(self) -> str:
        """Nome da classe de erro (ex: "RateLimitedError")."""
        return type(self.error).__name__


@dataclass
class MigrationResult:
    """Mapa requestId -> novo AssetId, mais os erros encontrados.

    A ordem de ``errors`` é a ordem de conclusão, não a de entrada.
    """

    mapping: dict[str, AssetId] = field(default_factory=dict)
    errors: list[MigrationFailure] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def failed_request_ids(self) -> list[str]:
        """IDs com falha, para reexecutar apenas o subconjunto."""
        return [f.request_id for f in self.errors if f.request_id is not None]
