"""Protocolos (portas) da aplicação."""

from app.protocols.asset_services import (
    AssetDownloaderProtocol,
    AssetMetadataServiceProtocol,
    AssetOwnerServiceProtocol,
    AssetUploaderProtocol,
    ExperienceDirectoryProtocol,
)

__all__ = [
    "AssetDownloaderProtocol",
    "AssetMetadataServiceProtocol",
    "AssetOwnerServiceProtocol",
    "AssetUploaderProtocol",
    "ExperienceDirectoryProtocol",
]
