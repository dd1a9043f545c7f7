"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ApiRequestError,
    AssetDownloadError,
    CredentialNotSetError,
    FatalError,
    HostingContextError,
    InvalidCredentialError,
    MalformedResponseError,
    MigrationError,
    NetworkError,
    NoHostedExperiencesError,
    OwnerLookupError,
    OwnerNotFoundError,
    PermissionDeniedError,
    PublishNotAllowedError,
    RateLimitedError,
    RequestTimeoutError,
    RetriesExhaustedError,
    SchedulerError,
    ServerError,
    TransientError,
)

__all__ = [
    "ApiRequestError",
    "AssetDownloadError",
    "CredentialNotSetError",
    "FatalError",
    "HostingContextError",
    "InvalidCredentialError",
    "MalformedResponseError",
    "MigrationError",
    "NetworkError",
    "NoHostedExperiencesError",
    "OwnerLookupError",
    "OwnerNotFoundError",
    "PermissionDeniedError",
    "PublishNotAllowedError",
    "RateLimitedError",
    "RequestTimeoutError",
    "RetriesExhaustedError",
    "SchedulerError",
    "ServerError",
    "TransientError",
]
