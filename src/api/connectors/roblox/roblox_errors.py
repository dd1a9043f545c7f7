"""Erros e helpers de parsing para as APIs Roblox.

Ponto único onde status HTTP e corpos de erro viram exceções de
utils.errors; o resto do código só faz ``isinstance``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from utils.errors import (
    ApiRequestError,
    InvalidCredentialError,
    MalformedResponseError,
    MigrationError,
    RateLimitedError,
    ServerError,
)

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RobloxApiError:
    """Erro no formato ``{"errors": [{"code": ..., "message": ...}]}``."""

    code: int
    message: str


def parse_roblox_errors(response_data: Any) -> list[RobloxApiError]:
    """Extrai a lista ``errors`` do corpo de resposta.

    Args:
        response_data: JSON decodificado (qualquer formato)

    Returns:
        Lista vazia se o corpo não segue o formato de erro.
    """
    if not isinstance(response_data, dict):
        return []
    raw_errors = response_data.get("errors")
    if not isinstance(raw_errors, list):
        return []

    errors: list[RobloxApiError] = []
    for raw in raw_errors:
        if not isinstance(raw, dict):
            continue
        code = raw.get("code", 0)
        errors.append(
            RobloxApiError(
                code=code if isinstance(code, int) else 0,
                message=str(raw.get("message", "Erro desconhecido")),
            )
        )
    return errors


def first_error(response: httpx.Response) -> RobloxApiError | None:
    """Primeiro erro do corpo, ou None se o corpo não for JSON de erro."""
    try:
        errors = parse_roblox_errors(response.json())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return errors[0] if errors else None


def error_for_status(response: httpx.Response, endpoint: str) -> MigrationError | None:
    """Classifica a resposta; None quando é sucesso (2xx).

    Regras:
    - 401 → InvalidCredentialError (fatal)
    - 429 → RateLimitedError (transitório)
    - 5xx → ServerError (transitório)
    - demais 4xx → ApiRequestError (fatal)
    """
    status = response.status_code
    if 200 <= status < 300:
        return None

    api_error = first_error(response)
    detail = f"{api_error.message} ({api_error.code})" if api_error else f"HTTP {status}"

    if status == 401:
        return InvalidCredentialError(f"Credencial rejeitada em {endpoint}: {detail}")
    if status == 429:
        return RateLimitedError(f"Rate limit em {endpoint}: {detail}")
    if status >= 500:
        return ServerError(f"Erro do servidor em {endpoint}: {detail}", status_code=status)
    return ApiRequestError(
        f"Erro de API em {endpoint}: {detail}",
        status_code=status,
        code=api_error.code if api_error else None,
    )


def ensure_success(response: httpx.Response, endpoint: str) -> httpx.Response:
    """Levanta a exceção classificada se a resposta não for 2xx."""
    error = error_for_status(response, endpoint)
    if error is not None:
        logger.warning(
            "roblox_api_error",
            extra={
                "endpoint": endpoint,
                "status_code": response.status_code,
                "error_type": type(error).__name__,
            },
        )
        raise error
    return response


def parse_json(response: httpx.Response, endpoint: str) -> Any:
    """Decodifica JSON ou levanta MalformedResponseError."""
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("roblox_response_not_json", extra={"endpoint": endpoint})
        raise MalformedResponseError(f"Resposta JSON inválida em {endpoint}") from exc
