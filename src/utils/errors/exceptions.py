"""Exceções de domínio da migração de assets.

Hierarquia fechada: a classificação acontece uma única vez na fronteira
dos conectores (api/connectors/roblox) e o resto do código decide por
``isinstance``.

- TransientError: retentável (timeout, resposta malformada, rate limit).
- FatalError: aborta a operação inteira (credencial, request inválido).
- PermissionDeniedError: item exige contexto de hospedagem; dispara a
  descoberta do place e o retry do lote inteiro.
- PublishNotAllowedError: falha definitiva por item, sem retry.
"""

from __future__ import annotations


class MigrationError(RuntimeError):
    """Base para todas as falhas da migração."""


# ──────────────────────────────────────────────────────────────────────────────
# Transitórias (retentáveis)
# ──────────────────────────────────────────────────────────────────────────────


class TransientError(MigrationError):
    """Falha transitória; a unidade de trabalho pode ser repetida."""


class RequestTimeoutError(TransientError):
    """Timeout de requisição."""


class MalformedResponseError(TransientError):
    """Resposta sem o formato esperado (JSON inválido ou schema divergente)."""


class RateLimitedError(TransientError):
    """Serviço sinalizou excesso de requisições (ou downloads esgotaram por timeout)."""


class ServerError(TransientError):
    """Erro 5xx do serviço remoto."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class AssetDownloadError(TransientError):
    """Download do payload falhou por motivo diferente de timeout."""


# ──────────────────────────────────────────────────────────────────────────────
# Fatais (abortam a operação)
# ──────────────────────────────────────────────────────────────────────────────


class FatalError(MigrationError):
    """Falha não recuperável para a operação em curso."""


class CredentialNotSetError(FatalError):
    """Credencial (.ROBLOSECURITY) ausente onde é obrigatória."""


class InvalidCredentialError(FatalError):
    """Credencial rejeitada pelo serviço (401)."""


class NetworkError(FatalError):
    """Falha de transporte que não é timeout (DNS, conexão recusada...)."""


class ApiRequestError(FatalError):
    """Erro de API não classificado em outra categoria."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class RetriesExhaustedError(FatalError):
    """Orçamento de tentativas esgotado; carrega a última causa."""

    def __init__(self, message: str, last_error: MigrationError) -> None:
        super().__init__(f"{message}: {last_error}")
        self.last_error = last_error


class HostingContextError(FatalError):
    """Base para falhas na descoberta do contexto de hospedagem (place)."""

    def __init__(self, message: str, asset_id: int) -> None:
        super().__init__(message)
        self.asset_id = asset_id


class OwnerNotFoundError(HostingContextError):
    """Asset sem criador identificável (nem usuário nem grupo)."""


class OwnerLookupError(HostingContextError):
    """Chamada de consulta do criador falhou."""


class NoHostedExperiencesError(HostingContextError):
    """Criador não possui experiências públicas listadas."""


# ──────────────────────────────────────────────────────────────────────────────
# Por item
# ──────────────────────────────────────────────────────────────────────────────


class PermissionDeniedError(MigrationError):
    """Item do lote exige contexto de hospedagem (403 por item)."""

    def __init__(self, message: str, item_id: str) -> None:
        super().__init__(message)
        self.item_id = item_id


class PublishNotAllowedError(MigrationError):
    """Credencial sem permissão para publicar sob o dono de destino."""


class SchedulerError(MigrationError):
    """Task do scheduler terminou fora do caminho normal de erro por item."""
