"""Testes do BatchMetadataResolver: lotes, retry e contexto de hospedagem."""

from __future__ import annotations

import pytest

from app.domain.asset import AssetType, MetadataRecord
from app.services.hosting_context import HostingContextCache, HostingContextResolver
from app.services.metadata_resolver import BatchMetadataResolver, chunk_ids
from config.settings import MigrationSettings
from tests.fakes.fake_roblox_services import (
    FakeExperienceDirectory,
    FakeMetadataService,
    FakeOwnerService,
    animation_record,
    denied_record,
)
from utils.errors import (
    ApiRequestError,
    InvalidCredentialError,
    MalformedResponseError,
    NoHostedExperiencesError,
    PermissionDeniedError,
    RateLimitedError,
    RequestTimeoutError,
    RetriesExhaustedError,
    ServerError,
)

FAST_SETTINGS = MigrationSettings(metadata_retry_delay_seconds=0.0)


def _build_resolver(
    service: FakeMetadataService,
    *,
    owners: FakeOwnerService | None = None,
    experiences: FakeExperienceDirectory | None = None,
    settings: MigrationSettings = FAST_SETTINGS,
) -> BatchMetadataResolver:
    contexts = HostingContextResolver(
        owners or FakeOwnerService(),
        experiences or FakeExperienceDirectory(),
    )
    return BatchMetadataResolver(service, contexts, settings=settings)


def _deny_first(denied_id: int):
    """Lote com ``denied_id`` negado enquanto não houver place anexado."""

    def step(ids, place_id):
        if place_id is None:
            return [
                denied_record(i) if i == denied_id else animation_record(i) for i in ids
            ]
        return [animation_record(i) for i in ids]

    return step


class TestChunkIds:
    def test_dedupes_and_sorts(self) -> None:
        assert chunk_ids([3, 1, 3, 2], 2) == [[1, 2], [3]]

    def test_empty_input(self) -> None:
        assert chunk_ids([], 250) == []

    def test_invalid_size_raises(self) -> None:
        with pytest.raises(ValueError):
            chunk_ids([1], 0)


class TestResolveChunking:
    """Particionamento em lotes de 250."""

    @pytest.mark.asyncio
    async def test_one_call_per_chunk(self) -> None:
        """600 ids únicos → 3 chamadas, nenhuma acima de 250."""
        service = FakeMetadataService()
        resolver = _build_resolver(service)

        records = await resolver.resolve(range(1, 601))

        assert len(service.calls) == 3
        assert [len(call[0]) for call in service.calls] == [250, 250, 100]
        assert len(records) == 600

    @pytest.mark.asyncio
    async def test_empty_input_makes_no_calls(self) -> None:
        service = FakeMetadataService()
        resolver = _build_resolver(service)

        assert await resolver.resolve([]) == []
        assert service.calls == []

    @pytest.mark.asyncio
    async def test_filters_to_target_type(self) -> None:
        """Somente animações saem da resolução."""

        def mixed(ids, place_id):
            return [
                MetadataRecord(request_id="1", asset_type=AssetType.AUDIO),
                animation_record(2),
                MetadataRecord(request_id="3", asset_type=AssetType.UNKNOWN),
            ]

        resolver = _build_resolver(FakeMetadataService([mixed]))

        records = await resolver.resolve([1, 2, 3])

        assert [r.request_id for r in records] == ["2"]


class TestResolveRetry:
    """Política de retry por lote."""

    @pytest.mark.asyncio
    async def test_timeout_escalates_per_attempt(self) -> None:
        """Timeouts sucessivos: 3s, 4s, 5s..."""
        service = FakeMetadataService(
            [RequestTimeoutError("t1"), RequestTimeoutError("t2")]
        )
        resolver = _build_resolver(service)

        records = await resolver.resolve([10])

        assert [call[2] for call in service.calls] == [3.0, 4.0, 5.0]
        assert [r.request_id for r in records] == ["10"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            RequestTimeoutError("timeout"),
            MalformedResponseError("json"),
            RateLimitedError("429"),
            ServerError("503", status_code=503),
        ],
    )
    async def test_transient_errors_are_retried(self, error) -> None:
        service = FakeMetadataService([error])
        resolver = _build_resolver(service)

        records = await resolver.resolve([1])

        assert len(service.calls) == 2
        assert len(records) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [InvalidCredentialError("401"), ApiRequestError("400", status_code=400)],
    )
    async def test_fatal_errors_abort_without_retry(self, error) -> None:
        service = FakeMetadataService([error])
        resolver = _build_resolver(service)

        with pytest.raises(type(error)):
            await resolver.resolve([1])
        assert len(service.calls) == 1

    @pytest.mark.asyncio
    async def test_exhausted_budget_wraps_last_error(self) -> None:
        """9 tentativas falhas → RetriesExhaustedError com a última causa."""
        errors = [RequestTimeoutError(f"t{i}") for i in range(9)]
        service = FakeMetadataService(errors)
        resolver = _build_resolver(service)

        with pytest.raises(RetriesExhaustedError) as exc_info:
            await resolver.resolve([1])

        assert len(service.calls) == 9
        assert service.calls[-1][2] == 11.0
        assert exc_info.value.last_error is errors[-1]

    @pytest.mark.asyncio
    async def test_retry_pause_is_not_applied_after_last_attempt(self, monkeypatch) -> None:
        sleeps: list[float] = []

        async def fake_sleep(delay: float) -> None:
            sleeps.append(delay)

        monkeypatch.setattr("app.services.metadata_resolver.asyncio.sleep", fake_sleep)
        settings = MigrationSettings(metadata_max_attempts=3)
        service = FakeMetadataService([RateLimitedError("429") for _ in range(3)])
        resolver = _build_resolver(service, settings=settings)

        with pytest.raises(RetriesExhaustedError):
            await resolver.resolve([1])

        assert sleeps == [2.0, 2.0]


class TestResolvePermissionDenied:
    """Itens negados com 403 dentro do lote."""

    @pytest.mark.asyncio
    async def test_denied_chunk_is_retried_with_place_id(self) -> None:
        """600 ids, item 300 negado → 3 lotes + 1 reenvio do lote 2."""
        service = FakeMetadataService(
            [
                lambda ids, place_id: [animation_record(i) for i in ids],
                _deny_first(300),
            ]
        )
        owners = FakeOwnerService()
        experiences = FakeExperienceDirectory(place_ids=[777, 888])
        resolver = _build_resolver(service, owners=owners, experiences=experiences)
        cache = HostingContextCache()

        records = await resolver.resolve(range(1, 601), cache)

        assert len(service.calls) == 4
        assert service.calls[1][1] is None
        assert service.calls[2] == (list(range(251, 501)), 777, 4.0)
        assert len(records) == 600
        assert cache.get("300") == 777
        assert owners.calls == [300]

    @pytest.mark.asyncio
    async def test_denied_items_are_never_returned(self) -> None:
        """Lote com item negado não contribui com registros parciais."""
        service = FakeMetadataService(
            [_deny_first(2)] + [lambda ids, place_id: [denied_record(2)]] * 8
        )
        resolver = _build_resolver(service)

        with pytest.raises(RetriesExhaustedError) as exc_info:
            await resolver.resolve([1, 2])

        assert len(service.calls) == 9
        assert isinstance(exc_info.value.last_error, PermissionDeniedError)

    @pytest.mark.asyncio
    async def test_cached_context_skips_discovery(self) -> None:
        owners = FakeOwnerService()
        service = FakeMetadataService([_deny_first(5)])
        resolver = _build_resolver(service, owners=owners)
        cache = HostingContextCache({"5": 4242})

        await resolver.resolve([5], cache)

        assert owners.calls == []
        assert service.calls[1][1] == 4242

    @pytest.mark.asyncio
    async def test_context_failure_is_fatal(self) -> None:
        service = FakeMetadataService([_deny_first(5)])
        resolver = _build_resolver(
            service, experiences=FakeExperienceDirectory(place_ids=[])
        )

        with pytest.raises(NoHostedExperiencesError):
            await resolver.resolve([5])
        assert len(service.calls) == 1

    @pytest.mark.asyncio
    async def test_non_numeric_denied_request_id_consumes_attempt(self) -> None:
        def bad_id(ids, place_id):
            return [MetadataRecord(request_id="abc", error_code=403)]

        service = FakeMetadataService([bad_id])
        owners = FakeOwnerService()
        resolver = _build_resolver(service, owners=owners)

        records = await resolver.resolve([1])

        assert len(service.calls) == 2
        assert owners.calls == []
        assert [r.request_id for r in records] == ["1"]
