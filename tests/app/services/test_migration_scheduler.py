"""Testes do MigrationScheduler: concorrência, retry de upload e isolamento."""

from __future__ import annotations

import pytest

from app.domain.asset import AssetType
from app.services.migration_scheduler import MigrationScheduler
from config.settings import MigrationSettings
from tests.fakes.fake_roblox_services import (
    FakeDownloader,
    FakeUploader,
    InFlightGauge,
    animation_record,
)
from utils.errors import (
    AssetDownloadError,
    InvalidCredentialError,
    PublishNotAllowedError,
    RateLimitedError,
    SchedulerError,
    ServerError,
)

FAST_SETTINGS = MigrationSettings(upload_retry_delay_seconds=0.0)


def _payload(asset_id: int) -> bytes:
    return f"https://cdn.test/{asset_id}".encode()


class TestSchedulerConcurrency:
    @pytest.mark.asyncio
    async def test_never_exceeds_concurrency_limit(self) -> None:
        """10 itens com limite 2 → no máximo 2 downloads simultâneos."""
        downloader = FakeDownloader(delay_seconds=0.01)
        scheduler = MigrationScheduler(downloader, FakeUploader(), settings=FAST_SETTINGS)
        records = [animation_record(i) for i in range(1, 11)]

        result = await scheduler.migrate(records, concurrency_limit=2)

        assert downloader.max_in_flight == 2
        assert len(result.mapping) == 10
        assert not result.has_errors

    @pytest.mark.asyncio
    async def test_slot_covers_download_and_upload(self) -> None:
        """Downloads + uploads em voo nunca passam do limite."""
        gauge = InFlightGauge()
        downloader = FakeDownloader(delay_seconds=0.01, gauge=gauge)
        uploader = FakeUploader(delay_seconds=0.01, gauge=gauge)
        scheduler = MigrationScheduler(downloader, uploader, settings=FAST_SETTINGS)

        result = await scheduler.migrate(
            [animation_record(i) for i in range(1, 11)], concurrency_limit=2
        )

        assert gauge.peak == 2
        assert gauge.current == 0
        assert len(result.mapping) == 10

    @pytest.mark.asyncio
    async def test_reports_progress_for_every_item(self, monkeypatch) -> None:
        """Aviso de progresso (atual/total) uma vez por item agendado."""
        notices: list[tuple[str, int, int]] = []
        monkeypatch.setattr(
            "app.services.migration_scheduler.record_progress",
            lambda component, current, total: notices.append((component, current, total)),
        )
        scheduler = MigrationScheduler(FakeDownloader(), FakeUploader(), settings=FAST_SETTINGS)
        records = [animation_record(i) for i in range(1, 6)] + [animation_record(6, location="")]

        await scheduler.run(records, concurrency_limit=2)

        assert sorted(current for _, current, _ in notices) == [1, 2, 3, 4, 5]
        assert {(component, total) for component, _, total in notices} == {
            ("migration_scheduler", 5)
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1, 1001])
    async def test_invalid_limit_raises(self, limit: int) -> None:
        scheduler = MigrationScheduler(FakeDownloader(), FakeUploader())

        with pytest.raises(ValueError):
            await scheduler.run([animation_record(1)], concurrency_limit=limit)

    @pytest.mark.asyncio
    async def test_uses_settings_limit_by_default(self) -> None:
        downloader = FakeDownloader(delay_seconds=0.01)
        settings = MigrationSettings(concurrency_limit=3, upload_retry_delay_seconds=0.0)
        scheduler = MigrationScheduler(downloader, FakeUploader(), settings=settings)

        await scheduler.run([animation_record(i) for i in range(8)])

        assert downloader.max_in_flight == 3


class TestSchedulerItems:
    @pytest.mark.asyncio
    async def test_records_without_location_are_skipped(self) -> None:
        downloader = FakeDownloader()
        scheduler = MigrationScheduler(downloader, FakeUploader(), settings=FAST_SETTINGS)

        outcomes = await scheduler.run([animation_record(1, location=""), animation_record(2)])

        assert [o.request_id for o in outcomes] == ["2"]
        assert downloader.calls == ["https://cdn.test/2"]

    @pytest.mark.asyncio
    async def test_download_failure_is_isolated(self) -> None:
        error = RateLimitedError("cdn")
        downloader = FakeDownloader(failures={"https://cdn.test/2": error})
        uploader = FakeUploader()
        scheduler = MigrationScheduler(downloader, uploader, settings=FAST_SETTINGS)

        result = await scheduler.migrate([animation_record(i) for i in (1, 2, 3)])

        assert set(result.mapping) == {"1", "3"}
        assert [(f.request_id, f.error) for f in result.errors] == [("2", error)]
        assert uploader.attempts_for(_payload(2)) == 0

    @pytest.mark.asyncio
    async def test_passes_type_and_group_to_uploader(self) -> None:
        uploader = FakeUploader()
        scheduler = MigrationScheduler(FakeDownloader(), uploader, settings=FAST_SETTINGS)

        await scheduler.migrate([animation_record(1)], destination_group_id=321)

        assert uploader.calls == [(_payload(1), AssetType.ANIMATION, 321)]

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_scheduler_error(self) -> None:
        class BrokenDownloader:
            async def download(self, url: str) -> bytes:
                raise KeyError(url)

        scheduler = MigrationScheduler(BrokenDownloader(), FakeUploader())

        result = await scheduler.migrate([animation_record(1), animation_record(2)])

        assert result.mapping == {}
        assert {f.request_id for f in result.errors} == {"1", "2"}
        assert all(isinstance(f.error, SchedulerError) for f in result.errors)


class TestSchedulerUploadRetry:
    @pytest.mark.asyncio
    async def test_upload_retried_until_success(self) -> None:
        """Item 77 falha duas vezes e passa na terceira tentativa."""
        uploader = FakeUploader(
            failures={_payload(77): [ServerError("502", status_code=502)] * 2}
        )
        scheduler = MigrationScheduler(FakeDownloader(), uploader, settings=FAST_SETTINGS)

        result = await scheduler.migrate([animation_record(77)])

        assert uploader.attempts_for(_payload(77)) == 3
        assert "77" in result.mapping
        assert not result.has_errors

    @pytest.mark.asyncio
    async def test_upload_exhaustion_reports_last_error(self, monkeypatch) -> None:
        sleeps: list[float] = []

        async def fake_sleep(delay: float) -> None:
            sleeps.append(delay)

        monkeypatch.setattr("app.services.migration_scheduler.asyncio.sleep", fake_sleep)
        errors = [AssetDownloadError(f"e{i}") for i in range(5)]
        uploader = FakeUploader(failures={_payload(1): list(errors)})
        scheduler = MigrationScheduler(FakeDownloader(), uploader)

        result = await scheduler.migrate([animation_record(1)])

        assert uploader.attempts_for(_payload(1)) == 5
        assert result.errors[0].error is errors[-1]
        assert sleeps == [1.0] * 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error", [PublishNotAllowedError("403"), InvalidCredentialError("401")]
    )
    async def test_non_retryable_upload_errors(self, error) -> None:
        uploader = FakeUploader(failures={_payload(1): [error]})
        scheduler = MigrationScheduler(FakeDownloader(), uploader, settings=FAST_SETTINGS)

        result = await scheduler.migrate([animation_record(1)])

        assert uploader.attempts_for(_payload(1)) == 1
        assert result.errors[0].error is error
