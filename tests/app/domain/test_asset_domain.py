"""Testes dos tipos de domínio de assets."""

from __future__ import annotations

import pytest

from app.domain.asset import (
    AssetType,
    MetadataRecord,
    MigrationFailure,
    MigrationOutcome,
)
from utils.errors import RateLimitedError


class TestAssetType:
    def test_from_type_id(self) -> None:
        assert AssetType.from_type_id(24) is AssetType.ANIMATION
        assert AssetType.from_type_id(9999) is AssetType.UNKNOWN
        assert AssetType.from_type_id(None) is AssetType.UNKNOWN

    def test_from_name_is_case_insensitive(self) -> None:
        assert AssetType.from_name("animation") is AssetType.ANIMATION
        assert AssetType.from_name("TShirt") is AssetType.TSHIRT

    def test_from_name_unknown(self) -> None:
        with pytest.raises(ValueError):
            AssetType.from_name("Hologram")

    def test_api_name(self) -> None:
        assert AssetType.ANIMATION.api_name == "Animation"
        assert AssetType.TSHIRT.api_name == "TShirt"


class TestMetadataRecord:
    def test_first_location_is_authoritative(self) -> None:
        record = MetadataRecord("1", AssetType.ANIMATION, ("a", "b"))
        assert record.download_location == "a"

    def test_without_location(self) -> None:
        assert MetadataRecord("1").download_location is None

    def test_permission_denied(self) -> None:
        assert MetadataRecord("1", error_code=403).is_permission_denied
        assert not MetadataRecord("1", error_code=404).is_permission_denied


def test_failure_reason_is_error_class_name() -> None:
    assert MigrationFailure("1", RateLimitedError("x")).reason == "RateLimitedError"


class TestMigrationOutcome:
    def test_success_requires_new_id_and_no_error(self) -> None:
        assert MigrationOutcome.succeeded("1", 10).is_success
        assert not MigrationOutcome.failed("1", RateLimitedError("x")).is_success
        assert not MigrationOutcome("1").is_success
