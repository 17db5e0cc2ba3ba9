"""Unit tests for duplicate and conflict registries."""

from __future__ import annotations

import pytest

from aar_transform.errors import LibraryConflictError
from aar_transform.models import LibraryRecord, OriginType, TaskRef
from aar_transform.registry import ConflictRegistry, DuplicateDetector


def _record(digest: str, package_name: str, input_path: str | None = None) -> LibraryRecord:
    return LibraryRecord(
        package_name=package_name,
        exploded_path=f"/build/exploded-aar/{digest}",
        digest=digest,
        task=TaskRef(
            input_path=input_path or f"/project/{digest}.aar",
            origin_type=OriginType.PROJECT,
        ),
    )


class TestDuplicateDetector:
    """Tests for DuplicateDetector."""

    def test_unknown_digest_is_not_seen(self) -> None:
        assert DuplicateDetector().seen("abc") is None

    def test_registered_digest_is_seen(self) -> None:
        detector = DuplicateDetector()
        record = _record("abc", "com.example.a")

        detector.register(record)

        assert detector.seen("abc") is record

    def test_digests_in_registration_order(self) -> None:
        detector = DuplicateDetector()
        for digest in ["c", "a", "b"]:
            detector.register(_record(digest, f"com.example.{digest}"))

        assert detector.digests() == ["c", "a", "b"]


class TestConflictRegistry:
    """Tests for ConflictRegistry."""

    def test_unique_package_names_pass(self) -> None:
        registry = ConflictRegistry()
        registry.register(_record("abc", "com.example.a"))

        registry.check(_record("def", "com.example.b"))

    def test_same_digest_same_package_passes(self) -> None:
        """Re-checking the accepted library itself is not a conflict."""
        registry = ConflictRegistry()
        record = _record("abc", "com.example.a")
        registry.register(record)

        registry.check(_record("abc", "com.example.a", input_path="/other/a.aar"))

    def test_different_digest_same_package_raises(self) -> None:
        registry = ConflictRegistry()
        existing = _record("abc", "com.example.a")
        incoming = _record("def", "com.example.a")
        registry.register(existing)

        with pytest.raises(LibraryConflictError) as exc_info:
            registry.check(incoming)

        assert exc_info.value.package_name == "com.example.a"
        assert exc_info.value.existing is existing
        assert exc_info.value.incoming is incoming

    def test_check_does_not_register(self) -> None:
        registry = ConflictRegistry()
        registry.check(_record("abc", "com.example.a"))

        assert registry.get("com.example.a") is None

    def test_first_registration_wins(self) -> None:
        registry = ConflictRegistry()
        first = _record("abc", "com.example.a")
        registry.register(first)

        assert registry.get("com.example.a") is first
