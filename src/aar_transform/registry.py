"""Run-scoped registries for duplicate and conflict detection.

Both registries live for a single orchestration run and are never persisted.
"""

from __future__ import annotations

from aar_transform.errors import LibraryConflictError
from aar_transform.models import LibraryRecord


class DuplicateDetector:
    """Remembers the archive digests accepted during a run.

    A later input with an already seen digest is byte-identical and can be
    skipped without transforming it.
    """

    def __init__(self) -> None:
        self._by_digest: dict[str, LibraryRecord] = {}

    def seen(self, digest: str) -> LibraryRecord | None:
        """Return the record already accepted for ``digest``, if any."""
        return self._by_digest.get(digest)

    def register(self, record: LibraryRecord) -> None:
        self._by_digest[record.digest] = record

    def digests(self) -> list[str]:
        """Digests accepted so far, in input order."""
        return list(self._by_digest)


class ConflictRegistry:
    """Ensures every accepted library uses a unique package name.

    The first library claiming a package name wins. Any later library with the
    same name but different contents is a hard failure.
    """

    def __init__(self) -> None:
        self._by_package: dict[str, LibraryRecord] = {}

    def check(self, record: LibraryRecord) -> None:
        """Verify ``record`` does not collide with an accepted library.

        Raises:
            LibraryConflictError: If a different library holds the package name.
        """
        existing = self._by_package.get(record.package_name)
        if existing is not None and existing.digest != record.digest:
            raise LibraryConflictError(record.package_name, existing, record)

    def register(self, record: LibraryRecord) -> None:
        self._by_package[record.package_name] = record

    def get(self, package_name: str) -> LibraryRecord | None:
        return self._by_package.get(package_name)
