"""Versioned cache of archive transform results.

Wraps a JsonFileStore. Every key except the reserved DATA_VERSION_KEY is the
content digest of an archive and maps to a serialized LibraryRecord.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from aar_transform.models import LibraryRecord
from aar_transform.store import JsonFileStore

if TYPE_CHECKING:
    from aar_transform.settings import AarTransformSettings

logger = structlog.get_logger(__name__)

DATA_VERSION_KEY = "data-version"

# Identifies the shape of LibraryRecord. Bump on every change to that model,
# otherwise stale entries would be handed to the build.
CACHE_DATA_VERSION = "1"


class TransformResultCache:
    """Transform results keyed by archive digest.

    On construction the stored data version is compared with ``data_version``;
    a mismatch drops every entry. The current version is then recorded.

    Attributes:
        store: Underlying key-value store.
        data_version: Version tag of the record shape.

    Example:
        >>> cache = TransformResultCache(JsonFileStore.load(path))
        >>> record = cache.get_record(digest)
        >>> if record is None:
        ...     cache.put_record(new_record)
        >>> cache.persist()
    """

    def __init__(self, store: JsonFileStore, data_version: str = CACHE_DATA_VERSION) -> None:
        """Initialize the cache and apply the version check.

        Args:
            store: Loaded key-value store.
            data_version: Version tag of the current record shape.
        """
        self.store = store
        self.data_version = data_version
        self._log = logger.bind(component="transform_cache", path=str(store.path))

        if store.has(DATA_VERSION_KEY):
            stored_version = store.get(DATA_VERSION_KEY)
            if stored_version != data_version:
                self._log.info(
                    "cache_version_mismatch",
                    stored_version=stored_version,
                    current_version=data_version,
                )
                store.clear()
        store.set(DATA_VERSION_KEY, data_version)

    @classmethod
    def for_output_dir(
        cls,
        output_dir: Path | str,
        settings: AarTransformSettings,
    ) -> TransformResultCache:
        """Open the cache file inside ``output_dir``."""
        return cls(JsonFileStore.load(Path(output_dir) / settings.cache_file_name))

    def get_record(self, digest: str) -> LibraryRecord | None:
        """Return the cached record for ``digest``.

        Entries that do not validate as LibraryRecord count as a miss.
        """
        raw = self.store.get(digest)
        if raw is None:
            return None
        try:
            return LibraryRecord.model_validate(raw)
        except ValidationError as e:
            self._log.warning("cache_entry_invalid", digest=digest, errors=e.error_count())
            return None

    def put_record(self, record: LibraryRecord) -> None:
        """Store ``record`` under its digest."""
        self.store.set(record.digest, record.model_dump(mode="json"))

    def has(self, key: str) -> bool:
        return self.store.has(key)

    def remove(self, key: str) -> None:
        self.store.remove(key)

    def digest_keys(self) -> list[str]:
        """Return every key except the reserved version key."""
        return [key for key in self.store.keys() if key != DATA_VERSION_KEY]

    def prune(self, keep: Iterable[str]) -> list[str]:
        """Remove every digest entry not listed in ``keep``.

        The version key is never removed.

        Returns:
            Removed keys.
        """
        keep_set = set(keep)
        unused = [key for key in self.digest_keys() if key not in keep_set]
        for key in unused:
            self.store.remove(key)
        if unused:
            self._log.debug("cache_entries_pruned", count=len(unused))
        return unused

    def clear(self) -> None:
        """Drop every digest entry, keeping the version key."""
        self.store.clear()
        self.store.set(DATA_VERSION_KEY, self.data_version)

    def persist(self) -> None:
        self.store.persist()
