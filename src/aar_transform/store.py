"""JSON file backed key-value store.

The store reads its file once and then works in memory. Nothing reaches the
disk until persist() is called, which replaces the file atomically.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import structlog

from aar_transform.errors import CacheIOError

logger = structlog.get_logger(__name__)


class JsonFileStore:
    """Flat mapping of string keys to JSON values stored in a single file.

    Attributes:
        path: Backing file.

    Example:
        >>> store = JsonFileStore.load(Path("build/exploded-aar/state.json"))
        >>> store.set("data-version", "1")
        >>> store.persist()
    """

    def __init__(self, path: Path | str, data: dict[str, Any] | None = None) -> None:
        """Initialize the store without touching the disk.

        Args:
            path: Backing file.
            data: Initial contents.
        """
        self.path = Path(path)
        self._data: dict[str, Any] = dict(data or {})

    @classmethod
    def load(cls, path: Path | str) -> JsonFileStore:
        """Load a store from ``path``.

        A missing file yields an empty store. A file that cannot be read or
        does not hold a JSON object is deleted and also yields an empty store.
        If it cannot be deleted either, it is left in place.

        Args:
            path: Backing file.

        Returns:
            Loaded store.
        """
        path = Path(path)
        if not path.exists():
            return cls(path)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                msg = f"expected a JSON object, got {type(data).__name__}"
                raise ValueError(msg)
        except (OSError, ValueError) as e:
            logger.warning("cache_file_discarded", path=str(path), error=str(e))
            try:
                path.unlink(missing_ok=True)
            except OSError as unlink_error:
                logger.warning(
                    "cache_file_not_removed", path=str(path), error=str(unlink_error)
                )
            return cls(path)

        return cls(path, data)

    def get(self, key: str) -> Any | None:
        """Return the value stored under ``key`` or None."""
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` (in memory only)."""
        self._data[key] = value

    def has(self, key: str) -> bool:
        """Check whether ``key`` is present."""
        return key in self._data

    def keys(self) -> list[str]:
        """Return all keys in insertion order."""
        return list(self._data)

    def remove(self, key: str) -> None:
        """Remove ``key``; does nothing if it is absent."""
        self._data.pop(key, None)

    def clear(self) -> None:
        """Remove every entry (in memory only)."""
        self._data.clear()

    def persist(self) -> None:
        """Write the store to its backing file.

        Writes to a temporary file in the same directory, then renames it over
        the backing file, so a failed write never leaves a partial file behind.

        Raises:
            CacheIOError: If the file cannot be written.
        """
        content = json.dumps(self._data, indent=2, sort_keys=False)
        tmp_path: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent),
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise CacheIOError(str(self.path), internal_details=str(e)) from e

        logger.debug("cache_file_persisted", path=str(self.path), entries=len(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
