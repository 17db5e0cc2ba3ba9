"""Content digests for input archives."""

from __future__ import annotations

import hashlib
from pathlib import Path

from aar_transform.errors import ConfigurationError, InputReadError
from aar_transform.settings import SUPPORTED_HASH_ALGORITHMS

DEFAULT_CHUNK_SIZE = 64 * 1024


class ContentHasher:
    """Compute hex digests of files, streaming them in chunks.

    Identical bytes always produce the identical digest.

    Example:
        >>> hasher = ContentHasher()
        >>> hasher.digest("platform/android/gms.aar")
        'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """

    def __init__(self, algorithm: str = "sha256", chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """Initialize the hasher.

        Args:
            algorithm: One of SUPPORTED_HASH_ALGORITHMS.
            chunk_size: Bytes read per step.

        Raises:
            ConfigurationError: If the algorithm is not supported.
        """
        if algorithm not in SUPPORTED_HASH_ALGORITHMS:
            raise ConfigurationError(
                f"Unsupported hash algorithm '{algorithm}'. "
                f"Available: {', '.join(SUPPORTED_HASH_ALGORITHMS)}"
            )
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def digest(self, path: Path | str) -> str:
        """Return the hex digest of the file at ``path``.

        Raises:
            InputReadError: If the file cannot be read to completion.
        """
        hasher = hashlib.new(self.algorithm)
        try:
            with open(path, "rb") as handle:
                for chunk in iter(lambda: handle.read(self.chunk_size), b""):
                    hasher.update(chunk)
        except OSError as e:
            raise InputReadError(str(path), internal_details=str(e)) from e
        return hasher.hexdigest()
