"""Runtime settings for aar-transform.

Settings are read from environment variables with the AAR_TRANSFORM_ prefix
(or a .env file) and can be overridden explicitly.
"""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from aar_transform.models import DEFAULT_OUTPUT_DIR_NAME

# Digest algorithms with at least 160 bits of output
HashAlgorithm = Literal["sha1", "sha256", "sha512"]
SUPPORTED_HASH_ALGORITHMS: tuple[str, ...] = get_args(HashAlgorithm)


class AarTransformSettings(BaseSettings):
    """Configuration for the transform orchestrator.

    Attributes:
        hash_algorithm: Digest used to identify archives and key the cache.
        chunk_size: Bytes read per step while hashing.
        output_dir_name: Directory below the intermediates dir for exploded archives.
        cache_file_name: Name of the cache file inside the output directory.
        strict_reuse: Also require the digest and all jars of a cached record
            to match before reusing it.
        log_level: Minimum log level.
        json_logs: Render logs as JSON instead of console output.

    Example:
        >>> # From environment
        >>> settings = AarTransformSettings()
        >>>
        >>> # Explicit
        >>> settings = AarTransformSettings(hash_algorithm="sha1", strict_reuse=True)
    """

    model_config = SettingsConfigDict(
        env_prefix="AAR_TRANSFORM_",
        env_file=".env",
        extra="ignore",
    )

    hash_algorithm: HashAlgorithm = Field(
        default="sha256",
        description="Digest algorithm for archive contents",
    )
    chunk_size: int = Field(
        default=64 * 1024,
        ge=1024,
        le=16 * 1024 * 1024,
        description="Bytes read per step while hashing",
    )
    output_dir_name: str = Field(
        default=DEFAULT_OUTPUT_DIR_NAME,
        min_length=1,
        description="Directory for exploded archives",
    )
    cache_file_name: str = Field(
        default="state.json",
        min_length=1,
        description="Cache file inside the output directory",
    )
    strict_reuse: bool = Field(
        default=False,
        description="Verify digest and jars before reusing a cached record",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum log level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )
