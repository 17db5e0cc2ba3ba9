"""aar-transform: Cached transformation of Android Libraries for native builds.

This package provides:
- TransformOrchestrator: Hash, deduplicate, cache and conflict-check archives
- TransformResultCache: Versioned, content-addressed cache of transform results
- AarTransformer: Default transformer exploding .aar files
- scan_project / scan_module: Discover archives in projects and modules
"""

from __future__ import annotations

__version__ = "0.1.0"

# Cache and storage
from aar_transform.cache import CACHE_DATA_VERSION, DATA_VERSION_KEY, TransformResultCache

# Error types
from aar_transform.errors import (
    AarTransformError,
    CacheIOError,
    ConfigurationError,
    InputReadError,
    LibraryConflictError,
    TransformFailedError,
)
from aar_transform.hashing import ContentHasher

# Models
from aar_transform.models import (
    BuildContext,
    BuildVariant,
    LibraryRecord,
    ModuleInfo,
    OriginType,
    TaskRef,
    TransformRequest,
    TransformResult,
    TransformRunResult,
)

# Orchestration
from aar_transform.orchestrator import TransformOrchestrator, transform_libraries
from aar_transform.registry import ConflictRegistry, DuplicateDetector
from aar_transform.scanner import load_module_manifest, scan_module, scan_project
from aar_transform.settings import AarTransformSettings
from aar_transform.store import JsonFileStore
from aar_transform.transformer import AarTransformer, ArchiveTransformer

__all__ = [
    "__version__",
    # Orchestration
    "TransformOrchestrator",
    "transform_libraries",
    "DuplicateDetector",
    "ConflictRegistry",
    # Cache
    "TransformResultCache",
    "JsonFileStore",
    "ContentHasher",
    "CACHE_DATA_VERSION",
    "DATA_VERSION_KEY",
    # Transformers
    "ArchiveTransformer",
    "AarTransformer",
    # Scanning
    "scan_project",
    "scan_module",
    "load_module_manifest",
    # Settings
    "AarTransformSettings",
    # Errors
    "AarTransformError",
    "ConfigurationError",
    "CacheIOError",
    "InputReadError",
    "TransformFailedError",
    "LibraryConflictError",
    # Models
    "OriginType",
    "BuildVariant",
    "TaskRef",
    "LibraryRecord",
    "TransformRequest",
    "TransformResult",
    "BuildContext",
    "ModuleInfo",
    "TransformRunResult",
]
