"""Data models for aar-transform.

This module defines:
- OriginType / BuildVariant: where a library comes from and what is being built
- TaskRef: One input archive to transform
- LibraryRecord: The cached result of transforming one archive
- TransformRequest / TransformResult: Contract with the archive transformer
- BuildContext: Build directories of the host build
- ModuleInfo: A native module that may ship archives in its lib folder
- TransformRunResult: Aggregated outcome of one orchestration run

Version History of the cached LibraryRecord shape (see CACHE_DATA_VERSION):
- 1: Initial release
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Directory below the build intermediates dir holding exploded archives
DEFAULT_OUTPUT_DIR_NAME = "exploded-aar"


class OriginType(str, Enum):
    """Provenance of an input archive.

    Attributes:
        CORE: Bundled with the SDK.
        MODULE: Shipped in a native module's lib folder.
        PROJECT: Supplied directly by the project.
    """

    CORE = "Core"
    MODULE = "Module"
    PROJECT = "Project"


class BuildVariant(str, Enum):
    """Kind of build the transform runs for.

    Attributes:
        APP: Application build, assets are copied into the app's assets dir.
        MODULE: Module build, jars become class path entries and shared
            libraries are copied into the module's jni dir.
    """

    APP = "App"
    MODULE = "Module"


class TaskRef(BaseModel):
    """One archive to transform and where it came from.

    Only used for diagnostics; the origin never changes how an archive is
    processed.

    Attributes:
        input_path: Path to the .aar file.
        origin_type: Provenance of the archive.
        module_id: Id of the module shipping the archive (Module origin only).

    Example:
        >>> task = TaskRef(
        ...     input_path="modules/android/ti.map/lib/gms.aar",
        ...     origin_type=OriginType.MODULE,
        ...     module_id="ti.map",
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    input_path: str = Field(..., min_length=1, description="Path to the .aar file")
    origin_type: OriginType = Field(..., description="Provenance of the archive")
    module_id: str | None = Field(
        default=None,
        description="Id of the module shipping the archive",
    )

    @model_validator(mode="after")
    def module_origin_requires_id(self) -> TaskRef:
        """Validate that Module origins carry a module id."""
        if self.origin_type is OriginType.MODULE and not self.module_id:
            msg = "module_id is required when origin_type is 'Module'"
            raise ValueError(msg)
        return self


class LibraryRecord(BaseModel):
    """Result of transforming one archive, as stored in the cache.

    Changing the shape of this model requires bumping CACHE_DATA_VERSION in
    aar_transform.cache so old entries are discarded.

    Attributes:
        package_name: Package name declared in the archive's manifest.
        exploded_path: Directory the archive was extracted into.
        jars: Jar files of the library, classes.jar first.
        native_libraries: Shared libraries (.so) of the library.
        digest: Content digest of the archive.
        task: The input the record was produced from.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    package_name: str = Field(..., min_length=1, description="Declared package name")
    exploded_path: str = Field(..., min_length=1, description="Extraction directory")
    jars: list[str] = Field(default_factory=list, description="Jar files")
    native_libraries: list[str] = Field(default_factory=list, description="Shared libraries")
    digest: str = Field(..., min_length=1, description="Content digest of the archive")
    task: TaskRef = Field(..., description="Input the record was produced from")


class TransformRequest(BaseModel):
    """Arguments passed to an archive transformer.

    Attributes:
        aar_path: Path to the .aar file.
        output_path: Base directory for exploded archives.
        assets_destination_path: Where to copy assets (App builds).
        shared_library_destination_path: Where to copy .so files (Module builds).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    aar_path: str = Field(..., min_length=1)
    output_path: str = Field(..., min_length=1)
    assets_destination_path: str | None = None
    shared_library_destination_path: str | None = None


class TransformResult(BaseModel):
    """What an archive transformer reports back.

    Transformers must report the same package_name for identical archive
    bytes and must recreate exploded_path when invoked again.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    package_name: str = Field(..., min_length=1)
    exploded_path: str = Field(..., min_length=1)
    jars: list[str] = Field(default_factory=list)
    native_libraries: list[str] = Field(default_factory=list)


class BuildContext(BaseModel):
    """Build directories provided by the host build.

    Attributes:
        build_intermediates_dir: Intermediates directory of the build; the
            exploded archives and the cache file live below it.
        assets_destination_path: App assets directory (App builds).
        shared_library_destination_path: Generated jni directory (Module builds).
        output_dir_name: Name of the exploded archive directory.

    Example:
        >>> context = BuildContext(build_intermediates_dir="build/android/intermediates")
        >>> context.output_dir
        PosixPath('build/android/intermediates/exploded-aar')
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    build_intermediates_dir: str = Field(..., min_length=1)
    assets_destination_path: str | None = None
    shared_library_destination_path: str | None = None
    output_dir_name: str = Field(default=DEFAULT_OUTPUT_DIR_NAME, min_length=1)

    @property
    def output_dir(self) -> Path:
        """Directory holding exploded archives and the cache file."""
        return Path(self.build_intermediates_dir) / self.output_dir_name


class ModuleInfo(BaseModel):
    """A native module used by a project."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1, description="Module id, e.g. ti.map")
    path: str = Field(..., min_length=1, description="Module root directory")


class TransformRunResult(BaseModel):
    """Outcome of one orchestration run.

    Attributes:
        libraries: Accepted libraries in input order.
        class_paths: Jar paths to add to the class path (Module builds only).
        skipped: Inputs elided as byte-identical duplicates.
        reused: Inputs served from the cache.
        transformed: Inputs that were transformed.
        pruned: Cache keys removed because their input is gone.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    libraries: list[LibraryRecord] = Field(default_factory=list)
    class_paths: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    reused: list[str] = Field(default_factory=list)
    transformed: list[str] = Field(default_factory=list)
    pruned: list[str] = Field(default_factory=list)
