"""Transform orchestrator.

Drives the per-archive pipeline for one build:

    hash -> duplicate check -> cache lookup or transform -> conflict check -> commit

Archives are processed strictly one after another in input order. Duplicate
and conflict detection depend on what earlier archives registered, so the
order decides which archive wins. The cache is persisted once, after every
archive succeeded; a failing run leaves the previous cache file untouched.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog

from aar_transform.cache import TransformResultCache
from aar_transform.errors import AarTransformError, TransformFailedError
from aar_transform.hashing import ContentHasher
from aar_transform.models import (
    BuildContext,
    BuildVariant,
    LibraryRecord,
    TaskRef,
    TransformRequest,
    TransformRunResult,
)
from aar_transform.registry import ConflictRegistry, DuplicateDetector
from aar_transform.settings import AarTransformSettings
from aar_transform.transformer import AarTransformer, ArchiveTransformer

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Skipped:
    """The archive is byte-identical to one accepted earlier in the run."""

    duplicate_of: LibraryRecord


@dataclass(frozen=True)
class Processed:
    """The archive produced a record, from the cache or a fresh transform."""

    record: LibraryRecord
    reused: bool


TaskOutcome = Skipped | Processed


class _RunState:
    """Mutable state of a single run; discarded when the run ends."""

    def __init__(self, cache: TransformResultCache) -> None:
        self.cache = cache
        self.duplicates = DuplicateDetector()
        self.conflicts = ConflictRegistry()
        self.libraries: list[LibraryRecord] = []
        self.class_paths: dict[str, None] = {}
        self.skipped: list[str] = []
        self.reused: list[str] = []
        self.transformed: list[str] = []


class TransformOrchestrator:
    """Transform a build's Android Libraries with caching and conflict checks.

    An instance holds no state between runs and can be reused.

    Attributes:
        context: Build directories.
        transformer: Archive transformer invoked on cache misses.
        settings: Runtime settings.

    Example:
        >>> context = BuildContext(build_intermediates_dir="build/android/intermediates")
        >>> orchestrator = TransformOrchestrator(context, AarTransformer())
        >>> result = orchestrator.run(tasks, BuildVariant.APP)
        >>> [library.package_name for library in result.libraries]
        ['com.google.android.gms']
    """

    def __init__(
        self,
        context: BuildContext,
        transformer: ArchiveTransformer,
        settings: AarTransformSettings | None = None,
        hasher: ContentHasher | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            context: Build directories of the host build.
            transformer: Archive transformer invoked on cache misses.
            settings: Runtime settings. Loaded from the environment if None.
            hasher: Content hasher. Built from settings if None.
        """
        self.context = context
        self.transformer = transformer
        self.settings = settings or AarTransformSettings()
        self.hasher = hasher or ContentHasher(
            algorithm=self.settings.hash_algorithm,
            chunk_size=self.settings.chunk_size,
        )
        self._log = logger.bind(component="transform_orchestrator")

    def run(self, tasks: Sequence[TaskRef], variant: BuildVariant) -> TransformRunResult:
        """Transform all archives in ``tasks`` for the given build variant.

        Args:
            tasks: Archives in declared order.
            variant: Kind of build.

        Returns:
            Accepted libraries plus bookkeeping about skipped, reused and
            transformed archives.

        Raises:
            InputReadError: If an archive cannot be read.
            TransformFailedError: If transforming an archive fails.
            LibraryConflictError: If two libraries declare the same package name.
            CacheIOError: If the cache cannot be written at the end of the run.
        """
        if not tasks:
            self._log.debug("no_libraries_to_transform")
            return TransformRunResult()

        start_time = time.monotonic()
        self._log.info("transform_started", tasks=len(tasks), variant=variant.value)

        cache = TransformResultCache.for_output_dir(self.context.output_dir, self.settings)
        state = _RunState(cache)

        for task in tasks:
            outcome = self._process_task(task, variant, state)
            if isinstance(outcome, Skipped):
                state.skipped.append(task.input_path)
                continue
            self._commit(outcome, variant, state)

        pruned = cache.prune(state.duplicates.digests())
        cache.persist()

        self._log.info(
            "transform_completed",
            libraries=len(state.libraries),
            transformed=len(state.transformed),
            reused=len(state.reused),
            skipped=len(state.skipped),
            pruned=len(pruned),
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )

        return TransformRunResult(
            libraries=state.libraries,
            class_paths=list(state.class_paths),
            skipped=state.skipped,
            reused=state.reused,
            transformed=state.transformed,
            pruned=pruned,
        )

    def _process_task(
        self,
        task: TaskRef,
        variant: BuildVariant,
        state: _RunState,
    ) -> TaskOutcome:
        """Hash one archive and resolve it to a record, or skip it."""
        digest = self.hasher.digest(task.input_path)

        duplicate_of = state.duplicates.seen(digest)
        if duplicate_of is not None:
            self._log.debug(
                "library_skipped_duplicate",
                input_path=task.input_path,
                duplicate_of=duplicate_of.task.input_path,
            )
            return Skipped(duplicate_of=duplicate_of)

        cached = state.cache.get_record(digest)
        if cached is not None and self._is_reusable(cached, task, digest):
            self._log.debug("library_unchanged", input_path=task.input_path)
            record = cached
            reused = True
        else:
            record = self._transform(task, digest, variant)
            reused = False

        state.conflicts.check(record)
        return Processed(record=record, reused=reused)

    def _is_reusable(self, cached: LibraryRecord, task: TaskRef, digest: str) -> bool:
        """Decide whether a cached record can stand in for a transform.

        The record must come from the same input path and its exploded
        directory must still exist. Strict reuse also checks the digest and
        every recorded jar.
        """
        if cached.task.input_path != task.input_path:
            return False
        if not Path(cached.exploded_path).exists():
            self._log.debug("cache_entry_stale", input_path=task.input_path)
            return False
        if self.settings.strict_reuse:
            if cached.digest != digest:
                return False
            if not all(Path(jar).exists() for jar in cached.jars):
                return False
        return True

    def _transform(self, task: TaskRef, digest: str, variant: BuildVariant) -> LibraryRecord:
        request = TransformRequest(
            aar_path=task.input_path,
            output_path=str(self.context.output_dir),
            assets_destination_path=(
                self.context.assets_destination_path if variant is BuildVariant.APP else None
            ),
            shared_library_destination_path=(
                self.context.shared_library_destination_path
                if variant is BuildVariant.MODULE
                else None
            ),
        )

        try:
            result = self.transformer.transform(request)
        except TransformFailedError:
            raise
        except AarTransformError as e:
            raise TransformFailedError(task.input_path, e.user_message) from e
        except Exception as e:
            raise TransformFailedError(
                task.input_path,
                type(e).__name__,
                internal_details=str(e),
            ) from e

        return LibraryRecord(
            package_name=result.package_name,
            exploded_path=result.exploded_path,
            jars=list(result.jars),
            native_libraries=list(result.native_libraries),
            digest=digest,
            task=task,
        )

    def _commit(self, outcome: Processed, variant: BuildVariant, state: _RunState) -> None:
        record = outcome.record

        if variant is BuildVariant.MODULE:
            for jar in record.jars:
                state.class_paths[jar] = None

        state.duplicates.register(record)
        state.conflicts.register(record)
        state.libraries.append(record)
        if outcome.reused:
            state.reused.append(record.task.input_path)
        else:
            state.transformed.append(record.task.input_path)

        state.cache.put_record(record)


def transform_libraries(
    tasks: Sequence[TaskRef],
    variant: BuildVariant,
    context: BuildContext,
    transformer: ArchiveTransformer | None = None,
    settings: AarTransformSettings | None = None,
) -> TransformRunResult:
    """Transform ``tasks`` with a fresh orchestrator.

    Convenience function that creates an orchestrator and runs it once.

    Example:
        >>> result = transform_libraries(
        ...     scan_module("lib"),
        ...     BuildVariant.MODULE,
        ...     BuildContext(build_intermediates_dir="build"),
        ... )
        >>> result.class_paths
        ['build/exploded-aar/gms-3f2a9c1e/classes.jar']
    """
    orchestrator = TransformOrchestrator(context, transformer or AarTransformer(), settings)
    return orchestrator.run(tasks, variant)
