"""Exception hierarchy for aar-transform.

This module defines the exception classes used throughout aar-transform:
- AarTransformError: Base exception for all aar-transform errors
- ConfigurationError: Invalid settings or module manifest
- CacheIOError: The transform cache could not be written
- InputReadError: An input archive could not be read while hashing
- TransformFailedError: The archive transformer failed for one input
- LibraryConflictError: Two different libraries declare the same package name

User-facing messages are safe to display. Technical details passed as
``internal_details`` are logged via structlog and never shown to the user.
"""

from __future__ import annotations

import structlog

from aar_transform.models import LibraryRecord, OriginType, TaskRef

logger = structlog.get_logger(__name__)


class AarTransformError(Exception):
    """Base exception for aar-transform.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but never part of the exception message.

    Example:
        >>> raise AarTransformError(
        ...     "Cache could not be written",
        ...     internal_details="EACCES on build/exploded-aar/.state.json.tmp"
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize AarTransformError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "aar_transform_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(AarTransformError):
    """Raised when settings or a module manifest are invalid.

    Attributes:
        file_path: Path to the offending file (if any).
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        full_message = f"{user_message} (in {file_path})" if file_path else user_message
        super().__init__(full_message, internal_details=internal_details)
        self.file_path = file_path


class CacheIOError(AarTransformError):
    """Raised when the transform cache file cannot be written.

    An unreadable or corrupt cache file is never raised as an error; it is
    discarded and replaced by an empty cache.

    Attributes:
        cache_path: Path of the cache file.
    """

    def __init__(self, cache_path: str, *, internal_details: str | None = None) -> None:
        super().__init__(
            f"Failed to write transform cache {cache_path}",
            internal_details=internal_details,
        )
        self.cache_path = cache_path


class InputReadError(AarTransformError):
    """Raised when an input archive cannot be read to completion.

    Attributes:
        input_path: Path of the archive that could not be read.
    """

    def __init__(self, input_path: str, *, internal_details: str | None = None) -> None:
        super().__init__(
            f"Failed to read Android Library {input_path}",
            internal_details=internal_details,
        )
        self.input_path = input_path


class TransformFailedError(AarTransformError):
    """Raised when transforming a single archive fails.

    Aborts the whole run. The underlying exception is available as
    ``__cause__`` when raised from the orchestrator.

    Attributes:
        input_path: Path of the archive that failed to transform.
        reason: Short description of the failure.
    """

    def __init__(
        self,
        input_path: str,
        reason: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(
            f"Failed to transform Android Library {input_path}: {reason}",
            internal_details=internal_details,
        )
        self.input_path = input_path
        self.reason = reason


# Guidance printed below a package name conflict, keyed by origin combination
MODULE_CONFLICT_GUIDANCE = (
    "Please either select a version of these modules where the conflicting .aar "
    "file is the same or you can try removing the .aar file from one module's "
    '"lib" folder.'
)
PROJECT_CONFLICT_GUIDANCE = (
    "Please either remove the duplicate .aar file or change the package name of "
    "one Android Library if possible."
)
MIXED_CONFLICT_GUIDANCE = (
    "Please make sure the .aar files in your project and the module match or try "
    "removing either the one in your project or in the module."
)
CORE_CONFLICT_GUIDANCE = (
    "One of the libraries is bundled with the SDK. Please remove the .aar file "
    "that duplicates the bundled library."
)


def describe_library(record: LibraryRecord) -> str:
    """Format a library for conflict messages.

    Example:
        >>> describe_library(record)
        'modules/ti.map/lib/play-services.aar (hash: 3f2a..., origin: Module ti.map)'
    """
    origin = describe_origin(record.task)
    return f"{record.task.input_path} (hash: {record.digest}, origin: {origin})"


def describe_origin(task: TaskRef) -> str:
    """Return the origin part of a library description."""
    if task.origin_type is OriginType.MODULE:
        return f"Module {task.module_id}"
    return task.origin_type.value


def conflict_guidance(existing: TaskRef, incoming: TaskRef) -> str:
    """Pick remediation text for two conflicting libraries."""
    origins = {existing.origin_type, incoming.origin_type}
    if origins == {OriginType.MODULE}:
        return MODULE_CONFLICT_GUIDANCE
    if origins == {OriginType.PROJECT}:
        return PROJECT_CONFLICT_GUIDANCE
    if OriginType.PROJECT in origins:
        return MIXED_CONFLICT_GUIDANCE
    return CORE_CONFLICT_GUIDANCE


class LibraryConflictError(AarTransformError):
    """Raised when two different libraries declare the same package name.

    The first library in input order was already accepted; the incoming one
    is rejected and the run aborts. There is no dependency resolution that
    could pick a winner automatically.

    Attributes:
        package_name: The package name both libraries declare.
        existing: The library that was accepted first.
        incoming: The library that was rejected.

    Example:
        >>> raise LibraryConflictError("com.google.android.gms", existing, incoming)
        # User sees:
        # Conflicting Android Libraries with package name "com.google.android.gms" detected:
        #   modules/ti.map/lib/gms.aar (hash: 3f2a..., origin: Module ti.map)
        #   platform/android/gms.aar (hash: 91bc..., origin: Project)
        #
        # Please make sure the .aar files in your project and the module match ...
    """

    def __init__(
        self,
        package_name: str,
        existing: LibraryRecord,
        incoming: LibraryRecord,
    ) -> None:
        user_message = (
            f'Conflicting Android Libraries with package name "{package_name}" detected:\n'
            f"  {describe_library(existing)}\n"
            f"  {describe_library(incoming)}\n"
            "\n"
            f"{conflict_guidance(existing.task, incoming.task)}"
        )
        super().__init__(user_message)

        self.package_name = package_name
        self.existing = existing
        self.incoming = incoming
