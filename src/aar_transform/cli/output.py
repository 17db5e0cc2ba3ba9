"""Rich console output utilities for the aar-transform CLI.

Colored success/error/warning messages and library tables. Respects the
NO_COLOR environment variable and the --no-color flag.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.json import JSON
from rich.table import Table

if TYPE_CHECKING:
    from aar_transform.models import LibraryRecord, TransformRunResult

_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Rich Console instance with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(force_terminal=force_terminal, no_color=no_color or _force_no_color)


console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("Transformed 3 Android Libraries")
        ✓ Transformed 3 Android Libraries
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with red X."""
    console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning message with yellow triangle."""
    console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print an informational message."""
    console.print(message, **kwargs)


def print_json(data: dict[str, Any], **kwargs: Any) -> None:
    """Print JSON data with syntax highlighting.

    Lines are never wrapped or cropped so the output stays parseable.
    """
    console.print(JSON(json.dumps(data)), soft_wrap=True, **kwargs)


def print_libraries(libraries: Sequence[LibraryRecord], title: str = "Android Libraries") -> None:
    """Print libraries as a table.

    Args:
        libraries: Records to show.
        title: Table title.
    """
    table = Table(title=title)
    table.add_column("Package", style="cyan")
    table.add_column("Archive")
    table.add_column("Origin")
    table.add_column("Jars", justify="right")
    table.add_column("Native", justify="right")

    for library in libraries:
        origin = library.task.origin_type.value
        if library.task.module_id:
            origin = f"{origin} {library.task.module_id}"
        table.add_row(
            library.package_name,
            library.task.input_path,
            origin,
            str(len(library.jars)),
            str(len(library.native_libraries)),
        )

    console.print(table)


def print_run_summary(result: TransformRunResult) -> None:
    """Print the outcome of a transform run."""
    if result.libraries:
        print_libraries(result.libraries)

    for input_path in result.skipped:
        info(f"  skipped duplicate {input_path}")

    success(
        f"{len(result.libraries)} Android Libraries ready "
        f"({len(result.transformed)} transformed, {len(result.reused)} cached, "
        f"{len(result.skipped)} duplicates skipped)"
    )


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors.

    Note:
        This updates the module-level console instance.
    """
    global console
    console = create_console(no_color=no_color)
