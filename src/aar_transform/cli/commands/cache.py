"""aar-transform cache commands - Inspect and clear a transform cache."""

from __future__ import annotations

from pathlib import Path

import click

from aar_transform.cli.output import info, print_json, print_libraries, success, warning

BUILD_DIR_HELP = "Build intermediates directory [default: build/android/intermediates]"


def _cache_path(build_dir: str) -> Path:
    from aar_transform.cli.errors import load_settings

    settings = load_settings()
    return Path(build_dir) / settings.output_dir_name / settings.cache_file_name


@click.group("cache")
def cache() -> None:
    """Inspect or clear the transform cache of a build."""


@cache.command("show")
@click.option(
    "-b",
    "--build-dir",
    "build_dir",
    type=click.Path(file_okay=False),
    default="build/android/intermediates",
    help=BUILD_DIR_HELP,
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the raw cache contents as JSON.",
)
def show(build_dir: str, as_json: bool) -> None:
    """Show the libraries recorded in the transform cache."""
    from aar_transform.cache import CACHE_DATA_VERSION, DATA_VERSION_KEY, TransformResultCache
    from aar_transform.store import JsonFileStore

    path = _cache_path(build_dir)
    if not path.exists():
        info(f"No transform cache at {path}")
        return

    store = JsonFileStore.load(path)
    if as_json:
        print_json({key: store.get(key) for key in store.keys()})
        return

    stored_version = store.get(DATA_VERSION_KEY)
    if stored_version is not None and stored_version != CACHE_DATA_VERSION:
        warning(
            f"Cache data version {stored_version} is outdated "
            f"(current: {CACHE_DATA_VERSION}); it will be discarded on the next build"
        )
        return

    transform_cache = TransformResultCache(store)
    records = [
        record
        for record in (transform_cache.get_record(key) for key in transform_cache.digest_keys())
        if record is not None
    ]
    print_libraries(records, title=f"Transform cache {path}")
    info(f"{len(records)} cached libraries (data version {CACHE_DATA_VERSION})")


@cache.command("clear")
@click.option(
    "-b",
    "--build-dir",
    "build_dir",
    type=click.Path(file_okay=False),
    default="build/android/intermediates",
    help=BUILD_DIR_HELP,
)
def clear(build_dir: str) -> None:
    """Delete the transform cache so every library is transformed again."""
    path = _cache_path(build_dir)
    if not path.exists():
        info(f"No transform cache at {path}")
        return

    try:
        path.unlink()
    except OSError as e:
        from aar_transform.cli.errors import EXIT_SYSTEM_ERROR, CLIError

        raise CLIError(f"Cannot delete {path}: {e.strerror}", exit_code=EXIT_SYSTEM_ERROR) from e

    success(f"Removed {path}")
