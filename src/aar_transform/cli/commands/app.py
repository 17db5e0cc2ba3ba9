"""aar-transform app command - Transform libraries of an application project."""

from __future__ import annotations

from pathlib import Path

import click

from aar_transform.cli.output import info, print_run_summary


@click.command("app")
@click.option(
    "-p",
    "--project-dir",
    "project_dir",
    type=click.Path(file_okay=False),
    default=".",
    help="Project root directory [default: .]",
)
@click.option(
    "-b",
    "--build-dir",
    "build_dir",
    type=click.Path(file_okay=False),
    default="build/android/intermediates",
    help="Build intermediates directory [default: build/android/intermediates]",
)
@click.option(
    "-m",
    "--modules",
    "modules_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML manifest listing the native modules used by the project",
)
@click.option(
    "--assets-dir",
    "assets_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory receiving library assets",
)
def app(project_dir: str, build_dir: str, modules_file: str | None, assets_dir: str | None) -> None:
    """Transform the Android Libraries of an application project.

    Collects `.aar` files from each module's `lib` folder and from the
    project's `platform/android` folder, in that order.

    Examples:

        aar-transform app

        aar-transform app --modules modules.yaml --assets-dir build/android/assets
    """
    # Import here to keep --help fast
    from aar_transform.cli.errors import handle_transform_error, load_settings
    from aar_transform.errors import AarTransformError
    from aar_transform.models import BuildContext, BuildVariant
    from aar_transform.orchestrator import TransformOrchestrator
    from aar_transform.scanner import load_module_manifest, scan_project
    from aar_transform.transformer import AarTransformer

    settings = load_settings()
    try:
        modules = load_module_manifest(modules_file) if modules_file else []
        tasks = scan_project(Path(project_dir), modules)
        if not tasks:
            info("No .aar files to transform")
            return

        context = BuildContext(
            build_intermediates_dir=build_dir,
            assets_destination_path=assets_dir,
            output_dir_name=settings.output_dir_name,
        )
        orchestrator = TransformOrchestrator(context, AarTransformer(), settings)
        result = orchestrator.run(tasks, BuildVariant.APP)
    except AarTransformError as e:
        handle_transform_error(e)

    print_run_summary(result)
