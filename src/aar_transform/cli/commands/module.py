"""aar-transform module command - Transform libraries of a native module."""

from __future__ import annotations

import click

from aar_transform.cli.output import info, print_json, print_run_summary


@click.command("module")
@click.option(
    "-l",
    "--lib-dir",
    "lib_dir",
    type=click.Path(file_okay=False),
    default="lib",
    help="Module lib directory [default: lib]",
)
@click.option(
    "-b",
    "--build-dir",
    "build_dir",
    type=click.Path(file_okay=False),
    default="build",
    help="Build intermediates directory [default: build]",
)
@click.option(
    "--jni-dir",
    "jni_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory receiving shared libraries",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the result as JSON.",
)
def module(lib_dir: str, build_dir: str, jni_dir: str | None, as_json: bool) -> None:
    """Transform the Android Libraries of a native module.

    Every jar of every library is reported as a class path entry.

    Examples:

        aar-transform module

        aar-transform module --lib-dir android/lib --jni-dir build/jni
    """
    # Import here to keep --help fast
    from aar_transform.cli.errors import handle_transform_error, load_settings
    from aar_transform.errors import AarTransformError
    from aar_transform.models import BuildContext, BuildVariant
    from aar_transform.orchestrator import TransformOrchestrator
    from aar_transform.scanner import scan_module
    from aar_transform.transformer import AarTransformer

    settings = load_settings()
    try:
        tasks = scan_module(lib_dir)
        if not tasks:
            info("No .aar files to transform")
            return

        context = BuildContext(
            build_intermediates_dir=build_dir,
            shared_library_destination_path=jni_dir,
            output_dir_name=settings.output_dir_name,
        )
        orchestrator = TransformOrchestrator(context, AarTransformer(), settings)
        result = orchestrator.run(tasks, BuildVariant.MODULE)
    except AarTransformError as e:
        handle_transform_error(e)

    if as_json:
        print_json(result.model_dump(mode="json"))
        return

    print_run_summary(result)
    if result.class_paths:
        info("Class path entries:")
        for class_path in result.class_paths:
            info(f"  {class_path}")
