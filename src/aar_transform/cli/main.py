"""CLI entry point for aar-transform.

Defines the root command group. Subcommands are imported on first use so
that `--version` and shell completion stay fast.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from aar_transform import __version__
from aar_transform.cli.output import set_no_color
from aar_transform.observability import configure_logging

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Rich group whose subcommands are imported on first use.

    Importing this module then loads neither the orchestrator nor the
    transformer. A loaded command is added to the group, so each module is
    imported at most once.

    Attributes:
        lazy_subcommands: Command name to ``"<module>.<attribute>"`` path.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the group.

        Args:
            lazy_subcommands: Command name to import path, for example
                {"app": "aar_transform.cli.commands.app.app"}.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted({*super().list_commands(ctx), *self.lazy_subcommands})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        loaded = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if loaded is not None or cmd_name not in self.lazy_subcommands:
            return loaded

        module_name, _, attribute = self.lazy_subcommands[cmd_name].rpartition(".")
        command: click.Command = getattr(importlib.import_module(module_name), attribute)
        self.add_command(command, cmd_name)
        return command


LAZY_COMMANDS = {
    "app": "aar_transform.cli.commands.app.app",
    "module": "aar_transform.cli.commands.module.module",
    "cache": "aar_transform.cli.commands.cache.cache",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="aar-transform")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level [default: AAR_TRANSFORM_LOG_LEVEL or INFO]",
)
@click.option(
    "--json-logs",
    is_flag=True,
    default=False,
    help="Render logs as JSON.",
)
def cli(log_level: str | None, json_logs: bool) -> None:
    """aar-transform - Cached Android Library transforms for native builds.

    Explodes `.aar` files once, reuses the result on later builds and stops
    the build when two libraries declare the same package name.

    **Commands:**

    - `aar-transform app` - Transform libraries of an application project
    - `aar-transform module` - Transform libraries of a native module
    - `aar-transform cache show` - Inspect a build's transform cache
    """
    from aar_transform.cli.errors import load_settings

    settings = load_settings()
    configure_logging(
        log_level=log_level or settings.log_level,
        json_format=json_logs or settings.json_logs,
    )


if __name__ == "__main__":
    cli()
