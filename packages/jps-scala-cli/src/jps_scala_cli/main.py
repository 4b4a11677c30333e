"""CLI entry point for jps-scala.

Defines the main CLI group using the LazyGroup pattern so that
``jps-scala --help`` does not import the builder.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from jps_scala_cli import __version__
from jps_scala_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that loads commands lazily.

    Attributes:
        lazy_subcommands: Mapping of command names to module paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize LazyGroup.

        Args:
            *args: Positional arguments for parent class.
            lazy_subcommands: Mapping of command name to module path.
                Format: {"build": "jps_scala_cli.commands.build.build"}
            **kwargs: Keyword arguments for parent class.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return the sorted command names."""
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, importing it on first use."""
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_path = self.lazy_subcommands[cmd_name]
        module_name, attr_name = module_path.rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "build": "jps_scala_cli.commands.build.build",
    "settings": "jps_scala_cli.commands.settings.settings",
    "args": "jps_scala_cli.commands.args.args",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="jps-scala")
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
    default="WARNING",
    help="Builder log level.",
)
def cli(log_level: str) -> None:
    """jps-scala - Scala compilation driver.

    Resolve compiler settings and run the external Scala compiler
    for a module of a project.yaml model.

    **Commands:**

    - `jps-scala build` - Compile dirty Scala files of a module
    - `jps-scala settings` - Show resolved compiler settings
    - `jps-scala args` - Show the compiler argument file contents
    """
    from jps_scala.observability import configure_logging

    configure_logging(log_level=log_level, json_format=False)


if __name__ == "__main__":
    cli()
