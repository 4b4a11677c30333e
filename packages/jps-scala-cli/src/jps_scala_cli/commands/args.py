"""jps-scala args command - show the compiler argument file contents."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from jps_scala_cli import output
from jps_scala_cli.commands.options import project_options
from jps_scala_cli.errors import EXIT_USER_ERROR
from jps_scala_cli.loading import load_config, load_project, make_unit
from jps_scala_cli.output import error, warning


@click.command("args")
@project_options
@click.argument("files", nargs=-1, type=click.Path())
def args(
    project_path: str,
    modules: tuple[str, ...],
    config_path: str | None,
    toolchain_root: str | None,
    tests: bool,
    files: tuple[str, ...],
) -> None:
    """Print the arguments the compiler would receive, one per line.

    Examples:

        jps-scala args -m core core/src/Main.scala
    """
    from jps_scala import (
        Err,
        ProjectCollaborator,
        SettingsResolver,
        build_arguments,
        collect_files_to_compile,
    )

    project = load_project(project_path)
    config = load_config(
        config_path,
        toolchain_root=Path(toolchain_root) if toolchain_root else None,
    )
    unit = make_unit(project, modules, tests)

    host = ProjectCollaborator(project, dirty=[Path(f) for f in files] if files else None)
    sources = collect_files_to_compile(host.dirty_files(unit), config.source_extension)
    if not sources:
        warning(escape(f"No {config.source_extension} files to compile in {unit.name}"))

    result = SettingsResolver(config, host).resolve(unit)
    if isinstance(result, Err):
        error(escape(result.error.user_message))
        raise SystemExit(EXIT_USER_ERROR)

    for argument in build_arguments(result.value, sources, debug=config.debug):
        output.console.out(argument, highlight=False)
