"""jps-scala build command - compile a compilation unit."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from jps_scala_cli.commands.options import project_options
from jps_scala_cli.errors import BUILD_EXIT_CODES, EXIT_SYSTEM_ERROR
from jps_scala_cli.loading import load_config, load_project, make_unit
from jps_scala_cli.output import diagnostic, error, info, success


@click.command("build")
@project_options
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Classify compiler output lines by severity",
)
@click.argument("files", nargs=-1, type=click.Path())
def build(
    project_path: str,
    modules: tuple[str, ...],
    config_path: str | None,
    toolchain_root: str | None,
    tests: bool,
    strict: bool,
    files: tuple[str, ...],
) -> None:
    """Compile the Scala files of a module.

    FILES are the changed files; without FILES every file under the
    module's source roots is compiled.

    Examples:

        jps-scala build -m core

        jps-scala build -m core --tests core/test/FooSpec.scala
    """
    from jps_scala import BuildExitCode, ProcessLaunchError, ProjectCollaborator, ScalaBuilder

    project = load_project(project_path)
    config = load_config(
        config_path,
        toolchain_root=Path(toolchain_root) if toolchain_root else None,
        strict_output=True if strict else None,
    )
    unit = make_unit(project, modules, tests)

    host = ProjectCollaborator(
        project,
        dirty=[Path(f) for f in files] if files else None,
        on_diagnostic=diagnostic,
    )

    try:
        outcome = ScalaBuilder(config, host).build(unit)
    except ProcessLaunchError as e:
        error(escape(e.user_message))
        raise SystemExit(EXIT_SYSTEM_ERROR) from None

    if outcome is BuildExitCode.NOTHING_DONE:
        info(escape(f"Nothing to compile in {unit.name}"))
    elif outcome is BuildExitCode.OK:
        success(escape(f"Compiled {unit.name}"))
    else:
        error(escape(f"Build of {unit.name} aborted"))

    raise SystemExit(BUILD_EXIT_CODES[outcome])
