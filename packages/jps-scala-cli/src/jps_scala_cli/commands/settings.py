"""jps-scala settings command - show resolved compiler settings."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from jps_scala_cli.commands.options import project_options
from jps_scala_cli.errors import EXIT_USER_ERROR
from jps_scala_cli.loading import load_config, load_project, make_unit
from jps_scala_cli.output import error, info, print_json


@click.command("settings")
@project_options
@click.option("--json", "as_json", is_flag=True, default=False, help="Output JSON")
def settings(
    project_path: str,
    modules: tuple[str, ...],
    config_path: str | None,
    toolchain_root: str | None,
    tests: bool,
    as_json: bool,
) -> None:
    """Resolve and show the compiler settings of a module.

    Examples:

        jps-scala settings -m core

        jps-scala settings -m core --json
    """
    from jps_scala import Err, ProjectCollaborator, SettingsResolver

    project = load_project(project_path)
    config = load_config(
        config_path,
        toolchain_root=Path(toolchain_root) if toolchain_root else None,
    )
    unit = make_unit(project, modules, tests)

    result = SettingsResolver(config, ProjectCollaborator(project)).resolve(unit)
    if isinstance(result, Err):
        error(escape(result.error.user_message))
        raise SystemExit(EXIT_USER_ERROR)

    resolved = result.value
    if as_json:
        print_json(resolved.model_dump(mode="json"))
        return

    compiler_classpath = ", ".join(str(p) for p in resolved.compiler_classpath)
    info(escape(f"Compiler settings for {unit.name}:"), highlight=False)
    info(escape(f"  compiler classpath:  {compiler_classpath}"))
    info(escape(f"  sbt interface:       {resolved.sbt_interface}"))
    info(escape(f"  compiler interface:  {resolved.compiler_interface}"))
    info(escape(f"  output directory:    {resolved.output_directory}"))
    info(f"  classpath entries:   {len(resolved.classpath)}")
