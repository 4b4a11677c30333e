"""Options shared by the jps-scala commands."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

F = TypeVar("F", bound=Callable[..., Any])


def project_options(func: F) -> F:
    """Add --project, --module, --config, --toolchain-root and --tests options."""
    decorators = [
        click.option(
            "-p",
            "--project",
            "project_path",
            type=click.Path(exists=False),
            default="./project.yaml",
            help="Path to project.yaml [default: ./project.yaml]",
        ),
        click.option(
            "-m",
            "--module",
            "modules",
            multiple=True,
            required=True,
            help="Module of the compilation unit (repeat for a chunk; first is representative)",
        ),
        click.option(
            "-c",
            "--config",
            "config_path",
            type=click.Path(exists=False),
            default=None,
            help="Builder config YAML (default: JPS_SCALA_* environment variables)",
        ),
        click.option(
            "--toolchain-root",
            "toolchain_root",
            type=click.Path(file_okay=False),
            default=None,
            help="Directory holding the toolchain artifacts",
        ),
        click.option(
            "--tests",
            is_flag=True,
            default=False,
            help="Build the test sources of the unit",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func
