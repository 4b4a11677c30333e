"""Rich console output utilities for jps-scala-cli.

Formatted console output with Rich, respecting the NO_COLOR
environment variable and the --no-color flag.
"""

from __future__ import annotations

import json
import os
from typing import Any

from rich.console import Console
from rich.markup import escape

from jps_scala.models import Diagnostic, Severity

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


# Default console instance
console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark."""
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
    """Print JSON data with syntax highlighting."""
    console.print_json(json.dumps(data), **kwargs)


def diagnostic(message: Diagnostic) -> None:
    """Print a build diagnostic with a severity marker.

    Args:
        message: Diagnostic forwarded by the builder.

    Example:
        >>> diagnostic(Diagnostic(severity=Severity.ERROR, text="No Scala facet"))
        ✗ [scala] No Scala facet
    """
    location = ""
    if message.source_path is not None:
        location = f"{message.source_path}:{message.line or ''} "
    text = escape(f"[{message.tag}] {location}{message.text}")

    if message.severity is Severity.ERROR:
        error(text, highlight=False)
    elif message.severity is Severity.WARNING:
        warning(text, highlight=False)
    else:
        info(text, highlight=False)


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors.

    Args:
        no_color: If True, disable colored output.
    """
    global console
    console = create_console(no_color=no_color)
