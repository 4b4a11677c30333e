"""Java executable discovery and command-line assembly."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable, Sequence
from pathlib import Path

from jps_scala.arguments import join_paths
from jps_scala.models import ProcessInvocation

# Environment variable consulted when neither the unit nor the config names a JVM
JAVA_HOME_ENV_VAR = "JAVA_HOME"


def java_executable_in(java_home: Path) -> Path:
    """Path of the java launcher inside a JDK/JRE home."""
    name = "java.exe" if os.name == "nt" else "java"
    return java_home / "bin" / name


def find_java_executable(sdk_home: Path | None, default_java_home: Path | None = None) -> str:
    """Resolve the java executable for a compilation unit.

    Order: the unit's SDK, the configured default JVM, JAVA_HOME, then
    ``java`` on PATH.

    Args:
        sdk_home: JDK home of the unit, if configured.
        default_java_home: Fallback JVM installation from the builder config.

    Returns:
        Executable path (or the bare name ``java`` if nothing else is known).
    """
    if sdk_home is not None:
        return str(java_executable_in(sdk_home))

    if default_java_home is not None:
        return str(java_executable_in(default_java_home))

    env_home = os.environ.get(JAVA_HOME_ENV_VAR)
    if env_home:
        return str(java_executable_in(Path(env_home)))

    return shutil.which("java") or "java"


def build_java_command_line(
    java_executable: str,
    main_class: str,
    classpath: Iterable[Path | str],
    vm_options: Sequence[str],
    program_arguments: Sequence[str],
) -> ProcessInvocation:
    """Assemble ``java <vm options> -cp <classpath> <main class> <arguments>``.

    Args:
        java_executable: Path of the java launcher.
        main_class: Entry point class to run.
        classpath: Runner classpath entries.
        vm_options: JVM flags (heap, system properties).
        program_arguments: Arguments passed to the main class.

    Returns:
        The process invocation.
    """
    arguments = [
        *vm_options,
        "-cp",
        join_paths(classpath),
        main_class,
        *program_arguments,
    ]
    return ProcessInvocation(command=java_executable, arguments=tuple(arguments))
