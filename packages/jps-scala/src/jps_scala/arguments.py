"""Compiler argument file construction.

The backend reads its arguments from a temporary file, one argument per
line, which avoids command-line length limits. The header has a fixed
order:

    -debug
    -scala-path          <compiler library files, path-separator joined>
    -sbt-interface       <sbt interface artifact>
    -compiler-interface  <compiler interface artifact>
    -d                   <output directory>
    -cp                  <classpath, path-separator joined>

followed by one line per source file.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path

import structlog

from jps_scala.models import CompilerSettings

logger = structlog.get_logger(__name__)

# Prefix and suffix of the temporary argument file
ARGS_FILE_PREFIX = "ideaScalaToCompile"
ARGS_FILE_SUFFIX = ".txt"

# Header options in argument-file order; all but -debug take one value
HEADER_OPTIONS = ("-debug", "-scala-path", "-sbt-interface", "-compiler-interface", "-d", "-cp")


def canonical_path(path: Path | str) -> str:
    """Return the absolute, normalized form of a path."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


def join_paths(paths: Iterable[Path | str]) -> str:
    """Join canonical paths with the platform path separator."""
    return os.pathsep.join(canonical_path(p) for p in paths)


def build_arguments(
    settings: CompilerSettings,
    sources: Sequence[Path],
    *,
    debug: bool = True,
) -> list[str]:
    """Build the backend argument sequence.

    Args:
        settings: Resolved compiler settings.
        sources: Files to compile, in the order they were collected.
        debug: Whether to start with -debug.

    Returns:
        Ordered argument list: option and value entries are separate items.

    Example:
        >>> build_arguments(settings, [Path("src/A.scala")])[-1]
        '/project/src/A.scala'
    """
    args: list[str] = []

    if debug:
        args.append("-debug")

    args.append("-scala-path")
    args.append(join_paths(settings.compiler_classpath))

    args.append("-sbt-interface")
    args.append(canonical_path(settings.sbt_interface))

    args.append("-compiler-interface")
    args.append(canonical_path(settings.compiler_interface))

    args.append("-d")
    args.append(canonical_path(settings.output_directory))

    args.append("-cp")
    args.append(join_paths(settings.classpath))

    args.extend(canonical_path(s) for s in sources)

    return args


def write_arguments_file(arguments: Sequence[str], directory: Path | None = None) -> Path:
    """Write arguments to a fresh temporary file, one per line.

    Args:
        arguments: Argument sequence.
        directory: Directory for the file (defaults to the system temp dir).

    Returns:
        Path of the created file. The caller owns and must delete it.

    Raises:
        OSError: If the file cannot be created or written.
    """
    fd, name = tempfile.mkstemp(
        prefix=ARGS_FILE_PREFIX,
        suffix=ARGS_FILE_SUFFIX,
        dir=directory,
        text=True,
    )
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write("\n".join(arguments))
    except OSError:
        path.unlink(missing_ok=True)
        raise

    logger.debug("args_file_written", path=str(path), arguments=len(arguments))
    return path


def read_arguments_file(path: Path) -> list[str]:
    """Read an argument file back into its argument list."""
    content = path.read_text(encoding="utf-8")
    if not content:
        return []
    return content.split("\n")


def delete_arguments_file(path: Path) -> None:
    """Delete an argument file, logging instead of raising on failure."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("args_file_delete_failed", path=str(path), error=str(e))
        return
    logger.debug("args_file_deleted", path=str(path))


def split_arguments(arguments: Sequence[str]) -> tuple[list[tuple[str, str | None]], list[str]]:
    """Split an argument sequence into header entries and source paths.

    Args:
        arguments: Sequence produced by build_arguments().

    Returns:
        (header, sources): header entries as (option, value) pairs in order
        (value is None for -debug), followed by the source paths.
    """
    header: list[tuple[str, str | None]] = []
    index = 0
    while index < len(arguments) and arguments[index] in HEADER_OPTIONS:
        option = arguments[index]
        if option == "-debug":
            header.append((option, None))
            index += 1
        else:
            header.append((option, arguments[index + 1]))
            index += 2
    return header, list(arguments[index:])
