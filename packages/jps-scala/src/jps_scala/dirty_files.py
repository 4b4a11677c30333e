"""Selection of the dirty files handled by the Scala builder."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from jps_scala.config import DEFAULT_SOURCE_EXTENSION
from jps_scala.models import DirtyFile


def is_source_file(path: Path | str, extension: str = DEFAULT_SOURCE_EXTENSION) -> bool:
    """Check whether a path has the handled extension (case-sensitive suffix match)."""
    return str(path).endswith(extension)


def collect_files_to_compile(
    dirty_files: Iterable[DirtyFile],
    extension: str = DEFAULT_SOURCE_EXTENSION,
) -> list[Path]:
    """Narrow the host's dirty files to the ones this builder compiles.

    The host enumeration is read once; order is preserved.

    Args:
        dirty_files: (target, file, source root) triples from the host.
        extension: Source suffix to keep.

    Returns:
        Matching files in enumeration order. Empty means nothing to do.

    Example:
        >>> collect_files_to_compile(host.dirty_files(unit))
        [PosixPath('/p/core/src/A.scala')]
    """
    return [d.file for d in dirty_files if is_source_file(d.file, extension)]
