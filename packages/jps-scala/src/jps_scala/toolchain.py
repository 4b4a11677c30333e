"""Toolchain directory discovery.

The toolchain root holds the backend's auxiliary artifacts (for zinc:
sbt-interface.jar, compiler-interface-sources.jar and the zinc jars that
run on the runner classpath). The root is an explicit configuration value;
the builder never locates its own deployment at runtime.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import ClassVar

import structlog

from jps_scala.errors import ConfigurationError
from jps_scala.result import Err, Ok, Result

logger = structlog.get_logger(__name__)


class ToolchainDirectory:
    """Listing of a toolchain root directory.

    Listings are cached per resolved directory when ``use_cache`` is set.
    Only successful (non-empty) listings are cached.

    Attributes:
        root: The toolchain root directory.

    Example:
        >>> toolchain = ToolchainDirectory(Path("/opt/scala-plugin/zinc"))
        >>> files = toolchain.list_files().unwrap()
        >>> ToolchainDirectory.find_by_name(files, "sbt-interface.jar")
    """

    _cache: ClassVar[dict[str, tuple[Path, ...]]] = {}

    def __init__(self, root: Path) -> None:
        """Initialize with the toolchain root.

        Args:
            root: Directory holding the toolchain artifacts.
        """
        self.root = root

    def list_files(self, use_cache: bool = True) -> Result[tuple[Path, ...], ConfigurationError]:
        """List the toolchain artifacts.

        Args:
            use_cache: Whether to reuse a cached listing of this directory.

        Returns:
            Ok with the directory entries sorted by name, or Err if the
            directory is missing, unreadable or empty.
        """
        cache_key = str(self.root.resolve())

        if use_cache and cache_key in self._cache:
            logger.debug("toolchain_listing_cached", root=cache_key)
            return Ok(self._cache[cache_key])

        try:
            entries = tuple(sorted(self.root.iterdir()))
        except OSError as e:
            logger.debug("toolchain_listing_failed", root=cache_key, error=str(e))
            entries = ()

        if not entries:
            return Err(ConfigurationError(f"no toolchain artifacts found in {self.root}"))

        if use_cache:
            self._cache[cache_key] = entries

        logger.debug("toolchain_listed", root=cache_key, count=len(entries))
        return Ok(entries)

    @staticmethod
    def find_by_name(files: Sequence[Path], name: str) -> Path | None:
        """Find a file by exact file name.

        Args:
            files: Candidate files.
            name: File name to match.

        Returns:
            The first file named ``name``, or None.
        """
        for file in files:
            if file.name == name:
                return file
        return None

    def require(self, files: Sequence[Path], name: str) -> Result[Path, ConfigurationError]:
        """Find a required artifact, failing with its file name when absent."""
        found = self.find_by_name(files, name)
        if found is None:
            return Err(ConfigurationError(f"no {name} found in {self.root}", artifact=name))
        return Ok(found)

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the toolchain listing cache."""
        cls._cache.clear()
        logger.debug("toolchain_cache_cleared")
