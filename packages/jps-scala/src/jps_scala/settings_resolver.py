"""Compiler settings resolution for jps-scala.

SettingsResolver turns a compilation unit into a CompilerSettings snapshot:
- Scala facet of the representative module
- Compiler library from the facet's library level and name
- Toolchain artifacts (sbt interface, compiler interface) by file name
- Output directory and compilation classpath of the unit

Resolution is all-or-nothing. Every failure is an Err(ConfigurationError)
with a message naming the offending module, library or artifact.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from jps_scala.errors import ConfigurationError
from jps_scala.models import CompilationUnit, CompilerSettings, Library, LibraryLevel
from jps_scala.result import Err, Ok, Result
from jps_scala.toolchain import ToolchainDirectory

if TYPE_CHECKING:
    from pathlib import Path

    from jps_scala.collaborator import BuildCollaborator
    from jps_scala.config import BuilderConfig

logger = structlog.get_logger(__name__)


class SettingsResolver:
    """Resolves CompilerSettings for a compilation unit.

    Attributes:
        config: Builder configuration (toolchain root, backend)
        host: Build host collaborator

    Example:
        >>> resolver = SettingsResolver(config, host)
        >>> result = resolver.resolve(CompilationUnit(modules=("core",)))
        >>> if result.is_ok:
        ...     print(result.value.output_directory)
    """

    def __init__(self, config: BuilderConfig, host: BuildCollaborator) -> None:
        """Initialize the resolver.

        Args:
            config: Builder configuration.
            host: Build host collaborator.
        """
        self.config = config
        self.host = host
        self._log = logger.bind(component="settings_resolver")

    def resolve(self, unit: CompilationUnit) -> Result[CompilerSettings, ConfigurationError]:
        """Resolve the compiler settings of a unit.

        Args:
            unit: Compilation unit to resolve settings for.

        Returns:
            Ok(CompilerSettings) or Err(ConfigurationError).
        """
        library = self.resolve_compiler_library(unit.representative)
        if isinstance(library, Err):
            return library

        compiler_files = library.value.files
        if not compiler_files:
            return Err(
                ConfigurationError(
                    f"compiler library is empty: {library.value.name}",
                    module_name=unit.representative,
                    library_name=library.value.name,
                )
            )

        toolchain_files = self.toolchain_files()
        if isinstance(toolchain_files, Err):
            return toolchain_files

        toolchain = self._toolchain()
        artifacts = self.config.backend.artifacts

        sbt_interface = toolchain.require(toolchain_files.value, artifacts.sbt_interface)
        if isinstance(sbt_interface, Err):
            return sbt_interface

        compiler_interface = toolchain.require(toolchain_files.value, artifacts.compiler_interface)
        if isinstance(compiler_interface, Err):
            return compiler_interface

        output_directory = self.host.output_directory(unit)
        if output_directory is None:
            return Err(
                ConfigurationError(
                    f"output directory not specified for module {unit.representative}",
                    module_name=unit.representative,
                )
            )

        classpath = self.host.compilation_classpath(unit, unit.contains_tests)

        settings = CompilerSettings(
            compiler_classpath=tuple(compiler_files),
            sbt_interface=sbt_interface.value,
            compiler_interface=compiler_interface.value,
            output_directory=output_directory,
            classpath=tuple(classpath),
            toolchain_files=toolchain_files.value,
        )

        self._log.info(
            "settings_resolved",
            unit=unit.name,
            library=library.value.name,
            compiler_files=len(settings.compiler_classpath),
            classpath_entries=len(settings.classpath),
        )
        return Ok(settings)

    def resolve_compiler_library(self, module: str) -> Result[Library, ConfigurationError]:
        """Find the compiler library configured in a module's Scala facet.

        Args:
            module: Module name.

        Returns:
            Ok(Library) or Err(ConfigurationError).
        """
        facet = self.host.facet_settings(module)
        if facet is None:
            return Err(
                ConfigurationError(
                    f"no toolchain configuration in module {module}",
                    module_name=module,
                )
            )

        if not facet.compiler_library_level:
            return Err(
                ConfigurationError(
                    f"no compiler library level set in module {module}",
                    module_name=module,
                )
            )

        collection = self.library_collection(facet.compiler_library_level, module)
        if isinstance(collection, Err):
            return collection

        name = facet.compiler_library_name
        if not name:
            return Err(
                ConfigurationError(
                    f"no compiler library name set in module {module}",
                    module_name=module,
                )
            )

        for library in collection.value:
            if library.name == name:
                return Ok(library)

        level = LibraryLevel.parse(facet.compiler_library_level)
        return Err(
            ConfigurationError(
                f"compiler library for module {module} not found: "
                f"{level.value if level else facet.compiler_library_level} / {name}",
                module_name=module,
                library_name=name,
                internal_details=f"available: {[lib.name for lib in collection.value]}",
            )
        )

    def library_collection(
        self, level: str, module: str
    ) -> Result[Sequence[Library], ConfigurationError]:
        """Select the library collection for a level.

        Args:
            level: Configured library level (Module, Project or Global).
            module: Module whose libraries are used for the Module level.

        Returns:
            Ok(libraries) or Err(ConfigurationError) for an unknown level.
        """
        parsed = LibraryLevel.parse(level)
        if parsed is LibraryLevel.GLOBAL:
            return Ok(self.host.global_libraries())
        if parsed is LibraryLevel.PROJECT:
            return Ok(self.host.project_libraries())
        if parsed is LibraryLevel.MODULE:
            return Ok(self.host.module_libraries(module))
        return Err(
            ConfigurationError(
                f"unknown library level: {level}",
                module_name=module,
            )
        )

    def toolchain_files(self) -> Result[tuple[Path, ...], ConfigurationError]:
        """List the configured toolchain directory.

        Returns:
            Ok(files) or Err(ConfigurationError) when the root is not
            configured, missing or empty.
        """
        if self.config.toolchain_root is None:
            return Err(ConfigurationError("toolchain directory is not configured"))
        return self._toolchain().list_files(use_cache=self.config.cache_toolchain_listing)

    def _toolchain(self) -> ToolchainDirectory:
        assert self.config.toolchain_root is not None  # Checked by toolchain_files()
        return ToolchainDirectory(self.config.toolchain_root)
