"""jps-scala: Scala compilation driver for an incremental build host.

This package provides:
- ScalaBuilder: Build a compilation unit's dirty Scala files
- SettingsResolver: Resolve CompilerSettings from facet and library configuration
- BuildCollaborator: Interface the build host implements
- ProjectModel / ProjectCollaborator: File-based host model
- BuilderConfig: Process-level builder configuration
"""

from __future__ import annotations

__version__ = "0.1.0"

from jps_scala.arguments import build_arguments, read_arguments_file, write_arguments_file
from jps_scala.builder import ScalaBuilder
from jps_scala.collaborator import BuildCollaborator, ProjectCollaborator
from jps_scala.config import BuilderConfig
from jps_scala.dirty_files import collect_files_to_compile
from jps_scala.errors import ConfigurationError, JpsScalaError, ProcessLaunchError
from jps_scala.models import (
    BackendKind,
    BuildExitCode,
    CompilationUnit,
    CompilerSettings,
    Diagnostic,
    DirtyFile,
    FacetSettings,
    Library,
    LibraryLevel,
    Severity,
)
from jps_scala.output_parser import OutputParser
from jps_scala.process import ProcessDriver, ProcessHandle
from jps_scala.project import ModuleSpec, ProjectModel
from jps_scala.result import Err, Ok, Result
from jps_scala.settings_resolver import SettingsResolver

__all__ = [
    "__version__",
    # Builder
    "ScalaBuilder",
    "SettingsResolver",
    "ProcessDriver",
    "ProcessHandle",
    "OutputParser",
    "collect_files_to_compile",
    "build_arguments",
    "write_arguments_file",
    "read_arguments_file",
    # Host
    "BuildCollaborator",
    "ProjectCollaborator",
    "ProjectModel",
    "ModuleSpec",
    # Configuration
    "BuilderConfig",
    # Models
    "BackendKind",
    "BuildExitCode",
    "CompilationUnit",
    "CompilerSettings",
    "Diagnostic",
    "DirtyFile",
    "FacetSettings",
    "Library",
    "LibraryLevel",
    "Severity",
    # Results and errors
    "Result",
    "Ok",
    "Err",
    "JpsScalaError",
    "ConfigurationError",
    "ProcessLaunchError",
]
