"""Data models for the Scala builder.

This module defines the immutable values exchanged between the builder
components and the build host:
- LibraryLevel: Scope a compiler library is looked up in
- BackendKind: Supported compiler backends and their entry points
- FacetSettings: Per-module toolchain configuration ("Scala facet")
- Library: A named library with its compiled artifact files
- CompilationUnit: Modules built together (a "chunk")
- DirtyFile: (target, file, source root) triple reported by the host
- Diagnostic: Message forwarded to the host's message sink
- CompilerSettings: Fully resolved toolchain snapshot for one invocation
- BuildExitCode: Outcome of a build invocation
- ProcessInvocation / ProcessOutcome: Child process command and result
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Tag attached to every diagnostic emitted by the builder
BUILDER_NAME = "scala"

# Human-readable builder name shown by the host
BUILDER_DESCRIPTION = "Scala builder"

# Class run inside the child JVM; it loads the backend entry point
RUNNER_ENTRY_POINT = "org.jetbrains.jps.incremental.scala.ClassRunner"


class LibraryLevel(str, Enum):
    """Collection a compiler library is resolved in.

    Attributes:
        MODULE: Libraries attached to the module itself
        PROJECT: Project-wide libraries
        GLOBAL: Application-wide (global) libraries
    """

    MODULE = "Module"
    PROJECT = "Project"
    GLOBAL = "Global"

    @classmethod
    def parse(cls, value: str) -> LibraryLevel | None:
        """Parse a level from its configured value, ignoring case.

        Args:
            value: Raw level value from the facet configuration.

        Returns:
            Matching LibraryLevel, or None if the value is not recognized.
        """
        for level in cls:
            if value.lower() in (level.value.lower(), level.name.lower()):
                return level
        return None


class ToolchainArtifacts(NamedTuple):
    """File names of the two auxiliary artifacts a backend requires."""

    sbt_interface: str
    compiler_interface: str


class BackendKind(str, Enum):
    """Supported compiler backends.

    Each backend maps to the entry point the runner invokes and the
    auxiliary artifacts that must be present in the toolchain directory.
    """

    ZINC = "zinc"

    @property
    def entry_point(self) -> str:
        """Fully qualified class name of the backend's main entry point."""
        return _ENTRY_POINTS[self]

    @property
    def artifacts(self) -> ToolchainArtifacts:
        """Required auxiliary artifact file names."""
        return _ARTIFACTS[self]


_ENTRY_POINTS: dict[BackendKind, str] = {
    BackendKind.ZINC: "com.typesafe.zinc.Main",
}

_ARTIFACTS: dict[BackendKind, ToolchainArtifacts] = {
    BackendKind.ZINC: ToolchainArtifacts(
        sbt_interface="sbt-interface.jar",
        compiler_interface="compiler-interface-sources.jar",
    ),
}


class FacetSettings(BaseModel):
    """Scala facet configuration attached to a module.

    The level is kept as the raw configured string; an unknown value is
    reported as a configuration error at resolution time.

    Attributes:
        compiler_library_level: Scope of the compiler library (Module, Project, Global)
        compiler_library_name: Name of the compiler library in that scope
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    compiler_library_level: str | None = Field(
        default=None, description="Compiler library scope"
    )
    compiler_library_name: str | None = Field(
        default=None, description="Compiler library name"
    )


class Library(BaseModel):
    """A named library and its compiled (class) root files.

    Attributes:
        name: Library name
        files: Compiled artifact files (jars or class directories), in order
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Library name")
    files: tuple[Path, ...] = Field(default=(), description="Compiled artifact files")


class CompilationUnit(BaseModel):
    """A set of modules compiled together (a chunk).

    The first module is the representative target whose facet, SDK and
    output directory drive the compilation.

    Attributes:
        modules: Names of the modules in the chunk, representative first
        contains_tests: Whether the chunk builds test sources
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    modules: tuple[str, ...] = Field(..., min_length=1, description="Module names")
    contains_tests: bool = Field(default=False, description="Build test sources")

    @property
    def representative(self) -> str:
        """Name of the representative module."""
        return self.modules[0]

    @property
    def name(self) -> str:
        """Presentable chunk name."""
        return ", ".join(self.modules) + (" (tests)" if self.contains_tests else "")


class DirtyFile(BaseModel):
    """A changed source file reported by the build host.

    Attributes:
        target: Build target (module) the file belongs to
        file: Path of the changed file
        source_root: Source root containing the file
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    target: str = Field(..., description="Owning build target")
    file: Path = Field(..., description="Changed file")
    source_root: Path = Field(..., description="Containing source root")


class Severity(str, Enum):
    """Severity of a diagnostic."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """A message sent to the build host's message sink.

    Attributes:
        tag: Subsystem that produced the message
        severity: Message severity
        text: Message text
        source_path: Source file the message refers to (grammar mode only)
        line: Line number in source_path (grammar mode only)

    Example:
        >>> Diagnostic(severity=Severity.ERROR, text="No Scala facet in module: core")
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tag: str = Field(default=BUILDER_NAME, description="Originating subsystem")
    severity: Severity = Field(..., description="Message severity")
    text: str = Field(..., description="Message text")
    source_path: Path | None = Field(default=None, description="Referenced source file")
    line: int | None = Field(default=None, ge=1, description="Referenced line")


class CompilerSettings(BaseModel):
    """Fully resolved compiler configuration for a single invocation.

    Created once by SettingsResolver and never mutated. Every field is
    required: a settings instance only exists when resolution succeeded.

    Attributes:
        compiler_classpath: Compiler library files (scala-compiler, scala-library, ...)
        sbt_interface: Path to the sbt interface artifact
        compiler_interface: Path to the compiler interface sources artifact
        output_directory: Directory receiving compiled classes
        classpath: Compilation classpath of the unit
        toolchain_files: Toolchain directory listing, reused for the runner classpath
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    compiler_classpath: tuple[Path, ...] = Field(
        ..., min_length=1, description="Compiler library files"
    )
    sbt_interface: Path = Field(..., description="sbt interface artifact")
    compiler_interface: Path = Field(..., description="Compiler interface sources artifact")
    output_directory: Path = Field(..., description="Output directory")
    classpath: tuple[Path, ...] = Field(default=(), description="Compilation classpath")
    toolchain_files: tuple[Path, ...] = Field(
        default=(), description="Toolchain directory listing"
    )


class BuildExitCode(str, Enum):
    """Outcome of a builder invocation.

    Attributes:
        NOTHING_DONE: No dirty files of the handled kind
        ABORT: Configuration error; reported and no process spawned
        OK: The compiler process ran to completion
    """

    NOTHING_DONE = "nothing_done"
    ABORT = "abort"
    OK = "ok"


class ProcessInvocation(BaseModel):
    """Command line of a single child process.

    Attributes:
        command: Executable path
        arguments: Arguments passed after the executable
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    command: str = Field(..., min_length=1, description="Executable")
    arguments: tuple[str, ...] = Field(default=(), description="Arguments")

    @property
    def argv(self) -> list[str]:
        """Full argument vector, executable first."""
        return [self.command, *self.arguments]

    @field_validator("arguments", mode="before")
    @classmethod
    def _coerce_arguments(cls, v: object) -> object:
        if isinstance(v, list):
            return tuple(str(a) for a in v)
        return v


class ProcessOutcome(BaseModel):
    """Result of running a child process to termination.

    Attributes:
        exit_code: OS exit status (negative when killed by a signal)
        line_count: Number of output lines forwarded as diagnostics
        cancelled: Whether the host cancelled the process
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    exit_code: int = Field(..., description="Exit status")
    line_count: int = Field(default=0, ge=0, description="Forwarded lines")
    cancelled: bool = Field(default=False, description="Cancelled by host")
