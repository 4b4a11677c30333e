"""Scala builder: compiles the dirty Scala files of a compilation unit.

Pipeline:
1. Collect dirty files with the Scala extension (none: NOTHING_DONE)
2. Resolve CompilerSettings (configuration error: ABORT)
3. Write the backend arguments to a temporary file
4. Run the runner JVM, forwarding its output as diagnostics
5. Delete the argument file and report OK

The child's exit status does not change the outcome: OK means the
process ran to completion, not that compilation succeeded. Problems are
reported through the forwarded output. A run cancelled by the host also
reports OK; the cancellation is logged as build_cancelled.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from jps_scala.arguments import (
    build_arguments,
    canonical_path,
    delete_arguments_file,
    write_arguments_file,
)
from jps_scala.dirty_files import collect_files_to_compile
from jps_scala.errors import ConfigurationError, ProcessLaunchError
from jps_scala.java import build_java_command_line, find_java_executable
from jps_scala.models import (
    BUILDER_DESCRIPTION,
    BUILDER_NAME,
    RUNNER_ENTRY_POINT,
    BuildExitCode,
    CompilationUnit,
    CompilerSettings,
    Diagnostic,
    ProcessInvocation,
    Severity,
)
from jps_scala.output_parser import OutputParser
from jps_scala.process import ProcessDriver
from jps_scala.result import Err
from jps_scala.settings_resolver import SettingsResolver

if TYPE_CHECKING:
    from concurrent.futures import ThreadPoolExecutor

    from jps_scala.collaborator import BuildCollaborator
    from jps_scala.config import BuilderConfig

logger = structlog.get_logger(__name__)


class ScalaBuilder:
    """Builds compilation units with the external Scala compiler.

    One instance may serve many units; each build() call resolves its own
    settings, owns its own argument file and child process.

    Attributes:
        config: Builder configuration
        host: Build host collaborator
        resolver: Compiler settings resolver

    Example:
        >>> builder = ScalaBuilder(BuilderConfig(toolchain_root=zinc_dir), host)
        >>> builder.build(CompilationUnit(modules=("core",)))
        <BuildExitCode.OK: 'ok'>
    """

    name = BUILDER_NAME
    presentable_name = BUILDER_DESCRIPTION

    def __init__(
        self,
        config: BuilderConfig,
        host: BuildCollaborator,
        *,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            config: Builder configuration.
            host: Build host collaborator.
            executor: Pool for output readers (defaults to the shared pool).
        """
        self.config = config
        self.host = host
        self.resolver = SettingsResolver(config, host)
        self._driver = ProcessDriver(
            OutputParser(strict=config.strict_output),
            host.emit,
            executor=executor,
            encoding=config.file_encoding,
        )
        self._log = logger.bind(component="scala_builder")

    def build(
        self,
        unit: CompilationUnit,
        *,
        cancel_event: threading.Event | None = None,
    ) -> BuildExitCode:
        """Compile the dirty Scala files of a unit.

        Args:
            unit: Compilation unit to build.
            cancel_event: When set, the running compiler is terminated.

        Returns:
            NOTHING_DONE, ABORT or OK.

        Raises:
            ProcessLaunchError: If the argument file cannot be written or
                the compiler process cannot be started.
        """
        files = collect_files_to_compile(
            self.host.dirty_files(unit),
            self.config.source_extension,
        )
        if not files:
            self._log.debug("nothing_to_compile", unit=unit.name)
            return BuildExitCode.NOTHING_DONE

        result = self.resolver.resolve(unit)
        if isinstance(result, Err):
            return self.abort(unit, result.error)

        settings = result.value
        arguments = build_arguments(settings, files, debug=self.config.debug)

        try:
            args_file = write_arguments_file(arguments)
        except OSError as e:
            raise ProcessLaunchError.from_os_error(e) from e

        try:
            invocation = self.command_line(unit, settings, args_file)
            self._log.info("compiling", unit=unit.name, files=len(files))
            outcome = self._driver.run(invocation, cancel_event=cancel_event)
        finally:
            delete_arguments_file(args_file)

        if outcome.cancelled:
            self._log.warning("build_cancelled", unit=unit.name, exit_code=outcome.exit_code)

        return BuildExitCode.OK

    def abort(self, unit: CompilationUnit, error: ConfigurationError) -> BuildExitCode:
        """Report a configuration error and abort the unit.

        Args:
            unit: Unit whose build is aborted.
            error: The resolution failure.

        Returns:
            BuildExitCode.ABORT.
        """
        self.host.emit(
            Diagnostic(tag=BUILDER_NAME, severity=Severity.ERROR, text=error.user_message)
        )
        self._log.warning("build_aborted", unit=unit.name, reason=error.user_message)
        return BuildExitCode.ABORT

    def runner_classpath(self, settings: CompilerSettings) -> list[str]:
        """Classpath of the runner JVM: toolchain jars, then the builder's own jars."""
        return [
            *(canonical_path(f) for f in settings.toolchain_files),
            *(canonical_path(f) for f in self.config.runner_classpath),
        ]

    def command_line(
        self, unit: CompilationUnit, settings: CompilerSettings, args_file: Path
    ) -> ProcessInvocation:
        """Build the runner command for a unit and argument file.

        Args:
            unit: Unit being compiled (selects the JVM).
            settings: Resolved settings (supply the toolchain jars).
            args_file: Argument file passed to the backend.

        Returns:
            ``java -Xmx.. -Dfile.encoding=.. -cp <runner cp> <runner> <backend> <args file>``
        """
        java = find_java_executable(self.host.sdk_home(unit), self.config.java_home)
        return build_java_command_line(
            java,
            RUNNER_ENTRY_POINT,
            self.runner_classpath(settings),
            self.config.jvm_options,
            [self.config.backend.entry_point, str(args_file)],
        )
