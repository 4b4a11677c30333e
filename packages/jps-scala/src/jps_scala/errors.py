"""Exception hierarchy for jps-scala.

This module defines the two error kinds surfaced by the Scala builder:
- JpsScalaError: Base exception for all builder errors
- ConfigurationError: Toolchain or library configuration cannot be resolved
- ProcessLaunchError: The compiler process (or its argument file) failed at the OS level

ConfigurationError is recoverable at the compilation-unit level: it is
reported as an error diagnostic and the unit's build is aborted without
spawning a process. ProcessLaunchError is not recoverable locally and is
propagated to the build host.

User-facing messages name the offending module, library or artifact.
Technical details are logged internally via structlog.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class JpsScalaError(Exception):
    """Base exception for jps-scala.

    Args:
        user_message: Message shown to the user in a build diagnostic.
        internal_details: Optional technical details for logging only.

    Example:
        >>> raise JpsScalaError(
        ...     "Compiler library is empty: scala-compiler",
        ...     internal_details="library roots: []",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize JpsScalaError with user message and optional internal details.

        Args:
            user_message: Message shown to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details

        if internal_details:
            logger.error(
                "jps_scala_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(JpsScalaError):
    """Raised (or returned in an Err) when compiler settings cannot be resolved.

    Covers:
    - No Scala facet on the representative module
    - Compiler library level or name not set
    - Unknown library level
    - Compiler library not found or empty
    - Toolchain directory missing or empty
    - Required toolchain artifact missing
    - Output directory not specified

    Attributes:
        module_name: Module whose configuration failed (if known).
        library_name: Compiler library involved (if known).
        artifact: Missing toolchain artifact file name (if any).

    Example:
        >>> ConfigurationError(
        ...     "No sbt-interface.jar found in /opt/zinc",
        ...     artifact="sbt-interface.jar",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        module_name: str | None = None,
        library_name: str | None = None,
        artifact: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Message shown to the user.
            module_name: Module whose configuration failed (optional).
            library_name: Compiler library name (optional).
            artifact: Missing artifact file name (optional).
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message, internal_details=internal_details)

        self.module_name = module_name
        self.library_name = library_name
        self.artifact = artifact


class ProcessLaunchError(JpsScalaError):
    """Raised when the compiler process cannot be started.

    Covers:
    - Java executable not found
    - OS-level spawn failure
    - Failure writing the temporary argument file

    The underlying OS error text is part of the user message.

    Attributes:
        command: Executable that failed to start (if known).
        os_error: Text of the underlying OS error.

    Example:
        >>> ProcessLaunchError.from_os_error(
        ...     FileNotFoundError(2, "No such file or directory"),
        ...     command="/opt/jdk/bin/java",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        command: str | None = None,
        os_error: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ProcessLaunchError.

        Args:
            user_message: Message shown to the user.
            command: Executable that failed to start (optional).
            os_error: Text of the underlying OS error (optional).
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message, internal_details=internal_details)

        self.command = command
        self.os_error = os_error

    @classmethod
    def from_os_error(cls, error: OSError, *, command: str | None = None) -> ProcessLaunchError:
        """Build a ProcessLaunchError carrying the OS error text.

        Args:
            error: The OSError raised by the spawn or file operation.
            command: Executable involved, if the error came from a spawn.

        Returns:
            ProcessLaunchError whose message includes the OS error text.
        """
        os_text = error.strerror or str(error)
        if command:
            message = f"Cannot start compiler process {command}: {os_text}"
        else:
            message = f"Cannot prepare compiler arguments: {os_text}"
        return cls(
            message,
            command=command,
            os_error=os_text,
            internal_details=repr(error),
        )
