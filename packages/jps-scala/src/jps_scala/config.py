"""Builder configuration for jps-scala.

BuilderConfig holds the process-level settings of the Scala builder:
the toolchain directory, the runner's own classpath, JVM flags and the
output handling mode. It can be loaded from environment variables with
the JPS_SCALA_ prefix or from a YAML file.
"""

from __future__ import annotations

import locale
from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from jps_scala.models import BackendKind

# Environment variable prefix for all builder settings
ENV_PREFIX = "JPS_SCALA_"

# Source files handled by the Scala builder
DEFAULT_SOURCE_EXTENSION = ".scala"

# Heap cap passed to the compiler JVM
DEFAULT_MAX_HEAP = "384m"


def default_file_encoding() -> str:
    """Return the host runtime's preferred file encoding.

    Returns:
        Encoding name propagated to the child JVM as -Dfile.encoding.
    """
    return locale.getpreferredencoding(False) or "UTF-8"


class BuilderConfig(BaseSettings):
    """Process-level configuration of the Scala builder.

    Attributes:
        toolchain_root: Directory holding the backend's auxiliary artifacts
        runner_classpath: The builder's own deployment jars (contain the runner)
        backend: Compiler backend to invoke
        max_heap: JVM heap cap (rendered as -Xmx<value>)
        file_encoding: Encoding propagated to the JVM (-Dfile.encoding)
        source_extension: Suffix of files handled by the builder
        strict_output: Classify process output with the diagnostic-line grammar
        debug: Pass -debug to the backend
        java_home: JVM used when the compilation unit has no SDK
        cache_toolchain_listing: Cache the toolchain directory listing

    Example:
        >>> config = BuilderConfig(toolchain_root=Path("/opt/idea/plugins/Scala/zinc"))
        >>> config.max_heap
        '384m'
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        frozen=True,
    )

    toolchain_root: Path | None = Field(
        default=None,
        description="Directory holding the toolchain artifacts",
    )
    runner_classpath: list[Path] = Field(
        default_factory=list,
        description="Jars containing the runner entry point",
    )
    backend: BackendKind = Field(
        default=BackendKind.ZINC,
        description="Compiler backend",
    )
    max_heap: str = Field(
        default=DEFAULT_MAX_HEAP,
        pattern=r"^\d+[kKmMgG]?$",
        description="JVM heap cap",
    )
    file_encoding: str = Field(
        default_factory=default_file_encoding,
        min_length=1,
        description="Encoding propagated to the JVM",
    )
    source_extension: str = Field(
        default=DEFAULT_SOURCE_EXTENSION,
        min_length=1,
        description="Handled source file suffix",
    )
    strict_output: bool = Field(
        default=False,
        description="Parse output lines as diagnostics",
    )
    debug: bool = Field(
        default=True,
        description="Pass -debug to the backend",
    )
    java_home: Path | None = Field(
        default=None,
        description="Fallback JVM installation",
    )
    cache_toolchain_listing: bool = Field(
        default=True,
        description="Cache the toolchain directory listing",
    )

    @property
    def jvm_options(self) -> list[str]:
        """JVM flags for the compiler process."""
        return [f"-Xmx{self.max_heap}", f"-Dfile.encoding={self.file_encoding}"]

    @classmethod
    def from_yaml(cls, path: Path) -> BuilderConfig:
        """Load BuilderConfig from a YAML file.

        Environment variables still apply to fields absent from the file.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            Validated BuilderConfig.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            pydantic.ValidationError: If validation fails.
        """
        if not path.exists():
            raise FileNotFoundError(f"Builder config not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}

        return cls(**data)
