"""Shared test fixtures for jps-scala-cli tests.

Provides CliRunner fixtures and an on-disk project: project.yaml,
a builder config, a toolchain directory and a fake ``java`` launcher.
"""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from jps_scala.toolchain import ToolchainDirectory

# File name constants
PROJECT_YAML_FILENAME = "project.yaml"
CONFIG_YAML_FILENAME = "jps-scala.yaml"

# Fake launcher: prints its arguments, exits with $FAKE_JAVA_EXIT
FAKE_JAVA = """#!/bin/sh
echo "compiling with: $*"
exit ${FAKE_JAVA_EXIT:-0}
"""

PROJECT_YAML = """\
modules:
  - name: core
    output_dir: out/production/core
    test_output_dir: out/test/core
    sdk_home: jdk
    source_roots: [core/src]
    test_source_roots: [core/test]
    dependencies: [common]
    facet:
      compiler_library_level: Project
      compiler_library_name: scala-compiler
  - name: common
    output_dir: out/production/common
    source_roots: [common/src]
  - name: plain
    output_dir: out/production/plain
    source_roots: [plain/src]
libraries:
  - name: scala-compiler
    files: [lib/scala-compiler.jar, lib/scala-library.jar]
"""


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Send builder logs to the real stderr, keeping CLI output clean."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def clear_toolchain_cache() -> None:
    """Reset the toolchain listing cache between tests."""
    ToolchainDirectory.clear_cache()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Write a project with a Scala module, a toolchain and a fake JDK.

    Layout:
        project.yaml, jps-scala.yaml
        core/src/{A.scala,B.java}, common/src/, plain/src/
        lib/scala-*.jar, zinc/*.jar, jdk/bin/java
    """
    root = tmp_path / "workspace"
    for directory in ("core/src", "common/src", "plain/src", "lib", "zinc", "jdk/bin"):
        (root / directory).mkdir(parents=True)

    (root / "core" / "src" / "A.scala").write_text("object A\n")
    (root / "core" / "src" / "B.java").write_text("class B {}\n")
    (root / "plain" / "src" / "P.scala").write_text("object P\n")
    for jar in ("lib/scala-compiler.jar", "lib/scala-library.jar"):
        (root / jar).write_bytes(b"PK")
    for jar in ("sbt-interface.jar", "compiler-interface-sources.jar", "zinc.jar"):
        (root / "zinc" / jar).write_bytes(b"PK")

    java = root / "jdk" / "bin" / "java"
    java.write_text(FAKE_JAVA)
    java.chmod(java.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    (root / PROJECT_YAML_FILENAME).write_text(PROJECT_YAML)
    (root / CONFIG_YAML_FILENAME).write_text(
        f"toolchain_root: {root / 'zinc'}\n"
        "runner_classpath:\n"
        f"  - {root / 'plugin' / 'jps-scala.jar'}\n"
        "file_encoding: UTF-8\n"
    )
    return root


@pytest.fixture
def project_args(project_root: Path) -> list[str]:
    """Common --project/--config arguments for the test project."""
    return [
        "--project",
        str(project_root / PROJECT_YAML_FILENAME),
        "--config",
        str(project_root / CONFIG_YAML_FILENAME),
    ]


@pytest.fixture
def posix() -> None:
    """Skip on platforms where the fake launcher cannot run."""
    if os.name == "nt":
        pytest.skip("fake java launcher is a POSIX script")


@pytest.fixture
def bracketed_library(project_root: Path) -> str:
    """Point the core facet at a missing library whose name contains markup brackets."""
    project = project_root / PROJECT_YAML_FILENAME
    project.write_text(
        project.read_text().replace(
            "compiler_library_name: scala-compiler", "compiler_library_name: lib[scala]"
        )
    )
    return "compiler library for module core not found: Project / lib[scala]"
