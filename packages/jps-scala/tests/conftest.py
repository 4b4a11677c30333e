"""Shared pytest fixtures for jps-scala tests.

Provides a fake toolchain directory, a project model with a Scala facet,
and a fake ``java`` launcher that records its arguments.
"""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest
import structlog

from jps_scala.config import BuilderConfig
from jps_scala.models import FacetSettings, Library
from jps_scala.project import ModuleSpec, ProjectModel
from jps_scala.toolchain import ToolchainDirectory

# Toolchain artifact file names
SBT_INTERFACE = "sbt-interface.jar"
COMPILER_INTERFACE = "compiler-interface-sources.jar"

# Fake launcher: prints its arguments and the argument file, exits with $FAKE_JAVA_EXIT
FAKE_JAVA = """#!/bin/sh
echo "argv: $*"
for last; do true; done
cat "$last"
echo
exit ${FAKE_JAVA_EXIT:-0}
"""


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def clear_toolchain_cache() -> None:
    """Reset the toolchain listing cache between tests."""
    ToolchainDirectory.clear_cache()


@pytest.fixture
def toolchain_dir(tmp_path: Path) -> Path:
    """Create a toolchain directory with zinc artifacts."""
    root = tmp_path / "zinc"
    root.mkdir()
    for name in (COMPILER_INTERFACE, SBT_INTERFACE, "zinc.jar", "incremental-compiler.jar"):
        (root / name).write_bytes(b"PK")
    return root


@pytest.fixture
def scala_jars(tmp_path: Path) -> tuple[Path, ...]:
    """Compiler library files."""
    lib = tmp_path / "lib"
    lib.mkdir()
    jars = (lib / "scala-compiler.jar", lib / "scala-library.jar", lib / "scala-reflect.jar")
    for jar in jars:
        jar.write_bytes(b"PK")
    return jars


@pytest.fixture
def fake_jdk(tmp_path: Path) -> Path:
    """JDK home whose bin/java is the fake launcher."""
    home = tmp_path / "jdk"
    (home / "bin").mkdir(parents=True)
    java = home / "bin" / "java"
    java.write_text(FAKE_JAVA)
    java.chmod(java.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return home


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Project directory with Scala and Java sources in core/src."""
    src = tmp_path / "project" / "core" / "src"
    src.mkdir(parents=True)
    (src / "A.scala").write_text("object A\n")
    (src / "B.java").write_text("class B {}\n")
    (src / "C.scala").write_text("object C\n")
    return tmp_path / "project"


@pytest.fixture
def project(project_dir: Path, scala_jars: tuple[Path, ...], fake_jdk: Path) -> ProjectModel:
    """Project with a 'core' module using a project-level compiler library."""
    util_jar = project_dir / "lib" / "util.jar"
    return ProjectModel(
        modules=(
            ModuleSpec(
                name="core",
                output_dir=project_dir / "out" / "production" / "core",
                test_output_dir=project_dir / "out" / "test" / "core",
                sdk_home=fake_jdk,
                source_roots=(project_dir / "core" / "src",),
                libraries=(Library(name="util", files=(util_jar,)),),
                facet=FacetSettings(
                    compiler_library_level="Project",
                    compiler_library_name="scala-compiler",
                ),
                dependencies=("common",),
            ),
            ModuleSpec(
                name="common",
                output_dir=project_dir / "out" / "production" / "common",
                test_output_dir=project_dir / "out" / "test" / "common",
            ),
        ),
        libraries=(Library(name="scala-compiler", files=scala_jars),),
    )


@pytest.fixture
def config(toolchain_dir: Path, tmp_path: Path) -> BuilderConfig:
    """Builder config pointing at the fake toolchain."""
    return BuilderConfig(
        toolchain_root=toolchain_dir,
        runner_classpath=[tmp_path / "plugin" / "lib" / "jps-scala.jar"],
        file_encoding="UTF-8",
    )
