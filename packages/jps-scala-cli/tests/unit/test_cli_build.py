"""Tests for the jps-scala build command."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from jps_scala_cli.commands.build import build
from jps_scala_cli.main import cli


@pytest.mark.usefixtures("posix")
class TestBuildCompiles:
    def test_build_module(self, cli_runner: CliRunner, project_args: list[str]) -> None:
        result = cli_runner.invoke(build, [*project_args, "-m", "core"])
        assert result.exit_code == 0, result.output
        assert "compiling with:" in result.output
        assert "Compiled core" in result.output

    def test_compiler_failure_still_succeeds(
        self, cli_runner: CliRunner, project_args: list[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FAKE_JAVA_EXIT", "5")
        result = cli_runner.invoke(build, [*project_args, "-m", "core"])
        assert result.exit_code == 0
        assert "Compiled core" in result.output

    def test_explicit_files(
        self, cli_runner: CliRunner, project_args: list[str], project_root: Path
    ) -> None:
        source = project_root / "core" / "src" / "A.scala"
        result = cli_runner.invoke(build, [*project_args, "-m", "core", str(source)])
        assert result.exit_code == 0
        assert "Compiled core" in result.output

    def test_through_main_group(self, cli_runner: CliRunner, project_args: list[str]) -> None:
        result = cli_runner.invoke(
            cli, ["--log-level", "ERROR", "--no-color", "build", *project_args, "-m", "core"]
        )
        assert result.exit_code == 0
        assert "Compiled core" in result.output

    def test_default_project_path(
        self,
        cli_runner: CliRunner,
        project_root: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(project_root)
        result = cli_runner.invoke(build, ["-c", "jps-scala.yaml", "-m", "core"])
        assert result.exit_code == 0
        assert "Compiled core" in result.output


class TestBuildOutcomes:
    def test_nothing_to_compile(self, cli_runner: CliRunner, project_args: list[str]) -> None:
        result = cli_runner.invoke(build, [*project_args, "-m", "common"])
        assert result.exit_code == 0
        assert "Nothing to compile in common" in result.output

    def test_only_java_files(
        self, cli_runner: CliRunner, project_args: list[str], project_root: Path
    ) -> None:
        source = project_root / "core" / "src" / "B.java"
        result = cli_runner.invoke(build, [*project_args, "-m", "core", str(source)])
        assert result.exit_code == 0
        assert "Nothing to compile in core" in result.output

    def test_aborted_without_facet(self, cli_runner: CliRunner, project_args: list[str]) -> None:
        result = cli_runner.invoke(build, [*project_args, "-m", "plain"])
        assert result.exit_code == 1
        assert "no toolchain configuration in module plain" in result.output
        assert "Build of plain aborted" in result.output

    def test_empty_toolchain_override(
        self, cli_runner: CliRunner, project_args: list[str], tmp_path: Path
    ) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        result = cli_runner.invoke(
            build, [*project_args, "-m", "core", "--toolchain-root", str(empty)]
        )
        assert result.exit_code == 1
        assert "no toolchain artifacts found in" in result.output

    def test_launch_failure(
        self, cli_runner: CliRunner, project_args: list[str], project_root: Path
    ) -> None:
        (project_root / "jdk" / "bin" / "java").unlink()
        result = cli_runner.invoke(build, [*project_args, "-m", "core"])
        assert result.exit_code == 2
        assert "Cannot start compiler process" in result.output


class TestBuildInputErrors:
    def test_unknown_module(self, cli_runner: CliRunner, project_args: list[str]) -> None:
        result = cli_runner.invoke(build, [*project_args, "-m", "missing"])
        assert result.exit_code == 1
        assert "Unknown module(s): missing" in result.output

    def test_missing_project_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(build, ["-p", str(tmp_path / "nope.yaml"), "-m", "core"])
        assert result.exit_code == 2
        assert "File not found" in result.output

    def test_missing_config_file(
        self, cli_runner: CliRunner, project_root: Path, tmp_path: Path
    ) -> None:
        result = cli_runner.invoke(
            build,
            ["-p", str(project_root / "project.yaml"), "-c", str(tmp_path / "nope.yaml"), "-m", "core"],
        )
        assert result.exit_code == 2

    def test_invalid_yaml(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        project = tmp_path / "project.yaml"
        project.write_text("modules: [\n")
        result = cli_runner.invoke(build, ["-p", str(project), "-m", "core"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_invalid_project(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        project = tmp_path / "project.yaml"
        project.write_text("modules:\n  - name: core\n    colour: blue\n")
        result = cli_runner.invoke(build, ["-p", str(project), "-m", "core"])
        assert result.exit_code == 1
        assert "Validation failed" in result.output

    def test_module_is_required(self, cli_runner: CliRunner, project_args: list[str]) -> None:
        result = cli_runner.invoke(build, project_args)
        assert result.exit_code == 2

    def test_unknown_module_name_is_literal(
        self, cli_runner: CliRunner, project_args: list[str]
    ) -> None:
        result = cli_runner.invoke(build, [*project_args, "-m", "app[x]"])
        assert result.exit_code == 1
        assert "Unknown module(s): app[x]" in result.output


class TestBuildMessagesAreLiteral:
    def test_aborted_library_name(
        self, cli_runner: CliRunner, project_args: list[str], bracketed_library: str
    ) -> None:
        result = cli_runner.invoke(build, [*project_args, "-m", "core"])
        assert result.exit_code == 1
        assert bracketed_library in result.output
