"""Unit tests for compiler argument file construction."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from jps_scala.arguments import (
    ARGS_FILE_PREFIX,
    ARGS_FILE_SUFFIX,
    HEADER_OPTIONS,
    build_arguments,
    canonical_path,
    delete_arguments_file,
    join_paths,
    read_arguments_file,
    split_arguments,
    write_arguments_file,
)
from jps_scala.models import CompilerSettings


@pytest.fixture
def settings(tmp_path: Path) -> CompilerSettings:
    return CompilerSettings(
        compiler_classpath=(tmp_path / "lib" / "scala-compiler.jar", tmp_path / "lib" / "scala-library.jar"),
        sbt_interface=tmp_path / "zinc" / "sbt-interface.jar",
        compiler_interface=tmp_path / "zinc" / "compiler-interface-sources.jar",
        output_directory=tmp_path / "out" / "core",
        classpath=(tmp_path / "lib" / "util.jar", tmp_path / "out" / "common"),
    )


class TestBuildArguments:
    def test_fixed_header_order(self, settings: CompilerSettings, tmp_path: Path) -> None:
        args = build_arguments(settings, [tmp_path / "A.scala"])
        assert args[0] == "-debug"
        assert args[1::2][:5] == ["-scala-path", "-sbt-interface", "-compiler-interface", "-d", "-cp"]

    @pytest.mark.parametrize("count", [1, 3, 7])
    def test_six_header_entries_then_sources(
        self, settings: CompilerSettings, tmp_path: Path, count: int
    ) -> None:
        sources = [tmp_path / "src" / f"F{i}.scala" for i in range(count)]
        header, tail = split_arguments(build_arguments(settings, sources))
        assert [option for option, _ in header] == list(HEADER_OPTIONS)
        assert len(header) == 6
        assert tail == [canonical_path(s) for s in sources]

    def test_header_values(self, settings: CompilerSettings) -> None:
        header, _ = split_arguments(build_arguments(settings, []))
        values = dict(header)
        assert values["-debug"] is None
        assert values["-scala-path"] == join_paths(settings.compiler_classpath)
        assert values["-sbt-interface"] == canonical_path(settings.sbt_interface)
        assert values["-compiler-interface"] == canonical_path(settings.compiler_interface)
        assert values["-d"] == canonical_path(settings.output_directory)
        assert values["-cp"] == join_paths(settings.classpath)

    def test_multi_path_values_use_path_separator(self, settings: CompilerSettings) -> None:
        args = build_arguments(settings, [])
        scala_path = args[args.index("-scala-path") + 1]
        assert scala_path.split(os.pathsep) == [canonical_path(p) for p in settings.compiler_classpath]

    def test_sources_are_canonical(self, settings: CompilerSettings, tmp_path: Path) -> None:
        messy = tmp_path / "src" / ".." / "src" / "A.scala"
        args = build_arguments(settings, [messy])
        assert args[-1] == str(tmp_path / "src" / "A.scala")
        assert os.path.isabs(args[-1])

    def test_relative_paths_become_absolute(self, settings: CompilerSettings) -> None:
        args = build_arguments(settings, [Path("src/A.scala")])
        assert args[-1] == os.path.join(os.getcwd(), "src", "A.scala")

    def test_empty_classpath(self, settings: CompilerSettings) -> None:
        settings = settings.model_copy(update={"classpath": ()})
        args = build_arguments(settings, [])
        assert args[-2:] == ["-cp", ""]

    def test_without_debug(self, settings: CompilerSettings) -> None:
        args = build_arguments(settings, [], debug=False)
        assert "-debug" not in args
        assert args[0] == "-scala-path"


class TestArgumentsFile:
    def test_round_trip(self, settings: CompilerSettings, tmp_path: Path) -> None:
        args = build_arguments(settings, [tmp_path / "A.scala", tmp_path / "B.scala"])
        path = write_arguments_file(args, directory=tmp_path)
        try:
            assert read_arguments_file(path) == args
        finally:
            delete_arguments_file(path)

    def test_one_argument_per_line(self, tmp_path: Path) -> None:
        path = write_arguments_file(["-debug", "-d", "/out"], directory=tmp_path)
        assert path.read_text(encoding="utf-8") == "-debug\n-d\n/out"

    def test_file_naming(self, tmp_path: Path) -> None:
        path = write_arguments_file(["-debug"], directory=tmp_path)
        assert path.name.startswith(ARGS_FILE_PREFIX)
        assert path.name.endswith(ARGS_FILE_SUFFIX)
        assert path.parent == tmp_path

    def test_fresh_file_each_time(self, tmp_path: Path) -> None:
        first = write_arguments_file(["a"], directory=tmp_path)
        second = write_arguments_file(["a"], directory=tmp_path)
        assert first != second

    def test_write_failure_raises_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            write_arguments_file(["a"], directory=tmp_path / "missing")

    def test_delete(self, tmp_path: Path) -> None:
        path = write_arguments_file(["a"], directory=tmp_path)
        delete_arguments_file(path)
        assert not path.exists()

    def test_delete_missing_file_is_quiet(self, tmp_path: Path) -> None:
        delete_arguments_file(tmp_path / "gone.txt")
