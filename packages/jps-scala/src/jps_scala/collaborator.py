"""Build host interface consumed by the Scala builder.

The builder never depends on a concrete host framework. Everything it
needs from the host goes through BuildCollaborator:
- Dirty file enumeration for a compilation unit
- Facet settings and scoped library collections
- Output directory, SDK and compilation classpath of a unit
- Diagnostic emission

ProjectCollaborator implements the interface over a ProjectModel and is
used by the CLI and the tests.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from jps_scala.models import CompilationUnit, Diagnostic, DirtyFile, FacetSettings, Library
from jps_scala.project import ModuleSpec, ProjectModel

logger = structlog.get_logger(__name__)


@runtime_checkable
class BuildCollaborator(Protocol):
    """Queries and callbacks the builder needs from the build host."""

    def dirty_files(self, unit: CompilationUnit) -> Iterable[DirtyFile]:
        """Enumerate changed files of the unit as (target, file, source root)."""
        ...

    def facet_settings(self, module: str) -> FacetSettings | None:
        """Scala facet of a module, or None if the module has none."""
        ...

    def module_libraries(self, module: str) -> Sequence[Library]:
        """Libraries attached to a module."""
        ...

    def project_libraries(self) -> Sequence[Library]:
        """Project-level libraries."""
        ...

    def global_libraries(self) -> Sequence[Library]:
        """Global libraries."""
        ...

    def output_directory(self, unit: CompilationUnit) -> Path | None:
        """Output directory of the unit's representative target."""
        ...

    def compilation_classpath(self, unit: CompilationUnit, include_tests: bool) -> Sequence[Path]:
        """Full compilation classpath of the unit."""
        ...

    def sdk_home(self, unit: CompilationUnit) -> Path | None:
        """JDK home configured for the unit, or None."""
        ...

    def emit(self, diagnostic: Diagnostic) -> None:
        """Send a diagnostic to the host's message sink."""
        ...


class ProjectCollaborator:
    """BuildCollaborator backed by a ProjectModel.

    Diagnostics are collected in memory (safe to emit from reader threads)
    and optionally forwarded to a callback.

    Attributes:
        project: The project model
        diagnostics: Diagnostics emitted so far, in order

    Example:
        >>> project = ProjectModel.from_yaml(Path("project.yaml"))
        >>> host = ProjectCollaborator(project, dirty=[Path("core/src/A.scala")])
        >>> ScalaBuilder(config, host).build(CompilationUnit(modules=("core",)))
    """

    def __init__(
        self,
        project: ProjectModel,
        *,
        dirty: Iterable[Path] | None = None,
        on_diagnostic: Callable[[Diagnostic], None] | None = None,
    ) -> None:
        """Initialize the collaborator.

        Args:
            project: Project model to answer queries from.
            dirty: Explicit changed files. If None, every file under the
                unit's source roots is reported dirty (full rebuild).
            on_diagnostic: Optional callback invoked for each diagnostic.
        """
        self.project = project
        self.diagnostics: list[Diagnostic] = []
        self._dirty = list(dirty) if dirty is not None else None
        self._on_diagnostic = on_diagnostic
        self._lock = threading.Lock()

    def _modules(self, unit: CompilationUnit) -> list[ModuleSpec]:
        return [self.project.get_module(name) for name in unit.modules]

    def _roots(self, module: ModuleSpec, tests: bool) -> tuple[Path, ...]:
        return module.test_source_roots if tests else module.source_roots

    def dirty_files(self, unit: CompilationUnit) -> Iterator[DirtyFile]:
        modules = self._modules(unit)

        if self._dirty is None:
            for module in modules:
                for root in self._roots(module, unit.contains_tests):
                    if not root.is_dir():
                        continue
                    for file in sorted(p for p in root.rglob("*") if p.is_file()):
                        yield DirtyFile(target=module.name, file=file, source_root=root)
            return

        for file in self._dirty:
            yield self._locate(file, modules, unit.contains_tests)

    def _locate(self, file: Path, modules: list[ModuleSpec], tests: bool) -> DirtyFile:
        absolute = file if file.is_absolute() else file.resolve()
        for module in modules:
            for root in self._roots(module, tests):
                if absolute.is_relative_to(root):
                    return DirtyFile(target=module.name, file=absolute, source_root=root)
        return DirtyFile(target=modules[0].name, file=absolute, source_root=absolute.parent)

    def facet_settings(self, module: str) -> FacetSettings | None:
        return self.project.get_module(module).facet

    def module_libraries(self, module: str) -> Sequence[Library]:
        return self.project.get_module(module).libraries

    def project_libraries(self) -> Sequence[Library]:
        return self.project.libraries

    def global_libraries(self) -> Sequence[Library]:
        return self.project.global_libraries

    def output_directory(self, unit: CompilationUnit) -> Path | None:
        module = self.project.get_module(unit.representative)
        return module.test_output_dir if unit.contains_tests else module.output_dir

    def compilation_classpath(self, unit: CompilationUnit, include_tests: bool) -> list[Path]:
        """Classpath of the unit.

        Order: the unit's own libraries, then for each transitive
        dependency its output directories followed by its libraries.
        Test builds also see the unit's production output.
        """
        result: list[Path] = []
        in_unit = set(unit.modules)

        def add(path: Path | None) -> None:
            if path is not None and path not in result:
                result.append(path)

        for module in self._modules(unit):
            if include_tests:
                add(module.output_dir)
            for library in module.libraries:
                for f in library.files:
                    add(f)

        for dependency in self._transitive_dependencies(unit):
            if dependency.name in in_unit:
                continue
            add(dependency.output_dir)
            if include_tests:
                add(dependency.test_output_dir)
            for library in dependency.libraries:
                for f in library.files:
                    add(f)

        return result

    def _transitive_dependencies(self, unit: CompilationUnit) -> list[ModuleSpec]:
        seen: list[str] = []
        pending = [d for m in self._modules(unit) for d in m.dependencies]
        while pending:
            name = pending.pop(0)
            if name in seen:
                continue
            seen.append(name)
            try:
                pending.extend(self.project.get_module(name).dependencies)
            except KeyError:
                logger.warning("unknown_module_dependency", dependency=name)
        return [self.project.get_module(n) for n in seen if self._has_module(n)]

    def _has_module(self, name: str) -> bool:
        return any(m.name == name for m in self.project.modules)

    def sdk_home(self, unit: CompilationUnit) -> Path | None:
        return self.project.get_module(unit.representative).sdk_home

    def emit(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self.diagnostics.append(diagnostic)
        if self._on_diagnostic is not None:
            self._on_diagnostic(diagnostic)
