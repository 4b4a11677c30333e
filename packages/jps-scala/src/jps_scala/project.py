"""Project model loaded from project.yaml.

A small, file-based stand-in for the build host's project model. It
describes modules, their libraries and Scala facets, and the project and
global library tables. ProjectCollaborator answers builder queries from it.

Example project.yaml:
    modules:
      - name: core
        output_dir: out/production/core
        sdk_home: /usr/lib/jvm/java-17
        source_roots: [core/src]
        facet:
          compiler_library_level: Project
          compiler_library_name: scala-compiler
    libraries:
      - name: scala-compiler
        files: [lib/scala-compiler.jar, lib/scala-library.jar]
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from jps_scala.models import FacetSettings, Library


class ModuleSpec(BaseModel):
    """A module of the project.

    Attributes:
        name: Module name
        output_dir: Production output directory
        test_output_dir: Test output directory
        sdk_home: JDK home used to run the compiler
        source_roots: Production source roots
        test_source_roots: Test source roots
        libraries: Module-level libraries
        facet: Scala facet settings (None if the module has no facet)
        dependencies: Names of modules this module depends on
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Module name")
    output_dir: Path | None = Field(default=None, description="Production output")
    test_output_dir: Path | None = Field(default=None, description="Test output")
    sdk_home: Path | None = Field(default=None, description="JDK home")
    source_roots: tuple[Path, ...] = Field(default=(), description="Source roots")
    test_source_roots: tuple[Path, ...] = Field(default=(), description="Test source roots")
    libraries: tuple[Library, ...] = Field(default=(), description="Module libraries")
    facet: FacetSettings | None = Field(default=None, description="Scala facet")
    dependencies: tuple[str, ...] = Field(default=(), description="Module dependencies")


class ProjectModel(BaseModel):
    """Project-wide module and library configuration.

    Relative paths are resolved against ``base_dir`` by ``from_yaml``.

    Attributes:
        modules: Project modules
        libraries: Project-level libraries
        global_libraries: Global (application-level) libraries
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    modules: tuple[ModuleSpec, ...] = Field(default=(), description="Modules")
    libraries: tuple[Library, ...] = Field(default=(), description="Project libraries")
    global_libraries: tuple[Library, ...] = Field(default=(), description="Global libraries")

    @model_validator(mode="after")
    def _unique_module_names(self) -> ProjectModel:
        names = [m.name for m in self.modules]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate module names: {', '.join(duplicates)}")
        return self

    def get_module(self, name: str) -> ModuleSpec:
        """Get a module by name.

        Args:
            name: Module name.

        Returns:
            The module.

        Raises:
            KeyError: If no module has that name.
        """
        for module in self.modules:
            if module.name == name:
                return module
        raise KeyError(name)

    @classmethod
    def from_yaml(cls, path: Path) -> ProjectModel:
        """Load a ProjectModel from YAML, resolving relative paths.

        Args:
            path: Path to project.yaml.

        Returns:
            Validated ProjectModel with absolute paths.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            pydantic.ValidationError: If validation fails.
        """
        if not path.exists():
            raise FileNotFoundError(f"Project model not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}

        return cls.model_validate(data).with_base_dir(path.resolve().parent)

    def with_base_dir(self, base_dir: Path) -> ProjectModel:
        """Return a copy with every relative path anchored at base_dir."""

        def anchor(p: Path | None) -> Path | None:
            if p is None or p.is_absolute():
                return p
            return base_dir / p

        def anchor_library(library: Library) -> Library:
            return library.model_copy(
                update={"files": tuple(anchor(f) for f in library.files)}
            )

        modules = tuple(
            m.model_copy(
                update={
                    "output_dir": anchor(m.output_dir),
                    "test_output_dir": anchor(m.test_output_dir),
                    "sdk_home": anchor(m.sdk_home),
                    "source_roots": tuple(anchor(r) for r in m.source_roots),
                    "test_source_roots": tuple(anchor(r) for r in m.test_source_roots),
                    "libraries": tuple(anchor_library(lib) for lib in m.libraries),
                }
            )
            for m in self.modules
        )
        return self.model_copy(
            update={
                "modules": modules,
                "libraries": tuple(anchor_library(lib) for lib in self.libraries),
                "global_libraries": tuple(anchor_library(lib) for lib in self.global_libraries),
            }
        )
