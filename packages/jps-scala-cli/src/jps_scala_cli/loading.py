"""Loading of project and builder configuration files for CLI commands."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from jps_scala.config import BuilderConfig
from jps_scala.models import CompilationUnit
from jps_scala.project import ProjectModel
from jps_scala_cli.errors import (
    CLIError,
    handle_file_not_found,
    handle_validation_error,
    handle_yaml_error,
)


def load_project(project_path: str) -> ProjectModel:
    """Load project.yaml, converting failures into CLIError."""
    try:
        return ProjectModel.from_yaml(Path(project_path))
    except FileNotFoundError:
        handle_file_not_found(project_path)
    except yaml.YAMLError as e:
        handle_yaml_error(e, project_path)
    except PydanticValidationError as e:
        handle_validation_error(e, project_path)


def load_config(config_path: str | None, **overrides: object) -> BuilderConfig:
    """Load the builder configuration.

    Args:
        config_path: YAML file, or None to read JPS_SCALA_* environment variables.
        **overrides: Values replacing the loaded ones (None values are ignored).

    Returns:
        Validated BuilderConfig.
    """
    try:
        if config_path is None:
            config = BuilderConfig()
        else:
            config = BuilderConfig.from_yaml(Path(config_path))
    except FileNotFoundError:
        handle_file_not_found(config_path or "")
    except yaml.YAMLError as e:
        handle_yaml_error(e, config_path or "")
    except PydanticValidationError as e:
        handle_validation_error(e, config_path or "environment")

    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config
    try:
        return BuilderConfig(**{**config.model_dump(), **updates})
    except PydanticValidationError as e:
        handle_validation_error(e, "command line options")


def make_unit(project: ProjectModel, modules: tuple[str, ...], tests: bool) -> CompilationUnit:
    """Create a compilation unit, checking the modules exist."""
    known = {m.name for m in project.modules}
    missing = [m for m in modules if m not in known]
    if missing:
        available = ", ".join(sorted(known)) or "none"
        raise CLIError(f"Unknown module(s): {', '.join(missing)}. Available: {available}")
    return CompilationUnit(modules=modules, contains_tests=tests)
