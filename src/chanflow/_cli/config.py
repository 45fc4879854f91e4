"""Project settings read from the ``[tool.chanflow]`` table of pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from chanflow._model import DEFAULT_TYPE
from chanflow._typeexpr import TypeExpr, TypeSyntaxError, iter_params, parse_type

_TABLE = "[tool.chanflow]"


class ConfigError(Exception):
    """Error in chanflow configuration."""


@dataclass(slots=True, frozen=True)
class ChanflowConfig:
    """Settings for the command line tools.

    Attributes:
        default_type: Type given to type parameters nothing constrains.
        graph: Graph document used when a command is given no path,
            already resolved against ``project_root``.
        project_root: Directory holding the pyproject.toml, if one was found.

    """

    default_type: TypeExpr = DEFAULT_TYPE
    graph: Path | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Return the nearest pyproject.toml at or above ``start_dir`` (default: cwd)."""
    current = (start_dir or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _parse_default_type(value: object) -> TypeExpr:
    if not isinstance(value, str):
        msg = f"Invalid {_TABLE}.default-type: expected string"
        raise ConfigError(msg)
    try:
        expr = parse_type(value)
    except TypeSyntaxError as e:
        msg = f"Invalid {_TABLE}.default-type: {e}"
        raise ConfigError(msg) from e
    if next(iter_params(expr), None) is not None:
        msg = f"Invalid {_TABLE}.default-type '{value}': must be a concrete type"
        raise ConfigError(msg)
    return expr


def _parse_graph_path(value: object, project_root: Path) -> Path:
    if not isinstance(value, str):
        msg = f"Invalid {_TABLE}.graph: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    return path if path.is_absolute() else project_root / path


def load_config(pyproject_path: Path) -> ChanflowConfig:
    """Read the chanflow settings from a pyproject.toml file.

    Missing keys keep their defaults; a file without the table yields a
    config that only records the project root.

    Raises:
        ConfigError: If the file is not valid TOML or a setting is malformed.

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    settings = data.get("tool", {}).get("chanflow", {})

    default_type = DEFAULT_TYPE
    if "default-type" in settings:
        default_type = _parse_default_type(settings["default-type"])

    graph = None
    if "graph" in settings:
        graph = _parse_graph_path(settings["graph"], project_root)

    return ChanflowConfig(default_type=default_type, graph=graph, project_root=project_root)


def get_config() -> ChanflowConfig:
    """Load settings from the nearest pyproject.toml, or return the defaults if there is none."""
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return ChanflowConfig()
    return load_config(pyproject_path)
