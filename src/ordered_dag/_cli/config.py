"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

type VertexType = Literal["str", "int"]

VERTEX_TYPES: tuple[VertexType, ...] = ("str", "int")


class ConfigError(Exception):
    """Error in ordered-dag configuration."""


@dataclass(slots=True, frozen=True)
class DagConfig:
    """Configuration loaded from the ``[tool.ordered-dag]`` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: Path | None = None
    vertex_type: VertexType = "str"
    project_root: Path | None = None

    def parse_vertex(self, raw: str) -> str | int:
        """Convert a command-line argument to a vertex of the configured type.

        Raises:
            ConfigError: If ``raw`` is not a valid vertex of the configured type.

        """
        if self.vertex_type == "int":
            try:
                return int(raw)
            except ValueError:
                msg = f"Invalid vertex '{raw}': expected an integer (vertex-type = \"int\")"
                raise ConfigError(msg) from None
        return raw


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config(pyproject_path: Path) -> DagConfig:
    """Load and validate [tool.ordered-dag] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed DagConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("ordered-dag", {})

    if not section:
        return DagConfig(project_root=project_root)

    graph_path: Path | None = None
    if "graph" in section:
        graph_value = section["graph"]
        if not isinstance(graph_value, str):
            msg = "Invalid [tool.ordered-dag].graph: expected string path"
            raise ConfigError(msg)
        graph_path = Path(graph_value)
        if not graph_path.is_absolute():
            graph_path = project_root / graph_path

    vertex_type = section.get("vertex-type", "str")
    if vertex_type not in VERTEX_TYPES:
        msg = f"Invalid [tool.ordered-dag].vertex-type: expected one of {', '.join(VERTEX_TYPES)}"
        raise ConfigError(msg)

    return DagConfig(graph=graph_path, vertex_type=vertex_type, project_root=project_root)


def get_config() -> DagConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        DagConfig (may be empty if no pyproject.toml or no [tool.ordered-dag] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return DagConfig()
    return load_config(pyproject_path)
