"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import cast


class ConfigError(Exception):
    """Error in bayesnet configuration."""


@dataclass(slots=True, frozen=True)
class ScriptSource:
    """Script path with optional variable name."""

    script: Path
    name: str | None = None


@dataclass(slots=True, frozen=True)
class ModuleSource:
    """Module path with variable name (e.g., 'examples.broadcasted_graph:graph')."""

    module_path: str


GraphSource = ScriptSource | ModuleSource


@dataclass(slots=True, frozen=True)
class BayesNetConfig:
    """Configuration loaded from the [tool.bayesnet] table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: GraphSource | None = None
    seed: int | None = None
    dims: tuple[int, ...] = ()
    output: Path | None = None
    project_root: Path | None = None


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


def _resolve(path_value: str, project_root: Path) -> Path:
    path = Path(path_value)
    if not path.is_absolute():
        path = project_root / path
    return path


def _parse_graph_source(value: object, project_root: Path) -> GraphSource:
    """Parse the graph field from config.

    Args:
        value: The raw value from TOML (string or table)
        project_root: Project root directory for resolving relative paths

    Returns:
        Parsed GraphSource

    Raises:
        ConfigError: If the value format is invalid

    """
    if isinstance(value, str):
        if ":" not in value:
            msg = f"Invalid module path '{value}'. Expected format: 'module.path:variable_name'"
            raise ConfigError(msg)
        return ModuleSource(module_path=value)

    if isinstance(value, dict):
        value_dict = cast("dict[str, object]", value)
        script_value = value_dict.get("script")
        if not isinstance(script_value, str):
            msg = "Invalid [tool.bayesnet].graph.script: expected string path"
            raise ConfigError(msg)

        name = value_dict.get("name")
        if name is not None and not isinstance(name, str):
            msg = "Invalid [tool.bayesnet].graph.name: expected string"
            raise ConfigError(msg)

        return ScriptSource(script=_resolve(script_value, project_root), name=name)

    msg = "Invalid [tool.bayesnet].graph configuration. Expected string or table with 'script' key."
    raise ConfigError(msg)


def _parse_dims(value: object) -> tuple[int, ...]:
    if isinstance(value, int) and not isinstance(value, bool):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(d, int) and not isinstance(d, bool) and d > 0 for d in value):
        msg = "Invalid [tool.bayesnet].dims: expected a positive integer or a list of positive integers"
        raise ConfigError(msg)
    return tuple(value)


def load_config(pyproject_path: Path) -> BayesNetConfig:
    """Load and validate [tool.bayesnet] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed BayesNetConfig

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

    section = data.get("tool", {}).get("bayesnet", {})
    if not section:
        return BayesNetConfig(project_root=project_root)

    graph_source: GraphSource | None = None
    if "graph" in section:
        graph_source = _parse_graph_source(section["graph"], project_root)

    seed: int | None = None
    if "seed" in section:
        seed = section["seed"]
        if not isinstance(seed, int) or isinstance(seed, bool):
            msg = "Invalid [tool.bayesnet].seed: expected integer"
            raise ConfigError(msg)

    dims = _parse_dims(section["dims"]) if "dims" in section else ()

    output_path: Path | None = None
    if "output" in section:
        output_value = section["output"]
        if not isinstance(output_value, str):
            msg = "Invalid [tool.bayesnet].output: expected string path"
            raise ConfigError(msg)
        output_path = _resolve(output_value, project_root)

    return BayesNetConfig(
        graph=graph_source,
        seed=seed,
        dims=dims,
        output=output_path,
        project_root=project_root,
    )


def get_config() -> BayesNetConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        BayesNetConfig (may be empty if no pyproject.toml or no [tool.bayesnet] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return BayesNetConfig()
    return load_config(pyproject_path)
