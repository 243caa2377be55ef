"""Utilities to discover bayesnet graphs in scripts and modules.

This module was adapted from `fastapi_cli.discover` of package `fastapi-cli` version 0.0.8 (77e6d1f).
"""

from __future__ import annotations

import importlib
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from types import ModuleType
from typing import TYPE_CHECKING, Any

import numpy as np

from bayesnet._nodes import Node
from bayesnet._sequential import SequentializedGraph

if TYPE_CHECKING:
    from pathlib import Path

    from .config import GraphSource

logger = logging.getLogger(__name__)

type GraphLike = Node | SequentializedGraph
type GraphFactory = Callable[[np.random.Generator], GraphLike]

#: Variable names tried, in order, when a script does not say which object is the graph.
DEFAULT_GRAPH_NAMES = ("graph", "model", "make_graph")


@dataclass
class ModuleData:
    """Module data for a Python module."""

    module_import_str: str
    extra_sys_path: Path
    module_paths: list[Path]


def get_module_data_from_path(path: Path) -> ModuleData:
    """Get module data from a file path.

    Args:
        path: Path to a Python file or package

    Returns:
        ModuleData containing module import information

    """
    use_path = path.resolve()
    module_path = use_path
    if use_path.is_file() and use_path.stem == "__init__":
        module_path = use_path.parent
    module_paths = [module_path]
    extra_sys_path = module_path.parent
    for parent in module_path.parents:
        init_path = parent / "__init__.py"
        if init_path.is_file():
            module_paths.insert(0, parent)
            extra_sys_path = parent.parent
        else:
            break

    module_str = ".".join(p.stem for p in module_paths)
    return ModuleData(
        module_import_str=module_str,
        extra_sys_path=extra_sys_path.resolve(),
        module_paths=module_paths,
    )


def is_graph_like(obj: object) -> bool:
    return isinstance(obj, Node | SequentializedGraph)


def _check_graph_object(obj: object, var_name: str, module_name: str) -> GraphLike | GraphFactory:
    if is_graph_like(obj) or callable(obj):
        return obj  # type: ignore[return-value]
    msg = f"'{var_name}' in {module_name} is not a Node, a SequentializedGraph or a graph factory"
    raise TypeError(msg)


def _infer_graph(module: ModuleType) -> GraphLike | GraphFactory:
    """Pick the graph object of a module that does not name one.

    Conventional names win; otherwise the single module-level node that no
    other module-level node depends on.
    """
    for name in DEFAULT_GRAPH_NAMES:
        if hasattr(module, name):
            logger.debug(f"Found graph: {name}")
            return _check_graph_object(getattr(module, name), name, module.__name__)

    nodes = {name: obj for name in dir(module) if isinstance(obj := getattr(module, name), Node)}
    graphs = [obj for name in dir(module) if isinstance(obj := getattr(module, name), SequentializedGraph)]
    if len(graphs) == 1:
        return graphs[0]

    dependency_names = {dep for node in nodes.values() for dep in node.dependency_names}
    roots = [name for name, node in nodes.items() if node.name not in dependency_names]
    if len(roots) == 1:
        logger.debug(f"Found root node: {roots[0]}")
        return nodes[roots[0]]

    if roots:
        msg = f"Found several root nodes in module ({', '.join(roots)}), try using --var"
    else:
        msg = "Could not find a graph in module, try using --var"
    raise ValueError(msg)


def load_graph_from_script(script_path: Path, var_name: str | None = None) -> GraphLike | GraphFactory:
    """Load a graph from a Python script path.

    Args:
        script_path: Path to the Python script defining the graph
        var_name: Name of the graph variable. If None, infers from the script

    Returns:
        The loaded node, sequentialized graph or graph factory

    Raises:
        ImportError: If the module cannot be imported
        ValueError: If no graph is found or the specified variable doesn't exist
        TypeError: If the specified variable is not graph-like

    """
    module_data = get_module_data_from_path(script_path)
    sys.path.insert(0, str(module_data.extra_sys_path))

    try:
        module = importlib.import_module(module_data.module_import_str)
    except (ImportError, ValueError):
        logger.exception("Import error")
        logger.warning("Ensure all the package directories have an __init__.py file")
        raise

    if var_name:
        if not hasattr(module, var_name):
            msg = f"Could not find graph '{var_name}' in {module_data.module_import_str}"
            raise ValueError(msg)
        return _check_graph_object(getattr(module, var_name), var_name, module_data.module_import_str)

    return _infer_graph(module)


def load_graph_from_module_path(module_path: str) -> GraphLike | GraphFactory:
    """Load a graph from a module path (e.g., 'examples.broadcasted_graph:graph').

    Args:
        module_path: Module path in format 'module.path:variable_name'

    Returns:
        The loaded node, sequentialized graph or graph factory

    Raises:
        ValueError: If module path format is invalid
        TypeError: If the specified variable is not graph-like

    """
    if ":" not in module_path:
        msg = "Module path must be in format 'module.path:variable_name'"
        raise ValueError(msg)

    module_name, var_name = module_path.split(":", 1)
    module = importlib.import_module(module_name)
    if not hasattr(module, var_name):
        msg = f"Could not find graph '{var_name}' in module '{module_name}'"
        raise ValueError(msg)
    return _check_graph_object(getattr(module, var_name), var_name, module_name)


def load_graph_from_source(source: GraphSource) -> GraphLike | GraphFactory:
    """Load a graph from a GraphSource (script or module)."""
    from .config import ModuleSource, ScriptSource  # noqa: PLC0415

    match source:
        case ScriptSource(script=script, name=name):
            return load_graph_from_script(script, name)
        case ModuleSource(module_path=module_path):
            return load_graph_from_module_path(module_path)


def instantiate_graph(obj: GraphLike | GraphFactory, seed: int | None = None) -> GraphLike:
    """Turn a loaded object into a graph, seeding it when it is a factory.

    A factory is called with `numpy.random.default_rng(seed)`. A ready-made graph
    carries its own generators, so a seed cannot be applied to it.

    Raises:
        TypeError: If a factory returns something that is not graph-like.

    """
    if is_graph_like(obj):
        if seed is not None:
            logger.warning("Graph is not a factory; ignoring seed %d", seed)
        return obj  # type: ignore[return-value]

    graph: Any = obj(np.random.default_rng(seed))  # type: ignore[operator]
    if not is_graph_like(graph):
        msg = f"Graph factory returned {type(graph).__name__}, expected a Node or a SequentializedGraph"
        raise TypeError(msg)
    return graph
