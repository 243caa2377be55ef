"""Graph query functions for CLI commands.

This module provides pure functions for querying a graph and summarizing
sampled variables. These are the functional core - no I/O, no Rich rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from bayesnet._graph import build_dependency_graph
from bayesnet._nodes import Node
from bayesnet._operations import ancestors_of
from bayesnet._sequential import SequentializedGraph, sequentialize

if TYPE_CHECKING:
    from collections.abc import Mapping

    from bayesnet._nodes import NodeKind


@dataclass(frozen=True, slots=True)
class NodeInfo:
    """Basic information about a node for listing."""

    name: str
    kind: NodeKind
    event_shape: tuple[int, ...]
    dependencies: tuple[str, ...]
    dependents: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class VariableSummary:
    """Shape and moments of one sampled variable."""

    name: str
    shape: tuple[int, ...]
    mean: float
    std: float


def list_nodes(graph: Node | SequentializedGraph) -> list[NodeInfo]:
    """List the nodes of a graph in execution order.

    Args:
        graph: A root node or a sequentialized graph.

    Returns:
        One NodeInfo per node, dependencies before dependents.

    """
    sequential = sequentialize(graph)
    dependency_graph = build_dependency_graph(sequential)
    return [
        NodeInfo(
            name=name,
            kind=node.kind,
            event_shape=node.event_shape,
            dependencies=node.dependency_names,
            dependents=tuple(sorted(dependency_graph.successors(name))),
        )
        for name, node in sequential.items()
    ]


def find_dependents(graph: Node | SequentializedGraph, name: str) -> list[NodeInfo]:
    """List the nodes of `graph` that depend on the node called `name`.

    Raises:
        KeyError: If the graph has no node called `name`.

    """
    sequential = sequentialize(graph)
    if name not in sequential:
        msg = f"Node not found: {name}"
        raise KeyError(msg)
    if isinstance(graph, Node):
        return list_nodes(ancestors_of(graph, name))
    dependents = build_dependency_graph(sequential).dependents(name)
    return list_nodes(SequentializedGraph(node for node in sequential.values() if node.name in dependents))


def summarize_variables(variables: Mapping[str, Any]) -> list[VariableSummary]:
    """Summarize every variable of a record, in record order."""
    summaries: list[VariableSummary] = []
    for name, value in variables.items():
        array = np.asarray(value, dtype=float)
        summaries.append(
            VariableSummary(
                name=name,
                shape=array.shape,
                mean=float(array.mean()),
                std=float(array.std()),
            ),
        )
    return summaries
