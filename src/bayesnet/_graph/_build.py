"""Bridge from a graph of nodes to names: collection, edges and validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bayesnet._errors import CyclicGraphError, NameCollisionError
from bayesnet._traverse import traverse

from ._dependency_graph import DependencyGraph

if TYPE_CHECKING:
    from collections.abc import Mapping

    from bayesnet._nodes import Node


def collect_nodes(*roots: Node) -> dict[str, Node]:
    """Collect every node reachable from `roots`, keyed by name.

    The same node object may be reached through several dependents.

    Raises:
        NameCollisionError: If two different node objects share a name.

    """
    nodes: dict[str, Node] = {}
    stack = list(roots)
    while stack:
        current = stack.pop()
        seen = nodes.get(current.name)
        if seen is current:
            continue
        if seen is not None:
            raise NameCollisionError(current.name)
        nodes[current.name] = current
        stack.extend(current.children)
    return nodes


def build_dependency_graph(nodes: Mapping[str, Node]) -> DependencyGraph[str]:
    """Build the dependency graph over the names in `nodes`.

    An edge (a, b) means "b depends on a". Dependencies outside `nodes` are
    left out, so a sequentialized subgraph yields only its own edges.

    Example:
        >>> graph = build_dependency_graph(collect_nodes(d))
        >>> graph.predecessors("d")
        frozenset({'b', 'c'})

    """
    edges = [(dep, name) for name, node in nodes.items() for dep in node.dependency_names if dep in nodes]
    return DependencyGraph.from_edges(edges, nodes=nodes.keys())


def _visit(_node: Node, _variables: Mapping[str, object]) -> None:
    return None


def validate_graph(*roots: Node) -> list[str]:
    """Validate the graph below `roots` and return a list of error messages.

    Every root is walked by the traversal engine, so a graph that validates
    cleanly is one every operation can run on.

    Raises:
        NameCollisionError: If two different node objects share a name.

    """
    collect_nodes(*roots)
    errors: list[str] = []
    for root in roots:
        try:
            traverse(_visit, root)
        except CyclicGraphError as e:
            errors.append(str(e))
    return errors
