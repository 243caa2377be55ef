"""Fixed execution order for repeated evaluation of a graph."""

from __future__ import annotations

import functools
import logging
from collections import ChainMap
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from ._distributions import NamedBijector
from ._errors import NameCollisionError
from ._math import add_logdensity
from ._traverse import merge_value, traverse

if TYPE_CHECKING:
    from collections.abc import Iterable, Set

    from ._nodes import Node

logger = logging.getLogger(__name__)


def _identity(node: Node, _variables: Mapping[str, Any]) -> Node:
    return node


class SequentializedGraph(Mapping[str, "Node"]):
    """A graph flattened into one valid execution order.

    An ordered, immutable mapping from name to node where every node comes
    after its dependencies. Sampling, evaluating and computing log-densities
    iterate this order instead of walking the recursive child structure, with
    results identical to the recursive traversal of the original graph.

    Sampling with conditioned variables follows an execution plan derived once
    per set of conditioned names and cached on the graph: it skips the
    conditioned nodes and every node that only feeds them, in the same order
    the recursive traversal would draw.

    Example:
        >>> graph = sequentialize(d)
        >>> list(graph)
        ['a', 'b', 'c', 'd']
        >>> variables = graph.sample(2)

    """

    __slots__ = ("_nodes", "_plans")

    def __init__(self, nodes: Mapping[str, Node] | Iterable[Node] = ()) -> None:
        items = nodes.values() if isinstance(nodes, Mapping) else nodes
        self._nodes: dict[str, Node] = {}
        for node in items:
            seen = self._nodes.setdefault(node.name, node)
            if seen is not node:
                raise NameCollisionError(node.name)
        self._plans: dict[frozenset[str], tuple[Node, ...]] = {frozenset(): tuple(self._nodes.values())}

    def __getitem__(self, name: str) -> Node:
        return self._nodes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"SequentializedGraph({list(self._nodes)})"

    def without(self, *names: str) -> SequentializedGraph:
        """Return the graph without the given names, preserving order."""
        return SequentializedGraph(node for name, node in self._nodes.items() if name not in names)

    def union(self, other: Mapping[str, Node]) -> SequentializedGraph:
        """Append the nodes of `other` whose names are not present yet."""
        extra = (node for name, node in other.items() if name not in self._nodes)
        return SequentializedGraph([*self._nodes.values(), *extra])

    def plan(self, bound: Set[str]) -> tuple[Node, ...]:
        """Nodes to execute, in order, when the names in `bound` are already known."""
        relevant = frozenset(bound & self._nodes.keys())
        if relevant not in self._plans:
            logger.debug("Deriving execution plan for conditioned names %s", sorted(relevant))
            self._plans[relevant] = self._derive_plan(relevant)
        return self._plans[relevant]

    def _derive_plan(self, bound: frozenset[str]) -> tuple[Node, ...]:
        depended_upon = {dep for node in self._nodes.values() for dep in node.dependency_names}
        record: dict[str, Any] = dict.fromkeys(bound)
        for node in self._nodes.values():
            if node.name not in depended_upon:
                record = traverse(_identity, node, record)
        return tuple(node for name, node in record.items() if name in self._nodes and name not in bound)

    def sample(self, *dims: int, variables: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Sample every node not bound in `variables`; `dims` apply to leaves only."""
        record: dict[str, Any] = dict(variables) if variables is not None else {}
        for node in self.plan(frozenset(record)):
            merge_value(record, node, node.sample(record, *dims))
        return record

    def evaluate(self, variables: Mapping[str, Any]) -> dict[str, Any]:
        """Recompute the deterministic nodes given the random `variables`."""
        computed: dict[str, Any] = {}
        for node in self._nodes.values():
            merge_value(computed, node, node.evaluate(ChainMap(computed, variables)))
        return {**variables, **computed}

    def log_density(self, variables: Mapping[str, Any]) -> Any:
        """Sum of the log-densities of all nodes; zero for an empty graph."""
        contributions = (node.log_density(variables) for node in self._nodes.values())
        return functools.reduce(add_logdensity, (c for c in contributions if c is not None), 0.0)

    def bijectors(self) -> NamedBijector:
        """Infer the bijector of every node from a fresh sample."""
        variables = self.sample()
        bijectors = {name: node.bijector(variables) for name, node in self._nodes.items()}
        return NamedBijector({name: b for name, b in bijectors.items() if b is not None})


def sequentialize(node: Node | SequentializedGraph) -> SequentializedGraph:
    """Flatten the graph below `node` into its depth-first execution order.

    Each node appears exactly once, after all of its dependencies. An already
    sequentialized graph is returned unchanged.
    """
    if isinstance(node, SequentializedGraph):
        return node
    graph = SequentializedGraph(traverse(_identity, node))
    logger.debug("Sequentialized %s into %s", node.name, list(graph))
    return graph
