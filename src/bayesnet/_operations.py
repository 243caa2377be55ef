"""Operations over a whole graph: sampling, evaluation, log-density and bijectors.

Each operation accepts either a root Node, which is traversed recursively,
or a SequentializedGraph, which is replayed in its fixed order. Both forms
produce identical results.
"""

from __future__ import annotations

import functools
import logging
from collections import ChainMap
from typing import TYPE_CHECKING, Any

from ._distributions import NamedBijector
from ._math import add_logdensity
from ._sequential import SequentializedGraph, sequentialize
from ._traverse import traverse

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._nodes import Node

logger = logging.getLogger(__name__)


def _sample_node(node: Node, variables: Mapping[str, Any], *dims: int) -> Any:
    return node.sample(variables, *dims)


def sample(
    root: Node | SequentializedGraph,
    *dims: int,
    variables: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Sample every variable of the graph that is not bound in `variables`.

    Each node is sampled exactly once. `dims` request independent draws stacked
    along new trailing axes and are applied to the leaves only; dependents draw
    one realization from their batched children.

    Args:
        root: Root node or sequentialized graph.
        *dims: Sizes of the extra trailing sample axes.
        variables: Conditioned values; these nodes (and the branches that only
            feed them) are not sampled.

    Returns:
        The conditioned values plus one sampled value per remaining node.

    Example:
        >>> variables = sample(c, 2)
        >>> variables["a"].shape, variables["c"].shape
        ((3, 2), (3, 4, 2))

    """
    if isinstance(root, SequentializedGraph):
        return root.sample(*dims, variables=variables)
    return traverse(_sample_node, root, variables, *dims)


def evaluate(root: Node | SequentializedGraph, variables: Mapping[str, Any]) -> dict[str, Any]:
    """Recompute the deterministic nodes given the random `variables`.

    All random variables the deterministic nodes need must be bound. Stochastic
    values are returned unchanged; deterministic values are recomputed from the
    current values of their children.
    """
    if isinstance(root, SequentializedGraph):
        return root.evaluate(variables)

    def evaluate_node(node: Node, computed: Mapping[str, Any]) -> Any:
        return node.evaluate(ChainMap(computed, variables))  # type: ignore[arg-type]

    # empty seed: every node is visited, not only the unbound ones
    computed = traverse(evaluate_node, root)
    return {**variables, **computed}


def log_density(root: Node | SequentializedGraph, variables: Mapping[str, Any]) -> Any:
    """Joint log-density of `variables`.

    One contribution per node, added elementwise. Contributions are scalars
    for single draws or arrays over the trailing sample axes for batched ones.
    A graph without contributions has log-density zero.

    Raises:
        ShapeMismatchError: If the sample shapes of the contributions differ.

    """
    if isinstance(root, SequentializedGraph):
        return root.log_density(variables)
    contributions = traverse(lambda node, _: node.log_density(variables), root)
    return functools.reduce(add_logdensity, contributions.values(), 0.0)


def infer_bijectors(root: Node | SequentializedGraph) -> NamedBijector:
    """Infer the bijector of every variable in the graph.

    A sample is drawn to instantiate the concrete distributions, so the
    entropy sources of the graph advance. Only the shapes of the sampled
    values matter for the result.
    """
    if isinstance(root, SequentializedGraph):
        return root.bijectors()
    variables = sample(root)
    return NamedBijector(traverse(lambda node, _: node.bijector(variables), root))


def prior(root: Node) -> SequentializedGraph:
    """All dependencies of `root`, as a sequentialized graph without `root` itself."""
    return sequentialize(root).without(root.name)


def ancestors_of(root: Node, *targets: str | Node) -> SequentializedGraph:
    """Nodes between each target and `root` that depend on the target.

    Despite the name, the result is the target's dependents (the nodes whose
    values flow from it towards `root`), not its own dependencies. The name
    follows the established `parents` API, where the root sits at the top.

    A node is recorded if a target is one of its direct dependencies or if one
    of its direct dependencies is already recorded, so the result holds every
    node whose value (transitively) depends on a target. Results for several
    targets are merged without duplicates and kept in the execution order of
    `root`.

    Example:
        >>> list(ancestors_of(d, "a"))
        ['c', 'd']

    """
    recorded: dict[str, Node] = {}
    for target in targets:
        name = target if isinstance(target, str) else target.name

        def record_dependent(node: Node, found: Mapping[str, Any], name: str = name) -> Node | None:
            if name in node.dependency_names or any(dep in found for dep in node.dependency_names):
                return node
            return None

        recorded.update(traverse(record_dependent, root))
    return SequentializedGraph(node for name, node in sequentialize(root).items() if name in recorded)
