"""The Node interface shared by every element of a graph."""

from __future__ import annotations

from abc import ABC
from collections.abc import Mapping
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

from bayesnet._errors import UnknownDependencyError

if TYPE_CHECKING:
    import numpy as np

    from bayesnet._distributions import Bijector


class NodeKind(StrEnum):
    """The kind of node in the graph."""

    LEAF = auto()  # No dependencies, fully specified model
    PARENT = auto()  # Model realized from the values of its children
    MODIFIER = auto()  # Post-processes the wrapped node
    DETERMINISTIC = auto()  # Pure function of its children


class Node(ABC):  # noqa: B024
    """A named variable of a directed acyclic graph.

    A node holds its children (the nodes it depends on), an entropy source and
    a model. The model of a leaf is a fully specified distribution; the model
    of a parent is called with the values of its children, in declared order,
    to produce the concrete distribution.

    General traversal algorithms are defined on this interface. The methods
    below are the per-node operations invoked by the traversal once all
    dependencies are bound in `variables`; new node kinds customize behavior
    by overriding them.

    Nodes are immutable. Random behavior comes from the entropy source, which
    may be shared between nodes.
    """

    __slots__ = ()

    name: str
    children: tuple[Node, ...]
    rng: np.random.Generator | None
    model: Any

    @property
    def dependency_names(self) -> tuple[str, ...]:
        """Names of the children, in declared order."""
        return tuple(child.name for child in self.children)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def kind(self) -> NodeKind:
        return NodeKind.LEAF if self.is_leaf else NodeKind.PARENT

    @property
    def event_shape(self) -> tuple[int, ...]:
        """Intrinsic shape of a single draw; sample axes are not included."""
        return ()

    def realize(self, variables: Mapping[str, Any]) -> Any:
        """Instantiate the concrete distribution from the bound child values."""
        if self.is_leaf:
            return self.model
        return self.model(*child_values(self, variables))

    def sample(self, variables: Mapping[str, Any], *dims: int) -> Any:
        """Draw a value for this node.

        `dims` requests independent draws stacked along new trailing axes. It
        only applies to leaves: a parent draws a single realization from the
        already batched child values, otherwise the batch would multiply once
        per level of the graph.
        """
        distribution = self.realize(variables)
        if self.is_leaf:
            return distribution.sample(self.rng, *dims)
        return distribution.sample(self.rng)

    def evaluate(self, variables: Mapping[str, Any]) -> Any:
        """Return the bound value; only deterministic nodes recompute."""
        return var_value(self, variables)

    def log_density(self, variables: Mapping[str, Any]) -> Any:
        return self.realize(variables).logdensity(var_value(self, variables))

    def bijector(self, variables: Mapping[str, Any]) -> Bijector | None:
        return self.realize(variables).bijector()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.dependency_names})"


def child_values(node: Node, variables: Mapping[str, Any]) -> tuple[Any, ...]:
    """Extract the values of the node's children from `variables`, in declared order.

    Raises:
        UnknownDependencyError: If a dependency is not bound.

    """
    try:
        return tuple(variables[name] for name in node.dependency_names)
    except KeyError as e:
        raise UnknownDependencyError(e.args[0], node.name) from None


def var_value(node: Node, variables: Mapping[str, Any]) -> Any:
    """Extract the node's own value from `variables`.

    Raises:
        UnknownDependencyError: If the node is not bound.

    """
    try:
        return variables[node.name]
    except KeyError:
        raise UnknownDependencyError(node.name) from None
