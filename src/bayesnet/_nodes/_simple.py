"""Basic leaf/parent node."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from bayesnet._graph import collect_nodes

from ._base import Node

if TYPE_CHECKING:
    import numpy as np


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class SimpleNode(Node):
    """Named variable backed by a distribution.

    For a leaf, `model` is a fully specified distribution. For a parent,
    `model` is called with the values of `children` to build the distribution,
    e.g. `SimpleNode("c", rng, KernelNormal, (a, b))` samples from
    `KernelNormal(a_value, b_value)`.

    Log-densities are elementwise: no reduction over intrinsic axes is done,
    use `BroadcastedNode` for array-valued variables.

    Example:
        >>> a = SimpleNode("a", rng, KernelUniform())
        >>> b = SimpleNode("b", rng, KernelExponential())
        >>> c = SimpleNode("c", rng, KernelNormal, (a, b))
        >>> c.dependency_names
        ('a', 'b')

    """

    name: str
    rng: np.random.Generator
    model: Any
    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        collect_nodes(self)
