"""Array-valued node built on BroadcastedDistribution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from bayesnet._distributions import BroadcastedDistribution
from bayesnet._graph import collect_nodes
from bayesnet._math import insert_axes, leading_broadcast_shape

from ._base import Node, child_values

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from bayesnet._distributions import Distribution


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class BroadcastedNode(Node):
    """Array-valued variable: one kernel distribution per element.

    A leaf is given constant `params`; a parent is given `children` whose
    values become the parameters. The event shape is the leading-axis
    broadcast of the parameter shapes (leaf) or of the children's event shapes
    (parent).

    Values carry their sample axes after the intrinsic ones. When a parent is
    realized, singleton axes are inserted between each child's intrinsic and
    sample axes so that e.g. a `(3, 2)` child (event `(3,)`, 2 samples) lines
    up with a `(3, 4, 2)` child (event `(3, 4)`, 2 samples).

    Example:
        >>> a = BroadcastedNode("a", rng, KernelUniform, params=(0, np.ones(3)))
        >>> b = BroadcastedNode("b", rng, KernelExponential, params=(np.ones((3, 4)),))
        >>> c = BroadcastedNode("c", rng, KernelNormal, (a, b))
        >>> c.event_shape
        (3, 4)

    """

    name: str
    rng: np.random.Generator
    family: Callable[..., Distribution]
    children: tuple[Node, ...] = ()
    params: tuple[Any, ...] = ()
    event_shape: tuple[int, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "params", tuple(self.params))
        if self.children and self.params:
            msg = f"BroadcastedNode '{self.name}' takes either children or params, not both"
            raise ValueError(msg)
        if self.children:
            shapes = [child.event_shape for child in self.children]
        else:
            shapes = [np.shape(p) for p in self.params]
        object.__setattr__(self, "event_shape", leading_broadcast_shape(*shapes))
        collect_nodes(self)

    @property
    def model(self) -> Callable[..., Distribution]:
        return self.family

    def realize(self, variables: Mapping[str, Any]) -> BroadcastedDistribution:
        if self.is_leaf:
            return BroadcastedDistribution(self.family, *self.params)
        ndims = len(self.event_shape)
        aligned = [
            insert_axes(value, at=len(child.event_shape), count=ndims - len(child.event_shape))
            for child, value in zip(self.children, child_values(self, variables), strict=True)
        ]
        return BroadcastedDistribution(self.family, *aligned, ndims=ndims)
