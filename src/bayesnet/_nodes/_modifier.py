"""Transparent wrapper that post-processes another node."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

from bayesnet._graph import collect_nodes

from ._base import Node, NodeKind, child_values, var_value

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from bayesnet._distributions import Bijector


class ModifierModel(Protocol):
    """What a modifier's model must provide once realized from the child values."""

    def sample(self, rng: np.random.Generator, value: Any) -> Any:
        """Post-process `value`, a draw of the wrapped node."""
        ...

    def logdensity(self, value: Any, logdensity: Any) -> Any:
        """Correct `logdensity`, the wrapped node's log-density at `value`."""
        ...


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class ModifierNode(Node):
    """Wraps another node and represents the same variable.

    The modifier has the same name and the same dependencies as the wrapped
    node, so dependents of that name are unaffected by its presence. Traversal
    descends directly into the wrapped node's children; the wrapped node
    itself is only reached through the modifier's operations and is never
    bound on its own.

    `model` is called with the child values (no arguments for a wrapped leaf)
    and must return a `ModifierModel`:
    - `sample`: the wrapped node draws first, then the modifier post-processes the draw.
    - `log_density`: the wrapped node's log-density, then the modifier's correction.
    - `bijector`: delegated unchanged, a modifier never changes the support.
    """

    wrapped: Node
    rng: np.random.Generator
    model: Callable[..., ModifierModel]

    def __post_init__(self) -> None:
        collect_nodes(self)

    @property
    def name(self) -> str:  # type: ignore[override]
        return self.wrapped.name

    @property
    def children(self) -> tuple[Node, ...]:  # type: ignore[override]
        return self.wrapped.children

    @property
    def event_shape(self) -> tuple[int, ...]:
        return self.wrapped.event_shape

    @property
    def kind(self) -> NodeKind:
        return NodeKind.MODIFIER

    def realize(self, variables: Mapping[str, Any]) -> ModifierModel:
        return self.model(*child_values(self, variables))

    def sample(self, variables: Mapping[str, Any], *dims: int) -> Any:
        wrapped_value = self.wrapped.sample(variables, *dims)
        return self.realize(variables).sample(self.rng, wrapped_value)

    def evaluate(self, variables: Mapping[str, Any]) -> Any:
        return self.wrapped.evaluate(variables)

    def log_density(self, variables: Mapping[str, Any]) -> Any:
        wrapped_logdensity = self.wrapped.log_density(variables)
        return self.realize(variables).logdensity(var_value(self, variables), wrapped_logdensity)

    def bijector(self, variables: Mapping[str, Any]) -> Bijector | None:
        return self.wrapped.bijector(variables)

    def __repr__(self) -> str:
        return f"ModifierNode({self.wrapped!r})"


@dataclass(frozen=True, slots=True)
class SumLogdensityModifier:
    """Sums the wrapped log-density over `axes`, e.g. for repeated observations of one variable.

    Sampling is not modified. The instance is its own factory, so it can be
    passed directly as the model of a ModifierNode.
    """

    axes: tuple[int, ...]

    def __call__(self, *_child_values: Any) -> SumLogdensityModifier:
        return self

    def sample(self, rng: np.random.Generator, value: Any) -> Any:  # noqa: ARG002
        return value

    def logdensity(self, value: Any, logdensity: Any) -> Any:  # noqa: ARG002
        if np.ndim(logdensity) == 0:
            return logdensity
        return np.sum(logdensity, axis=self.axes)
