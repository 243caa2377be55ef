"""Node computing a pure function of its children."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from bayesnet._graph import collect_nodes

from ._base import Node, NodeKind, child_values

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class DeterministicNode(Node):
    """Variable defined as `fn(*child_values)`.

    It never draws from an entropy source, has no log-density contribution and
    no bijector. `evaluate` recomputes it from the current child values, which
    is how derived quantities are refreshed after the random variables change.
    """

    name: str
    fn: Callable[..., Any]
    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        collect_nodes(self)

    @property
    def rng(self) -> None:
        return None

    @property
    def model(self) -> Callable[..., Any]:
        return self.fn

    @property
    def kind(self) -> NodeKind:
        return NodeKind.DETERMINISTIC

    def realize(self, variables: Mapping[str, Any]) -> Any:
        return self.fn(*child_values(self, variables))

    def sample(self, variables: Mapping[str, Any], *dims: int) -> Any:  # noqa: ARG002
        return self.realize(variables)

    def evaluate(self, variables: Mapping[str, Any]) -> Any:
        return self.realize(variables)

    def log_density(self, variables: Mapping[str, Any]) -> None:  # noqa: ARG002
        return None

    def bijector(self, variables: Mapping[str, Any]) -> None:  # noqa: ARG002
        return None
