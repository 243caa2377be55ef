"""Bijectors mapping a constrained support to the real line.

Every bijector maps constrained -> unconstrained when called, and offers
`inverse` and `logabsdetjac` (log absolute determinant of the forward Jacobian).
"""

from __future__ import annotations

import functools
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np
from scipy import special

from bayesnet._math import add_logdensity, pad_trailing, sum_leading

if TYPE_CHECKING:
    from collections.abc import Callable


class Bijector(Protocol):
    def __call__(self, x: Any) -> Any: ...

    def inverse(self, y: Any) -> Any: ...

    def logabsdetjac(self, x: Any) -> Any: ...


@dataclass(frozen=True, slots=True)
class IdentityBijector:
    """Bijector of an unconstrained variable."""

    def __call__(self, x: Any) -> Any:
        return x

    def inverse(self, y: Any) -> Any:
        return y

    def logabsdetjac(self, x: Any) -> Any:
        return np.zeros_like(x, dtype=float)


@dataclass(frozen=True, slots=True)
class LogBijector:
    """Maps the positive half-line to the real line."""

    def __call__(self, x: Any) -> Any:
        return np.log(x)

    def inverse(self, y: Any) -> Any:
        return np.exp(y)

    def logabsdetjac(self, x: Any) -> Any:
        return -np.log(x)


@dataclass(frozen=True, slots=True)
class IntervalBijector:
    """Maps the interval [lo, hi] to the real line via a scaled logit."""

    lo: Any = 0.0
    hi: Any = 1.0

    def __call__(self, x: Any) -> Any:
        return special.logit((x - self.lo) / (self.hi - self.lo))

    def inverse(self, y: Any) -> Any:
        return self.lo + (self.hi - self.lo) * special.expit(y)

    def logabsdetjac(self, x: Any) -> Any:
        return np.log(self.hi - self.lo) - np.log(x - self.lo) - np.log(self.hi - x)


class BroadcastedBijector:
    """Elementwise bijector of a `BroadcastedDistribution`.

    The parameters are aligned with the value on their leading axes, so the
    same bijector applies to a single draw and to a batch with trailing sample
    axes. `logabsdetjac` sums over the `ndims` intrinsic axes.
    """

    __slots__ = ("family", "ndims", "params")

    def __init__(self, family: Callable[..., Any], params: tuple[Any, ...], ndims: int) -> None:
        self.family = family
        self.params = params
        self.ndims = ndims

    def elementwise(self, ndim: int) -> Bijector:
        """Return the kernel bijector with parameters padded to `ndim` axes."""
        return self.family(*(pad_trailing(p, ndim) for p in self.params)).bijector()

    def _ndim(self, x: Any) -> int:
        return max(np.ndim(x), *(np.ndim(p) for p in self.params), 0)

    def __call__(self, x: Any) -> Any:
        ndim = self._ndim(x)
        return self.elementwise(ndim)(pad_trailing(x, ndim))

    def inverse(self, y: Any) -> Any:
        ndim = self._ndim(y)
        return self.elementwise(ndim).inverse(pad_trailing(y, ndim))

    def logabsdetjac(self, x: Any) -> Any:
        ndim = self._ndim(x)
        return sum_leading(self.elementwise(ndim).logabsdetjac(pad_trailing(x, ndim)), self.ndims)

    def __repr__(self) -> str:
        name = getattr(self.family, "__name__", repr(self.family))
        return f"BroadcastedBijector({name}, ndims={self.ndims})"


class NamedBijector(Mapping[str, Bijector]):
    """Name-keyed aggregate of per-variable bijectors.

    Applying it to a variables record transforms every variable that has a
    bijector and passes the others through unchanged.
    """

    __slots__ = ("_bijectors",)

    def __init__(self, bijectors: Mapping[str, Bijector]) -> None:
        self._bijectors = dict(bijectors)

    def __getitem__(self, name: str) -> Bijector:
        return self._bijectors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bijectors)

    def __len__(self) -> int:
        return len(self._bijectors)

    def __call__(self, variables: Mapping[str, Any]) -> dict[str, Any]:
        return {name: self._bijectors[name](v) if name in self._bijectors else v for name, v in variables.items()}

    def inverse(self, variables: Mapping[str, Any]) -> dict[str, Any]:
        return {
            name: self._bijectors[name].inverse(v) if name in self._bijectors else v for name, v in variables.items()
        }

    def logabsdetjac(self, variables: Mapping[str, Any]) -> Any:
        """Sum the log-Jacobian corrections of all transformed variables."""
        return functools.reduce(
            add_logdensity,
            (self._bijectors[name].logabsdetjac(v) for name, v in variables.items() if name in self._bijectors),
            0.0,
        )

    def __repr__(self) -> str:
        return f"NamedBijector({self._bijectors!r})"
