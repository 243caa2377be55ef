"""Elementwise kernel distributions backed by `scipy.stats`.

Parameters may be scalars or arrays; arrays are evaluated elementwise with
numpy broadcasting. Callers that need leading-axis alignment (see
`BroadcastedDistribution`) pad the parameters before constructing a kernel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from scipy import stats

from ._bijectors import IdentityBijector, IntervalBijector, LogBijector

if TYPE_CHECKING:
    import numpy as np

    from ._bijectors import Bijector


@runtime_checkable
class Distribution(Protocol):
    """The capability a node needs from a concrete distribution."""

    def sample(self, rng: np.random.Generator, *dims: int) -> Any: ...

    def logdensity(self, x: Any) -> Any: ...

    def bijector(self) -> Bijector: ...


def _size(dims: tuple[int, ...]) -> tuple[int, ...] | None:
    return dims or None


@dataclass(frozen=True, slots=True)
class KernelUniform:
    """Uniform distribution on the interval [lo, hi]."""

    lo: Any = 0.0
    hi: Any = 1.0

    def _frozen(self) -> Any:
        return stats.uniform(loc=self.lo, scale=self.hi - self.lo)

    def sample(self, rng: np.random.Generator, *dims: int) -> Any:
        return self._frozen().rvs(size=_size(dims), random_state=rng)

    def logdensity(self, x: Any) -> Any:
        return self._frozen().logpdf(x)

    def bijector(self) -> IntervalBijector:
        return IntervalBijector(self.lo, self.hi)


@dataclass(frozen=True, slots=True)
class KernelExponential:
    """Exponential distribution parameterized by its rate."""

    rate: Any = 1.0

    def _frozen(self) -> Any:
        return stats.expon(scale=1 / self.rate)

    def sample(self, rng: np.random.Generator, *dims: int) -> Any:
        return self._frozen().rvs(size=_size(dims), random_state=rng)

    def logdensity(self, x: Any) -> Any:
        return self._frozen().logpdf(x)

    def bijector(self) -> LogBijector:
        return LogBijector()


@dataclass(frozen=True, slots=True)
class KernelNormal:
    """Normal distribution with mean `mu` and standard deviation `sigma`."""

    mu: Any = 0.0
    sigma: Any = 1.0

    def _frozen(self) -> Any:
        return stats.norm(loc=self.mu, scale=self.sigma)

    def sample(self, rng: np.random.Generator, *dims: int) -> Any:
        return self._frozen().rvs(size=_size(dims), random_state=rng)

    def logdensity(self, x: Any) -> Any:
        return self._frozen().logpdf(x)

    def bijector(self) -> IdentityBijector:
        return IdentityBijector()
