"""Array-valued distribution built by broadcasting a kernel over its parameters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from bayesnet._math import align_leading, broadcast_shape, pad_trailing, sum_leading

from ._bijectors import BroadcastedBijector

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._kernel import Distribution


class BroadcastedDistribution:
    """Independent kernel distributions, one per element of the broadcast parameters.

    Parameters align on their leading axes, so a `(3,)` and a `(3, 4)` parameter
    produce a `(3, 4)` distribution. The first `ndims` axes are intrinsic; any
    further axes are sample axes (e.g. when a parent is realized from batched
    child values). Additional sample axes requested in `sample` and carried by
    the value passed to `logdensity` are always trailing.

    Attributes:
        family: Kernel distribution constructor, e.g. `KernelNormal`.
        params: Parameters padded to a common number of dimensions.
        shape: Broadcast shape of the parameters.
        ndims: Number of intrinsic (non-sample) leading axes.

    Example:
        >>> dist = BroadcastedDistribution(KernelNormal, 0, np.ones(3))
        >>> dist.sample(rng, 2).shape
        (3, 2)
        >>> dist.logdensity(np.zeros((3, 2))).shape
        (2,)

    """

    __slots__ = ("family", "ndims", "params", "shape")

    def __init__(self, family: Callable[..., Distribution], *params: Any, ndims: int | None = None) -> None:
        self.family = family
        self.params = align_leading(*params)
        self.shape = broadcast_shape(*(np.shape(p) for p in self.params))
        self.ndims = len(self.shape) if ndims is None else ndims

    @property
    def event_shape(self) -> tuple[int, ...]:
        return self.shape[: self.ndims]

    def _kernel(self, ndim: int) -> Distribution:
        return self.family(*(pad_trailing(p, ndim) for p in self.params))

    def sample(self, rng: np.random.Generator, *dims: int) -> Any:
        size = self.shape + dims
        return self._kernel(len(size)).sample(rng, *size)

    def logdensity(self, x: Any) -> Any:
        """Log-density summed over the intrinsic axes, one value per trailing sample."""
        ndim = max(np.ndim(x), len(self.shape))
        x = pad_trailing(x, ndim)
        kernel = self._kernel(ndim)
        broadcast_shape(np.shape(x), *(np.shape(pad_trailing(p, ndim)) for p in self.params))
        return sum_leading(kernel.logdensity(x), self.ndims)

    def bijector(self) -> BroadcastedBijector:
        return BroadcastedBijector(self.family, self.params, self.ndims)

    def __repr__(self) -> str:
        name = getattr(self.family, "__name__", repr(self.family))
        return f"BroadcastedDistribution({name}, shape={self.shape}, ndims={self.ndims})"
