"""Concrete distributions and bijectors consumed by the node variants.

The traversal engine treats these as opaque capabilities: given resolved
parameters, a distribution can produce a sample, a log-density and a bijector.

Key types:
- KernelUniform, KernelExponential, KernelNormal: elementwise distributions
- BroadcastedDistribution: array-valued distribution with trailing sample axes
- IdentityBijector, LogBijector, IntervalBijector, BroadcastedBijector: transforms
- NamedBijector: name-keyed aggregate of per-variable bijectors
"""

from ._bijectors import (
    Bijector,
    BroadcastedBijector,
    IdentityBijector,
    IntervalBijector,
    LogBijector,
    NamedBijector,
)
from ._broadcasted import BroadcastedDistribution
from ._kernel import Distribution, KernelExponential, KernelNormal, KernelUniform

__all__ = [
    "Bijector",
    "BroadcastedBijector",
    "BroadcastedDistribution",
    "Distribution",
    "IdentityBijector",
    "IntervalBijector",
    "KernelExponential",
    "KernelNormal",
    "KernelUniform",
    "LogBijector",
    "NamedBijector",
]
