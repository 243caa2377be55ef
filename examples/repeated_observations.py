"""Normal model with a latent location and five repeated observations.

    mu ~ Normal(0, 1)
    sigma ~ Exponential(1)
    scale = 1 + sigma
    y[i] ~ Normal(mu, scale), i = 1..5

`y` is an array of 5 draws for a single scalar variable, so its log-density
is summed over the observation axis.

    bayesnet graph examples/repeated_observations.py
    bayesnet logdensity examples/repeated_observations.py -i observations.toml
"""

import numpy as np

from bayesnet import (
    DeterministicNode,
    KernelExponential,
    KernelNormal,
    ModifierNode,
    SimpleNode,
    SumLogdensityModifier,
)

N_OBSERVATIONS = 5

rng = np.random.default_rng(2022)


class RepeatedNormal(KernelNormal):
    """Normal distribution drawn `N_OBSERVATIONS` times."""

    def sample(self, rng: np.random.Generator, *dims: int) -> np.ndarray:
        return super().sample(rng, N_OBSERVATIONS, *dims)


mu = SimpleNode("mu", rng, KernelNormal())
sigma = SimpleNode("sigma", rng, KernelExponential())
scale = DeterministicNode("scale", lambda s: 1 + s, (sigma,))
observations = SimpleNode("y", rng, RepeatedNormal, (mu, scale))
graph = ModifierNode(observations, rng, SumLogdensityModifier(axes=(0,)))
