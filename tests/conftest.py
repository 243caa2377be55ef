from collections.abc import Callable

import numpy as np
import pytest

from bayesnet import KernelExponential, KernelNormal, KernelUniform, SimpleNode


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


def make_simple_graph(rng: np.random.Generator) -> SimpleNode:
    """a -> c, b -> c, (c, b) -> d with scalar variables."""
    a = SimpleNode("a", rng, KernelUniform())
    b = SimpleNode("b", rng, KernelExponential())
    c = SimpleNode("c", rng, KernelNormal, (a, b))
    return SimpleNode("d", rng, KernelNormal, (c, b))


@pytest.fixture
def simple_graph(rng: np.random.Generator) -> SimpleNode:
    return make_simple_graph(rng)


@pytest.fixture
def graph_factory() -> Callable[[np.random.Generator], SimpleNode]:
    return make_simple_graph
