"""Array-valued graph: a -> c, b -> c, (c, b) -> d.

`a` holds 3 uniform variables, `b` a 3x4 block of exponential ones; `c` and `d`
broadcast their parents to shape (3, 4).

    bayesnet sample examples/broadcasted_graph.py --dims 2 --seed 42
"""

import numpy as np

from bayesnet import BroadcastedNode, KernelExponential, KernelNormal, KernelUniform, Node


def make_graph(rng: np.random.Generator) -> Node:
    a = BroadcastedNode("a", rng, KernelUniform, params=(0, np.ones(3)))
    b = BroadcastedNode("b", rng, KernelExponential, params=(np.ones((3, 4)),))
    c = BroadcastedNode("c", rng, KernelNormal, (a, b))
    return BroadcastedNode("d", rng, KernelNormal, (c, b))
