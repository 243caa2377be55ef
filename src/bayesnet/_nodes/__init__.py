"""Node abstraction and its variants.

Key types:
- Node: the interface every graph element implements
- NodeKind: LEAF, PARENT, MODIFIER or DETERMINISTIC
- SimpleNode: leaf/parent backed by a distribution or a distribution factory
- BroadcastedNode: array-valued node with trailing sample axes
- ModifierNode: transparent wrapper post-processing a node's sample and log-density
- DeterministicNode: pure function of its children
"""

from ._base import Node, NodeKind, child_values, var_value
from ._broadcasted import BroadcastedNode
from ._deterministic import DeterministicNode
from ._modifier import ModifierModel, ModifierNode, SumLogdensityModifier
from ._simple import SimpleNode

__all__ = [
    "BroadcastedNode",
    "DeterministicNode",
    "ModifierModel",
    "ModifierNode",
    "Node",
    "NodeKind",
    "SimpleNode",
    "SumLogdensityModifier",
    "child_values",
    "var_value",
]
