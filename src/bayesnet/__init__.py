"""Directed acyclic graphs of named random variables.

Build a graph bottom-up from nodes, then sample it, compute its joint
log-density or infer a bijector per variable. Every operation visits each
node exactly once, dependencies first.
"""

__all__ = [
    "BayesNetError",
    "Bijector",
    "BroadcastedBijector",
    "BroadcastedDistribution",
    "BroadcastedNode",
    "CyclicGraphError",
    "DependencyGraph",
    "DeterministicNode",
    "Distribution",
    "IdentityBijector",
    "IntervalBijector",
    "KernelExponential",
    "KernelNormal",
    "KernelUniform",
    "LogBijector",
    "ModifierModel",
    "ModifierNode",
    "NameCollisionError",
    "NamedBijector",
    "Node",
    "NodeKind",
    "SampleReport",
    "SequentializedGraph",
    "ShapeMismatchError",
    "SimpleNode",
    "SumLogdensityModifier",
    "UnknownDependencyError",
    "add_logdensity",
    "ancestors_of",
    "build_dependency_graph",
    "child_values",
    "evaluate",
    "export_variables",
    "infer_bijectors",
    "load_variables",
    "log_density",
    "merge_value",
    "prior",
    "sample",
    "sequentialize",
    "traverse",
    "validate_graph",
    "var_value",
]

from ._distributions import (
    Bijector,
    BroadcastedBijector,
    BroadcastedDistribution,
    Distribution,
    IdentityBijector,
    IntervalBijector,
    KernelExponential,
    KernelNormal,
    KernelUniform,
    LogBijector,
    NamedBijector,
)
from ._errors import BayesNetError, CyclicGraphError, NameCollisionError, ShapeMismatchError, UnknownDependencyError
from ._graph import DependencyGraph, build_dependency_graph, validate_graph
from ._io import SampleReport, export_variables, load_variables
from ._math import add_logdensity
from ._nodes import (
    BroadcastedNode,
    DeterministicNode,
    ModifierModel,
    ModifierNode,
    Node,
    NodeKind,
    SimpleNode,
    SumLogdensityModifier,
    child_values,
    var_value,
)
from ._operations import ancestors_of, evaluate, infer_bijectors, log_density, prior, sample
from ._sequential import SequentializedGraph, sequentialize
from ._traverse import merge_value, traverse
