"""Name-level graph abstractions.

This module contains:
- DependencyGraph[T]: A generic, immutable directed acyclic graph
- build_dependency_graph / validate_graph: bridge from Node objects to names
- collect_nodes: name-keyed view of every node below a root
"""

from ._build import build_dependency_graph, collect_nodes, validate_graph
from ._dependency_graph import DependencyGraph

__all__ = ["DependencyGraph", "build_dependency_graph", "collect_nodes", "validate_graph"]
