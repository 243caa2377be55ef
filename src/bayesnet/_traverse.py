"""Depth-first, visit-once traversal of a graph of nodes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ._errors import CyclicGraphError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from ._nodes import Node

logger = logging.getLogger(__name__)


def traverse(
    fn: Callable[..., Any],
    node: Node,
    variables: Mapping[str, Any] | None = None,
    *args: Any,
) -> dict[str, Any]:
    """Visit every node below and including `node`, dependencies first.

    `fn(current, record, *args)` is called once per node name, after all of
    the node's children have been visited. Its return value is merged into
    the record under the node's name (see `merge_value`), so a later node sees
    the results of its dependencies.

    Names already present in `variables` are treated as resolved: neither the
    node nor the part of the graph that only feeds it is visited. This is how
    conditioning works, and it also guarantees that a node shared by several
    dependents runs exactly once.

    Children are visited in declared order, so the order of `fn` calls (and
    therefore of entropy draws) is a reproducible function of the graph.

    Args:
        fn: Per-node operation.
        node: Root of the traversal.
        variables: Pre-bound values. The mapping is copied, never mutated.
        *args: Extra arguments forwarded to `fn`.

    Returns:
        The record of pre-bound values plus one entry per visited node.

    Raises:
        CyclicGraphError: If a node is reached again while it is resolving.

    """
    record: dict[str, Any] = dict(variables) if variables is not None else {}
    visited: set[str] = set()
    if node.name in record:
        logger.debug("Skipping %s (already bound)", node.name)
        return record

    # Resolving -> Bound; `resolving` doubles as the current DFS path
    resolving: dict[str, None] = {node.name: None}
    stack: list[tuple[Node, Iterator[Node]]] = [(node, iter(node.children))]

    while stack:
        current, pending = stack[-1]
        for child in pending:
            if child.name in record or child.name in visited:
                continue
            if child.name in resolving:
                path = (*resolving, child.name)
                raise CyclicGraphError(path[path.index(child.name) :])
            resolving[child.name] = None
            stack.append((child, iter(child.children)))
            break
        else:
            stack.pop()
            del resolving[current.name]
            logger.debug("Visiting %s", current.name)
            value = fn(current, record, *args)
            visited.add(current.name)
            merge_value(record, current, value)

    return record


def merge_value(variables: dict[str, Any], node: Node, value: Any) -> dict[str, Any]:
    """Bind `value` under the node's name unless the name is already bound.

    A `None` value leaves the record unchanged, which lets an operation visit a
    node without contributing to the result. There is no way to bind `None`.
    """
    if value is None:
        return variables
    if node.name in variables:
        logger.debug("Keeping existing value for %s", node.name)
        return variables
    variables[node.name] = value
    return variables
