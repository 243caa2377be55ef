"""Rich rendering utilities for graph query commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
from rich.markup import escape
from rich.table import Table

from bayesnet._nodes import NodeKind

if TYPE_CHECKING:
    from rich.console import Console

    from bayesnet._distributions import NamedBijector

    from .graph_query import NodeInfo, VariableSummary


def render_node_table(nodes: list[NodeInfo], console: Console, *, title: str | None = None) -> None:
    """Render node list as a Rich table.

    Args:
        nodes: List of NodeInfo to render, in execution order.
        console: Rich Console to output to.
        title: Optional table title.

    """
    if not nodes:
        console.print("[dim]No nodes[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan", title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Node", style="bold")
    table.add_column("Kind")
    table.add_column("Shape")
    table.add_column("Dependencies")
    table.add_column("Dependents")

    for index, node in enumerate(nodes):
        kind_style = _get_kind_style(node.kind)
        table.add_row(
            str(index),
            escape(node.name),
            f"[{kind_style}]{node.kind.upper()}[/{kind_style}]",
            _format_shape(node.event_shape),
            escape(", ".join(node.dependencies)) or "[dim]-[/dim]",
            escape(", ".join(node.dependents)) or "[dim]-[/dim]",
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(nodes)} nodes[/dim]")


def render_variable_table(summaries: list[VariableSummary], console: Console) -> None:
    """Render sampled variables as a Rich table."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Variable", style="bold")
    table.add_column("Shape")
    table.add_column("Mean", justify="right", style="yellow")
    table.add_column("Std", justify="right", style="yellow")

    for summary in summaries:
        table.add_row(
            escape(summary.name),
            _format_shape(summary.shape),
            f"{summary.mean:.6g}",
            f"{summary.std:.6g}",
        )

    console.print(table)


def render_bijector_table(bijectors: NamedBijector, console: Console) -> None:
    """Render the bijector inferred for each variable."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Variable", style="bold")
    table.add_column("Bijector")

    for name, bijector in bijectors.items():
        table.add_row(escape(name), escape(repr(bijector)))

    console.print(table)


def format_log_density(value: Any) -> str:
    array = np.asarray(value, dtype=float)
    if array.ndim == 0:
        return f"{float(array):.6g}"
    return np.array2string(array, precision=6)


def _format_shape(shape: tuple[int, ...]) -> str:
    if not shape:
        return "[dim]scalar[/dim]"
    return "×".join(str(d) for d in shape)


def _get_kind_style(kind: NodeKind) -> str:
    """Get Rich style string for a node kind.

    Args:
        kind: The NodeKind.

    Returns:
        Rich style string.

    """
    match kind:
        case NodeKind.LEAF:
            return "blue"
        case NodeKind.PARENT:
            return "green"
        case NodeKind.MODIFIER:
            return "magenta"
        case NodeKind.DETERMINISTIC:
            return "yellow"
