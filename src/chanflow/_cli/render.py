"""Rich rendering utilities for graph commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from chanflow._model import Graph


def render_channel_table(graph: Graph, console: Console) -> None:
    """Render channels with their capacity, resolved type and wired pins.

    Args:
        graph: Graph whose channels to render.
        console: Rich Console to output to.

    """
    if not graph.channels:
        console.print("[dim]No channels[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Channel", style="bold")
    table.add_column("Cap", justify="right")
    table.add_column("Type", style="green")
    table.add_column("Pins", style="dim")

    for name in sorted(graph.channels):
        channel = graph.channels[name]
        type_str = escape(str(channel.type)) if channel.type is not None else "[red]unresolved[/red]"
        pins = ", ".join(str(np) for np in sorted(channel.pins))
        table.add_row(escape(name), str(channel.cap), type_str, escape(pins))

    console.print(table)


def render_node_table(graph: Graph, console: Console) -> None:
    """Render nodes with their part and resolved type parameters.

    Args:
        graph: Graph whose nodes to render.
        console: Rich Console to output to.

    """
    if not graph.nodes:
        console.print("[dim]No nodes[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Node", style="bold")
    table.add_column("Part")
    table.add_column("Instances", justify="right")
    table.add_column("Type parameters", style="green")

    for name in sorted(graph.nodes):
        node = graph.nodes[name]
        params = ", ".join(f"${ident} = {typ}" for ident, typ in sorted(node.type_params.items()))
        instances = str(node.multiplicity) + ("" if node.wait else " (no wait)")
        part = node.part.part_type.upper() + ("" if node.enabled else " [dim](disabled)[/dim]")
        table.add_row(escape(name), part, instances, escape(params) or "[dim]-[/dim]")

    console.print(table)
