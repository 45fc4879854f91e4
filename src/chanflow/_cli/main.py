import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from chanflow._io import load_graph, save_graph
from chanflow._model import Graph, TypeIncompatibilityError

from .config import ChanflowConfig, ConfigError, get_config
from .render import render_channel_table, render_node_table

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Chanflow CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config(*, required: bool) -> ChanflowConfig:
    """Read project settings; a broken pyproject.toml is fatal only when ``required``."""
    try:
        return get_config()
    except ConfigError as e:
        if required:
            err_console.print(f"[red]✗ {escape(str(e))}[/red]")
            raise typer.Exit(code=2) from e
        err_console.print(f"[yellow]⚠ Ignoring project settings: {escape(str(e))}[/yellow]")
        return ChanflowConfig()


def _resolve_graph_path(path: Path | None, config: ChanflowConfig | None) -> Path:
    if path is not None:
        return path
    if config is None:
        config = _load_config(required=True)
    if config.graph is None:
        err_console.print(f"[red]✗ No graph given and no {escape('[tool.chanflow]')} graph configured[/red]")
        raise typer.Exit(code=2)
    return config.graph


def _load(path: Path | None, config: ChanflowConfig | None = None) -> Graph:
    graph_path = _resolve_graph_path(path, config)
    err_console.print(f"[cyan]Loading graph from:[/cyan] {graph_path}")
    try:
        graph = load_graph(graph_path)
    except (OSError, ValidationError) as e:
        logger.debug("Load failed", exc_info=e)
        err_console.print(f"[red]✗ Could not load {graph_path}:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    err_console.print(f"[cyan]Graph:[/cyan] [bold]{escape(graph.name or graph.package_name())}[/bold]")
    return graph


GraphArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to the graph JSON document (defaults to the graph configured in pyproject.toml)"),
]


@app.command()
def check(path: GraphArgument = None) -> None:
    """Infer channel and pin types and report them."""
    err_console.print()
    # An explicit path does not depend on the settings, so a broken
    # pyproject.toml only costs the configured default type.
    config = _load_config(required=path is None)
    graph = _load(path, config)

    err_console.print("[cyan]Inferring types...[/cyan]")
    try:
        graph.infer_types(config.default_type)
    except TypeIncompatibilityError as e:
        err_console.print()
        err_console.print(f"[red]✗ {escape(e.summary)}[/red]")
        err_console.print(f"  [red]•[/red] channel {escape(e.channel)} at pin {escape(str(e.pin))}")
        err_console.print(f"    [dim]{escape(str(e.source))}[/dim]")
        err_console.print()
        raise typer.Exit(code=1) from e
    err_console.print()

    render_channel_table(graph, out_console)
    render_node_table(graph, out_console)

    err_console.print()
    err_console.print("[green]✓ All types resolved[/green]")
    err_console.print()


@app.command()
def imports(path: GraphArgument = None) -> None:
    """Print the imports the generated program needs."""
    graph = _load(path)
    for line in graph.all_imports():
        out_console.print(line, highlight=False, markup=False)


@app.command()
def prune(
    path: GraphArgument = None,
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to write the cleaned graph document"),
    ],
) -> None:
    """Drop channels wired to fewer than two pins and write the result."""
    err_console.print()
    graph = _load(path)
    save_graph(graph, output)
    err_console.print(
        Panel(
            f"{len(graph.nodes)} node(s), {len(graph.channels)} channel(s)",
            title="[bold]Pruned graph[/bold]",
            border_style="cyan",
        ),
    )
    err_console.print(f"[green]✓ Written to {output}[/green]")


@app.command("delete-node")
def delete_node(
    node: Annotated[str, typer.Argument(help="Name of the node to delete")],
    path: GraphArgument = None,
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to write the edited graph document"),
    ],
    keep_channels: Annotated[
        bool,
        typer.Option("--keep-channels", help="Keep channels left with fewer than two pins"),
    ] = False,
) -> None:
    """Delete a node, disconnecting it from its channels."""
    err_console.print()
    graph = _load(path)
    if node not in graph.nodes:
        err_console.print(f"[red]✗ No node named {escape(node)!r}[/red]")
        raise typer.Exit(code=1)

    before = set(graph.channels)
    graph.delete_node(graph.nodes[node], prune_channels=not keep_channels)
    for name in sorted(before - set(graph.channels)):
        err_console.print(f"  [yellow]•[/yellow] removed channel {escape(name)}")

    save_graph(graph, output)
    err_console.print(f"[green]✓ Deleted {escape(node)}, written to {output}[/green]")
