import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from bayesnet._errors import BayesNetError
from bayesnet._io import SampleReport, export_variables, load_variables
from bayesnet._operations import infer_bijectors, log_density, sample
from bayesnet._sequential import sequentialize

from .config import BayesNetConfig, ConfigError, GraphSource, ModuleSource, ScriptSource, get_config
from .discover import GraphLike, instantiate_graph, load_graph_from_source
from .graph_query import find_dependents, list_nodes, summarize_variables
from .graph_render import format_log_density, render_bijector_table, render_node_table, render_variable_table

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

GraphArgument = Annotated[
    str | None,
    typer.Argument(
        help="Path to Python script or module path (e.g., examples.broadcasted_graph:make_graph). "
        "Defaults to [tool.bayesnet].graph",
    ),
]
VarOption = Annotated[
    str | None,
    typer.Option("--var", help="Name of the graph variable (for script paths only)"),
]
SeedOption = Annotated[
    int | None,
    typer.Option("--seed", help="Seed passed to a graph factory"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Bayesnet CLI."""
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


@contextmanager
def _exit_on_error() -> Iterator[None]:
    """Report library and configuration errors as a message and exit code 1."""
    try:
        yield
    except (BayesNetError, ConfigError) as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _graph_source(path: str | None, var_name: str | None, config: BayesNetConfig) -> GraphSource:
    if path is None:
        if config.graph is None:
            msg = "No graph given and no [tool.bayesnet].graph configured"
            raise ConfigError(msg)
        return config.graph
    if ":" in path:
        return ModuleSource(module_path=path)
    return ScriptSource(script=Path(path), name=var_name)


def _describe(source: GraphSource) -> str:
    match source:
        case ScriptSource(script=script, name=None):
            return str(script)
        case ScriptSource(script=script, name=name):
            return f"{script} ({name})"
        case ModuleSource(module_path=module_path):
            return module_path


def _load_graph(path: str | None, var_name: str | None, seed: int | None, config: BayesNetConfig) -> GraphLike:
    source = _graph_source(path, var_name, config)
    err_console.print(f"[cyan]Loading graph from:[/cyan] {escape(_describe(source))}")
    try:
        loaded = load_graph_from_source(source)
        graph = instantiate_graph(loaded, seed)
    except (ValueError, TypeError) as e:
        raise ConfigError(str(e)) from e
    err_console.print(f"[cyan]Graph:[/cyan] [bold]{escape(repr(graph))}[/bold]")
    return graph


@app.command("sample")
def sample_command(  # noqa: PLR0913
    path: GraphArgument = None,
    *,
    var_name: VarOption = None,
    seed: SeedOption = None,
    dims: Annotated[
        list[int] | None,
        typer.Option("--dims", "-n", help="Trailing sample dimension (repeat for several)"),
    ] = None,
    conditioned: Annotated[
        Path | None,
        typer.Option("-c", "--conditioned", help="TOML or JSON file of conditioned variables"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output TOML or JSON file"),
    ] = None,
    sequential: Annotated[
        bool,
        typer.Option("--sequential", help="Sample through the sequentialized graph"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the sample report as JSON to stdout"),
    ] = False,
) -> None:
    """Draw a joint sample of every variable in the graph."""
    with _exit_on_error():
        config = get_config()
        seed = seed if seed is not None else config.seed
        sample_dims = tuple(dims) if dims else config.dims
        output = output if output is not None else config.output

        graph = _load_graph(path, var_name, seed, config)
        target = sequentialize(graph) if sequential else graph

        given = None
        if conditioned is not None:
            err_console.print(f"[cyan]Loading conditioned variables from:[/cyan] {conditioned}")
            given = load_variables(conditioned)

        variables = sample(target, *sample_dims, variables=given)
        # conditioning prunes the branches that only feed conditioned variables
        complete = all(name in variables for name in sequentialize(target))
        joint = log_density(target, variables) if complete else None

        if json_output:
            report = SampleReport(seed=seed, dims=sample_dims, variables=variables, log_density=joint)
            typer.echo(report.model_dump_json(indent=2))
        else:
            render_variable_table(summarize_variables(variables), out_console)
            if joint is None:
                out_console.print("[cyan]Log-density:[/cyan] [dim]partial record, not computed[/dim]")
            else:
                out_console.print(f"[cyan]Log-density:[/cyan] {escape(format_log_density(joint))}")

        if output is not None:
            err_console.print(f"[cyan]Exporting variables to:[/cyan] {output}")
            export_variables(variables, output)

    err_console.print("[green]✓ Sampling complete[/green]")


@app.command("logdensity")
def logdensity_command(
    path: GraphArgument = None,
    *,
    input: Annotated[  # noqa: A002
        Path,
        typer.Option("-i", "--input", help="TOML or JSON file binding every variable"),
    ],
    var_name: VarOption = None,
    seed: SeedOption = None,
) -> None:
    """Compute the joint log-density of a full variables record."""
    with _exit_on_error():
        config = get_config()
        graph = _load_graph(path, var_name, seed if seed is not None else config.seed, config)

        err_console.print(f"[cyan]Loading variables from:[/cyan] {input}")
        variables = load_variables(input)
        joint = log_density(graph, variables)

    out_console.print(escape(format_log_density(joint)))


@app.command("bijectors")
def bijectors_command(
    path: GraphArgument = None,
    *,
    var_name: VarOption = None,
    seed: SeedOption = None,
) -> None:
    """Show the bijector inferred for each variable."""
    with _exit_on_error():
        config = get_config()
        graph = _load_graph(path, var_name, seed if seed is not None else config.seed, config)
        bijectors = infer_bijectors(graph)

    render_bijector_table(bijectors, out_console)


@app.command("graph")
def graph_command(
    path: GraphArgument = None,
    *,
    var_name: VarOption = None,
    node: Annotated[
        str | None,
        typer.Option("--node", help="Show only the nodes that depend on this node"),
    ] = None,
) -> None:
    """Show the execution order and dependencies of a graph."""
    with _exit_on_error():
        config = get_config()
        graph = _load_graph(path, var_name, config.seed, config)

        if node is None:
            nodes = list_nodes(graph)
            title = None
        else:
            try:
                nodes = find_dependents(graph, node)
            except KeyError as e:
                err_console.print(f"[red]✗ {escape(str(e.args[0]))}[/red]")
                raise typer.Exit(code=1) from e
            title = f"Dependents of {node}"

    if node is not None and not nodes:
        out_console.print(Panel(f"[dim]Nothing depends on {escape(node)}[/dim]", border_style="cyan"))
        return
    render_node_table(nodes, out_console, title=escape(title) if title else None)


def main() -> None:
    app()
