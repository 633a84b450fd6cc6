"""
appgraph CLI entry point.
"""
import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from appgraph import __version__
from appgraph.config import load_config, set_configuration
from appgraph.graph import ResourceGraph
from appgraph.models.errors import AppGraphError
from appgraph.models.resource import ResourceWithConnectionString
from appgraph.parsers import endpoints as endpoints_parser
from appgraph.parsers import topology
from appgraph.publishers import json_publisher, yaml_publisher
from appgraph.reporters import markdown

console = Console(stderr=True)


def _load_graph(stderr: Console, topology_path: str, endpoints_path: Optional[str],
                config_path: Optional[str]) -> ResourceGraph:
    set_configuration(load_config(config_path))
    graph = topology.parse_file(topology_path)
    stderr.print(f"Loaded [bold]{len(graph)}[/bold] resources.")
    if endpoints_path:
        applied = endpoints_parser.parse_file(endpoints_path, graph)
        stderr.print(f"Applied endpoints to [bold]{applied}[/bold] resource(s).")
    return graph


def _print_summary_table(graph: ResourceGraph, no_color: bool) -> None:
    """Print a rich summary table to stderr."""
    tbl = Table(title="Resource Summary", show_header=True, header_style="bold")
    tbl.add_column("Resource", width=24)
    tbl.add_column("Kind", width=20)
    tbl.add_column("Manifest type", width=24)
    tbl.add_column("Parent", width=16)
    tbl.add_column("Endpoints")

    for row in markdown.inventory(graph):
        tbl.add_row(row["name"], row["kind"], row["type"], row["parent"] or "-", row["endpoints"] or "-")

    Console(stderr=True, no_color=no_color).print(tbl)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(__version__)
@click.pass_context
def cli(ctx):
    """appgraph: application resource graph to deployment manifest."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


_endpoints_option = click.option(
    "--endpoints", "-e", "endpoints_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file of allocated endpoints per resource.",
)
_config_option = click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Configuration file with a ConnectionStrings section (default: ./appgraph.yaml).",
)


@cli.command()
@click.argument("topology_path", type=click.Path(exists=True, dir_okay=False))
@_endpoints_option
@_config_option
@click.option(
    "--format", "output_format",
    type=click.Choice(["json", "yaml", "markdown"], case_sensitive=False),
    default="json",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write the manifest to this file (default: stdout).",
)
@click.option(
    "--summary",
    is_flag=True,
    default=False,
    help="Print terminal summary table only, do not write a manifest.",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable rich terminal color output.",
)
def publish(
    topology_path: str,
    endpoints_path: Optional[str],
    config_path: Optional[str],
    output_format: str,
    output: Optional[str],
    summary: bool,
    no_color: bool,
) -> None:
    """
    Generate the deployment manifest for TOPOLOGY_PATH.
    """
    stderr = Console(stderr=True, no_color=no_color)

    try:
        with stderr.status("[bold]Loading topology…"):
            graph = _load_graph(stderr, topology_path, endpoints_path, config_path)

        if summary or output:
            _print_summary_table(graph, no_color)

        if summary:
            sys.exit(0)

        with stderr.status("[bold]Publishing manifest…"):
            fmt = output_format.lower()
            if fmt == "yaml":
                content = yaml_publisher.build_manifest(graph)
            elif fmt == "markdown":
                content = markdown.build_report(graph, topology_path)
            else:
                content = json_publisher.build_manifest(graph)
    except AppGraphError as exc:
        stderr.print(f"[red]Error:[/red] {exc}")
        sys.exit(2)

    if output:
        with open(output, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
        stderr.print(f"Manifest written to [bold]{output}[/bold]")
    else:
        click.echo(content, nl=False)

    sys.exit(0)


@cli.command("connection-string")
@click.argument("topology_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("name")
@_endpoints_option
@_config_option
def connection_string(
    topology_path: str,
    name: str,
    endpoints_path: Optional[str],
    config_path: Optional[str],
) -> None:
    """
    Print the connection string of resource NAME.
    """
    try:
        graph = _load_graph(console, topology_path, endpoints_path, config_path)
        resource = graph[name]
        if not isinstance(resource, ResourceWithConnectionString):
            console.print(f"[red]Error:[/red] resource '{name}' has no connection string.")
            sys.exit(2)
        value = resource.get_connection_string(graph)
    except AppGraphError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(2)

    if value is None:
        console.print(f"[yellow]Warning:[/yellow] no connection string configured for '{name}'.")
        sys.exit(1)
    click.echo(value)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
