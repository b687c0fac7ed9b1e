"""
Summary Command - Show the clusters a stats file compiles into.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...core.errors import StatsGraphError
from ...core.report import load_report
from ...graph import compile_report
from ..utils import DEFAULT_STATS_FILE, echo_error, graph_options, resolve_config

console = Console()


@click.command()
@click.argument("stats_file", default=DEFAULT_STATS_FILE, type=click.Path(dir_okay=False, path_type=Path))
@graph_options
@click.pass_context
def summary(ctx: click.Context, stats_file: Path, config_file: Optional[Path], **options):
    """Print a table of chunk clusters and their visible modules."""
    try:
        config = resolve_config(ctx, config_file, options)
        report = load_report(stats_file)
    except StatsGraphError as e:
        echo_error(str(e))
        sys.exit(1)

    graph = compile_report(report, config)

    table = Table(title=f"Build {report.hash}" if report.hash else "Build")
    table.add_column("Cluster", style="cyan")
    table.add_column("Label")
    table.add_column("Nodes", justify="right")
    table.add_column("Packages", justify="right")

    for cluster in graph.clusters:
        table.add_row(
            cluster.id,
            escape(cluster.label.replace("\n", " ")),
            str(cluster.node_count),
            str(len(cluster.clusters)),
        )
    console.print(table)

    stats = graph.stats()
    console.print(
        f"{stats['total_nodes']} nodes, {stats['total_edges']} edges, "
        f"{len(report.modules)} modules in report"
    )
