"""
Dot Command - Print the DOT source of a stats file.

Does not need Graphviz installed; useful for piping into other tools.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from ...core.errors import StatsGraphError
from ...core.report import load_report
from ...graph import compile_report
from ..utils import DEFAULT_STATS_FILE, echo_error, graph_options, resolve_config


@click.command()
@click.argument("stats_file", default=DEFAULT_STATS_FILE, type=click.Path(dir_okay=False, path_type=Path))
@graph_options
@click.pass_context
def dot(ctx: click.Context, stats_file: Path, config_file: Optional[Path], **options):
    """Print the DOT graph of STATS_FILE to stdout."""
    try:
        config = resolve_config(ctx, config_file, options)
        report = load_report(stats_file)
    except StatsGraphError as e:
        echo_error(str(e))
        sys.exit(1)

    click.echo(compile_report(report, config).to_dot())
