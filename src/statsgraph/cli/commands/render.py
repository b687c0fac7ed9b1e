"""
Render Command - Compile a stats file and render it with Graphviz.

Writes graph.dot, graph.svg, graph.pdf and interactive.html to the output
folder, and by default archives them under archive/<build hash>/.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import click

from ...core.errors import RendererNotFoundError, StatsGraphError
from ...core.report import load_report
from ...graph import compile_report
from ...output.archive import archive_outputs
from ...output.render import check_renderer, render_outputs, write_dot
from ...output.viewer import interactive_html
from ..utils import (
    DEFAULT_STATS_FILE,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    graph_options,
    resolve_config,
)

logger = logging.getLogger(__name__)

DOT_FILENAME = "graph.dot"
HTML_FILENAME = "interactive.html"


@click.command()
@click.argument("stats_file", default=DEFAULT_STATS_FILE, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "-o", "--output-folder",
    type=click.Path(file_okay=False, path_type=Path),
    default="statsgraph",
    show_default=True,
    help="Folder for graph.dot, graph.svg, graph.pdf and interactive.html",
)
@click.option(
    "--archive/--no-archive",
    default=True,
    show_default=True,
    help="Also copy the outputs to <output-folder>/archive/<build hash>",
)
@graph_options
@click.pass_context
def render(
    ctx: click.Context,
    stats_file: Path,
    output_folder: Path,
    archive: bool,
    config_file: Optional[Path],
    **options,
):
    """
    Render the dependency graph of STATS_FILE.

    STATS_FILE defaults to stats.json in the current directory.
    """
    try:
        config = resolve_config(ctx, config_file, options)
        check_renderer(config.layout)
        report = load_report(stats_file)
    except StatsGraphError as e:
        echo_error(str(e))
        sys.exit(1)

    graph = compile_report(report, config)

    dot_file = write_dot(graph, output_folder / DOT_FILENAME)
    echo_info(f"Wrote {dot_file}")

    try:
        result = render_outputs(dot_file, layout=config.layout)
    except RendererNotFoundError as e:
        echo_error(str(e))
        sys.exit(1)

    written: List[Path] = [dot_file, *result.outputs.values()]

    svg_file = result.outputs.get("svg")
    if svg_file is not None:
        html_file = output_folder / HTML_FILENAME
        html_file.write_text(interactive_html(svg_file.read_text(encoding="utf-8")), encoding="utf-8")
        written.append(html_file)
    else:
        echo_warning(f"No SVG rendered, skipping {HTML_FILENAME}")

    for path in written[1:]:
        echo_info(f"Wrote {path}")

    if archive:
        archived = archive_outputs(written, output_folder, report.hash, stats_file=stats_file)
        logger.debug("Archived %d files", len(archived))

    if not result.success:
        for error in result.errors:
            echo_error(str(error))
        sys.exit(1)

    echo_success(f"Graph written to {output_folder}")
