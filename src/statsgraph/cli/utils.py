"""
CLI Utilities - Shared helpers for the statsgraph commands.

Provides formatted status output, logging setup, the graph options shared
by every command and the resolution of those options into a GraphConfig.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click
from click.core import ParameterSource

from ..config import GraphConfig, load_config

DEFAULT_STATS_FILE = "stats.json"

# Flags that map one-to-one onto GraphConfig fields
BOOLEAN_FLAGS = {
    "show_size": "Show module and file sizes",
    "color_by_size": "Color modules by size instead of by file type",
    "show_exports": "Show the exports each module provides",
    "show_hashes": "Show the build hash and chunk hashes",
    "show_sources": "Embed module sources in tooltips",
    "show_files": "Show output files and link chunks to them",
    "show_dep_type": "Label edges with the dependency type",
    "show_query_string": "Keep query strings in loader labels",
    "cross_chunk_issuers": "Resolve visibility across all chunks",
}

PATTERN_OPTIONS = {
    "hide_pattern": "Hide modules whose name matches this regex",
    "allow_pattern": "Never hide modules whose name matches this regex",
    "common_basenames_pattern": "Basenames that need their parent folder to be readable",
    "extra_clusters_pattern": "Treat matching folders as packages",
}

CONFIG_OPTION_NAMES = (
    *BOOLEAN_FLAGS,
    *PATTERN_OPTIONS,
    "layout",
    "big_graph_threshold",
    "source_size_limit",
)


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"), err=True)


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Set up root logging for a CLI run.

    Quiet wins over verbose when both are given.
    """
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


def graph_options(func: Callable) -> Callable:
    """Attach the options that shape graph compilation to a command."""
    defaults = GraphConfig()

    for name in reversed(list(BOOLEAN_FLAGS)):
        flag = name.replace("_", "-")
        func = click.option(
            f"--{flag}/--no-{flag}",
            name,
            default=getattr(defaults, name),
            show_default=True,
            help=BOOLEAN_FLAGS[name],
        )(func)

    for name in reversed(list(PATTERN_OPTIONS)):
        func = click.option(f"--{name.replace('_', '-')}", name, help=PATTERN_OPTIONS[name])(func)

    func = click.option(
        "--source-size-limit",
        type=int,
        default=defaults.source_size_limit,
        show_default=True,
        help="Modules at or above this size never embed their source",
    )(func)
    func = click.option(
        "--big-graph-threshold",
        type=int,
        default=defaults.big_graph_threshold,
        show_default=True,
        help="Module count above which edges are drawn curved",
    )(func)
    func = click.option(
        "--layout",
        type=click.Choice(["dot", "neato", "fdp", "sfdp", "twopi", "circo"]),
        default=defaults.layout,
        show_default=True,
        help="Graphviz layout engine",
    )(func)
    func = click.option(
        "--config", "config_file",
        type=click.Path(dir_okay=False, path_type=Path),
        help="YAML file with graph options",
    )(func)
    return func


def resolve_config(
    ctx: click.Context,
    config_file: Optional[Path],
    options: Dict[str, Any],
) -> GraphConfig:
    """
    Build the run configuration.

    Values come from the YAML file when given, and options passed explicitly
    on the command line (or the environment) override them.

    Raises:
        ConfigError: If the file or any option is invalid.
    """
    base = load_config(config_file) if config_file else GraphConfig()
    overrides = {
        name: value
        for name, value in options.items()
        if name in CONFIG_OPTION_NAMES and ctx.get_parameter_source(name) not in (
            ParameterSource.DEFAULT, ParameterSource.DEFAULT_MAP, None,
        )
    }
    return base.merged(**overrides)
