"""
statsgraph CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import dot, render, summary
from .utils import configure_logging


@click.group()
@click.version_option(package_name="statsgraph")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.option("-q", "--quiet", is_flag=True, help="Only log warnings and errors")
def main(verbose: bool, quiet: bool):
    """statsgraph: Dependency graphs from bundler stats files.

    Reads a stats JSON report and draws its modules, grouped by chunk,
    with Graphviz.

    \b
    Quick Start:
      statsgraph render stats.json
      statsgraph dot stats.json > graph.dot
      statsgraph summary stats.json
    """
    configure_logging(verbose=verbose, quiet=quiet)


main.add_command(render.render)
main.add_command(dot.dot)
main.add_command(summary.summary)

if __name__ == "__main__":
    main()
