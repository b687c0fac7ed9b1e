"""
Rendering of DOT files through the Graphviz executables.

Each output format is rendered independently: a failed SVG render does not
stop the PDF render. Failures are collected and returned so the caller can
report each one and exit non-zero at the end.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence

import graphviz

from ..core.errors import RendererNotFoundError, RenderError
from ..graph.model import CompiledGraph

logger = logging.getLogger(__name__)

DEFAULT_FORMATS = ("svg", "pdf")


@dataclass
class RenderResult:
    """Outcome of rendering one DOT file into several formats."""
    dot_file: Path
    outputs: Dict[str, Path] = field(default_factory=dict)
    errors: List[RenderError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


def check_renderer(layout: str = "dot") -> None:
    """
    Make sure the Graphviz executables are available.

    Raises:
        RendererNotFoundError: If Graphviz is not installed.
    """
    try:
        version = graphviz.version()
    except graphviz.ExecutableNotFound as e:
        raise RendererNotFoundError(layout) from e
    logger.debug("Using Graphviz %s", ".".join(str(v) for v in version))


def write_dot(graph: CompiledGraph, dot_file: Path) -> Path:
    dot_file.parent.mkdir(parents=True, exist_ok=True)
    dot_file.write_text(graph.to_dot(), encoding="utf-8")
    return dot_file


def render_format(dot_file: Path, layout: str, output_format: str) -> Path:
    """
    Render `dot_file` into `<stem>.<format>` next to it.

    Raises:
        RendererNotFoundError: If the layout executable is missing.
        RenderError: If the layout tool fails.
    """
    outfile = dot_file.with_suffix(f".{output_format}")
    try:
        graphviz.render(layout, output_format, dot_file, outfile=outfile)
    except graphviz.ExecutableNotFound as e:
        raise RendererNotFoundError(layout) from e
    except subprocess.CalledProcessError as e:
        stderr = e.stderr
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", "replace")
        detail = (stderr or "").strip() or f"exit status {e.returncode}"
        raise RenderError(output_format, detail) from e
    return outfile


def render_outputs(
    dot_file: Path,
    layout: str = "dot",
    formats: Sequence[str] = DEFAULT_FORMATS,
) -> RenderResult:
    """Render every requested format, collecting per-format failures."""
    result = RenderResult(dot_file=dot_file)
    for output_format in formats:
        try:
            result.outputs[output_format] = render_format(dot_file, layout, output_format)
            logger.info("Rendered %s", result.outputs[output_format])
        except RenderError as e:
            logger.debug("%s", e)
            result.errors.append(e)
    return result
