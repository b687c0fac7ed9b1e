"""
Error taxonomy for statsgraph.

Input and configuration errors are fatal and abort a run before any output
is written. Rendering errors are reported per output format. Problems with a
single module never surface as exceptions; the normalizer degrades them.
"""


class StatsGraphError(Exception):
    """Base class for all statsgraph errors."""


class ConfigError(StatsGraphError):
    """Invalid run configuration (bad option, unparsable pattern, bad file)."""


class ReportError(StatsGraphError):
    """The build report is missing or cannot be read."""


class RendererNotFoundError(StatsGraphError):
    """The Graphviz layout executable is not installed or not on PATH."""

    def __init__(self, layout: str):
        self.layout = layout
        super().__init__(
            f"This command requires the '{layout}' executable.\n"
            "Please make sure Graphviz (https://graphviz.org/download/) is installed "
            "and its bin directory is on your PATH."
        )


class RenderError(StatsGraphError):
    """Rendering one output format failed."""

    def __init__(self, output_format: str, message: str):
        self.output_format = output_format
        super().__init__(f"Render {output_format.upper()} failed: {message}")
