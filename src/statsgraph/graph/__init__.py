"""Graph compilation: build report -> clustered dependency graph."""

from .compiler import compile_report
from .model import CompiledGraph

__all__ = ["compile_report", "CompiledGraph"]
