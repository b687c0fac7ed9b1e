"""statsgraph: render bundler build reports as dependency graphs."""

__version__ = "0.3.0"
