"""
Run Configuration.

This module centralizes every option that shapes a compilation run: what
to show on nodes, how to color them, which modules to hide and how to
cluster them. A `GraphConfig` is immutable and passed explicitly into each
component, so no component reads global state.

Configuration can come from a YAML file (keys may use dashes, as on the
command line) and is overridden by command line flags.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Pattern

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .core.errors import ConfigError

# Modules at or above this size never have their source embedded
DEFAULT_SOURCE_SIZE_LIMIT = 10_000

# Above this many modules, straight orthogonal edges become too slow to lay out
DEFAULT_BIG_GRAPH_THRESHOLD = 100

DEFAULT_FONT_NAMES = "gotham-book,sans-serif"

LayoutEngine = Literal["dot", "neato", "fdp", "sfdp", "twopi", "circo"]

PATTERN_FIELDS = (
    "hide_pattern",
    "allow_pattern",
    "common_basenames_pattern",
    "extra_clusters_pattern",
)


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a user supplied pattern, case-insensitive like the CLI documents."""
    return re.compile(pattern, re.IGNORECASE)


class GraphConfig(BaseModel):
    """
    Immutable options for one compilation run.

    Every flag is independently togglable. Pattern options hold the raw
    regular expression strings; use the `*_regex` properties to get the
    compiled, case-insensitive form.
    """

    show_size: bool = False
    color_by_size: bool = False
    show_exports: bool = False
    show_hashes: bool = True
    show_sources: bool = False
    show_files: bool = True
    show_dep_type: bool = False
    show_query_string: bool = False
    big_graph_threshold: int = DEFAULT_BIG_GRAPH_THRESHOLD

    hide_pattern: Optional[str] = None
    # Modules matching this are never hidden by hide_pattern
    allow_pattern: Optional[str] = None
    common_basenames_pattern: Optional[str] = None
    extra_clusters_pattern: Optional[str] = None

    layout: LayoutEngine = "dot"
    source_size_limit: int = DEFAULT_SOURCE_SIZE_LIMIT
    cross_chunk_issuers: bool = False
    font_names: str = DEFAULT_FONT_NAMES

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator(*PATTERN_FIELDS)
    @classmethod
    def _check_pattern(cls, value: Optional[str]) -> Optional[str]:
        if value in (None, ""):
            return None
        try:
            compile_pattern(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression {value!r}: {e}") from e
        return value

    @property
    def hide_regex(self) -> Optional[Pattern[str]]:
        return compile_pattern(self.hide_pattern) if self.hide_pattern else None

    @property
    def allow_regex(self) -> Optional[Pattern[str]]:
        return compile_pattern(self.allow_pattern) if self.allow_pattern else None

    @property
    def common_basenames_regex(self) -> Optional[Pattern[str]]:
        if not self.common_basenames_pattern:
            return None
        return compile_pattern(self.common_basenames_pattern)

    @property
    def extra_clusters_regex(self) -> Optional[Pattern[str]]:
        if not self.extra_clusters_pattern:
            return None
        return compile_pattern(self.extra_clusters_pattern)

    def merged(self, **overrides: Any) -> "GraphConfig":
        """Return a copy with the non-None overrides applied and re-validated."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return build_config(values)


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def build_config(values: Dict[str, Any]) -> GraphConfig:
    """
    Validate a mapping of options into a GraphConfig.

    Raises:
        ConfigError: If an option is unknown or has an invalid value.
    """
    try:
        return GraphConfig(**_normalize_keys(values))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Path) -> GraphConfig:
    """
    Load a GraphConfig from a YAML file.

    The file may either hold the options at the top level or under a
    `graph:` section.

    Args:
        path (Path): Location of the YAML file.

    Returns:
        GraphConfig: The validated configuration.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping of options")

    if isinstance(data.get("graph"), dict):
        data = data["graph"]

    return build_config(data)
