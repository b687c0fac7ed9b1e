"""
Build report loading.

Reads a bundler stats file into a `BuildReport`. Field access is defensive:
the report is not schema-validated beyond what the models need, so only a
missing, unreadable or structurally broken file is an error.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from .errors import ReportError
from .types import BuildReport

logger = logging.getLogger(__name__)


def report_from_dict(data: Dict[str, Any]) -> BuildReport:
    """
    Build a BuildReport from an already parsed stats object.

    Raises:
        ReportError: If the object is not a mapping or its top-level
            structure cannot be interpreted.
    """
    if not isinstance(data, dict):
        raise ReportError("Stats must be a JSON object")
    try:
        return BuildReport.model_validate(data)
    except ValidationError as e:
        raise ReportError(f"Malformed stats: {e}") from e


def load_report(stats_file: Path) -> BuildReport:
    """
    Load a BuildReport from a stats JSON file.

    Args:
        stats_file (Path): Path to the stats file.

    Raises:
        ReportError: If the file is missing or is not valid JSON.
    """
    if not stats_file.exists():
        raise ReportError(f"File not found for stats: {stats_file}")

    try:
        data = json.loads(stats_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ReportError(f"Failed to read stats {stats_file}: {e}") from e

    report = report_from_dict(data)
    logger.debug(
        "Loaded report %s: %d modules, %d chunks, %d assets",
        report.hash, len(report.modules), len(report.chunks), len(report.assets),
    )
    return report
