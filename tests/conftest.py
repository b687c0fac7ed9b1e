"""Shared fixtures for statsgraph tests."""

from typing import Any, Dict, List, Optional

import pytest

from statsgraph.core.report import report_from_dict


def make_module(
    module_id: Any,
    name: str,
    chunks: Optional[List[Any]] = None,
    issuers: Optional[List[Any]] = None,
    depth: int = 1,
    entry: bool = False,
    reason_type: str = "harmony import",
    **extra: Any,
) -> Dict[str, Any]:
    """Build a raw stats module the way the bundler writes it."""
    reasons = [{"type": "entry", "moduleId": None}] if entry else []
    reasons += [{"type": reason_type, "moduleId": issuer} for issuer in (issuers or [])]
    module = {
        "id": module_id,
        "name": name,
        "size": 100,
        "depth": 0 if entry else depth,
        "reasons": reasons,
        "chunks": chunks if chunks is not None else [0],
    }
    module.update(extra)
    return module


@pytest.fixture
def module_factory():
    return make_module


@pytest.fixture
def basic_stats() -> Dict[str, Any]:
    """One entry chunk with an app entry, an app module and a package module."""
    return {
        "hash": "abc123",
        "chunks": [
            {"id": 0, "names": ["main"], "entry": True, "initial": True,
             "size": 2048, "hash": "c0ffee", "files": ["main.js"]},
        ],
        "assets": [{"name": "main.js", "size": 2048}],
        "modules": [
            make_module(0, "./src/index.js", entry=True),
            make_module(1, "./src/app.js", issuers=[0]),
            make_module(2, "./node_modules/libfoo/lib/foo.js", issuers=[1]),
        ],
    }


@pytest.fixture
def basic_report(basic_stats):
    return report_from_dict(basic_stats)
