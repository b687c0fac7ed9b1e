"""
Module normalization.

Turns one raw stats module into a `ModuleDescriptor`: splits inline loader
steps from the resolved path, detects the package a module comes from,
computes a readable label and extracts the issuers that become edges.

Normalization never raises for a single module. A label that cannot be
computed falls back to the basename of the module name.
"""

import logging
import posixpath
import re
from typing import List, Optional, Pattern, Tuple

from ..config import GraphConfig
from ..core.types import Issuer, ModuleDescriptor, PackageOrigin, RawModule

logger = logging.getLogger(__name__)

LOADER_SEPARATOR = "!"
PACKAGE_DIR_MARKER = "node_modules"

# node_modules/<name>/<rest>, where <name> may be scoped: @scope/name
PACKAGE_PATH_RE = re.compile(r"node_modules/(@[^/]+/[^/]+|[^/]+)/(.*)")
LOADER_PACKAGE_RE = re.compile(r"node_modules/(@[^/]+/[^/]+|[^/]+)")

# Loader files that say nothing beyond the package name
UNINFORMATIVE_LOADER_FILES = ("index.js", "loader.js")

# Reasons that do not represent a real cross-module dependency
ENTRY_REASON = "entry"
SELF_EXPORTS_REASON = "self exports reference"
# Reasons issued to the context module itself, not to the files it pulls in
CONTEXT_IMPORT_REASONS = (
    "import() context eager",
    "import() context lazy",
    "require.context",
    "cjs require context",
    "amd require context",
)
EAGER_MARKER = " eager "


def split_loaders(name: str) -> Tuple[List[str], str]:
    """
    Split a module request into its inline loader steps and resolved path.

    >>> split_loaders("style-loader!css-loader!./app.css")
    (['style-loader', 'css-loader'], './app.css')
    """
    parts = name.split(LOADER_SEPARATOR)
    return parts[:-1], parts[-1]


def split_query(request: str) -> Tuple[str, str]:
    path, sep, query = request.partition("?")
    return path, query if sep else ""


def basename(path: str) -> str:
    return posixpath.basename(path.rstrip("/")) or path


def needs_readable_basename(filename: str, pattern: Optional[Pattern[str]]) -> bool:
    """Whether a filename is common enough to need extra path context."""
    return pattern is None or pattern.search(filename) is not None


def readable_basename(path: str, pattern: Optional[Pattern[str]]) -> str:
    """
    Shorten a path to the fragment needed to tell common filenames apart.

    Walks the segments from the filename outward, accumulating them while the
    accumulated fragment still matches `pattern` (e.g. `index.js` matches, so
    its parent folder is kept too). Without a pattern the path is returned
    unchanged.
    """
    if pattern is None:
        return path

    accumulated: List[str] = []
    for fragment in reversed(path.split("/")):
        if fragment in ("", "."):
            continue
        accumulated.insert(0, fragment)
        if not pattern.search("/".join(accumulated)):
            break
    return "/".join(accumulated) or path


def resolve_package(path: str, config: GraphConfig) -> Optional[PackageOrigin]:
    """
    Find the package a resolved module path belongs to.

    Modules under a package directory yield the package name (scoped names
    supported) and the path inside it. Otherwise, when an extra-clusters
    pattern matches, its first capture group (or the full match) names a
    pseudo-package. Returns None when neither applies.
    """
    if PACKAGE_DIR_MARKER in path:
        match = PACKAGE_PATH_RE.search(path)
        if match:
            return PackageOrigin(name=match.group(1), file_path=match.group(2))
        logger.debug("Unusual package path, no package origin: %s", path)
        return None

    pattern = config.extra_clusters_regex
    if pattern is None:
        return None

    match = pattern.search(path)
    if not match:
        return None

    groups = [g for g in match.groups() if g]
    name = groups[0] if groups else match.group(0)
    if not name:
        return None

    file_path = path.split(name)[-1].removeprefix("/")
    return PackageOrigin(name=name, file_path=file_path)


def _loader_step_label(step: str, config: GraphConfig) -> str:
    pathname, query = split_query(step)
    pattern = config.common_basenames_regex

    if f"{PACKAGE_DIR_MARKER}/" in pathname:
        match = LOADER_PACKAGE_RE.search(pathname)
        package_name = match.group(1) if match else ""
        show_file = basename(pathname)
        if not package_name:
            text = show_file
        elif show_file == package_name or show_file in UNINFORMATIVE_LOADER_FILES:
            text = package_name
        else:
            text = f"{package_name} - {show_file}"
    elif needs_readable_basename(basename(pathname), pattern):
        text = readable_basename(pathname, pattern)
    else:
        text = basename(pathname)

    if config.show_query_string and query:
        text = f"{text}?{query}"
    return text


def _is_context_import(raw: RawModule) -> bool:
    return any(reason.type in CONTEXT_IMPORT_REASONS for reason in raw.reasons)


def module_label(
    raw: RawModule,
    loaders: List[str],
    resolved_path: str,
    package: Optional[PackageOrigin],
    config: GraphConfig,
) -> str:
    """Compute the display label of a module (quotes not yet escaped)."""
    pattern = config.common_basenames_regex

    if package is not None:
        return readable_basename(package.display_path, pattern)

    if loaders:
        steps = loaders + [resolved_path]
        return f"{LOADER_SEPARATOR}\n".join(
            _loader_step_label(step, config) for step in steps
        )

    if EAGER_MARKER in raw.name:
        return raw.name.replace(EAGER_MARKER, "\neager\n")

    if _is_context_import(raw):
        return f"context import: {raw.name}"

    path, _ = split_query(raw.name)
    if needs_readable_basename(basename(path), pattern):
        return readable_basename(path, pattern)
    return basename(path)


def escape_label(label: str) -> str:
    """Escape double quotes so the label embeds safely in a DOT string."""
    return re.sub(r'(?<!\\)"', r'\\"', label)


def extract_issuers(raw: RawModule) -> Tuple[Issuer, ...]:
    """
    Map a module's reasons to issuers.

    Entry reasons and self export references are not real edges, and reasons
    without an issuing module have nothing to point from. Exact duplicates are
    collapsed, keeping the first occurrence.
    """
    issuers: List[Issuer] = []
    seen = set()
    for reason in raw.reasons:
        if reason.type == ENTRY_REASON or SELF_EXPORTS_REASON in reason.type:
            continue
        if reason.module_id is None:
            continue
        issuer = Issuer(graph_id=str(reason.module_id), dependency_type=reason.type)
        key = (issuer.graph_id, issuer.dependency_type)
        if key in seen:
            continue
        seen.add(key)
        issuers.append(issuer)
    return tuple(issuers)


def module_graph_id(raw: RawModule) -> str:
    """String id for the graph; falls back to the identifier or name when id is missing."""
    if raw.id is not None:
        return str(raw.id)
    return raw.identifier or raw.name


def _exports(value) -> Tuple[str, ...]:
    if isinstance(value, list):
        return tuple(str(v) for v in value)
    return ()


def parse_module(raw: RawModule, config: GraphConfig) -> ModuleDescriptor:
    """
    Normalize one raw stats module.

    Args:
        raw (RawModule): Record from the build report.
        config (GraphConfig): Run configuration (basenames and cluster patterns).

    Returns:
        ModuleDescriptor: Immutable descriptor used by every later stage.
    """
    loaders, resolved_path = split_loaders(raw.name)
    resolved_file, _ = split_query(resolved_path)

    try:
        package = resolve_package(resolved_file, config)
    except Exception as e:
        logger.warning("Package detection failed for %s: %s", raw.name, e)
        package = None

    try:
        label = module_label(raw, loaders, resolved_path, package, config)
    except Exception as e:
        logger.warning("Falling back to basename label for %s: %s", raw.name, e)
        label = basename(raw.name)

    return ModuleDescriptor(
        graph_id=module_graph_id(raw),
        name=raw.name,
        resolved_path=resolved_file,
        loaders=tuple(loaders),
        label=escape_label(label),
        file_extension=posixpath.splitext(basename(resolved_file))[1],
        size=raw.size,
        depth=raw.depth,
        package=package,
        issuers=extract_issuers(raw),
        is_entry=any(r.type == ENTRY_REASON for r in raw.reasons),
        provided_exports=_exports(raw.provided_exports),
        used_exports=_exports(raw.used_exports),
        source=raw.source,
        chunk_ids=tuple(dict.fromkeys(str(c) for c in raw.chunks)),
    )
