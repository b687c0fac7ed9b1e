"""
Cluster partitioning.

Modules are clustered by the exact set of chunks they belong to. Graphviz
does not allow overlapping clusters, so a module shared by several chunks
goes into an overlap cluster for that specific combination instead of into
each chunk's cluster. This also makes shared modules easy to spot.
"""

import logging
from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, List, Tuple

from ..config import GraphConfig
from ..core.types import BuildReport, ClusterDescriptor, ModuleDescriptor
from .style import display_size

logger = logging.getLogger(__name__)

Signature = FrozenSet[str]

OVERLAP_ID_SEPARATOR = "&"
OVERLAP_NAME_SEPARATOR = " & "
NO_CHUNK_ID = "none"
NO_CHUNK_LABEL = "(no chunk)"


def chunk_signature(module: ModuleDescriptor) -> Signature:
    return frozenset(module.chunk_ids)


def group_by_signature(
    modules: Iterable[ModuleDescriptor],
) -> Dict[Signature, List[ModuleDescriptor]]:
    """Group modules by chunk signature, in order of first appearance."""
    groups: Dict[Signature, List[ModuleDescriptor]] = {}
    for module in modules:
        groups.setdefault(chunk_signature(module), []).append(module)
    return groups


def ordered_chunk_ids(signature: Signature, report: BuildReport) -> Tuple[str, ...]:
    """Chunk ids of a signature in report order; unknown ids go last, by value."""
    order = report.chunk_order()
    return tuple(sorted(signature, key=lambda c: (order.get(c, len(order)), c)))


def describe_chunk(chunk_id: str, report: BuildReport, config: GraphConfig) -> ClusterDescriptor:
    """Cluster for a single chunk, annotated with its flags, size and hash."""
    chunk = report.chunk_by_id(chunk_id)
    if chunk is None:
        logger.debug("Chunk %s is referenced by modules but not listed", chunk_id)
        return ClusterDescriptor(graph_id=chunk_id, label=chunk_id, chunk_ids=(chunk_id,))

    label = chunk.display_name
    if chunk.entry:
        label += " [entry]"
    if chunk.initial:
        label += " [initial]"
    if config.show_size and chunk.size:
        label += f" - {display_size(chunk.size)}"
    if config.show_hashes and chunk.hash:
        label += f"\n{chunk.hash}"

    return ClusterDescriptor(
        graph_id=chunk.graph_id,
        label=label,
        chunk_ids=(chunk.graph_id,),
        files=tuple(chunk.files),
    )


def describe_cluster(
    signature: Signature,
    report: BuildReport,
    config: GraphConfig,
) -> ClusterDescriptor:
    """
    Build the ClusterDescriptor for a chunk signature.

    Overlap clusters represent an intersection of bundles, so they carry only
    the chunk names: no entry/initial flags, no hashes and no output files.
    """
    chunk_ids = ordered_chunk_ids(signature, report)

    if not chunk_ids:
        return ClusterDescriptor(graph_id=NO_CHUNK_ID, label=NO_CHUNK_LABEL, is_overlap=True)

    if len(chunk_ids) == 1:
        return describe_chunk(chunk_ids[0], report, config)

    names = []
    for chunk_id in chunk_ids:
        chunk = report.chunk_by_id(chunk_id)
        names.append(chunk.display_name if chunk else chunk_id)

    return ClusterDescriptor(
        graph_id=OVERLAP_ID_SEPARATOR.join(chunk_ids),
        label="overlap: " + OVERLAP_NAME_SEPARATOR.join(names),
        is_overlap=True,
        chunk_ids=chunk_ids,
    )


def empty_chunk_clusters(
    report: BuildReport,
    signatures: Iterable[Signature],
    config: GraphConfig,
) -> List[ClusterDescriptor]:
    """
    Placeholder clusters for chunks that have no module group of their own.

    A chunk whose modules all live in overlap clusters still gets one, so
    the chunk and its output files stay visible.
    """
    single = {next(iter(s)) for s in signatures if len(s) == 1}
    return [
        describe_chunk(chunk.graph_id, report, config)
        for chunk in report.chunks
        if chunk.graph_id not in single
    ]


def partition_packages(
    modules: Iterable[ModuleDescriptor],
) -> Tuple[List[ModuleDescriptor], Dict[str, List[ModuleDescriptor]]]:
    """
    Split a cluster's modules into application modules and package groups.

    Returns:
        Application modules (no package origin) and a mapping of package
        name to its modules, both in input order.
    """
    app_modules: List[ModuleDescriptor] = []
    packages: Dict[str, List[ModuleDescriptor]] = defaultdict(list)
    for module in modules:
        if module.package is not None and module.package.name:
            packages[module.package.name].append(module)
        else:
            app_modules.append(module)
    return app_modules, dict(packages)
