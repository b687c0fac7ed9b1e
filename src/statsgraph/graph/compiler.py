"""
Graph compiler.

Runs the whole compilation for one build report:

1. Normalize every raw module.
2. Group modules by chunk signature (report order).
3. Per group: resolve visibility, split packages, resolve edges, emit.
4. Add placeholder clusters for chunks without their own module group.

The compiler is pure: the same report and configuration always produce the
same graph, in the same order.
"""

import logging
from typing import List, Optional, Set

from ..config import GraphConfig
from ..core.types import BuildReport, DependencyEdge, ModuleDescriptor
from .clusters import describe_cluster, empty_chunk_clusters, group_by_signature, partition_packages
from .edges import resolve_all_edges
from .emitter import GraphEmitter
from .model import CompiledGraph
from .normalize import parse_module
from .visibility import resolve_visible

logger = logging.getLogger(__name__)


def normalize_modules(report: BuildReport, config: GraphConfig) -> List[ModuleDescriptor]:
    return [parse_module(raw, config) for raw in report.modules]


def compile_report(report: BuildReport, config: Optional[GraphConfig] = None) -> CompiledGraph:
    """
    Compile a build report into a clustered dependency graph.

    Args:
        report (BuildReport): The parsed stats report.
        config (GraphConfig): Run options; defaults when omitted.

    Returns:
        CompiledGraph: Abstract graph ready for DOT serialization.
    """
    config = config or GraphConfig()
    modules = normalize_modules(report, config)

    if len(report.modules) > config.big_graph_threshold:
        logger.warning(
            "Detected a large graph with %d modules, edges will be curvy instead of straight.",
            len(report.modules),
        )

    groups = group_by_signature(modules)

    globally_visible: Set[str] = set()
    if config.cross_chunk_issuers:
        globally_visible = {m.graph_id for m in resolve_visible(modules, config)}

    emitter = GraphEmitter(report, config)
    emitter.add_assets()

    edges: List[DependencyEdge] = []
    for signature, group in groups.items():
        if config.cross_chunk_issuers:
            visible = [m for m in group if m.graph_id in globally_visible]
            visible_ids = globally_visible
        else:
            visible = resolve_visible(group, config)
            visible_ids = {m.graph_id for m in visible}

        hidden = len(group) - len(visible)
        if hidden:
            logger.debug("Hiding %d of %d modules in chunks %s", hidden, len(group), sorted(signature))

        descriptor = describe_cluster(signature, report, config)
        app_modules, packages = partition_packages(visible)
        emitter.add_cluster(descriptor, app_modules, packages)
        edges.extend(resolve_all_edges(visible, visible_ids))

    for descriptor in empty_chunk_clusters(report, groups.keys(), config):
        emitter.add_empty_cluster(descriptor)

    emitter.add_edges(edges)
    graph = emitter.build()

    stats = graph.stats()
    logger.info(
        "Compiled %d nodes, %d edges, %d clusters",
        stats["total_nodes"], stats["total_edges"], stats["total_clusters"],
    )
    return graph

