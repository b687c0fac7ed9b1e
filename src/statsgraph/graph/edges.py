"""
Edge resolution.

A stats file has one reason per import statement, so a file importing three
named bindings from the same dependency produces three identical reasons.
Edges are therefore deduplicated per issuer, and only drawn when the issuer
is itself visible (Graphviz would otherwise invent a node for the hidden
endpoint).
"""

from typing import Collection, Dict, List

from ..core.types import DependencyEdge, ModuleDescriptor

DEPENDENCY_DISPLAY_TEXT: Dict[str, str] = {
    "harmony import": "esm",
    "require import": "require",
    "cjs require": "cjs",
}


def dependency_display_text(dependency_type: str) -> str:
    """Short edge label for a dependency type."""
    if dependency_type in DEPENDENCY_DISPLAY_TEXT:
        return DEPENDENCY_DISPLAY_TEXT[dependency_type]
    return dependency_type.replace(" ", "")


def resolve_edges(module: ModuleDescriptor, visible_ids: Collection[str]) -> List[DependencyEdge]:
    """
    Edges into `module` from its visible issuers.

    Issuers are deduplicated by graph id (first occurrence wins). Self
    references and issuers outside `visible_ids` are dropped.
    """
    edges: Dict[str, DependencyEdge] = {}
    for issuer in module.issuers:
        if issuer.graph_id in edges:
            continue
        if issuer.graph_id == module.graph_id or issuer.graph_id not in visible_ids:
            continue
        edges[issuer.graph_id] = DependencyEdge(
            source_id=issuer.graph_id,
            target_id=module.graph_id,
            dependency_type=issuer.dependency_type,
        )
    return list(edges.values())


def resolve_all_edges(
    modules: Collection[ModuleDescriptor],
    visible_ids: Collection[str],
) -> List[DependencyEdge]:
    edges: List[DependencyEdge] = []
    for module in modules:
        edges.extend(resolve_edges(module, visible_ids))
    return edges
