"""
Abstract directed graph produced by the compiler.

The structure is renderer-agnostic: nodes, nested clusters and edges with
plain string attributes. `CompiledGraph.to_digraph()` turns it into a
`graphviz.Digraph`, and `to_dot()` into DOT source for the layout tools.

Labels keep real newlines here; they become DOT `\\n` escapes only when the
graph is serialized.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import graphviz

Attrs = Dict[str, str]

# Attributes whose values are free text and must not be read as HTML labels
TEXT_ATTRIBUTES = {"label", "tooltip", "URL", "xlabel"}


@dataclass
class GraphNode:
    id: str
    attrs: Attrs = field(default_factory=dict)

    @property
    def label(self) -> str:
        return self.attrs.get("label", self.id)

    @property
    def shape(self) -> Optional[str]:
        return self.attrs.get("shape")


@dataclass
class GraphEdge:
    tail: str
    head: str
    attrs: Attrs = field(default_factory=dict)


@dataclass
class GraphCluster:
    """A Graphviz cluster subgraph; `id` must start with `cluster`."""
    id: str
    attrs: Attrs = field(default_factory=dict)
    nodes: List[GraphNode] = field(default_factory=list)
    clusters: List["GraphCluster"] = field(default_factory=list)

    def add_node(self, node_id: str, **attrs: str) -> GraphNode:
        node = GraphNode(node_id, dict(attrs))
        self.nodes.append(node)
        return node

    def add_cluster(self, cluster_id: str, **attrs: str) -> "GraphCluster":
        cluster = GraphCluster(cluster_id, dict(attrs))
        self.clusters.append(cluster)
        return cluster

    def iter_nodes(self) -> Iterator[GraphNode]:
        """All nodes in this cluster, including nested clusters."""
        yield from self.nodes
        for child in self.clusters:
            yield from child.iter_nodes()

    def iter_clusters(self) -> Iterator["GraphCluster"]:
        yield self
        for child in self.clusters:
            yield from child.iter_clusters()

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    @property
    def label(self) -> str:
        return self.attrs.get("label", self.id)


@dataclass
class CompiledGraph:
    """Root directed graph: global attributes, root nodes, clusters and edges."""
    name: str = "G"
    engine: str = "dot"
    graph_attrs: Attrs = field(default_factory=dict)
    node_attrs: Attrs = field(default_factory=dict)
    edge_attrs: Attrs = field(default_factory=dict)
    nodes: List[GraphNode] = field(default_factory=list)
    clusters: List[GraphCluster] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    # =========================================================================
    # Construction
    # =========================================================================

    def add_node(self, node_id: str, **attrs: str) -> GraphNode:
        node = GraphNode(node_id, dict(attrs))
        self.nodes.append(node)
        return node

    def add_cluster(self, cluster_id: str, **attrs: str) -> GraphCluster:
        cluster = GraphCluster(cluster_id, dict(attrs))
        self.clusters.append(cluster)
        return cluster

    def add_edge(self, tail: str, head: str, **attrs: str) -> GraphEdge:
        edge = GraphEdge(tail, head, dict(attrs))
        self.edges.append(edge)
        return edge

    # =========================================================================
    # Queries
    # =========================================================================

    def iter_nodes(self) -> Iterator[GraphNode]:
        yield from self.nodes
        for cluster in self.clusters:
            yield from cluster.iter_nodes()

    def iter_clusters(self) -> Iterator[GraphCluster]:
        for cluster in self.clusters:
            yield from cluster.iter_clusters()

    def node_ids(self) -> List[str]:
        return [node.id for node in self.iter_nodes()]

    def has_node(self, node_id: str) -> bool:
        return any(node.id == node_id for node in self.iter_nodes())

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def find_cluster(self, cluster_id: str) -> Optional[GraphCluster]:
        for cluster in self.iter_clusters():
            if cluster.id == cluster_id:
                return cluster
        return None

    def cluster_of(self, node_id: str) -> Optional[GraphCluster]:
        """Innermost cluster containing the node, or None for root nodes."""
        for cluster in self.iter_clusters():
            if any(node.id == node_id for node in cluster.nodes):
                return cluster
        return None

    def stats(self) -> Dict[str, Any]:
        edges_by_color: Dict[str, int] = defaultdict(int)
        for edge in self.edges:
            edges_by_color[edge.attrs.get("color", "")] += 1
        return {
            "total_nodes": sum(1 for _ in self.iter_nodes()),
            "total_edges": len(self.edges),
            "total_clusters": sum(1 for _ in self.iter_clusters()),
            "edges_by_color": dict(edges_by_color),
        }

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_digraph(self) -> graphviz.Digraph:
        dot = graphviz.Digraph(
            name=self.name,
            engine=self.engine,
            graph_attr=_dot_attrs(self.graph_attrs),
            node_attr=_dot_attrs(self.node_attrs),
            edge_attr=_dot_attrs(self.edge_attrs),
        )
        for node in self.nodes:
            dot.node(node.id, _attributes=_dot_attrs(node.attrs))
        for cluster in self.clusters:
            _add_cluster(dot, cluster)
        for edge in self.edges:
            dot.edge(edge.tail, edge.head, _attributes=_dot_attrs(edge.attrs))
        return dot

    def to_dot(self) -> str:
        """Export the graph as DOT source."""
        return self.to_digraph().source


def _dot_value(key: str, value: str) -> str:
    text = str(value).replace("\n", "\\n")
    if key in TEXT_ATTRIBUTES:
        return graphviz.nohtml(text)
    return text


def _dot_attrs(attrs: Attrs) -> Attrs:
    return {key: _dot_value(key, value) for key, value in attrs.items()}


def _add_cluster(parent: graphviz.Digraph, cluster: GraphCluster) -> None:
    sub = graphviz.Digraph(name=cluster.id, graph_attr=_dot_attrs(cluster.attrs))
    for node in cluster.nodes:
        sub.node(node.id, _attributes=_dot_attrs(node.attrs))
    for child in cluster.clusters:
        _add_cluster(sub, child)
    parent.subgraph(sub)
