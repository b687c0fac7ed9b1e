"""
Graph emission.

Assembles the compiled pieces (cluster descriptors, visible modules, package
groups, resolved edges and assets) into a `CompiledGraph` with all the
Graphviz attributes needed to render it.
"""

import base64
import logging
import re
from typing import Dict, Iterable, List, Optional, Set

from ..config import GraphConfig
from ..core.types import Asset, BuildReport, ClusterDescriptor, DependencyEdge, ModuleDescriptor
from .edges import dependency_display_text
from .model import CompiledGraph, GraphCluster, GraphNode
from .normalize import basename, needs_readable_basename, readable_basename
from .style import (
    BLUE_HUE,
    BORDER_LIGHTNESS,
    FILL_LIGHTNESS,
    GREEN_HUE,
    RED_HUE,
    TONE_SATURATION,
    color_triple,
    display_size,
    gray,
    hsl_to_graphviz_hsv,
    module_colors,
    node_style_attrs,
)

logger = logging.getLogger(__name__)

EDGE_ARROW_SIZE = ".75"
FILE_NODE_PREFIX = "file_"
NO_MODULES_LABEL = "No Modules"
RECORD_SPECIAL_RE = re.compile(r"([{}|<>])")


def file_node_id(asset_name: str) -> str:
    return f"{FILE_NODE_PREFIX}{asset_name}"


def escape_record_field(text: str) -> str:
    """Escape characters with a meaning inside record labels."""
    return RECORD_SPECIAL_RE.sub(r"\\\1", text)


def escape_source(source: str) -> str:
    """Make module source safe as a DOT string that ends up in an SVG title."""
    return (
        source
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r\n", "\n")
        .replace("\n", "&#10;")
    )


def source_data_uri(source: str) -> str:
    encoded = base64.b64encode(source.encode("utf-8")).decode("ascii")
    return f"data:application/javascript;base64,{encoded}"


def record_label(fields: List[str]) -> str:
    return "{ " + "|".join(fields) + " }"


class GraphEmitter:
    """
    Incrementally builds the CompiledGraph for one report.

    Usage:
        emitter = GraphEmitter(report, config)
        emitter.add_assets()
        emitter.add_cluster(descriptor, app_modules, packages)
        emitter.add_edges(edges)
        graph = emitter.build()
    """

    def __init__(self, report: BuildReport, config: GraphConfig):
        self.report = report
        self.config = config
        self.graph = CompiledGraph(engine=config.layout)
        self._node_ids: Set[str] = set()
        self._edge_color = hsl_to_graphviz_hsv(RED_HUE, TONE_SATURATION, BORDER_LIGHTNESS)
        self._file_edge_color = hsl_to_graphviz_hsv(BLUE_HUE, TONE_SATURATION, BORDER_LIGHTNESS)
        self._set_graph_attributes()

    # =========================================================================
    # Graph-level attributes
    # =========================================================================

    @property
    def is_big_graph(self) -> bool:
        return len(self.report.modules) > self.config.big_graph_threshold

    def _set_graph_attributes(self) -> None:
        fonts = self.config.font_names
        attrs = self.graph.graph_attrs
        attrs["rankdir"] = "LR"
        if not self.is_big_graph:
            # ortho does not scale to large graphs
            attrs["splines"] = "ortho"
        attrs["fontsize"] = "12"
        if self.config.show_hashes and self.report.hash:
            attrs["label"] = self.report.hash
            attrs["labelloc"] = "t"
        attrs["fontname"] = fonts
        if self.config.show_files:
            # enables edges from clusters (ltail)
            attrs["compound"] = "true"

        self.graph.node_attrs.update(
            fontsize="12", width="0", height="0", margin="0.2,0.1", fontname=fonts,
        )
        self.graph.edge_attrs.update(fontsize="10", fontname=fonts)

    # =========================================================================
    # Nodes
    # =========================================================================

    def _claim_id(self, node_id: str) -> bool:
        if node_id in self._node_ids:
            logger.warning("Duplicate node id %s skipped", node_id)
            return False
        self._node_ids.add(node_id)
        return True

    def add_assets(self) -> None:
        """Add one node per output file, when files are shown."""
        if not self.config.show_files:
            return
        for asset in self.report.assets:
            self.add_asset(asset)

    def add_asset(self, asset: Asset) -> Optional[GraphNode]:
        node_id = file_node_id(asset.name)
        if not self._claim_id(node_id):
            return None

        pattern = self.config.common_basenames_regex
        name = asset.name
        shown = readable_basename(name, pattern) if needs_readable_basename(basename(name), pattern) else basename(name)
        labels = [shown]
        if self.config.show_size:
            labels.append(display_size(asset.size))

        attrs: Dict[str, str] = {"labelloc": "c"}
        if len(labels) > 1:
            attrs["label"] = record_label([escape_record_field(l) for l in labels])
            attrs["shape"] = "record"
        else:
            attrs["label"] = labels[0]
            attrs["shape"] = "rect"
        attrs.update(node_style_attrs(color_triple(BLUE_HUE)))
        return self.graph.add_node(node_id, **attrs)

    def module_node_attrs(self, module: ModuleDescriptor) -> Dict[str, str]:
        """Label, shape, colors and tooltip for a module node."""
        config = self.config
        labels = [module.label]
        if config.show_size:
            labels.append(display_size(module.size))
        # exports go first so they show on the left
        prefix: List[str] = []
        if config.show_exports and module.provided_exports:
            exports = "|".join(escape_record_field(e) for e in module.provided_exports)
            prefix.append(record_label([exports]))

        attrs: Dict[str, str] = {"labelloc": "c"}
        if module.is_entry_point:
            # arrow shapes cannot be records
            attrs["label"] = " | ".join(prefix + labels)
            attrs["shape"] = "rarrow"
            attrs["margin"] = "0.15"
        elif len(prefix) + len(labels) > 1:
            attrs["label"] = record_label(prefix + [escape_record_field(l) for l in labels])
            attrs["shape"] = "record"
        else:
            attrs["label"] = labels[0]
            attrs["shape"] = "rect"

        attrs.update(node_style_attrs(module_colors(module, config)))

        embeds_source = bool(module.source) and module.size < config.source_size_limit
        if config.show_sources and embeds_source:
            attrs["URL"] = source_data_uri(module.source)
            attrs["tooltip"] = escape_source(module.source)
        else:
            attrs["tooltip"] = module.tooltip_path
        return attrs

    def _add_module(self, container: GraphCluster, module: ModuleDescriptor) -> Optional[GraphNode]:
        if not self._claim_id(module.graph_id):
            return None
        return container.add_node(module.graph_id, **self.module_node_attrs(module))

    # =========================================================================
    # Clusters
    # =========================================================================

    def _styled_cluster(self, descriptor: ClusterDescriptor) -> GraphCluster:
        return self.graph.add_cluster(
            descriptor.cluster_id,
            label=descriptor.label,
            fontcolor=gray(28),
            bgcolor=gray(95),
            color=gray(55),
        )

    def add_cluster(
        self,
        descriptor: ClusterDescriptor,
        app_modules: Iterable[ModuleDescriptor],
        packages: Dict[str, List[ModuleDescriptor]],
    ) -> GraphCluster:
        """
        Add a chunk cluster with its application modules and package sub-clusters.

        File edges are attached last, once every module node of the cluster
        exists.
        """
        cluster = self._styled_cluster(descriptor)
        for module in app_modules:
            self._add_module(cluster, module)

        for package_name, modules in packages.items():
            package_cluster = cluster.add_cluster(
                f"{descriptor.cluster_id}_{package_name}",
                label=package_name,
                fillcolor=hsl_to_graphviz_hsv(GREEN_HUE, 0, FILL_LIGHTNESS),
                color=hsl_to_graphviz_hsv(GREEN_HUE, 0, BORDER_LIGHTNESS),
                style="filled",
            )
            for module in modules:
                self._add_module(package_cluster, module)

        self._add_file_edges(descriptor, cluster)
        return cluster

    def add_empty_cluster(self, descriptor: ClusterDescriptor) -> GraphCluster:
        """Placeholder cluster so a chunk without modules still shows up."""
        cluster = self._styled_cluster(descriptor)
        node_id = f"no-modules-{descriptor.graph_id}"
        if self._claim_id(node_id):
            cluster.add_node(node_id, shape="none", label=NO_MODULES_LABEL)
        self._add_file_edges(descriptor, cluster)
        return cluster

    def _add_file_edges(self, descriptor: ClusterDescriptor, cluster: GraphCluster) -> None:
        if not self.config.show_files or descriptor.is_overlap or not descriptor.files:
            return

        files = [f for f in descriptor.files if file_node_id(f) in self._node_ids]
        for missing in set(descriptor.files) - set(files):
            logger.debug("Chunk %s lists %s which is not an asset", descriptor.graph_id, missing)
        if not files:
            return

        nodes = list(cluster.iter_nodes())
        if len(nodes) == 1:
            # exactly one node: link from it directly
            anchor_id = nodes[0].id
        else:
            # edges cannot start at a cluster, so start at an invisible node inside it
            anchor_id = f"{descriptor.cluster_id}hidden"
            if self._claim_id(anchor_id):
                cluster.add_node(
                    anchor_id,
                    style="invis", label="", fixedsize="true",
                    margin="0", width="0", height="0",
                )

        for f in files:
            self.graph.add_edge(
                anchor_id,
                file_node_id(f),
                arrowsize=EDGE_ARROW_SIZE,
                color=self._file_edge_color,
                ltail=descriptor.cluster_id,
            )

    # =========================================================================
    # Edges
    # =========================================================================

    def add_edges(self, edges: Iterable[DependencyEdge]) -> None:
        for edge in edges:
            attrs = {"arrowsize": EDGE_ARROW_SIZE, "color": self._edge_color}
            if self.config.show_dep_type and edge.dependency_type:
                attrs["label"] = dependency_display_text(edge.dependency_type)
            self.graph.add_edge(edge.source_id, edge.target_id, **attrs)

    def build(self) -> CompiledGraph:
        return self.graph
