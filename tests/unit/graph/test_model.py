"""Unit tests for the compiled graph model and its DOT serialization."""

import graphviz

from statsgraph.core.report import report_from_dict
from statsgraph.graph import compile_report
from statsgraph.graph.model import CompiledGraph


class TestCompiledGraph:
    def test_nested_queries(self):
        graph = CompiledGraph()
        graph.add_node("root")
        outer = graph.add_cluster("cluster_a", label="A")
        outer.add_node("a1")
        inner = outer.add_cluster("cluster_a_pkg")
        inner.add_node("p1")

        assert graph.node_ids() == ["root", "a1", "p1"]
        assert outer.node_count == 2
        assert [c.id for c in graph.iter_clusters()] == ["cluster_a", "cluster_a_pkg"]
        assert graph.cluster_of("p1") is inner
        assert graph.cluster_of("root") is None
        assert graph.get_node("missing") is None

    def test_to_digraph(self):
        graph = CompiledGraph(engine="neato")
        graph.add_node("a", label="A")
        dot = graph.to_digraph()
        assert isinstance(dot, graphviz.Digraph)
        assert dot.engine == "neato"


class TestToDot:
    def test_serializes_clusters_and_edges(self, basic_report):
        source = compile_report(basic_report).to_dot()
        assert source.startswith("digraph G {")
        assert "subgraph cluster_0 {" in source
        assert "subgraph cluster_0_libfoo {" in source
        assert "0 -> 1" in source
        assert "rankdir=LR" in source

    def test_newlines_become_escapes(self, basic_report):
        source = compile_report(basic_report).to_dot()
        assert r'label="main [entry] [initial]\nc0ffee"' in source

    def test_quotes_stay_escaped_once(self, module_factory):
        report = report_from_dict({
            "chunks": [{"id": 0}],
            "modules": [module_factory(1, './src/we"ird.js', entry=True)],
        })
        source = compile_report(report).to_dot()
        assert r'label="./src/we\"ird.js"' in source
