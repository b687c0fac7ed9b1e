"""Unit tests for edge resolution."""

from statsgraph.config import GraphConfig
from statsgraph.core.types import RawModule
from statsgraph.graph.edges import dependency_display_text, resolve_all_edges, resolve_edges
from statsgraph.graph.normalize import parse_module


def descriptor(raw):
    return parse_module(RawModule.model_validate(raw), GraphConfig())


class TestDependencyDisplayText:
    def test_known_types(self):
        assert dependency_display_text("harmony import") == "esm"
        assert dependency_display_text("require import") == "require"
        assert dependency_display_text("cjs require") == "cjs"

    def test_other_types_lose_spaces(self):
        assert dependency_display_text("harmony side effect evaluation") == "harmonysideeffectevaluation"


class TestResolveEdges:
    def test_one_edge_per_issuer(self):
        module = descriptor({
            "id": 2,
            "name": "./b.js",
            "reasons": [
                {"type": "harmony import", "moduleId": 1},
                {"type": "harmony side effect evaluation", "moduleId": 1},
                {"type": "harmony import", "moduleId": 0},
            ],
        })
        edges = resolve_edges(module, {"0", "1", "2"})
        assert [(e.source_id, e.target_id) for e in edges] == [("1", "2"), ("0", "2")]
        assert edges[0].dependency_type == "harmony import"

    def test_hidden_issuers_dropped(self, module_factory):
        module = descriptor(module_factory(2, "./b.js", issuers=[0, 1]))
        edges = resolve_edges(module, {"0", "2"})
        assert [e.source_id for e in edges] == ["0"]

    def test_self_loop_dropped(self, module_factory):
        module = descriptor(module_factory(2, "./b.js", issuers=[2]))
        assert resolve_edges(module, {"2"}) == []

    def test_all_edges(self, module_factory):
        modules = [
            descriptor(module_factory(0, "./index.js", entry=True)),
            descriptor(module_factory(1, "./a.js", issuers=[0])),
            descriptor(module_factory(2, "./b.js", issuers=[1, 0])),
        ]
        edges = resolve_all_edges(modules, {"0", "1", "2"})
        assert [(e.source_id, e.target_id) for e in edges] == [("0", "1"), ("1", "2"), ("0", "2")]
