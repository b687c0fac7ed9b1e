"""Unit tests for chunk-signature clustering."""

import pytest

from statsgraph.config import GraphConfig
from statsgraph.core.report import report_from_dict
from statsgraph.core.types import RawModule
from statsgraph.graph.clusters import (
    NO_CHUNK_ID,
    describe_chunk,
    describe_cluster,
    empty_chunk_clusters,
    group_by_signature,
    ordered_chunk_ids,
    partition_packages,
)
from statsgraph.graph.normalize import parse_module


@pytest.fixture
def overlap_report(module_factory):
    return report_from_dict({
        "hash": "h",
        "chunks": [
            {"id": 0, "names": ["main"], "entry": True, "initial": True, "size": 2048,
             "hash": "c0ffee", "files": ["main.js"]},
            {"id": 1, "names": ["vendor"], "files": ["vendor.js"]},
        ],
        "modules": [
            module_factory(0, "./src/index.js", chunks=[0], entry=True),
            module_factory(1, "./src/shared.js", chunks=[1, 0], issuers=[0]),
            module_factory(2, "./src/vendor.js", chunks=[1], issuers=[1]),
            module_factory(3, "./src/other.js", chunks=[0], issuers=[0]),
        ],
    })


def normalize(report, config=None):
    config = config or GraphConfig()
    return [parse_module(raw, config) for raw in report.modules]


class TestGrouping:
    def test_groups_by_exact_chunk_set(self, overlap_report):
        groups = group_by_signature(normalize(overlap_report))
        assert list(groups) == [frozenset({"0"}), frozenset({"0", "1"}), frozenset({"1"})]
        assert [m.graph_id for m in groups[frozenset({"0"})]] == ["0", "3"]

    def test_ordered_chunk_ids_follow_report(self, overlap_report):
        assert ordered_chunk_ids(frozenset({"1", "0"}), overlap_report) == ("0", "1")
        assert ordered_chunk_ids(frozenset({"9", "1"}), overlap_report) == ("1", "9")


class TestDescribe:
    def test_single_chunk_label(self, overlap_report):
        descriptor = describe_chunk("0", overlap_report, GraphConfig(show_size=True))
        assert descriptor.label == "main [entry] [initial] - 2KB\nc0ffee"
        assert descriptor.files == ("main.js",)
        assert not descriptor.is_overlap

    def test_hashes_hidden(self, overlap_report):
        descriptor = describe_chunk("0", overlap_report, GraphConfig(show_hashes=False))
        assert descriptor.label == "main [entry] [initial]"

    def test_unknown_chunk(self, overlap_report):
        descriptor = describe_chunk("42", overlap_report, GraphConfig())
        assert descriptor.label == "42"
        assert descriptor.files == ()

    def test_overlap_cluster(self, overlap_report):
        descriptor = describe_cluster(frozenset({"1", "0"}), overlap_report, GraphConfig())
        assert descriptor.graph_id == "0&1"
        assert descriptor.cluster_id == "cluster_0&1"
        assert descriptor.label == "overlap: main & vendor"
        assert descriptor.is_overlap
        assert descriptor.files == ()

    def test_no_chunk_cluster(self, overlap_report):
        descriptor = describe_cluster(frozenset(), overlap_report, GraphConfig())
        assert descriptor.graph_id == NO_CHUNK_ID
        assert descriptor.label == "(no chunk)"


class TestPlaceholders:
    def test_chunk_with_own_group_gets_none(self, overlap_report):
        groups = group_by_signature(normalize(overlap_report))
        assert empty_chunk_clusters(overlap_report, groups.keys(), GraphConfig()) == []

    def test_chunk_only_in_overlaps_gets_placeholder(self, overlap_report):
        signatures = [frozenset({"0"}), frozenset({"0", "1"})]
        placeholders = empty_chunk_clusters(overlap_report, signatures, GraphConfig())
        assert [p.graph_id for p in placeholders] == ["1"]
        assert placeholders[0].files == ("vendor.js",)


class TestPartitionPackages:
    def test_splits_in_input_order(self, module_factory):
        config = GraphConfig()
        modules = [
            parse_module(RawModule.model_validate(raw), config)
            for raw in (
                module_factory(1, "./src/app.js"),
                module_factory(2, "./node_modules/libfoo/a.js"),
                module_factory(3, "./node_modules/@s/bar/b.js"),
                module_factory(4, "./node_modules/libfoo/c.js"),
            )
        ]
        app, packages = partition_packages(modules)
        assert [m.graph_id for m in app] == ["1"]
        assert list(packages) == ["libfoo", "@s/bar"]
        assert [m.graph_id for m in packages["libfoo"]] == ["2", "4"]
