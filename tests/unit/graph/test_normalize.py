"""Unit tests for module normalization."""

from statsgraph.config import GraphConfig, compile_pattern
from statsgraph.core.types import RawModule
from statsgraph.graph.normalize import (
    basename,
    escape_label,
    extract_issuers,
    module_graph_id,
    parse_module,
    readable_basename,
    resolve_package,
    split_loaders,
    split_query,
)

COMMON_INDEX = r"^index\.(js|ts)$"


def parse(data, **config):
    return parse_module(RawModule.model_validate(data), GraphConfig(**config))


class TestPathHelpers:
    def test_split_loaders(self):
        assert split_loaders("style-loader!css-loader!./app.css") == (["style-loader", "css-loader"], "./app.css")
        assert split_loaders("./app.js") == ([], "./app.js")

    def test_split_query(self):
        assert split_query("./a.js?inline") == ("./a.js", "inline")
        assert split_query("./a.js") == ("./a.js", "")

    def test_basename(self):
        assert basename("./src/index.js") == "index.js"
        assert basename("index.js") == "index.js"

    def test_readable_basename_without_pattern(self):
        assert readable_basename("./src/index.js", None) == "./src/index.js"

    def test_readable_basename_keeps_parent_of_common_name(self):
        pattern = compile_pattern(COMMON_INDEX)
        assert readable_basename("./src/components/index.js", pattern) == "components/index.js"
        assert readable_basename("./src/app.js", pattern) == "app.js"


class TestResolvePackage:
    def test_plain_package(self):
        origin = resolve_package("./node_modules/libfoo/lib/foo.js", GraphConfig())
        assert origin.name == "libfoo"
        assert origin.file_path == "lib/foo.js"

    def test_scoped_package(self):
        origin = resolve_package("./node_modules/@scope/pkg/dist/x.js", GraphConfig())
        assert origin.name == "@scope/pkg"
        assert origin.file_path == "dist/x.js"

    def test_nested_package_uses_first_match(self):
        origin = resolve_package("./node_modules/a/node_modules/b/index.js", GraphConfig())
        assert origin.name == "a"

    def test_application_module(self):
        assert resolve_package("./src/app.js", GraphConfig()) is None

    def test_extra_cluster_capture_group(self):
        config = GraphConfig(extra_clusters_pattern=r"src/features/([^/]+)")
        origin = resolve_package("./src/features/cart/index.js", config)
        assert origin.name == "cart"
        assert origin.file_path == "index.js"

    def test_extra_cluster_full_match(self):
        config = GraphConfig(extra_clusters_pattern=r"shared")
        origin = resolve_package("./src/shared/util.js", config)
        assert origin.name == "shared"
        assert origin.file_path == "util.js"


class TestLabels:
    def test_package_label(self, module_factory):
        module = parse(module_factory(2, "./node_modules/libfoo/lib/foo.js"))
        assert module.label == "libfoo/lib/foo.js"
        assert module.package.name == "libfoo"

    def test_plain_label_without_pattern_is_full_path(self, module_factory):
        assert parse(module_factory(1, "./src/app.js")).label == "./src/app.js"

    def test_common_basename_label(self, module_factory):
        module = parse(module_factory(1, "./src/components/index.js"), common_basenames_pattern=COMMON_INDEX)
        assert module.label == "components/index.js"

    def test_uncommon_basename_label(self, module_factory):
        module = parse(module_factory(1, "./src/app.js?v=1"), common_basenames_pattern=COMMON_INDEX)
        assert module.label == "app.js"

    def test_loader_label(self, module_factory):
        module = parse(module_factory(1, "./node_modules/css-loader/index.js!./src/app.css"))
        assert module.label == "css-loader!\n./src/app.css"
        assert module.loaders == ("./node_modules/css-loader/index.js",)
        assert module.resolved_path == "./src/app.css"
        assert module.file_extension == ".css"

    def test_loader_label_with_informative_file(self, module_factory):
        module = parse(
            module_factory(1, "./node_modules/babel-loader/lib/cache.js!./src/a.js"),
            common_basenames_pattern=COMMON_INDEX,
        )
        assert module.label == "babel-loader - cache.js!\na.js"

    def test_loader_query_string(self, module_factory):
        name = "./node_modules/url-loader/index.js?limit=100!./src/a.png"
        assert parse(module_factory(1, name)).label.startswith("url-loader!\n")
        assert parse(module_factory(1, name), show_query_string=True).label.startswith("url-loader?limit=100!\n")

    def test_eager_label(self, module_factory):
        module = parse(module_factory(1, "./src/locales lazy eager ^\\.\\/.*$"))
        assert module.label == "./src/locales lazy\neager\n^\\.\\/.*$"

    def test_context_label(self, module_factory):
        module = parse(module_factory(1, "./src/locales sync", issuers=[0], reason_type="require.context"))
        assert module.label == "context import: ./src/locales sync"

    def test_context_element_keeps_path_label(self, module_factory):
        module = parse(module_factory(4, "./src/images/1.png", issuers=[3], reason_type="context element"))
        assert module.label == "./src/images/1.png"

    def test_lazy_context_label(self, module_factory):
        module = parse(module_factory(3, "./src/images lazy", issuers=[0], reason_type="import() context lazy"))
        assert module.label == "context import: ./src/images lazy"

    def test_quotes_escaped(self, module_factory):
        assert parse(module_factory(1, './src/we"ird.js')).label == './src/we\\"ird.js'

    def test_escape_label_keeps_escaped_quotes(self):
        assert escape_label('a\\"b"c') == 'a\\"b\\"c'


class TestIssuers:
    def test_filters_and_dedupes(self):
        raw = RawModule.model_validate({
            "id": 3,
            "name": "./a.js",
            "reasons": [
                {"type": "entry", "moduleId": None},
                {"type": "harmony import", "moduleId": 1},
                {"type": "harmony import", "moduleId": 1},
                {"type": "harmony side effect evaluation", "moduleId": 1},
                {"type": "harmony export imported specifier", "moduleId": None},
                {"type": "self exports reference", "moduleId": 3},
            ],
        })
        issuers = extract_issuers(raw)
        assert [(i.graph_id, i.dependency_type) for i in issuers] == [
            ("1", "harmony import"),
            ("1", "harmony side effect evaluation"),
        ]

    def test_entry_flag(self, module_factory):
        assert parse(module_factory(0, "./src/index.js", entry=True)).is_entry
        assert not parse(module_factory(1, "./src/a.js", issuers=[0])).is_entry


class TestParseModule:
    def test_graph_id_fallbacks(self):
        assert module_graph_id(RawModule.model_validate({"id": 7, "name": "a"})) == "7"
        assert module_graph_id(RawModule.model_validate({"identifier": "x|y", "name": "a"})) == "x|y"
        assert module_graph_id(RawModule.model_validate({"name": "a"})) == "a"

    def test_chunk_ids_are_unique_strings(self, module_factory):
        module = parse(module_factory(1, "./a.js", chunks=[0, "0", 1]))
        assert module.chunk_ids == ("0", "1")

    def test_exports(self, module_factory):
        module = parse(module_factory(1, "./a.js", providedExports=["default", "x"], usedExports=True))
        assert module.provided_exports == ("default", "x")
        assert module.used_exports == ()

    def test_label_failure_degrades_to_basename(self, module_factory, monkeypatch):
        def boom(*args, **kwargs):
            raise ValueError("bad label")

        monkeypatch.setattr("statsgraph.graph.normalize.module_label", boom)
        module = parse(module_factory(1, "./src/app.js"))
        assert module.label == "app.js"
