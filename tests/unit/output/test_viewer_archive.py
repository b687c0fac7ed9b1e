"""Unit tests for the interactive viewer and output archival."""

import base64

from statsgraph.output.archive import archive_directory, archive_index_html, archive_outputs
from statsgraph.output.viewer import interactive_html, svg_data_uri

SVG = '<svg xmlns="http://www.w3.org/2000/svg"><g class="node"><title>0</title></g></svg>'


class TestViewer:
    def test_svg_embedded_as_data_uri(self):
        page = interactive_html(SVG)
        encoded = base64.b64encode(SVG.encode("utf-8")).decode("ascii")
        assert page.startswith("<!DOCTYPE html>")
        assert f"data:image/svg+xml;base64,{encoded}" in page
        assert "<svg" not in page

    def test_data_uri_round_trip(self):
        uri = svg_data_uri(SVG)
        assert base64.b64decode(uri.split(",", 1)[1]).decode("utf-8") == SVG

    def test_title_escaped(self):
        assert "<title>a &lt;b&gt;</title>" in interactive_html(SVG, title="a <b>")


class TestArchive:
    def test_copies_existing_files(self, tmp_path):
        dot = tmp_path / "graph.dot"
        dot.write_text("digraph G {}")
        svg = tmp_path / "graph.svg"
        svg.write_text(SVG)

        archived = archive_outputs([dot, svg, tmp_path / "graph.pdf"], tmp_path, "abc123")

        target = tmp_path / "archive" / "abc123"
        assert archived == [target / "graph.dot", target / "graph.svg"]
        assert (target / "graph.svg").read_text() == SVG
        assert not (target / "graph.pdf").exists()

    def test_missing_hash(self, tmp_path):
        assert archive_directory(tmp_path, "") == tmp_path / "archive" / "unknown"

    def test_stores_input_report(self, tmp_path):
        report = tmp_path / "my-build-stats.json"
        report.write_text('{"hash": "abc123"}')

        archived = archive_outputs([], tmp_path, "abc123", stats_file=report)

        stored = tmp_path / "archive" / "abc123" / "stats.json"
        assert archived == [stored]
        assert stored.read_text() == '{"hash": "abc123"}'

    def test_index_lists_every_build(self, tmp_path):
        svg = tmp_path / "graph.svg"
        svg.write_text(SVG)
        archive_outputs([svg], tmp_path, "first")
        archive_outputs([svg], tmp_path, "second")

        index = (tmp_path / "archive" / "index.html").read_text()
        assert index.startswith("<!DOCTYPE html>")
        assert '<a href="first/graph.svg">graph.svg</a>' in index
        assert '<a href="second/graph.svg">graph.svg</a>' in index
        assert "first/interactive.html" not in index

    def test_index_escapes_names(self, tmp_path):
        (tmp_path / "a<b").mkdir()
        assert "a&lt;b" in archive_index_html(tmp_path)
