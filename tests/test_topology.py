"""
Relationship Graph Tests
========================

Tests for the symbol relationship graph and its renderers.

VERIFICATION:
=============
These tests verify that the graph:
1. Registers symbols idempotently
2. Never deduplicates edges unless configured to
3. Labels edges with strictly increasing ids
4. Exports node/edge lists without doing any layout
"""

from fractal_journal.analysis.topology import GraphConfig, RelationshipGraph
from fractal_journal.analysis.visualizer import render_dot, render_mermaid, save_graph


class TestRelationshipGraph:

    def test_add_symbol_is_idempotent(self):
        graph = RelationshipGraph()
        graph.add_symbol("🧱")
        graph.add_symbol("🧱")
        assert graph.export().nodes == ("🧱",)

    def test_relationship_adds_missing_nodes(self):
        graph = RelationshipGraph()
        graph.add_relationship("A", "B")
        assert set(graph.export().nodes) == {"A", "B"}

    def test_repeated_pairs_create_new_edges(self):
        graph = RelationshipGraph()
        first = graph.add_relationship("A", "B")
        second = graph.add_relationship("A", "B")

        assert first.edge_id == 0
        assert second.edge_id == 1
        assert graph.edge_count == 2
        assert [e.label for e in graph.export().edges] == ["e0", "e1"]

    def test_edge_ids_strictly_increase_in_export(self):
        graph = RelationshipGraph()
        for source, target in [("C", "A"), ("A", "B"), ("B", "C"), ("A", "B")]:
            graph.add_relationship(source, target)

        ids = [e.edge_id for e in graph.export().edges]
        assert ids == [0, 1, 2, 3]
        assert [(e.source, e.target) for e in graph.export().edges] == [
            ("C", "A"), ("A", "B"), ("B", "C"), ("A", "B")
        ]

    def test_deduplicate_option(self):
        graph = RelationshipGraph(GraphConfig(deduplicate_edges=True))
        assert graph.add_relationship("A", "B") is not None
        assert graph.add_relationship("A", "B") is None
        assert graph.add_relationship("B", "A").edge_id == 1
        assert graph.edge_count == 2

    def test_metrics(self):
        graph = RelationshipGraph()
        graph.add_relationship("A", "B")
        graph.add_relationship("X", "Y")

        metrics = graph.compute_metrics()
        assert metrics.node_count == 4
        assert metrics.edge_count == 2
        assert metrics.weak_components_count == 2

    def test_empty_metrics(self):
        metrics = RelationshipGraph().compute_metrics()
        assert metrics.node_count == 0
        assert metrics.density == 0.0


class TestRenderers:

    def build_export(self):
        graph = RelationshipGraph()
        graph.add_symbol("✶ Collapse Star")
        graph.add_symbol("🌀")
        graph.add_relationship("🌀", "✶ Collapse Star")
        return graph.export()

    def test_mermaid(self):
        text = render_mermaid(self.build_export())
        assert text.startswith("graph TD")
        assert 'n0["✶ Collapse Star"]' in text
        assert 'n1["🌀"]' in text
        assert "n1 -->|e0| n0" in text

    def test_dot(self):
        text = render_dot(self.build_export())
        assert text.startswith("digraph FractalNLPGraph {")
        assert 'n1 -> n0 [label="e0"];' in text
        assert text.rstrip().endswith("}")

    def test_save_chooses_format_by_suffix(self, tmp_path):
        export = self.build_export()
        dot_path = save_graph(export, tmp_path / "graph.dot")
        mmd_path = save_graph(export, tmp_path / "graph.mmd")

        assert dot_path.read_text(encoding="utf-8").startswith("digraph")
        assert mmd_path.read_text(encoding="utf-8").startswith("graph TD")
