#!/usr/bin/env python3
"""
Tests for the full schematic report.

Tests cover:
- Block order and inventory content
- Summary totals
- Settings (inventory toggle, unit label, strict mode)
"""

import math

import pytest

from pypetree.graph_import import SchematicSettings
from pypetree.schematic_report import render_schematic
from pypetree.system_graph import EmptyGraphError, InvalidGraphError, PipeSystemGraph


class TestReportLayout:
    """Test the order and content of report blocks."""

    def test_full_report(self, tee_graph):
        """Inventory, tree, footer and summary appear in order."""
        report = render_schematic(tee_graph)
        assert list(report.lines) == [
            "=== DEBUG INFORMATION ===",
            "Total Pipes: 3",
            "Total T-Fittings: 1",
            "",
            "T-Fittings and their connected pipes:",
            "  T-Fitting 1: connects 3 pipes, 0 fittings",
            '    - Pipe: 2" ø  |  10.0 ft',
            '    - Pipe: 2" ø  |  5.0 ft',
            '    - Pipe: 1" ø  |  8.0 ft',
            "",
            "All Pipes:",
            '  2" ø | 10.0 ft - Connects to 1 fittings, 0 pipes',
            '  2" ø | 5.0 ft - Connects to 1 fittings, 0 pipes',
            '  1" ø | 8.0 ft - Connects to 1 fittings, 0 pipes',
            "",
            "All Fittings:",
            "  Tee: connects 3 pipes, 0 fittings",
            "",
            "=== PIPE SYSTEM TREE ===",
            "",
            '• 2" ø  |  10.0 ft',
            '    ├── 1" ø  |  8.0 ft  ►',
            '    └── 2" ø  |  5.0 ft  ►',
            "",
            "Total pipes drawn in tree: 3/3",
            "Total Length: 23.00 ft  |  Pipes: 3  |  T-Fittings: 1  |  Elbows: 0",
        ]

    def test_fittings_grouped_by_kind(self, make_graph):
        """The fitting inventory is sorted by kind, keeping table order within a kind."""
        graph = make_graph(
            pipes=[("A", 2.0, 1.0), ("B", 2.0, 1.0), ("C", 2.0, 1.0)],
            fittings=[
                ("E1", "Elbow", ["A", "B"]),
                ("K", "Cap", ["C"]),
                ("E2", "Elbow", ["B", "C"]),
            ],
        )
        report = render_schematic(graph)
        start = report.lines.index("All Fittings:")
        assert list(report.lines[start + 1:start + 4]) == [
            "  Cap: connects 1 pipes, 0 fittings",
            "  Elbow: connects 2 pipes, 0 fittings",
            "  Elbow: connects 2 pipes, 0 fittings",
        ]

    def test_without_inventory(self, elbow_graph):
        """Inventory blocks can be switched off."""
        report = render_schematic(elbow_graph, SchematicSettings(include_inventory=False))
        assert list(report.lines) == [
            "=== PIPE SYSTEM TREE ===",
            "",
            '• 2" ø  |  7.0 ft  (1 elbow)  ►',
            "",
            "Total pipes drawn in tree: 2/2",
            "Total Length: 7.00 ft  |  Pipes: 2  |  T-Fittings: 0  |  Elbows: 1",
        ]
        assert report.text.endswith("Elbows: 1\n")
        assert report.summary_line.startswith("Total Length: 7.00 ft")

    def test_unit_label(self, elbow_graph):
        """The unit label flows through tree, footer and summary."""
        report = render_schematic(elbow_graph, SchematicSettings(length_unit="m", include_inventory=False))
        assert report.lines[2] == '• 2" ø  |  7.0 m  (1 elbow)  ►'
        assert report.summary_line == "Total Length: 7.00 m  |  Pipes: 2  |  T-Fittings: 0  |  Elbows: 1"


class TestReportTotals:
    """Test the totals carried on the report."""

    def test_totals(self, tee_graph):
        """Counts and total length match the snapshot."""
        report = render_schematic(tee_graph)
        assert report.total_length == 23.0
        assert report.pipe_count == 3
        assert report.tee_count == 1
        assert report.elbow_count == 0
        assert report.tree.root_id == "A"

    def test_deterministic_text(self, tee_graph):
        """Rendering twice gives byte-identical text."""
        assert render_schematic(tee_graph).text == render_schematic(tee_graph).text


class TestReportErrors:
    """Test error handling."""

    def test_empty_graph(self):
        """No pipes raises EmptyGraphError."""
        with pytest.raises(EmptyGraphError):
            render_schematic(PipeSystemGraph())

    def test_strict_rejects_malformed(self, make_graph):
        """Strict mode refuses NaN or non-positive values before traversal."""
        graph = make_graph(pipes=[("A", 2.0, 10.0), ("B", math.nan, 1.0)])
        with pytest.raises(InvalidGraphError, match="'B'"):
            render_schematic(graph, SchematicSettings(strict=True))

    def test_lenient_accepts_malformed(self, make_graph):
        """Without strict mode malformed values are rendered as they are."""
        graph = make_graph(pipes=[("A", 2.0, 10.0), ("B", -1.0, 1.0)])
        report = render_schematic(graph, SchematicSettings(include_inventory=False))
        assert '● -1" ø  |  1.0 ft' in report.lines
