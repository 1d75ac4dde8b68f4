#!/usr/bin/env python3
"""
Tests for the pipe system connectivity graph.

Tests cover:
- Fitting classification from family/type names
- Id de-duplication and ordering
- Lookups and fitting-by-pipe index
- Snapshot validation
"""

import math

import pytest

from pypetree.system_graph import (
    FittingData,
    PipeSegment,
    PipeSystemGraph,
    classify_fitting,
)


# =============================================================================
# CLASSIFICATION TESTS
# =============================================================================


class TestClassifyFitting:
    """Test fitting kind classification."""

    @pytest.mark.parametrize(
        "family,type_name,expected",
        [
            ("Tee - Generic", "", "Tee"),
            ("Elbow - Threaded", "Standard", "Elbow"),
            ("Coupling - PVC", "", "Coupling"),
            ("Cap - Welded", "", "Cap"),
            ("Union", "Standard", "Generic"),
            ("Fitting", "Long Radius ELBOW", "Elbow"),
            ("", "", "Generic"),
        ],
    )
    def test_classification(self, family: str, type_name: str, expected: str):
        """Names are matched case-insensitively by keyword."""
        assert classify_fitting(family, type_name) == expected

    def test_tee_checked_before_elbow(self):
        """A name mentioning both is classified as a tee."""
        assert classify_fitting("Tee with elbow outlet") == "Tee"


# =============================================================================
# DATA CLASS TESTS
# =============================================================================


class TestDataClasses:
    """Test PipeSegment and FittingData construction."""

    def test_ids_are_deduplicated_in_order(self):
        """Lists from YAML become ordered tuples without duplicates."""
        pipe = PipeSegment(id=1, length=3.0, diameter=1.0, connected_fittings=[7, 5, 7, 9])
        assert pipe.connected_fittings == (7, 5, 9)

    def test_unknown_kind_rejected(self):
        """Kinds outside the known set raise ValueError."""
        with pytest.raises(ValueError, match="Unknown fitting kind"):
            FittingData(id="F", kind="Valve")

    def test_non_branching(self):
        """Only non-tee fittings with exactly two pipes are non-branching."""
        assert FittingData(id=1, kind="Elbow", connected_pipes=["a", "b"]).is_non_branching
        assert not FittingData(id=2, kind="Tee", connected_pipes=["a", "b"]).is_non_branching
        assert not FittingData(id=3, kind="Generic", connected_pipes=["a", "b", "c"]).is_non_branching
        assert not FittingData(id=4, kind="Cap", connected_pipes=["a"]).is_non_branching


# =============================================================================
# GRAPH TESTS
# =============================================================================


class TestPipeSystemGraph:
    """Test graph indexes and lookups."""

    def test_duplicate_pipe_id_rejected(self):
        """Two pipes with the same id are an error."""
        with pytest.raises(ValueError, match="Duplicate pipe id"):
            PipeSystemGraph(pipes=[PipeSegment(id="A"), PipeSegment(id="A")])

    def test_duplicate_fitting_id_rejected(self):
        """Two fittings with the same id are an error."""
        with pytest.raises(ValueError, match="Duplicate fitting id"):
            PipeSystemGraph(fittings=[FittingData(id=1), FittingData(id=1)])

    def test_missing_lookups_return_none(self, tee_graph):
        """Ids not in the snapshot resolve to None or are skipped."""
        assert tee_graph.get_pipe("nope") is None
        assert tee_graph.get_fitting("nope") is None
        assert [p.id for p in tee_graph.resolve_pipes(["A", "nope", "C"])] == ["A", "C"]
        assert tee_graph.resolve_fittings(["nope"]) == []

    def test_fittings_on_uses_table_order(self, make_graph):
        """Fittings on a pipe come back in fitting-table order."""
        graph = make_graph(
            pipes=[("P", 2.0, 1.0), ("Q", 2.0, 1.0), ("R", 2.0, 1.0)],
            fittings=[
                ("F2", "Elbow", ["P", "Q"]),
                ("F1", "Coupling", ["R", "P"]),
            ],
        )
        assert [f.id for f in graph.fittings_on("P")] == ["F2", "F1"]
        assert [f.id for f in graph.fittings_on("P", exclude="F2")] == ["F1"]
        assert graph.fittings_on("unknown") == []

    def test_counts(self, make_graph):
        """Tee and elbow lists and total length."""
        graph = make_graph(
            pipes=[("A", 2.0, 1.5), ("B", 2.0, 2.5), ("C", 1.0, 1.0)],
            fittings=[("T", "Tee", ["A", "B", "C"]), ("E", "Elbow", ["C"])],
        )
        assert [t.id for t in graph.tees] == ["T"]
        assert [e.id for e in graph.elbows] == ["E"]
        assert graph.total_length == 5.0


# =============================================================================
# VALIDATION TESTS
# =============================================================================


class TestValidate:
    """Test snapshot validation messages."""

    def test_consistent_graph_has_no_problems(self, tee_graph):
        """A symmetric, well-formed graph validates cleanly."""
        assert tee_graph.validate() == []

    def test_dangling_references(self):
        """References to ids that do not exist are reported."""
        graph = PipeSystemGraph(
            pipes=[PipeSegment(id="A", length=1.0, diameter=1.0, connected_fittings=["ghost"])],
            fittings=[FittingData(id="F", kind="Cap", connected_pipes=["missing"])],
        )
        problems = graph.validate()
        assert any("missing fitting 'ghost'" in p for p in problems)
        assert any("missing pipe 'missing'" in p for p in problems)

    def test_asymmetric_adjacency(self):
        """A connection listed on only one side is reported."""
        graph = PipeSystemGraph(
            pipes=[PipeSegment(id="A", length=1.0, diameter=1.0)],
            fittings=[FittingData(id="F", kind="Cap", connected_pipes=["A"], connection_count=1)],
        )
        problems = graph.validate()
        assert problems == ["Fitting 'F' lists pipe 'A' but the pipe does not list the fitting"]

    def test_malformed_numbers(self):
        """Negative, zero and NaN values are reported."""
        graph = PipeSystemGraph(
            pipes=[
                PipeSegment(id="neg", length=-1.0, diameter=1.0),
                PipeSegment(id="zero", length=1.0, diameter=0.0),
                PipeSegment(id="nan", length=math.nan, diameter=1.0),
                PipeSegment(id="ok", length=1.0, diameter=1.0),
            ]
        )
        assert [p.id for p in graph.malformed_pipes()] == ["neg", "zero", "nan"]
        assert len(graph.validate()) == 3

    def test_connection_count_too_small(self):
        """A connector count below the listed connections is reported."""
        graph = PipeSystemGraph(
            pipes=[
                PipeSegment(id="A", length=1.0, diameter=1.0, connected_fittings=["F"]),
                PipeSegment(id="B", length=1.0, diameter=1.0, connected_fittings=["F"]),
            ],
            fittings=[FittingData(id="F", kind="Coupling", connected_pipes=["A", "B"], connection_count=1)],
        )
        assert graph.validate() == ["Fitting 'F' has 1 connectors but lists 2 connections"]
