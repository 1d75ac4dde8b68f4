"""
Shared fixtures for pypetree tests.

make_graph builds a PipeSystemGraph from a compact description and fills in
each pipe's connected_fittings from the fittings that list it, so test
graphs are symmetric unless a test deliberately breaks them.
"""

import pytest

from pypetree.system_graph import FittingData, PipeSegment, PipeSystemGraph


def build_graph(pipes, fittings=()):
    """
    Build a symmetric graph.

    Args:
        pipes: (id, diameter, length) tuples, in table order
        fittings: (id, kind, pipe_ids) or (id, kind, pipe_ids, fitting_ids) tuples
    """
    fitting_records = []
    fittings_by_pipe: dict = {}
    for entry in fittings:
        fitting_id, kind, pipe_ids = entry[0], entry[1], entry[2]
        fitting_ids = entry[3] if len(entry) > 3 else []
        fitting_records.append(
            FittingData(
                id=fitting_id,
                kind=kind,
                connected_pipes=pipe_ids,
                connected_fittings=fitting_ids,
                connection_count=len(pipe_ids) + len(fitting_ids),
            )
        )
        for pipe_id in pipe_ids:
            fittings_by_pipe.setdefault(pipe_id, []).append(fitting_id)

    pipe_records = [
        PipeSegment(
            id=pipe_id,
            diameter=diameter,
            length=length,
            connected_fittings=fittings_by_pipe.get(pipe_id, []),
        )
        for pipe_id, diameter, length in pipes
    ]
    return PipeSystemGraph(pipes=pipe_records, fittings=fitting_records)


@pytest.fixture
def make_graph():
    """Factory fixture returning build_graph."""
    return build_graph


@pytest.fixture
def tee_graph():
    """A (2", 10) and B (2", 5) and C (1", 8) joined by one tee."""
    return build_graph(
        pipes=[("A", 2.0, 10.0), ("B", 2.0, 5.0), ("C", 1.0, 8.0)],
        fittings=[("T", "Tee", ["A", "B", "C"])],
    )


@pytest.fixture
def elbow_graph():
    """X (2", 4) and Y (2", 3) joined by a single elbow."""
    return build_graph(
        pipes=[("X", 2.0, 4.0), ("Y", 2.0, 3.0)],
        fittings=[("E", "Elbow", ["X", "Y"])],
    )
