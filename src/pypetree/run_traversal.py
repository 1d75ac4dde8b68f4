#!/usr/bin/env python3
"""
Run Traversal: Root Selection, Chain Walking and Run Accumulation

These are the building blocks the schematic tree builder calls for every
node it draws:

- select_root(): picks the pipe the tree starts from
- walk_chain(): follows non-branching fittings from a pipe end to the next pipe
- accumulate_run(): merges same-diameter pipes joined by non-branching
  fittings into one run, counting elbows along the way

Conventions:
- A tee is a branch point and is never crossed or merged into a run
- A non-branching fitting is a non-tee fitting with exactly two pipes
- Ids that are not in the snapshot are skipped, never fatal
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .system_graph import (
    ElementId,
    EmptyGraphError,
    PipeSegment,
    PipeSystemGraph,
)

# =============================================================================
# CONSTANTS
# =============================================================================

DIAMETER_MATCH_TOLERANCE = 0.1  # inches; below this two pipes count as the same size


# =============================================================================
# RESULT TYPES
# =============================================================================


@dataclass(frozen=True)
class ChainStep:
    """
    Result of walking through a corridor of fittings.

    Attributes:
        next_pipe: Pipe reached on the far side, or None at a tee or dead end
        last_fitting_id: Last fitting traversed (the one the next pipe hangs off)
        elbow_count: Elbows moved onto after the starting fitting
    """

    next_pipe: PipeSegment | None
    last_fitting_id: ElementId
    elbow_count: int = 0


@dataclass
class AccumulatedRun:
    """
    A maximal same-diameter run rendered as one tree line.

    Attributes:
        total_length: Sum of the lengths of every pipe in the run
        diameter: Diameter of the first pipe of the run (inches)
        elbow_count: Elbows crossed while accumulating
        final_segment: Last pipe of the run, where branching is examined
        last_fitting_id: Fitting the final segment was entered from (None at the root)
        segment_ids: Ids of the pipes merged into this run, in walk order
    """

    total_length: float
    diameter: float
    elbow_count: int
    final_segment: PipeSegment
    last_fitting_id: ElementId | None
    segment_ids: list[ElementId] = field(default_factory=list)


# =============================================================================
# ROOT SELECTOR
# =============================================================================


def select_root(pipes: Iterable[PipeSegment]) -> PipeSegment:
    """
    Pick the pipe the schematic tree starts from.

    Largest diameter wins; ties prefer fewer fitting connections (those are
    more likely line ends), then the longer pipe. Python's sort is stable, so
    remaining ties keep snapshot order.

    Raises:
        EmptyGraphError: If there are no pipes
    """
    ordered = sorted(
        pipes,
        key=lambda p: (-p.diameter, len(p.connected_fittings), -p.length),
    )
    if not ordered:
        raise EmptyGraphError("No pipes to build a schematic from")
    return ordered[0]


# =============================================================================
# CHAIN WALKER
# =============================================================================


def walk_chain(
    graph: PipeSystemGraph,
    start_pipe_id: ElementId,
    start_fitting_id: ElementId,
) -> ChainStep:
    """
    Follow fittings from a pipe end until the next pipe, a tee or a dead end.

    Starting at start_fitting_id (reached from start_pipe_id), the walk
    returns the first pipe other than the starting pipe found on the current
    fitting. A fitting with no such pipe hands over to the first unvisited,
    non-tee fitting attached to it. Visited fittings are never entered again,
    so a loop of fittings cannot trap the walk.

    Args:
        graph: The connectivity snapshot
        start_pipe_id: Pipe the walk departs from (never returned)
        start_fitting_id: First fitting of the corridor

    Returns:
        ChainStep with the pipe reached (or None), the last fitting and the
        number of elbows moved onto past the starting fitting
    """
    current_id = start_fitting_id
    previous_id: ElementId | None = None
    visited: set[ElementId] = {start_fitting_id}
    elbows = 0

    while True:
        current = graph.get_fitting(current_id)
        if current is None or current.is_tee:
            return ChainStep(None, current_id, elbows)

        pipes = graph.resolve_pipes(pid for pid in current.connected_pipes if pid != start_pipe_id)
        if pipes:
            return ChainStep(pipes[0], current_id, elbows)

        candidates = [
            f
            for f in graph.resolve_fittings(
                fid for fid in current.connected_fittings if fid != previous_id and fid not in visited
            )
            if not f.is_tee
        ]
        if not candidates:
            # Dead end
            return ChainStep(None, current_id, elbows)

        next_fitting = candidates[0]
        if next_fitting.is_elbow:
            elbows += 1

        visited.add(next_fitting.id)
        previous_id = current_id
        current_id = next_fitting.id


# =============================================================================
# SEGMENT ACCUMULATOR
# =============================================================================


def accumulate_run(
    graph: PipeSystemGraph,
    start: PipeSegment,
    exclude_fitting_id: ElementId | None,
    drawn: set[ElementId],
    diameter_tolerance: float = DIAMETER_MATCH_TOLERANCE,
    debug: bool = False,
) -> AccumulatedRun:
    """
    Merge a straight run of same-diameter pipes into one run.

    From the current pipe, every non-branching fitting other than the one we
    entered through is tried in turn. The chain walker finds the pipe on the
    far side; an undrawn pipe within diameter_tolerance of the run diameter
    is absorbed (its length added, marked drawn) and the search restarts from
    it. Elbows are counted for every fitting tried, as well as any elbows
    the walker crosses.

    The caller marks the start pipe drawn; pipes absorbed here are added to
    the drawn set.

    Args:
        graph: The connectivity snapshot
        start: First pipe of the run
        exclude_fitting_id: Fitting the start pipe was entered from, if any
        drawn: Drawn-pipe set owned by the tree builder (mutated)
        diameter_tolerance: Largest diameter difference still treated as the same size
        debug: Print each absorbed pipe

    Returns:
        AccumulatedRun describing the merged run
    """
    total_length = start.length
    diameter = start.diameter
    elbows = 0
    current = start
    last_fitting_id = exclude_fitting_id
    segment_ids = [start.id]

    accumulating = True
    while accumulating:
        accumulating = False

        candidates = [f for f in graph.fittings_on(current.id, exclude=last_fitting_id) if f.is_non_branching]

        for fitting in candidates:
            if fitting.is_elbow:
                elbows += 1

            step = walk_chain(graph, current.id, fitting.id)
            elbows += step.elbow_count

            next_pipe = step.next_pipe
            if next_pipe is None or next_pipe.id in drawn:
                continue
            # Written as "not <" so a NaN diameter never matches
            if not abs(next_pipe.diameter - diameter) < diameter_tolerance:
                continue

            total_length += next_pipe.length
            drawn.add(next_pipe.id)
            segment_ids.append(next_pipe.id)
            if debug:
                print(f"  Absorbed pipe {next_pipe.id!r} via fitting {step.last_fitting_id!r} (run length {total_length:.1f})")

            current = next_pipe
            last_fitting_id = step.last_fitting_id
            accumulating = True
            break

    return AccumulatedRun(
        total_length=total_length,
        diameter=diameter,
        elbow_count=elbows,
        final_segment=current,
        last_fitting_id=last_fitting_id,
        segment_ids=segment_ids,
    )
