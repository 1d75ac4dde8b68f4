#!/usr/bin/env python3
"""
Schematic Tree Builder

Turns a pipe system connectivity graph into an indented text tree:

    • 2" ø  |  10.0 ft
        ├── 1" ø  |  8.0 ft  (1 elbow)  ►
        └── 2" ø  |  5.0 ft  ►

Each line is one accumulated run (same-diameter pipes joined by elbows,
couplings and other non-branching fittings). Tees start new branches: the
largest remaining pipe on a tee is drawn last as the main continuation and
the others are drawn above it as side branches. Other fittings that were
not absorbed into a run (reducers, multi-way fittings) also branch.

The builder owns a drawn-pipe set for the duration of one build() call, so
each pipe appears in the tree at most once and the pipes that were never
reached can be listed afterwards by report_orphans().

The traversal is written as nested generator frames driven from an explicit
stack instead of Python recursion, so deep systems do not hit the
interpreter's recursion limit. The line order is the same as a depth-first
recursive walk.
"""

from __future__ import annotations

from collections.abc import Collection, Iterator
from dataclasses import dataclass, field

from .diameter_format import format_diameter_fraction
from .run_traversal import (
    DIAMETER_MATCH_TOLERANCE,
    AccumulatedRun,
    accumulate_run,
    select_root,
)
from .system_graph import ElementId, FittingData, PipeSegment, PipeSystemGraph

# =============================================================================
# GLYPHS
# =============================================================================

ROOT_CONNECTOR = "• "
BRANCH_CONNECTOR = "├── "
LAST_BRANCH_CONNECTOR = "└── "
ORPHAN_BULLET = "● "

LAST_INDENT = "    "
OPEN_INDENT = "│   "

ENDPOINT_MARKER = "  ►"
DIAMETER_SYMBOL = "ø"


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class RenderedRun:
    """
    One line of the schematic tree.

    Attributes:
        line: The rendered text line
        segment_ids: Pipes covered by this line, in walk order
        total_length: Accumulated run length
        diameter: Run diameter in inches
        elbow_count: Elbows counted along the run
        is_endpoint: True when nothing continues past the run
        depth: Nesting level (0 for the root line)
    """

    line: str
    segment_ids: tuple[ElementId, ...]
    total_length: float
    diameter: float
    elbow_count: int
    is_endpoint: bool
    depth: int


@dataclass
class SchematicTree:
    """
    Result of SchematicTreeBuilder.build().

    Attributes:
        root_id: Id of the pipe the tree starts from
        runs: Rendered runs in output order
        drawn_ids: Every pipe that appears in the tree
    """

    root_id: ElementId
    runs: list[RenderedRun] = field(default_factory=list)
    drawn_ids: frozenset[ElementId] = frozenset()

    @property
    def lines(self) -> list[str]:
        return [run.line for run in self.runs]

    @property
    def elbow_count(self) -> int:
        """Elbows counted across all rendered runs."""
        return sum(run.elbow_count for run in self.runs)


@dataclass(frozen=True)
class _RenderCall:
    """Arguments of one render step (one pending tree line)."""

    pipe: PipeSegment
    indent: str
    is_last: bool
    came_from_fitting_id: ElementId | None
    is_root: bool = False


# =============================================================================
# FORMATTING HELPERS
# =============================================================================


def format_run_line(
    run: AccumulatedRun,
    indent: str,
    is_last: bool,
    is_root: bool,
    is_endpoint: bool,
    length_unit: str = "ft",
) -> str:
    """Format the text line for an accumulated run."""
    if is_root:
        connector = ROOT_CONNECTOR
    else:
        connector = LAST_BRANCH_CONNECTOR if is_last else BRANCH_CONNECTOR

    diameter_str = format_diameter_fraction(run.diameter)

    elbow_info = ""
    if run.elbow_count > 0:
        plural = "s" if run.elbow_count > 1 else ""
        elbow_info = f"  ({run.elbow_count} elbow{plural})"

    endpoint = ENDPOINT_MARKER if is_endpoint else ""

    return (
        f"{indent}{connector}{diameter_str} {DIAMETER_SYMBOL}  |  "
        f"{run.total_length:.1f} {length_unit}{elbow_info}{endpoint}"
    )


def _by_size(pipes: list[PipeSegment]) -> list[PipeSegment]:
    """Sort pipes by descending diameter, then descending length."""
    return sorted(pipes, key=lambda p: (-p.diameter, -p.length))


# =============================================================================
# TREE BUILDER
# =============================================================================


class SchematicTreeBuilder:
    """
    Build the schematic tree for a pipe system graph.

    Usage:
        builder = SchematicTreeBuilder(graph, length_unit="ft")
        tree = builder.build()
        print("\\n".join(tree.lines))
        print("\\n".join(report_orphans(graph, tree.drawn_ids)))

    Attributes:
        graph: The connectivity snapshot (read-only)
        length_unit: Unit label printed after lengths
        diameter_tolerance: Largest diameter difference merged into one run
        strict_sibling_glyphs: Give branches off non-tee fittings true
            last-sibling glyphs instead of drawing each one as the last
        debug: Print traversal steps
    """

    def __init__(
        self,
        graph: PipeSystemGraph,
        length_unit: str = "ft",
        diameter_tolerance: float = DIAMETER_MATCH_TOLERANCE,
        strict_sibling_glyphs: bool = False,
        debug: bool = False,
    ):
        self.graph = graph
        self.length_unit = length_unit
        self.diameter_tolerance = diameter_tolerance
        self.strict_sibling_glyphs = strict_sibling_glyphs
        self.debug = debug

    def build(self) -> SchematicTree:
        """
        Render the tree from the selected root pipe.

        Raises:
            EmptyGraphError: If the graph has no pipes
        """
        root = select_root(self.graph.pipes)
        if self.debug:
            print(f"Root pipe: {root.id!r} ({format_diameter_fraction(root.diameter)}, {root.length:.1f} {self.length_unit})")

        # Fresh per build so repeated builds never share state
        drawn: set[ElementId] = set()
        runs: list[RenderedRun] = []

        root_call = _RenderCall(pipe=root, indent="", is_last=True, came_from_fitting_id=None, is_root=True)
        stack: list[Iterator[_RenderCall]] = [self._render(root_call, 0, drawn, runs)]

        while stack:
            try:
                child = next(stack[-1])
            except StopIteration:
                stack.pop()
                continue
            stack.append(self._render(child, len(stack), drawn, runs))

        return SchematicTree(root_id=root.id, runs=runs, drawn_ids=frozenset(drawn))

    # -------------------------------------------------------------------------
    # RENDER STEP
    # -------------------------------------------------------------------------

    def _render(
        self,
        call: _RenderCall,
        depth: int,
        drawn: set[ElementId],
        runs: list[RenderedRun],
    ) -> Iterator[_RenderCall]:
        """
        Draw one run and yield the child runs to draw below it, in order.

        The driver in build() fully renders each yielded child (and its
        subtree) before resuming this frame, so every drawn-set check below
        sees the same state a recursive implementation would.
        """
        pipe = call.pipe
        if pipe.id in drawn:
            return

        drawn.add(pipe.id)
        if self.debug:
            print(f"Render pipe {pipe.id!r} entered from fitting {call.came_from_fitting_id!r}")

        run = accumulate_run(
            self.graph,
            pipe,
            call.came_from_fitting_id,
            drawn,
            diameter_tolerance=self.diameter_tolerance,
            debug=self.debug,
        )
        final = run.final_segment

        final_fittings = self.graph.fittings_on(final.id, exclude=run.last_fitting_id)
        is_endpoint = not final_fittings

        line = format_run_line(run, call.indent, call.is_last, call.is_root, is_endpoint, self.length_unit)
        runs.append(
            RenderedRun(
                line=line,
                segment_ids=tuple(run.segment_ids),
                total_length=run.total_length,
                diameter=run.diameter,
                elbow_count=run.elbow_count,
                is_endpoint=is_endpoint,
                depth=depth,
            )
        )

        if is_endpoint:
            return

        child_indent = call.indent + (LAST_INDENT if call.is_last else OPEN_INDENT)

        tees = [f for f in final_fittings if f.is_tee]
        others = [f for f in final_fittings if not f.is_tee]

        # Tees first: side branches, then the main continuation
        for tee in tees:
            branch_pipes = self._undrawn_pipes(tee, final.id, drawn)
            if not branch_pipes:
                continue

            main_continuation = branch_pipes[0]
            side_branches = branch_pipes[1:]

            for i, side in enumerate(side_branches):
                is_last_side = i == len(side_branches) - 1 and main_continuation.id in drawn
                yield _RenderCall(side, child_indent, is_last_side, tee.id)

            if main_continuation.id not in drawn:
                yield _RenderCall(main_continuation, child_indent, True, tee.id)

        if self.strict_sibling_glyphs:
            yield from self._plan_other_branches(others, final.id, child_indent, drawn)
            return

        # Reducers and other fittings the run did not absorb
        for fitting in others:
            for next_pipe in self._undrawn_pipes(fitting, final.id, drawn):
                yield _RenderCall(next_pipe, child_indent, True, fitting.id)

    def _plan_other_branches(
        self,
        others: list[FittingData],
        final_id: ElementId,
        indent: str,
        drawn: Collection[ElementId],
    ) -> Iterator[_RenderCall]:
        """Yield non-tee branches with only the final one drawn as the last sibling."""
        planned = [
            (fitting, next_pipe)
            for fitting in others
            for next_pipe in self._undrawn_pipes(fitting, final_id, drawn)
        ]
        for i, (fitting, next_pipe) in enumerate(planned):
            yield _RenderCall(next_pipe, indent, i == len(planned) - 1, fitting.id)

    def _undrawn_pipes(
        self,
        fitting: FittingData,
        exclude_pipe_id: ElementId,
        drawn: Collection[ElementId],
    ) -> list[PipeSegment]:
        """Pipes on a fitting other than exclude_pipe_id that are not drawn yet, largest first."""
        pipes = self.graph.resolve_pipes(pid for pid in fitting.connected_pipes if pid != exclude_pipe_id)
        return _by_size([p for p in pipes if p.id not in drawn])


# =============================================================================
# ORPHAN REPORTER
# =============================================================================


def report_orphans(
    graph: PipeSystemGraph,
    drawn_ids: Collection[ElementId],
    length_unit: str = "ft",
) -> list[str]:
    """
    List pipes the tree never reached, followed by a drawn-count footer.

    Orphans are sorted by descending diameter, then descending length, and
    shown flat (no tree structure) with the number of fittings they touch.
    """
    lines: list[str] = []

    remaining = _by_size([p for p in graph.pipes if p.id not in drawn_ids])
    if remaining:
        lines.append("")
        lines.append("=== Additional Pipes (not connected to main tree) ===")
        for pipe in remaining:
            lines.append(
                f"{ORPHAN_BULLET}{format_diameter_fraction(pipe.diameter)} {DIAMETER_SYMBOL}  |  "
                f"{pipe.length:.1f} {length_unit}"
            )
            if pipe.connected_fittings:
                lines.append(f"  Connected to {len(pipe.connected_fittings)} fitting(s)")

    drawn_count = sum(1 for p in graph.pipes if p.id in drawn_ids)
    lines.append("")
    lines.append(f"Total pipes drawn in tree: {drawn_count}/{len(graph.pipes)}")
    return lines
