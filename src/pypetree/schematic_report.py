#!/usr/bin/env python3
"""
Schematic Report

Assembles the full text handed to a display: an inventory of the snapshot,
the schematic tree, the pipes the tree could not reach, and a summary line.

Layout:
    === DEBUG INFORMATION ===        (inventory, optional)
    T-Fittings and their connected pipes:
    All Pipes:
    All Fittings:
    === PIPE SYSTEM TREE ===
    <tree lines>
    === Additional Pipes (not connected to main tree) ===
    Total pipes drawn in tree: n/N
    Total Length: ...  |  Pipes: ...  |  T-Fittings: ...  |  Elbows: ...
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .diameter_format import format_diameter_fraction
from .graph_import.config_schema import SchematicSettings
from .system_graph import InvalidGraphError, PipeSystemGraph
from .tree_builder import DIAMETER_SYMBOL, SchematicTree, SchematicTreeBuilder, report_orphans


@dataclass
class SchematicReport:
    """
    Rendered schematic text and the tree it came from.

    Attributes:
        lines: Output lines in display order
        tree: The schematic tree (runs and drawn pipe ids)
        total_length: Sum of all pipe lengths in the snapshot
        pipe_count: Number of pipes in the snapshot
        tee_count: Number of tee fittings
        elbow_count: Number of elbow fittings
        settings: Settings the report was rendered with
    """

    lines: tuple[str, ...]
    tree: SchematicTree
    total_length: float = 0.0
    pipe_count: int = 0
    tee_count: int = 0
    elbow_count: int = 0
    settings: SchematicSettings = field(default_factory=SchematicSettings)

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + "\n"

    @property
    def summary_line(self) -> str:
        return self.lines[-1]


def inventory_lines(graph: PipeSystemGraph, length_unit: str = "ft") -> list[str]:
    """Flat listing of tees, pipes and fittings ahead of the tree."""
    lines = [
        "=== DEBUG INFORMATION ===",
        f"Total Pipes: {len(graph.pipes)}",
        f"Total T-Fittings: {len(graph.tees)}",
        "",
        "T-Fittings and their connected pipes:",
    ]

    for i, tee in enumerate(graph.tees, start=1):
        lines.append(
            f"  T-Fitting {i}: connects {len(tee.connected_pipes)} pipes, "
            f"{len(tee.connected_fittings)} fittings"
        )
        for pipe in graph.resolve_pipes(tee.connected_pipes):
            lines.append(
                f"    - Pipe: {format_diameter_fraction(pipe.diameter)} {DIAMETER_SYMBOL}  |  "
                f"{pipe.length:.1f} {length_unit}"
            )
        for fitting in graph.resolve_fittings(tee.connected_fittings):
            lines.append(f"    - Fitting: {fitting.kind}")
    lines.append("")

    lines.append("All Pipes:")
    for pipe in sorted(graph.pipes, key=lambda p: -p.diameter):
        lines.append(
            f"  {format_diameter_fraction(pipe.diameter)} {DIAMETER_SYMBOL} | {pipe.length:.1f} {length_unit} - "
            f"Connects to {len(pipe.connected_fittings)} fittings, {len(pipe.connected_pipes)} pipes"
        )
    lines.append("")

    lines.append("All Fittings:")
    for fitting in sorted(graph.fittings, key=lambda f: f.kind):
        lines.append(
            f"  {fitting.kind}: connects {len(fitting.connected_pipes)} pipes, "
            f"{len(fitting.connected_fittings)} fittings"
        )
    lines.append("")
    return lines


def summary_line(graph: PipeSystemGraph, length_unit: str = "ft") -> str:
    """One-line totals for the whole snapshot."""
    return (
        f"Total Length: {graph.total_length:.2f} {length_unit}  |  "
        f"Pipes: {len(graph.pipes)}  |  "
        f"T-Fittings: {len(graph.tees)}  |  "
        f"Elbows: {len(graph.elbows)}"
    )


def render_schematic(
    graph: PipeSystemGraph,
    settings: SchematicSettings | None = None,
) -> SchematicReport:
    """
    Render the complete schematic report for a snapshot.

    Args:
        graph: The connectivity snapshot
        settings: Output options (defaults to SchematicSettings())

    Returns:
        SchematicReport with the output lines and the underlying tree

    Raises:
        EmptyGraphError: If the snapshot has no pipes
        InvalidGraphError: In strict mode, if any pipe has a malformed length or diameter
    """
    if settings is None:
        settings = SchematicSettings()

    if settings.strict:
        malformed = graph.malformed_pipes()
        if malformed:
            ids = ", ".join(repr(p.id) for p in malformed)
            raise InvalidGraphError(f"Pipes with malformed length or diameter: {ids}")

    unit = settings.length_unit
    lines: list[str] = []

    if settings.include_inventory:
        lines.extend(inventory_lines(graph, unit))

    builder = SchematicTreeBuilder(
        graph,
        length_unit=unit,
        diameter_tolerance=settings.diameter_tolerance,
        strict_sibling_glyphs=settings.strict_sibling_glyphs,
        debug=settings.debug,
    )
    tree = builder.build()

    lines.append("=== PIPE SYSTEM TREE ===")
    lines.append("")
    lines.extend(tree.lines)
    lines.extend(report_orphans(graph, tree.drawn_ids, unit))
    lines.append(summary_line(graph, unit))

    return SchematicReport(
        lines=tuple(lines),
        tree=tree,
        total_length=graph.total_length,
        pipe_count=len(graph.pipes),
        tee_count=len(graph.tees),
        elbow_count=len(graph.elbows),
        settings=settings,
    )
