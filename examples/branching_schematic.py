#!/usr/bin/env python3
"""
Example: Schematic Tree for a Branching Pipe System

This example builds a small system in memory (a 2" header with elbows,
two tees and a reducing branch), renders its schematic tree, and saves the
snapshot as YAML so it can be rendered again with the CLI:

    pypetree render examples/output/branching_system.yaml
"""

from pathlib import Path

from pypetree import (
    FittingData,
    PipeSegment,
    PipeSystemGraph,
    render_schematic,
    summarize_pipe_lengths,
)
from pypetree.graph_import import PipeSystemConfig, SchematicSettings

# Output directory for snapshot files
OUTPUT_DIR = Path(__file__).parent / "output"
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)


def branching_system() -> PipeSystemGraph:
    """Header with two tees, elbows on the run and a 3/4" drop."""
    pipes = [
        PipeSegment(id=101, length=12.0, diameter=2.0, connected_fittings=[201]),
        PipeSegment(id=102, length=6.5, diameter=2.0, connected_fittings=[201, 202]),
        PipeSegment(id=103, length=4.0, diameter=2.0, connected_fittings=[202, 203]),
        PipeSegment(id=104, length=9.0, diameter=2.0, connected_fittings=[203, 204]),
        PipeSegment(id=105, length=3.0, diameter=2.0, connected_fittings=[204]),
        PipeSegment(id=106, length=5.0, diameter=1.0, connected_fittings=[203, 205]),
        PipeSegment(id=107, length=2.5, diameter=0.75, connected_fittings=[205]),
        # Not connected to anything
        PipeSegment(id=108, length=1.5, diameter=0.5),
    ]
    fittings = [
        FittingData(id=201, kind="Elbow", name="Elbow - Threaded", connected_pipes=[101, 102]),
        FittingData(id=202, kind="Elbow", name="Elbow - Threaded", connected_pipes=[102, 103]),
        FittingData(id=203, kind="Tee", name="Tee - Threaded", connected_pipes=[103, 104, 106]),
        FittingData(id=204, kind="Tee", name="Tee - Threaded", connected_pipes=[104, 105],
                    connection_count=3),
        FittingData(id=205, kind="Coupling", name="Reducing Coupling", connected_pipes=[106, 107]),
    ]
    return PipeSystemGraph(pipes=pipes, fittings=fittings)


def main():
    graph = branching_system()

    problems = graph.validate()
    if problems:
        print("Snapshot problems:")
        for problem in problems:
            print(f"  - {problem}")

    report = render_schematic(graph, SchematicSettings(include_inventory=False))
    print(report.text)

    summary = summarize_pipe_lengths(graph)
    print("\n".join(summary.format_lines()))

    # Save the snapshot for the CLI
    snapshot_path = OUTPUT_DIR / "branching_system.yaml"
    PipeSystemConfig.from_graph(graph).to_yaml(snapshot_path)
    print(f"\nSnapshot saved to: {snapshot_path}")


if __name__ == "__main__":
    main()
