"""
pypetree - schematic trees for pipe systems.

Rebuilds a readable, indented schematic from the unordered connectivity of
pipes and fittings: straight runs are merged with their elbows, tees become
branches, and unreachable pipes are listed separately.
"""

from .diameter_format import format_diameter_fraction
from .length_report import PipeLengthSummary, summarize_pipe_lengths
from .run_traversal import (
    AccumulatedRun,
    ChainStep,
    accumulate_run,
    select_root,
    walk_chain,
)
from .schematic_report import SchematicReport, render_schematic
from .system_graph import (
    EmptyGraphError,
    FittingData,
    InvalidGraphError,
    PipeSegment,
    PipeSystemGraph,
    classify_fitting,
)
from .tree_builder import RenderedRun, SchematicTree, SchematicTreeBuilder, report_orphans

__all__ = [
    # Graph model
    'PipeSystemGraph',
    'PipeSegment',
    'FittingData',
    'classify_fitting',
    'EmptyGraphError',
    'InvalidGraphError',
    # Traversal
    'select_root',
    'walk_chain',
    'accumulate_run',
    'ChainStep',
    'AccumulatedRun',
    # Tree and reports
    'SchematicTreeBuilder',
    'SchematicTree',
    'RenderedRun',
    'report_orphans',
    'render_schematic',
    'SchematicReport',
    'summarize_pipe_lengths',
    'PipeLengthSummary',
    'format_diameter_fraction',
]
