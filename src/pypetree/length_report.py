"""
Pipe length totals for a selection of pipes and fittings.

Sums the length of every pipe, counts pipes and elbows, and shows the total
in alternate units. Elements that are neither pipes nor fittings are passed
in by the caller and listed as skipped.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from .system_graph import EmptyGraphError, PipeSystemGraph

FEET_TO_INCHES = 12.0
FEET_TO_METERS = 0.3048
MAX_SKIPPED_SHOWN = 5


@dataclass
class PipeLengthSummary:
    """
    Totals for a pipe selection.

    Attributes:
        total_length_ft: Sum of pipe lengths (feet)
        pipe_count: Number of pipes summed
        elbow_count: Number of elbow fittings in the selection
        skipped: Descriptions of elements that were not pipes or fittings
    """

    total_length_ft: float
    pipe_count: int
    elbow_count: int
    skipped: list[str] = field(default_factory=list)

    @property
    def total_length_in(self) -> float:
        return self.total_length_ft * FEET_TO_INCHES

    @property
    def total_length_m(self) -> float:
        return self.total_length_ft * FEET_TO_METERS

    def format_lines(self) -> list[str]:
        """Human-readable report lines."""
        lines = [
            f"Total Pipe Length: {self.total_length_ft:.2f} ft",
            f"Number of Pipes: {self.pipe_count}",
            f"Number of Elbows: {self.elbow_count}",
            "",
            "Alternate Units:",
            f"  {self.total_length_ft:.2f} ft",
            f"  {self.total_length_in:.2f} in",
            f"  {self.total_length_m:.2f} m",
        ]

        if self.skipped:
            lines.append("")
            lines.append(f"⚠ {len(self.skipped)} non-pipe element(s) were skipped:")
            lines.extend(self.skipped[:MAX_SKIPPED_SHOWN])
            if len(self.skipped) > MAX_SKIPPED_SHOWN:
                lines.append(f"... and {len(self.skipped) - MAX_SKIPPED_SHOWN} more")

        return lines


def summarize_pipe_lengths(graph: PipeSystemGraph, skipped: Iterable[str] = ()) -> PipeLengthSummary:
    """
    Total the pipes of a snapshot.

    Raises:
        EmptyGraphError: If the snapshot has no pipes
    """
    if not graph.pipes:
        raise EmptyGraphError("No pipes found in selection")

    return PipeLengthSummary(
        total_length_ft=graph.total_length,
        pipe_count=len(graph.pipes),
        elbow_count=len(graph.elbows),
        skipped=list(skipped),
    )
