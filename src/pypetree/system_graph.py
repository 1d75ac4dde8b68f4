#!/usr/bin/env python3
"""
Pipe System Connectivity Graph

This module defines the in-memory model handed to the schematic builder:
pipe segments, fittings, and their bidirectional connectivity.

The graph is an arena: pipes and fittings live in two tables keyed by an
opaque element id, and adjacency is stored as ordered tuples of ids. Nothing
here holds a reference to another object, so cycles in the piping never turn
into cycles between Python objects.

Example:
    graph = PipeSystemGraph(
        pipes=[
            PipeSegment(id="A", length=10.0, diameter=2.0, connected_fittings=["T1"]),
            PipeSegment(id="B", length=5.0, diameter=2.0, connected_fittings=["T1"]),
            PipeSegment(id="C", length=8.0, diameter=1.0, connected_fittings=["T1"]),
        ],
        fittings=[
            FittingData(id="T1", kind="Tee", connected_pipes=["A", "B", "C"]),
        ],
    )
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from typing import Literal, TypeAlias

# =============================================================================
# TYPE ALIASES
# =============================================================================

ElementId: TypeAlias = Hashable

FittingKind: TypeAlias = Literal["Tee", "Elbow", "Coupling", "Cap", "Generic"]

TEE: FittingKind = "Tee"
ELBOW: FittingKind = "Elbow"
COUPLING: FittingKind = "Coupling"
CAP: FittingKind = "Cap"
GENERIC: FittingKind = "Generic"

FITTING_KINDS: tuple[FittingKind, ...] = (TEE, ELBOW, COUPLING, CAP, GENERIC)


# =============================================================================
# ERRORS
# =============================================================================


class EmptyGraphError(ValueError):
    """Raised when there is no pipe segment to start a schematic from."""


class InvalidGraphError(ValueError):
    """Raised by strict mode when segments carry malformed lengths or diameters."""


# =============================================================================
# HELPERS
# =============================================================================


def _unique_ids(ids: Iterable[ElementId] | None) -> tuple[ElementId, ...]:
    """De-duplicate ids while keeping their first-seen order."""
    if ids is None:
        return ()
    return tuple(dict.fromkeys(ids))


def classify_fitting(family_name: str, type_name: str = "") -> FittingKind:
    """
    Classify a fitting from its family and type names.

    Matching is a case-insensitive substring test, checked in the order
    tee, elbow, coupling, cap. Anything else is a generic fitting.

    Examples:
        "Tee - Generic" -> "Tee"
        "Elbow - Threaded" -> "Elbow"
        "Union" -> "Generic"
    """
    family = (family_name or "").lower()
    type_ = (type_name or "").lower()

    for keyword, kind in (("tee", TEE), ("elbow", ELBOW), ("coupling", COUPLING), ("cap", CAP)):
        if keyword in family or keyword in type_:
            return kind
    return GENERIC


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class PipeSegment:
    """
    A single pipe run between two connection points.

    Attributes:
        id: Opaque element id, unique within one graph
        length: Centerline length (feet by convention)
        diameter: Nominal diameter in inches
        connected_fittings: Ids of fittings attached to either end
        connected_pipes: Ids of pipes joined directly, without a fitting
    """

    id: ElementId
    length: float = 0.0
    diameter: float = 0.0
    connected_fittings: tuple[ElementId, ...] = ()
    connected_pipes: tuple[ElementId, ...] = ()

    def __post_init__(self):
        # Lists from YAML loading become ordered, duplicate-free tuples
        self.connected_fittings = _unique_ids(self.connected_fittings)
        self.connected_pipes = _unique_ids(self.connected_pipes)


@dataclass
class FittingData:
    """
    A junction element joining pipe segments.

    Attributes:
        id: Opaque element id, unique within one graph
        kind: "Tee", "Elbow", "Coupling", "Cap" or "Generic"
        name: Family name as reported by the host (display only)
        connected_pipes: Ids of pipes attached to this fitting
        connected_fittings: Ids of fittings attached directly to this fitting
        connection_count: Number of connectors on the fitting
    """

    id: ElementId
    kind: FittingKind = GENERIC
    name: str = ""
    connected_pipes: tuple[ElementId, ...] = ()
    connected_fittings: tuple[ElementId, ...] = ()
    connection_count: int = 0

    def __post_init__(self):
        if self.kind not in FITTING_KINDS:
            raise ValueError(f"Unknown fitting kind '{self.kind}' on fitting {self.id!r}. Valid kinds: {list(FITTING_KINDS)}")
        self.connected_pipes = _unique_ids(self.connected_pipes)
        self.connected_fittings = _unique_ids(self.connected_fittings)

    @property
    def is_tee(self) -> bool:
        return self.kind == TEE

    @property
    def is_elbow(self) -> bool:
        return self.kind == ELBOW

    @property
    def is_non_branching(self) -> bool:
        """True for a non-tee fitting joining exactly two pipes."""
        return self.kind != TEE and len(self.connected_pipes) == 2


# =============================================================================
# GRAPH
# =============================================================================


@dataclass
class PipeSystemGraph:
    """
    Snapshot of a piping system's connectivity.

    Built once per invocation by whatever extracts the model (a CAD add-in,
    a YAML snapshot, a test) and consumed read-only by the schematic builder.

    Attributes:
        pipes: Pipe segments in snapshot order
        fittings: Fittings in snapshot order
    """

    pipes: list[PipeSegment] = field(default_factory=list)
    fittings: list[FittingData] = field(default_factory=list)

    # Indexes built from the tables in __post_init__
    _pipe_index: dict[ElementId, PipeSegment] = field(default_factory=dict, init=False, repr=False)
    _fitting_index: dict[ElementId, FittingData] = field(default_factory=dict, init=False, repr=False)
    _fittings_by_pipe: dict[ElementId, list[FittingData]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        self.pipes = list(self.pipes)
        self.fittings = list(self.fittings)

        for pipe in self.pipes:
            if pipe.id in self._pipe_index:
                raise ValueError(f"Duplicate pipe id: {pipe.id!r}")
            self._pipe_index[pipe.id] = pipe

        for fitting in self.fittings:
            if fitting.id in self._fitting_index:
                raise ValueError(f"Duplicate fitting id: {fitting.id!r}")
            self._fitting_index[fitting.id] = fitting
            for pipe_id in fitting.connected_pipes:
                self._fittings_by_pipe.setdefault(pipe_id, []).append(fitting)

    # -------------------------------------------------------------------------
    # LOOKUPS
    # -------------------------------------------------------------------------

    def get_pipe(self, pipe_id: ElementId) -> PipeSegment | None:
        """Get a pipe by id, or None if the id is not in this snapshot."""
        return self._pipe_index.get(pipe_id)

    def get_fitting(self, fitting_id: ElementId) -> FittingData | None:
        """Get a fitting by id, or None if the id is not in this snapshot."""
        return self._fitting_index.get(fitting_id)

    def fittings_on(self, pipe_id: ElementId, exclude: ElementId | None = None) -> list[FittingData]:
        """
        Fittings that list the given pipe, in fitting-table order.

        Args:
            pipe_id: Pipe whose fittings are wanted
            exclude: Optional fitting id to leave out (the one we came from)
        """
        return [f for f in self._fittings_by_pipe.get(pipe_id, ()) if exclude is None or f.id != exclude]

    def resolve_pipes(self, pipe_ids: Iterable[ElementId]) -> list[PipeSegment]:
        """Look up pipe ids, skipping any that are not in this snapshot."""
        pipes = []
        for pipe_id in pipe_ids:
            pipe = self._pipe_index.get(pipe_id)
            if pipe is not None:
                pipes.append(pipe)
        return pipes

    def resolve_fittings(self, fitting_ids: Iterable[ElementId]) -> list[FittingData]:
        """Look up fitting ids, skipping any that are not in this snapshot."""
        fittings = []
        for fitting_id in fitting_ids:
            fitting = self._fitting_index.get(fitting_id)
            if fitting is not None:
                fittings.append(fitting)
        return fittings

    @property
    def tees(self) -> list[FittingData]:
        return [f for f in self.fittings if f.is_tee]

    @property
    def elbows(self) -> list[FittingData]:
        return [f for f in self.fittings if f.is_elbow]

    @property
    def total_length(self) -> float:
        """Sum of all pipe lengths in snapshot order."""
        return sum(p.length for p in self.pipes)

    # -------------------------------------------------------------------------
    # VALIDATION
    # -------------------------------------------------------------------------

    def malformed_pipes(self) -> list[PipeSegment]:
        """Pipes with a negative, zero or NaN length or diameter."""
        return [
            p for p in self.pipes
            if not (p.length > 0 and p.diameter > 0) or math.isnan(p.length) or math.isnan(p.diameter)
        ]

    def validate(self) -> list[str]:
        """
        Check the snapshot against the connectivity invariants.

        Returns one message per problem found: dangling references,
        adjacency listed on one side only, malformed lengths or diameters,
        and connector counts smaller than the listed connections. An empty
        list means the snapshot is consistent.
        """
        problems: list[str] = []

        for pipe in self.pipes:
            for fitting_id in pipe.connected_fittings:
                fitting = self.get_fitting(fitting_id)
                if fitting is None:
                    problems.append(f"Pipe {pipe.id!r} references missing fitting {fitting_id!r}")
                elif pipe.id not in fitting.connected_pipes:
                    problems.append(f"Pipe {pipe.id!r} lists fitting {fitting_id!r} but the fitting does not list the pipe")
            for other_id in pipe.connected_pipes:
                other = self.get_pipe(other_id)
                if other is None:
                    problems.append(f"Pipe {pipe.id!r} references missing pipe {other_id!r}")
                elif pipe.id not in other.connected_pipes:
                    problems.append(f"Pipe {pipe.id!r} lists pipe {other_id!r} but not the other way round")

        for fitting in self.fittings:
            for pipe_id in fitting.connected_pipes:
                pipe = self.get_pipe(pipe_id)
                if pipe is None:
                    problems.append(f"Fitting {fitting.id!r} references missing pipe {pipe_id!r}")
                elif fitting.id not in pipe.connected_fittings:
                    problems.append(f"Fitting {fitting.id!r} lists pipe {pipe_id!r} but the pipe does not list the fitting")
            for other_id in fitting.connected_fittings:
                other = self.get_fitting(other_id)
                if other is None:
                    problems.append(f"Fitting {fitting.id!r} references missing fitting {other_id!r}")
                elif fitting.id not in other.connected_fittings:
                    problems.append(f"Fitting {fitting.id!r} lists fitting {other_id!r} but not the other way round")

            listed = len(fitting.connected_pipes) + len(fitting.connected_fittings)
            if fitting.connection_count and fitting.connection_count < listed:
                problems.append(
                    f"Fitting {fitting.id!r} has {fitting.connection_count} connectors but lists {listed} connections"
                )

        for pipe in self.malformed_pipes():
            problems.append(f"Pipe {pipe.id!r} has malformed length {pipe.length!r} or diameter {pipe.diameter!r}")

        return problems
