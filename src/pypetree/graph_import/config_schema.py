"""
Snapshot schema for pipe system connectivity.

This module defines the dataclasses used to store a pipe system snapshot
(pipes, fittings and their connections) together with the settings used to
render it. A snapshot can be:
- Exported by a CAD add-in that walks the model's connectors
- Written by hand in YAML for tests and examples
- Round-tripped from an in-memory PipeSystemGraph
"""

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..system_graph import (
    GENERIC,
    ElementId,
    FittingData,
    PipeSegment,
    PipeSystemGraph,
    classify_fitting,
)


@dataclass
class SchematicSettings:
    """
    Rendering options for a schematic.

    Attributes:
        length_unit: Unit label printed after lengths (lengths are not converted)
        include_inventory: Emit the tee/pipe/fitting listing ahead of the tree
        debug: Print traversal steps while building the tree
        strict: Reject snapshots with negative, zero or NaN lengths/diameters
        strict_sibling_glyphs: Draw true last-sibling glyphs for branches off
            non-tee fittings (default draws each of them as the last)
        diameter_tolerance: Largest diameter difference (inches) merged into one run
    """

    length_unit: str = "ft"
    include_inventory: bool = True
    debug: bool = False
    strict: bool = False
    strict_sibling_glyphs: bool = False
    diameter_tolerance: float = 0.1

    def __post_init__(self):
        self.diameter_tolerance = float(self.diameter_tolerance)


@dataclass
class PipeConfig:
    """
    Configuration for a single pipe segment.

    Attributes:
        id: Element id (int or str)
        length: Pipe length in feet
        diameter: Nominal diameter in inches
        connected_fittings: Ids of fittings on either end
        connected_pipes: Ids of pipes joined without a fitting
    """

    id: ElementId
    length: float
    diameter: float
    connected_fittings: list[ElementId] = field(default_factory=list)
    connected_pipes: list[ElementId] = field(default_factory=list)

    def __post_init__(self):
        # YAML may give ints for whole-number sizes
        self.length = float(self.length)
        self.diameter = float(self.diameter)
        self.connected_fittings = list(self.connected_fittings or [])
        self.connected_pipes = list(self.connected_pipes or [])

    def to_segment(self) -> PipeSegment:
        return PipeSegment(
            id=self.id,
            length=self.length,
            diameter=self.diameter,
            connected_fittings=self.connected_fittings,
            connected_pipes=self.connected_pipes,
        )


@dataclass
class FittingConfig:
    """
    Configuration for a single fitting.

    Attributes:
        id: Element id (int or str)
        kind: "Tee", "Elbow", "Coupling", "Cap" or "Generic". When omitted the
            kind is classified from name and type_name.
        name: Family name of the fitting
        type_name: Type name of the fitting
        connected_pipes: Ids of pipes on the fitting
        connected_fittings: Ids of fittings attached directly
        connection_count: Number of connectors (defaults to listed connections)
    """

    id: ElementId
    kind: str | None = None
    name: str = ""
    type_name: str = ""
    connected_pipes: list[ElementId] = field(default_factory=list)
    connected_fittings: list[ElementId] = field(default_factory=list)
    connection_count: int | None = None

    def __post_init__(self):
        # YAML may give numbers for names such as "90"
        self.name = str(self.name) if self.name is not None else ""
        self.type_name = str(self.type_name) if self.type_name is not None else ""
        self.connected_pipes = list(self.connected_pipes or [])
        self.connected_fittings = list(self.connected_fittings or [])
        if self.connection_count is None:
            self.connection_count = len(self.connected_pipes) + len(self.connected_fittings)

    def resolved_kind(self) -> str:
        """Explicit kind, else the kind classified from the names."""
        if self.kind:
            return self.kind
        if not self.name and not self.type_name:
            warnings.warn(
                f"Fitting {self.id!r} has no kind or name. It will be treated as {GENERIC}.",
                stacklevel=2,
            )
            return GENERIC
        return classify_fitting(self.name, self.type_name)

    def to_fitting(self) -> FittingData:
        return FittingData(
            id=self.id,
            kind=self.resolved_kind(),
            name=self.name,
            connected_pipes=self.connected_pipes,
            connected_fittings=self.connected_fittings,
            connection_count=self.connection_count,
        )


@dataclass
class PipeSystemConfig:
    """
    Root configuration for a pipe system snapshot.

    Attributes:
        version: Snapshot file version (currently "1.0")
        settings: Rendering settings
        pipes: Pipe segment configurations
        fittings: Fitting configurations
        skipped: Descriptions of selected elements that were neither pipes nor fittings
    """

    version: str = "1.0"
    settings: SchematicSettings = field(default_factory=SchematicSettings)
    pipes: list[PipeConfig] = field(default_factory=list)
    fittings: list[FittingConfig] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.version = str(self.version)
        # Handle nested sections as dicts from YAML
        if self.settings is None:
            self.settings = SchematicSettings()
        elif isinstance(self.settings, dict):
            self.settings = SchematicSettings(**self.settings)
        self.pipes = [PipeConfig(**p) if isinstance(p, dict) else p for p in (self.pipes or [])]
        self.fittings = [FittingConfig(**f) if isinstance(f, dict) else f for f in (self.fittings or [])]
        self.skipped = [str(s) for s in (self.skipped or [])]

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "PipeSystemConfig":
        """Load a snapshot from a YAML file."""
        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Snapshot {yaml_path} does not contain a mapping")
        return cls(**data)

    @classmethod
    def from_graph(
        cls,
        graph: PipeSystemGraph,
        settings: SchematicSettings | None = None,
    ) -> "PipeSystemConfig":
        """Build a snapshot configuration from an in-memory graph."""
        return cls(
            settings=settings or SchematicSettings(),
            pipes=[
                PipeConfig(
                    id=p.id,
                    length=p.length,
                    diameter=p.diameter,
                    connected_fittings=list(p.connected_fittings),
                    connected_pipes=list(p.connected_pipes),
                )
                for p in graph.pipes
            ],
            fittings=[
                FittingConfig(
                    id=f.id,
                    kind=f.kind,
                    name=f.name,
                    connected_pipes=list(f.connected_pipes),
                    connected_fittings=list(f.connected_fittings),
                    connection_count=f.connection_count,
                )
                for f in graph.fittings
            ],
        )

    def to_graph(self) -> PipeSystemGraph:
        """Build the connectivity graph described by this snapshot."""
        return PipeSystemGraph(
            pipes=[p.to_segment() for p in self.pipes],
            fittings=[f.to_fitting() for f in self.fittings],
        )

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the snapshot to a YAML file."""
        data = self._to_dict()
        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def _to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary suitable for YAML serialization."""
        result: dict[str, Any] = {
            "version": self.version,
            "settings": self._settings_to_dict(self.settings),
            "pipes": [self._pipe_to_dict(p) for p in self.pipes],
            "fittings": [self._fitting_to_dict(f) for f in self.fittings],
        }
        if self.skipped:
            result["skipped"] = list(self.skipped)
        return result

    def _settings_to_dict(self, settings: SchematicSettings) -> dict[str, Any]:
        """Convert settings to a dictionary."""
        return {
            "length_unit": settings.length_unit,
            "include_inventory": settings.include_inventory,
            "debug": settings.debug,
            "strict": settings.strict,
            "strict_sibling_glyphs": settings.strict_sibling_glyphs,
            "diameter_tolerance": settings.diameter_tolerance,
        }

    def _pipe_to_dict(self, pipe: PipeConfig) -> dict[str, Any]:
        """Convert a PipeConfig to a dictionary."""
        result = {
            "id": pipe.id,
            "length": pipe.length,
            "diameter": pipe.diameter,
        }
        if pipe.connected_fittings:
            result["connected_fittings"] = list(pipe.connected_fittings)
        if pipe.connected_pipes:
            result["connected_pipes"] = list(pipe.connected_pipes)
        return result

    def _fitting_to_dict(self, fitting: FittingConfig) -> dict[str, Any]:
        """Convert a FittingConfig to a dictionary."""
        result: dict[str, Any] = {"id": fitting.id}
        if fitting.kind:
            result["kind"] = fitting.kind
        if fitting.name:
            result["name"] = fitting.name
        if fitting.type_name:
            result["type_name"] = fitting.type_name
        if fitting.connected_pipes:
            result["connected_pipes"] = list(fitting.connected_pipes)
        if fitting.connected_fittings:
            result["connected_fittings"] = list(fitting.connected_fittings)
        result["connection_count"] = fitting.connection_count
        return result
