"""
Pipe system snapshot import.

Load connectivity snapshots from YAML and turn them into PipeSystemGraph
objects for the schematic builder.
"""

from .config_schema import (
    FittingConfig,
    PipeConfig,
    PipeSystemConfig,
    SchematicSettings,
)

__all__ = [
    "FittingConfig",
    "PipeConfig",
    "PipeSystemConfig",
    "SchematicSettings",
]
