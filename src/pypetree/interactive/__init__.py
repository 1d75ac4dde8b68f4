"""
Command-line tools for pipe system snapshots.

This module provides command-line tools for:
- Rendering schematic tree reports
- Totalling pipe lengths
- Validating snapshot files
"""

from .helper_cli import cli

__all__ = ["cli"]
