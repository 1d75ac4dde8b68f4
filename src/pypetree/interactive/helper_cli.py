"""
CLI tool for pypetree pipe schematics.

This module provides a command-line interface for pipe system snapshots:
- render: Print the schematic tree report
- lengths: Print pipe length totals
- validate: Check a snapshot's connectivity

Usage:
    pypetree render system.yaml
    pypetree render system.yaml --no-inventory -o schematic.txt
    pypetree lengths system.yaml
    pypetree validate system.yaml
"""

import dataclasses
from pathlib import Path

import click
import yaml

from ..graph_import.config_schema import PipeSystemConfig
from ..length_report import summarize_pipe_lengths
from ..schematic_report import render_schematic
from ..system_graph import EmptyGraphError


def _load_snapshot(snapshot: Path) -> PipeSystemConfig:
    """Load a snapshot, turning load errors into a clean CLI exit."""
    try:
        return PipeSystemConfig.from_yaml(snapshot)
    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        click.echo(f"Error loading snapshot: {e}", err=True)
        raise SystemExit(1) from None


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """pypetree - schematic trees for pipe systems."""
    pass


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    help="Output text file path. If not specified, prints to stdout.",
)
@click.option(
    "--unit",
    default=None,
    help="Length unit label (default: from snapshot settings, else 'ft').",
)
@click.option(
    "--inventory/--no-inventory",
    default=None,
    help="Include the tee/pipe/fitting listing ahead of the tree.",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Reject pipes with negative, zero or NaN length or diameter.",
)
@click.option(
    "--strict-glyphs",
    is_flag=True,
    default=False,
    help="Draw true last-sibling glyphs for branches off non-tee fittings.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Print traversal steps.",
)
def render(
    snapshot: Path,
    output: Path | None,
    unit: str | None,
    inventory: bool | None,
    strict: bool,
    strict_glyphs: bool,
    debug: bool,
):
    """
    Render the schematic tree for a pipe system snapshot.

    Example:
        pypetree render system.yaml --unit ft -o schematic.txt
    """
    config = _load_snapshot(snapshot)

    # Command-line options override snapshot settings
    overrides = {}
    if unit is not None:
        overrides["length_unit"] = unit
    if inventory is not None:
        overrides["include_inventory"] = inventory
    if strict:
        overrides["strict"] = True
    if strict_glyphs:
        overrides["strict_sibling_glyphs"] = True
    if debug:
        overrides["debug"] = True
    settings = dataclasses.replace(config.settings, **overrides)

    try:
        graph = config.to_graph()
        report = render_schematic(graph, settings)
    except EmptyGraphError as e:
        click.echo(f"Nothing to render: {e}", err=True)
        raise SystemExit(1) from None
    except (TypeError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    if output:
        output.write_text(report.text, encoding="utf-8")
        click.echo(f"Schematic saved to: {output}")
        click.echo(report.summary_line)
    else:
        click.echo(report.text, nl=False)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
def lengths(snapshot: Path):
    """
    Print total pipe length, pipe count and elbow count.

    Example:
        pypetree lengths system.yaml
    """
    config = _load_snapshot(snapshot)

    try:
        summary = summarize_pipe_lengths(config.to_graph(), skipped=config.skipped)
    except EmptyGraphError as e:
        click.echo(f"Nothing to total: {e}", err=True)
        raise SystemExit(1) from None
    except (TypeError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    for line in summary.format_lines():
        click.echo(line)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
def validate(snapshot: Path):
    """
    Validate a pipe system snapshot.

    Checks that every referenced id exists, that connections are listed on
    both sides, and that lengths and diameters are positive numbers.

    Example:
        pypetree validate system.yaml
    """
    click.echo(f"\nValidating: {snapshot}")
    click.echo("-" * 50)

    config = _load_snapshot(snapshot)

    try:
        graph = config.to_graph()
    except (TypeError, ValueError) as e:
        click.echo(f"Error building graph: {e}", err=True)
        raise SystemExit(1) from None

    errors = graph.validate()
    warnings = []
    if not graph.pipes:
        warnings.append("No pipes defined")
    for fitting in graph.fittings:
        if not fitting.connected_pipes and not fitting.connected_fittings:
            warnings.append(f"[{fitting.id}] Fitting has no connections")

    # Report results
    if errors:
        click.echo("\nErrors:")
        for e in errors:
            click.echo(f"  - {e}")

    if warnings:
        click.echo("\nWarnings:")
        for w in warnings:
            click.echo(f"  - {w}")

    if not errors and not warnings:
        click.echo("Snapshot is valid.")
        click.echo(f"  Pipes: {len(graph.pipes)}")
        click.echo(f"  Fittings: {len(graph.fittings)} ({len(graph.tees)} tees, {len(graph.elbows)} elbows)")

    if errors:
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
