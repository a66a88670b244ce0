"""CLI for smart-layout."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import click

from smart_layout import __version__
from smart_layout.layout import compute_layout, layout_to_dict
from smart_layout.layout.metrics import EstimatingBackend, PillowBackend, TextMetricsProvider
from smart_layout.parser import load_chart_document
from smart_layout.parser.model import TARGETS
from smart_layout.render import render_debug_svg

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
FONT_BACKENDS = {"estimate": EstimatingBackend, "pillow": PillowBackend}


def _load(input_file: Path):
    try:
        return load_chart_document(input_file.read_text())
    except ValueError as e:
        click.echo(f"Parse error: {e}", err=True)
        raise SystemExit(1)


def _layout(input_file: Path, width: float, height: float, target: str, font_backend: str):
    chart, grid = _load(input_file)
    metrics = TextMetricsProvider(backend=FONT_BACKENDS[font_backend]())
    return chart, compute_layout(chart, grid, (width, height), target=target, metrics=metrics)


def _layout_options(func):
    func = click.option("--font-backend", type=click.Choice(list(FONT_BACKENDS)), default="estimate",
                        help="Text measurement backend (default: estimate)")(func)
    func = click.option("--target", type=click.Choice(list(TARGETS)), default="screen",
                        help="Render target (default: screen)")(func)
    func = click.option("--height", type=float, default=400.0,
                        help="Container height in pixels (default: 400)")(func)
    func = click.option("--width", type=float, default=600.0,
                        help="Container width in pixels (default: 600)")(func)
    return func


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False),
              default=lambda: os.environ.get("LOG_LEVEL", "WARNING").upper(),
              help="Logging level (default: $LOG_LEVEL or WARNING)")
def cli(log_level: str) -> None:
    """smart-layout: Compute chart layout geometry from chart documents."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON file path. Prints to stdout when omitted")
@_layout_options
def compute(
    input_file: Path,
    output: Path | None,
    width: float,
    height: float,
    target: str,
    font_backend: str,
) -> None:
    """Compute the layout of a chart document and write it as JSON."""
    _, layout = _layout(input_file, width, height, target, font_backend)
    text = json.dumps(layout_to_dict(layout), indent=2)
    if output is None:
        click.echo(text)
        return
    output.write_text(text)
    m = layout.margins
    click.echo(f"Computed {layout.chart_type} layout "
               f"(margins T{m.top:.1f} R{m.right:.1f} B{m.bottom:.1f} L{m.left:.1f}) -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.debug.svg")
@_layout_options
def debug(
    input_file: Path,
    output: Path | None,
    width: float,
    height: float,
    target: str,
    font_backend: str,
) -> None:
    """Render a debug overlay of the computed layout to SVG."""
    _, layout = _layout(input_file, width, height, target, font_backend)
    svg = render_debug_svg(layout)
    if output is None:
        output = input_file.with_suffix(".debug.svg")
    output.write_text(svg)
    click.echo(f"Rendered {layout.variant} debug overlay -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def validate(input_file: Path) -> None:
    """Validate a chart document."""
    chart, _ = _load(input_file)

    warnings = []
    for i, ds in enumerate(chart.data.datasets):
        if chart.data.labels and len(ds.data) != len(chart.data.labels):
            warnings.append(f"Dataset {i} '{ds.label}' has {len(ds.data)} values "
                            f"for {len(chart.data.labels)} labels")
    for w in warnings:
        click.echo(f"Warning: {w}", err=True)

    click.echo(f"Valid: {chart.type} chart, "
               f"{len(chart.data.labels)} labels, "
               f"{len(chart.data.datasets)} datasets")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@_layout_options
def info(
    input_file: Path,
    width: float,
    height: float,
    target: str,
    font_backend: str,
) -> None:
    """Show the main layout figures of a chart document."""
    chart, layout = _layout(input_file, width, height, target, font_backend)
    style = chart.resolved_style

    click.echo(f"Title: {chart.title or '(none)'}")
    click.echo(f"Type: {chart.type} ({layout.variant})")
    click.echo(f"Mode: {style.mode}")
    click.echo(f"Container: {layout.width:.0f}x{layout.height:.0f} [{layout.target}]")
    m = layout.margins
    click.echo(f"Margins: top {m.top:.1f}, right {m.right:.1f}, "
               f"bottom {m.bottom:.1f}, left {m.left:.1f}")
    plot = layout.zones.plot
    click.echo(f"Plot: {plot.width:.1f}x{plot.height:.1f} at ({plot.x:.1f}, {plot.y:.1f})")
    if layout.overflow_risk is not None:
        for w in layout.overflow_risk.warnings:
            click.echo(f"Overflow: {w}")
