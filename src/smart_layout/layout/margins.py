"""Margin bands shared by every layout strategy.

Strategies compute their content-driven sides first, then run the shared
passes in a fixed order: title, legend, bar symmetry, export padding and
finally the overflow-risk pass.
"""

from __future__ import annotations

import logging

from smart_layout.layout.analysis import LayoutContext
from smart_layout.layout.constants import (
    BOTTOM_MARGIN_DEFAULT,
    EXPORT_SAFETY_PADDING,
    LEGEND_GAP,
    MIN_PLOT_HEIGHT_RATIO,
    MIN_PLOT_WIDTH_RATIO,
    MIN_SIDE_MARGIN,
    MIN_VERTICAL_MARGIN,
    TITLE_PADDING,
    TOP_MARGIN_DEFAULT,
)
from smart_layout.layout.legend import LegendDimensions, compute_legend_dimensions
from smart_layout.layout.result import Margins, OverflowRisk, Zone, Zones

logger = logging.getLogger(__name__)


def resolve_legend_position(ctx: LayoutContext, default: str | None = None) -> str:
    """User legend position, else the chart family's default."""
    position = ctx.analysis.legend_position
    if position:
        return position
    return default or ctx.rules.legend_position


def legend_dimensions(
    ctx: LayoutContext, items: list[str], position: str
) -> LegendDimensions:
    return compute_legend_dimensions(
        items, position, ctx.width, ctx.legend_font(), ctx.metrics, ctx.target
    )


def title_height(ctx: LayoutContext) -> float:
    """Height of the title line, 0 without a title."""
    if not ctx.analysis.has_title:
        return 0.0
    return ctx.line_height(ctx.title_font())


def top_margin(ctx: LayoutContext, default: float | None = None) -> float:
    """Title band, or a mode-scaled constant without a title."""
    if ctx.analysis.has_title:
        return title_height(ctx) + TITLE_PADDING
    if default is None:
        default = TOP_MARGIN_DEFAULT * ctx.modifiers.margin_multiplier
    return default


def add_legend(margins: Margins, legend: LegendDimensions, position: str) -> None:
    """Grow the margin on ``position`` to host ``legend``."""
    if legend.height <= 0:
        return
    if position == "top":
        margins.top += legend.height + LEGEND_GAP
    elif position == "bottom":
        margins.bottom += legend.height + LEGEND_GAP
    elif position == "left":
        margins.left += legend.width + LEGEND_GAP
    elif position == "right":
        margins.right += legend.width + LEGEND_GAP


def bottom_margin(axis_band: float, legend: LegendDimensions, position: str) -> float:
    """Bottom band: axis labels plus a bottom legend, else a fixed constant."""
    if position == "bottom" and legend.height > 0:
        return axis_band + legend.height + LEGEND_GAP
    return max(BOTTOM_MARGIN_DEFAULT, axis_band)


def enforce_symmetry(margins: Margins) -> None:
    side = max(margins.left, margins.right)
    margins.left = side
    margins.right = side


def apply_export_padding(margins: Margins, target: str) -> float:
    """Pad every side for print export; returns the padding applied."""
    if target != "pdf":
        return 0.0
    margins.top += EXPORT_SAFETY_PADDING
    margins.right += EXPORT_SAFETY_PADDING
    margins.bottom += EXPORT_SAFETY_PADDING
    margins.left += EXPORT_SAFETY_PADDING
    return EXPORT_SAFETY_PADDING


def _shrink(value: float, amount: float, floor: float) -> float:
    """Reduce ``value`` by ``amount`` without going below ``floor`` (or growing)."""
    return min(value, max(floor, value - amount))


def check_overflow(margins: Margins, width: float, height: float) -> OverflowRisk | None:
    """Shrink margins that leave too little plot area.

    Each offending pair of sides gives up half the deficit, never going
    below the side floors. Returns ``None`` when there is no risk.
    """
    warnings: list[str] = []
    before = (margins.top, margins.right, margins.bottom, margins.left)

    plot_width = width - margins.left - margins.right
    if plot_width < width * MIN_PLOT_WIDTH_RATIO:
        warnings.append(
            f"Plot width {plot_width:.1f}px is below {MIN_PLOT_WIDTH_RATIO:.0%} "
            f"of the container width {width:.1f}px"
        )
        half = (width * MIN_PLOT_WIDTH_RATIO - plot_width) / 2
        margins.left = _shrink(margins.left, half, MIN_SIDE_MARGIN)
        margins.right = _shrink(margins.right, half, MIN_SIDE_MARGIN)

    plot_height = height - margins.top - margins.bottom
    if plot_height < height * MIN_PLOT_HEIGHT_RATIO:
        warnings.append(
            f"Plot height {plot_height:.1f}px is below {MIN_PLOT_HEIGHT_RATIO:.0%} "
            f"of the container height {height:.1f}px"
        )
        half = (height * MIN_PLOT_HEIGHT_RATIO - plot_height) / 2
        margins.top = _shrink(margins.top, half, MIN_VERTICAL_MARGIN)
        margins.bottom = _shrink(margins.bottom, half, MIN_VERTICAL_MARGIN)

    if not warnings:
        return None
    for message in warnings:
        logger.warning("Overflow risk: %s", message)
    adjusted = before != (margins.top, margins.right, margins.bottom, margins.left)
    return OverflowRisk(has_risk=True, warnings=warnings, applied_adjustments=adjusted)


def plot_zone(margins: Margins, width: float, height: float) -> Zone:
    return Zone(
        x=margins.left,
        y=margins.top,
        width=max(0.0, width - margins.left - margins.right),
        height=max(0.0, height - margins.top - margins.bottom),
    )


def build_zones(
    ctx: LayoutContext,
    margins: Margins,
    legend: LegendDimensions,
    position: str,
    padding: float,
) -> Zones:
    """Place the plot, the legend and the title inside the container.

    The legend sits at the outer edge of its margin band, inside the export
    padding, so it never overlaps the plot.
    """
    width, height = ctx.width, ctx.height
    plot = plot_zone(margins, width, height)

    title = None
    title_h = title_height(ctx)
    if title_h > 0:
        title = Zone(padding, padding, max(0.0, width - 2 * padding), title_h)

    legend_zone = None
    if legend.height > 0 and position != "none":
        lw, lh = legend.width, legend.height
        if position == "bottom":
            legend_zone = Zone((width - lw) / 2, height - padding - lh, lw, lh)
        elif position == "top":
            offset = title_h + TITLE_PADDING if title_h > 0 else 0.0
            legend_zone = Zone((width - lw) / 2, padding + offset, lw, lh)
        elif position == "left":
            legend_zone = Zone(padding, plot.y + (plot.height - lh) / 2, lw, lh)
        elif position == "right":
            legend_zone = Zone(width - padding - lw, plot.y + (plot.height - lh) / 2, lw, lh)

    return Zones(plot=plot, legend=legend_zone, title=title)
