"""Radial layout for pie and donut charts.

Each slice goes raw value -> visual angle -> internal or external label ->
leader line -> vertical relaxation. Angles are radians measured clockwise
from 12 o'clock; label coordinates are relative to the circle center.

Slices below the minimum visual angle are widened to it and the remaining
slices share what is left in proportion to their values. This distorts
proportions on purpose so small categories stay visible.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from smart_layout.layout.analysis import LayoutContext
from smart_layout.layout.colors import ensure_distinct_colors
from smart_layout.layout.constants import (
    COLUMN_MAX_RATIO,
    DONUT_BASE_THICKNESS,
    DONUT_MIN_THICKNESS,
    INTERNAL_LABEL_PAD,
    LABEL_EDGE_PAD,
    LEADER_ELBOW,
    LEADER_LABEL_GAP,
    LEADER_RUN,
    LOD_DETAILED,
    LOD_SMALL,
    LOD_TINY,
    MAX_INTERNAL_CATEGORIES,
    MIN_INTERNAL_ANGLE,
    MIN_INTERNAL_ANGLE_COLUMNAR,
    MIN_LABEL_WRAP_WIDTH,
    MIN_SLICE_ANGLE,
    PIE_LABEL_RADIUS,
    RADIAL_BASE_MARGIN,
    RADIUS_FILL,
    SIDE_LABEL_MAX_RATIO,
    TAU,
)
from smart_layout.layout.formatting import format_value
from smart_layout.layout.labels import StackItem, relax_column
from smart_layout.layout.legend import LegendDimensions
from smart_layout.layout.margins import (
    add_legend,
    apply_export_padding,
    build_zones,
    check_overflow,
    legend_dimensions,
    resolve_legend_position,
    top_margin,
)
from smart_layout.layout.result import (
    ComputedLayout,
    Margins,
    RadialDetails,
    RadialLabel,
    SliceGeometry,
)
from smart_layout.layout.wrapping import wrap_label
from smart_layout.parser.model import NumberFormat

logger = logging.getLogger(__name__)

COLUMNAR_LAYOUTS = ("column-left", "column-right")
LEADER_OFFSET = LEADER_ELBOW + LEADER_RUN
COLUMN_OFFSETS = LEADER_OFFSET + LEADER_LABEL_GAP + LABEL_EDGE_PAD
_PERCENT = NumberFormat(type="percent")


def compute_visual_angles(values: list[float], min_angle: float = MIN_SLICE_ANGLE) -> list[float]:
    """Visual angle of every slice; the angles of a positive total sum to 2*pi.

    Positive slices whose share would fall below ``min_angle`` get exactly
    ``min_angle``. Redistribution repeats until no remaining slice drops
    under the floor. When every positive slice would be tiny the natural
    angles are returned unchanged.
    """
    total = sum(values)
    if total <= 0:
        return [0.0 for _ in values]
    natural = [v / total * TAU for v in values]
    positive = [i for i, v in enumerate(values) if v > 0]

    tiny: set[int] = set()
    while True:
        remaining = TAU - len(tiny) * min_angle
        rest = [i for i in positive if i not in tiny]
        if not rest or remaining <= 0:
            return natural
        rest_sum = sum(values[i] for i in rest)
        newly_tiny = {i for i in rest if values[i] / rest_sum * remaining < min_angle}
        if not newly_tiny:
            break
        tiny |= newly_tiny

    visual = [0.0 for _ in values]
    for i in positive:
        visual[i] = min_angle if i in tiny else values[i] / rest_sum * remaining
    return visual


def level_of_detail(width: float, height: float, show_all: bool = False) -> str:
    """Size tier of a radial plot: tiny, small, normal or detailed."""
    if show_all:
        return "detailed"
    size = min(width, height)
    if size < LOD_TINY:
        return "tiny"
    if size < LOD_SMALL:
        return "small"
    if size < LOD_DETAILED:
        return "normal"
    return "detailed"


def slice_side(mid_angle: float, label_layout: str) -> str:
    """Label column ("left" or "right") an external slice label goes to.

    "radial" splits by the natural angle, "balanced" by the cosine sign of
    the angle measured from 3 o'clock; the two can disagree at exactly
    6 o'clock.
    """
    if label_layout == "column-left":
        return "left"
    if label_layout == "column-right":
        return "right"
    if label_layout == "balanced":
        return "right" if math.cos(mid_angle - math.pi / 2) >= 0 else "left"
    return "right" if mid_angle < math.pi else "left"


def donut_inner_radius(
    value: float, max_value: float, outer: float, mode: str, variable: bool
) -> float:
    """Inner radius of one donut segment.

    With ``variable`` banding larger values get thicker segments; no segment
    is thinner than the integrity floor.
    """
    base = outer * DONUT_BASE_THICKNESS.get(mode, DONUT_BASE_THICKNESS["classic"])
    if not variable:
        return max(0.0, outer - base)
    share = value / max_value if max_value > 0 else 0.0
    thickness = max(outer * DONUT_MIN_THICKNESS, share * base)
    return max(0.0, outer - thickness)


def _point(angle: float, radius: float) -> tuple[float, float]:
    return (math.sin(angle) * radius, -math.cos(angle) * radius)


@dataclass
class _SliceInput:
    index: int
    label: str
    value: float
    color: str
    is_hero: bool
    lines: list[str] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0


class RadialStrategy:
    """Pie and donut geometry."""

    name = "radial"

    def compute(self, ctx: LayoutContext) -> ComputedLayout:
        config = ctx.style.infographic_config
        label_layout = config.label_layout or "radial"
        slices = self._prepare(ctx)

        base = RADIAL_BASE_MARGIN * ctx.modifiers.margin_multiplier
        lod = level_of_detail(ctx.width - 2 * base, ctx.height - 2 * base, config.show_all_labels)
        show_labels = lod in ("normal", "detailed") and bool(slices)

        if not show_labels:
            sides: set[str] = set()
        elif label_layout == "column-left":
            sides = {"left"}
        elif label_layout == "column-right":
            sides = {"right"}
        else:
            sides = {"left", "right"}

        layout = self._solve(ctx, slices, sides, lod, show_labels, label_layout)
        if show_labels:
            used = {p.side for p in layout.type_specific.external_labels}
            if used != sides:
                # Reclaim label columns nothing was placed into.
                retry = self._solve(ctx, slices, used, lod, show_labels, label_layout)
                if {p.side for p in retry.type_specific.external_labels} <= used:
                    layout = retry
        return layout

    def _prepare(self, ctx: LayoutContext) -> list[_SliceInput]:
        config = ctx.style.infographic_config
        labels = ctx.chart.data.labels
        values = [max(0.0, float(v)) for v in ctx.chart.primary_values()]
        colors = ensure_distinct_colors(ctx.style.color_palette, len(values))

        hero = None
        if ctx.mode == "infographic" and values:
            if config.hero_value_index is not None and 0 <= config.hero_value_index < len(values):
                hero = config.hero_value_index
            else:
                hero = max(range(len(values)), key=lambda i: values[i])

        slices = [
            _SliceInput(
                index=i,
                label=labels[i] if i < len(labels) else "",
                value=v,
                color=colors[i],
                is_hero=i == hero,
            )
            for i, v in enumerate(values)
        ]
        if config.auto_sort:
            slices.sort(key=lambda s: -s.value)

        total = sum(s.value for s in slices)
        font = ctx.label_font()
        line_height = ctx.line_height(font)
        ratio = COLUMN_MAX_RATIO if config.label_layout in COLUMNAR_LAYOUTS else SIDE_LABEL_MAX_RATIO
        wrap_width = max(MIN_LABEL_WRAP_WIDTH, ctx.width * ratio - COLUMN_OFFSETS)
        for s in slices:
            percent = s.value / total * 100 if total > 0 else 0.0
            lines = []
            if config.show_category_label and s.label:
                lines = wrap_label(s.label, wrap_width, font, ctx.metrics, ctx.target).lines
            lines.append(format_value(percent, _PERCENT))
            s.lines = lines
            s.width = max(ctx.text_width(line, font) for line in lines)
            s.height = len(lines) * line_height
        return slices

    def _solve(
        self,
        ctx: LayoutContext,
        slices: list[_SliceInput],
        sides: set[str],
        lod: str,
        show_labels: bool,
        label_layout: str,
    ) -> ComputedLayout:
        analysis = ctx.analysis
        config = ctx.style.infographic_config
        is_donut = analysis.chart_type == "donut"
        columnar = label_layout in COLUMNAR_LAYOUTS

        base = RADIAL_BASE_MARGIN * ctx.modifiers.margin_multiplier
        margins = Margins(base, base, base, base)
        ratio = COLUMN_MAX_RATIO if columnar else SIDE_LABEL_MAX_RATIO
        widest = max((s.width for s in slices), default=0.0)
        column = min(ctx.width * ratio, widest + COLUMN_OFFSETS)
        if "left" in sides:
            margins.left = max(base, column)
        if "right" in sides:
            margins.right = max(base, column)

        margins.top = top_margin(ctx, default=base)
        position = resolve_legend_position(ctx)
        legend = LegendDimensions()
        if slices and (analysis.needs_legend or not show_labels) and position != "none":
            legend = legend_dimensions(ctx, [s.label for s in slices], position)
            add_legend(margins, legend, position)

        padding = apply_export_padding(margins, ctx.target)
        overflow = check_overflow(margins, ctx.width, ctx.height)
        zones = build_zones(ctx, margins, legend, position, padding)
        plot = zones.plot
        cx, cy = plot.center
        outer = max(0.0, min(plot.width, plot.height) / 2 * RADIUS_FILL)
        max_value = max((s.value for s in slices), default=0.0)
        total = sum(s.value for s in slices)
        variable = is_donut and ctx.mode == "infographic"

        angles = compute_visual_angles([s.value for s in slices])
        geometry: list[SliceGeometry] = []
        start = 0.0
        for position_index, (s, angle) in enumerate(zip(slices, angles)):
            end = TAU if position_index == len(slices) - 1 and total > 0 else start + angle
            inner = donut_inner_radius(s.value, max_value, outer, ctx.mode, variable) if is_donut else 0.0
            geometry.append(
                SliceGeometry(
                    index=s.index,
                    label=s.label,
                    value=s.value,
                    percent=s.value / total * 100 if total > 0 else 0.0,
                    start_angle=start,
                    end_angle=end,
                    natural_angle=s.value / total * TAU if total > 0 else 0.0,
                    inner_radius=inner,
                    outer_radius=outer,
                    color=s.color,
                    is_hero=s.is_hero,
                )
            )
            start = end

        placements = self._place_labels(
            ctx, slices, geometry, outer, is_donut, columnar, show_labels, label_layout,
            top=padding + LABEL_EDGE_PAD - cy,
            bottom=ctx.height - padding - LABEL_EDGE_PAD - cy,
        )

        details = RadialDetails(
            center=(cx, cy),
            outer_radius=outer,
            inner_radius=min((g.inner_radius for g in geometry), default=0.0),
            is_donut=is_donut,
            lod=lod,
            total=total,
            label_layout=label_layout,
            slices=geometry,
            label_placements=placements,
            category_colors=[g.color for g in sorted(geometry, key=lambda g: g.index)],
            dataset_colors=ensure_distinct_colors(ctx.style.color_palette, analysis.dataset_count),
        )
        logger.debug(
            "radial %s: lod=%s outer=%.1f externals=%d show_all=%s",
            analysis.chart_type,
            lod,
            outer,
            len(details.external_labels),
            config.show_all_labels,
        )
        return ComputedLayout(
            chart_type=analysis.chart_type,
            target=ctx.target,
            width=ctx.width,
            height=ctx.height,
            margins=margins,
            zones=zones,
            type_specific=details,
            overflow_risk=overflow,
        )

    def _place_labels(
        self,
        ctx: LayoutContext,
        slices: list[_SliceInput],
        geometry: list[SliceGeometry],
        outer: float,
        is_donut: bool,
        columnar: bool,
        show_labels: bool,
        label_layout: str,
        top: float,
        bottom: float,
    ) -> list[RadialLabel]:
        placements: list[RadialLabel] = []
        min_internal = MIN_INTERNAL_ANGLE_COLUMNAR if columnar else MIN_INTERNAL_ANGLE
        many = len(slices) > MAX_INTERNAL_CATEGORIES

        for s, g in zip(slices, geometry):
            if not show_labels or g.visual_angle <= 0 or outer <= 0:
                placements.append(RadialLabel(s.index, 0.0, 0.0, "hidden", s.lines, s.width, s.height))
                continue

            if is_donut:
                label_radius = (g.inner_radius + outer) / 2
                depth = outer - g.inner_radius
            else:
                label_radius = outer * PIE_LABEL_RADIUS
                depth = outer
            arc = g.visual_angle * label_radius
            fits = (
                not many
                and arc > s.width + INTERNAL_LABEL_PAD
                and depth > s.height + INTERNAL_LABEL_PAD
                and g.visual_angle >= min_internal
            )
            if fits:
                if not is_donut and g.visual_angle >= TAU:
                    x, y = 0.0, 0.0
                else:
                    x, y = _point(g.mid_angle, label_radius)
                placements.append(RadialLabel(s.index, x, y, "internal", s.lines, s.width, s.height))
                continue

            side = slice_side(g.mid_angle, label_layout)
            anchor = _point(g.mid_angle, outer)
            elbow = _point(g.mid_angle, outer + LEADER_ELBOW)
            placements.append(
                RadialLabel(
                    index=s.index,
                    x=0.0,
                    y=elbow[1],
                    strategy="external",
                    lines=s.lines,
                    width=s.width,
                    height=s.height,
                    side=side,
                    text_anchor="end" if side == "left" else "start",
                    leader_line=[anchor, elbow],
                )
            )

        for side in ("left", "right"):
            column = [p for p in placements if p.strategy == "external" and p.side == side]
            if not column:
                continue
            sign = -1.0 if side == "left" else 1.0
            column_x = sign * (outer + LEADER_OFFSET)
            resolved = relax_column(
                [StackItem(key=i, y=p.y, height=p.height) for i, p in enumerate(column)],
                top,
                bottom,
            )
            for i, p in enumerate(column):
                y = resolved[i]
                p.leader_line = p.leader_line + [(column_x, y)]
                p.x = column_x + sign * LEADER_LABEL_GAP
                p.y = y
        return placements
