"""SVG debug overlay of a computed layout using drawsvg.

Draws the computed geometry only: margin bands, zones, slice outlines,
treemap cells and leader lines. It never recomputes layout.
"""

from __future__ import annotations

import math

import drawsvg as draw

from smart_layout.layout.result import (
    CartesianDetails,
    ComputedLayout,
    RadialDetails,
    SliceGeometry,
    TreemapDetails,
    Zone,
)
from smart_layout.render.constants import (
    ANCHOR_RADIUS,
    BANNER_HEIGHT,
    FULL_CIRCLE_EPSILON,
    LEADER_STROKE_WIDTH,
    MARGIN_OPACITY,
    READOUT_FONT_SIZE,
    READOUT_INSET,
    SLICE_STROKE_WIDTH,
    ZONE_DASH,
    ZONE_STROKE_WIDTH,
)
from smart_layout.render.style import DEBUG_THEME, DebugTheme


def render_debug_svg(layout: ComputedLayout, theme: DebugTheme = DEBUG_THEME) -> str:
    """Render ``layout`` as an annotated SVG string."""
    width, height = layout.width, layout.height
    d = draw.Drawing(width, height)
    d.append(draw.Rectangle(0, 0, width, height, fill=theme.background_color))

    _render_margins(d, layout, theme)
    _render_zone(d, layout.zones.plot, theme.plot_stroke, theme, dashed=False)
    if layout.zones.legend is not None:
        _render_zone(d, layout.zones.legend, theme.legend_stroke, theme, dashed=True)
    if layout.zones.title is not None:
        _render_zone(d, layout.zones.title, theme.title_stroke, theme, dashed=True)

    details = layout.type_specific
    if isinstance(details, RadialDetails):
        _render_radial(d, details, theme)
    elif isinstance(details, TreemapDetails):
        _render_treemap(d, details, theme)
    elif isinstance(details, CartesianDetails):
        _render_cartesian(d, layout, details, theme)

    _render_readout(d, layout, theme)
    if layout.overflow_risk is not None:
        _render_overflow_banner(d, layout, theme)
    return d.as_svg()


def _render_margins(d: draw.Drawing, layout: ComputedLayout, theme: DebugTheme) -> None:
    m = layout.margins
    w, h = layout.width, layout.height
    bands = [
        (0, 0, w, m.top),
        (0, h - m.bottom, w, m.bottom),
        (0, m.top, m.left, h - m.top - m.bottom),
        (w - m.right, m.top, m.right, h - m.top - m.bottom),
    ]
    for x, y, bw, bh in bands:
        if bw <= 0 or bh <= 0:
            continue
        d.append(draw.Rectangle(
            x, y, bw, bh,
            fill=theme.margin_fill,
            fill_opacity=MARGIN_OPACITY,
            class_="margin-band",
        ))


def _render_zone(
    d: draw.Drawing, zone: Zone, stroke: str, theme: DebugTheme, dashed: bool
) -> None:
    kwargs = {"stroke_dasharray": ZONE_DASH} if dashed else {}
    d.append(draw.Rectangle(
        zone.x, zone.y, zone.width, zone.height,
        fill="none",
        stroke=stroke,
        stroke_width=ZONE_STROKE_WIDTH,
        class_="zone",
        **kwargs,
    ))


def _polar(cx: float, cy: float, radius: float, angle: float) -> tuple[float, float]:
    return (cx + radius * math.sin(angle), cy - radius * math.cos(angle))


def _slice_path(cx: float, cy: float, s: SliceGeometry, theme: DebugTheme):
    if s.visual_angle >= 2 * math.pi - FULL_CIRCLE_EPSILON:
        return draw.Circle(
            cx, cy, s.outer_radius,
            fill=s.color, fill_opacity=0.35,
            stroke=theme.text_color, stroke_width=SLICE_STROKE_WIDTH,
            class_="slice",
        )
    large_arc = 1 if s.visual_angle > math.pi else 0
    path = draw.Path(
        fill=s.color, fill_opacity=0.35,
        stroke=theme.text_color, stroke_width=SLICE_STROKE_WIDTH,
        class_="slice",
    )
    start_outer = _polar(cx, cy, s.outer_radius, s.start_angle)
    end_outer = _polar(cx, cy, s.outer_radius, s.end_angle)
    path.M(*start_outer)
    path.A(s.outer_radius, s.outer_radius, 0, large_arc, 1, *end_outer)
    if s.inner_radius > 0:
        end_inner = _polar(cx, cy, s.inner_radius, s.end_angle)
        start_inner = _polar(cx, cy, s.inner_radius, s.start_angle)
        path.L(*end_inner)
        path.A(s.inner_radius, s.inner_radius, 0, large_arc, 0, *start_inner)
    else:
        path.L(cx, cy)
    path.Z()
    return path


def _render_lines(
    d: draw.Drawing,
    lines: list[str],
    x: float,
    center_y: float,
    anchor: str,
    theme: DebugTheme,
) -> None:
    line_height = READOUT_FONT_SIZE * 1.2
    y = center_y - line_height * (len(lines) - 1) / 2
    for line in lines:
        d.append(draw.Text(
            line, READOUT_FONT_SIZE, x, y,
            fill=theme.text_color,
            font_family=theme.font_family,
            text_anchor=anchor,
            dominant_baseline="middle",
        ))
        y += line_height


def _render_polyline(d: draw.Drawing, points: list[tuple[float, float]], theme: DebugTheme) -> None:
    path = draw.Path(
        stroke=theme.leader_color,
        stroke_width=LEADER_STROKE_WIDTH,
        fill="none",
        class_="leader-line",
    )
    path.M(*points[0])
    for point in points[1:]:
        path.L(*point)
    d.append(path)
    d.append(draw.Circle(*points[0], ANCHOR_RADIUS, fill=theme.leader_color))


def _render_radial(d: draw.Drawing, details: RadialDetails, theme: DebugTheme) -> None:
    cx, cy = details.center
    if details.outer_radius <= 0:
        return
    for s in details.slices:
        if s.visual_angle > 0:
            d.append(_slice_path(cx, cy, s, theme))

    for placement in details.label_placements:
        if placement.strategy == "hidden":
            continue
        x, y = cx + placement.x, cy + placement.y
        if placement.leader_line:
            _render_polyline(d, [(cx + px, cy + py) for px, py in placement.leader_line], theme)
        _render_lines(d, placement.lines, x, y, placement.text_anchor, theme)


def _render_treemap(d: draw.Drawing, details: TreemapDetails, theme: DebugTheme) -> None:
    for cell in details.cells:
        d.append(draw.Rectangle(
            cell.x, cell.y, cell.width, cell.height,
            fill=cell.color,
            fill_opacity=0.35,
            stroke=theme.text_color,
            stroke_width=SLICE_STROKE_WIDTH,
            class_=f"cell cell-{cell.strategy}",
        ))
        if cell.strategy == "internal":
            cx, cy = cell.center
            _render_lines(d, cell.lines, cx, cy, "middle", theme)
        elif cell.spider_leg is not None:
            leg = cell.spider_leg
            _render_polyline(d, leg.points, theme)
            _render_lines(d, cell.lines, leg.label_x, leg.label_y, leg.text_anchor, theme)

    if details.label_column is not None:
        _render_zone(d, details.label_column, theme.leader_color, theme, dashed=True)


def _render_cartesian(
    d: draw.Drawing,
    layout: ComputedLayout,
    details: CartesianDetails,
    theme: DebugTheme,
) -> None:
    plot = layout.zones.plot
    if details.bar_thickness is not None and details.wrapped_labels:
        count = len(details.wrapped_labels)
        horizontal = layout.chart_type == "bar"
        band = (plot.height if horizontal else plot.width) / count
        for i in range(count):
            offset = band * i + (band - details.bar_thickness) / 2
            if horizontal:
                rect = (plot.x, plot.y + offset, plot.width / 2, details.bar_thickness)
            else:
                rect = (plot.x + offset, plot.y + plot.height / 2, details.bar_thickness, plot.height / 2)
            d.append(draw.Rectangle(
                *rect,
                fill="none",
                stroke=theme.hidden_color,
                stroke_width=SLICE_STROKE_WIDTH,
                class_="bar-slot",
            ))


def _render_readout(d: draw.Drawing, layout: ComputedLayout, theme: DebugTheme) -> None:
    m = layout.margins
    text = (
        f"{layout.chart_type} [{layout.target}] "
        f"T{m.top:.0f} R{m.right:.0f} B{m.bottom:.0f} L{m.left:.0f}"
    )
    d.append(draw.Text(
        text, READOUT_FONT_SIZE,
        READOUT_INSET, layout.height - READOUT_INSET,
        fill=theme.text_color,
        font_family=theme.font_family,
        class_="readout",
    ))


def _render_overflow_banner(d: draw.Drawing, layout: ComputedLayout, theme: DebugTheme) -> None:
    d.append(draw.Rectangle(
        0, 0, layout.width, BANNER_HEIGHT,
        fill=theme.warning_fill,
        class_="overflow-banner",
    ))
    message = "; ".join(layout.overflow_risk.warnings)
    d.append(draw.Text(
        f"Overflow risk: {message}", READOUT_FONT_SIZE,
        READOUT_INSET, BANNER_HEIGHT - READOUT_INSET,
        fill=theme.warning_text,
        font_family=theme.font_family,
    ))
