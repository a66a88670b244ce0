"""Squarified treemap layout with an editorial label-density limit."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from smart_layout.layout.analysis import LayoutContext
from smart_layout.layout.colors import best_contrast_color, ensure_distinct_colors
from smart_layout.layout.constants import (
    EXTERNAL_ITEM_GAP,
    EXTERNAL_ITEM_MIN_HEIGHT,
    LABEL_WEIGHT,
    LEADER_LABEL_GAP,
    LEGIBILITY_FLOOR_PX,
    MIN_EXTERNAL_AREA,
    TREEMAP_BASE_MARGIN,
    TREEMAP_COLUMN_GAP,
    TREEMAP_COLUMN_MAX_RATIO,
    TREEMAP_EXTERNAL_MULTIPLIER,
    TREEMAP_LABEL_PAD,
    TREEMAP_MULTIPLIERS,
)
from smart_layout.layout.labels import distribute_centered
from smart_layout.layout.legend import LegendDimensions
from smart_layout.layout.margins import (
    add_legend,
    apply_export_padding,
    build_zones,
    check_overflow,
    legend_dimensions,
    top_margin,
)
from smart_layout.layout.metrics import FontSpec
from smart_layout.layout.result import (
    ComputedLayout,
    Margins,
    SpiderLeg,
    TreemapCell,
    TreemapDetails,
    Zone,
)
from smart_layout.layout.wrapping import wrap_label

logger = logging.getLogger(__name__)

Rect = tuple[float, float, float, float]


def _worst_ratio(row: list[float], side: float) -> float:
    total = sum(row)
    side_sq = side * side
    return max(side_sq * max(row) / (total * total), (total * total) / (side_sq * min(row)))


def squarify(values: list[float], x: float, y: float, width: float, height: float) -> list[Rect]:
    """Partition the rectangle into areas proportional to ``values``.

    ``values`` should be positive and sorted descending. Rows grow while the
    worst aspect ratio does not get worse, and are laid along the shorter
    side of the remaining rectangle. Returns one (x, y, w, h) per value.
    """
    total = sum(values)
    if not values or total <= 0 or width <= 0 or height <= 0:
        return [(x, y, 0.0, 0.0) for _ in values]

    scale = width * height / total
    areas = [v * scale for v in values]
    rects: list[Rect] = []
    i = 0
    while i < len(areas):
        side = min(width, height)
        row = [areas[i]]
        i += 1
        while i < len(areas) and side > 0:
            if _worst_ratio(row + [areas[i]], side) <= _worst_ratio(row, side):
                row.append(areas[i])
                i += 1
            else:
                break

        row_sum = sum(row)
        if width >= height:
            column_width = row_sum / height if height > 0 else 0.0
            cursor = y
            for area in row:
                cell_height = area / column_width if column_width > 0 else 0.0
                rects.append((x, cursor, column_width, cell_height))
                cursor += cell_height
            x += column_width
            width = max(0.0, width - column_width)
        else:
            row_height = row_sum / width if width > 0 else 0.0
            cursor = x
            for area in row:
                cell_width = area / row_height if row_height > 0 else 0.0
                rects.append((cursor, y, cell_width, row_height))
                cursor += cell_width
            y += row_height
            height = max(0.0, height - row_height)
    return rects


def nearest_edge(cell: Rect, plot: Zone) -> str:
    """Plot edge closest to the center of ``cell``."""
    cx = cell[0] + cell[2] / 2
    cy = cell[1] + cell[3] / 2
    distances = {
        "left": cx - plot.x,
        "right": plot.right - cx,
        "top": cy - plot.y,
        "bottom": plot.bottom - cy,
    }
    return min(distances, key=distances.get)


def edge_exit(cell: Rect, edge: str) -> tuple[float, float]:
    """Midpoint of the side of ``cell`` that faces plot edge ``edge``."""
    x, y, w, h = cell
    if edge == "left":
        return (x, y + h / 2)
    if edge == "top":
        return (x + w / 2, y)
    if edge == "bottom":
        return (x + w / 2, y + h)
    return (x + w, y + h / 2)


@dataclass
class _Item:
    index: int
    label: str
    value: float
    color: str
    is_hero: bool
    external_lines: list[str] = field(default_factory=list)
    external_width: float = 0.0
    external_height: float = 0.0
    external_font: float = 0.0


class TreemapStrategy:
    """Treemap cells and their label placements."""

    name = "treemap"

    def compute(self, ctx: LayoutContext) -> ComputedLayout:
        items = self._prepare(ctx)
        layout = self._solve(ctx, items, column_width=0.0)
        details = layout.type_specific
        externals = [c for c in details.cells if c.strategy == "external"]
        if externals:
            by_index = {item.index: item for item in items}
            widest = max(by_index[c.index].external_width for c in externals)
            column = min(ctx.width * TREEMAP_COLUMN_MAX_RATIO, widest + TREEMAP_COLUMN_GAP)
            layout = self._solve(ctx, items, column_width=column)
        return layout

    def _block(
        self, ctx: LayoutContext, item: _Item, font: FontSpec, wrap_width: float
    ) -> tuple[list[str], float, float]:
        lines = []
        if ctx.style.infographic_config.show_category_label and item.label:
            lines = wrap_label(item.label, wrap_width, font, ctx.metrics, ctx.target).lines
        lines.append(ctx.format(item.value))
        width = max(ctx.text_width(line, font) for line in lines)
        return lines, width, len(lines) * ctx.line_height(font)

    def _prepare(self, ctx: LayoutContext) -> list[_Item]:
        labels = ctx.chart.data.labels
        values = ctx.chart.primary_values()
        colors = ensure_distinct_colors(ctx.style.color_palette, len(values))
        positive = [(i, float(v)) for i, v in enumerate(values) if v > 0]
        if not positive:
            return []
        positive.sort(key=lambda pair: -pair[1])

        hero_index = ctx.style.infographic_config.hero_value_index
        if hero_index is None or not any(i == hero_index for i, _ in positive):
            hero_index = positive[0][0]

        weight = LABEL_WEIGHT.get(ctx.mode, "500")
        wrap_width = ctx.width * TREEMAP_COLUMN_MAX_RATIO - TREEMAP_COLUMN_GAP
        items = []
        for i, v in positive:
            item = _Item(
                index=i,
                label=labels[i] if i < len(labels) else "",
                value=v,
                color=colors[i],
                is_hero=i == hero_index,
            )
            multiplier = TREEMAP_EXTERNAL_MULTIPLIER.get((ctx.mode, item.is_hero), 1.0)
            font = FontSpec(ctx.style.font_family, ctx.base_font_size * multiplier, weight)
            lines, width, height = self._block(ctx, item, font, wrap_width)
            item.external_lines = lines
            item.external_width = width
            item.external_height = height
            item.external_font = font.size
            items.append(item)
        return items

    def _fit(self, ctx: LayoutContext, item: _Item, rect: Rect) -> TreemapCell:
        x, y, w, h = rect
        total = sum(v for v in ctx.chart.primary_values() if v > 0)
        cell = TreemapCell(
            index=item.index,
            label=item.label,
            value=item.value,
            percent=item.value / total * 100 if total > 0 else 0.0,
            x=x,
            y=y,
            width=w,
            height=h,
            color=item.color,
            text_color=best_contrast_color(item.color),
            is_hero=item.is_hero,
        )
        avail_w = w - 2 * TREEMAP_LABEL_PAD
        avail_h = h - 2 * TREEMAP_LABEL_PAD
        weight = LABEL_WEIGHT.get(ctx.mode, "500")

        if avail_w > 0 and avail_h > 0:
            for multiplier in TREEMAP_MULTIPLIERS[(ctx.mode, item.is_hero)]:
                size = ctx.base_font_size * multiplier
                if size < LEGIBILITY_FLOOR_PX:
                    continue
                font = FontSpec(ctx.style.font_family, size, weight)
                lines, block_w, block_h = self._block(ctx, item, font, avail_w)
                if block_w <= avail_w and block_h <= avail_h:
                    cell.strategy = "internal"
                    cell.font_size = size
                    cell.lines = lines
                    cell.block_width = block_w
                    cell.block_height = block_h
                    return cell

        show_all = ctx.style.infographic_config.show_all_labels
        if w * h >= MIN_EXTERNAL_AREA or item.is_hero or show_all:
            cell.strategy = "external"
            cell.font_size = item.external_font
            cell.lines = item.external_lines
            cell.block_width = item.external_width
            cell.block_height = item.external_height
        return cell

    def _solve(self, ctx: LayoutContext, items: list[_Item], column_width: float) -> ComputedLayout:
        analysis = ctx.analysis
        config = ctx.style.infographic_config

        base = TREEMAP_BASE_MARGIN * ctx.modifiers.margin_multiplier
        margins = Margins(base, base + column_width, base, base)
        margins.top = top_margin(ctx, default=base)

        position = config.legend_position or analysis.legend_position or ctx.rules.legend_position
        legend = LegendDimensions()
        wants_legend = analysis.needs_legend or config.legend_position not in (None, "none")
        if items and wants_legend and position != "none":
            legend = legend_dimensions(ctx, [item.label for item in items], position)
            add_legend(margins, legend, position)

        padding = apply_export_padding(margins, ctx.target)
        overflow = check_overflow(margins, ctx.width, ctx.height)
        zones = build_zones(ctx, margins, legend, position, padding)
        plot = zones.plot

        rects = squarify([item.value for item in items], plot.x, plot.y, plot.width, plot.height)
        cells = [self._fit(ctx, item, rect) for item, rect in zip(items, rects)]
        for cell in cells:
            if cell.strategy == "external":
                cell.edge = nearest_edge((cell.x, cell.y, cell.width, cell.height), plot)

        details = TreemapDetails(
            cells=cells,
            hero_index=next((item.index for item in items if item.is_hero), None),
            category_colors=ensure_distinct_colors(
                ctx.style.color_palette, len(ctx.chart.primary_values())
            ),
        )
        if column_width > 0:
            details.label_column = Zone(plot.right, plot.y, column_width, plot.height)
            self._admit_external(cells, plot, details)

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

    def _admit_external(self, cells: list[TreemapCell], plot: Zone, details: TreemapDetails) -> None:
        """Admit external labels into the column until it is full.

        Candidates rank hero first, then by value. The hero is always admitted.
        Admitted labels are ordered by cell position and centered as a block.
        Each leg leaves its cell through the side facing the nearest plot
        edge, then runs to its slot in the column.
        """
        candidates = sorted(
            (c for c in cells if c.strategy == "external"),
            key=lambda c: (not c.is_hero, -c.value, c.index),
        )
        admitted: list[TreemapCell] = []
        used = 0.0
        for cell in candidates:
            slot = max(EXTERNAL_ITEM_MIN_HEIGHT, cell.block_height)
            if cell.is_hero or used + slot <= plot.height:
                admitted.append(cell)
                used += slot + EXTERNAL_ITEM_GAP
            else:
                cell.strategy = "hidden"
                details.hidden_count += 1
        if details.hidden_count:
            logger.debug("treemap: suppressed %d external labels", details.hidden_count)

        admitted.sort(key=lambda c: (c.y, c.x))
        heights = [max(EXTERNAL_ITEM_MIN_HEIGHT, c.block_height) for c in admitted]
        centers = distribute_centered(heights, plot.y, plot.bottom, EXTERNAL_ITEM_GAP)
        column_x = plot.right + TREEMAP_COLUMN_GAP / 2
        for cell, y in zip(admitted, centers):
            rect = (cell.x, cell.y, cell.width, cell.height)
            exit_point = edge_exit(rect, cell.edge or "right")
            cell.spider_leg = SpiderLeg(
                points=[cell.center, exit_point, (column_x, y)],
                label_x=column_x + LEADER_LABEL_GAP,
                label_y=y,
                text_anchor="start",
            )
