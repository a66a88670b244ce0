"""Cartesian layout: bar charts and the column family."""

from __future__ import annotations

import logging

from smart_layout.layout.analysis import LayoutContext
from smart_layout.layout.colors import ensure_distinct_colors
from smart_layout.layout.constants import (
    AXIS_LABEL_PAD,
    BAR_FILL_RATIO,
    BAR_FILL_RATIO_DENSE,
    BAR_FILL_RATIO_SPARSE,
    BAR_MAX_THICKNESS,
    BAR_MAX_THICKNESS_DENSE,
    BAR_MAX_THICKNESS_SPARSE,
    BAR_MIN_THICKNESS,
    BASE_MARGIN_VERTICAL,
    CHAR_WIDTH_RATIO,
    DENSE_DENSITY,
    LABEL_GUTTER,
    MIN_VALUE_MARGIN,
    SPARSE_DENSITY,
    SPARSE_MIN_HEIGHT,
    STACKED_LABEL_CHARS,
    STACKED_LABEL_WIDTH_RATIO,
    VALUE_SAFETY_GAP,
)
from smart_layout.layout.legend import LegendDimensions
from smart_layout.layout.margins import (
    add_legend,
    apply_export_padding,
    bottom_margin,
    build_zones,
    check_overflow,
    enforce_symmetry,
    legend_dimensions,
    resolve_legend_position,
    top_margin,
)
from smart_layout.layout.result import CartesianDetails, ComputedLayout, Margins
from smart_layout.layout.wrapping import calculate_smart_margin, wrap_label

logger = logging.getLogger(__name__)

BAR_TYPES = ("bar", "column", "histogram", "mixed")


def is_stacked_layout(ctx: LayoutContext) -> bool:
    """Whether bar category labels move above their bars.

    Triggered by infographic mode, a label longer than 15 characters, or a
    label wider than a quarter of the container.
    """
    if ctx.analysis.chart_type != "bar":
        return False
    if ctx.mode == "infographic":
        return True
    labels = ctx.chart.data.labels
    if any(len(label) > STACKED_LABEL_CHARS for label in labels):
        return True
    return ctx.analysis.max_label_width > ctx.width * STACKED_LABEL_WIDTH_RATIO


def value_margin(ctx: LayoutContext) -> float:
    """Margin on the value-axis side, sized for the widest formatted value."""
    gap = VALUE_SAFETY_GAP.get(ctx.mode, VALUE_SAFETY_GAP["classic"])
    return max(MIN_VALUE_MARGIN, ctx.analysis.max_value_width + gap)


def compute_bar_thickness(
    extent: float,
    category_count: int,
    dataset_count: int,
    label_block: float = 0.0,
) -> float:
    """Bar thickness that fills the category bands without looking bloated.

    ``extent`` is the plot length along the category axis; ``label_block`` is
    the per-category height taken by stacked labels.
    """
    categories = category_count or 1
    space_per_category = max(0.0, extent / categories - label_block)
    density = categories / (extent / 100) if extent > 0 else float("inf")

    fill, cap = BAR_FILL_RATIO, BAR_MAX_THICKNESS
    if density < SPARSE_DENSITY and extent > SPARSE_MIN_HEIGHT:
        fill, cap = BAR_FILL_RATIO_SPARSE, BAR_MAX_THICKNESS_SPARSE
    elif density > DENSE_DENSITY:
        fill, cap = BAR_FILL_RATIO_DENSE, BAR_MAX_THICKNESS_DENSE

    divider = dataset_count if dataset_count > 1 else 1
    thickness = space_per_category * fill / divider
    return max(min(thickness, cap), BAR_MIN_THICKNESS)


class CartesianStrategy:
    """Margins and bar geometry for charts with category and value axes.

    Sides named in the chart family's ``margin_priority`` are computed from
    content in that order; the others keep the family's base margin.
    """

    name = "cartesian"

    def _category_side(self, ctx: LayoutContext, details: CartesianDetails) -> float:
        """Side margin for category labels beside the plot."""
        details.is_stacked = is_stacked_layout(ctx)
        label_font = ctx.label_font()
        smart = calculate_smart_margin(
            list(ctx.chart.data.labels),
            ctx.width,
            label_font,
            ctx.metrics,
            ctx.target,
            ctx.analysis.chart_type,
            is_stacked=details.is_stacked,
            mode=ctx.mode,
        )
        details.wrapped_labels = smart.wrapped_labels
        details.wrap_strategy = smart.strategy
        details.label_wrap_threshold_px = smart.wrap_width
        if details.is_stacked and smart.wrapped_labels:
            lines = max(len(wrapped) for wrapped in smart.wrapped_labels)
            details.stacked_label_height = lines * ctx.line_height(label_font) + LABEL_GUTTER
        return value_margin(ctx) if details.is_stacked else smart.margin

    def _category_axis_band(
        self, ctx: LayoutContext, margins: Margins, details: CartesianDetails
    ) -> float:
        """Height of wrapped category labels under the plot."""
        labels = list(ctx.chart.data.labels)
        if not labels:
            return 0.0
        label_font = ctx.label_font()
        band = (ctx.width - margins.left - margins.right) / len(labels)
        wrap_width = max(0.0, band - LABEL_GUTTER)
        details.wrapped_labels = [
            wrap_label(label, wrap_width, label_font, ctx.metrics, ctx.target).lines
            for label in labels
        ]
        details.label_wrap_threshold_px = wrap_width
        lines = max(len(wrapped) for wrapped in details.wrapped_labels)
        details.wrap_strategy = "tight" if lines > 1 else "no-wrap"
        return lines * ctx.line_height(label_font) + AXIS_LABEL_PAD

    def compute(self, ctx: LayoutContext) -> ComputedLayout:
        analysis = ctx.analysis
        rules = ctx.rules
        label_font = ctx.label_font()
        details = CartesianDetails()

        position = resolve_legend_position(ctx)
        legend = LegendDimensions()
        if analysis.needs_legend:
            items = [ds.label for ds in ctx.chart.data.datasets]
            legend = legend_dimensions(ctx, items, position)
            details.legend_rows = legend.rows

        if rules.equal_margins:
            equal = BASE_MARGIN_VERTICAL * ctx.modifiers.margin_multiplier
            margins = Margins(equal, equal, equal, equal)
            margins.top = top_margin(ctx, default=equal)
            add_legend(margins, legend, position)
        else:
            margins = Margins(
                top=BASE_MARGIN_VERTICAL,
                right=rules.base_side_margin,
                bottom=BASE_MARGIN_VERTICAL,
                left=rules.base_side_margin,
            )
            for side in rules.margin_priority:
                if side == "top":
                    margins.top = top_margin(ctx)
                elif side == "bottom":
                    axis_band = 0.0
                    if rules.category_axis == "bottom":
                        axis_band = self._category_axis_band(ctx, margins, details)
                    margins.bottom = bottom_margin(axis_band, legend, position)
                elif side == rules.category_axis:
                    setattr(margins, side, self._category_side(ctx, details))
                else:
                    setattr(margins, side, value_margin(ctx))
            if position != "bottom":
                add_legend(margins, legend, position)

        if analysis.chart_type == "bar":
            enforce_symmetry(margins)

        padding = apply_export_padding(margins, ctx.target)
        overflow = check_overflow(margins, ctx.width, ctx.height)
        zones = build_zones(ctx, margins, legend, position, padding)

        details.estimated_label_lines = max(
            (len(wrapped) for wrapped in details.wrapped_labels), default=1
        )
        char_width = label_font.size * CHAR_WIDTH_RATIO
        details.label_wrap_threshold = int(details.label_wrap_threshold_px // char_width)
        details.dataset_colors = ensure_distinct_colors(
            ctx.style.color_palette, analysis.dataset_count
        )

        if analysis.chart_type in BAR_TYPES:
            horizontal = analysis.chart_type == "bar"
            extent = zones.plot.height if horizontal else zones.plot.width
            details.bar_thickness = compute_bar_thickness(
                extent,
                analysis.category_count,
                analysis.dataset_count,
                details.stacked_label_height if horizontal else 0.0,
            )

        logger.debug(
            "cartesian %s: margins %s, stacked=%s",
            analysis.chart_type,
            margins,
            details.is_stacked,
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
