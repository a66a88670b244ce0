"""Legend footprint computation."""

from __future__ import annotations

from dataclasses import dataclass, field

from smart_layout.layout.constants import (
    LEGEND_ITEM_GAP,
    LEGEND_PADDING,
    LEGEND_ROW_GAP,
    LEGEND_SWATCH,
    LEGEND_SWATCH_GAP,
)
from smart_layout.layout.metrics import FontSpec, TextMetricsProvider, text_metrics

HORIZONTAL_POSITIONS = ("top", "bottom")


@dataclass
class LegendDimensions:
    """Size of a legend box and how its items were packed."""

    width: float = 0.0
    height: float = 0.0
    rows: list[list[int]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def legend_item_width(
    label: str,
    font: FontSpec,
    metrics: TextMetricsProvider | None = None,
    target: str = "screen",
) -> float:
    """Width of one swatch-plus-text legend entry."""
    metrics = metrics or text_metrics
    return LEGEND_SWATCH + LEGEND_SWATCH_GAP + metrics.text_width(label, font, target)


def compute_legend_dimensions(
    items: list[str],
    position: str,
    container_width: float,
    font: FontSpec,
    metrics: TextMetricsProvider | None = None,
    target: str = "screen",
) -> LegendDimensions:
    """Compute the width and height of a legend without drawing it.

    Top and bottom legends pack items left to right and start a new row
    whenever the next item would overflow the container. Left and right
    legends stack one item per row. Returns an empty box for no items.
    """
    if not items or position == "none":
        return LegendDimensions()

    metrics = metrics or text_metrics
    widths = [legend_item_width(label, font, metrics, target) for label in items]
    line_height = metrics.line_height(font, target)

    if position in HORIZONTAL_POSITIONS:
        available = max(0.0, container_width - 2 * LEGEND_PADDING)
        rows: list[list[int]] = [[]]
        row_widths = [0.0]
        for index, width in enumerate(widths):
            if rows[-1]:
                needed = row_widths[-1] + LEGEND_ITEM_GAP + width
                if needed > available:
                    rows.append([index])
                    row_widths.append(width)
                    continue
                row_widths[-1] = needed
            else:
                row_widths[-1] = width
            rows[-1].append(index)
        width = min(container_width, max(row_widths) + 2 * LEGEND_PADDING)
    else:
        rows = [[index] for index in range(len(items))]
        width = max(widths) + 2 * LEGEND_PADDING

    count = len(rows)
    height = count * line_height + (count - 1) * LEGEND_ROW_GAP + 2 * LEGEND_PADDING
    return LegendDimensions(width=width, height=height, rows=rows)
