"""Layout coordinator: analyzes a chart and dispatches to a layout strategy.

Strategies share one contract, ``compute(ctx) -> ComputedLayout``, and are
looked up by chart type: pie and donut go radial, treemap goes treemap and
everything else is cartesian.
"""

from __future__ import annotations

import logging
from typing import Protocol

from smart_layout.layout.analysis import ChartAnalysis, LayoutContext, build_context
from smart_layout.layout.analysis import analyze_chart as _analyze
from smart_layout.layout.cartesian import CartesianStrategy
from smart_layout.layout.metrics import TextMetricsProvider, text_metrics
from smart_layout.layout.radial import RadialStrategy
from smart_layout.layout.result import ComputedLayout
from smart_layout.layout.treemap import TreemapStrategy
from smart_layout.parser.model import AvailableSpace, ChartDescription, GridConfig

logger = logging.getLogger(__name__)


class LayoutStrategy(Protocol):
    name: str

    def compute(self, ctx: LayoutContext) -> ComputedLayout: ...


CARTESIAN = CartesianStrategy()
RADIAL = RadialStrategy()
TREEMAP = TreemapStrategy()

LAYOUT_STRATEGIES: dict[str, LayoutStrategy] = {
    "pie": RADIAL,
    "donut": RADIAL,
    "treemap": TREEMAP,
}


def select_strategy(chart_type: str) -> LayoutStrategy:
    return LAYOUT_STRATEGIES.get(chart_type, CARTESIAN)


def _as_space(space: AvailableSpace | tuple[float, float]) -> AvailableSpace:
    if isinstance(space, AvailableSpace):
        return AvailableSpace(space.width, space.height)
    width, height = space
    return AvailableSpace(float(width), float(height))


def analyze_chart(
    chart: ChartDescription,
    grid_config: GridConfig | None = None,
    space: AvailableSpace | tuple[float, float] = (600.0, 400.0),
    target: str = "screen",
    metrics: TextMetricsProvider | None = None,
) -> ChartAnalysis:
    """Measure ``chart`` without laying it out."""
    return _analyze(chart, grid_config, _as_space(space), metrics or text_metrics, target)


def compute_layout(
    chart: ChartDescription,
    grid_config: GridConfig | None = None,
    space: AvailableSpace | tuple[float, float] = (600.0, 400.0),
    target: str = "screen",
    metrics: TextMetricsProvider | None = None,
) -> ComputedLayout:
    """Compute the complete geometry of ``chart`` inside ``space``.

    The result is a pure function of the inputs and of what ``metrics``
    measures; nothing is retained between calls.
    """
    ctx = build_context(chart, grid_config, _as_space(space), metrics or text_metrics, target)
    strategy = select_strategy(ctx.analysis.chart_type)
    logger.debug(
        "Laying out %s chart (%s mode) in %.0fx%.0f for %s with %s strategy",
        ctx.analysis.chart_type,
        ctx.mode,
        ctx.width,
        ctx.height,
        target,
        strategy.name,
    )
    return strategy.compute(ctx)
