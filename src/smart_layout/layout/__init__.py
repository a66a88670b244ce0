"""Chart layout engine: margins, zones and per-family geometry."""

from smart_layout.layout.engine import analyze_chart, compute_layout, select_strategy
from smart_layout.layout.metrics import TextMetricsProvider, text_metrics
from smart_layout.layout.result import ComputedLayout, layout_to_dict

__all__ = [
    "ComputedLayout",
    "TextMetricsProvider",
    "analyze_chart",
    "compute_layout",
    "layout_to_dict",
    "select_strategy",
    "text_metrics",
]
