"""Chart analysis: the measured facts every layout strategy starts from."""

from __future__ import annotations

from dataclasses import dataclass

from smart_layout.layout.constants import (
    HERO_VALUE_MULTIPLIER,
    LABEL_WEIGHT,
    LEGEND_FONT_SCALE,
    TITLE_FONT_SCALE,
)
from smart_layout.layout.formatting import format_value
from smart_layout.layout.metrics import FontSpec, TextMetricsProvider
from smart_layout.layout.rules import (
    LayoutRules,
    ModeModifiers,
    get_mode_modifiers,
    get_rules_for_type,
)
from smart_layout.parser.model import (
    AvailableSpace,
    ChartDescription,
    ChartStyle,
    GridConfig,
)


@dataclass(frozen=True)
class ChartAnalysis:
    """Derived, immutable summary of a chart and the box it renders into."""

    chart_type: str
    mode: str
    category_count: int
    dataset_count: int
    max_value: float
    min_value: float
    max_label_width: float
    max_value_width: float
    needs_legend: bool
    legend_position: str | None
    title: str
    available: AvailableSpace

    @property
    def has_title(self) -> bool:
        return bool(self.title.strip())


@dataclass
class LayoutContext:
    """Everything a layout strategy reads, bundled for one compute call."""

    chart: ChartDescription
    analysis: ChartAnalysis
    rules: LayoutRules
    modifiers: ModeModifiers
    metrics: TextMetricsProvider
    target: str
    base_font_size: float

    @property
    def style(self) -> ChartStyle:
        return self.chart.resolved_style

    @property
    def mode(self) -> str:
        return self.analysis.mode

    @property
    def width(self) -> float:
        return self.analysis.available.width

    @property
    def height(self) -> float:
        return self.analysis.available.height

    def font(self, scale: float = 1.0, weight: str = "400") -> FontSpec:
        size = self.base_font_size * self.modifiers.font_size_multiplier * scale
        return FontSpec(self.style.font_family, size, weight)

    def label_font(self) -> FontSpec:
        return self.font(weight=LABEL_WEIGHT.get(self.mode, "500"))

    def legend_font(self) -> FontSpec:
        return self.font(LEGEND_FONT_SCALE)

    def title_font(self) -> FontSpec:
        return self.font(TITLE_FONT_SCALE, "700")

    def text_width(self, text: str, font: FontSpec) -> float:
        return self.metrics.text_width(text, font, self.target)

    def line_height(self, font: FontSpec) -> float:
        return self.metrics.line_height(font, self.target)

    def format(self, value: float) -> str:
        return format_value(value, self.style.number_format)


def label_value_font(style: ChartStyle, base_font_size: float) -> FontSpec:
    """Font of the widest (hero) value label in ``style``'s mode."""
    multiplier = HERO_VALUE_MULTIPLIER.get(style.mode, 1.0)
    weight = LABEL_WEIGHT.get(style.mode, "500")
    return FontSpec(style.font_family, base_font_size * multiplier, weight)


def resolve_base_font_size(grid_config: GridConfig | None) -> float:
    return (grid_config or GridConfig()).base_font_px


def analyze_chart(
    chart: ChartDescription,
    grid_config: GridConfig | None,
    space: AvailableSpace,
    metrics: TextMetricsProvider,
    target: str = "screen",
) -> ChartAnalysis:
    """Measure the labels and values of ``chart``.

    ``max_value`` is never below 1 and ``min_value`` never above 0.
    """
    style = chart.resolved_style
    mode = style.mode
    base = resolve_base_font_size(grid_config)
    modifiers = get_mode_modifiers(mode)

    values = chart.all_values()
    max_value = max(values + [1.0])
    min_value = min(values + [0.0])

    categories = chart.data.labels
    label_font = FontSpec(
        style.font_family,
        base * modifiers.font_size_multiplier,
        LABEL_WEIGHT.get(mode, "500"),
    )
    max_label_width = max(
        (metrics.text_width(label, label_font, target) for label in categories),
        default=0.0,
    )

    value_font = label_value_font(style, base)
    max_value_width = max(
        metrics.text_width(format_value(v, style.number_format), value_font, target)
        for v in (max_value, min_value)
    )

    legend_position = style.legend_position
    needs_legend = len(chart.data.datasets) > 1 and legend_position != "none"

    return ChartAnalysis(
        chart_type=chart.type or "bar",
        mode=mode,
        category_count=len(categories),
        dataset_count=len(chart.data.datasets),
        max_value=max_value,
        min_value=min_value,
        max_label_width=max_label_width,
        max_value_width=max_value_width,
        needs_legend=needs_legend,
        legend_position=legend_position,
        title=chart.title or "",
        available=AvailableSpace(space.width, space.height),
    )


def build_context(
    chart: ChartDescription,
    grid_config: GridConfig | None,
    space: AvailableSpace,
    metrics: TextMetricsProvider,
    target: str = "screen",
) -> LayoutContext:
    analysis = analyze_chart(chart, grid_config, space, metrics, target)
    return LayoutContext(
        chart=chart,
        analysis=analysis,
        rules=get_rules_for_type(analysis.chart_type),
        modifiers=get_mode_modifiers(analysis.mode),
        metrics=metrics,
        target=target,
        base_font_size=resolve_base_font_size(grid_config),
    )
