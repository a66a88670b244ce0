"""Data model for chart layout inputs."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_BASE_FONT_SIZE: float = 11.0
DEFAULT_FONT_FAMILY: str = "Inter, sans-serif"
# Grid font units to CSS pixels (96 DPI)
FONT_UNIT_TO_PX: dict[str, float] = {"px": 1.0, "pt": 1.333, "mm": 3.78}

CHART_TYPES = (
    "bar",
    "column",
    "line",
    "area",
    "pie",
    "donut",
    "scatter",
    "bubble",
    "radar",
    "histogram",
    "mixed",
    "boxplot",
    "pictogram",
    "treemap",
)

MODES = ("classic", "infographic")
LEGEND_POSITIONS = ("top", "bottom", "left", "right", "none")
LABEL_LAYOUTS = ("radial", "column-left", "column-right", "balanced")
NUMBER_FORMAT_TYPES = ("number", "percent", "currency")
TARGETS = ("screen", "pdf")


@dataclass
class Dataset:
    """One data series."""

    label: str
    data: list[float] = field(default_factory=list)


@dataclass
class ChartData:
    """Categories and the series plotted against them.

    ``labels[i]`` is the category of ``data[i]`` in every dataset; the
    lengths are not required to match.
    """

    labels: list[str] = field(default_factory=list)
    datasets: list[Dataset] = field(default_factory=list)
    x_axis_label: str = ""
    y_axis_label: str = ""


@dataclass
class NumberFormat:
    """How values are displayed."""

    type: str = "number"
    currency: str = "USD"
    decimals: int | None = None
    scale: float | None = None


@dataclass
class InfographicConfig:
    """Editorial options of infographic-mode charts."""

    hero_value_index: int | None = None
    label_layout: str = "radial"
    show_all_labels: bool = False
    auto_sort: bool = False
    show_category_label: bool = True
    legend_position: str | None = None


@dataclass
class ChartStyle:
    """Visual style of a chart."""

    color_palette: list[str] = field(default_factory=list)
    font_family: str = DEFAULT_FONT_FAMILY
    mode: str = "classic"
    legend_position: str | None = None
    number_format: NumberFormat | None = None
    infographic_config: InfographicConfig = field(default_factory=InfographicConfig)


@dataclass
class GridConfig:
    """Page grid and typography of a project.

    The layout engine only reads the base font; the rest describes the page
    the chart modules sit on.
    """

    base_font_size: float = DEFAULT_BASE_FONT_SIZE
    base_font_unit: str = "px"
    columns: int = 12
    rows: int = 8
    gutter: float = 16.0
    margin: float = 24.0
    page_format: str = "A4"
    orientation: str = "portrait"
    width: float = 210.0
    height: float = 297.0

    @property
    def base_font_px(self) -> float:
        """Base font size converted to pixels."""
        return self.base_font_size * FONT_UNIT_TO_PX.get(self.base_font_unit, 1.0)


@dataclass
class AvailableSpace:
    """Pixel box a chart must occupy."""

    width: float
    height: float

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height > 0 else 0.0


@dataclass
class ChartDescription:
    """Complete chart definition handed to the layout engine."""

    type: str = "bar"
    data: ChartData = field(default_factory=ChartData)
    style: ChartStyle | None = None
    title: str = ""

    @property
    def resolved_style(self) -> ChartStyle:
        return self.style if self.style is not None else ChartStyle()

    def all_values(self) -> list[float]:
        """Return every value of every dataset, in dataset order."""
        return [v for ds in self.data.datasets for v in ds.data]

    def primary_values(self) -> list[float]:
        """Return the values of the first dataset (radial and treemap charts)."""
        if not self.data.datasets:
            return []
        return list(self.data.datasets[0].data)
