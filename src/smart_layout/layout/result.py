"""Computed layout: the geometry handed to a renderer."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Union

Point = tuple[float, float]


@dataclass
class Zone:
    """Rectangle in container pixels, origin at the top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class Margins:
    top: float
    right: float
    bottom: float
    left: float


@dataclass
class OverflowRisk:
    """Report of the overflow pass; only present when the plot was too small."""

    has_risk: bool
    warnings: list[str] = field(default_factory=list)
    applied_adjustments: bool = False


@dataclass
class Zones:
    plot: Zone
    legend: Zone | None = None
    title: Zone | None = None


# ---------------------------------------------------------------------------
# Cartesian
# ---------------------------------------------------------------------------


@dataclass
class CartesianDetails:
    """Bar/column-family geometry."""

    bar_thickness: float | None = None
    wrapped_labels: list[list[str]] = field(default_factory=list)
    estimated_label_lines: int = 1
    label_wrap_threshold_px: float = 0.0
    label_wrap_threshold: int = 0
    wrap_strategy: str = "minimal"
    is_stacked: bool = False
    stacked_label_height: float = 0.0
    dataset_colors: list[str] = field(default_factory=list)
    legend_rows: list[list[int]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Radial
# ---------------------------------------------------------------------------


@dataclass
class SliceGeometry:
    """One pie/donut wedge. Angles are radians clockwise from 12 o'clock."""

    index: int
    label: str
    value: float
    percent: float
    start_angle: float
    end_angle: float
    natural_angle: float
    inner_radius: float
    outer_radius: float
    color: str
    is_hero: bool = False

    @property
    def visual_angle(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2


@dataclass
class RadialLabel:
    """Label of one slice; coordinates are relative to the circle center."""

    index: int
    x: float
    y: float
    strategy: str  # internal | external | hidden
    lines: list[str] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0
    side: str | None = None
    text_anchor: str = "middle"
    leader_line: list[Point] | None = None


@dataclass
class RadialDetails:
    center: Point
    outer_radius: float
    inner_radius: float
    is_donut: bool
    lod: str
    total: float
    label_layout: str
    slices: list[SliceGeometry] = field(default_factory=list)
    label_placements: list[RadialLabel] = field(default_factory=list)
    category_colors: list[str] = field(default_factory=list)
    dataset_colors: list[str] = field(default_factory=list)

    @property
    def external_labels(self) -> list[RadialLabel]:
        return [p for p in self.label_placements if p.strategy == "external"]


# ---------------------------------------------------------------------------
# Treemap
# ---------------------------------------------------------------------------


@dataclass
class SpiderLeg:
    """Leader line from a cell center, out of the side facing the nearest
    plot edge, to its slot in the label column.
    """

    points: list[Point]
    label_x: float
    label_y: float
    text_anchor: str = "start"


@dataclass
class TreemapCell:
    index: int
    label: str
    value: float
    percent: float
    x: float
    y: float
    width: float
    height: float
    color: str
    text_color: str
    is_hero: bool = False
    strategy: str = "hidden"  # internal | external | hidden
    font_size: float = 0.0
    lines: list[str] = field(default_factory=list)
    block_width: float = 0.0
    block_height: float = 0.0
    edge: str | None = None
    spider_leg: SpiderLeg | None = None

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class TreemapDetails:
    cells: list[TreemapCell] = field(default_factory=list)
    hero_index: int | None = None
    label_column: Zone | None = None
    hidden_count: int = 0
    category_colors: list[str] = field(default_factory=list)


TypeSpecific = Union[CartesianDetails, RadialDetails, TreemapDetails]

_VARIANT_NAMES = {
    CartesianDetails: "cartesian",
    RadialDetails: "radial",
    TreemapDetails: "treemap",
}


@dataclass
class ComputedLayout:
    """Final geometry of one chart. Created fresh by every compute call."""

    chart_type: str
    target: str
    width: float
    height: float
    margins: Margins
    zones: Zones
    type_specific: TypeSpecific
    overflow_risk: OverflowRisk | None = None

    @property
    def plot(self) -> Zone:
        return self.zones.plot

    @property
    def variant(self) -> str:
        return _VARIANT_NAMES[type(self.type_specific)]


def layout_to_dict(layout: ComputedLayout) -> dict:
    """Convert ``layout`` to plain JSON-ready containers."""
    data = asdict(layout)
    data["container"] = {"width": data.pop("width"), "height": data.pop("height")}
    data["variant"] = layout.variant
    return data
