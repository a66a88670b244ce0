"""Per-chart-type layout rules and mode modifiers."""

from __future__ import annotations

from dataclasses import dataclass

from smart_layout.layout.constants import BASE_MARGIN_SIDE, COMPACT_MARGIN_SIDE


@dataclass(frozen=True)
class LayoutRules:
    """How a chart family distributes its margins.

    ``margin_priority`` lists the sides computed from content, in order;
    sides it does not name keep their base margin. ``("all-equal",)``
    keeps every side at the same base margin. ``category_axis`` is the side
    category labels sit on, if any.
    """

    legend_position: str
    margin_priority: tuple[str, ...]
    category_axis: str | None = None
    base_side_margin: float = BASE_MARGIN_SIDE

    @property
    def equal_margins(self) -> bool:
        return "all-equal" in self.margin_priority


@dataclass(frozen=True)
class ModeModifiers:
    """Scaling applied by a presentation mode."""

    font_size_multiplier: float
    margin_multiplier: float


BAR_RULES = LayoutRules(
    legend_position="bottom",
    margin_priority=("left", "bottom", "right", "top"),
    category_axis="left",
)

# Value axis first: the category band width depends on it.
COLUMN_RULES = LayoutRules(
    legend_position="bottom",
    margin_priority=("left", "bottom", "top"),
    category_axis="bottom",
    base_side_margin=COMPACT_MARGIN_SIDE,
)

RADIAL_RULES = LayoutRules(
    legend_position="top",
    margin_priority=("all-equal",),
)

TREEMAP_RULES = LayoutRules(
    legend_position="bottom",
    margin_priority=("bottom",),
)

DEFAULT_RULES = LayoutRules(
    legend_position="bottom",
    margin_priority=("all-equal",),
)

COLUMN_FAMILY = (
    "column",
    "line",
    "area",
    "scatter",
    "bubble",
    "histogram",
    "mixed",
    "boxplot",
    "pictogram",
)
RADIAL_FAMILY = ("pie", "donut", "radar")

MODE_MODIFIERS: dict[str, ModeModifiers] = {
    "classic": ModeModifiers(1.0, 1.0),
    "infographic": ModeModifiers(1.2, 1.5),
}


def get_rules_for_type(chart_type: str) -> LayoutRules:
    """Return the layout rules of ``chart_type``; unknown types get defaults."""
    if chart_type == "bar":
        return BAR_RULES
    if chart_type in COLUMN_FAMILY:
        return COLUMN_RULES
    if chart_type in RADIAL_FAMILY:
        return RADIAL_RULES
    if chart_type == "treemap":
        return TREEMAP_RULES
    return DEFAULT_RULES


def get_mode_modifiers(mode: str) -> ModeModifiers:
    return MODE_MODIFIERS.get(mode, MODE_MODIFIERS["classic"])
