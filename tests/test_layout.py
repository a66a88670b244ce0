"""Tests for cartesian layout and the shared margin passes.

All figures use the estimating backend: 11px labels at weight 500 are
6.6px per character and one text line is 13.2px tall.
"""

from dataclasses import replace

import pytest

from smart_layout.layout import compute_layout
from smart_layout.layout.analysis import build_context
from smart_layout.layout.cartesian import CartesianStrategy, compute_bar_thickness
from smart_layout.layout.margins import check_overflow
from smart_layout.layout.result import CartesianDetails, Margins
from smart_layout.layout.rules import BAR_RULES, get_rules_for_type
from smart_layout.parser.model import (
    AvailableSpace,
    ChartData,
    ChartDescription,
    ChartStyle,
    Dataset,
)


def _chart(chart_type="bar", labels=None, datasets=None, style=None, title=""):
    labels = labels if labels is not None else ["A", "B", "C", "D", "E"]
    datasets = datasets or [Dataset("Values", [1, 2, 3, 4, 5][: len(labels)])]
    return ChartDescription(
        type=chart_type,
        data=ChartData(labels=labels, datasets=datasets),
        style=style,
        title=title,
    )


def _margins(layout):
    m = layout.margins
    return (m.top, m.right, m.bottom, m.left)


# ---------------------------------------------------------------------------
# Bar charts
# ---------------------------------------------------------------------------


def test_short_bar_labels_use_floor_margin(metrics):
    """Short bar labels fall back to the 55px floor."""
    layout = compute_layout(_chart(), space=(600, 400), metrics=metrics)
    assert _margins(layout) == pytest.approx((20.0, 55.0, 30.0, 55.0))
    assert layout.overflow_risk is None
    assert isinstance(layout.type_specific, CartesianDetails)
    assert layout.type_specific.wrapped_labels == [["A"], ["B"], ["C"], ["D"], ["E"]]


def test_bar_margins_are_symmetric(metrics):
    """Bar charts mirror the wider side margin."""
    labels = ["North America", "Europe", "Asia"]
    layout = compute_layout(_chart(labels=labels), space=(600, 400), metrics=metrics)
    assert layout.margins.left == layout.margins.right


def test_pdf_pads_every_side(metrics):
    """Print export adds 40px on every side on top of the screen margins."""
    layout = compute_layout(_chart(), space=(600, 400), target="pdf", metrics=metrics)
    assert _margins(layout) == pytest.approx((60.0, 95.0, 70.0, 95.0))
    assert layout.target == "pdf"


def test_pdf_label_margin_above_floor(metrics):
    """Above the 55px floor, print margins also carry calibration and a wider buffer."""
    labels = ["North America", "Europe", "Asia"]
    screen = compute_layout(_chart(labels=labels), space=(600, 400), metrics=metrics)
    pdf = compute_layout(
        _chart(labels=labels), space=(600, 400), target="pdf", metrics=metrics
    )
    # 13 chars at 6.6px plus 18px of padding, gutter and buffer.
    assert screen.margins.left == pytest.approx(103.8)
    # Width x1.10, a 15px buffer, then 40px export padding.
    assert pdf.margins.left == pytest.approx(159.38)
    assert pdf.margins.left > screen.margins.left + 40


def test_long_labels_stack_above_bars(metrics):
    """Labels over 15 characters move above their bars."""
    labels = ["A very long category label number one", "Another long category label"]
    datasets = [Dataset("Values", [1, 2])]
    layout = compute_layout(_chart(labels=labels, datasets=datasets), space=(600, 400), metrics=metrics)
    details = layout.type_specific
    assert details.is_stacked
    assert layout.margins.left == pytest.approx(40.0)
    assert layout.margins.right == pytest.approx(40.0)
    assert details.stacked_label_height == pytest.approx(17.2)
    assert details.wrapped_labels == [[label] for label in labels]


def test_very_long_labels_keep_narrow_symmetric_margins(metrics):
    """Hundred-character labels stack instead of widening the side margins."""
    labels = [("Long category description " * 4)[:100] for _ in range(3)]
    layout = compute_layout(_chart(labels=labels), space=(800, 400), metrics=metrics)
    assert layout.type_specific.is_stacked
    assert layout.margins.left == pytest.approx(layout.margins.right)
    assert layout.margins.left == pytest.approx(40.0)


def test_infographic_bar_is_stacked(metrics):
    """Infographic bars always stack their labels."""
    style = ChartStyle(mode="infographic")
    layout = compute_layout(_chart(style=style), space=(600, 400), metrics=metrics)
    assert layout.type_specific.is_stacked


def test_title_sets_top_margin(metrics):
    """A title sets the top margin and gets its own zone."""
    layout = compute_layout(_chart(title="Quarterly revenue"), space=(600, 400), metrics=metrics)
    assert layout.margins.top == pytest.approx(31.8)
    title = layout.zones.title
    assert title is not None
    assert (title.x, title.y) == (0.0, 0.0)
    assert title.height == pytest.approx(19.8)


def test_bottom_legend_for_multiple_datasets(metrics):
    """Several datasets add a centered bottom legend."""
    datasets = [Dataset("2023", [1, 2, 3, 4, 5]), Dataset("2024", [2, 3, 4, 5, 6])]
    layout = compute_layout(_chart(datasets=datasets), space=(600, 400), metrics=metrics)
    assert layout.margins.bottom == pytest.approx(37.22)
    legend = layout.zones.legend
    assert legend is not None
    assert legend.bottom == pytest.approx(400.0)
    assert legend.x == pytest.approx((600 - legend.width) / 2)
    assert len(set(layout.type_specific.dataset_colors)) == 2


def test_legend_none_hides_legend(metrics):
    """legend_position none drops the legend."""
    datasets = [Dataset("2023", [1, 2, 3, 4, 5]), Dataset("2024", [2, 3, 4, 5, 6])]
    style = ChartStyle(legend_position="none")
    layout = compute_layout(_chart(datasets=datasets, style=style), space=(600, 400), metrics=metrics)
    assert layout.zones.legend is None
    assert layout.margins.bottom == pytest.approx(30.0)


def test_right_legend_grows_right_margin(metrics):
    """A right legend sits in a wider right margin."""
    datasets = [Dataset("2023", [1, 2, 3, 4, 5]), Dataset("2024", [2, 3, 4, 5, 6])]
    style = ChartStyle(legend_position="right")
    layout = compute_layout(_chart("line", datasets=datasets, style=style), space=(600, 400), metrics=metrics)
    legend = layout.zones.legend
    assert legend is not None
    assert layout.margins.right > 20.0
    assert legend.x >= layout.zones.plot.right


def test_plot_zone_fills_the_remaining_space(metrics):
    """The plot zone is the container minus the margins."""
    layout = compute_layout(_chart(), space=(600, 400), metrics=metrics)
    m, plot = layout.margins, layout.zones.plot
    assert plot.x == m.left
    assert plot.y == m.top
    assert plot.width == pytest.approx(600 - m.left - m.right)
    assert plot.height == pytest.approx(400 - m.top - m.bottom)


def test_bar_thickness_in_layout(metrics):
    """Bar thickness is computed from the plot height."""
    layout = compute_layout(_chart(), space=(600, 400), metrics=metrics)
    assert layout.type_specific.bar_thickness == pytest.approx(49.0)


# ---------------------------------------------------------------------------
# Column family
# ---------------------------------------------------------------------------


def test_column_labels_on_bottom_axis(metrics):
    """Column charts put category labels on the bottom axis."""
    layout = compute_layout(
        _chart("column", labels=["Q1", "Q2"], datasets=[Dataset("Sales", [10, 20])]),
        space=(600, 400),
        metrics=metrics,
    )
    assert _margins(layout) == pytest.approx((20.0, 20.0, 30.0, 40.0))
    details = layout.type_specific
    assert details.wrapped_labels == [["Q1"], ["Q2"]]
    assert details.wrap_strategy == "no-wrap"
    assert details.label_wrap_threshold_px == pytest.approx(266.0)


def test_crowded_column_labels_wrap_and_grow_bottom(metrics):
    """Wrapped column labels grow the bottom margin."""
    labels = [f"Region number {i}" for i in range(1, 13)]
    layout = compute_layout(
        _chart("column", labels=labels, datasets=[Dataset("Sales", list(range(12)))]),
        space=(600, 400),
        metrics=metrics,
    )
    details = layout.type_specific
    assert details.estimated_label_lines > 1
    assert layout.margins.bottom == pytest.approx(details.estimated_label_lines * 13.2 + 12)


def test_large_values_widen_value_margin(metrics):
    """The value axis fits the widest formatted value."""
    datasets = [Dataset("Sales", [1_250_000, 3_400_000])]
    layout = compute_layout(
        _chart("column", labels=["A", "B"], datasets=datasets), space=(600, 400), metrics=metrics
    )
    # "3400000" is 7 characters
    assert layout.margins.left == pytest.approx(7 * 6.6 + 16)


def test_unknown_family_uses_equal_margins(metrics):
    """Charts without axis rules get equal margins."""
    layout = compute_layout(_chart("radar"), space=(600, 400), metrics=metrics)
    assert _margins(layout) == pytest.approx((20.0, 20.0, 20.0, 20.0))


# ---------------------------------------------------------------------------
# Overflow
# ---------------------------------------------------------------------------


def test_narrow_container_shrinks_margins(metrics):
    """A narrow container shrinks side margins and reports it."""
    layout = compute_layout(
        _chart(labels=["A"], datasets=[Dataset("V", [1])]), space=(120, 100), metrics=metrics
    )
    risk = layout.overflow_risk
    assert risk is not None
    assert risk.has_risk
    assert risk.applied_adjustments
    assert layout.margins.left == pytest.approx(36.0)
    assert layout.margins.right == pytest.approx(36.0)


def test_overflow_respects_side_floor(metrics):
    """Side margins never shrink below their floor."""
    layout = compute_layout(
        _chart(labels=["A"], datasets=[Dataset("V", [1])]), space=(60, 100), metrics=metrics
    )
    assert layout.margins.left == pytest.approx(20.0)
    assert layout.margins.right == pytest.approx(20.0)


def test_check_overflow_no_risk():
    """Roomy plots report no risk."""
    assert check_overflow(Margins(20, 20, 20, 20), 600, 400) is None


def test_check_overflow_vertical():
    """A short plot takes half the deficit from top and bottom."""
    margins = Margins(top=60, right=20, bottom=60, left=20)
    risk = check_overflow(margins, 600, 150)
    assert risk is not None
    # Plot height 30 < 45: each side gives up 7.5px.
    assert margins.top == pytest.approx(52.5)
    assert margins.bottom == pytest.approx(52.5)


def test_check_overflow_reports_unadjusted_when_at_floor():
    """Risk at the floor is reported without adjustment."""
    margins = Margins(top=10, right=20, bottom=10, left=20)
    risk = check_overflow(margins, 50, 400)
    assert risk is not None
    assert not risk.applied_adjustments


def test_overflow_is_logged(metrics, caplog):
    """Overflow risk is logged as a warning."""
    with caplog.at_level("WARNING", logger="smart_layout"):
        compute_layout(_chart(labels=["A"], datasets=[Dataset("V", [1])]), space=(120, 100), metrics=metrics)
    assert "Overflow risk" in caplog.text


# ---------------------------------------------------------------------------
# compute_bar_thickness
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "extent,categories,datasets,expected",
    [
        (550, 2, 1, 80.0),
        (250, 40, 1, 12.0),
        (200, 3, 1, 46.6667),
        (200, 3, 2, 23.3333),
        (200, 1, 1, 60.0),
    ],
)
def test_compute_bar_thickness(extent, categories, datasets, expected):
    """Thickness follows the density tier within its cap and floor."""
    assert compute_bar_thickness(extent, categories, datasets) == pytest.approx(expected, abs=1e-3)


def test_bar_thickness_subtracts_label_block():
    """Stacked labels take room from each category band."""
    assert compute_bar_thickness(200, 2, 1, label_block=20.0) == pytest.approx(56.0)


# ---------------------------------------------------------------------------
# Margin priority
# ---------------------------------------------------------------------------


def test_column_family_sizes_value_axis_before_categories():
    """The category band width depends on the value-axis margin."""
    rules = get_rules_for_type("line")
    assert rules.margin_priority.index("left") < rules.margin_priority.index("bottom")
    assert rules.category_axis == "bottom"


def test_sides_outside_margin_priority_keep_base(metrics):
    """Dropping bottom from the priority list leaves it at the base margin."""
    ctx = build_context(_chart(), None, AvailableSpace(600, 400), metrics)
    ctx.rules = replace(BAR_RULES, margin_priority=("left", "top"))
    layout = CartesianStrategy().compute(ctx)
    assert _margins(layout) == pytest.approx((20.0, 55.0, 20.0, 55.0))


def test_value_side_outside_margin_priority_keeps_base(metrics):
    """Without right in the priority list the value margin is never measured."""
    datasets = [Dataset("Sales", [1_250_000, 3_400_000])]
    chart = _chart("column", labels=["A", "B"], datasets=datasets)
    ctx = build_context(chart, None, AvailableSpace(600, 400), metrics)
    ctx.rules = replace(ctx.rules, margin_priority=("bottom", "top"))
    layout = CartesianStrategy().compute(ctx)
    assert layout.margins.left == pytest.approx(20.0)
    assert layout.margins.right == pytest.approx(20.0)
