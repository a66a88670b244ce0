"""Tests for legend footprint computation (10px per character)."""

import pytest

from smart_layout.layout.legend import compute_legend_dimensions, legend_item_width
from smart_layout.layout.metrics import FontSpec

FONT = FontSpec(size=10)


def test_item_width(fixed_metrics):
    """Item width adds the swatch and its gap to the text."""
    assert legend_item_width("Sales", FONT, fixed_metrics) == pytest.approx(66.0)


def test_horizontal_single_row(fixed_metrics):
    """Items that fit share one row."""
    legend = compute_legend_dimensions(["A", "B", "C"], "bottom", 600, FONT, fixed_metrics)
    assert legend.rows == [[0, 1, 2]]
    assert legend.width == pytest.approx(126.0)
    assert legend.height == pytest.approx(28.0)


def test_horizontal_wraps_into_rows(fixed_metrics):
    """Items wrap to a new row at the container edge."""
    legend = compute_legend_dimensions(["A", "B", "C"], "top", 100, FONT, fixed_metrics)
    assert legend.rows == [[0, 1], [2]]
    assert legend.row_count == 2
    assert legend.width == pytest.approx(84.0)
    assert legend.height == pytest.approx(48.0)


def test_width_never_exceeds_container(fixed_metrics):
    """A single long item is capped at the container width."""
    legend = compute_legend_dimensions(["A very long series name"], "bottom", 100, FONT, fixed_metrics)
    assert legend.width == pytest.approx(100.0)


def test_vertical_one_item_per_row(fixed_metrics):
    """Side legends stack one item per row."""
    legend = compute_legend_dimensions(["A", "B", "C"], "left", 600, FONT, fixed_metrics)
    assert legend.rows == [[0], [1], [2]]
    assert legend.width == pytest.approx(42.0)
    assert legend.height == pytest.approx(68.0)


@pytest.mark.parametrize("items,position", [([], "bottom"), (["A"], "none")])
def test_empty_legend(fixed_metrics, items, position):
    """No items or a hidden legend take no space."""
    legend = compute_legend_dimensions(items, position, 600, FONT, fixed_metrics)
    assert legend.width == 0
    assert legend.height == 0
    assert legend.rows == []


def test_pdf_legend_is_calibrated(fixed_metrics):
    """Print targets measure taller rows, so the legend grows with them."""
    legend = compute_legend_dimensions(["A", "B", "C"], "bottom", 600, FONT, fixed_metrics, "pdf")
    assert legend.height == pytest.approx(29.2)
    assert legend.width == pytest.approx(129.0)
