"""Tests for the squarified treemap solver."""

from pathlib import Path

import pytest

from smart_layout.layout import compute_layout
from smart_layout.layout.result import TreemapDetails, Zone
from smart_layout.layout.treemap import edge_exit, nearest_edge, squarify
from smart_layout.parser import load_chart_document
from smart_layout.parser.model import (
    ChartData,
    ChartDescription,
    ChartStyle,
    Dataset,
    GridConfig,
    InfographicConfig,
)

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


def _treemap(values, labels=None, **config):
    labels = labels or [chr(ord("A") + i) for i in range(len(values))]
    return ChartDescription(
        type="treemap",
        data=ChartData(labels=labels, datasets=[Dataset("Share", values)]),
        style=ChartStyle(infographic_config=InfographicConfig(**config)),
    )


# ---------------------------------------------------------------------------
# squarify
# ---------------------------------------------------------------------------


def test_squarify_first_row():
    """The classic 6x4 example lays its first row on the short side."""
    rects = squarify([6, 6, 4, 3, 2, 2, 1], 0, 0, 6, 4)
    assert rects[0] == pytest.approx((0.0, 0.0, 3.0, 2.0))
    assert rects[1] == pytest.approx((0.0, 2.0, 3.0, 2.0))


def test_squarify_areas_are_proportional():
    """Cell areas are proportional to values."""
    values = [6, 6, 4, 3, 2, 2, 1]
    rects = squarify(values, 10, 20, 6, 4)
    for value, (_, _, w, h) in zip(values, rects):
        assert w * h == pytest.approx(value)
    for x, y, w, h in rects:
        assert x >= 10 - 1e-9 and y >= 20 - 1e-9
        assert x + w <= 16 + 1e-9 and y + h <= 24 + 1e-9


def test_squarify_degenerate_inputs():
    """Empty input or a zero-size box gives empty cells."""
    assert squarify([], 0, 0, 10, 10) == []
    assert squarify([1, 2], 5, 5, 0, 10) == [(5, 5, 0.0, 0.0), (5, 5, 0.0, 0.0)]


def test_nearest_edge():
    """The nearest plot edge is picked by distance from the center."""
    plot = Zone(0, 0, 100, 100)
    assert nearest_edge((0, 40, 10, 10), plot) == "left"
    assert nearest_edge((85, 40, 10, 10), plot) == "right"
    assert nearest_edge((40, 85, 10, 10), plot) == "bottom"
    assert nearest_edge((40, 0, 10, 10), plot) == "top"


def test_edge_exit_is_the_facing_side_midpoint():
    """Leaders leave a cell through the middle of the side facing the edge."""
    cell = (10, 20, 30, 40)
    assert edge_exit(cell, "left") == (10, 40)
    assert edge_exit(cell, "right") == (40, 40)
    assert edge_exit(cell, "top") == (25, 20)
    assert edge_exit(cell, "bottom") == (25, 60)


# ---------------------------------------------------------------------------
# Full treemap layout
# ---------------------------------------------------------------------------


def test_large_cells_hold_their_labels(metrics):
    """Large cells fit their labels inside."""
    layout = compute_layout(_treemap([50, 30, 20]), space=(600, 400), metrics=metrics)
    details = layout.type_specific
    assert isinstance(details, TreemapDetails)
    assert [c.strategy for c in details.cells] == ["internal"] * 3
    assert details.label_column is None
    assert details.hero_index == 0
    assert details.cells[0].lines == ["A", "50"]
    assert details.cells[0].font_size == pytest.approx(17.6)
    assert [c.percent for c in details.cells] == pytest.approx([50.0, 30.0, 20.0])


def test_cells_tile_the_plot(metrics):
    """Cells tile the plot zone."""
    layout = compute_layout(_treemap([50, 30, 20]), space=(600, 400), metrics=metrics)
    plot = layout.zones.plot
    assert (plot.x, plot.y, plot.width, plot.height) == pytest.approx((10.0, 10.0, 580.0, 380.0))
    total = sum(c.area for c in layout.type_specific.cells)
    assert total == pytest.approx(plot.width * plot.height)


def test_non_positive_values_are_dropped(metrics):
    """Zero and negative values get no cell."""
    layout = compute_layout(_treemap([10, 0, -5, 5]), space=(600, 400), metrics=metrics)
    assert [c.index for c in layout.type_specific.cells] == [0, 3]


def test_text_color_contrasts_with_cell(metrics):
    """Label text contrasts with its cell color."""
    chart = _treemap([50, 30])
    chart.style.color_palette = ["#111111", "#eeeeee"]
    layout = compute_layout(chart, space=(600, 400), metrics=metrics)
    assert [c.text_color for c in layout.type_specific.cells] == ["#ffffff", "#000000"]


def test_small_base_font_never_fits_non_hero(metrics):
    """Below the legibility floor a non-hero label cannot sit inside its cell."""
    layout = compute_layout(
        _treemap([50, 30, 20]), GridConfig(base_font_size=6), (600, 400), metrics=metrics
    )
    for cell in layout.type_specific.cells:
        if not cell.is_hero:
            assert cell.strategy != "internal"


class TestDenseTreemap:
    """Twenty equal cells in a 200x200 container cannot all be labelled."""

    @pytest.fixture
    def layout(self, metrics):
        chart, grid = load_chart_document((EXAMPLES_DIR / "treemap_dense.json").read_text())
        return compute_layout(chart, grid, (200, 200), metrics=metrics)

    def test_no_internal_labels(self, layout):
        """Twenty cells are too small to hold any label inside."""
        assert all(c.strategy != "internal" for c in layout.type_specific.cells)

    def test_column_is_reserved(self, layout):
        """A label column is reserved on the right."""
        details = layout.type_specific
        assert details.label_column is not None
        assert details.label_column.x == pytest.approx(layout.zones.plot.right)
        assert layout.margins.right > layout.margins.left

    def test_some_labels_are_suppressed(self, layout):
        """Labels that do not fit the column are hidden."""
        details = layout.type_specific
        admitted = [c for c in details.cells if c.strategy == "external"]
        hidden = [c for c in details.cells if c.strategy == "hidden"]
        assert details.hidden_count > 0
        assert len(hidden) == details.hidden_count
        assert len(admitted) + len(hidden) == 20

    def test_hero_is_admitted(self, layout):
        """The hero label is always admitted."""
        details = layout.type_specific
        hero = next(c for c in details.cells if c.is_hero)
        assert hero.index == details.hero_index
        assert hero.strategy == "external"
        assert hero.spider_leg is not None

    def test_admitted_labels_are_stacked_in_cell_order(self, layout):
        """Admitted labels follow their cells top to bottom."""
        admitted = [c for c in layout.type_specific.cells if c.strategy == "external"]
        admitted.sort(key=lambda c: (c.y, c.x))
        ys = [c.spider_leg.label_y for c in admitted]
        for upper, lower in zip(ys, ys[1:]):
            assert lower - upper >= 20.0

    def test_admitted_block_is_centered(self, layout):
        """Admitted labels are centered as a block."""
        plot = layout.zones.plot
        admitted = [c for c in layout.type_specific.cells if c.strategy == "external"]
        heights = {c.index: max(20.0, c.block_height) for c in admitted}
        top = min(c.spider_leg.label_y - heights[c.index] / 2 for c in admitted)
        bottom = max(c.spider_leg.label_y + heights[c.index] / 2 for c in admitted)
        assert (top + bottom) / 2 == pytest.approx(plot.y + plot.height / 2)

    def test_spider_legs_start_at_cell_center(self, layout):
        """Spider legs run from the cell center into the column."""
        plot = layout.zones.plot
        for cell in layout.type_specific.cells:
            if cell.strategy == "hidden":
                assert cell.spider_leg is None
                continue
            leg = cell.spider_leg
            assert leg.points[0] == pytest.approx(cell.center)
            assert leg.points[-1][0] > plot.right
            assert leg.label_x > leg.points[-1][0]
            assert leg.text_anchor == "start"

    def test_spider_legs_leave_toward_nearest_edge(self, layout):
        """The second leg point sits on the cell side facing its nearest plot edge."""
        for cell in layout.type_specific.cells:
            if cell.strategy != "external":
                continue
            assert cell.edge in ("left", "right", "top", "bottom")
            rect = (cell.x, cell.y, cell.width, cell.height)
            assert cell.spider_leg.points[1] == pytest.approx(edge_exit(rect, cell.edge))


def test_config_legend_position_adds_legend(metrics):
    """A configured legend position adds a legend."""
    layout = compute_layout(
        _treemap([50, 30, 20], legend_position="bottom"), space=(600, 400), metrics=metrics
    )
    assert layout.zones.legend is not None
    assert layout.margins.bottom > 10.0
