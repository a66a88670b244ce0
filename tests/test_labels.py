"""Tests for external label column placement."""

import pytest

from smart_layout.layout.labels import StackItem, distribute_centered, relax_column


def test_relax_pushes_overlapping_items_apart():
    """Overlapping labels are pushed down by their half-heights plus the gap."""
    items = [StackItem(key=k, y=0.0, height=10.0) for k in range(3)]
    ys = relax_column(items, top=-100.0, bottom=100.0)
    assert ys == pytest.approx({0: 0.0, 1: 16.0, 2: 32.0})


def test_relax_pulls_chain_up_at_bottom():
    """A chain past the bottom is pulled back up as a whole."""
    items = [StackItem(key=k, y=0.0, height=10.0) for k in range(3)]
    ys = relax_column(items, top=-100.0, bottom=20.0)
    assert ys == pytest.approx({0: -17.0, 1: -1.0, 2: 15.0})


def test_relax_keeps_natural_order():
    """Leader lines never cross: resolved order equals natural order."""
    items = [
        StackItem(key=0, y=30.0, height=20.0),
        StackItem(key=1, y=-5.0, height=20.0),
        StackItem(key=2, y=0.0, height=20.0),
    ]
    ys = relax_column(items, top=-200.0, bottom=200.0)
    assert ys[1] < ys[2] < ys[0]
    assert ys[2] - ys[1] >= 26.0
    assert ys[0] - ys[2] >= 26.0


def test_relax_respects_top():
    """A label above the top is moved down inside."""
    ys = relax_column([StackItem(key=0, y=-50.0, height=10.0)], top=0.0, bottom=100.0)
    assert ys[0] == pytest.approx(5.0)


def test_relax_empty():
    """An empty column resolves to nothing."""
    assert relax_column([], 0.0, 10.0) == {}


def test_distribute_centered():
    """Items are centered as one block in the span."""
    assert distribute_centered([10.0, 10.0], 0.0, 100.0, 4.0) == pytest.approx([43.0, 57.0])
    assert distribute_centered([], 0.0, 100.0, 4.0) == []
