"""Vertical placement of external label columns.

Used by the radial solver (one column per side) and the treemap solver
(one column right of the plot).
"""

from __future__ import annotations

from dataclasses import dataclass

from smart_layout.layout.constants import LABEL_STACK_GAP


@dataclass
class StackItem:
    """A label block waiting for a vertical slot.

    ``y`` is the natural center of the block before relaxation.
    """

    key: int
    y: float
    height: float


def relax_column(
    items: list[StackItem],
    top: float,
    bottom: float,
    gap: float = LABEL_STACK_GAP,
) -> dict[int, float]:
    """Resolve overlaps in a column of label blocks.

    Items are sorted by natural position, pushed down until neighbours are at
    least ``gap`` apart, then the chain is pulled up if its last block would
    cross ``bottom``. Relative order never changes, so leader lines drawn to
    the resolved centers do not cross. Returns the center of every item by key.
    """
    if not items:
        return {}

    order = sorted(items, key=lambda item: (item.y, item.key))
    ys = [item.y for item in order]

    ys[0] = max(ys[0], top + order[0].height / 2)
    for i in range(1, len(order)):
        min_y = ys[i - 1] + (order[i - 1].height + order[i].height) / 2 + gap
        ys[i] = max(ys[i], min_y)

    limit = bottom - order[-1].height / 2
    if ys[-1] > limit:
        ys[-1] = limit
        for i in range(len(order) - 2, -1, -1):
            max_y = ys[i + 1] - (order[i].height + order[i + 1].height) / 2 - gap
            ys[i] = min(ys[i], max_y)

    return {item.key: y for item, y in zip(order, ys)}


def distribute_centered(
    heights: list[float],
    top: float,
    bottom: float,
    gap: float,
) -> list[float]:
    """Stack blocks of ``heights`` as one group centered between top and bottom.

    Returns the center of each block, in input order.
    """
    if not heights:
        return []
    total = sum(heights) + gap * (len(heights) - 1)
    y = top + (bottom - top - total) / 2
    centers = []
    for height in heights:
        centers.append(y + height / 2)
        y += height + gap
    return centers
