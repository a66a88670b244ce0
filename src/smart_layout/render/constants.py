"""Render constants for the layout debug overlay.

Theme-dependent values remain in style.py.
"""

# ---------------------------------------------------------------------------
# Bands and zones
# ---------------------------------------------------------------------------
ZONE_STROKE_WIDTH: float = 1.0
"""Stroke width of zone outlines."""

ZONE_DASH: str = "4,3"
"""Dash pattern of the legend and title zone outlines."""

MARGIN_OPACITY: float = 0.25
"""Fill opacity of the four margin bands."""

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------
LEADER_STROKE_WIDTH: float = 1.0
"""Stroke width of leader lines and spider legs."""

ANCHOR_RADIUS: float = 2.0
"""Radius of the dot drawn at a leader-line anchor."""

SLICE_STROKE_WIDTH: float = 1.0
"""Stroke width of slice and cell outlines."""

FULL_CIRCLE_EPSILON: float = 1e-9
"""Slices within this many radians of a full turn are drawn as circles."""

# ---------------------------------------------------------------------------
# Readouts
# ---------------------------------------------------------------------------
READOUT_FONT_SIZE: float = 10.0
"""Font size of the margin readout and the overflow banner."""

READOUT_INSET: float = 4.0
"""Distance of readout text from the container edge."""

BANNER_HEIGHT: float = 16.0
"""Height of the overflow-risk banner."""
