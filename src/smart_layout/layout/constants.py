"""Layout constants used across layout modules.

Centralizes magic numbers from engine.py, wrapping.py, margins.py,
radial.py and treemap.py.
"""

import math

# ---------------------------------------------------------------------------
# Font / text metrics
# ---------------------------------------------------------------------------
CHAR_WIDTH_RATIO: float = 0.6
"""Estimated glyph advance as a fraction of font size."""

BOLD_WIDTH_FACTOR: float = 1.05
"""Width stretch applied by the estimating backend to weights >= 600."""

ASCENT_RATIO: float = 1.0
"""Estimated ascent as a fraction of font size."""

DESCENT_RATIO: float = 0.2
"""Estimated descent as a fraction of font size."""

PDF_CALIBRATION: float = 1.10
"""Size drift between the print rasterizer and on-screen text."""

TEXT_CACHE_SIZE: int = 1000
"""Default capacity of each measurement cache."""

LEGIBILITY_FLOOR_PX: float = 8.0
"""Smallest font size a fitted label may shrink to."""

# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------
HERO_VALUE_MULTIPLIER: dict[str, float] = {"classic": 1.0, "infographic": 2.6}
"""Font multiplier of the hero value label, per mode."""

VALUE_SAFETY_GAP: dict[str, float] = {"classic": 16.0, "infographic": 40.0}
"""Space kept between the widest value label and the container edge."""

LABEL_WEIGHT: dict[str, str] = {"classic": "500", "infographic": "700"}
"""Category label font weight, per mode."""

# ---------------------------------------------------------------------------
# Margins
# ---------------------------------------------------------------------------
BASE_MARGIN_SIDE: float = 40.0
"""Starting left/right margin before rules override it."""

BASE_MARGIN_VERTICAL: float = 20.0
"""Starting top/bottom margin before rules override it."""

COMPACT_MARGIN_SIDE: float = 20.0
"""Right margin of column-family charts (no value labels there)."""

MIN_VALUE_MARGIN: float = 40.0
"""Smallest margin on the value-axis side."""

TOP_MARGIN_DEFAULT: float = 20.0
"""Top margin without a title (scaled by the mode margin multiplier)."""

BOTTOM_MARGIN_DEFAULT: float = 30.0
"""Bottom margin without a bottom legend."""

TITLE_FONT_SCALE: float = 1.5
"""Title font size relative to the base font."""

TITLE_PADDING: float = 12.0
"""Space between the title block and the plot."""

AXIS_LABEL_PAD: float = 12.0
"""Space between a bottom category axis and its labels."""

EXPORT_SAFETY_PADDING: float = 40.0
"""Padding added to every margin for PDF export to prevent edge clipping."""

MIN_PLOT_WIDTH_RATIO: float = 0.4
"""Smallest share of the container width the plot may occupy."""

MIN_PLOT_HEIGHT_RATIO: float = 0.3
"""Smallest share of the container height the plot may occupy."""

MIN_SIDE_MARGIN: float = 20.0
"""Floor for left/right margins when the overflow pass shrinks them."""

MIN_VERTICAL_MARGIN: float = 10.0
"""Floor for top/bottom margins when the overflow pass shrinks them."""

# ---------------------------------------------------------------------------
# Label wrapping
# ---------------------------------------------------------------------------
LABEL_PADDING: float = 6.0
"""Padding between axis labels and the container edge."""

LABEL_GUTTER: float = 4.0
"""Gap between axis labels and the plot."""

EXPORT_BUFFER: dict[str, float] = {"screen": 8.0, "pdf": 15.0}
"""Extra label room per render target."""

MAX_LABEL_RATIO_BAR: float = 0.30
"""Largest share of the container width a bar chart label column may take."""

MAX_LABEL_RATIO_OTHER: float = 0.25
"""Largest share of the container width other label columns may take."""

LARGE_FONT_RATIO_PENALTY: float = 0.05
"""Ratio reduction for infographic or large-font label columns."""

LARGE_FONT_PX: float = 16.0
"""Font size from which a label column counts as large-font."""

MIN_LABEL_MARGIN: float = 55.0
"""Absolute floor of a label-driven margin."""

EMPTY_LABEL_MARGIN: float = 60.0
"""Margin returned when there are no labels to measure."""

MAX_WORDS_PER_LINE: int = 12
"""Words allowed on one wrapped line."""

LONG_WORD_CHARS: int = 15
"""Words longer than this count as long words."""

SMALL_CONTAINER: float = 400.0
"""Containers narrower than this are small."""

LARGE_CONTAINER: float = 600.0
"""Containers at least this wide are large."""

NO_WRAP_WIDTH_RATIO: float = 0.3
"""Medium labels narrower than this share of a large container never wrap."""

# ---------------------------------------------------------------------------
# Stacked bar labels
# ---------------------------------------------------------------------------
STACKED_LABEL_CHARS: int = 15
"""Longest label length (characters) that still fits beside the bars."""

STACKED_LABEL_WIDTH_RATIO: float = 0.25
"""Longest label width, as a share of the container, that fits beside bars."""

# ---------------------------------------------------------------------------
# Bar thickness
# ---------------------------------------------------------------------------
BAR_FILL_RATIO: float = 0.7
"""Share of each category band filled by bars."""

BAR_MAX_THICKNESS: float = 60.0
"""Bar thickness cap."""

BAR_FILL_RATIO_SPARSE: float = 0.75
"""Fill ratio for sparse, tall plots."""

BAR_MAX_THICKNESS_SPARSE: float = 80.0
"""Thickness cap for sparse, tall plots."""

BAR_FILL_RATIO_DENSE: float = 0.6
"""Fill ratio for dense plots."""

BAR_MAX_THICKNESS_DENSE: float = 40.0
"""Thickness cap for dense plots."""

BAR_MIN_THICKNESS: float = 12.0
"""Smallest readable bar."""

SPARSE_DENSITY: float = 1.0
"""Categories per 100 px below which a plot is sparse."""

DENSE_DENSITY: float = 4.0
"""Categories per 100 px above which a plot is dense."""

SPARSE_MIN_HEIGHT: float = 300.0
"""Plot extent a sparse plot needs before bars may thicken."""

# ---------------------------------------------------------------------------
# Legend
# ---------------------------------------------------------------------------
LEGEND_FONT_SCALE: float = 0.85
"""Legend font size relative to the base font."""

LEGEND_SWATCH: float = 10.0
"""Width of a legend color swatch."""

LEGEND_SWATCH_GAP: float = 6.0
"""Gap between swatch and legend text."""

LEGEND_ITEM_GAP: float = 16.0
"""Horizontal gap between items of a horizontal legend."""

LEGEND_ROW_GAP: float = 8.0
"""Vertical gap between legend rows."""

LEGEND_PADDING: float = 8.0
"""Internal padding of the legend box."""

LEGEND_GAP: float = 10.0
"""Gap between the legend and the plot."""

# ---------------------------------------------------------------------------
# Radial (pie / donut)
# ---------------------------------------------------------------------------
TAU: float = 2 * math.pi
"""Full circle in radians."""

MIN_SLICE_ANGLE: float = math.radians(20.0)
"""Smallest visual angle of a non-zero slice."""

RADIAL_BASE_MARGIN: float = 20.0
"""Margin on every side of a radial plot before label columns."""

LOD_TINY: float = 150.0
"""Plots smaller than this show no labels."""

LOD_SMALL: float = 300.0
"""Plots smaller than this hide labels unless forced."""

LOD_DETAILED: float = 450.0
"""Plots at least this large are detailed."""

RADIUS_FILL: float = 0.9
"""Share of the half plot extent used as the outer radius."""

PIE_LABEL_RADIUS: float = 0.6
"""Internal pie label radius as a share of the outer radius."""

DONUT_MIN_THICKNESS: float = 0.22
"""Smallest donut band, as a share of the outer radius."""

DONUT_BASE_THICKNESS: dict[str, float] = {"classic": 0.40, "infographic": 0.35}
"""Donut band thickness for the largest value, per mode."""

INTERNAL_LABEL_PAD: float = 8.0
"""Clearance an internal slice label needs in both directions."""

MIN_INTERNAL_ANGLE: float = math.radians(30.0)
"""Smallest slice that may hold its label."""

MIN_INTERNAL_ANGLE_COLUMNAR: float = math.radians(60.0)
"""Smallest slice that may hold its label in a columnar layout."""

MAX_INTERNAL_CATEGORIES: int = 8
"""Above this many slices every label goes outside."""

LEADER_ELBOW: float = 12.0
"""Radial length of the first leader-line segment."""

LEADER_RUN: float = 24.0
"""Horizontal run from the elbow to the label column."""

LEADER_LABEL_GAP: float = 4.0
"""Gap between a leader-line end and its text."""

LABEL_STACK_GAP: float = 6.0
"""Minimum vertical gap between stacked external labels."""

LABEL_EDGE_PAD: float = 4.0
"""Distance external labels keep from the container edge."""

COLUMN_MAX_RATIO: float = 0.35
"""Largest share of the width a single label column may reserve."""

SIDE_LABEL_MAX_RATIO: float = 0.25
"""Largest share of the width each side column may reserve."""

MIN_LABEL_WRAP_WIDTH: float = 40.0
"""Narrowest width external labels are wrapped to."""

# ---------------------------------------------------------------------------
# Treemap
# ---------------------------------------------------------------------------
TREEMAP_BASE_MARGIN: float = 10.0
"""Margin on every side of a treemap."""

TREEMAP_LABEL_PAD: float = 8.0
"""Padding between a cell border and its label."""

TREEMAP_MULTIPLIERS: dict[tuple[str, bool], tuple[float, ...]] = {
    ("classic", False): (1.0, 0.85, 0.7),
    ("classic", True): (1.6, 1.3, 1.0, 0.85),
    ("infographic", False): (1.3, 1.1, 0.9, 0.75),
    ("infographic", True): (4.5, 3.5, 2.5, 1.8, 1.3, 1.0),
}
"""Font multipliers tried per (mode, is_hero), largest first."""

TREEMAP_EXTERNAL_MULTIPLIER: dict[tuple[str, bool], float] = {
    ("classic", False): 1.0,
    ("classic", True): 1.0,
    ("infographic", False): 1.0,
    ("infographic", True): 2.2,
}
"""Font multiplier of an ejected label per (mode, is_hero)."""

MIN_EXTERNAL_AREA: float = 400.0
"""Cells smaller than this (px^2) hide rather than eject their label."""

EXTERNAL_ITEM_MIN_HEIGHT: float = 20.0
"""Smallest slot an external treemap label occupies."""

EXTERNAL_ITEM_GAP: float = 4.0
"""Gap between external treemap label slots."""

TREEMAP_COLUMN_MAX_RATIO: float = 0.3
"""Largest share of the width the external label column may reserve."""

TREEMAP_COLUMN_GAP: float = 12.0
"""Gap between the plot edge and the external label column."""
