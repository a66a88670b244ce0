"""Color resolution: palette expansion and legible foreground selection."""

from __future__ import annotations

import math

DEFAULT_BASE_COLOR = "#3b82f6"
BRIGHTNESS_STEP = 20
YIQ_THRESHOLD = 128
BLACK = "#000000"
WHITE = "#ffffff"


def _parse_hex(color: str) -> tuple[int, int, int] | None:
    """Return the (r, g, b) channels of a #rgb or #rrggbb color, or None."""
    if not color:
        return None
    clean = color.strip().lstrip("#")
    if len(clean) == 3:
        clean = "".join(ch * 2 for ch in clean)
    if len(clean) != 6:
        return None
    try:
        return int(clean[0:2], 16), int(clean[2:4], 16), int(clean[4:6], 16)
    except ValueError:
        return None


def adjust_brightness(color: str, amount: int) -> str:
    """Shift every channel of ``color`` by ``amount``, clamped to [0, 255].

    Positive amounts lighten, negative amounts darken. The leading ``#`` is
    kept only when the input had one. Unparseable colors are returned as is.
    """
    rgb = _parse_hex(color)
    if rgb is None:
        return color
    r, g, b = (min(255, max(0, ch + amount)) for ch in rgb)
    prefix = "#" if color.strip().startswith("#") else ""
    return f"{prefix}{r:02x}{g:02x}{b:02x}"


def generate_monochromatic_palette(base_color: str, count: int) -> list[str]:
    """Spread ``count`` shades of ``base_color`` from darker to lighter."""
    colors = []
    for i in range(count):
        amount = math.floor((i - count / 2) / count * 100)
        colors.append(adjust_brightness(base_color, amount))
    return colors


def ensure_distinct_colors(base_palette: list[str] | None, count: int) -> list[str]:
    """Return exactly ``count`` colors derived from ``base_palette``.

    An empty palette expands monochromatically from a default blue and a
    one-color palette from that color. Longer palettes are extended with
    alternately lightened and darkened variants of their own entries.
    """
    if count <= 0:
        return []
    if not base_palette:
        return generate_monochromatic_palette(DEFAULT_BASE_COLOR, count)
    if count <= len(base_palette):
        return list(base_palette[:count])
    if len(base_palette) == 1:
        return generate_monochromatic_palette(base_palette[0], count)

    extended = list(base_palette)
    k = 0
    while len(extended) < count:
        base = base_palette[k % len(base_palette)]
        amount = BRIGHTNESS_STEP if k % 2 == 0 else -BRIGHTNESS_STEP
        extended.append(adjust_brightness(base, amount))
        k += 1
    return extended


def best_contrast_color(background: str) -> str:
    """Black or white, whichever reads better on ``background`` (YIQ)."""
    rgb = _parse_hex(background)
    if rgb is None:
        return BLACK
    r, g, b = rgb
    yiq = (r * 299 + g * 587 + b * 114) / 1000
    return BLACK if yiq >= YIQ_THRESHOLD else WHITE


def determine_value_position(
    bar_width: float,
    label_width: float,
    padding: float = 10.0,
) -> str:
    """Place a value label "inside" a bar when it fits with padding, else "outside".

    Any bar color works for an inside label: pair it with
    :func:`best_contrast_color` for the text.
    """
    if bar_width > label_width + padding * 2:
        return "inside"
    return "outside"
