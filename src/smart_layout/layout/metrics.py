"""Text measurement with per-target calibration and LRU caching.

Every width, height and margin the engine computes starts here. Raw glyph
measurement is delegated to a backend; the provider adds letter spacing,
the print calibration factor and a bounded cache on top.
"""

from __future__ import annotations

import functools
import os
import warnings
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, Protocol

from smart_layout.layout.constants import (
    ASCENT_RATIO,
    BOLD_WIDTH_FACTOR,
    CHAR_WIDTH_RATIO,
    DESCENT_RATIO,
    PDF_CALIBRATION,
    TEXT_CACHE_SIZE,
)
from smart_layout.parser.model import DEFAULT_BASE_FONT_SIZE, DEFAULT_FONT_FAMILY

_WEIGHT_NAMES = {"normal": "400", "bold": "700", "bolder": "800", "lighter": "300"}


def normalize_weight(weight: str | int) -> str:
    """Return a numeric CSS font weight as a string ("bold" -> "700")."""
    text = str(weight).strip().lower()
    return _WEIGHT_NAMES.get(text, text)


def _weight_value(weight: str) -> int:
    try:
        return int(weight)
    except ValueError:
        return 400


@dataclass(frozen=True)
class FontSpec:
    """Font a piece of text is set in."""

    family: str = DEFAULT_FONT_FAMILY
    size: float = DEFAULT_BASE_FONT_SIZE
    weight: str = "400"
    letter_spacing: float = 0.0  # em

    @property
    def is_bold(self) -> bool:
        return _weight_value(normalize_weight(self.weight)) >= 600


@dataclass(frozen=True)
class TextMetrics:
    """Measured extent of a text run."""

    width: float
    height: float
    ascent: float
    descent: float


@dataclass(frozen=True)
class MeasureRequest:
    """One entry of a batched measurement."""

    text: str
    font: FontSpec
    target: str = "screen"


class MeasurementBackend(Protocol):
    def measure(self, text: str, font: FontSpec) -> TextMetrics: ...


class EstimatingBackend:
    """Character-count estimate; deterministic and needs no font files."""

    def __init__(self, char_width_ratio: float = CHAR_WIDTH_RATIO) -> None:
        self.char_width_ratio = char_width_ratio

    def measure(self, text: str, font: FontSpec) -> TextMetrics:
        width = len(text) * font.size * self.char_width_ratio
        if font.is_bold:
            width *= BOLD_WIDTH_FACTOR
        ascent = font.size * ASCENT_RATIO
        descent = font.size * DESCENT_RATIO
        return TextMetrics(width=width, height=ascent + descent, ascent=ascent, descent=descent)


_font_warning_emitted: set[str] = set()


@functools.lru_cache(maxsize=64)
def _load_font(family: str, size_px: int, bold: bool):
    """Load a Pillow font for the first family of a CSS font stack."""
    from PIL import ImageFont

    first = family.split(",")[0].strip().strip("'\"")
    stem = first.replace(" ", "")
    suffixes = ("-Bold", "Bold", "bd", "") if bold else ("-Regular", "")
    candidates = [f"{name}{suffix}.ttf" for name in (first, stem) for suffix in suffixes]
    candidates += ["DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf", "arial.ttf", "Arial.ttf"]
    for name in candidates:
        try:
            return ImageFont.truetype(name, size=size_px)
        except OSError:
            continue
    if first not in _font_warning_emitted:
        _font_warning_emitted.add(first)
        warnings.warn(f"Font not found: {first!r}; using default.", UserWarning)
    return ImageFont.load_default()


class PillowBackend:
    """Measure with real TrueType fonts through Pillow."""

    def measure(self, text: str, font: FontSpec) -> TextMetrics:
        size_px = max(1, int(round(font.size)))
        pil_font = _load_font(font.family, size_px, font.is_bold)
        # Bitmap fallback fonts ignore the requested size.
        scale = font.size / max(1.0, float(getattr(pil_font, "size", size_px)))
        width = float(pil_font.getlength(text)) * scale
        if hasattr(pil_font, "getmetrics"):
            ascent, descent = pil_font.getmetrics()
            ascent, descent = ascent * scale, descent * scale
        else:
            ascent = font.size * ASCENT_RATIO
            descent = font.size * DESCENT_RATIO
        return TextMetrics(width=width, height=ascent + descent, ascent=ascent, descent=descent)


class LRUCache:
    """Fixed-capacity mapping that evicts the least recently used entry."""

    def __init__(self, capacity: int) -> None:
        self.capacity = max(1, capacity)
        self._data: OrderedDict = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key):
        if key not in self._data:
            self.misses += 1
            return None
        self.hits += 1
        self._data.move_to_end(key)
        return self._data[key]

    def set(self, key, value) -> None:
        self._data[key] = value
        self._data.move_to_end(key)
        if len(self._data) > self.capacity:
            self._data.popitem(last=False)

    def clear(self) -> None:
        self._data.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key) -> bool:
        return key in self._data

    def stats(self) -> dict[str, float]:
        total = self.hits + self.misses
        return {
            "size": len(self._data),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hits / total if total else 0.0,
        }


def _default_cache_size() -> int:
    raw = os.environ.get("SMART_LAYOUT_TEXT_CACHE_SIZE", "")
    return int(raw) if raw.isdigit() else TEXT_CACHE_SIZE


class TextMetricsProvider:
    """Measures text for a render target.

    ``target="pdf"`` multiplies every returned dimension by
    ``PDF_CALIBRATION``. Results are cached per (text, size, weight, family,
    letter spacing, target); :meth:`clear_cache` may be called at any time,
    e.g. after font files change, and only affects cost.
    """

    def __init__(
        self,
        backend: MeasurementBackend | None = None,
        cache_size: int | None = None,
    ) -> None:
        self.backend = backend if backend is not None else EstimatingBackend()
        capacity = cache_size if cache_size is not None else _default_cache_size()
        self._widths = LRUCache(capacity)
        self._detailed = LRUCache(capacity)

    def measure_width(
        self,
        text: str,
        font_size: float,
        font_family: str = DEFAULT_FONT_FAMILY,
        font_weight: str | int = "400",
        letter_spacing: float = 0.0,
        target: str = "screen",
    ) -> float:
        font = FontSpec(font_family, font_size, normalize_weight(font_weight), letter_spacing)
        return self.text_width(text, font, target)

    def measure_detailed(
        self,
        text: str,
        font_size: float,
        font_family: str = DEFAULT_FONT_FAMILY,
        font_weight: str | int = "400",
        letter_spacing: float = 0.0,
        target: str = "screen",
    ) -> TextMetrics:
        font = FontSpec(font_family, font_size, normalize_weight(font_weight), letter_spacing)
        return self.text_metrics(text, font, target)

    def measure_batch(self, requests: Iterable[MeasureRequest]) -> list[float]:
        """Measure widths for many requests, in input order."""
        return [self.text_width(r.text, r.font, r.target) for r in requests]

    def text_width(self, text: str, font: FontSpec, target: str = "screen") -> float:
        key = _cache_key(text, font, target)
        cached = self._widths.get(key)
        if cached is not None:
            return cached
        width = self.backend.measure(text, font).width
        if font.letter_spacing:
            width += len(text) * font.size * font.letter_spacing
        if target == "pdf":
            width *= PDF_CALIBRATION
        self._widths.set(key, width)
        return width

    def text_metrics(self, text: str, font: FontSpec, target: str = "screen") -> TextMetrics:
        key = _cache_key(text, font, target)
        cached = self._detailed.get(key)
        if cached is not None:
            return cached
        raw = self.backend.measure(text, font)
        width = raw.width
        if font.letter_spacing:
            width += len(text) * font.size * font.letter_spacing
        metrics = TextMetrics(width, raw.ascent + raw.descent, raw.ascent, raw.descent)
        if target == "pdf":
            metrics = TextMetrics(
                width=metrics.width * PDF_CALIBRATION,
                height=metrics.height * PDF_CALIBRATION,
                ascent=metrics.ascent * PDF_CALIBRATION,
                descent=metrics.descent * PDF_CALIBRATION,
            )
        self._detailed.set(key, metrics)
        return metrics

    def line_height(self, font: FontSpec, target: str = "screen") -> float:
        """Height of one text line in ``font``."""
        return self.text_metrics("Ag", font, target).height

    @property
    def cache_capacity(self) -> int:
        return self._widths.capacity

    def clear_cache(self) -> None:
        self._widths.clear()
        self._detailed.clear()

    def cache_stats(self) -> dict[str, dict[str, float]]:
        return {"width": self._widths.stats(), "detailed": self._detailed.stats()}


def _cache_key(text: str, font: FontSpec, target: str) -> tuple:
    return (
        text,
        font.size,
        normalize_weight(font.weight),
        font.family,
        font.letter_spacing,
        target,
    )


text_metrics = TextMetricsProvider()
"""Shared provider used when callers do not pass their own."""
