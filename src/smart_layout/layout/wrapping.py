"""Label wrapping with orphan prevention and label-column margins.

A label goes through four states: unwrapped, greedy-wrapped, orphan-checked
and final. A wrapped label never ends on a single word when merging that word
back fits, or when an even re-split of the last two lines can absorb it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from smart_layout.layout.constants import (
    EMPTY_LABEL_MARGIN,
    EXPORT_BUFFER,
    LABEL_GUTTER,
    LABEL_PADDING,
    LARGE_CONTAINER,
    LARGE_FONT_PX,
    LARGE_FONT_RATIO_PENALTY,
    LONG_WORD_CHARS,
    MAX_LABEL_RATIO_BAR,
    MAX_LABEL_RATIO_OTHER,
    MAX_WORDS_PER_LINE,
    MIN_LABEL_MARGIN,
    NO_WRAP_WIDTH_RATIO,
    SMALL_CONTAINER,
)
from smart_layout.layout.metrics import FontSpec, TextMetricsProvider, text_metrics

STRATEGIES = ("minimal", "tight", "aggressive", "comfortable", "no-wrap")


@dataclass
class LabelAnalysis:
    """Shape of a set of labels."""

    longest_label: str = ""
    longest_label_width: float = 0.0
    longest_label_index: int = -1
    word_count: int = 0
    avg_word_length: float = 0.0
    has_long_words: bool = False
    max_words_in_label: int = 0


@dataclass
class WrapResult:
    """Lines of one wrapped label."""

    lines: list[str]
    required_width: float

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass
class SmartMargin:
    """Margin needed to host a column of category labels."""

    margin: float
    wrapped_labels: list[list[str]] = field(default_factory=list)
    strategy: str = "minimal"
    max_allowed: float = 0.0
    wrap_width: float = 0.0


def analyze_labels(
    labels: list[str],
    font: FontSpec,
    metrics: TextMetricsProvider | None = None,
    target: str = "screen",
) -> LabelAnalysis:
    """Find the widest label and word statistics of ``labels``."""
    if not labels:
        return LabelAnalysis()
    metrics = metrics or text_metrics

    analysis = LabelAnalysis(longest_label_index=0)
    total_chars = 0
    for index, label in enumerate(labels):
        width = metrics.text_width(label, font, target)
        # Strictly wider only: ties keep the first label.
        if width > analysis.longest_label_width:
            analysis.longest_label = label
            analysis.longest_label_width = width
            analysis.longest_label_index = index
        words = label.split()
        analysis.word_count += len(words)
        analysis.max_words_in_label = max(analysis.max_words_in_label, len(words))
        for word in words:
            total_chars += len(word)
            if len(word) > LONG_WORD_CHARS:
                analysis.has_long_words = True
    if analysis.word_count:
        analysis.avg_word_length = total_chars / analysis.word_count
    return analysis


def select_wrapping_strategy(container_width: float, analysis: LabelAnalysis) -> str:
    """Pick the wrapping strategy reported alongside a label margin."""
    words = analysis.max_words_in_label
    short = words <= 2
    medium_label = 2 < words <= 6

    if container_width < SMALL_CONTAINER:
        if short:
            return "minimal"
        return "tight" if medium_label else "aggressive"
    if container_width < LARGE_CONTAINER:
        return "minimal" if short else "comfortable"
    if short:
        return "minimal"
    if medium_label and analysis.longest_label_width < container_width * NO_WRAP_WIDTH_RATIO:
        return "no-wrap"
    return "comfortable"


def wrap_label(
    label: str,
    available_width: float,
    font: FontSpec,
    metrics: TextMetricsProvider | None = None,
    target: str = "screen",
    max_words_per_line: int = MAX_WORDS_PER_LINE,
) -> WrapResult:
    """Break ``label`` into lines no wider than ``available_width``.

    Labels with more than ``max_words_per_line`` words are wrapped even when
    they fit. A single word that does not fit is returned as one overflowing
    line.
    """
    metrics = metrics or text_metrics

    def width_of(text: str) -> float:
        return metrics.text_width(text, font, target)

    full_width = width_of(label)
    words = label.split()
    if full_width <= available_width and len(words) <= max_words_per_line:
        return WrapResult([label], full_width)
    if len(words) <= 1:
        return WrapResult([label], full_width)

    lines: list[str] = []
    current: list[str] = []
    for word in words:
        candidate = " ".join(current + [word])
        if width_of(candidate) <= available_width and len(current) < max_words_per_line:
            current.append(word)
        else:
            if current:
                lines.append(" ".join(current))
            current = [word]
    if current:
        lines.append(" ".join(current))

    if len(lines) >= 2 and len(lines[-1].split()) == 1:
        last_word = lines.pop()
        merged = f"{lines.pop()} {last_word}"
        if width_of(merged) <= available_width:
            lines.append(merged)
        else:
            merged_words = merged.split()
            mid = (len(merged_words) + 1) // 2
            lines.append(" ".join(merged_words[:mid]))
            lines.append(" ".join(merged_words[mid:]))

    return WrapResult(lines, max(width_of(line) for line in lines))


def max_label_ratio(chart_type: str, font: FontSpec, mode: str = "classic") -> float:
    """Largest share of the container a label column may take."""
    ratio = MAX_LABEL_RATIO_BAR if chart_type == "bar" else MAX_LABEL_RATIO_OTHER
    if mode == "infographic" or font.size >= LARGE_FONT_PX:
        ratio -= LARGE_FONT_RATIO_PENALTY
    return ratio


def calculate_smart_margin(
    labels: list[str],
    container_width: float,
    font: FontSpec,
    metrics: TextMetricsProvider | None = None,
    target: str = "screen",
    chart_type: str = "bar",
    is_stacked: bool = False,
    mode: str = "classic",
) -> SmartMargin:
    """Compute the label-column margin and the wrapped form of every label.

    The margin never exceeds ``container_width`` times the chart's label
    ratio; labels that would need more room wrap further instead. Stacked
    labels sit above their bars and wrap against the full container width.
    """
    metrics = metrics or text_metrics
    analysis = analyze_labels(labels, font, metrics, target)
    if not labels or not analysis.longest_label:
        return SmartMargin(margin=EMPTY_LABEL_MARGIN, wrapped_labels=[[lbl] for lbl in labels])

    strategy = select_wrapping_strategy(container_width, analysis)
    fixed = LABEL_PADDING + LABEL_GUTTER + EXPORT_BUFFER.get(target, EXPORT_BUFFER["screen"])
    max_allowed = container_width * max_label_ratio(chart_type, font, mode)

    if is_stacked:
        wrap_width = max(0.0, container_width - 2 * LABEL_PADDING)
    else:
        wrap_width = max(0.0, max_allowed - fixed)

    results = [wrap_label(label, wrap_width, font, metrics, target) for label in labels]
    widest = max(result.required_width for result in results)
    margin = max(MIN_LABEL_MARGIN, min(widest + fixed, max_allowed))
    return SmartMargin(
        margin=margin,
        wrapped_labels=[result.lines for result in results],
        strategy=strategy,
        max_allowed=max_allowed,
        wrap_width=wrap_width,
    )
