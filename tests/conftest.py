"""Shared fixtures: deterministic text measurement."""

import pytest

from smart_layout.layout.metrics import FontSpec, TextMetrics, TextMetricsProvider


class FixedWidthBackend:
    """Every character is 10px wide regardless of font."""

    def measure(self, text: str, font: FontSpec) -> TextMetrics:
        ascent = font.size
        descent = font.size * 0.2
        return TextMetrics(len(text) * 10.0, ascent + descent, ascent, descent)


@pytest.fixture
def fixed_metrics():
    return TextMetricsProvider(backend=FixedWidthBackend())


@pytest.fixture
def metrics():
    """Fresh estimating provider so cache state never leaks between tests."""
    return TextMetricsProvider()


@pytest.fixture
def font():
    return FontSpec("Inter, sans-serif", 12.0)
