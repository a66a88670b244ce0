"""Display strings for chart values.

Value labels are measured in their formatted form, so the value-axis margin
depends on these rules. Grouping uses "," for thousands and "." for decimals.
"""

from __future__ import annotations

import math

from smart_layout.parser.model import NumberFormat

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "BRL": "R$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def _plain(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _grouped(value: float, min_decimals: int, max_decimals: int) -> str:
    """Format with thousands separators, trimming zeros past ``min_decimals``."""
    text = f"{value:,.{max_decimals}f}"
    if max_decimals > min_decimals and "." in text:
        whole, frac = text.split(".")
        frac = frac.rstrip("0")
        if len(frac) < min_decimals:
            frac = frac.ljust(min_decimals, "0")
        text = f"{whole}.{frac}" if frac else whole
    if text.startswith("-") and float(text.lstrip("-").replace(",", "")) == 0:
        text = text[1:]
    return text


def format_value(value: float, number_format: NumberFormat | None = None) -> str:
    """Format ``value`` the way a chart displays it.

    Without a format the plain value is returned. ``scale`` multiplies the
    value first; percent values are never multiplied by 100 implicitly.
    """
    if number_format is None or not math.isfinite(value):
        return _plain(value)

    scaled = value * number_format.scale if number_format.scale else value
    decimals = number_format.decimals

    if number_format.type == "currency":
        digits = 2 if decimals is None else decimals
        code = (number_format.currency or "USD").upper()
        symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
        body = _grouped(abs(scaled), digits, digits)
        sign = "-" if scaled < 0 and body.strip("0.,") else ""
        return f"{sign}{symbol}{body}"

    if number_format.type == "percent":
        lo, hi = (0, 1) if decimals is None else (decimals, decimals)
        return f"{_grouped(scaled, lo, hi)}%"

    lo, hi = (0, 2) if decimals is None else (decimals, decimals)
    return _grouped(scaled, lo, hi)
