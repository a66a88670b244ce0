"""Color theme for the layout debug overlay."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DebugTheme:
    """Colors and fonts of the debug overlay."""

    name: str
    background_color: str
    margin_fill: str
    plot_stroke: str
    legend_stroke: str
    title_stroke: str
    leader_color: str
    hidden_color: str
    text_color: str
    warning_fill: str
    warning_text: str
    font_family: str = "Inter, sans-serif"


DEBUG_THEME = DebugTheme(
    name="debug",
    background_color="#ffffff",
    margin_fill="#f59e0b",
    plot_stroke="#2563eb",
    legend_stroke="#16a34a",
    title_stroke="#9333ea",
    leader_color="#475569",
    hidden_color="#cbd5e1",
    text_color="#111827",
    warning_fill="#dc2626",
    warning_text="#ffffff",
)
