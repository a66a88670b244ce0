"""Debug overlay rendering of computed layouts."""

from smart_layout.render.debug import render_debug_svg
from smart_layout.render.style import DEBUG_THEME, DebugTheme

__all__ = ["DEBUG_THEME", "DebugTheme", "render_debug_svg"]
