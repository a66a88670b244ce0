"""Loader for chart documents as the editor stores them.

Documents are JSON objects with camelCase keys::

    {
      "type": "donut",
      "title": "Revenue by region",
      "data": {"labels": [...], "datasets": [{"label": "...", "data": [...]}]},
      "style": {"colorPalette": [...], "mode": "infographic",
                "infographicConfig": {"labelLayout": "balanced"}},
      "gridConfig": {"baseFontSize": 11, "baseFontUnit": "px"}
    }

Malformed documents raise ``ValueError`` with a message naming the field.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

from smart_layout.parser.model import (
    CHART_TYPES,
    DEFAULT_FONT_FAMILY,
    FONT_UNIT_TO_PX,
    LABEL_LAYOUTS,
    LEGEND_POSITIONS,
    MODES,
    NUMBER_FORMAT_TYPES,
    ChartData,
    ChartDescription,
    ChartStyle,
    Dataset,
    GridConfig,
    InfographicConfig,
    NumberFormat,
)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _choice(value: Any, allowed: tuple[str, ...], field_name: str) -> str:
    if value not in allowed:
        raise ValueError(
            f"Unknown {field_name} {value!r}; expected one of: {', '.join(allowed)}"
        )
    return value


def _number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{field_name} must be finite, got {value!r}")
    return value


def _mapping(value: Any, field_name: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be an object")
    return value


def _parse_dataset(raw: Any, position: int) -> Dataset:
    raw = _mapping(raw, f"datasets[{position}]")
    values = raw.get("data") or []
    if not isinstance(values, list):
        raise ValueError(f"datasets[{position}].data must be a list")
    data = [_number(v, f"datasets[{position}].data[{i}]") for i, v in enumerate(values)]
    return Dataset(label=str(raw.get("label", f"Series {position + 1}")), data=data)


def _parse_data(raw: Any) -> ChartData:
    raw = _mapping(raw, "data")
    labels = raw.get("labels") or []
    datasets = raw.get("datasets") or []
    if not isinstance(labels, list):
        raise ValueError("data.labels must be a list")
    if not isinstance(datasets, list):
        raise ValueError("data.datasets must be a list")
    return ChartData(
        labels=[str(label) for label in labels],
        datasets=[_parse_dataset(ds, i) for i, ds in enumerate(datasets)],
        x_axis_label=str(raw.get("xAxisLabel", "")),
        y_axis_label=str(raw.get("yAxisLabel", "")),
    )


def _parse_number_format(raw: Any) -> NumberFormat | None:
    if raw is None:
        return None
    raw = _mapping(raw, "style.numberFormat")
    decimals = raw.get("decimals")
    if decimals is not None:
        decimals = int(_number(decimals, "style.numberFormat.decimals"))
        if decimals < 0:
            raise ValueError("style.numberFormat.decimals must not be negative")
    scale = raw.get("scale")
    if scale is not None:
        scale = _number(scale, "style.numberFormat.scale")
    return NumberFormat(
        type=_choice(raw.get("type", "number"), NUMBER_FORMAT_TYPES, "number format type"),
        currency=str(raw.get("currency", "USD")),
        decimals=decimals,
        scale=scale,
    )


def _parse_infographic(raw: Any) -> InfographicConfig:
    raw = _mapping(raw, "style.infographicConfig")
    hero = raw.get("heroValueIndex")
    if hero is not None:
        hero = int(_number(hero, "style.infographicConfig.heroValueIndex"))
    legend = raw.get("legendPosition")
    if legend is not None:
        legend = _choice(legend, LEGEND_POSITIONS, "legend position")
    return InfographicConfig(
        hero_value_index=hero,
        label_layout=_choice(raw.get("labelLayout", "radial"), LABEL_LAYOUTS, "label layout"),
        show_all_labels=bool(raw.get("showAllLabels", False)),
        auto_sort=bool(raw.get("autoSort", False)),
        show_category_label=bool(raw.get("showCategoryLabel", True)),
        legend_position=legend,
    )


def _parse_style(raw: Any) -> ChartStyle | None:
    if raw is None:
        return None
    raw = _mapping(raw, "style")
    palette = raw.get("colorPalette") or []
    if not isinstance(palette, list):
        raise ValueError("style.colorPalette must be a list")
    for color in palette:
        if not isinstance(color, str) or not _HEX_COLOR.match(color):
            raise ValueError(f"Invalid palette color {color!r}; expected #rgb or #rrggbb")
    legend = raw.get("legendPosition")
    if legend is not None:
        legend = _choice(legend, LEGEND_POSITIONS, "legend position")
    return ChartStyle(
        color_palette=list(palette),
        font_family=str(raw.get("fontFamily") or DEFAULT_FONT_FAMILY),
        mode=_choice(raw.get("mode", "classic"), MODES, "mode"),
        legend_position=legend,
        number_format=_parse_number_format(raw.get("numberFormat")),
        infographic_config=_parse_infographic(raw.get("infographicConfig")),
    )


def parse_grid_config(raw: Any) -> GridConfig:
    """Build a GridConfig from its camelCase JSON form."""
    raw = _mapping(raw, "gridConfig")
    config = GridConfig()
    if "baseFontSize" in raw:
        size = _number(raw["baseFontSize"], "gridConfig.baseFontSize")
        if size <= 0:
            raise ValueError("gridConfig.baseFontSize must be positive")
        config.base_font_size = size
    if "baseFontUnit" in raw:
        config.base_font_unit = _choice(
            raw["baseFontUnit"], tuple(FONT_UNIT_TO_PX), "font unit"
        )
    for key, attr in (("columns", "columns"), ("rows", "rows")):
        if key in raw:
            setattr(config, attr, int(_number(raw[key], f"gridConfig.{key}")))
    for key, attr in (("gutter", "gutter"), ("margin", "margin"), ("width", "width"), ("height", "height")):
        if key in raw:
            setattr(config, attr, _number(raw[key], f"gridConfig.{key}"))
    if "pageFormat" in raw:
        config.page_format = str(raw["pageFormat"])
    if "orientation" in raw:
        config.orientation = str(raw["orientation"])
    return config


def parse_chart_description(source: str | dict) -> ChartDescription:
    """Parse a chart document given as JSON text or an already-decoded dict."""
    if isinstance(source, str):
        try:
            source = json.loads(source)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid chart JSON: {e}") from e
    if not isinstance(source, dict):
        raise ValueError("Chart document must be a JSON object")

    return ChartDescription(
        type=_choice(source.get("type", "bar"), CHART_TYPES, "chart type"),
        data=_parse_data(source.get("data")),
        style=_parse_style(source.get("style")),
        title=str(source.get("title") or ""),
    )


def load_chart_document(text: str) -> tuple[ChartDescription, GridConfig]:
    """Parse a chart document and its optional ``gridConfig`` block."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid chart JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError("Chart document must be a JSON object")
    return parse_chart_description(raw), parse_grid_config(raw.get("gridConfig"))
