"""Tests for the chart document parser."""

import json

import pytest

from smart_layout.parser import load_chart_document, parse_chart_description, parse_grid_config
from smart_layout.parser.model import GridConfig

DONUT = {
    "type": "donut",
    "title": "Revenue",
    "data": {
        "labels": ["North", "South"],
        "datasets": [{"label": "2024", "data": [10, 20.5]}],
    },
    "style": {
        "colorPalette": ["#fff", "#0ea5e9"],
        "mode": "infographic",
        "legendPosition": "right",
        "numberFormat": {"type": "currency", "currency": "EUR", "decimals": 0},
        "infographicConfig": {
            "heroValueIndex": 1,
            "labelLayout": "column-right",
            "showAllLabels": True,
            "autoSort": True,
        },
    },
}


def test_parse_full_document():
    """A complete document parses into the chart model."""
    chart = parse_chart_description(DONUT)
    assert chart.type == "donut"
    assert chart.title == "Revenue"
    assert chart.data.labels == ["North", "South"]
    assert chart.data.datasets[0].data == [10, 20.5]
    style = chart.style
    assert style.color_palette == ["#fff", "#0ea5e9"]
    assert style.mode == "infographic"
    assert style.legend_position == "right"
    assert style.number_format.type == "currency"
    assert style.number_format.currency == "EUR"
    assert style.number_format.decimals == 0
    config = style.infographic_config
    assert config.hero_value_index == 1
    assert config.label_layout == "column-right"
    assert config.show_all_labels
    assert config.auto_sort
    assert config.show_category_label


def test_parse_from_json_text():
    """JSON text is accepted as well as dicts."""
    chart = parse_chart_description(json.dumps(DONUT))
    assert chart.data.datasets[0].label == "2024"


def test_defaults():
    """Missing fields fall back to defaults."""
    chart = parse_chart_description({"data": {"labels": ["A"], "datasets": [{"data": [1]}]}})
    assert chart.type == "bar"
    assert chart.style is None
    assert chart.resolved_style.mode == "classic"
    assert chart.data.datasets[0].label == "Series 1"


@pytest.mark.parametrize(
    "document,message",
    [
        ({"type": "sankey"}, "chart type"),
        ({"style": {"mode": "fancy"}}, "mode"),
        ({"style": {"colorPalette": ["blue"]}}, "palette color"),
        ({"style": {"legendPosition": "middle"}}, "legend position"),
        ({"style": {"numberFormat": {"type": "ratio"}}}, "number format type"),
        ({"style": {"infographicConfig": {"labelLayout": "spiral"}}}, "label layout"),
        ({"data": {"datasets": [{"data": [1, "2"]}]}}, r"datasets\[0\]\.data\[1\]"),
        ({"data": {"datasets": [{"data": [True]}]}}, "must be a number"),
        ({"data": {"labels": "A,B"}}, "data.labels"),
    ],
)
def test_invalid_documents(document, message):
    """Malformed documents raise ValueError naming the field."""
    with pytest.raises(ValueError, match=message):
        parse_chart_description(document)


def test_invalid_json():
    """Broken JSON raises ValueError."""
    with pytest.raises(ValueError, match="Invalid chart JSON"):
        parse_chart_description("{not json")


def test_non_object_document():
    """The top level must be a JSON object."""
    with pytest.raises(ValueError, match="JSON object"):
        parse_chart_description("[1, 2]")


def test_grid_config_units():
    """Point font sizes convert to pixels."""
    grid = parse_grid_config({"baseFontSize": 12, "baseFontUnit": "pt", "columns": 6})
    assert grid.base_font_px == pytest.approx(15.996)
    assert grid.columns == 6


def test_grid_config_rejects_non_positive_font():
    """A zero base font size is rejected."""
    with pytest.raises(ValueError, match="baseFontSize"):
        parse_grid_config({"baseFontSize": 0})


def test_load_chart_document_without_grid():
    """Documents without a grid get the default grid."""
    chart, grid = load_chart_document(json.dumps({"type": "pie"}))
    assert chart.type == "pie"
    assert grid == GridConfig()
    assert grid.base_font_px == pytest.approx(11.0)
