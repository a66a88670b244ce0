"""Chart document parsing and the input data model."""

from smart_layout.parser.chart_json import (
    load_chart_document,
    parse_chart_description,
    parse_grid_config,
)

__all__ = ["load_chart_document", "parse_chart_description", "parse_grid_config"]
