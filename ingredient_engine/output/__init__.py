"""Output formatting for extracted ingredient lists."""

from ingredient_engine.output.formatters import (
    format_category_summary,
    format_ingredient_string,
    format_list_json,
    format_list_json_string,
    format_list_markdown,
    format_quantity,
)

__all__ = [
    "format_category_summary",
    "format_ingredient_string",
    "format_list_json",
    "format_list_json_string",
    "format_list_markdown",
    "format_quantity",
]
