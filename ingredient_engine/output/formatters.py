"""Formatters for extracted ingredient lists (JSON and Markdown)."""

import json
from typing import Any, Dict, List, Optional

from ingredient_engine.data_layer.lexicon import fold_text
from ingredient_engine.data_layer.models import (
    Ambiguous,
    Ingredient,
    IngredientList,
    Quantity,
    is_count,
    is_volume,
    is_weight,
)


CATEGORY_TITLES = {
    "volume": "Volume",
    "weight": "Weight",
    "count": "Count",
    "ambiguous": "To Taste / As Needed",
    "other": "Other",
}


def format_quantity(quantity: Optional[Quantity]) -> str:
    """Format a quantity for display (e.g., "2", "1 1/2", "2-3", "~200").

    Returns an empty string when there is no quantity.
    """
    if quantity is None:
        return ""
    return quantity.display()


def format_ingredient_string(ingredient: Ingredient) -> str:
    """Format an ingredient as a string (e.g., "2 cups flour (sifted)").

    Args:
        ingredient: Ingredient object

    Returns:
        Formatted string like "250 g farine" or "salt to taste"
    """
    if isinstance(ingredient.quantity, Ambiguous):
        # The phrase usually already sits inside the fallback name
        if fold_text(ingredient.quantity.phrase) in fold_text(ingredient.name):
            text = ingredient.name.strip()
        else:
            text = f"{ingredient.name.strip()} {ingredient.quantity.phrase}"
    else:
        parts = [format_quantity(ingredient.quantity)]
        if ingredient.unit is not None:
            parts.append(ingredient.unit.display_name)
        parts.append(ingredient.name.strip())
        text = " ".join(part for part in parts if part)

    if ingredient.modifier:
        text = f"{text} ({ingredient.modifier})"
    return text


def _category(ingredient: Ingredient) -> str:
    if isinstance(ingredient.quantity, Ambiguous):
        return "ambiguous"
    if is_volume(ingredient.unit):
        return "volume"
    if is_weight(ingredient.unit):
        return "weight"
    if is_count(ingredient.unit) or (ingredient.has_quantity and ingredient.unit is None):
        return "count"
    return "other"


def format_category_summary(result: IngredientList) -> str:
    """Format ingredients grouped by the kind of measurement.

    Unitless amounts ("2-3 onions") count as "count"; specialized and
    unknown units and name-only lines land in "Other".
    """
    groups: Dict[str, List[Ingredient]] = {key: [] for key in CATEGORY_TITLES}
    for ingredient in result.ingredients:
        groups[_category(ingredient)].append(ingredient)

    lines = ["## Ingredients by Measurement", ""]
    for key, title in CATEGORY_TITLES.items():
        if not groups[key]:
            continue
        lines.append(f"### {title} ({len(groups[key])})")
        for ingredient in groups[key]:
            lines.append(f"- {format_ingredient_string(ingredient)}")
        lines.append("")

    return "\n".join(lines)


def format_list_markdown(result: IngredientList) -> str:
    """Format an IngredientList as Markdown.

    Args:
        result: IngredientList from parsing

    Returns:
        Formatted Markdown string
    """
    lines = []

    # Header
    lines.append("# Ingredients\n")
    lines.append(
        f"**Parsed:** {result.parsed_count} | "
        f"**Unparsed:** {result.unparsed_count} | "
        f"**Confidence:** {result.overall_confidence * 100:.0f}%"
    )
    lines.append("")

    if not result.ingredients:
        lines.append("_No ingredients found._")
        lines.append("")

    for ingredient in result.ingredients:
        line = f"- {format_ingredient_string(ingredient)}"
        if ingredient.confidence < 1.0:
            line += f" _(confidence {ingredient.confidence:.1f})_"
        lines.append(line)
    if result.ingredients:
        lines.append("")

    # Unparsed lines (if any)
    if result.unparsed_lines:
        lines.append("## Unparsed")
        for unparsed in result.unparsed_lines:
            lines.append(f"- {unparsed}")
        lines.append("")

    return "\n".join(lines)


def format_list_json(result: IngredientList) -> Dict[str, Any]:
    """Format an IngredientList as JSON (for API usage).

    The serialized IngredientList fields are kept verbatim; each ingredient
    gains a "display" string and the summary counts are added.
    """
    data = result.to_dict()
    for item, ingredient in zip(data["ingredients"], result.ingredients):
        item["display"] = format_ingredient_string(ingredient)
    data["parsed_count"] = result.parsed_count
    data["unparsed_count"] = result.unparsed_count
    return data


def format_list_json_string(result: IngredientList, indent: int = 2) -> str:
    """Format an IngredientList as a JSON string.

    Args:
        result: IngredientList from parsing
        indent: JSON indentation (default: 2)

    Returns:
        JSON string
    """
    return json.dumps(format_list_json(result), indent=indent, ensure_ascii=False)
