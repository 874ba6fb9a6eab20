"""Ingredient name extraction from what is left of a line."""
import re
from typing import Tuple

from ingredient_engine.data_layer.lexicon import fold_text
from ingredient_engine.logging_config import get_logger

logger = get_logger(__name__)

# One connector is dropped after a quantity: "2 cups of flour", "200 g de farine",
# "2 c. à s. d'huile"
LEADING_CONNECTORS = ("of ", "de ", "d'", "du ", "des ")
NAME_PUNCTUATION = " \t,;:.-–—*•"
SPACE_BEFORE_PUNCTUATION = re.compile(r"\s+([,;:])")


def _strip_connector(name: str) -> str:
    folded = fold_text(name[:4])
    for connector in LEADING_CONNECTORS:
        if folded.startswith(connector) and len(name) > len(connector):
            return name[len(connector):].lstrip()
    return name


def _truncate(name: str, max_length: int) -> str:
    if len(name) <= max_length:
        return name
    truncated = name[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        truncated = truncated[:last_space]
    logger.warning(
        "Ingredient name truncated (%d > %d characters)", len(name), max_length
    )
    return truncated.rstrip()


def extract_name(
    remainder: str,
    original_line: str,
    after_quantity: bool = False,
    max_length: int = 100,
) -> Tuple[str, bool]:
    """Turn the remainder of a line into an ingredient name.

    Args:
        remainder: Text left after quantity, unit and modifier removal
        original_line: The untrimmed line as written
        after_quantity: True when a quantity was removed from the line,
            which enables dropping a leading "of"/"de"/"d'"
        max_length: Longest allowed name; longer names are cut at a word

    Returns:
        Tuple of (name, used_fallback). When nothing is left, the name is the
        original line and used_fallback is True.
    """
    name = " ".join(remainder.split())
    name = SPACE_BEFORE_PUNCTUATION.sub(r"\1", name).strip(NAME_PUNCTUATION)
    if after_quantity:
        name = _strip_connector(name).strip(NAME_PUNCTUATION)

    if not name:
        return original_line, True

    return _truncate(name, max_length), False
