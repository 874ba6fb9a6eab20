"""Extraction of a preparation note ("diced", "all-purpose") from a line."""
import re
from typing import Optional, Tuple

PARENTHETICAL_PATTERN = re.compile(r"\(([^()]*)\)")
MODIFIER_PUNCTUATION = " \t,;:.-–—()[]"


def _clean_modifier(text: str) -> Optional[str]:
    cleaned = " ".join(text.split()).strip(MODIFIER_PUNCTUATION)
    return cleaned or None


def extract_modifier(remainder: str) -> Tuple[str, Optional[str]]:
    """Split a modifier off the text that follows the quantity and unit.

    Two forms are recognized, and at most one modifier is taken:

    1. A parenthesized clause anywhere: "flour (all-purpose)"
    2. A comma clause running to the end: "tomatoes, diced"

    A parenthetical wins when both are present; the comma clause then stays
    in the remainder.
    A comma with nothing before it is dropped rather than read as a clause.

    Args:
        remainder: Line text after quantity and unit removal

    Returns:
        Tuple of (remainder without the modifier, modifier or None)
    """
    match = PARENTHETICAL_PATTERN.search(remainder)
    if match:
        rest = remainder[:match.start()] + " " + remainder[match.end():]
        return " ".join(rest.split()), _clean_modifier(match.group(1))

    comma = remainder.find(",")
    if comma != -1:
        if not remainder[:comma].strip(MODIFIER_PUNCTUATION):
            # Stray comma between the unit and the name: "2 cups, flour"
            return extract_modifier(remainder[comma + 1:])
        modifier = _clean_modifier(remainder[comma + 1:])
        if modifier:
            return remainder[:comma], modifier

    return remainder, None
