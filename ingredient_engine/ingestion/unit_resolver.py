"""Unit resolution for the text that follows a recognized quantity.

Multi-word forms are tried before shorter ones, so "cuillères à soupe"
resolves as a whole instead of stopping at "cuillères", and "fl oz" wins over
a bare "fl".

A token that is not in the lexicon becomes an UnknownUnit only when it looks
like a unit abbreviation:

- a short alphabetic token ending in a period ("env.", "ctn.")
- a short alphabetic token with no vowels ("ctn", "lg", "T")

Anything else ("onions", "large") is left for the name.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ingredient_engine.data_layer.lexicon import LANG_EN, Lexicon, fold_text
from ingredient_engine.data_layer.models import UnitLike, UnknownUnit
from ingredient_engine.ingestion.extraction_errors import (
    ExtractionError,
    UnrecognizedUnitError,
)


TOKEN_PATTERN = re.compile(r"\S+")
TRAILING_PUNCTUATION = ",;:"
VOWELS = frozenset("aeiouy")
MAX_ABBREVIATION_LENGTH = 4


@dataclass(frozen=True)
class UnitMatch:
    """A resolved unit and its span within the remainder.

    Attributes:
        unit: Canonical Unit or UnknownUnit
        matched_text: The unit as written (e.g., "Cuillères à soupe")
        start: Start index in the remainder
        end: End index in the remainder; the name starts here
    """

    unit: UnitLike
    matched_text: str
    start: int
    end: int


def is_unit_shaped(token: str) -> bool:
    """Whether an unknown token looks like a unit abbreviation."""
    stripped = token.rstrip(TRAILING_PUNCTUATION)
    core = fold_text(stripped.rstrip("."))
    if not core.isalpha() or len(core) > MAX_ABBREVIATION_LENGTH:
        return False
    if stripped.endswith("."):
        return True
    return not any(char in VOWELS for char in core)


class UnitResolver:
    """Resolves the unit immediately after a quantity."""

    def __init__(self, lexicon: Lexicon):
        self.lexicon = lexicon

    def resolve(
        self, remainder: str, language: str = LANG_EN
    ) -> Tuple[Optional[UnitMatch], List[ExtractionError]]:
        """Find the unit at the start of ``remainder``.

        Args:
            remainder: Line text after the quantity (may start with spaces,
                or directly with the unit as in "250g")
            language: "en" or "fr"

        Returns:
            Tuple of (match or None, issues)
        """
        tokens = list(TOKEN_PATTERN.finditer(remainder))
        if not tokens:
            return None, []

        longest = min(self.lexicon.max_unit_words, len(tokens))
        for count in range(longest, 0, -1):
            span = tokens[:count]
            start = span[0].start()
            phrase = remainder[start:span[-1].end()].rstrip(TRAILING_PUNCTUATION)
            unit = self.lexicon.lookup_unit(phrase, language)
            if unit is not None:
                match = UnitMatch(unit=unit, matched_text=phrase, start=start, end=start + len(phrase))
                return match, []

        first = tokens[0]
        raw = first.group(0).rstrip(TRAILING_PUNCTUATION)
        if is_unit_shaped(raw):
            match = UnitMatch(
                unit=UnknownUnit(raw),
                matched_text=raw,
                start=first.start(),
                end=first.start() + len(raw),
            )
            return match, [UnrecognizedUnitError(raw, kept_as_unit=True)]

        if self.lexicon.is_known_unit(raw):
            # A unit of the other language; it stays in the name
            return None, [UnrecognizedUnitError(raw, kept_as_unit=False)]

        return None, []
