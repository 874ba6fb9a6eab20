"""Quantity recognition for the leading span of an ingredient line.

Pattern classes are tried in a fixed order and the first class that matches
wins:

1. Range           "2-3", "1 to 2", "2 à 3", "1/2-1"
2. Mixed fraction  "2 1/4", "1-1/2", "1½", "2 ½"
3. Simple fraction "1/2", "3⁄4", "½"
4. Decimal         "2", "1.5", "1,5" (French), optionally after an
                   approximation marker ("about 2", "environ 200")
5. Ambiguous       an indicator phrase anywhere in the line ("to taste")

Matching runs on the folded line (lowercase, no accents) and spans are mapped
back to the original text.
"""
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from ingredient_engine.data_layer.lexicon import (
    FRACTION_GLYPHS,
    FRACTION_SLASHES,
    LANG_EN,
    LANG_FR,
    SUPPORTED_LANGUAGES,
    Lexicon,
    fold_with_offsets,
)
from ingredient_engine.data_layer.models import (
    Ambiguous,
    Approximate,
    Exact,
    Fraction,
    Quantity,
    Range,
)
from ingredient_engine.ingestion.extraction_errors import (
    AmbiguousQuantityError,
    ExtractionError,
    MalformedFractionError,
)


_GLYPHS = "".join(FRACTION_GLYPHS)
_SLASH = rf"\s*[{FRACTION_SLASHES}]\s*"
# A number must not run on into more digits or a slash
_END = rf"(?![\d{FRACTION_SLASHES}])"

# English commas group thousands ("1,000"); French commas mark decimals ("1,5")
_DECIMAL = {
    LANG_EN: r"(?:\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?|\.\d+)",
    LANG_FR: r"(?:\d+(?:[.,]\d+)?|[.,]\d+)",
}

_RANGE_JOINERS = {
    LANG_EN: r"(?:\s*[-–—]\s*|\s+(?:to|or)\s+)",
    LANG_FR: r"(?:\s*[-–—]\s*|\s+(?:a|ou)\s+)",
}


@dataclass(frozen=True)
class QuantityMatch:
    """A recognized quantity and the span of the line it consumed.

    Attributes:
        quantity: The recognized quantity
        matched_text: ``line[start:end]``, including any approximation marker
        start: Start index in the line
        end: End index in the line; the unit resolver starts here
    """

    quantity: Quantity
    matched_text: str
    start: int
    end: int


@dataclass(frozen=True)
class _LanguagePatterns:
    range: Pattern
    mixed: Tuple[Pattern, ...]
    simple: Tuple[Pattern, ...]
    decimal: Pattern
    operand_mixed_ascii: Pattern
    operand_mixed_glyph: Pattern
    operand_fraction: Pattern
    decimal_comma: bool


def _compile_patterns(language: str) -> _LanguagePatterns:
    number = _DECIMAL[language]
    mixed_ascii = rf"\d+\s+\d+{_SLASH}\d+"
    mixed_glyph = rf"\d+\s*[{_GLYPHS}]"
    fraction = rf"\d+{_SLASH}\d+"
    operand = rf"(?:{mixed_ascii}|{mixed_glyph}|{fraction}|[{_GLYPHS}]|{number})"

    return _LanguagePatterns(
        range=re.compile(
            rf"\s*(?P<low>{operand}){_RANGE_JOINERS[language]}(?P<high>{operand}){_END}"
        ),
        mixed=(
            re.compile(
                rf"\s*(?P<whole>\d+)(?:\s+|-)(?P<num>\d+){_SLASH}(?P<den>\d+){_END}"
            ),
            re.compile(rf"\s*(?P<whole>\d+)\s*(?P<glyph>[{_GLYPHS}])"),
        ),
        simple=(
            re.compile(rf"\s*(?P<num>\d+){_SLASH}(?P<den>\d+){_END}"),
            re.compile(rf"\s*(?P<glyph>[{_GLYPHS}])"),
        ),
        decimal=re.compile(rf"\s*(?P<number>{number}){_END}"),
        operand_mixed_ascii=re.compile(rf"(\d+)\s+(\d+){_SLASH}(\d+)$"),
        operand_mixed_glyph=re.compile(rf"(\d+)\s*([{_GLYPHS}])$"),
        operand_fraction=re.compile(rf"(\d+){_SLASH}(\d+)$"),
        decimal_comma=language != LANG_EN,
    )


def _to_float(number: str, decimal_comma: bool) -> float:
    if decimal_comma:
        return float(number.replace(",", "."))
    return float(number.replace(",", ""))


def _checked_fraction(text: str, numerator: int, denominator: int) -> None:
    if denominator == 0:
        raise MalformedFractionError(text, numerator, denominator)


def _longest_match(patterns: Sequence[Pattern], text: str, pos: int) -> Optional[re.Match]:
    best = None
    for pattern in patterns:
        match = pattern.match(text, pos)
        if match and (best is None or match.end() > best.end()):
            best = match
    return best


class QuantityRecognizer:
    """Recognizes the quantity at the start of a line.

    Usage:
        recognizer = QuantityRecognizer(default_lexicon())
        match, issues = recognizer.recognize("2 1/4 cups flour", "en")
        print(match.quantity)      # Fraction(numerator=1, denominator=4, whole=2)
        print(match.matched_text)  # "2 1/4"
    """

    def __init__(self, lexicon: Lexicon):
        self.lexicon = lexicon
        self._patterns: Dict[str, _LanguagePatterns] = {
            language: _compile_patterns(language) for language in SUPPORTED_LANGUAGES
        }

    def recognize(
        self, line: str, language: str = LANG_EN
    ) -> Tuple[Optional[QuantityMatch], List[ExtractionError]]:
        """Find the quantity for a line.

        Args:
            line: Trimmed candidate line
            language: "en" or "fr"; selects decimal separators, range words,
                markers and indicator phrases

        Returns:
            Tuple of (match or None, issues). A zero-denominator fraction
            yields (None, [MalformedFractionError]).
        """
        issues: List[ExtractionError] = []
        patterns = self._patterns.get(language, self._patterns[LANG_EN])
        folded, offsets = fold_with_offsets(line)

        try:
            match = self._recognize_numeric(line, folded, offsets, patterns, language)
        except MalformedFractionError as e:
            issues.append(e)
            return None, issues

        if match is not None:
            return match, issues

        ambiguous = self._recognize_ambiguous(line, folded, offsets, language)
        if ambiguous is not None:
            issues.append(AmbiguousQuantityError(ambiguous.quantity.phrase, language))
        return ambiguous, issues

    def _recognize_numeric(
        self,
        line: str,
        folded: str,
        offsets: List[int],
        patterns: _LanguagePatterns,
        language: str,
    ) -> Optional[QuantityMatch]:
        pos = 0
        approximate = False
        marker_pattern = self.lexicon.marker_pattern(language)
        if marker_pattern is not None:
            marker = marker_pattern.match(folded)
            if marker and self._starts_number(folded, marker.end()):
                pos = marker.end()
                approximate = True

        quantity, end = self._match_classes(folded, pos, patterns)
        if quantity is None:
            return None

        if approximate and isinstance(quantity, (Exact, Fraction)):
            quantity = Approximate(quantity.estimated_value())

        start = len(folded) - len(folded.lstrip())
        original_start = offsets[start]
        original_end = offsets[end]
        return QuantityMatch(
            quantity=quantity,
            matched_text=line[original_start:original_end],
            start=original_start,
            end=original_end,
        )

    @staticmethod
    def _starts_number(folded: str, pos: int) -> bool:
        return pos < len(folded) and (folded[pos].isdigit() or folded[pos] in _GLYPHS
                                      or folded[pos] in ".,")

    def _match_classes(
        self, folded: str, pos: int, patterns: _LanguagePatterns
    ) -> Tuple[Optional[Quantity], int]:
        # 1. Range
        match = patterns.range.match(folded, pos)
        if match:
            low = self._operand_value(match.group("low"), patterns)
            high = self._operand_value(match.group("high"), patterns)
            if low <= high:
                return Range(low, high), match.end()

        # 2. Mixed fraction
        match = _longest_match(patterns.mixed, folded, pos)
        if match:
            whole = int(match.group("whole"))
            numerator, denominator = self._fraction_parts(match)
            return Fraction(numerator, denominator, whole=whole), match.end()

        # 3. Simple fraction
        match = _longest_match(patterns.simple, folded, pos)
        if match:
            numerator, denominator = self._fraction_parts(match)
            return Fraction(numerator, denominator), match.end()

        # 4. Decimal or integer
        match = patterns.decimal.match(folded, pos)
        if match:
            return Exact(_to_float(match.group("number"), patterns.decimal_comma)), match.end()

        return None, pos

    @staticmethod
    def _fraction_parts(match: re.Match) -> Tuple[int, int]:
        groups = match.groupdict()
        if groups.get("glyph"):
            return FRACTION_GLYPHS[groups["glyph"]]
        numerator = int(groups["num"])
        denominator = int(groups["den"])
        _checked_fraction(match.group(0).strip(), numerator, denominator)
        return numerator, denominator

    @staticmethod
    def _operand_value(text: str, patterns: _LanguagePatterns) -> float:
        """Numeric value of one side of a range."""
        text = text.strip()
        match = patterns.operand_mixed_ascii.match(text)
        if match:
            whole, numerator, denominator = (int(g) for g in match.groups())
            _checked_fraction(text, numerator, denominator)
            return whole + numerator / denominator
        match = patterns.operand_mixed_glyph.match(text)
        if match:
            numerator, denominator = FRACTION_GLYPHS[match.group(2)]
            return int(match.group(1)) + numerator / denominator
        match = patterns.operand_fraction.match(text)
        if match:
            numerator, denominator = int(match.group(1)), int(match.group(2))
            _checked_fraction(text, numerator, denominator)
            return numerator / denominator
        if text in FRACTION_GLYPHS:
            numerator, denominator = FRACTION_GLYPHS[text]
            return numerator / denominator
        return _to_float(text, patterns.decimal_comma)

    def _recognize_ambiguous(
        self, line: str, folded: str, offsets: List[int], language: str
    ) -> Optional[QuantityMatch]:
        pattern = self.lexicon.ambiguous_pattern(language)
        if pattern is None:
            return None
        match = pattern.search(folded)
        if match is None:
            return None

        phrase = line[offsets[match.start()]:offsets[match.end()]]
        # The indicator describes the whole line, so the whole line is consumed
        return QuantityMatch(
            quantity=Ambiguous(phrase),
            matched_text=line,
            start=0,
            end=len(line),
        )
