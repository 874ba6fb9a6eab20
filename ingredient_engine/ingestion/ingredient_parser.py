"""Ingredient list parser: turns OCR text into an IngredientList.

Each candidate line goes through the same stages:

    line -> quantity -> unit -> modifier -> name -> confidence

The parser is total. Whatever the input, ``parse`` returns an IngredientList
and ``parse_line`` returns a LineParseResult; failures only lower confidence.
"""
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple, Union

from ingredient_engine.data_layer.engine_config import EngineConfig
from ingredient_engine.data_layer.lexicon import (
    LANG_AUTO,
    LANG_EN,
    LANG_FR,
    LANGUAGE_HINTS,
    Lexicon,
)
from ingredient_engine.data_layer.models import (
    Ingredient,
    IngredientList,
    Unit,
    is_ambiguous,
)
from ingredient_engine.ingestion.confidence_scorer import (
    FALLBACK_CONFIDENCE,
    score_confidence,
)
from ingredient_engine.ingestion.extraction_errors import (
    EmptyLineError,
    ExtractionError,
    UnrecognizedUnitError,
)
from ingredient_engine.ingestion.line_splitter import (
    CandidateLine,
    make_candidate,
    split_lines,
)
from ingredient_engine.ingestion.modifier_extractor import extract_modifier
from ingredient_engine.ingestion.name_extractor import extract_name
from ingredient_engine.ingestion.quantity_recognizer import QuantityRecognizer
from ingredient_engine.ingestion.unit_resolver import UnitResolver
from ingredient_engine.logging_config import get_logger

logger = get_logger(__name__)

TextInput = Union[str, bytes, None]


@dataclass(frozen=True)
class LineParseResult:
    """One line's ingredient plus how it was extracted.

    Attributes:
        line: The candidate line as parsed (trimmed, bullet removed)
        ingredient: Extracted ingredient, or None for a blank line
        language: Language whose lexicon produced the result ("en" or "fr")
        quantity_text: Quantity as written, including any marker
        unit_text: Unit as written
        name_is_fallback: True when the name is the original line
        issues: Everything that degraded the line
    """

    line: str
    ingredient: Optional[Ingredient]
    language: str
    quantity_text: Optional[str] = None
    unit_text: Optional[str] = None
    name_is_fallback: bool = False
    issues: Tuple[ExtractionError, ...] = field(default_factory=tuple)

    @property
    def confidence(self) -> float:
        if self.ingredient is None:
            return 0.0
        return self.ingredient.confidence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line": self.line,
            "ingredient": self.ingredient.to_dict() if self.ingredient is not None else None,
            "language": self.language,
            "quantity_text": self.quantity_text,
            "unit_text": self.unit_text,
            "name_is_fallback": self.name_is_fallback,
            "issues": [issue.to_dict() for issue in self.issues],
        }


class IngredientParser:
    """Parser for OCR ingredient text into IngredientList objects.

    Usage:
        parser = IngredientParser()
        result = parser.parse("2 cups flour\\n1/2 teaspoon salt")
        print(result.ingredients[0].name)     # "flour"
        print(result.overall_confidence)      # 1.0

    The lexicon and compiled patterns are built once and only read afterwards,
    so one parser can be shared between threads.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None, config: Optional[EngineConfig] = None):
        """Initialize parser.

        Args:
            lexicon: Unit and phrase tables; built from ``config`` when omitted
            config: Parsing options; defaults apply when omitted

        Raises:
            ConfigurationError: If the configuration's lexicon entries collide
        """
        self.config = config or EngineConfig()
        self.lexicon = lexicon if lexicon is not None else self.config.build_lexicon()
        self.quantity_recognizer = QuantityRecognizer(self.lexicon)
        self.unit_resolver = UnitResolver(self.lexicon)

    def parse(self, text: TextInput, language: Optional[str] = None) -> IngredientList:
        """Parse a block of OCR text into an IngredientList.

        Args:
            text: Raw multi-line text; bytes are decoded as UTF-8
            language: "auto", "en" or "fr"; the configured default when None

        Returns:
            IngredientList with ingredients in line order
        """
        original_text = _decode(text)
        language = self._language(language)

        ingredients: List[Ingredient] = []
        unparsed_lines: List[str] = []
        for candidate in split_lines(original_text, self.config.strip_bullets):
            result = self._parse_candidate(candidate, language)
            if result.ingredient is None or not result.ingredient.name.strip():
                unparsed_lines.append(candidate.text)
                continue
            ingredients.append(result.ingredient)

        overall_confidence = _mean_confidence(ingredients)
        logger.info(
            "Parsed %d ingredients (%d unparsed), overall confidence %.2f",
            len(ingredients),
            len(unparsed_lines),
            overall_confidence,
        )
        return IngredientList(
            ingredients=tuple(ingredients),
            original_text=original_text,
            overall_confidence=overall_confidence,
            unparsed_lines=tuple(unparsed_lines),
        )

    def parse_line(self, line: TextInput, language: Optional[str] = None) -> LineParseResult:
        """Parse one line and report how it was extracted.

        A blank line gives a result with no ingredient and an EmptyLineError.
        Text with line breaks is treated as a single line.
        """
        raw = " ".join(_decode(line).splitlines())
        language = self._language(language)
        candidate = make_candidate(raw, strip_bullets=self.config.strip_bullets)
        if candidate is None:
            return LineParseResult(
                line=raw.strip(),
                ingredient=None,
                language=LANG_EN if language == LANG_AUTO else language,
                issues=(EmptyLineError(raw),),
            )
        return self._parse_candidate(candidate, language)

    def _language(self, language: Optional[str]) -> str:
        if language is None:
            return self.config.default_language
        normalized = str(language).strip().lower()
        if normalized not in LANGUAGE_HINTS:
            logger.warning("Unknown language hint %r, using auto", language)
            return LANG_AUTO
        return normalized

    def _parse_candidate(self, candidate: CandidateLine, language: str) -> LineParseResult:
        try:
            if language != LANG_AUTO:
                return self._extract(candidate, language)

            english = self._extract(candidate, LANG_EN)
            french = self._extract(candidate, LANG_FR)
            # "3 cans" is a bare English unit, not a French name "cans"
            if _resolved_unit(english) and _kept_other_language_unit(french):
                return english
            if _resolved_unit(french) and _kept_other_language_unit(english):
                return french
            if french.confidence != english.confidence:
                return french if french.confidence > english.confidence else english
            # "2 c. à s." is cups in English but tablespoons in French
            if len(french.unit_text or "") > len(english.unit_text or ""):
                return french
            return english
        except Exception:
            logger.exception("Unexpected failure on line %d", candidate.line_number)
            return LineParseResult(
                line=candidate.text,
                ingredient=Ingredient(name=candidate.text, confidence=FALLBACK_CONFIDENCE),
                language=LANG_EN if language == LANG_AUTO else language,
                name_is_fallback=True,
            )

    def _extract(self, candidate: CandidateLine, language: str) -> LineParseResult:
        """Run every stage for one line in one language."""
        text = candidate.text
        quantity_match, issues = self.quantity_recognizer.recognize(text, language)

        quantity = None
        unit = None
        quantity_text = None
        unit_text = None
        remainder = text
        if quantity_match is not None:
            quantity = quantity_match.quantity
            quantity_text = quantity_match.matched_text
            remainder = text[quantity_match.end:]
            if not is_ambiguous(quantity):
                unit_match, unit_issues = self.unit_resolver.resolve(remainder, language)
                issues.extend(unit_issues)
                if unit_match is not None:
                    unit = unit_match.unit
                    unit_text = unit_match.matched_text
                    remainder = remainder[unit_match.end:]

        remainder, modifier = extract_modifier(remainder)
        name, name_is_fallback = extract_name(
            remainder,
            candidate.original,
            after_quantity=quantity is not None,
            max_length=self.config.max_name_length,
        )

        confidence = score_confidence(
            quantity_recognized=quantity is not None,
            unit_recognized=isinstance(unit, Unit),
            distinct_name=not name_is_fallback,
            is_ambiguous=is_ambiguous(quantity),
        )
        logger.debug(
            "Line %d [%s]: quantity=%r unit=%r name=%r confidence=%.1f",
            candidate.line_number,
            language,
            quantity_text,
            unit_text,
            name,
            confidence,
        )

        return LineParseResult(
            line=text,
            ingredient=Ingredient(
                name=name,
                quantity=quantity,
                unit=unit,
                modifier=modifier,
                confidence=confidence,
            ),
            language=language,
            quantity_text=quantity_text,
            unit_text=unit_text,
            name_is_fallback=name_is_fallback,
            issues=tuple(issues),
        )


def _decode(text: TextInput) -> str:
    if text is None:
        return ""
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="replace")
    return str(text)


def _resolved_unit(result: LineParseResult) -> bool:
    return result.ingredient is not None and isinstance(result.ingredient.unit, Unit)


def _kept_other_language_unit(result: LineParseResult) -> bool:
    return any(
        isinstance(issue, UnrecognizedUnitError) and not issue.kept_as_unit
        for issue in result.issues
    )


def _mean_confidence(ingredients: List[Ingredient]) -> float:
    if not ingredients:
        return 0.0
    mean = sum(ingredient.confidence for ingredient in ingredients) / len(ingredients)
    # Float summation can land a hair above 1.0
    return min(1.0, mean)


@lru_cache(maxsize=1)
def _default_parser() -> IngredientParser:
    return IngredientParser()


def parse_ingredient_list(text: TextInput, language: str = LANG_AUTO) -> IngredientList:
    """Parse OCR text with the default lexicon."""
    return _default_parser().parse(text, language)


def parse_ingredient_line(line: TextInput, language: str = LANG_AUTO) -> LineParseResult:
    """Parse one line with the default lexicon."""
    return _default_parser().parse_line(line, language)
