"""Tests for quantity recognition."""
import pytest

from ingredient_engine.data_layer.lexicon import default_lexicon
from ingredient_engine.data_layer.models import (
    Ambiguous,
    Approximate,
    Exact,
    Fraction,
    Range,
)
from ingredient_engine.ingestion.extraction_errors import (
    AmbiguousQuantityError,
    ExtractionErrorCode,
    MalformedFractionError,
)
from ingredient_engine.ingestion.quantity_recognizer import QuantityRecognizer


@pytest.fixture
def recognizer():
    """Create a QuantityRecognizer on the built-in lexicon."""
    return QuantityRecognizer(default_lexicon())


class TestNumericClasses:
    """Tests for ranges, fractions and decimals."""

    def test_integer(self, recognizer):
        match, issues = recognizer.recognize("2 cups flour", "en")
        assert match.quantity == Exact(2.0)
        assert match.matched_text == "2"
        assert match.end == 1
        assert issues == []

    def test_decimal(self, recognizer):
        match, _ = recognizer.recognize("1.5 cups milk", "en")
        assert match.quantity == Exact(1.5)

    def test_french_decimal_comma(self, recognizer):
        match, _ = recognizer.recognize("1,5 l de lait", "fr")
        assert match.quantity == Exact(1.5)
        assert match.matched_text == "1,5"

    def test_english_thousands_separator(self, recognizer):
        match, _ = recognizer.recognize("1,000 g sugar", "en")
        assert match.quantity == Exact(1000.0)
        assert match.matched_text == "1,000"

    def test_english_comma_without_group_is_not_decimal(self, recognizer):
        match, _ = recognizer.recognize("1,5 cups", "en")
        assert match.quantity == Exact(1.0)
        assert match.matched_text == "1"

    def test_thousands_in_range(self, recognizer):
        match, _ = recognizer.recognize("1,000-1,500 g flour", "en")
        assert match.quantity == Range(1000.0, 1500.0)

    def test_simple_fraction(self, recognizer):
        match, _ = recognizer.recognize("1/2 teaspoon salt", "en")
        assert match.quantity == Fraction(numerator=1, denominator=2)
        assert match.matched_text == "1/2"

    def test_mixed_fraction(self, recognizer):
        match, _ = recognizer.recognize("2 1/4 cups flour", "en")
        assert match.quantity == Fraction(numerator=1, denominator=4, whole=2)
        assert match.matched_text == "2 1/4"

    def test_hyphenated_mixed_fraction(self, recognizer):
        """"1-1/2" is one and a half, not a range from 1 down to 1/2."""
        match, _ = recognizer.recognize("1-1/2 cups sugar", "en")
        assert match.quantity == Fraction(numerator=1, denominator=2, whole=1)

    @pytest.mark.parametrize("line,expected", [
        ("½ cup milk", Fraction(numerator=1, denominator=2)),
        ("1½ cups milk", Fraction(numerator=1, denominator=2, whole=1)),
        ("2 ¾ cups milk", Fraction(numerator=3, denominator=4, whole=2)),
    ])
    def test_fraction_glyphs(self, recognizer, line, expected):
        match, _ = recognizer.recognize(line, "en")
        assert match.quantity == expected

    @pytest.mark.parametrize("line,language", [
        ("2-3 onions", "en"),
        ("2 to 3 onions", "en"),
        ("2 – 3 onions", "en"),
        ("2 à 3 oignons", "fr"),
        ("2 a 3 oignons", "fr"),
    ])
    def test_ranges(self, recognizer, line, language):
        match, _ = recognizer.recognize(line, language)
        assert match.quantity == Range(2.0, 3.0)

    def test_range_of_fractions(self, recognizer):
        match, _ = recognizer.recognize("1/2-1 cup water", "en")
        assert match.quantity == Range(0.5, 1.0)

    def test_descending_range_is_not_a_range(self, recognizer):
        match, _ = recognizer.recognize("3 to 1 cups", "en")
        assert match.quantity == Exact(3.0)

    def test_no_quantity(self, recognizer):
        assert recognizer.recognize("eggs", "en") == (None, [])

    def test_number_not_at_start_is_ignored(self, recognizer):
        match, issues = recognizer.recognize("eggs 2", "en")
        assert match is None


class TestApproximation:
    """Tests for approximation markers."""

    def test_english_marker(self, recognizer):
        match, _ = recognizer.recognize("about 2 cups milk", "en")
        assert match.quantity == Approximate(2.0)
        assert match.matched_text == "about 2"

    def test_french_marker(self, recognizer):
        match, _ = recognizer.recognize("environ 200 g de sucre", "fr")
        assert match.quantity == Approximate(200.0)

    def test_marker_before_fraction(self, recognizer):
        match, _ = recognizer.recognize("about 1/2 cup", "en")
        assert match.quantity == Approximate(0.5)

    def test_marker_before_range_keeps_range(self, recognizer):
        match, _ = recognizer.recognize("about 2-3 eggs", "en")
        assert match.quantity == Range(2.0, 3.0)

    def test_marker_without_number(self, recognizer):
        """A marker alone is not a quantity."""
        match, _ = recognizer.recognize("about a cup of flour", "en")
        assert match is None


class TestMalformedFraction:
    """Tests for zero-denominator fractions."""

    def test_zero_denominator_gives_no_quantity(self, recognizer):
        match, issues = recognizer.recognize("1/0 cup flour", "en")
        assert match is None
        assert len(issues) == 1
        assert isinstance(issues[0], MalformedFractionError)
        assert issues[0].code == ExtractionErrorCode.MALFORMED_FRACTION

    def test_zero_denominator_in_range(self, recognizer):
        match, issues = recognizer.recognize("1/0-2 cups", "en")
        assert match is None
        assert isinstance(issues[0], MalformedFractionError)


class TestAmbiguous:
    """Tests for indicator phrases with no numeric value."""

    def test_phrase_anywhere_in_line(self, recognizer):
        match, issues = recognizer.recognize("salt to taste", "en")
        assert match.quantity == Ambiguous("to taste")
        assert isinstance(issues[0], AmbiguousQuantityError)

    def test_whole_line_is_consumed(self, recognizer):
        match, _ = recognizer.recognize("salt to taste", "en")
        assert match.matched_text == "salt to taste"
        assert (match.start, match.end) == (0, len("salt to taste"))

    def test_french_phrase_keeps_accents(self, recognizer):
        match, _ = recognizer.recognize("sel au goût", "fr")
        assert match.quantity == Ambiguous("au goût")

    def test_unaccented_french_phrase(self, recognizer):
        match, _ = recognizer.recognize("Sel Au Gout", "fr")
        assert match.quantity == Ambiguous("Au Gout")

    def test_phrase_only_for_its_language(self, recognizer):
        match, _ = recognizer.recognize("salt to taste", "fr")
        assert match is None

    def test_number_wins_over_phrase(self, recognizer):
        match, _ = recognizer.recognize("2 eggs, or to taste", "en")
        assert match.quantity == Exact(2.0)


class TestIdempotence:
    """Re-feeding the matched text gives the same quantity."""

    @pytest.mark.parametrize("line,language", [
        ("2 cups flour", "en"),
        ("2 1/4 cups flour", "en"),
        ("1½ cups milk", "en"),
        ("2-3 onions", "en"),
        ("about 2 cups milk", "en"),
        ("environ 1,5 l de lait", "fr"),
        ("salt to taste", "en"),
    ])
    def test_refeed_matched_text(self, recognizer, line, language):
        match, _ = recognizer.recognize(line, language)
        again, _ = recognizer.recognize(match.matched_text, language)
        assert again.quantity == match.quantity
