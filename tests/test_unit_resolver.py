"""Tests for unit resolution after a quantity."""
import pytest

from ingredient_engine.data_layer.lexicon import default_lexicon
from ingredient_engine.data_layer.models import Unit, UnknownUnit
from ingredient_engine.ingestion.extraction_errors import UnrecognizedUnitError
from ingredient_engine.ingestion.unit_resolver import UnitResolver, is_unit_shaped


@pytest.fixture
def resolver():
    """Create a UnitResolver on the built-in lexicon."""
    return UnitResolver(default_lexicon())


class TestLexiconUnits:
    """Tests for units found in the lexicon."""

    def test_english_unit(self, resolver):
        match, issues = resolver.resolve(" cups flour", "en")
        assert match.unit is Unit.CUPS
        assert match.matched_text == "cups"
        assert match.end == 5
        assert issues == []

    def test_unit_glued_to_number(self, resolver):
        match, _ = resolver.resolve("g farine", "fr")
        assert match.unit is Unit.GRAMS
        assert (match.start, match.end) == (0, 1)

    def test_multi_word_french_unit(self, resolver):
        """The longest phrase wins over its first word."""
        match, _ = resolver.resolve(" cuillères à soupe de sucre", "fr")
        assert match.unit is Unit.TABLESPOONS
        assert match.matched_text == "cuillères à soupe"

    def test_diacritics_and_case_are_ignored(self, resolver):
        match, _ = resolver.resolve(" Cuilleres A Soupe de sucre", "fr")
        assert match.unit is Unit.TABLESPOONS

    def test_multi_word_english_unit(self, resolver):
        match, _ = resolver.resolve(" fl oz milk", "en")
        assert match.unit is Unit.FLUID_OUNCES
        assert match.matched_text == "fl oz"

    def test_dotted_abbreviation(self, resolver):
        match, _ = resolver.resolve(" c. à s. d'huile", "fr")
        assert match.unit is Unit.TABLESPOONS
        assert match.matched_text == "c. à s."

    def test_trailing_comma_is_not_part_of_unit(self, resolver):
        match, _ = resolver.resolve(" cups, packed brown sugar", "en")
        assert match.unit is Unit.CUPS
        assert match.matched_text == "cups"
        assert match.end == 5

    @pytest.mark.parametrize("remainder,language,unit", [
        (" tsp salt", "en", Unit.TEASPOONS),
        (" cac de sel", "fr", Unit.TEASPOONS),
        (" kg de pommes", "fr", Unit.KILOGRAMS),
        (" lbs beef", "en", Unit.POUNDS),
        (" gousses d'ail", "fr", Unit.CLOVES),
        (" pincée de sel", "fr", Unit.PINCHES),
        (" ml water", "en", Unit.MILLILITERS),
    ])
    def test_common_units(self, resolver, remainder, language, unit):
        match, _ = resolver.resolve(remainder, language)
        assert match.unit is unit


class TestUnknownUnits:
    """Tests for tokens missing from the lexicon."""

    def test_unit_shaped_token_becomes_unknown(self, resolver):
        match, issues = resolver.resolve(" ctn. eggs", "en")
        assert match.unit == UnknownUnit("ctn.")
        assert match.matched_text == "ctn."
        assert isinstance(issues[0], UnrecognizedUnitError)
        assert issues[0].kept_as_unit is True

    def test_word_stays_in_name(self, resolver):
        assert resolver.resolve(" onions", "en") == (None, [])

    def test_other_language_unit_stays_in_name(self, resolver):
        match, issues = resolver.resolve(" tasses de farine", "en")
        assert match is None
        assert issues[0].kept_as_unit is False
        assert issues[0].token == "tasses"

    def test_empty_remainder(self, resolver):
        assert resolver.resolve("", "en") == (None, [])
        assert resolver.resolve("   ", "en") == (None, [])


class TestIsUnitShaped:
    """Tests for the unit-shape heuristic."""

    @pytest.mark.parametrize("token", ["ctn", "ctn.", "lg", "T", "env.", "bx,"])
    def test_unit_shaped(self, token):
        assert is_unit_shaped(token)

    @pytest.mark.parametrize("token", ["onions", "large", "egg", "2", "(sifted)", "", "abcde."])
    def test_not_unit_shaped(self, token):
        assert not is_unit_shaped(token)
