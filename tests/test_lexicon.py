"""Tests for the bilingual unit lexicon."""
import pytest

from ingredient_engine.data_layer.lexicon import (
    AMBIGUOUS_PHRASES,
    APPROXIMATION_MARKERS,
    UNIT_SURFACE_FORMS,
    default_lexicon,
    fold_text,
    fold_with_offsets,
    lookup_key,
)
from ingredient_engine.data_layer.models import Unit


@pytest.fixture
def lexicon():
    return default_lexicon()


class TestFolding:
    """Tests for case and diacritic folding."""

    def test_fold_text(self):
        assert fold_text("Cuillères À Soupe") == "cuilleres a soupe"

    def test_curly_apostrophe(self):
        assert fold_text("d’huile") == "d'huile"

    def test_offsets_map_back_to_original(self):
        text = "Sel au goût"
        folded, offsets = fold_with_offsets(text)
        start = folded.index("gout")
        end = start + len("gout")
        assert text[offsets[start]:offsets[end]] == "goût"
        assert offsets[-1] == len(text)

    def test_lookup_key(self):
        assert lookup_key("C. à S.") == "c a s"
        assert lookup_key("fl   oz") == "fl oz"


class TestUnitLookup:
    """Tests for Lexicon.lookup_unit."""

    @pytest.mark.parametrize("phrase,language,unit", [
        ("cups", "en", Unit.CUPS),
        ("CUP", "en", Unit.CUPS),
        ("tasse", "fr", Unit.CUPS),
        ("càs", "fr", Unit.TABLESPOONS),
        ("cas", "fr", Unit.TABLESPOONS),
        ("c.à.s.", "fr", Unit.TABLESPOONS),
        ("cuilleres a cafe", "fr", Unit.TEASPOONS),
        ("g", "en", Unit.GRAMS),
        ("g", "fr", Unit.GRAMS),
        ("litre", "en", Unit.LITERS),
        ("bags", "en", Unit.BAGS),
        ("sac", "fr", Unit.BAGS),
        ("cube", "en", Unit.CUBES),
        ("cubes", "fr", Unit.CUBES),
        ("bar", "en", Unit.BARS),
        ("tablette", "fr", Unit.BARS),
        ("sheets", "en", Unit.SHEETS),
        ("serving", "en", Unit.SERVINGS),
        ("portion", "en", Unit.PORTIONS),
        ("portions", "fr", Unit.PORTIONS),
    ])
    def test_lookup(self, lexicon, phrase, language, unit):
        assert lexicon.lookup_unit(phrase, language) is unit

    def test_language_specific_forms(self, lexicon):
        assert lexicon.lookup_unit("tasse", "en") is None
        assert lexicon.lookup_unit("tbsp", "fr") is None
        assert lexicon.is_known_unit("tasse")

    def test_same_form_differs_by_language(self, lexicon):
        """"cc" is millilitres in English recipes, teaspoons in French ones."""
        assert lexicon.lookup_unit("cc", "en") is Unit.MILLILITERS
        assert lexicon.lookup_unit("cc", "fr") is Unit.TEASPOONS

    def test_every_unit_has_a_form(self):
        assert set(UNIT_SURFACE_FORMS) == set(Unit)

    def test_sachet_stays_a_package(self, lexicon):
        assert lexicon.lookup_unit("sachet", "fr") is Unit.PACKAGES
        assert lexicon.lookup_unit("bag", "en") is Unit.BAGS

    def test_multi_word_forms_counted(self, lexicon):
        assert lexicon.max_unit_words >= 3


class TestImmutability:
    """The lexicon is built once and never changes."""

    def test_default_is_cached(self):
        assert default_lexicon() is default_lexicon()

    def test_tables_are_read_only(self, lexicon):
        with pytest.raises(TypeError):
            lexicon.unit_forms["en"]["pail"] = Unit.GALLONS

    def test_overrides_return_new_lexicon(self, lexicon):
        extended = lexicon.with_overrides(unit_forms={Unit.GALLONS: {"en": ("pail",)}})
        assert extended.lookup_unit("pail", "en") is Unit.GALLONS
        assert lexicon.lookup_unit("pail", "en") is None

    def test_overrides_stack(self, lexicon):
        first = lexicon.with_overrides(unit_forms={Unit.GALLONS: {"en": ("pail",)}})
        second = first.with_overrides(approximation_markers={"en": ("nearly",)})
        assert second.lookup_unit("pail", "en") is Unit.GALLONS
        assert second.marker_pattern("en").match("nearly 2")

    def test_colliding_override_rejected(self, lexicon):
        with pytest.raises(ValueError):
            lexicon.with_overrides(unit_forms={Unit.GRAMS: {"en": ("cup",)}})


class TestPhrasePatterns:
    """Tests for markers and indicator phrases."""

    def test_marker_needs_word_boundary(self, lexicon):
        pattern = lexicon.marker_pattern("en")
        assert pattern.match("about 2")
        assert not pattern.match("abouts 2")

    def test_symbol_marker(self, lexicon):
        assert lexicon.marker_pattern("fr").match("~200")

    def test_ambiguous_phrase_search(self, lexicon):
        assert lexicon.ambiguous_pattern("en").search("salt, to taste")
        assert not lexicon.ambiguous_pattern("en").search("wholesome bread")

    def test_both_languages_have_phrases(self):
        for table in (APPROXIMATION_MARKERS, AMBIGUOUS_PHRASES):
            assert table["en"]
            assert table["fr"]
