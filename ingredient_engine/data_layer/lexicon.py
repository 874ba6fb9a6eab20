"""Bilingual (English/French) unit lexicon and phrase tables.

The lexicon is built once and never mutated. Parsers receive it by reference,
so concurrent parses share it without locking.

Matching is case-insensitive and diacritic-insensitive: every surface form is
stored in folded form (casefolded, accents stripped, periods removed) and
input tokens are folded the same way before lookup.
"""
import re
import unicodedata
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Tuple

from ingredient_engine.data_layer.models import Unit


LANG_EN = "en"
LANG_FR = "fr"
LANG_AUTO = "auto"
SUPPORTED_LANGUAGES = (LANG_EN, LANG_FR)
LANGUAGE_HINTS = (LANG_AUTO, LANG_EN, LANG_FR)

# Forms listed under "shared" resolve for either language.
SHARED = "shared"


# Unit surface forms, grouped by canonical unit and language.
# Accented French forms only need to be listed once; folding makes
# "cuillères à soupe" and "cuilleres a soupe" identical.
UNIT_SURFACE_FORMS: Dict[Unit, Dict[str, Tuple[str, ...]]] = {
    # Volume
    Unit.TEASPOONS: {
        LANG_EN: ("tsp", "tsps", "teaspoon", "teaspoons", "tspn"),
        LANG_FR: (
            "cuillère à café", "cuillères à café", "cuillère à thé", "cuillères à thé",
            "c. à café", "c. à c.", "c.à.c.", "cac", "càc", "cc",
        ),
    },
    Unit.TABLESPOONS: {
        LANG_EN: ("tbsp", "tbsps", "tbs", "tbl", "tbl.", "tablespoon", "tablespoons"),
        LANG_FR: (
            "cuillère à soupe", "cuillères à soupe", "c. à soupe", "c. à s.",
            "c.à.s.", "cas", "càs", "cs",
        ),
    },
    Unit.FLUID_OUNCES: {
        LANG_EN: ("fl oz", "fl. oz.", "fl.oz", "floz", "fluid ounce", "fluid ounces"),
    },
    Unit.CUPS: {
        LANG_EN: ("c", "cup", "cups"),
        LANG_FR: ("tasse", "tasses"),
    },
    Unit.PINTS: {
        LANG_EN: ("pint", "pints", "pt", "pts"),
        LANG_FR: ("pinte", "pintes"),
    },
    Unit.QUARTS: {
        LANG_EN: ("quart", "quarts", "qt", "qts"),
    },
    Unit.GALLONS: {
        LANG_EN: ("gallon", "gallons", "gal", "gals"),
    },
    Unit.MILLILITERS: {
        SHARED: ("ml", "millilitre", "millilitres"),
        LANG_EN: ("milliliter", "milliliters", "cc"),
    },
    Unit.CENTILITERS: {
        SHARED: ("cl", "centilitre", "centilitres"),
        LANG_EN: ("centiliter", "centiliters"),
    },
    Unit.DECILITERS: {
        SHARED: ("dl", "décilitre", "décilitres"),
        LANG_EN: ("deciliter", "deciliters"),
    },
    Unit.LITERS: {
        SHARED: ("l", "litre", "litres"),
        LANG_EN: ("liter", "liters", "ltr"),
    },
    # Weight
    Unit.MILLIGRAMS: {
        SHARED: ("mg",),
        LANG_EN: ("milligram", "milligrams"),
        LANG_FR: ("milligramme", "milligrammes"),
    },
    Unit.GRAMS: {
        SHARED: ("g", "gr"),
        LANG_EN: ("gram", "grams"),
        LANG_FR: ("gramme", "grammes"),
    },
    Unit.KILOGRAMS: {
        SHARED: ("kg", "kgs", "kilo", "kilos"),
        LANG_EN: ("kilogram", "kilograms"),
        LANG_FR: ("kilogramme", "kilogrammes"),
    },
    Unit.OUNCES: {
        LANG_EN: ("oz", "ounce", "ounces"),
        LANG_FR: ("once", "onces"),
    },
    Unit.POUNDS: {
        LANG_EN: ("lb", "lbs", "pound", "pounds"),
        LANG_FR: ("livre", "livres"),
    },
    # Count
    Unit.PIECES: {
        LANG_EN: ("piece", "pieces", "pc", "pcs"),
        LANG_FR: ("pièce", "pièces", "morceau", "morceaux"),
    },
    Unit.DOZEN: {
        LANG_EN: ("dozen", "doz"),
        LANG_FR: ("douzaine", "douzaines"),
    },
    Unit.CLOVES: {
        LANG_EN: ("clove", "cloves"),
        LANG_FR: ("gousse", "gousses"),
    },
    Unit.SLICES: {
        LANG_EN: ("slice", "slices"),
        LANG_FR: ("tranche", "tranches"),
    },
    Unit.STICKS: {
        LANG_EN: ("stick", "sticks"),
        LANG_FR: ("bâton", "bâtons"),
    },
    Unit.PACKAGES: {
        LANG_EN: ("package", "packages", "pkg", "pkgs", "packet", "packets"),
        LANG_FR: ("paquet", "paquets", "sachet", "sachets"),
    },
    Unit.CANS: {
        LANG_EN: ("can", "cans", "tin", "tins"),
        LANG_FR: ("boîte", "boîtes", "conserve", "conserves"),
    },
    Unit.BOTTLES: {
        LANG_EN: ("bottle", "bottles"),
        LANG_FR: ("bouteille", "bouteilles"),
    },
    Unit.BAGS: {
        LANG_EN: ("bag", "bags"),
        LANG_FR: ("sac", "sacs"),
    },
    Unit.CUBES: {
        SHARED: ("cube", "cubes"),
    },
    Unit.BARS: {
        LANG_EN: ("bar", "bars"),
        LANG_FR: ("barre", "barres", "tablette", "tablettes"),
    },
    Unit.SHEETS: {
        LANG_EN: ("sheet", "sheets"),
    },
    Unit.SERVINGS: {
        LANG_EN: ("serving", "servings"),
    },
    Unit.PORTIONS: {
        SHARED: ("portion", "portions"),
    },
    # Specialized
    Unit.PINCHES: {
        LANG_EN: ("pinch", "pinches"),
        LANG_FR: ("pincée", "pincées"),
    },
    Unit.DASHES: {
        LANG_EN: ("dash", "dashes"),
        LANG_FR: ("trait", "traits"),
    },
    Unit.DROPS: {
        LANG_EN: ("drop", "drops"),
        LANG_FR: ("goutte", "gouttes"),
    },
    Unit.SPRIGS: {
        LANG_EN: ("sprig", "sprigs"),
        LANG_FR: ("brin", "brins"),
    },
    Unit.LEAVES: {
        LANG_EN: ("leaf", "leaves"),
        LANG_FR: ("feuille", "feuilles"),
    },
    Unit.BUNCHES: {
        LANG_EN: ("bunch", "bunches"),
        LANG_FR: ("bouquet", "bouquets", "botte", "bottes"),
    },
    Unit.HANDFULS: {
        LANG_EN: ("handful", "handfuls"),
        LANG_FR: ("poignée", "poignées"),
    },
}

APPROXIMATION_MARKERS: Dict[str, Tuple[str, ...]] = {
    LANG_EN: ("about", "around", "approximately", "approx.", "approx", "roughly", "~"),
    LANG_FR: ("environ", "à peu près", "approximativement", "env.", "~"),
}

AMBIGUOUS_PHRASES: Dict[str, Tuple[str, ...]] = {
    LANG_EN: (
        "to taste", "a pinch", "a dash", "a little", "a bit", "a handful",
        "a few", "some", "as needed", "as required", "optional",
    ),
    LANG_FR: (
        "au goût", "à goût", "selon le goût", "selon votre goût", "une pincée",
        "un peu", "quelques", "suffisamment", "facultatif", "optionnel",
    ),
}

# Unicode vulgar fraction glyphs -> (numerator, denominator)
FRACTION_GLYPHS: Dict[str, Tuple[int, int]] = {
    "½": (1, 2),
    "⅓": (1, 3),
    "⅔": (2, 3),
    "¼": (1, 4),
    "¾": (3, 4),
    "⅕": (1, 5),
    "⅖": (2, 5),
    "⅗": (3, 5),
    "⅘": (4, 5),
    "⅙": (1, 6),
    "⅚": (5, 6),
    "⅐": (1, 7),
    "⅛": (1, 8),
    "⅜": (3, 8),
    "⅝": (5, 8),
    "⅞": (7, 8),
    "⅑": (1, 9),
    "⅒": (1, 10),
}

# ASCII slash and the unicode fraction slash
FRACTION_SLASHES = "/⁄"

_APOSTROPHES = {"’": "'", "‘": "'", "ʼ": "'", "`": "'"}


def _fold_char(char: str) -> str:
    if unicodedata.combining(char):
        return ""
    if char in _APOSTROPHES:
        return _APOSTROPHES[char]
    if char.isalpha():
        decomposed = unicodedata.normalize("NFKD", char)
        char = "".join(c for c in decomposed if not unicodedata.combining(c))
    return char.casefold()


def fold_text(text: str) -> str:
    """Casefold and strip diacritics ("Cuillères" -> "cuilleres")."""
    return "".join(_fold_char(char) for char in text)


def fold_with_offsets(text: str) -> Tuple[str, List[int]]:
    """Fold text and keep a map from folded positions to original positions.

    Returns:
        Tuple of (folded text, offsets) where ``offsets`` has one entry per
        folded character plus a final entry equal to ``len(text)``. The folded
        span [a, b) corresponds to ``text[offsets[a]:offsets[b]]``.
    """
    folded: List[str] = []
    offsets: List[int] = []
    for index, char in enumerate(text):
        piece = _fold_char(char)
        for folded_char in piece:
            folded.append(folded_char)
            offsets.append(index)
    offsets.append(len(text))
    return "".join(folded), offsets


def lookup_key(phrase: str) -> str:
    """Key used for unit lookup: folded, periods removed, single-spaced."""
    folded = fold_text(phrase).replace(".", " ")
    return " ".join(folded.split())


def _compact_key(phrase: str) -> str:
    """Key with periods dropped rather than spaced ("c.à.s." -> "cas")."""
    folded = fold_text(phrase).replace(".", "")
    return " ".join(folded.split())


def _phrase_pattern(phrases: Iterable[str]) -> Optional[Pattern]:
    """Compile a word-bounded alternation, longest phrase first."""
    folded = sorted({" ".join(fold_text(p).split()) for p in phrases if p.strip()},
                    key=lambda p: (-len(p), p))
    if not folded:
        return None
    alternatives = []
    for phrase in folded:
        escaped = r"\s+".join(re.escape(part) for part in phrase.split(" "))
        alternatives.append(escaped)
    return re.compile(r"(?<!\w)(?:" + "|".join(alternatives) + r")(?!\w)")


def _marker_pattern(markers: Iterable[str]) -> Optional[Pattern]:
    """Compile a leading approximation-marker matcher, longest marker first."""
    folded = sorted({" ".join(fold_text(m).split()) for m in markers if m.strip()},
                    key=lambda m: (-len(m), m))
    if not folded:
        return None
    alternatives = []
    for marker in folded:
        escaped = r"\s+".join(re.escape(part) for part in marker.split(" "))
        # Word markers need a boundary; symbol markers like "~" do not
        if marker[-1].isalnum():
            escaped += r"(?!\w)"
        alternatives.append(escaped)
    return re.compile(r"\s*(?:" + "|".join(alternatives) + r")\s*")


@dataclass(frozen=True)
class Lexicon:
    """Immutable lookup tables shared by every parse call.

    Attributes:
        unit_forms: language -> folded surface form -> canonical Unit
        approximation_markers: language -> marker phrases
        ambiguous_phrases: language -> indicator phrases
        max_unit_words: longest surface form, in words
    """

    unit_forms: Mapping[str, Mapping[str, Unit]]
    approximation_markers: Mapping[str, Tuple[str, ...]]
    ambiguous_phrases: Mapping[str, Tuple[str, ...]]
    max_unit_words: int
    _marker_patterns: Mapping[str, Optional[Pattern]] = field(repr=False, compare=False)
    _ambiguous_patterns: Mapping[str, Optional[Pattern]] = field(repr=False, compare=False)

    def lookup_unit(self, phrase: str, language: str) -> Optional[Unit]:
        """Resolve a surface form for one language, or None."""
        forms = self.unit_forms.get(language, {})
        unit = forms.get(lookup_key(phrase))
        if unit is None:
            unit = forms.get(_compact_key(phrase))
        return unit

    def is_known_unit(self, phrase: str) -> bool:
        return any(self.lookup_unit(phrase, lang) is not None for lang in SUPPORTED_LANGUAGES)

    def marker_pattern(self, language: str) -> Optional[Pattern]:
        return self._marker_patterns.get(language)

    def ambiguous_pattern(self, language: str) -> Optional[Pattern]:
        return self._ambiguous_patterns.get(language)

    def with_overrides(
        self,
        unit_forms: Optional[Mapping[Unit, Mapping[str, Iterable[str]]]] = None,
        approximation_markers: Optional[Mapping[str, Iterable[str]]] = None,
        ambiguous_phrases: Optional[Mapping[str, Iterable[str]]] = None,
    ) -> "Lexicon":
        """Return a new lexicon with extra forms, markers, and phrases added."""
        table = {unit: dict(forms) for unit, forms in UNIT_SURFACE_FORMS.items()}
        for unit, forms in self._extra_forms().items():
            for language, values in forms.items():
                table[unit][language] = tuple(table[unit].get(language, ())) + tuple(values)
        for unit, forms in (unit_forms or {}).items():
            table.setdefault(unit, {})
            for language, values in forms.items():
                table[unit][language] = tuple(table[unit].get(language, ())) + tuple(values)

        markers = {lang: tuple(values) for lang, values in self.approximation_markers.items()}
        for language, values in (approximation_markers or {}).items():
            markers[language] = markers.get(language, ()) + tuple(values)

        phrases = {lang: tuple(values) for lang, values in self.ambiguous_phrases.items()}
        for language, values in (ambiguous_phrases or {}).items():
            phrases[language] = phrases.get(language, ()) + tuple(values)

        return build_lexicon(table, markers, phrases)

    def _extra_forms(self) -> Dict[Unit, Dict[str, Tuple[str, ...]]]:
        # Forms present in this lexicon beyond the built-in table, so that
        # overrides stack on top of earlier overrides.
        builtin = build_lexicon_forms(UNIT_SURFACE_FORMS)
        extra: Dict[Unit, Dict[str, Tuple[str, ...]]] = {}
        for language, forms in self.unit_forms.items():
            for key, unit in forms.items():
                if builtin.get(language, {}).get(key) is None:
                    extra.setdefault(unit, {})
                    extra[unit][language] = extra[unit].get(language, ()) + (key,)
        return extra


def build_lexicon_forms(
    table: Mapping[Unit, Mapping[str, Iterable[str]]]
) -> Dict[str, Dict[str, Unit]]:
    """Flatten a surface-form table into per-language lookup dictionaries.

    Raises:
        ValueError: If one folded form maps to two different units in the
            same language
    """
    forms: Dict[str, Dict[str, Unit]] = {language: {} for language in SUPPORTED_LANGUAGES}
    for unit, by_language in table.items():
        for language, surface_forms in by_language.items():
            targets = SUPPORTED_LANGUAGES if language == SHARED else (language,)
            for surface in surface_forms:
                for key in {lookup_key(surface), _compact_key(surface)}:
                    if not key:
                        continue
                    for target in targets:
                        existing = forms[target].get(key)
                        if existing is not None and existing is not unit:
                            raise ValueError(
                                f"Surface form '{surface}' ({target}) maps to both "
                                f"{existing.key} and {unit.key}"
                            )
                        forms[target][key] = unit
    return forms


def build_lexicon(
    unit_table: Mapping[Unit, Mapping[str, Iterable[str]]],
    approximation_markers: Mapping[str, Iterable[str]],
    ambiguous_phrases: Mapping[str, Iterable[str]],
) -> Lexicon:
    """Build an immutable Lexicon from raw tables."""
    forms = build_lexicon_forms(unit_table)
    max_words = max(
        (len(key.split(" ")) for by_key in forms.values() for key in by_key),
        default=1,
    )
    markers = {lang: tuple(approximation_markers.get(lang, ())) for lang in SUPPORTED_LANGUAGES}
    phrases = {lang: tuple(ambiguous_phrases.get(lang, ())) for lang in SUPPORTED_LANGUAGES}

    return Lexicon(
        unit_forms=MappingProxyType(
            {lang: MappingProxyType(by_key) for lang, by_key in forms.items()}
        ),
        approximation_markers=MappingProxyType(markers),
        ambiguous_phrases=MappingProxyType(phrases),
        max_unit_words=max_words,
        _marker_patterns=MappingProxyType(
            {lang: _marker_pattern(values) for lang, values in markers.items()}
        ),
        _ambiguous_patterns=MappingProxyType(
            {lang: _phrase_pattern(values) for lang, values in phrases.items()}
        ),
    )


@lru_cache(maxsize=1)
def default_lexicon() -> Lexicon:
    """The built-in lexicon, built once per process."""
    return build_lexicon(UNIT_SURFACE_FORMS, APPROXIMATION_MARKERS, AMBIGUOUS_PHRASES)
