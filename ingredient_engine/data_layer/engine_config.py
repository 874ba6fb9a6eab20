"""Engine configuration loaded from YAML."""
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from ingredient_engine.data_layer.exceptions import ConfigurationError
from ingredient_engine.data_layer.lexicon import (
    LANGUAGE_HINTS,
    LANG_AUTO,
    SHARED,
    SUPPORTED_LANGUAGES,
    Lexicon,
    default_lexicon,
)
from ingredient_engine.data_layer.models import Unit


DEFAULT_MAX_NAME_LENGTH = 100


@dataclass(frozen=True)
class EngineConfig:
    """Parsing options.

    Attributes:
        default_language: Language hint used when a call does not pass one
        max_name_length: Names longer than this are cut at a word boundary
        strip_bullets: Remove leading list bullets ("•", "*", "- ") from lines
        extra_units: canonical unit -> language -> extra surface forms
        extra_approximation_markers: language -> extra markers
        extra_ambiguous_phrases: language -> extra indicator phrases
    """

    default_language: str = LANG_AUTO
    max_name_length: int = DEFAULT_MAX_NAME_LENGTH
    strip_bullets: bool = True
    extra_units: Mapping[Unit, Mapping[str, Tuple[str, ...]]] = field(default_factory=dict)
    extra_approximation_markers: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    extra_ambiguous_phrases: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def build_lexicon(self) -> Lexicon:
        """Default lexicon plus any extra entries from this configuration.

        Raises:
            ConfigurationError: If an extra unit form collides with an
                existing form for a different unit
        """
        base = default_lexicon()
        if not (self.extra_units or self.extra_approximation_markers or self.extra_ambiguous_phrases):
            return base
        try:
            return base.with_overrides(
                unit_forms=self.extra_units,
                approximation_markers=self.extra_approximation_markers,
                ambiguous_phrases=self.extra_ambiguous_phrases,
            )
        except ValueError as e:
            raise ConfigurationError("lexicon.units", None, str(e)) from e


class EngineConfigLoader:
    """Loader for engine configuration from YAML."""

    def __init__(self, yaml_path: str):
        """Initialize config loader from YAML file.

        Args:
            yaml_path: Path to YAML file containing engine settings
        """
        self.yaml_path = Path(yaml_path)

    def load(self) -> EngineConfig:
        """Load engine configuration from YAML file.

        Returns:
            EngineConfig object

        Raises:
            ConfigurationError: If the file is missing, unreadable, or invalid
        """
        if not self.yaml_path.exists():
            raise ConfigurationError("path", str(self.yaml_path), "file not found")

        try:
            with open(self.yaml_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError("path", str(self.yaml_path), f"invalid YAML: {e}") from e

        return config_from_dict(data or {})


def config_from_dict(data: Any) -> EngineConfig:
    """Validate a raw settings mapping and build an EngineConfig.

    Raises:
        ConfigurationError: If any setting is invalid
    """
    if not isinstance(data, dict):
        raise ConfigurationError("root", type(data).__name__, "expected a mapping")

    parsing = _mapping(data.get("parsing", {}), "parsing")
    lexicon = _mapping(data.get("lexicon", {}), "lexicon")

    default_language = str(parsing.get("default_language", LANG_AUTO)).strip().lower()
    if default_language not in LANGUAGE_HINTS:
        raise ConfigurationError(
            "parsing.default_language",
            default_language,
            f"must be one of {', '.join(LANGUAGE_HINTS)}",
        )

    max_name_length = parsing.get("max_name_length", DEFAULT_MAX_NAME_LENGTH)
    if isinstance(max_name_length, bool) or not isinstance(max_name_length, int) or max_name_length < 1:
        raise ConfigurationError(
            "parsing.max_name_length", max_name_length, "must be a positive integer"
        )

    strip_bullets = parsing.get("strip_bullets", True)
    if not isinstance(strip_bullets, bool):
        raise ConfigurationError("parsing.strip_bullets", strip_bullets, "must be true or false")

    extra_units: Dict[Unit, Dict[str, Tuple[str, ...]]] = {}
    for unit_name, by_language in _mapping(lexicon.get("units", {}), "lexicon.units").items():
        try:
            unit = Unit.from_key(str(unit_name))
        except ValueError as e:
            raise ConfigurationError("lexicon.units", unit_name, "unknown unit name") from e
        extra_units[unit] = _language_lists(
            by_language, f"lexicon.units.{unit_name}", allow_shared=True
        )

    markers = _language_lists(
        lexicon.get("approximation_markers", {}), "lexicon.approximation_markers"
    )
    phrases = _language_lists(
        lexicon.get("ambiguous_phrases", {}), "lexicon.ambiguous_phrases"
    )

    return EngineConfig(
        default_language=default_language,
        max_name_length=max_name_length,
        strip_bullets=strip_bullets,
        extra_units=extra_units,
        extra_approximation_markers=markers,
        extra_ambiguous_phrases=phrases,
    )


def _mapping(value: Any, field_name: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(field_name, type(value).__name__, "expected a mapping")
    return value


def _language_lists(
    value: Any, field_name: str, allow_shared: bool = False
) -> Dict[str, Tuple[str, ...]]:
    """Validate a {language: [phrase, ...]} mapping."""
    allowed = SUPPORTED_LANGUAGES + ((SHARED,) if allow_shared else ())
    result: Dict[str, Tuple[str, ...]] = {}
    for language, phrases in _mapping(value, field_name).items():
        language = str(language).strip().lower()
        if language not in allowed:
            raise ConfigurationError(
                field_name, language, f"language must be one of {', '.join(allowed)}"
            )
        if isinstance(phrases, str):
            phrases = [phrases]
        if not isinstance(phrases, list) or not all(isinstance(p, str) and p.strip() for p in phrases):
            raise ConfigurationError(
                f"{field_name}.{language}", phrases, "expected a list of non-empty strings"
            )
        result[language] = tuple(p.strip() for p in phrases)
    return result


def load_engine_config(yaml_path: Optional[str]) -> EngineConfig:
    """Load configuration from a path, or return defaults when no path is given."""
    if yaml_path is None:
        return EngineConfig()
    return EngineConfigLoader(yaml_path).load()
