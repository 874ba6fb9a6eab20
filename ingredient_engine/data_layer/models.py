"""Data models for extracted ingredients.

A parse produces one immutable IngredientList per text block. Quantities and
units are small tagged unions:

- Quantity is one of Exact, Fraction, Range, Approximate, Ambiguous
- Unit is a canonical Unit enum member or an UnknownUnit carrying the raw token

Ingredient rejects anything outside these types with TypeError.
"""
import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


def format_number(value: float) -> str:
    """Format a float without a trailing .0 for whole numbers."""
    if value == int(value):
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _require_finite(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")


@dataclass(frozen=True)
class Exact:
    """Plain integer or decimal amount (e.g., "2", "1.5")."""

    value: float

    def __post_init__(self):
        _require_finite("value", self.value)

    def estimated_value(self) -> Optional[float]:
        return float(self.value)

    def display(self) -> str:
        return format_number(self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "exact", "value": float(self.value)}


@dataclass(frozen=True)
class Fraction:
    """Vulgar or mixed fraction (e.g., "1/2", "2 1/4", "1½").

    ``whole`` is only set for mixed numbers.
    """

    numerator: int
    denominator: int
    whole: Optional[int] = None

    def __post_init__(self):
        if self.denominator <= 0:
            raise ValueError(f"denominator must be > 0, got {self.denominator}")
        if self.numerator < 0:
            raise ValueError(f"numerator must be >= 0, got {self.numerator}")
        if self.whole is not None and self.whole < 0:
            raise ValueError(f"whole must be >= 0, got {self.whole}")

    def estimated_value(self) -> Optional[float]:
        whole = self.whole or 0
        return whole + self.numerator / self.denominator

    def display(self) -> str:
        if self.whole is not None:
            return f"{self.whole} {self.numerator}/{self.denominator}"
        return f"{self.numerator}/{self.denominator}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "fraction",
            "whole": self.whole,
            "numerator": self.numerator,
            "denominator": self.denominator,
        }


@dataclass(frozen=True)
class Range:
    """Range of amounts (e.g., "2-3", "1 to 2", "2 à 3"). Always min <= max."""

    min: float
    max: float

    def __post_init__(self):
        _require_finite("min", self.min)
        _require_finite("max", self.max)
        if self.min > self.max:
            raise ValueError(f"range min ({self.min}) must be <= max ({self.max})")

    def estimated_value(self) -> Optional[float]:
        return (self.min + self.max) / 2.0

    def display(self) -> str:
        return f"{format_number(self.min)}-{format_number(self.max)}"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "range", "min": float(self.min), "max": float(self.max)}


@dataclass(frozen=True)
class Approximate:
    """Amount introduced by an approximation marker (e.g., "about 2", "environ 200")."""

    value: float

    def __post_init__(self):
        _require_finite("value", self.value)

    def estimated_value(self) -> Optional[float]:
        return float(self.value)

    def display(self) -> str:
        return f"~{format_number(self.value)}"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "approximate", "value": float(self.value)}


@dataclass(frozen=True)
class Ambiguous:
    """Free-text indicator with no numeric value (e.g., "to taste", "au goût")."""

    phrase: str

    def estimated_value(self) -> Optional[float]:
        return None

    def display(self) -> str:
        return self.phrase

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "ambiguous", "phrase": self.phrase}


Quantity = Union[Exact, Fraction, Range, Approximate, Ambiguous]

QUANTITY_TYPES = (Exact, Fraction, Range, Approximate, Ambiguous)


def is_ambiguous(quantity: Optional[Quantity]) -> bool:
    return isinstance(quantity, Ambiguous)


def quantity_from_dict(data: Dict[str, Any]) -> Quantity:
    """Rebuild a quantity from its ``to_dict`` form.

    Raises:
        ValueError: If the type tag is unknown or a field is invalid
    """
    kind = data.get("type")
    if kind == "exact":
        return Exact(float(data["value"]))
    if kind == "fraction":
        whole = data.get("whole")
        return Fraction(
            numerator=int(data["numerator"]),
            denominator=int(data["denominator"]),
            whole=int(whole) if whole is not None else None,
        )
    if kind == "range":
        return Range(float(data["min"]), float(data["max"]))
    if kind == "approximate":
        return Approximate(float(data["value"]))
    if kind == "ambiguous":
        return Ambiguous(str(data["phrase"]))
    raise ValueError(f"Unknown quantity type: {kind!r}")


class UnitCategory(Enum):
    """Broad family of a unit."""

    VOLUME = "volume"
    WEIGHT = "weight"
    COUNT = "count"
    SPECIALIZED = "specialized"
    UNKNOWN = "unknown"


class Unit(Enum):
    """Canonical measurement units.

    Each member carries (key, display name, category). The key is the stable
    serialized name.
    """

    # Volume
    TEASPOONS = ("teaspoons", "tsp", UnitCategory.VOLUME)
    TABLESPOONS = ("tablespoons", "tbsp", UnitCategory.VOLUME)
    FLUID_OUNCES = ("fluid_ounces", "fl oz", UnitCategory.VOLUME)
    CUPS = ("cups", "cups", UnitCategory.VOLUME)
    PINTS = ("pints", "pints", UnitCategory.VOLUME)
    QUARTS = ("quarts", "quarts", UnitCategory.VOLUME)
    GALLONS = ("gallons", "gallons", UnitCategory.VOLUME)
    MILLILITERS = ("milliliters", "ml", UnitCategory.VOLUME)
    CENTILITERS = ("centiliters", "cl", UnitCategory.VOLUME)
    DECILITERS = ("deciliters", "dl", UnitCategory.VOLUME)
    LITERS = ("liters", "L", UnitCategory.VOLUME)

    # Weight
    MILLIGRAMS = ("milligrams", "mg", UnitCategory.WEIGHT)
    GRAMS = ("grams", "g", UnitCategory.WEIGHT)
    KILOGRAMS = ("kilograms", "kg", UnitCategory.WEIGHT)
    OUNCES = ("ounces", "oz", UnitCategory.WEIGHT)
    POUNDS = ("pounds", "lbs", UnitCategory.WEIGHT)

    # Count
    PIECES = ("pieces", "pieces", UnitCategory.COUNT)
    DOZEN = ("dozen", "dozen", UnitCategory.COUNT)
    CLOVES = ("cloves", "cloves", UnitCategory.COUNT)
    SLICES = ("slices", "slices", UnitCategory.COUNT)
    STICKS = ("sticks", "sticks", UnitCategory.COUNT)
    PACKAGES = ("packages", "packages", UnitCategory.COUNT)
    CANS = ("cans", "cans", UnitCategory.COUNT)
    BOTTLES = ("bottles", "bottles", UnitCategory.COUNT)
    BAGS = ("bags", "bags", UnitCategory.COUNT)
    CUBES = ("cubes", "cubes", UnitCategory.COUNT)
    BARS = ("bars", "bars", UnitCategory.COUNT)
    SHEETS = ("sheets", "sheets", UnitCategory.COUNT)
    SERVINGS = ("servings", "servings", UnitCategory.COUNT)
    PORTIONS = ("portions", "portions", UnitCategory.COUNT)

    # Specialized
    PINCHES = ("pinches", "pinches", UnitCategory.SPECIALIZED)
    DASHES = ("dashes", "dashes", UnitCategory.SPECIALIZED)
    DROPS = ("drops", "drops", UnitCategory.SPECIALIZED)
    SPRIGS = ("sprigs", "sprigs", UnitCategory.SPECIALIZED)
    LEAVES = ("leaves", "leaves", UnitCategory.SPECIALIZED)
    BUNCHES = ("bunches", "bunches", UnitCategory.SPECIALIZED)
    HANDFULS = ("handfuls", "handfuls", UnitCategory.SPECIALIZED)

    def __init__(self, key: str, display_name: str, category: UnitCategory):
        self.key = key
        self.display_name = display_name
        self.category = category

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.key, "category": self.category.value}

    @classmethod
    def from_key(cls, key: str) -> "Unit":
        """Look up a canonical unit by its serialized key (e.g., "cups").

        Raises:
            ValueError: If no unit has that key
        """
        normalized = key.strip().lower()
        for unit in cls:
            if unit.key == normalized:
                return unit
        raise ValueError(f"Unknown unit name: {key!r}")


@dataclass(frozen=True)
class UnknownUnit:
    """Unit-shaped token that is not in the lexicon, kept verbatim."""

    raw_token: str
    category: UnitCategory = field(default=UnitCategory.UNKNOWN, init=False)

    @property
    def display_name(self) -> str:
        return self.raw_token

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": "unknown",
            "category": UnitCategory.UNKNOWN.value,
            "raw_token": self.raw_token,
        }


UnitLike = Union[Unit, UnknownUnit]


def is_volume(unit: Optional[UnitLike]) -> bool:
    return unit is not None and unit.category is UnitCategory.VOLUME


def is_weight(unit: Optional[UnitLike]) -> bool:
    return unit is not None and unit.category is UnitCategory.WEIGHT


def is_count(unit: Optional[UnitLike]) -> bool:
    return unit is not None and unit.category is UnitCategory.COUNT


def unit_from_dict(data: Dict[str, Any]) -> UnitLike:
    """Rebuild a unit from its ``to_dict`` form."""
    if data.get("name") == "unknown":
        return UnknownUnit(str(data.get("raw_token", "")))
    return Unit.from_key(str(data["name"]))


@dataclass(frozen=True)
class Ingredient:
    """Represents one extracted ingredient line."""

    name: str  # Ingredient name, or the original line when nothing else remained
    quantity: Optional[Quantity] = None
    unit: Optional[UnitLike] = None  # Only set together with quantity
    modifier: Optional[str] = None  # Preparation note (e.g., "diced")
    confidence: float = 0.0  # 0.0 to 1.0

    def __post_init__(self):
        if self.unit is not None and self.quantity is None:
            raise ValueError("An ingredient cannot have a unit without a quantity")
        if self.quantity is not None and not isinstance(self.quantity, QUANTITY_TYPES):
            raise TypeError(f"Unsupported quantity type: {type(self.quantity).__name__}")
        if self.unit is not None and not isinstance(self.unit, (Unit, UnknownUnit)):
            raise TypeError(f"Unsupported unit type: {type(self.unit).__name__}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    @property
    def has_quantity(self) -> bool:
        return self.quantity is not None

    def estimated_amount(self) -> Optional[float]:
        """Numeric estimate of the quantity (midpoint for ranges)."""
        if self.quantity is None:
            return None
        return self.quantity.estimated_value()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "quantity": self.quantity.to_dict() if self.quantity is not None else None,
            "unit": self.unit.to_dict() if self.unit is not None else None,
            "modifier": self.modifier,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ingredient":
        quantity = data.get("quantity")
        unit = data.get("unit")
        return cls(
            name=str(data["name"]),
            quantity=quantity_from_dict(quantity) if quantity is not None else None,
            unit=unit_from_dict(unit) if unit is not None else None,
            modifier=data.get("modifier"),
            confidence=float(data.get("confidence", 0.0)),
        )


@dataclass(frozen=True)
class IngredientList:
    """All ingredients extracted from one block of OCR text."""

    ingredients: Tuple[Ingredient, ...]
    original_text: str
    overall_confidence: float
    unparsed_lines: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept lists from callers but store tuples
        object.__setattr__(self, "ingredients", tuple(self.ingredients))
        object.__setattr__(self, "unparsed_lines", tuple(self.unparsed_lines))
        if not 0.0 <= self.overall_confidence <= 1.0:
            raise ValueError(
                f"overall_confidence must be within [0, 1], got {self.overall_confidence}"
            )

    @property
    def parsed_count(self) -> int:
        return len(self.ingredients)

    @property
    def unparsed_count(self) -> int:
        return len(self.unparsed_lines)

    def success_rate(self) -> float:
        """Share of candidate lines that produced an ingredient."""
        total = self.parsed_count + self.unparsed_count
        if total == 0:
            return 1.0
        return self.parsed_count / total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ingredients": [ingredient.to_dict() for ingredient in self.ingredients],
            "original_text": self.original_text,
            "overall_confidence": self.overall_confidence,
            "unparsed_lines": list(self.unparsed_lines),
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IngredientList":
        ingredients: List[Ingredient] = [
            Ingredient.from_dict(item) for item in data.get("ingredients", [])
        ]
        return cls(
            ingredients=tuple(ingredients),
            original_text=str(data.get("original_text", "")),
            overall_confidence=float(data.get("overall_confidence", 0.0)),
            unparsed_lines=tuple(str(line) for line in data.get("unparsed_lines", [])),
        )
