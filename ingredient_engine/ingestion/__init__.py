"""Ingestion layer for extracting ingredients from OCR text."""

from ingredient_engine.ingestion.line_splitter import (
    CandidateLine,
    make_candidate,
    split_lines,
)

from ingredient_engine.ingestion.quantity_recognizer import (
    QuantityMatch,
    QuantityRecognizer,
)

from ingredient_engine.ingestion.unit_resolver import (
    UnitMatch,
    UnitResolver,
    is_unit_shaped,
)

from ingredient_engine.ingestion.modifier_extractor import extract_modifier

from ingredient_engine.ingestion.name_extractor import extract_name

from ingredient_engine.ingestion.confidence_scorer import (
    ConfidenceSignals,
    score_confidence,
    score_signals,
)

from ingredient_engine.ingestion.ingredient_parser import (
    IngredientParser,
    LineParseResult,
    parse_ingredient_line,
    parse_ingredient_list,
)

from ingredient_engine.ingestion.extraction_errors import (
    ExtractionError,
    ExtractionErrorCode,
    MalformedFractionError,
    UnrecognizedUnitError,
    AmbiguousQuantityError,
    EmptyLineError,
)

__all__ = [
    # Line splitting
    "CandidateLine",
    "make_candidate",
    "split_lines",
    # Quantity recognition
    "QuantityMatch",
    "QuantityRecognizer",
    # Unit resolution
    "UnitMatch",
    "UnitResolver",
    "is_unit_shaped",
    # Modifier and name extraction
    "extract_modifier",
    "extract_name",
    # Confidence scoring
    "ConfidenceSignals",
    "score_confidence",
    "score_signals",
    # List assembly
    "IngredientParser",
    "LineParseResult",
    "parse_ingredient_line",
    "parse_ingredient_list",
    # Error types
    "ExtractionError",
    "ExtractionErrorCode",
    "MalformedFractionError",
    "UnrecognizedUnitError",
    "AmbiguousQuantityError",
    "EmptyLineError",
]
