"""Structured error types for the extraction pipeline.

Parsing is total: for any UTF-8 input it returns a result, never an
exception. The types below still describe every failure mode precisely so
that callers (CLI, API, tests) can see why a line degraded.

HOW EACH FAILURE DEGRADES:
    ┌─────────────────────────────────────────────────────┐
    │ Line Splitter     → EmptyLineError                  │
    │                     (line dropped before parsing)   │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Quantity          → MalformedFractionError          │
    │                     (raised and caught: no quantity)│
    │                   → AmbiguousQuantityError          │
    │                     (recorded: Ambiguous variant)   │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Unit              → UnrecognizedUnitError           │
    │                     (recorded: UnknownUnit or name) │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Ingredient (always produced for a non-empty line)   │
    └─────────────────────────────────────────────────────┘
"""

from enum import Enum
from typing import Any, Dict, Optional


class ExtractionErrorCode(Enum):
    """Enumeration of all extraction error codes.

    Codes are string values for easy serialization and logging.
    """

    # Quantity errors
    MALFORMED_FRACTION = "MALFORMED_FRACTION"
    AMBIGUOUS_QUANTITY = "AMBIGUOUS_QUANTITY"

    # Unit errors
    UNRECOGNIZED_UNIT = "UNRECOGNIZED_UNIT"

    # Input errors
    EMPTY_LINE = "EMPTY_LINE"


class ExtractionError(Exception):
    """Base exception for all extraction errors.

    Attributes:
        code: ExtractionErrorCode identifying the error type
        message: Human-readable error description
        context: Dictionary of relevant error context (line, token, etc.)
    """

    def __init__(
        self,
        code: ExtractionErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(f"[{code.value}] {message}")

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code!r}, "
            f"message={self.message!r}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses.

        Returns:
            Dictionary with error code, message, and context
        """
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context
        }


class MalformedFractionError(ExtractionError):
    """Raised when a fraction has a zero denominator (e.g., "1/0 cup").

    The quantity recognizer catches it and treats the line as having no
    quantity.

    Context includes:
        - text: The fraction as written
        - numerator: Parsed numerator
        - denominator: Parsed denominator
    """

    def __init__(self, text: str, numerator: int, denominator: int):
        context = {
            "text": text,
            "numerator": numerator,
            "denominator": denominator,
        }
        super().__init__(
            code=ExtractionErrorCode.MALFORMED_FRACTION,
            message=f"Fraction '{text}' has a zero denominator",
            context=context
        )
        self.text = text
        self.numerator = numerator
        self.denominator = denominator


class UnrecognizedUnitError(ExtractionError):
    """A token after the quantity is not in the unit lexicon.

    Context includes:
        - token: The token as written
        - kept_as_unit: True if it became an UnknownUnit, False if it was
          folded into the name
    """

    def __init__(self, token: str, kept_as_unit: bool):
        context = {
            "token": token,
            "kept_as_unit": kept_as_unit,
        }
        outcome = "kept as unknown unit" if kept_as_unit else "kept in ingredient name"
        super().__init__(
            code=ExtractionErrorCode.UNRECOGNIZED_UNIT,
            message=f"Unit '{token}' is not recognized ({outcome})",
            context=context
        )
        self.token = token
        self.kept_as_unit = kept_as_unit


class AmbiguousQuantityError(ExtractionError):
    """The quantity is an indicator phrase with no numeric value.

    Context includes:
        - phrase: The matched phrase (e.g., "to taste")
        - language: Language whose phrase list matched
    """

    def __init__(self, phrase: str, language: str):
        context = {
            "phrase": phrase,
            "language": language,
        }
        super().__init__(
            code=ExtractionErrorCode.AMBIGUOUS_QUANTITY,
            message=f"Quantity '{phrase}' has no numeric value",
            context=context
        )
        self.phrase = phrase
        self.language = language


class EmptyLineError(ExtractionError):
    """The line is empty or whitespace only and was not parsed.

    Context includes:
        - line: The line as written
    """

    def __init__(self, line: str):
        super().__init__(
            code=ExtractionErrorCode.EMPTY_LINE,
            message="Line is empty after trimming",
            context={"line": line}
        )
        self.line = line
