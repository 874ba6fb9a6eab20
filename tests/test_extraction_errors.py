"""Tests for structured extraction errors."""
import pytest

from ingredient_engine.ingestion.extraction_errors import (
    AmbiguousQuantityError,
    EmptyLineError,
    ExtractionError,
    ExtractionErrorCode,
    MalformedFractionError,
    UnrecognizedUnitError,
)


class TestExtractionErrorCode:
    """Tests for ExtractionErrorCode enum."""

    def test_all_required_codes_exist(self):
        assert hasattr(ExtractionErrorCode, 'MALFORMED_FRACTION')
        assert hasattr(ExtractionErrorCode, 'UNRECOGNIZED_UNIT')
        assert hasattr(ExtractionErrorCode, 'AMBIGUOUS_QUANTITY')
        assert hasattr(ExtractionErrorCode, 'EMPTY_LINE')

    def test_error_codes_are_unique(self):
        codes = [code.value for code in ExtractionErrorCode]
        assert len(codes) == len(set(codes))


class TestExtractionError:
    """Tests for base ExtractionError."""

    def test_base_error_has_required_attributes(self):
        error = ExtractionError(
            code=ExtractionErrorCode.EMPTY_LINE,
            message="Line is empty",
            context={"line": "  "}
        )
        assert error.code == ExtractionErrorCode.EMPTY_LINE
        assert error.message == "Line is empty"
        assert error.context == {"line": "  "}

    def test_str_includes_code(self):
        error = ExtractionError(ExtractionErrorCode.EMPTY_LINE, "Line is empty")
        assert str(error) == "[EMPTY_LINE] Line is empty"
        assert error.context == {}

    def test_is_exception(self):
        with pytest.raises(ExtractionError):
            raise MalformedFractionError("1/0", 1, 0)

    def test_to_dict(self):
        error = UnrecognizedUnitError("ctn.", kept_as_unit=True)
        assert error.to_dict() == {
            "error_code": "UNRECOGNIZED_UNIT",
            "message": "Unit 'ctn.' is not recognized (kept as unknown unit)",
            "context": {"token": "ctn.", "kept_as_unit": True},
        }


class TestSpecificErrors:
    """Tests for each failure mode."""

    def test_malformed_fraction(self):
        error = MalformedFractionError("3/0", 3, 0)
        assert error.code == ExtractionErrorCode.MALFORMED_FRACTION
        assert error.context == {"text": "3/0", "numerator": 3, "denominator": 0}
        assert "zero denominator" in error.message

    def test_unit_kept_in_name(self):
        error = UnrecognizedUnitError("tasses", kept_as_unit=False)
        assert "kept in ingredient name" in error.message
        assert error.kept_as_unit is False

    def test_ambiguous_quantity(self):
        error = AmbiguousQuantityError("au goût", "fr")
        assert error.code == ExtractionErrorCode.AMBIGUOUS_QUANTITY
        assert error.context == {"phrase": "au goût", "language": "fr"}

    def test_empty_line(self):
        error = EmptyLineError("   ")
        assert error.code == ExtractionErrorCode.EMPTY_LINE
        assert error.line == "   "

    def test_repr(self):
        assert repr(EmptyLineError("")).startswith("EmptyLineError(code=")
