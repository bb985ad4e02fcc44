"""
Tests for amount normalization.
"""
from decimal import Decimal

from ..core.normalize import normalize_amount, find_trailing_amount


class TestNormalizeAmount:
    """Test cases for the OCR amount repair heuristic."""

    def test_canonical_amount_is_trusted(self):
        assert normalize_amount("123.45") == Decimal("123.45")

    def test_three_digits_get_single_dollar_digit(self):
        assert normalize_amount("423") == Decimal("4.23")

    def test_longer_runs_get_two_cent_digits(self):
        assert normalize_amount("5000") == Decimal("50.00")
        assert normalize_amount("123456") == Decimal("1234.56")

    def test_single_digit_parsed_directly(self):
        assert normalize_amount("7") == 7

    def test_commas_and_spaces_are_stripped(self):
        """Cleaned value loses its separators before the point is inserted."""
        assert normalize_amount("1,234") == Decimal("12.34")
        assert normalize_amount("12 34") == Decimal("12.34")

    def test_non_numeric_input_is_invalid(self):
        """Invalid input yields None instead of raising."""
        assert normalize_amount("abc") is None
        assert normalize_amount("") is None
        assert normalize_amount("x") is None


class TestFindTrailingAmount:
    """Test cases for the end-of-line amount pattern."""

    def test_two_decimal_amount(self):
        assert find_trailing_amount("01/03 PAYROLL DEPOSIT 100.00") == Decimal("100.00")

    def test_bare_digit_run(self):
        assert find_trailing_amount("01/02 WAL-MART POS PURCHASE 4523") == Decimal("45.23")

    def test_amount_must_end_the_line(self):
        assert find_trailing_amount("01/03 DEPOSIT 100.00 ") is None
        assert find_trailing_amount("100.00 DEPOSIT") is None

    def test_two_bare_digits_are_not_an_amount(self):
        assert find_trailing_amount("PAGE 12") is None

    def test_leftmost_match_wins(self):
        """A digit run after a point is read as its own bare run."""
        assert find_trailing_amount("FEE 12.345") == Decimal("3.45")

    def test_empty_line(self):
        assert find_trailing_amount("") is None

    def test_non_ascii_digits_are_not_an_amount(self):
        """Only 0-9 count as digits; OCR'd Arabic-Indic or fullwidth runs are ignored."""
        assert find_trailing_amount("01/03 DEPOSIT ٤٥٢٣") is None
        assert find_trailing_amount("01/03 DEPOSIT １２．３４") is None
        assert find_trailing_amount("01/03 DEPOSIT ١٢.٣٤") is None


class TestNormalizeNonAsciiDigits:

    def test_non_ascii_input_is_invalid(self):
        assert normalize_amount("٧") is None
        assert normalize_amount("٤٥٢٣") is None
