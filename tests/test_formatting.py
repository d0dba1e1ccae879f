"""Tests for value formatting and color helpers."""

import logging
from decimal import Decimal

import pytest

from reportml.engine.formatting import FORMAT_CURRENCY, FORMAT_PERCENT, format_value
from reportml.engine.style_utils import hex_to_rgb, parse_color


class TestFormatValue:
    """Tests for format_value."""

    def test_rounds_half_up(self) -> None:
        """Test 1.005 rounds up despite its binary representation."""
        assert format_value(1.005) == "1.01"
        assert format_value(2.675) == "2.68"

    def test_integral_values_have_no_decimals(self) -> None:
        """Test integral numbers print without a decimal point."""
        assert format_value(0) == "0"
        assert format_value(42) == "42"
        assert format_value(3.0) == "3"
        assert format_value(-7) == "-7"

    def test_fractional_values_have_two_decimals(self) -> None:
        """Test non-integral numbers print with exactly two decimals."""
        assert format_value(1.5) == "1.50"
        assert format_value(0.333) == "0.33"

    def test_negative_rounding(self) -> None:
        """Test negative ties round away from zero and -0 loses its sign."""
        assert format_value(-1.005) == "-1.01"
        assert format_value(-0.001) == "0.00"

    @pytest.mark.parametrize("kind", ["", "plain", "number", FORMAT_CURRENCY, FORMAT_PERCENT, "unknown"])
    def test_none_is_empty_for_every_kind(self, kind: str) -> None:
        """Test None formats as an empty string for every kind."""
        assert format_value(None, kind) == ""

    def test_currency(self) -> None:
        """Test currency formatting prefixes the symbol."""
        assert format_value(1234.5, FORMAT_CURRENCY) == "$1234.50"
        assert format_value(100, FORMAT_CURRENCY) == "$100"
        assert format_value(9.99, "currency", currency_symbol="€") == "€9.99"

    def test_percent(self) -> None:
        """Test percent formatting scales by 100."""
        assert format_value(0.5, FORMAT_PERCENT) == "50%"
        assert format_value(0.125, FORMAT_PERCENT) == "12.50%"

    def test_kind_is_case_insensitive(self) -> None:
        """Test kinds are matched without regard to case."""
        assert format_value(0.5, "Percent") == "50%"

    def test_strings_pass_through(self) -> None:
        """Test strings are returned unchanged for every kind."""
        assert format_value("N/A", FORMAT_CURRENCY) == "N/A"

    def test_decimal_input(self) -> None:
        """Test Decimal values are formatted exactly."""
        assert format_value(Decimal("10.125"), FORMAT_CURRENCY) == "$10.13"

    @pytest.mark.parametrize("value", [True, False, {"a": 1}, [1, 2], float("nan"), float("inf")])
    def test_unsupported_values_are_empty(self, value: object) -> None:
        """Test booleans, containers and non-finite floats give an empty string."""
        assert format_value(value) == ""


class TestColors:
    """Tests for color parsing."""

    def test_hex_to_rgb(self) -> None:
        """Test six and three digit hex colors."""
        assert hex_to_rgb("#1a2b3c") == (26, 43, 60)
        assert hex_to_rgb("#fff") == (255, 255, 255)

    def test_hex_to_rgb_invalid_length(self) -> None:
        """Test other lengths are rejected."""
        with pytest.raises(ValueError):
            hex_to_rgb("#12345")

    def test_named_colors(self) -> None:
        """Test named colors are case-insensitive."""
        assert parse_color("Red") == (255, 0, 0)
        assert parse_color("gray") == (128, 128, 128)

    def test_unknown_color_falls_back_to_black(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test unknown colors log a warning and return black."""
        with caplog.at_level(logging.WARNING):
            assert parse_color("chartreuse-ish") == (0, 0, 0)
            assert parse_color("#zzzzzz") == (0, 0, 0)
        assert "chartreuse-ish" in caplog.text
