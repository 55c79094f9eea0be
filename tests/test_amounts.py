"""
Tests for amount sanitization and unit conversion.
"""

from decimal import Decimal

import pytest

from agentchain.errors import MissingAmountError
from agentchain.executor import (
    display_amount,
    format_gwei,
    format_units,
    require_base_units,
    sanitize_amount,
    to_base_units,
)


class TestSanitizeAmount:
    """Tests for sanitize_amount."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("5", Decimal("5")),
            ("10 SHM", Decimal("10")),
            ("$2.5", Decimal("2.5")),
            (0.1, Decimal("0.1")),
            (3, Decimal("3")),
            ("1.2.3", Decimal("1.23")),
            ("1,000", Decimal("1000")),
        ],
    )
    def test_parses_free_text(self, raw, expected):
        assert sanitize_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", ".", "0", "0.0", True])
    def test_missing_or_zero_raises(self, raw):
        with pytest.raises(MissingAmountError):
            sanitize_amount(raw)

    def test_negative_sign_is_stripped(self):
        # "-" is not numeric; the magnitude is what the user typed
        assert sanitize_amount("-5") == Decimal("5")


class TestUnits:
    """Tests for base-unit conversion."""

    def test_to_base_units(self):
        assert to_base_units(Decimal("1")) == 10**18
        assert to_base_units(Decimal("0.5")) == 5 * 10**17

    def test_to_base_units_truncates_dust(self):
        assert to_base_units(Decimal("0.0000000000000000019")) == 1

    def test_require_base_units_rejects_dust(self):
        assert require_base_units(Decimal("0.5"), 1) == 5
        with pytest.raises(MissingAmountError):
            require_base_units(Decimal("0.0000000000000000001"))
        with pytest.raises(MissingAmountError):
            require_base_units(Decimal("0.01"), 1)

    def test_format_units(self):
        assert format_units(10**18) == "1.0"
        assert format_units(15 * 10**17) == "1.5"
        assert format_units(0) == "0.0"

    def test_format_gwei(self):
        assert format_gwei(2 * 10**9) == "2.0"
        assert format_gwei(1_500_000_000) == "1.5"

    def test_display_amount(self):
        assert display_amount(None) == "N/A"
        assert display_amount("") == "N/A"
        assert display_amount("5") == "5"
