"""Unit tests for invoice month arithmetic"""

import pytest
from card_invoices.domain.exceptions import InvalidMonthError
from card_invoices.utils.date_utils import add_months, format_month, parse_month


def test_add_months_within_year():
    assert add_months(2024, 3, 2) == (2024, 5)


def test_add_months_rolls_over_year():
    assert add_months(2024, 11, 3) == (2025, 2)
    assert add_months(2024, 12, 12) == (2025, 12)


def test_add_months_zero():
    assert add_months(2024, 1, 0) == (2024, 1)


def test_format_month_zero_pads():
    assert format_month(2025, 1) == "2025-01"
    assert format_month(2025, 12) == "2025-12"


def test_parse_month():
    assert parse_month("2024-07") == (2024, 7)


@pytest.mark.parametrize("value", ["2024-7", "2024-13", "2024-00", "24-07", "2024/07", ""])
def test_parse_month_rejects_malformed(value):
    with pytest.raises(InvalidMonthError):
        parse_month(value)
