"""Month arithmetic for invoice periods"""

import re
from typing import Tuple

from card_invoices.domain.exceptions import InvalidMonthError

MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def add_months(year: int, month: int, months: int) -> Tuple[int, int]:
    """Shift a (year, month) pair by a number of calendar months"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def format_month(year: int, month: int) -> str:
    """Format a (year, month) pair as YYYY-MM"""
    return f"{year:04d}-{month:02d}"


def parse_month(value: str) -> Tuple[int, int]:
    """
    Parse a YYYY-MM string into a (year, month) pair.

    Raises:
        InvalidMonthError: If the value is not a zero-padded YYYY-MM month
    """
    match = MONTH_PATTERN.match(value or "")
    if not match:
        raise InvalidMonthError(f"Invalid invoice month: {value!r} (expected YYYY-MM)")
    return int(match.group(1)), int(match.group(2))
