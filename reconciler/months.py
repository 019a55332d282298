"""Calendar helpers for the twelve-month reconciliation window."""

from datetime import datetime

MONTHS_IN_WINDOW = 12

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def month_index(moment: datetime) -> int:
    """Return the 0-based calendar month (0 = January) of a timestamp."""
    return moment.month - 1


def month_name(index: int) -> str:
    """Return the English month name for a 0-based month index."""
    return MONTH_NAMES[index]


def empty_months_delta() -> dict[str, int]:
    """Build a fresh month-name -> delta map with every month at zero."""
    return {name: 0 for name in MONTH_NAMES}
