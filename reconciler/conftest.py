"""Pytest configuration: readable test names and shared ledger builders.

Test function docstrings become display names in pytest output, and the
fixtures below build movements and month-end balances for reconciliation
tests.
"""

from datetime import datetime

import pytest

from models import Balance, Movement
from months import MONTHS_IN_WINDOW


def _docstring_summary(function) -> str | None:
    """Return the first non-empty line of a test's docstring, if any."""
    doc = function.__doc__
    if not doc:
        return None
    return next(
        (line.strip() for line in doc.strip().splitlines() if line.strip()),
        None,
    )


def pytest_collection_modifyitems(items):
    """Use docstring summaries as test names, keeping parametrize ids."""
    for item in items:
        summary = _docstring_summary(item.function)
        if not summary:
            continue
        if hasattr(item, "callspec"):
            start = item.nodeid.find("[")
            param_part = item.nodeid[start:] if start != -1 else ""
            item._nodeid = summary + param_part
        else:
            item._nodeid = summary


@pytest.fixture
def make_movement():
    """Factory for movements with sensible defaults."""

    def _make(
        movement_id: int = 1,
        amount: float = 100.0,
        date: datetime = datetime(2021, 1, 15, 10, 0, 0),
        label: str = "Settlement",
    ) -> Movement:
        return Movement(id=movement_id, date=date, label=label, amount=amount)

    return _make


@pytest.fixture
def make_balances():
    """Factory for twelve month-end balances from a list of closing amounts.

    Closing amounts not given repeat the last one provided.
    """

    def _make(*closings: float, year: int = 2021) -> list[Balance]:
        values = list(closings) or [10000.0]
        values += [values[-1]] * (MONTHS_IN_WINDOW - len(values))
        return [
            Balance(date=datetime(year, index + 1, 28, 23, 59, 59), balance=value)
            for index, value in enumerate(values)
        ]

    return _make
