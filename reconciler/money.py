"""Conversion between major currency units and integer cents."""

import math

CENTS_PER_UNIT = 100


def to_cents(value: float) -> int:
    """
    Convert an amount in major units to integer cents.

    The fractional part is floored, so float artefacts such as
    ``0.29 * 100 == 28.999999999999996`` lose a cent. Reconciliation
    tolerates a one-cent delta for that reason.

    Args:
        value: Amount in major units (e.g. euros)

    Returns:
        Amount in cents
    """
    return math.floor(value * CENTS_PER_UNIT)


def from_cents(cents: int) -> float:
    """Convert integer cents back to major units."""
    return cents / CENTS_PER_UNIT
