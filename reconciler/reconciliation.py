"""Reconcile a ledger of movements against monthly closing balances.

Two independent checks feed a single verdict:
1. Duplicate detection: movements sharing an id are classified by what
   differs between them, and only the first-seen one is aggregated.
2. Balance verification: for every month, the opening balance plus the sum
   of that month's movements must match the reported closing balance to
   within one cent.
"""

import logging
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from models import (
    Balance,
    ErrorEntry,
    ErrorReason,
    Movement,
    MovementError,
    ReconciliationResponse,
)
from money import to_cents
from months import MONTHS_IN_WINDOW, empty_months_delta, month_index, month_name

logger = logging.getLogger(__name__)

# Only end-of-month checkpoints exist, so the account is assumed to hold
# 10,000.00 at the start of January.
OPENING_BALANCE_CENTS = 10_000 * 100

# Largest |delta| in cents still attributed to rounding.
TOLERANCE_CENTS = 1

STATUS_ACCEPTED = 202
STATUS_REJECTED = 400


class ReconciliationError(ValueError):
    """Raised when reconciliation cannot be attempted at all."""


class InvalidBalancesError(ReconciliationError):
    """Raised when no balance checkpoints are provided."""


class MovementAggregation(BaseModel):
    """Result of the deduplicating pass over movements."""

    monthly_sums: list[int] = Field(default_factory=lambda: [0] * MONTHS_IN_WINDOW)
    errors_by_id: dict[str, list[MovementError]] = Field(default_factory=dict)
    is_valid: bool = True


class BalanceVerification(BaseModel):
    """Result of the month-by-month balance walk."""

    months_delta: dict[str, int] = Field(default_factory=empty_months_delta)
    is_valid: bool = True

    def nonzero_deltas(self) -> dict[str, int]:
        return {month: delta for month, delta in self.months_delta.items() if delta != 0}


def validate_movements(
    movements: Sequence[Movement],
    balances: Sequence[Balance],
    *,
    opening_balance_cents: int = OPENING_BALANCE_CENTS,
    tolerance_cents: int = TOLERANCE_CENTS,
) -> ReconciliationResponse:
    """
    Reconcile movements against monthly balances.

    Args:
        movements: Movements in input order
        balances: Month-end balances, index 0 = January
        opening_balance_cents: Balance assumed at the start of January
        tolerance_cents: Largest absolute delta accepted as rounding

    Returns:
        ReconciliationResponse with status 202 when everything matches,
        or 400 with one error entry per finding

    Raises:
        InvalidBalancesError: If no balances are provided
    """
    if not balances:
        logger.error("Invalid balances provided: %r", balances)
        raise InvalidBalancesError("Invalid balances provided")

    aggregation = aggregate_movements(movements)
    logger.info("Computed movement sums by month: %s", aggregation.monthly_sums)

    verification = verify_balances(
        aggregation.monthly_sums,
        balances,
        opening_balance_cents=opening_balance_cents,
        tolerance_cents=tolerance_cents,
    )

    return build_response(aggregation, verification)


def classify_duplicate(existing: Movement, movement: Movement) -> ErrorReason:
    """
    Classify a movement whose id was already seen.

    Fields are compared by severity: amount, then timestamp, then label.
    When all of them match the movement is an exact re-delivery.
    """
    if existing.amount != movement.amount:
        logger.error(
            "Found a duplicate movement for id=%s with a different amount "
            "(t1: amount=%s, t2: amount=%s)",
            movement.id,
            existing.amount,
            movement.amount,
        )
        return ErrorReason.DUPLICATE_MOVEMENT_DIFFERENT_AMOUNT
    if existing.date != movement.date:
        logger.error(
            "Found a duplicate movement for id=%s with a different date "
            "(t1: date=%s, t2: date=%s)",
            movement.id,
            existing.date.isoformat(),
            movement.date.isoformat(),
        )
        return ErrorReason.DUPLICATE_MOVEMENT_DIFFERENT_TIMESTAMP
    if existing.label != movement.label:
        logger.error(
            "Found a duplicate movement for id=%s with a different label "
            "(t1: label=%s, t2: label=%s)",
            movement.id,
            existing.label,
            movement.label,
        )
        return ErrorReason.DUPLICATE_MOVEMENT_DIFFERENT_LABEL
    logger.error(
        "Found a duplicate movement for id=%s with the exact same content "
        "as movement=%s already handled",
        movement.id,
        existing.id,
    )
    return ErrorReason.DUPLICATE_MOVEMENT_ENTRY


def describe_movement_error(
    movement: Movement, reason: ErrorReason, in_conflict_with: Optional[Movement]
) -> str:
    """Build the human-readable message of a duplicate conflict."""
    message = f"Movement with id={movement.id} is invalid due to error type {reason.value}"
    if in_conflict_with is not None:
        message += (
            f", in conflict with movement {in_conflict_with.id} "
            f"made on {in_conflict_with.date.isoformat()}"
        )
    return message


def aggregate_movements(movements: Sequence[Movement]) -> MovementAggregation:
    """
    Deduplicate movements by id and sum the accepted ones per month in cents.

    The first movement seen for an id wins; every later one is recorded as
    a conflict and left out of the sums.
    """
    aggregation = MovementAggregation()
    seen: dict[str, Movement] = {}

    for movement in movements:
        key = str(movement.id)
        existing = seen.get(key)

        if existing is None:
            seen[key] = movement
            aggregation.monthly_sums[month_index(movement.date)] += to_cents(movement.amount)
            continue

        reason = classify_duplicate(existing, movement)
        aggregation.is_valid = False
        aggregation.errors_by_id.setdefault(key, []).append(
            MovementError(
                reason=reason,
                movement=movement,
                in_conflict_with=existing,
                message=describe_movement_error(movement, reason, existing),
            )
        )

    return aggregation


def verify_balances(
    monthly_sums: Sequence[int],
    balances: Sequence[Balance],
    *,
    opening_balance_cents: int = OPENING_BALANCE_CENTS,
    tolerance_cents: int = TOLERANCE_CENTS,
) -> BalanceVerification:
    """
    Walk the twelve months and compare computed against reported balances.

    Month 0 opens at ``opening_balance_cents``; every later month opens at
    the previous month's reported balance. Months without a reported
    checkpoint are skipped.
    """
    verification = BalanceVerification()

    if len(balances) < MONTHS_IN_WINDOW:
        logger.warning(
            "Only %d of %d monthly balances provided, months from %s on are not verified",
            len(balances),
            MONTHS_IN_WINDOW,
            month_name(len(balances)),
        )

    for index in range(min(len(balances), MONTHS_IN_WINDOW)):
        if index == 0:
            opening = opening_balance_cents
        else:
            opening = to_cents(balances[index - 1].balance)

        computed = opening + monthly_sums[index]
        expected = to_cents(balances[index].balance)
        delta = computed - expected
        logger.debug("Computed delta for %s: %d", month_name(index), delta)

        if delta != 0 and abs(delta) > tolerance_cents:
            logger.error(
                "Found a delta in '%s' month balance (computed=%d, expected=%d)",
                month_name(index),
                computed,
                expected,
            )
            verification.is_valid = False
            verification.months_delta[month_name(index)] = delta

    return verification


def build_response(
    aggregation: MovementAggregation, verification: BalanceVerification
) -> ReconciliationResponse:
    """Merge both verdicts into a single response."""
    if aggregation.is_valid and verification.is_valid:
        return ReconciliationResponse(status_code=STATUS_ACCEPTED, message="Accepted")

    failed = []
    if not verification.is_valid:
        failed.append("balance")
    if not aggregation.is_valid:
        failed.append("movements")

    errors: list[ErrorEntry] = []
    if not verification.is_valid:
        deltas = verification.nonzero_deltas()
        errors.append(
            ErrorEntry(
                reason=ErrorReason.INVALID_COMPUTED_BALANCE,
                message=f"Error: {len(deltas)} months had a computed balance delta (invalid balance)",
                data=deltas,
            )
        )
    if not aggregation.is_valid:
        for conflicts in aggregation.errors_by_id.values():
            errors.extend(
                ErrorEntry(reason=conflict.reason, message=conflict.message, data=conflict.movement)
                for conflict in conflicts
            )

    message = (
        f"Invalid {' and '.join(failed)}. See the errors array for more info "
        f"({len(errors)} errors)"
    )
    return ReconciliationResponse(status_code=STATUS_REJECTED, message=message, errors=errors)
