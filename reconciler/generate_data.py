"""Generate a sample ledger: random movements and matching monthly balances."""

import argparse
import json
import logging
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Sequence

from models import Balance, Movement
from money import from_cents, to_cents
from months import MONTHS_IN_WINDOW, month_index
from reconciliation import OPENING_BALANCE_CENTS

logger = logging.getLogger(__name__)

# Generator defaults
DEFAULT_COUNT = 200
DEFAULT_MIN_AMOUNT = 100.0
DEFAULT_MAX_AMOUNT = 1000.0
DEFAULT_YEAR = 2021
REFUND_PROBABILITY = 0.55

MOVEMENTS_FILE = "movements.json"
BALANCES_FILE = "balances.json"


def build_movement(
    movement_id: int,
    is_refund: bool,
    min_amount: float,
    max_amount: float,
    year: int,
    rng: random.Random,
) -> Movement:
    """
    Build one random settlement or refund.

    Refunds draw from the negative side of the range, so their amounts fall
    between ``min_amount`` and ``min_amount - (max_amount - min_amount)``.
    """
    sign = -1 if is_refund else 1
    amount = round(min_amount + rng.random() * (max_amount - min_amount) * sign, 2)
    kind = "Refund" if is_refund else "Settlement"
    label = f"{kind} - id={rng.randbytes(10).hex()}"
    return Movement(id=movement_id, date=random_date(year, rng), label=label, amount=amount)


def random_date(year: int, rng: random.Random) -> datetime:
    """Pick a uniformly random timestamp within ``year``."""
    start = datetime(year, 1, 1)
    end = datetime(year + 1, 1, 1)
    span = (end - start).total_seconds()
    return start + timedelta(seconds=int(rng.random() * span))


def generate_movements(
    count: int = DEFAULT_COUNT,
    min_amount: float = DEFAULT_MIN_AMOUNT,
    max_amount: float = DEFAULT_MAX_AMOUNT,
    year: int = DEFAULT_YEAR,
    rng: Optional[random.Random] = None,
) -> list[Movement]:
    """
    Generate random movements for one calendar year.

    Movements are sorted by date and their ids rewritten so that ids
    increase with time.

    Args:
        count: Number of movements to generate
        min_amount: Lower bound of settlement amounts
        max_amount: Upper bound of settlement amounts
        year: Calendar year the movements fall in
        rng: Random source, for reproducible datasets

    Returns:
        List of Movement objects sorted by date
    """
    rng = rng or random.Random()
    movements = [
        build_movement(i, rng.random() < REFUND_PROBABILITY, min_amount, max_amount, year, rng)
        for i in range(count)
    ]
    movements.sort(key=lambda m: m.date)
    return [m.model_copy(update={"id": index}) for index, m in enumerate(movements)]


def month_end(year: int, index: int) -> datetime:
    """Return the last second of the given 0-based month."""
    if index == MONTHS_IN_WINDOW - 1:
        next_month = datetime(year + 1, 1, 1)
    else:
        next_month = datetime(year, index + 2, 1)
    return next_month - timedelta(seconds=1)


def compute_balances(
    movements: Sequence[Movement],
    year: int = DEFAULT_YEAR,
    opening_balance_cents: int = OPENING_BALANCE_CENTS,
) -> list[Balance]:
    """
    Compute the twelve month-end balances implied by ``movements``.

    Each month is chained from the previous month's reported balance, using
    the same cents conversion as reconciliation, so the result always
    reconciles against the same movements.
    """
    sums = [0] * MONTHS_IN_WINDOW
    for movement in movements:
        sums[month_index(movement.date)] += to_cents(movement.amount)

    balances = []
    opening = opening_balance_cents
    for index in range(MONTHS_IN_WINDOW):
        closing = from_cents(opening + sums[index])
        balances.append(Balance(date=month_end(year, index), balance=closing))
        opening = to_cents(closing)
    return balances


def write_dataset(
    output_dir: Path, movements: Sequence[Movement], balances: Sequence[Balance]
) -> tuple[Path, Path]:
    """Write movements and balances as JSON arrays into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    movements_path = output_dir / MOVEMENTS_FILE
    balances_path = output_dir / BALANCES_FILE
    movements_path.write_text(
        json.dumps([m.model_dump(mode="json") for m in movements], indent=2),
        encoding="utf-8",
    )
    balances_path.write_text(
        json.dumps([b.model_dump(mode="json") for b in balances], indent=2),
        encoding="utf-8",
    )
    logger.info("Wrote %d movements and %d balances to %s", len(movements), len(balances), output_dir)
    return movements_path, balances_path


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the sample data generator."""
    parser = argparse.ArgumentParser(
        description="Generate random movements and the matching monthly balances"
    )
    parser.add_argument("-c", "--count", type=int, default=DEFAULT_COUNT, help="Number of movements")
    parser.add_argument("--min-amount", type=float, default=DEFAULT_MIN_AMOUNT, help="Minimum amount")
    parser.add_argument("--max-amount", type=float, default=DEFAULT_MAX_AMOUNT, help="Maximum amount")
    parser.add_argument("--year", type=int, default=DEFAULT_YEAR, help="Calendar year of the ledger")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output")
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("resources"),
        help="Output directory (default: ./resources)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every generation step",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if args.count < 0 or args.min_amount > args.max_amount:
        print("Error: count must not be negative and min-amount <= max-amount", file=sys.stderr)
        return 1

    rng = random.Random(args.seed)
    movements = generate_movements(args.count, args.min_amount, args.max_amount, args.year, rng)
    balances = compute_balances(movements, args.year)
    movements_path, balances_path = write_dataset(args.output, movements, balances)

    print(f"Movements: {movements_path}")
    print(f"Balances:  {balances_path}")
    print("Closing balances: " + ", ".join(f"{b.balance:,.2f}" for b in balances))
    return 0


if __name__ == "__main__":
    sys.exit(main())
