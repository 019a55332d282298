"""Validate a ledger of movements against its monthly balances."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from loaders import LedgerFileError, load_balances, load_movements
from models import ErrorReason, ReconciliationResponse
from reconciliation import ReconciliationError, validate_movements

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_INVALID_INPUT = 2


def format_report(response: ReconciliationResponse) -> str:
    """Render a response as a human-readable report."""
    lines = ["=" * 80, f"RECONCILIATION: {response.status_code} {response.message}", "=" * 80]
    if response.accepted:
        lines.append("No inconsistencies found.")
        return "\n".join(lines)

    for entry in response.errors:
        lines.append(f"[{entry.reason.value}] {entry.message}")
        if entry.reason == ErrorReason.INVALID_COMPUTED_BALANCE and isinstance(entry.data, dict):
            for month, delta in entry.data.items():
                lines.append(f"  {month:<10} delta: {delta / 100:+,.2f} ({delta:+d} cents)")
        elif entry.data is not None and not isinstance(entry.data, dict):
            movement = entry.data
            lines.append(
                f"  {movement.date.isoformat()}  {movement.amount:10.2f}  {movement.label}"
            )
    lines.append("=" * 80)
    return "\n".join(lines)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for ledger validation."""
    parser = argparse.ArgumentParser(
        description="Reconcile movements against monthly closing balances"
    )
    parser.add_argument("movements", type=Path, help="Movements file (.json, .csv or .xlsx)")
    parser.add_argument("balances", type=Path, help="Monthly balances file (.json, .csv or .xlsx)")
    parser.add_argument(
        "-f", "--format",
        choices=("json", "text"),
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every computation step",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        movements = load_movements(args.movements)
        balances = load_balances(args.balances)
        response = validate_movements(movements, balances)
    except (LedgerFileError, ReconciliationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if args.format == "json":
        print(response.to_json())
    else:
        print(format_report(response))

    return EXIT_ACCEPTED if response.accepted else EXIT_REJECTED


if __name__ == "__main__":
    sys.exit(main())
