"""Tests for the ledger validation command line."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from models import ErrorEntry, ErrorReason, Movement, ReconciliationResponse
from validate_ledger import (
    EXIT_ACCEPTED,
    EXIT_INVALID_INPUT,
    EXIT_REJECTED,
    format_report,
    main,
)


def write_ledger(directory: Path, movements: list[dict], balances: list[dict]) -> tuple[Path, Path]:
    movements_path = directory / "movements.json"
    balances_path = directory / "balances.json"
    movements_path.write_text(json.dumps(movements), encoding="utf-8")
    balances_path.write_text(json.dumps(balances), encoding="utf-8")
    return movements_path, balances_path


def monthly_balances(*closings: float) -> list[dict]:
    values = list(closings) + [closings[-1]] * (12 - len(closings))
    return [
        {"date": f"2021-{index + 1:02d}-28T23:59:59Z", "balance": value}
        for index, value in enumerate(values)
    ]


MOVEMENT = {"id": 1, "date": "2021-01-10T12:00:00Z", "label": "Settlement", "amount": 500.0}


class TestValidateLedgerCli:
    """Tests for the validate_ledger entry point."""

    def test_accepted_ledger_prints_json_and_exits_zero(self, tmp_path, capsys):
        """A reconciling ledger prints the accepted response."""
        # Arrange
        movements_path, balances_path = write_ledger(tmp_path, [MOVEMENT], monthly_balances(10500.0))

        # Act
        exit_code = main([str(movements_path), str(balances_path)])

        # Assert
        assert exit_code == EXIT_ACCEPTED
        output = json.loads(capsys.readouterr().out)
        assert output == {"statusCode": 202, "message": "Accepted", "errors": []}

    def test_rejected_ledger_exits_one(self, tmp_path, capsys):
        """A ledger with duplicates prints the rejected response and exits 1."""
        # Arrange
        movements_path, balances_path = write_ledger(
            tmp_path, [MOVEMENT, MOVEMENT], monthly_balances(10500.0)
        )

        # Act
        exit_code = main([str(movements_path), str(balances_path)])

        # Assert
        assert exit_code == EXIT_REJECTED
        output = json.loads(capsys.readouterr().out)
        assert output["statusCode"] == 400
        assert output["errors"][0]["reason"] == "DUPLICATE_MOVEMENT_ENTRY"
        assert output["errors"][0]["data"]["id"] == 1

    def test_empty_balances_exit_with_input_error(self, tmp_path, capsys):
        """An empty balance file is reported on stderr with exit code 2."""
        # Arrange
        movements_path, balances_path = write_ledger(tmp_path, [MOVEMENT], [])

        # Act
        exit_code = main([str(movements_path), str(balances_path)])

        # Assert
        assert exit_code == EXIT_INVALID_INPUT
        assert "Invalid balances provided" in capsys.readouterr().err

    def test_malformed_file_exits_with_input_error(self, tmp_path, capsys):
        """A malformed movements file is reported on stderr with exit code 2."""
        # Arrange
        movements_path, balances_path = write_ledger(tmp_path, [{"id": "x"}], monthly_balances(10000.0))

        # Act
        exit_code = main([str(movements_path), str(balances_path)])

        # Assert
        assert exit_code == EXIT_INVALID_INPUT
        assert "Error:" in capsys.readouterr().err

    def test_non_finite_amount_exits_with_input_error(self, tmp_path, capsys):
        """A NaN amount is reported as an input error rather than reconciled."""
        # Arrange
        movements_path, balances_path = write_ledger(tmp_path, [], monthly_balances(10000.0))
        movements_path.write_text(
            '[{"id": 1, "date": "2021-01-10T12:00:00Z", "label": "x", "amount": NaN}]',
            encoding="utf-8",
        )

        # Act
        exit_code = main([str(movements_path), str(balances_path)])

        # Assert
        assert exit_code == EXIT_INVALID_INPUT
        assert "movements.json" in capsys.readouterr().err

    def test_blank_csv_amount_exits_with_input_error(self, tmp_path, capsys):
        """A CSV row without an amount is reported with its row number."""
        # Arrange
        _, balances_path = write_ledger(tmp_path, [], monthly_balances(10000.0))
        movements_path = tmp_path / "movements.csv"
        movements_path.write_text("id,date,label,amount\n1,2021-01-10,x,\n", encoding="utf-8")

        # Act
        exit_code = main([str(movements_path), str(balances_path)])

        # Assert
        assert exit_code == EXIT_INVALID_INPUT
        assert "row 1" in capsys.readouterr().err

    @patch("validate_ledger.logging.basicConfig")
    def test_logging_goes_to_stderr(self, mock_basic_config, tmp_path):
        """Diagnostics are logged to stderr so stdout carries only the result."""
        # Arrange
        movements_path, balances_path = write_ledger(tmp_path, [MOVEMENT], monthly_balances(10500.0))

        # Act
        main([str(movements_path), str(balances_path), "--verbose"])

        # Assert
        kwargs = mock_basic_config.call_args.kwargs
        assert kwargs["level"] == logging.DEBUG
        assert kwargs["format"] == "%(levelname)s %(name)s: %(message)s"
        assert kwargs["handlers"][0].stream is sys.stderr

    def test_text_format_prints_report(self, tmp_path, capsys):
        """The text format prints a readable report."""
        # Arrange
        movements_path, balances_path = write_ledger(tmp_path, [MOVEMENT], monthly_balances(10400.0))

        # Act
        exit_code = main([str(movements_path), str(balances_path), "--format", "text"])

        # Assert
        assert exit_code == EXIT_REJECTED
        out = capsys.readouterr().out
        assert "INVALID_COMPUTED_BALANCE" in out
        assert "January" in out

    def test_unknown_format_is_rejected_by_argparse(self, tmp_path):
        """An unsupported output format is refused."""
        with pytest.raises(SystemExit):
            main(["a.json", "b.json", "--format", "xml"])


class TestFormatReport:
    """Tests for the text report renderer."""

    def test_accepted_report(self):
        """Accepted responses say no inconsistencies were found."""
        response = ReconciliationResponse(status_code=202, message="Accepted")

        assert "No inconsistencies found." in format_report(response)

    def test_report_lists_deltas_and_movements(self):
        """Balance deltas and duplicate movements are both rendered."""
        # Arrange
        movement = Movement(id=9, date=datetime(2021, 5, 1), label="Refund", amount=-42.0)
        response = ReconciliationResponse(
            status_code=400,
            message="Invalid balance and movements. See the errors array for more info (2 errors)",
            errors=[
                ErrorEntry(
                    reason=ErrorReason.INVALID_COMPUTED_BALANCE,
                    message="Error: 1 months had a computed balance delta (invalid balance)",
                    data={"May": -4200},
                ),
                ErrorEntry(
                    reason=ErrorReason.DUPLICATE_MOVEMENT_ENTRY,
                    message="Movement with id=9 is invalid",
                    data=movement,
                ),
            ],
        )

        # Act
        report = format_report(response)

        # Assert
        assert "May" in report and "-4200 cents" in report
        assert "-42.00" in report and "Refund" in report
