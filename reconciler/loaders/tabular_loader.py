"""Loader for CSV and Excel (.xlsx) ledger exports.

Column names are matched case-insensitively:
- movements: id, date, label, amount
- balances: date, balance

Rows are converted in file order.
"""

import logging
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import ValidationError

from models import Balance, Movement

from .base import LedgerFileError

logger = logging.getLogger(__name__)

# Column names in tabular exports
COLUMN_ID = "id"
COLUMN_DATE = "date"
COLUMN_LABEL = "label"
COLUMN_AMOUNT = "amount"
COLUMN_BALANCE = "balance"

MOVEMENT_COLUMNS = (COLUMN_ID, COLUMN_DATE, COLUMN_LABEL, COLUMN_AMOUNT)
BALANCE_COLUMNS = (COLUMN_DATE, COLUMN_BALANCE)

SUPPORTED_SUFFIXES = {".csv", ".xlsx"}


class TabularLedgerLoader:
    """Loader for CSV and Excel sheets of movements or balances."""

    name = "CSV/Excel"

    def can_load(self, path: Path) -> bool:
        return path.suffix.lower() in SUPPORTED_SUFFIXES

    def load_movements(self, path: Path) -> list[Movement]:
        df = self._read_frame(path, MOVEMENT_COLUMNS)
        movements = []
        for row_number, row in enumerate(df.to_dict(orient="records"), start=1):
            movements.append(self._row_to_movement(path, row_number, row))
        return movements

    def load_balances(self, path: Path) -> list[Balance]:
        df = self._read_frame(path, BALANCE_COLUMNS)
        balances = []
        for row_number, row in enumerate(df.to_dict(orient="records"), start=1):
            balances.append(self._row_to_balance(path, row_number, row))
        return balances

    def _read_frame(self, path: Path, required_columns: tuple[str, ...]) -> pd.DataFrame:
        """
        Read a sheet and normalize its column names.

        Args:
            path: Path to the CSV or Excel file
            required_columns: Columns that must be present

        Returns:
            DataFrame restricted to the required columns

        Raises:
            LedgerFileError: If the file cannot be read or lacks columns
        """
        try:
            if path.suffix.lower() == ".csv":
                df = pd.read_csv(path)
            else:
                df = pd.read_excel(path)
        except Exception as e:
            logger.error("Failed to read %s: %s", path, e)
            raise LedgerFileError(f"Cannot read {path}: {e}") from e

        df.columns = [str(column).strip().lower() for column in df.columns]
        missing = [column for column in required_columns if column not in df.columns]
        if missing:
            raise LedgerFileError(
                f"{path.name} is missing required column(s): {', '.join(missing)}"
            )
        return df[list(required_columns)]

    def _row_to_movement(self, path: Path, row_number: int, row: dict[str, Any]) -> Movement:
        try:
            return Movement(
                id=int(row[COLUMN_ID]),
                date=self._to_datetime(row[COLUMN_DATE]),
                label=str(row[COLUMN_LABEL]) if pd.notna(row[COLUMN_LABEL]) else "",
                amount=self._to_number(row[COLUMN_AMOUNT], COLUMN_AMOUNT),
            )
        except (TypeError, ValueError, ValidationError) as e:
            raise LedgerFileError(f"Invalid movement at row {row_number} of {path.name}: {e}") from e

    def _row_to_balance(self, path: Path, row_number: int, row: dict[str, Any]) -> Balance:
        try:
            return Balance(
                date=self._to_datetime(row[COLUMN_DATE]),
                balance=self._to_number(row[COLUMN_BALANCE], COLUMN_BALANCE),
            )
        except (TypeError, ValueError, ValidationError) as e:
            raise LedgerFileError(f"Invalid balance at row {row_number} of {path.name}: {e}") from e

    @staticmethod
    def _to_number(value: Any, column: str) -> float:
        if pd.isna(value):
            raise ValueError(f"missing {column}")
        return float(value)

    @staticmethod
    def _to_datetime(value: Any):
        if pd.isna(value):
            raise ValueError("missing date")
        return pd.Timestamp(value).to_pydatetime()


# Auto-register loader instance
_loader = TabularLedgerLoader()
from .registry import register_loader

register_loader(_loader)
