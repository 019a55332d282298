"""Loader for JSON movement and balance exports.

Both files are JSON arrays:
- movements: ``[{"id": 0, "date": "2021-01-31T10:00:00.000Z", "label": "...", "amount": 12.5}]``
- balances: ``[{"date": "2021-01-31T23:59:59.000Z", "balance": 10012.5}]``
"""

import logging
from pathlib import Path
from typing import TypeVar

from pydantic import TypeAdapter, ValidationError

from models import Balance, Movement

from .base import LedgerFileError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MOVEMENTS_ADAPTER = TypeAdapter(list[Movement])
_BALANCES_ADAPTER = TypeAdapter(list[Balance])


class JsonLedgerLoader:
    """Loader for JSON arrays of movements or balances."""

    name = "JSON"

    def can_load(self, path: Path) -> bool:
        return path.suffix.lower() == ".json"

    def load_movements(self, path: Path) -> list[Movement]:
        return self._load(path, _MOVEMENTS_ADAPTER)

    def load_balances(self, path: Path) -> list[Balance]:
        return self._load(path, _BALANCES_ADAPTER)

    def _load(self, path: Path, adapter: TypeAdapter[list[T]]) -> list[T]:
        try:
            content = path.read_bytes()
        except OSError as e:
            logger.error("Failed to read %s: %s", path, e)
            raise LedgerFileError(f"Cannot read {path}: {e}") from e

        try:
            return adapter.validate_json(content)
        except ValidationError as e:
            logger.error("Invalid ledger content in %s: %s", path.name, e)
            raise LedgerFileError(
                f"Invalid content in {path.name}: {e.error_count()} validation error(s)"
            ) from e


# Auto-register loader instance
_loader = JsonLedgerLoader()
from .registry import register_loader

register_loader(_loader)
