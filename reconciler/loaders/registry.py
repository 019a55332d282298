"""Loader registry with auto-detection by file type."""

import logging
from pathlib import Path
from typing import Optional

from models import Balance, Movement

from .base import LedgerLoader, UnsupportedLedgerFileError

logger = logging.getLogger(__name__)

_registered_loaders: list[LedgerLoader] = []


def register_loader(loader: LedgerLoader) -> None:
    """Register a ledger loader for auto-detection."""
    _registered_loaders.append(loader)


def get_registered_loaders() -> list[LedgerLoader]:
    """Get list of all registered loaders."""
    return _registered_loaders.copy()


def find_loader(path: Path) -> Optional[LedgerLoader]:
    """Return the first registered loader able to read ``path``, if any."""
    for loader in _registered_loaders:
        if loader.can_load(path):
            return loader
    return None


def _require_loader(path: Path) -> LedgerLoader:
    loader = find_loader(path)
    if loader is None:
        raise UnsupportedLedgerFileError(f"No loader available for {path.name}")
    return loader


def load_movements(path: Path) -> list[Movement]:
    """
    Auto-detect the file format and load movements.

    Raises:
        UnsupportedLedgerFileError: If no loader handles the file
        LedgerFileError: If the file is unreadable or malformed
    """
    loader = _require_loader(path)
    movements = loader.load_movements(path)
    logger.info("Loaded %d movements from %s (%s)", len(movements), path.name, loader.name)
    return movements


def load_balances(path: Path) -> list[Balance]:
    """
    Auto-detect the file format and load monthly balances.

    Raises:
        UnsupportedLedgerFileError: If no loader handles the file
        LedgerFileError: If the file is unreadable or malformed
    """
    loader = _require_loader(path)
    balances = loader.load_balances(path)
    logger.info("Loaded %d balances from %s (%s)", len(balances), path.name, loader.name)
    return balances
