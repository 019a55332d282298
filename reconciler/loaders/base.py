"""Base protocol and errors for ledger file loaders."""

from pathlib import Path
from typing import Protocol

from models import Balance, Movement


class LedgerFileError(Exception):
    """Raised when a ledger file cannot be read or does not match its format."""


class UnsupportedLedgerFileError(LedgerFileError):
    """Raised when no registered loader handles a file."""


class LedgerLoader(Protocol):
    """Protocol for movement and balance file loaders."""

    name: str
    """Human-readable name of the loader (e.g., 'JSON')."""

    def can_load(self, path: Path) -> bool:
        """
        Check if this loader can handle the given file.

        Args:
            path: Path to the ledger file

        Returns:
            True if the file format is supported by this loader
        """
        ...

    def load_movements(self, path: Path) -> list[Movement]:
        """
        Load movements from a file, preserving file order.

        Raises:
            LedgerFileError: If the file is unreadable or malformed
        """
        ...

    def load_balances(self, path: Path) -> list[Balance]:
        """
        Load monthly balances from a file, preserving file order.

        Raises:
            LedgerFileError: If the file is unreadable or malformed
        """
        ...
