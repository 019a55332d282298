"""Ledger file loaders with auto-detection registry."""

from .base import LedgerFileError, LedgerLoader, UnsupportedLedgerFileError
from .registry import (
    find_loader,
    get_registered_loaders,
    load_balances,
    load_movements,
    register_loader,
)
from .json_loader import JsonLedgerLoader
from .tabular_loader import TabularLedgerLoader

__all__ = [
    "LedgerLoader",
    "LedgerFileError",
    "UnsupportedLedgerFileError",
    "JsonLedgerLoader",
    "TabularLedgerLoader",
    "find_loader",
    "get_registered_loaders",
    "load_balances",
    "load_movements",
    "register_loader",
]
