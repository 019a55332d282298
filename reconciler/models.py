"""Pydantic models for ledger reconciliation."""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ErrorReason(str, Enum):
    """Reasons a reconciliation can be rejected."""

    DUPLICATE_MOVEMENT_DIFFERENT_AMOUNT = "DUPLICATE_DIFFERENT_AMOUNT"
    DUPLICATE_MOVEMENT_DIFFERENT_TIMESTAMP = "DUPLICATE_DIFFERENT_TIMESTAMP"
    DUPLICATE_MOVEMENT_DIFFERENT_LABEL = "DUPLICATE_DIFFERENT_LABEL"
    DUPLICATE_MOVEMENT_ENTRY = "DUPLICATE_MOVEMENT_ENTRY"
    INVALID_COMPUTED_BALANCE = "INVALID_COMPUTED_BALANCE"


class Movement(BaseModel):
    """A single ledger transaction."""

    id: int
    """Identifier of the movement, expected unique within a batch."""
    date: datetime
    """Timestamp of the movement; only its month matters for aggregation."""
    label: str
    """Free-text description."""
    amount: float = Field(allow_inf_nan=False)
    """Signed amount in major units (positive = credit, negative = debit)."""


class Balance(BaseModel):
    """Reported account balance at a month-end checkpoint."""

    date: datetime
    balance: float = Field(allow_inf_nan=False)


class MovementError(BaseModel):
    """A duplicate conflict recorded against a movement id."""

    reason: ErrorReason
    movement: Movement
    in_conflict_with: Optional[Movement] = None
    message: str


class ErrorEntry(BaseModel):
    """One itemized finding in a reconciliation response."""

    reason: ErrorReason
    message: str
    data: Union[Movement, dict[str, int], None] = None


class ReconciliationResponse(BaseModel):
    """Verdict of a reconciliation run."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    message: str
    errors: list[ErrorEntry] = Field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.status_code == 202

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize with the camelCase keys consumers expect."""
        return self.model_dump_json(by_alias=True, indent=indent)
