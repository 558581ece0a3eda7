"""Pydantic models for Transaction data"""
import re
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

TransactionType = Literal['income', 'expense']
TRANSACTION_TYPES = ('income', 'expense')

# Checked in this order; the first failing field is the one reported
TRANSACTION_FIELDS = ('description', 'amount', 'date', 'type')

_NUMERIC = re.compile(r'^-?\d+(\.\d+)?$')


class TransactionBase(BaseModel):
    """
    A single income or expense ledger entry.
    """
    description: str = Field(..., min_length=1)
    amount: float = Field(..., allow_inf_nan=False)
    date: datetime
    type: TransactionType

    @field_validator('amount', mode='before')
    @classmethod
    def reject_boolean_amount(cls, value):
        if isinstance(value, bool):
            raise ValueError("must be a number")
        return value

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, value):
        """Accepts ISO-8601 strings and epoch milliseconds, as numbers or numeric strings."""
        if isinstance(value, bool):
            raise ValueError("must be a valid date")
        if isinstance(value, str) and _NUMERIC.match(value.strip()):
            value = float(value)
        if isinstance(value, (int, float)):
            try:
                return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                raise ValueError("must be a valid date")
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip())
            except ValueError:
                raise ValueError("must be a valid date")
        return value

    @field_validator('date')
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        # Naive values (including those read back from MongoDB) are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        try:
            return value.astimezone(timezone.utc)
        except OverflowError:
            raise ValueError("must be a valid date")


class TransactionIn(TransactionBase):
    """Validated payload for creating or replacing a transaction."""

    class Config:
        extra = 'forbid'

    def to_document(self) -> dict:
        return {
            'description': self.description,
            'amount': self.amount,
            'date': self.date,
            'type': self.type,
        }


class TransactionRecord(TransactionBase):
    """A stored transaction, as returned by the list endpoint."""
    id: str = Field(..., alias='_id')

    class Config:
        populate_by_name = True
        from_attributes = True


class FieldError(BaseModel):
    field: Optional[str] = None
    reason: Literal['missing', 'empty', 'invalid_type', 'not_allowed_value', 'unknown_field', 'invalid_body']
    message: str


class OperationResult(BaseModel):
    """Outcome of a single service operation. Routes map `status` to an HTTP response."""
    status: Literal['success', 'invalid_id', 'invalid_payload', 'not_found', 'error']
    message: Optional[str] = None
    transactions: Optional[List[TransactionRecord]] = None
    inserted_id: Optional[str] = None
    modified_count: Optional[int] = None
    deleted_count: Optional[int] = None


# --- Response bodies ---

class CreatedResponse(BaseModel):
    success: bool = True
    inserted_id: str = Field(..., alias='insertedId')

    class Config:
        populate_by_name = True


class UpdatedResponse(BaseModel):
    success: bool = True
    modified_count: int = Field(..., alias='modifiedCount')

    class Config:
        populate_by_name = True


class DeletedResponse(BaseModel):
    success: bool = True
    deleted_count: int = Field(..., alias='deletedCount')

    class Config:
        populate_by_name = True


class ErrorResponse(BaseModel):
    error: str
