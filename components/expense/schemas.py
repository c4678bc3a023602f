"""Pydantic schemas for expense data validation."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from components.category.schemas import CategoryRef
from components.core.schemas import CamelModel, Money


class ExpenseBase(CamelModel):
    """Base expense schema shared by create and update bodies."""
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    description: str = Field(..., min_length=1)
    date: datetime
    category_id: str = Field(..., min_length=1)

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Description is required")
        return value

    @field_validator("date")
    @classmethod
    def naive_utc(cls, value: datetime) -> datetime:
        # Columns hold naive UTC timestamps
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class ExpenseCreate(ExpenseBase):
    """Schema for expense creation."""
    pass


class ExpenseUpdate(ExpenseBase):
    """Schema for expense update; every field is replaced."""
    pass


class Expense(CamelModel):
    """Schema for expense response."""
    id: str
    amount: Money
    description: str
    date: datetime
    category_id: str
    category: CategoryRef
    created_at: datetime
    updated_at: datetime


class ExpenseFilter(BaseModel):
    """Filter for expense listing; both date bounds are inclusive days."""
    category_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: Optional[int] = None


class ExpenseImportError(BaseModel):
    """Schema for a rejected CSV row."""
    row: int
    message: str


class ExpenseImportResult(BaseModel):
    """Schema for CSV import response."""
    success: bool
    message: str
    imported: int = 0
    errors: Optional[List[ExpenseImportError]] = None
