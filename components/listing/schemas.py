"""Pydantic schemas for the filtered expense list."""

from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from components.core.schemas import CamelModel, Money
from components.expense.schemas import Expense

SortField = Literal["date", "amount", "description"]
SortDirection = Literal["asc", "desc"]
QuickFilter = Literal["all", "currentMonth", "lastMonth", "last3Months"]


class ListState(CamelModel):
    """Filter, sort and paging state of one client's expense list."""
    search_term: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sort_field: SortField = "date"
    sort_direction: SortDirection = "desc"
    quick_filter: QuickFilter = "all"
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)


class ListStateUpdate(CamelModel):
    """
    Changes requested by a client.

    ``sortField`` follows the column-header rule: picking the current field
    flips the direction, picking another one sorts it descending. Sending an
    explicit ``null`` date clears that bound.
    """
    search_term: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    quick_filter: Optional[QuickFilter] = None
    sort_field: Optional[SortField] = None
    page_size: Optional[int] = Field(None, ge=1, le=100)


class ExpenseListPage(CamelModel):
    """Schema for one page of the filtered, sorted expense list."""
    items: List[Expense]
    filtered_count: int
    total_amount: Money
    total_pages: int
    current_page: int
    page_size: int
