"""Storage interface shared by every backend adapter."""

from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from components.category import schemas as category_schemas
from components.expense import schemas as expense_schemas

CATEGORY_IN_USE = "Cannot delete category with expenses"


def day_start(value: date) -> datetime:
    return datetime.combine(value, time.min)


def next_day_start(value: date) -> datetime:
    """Exclusive upper bound that keeps the whole ``value`` day."""
    return datetime.combine(value + timedelta(days=1), time.min)


class ExpenseStore(ABC):
    """Persistence operations for categories and expenses.

    Every adapter raises the errors from ``components.core.errors``:
    ``NotFoundError`` for missing rows, ``ValidationError`` when an expense
    points at an unknown category and ``ConflictError`` when a category is
    still referenced.
    """

    @abstractmethod
    async def list_categories(self) -> List[category_schemas.Category]:
        """All categories ordered by name."""

    @abstractmethod
    async def get_category(self, category_id: str) -> Optional[category_schemas.Category]:
        """A single category, or None."""

    @abstractmethod
    async def create_category(self, name: str) -> category_schemas.Category:
        """Insert a new category."""

    @abstractmethod
    async def update_category(self, category_id: str, name: str) -> category_schemas.Category:
        """Rename a category."""

    @abstractmethod
    async def delete_category(self, category_id: str) -> None:
        """Delete a category no expense references."""

    @abstractmethod
    async def list_expenses(
        self, expense_filter: Optional[expense_schemas.ExpenseFilter] = None
    ) -> List[expense_schemas.Expense]:
        """Expenses matching the filter, newest first."""

    @abstractmethod
    async def get_expense(self, expense_id: str) -> Optional[expense_schemas.Expense]:
        """A single expense, or None."""

    @abstractmethod
    async def create_expense(self, fields: expense_schemas.ExpenseCreate) -> expense_schemas.Expense:
        """Insert a new expense."""

    @abstractmethod
    async def update_expense(
        self, expense_id: str, fields: expense_schemas.ExpenseUpdate
    ) -> expense_schemas.Expense:
        """Replace every mutable field of an expense."""

    @abstractmethod
    async def delete_expense(self, expense_id: str) -> None:
        """Delete an expense."""
