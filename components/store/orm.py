"""Store adapter backed by the SQLAlchemy ORM repositories."""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from components.category import schemas as category_schemas
from components.category.repository import CategoryRepository
from components.core.errors import ConflictError, NotFoundError, ValidationError, storage_errors
from components.expense import schemas as expense_schemas
from components.expense.repository import ExpenseRepository
from components.store.base import CATEGORY_IN_USE, ExpenseStore

logger = logging.getLogger(__name__)


class OrmStore(ExpenseStore):
    """ExpenseStore working through mapped models on an AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.categories = CategoryRepository(session)
        self.expenses = ExpenseRepository(session)

    async def list_categories(self) -> List[category_schemas.Category]:
        with storage_errors("fetch categories"):
            rows = await self.categories.get_all()
        return [category_schemas.Category.model_validate(row) for row in rows]

    async def get_category(self, category_id: str) -> Optional[category_schemas.Category]:
        with storage_errors("fetch category"):
            row = await self.categories.get_by_id(category_id)
        return category_schemas.Category.model_validate(row) if row else None

    async def create_category(self, name: str) -> category_schemas.Category:
        with storage_errors("create category"):
            row = await self.categories.create(name)
        logger.info("Created category %s (%s)", row.id, row.name)
        return category_schemas.Category.model_validate(row)

    async def update_category(self, category_id: str, name: str) -> category_schemas.Category:
        with storage_errors("update category"):
            row = await self.categories.update(category_id, name)
        if row is None:
            raise NotFoundError("Category not found")
        logger.info("Renamed category %s to %s", category_id, name)
        return category_schemas.Category.model_validate(row)

    async def delete_category(self, category_id: str) -> None:
        with storage_errors("delete category"):
            try:
                deleted = await self.categories.delete(category_id)
            except IntegrityError as e:
                await self.session.rollback()
                raise ConflictError(CATEGORY_IN_USE) from e
        if not deleted:
            raise NotFoundError("Category not found")
        logger.info("Deleted category %s", category_id)

    async def list_expenses(
        self, expense_filter: Optional[expense_schemas.ExpenseFilter] = None
    ) -> List[expense_schemas.Expense]:
        expense_filter = expense_filter or expense_schemas.ExpenseFilter()
        with storage_errors("fetch expenses"):
            rows = await self.expenses.get_all(
                category_id=expense_filter.category_id,
                start_date=expense_filter.start_date,
                end_date=expense_filter.end_date,
                limit=expense_filter.limit,
            )
        return [expense_schemas.Expense.model_validate(row) for row in rows]

    async def get_expense(self, expense_id: str) -> Optional[expense_schemas.Expense]:
        with storage_errors("fetch expense"):
            row = await self.expenses.get_by_id(expense_id)
        return expense_schemas.Expense.model_validate(row) if row else None

    async def create_expense(self, fields: expense_schemas.ExpenseCreate) -> expense_schemas.Expense:
        with storage_errors("create expense"):
            await self._require_category(fields.category_id)
            try:
                row = await self.expenses.create(fields)
            except IntegrityError as e:
                await self.session.rollback()
                raise ValidationError("Category not found") from e
        logger.info("Created expense %s for %s", row.id, row.amount)
        return expense_schemas.Expense.model_validate(row)

    async def update_expense(
        self, expense_id: str, fields: expense_schemas.ExpenseUpdate
    ) -> expense_schemas.Expense:
        with storage_errors("update expense"):
            if await self.expenses.get_by_id(expense_id) is None:
                raise NotFoundError("Expense not found")
            await self._require_category(fields.category_id)
            try:
                row = await self.expenses.update(expense_id, fields)
            except IntegrityError as e:
                await self.session.rollback()
                raise ValidationError("Category not found") from e
        if row is None:
            raise NotFoundError("Expense not found")
        logger.info("Updated expense %s", expense_id)
        return expense_schemas.Expense.model_validate(row)

    async def delete_expense(self, expense_id: str) -> None:
        with storage_errors("delete expense"):
            deleted = await self.expenses.delete(expense_id)
        if not deleted:
            raise NotFoundError("Expense not found")
        logger.info("Deleted expense %s", expense_id)

    async def _require_category(self, category_id: str) -> None:
        if await self.categories.get_by_id(category_id) is None:
            raise ValidationError("Category not found")
