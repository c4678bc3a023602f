"""Store adapter issuing hand-written SQL through SQLAlchemy ``text()``."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, Numeric, String, Text, bindparam, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from components.category import schemas as category_schemas
from components.core.database import new_id, utcnow
from components.core.errors import ConflictError, NotFoundError, ValidationError, storage_errors
from components.core.schemas import to_money
from components.expense import schemas as expense_schemas
from components.store.base import CATEGORY_IN_USE, ExpenseStore, day_start, next_day_start

logger = logging.getLogger(__name__)

CATEGORY_COLUMNS = dict(id=String, name=String, created_at=DateTime, updated_at=DateTime)
EXPENSE_COLUMNS = dict(
    id=String,
    amount=Numeric(12, 2),
    description=Text,
    date=DateTime,
    category_id=String,
    category_name=String,
    created_at=DateTime,
    updated_at=DateTime,
)

SELECT_CATEGORIES = "SELECT id, name, created_at, updated_at FROM categories"
SELECT_EXPENSES = """
    SELECT e.id, e.amount, e.description, e.date, e.category_id,
           c.name AS category_name, e.created_at, e.updated_at
    FROM expenses e
    JOIN categories c ON c.id = e.category_id
"""
INSERT_EXPENSE = """
    INSERT INTO expenses (id, amount, description, date, category_id, created_at, updated_at)
    VALUES (:id, :amount, :description, :date, :category_id, :created_at, :updated_at)
"""
UPDATE_EXPENSE = """
    UPDATE expenses
    SET amount = :amount, description = :description, date = :date,
        category_id = :category_id, updated_at = :updated_at
    WHERE id = :id
"""

TIMESTAMP_PARAMS = ("date", "start", "end", "created_at", "updated_at")


def _typed(sql: str, *param_names: str):
    """Attach column types to bound parameters so values are adapted per dialect."""
    params = [bindparam(name, type_=DateTime) for name in param_names if name in TIMESTAMP_PARAMS]
    if "amount" in param_names:
        params.append(bindparam("amount", type_=Numeric(12, 2)))
    return text(sql).bindparams(*params)


def _category(row) -> category_schemas.Category:
    return category_schemas.Category(
        id=row.id, name=row.name, created_at=row.created_at, updated_at=row.updated_at
    )


def _expense(row) -> expense_schemas.Expense:
    return expense_schemas.Expense(
        id=row.id,
        amount=to_money(row.amount),
        description=row.description,
        date=row.date,
        category_id=row.category_id,
        category=category_schemas.CategoryRef(id=row.category_id, name=row.category_name),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlStore(ExpenseStore):
    """ExpenseStore issuing plain SQL statements on an AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_categories(self) -> List[category_schemas.Category]:
        stmt = text(f"{SELECT_CATEGORIES} ORDER BY name").columns(**CATEGORY_COLUMNS)
        with storage_errors("fetch categories"):
            result = await self.session.execute(stmt)
        return [_category(row) for row in result]

    async def get_category(self, category_id: str) -> Optional[category_schemas.Category]:
        stmt = text(f"{SELECT_CATEGORIES} WHERE id = :id").columns(**CATEGORY_COLUMNS)
        with storage_errors("fetch category"):
            row = (await self.session.execute(stmt, {"id": category_id})).first()
        return _category(row) if row else None

    async def create_category(self, name: str) -> category_schemas.Category:
        now = utcnow()
        params = {"id": new_id(), "name": name, "created_at": now, "updated_at": now}
        stmt = _typed(
            "INSERT INTO categories (id, name, created_at, updated_at) "
            "VALUES (:id, :name, :created_at, :updated_at)",
            *params,
        )
        with storage_errors("create category"):
            await self.session.execute(stmt, params)
            await self.session.commit()
        logger.info("Created category %s (%s)", params["id"], name)
        return category_schemas.Category(**params)

    async def update_category(self, category_id: str, name: str) -> category_schemas.Category:
        params = {"id": category_id, "name": name, "updated_at": utcnow()}
        stmt = _typed(
            "UPDATE categories SET name = :name, updated_at = :updated_at WHERE id = :id",
            *params,
        )
        with storage_errors("update category"):
            result = await self.session.execute(stmt, params)
            if result.rowcount == 0:
                await self.session.rollback()
                raise NotFoundError("Category not found")
            await self.session.commit()
        logger.info("Renamed category %s to %s", category_id, name)
        return await self.get_category(category_id)

    async def delete_category(self, category_id: str) -> None:
        stmt = text("DELETE FROM categories WHERE id = :id")
        with storage_errors("delete category"):
            try:
                result = await self.session.execute(stmt, {"id": category_id})
            except IntegrityError as e:
                await self.session.rollback()
                raise ConflictError(CATEGORY_IN_USE) from e
            if result.rowcount == 0:
                await self.session.rollback()
                raise NotFoundError("Category not found")
            await self.session.commit()
        logger.info("Deleted category %s", category_id)

    async def list_expenses(
        self, expense_filter: Optional[expense_schemas.ExpenseFilter] = None
    ) -> List[expense_schemas.Expense]:
        expense_filter = expense_filter or expense_schemas.ExpenseFilter()
        conditions: List[str] = []
        params: Dict[str, Any] = {}

        if expense_filter.category_id:
            conditions.append("e.category_id = :category_id")
            params["category_id"] = expense_filter.category_id
        if expense_filter.start_date:
            conditions.append("e.date >= :start")
            params["start"] = day_start(expense_filter.start_date)
        if expense_filter.end_date:
            conditions.append("e.date < :end")
            params["end"] = next_day_start(expense_filter.end_date)

        sql = SELECT_EXPENSES
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " ORDER BY e.date DESC"
        if expense_filter.limit:
            sql += " LIMIT :limit"
            params["limit"] = expense_filter.limit

        stmt = _typed(sql, *params).columns(**EXPENSE_COLUMNS)
        with storage_errors("fetch expenses"):
            result = await self.session.execute(stmt, params)
        return [_expense(row) for row in result]

    async def get_expense(self, expense_id: str) -> Optional[expense_schemas.Expense]:
        stmt = text(f"{SELECT_EXPENSES} WHERE e.id = :id").columns(**EXPENSE_COLUMNS)
        with storage_errors("fetch expense"):
            row = (await self.session.execute(stmt, {"id": expense_id})).first()
        return _expense(row) if row else None

    async def create_expense(self, fields: expense_schemas.ExpenseCreate) -> expense_schemas.Expense:
        now = utcnow()
        params = {
            "id": new_id(),
            "amount": fields.amount,
            "description": fields.description,
            "date": fields.date,
            "category_id": fields.category_id,
            "created_at": now,
            "updated_at": now,
        }
        with storage_errors("create expense"):
            await self._require_category(fields.category_id)
            try:
                await self.session.execute(_typed(INSERT_EXPENSE, *params), params)
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                raise ValidationError("Category not found") from e
        logger.info("Created expense %s for %s", params["id"], fields.amount)
        return await self.get_expense(params["id"])

    async def update_expense(
        self, expense_id: str, fields: expense_schemas.ExpenseUpdate
    ) -> expense_schemas.Expense:
        params = {
            "id": expense_id,
            "amount": fields.amount,
            "description": fields.description,
            "date": fields.date,
            "category_id": fields.category_id,
            "updated_at": utcnow(),
        }
        with storage_errors("update expense"):
            if await self.get_expense(expense_id) is None:
                raise NotFoundError("Expense not found")
            await self._require_category(fields.category_id)
            try:
                await self.session.execute(_typed(UPDATE_EXPENSE, *params), params)
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                raise ValidationError("Category not found") from e
        logger.info("Updated expense %s", expense_id)
        return await self.get_expense(expense_id)

    async def delete_expense(self, expense_id: str) -> None:
        with storage_errors("delete expense"):
            result = await self.session.execute(
                text("DELETE FROM expenses WHERE id = :id"), {"id": expense_id}
            )
            if result.rowcount == 0:
                await self.session.rollback()
                raise NotFoundError("Expense not found")
            await self.session.commit()
        logger.info("Deleted expense %s", expense_id)

    async def _require_category(self, category_id: str) -> None:
        result = await self.session.execute(
            text("SELECT 1 FROM categories WHERE id = :id"), {"id": category_id}
        )
        if result.first() is None:
            raise ValidationError("Category not found")
