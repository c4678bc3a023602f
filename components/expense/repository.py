"""Repository for expense operations."""

from datetime import date
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.expense.models import Expense
from components.expense.schemas import ExpenseCreate, ExpenseUpdate
from components.store.base import day_start, next_day_start


class ExpenseRepository:
    """Repository for expense operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_all(
        self,
        category_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[Expense]:
        """Get expenses newest first with optional filtering."""
        query = select(Expense)

        if category_id:
            query = query.where(Expense.category_id == category_id)
        if start_date:
            query = query.where(Expense.date >= day_start(start_date))
        if end_date:
            query = query.where(Expense.date < next_day_start(end_date))

        query = query.order_by(Expense.date.desc())
        if limit:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, expense_id: str) -> Optional[Expense]:
        """Get expense by ID with its category loaded."""
        result = await self.session.execute(
            select(Expense)
            .where(Expense.id == expense_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, expense: ExpenseCreate) -> Expense:
        """Create a new expense."""
        db_expense = Expense(
            amount=expense.amount,
            description=expense.description,
            date=expense.date,
            category_id=expense.category_id,
        )
        self.session.add(db_expense)
        await self.session.commit()
        return await self.get_by_id(db_expense.id)

    async def update(self, expense_id: str, expense: ExpenseUpdate) -> Optional[Expense]:
        """Update expense by ID."""
        db_expense = await self.get_by_id(expense_id)
        if not db_expense:
            return None

        db_expense.amount = expense.amount
        db_expense.description = expense.description
        db_expense.date = expense.date
        db_expense.category_id = expense.category_id

        await self.session.commit()
        return await self.get_by_id(expense_id)

    async def delete(self, expense_id: str) -> bool:
        """Delete expense by ID."""
        db_expense = await self.get_by_id(expense_id)
        if not db_expense:
            return False

        await self.session.delete(db_expense)
        await self.session.commit()
        return True
