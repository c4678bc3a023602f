"""Script to seed default categories and sample expenses into the database."""

import asyncio
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import text

from components.core.config import get_settings
from components.core.database import DatabaseManager
from components.expense.schemas import ExpenseCreate
from components.store.factory import create_store

DEFAULT_CATEGORIES = ["Bills", "Clothing", "Entertainment", "Food", "Transport"]

SAMPLE_EXPENSES = [
    ("Food", "Groceries", Decimal("54.20")),
    ("Transport", "Monthly bus pass", Decimal("45.00")),
    ("Bills", "Electricity", Decimal("78.35")),
    ("Food", "Lunch with team", Decimal("23.50")),
    ("Entertainment", "Cinema tickets", Decimal("18.00")),
    ("Clothing", "Running shoes", Decimal("89.99")),
]


async def seed_data():
    """Seed default categories and a few months of sample expenses."""
    settings = get_settings()
    db_manager = DatabaseManager(settings)
    await db_manager.create_all()

    async with db_manager.get_db() as db:
        # Clear existing data
        await db.execute(text("DELETE FROM expenses"))
        await db.execute(text("DELETE FROM categories"))
        await db.commit()

        store = create_store(settings.DB_BACKEND, db)
        categories = {}
        for name in DEFAULT_CATEGORIES:
            categories[name] = await store.create_category(name)
        print(f"Created {len(categories)} categories")

        today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
        count = 0
        for month_offset in range(4):
            for i, (category_name, description, amount) in enumerate(SAMPLE_EXPENSES):
                await store.create_expense(ExpenseCreate(
                    amount=amount,
                    description=description,
                    date=today - timedelta(days=month_offset * 30 + i * 3),
                    category_id=categories[category_name].id,
                ))
                count += 1
        print(f"Created {count} expenses")

    await db_manager.dispose()


if __name__ == "__main__":
    asyncio.run(seed_data())
