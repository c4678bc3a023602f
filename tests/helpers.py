"""Helper utilities for tests."""

from datetime import datetime
from decimal import Decimal

from components.category.schemas import Category, CategoryRef
from components.expense.schemas import Expense

CREATED = datetime(2024, 1, 1)


def build_category(category_id: str, name: str) -> Category:
    """Build a Category schema without touching the database."""
    return Category(id=category_id, name=name, created_at=CREATED, updated_at=CREATED)


def build_expense(
    expense_id: str,
    amount: str,
    date: datetime,
    category: Category,
    description: str = "Expense",
) -> Expense:
    """Build an Expense schema without touching the database."""
    return Expense(
        id=expense_id,
        amount=Decimal(amount),
        description=description,
        date=date,
        category_id=category.id,
        category=CategoryRef(id=category.id, name=category.name),
        created_at=CREATED,
        updated_at=CREATED,
    )


def create_category(client, name: str) -> dict:
    """Create a category through the API and return its JSON."""
    response = client.post("/categories", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()


def create_expense(client, category_id: str, amount, date: str, description: str = "Expense") -> dict:
    """Create an expense through the API and return its JSON."""
    response = client.post(
        "/expenses",
        json={
            "amount": amount,
            "description": description,
            "date": date,
            "categoryId": category_id,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()
