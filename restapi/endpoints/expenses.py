"""Expense endpoints for the API."""

import io
import uuid
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from components.core.config import Settings
from components.core.database import utcnow
from components.core.errors import NotFoundError
from components.core.init_db import get_app_settings, get_store
from components.core.schemas import DeleteResult, ErrorResponse
from components.expense import schemas
from components.expense.importer import import_expenses_from_csv
from components.store.base import ExpenseStore
from components.summary import aggregator
from components.summary import schemas as summary_schemas

router = APIRouter(
    prefix="/expenses",
    tags=["expenses"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        404: {"model": ErrorResponse, "description": "Not found"},
    },
)


@router.get("", response_model=List[schemas.Expense])
async def read_expenses(
    category_id: Optional[str] = Query(None, alias="categoryId", description="Only expenses in this category"),
    start_date: Optional[date] = Query(None, alias="startDate", description="First day to include"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Last day to include"),
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of expenses to return"),
    store: ExpenseStore = Depends(get_store)
):
    """Get expenses, newest first, with optional filtering."""
    return await store.list_expenses(schemas.ExpenseFilter(
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    ))


@router.post("", response_model=schemas.Expense, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense: schemas.ExpenseCreate,
    store: ExpenseStore = Depends(get_store)
):
    """Record a new expense; the category must exist."""
    return await store.create_expense(expense)


@router.get("/summary", response_model=summary_schemas.ExpenseSummary)
async def get_summary(
    start_date: Optional[date] = Query(None, alias="startDate", description="First day to include"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Last day to include"),
    store: ExpenseStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings)
):
    """
    Get totals for the selected period.

    Returns:
    - Total of all expenses in the period
    - Totals per category, largest first (categories without spending are left out)
    - Totals per month in ascending order; without a start date only the
      trailing months are broken down
    """
    expenses = await store.list_expenses(schemas.ExpenseFilter(start_date=start_date, end_date=end_date))
    categories = await store.list_categories()
    return aggregator.summarize(
        expenses,
        categories,
        start_date=start_date,
        end_date=end_date,
        trailing_months=settings.SUMMARY_TRAILING_MONTHS,
    )


@router.get("/dashboard", response_model=summary_schemas.DashboardSummary)
async def get_dashboard(
    store: ExpenseStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings)
):
    """Get the all-time summary with this month compared to last month."""
    now = utcnow()
    summary = aggregator.summarize(
        await store.list_expenses(),
        await store.list_categories(),
        now=now,
        trailing_months=settings.SUMMARY_TRAILING_MONTHS,
    )
    return aggregator.dashboard(summary, today=now.date())


@router.post("/import", response_model=schemas.ExpenseImportResult)
async def import_expenses(
    file: UploadFile = File(...),
    store: ExpenseStore = Depends(get_store)
):
    """
    Import expenses from a CSV file.

    The CSV file must have the following columns:
    - date: Any common date format (e.g., 2024-01-15)
    - description: Non-empty text
    - amount: Positive number with at most two decimal places
    - category: Category name; missing categories are created

    Nothing is imported when any row is invalid.
    """
    if not (file.filename or "").lower().endswith(".csv"):
        return schemas.ExpenseImportResult(
            success=False,
            message="Invalid file format. Only CSV files (.csv) are supported."
        )

    file_content = await file.read()
    return await import_expenses_from_csv(store, io.BytesIO(file_content))


@router.get("/{expense_id}", response_model=schemas.Expense)
async def read_expense(
    expense_id: uuid.UUID,
    store: ExpenseStore = Depends(get_store)
):
    """Get a specific expense by ID."""
    expense = await store.get_expense(str(expense_id))
    if expense is None:
        raise NotFoundError("Expense not found")
    return expense


@router.put("/{expense_id}", response_model=schemas.Expense)
async def update_expense(
    expense_id: uuid.UUID,
    expense: schemas.ExpenseUpdate,
    store: ExpenseStore = Depends(get_store)
):
    """Update an expense."""
    return await store.update_expense(str(expense_id), expense)


@router.delete("/{expense_id}", response_model=DeleteResult)
async def delete_expense(
    expense_id: uuid.UUID,
    store: ExpenseStore = Depends(get_store)
):
    """Delete an expense."""
    await store.delete_expense(str(expense_id))
    return DeleteResult()
