"""Bulk import of expenses from a CSV upload."""

import logging
from typing import BinaryIO, Dict, List, Tuple

import pandas as pd
from pydantic import ValidationError as SchemaValidationError

from components.category.schemas import Category
from components.expense import schemas
from components.store.base import ExpenseStore

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date", "description", "amount", "category")


def _describe(error: SchemaValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "row"
    return f"Invalid {field}: {first['msg']}"


def parse_rows(frame: pd.DataFrame) -> Tuple[List[Tuple[str, schemas.ExpenseCreate]], List[Dict]]:
    """
    Validate every row of the upload.

    Returns the parsed rows paired with their category names, and the list of
    row errors. Row numbers count the header line as row 1.
    """
    parsed = []
    errors = []

    for row_num, row in enumerate(frame.to_dict("records"), start=2):
        category_name = row["category"].strip()
        if not category_name:
            errors.append({"row": row_num, "message": "Category cannot be empty"})
            continue

        try:
            timestamp = pd.to_datetime(row["date"].strip())
        except (ValueError, OverflowError):
            errors.append({"row": row_num, "message": f"Invalid date: {row['date']}"})
            continue
        if pd.isna(timestamp):
            errors.append({"row": row_num, "message": "Date cannot be empty"})
            continue

        try:
            # The category id is resolved once the whole file is valid
            expense = schemas.ExpenseCreate(
                amount=row["amount"].strip(),
                description=row["description"],
                date=timestamp.to_pydatetime(),
                category_id=category_name,
            )
        except SchemaValidationError as e:
            errors.append({"row": row_num, "message": _describe(e)})
            continue

        parsed.append((category_name, expense))

    return parsed, errors


async def import_expenses_from_csv(store: ExpenseStore, file_content: BinaryIO) -> schemas.ExpenseImportResult:
    """
    Import expenses from a CSV file with ``date``, ``description``, ``amount``
    and ``category`` columns.

    Nothing is written unless every row is valid. Categories are matched by
    name, case-insensitively, and created when missing.
    """
    try:
        frame = pd.read_csv(file_content, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        return schemas.ExpenseImportResult(success=False, message=f"Error processing file: {e}")

    frame.columns = [str(column).strip().lower() for column in frame.columns]
    if any(column not in frame.columns for column in REQUIRED_COLUMNS):
        return schemas.ExpenseImportResult(
            success=False,
            message="CSV file must contain 'date', 'description', 'amount' and 'category' columns",
        )

    parsed, errors = parse_rows(frame)
    if errors:
        return schemas.ExpenseImportResult(
            success=False,
            message="Validation errors occurred",
            errors=[schemas.ExpenseImportError(**error) for error in errors],
        )

    categories: Dict[str, Category] = {
        category.name.casefold(): category for category in await store.list_categories()
    }
    for category_name, expense in parsed:
        category = categories.get(category_name.casefold())
        if category is None:
            category = await store.create_category(category_name)
            categories[category_name.casefold()] = category
        await store.create_expense(expense.model_copy(update={"category_id": category.id}))

    logger.info("Imported %d expenses from CSV", len(parsed))
    return schemas.ExpenseImportResult(
        success=True,
        message="Expenses imported successfully",
        imported=len(parsed),
    )
