"""Search, date filter, sort and pagination over an in-memory expense list.

The order of the steps matters: date range, search, sort, then paginate.
"""

import math
from datetime import date
from typing import List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from components.expense.schemas import Expense
from components.listing.schemas import ExpenseListPage, ListState, QuickFilter, SortDirection, SortField
from components.summary.aggregator import in_range, total_amount

DateRange = Tuple[Optional[date], Optional[date]]

SORT_KEYS = {
    "date": lambda expense: expense.date,
    "amount": lambda expense: expense.amount,
    "description": lambda expense: expense.description.casefold(),
}


def quick_filter_range(quick_filter: QuickFilter, today: date) -> DateRange:
    """Date bounds for a named preset relative to ``today``."""
    if quick_filter == "currentMonth":
        return today + relativedelta(day=1), today + relativedelta(day=31)
    if quick_filter == "lastMonth":
        last_month = today - relativedelta(months=1)
        return last_month + relativedelta(day=1), last_month + relativedelta(day=31)
    if quick_filter == "last3Months":
        return today + relativedelta(months=-2, day=1), today + relativedelta(day=31)
    return None, None


def filter_by_date(
    expenses: Sequence[Expense], start_date: Optional[date], end_date: Optional[date]
) -> List[Expense]:
    if start_date is None and end_date is None:
        return list(expenses)
    return [expense for expense in expenses if in_range(expense.date, start_date, end_date)]


def filter_by_search(expenses: Sequence[Expense], search_term: str) -> List[Expense]:
    """Case-insensitive substring match on description or category name."""
    if not search_term:
        return list(expenses)
    term = search_term.casefold()
    return [
        expense for expense in expenses
        if term in expense.description.casefold() or term in expense.category.name.casefold()
    ]


def sort_expenses(
    expenses: Sequence[Expense], sort_field: SortField, sort_direction: SortDirection
) -> List[Expense]:
    # reverse=True keeps equal keys in their original order as well
    return sorted(expenses, key=SORT_KEYS[sort_field], reverse=sort_direction == "desc")


def paginate(items: Sequence[Expense], page: int, page_size: int) -> Tuple[List[Expense], int]:
    """Slice one page; pages past the end come back empty."""
    total_pages = math.ceil(len(items) / page_size)
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), total_pages


def run_pipeline(expenses: Sequence[Expense], state: ListState) -> ExpenseListPage:
    """Apply ``state`` to ``expenses`` and return the requested page."""
    result = filter_by_date(expenses, state.start_date, state.end_date)
    result = filter_by_search(result, state.search_term)
    result = sort_expenses(result, state.sort_field, state.sort_direction)
    items, total_pages = paginate(result, state.page, state.page_size)

    return ExpenseListPage(
        items=items,
        filtered_count=len(result),
        total_amount=total_amount(result),
        total_pages=total_pages,
        current_page=state.page,
        page_size=state.page_size,
    )
