"""Summary statistics over an already fetched set of expenses.

Everything here is a pure function of its arguments: no I/O, no shared state.
Amounts stay ``Decimal`` end to end so repeated summation never drifts.
"""

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Sequence, Union

from dateutil.relativedelta import relativedelta

from components.category.schemas import Category
from components.core.database import utcnow
from components.expense.schemas import Expense
from components.store.base import day_start, next_day_start
from components.summary import schemas

ZERO = Decimal("0.00")
TRAILING_MONTHS = 6

Number = Union[int, float, Decimal]


def month_key(value: Union[date, datetime]) -> str:
    """Calendar year-month as ``YYYY-MM``."""
    return f"{value.year:04d}-{value.month:02d}"


def in_range(value: datetime, start_date: Optional[date], end_date: Optional[date]) -> bool:
    """Inclusive day range check; either bound may be missing."""
    if start_date is not None and value < day_start(start_date):
        return False
    if end_date is not None and value >= next_day_start(end_date):
        return False
    return True


def total_amount(expenses: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in expenses), ZERO)


def totals_by_category(
    expenses: Iterable[Expense], categories: Sequence[Category]
) -> List[schemas.CategorySummary]:
    """
    Per-category totals, largest first.

    Categories without spending are dropped. Expenses whose category is not in
    ``categories`` only count towards the overall total.
    """
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        totals[expense.category_id] += expense.amount

    summaries = [
        schemas.CategorySummary(id=category.id, name=category.name, total=totals[category.id])
        for category in categories
        if totals.get(category.id, ZERO) > 0
    ]
    # sorted() is stable, so equal totals keep the category order
    return sorted(summaries, key=lambda summary: summary.total, reverse=True)


def totals_by_month(expenses: Iterable[Expense]) -> List[schemas.MonthSummary]:
    """Per-month totals ordered by month key."""
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        totals[month_key(expense.date)] += expense.amount
    return [
        schemas.MonthSummary(month=month, total=totals[month])
        for month in sorted(totals)
    ]


def summarize(
    expenses: Iterable[Expense],
    categories: Sequence[Category],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
    trailing_months: int = TRAILING_MONTHS,
) -> schemas.ExpenseSummary:
    """
    Build the summary report for expenses inside ``[start_date, end_date]``.

    Without a start date the monthly breakdown only covers the trailing
    ``trailing_months`` months before ``now``; the overall and per-category
    totals always cover the whole range.
    """
    included = [expense for expense in expenses if in_range(expense.date, start_date, end_date)]

    monthly = included
    if start_date is None:
        window_start = (now or utcnow()) - relativedelta(months=trailing_months)
        monthly = [expense for expense in included if expense.date >= window_start]

    return schemas.ExpenseSummary(
        total=total_amount(included),
        by_category=totals_by_category(included, categories),
        by_month=totals_by_month(monthly),
    )


def percent_change(current: Number, previous: Number) -> float:
    """Change from ``previous`` to ``current`` in percent, one decimal place."""
    current = Decimal(str(current))
    previous = Decimal(str(previous))
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    change = (current - previous) / previous * 100
    return float(change.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def dashboard(summary: schemas.ExpenseSummary, today: date) -> schemas.DashboardSummary:
    """Add this month's and last month's totals to a summary."""
    months = {entry.month: entry.total for entry in summary.by_month}
    current = months.get(month_key(today), ZERO)
    previous = months.get(month_key(today - relativedelta(months=1)), ZERO)
    return schemas.DashboardSummary(
        total=summary.total,
        by_category=summary.by_category,
        by_month=summary.by_month,
        current_month_total=current,
        previous_month_total=previous,
        percent_change=percent_change(current, previous),
    )
