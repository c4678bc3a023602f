"""Pydantic schemas for expense summaries."""

from typing import List

from components.core.schemas import CamelModel, Money


class CategorySummary(CamelModel):
    """Schema for the total spent in one category."""
    id: str
    name: str
    total: Money


class MonthSummary(CamelModel):
    """Schema for the total spent in one calendar month (YYYY-MM)."""
    month: str
    total: Money


class ExpenseSummary(CamelModel):
    """Schema for summary report."""
    total: Money
    by_category: List[CategorySummary]
    by_month: List[MonthSummary]


class DashboardSummary(ExpenseSummary):
    """Schema for the dashboard: summary plus month-over-month change."""
    current_month_total: Money
    previous_month_total: Money
    percent_change: float
