from datetime import date, datetime
from decimal import Decimal

from components.summary import aggregator
from tests.helpers import build_category, build_expense

FOOD = build_category("cat-food", "Food")
TRANSPORT = build_category("cat-transport", "Transport")
BILLS = build_category("cat-bills", "Bills")
CATEGORIES = [BILLS, FOOD, TRANSPORT]

NOW = datetime(2024, 3, 1, 12, 0)


def sample_expenses():
    return [
        build_expense("e1", "100", datetime(2024, 1, 15), FOOD),
        build_expense("e2", "50", datetime(2024, 2, 10), FOOD),
        build_expense("e3", "30", datetime(2024, 2, 20), TRANSPORT),
    ]


class TestSummarize:
    """Tests for summarize()."""

    def test_three_expense_scenario(self):
        """Test totals by category and month for a small data set."""
        summary = aggregator.summarize(sample_expenses(), CATEGORIES, now=NOW)

        assert summary.total == Decimal("180")
        assert [(c.name, c.total) for c in summary.by_category] == [
            ("Food", Decimal("150")),
            ("Transport", Decimal("30")),
        ]
        assert [(m.month, m.total) for m in summary.by_month] == [
            ("2024-01", Decimal("100")),
            ("2024-02", Decimal("80")),
        ]

    def test_empty_expense_set(self):
        """Test that no expenses give zero totals and empty lists."""
        summary = aggregator.summarize([], CATEGORIES, now=NOW)

        assert summary.total == 0
        assert summary.by_category == []
        assert summary.by_month == []

    def test_start_after_end_is_empty(self):
        """Test that an inverted range yields an empty result without error."""
        summary = aggregator.summarize(
            sample_expenses(), CATEGORIES,
            start_date=date(2024, 2, 28), end_date=date(2024, 1, 1), now=NOW,
        )

        assert summary.total == 0
        assert summary.by_category == []
        assert summary.by_month == []

    def test_categories_without_spending_are_dropped(self):
        """Test that Bills, with no expenses, is not listed."""
        summary = aggregator.summarize(sample_expenses(), CATEGORIES, now=NOW)

        assert "Bills" not in [c.name for c in summary.by_category]

    def test_unknown_category_only_counts_towards_total(self):
        """Test that an orphaned expense is silently left out of byCategory."""
        orphan = build_category("cat-gone", "Gone")
        expenses = sample_expenses() + [build_expense("e4", "20", datetime(2024, 2, 21), orphan)]

        summary = aggregator.summarize(expenses, CATEGORIES, now=NOW)

        assert summary.total == Decimal("200")
        assert sum(c.total for c in summary.by_category) == Decimal("180")

    def test_by_category_sorted_by_total_descending(self):
        """Test that the largest category comes first."""
        expenses = [
            build_expense("e1", "5", datetime(2024, 2, 1), BILLS),
            build_expense("e2", "70", datetime(2024, 2, 2), TRANSPORT),
            build_expense("e3", "20", datetime(2024, 2, 3), FOOD),
        ]

        summary = aggregator.summarize(expenses, CATEGORIES, now=NOW)

        assert [c.name for c in summary.by_category] == ["Transport", "Food", "Bills"]

    def test_by_month_defaults_to_trailing_six_months(self):
        """Test that old months are only left out of the monthly breakdown."""
        expenses = sample_expenses() + [build_expense("old", "40", datetime(2023, 8, 31), FOOD)]

        summary = aggregator.summarize(expenses, CATEGORIES, now=NOW)

        assert summary.total == Decimal("220")
        assert [m.month for m in summary.by_month] == ["2024-01", "2024-02"]

    def test_by_month_covers_explicit_range(self):
        """Test that a start date disables the trailing window."""
        expenses = sample_expenses() + [build_expense("old", "40", datetime(2023, 8, 31), FOOD)]

        summary = aggregator.summarize(expenses, CATEGORIES, start_date=date(2023, 1, 1), now=NOW)

        assert [m.month for m in summary.by_month] == ["2023-08", "2024-01", "2024-02"]
        assert sum(m.total for m in summary.by_month) == summary.total

    def test_end_date_includes_whole_day(self):
        """Test that an expense late on the end date is included."""
        expenses = [build_expense("late", "12.50", datetime(2024, 2, 10, 23, 30), FOOD)]

        summary = aggregator.summarize(expenses, CATEGORIES, end_date=date(2024, 2, 10), now=NOW)

        assert summary.total == Decimal("12.50")

    def test_filter_commutes_with_aggregation(self):
        """Test that pre-filtering gives the same total as filtering inside."""
        start, end = date(2024, 2, 1), date(2024, 2, 29)
        prefiltered = [e for e in sample_expenses() if aggregator.in_range(e.date, start, end)]

        inside = aggregator.summarize(sample_expenses(), CATEGORIES, start_date=start, end_date=end, now=NOW)
        outside = aggregator.summarize(prefiltered, CATEGORIES, start_date=start, end_date=end, now=NOW)

        assert inside.total == outside.total == Decimal("80")

    def test_decimal_sum_has_no_drift(self):
        """Test that many small amounts add up exactly."""
        expenses = [
            build_expense(f"e{i}", "0.10", datetime(2024, 2, 1), FOOD)
            for i in range(30)
        ]

        summary = aggregator.summarize(expenses, CATEGORIES, now=NOW)

        assert summary.total == Decimal("3.00")

    def test_serializes_camel_case_numbers(self):
        """Test the JSON shape of a summary."""
        summary = aggregator.summarize(sample_expenses(), CATEGORIES, now=NOW)

        data = summary.model_dump(mode="json", by_alias=True)

        assert data["total"] == 180.0
        assert data["byCategory"][0] == {"id": "cat-food", "name": "Food", "total": 150.0}
        assert data["byMonth"][0] == {"month": "2024-01", "total": 100.0}


class TestPercentChange:
    """Tests for percent_change()."""

    def test_increase(self):
        assert aggregator.percent_change(150, 100) == 50.0

    def test_decrease_rounded_to_one_place(self):
        assert aggregator.percent_change(100, 150) == -33.3
        assert aggregator.percent_change(1, 3) == -66.7

    def test_previous_zero(self):
        assert aggregator.percent_change(10, 0) == 100.0
        assert aggregator.percent_change(0, 0) == 0.0

    def test_accepts_decimals(self):
        assert aggregator.percent_change(Decimal("110.00"), Decimal("100.00")) == 10.0


class TestDashboard:
    """Tests for dashboard()."""

    def test_current_and_previous_month(self):
        """Test month-over-month comparison from the monthly breakdown."""
        summary = aggregator.summarize(sample_expenses(), CATEGORIES, now=NOW)

        result = aggregator.dashboard(summary, today=date(2024, 2, 15))

        assert result.current_month_total == Decimal("80")
        assert result.previous_month_total == Decimal("100")
        assert result.percent_change == -20.0
        assert result.total == summary.total

    def test_missing_months_count_as_zero(self):
        """Test a month without expenses."""
        summary = aggregator.summarize(sample_expenses(), CATEGORIES, now=NOW)

        result = aggregator.dashboard(summary, today=date(2024, 3, 5))

        assert result.current_month_total == 0
        assert result.previous_month_total == Decimal("80")
        assert result.percent_change == -100.0

    def test_january_compares_with_december(self):
        """Test that the previous month wraps across the year."""
        expenses = [
            build_expense("dec", "40", datetime(2023, 12, 5), FOOD),
            build_expense("jan", "60", datetime(2024, 1, 5), FOOD),
        ]
        summary = aggregator.summarize(expenses, CATEGORIES, now=datetime(2024, 1, 20))

        result = aggregator.dashboard(summary, today=date(2024, 1, 20))

        assert result.previous_month_total == Decimal("40")
        assert result.percent_change == 50.0
