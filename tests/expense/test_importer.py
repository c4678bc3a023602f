from datetime import datetime
from decimal import Decimal

import pandas as pd

from components.expense.importer import parse_rows


def frame(*rows):
    return pd.DataFrame(list(rows), columns=["date", "description", "amount", "category"], dtype=str)


class TestParseRows:
    """Tests for CSV row validation."""

    def test_valid_rows(self):
        parsed, errors = parse_rows(frame(
            ["2024-01-15", " Lunch ", "12.50", " Food "],
            ["01/16/2024", "Bus", "2.8", "Transport"],
        ))

        assert errors == []
        assert [name for name, _ in parsed] == ["Food", "Transport"]
        lunch = parsed[0][1]
        assert lunch.amount == Decimal("12.50")
        assert lunch.description == "Lunch"
        assert lunch.date == datetime(2024, 1, 15)
        assert parsed[1][1].date == datetime(2024, 1, 16)

    def test_row_numbers_count_header(self):
        parsed, errors = parse_rows(frame(
            ["2024-01-15", "Lunch", "12.50", "Food"],
            ["", "Bus", "2.80", "Transport"],
            ["2024-01-17", "Dinner", "abc", "Food"],
            ["2024-01-18", "Snack", "1.00", "  "],
        ))

        assert len(parsed) == 1
        assert errors == [
            {"row": 3, "message": "Date cannot be empty"},
            {"row": 4, "message": errors[1]["message"]},
            {"row": 5, "message": "Category cannot be empty"},
        ]
        assert errors[1]["message"].startswith("Invalid amount")

    def test_rejects_three_decimal_places(self):
        _, errors = parse_rows(frame(["2024-01-15", "Lunch", "1.005", "Food"]))

        assert [error["row"] for error in errors] == [2]
