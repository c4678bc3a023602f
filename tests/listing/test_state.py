import json
from datetime import date, datetime

import pytest

from components.listing.state import (
    ExpenseListController,
    FileStateStorage,
    MemoryStateStorage,
    create_state_storage,
    storage_key,
)
from tests.helpers import build_category, build_expense

TODAY = date(2024, 3, 15)
FOOD = build_category("cat-food", "Food")


def make_controller(storage, client="default"):
    return ExpenseListController(storage, client, page_size=10, today=TODAY)


class TestTransitions:
    """Tests for ExpenseListController state changes."""

    def test_defaults(self, state_storage):
        state = make_controller(state_storage).state

        assert state.search_term == ""
        assert state.sort_field == "date"
        assert state.sort_direction == "desc"
        assert state.quick_filter == "all"
        assert state.page == 1
        assert state.page_size == 10

    def test_toggle_same_field_flips_direction(self, state_storage):
        controller = make_controller(state_storage)

        assert controller.toggle_sort("date").sort_direction == "asc"
        assert controller.toggle_sort("date").sort_direction == "desc"

    def test_toggle_new_field_sorts_descending(self, state_storage):
        controller = make_controller(state_storage)
        controller.toggle_sort("date")

        state = controller.toggle_sort("amount")

        assert state.sort_field == "amount"
        assert state.sort_direction == "desc"

    def test_quick_filter_overwrites_dates(self, state_storage):
        controller = make_controller(state_storage)
        controller.set_start_date(date(2020, 1, 1))

        state = controller.apply_quick_filter("lastMonth")

        assert state.quick_filter == "lastMonth"
        assert state.start_date == date(2024, 2, 1)
        assert state.end_date == date(2024, 2, 29)

    def test_quick_filter_all_clears_dates(self, state_storage):
        controller = make_controller(state_storage)
        controller.apply_quick_filter("currentMonth")

        state = controller.apply_quick_filter("all")

        assert state.start_date is None
        assert state.end_date is None

    def test_manual_date_resets_quick_filter(self, state_storage):
        controller = make_controller(state_storage)
        controller.apply_quick_filter("last3Months")

        state = controller.set_end_date(date(2024, 3, 1))

        assert state.quick_filter == "all"
        assert state.start_date == date(2024, 1, 1)
        assert state.end_date == date(2024, 3, 1)

    def test_clear_filters_keeps_sorting(self, state_storage):
        controller = make_controller(state_storage)
        controller.set_search("rent")
        controller.apply_quick_filter("currentMonth")
        controller.toggle_sort("amount")

        state = controller.clear_filters()

        assert state.search_term == ""
        assert state.start_date is None
        assert state.quick_filter == "all"
        assert state.sort_field == "amount"

    def test_sync_resets_page_when_count_changes(self, state_storage):
        controller = make_controller(state_storage)
        expenses = [build_expense(f"e{i}", "1.00", datetime(2024, 3, 1), FOOD) for i in range(25)]
        controller.render(expenses)
        controller.set_page(3)

        assert controller.render(expenses).current_page == 3
        assert controller.render(expenses[:-1]).current_page == 1

    def test_count_change_seen_by_a_new_controller(self, state_storage):
        """Test that the last rendered count outlives the controller."""
        expenses = [build_expense(f"e{i}", "1.00", datetime(2024, 3, 1), FOOD) for i in range(25)]
        make_controller(state_storage).render(expenses)

        controller = make_controller(state_storage)
        controller.set_page(3)

        assert controller.render(expenses[:-1]).current_page == 1
        assert state_storage.get("default", "expense-filter-lastCount") == "24"

    def test_first_render_keeps_requested_page(self, state_storage):
        expenses = [build_expense(f"e{i}", "1.00", datetime(2024, 3, 1), FOOD) for i in range(25)]
        controller = make_controller(state_storage)
        controller.set_page(2)

        assert controller.render(expenses).current_page == 2

    def test_corrupt_last_count_is_ignored(self, state_storage):
        state_storage.set("default", "expense-filter-lastCount", "{oops")
        expenses = [build_expense(f"e{i}", "1.00", datetime(2024, 3, 1), FOOD) for i in range(5)]
        controller = make_controller(state_storage)
        controller.set_page(2)

        assert controller.render(expenses).current_page == 2


class TestPersistence:
    """Tests for state persistence across controllers."""

    def test_state_restored_on_load(self, state_storage):
        controller = make_controller(state_storage)
        controller.set_search("coffee")
        controller.apply_quick_filter("currentMonth")
        controller.toggle_sort("amount")
        controller.set_page(4)

        restored = make_controller(state_storage).state

        assert restored.search_term == "coffee"
        assert restored.quick_filter == "currentMonth"
        assert restored.start_date == date(2024, 3, 1)
        assert restored.sort_field == "amount"
        assert restored.page == 1

    def test_values_stored_per_field(self, state_storage):
        make_controller(state_storage).set_search("coffee")

        assert state_storage.get("default", "expense-filter-searchTerm") == json.dumps("coffee")
        assert storage_key("quick_filter") == "expense-filter-activeQuickFilter"
        assert storage_key("page_size") == "expense-filter-pageSize"

    def test_clients_are_isolated(self, state_storage):
        make_controller(state_storage, "alice").set_search("coffee")

        assert make_controller(state_storage, "bob").state.search_term == ""

    def test_corrupt_value_falls_back_to_default(self, state_storage):
        state_storage.set("default", "expense-filter-sortField", "{not json")
        state_storage.set("default", "expense-filter-sortDirection", json.dumps("sideways"))
        state_storage.set("default", "expense-filter-searchTerm", json.dumps("kept"))

        state = make_controller(state_storage).state

        assert state.sort_field == "date"
        assert state.sort_direction == "desc"
        assert state.search_term == "kept"

    def test_file_storage_survives_new_instance(self, tmp_path):
        controller = make_controller(FileStateStorage(tmp_path))
        controller.set_start_date(date(2024, 1, 1))

        restored = make_controller(FileStateStorage(tmp_path)).state

        assert restored.start_date == date(2024, 1, 1)
        assert (tmp_path / "default.json").exists()

    def test_file_storage_rejects_bad_client_id(self, tmp_path):
        storage = FileStateStorage(tmp_path)

        with pytest.raises(ValueError):
            storage.get("../etc", "expense-filter-searchTerm")

    def test_create_state_storage(self, tmp_path):
        assert isinstance(create_state_storage(None), MemoryStateStorage)
        assert isinstance(create_state_storage(str(tmp_path / "state")), FileStateStorage)
