"""Persisted list state and the transitions a client can apply to it."""

import json
import logging
import re
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError

from components.expense.schemas import Expense
from components.listing.pipeline import quick_filter_range, run_pipeline
from components.listing.schemas import ExpenseListPage, ListState, QuickFilter, SortField

logger = logging.getLogger(__name__)

KEY_PREFIX = "expense-filter-"
CLIENT_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"
# The current page is deliberately left out: it starts at 1 on every load
PERSISTED_FIELDS = (
    "search_term",
    "start_date",
    "end_date",
    "sort_field",
    "sort_direction",
    "quick_filter",
    "page_size",
)


# Stored names that differ from the field's camelCase alias
STORED_NAMES = {"quick_filter": "activeQuickFilter"}
# Size of the unfiltered list at the last render, kept outside ListState
LAST_COUNT_KEY = KEY_PREFIX + "lastCount"


def storage_key(field_name: str) -> str:
    """Storage key for a state field, e.g. ``expense-filter-searchTerm``."""
    name = STORED_NAMES.get(field_name) or ListState.model_fields[field_name].alias
    return KEY_PREFIX + name


class StateStorage(ABC):
    """Durable string key-value store, partitioned by client id."""

    @abstractmethod
    def get(self, client: str, key: str) -> Optional[str]:
        """Stored value or None."""

    @abstractmethod
    def set(self, client: str, key: str, value: str) -> None:
        """Store a value."""


class MemoryStateStorage(StateStorage):
    """Process-local storage; state lasts as long as the process."""

    def __init__(self) -> None:
        self._values: Dict[str, Dict[str, str]] = {}

    def get(self, client: str, key: str) -> Optional[str]:
        return self._values.get(client, {}).get(key)

    def set(self, client: str, key: str, value: str) -> None:
        self._values.setdefault(client, {})[key] = value


class FileStateStorage(StateStorage):
    """One JSON document per client inside ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, client: str) -> Path:
        if not re.match(CLIENT_ID_PATTERN, client):
            raise ValueError(f"Invalid client id: {client!r}")
        return self.directory / f"{client}.json"

    def _read(self, client: str) -> Dict[str, str]:
        path = self._path(client)
        if not path.exists():
            return {}
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def get(self, client: str, key: str) -> Optional[str]:
        return self._read(client).get(key)

    def set(self, client: str, key: str, value: str) -> None:
        values = self._read(client)
        values[key] = value
        path = self._path(client)
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(values, f)
        tmp_path.replace(path)


def create_state_storage(directory: Optional[str]) -> StateStorage:
    """File storage when a directory is configured, memory otherwise."""
    if directory:
        return FileStateStorage(Path(directory))
    return MemoryStateStorage()


class ExpenseListController:
    """
    Holds one client's list state and keeps it in ``storage``.

    Loading never fails: unreadable or invalid values are logged and replaced
    by their defaults. Save failures are logged and the in-memory state is
    kept.
    """

    def __init__(
        self,
        storage: StateStorage,
        client: str = "default",
        page_size: int = 10,
        today: Optional[date] = None,
    ):
        self.storage = storage
        self.client = client
        self._today = today
        self.state = self._load(page_size)
        self._last_count = self._load_last_count()

    @property
    def today(self) -> date:
        return self._today or date.today()

    def _load(self, page_size: int) -> ListState:
        values: Dict[str, Any] = {"page_size": page_size}
        for field_name in PERSISTED_FIELDS:
            key = storage_key(field_name)
            try:
                raw = self.storage.get(self.client, key)
                if raw is None:
                    continue
                candidate = {**values, field_name: json.loads(raw)}
                ListState.model_validate(candidate)
            except (OSError, ValueError, ValidationError) as e:
                logger.warning("Ignoring stored %s for client %s: %s", key, self.client, e)
                continue
            values = candidate
        return ListState.model_validate(values)

    def _load_last_count(self) -> Optional[int]:
        try:
            raw = self.storage.get(self.client, LAST_COUNT_KEY)
            count = json.loads(raw) if raw is not None else None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring stored %s for client %s: %s", LAST_COUNT_KEY, self.client, e)
            return None
        return count if isinstance(count, int) and count >= 0 else None

    def _save(self, *field_names: str) -> None:
        dumped = self.state.model_dump(mode="json")
        for field_name in field_names:
            if field_name not in PERSISTED_FIELDS:
                continue
            key = storage_key(field_name)
            try:
                self.storage.set(self.client, key, json.dumps(dumped[field_name]))
            except (OSError, ValueError) as e:
                logger.warning("Could not store %s for client %s: %s", key, self.client, e)

    def _update(self, **changes: Any) -> ListState:
        self.state = ListState.model_validate({**self.state.model_dump(), **changes})
        self._save(*changes)
        return self.state

    def set_search(self, search_term: str) -> ListState:
        return self._update(search_term=search_term)

    def set_start_date(self, start_date: Optional[date]) -> ListState:
        """Manual edit; deselects any quick filter."""
        return self._update(start_date=start_date, quick_filter="all")

    def set_end_date(self, end_date: Optional[date]) -> ListState:
        """Manual edit; deselects any quick filter."""
        return self._update(end_date=end_date, quick_filter="all")

    def apply_quick_filter(self, quick_filter: QuickFilter) -> ListState:
        start_date, end_date = quick_filter_range(quick_filter, self.today)
        return self._update(start_date=start_date, end_date=end_date, quick_filter=quick_filter)

    def toggle_sort(self, sort_field: SortField) -> ListState:
        if sort_field == self.state.sort_field:
            direction = "asc" if self.state.sort_direction == "desc" else "desc"
            return self._update(sort_direction=direction)
        return self._update(sort_field=sort_field, sort_direction="desc")

    def set_page(self, page: int) -> ListState:
        return self._update(page=page)

    def set_page_size(self, page_size: int) -> ListState:
        return self._update(page_size=page_size, page=1)

    def clear_filters(self) -> ListState:
        return self._update(search_term="", start_date=None, end_date=None, quick_filter="all")

    def sync(self, expenses: Sequence[Expense]) -> None:
        """Go back to the first page whenever the number of expenses changes."""
        count = len(expenses)
        if self._last_count is not None and count != self._last_count:
            self._update(page=1)
        if count != self._last_count:
            try:
                self.storage.set(self.client, LAST_COUNT_KEY, json.dumps(count))
            except (OSError, ValueError) as e:
                logger.warning("Could not store %s for client %s: %s", LAST_COUNT_KEY, self.client, e)
        self._last_count = count

    def render(self, expenses: Sequence[Expense]) -> ExpenseListPage:
        self.sync(expenses)
        return run_pipeline(expenses, self.state)
