"""Endpoints for the filtered, sorted and paginated expense list."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool

from components.core.config import Settings
from components.core.init_db import get_app_settings, get_store
from components.expense.schemas import Expense
from components.listing import schemas
from components.listing.state import CLIENT_ID_PATTERN, ExpenseListController, StateStorage
from components.store.base import ExpenseStore

router = APIRouter(
    prefix="/expense-list",
    tags=["expense list"],
)


def get_state_storage(request: Request) -> StateStorage:
    return request.app.state.list_state_storage


def get_controller(
    client: str = Query("default", pattern=CLIENT_ID_PATTERN, description="Client whose list state is used"),
    storage: StateStorage = Depends(get_state_storage),
    settings: Settings = Depends(get_app_settings)
) -> ExpenseListController:
    """Controller loaded with the client's persisted state."""
    return ExpenseListController(storage, client, page_size=settings.DEFAULT_PAGE_SIZE)


def render_page(
    controller: ExpenseListController,
    expenses: List[Expense],
    page: int,
    page_size: Optional[int],
) -> schemas.ExpenseListPage:
    """Apply the requested paging and render; a changed expense count restarts at page 1."""
    if page_size is not None and page_size != controller.state.page_size:
        controller.set_page_size(page_size)
    controller.set_page(page)
    return controller.render(expenses)


@router.get("", response_model=schemas.ExpenseListPage)
async def read_expense_list(
    page: int = Query(1, ge=1, description="Page to return, starting at 1"),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1, le=100),
    controller: ExpenseListController = Depends(get_controller),
    store: ExpenseStore = Depends(get_store)
):
    """
    Get one page of expenses using the client's saved filters.

    Returns:
    - Expenses of the requested page
    - Number of expenses matching the filters
    - Sum of all matching expenses (not just the page)
    - Number of pages and the current page
    """
    expenses = await store.list_expenses()
    # State storage may write files
    return await run_in_threadpool(render_page, controller, expenses, page, page_size)


@router.get("/state", response_model=schemas.ListState)
def read_list_state(controller: ExpenseListController = Depends(get_controller)):
    """Get the client's saved list state."""
    return controller.state


@router.patch("/state", response_model=schemas.ListState)
def update_list_state(
    update: schemas.ListStateUpdate,
    controller: ExpenseListController = Depends(get_controller)
):
    """
    Change the client's list state.

    Manual dates switch the quick filter back to "all"; a quick filter
    replaces both dates; a sort field toggles like a column header.
    """
    changed = update.model_fields_set
    if "search_term" in changed:
        controller.set_search(update.search_term or "")
    if "start_date" in changed:
        controller.set_start_date(update.start_date)
    if "end_date" in changed:
        controller.set_end_date(update.end_date)
    if update.quick_filter is not None:
        controller.apply_quick_filter(update.quick_filter)
    if update.sort_field is not None:
        controller.toggle_sort(update.sort_field)
    if update.page_size is not None:
        controller.set_page_size(update.page_size)
    return controller.state


@router.delete("/state", response_model=schemas.ListState)
def clear_list_state(controller: ExpenseListController = Depends(get_controller)):
    """Clear search and date filters; sorting is kept."""
    return controller.clear_filters()
