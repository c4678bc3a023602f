"""Category endpoints for the API."""

import uuid
from typing import List
from fastapi import APIRouter, Depends, status

from components.category import schemas
from components.core.errors import NotFoundError
from components.core.init_db import get_store
from components.core.schemas import DeleteResult, ErrorResponse
from components.store.base import ExpenseStore

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        404: {"model": ErrorResponse, "description": "Not found"},
    },
)


@router.get("", response_model=List[schemas.Category])
async def read_categories(store: ExpenseStore = Depends(get_store)):
    """Get all categories ordered by name."""
    return await store.list_categories()


@router.post("", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    category: schemas.CategoryCreate,
    store: ExpenseStore = Depends(get_store)
):
    """Create a new category."""
    return await store.create_category(category.name)


@router.get("/{category_id}", response_model=schemas.Category)
async def read_category(
    category_id: uuid.UUID,
    store: ExpenseStore = Depends(get_store)
):
    """Get a specific category by ID."""
    category = await store.get_category(str(category_id))
    if category is None:
        raise NotFoundError("Category not found")
    return category


@router.put("/{category_id}", response_model=schemas.Category)
async def update_category(
    category_id: uuid.UUID,
    category: schemas.CategoryUpdate,
    store: ExpenseStore = Depends(get_store)
):
    """Rename a category."""
    return await store.update_category(str(category_id), category.name)


@router.delete("/{category_id}", response_model=DeleteResult)
async def delete_category(
    category_id: uuid.UUID,
    store: ExpenseStore = Depends(get_store)
):
    """
    Delete a category.

    Refused with 400 while any expense still belongs to the category.
    """
    await store.delete_category(str(category_id))
    return DeleteResult()
