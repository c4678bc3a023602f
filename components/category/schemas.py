"""Pydantic schemas for category data validation."""

from datetime import datetime

from pydantic import Field, field_validator

from components.core.schemas import CamelModel


class CategoryBase(CamelModel):
    """Base category schema."""
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class CategoryCreate(CategoryBase):
    """Schema for category creation."""
    pass


class CategoryUpdate(CategoryBase):
    """Schema for category rename."""
    pass


class CategoryRef(CamelModel):
    """Category as embedded in an expense."""
    id: str
    name: str


class Category(CategoryBase):
    """Schema for category response."""
    id: str
    created_at: datetime
    updated_at: datetime
