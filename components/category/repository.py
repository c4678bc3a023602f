"""Repository for category operations."""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.category.models import Category


class CategoryRepository:
    """Repository for category operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_all(self) -> List[Category]:
        """Get all categories ordered by name."""
        result = await self.session.execute(
            select(Category).order_by(Category.name)
        )
        return list(result.scalars().all())

    async def get_by_id(self, category_id: str) -> Optional[Category]:
        """Get category by ID."""
        result = await self.session.execute(
            select(Category).where(Category.id == category_id)
        )
        return result.scalar_one_or_none()

    async def create(self, name: str) -> Category:
        """Create a new category."""
        db_category = Category(name=name)
        self.session.add(db_category)
        await self.session.commit()
        await self.session.refresh(db_category)
        return db_category

    async def update(self, category_id: str, name: str) -> Optional[Category]:
        """Rename category by ID."""
        db_category = await self.get_by_id(category_id)
        if not db_category:
            return None

        db_category.name = name
        await self.session.commit()
        await self.session.refresh(db_category)
        return db_category

    async def delete(self, category_id: str) -> bool:
        """
        Delete category by ID.

        Raises IntegrityError when expenses still reference the category.
        """
        db_category = await self.get_by_id(category_id)
        if not db_category:
            return False

        await self.session.delete(db_category)
        await self.session.commit()
        return True
