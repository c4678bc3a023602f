"""Category model for the database."""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from components.core.database import Base, new_id, utcnow


class Category(Base):
    """Category model grouping expenses under a user-defined label."""
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # The database refuses deletes while expenses reference the row
    expenses = relationship("Expense", back_populates="category", passive_deletes="all")
