"""Expense model for the database."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, Text
from sqlalchemy.orm import relationship

from components.core.database import Base, new_id, utcnow


class Expense(Base):
    """Expense model storing a single recorded outlay."""
    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=new_id)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    category_id = Column(
        String(36),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Relationship with Category
    category = relationship("Category", back_populates="expenses", lazy="joined")
