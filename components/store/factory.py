"""Store adapter selection."""

from sqlalchemy.ext.asyncio import AsyncSession

from components.store.base import ExpenseStore
from components.store.orm import OrmStore
from components.store.sql import SqlStore

BACKENDS = {
    "orm": OrmStore,
    "sql": SqlStore,
}


def create_store(backend: str, session: AsyncSession) -> ExpenseStore:
    """Build the adapter configured for this process around a request session."""
    try:
        store_class = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown store backend: {backend}") from None
    return store_class(session)
