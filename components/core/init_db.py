"""Database initialization and dependency injection."""

from typing import AsyncGenerator

import fastapi
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import Settings
from components.core.database import DatabaseManager
from components.store.base import ExpenseStore
from components.store.factory import create_store


def init_db(app: fastapi.FastAPI, settings: Settings) -> DatabaseManager:
    """Attach a DatabaseManager owned by this application instance."""
    db_manager = DatabaseManager(settings)
    app.state.db_manager = db_manager
    return db_manager


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    async with request.app.state.db_manager.get_db() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


async def get_store(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> ExpenseStore:
    """FastAPI dependency for the configured expense store."""
    return create_store(settings.DB_BACKEND, db)
