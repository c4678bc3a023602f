"""Application configuration and router setup."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import fastapi
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware import cors
from fastapi.responses import JSONResponse

from components.core import init_db
from components.core.config import Settings, get_settings
from components.core.errors import ExpenseTrackerError
from components.core.logger import setup_logging
from components.listing.state import create_state_storage
from restapi.endpoints import health_check, categories, expenses, expense_list

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    """Create the schema on startup and release connections on shutdown."""
    await app.state.db_manager.create_all()
    yield
    await app.state.db_manager.dispose()


async def tracker_error_handler(request: Request, exc: ExpenseTrackerError) -> JSONResponse:
    """Map domain errors to their status codes."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests as 400 instead of FastAPI's default 422."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages) or "Invalid request"},
    )


def create_app(settings: Optional[Settings] = None) -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = fastapi.FastAPI(
        title="Expense Tracker",
        description="Personal expense tracking API",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.list_state_storage = create_state_storage(settings.LIST_STATE_DIR)

    # Initialize database
    init_db.init_db(app, settings)
    logger.info("Using %s store backend", settings.DB_BACKEND)

    # Add CORS middleware
    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ExpenseTrackerError, tracker_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include routers
    app.include_router(health_check.router)
    app.include_router(categories.router)
    app.include_router(expenses.router)
    app.include_router(expense_list.router)

    return app
