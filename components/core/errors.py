"""Domain errors and their HTTP mapping."""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ExpenseTrackerError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ExpenseTrackerError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ExpenseTrackerError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ExpenseTrackerError):
    """Operation would break referential integrity."""

    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(ExpenseTrackerError):
    """Unexpected persistence failure; the message never carries internals."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate unexpected SQLAlchemy failures into StorageError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("Storage failure during %s", operation)
        raise StorageError(f"Failed to {operation}") from e
