from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base class for product catalog errors."""


class ProductValidationError(CatalogError):
    """A product failed field validation before being written."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class InvalidQueryError(CatalogError):
    """Query arguments that cannot be evaluated, such as a negative page."""


class StorageUnavailableError(CatalogError):
    """The backing database could not be reached for the current operation."""


@contextmanager
def storage_errors(session: Session, operation: str) -> Iterator[None]:
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        session.rollback()
        logger.error("storage unavailable during %s", operation, exc_info=True)
        raise StorageUnavailableError(f"storage unavailable during {operation}") from exc
