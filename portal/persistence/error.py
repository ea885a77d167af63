"""Translation of database failures into domain errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import logfire
from sqlalchemy.exc import SQLAlchemyError

from portal.domain.error import StoreUnavailable


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise connectivity, timeout and driver failures as StoreUnavailable.

    Args:
        operation: Name of the repository operation, for logs
    """
    try:
        yield
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logfire.error("Database operation failed", operation=operation, error=str(e))
        raise StoreUnavailable(f"{operation} failed: {e}") from e
