"""
Shared decorators for database operations.
"""
import logging
from functools import wraps
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def degraded_read(default_factory: Callable[[], Any]) -> Callable:
    """
    A failed database read is logged and yields default_factory() instead of raising. The
    session (first positional argument or db_session keyword) is rolled back so it stays usable.
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(*args, **kwargs):
            try:
                return function(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.error(f"Error in {function.__name__}: {repr(e)}")
                db_session = kwargs.get("db_session", args[0] if args else None)
                if isinstance(db_session, Session):
                    db_session.rollback()
                return default_factory()

        return wrapper

    return decorator
