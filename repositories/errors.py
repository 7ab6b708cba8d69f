import logging
from functools import wraps

from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError

from utils.errors import StoreUnavailable

logger = logging.getLogger(__name__)

# Raised when the pool can't hand out a connection in time or the server is unreachable
CONNECTIVITY_ERRORS = (PoolTimeoutError, OperationalError, InterfaceError)


def store_errors(func):
    """
    Decorator for repository methods: converts connectivity failures into
    StoreUnavailable so callers can tell them apart from data errors.
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except CONNECTIVITY_ERRORS as e:
            logger.error(f"Store unavailable in {func.__qualname__}: {str(e)}")
            raise StoreUnavailable() from e
    return wrapper
