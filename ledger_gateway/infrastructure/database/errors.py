"""Translate SQLAlchemy failures into domain store errors"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import exc

from ledger_gateway.domain.exceptions import DomainException, StoreFailure, StoreTimeout

# PostgreSQL SQLSTATE for "canceling statement due to statement timeout"
QUERY_CANCELED = "57014"


def _is_statement_timeout(error: exc.DBAPIError) -> bool:
    return getattr(error.orig, "pgcode", None) == QUERY_CANCELED


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Run a store call, re-raising persistence failures as StoreFailure.

    Pool exhaustion and statement timeouts become StoreTimeout so callers
    can answer with a retryable status. The original error stays chained
    for server-side logging.
    """
    try:
        yield
    except DomainException:
        raise
    except exc.TimeoutError as e:
        raise StoreTimeout(f"{operation}: no database connection available") from e
    except exc.DBAPIError as e:
        if _is_statement_timeout(e):
            raise StoreTimeout(f"{operation}: statement timed out") from e
        raise StoreFailure(f"{operation} failed: {e}") from e
    except exc.SQLAlchemyError as e:
        raise StoreFailure(f"{operation} failed: {e}") from e
