"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

from datetime import datetime
import logging
import random
import time
from typing import Any, Callable, Generator, Optional, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, UnboundExecutionError
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from ..core.config import settings

logger = logging.getLogger(__name__)

_POSTGRES_CONNECT_ARGS: dict[str, Any] = {
    "keepalives": 1,
    "keepalives_idle": 15,
    "keepalives_interval": 5,
    "keepalives_count": 3,
    # Statement timeout caps runaway queries so a stuck write surfaces as a retryable error
    "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
    "connect_timeout": 5,
    "application_name": "counselor_availability",
}


def _build_engine_kwargs(db_url: str) -> dict[str, Any]:
    """Pool and connect arguments appropriate for the URL's dialect."""

    if db_url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "future": True,
        }

    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        # Fail FAST when pool exhausted - return 503 instead of blocking for seconds
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": True,
        "pool_use_lifo": True,
        "future": True,
        "connect_args": dict(_POSTGRES_CONNECT_ARGS),
    }


db_url = settings.get_database_url()
engine: Engine = create_engine(db_url, **_build_engine_kwargs(db_url))


# Log pool events for monitoring
@event.listens_for(engine, "connect")
def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
    connection_record.info["connect_time"] = datetime.now()
    logger.debug("Database connection established")


@event.listens_for(engine, "checkout")
def receive_checkout(dbapi_connection: Any, connection_record: Any, connection_proxy: Any) -> None:
    logger.debug("Connection checked out from pool")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def dialect_name(session: Session) -> str:
    """Dialect of the engine a session is bound to ("sqlite" when unbound)."""
    try:
        return session.get_bind().dialect.name
    except UnboundExecutionError:
        return "sqlite"


def supports_row_locks(session: Session) -> bool:
    """SQLite has no SELECT ... FOR UPDATE; its writer lock serializes instead."""
    return dialect_name(session) != "sqlite"


T = TypeVar("T")
# Only target transient disconnect errors emitted when the pooler restarts.
_RETRYABLE_ERROR_SNIPPETS = (
    "server closed the connection",
    "ssl connection has been closed unexpectedly",
    "database is locked",
)


def _is_retryable_db_error(exc: OperationalError) -> bool:
    message = str(exc).lower()
    return any(snippet in message for snippet in _RETRYABLE_ERROR_SNIPPETS)


def _operational_cause(exc: BaseException) -> Optional[OperationalError]:
    """Find an OperationalError in the ``__cause__`` chain (repositories wrap them)."""
    seen = 0
    current: Optional[BaseException] = exc
    while current is not None and seen < 8:
        if isinstance(current, OperationalError):
            return current
        current = current.__cause__
        seen += 1
    return None


def _retry_delay(attempt: int) -> float:
    base = 0.1 * (2 ** (attempt - 1))
    return base + random.uniform(0, 0.05 * attempt)


def with_db_retry(op_name: str, func: Callable[[], T], *, max_attempts: int = 3) -> T:
    """
    Execute a DB operation with retries for transient disconnects.

    ``func`` must be a complete unit of work (it is re-run from scratch).
    """

    attempt = 1
    while True:
        try:
            return func()
        except Exception as exc:
            cause = _operational_cause(exc)
            if cause is None or attempt >= max_attempts or not _is_retryable_db_error(cause):
                raise

            delay = _retry_delay(attempt)
            logger.warning(
                "Transient DB failure detected, retrying",
                extra={
                    "event": "db_retry",
                    "op": op_name,
                    "attempt": attempt,
                    "delay": delay,
                    "error": str(exc),
                },
            )
            time.sleep(delay)
            attempt += 1


__all__ = [
    "Base",
    "SessionLocal",
    "dialect_name",
    "engine",
    "get_db",
    "supports_row_locks",
    "with_db_retry",
]
