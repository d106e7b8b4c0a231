# backend/counselor_availability/services/base.py
"""
Base Service Pattern for the counselor availability service

Provides common functionality for all service classes including:
- Transaction management
- Logging
- Error handling
- Performance monitoring
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Iterator, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import DomainException, RepositoryException, ServiceException

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """
    Base class for all service layer components.

    Provides common patterns for:
    - Database session management
    - Logging
    - Transaction handling
    - Performance monitoring
    """

    # Class-level metrics storage
    _class_metrics: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def __init__(self, db: Session):
        """
        Initialize base service.

        Args:
            db: Database session
        """
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self, **context: Any) -> Iterator[Session]:
        """
        Context manager for database transactions.

        Commits on success. On any failure the session is rolled back; storage
        errors are translated through ``translate_db_error`` and everything
        else is re-raised unchanged.

        Usage:
            with self.transaction(operation="set"):
                self.repository.create_days(...)
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except (SQLAlchemyError, RepositoryException) as e:
            self.logger.error(f"Transaction failed: {str(e)}", extra=context)
            self.db.rollback()
            raise self.translate_db_error(e, **context) from e
        except Exception as e:
            self.logger.debug(f"Transaction rolled back: {type(e).__name__}", extra=context)
            self.db.rollback()
            raise

    def translate_db_error(self, exc: Exception, **context: Any) -> DomainException:
        """Map a storage failure to a domain exception. Override per service."""
        return ServiceException(f"Database operation failed: {str(exc)}")

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("set_weekly_availability")
            def set_weekly_availability(self, ...):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                start_time = time.time()
                success = False
                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                finally:
                    elapsed = time.time() - start_time

                    if hasattr(self, "_record_metric"):
                        self._record_metric(operation_name, elapsed, success)

                    # Only log if it's actually slow
                    if elapsed > SLOW_OPERATION_SECONDS and hasattr(self, "logger"):
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )

            wrapper._operation_name = operation_name  # type: ignore[attr-defined]
            wrapper._is_measured = True  # type: ignore[attr-defined]
            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        """Log an operation with context."""
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})

    def _record_metric(self, operation: str, elapsed: float, success: bool) -> None:
        class_name = self.__class__.__name__
        metrics = BaseService._class_metrics.setdefault(class_name, {})

        if operation not in metrics:
            metrics[operation] = {
                "count": 0,
                "total_time": 0.0,
                "success_count": 0,
                "failure_count": 0,
                "min_time": float("inf"),
                "max_time": 0.0,
            }

        metric_data = metrics[operation]
        metric_data["count"] += 1
        metric_data["total_time"] += elapsed
        metric_data["min_time"] = min(metric_data["min_time"], elapsed)
        metric_data["max_time"] = max(metric_data["max_time"], elapsed)

        if success:
            metric_data["success_count"] += 1
        else:
            metric_data["failure_count"] += 1

    def get_metrics(self) -> Dict[str, Any]:
        """
        Get performance metrics for this service.

        Returns:
            Dictionary with metrics for each measured operation
        """
        metrics = BaseService._class_metrics.get(self.__class__.__name__, {})

        result = {}
        for operation, data in metrics.items():
            count = data["count"]
            if count == 0:
                continue

            result[operation] = {
                "count": count,
                "avg_time": data["total_time"] / count,
                "min_time": data["min_time"],
                "max_time": data["max_time"],
                "total_time": data["total_time"],
                "success_rate": data["success_count"] / count,
                "success_count": data["success_count"],
                "failure_count": data["failure_count"],
            }

        return result

    def reset_metrics(self) -> None:
        """Reset all metrics for this service."""
        class_name = self.__class__.__name__
        if class_name in BaseService._class_metrics:
            BaseService._class_metrics[class_name].clear()
        self.logger.info(f"Metrics reset for {class_name}")
