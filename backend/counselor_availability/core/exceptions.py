# backend/counselor_availability/core/exceptions.py
"""
Domain-specific exceptions for the counselor availability service.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, List, Optional, Sequence

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code, "details": self.details}

    def to_http_exception(self) -> HTTPException:
        """Default conversion to HTTPException (override in subclasses)."""
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=self.to_dict(),
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=self.to_dict())


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=self.to_dict())


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=HTTP_422_UNPROCESSABLE, detail=self.to_dict())


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Weekly template validation


class AvailabilityRuleViolation(ValidationException):
    """One broken rule in a submitted weekly template."""

    default_code = "AVAILABILITY_RULE_VIOLATION"

    def __init__(
        self,
        message: str,
        *,
        day_of_week: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        payload = dict(details or {})
        if day_of_week is not None:
            payload.setdefault("day_of_week", day_of_week)
        self.day_of_week = day_of_week
        super().__init__(message=message, code=self.default_code, details=payload)


class IncompleteWeekError(AvailabilityRuleViolation):
    """A full-week template does not name every weekday exactly once."""

    default_code = "INCOMPLETE_WEEK"

    def __init__(
        self,
        *,
        missing_days: Sequence[str] = (),
        duplicate_days: Sequence[str] = (),
        entry_count: int,
    ) -> None:
        parts: List[str] = []
        if missing_days:
            parts.append(f"missing availability for {', '.join(missing_days)}")
        if duplicate_days:
            parts.append(f"duplicate entries for {', '.join(duplicate_days)}")
        if not parts:
            parts.append(f"expected 7 days, received {entry_count}")
        super().__init__(
            "Set availability for all days of the week: " + "; ".join(parts),
            details={
                "missing_days": list(missing_days),
                "duplicate_days": list(duplicate_days),
                "entry_count": entry_count,
            },
        )
        self.missing_days = list(missing_days)
        self.duplicate_days = list(duplicate_days)


class EmptyUpdateError(AvailabilityRuleViolation):
    default_code = "EMPTY_UPDATE"

    def __init__(self) -> None:
        super().__init__("Update availability for at least one day")


class MissingDayError(AvailabilityRuleViolation):
    """An entry has no recognizable weekday name."""

    default_code = "MISSING_DAY"

    def __init__(self, *, index: int, received: Any = None) -> None:
        super().__init__(
            f"Day of the week is required (entry {index})",
            details={"index": index, "received": received},
        )
        self.index = index


class DuplicateDayError(AvailabilityRuleViolation):
    default_code = "DUPLICATE_DAY"

    def __init__(self, day_of_week: str) -> None:
        super().__init__(
            f"{day_of_week} appears more than once in the update",
            day_of_week=day_of_week,
        )


class MissingTimeRangeError(AvailabilityRuleViolation):
    default_code = "MISSING_TIME_RANGE"

    def __init__(self, day_of_week: str) -> None:
        super().__init__(
            f"Please provide at least one time slot for {day_of_week}",
            day_of_week=day_of_week,
        )


class InvalidTimeRangeError(AvailabilityRuleViolation):
    """Malformed, inverted or overlapping time range within one day."""

    default_code = "INVALID_TIME_RANGE"

    def __init__(
        self,
        message: str,
        *,
        day_of_week: Optional[str] = None,
        time_range: Optional[str] = None,
        conflicting_range: Optional[str] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if time_range is not None:
            details["time_range"] = time_range
        if conflicting_range is not None:
            details["conflicting_range"] = conflicting_range
        super().__init__(message, day_of_week=day_of_week, details=details)


class InvalidSlotPolicyError(AvailabilityRuleViolation):
    """slotDuration must be positive and bufferTime non-negative."""

    default_code = "INVALID_SLOT_POLICY"

    def __init__(
        self,
        message: str,
        *,
        slot_duration: Any = None,
        buffer_time: Any = None,
        day_of_week: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            day_of_week=day_of_week,
            details={"slot_duration": slot_duration, "buffer_time": buffer_time},
        )


class WeeklyAvailabilityValidationError(ValidationException):
    """Every rule violation found in one submitted template."""

    def __init__(self, errors: Sequence[AvailabilityRuleViolation], *, mode: str) -> None:
        self.errors: List[AvailabilityRuleViolation] = list(errors)
        self.mode = mode
        summary = "; ".join(err.message for err in self.errors)
        super().__init__(
            message=f"Weekly availability is invalid: {summary}",
            code="WEEKLY_AVAILABILITY_INVALID",
            details={"mode": mode, "errors": [err.to_dict() for err in self.errors]},
        )

    def has(self, error_type: type) -> bool:
        return any(isinstance(err, error_type) for err in self.errors)

    def of_type(self, error_type: type) -> List[AvailabilityRuleViolation]:
        return [err for err in self.errors if isinstance(err, error_type)]


# State preconditions


class TemplateNotInitializedError(BusinessRuleException):
    """Update attempted before any full-week template was set."""

    def __init__(self, counselor_id: str) -> None:
        super().__init__(
            message="Please set availability first before updating it",
            code="TEMPLATE_NOT_INITIALIZED",
            details={"counselor_id": counselor_id},
        )


class DayNotFoundError(NotFoundException):
    """A weekday row is missing from an initialized template."""

    def __init__(self, counselor_id: str, day_of_week: str) -> None:
        super().__init__(
            message=f"No entry found for {day_of_week}",
            code="DAY_NOT_FOUND",
            details={"counselor_id": counselor_id, "day_of_week": day_of_week},
        )


# Persistence


class PersistenceError(ServiceException):
    """Storage failure; the caller may retry the whole operation."""

    retryable = True

    def __init__(
        self,
        message: str,
        *,
        counselor_id: str,
        operation: str,
        code: str = "PERSISTENCE_ERROR",
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details={
                "counselor_id": counselor_id,
                "operation": operation,
                "retryable": self.retryable,
            },
        )
        self.counselor_id = counselor_id
        self.operation = operation

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=self.to_dict(),
            headers={"Retry-After": "2"},
        )


class AvailabilityLockTimeoutError(PersistenceError):
    """Another mutation held the counselor's lock for too long."""

    def __init__(self, counselor_id: str, operation: str, timeout_s: float) -> None:
        super().__init__(
            f"Timed out after {timeout_s:g}s waiting for availability lock",
            counselor_id=counselor_id,
            operation=operation,
            code="AVAILABILITY_LOCK_TIMEOUT",
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """


def is_db_pool_exhaustion(exc: Exception) -> bool:
    """
    Check if an exception indicates DB connection pool exhaustion.

    This is a common failure mode under high load when all database
    connections are in use and new requests time out waiting.
    """
    error_str = str(exc).lower()
    return "queuepool" in error_str or (
        "timeout" in error_str and ("connection" in error_str or "pool" in error_str)
    )
