from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
import time
from typing import Dict, Iterator, Optional

from .config import settings
from .exceptions import AvailabilityLockTimeoutError

logger = logging.getLogger(__name__)


class _CounselorMutex:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        # threads holding or waiting; entry is dropped from the registry at zero
        self.holders = 0


_REGISTRY: Dict[str, _CounselorMutex] = {}
_REGISTRY_LOCK = threading.Lock()


def _checkout(counselor_id: str) -> _CounselorMutex:
    with _REGISTRY_LOCK:
        mutex = _REGISTRY.get(counselor_id)
        if mutex is None:
            mutex = _CounselorMutex()
            _REGISTRY[counselor_id] = mutex
        mutex.holders += 1
        return mutex


def _checkin(counselor_id: str, mutex: _CounselorMutex) -> None:
    with _REGISTRY_LOCK:
        mutex.holders -= 1
        if mutex.holders <= 0 and _REGISTRY.get(counselor_id) is mutex:
            del _REGISTRY[counselor_id]


def acquire_counselor_lock(
    counselor_id: str, timeout_s: Optional[float] = None
) -> Optional[_CounselorMutex]:
    """Block until the counselor's mutex is held; None on timeout."""
    if timeout_s is None:
        timeout_s = settings.availability_lock_timeout_seconds
    mutex = _checkout(counselor_id)
    started = time.monotonic()
    acquired = mutex.lock.acquire(timeout=timeout_s) if timeout_s >= 0 else mutex.lock.acquire()
    if not acquired:
        _checkin(counselor_id, mutex)
        return None
    waited = time.monotonic() - started
    if waited > 1.0:
        logger.warning(
            "availability_lock_contended",
            extra={"counselor_id": counselor_id, "waited_s": round(waited, 3)},
        )
    return mutex


def release_counselor_lock(counselor_id: str, mutex: _CounselorMutex) -> None:
    mutex.lock.release()
    _checkin(counselor_id, mutex)


def active_lock_count() -> int:
    with _REGISTRY_LOCK:
        return len(_REGISTRY)


@contextmanager
def counselor_lock(
    counselor_id: str,
    operation: str,
    timeout_s: Optional[float] = None,
) -> Iterator[None]:
    """
    Serialize template mutations for one counselor within this process.

    Raises:
        AvailabilityLockTimeoutError: if the lock is not obtained in time
    """
    effective_timeout = (
        settings.availability_lock_timeout_seconds if timeout_s is None else timeout_s
    )
    mutex = acquire_counselor_lock(counselor_id, timeout_s=effective_timeout)
    if mutex is None:
        logger.warning(
            "availability_lock_timeout",
            extra={
                "counselor_id": counselor_id,
                "operation": operation,
                "timeout_s": effective_timeout,
            },
        )
        raise AvailabilityLockTimeoutError(counselor_id, operation, effective_timeout)
    try:
        yield
    finally:
        release_counselor_lock(counselor_id, mutex)
