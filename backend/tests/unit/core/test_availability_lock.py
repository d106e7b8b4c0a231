import threading

import pytest

from counselor_availability.core.availability_lock import (
    active_lock_count,
    counselor_lock,
)
from counselor_availability.core.exceptions import AvailabilityLockTimeoutError, PersistenceError


class TestCounselorLock:
    def test_registry_is_emptied_after_release(self):
        with counselor_lock("c-1", "set"):
            assert active_lock_count() == 1

        assert active_lock_count() == 0

    def test_released_when_body_raises(self):
        with pytest.raises(RuntimeError):
            with counselor_lock("c-1", "set"):
                raise RuntimeError("boom")

        with counselor_lock("c-1", "set", timeout_s=0.1):
            pass
        assert active_lock_count() == 0

    def test_second_holder_times_out(self):
        held = threading.Event()
        release = threading.Event()

        def holder():
            with counselor_lock("c-1", "set"):
                held.set()
                release.wait(5)

        thread = threading.Thread(target=holder)
        thread.start()
        try:
            assert held.wait(5)
            with pytest.raises(AvailabilityLockTimeoutError) as exc_info:
                with counselor_lock("c-1", "update", timeout_s=0.05):
                    pass
        finally:
            release.set()
            thread.join(5)

        error = exc_info.value
        assert isinstance(error, PersistenceError)
        assert error.code == "AVAILABILITY_LOCK_TIMEOUT"
        assert error.details["operation"] == "update"
        assert error.details["retryable"] is True
        assert active_lock_count() == 0

    def test_other_counselors_do_not_contend(self):
        held = threading.Event()
        release = threading.Event()

        def holder():
            with counselor_lock("c-1", "set"):
                held.set()
                release.wait(5)

        thread = threading.Thread(target=holder)
        thread.start()
        try:
            assert held.wait(5)
            with counselor_lock("c-2", "set", timeout_s=0.05):
                assert active_lock_count() == 2
        finally:
            release.set()
            thread.join(5)

    def test_waiter_proceeds_once_released(self):
        order = []
        held = threading.Event()

        def holder():
            with counselor_lock("c-1", "set"):
                held.set()
                order.append("first")

        with counselor_lock("c-1", "set"):
            thread = threading.Thread(target=holder)
            thread.start()
            assert not held.wait(0.05)
            order.append("main")

        thread.join(5)
        assert order == ["main", "first"]
