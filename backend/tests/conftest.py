# backend/tests/conftest.py
"""
Pytest configuration for the counselor availability service.

Every test gets its own in-memory SQLite database (StaticPool keeps the single
connection alive across threads), so commits and rollbacks behave as they do
in production instead of being hidden inside an outer savepoint.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from counselor_availability import models  # noqa: F401
from counselor_availability.api.dependencies.database import get_db
from counselor_availability.core.enums import WEEK_ORDER
from counselor_availability.database import Base
from counselor_availability.main import app
from counselor_availability.repositories.weekly_availability_repository import (
    WeeklyAvailabilityRepository,
)
from counselor_availability.services.base import BaseService
from counselor_availability.services.weekly_availability_service import (
    WeeklyAvailabilityService,
)

COUNSELOR_ID = "01J9Z8Y7X6W5V4T3S2R1Q0P9N8"
OTHER_COUNSELOR_ID = "01J9Z8Y7X6W5V4T3S2R1Q0P9N9"

Range = Tuple[str, str]


@pytest.fixture
def engine() -> Engine:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory: sessionmaker) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def repository(db: Session) -> WeeklyAvailabilityRepository:
    return WeeklyAvailabilityRepository(db)


@pytest.fixture
def service(db: Session) -> WeeklyAvailabilityService:
    return WeeklyAvailabilityService(db)


@pytest.fixture(autouse=True)
def _reset_service_metrics() -> None:
    BaseService._class_metrics.clear()


@pytest.fixture
def client(session_factory: sessionmaker) -> TestClient:
    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def day_entry(
    day: str,
    ranges: Optional[Sequence[Range]] = None,
    *,
    available: Optional[bool] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Wire-shaped DayEntry; available defaults to whether ranges were given."""
    ranges = list(ranges or [])
    entry: Dict[str, Any] = {
        "dayOfWeek": day,
        "isAvailable": bool(ranges) if available is None else available,
        "timeRanges": [{"startTime": start, "endTime": end} for start, end in ranges],
    }
    entry.update(extra)
    return entry


def week_entries(
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
    *,
    skip: Iterable[str] = (),
) -> List[Dict[str, Any]]:
    """Seven entries: weekdays 09:00-12:00 and 13:00-17:00, weekend off."""
    overrides = overrides or {}
    skipped = set(skip)
    entries = []
    for day in WEEK_ORDER:
        name = day.value
        if name in skipped:
            continue
        if name in overrides:
            entries.append(overrides[name])
        elif name in ("Saturday", "Sunday"):
            entries.append(day_entry(name))
        else:
            entries.append(day_entry(name, [("09:00", "12:00"), ("13:00", "17:00")]))
    return entries


@pytest.fixture
def make_week() -> Callable[..., List[Dict[str, Any]]]:
    return week_entries


@pytest.fixture
def make_day() -> Callable[..., Dict[str, Any]]:
    return day_entry


@pytest.fixture
def counselor_id() -> str:
    return COUNSELOR_ID


@pytest.fixture
def other_counselor_id() -> str:
    return OTHER_COUNSELOR_ID
