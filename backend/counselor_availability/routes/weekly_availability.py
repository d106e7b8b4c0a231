# backend/counselor_availability/routes/weekly_availability.py
"""
Weekly availability routes - API v1

Versioned endpoints under /api/v1/counselors/{counselor_id}.
All business logic delegated to WeeklyAvailabilityService.

Endpoints:
    PUT /weekly-availability      → Replace the whole weekly template (7 days)
    PATCH /weekly-availability    → Update named days of an existing template
    GET /weekly-availability      → Read the stored template
    GET /slots                    → Expand the template into slots for dates
"""

import asyncio
from datetime import date, datetime
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ..api.dependencies.services import get_weekly_availability_service
from ..core.exceptions import DomainException, ValidationException
from ..schemas.weekly_availability import (
    SetWeeklyAvailabilityRequest,
    SlotsResponse,
    UpdateWeeklyAvailabilityRequest,
    WeeklyAvailabilityWriteResponse,
    WeeklyTemplate,
)
from ..services.weekly_availability_service import WeeklyAvailabilityService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["weekly-availability-v1"])

COUNSELOR_ID_PATTERN = r"^[A-Za-z0-9_\-]{1,64}$"


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.put(
    "/{counselor_id}/weekly-availability",
    response_model=WeeklyAvailabilityWriteResponse,
    status_code=status.HTTP_200_OK,
)
async def set_weekly_availability(
    payload: SetWeeklyAvailabilityRequest,
    counselor_id: str = Path(..., pattern=COUNSELOR_ID_PATTERN),
    service: WeeklyAvailabilityService = Depends(get_weekly_availability_service),
) -> WeeklyAvailabilityWriteResponse:
    """
    Replace the counselor's weekly template.

    Every weekday must appear exactly once. Validation problems are reported
    together in a single 400 response.
    """
    try:
        return await asyncio.to_thread(
            service.set_weekly_availability, counselor_id, payload.weekly_availability
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.patch(
    "/{counselor_id}/weekly-availability",
    response_model=WeeklyAvailabilityWriteResponse,
)
async def update_weekly_availability(
    payload: UpdateWeeklyAvailabilityRequest,
    counselor_id: str = Path(..., pattern=COUNSELOR_ID_PATTERN),
    service: WeeklyAvailabilityService = Depends(get_weekly_availability_service),
) -> WeeklyAvailabilityWriteResponse:
    """Update only the named days; other days are left as they are."""
    try:
        return await asyncio.to_thread(
            service.update_weekly_availability,
            counselor_id,
            payload.updated_weekly_availability,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{counselor_id}/weekly-availability",
    response_model=WeeklyTemplate,
)
async def get_weekly_availability(
    counselor_id: str = Path(..., pattern=COUNSELOR_ID_PATTERN),
    service: WeeklyAvailabilityService = Depends(get_weekly_availability_service),
) -> WeeklyTemplate:
    try:
        return await asyncio.to_thread(service.get_weekly_availability, counselor_id)
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{counselor_id}/slots",
    response_model=SlotsResponse,
)
async def get_slots(
    counselor_id: str = Path(..., pattern=COUNSELOR_ID_PATTERN),
    on_date: Optional[date] = Query(None, alias="date"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    not_before: Optional[datetime] = Query(None),
    service: WeeklyAvailabilityService = Depends(get_weekly_availability_service),
) -> SlotsResponse:
    """
    Slots generated from the weekly template.

    Pass either ``date`` or both ``start_date`` and ``end_date`` (inclusive).
    ``not_before`` hides slots starting earlier than the given moment.
    """
    try:
        if on_date is not None:
            if start_date is not None or end_date is not None:
                raise ValidationException(
                    "Use either date or start_date/end_date, not both",
                    code="AMBIGUOUS_DATE_QUERY",
                )
            day = await asyncio.to_thread(
                service.get_slots_for_date, counselor_id, on_date, not_before
            )
            return SlotsResponse(
                counselor_id=counselor_id,
                start_date=on_date,
                end_date=on_date,
                total_slots=len(day.slots),
                days=[day],
            )

        if start_date is None or end_date is None:
            raise ValidationException(
                "Provide date, or both start_date and end_date",
                code="MISSING_DATE_QUERY",
            )
        return await asyncio.to_thread(
            service.get_slots_for_range, counselor_id, start_date, end_date, not_before
        )
    except DomainException as e:
        handle_domain_exception(e)
