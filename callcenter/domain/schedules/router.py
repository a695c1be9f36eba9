"""Admin schedule router - FastAPI endpoints for the admin panel"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import Profile
from .schemas import DaySchedule, MonthDayResponse, MultiDaySchedule, ScheduleProfileResponse
from .service import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db)


@router.get("/profiles", response_model=list[ScheduleProfileResponse])
async def list_profiles(
    admin: Profile = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service),
):
    """All other users with their schedules"""
    return service.list_profiles(admin)


@router.put("/profiles/{profile_id}/schedule", response_model=ScheduleProfileResponse)
async def set_schedule_day(
    profile_id: str,
    data: DaySchedule,
    admin: Profile = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Create or replace one day of a user's schedule"""
    return service.set_day(profile_id, data, admin)


@router.put("/profiles/{profile_id}/schedule/batch", response_model=ScheduleProfileResponse)
async def set_schedule_days(
    profile_id: str,
    data: MultiDaySchedule,
    admin: Profile = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Apply the same shift to several days"""
    return service.set_days(profile_id, data, admin)


@router.get("/profiles/{profile_id}/schedule/month", response_model=list[MonthDayResponse])
async def get_schedule_month(
    profile_id: str,
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    admin: Profile = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.get_month(profile_id, year, month)
