"""Profile router - FastAPI endpoints for profile operations"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from ..schedules.schemas import MonthDayResponse, ScheduleProfileResponse
from .schemas import ColorSchemeResponse, ProfileResponse, ProfileUpdate
from .service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(current_user: Profile = Depends(get_current_user)):
    """Get the caller's profile (created on first sign-in)"""
    return current_user


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    data: ProfileUpdate,
    current_user: Profile = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Update names, chat rating or color scheme"""
    return service.update_profile(data, current_user)


@router.get("/me/schedule", response_model=list[MonthDayResponse])
async def get_my_schedule_month(
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    current_user: Profile = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """The caller's work schedule for one calendar month"""
    return service.get_month(current_user, year, month)


@router.get("/color-schemes", response_model=list[ColorSchemeResponse])
async def list_color_schemes():
    return ProfileService.color_schemes()


@router.get("", response_model=list[ScheduleProfileResponse])
async def list_other_profiles(
    current_user: Profile = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Everyone except the caller, with their schedules"""
    return service.list_directory(current_user)
