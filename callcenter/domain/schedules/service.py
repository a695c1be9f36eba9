"""Schedule service - Admin schedule editor and calendar months"""

import logging
from datetime import date

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Profile
from ..profiles.repository import ProfileRepository
from . import workdays
from .schemas import DaySchedule, MultiDaySchedule

logger = logging.getLogger(__name__)


def build_month(profile: Profile, year: int, month: int) -> list[dict]:
    """Calendar month of a profile's schedule"""
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="Month must be between 1 and 12")
    if not date.min.year <= year <= date.max.year:
        raise HTTPException(status_code=400, detail="Invalid year")
    return workdays.month_view(profile.work_schedule, year, month)


class ScheduleService:
    """Service layer for editing other users' work schedules"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def list_profiles(self, admin: Profile) -> list[Profile]:
        """Every profile except the admin's own"""
        return self.repo.list_profiles(self.db, exclude_id=admin.id)

    def get_profile(self, profile_id: str) -> Profile:
        profile = self.repo.get_profile(self.db, profile_id)
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def set_day(self, profile_id: str, data: DaySchedule, admin: Profile) -> Profile:
        profile = self.get_profile(profile_id)
        entry = data.to_entry()
        logger.info(
            f"🗓️ Admin {admin.id} sets {profile_id} on {entry['date']}: "
            f"{entry['start'] or '-'}..{entry['end'] or '-'}"
        )
        schedule = workdays.upsert_day(profile.work_schedule, entry["date"], entry["start"], entry["end"])
        return self._save(profile, schedule)

    def set_days(self, profile_id: str, data: MultiDaySchedule, admin: Profile) -> Profile:
        profile = self.get_profile(profile_id)
        days = [d.isoformat() for d in data.dates]
        logger.info(f"🗓️ Admin {admin.id} sets {len(days)} day(s) for {profile_id}")
        schedule = workdays.upsert_days(profile.work_schedule, days, data.start, data.end)
        return self._save(profile, schedule)

    def get_month(self, profile_id: str, year: int, month: int) -> list[dict]:
        return build_month(self.get_profile(profile_id), year, month)

    def _save(self, profile: Profile, schedule: list[dict]) -> Profile:
        try:
            return self.repo.set_work_schedule(self.db, profile, schedule)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update schedule for {profile.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to update schedule") from e
