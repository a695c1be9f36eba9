"""Profile service - Business logic for the caller's profile"""

import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import COLOR_SCHEMES, Profile
from ..schedules.service import build_month
from .repository import ProfileRepository
from .schemas import ProfileUpdate

logger = logging.getLogger(__name__)

COLOR_SCHEME_NAMES = {
    "light": "Light",
    "dark": "Dark",
    "blue": "Blue",
    "green": "Green",
}


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def update_profile(self, data: ProfileUpdate, user: Profile) -> Profile:
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            return user

        updates["updated_at"] = datetime.now(timezone.utc)
        try:
            profile = self.repo.update_profile(self.db, user, **updates)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error updating profile {user.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Error updating profile") from e

        logger.info(f"✅ Profile {user.id} updated: {sorted(updates)}")
        return profile

    def list_directory(self, user: Profile) -> list[Profile]:
        """Other users, for picking a shift exchange partner"""
        return self.repo.list_profiles(self.db, exclude_id=user.id)

    def get_month(self, user: Profile, year: int, month: int) -> list[dict]:
        return build_month(user, year, month)

    @staticmethod
    def color_schemes() -> list[dict]:
        return [{"id": scheme, "name": COLOR_SCHEME_NAMES[scheme]} for scheme in COLOR_SCHEMES]
