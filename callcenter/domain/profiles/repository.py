"""Profile repository - Database operations for profiles"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Profile

logger = logging.getLogger(__name__)


class ProfileRepository:
    """Repository for profile database operations"""

    @staticmethod
    def get_profile(db: Session, profile_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == profile_id).first()

    @staticmethod
    def get_or_create(db: Session, profile_id: str, email: Optional[str] = None) -> Profile:
        """Return the profile for an account, creating a blank one on first sight"""
        profile = ProfileRepository.get_profile(db, profile_id)
        if profile:
            return profile

        logger.info(f"🆕 Creating profile for account {profile_id}")
        profile = Profile(
            id=profile_id,
            email=email,
            first_name="",
            last_name="",
            is_admin=False,
            chat_rating=0,
            color_scheme="light",
            work_schedule=[],
        )
        db.add(profile)
        try:
            db.commit()
        except IntegrityError:
            # Created concurrently by another request for the same account
            db.rollback()
            existing = ProfileRepository.get_profile(db, profile_id)
            if existing:
                return existing
            raise HTTPException(status_code=500, detail="Failed to create profile")
        db.refresh(profile)
        return profile

    @staticmethod
    def list_profiles(db: Session, exclude_id: Optional[str] = None) -> list[Profile]:
        query = db.query(Profile)
        if exclude_id:
            query = query.filter(Profile.id != exclude_id)
        return query.order_by(Profile.last_name, Profile.first_name, Profile.id).all()

    @staticmethod
    def get_profiles_by_ids(db: Session, profile_ids: set[str]) -> dict[str, Profile]:
        if not profile_ids:
            return {}
        profiles = db.query(Profile).filter(Profile.id.in_(profile_ids)).all()
        return {p.id: p for p in profiles}

    @staticmethod
    def update_profile(db: Session, profile: Profile, **updates) -> Profile:
        """Update a profile with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(profile, key):
                setattr(profile, key, value)

        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def set_work_schedule(db: Session, profile: Profile, schedule: list[dict]) -> Profile:
        # Assign a new list so the JSON column is flagged as changed
        profile.work_schedule = list(schedule)
        db.commit()
        db.refresh(profile)
        return profile
