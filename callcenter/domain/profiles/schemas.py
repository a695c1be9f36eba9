"""Profile domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import COLOR_SCHEMES
from ..schedules.schemas import ScheduleEntryResponse


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's own profile"""

    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    chat_rating: Optional[int] = Field(None, ge=0, le=5)
    color_scheme: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if v is not None else v

    @field_validator("color_scheme")
    @classmethod
    def validate_color_scheme(cls, v):
        if v is not None and v not in COLOR_SCHEMES:
            raise ValueError(f"Unknown color scheme. Use one of: {', '.join(COLOR_SCHEMES)}")
        return v


class ProfileResponse(BaseModel):
    """The caller's own profile"""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_admin: bool
    chat_rating: int
    color_scheme: str
    work_schedule: list[ScheduleEntryResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("work_schedule", mode="before")
    @classmethod
    def default_schedule(cls, v):
        return v or []


class ProfileSummary(BaseModel):
    """Name card attached to exchange requests"""

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    class Config:
        from_attributes = True


class ColorSchemeResponse(BaseModel):
    id: str
    name: str
