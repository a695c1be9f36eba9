"""Shift exchange schemas - Pydantic models for validation"""

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..profiles.schemas import ProfileSummary
from ..schedules.schemas import ScheduleEntryResponse


class ShiftExchangeCreate(BaseModel):
    """
    Exchange form submission.

    Fields are optional so that an incomplete form gets the workflow's own
    message instead of a generic validation error.
    """

    target_user_id: Optional[str] = None
    requester_date: Optional[datetime.date] = None
    target_date: Optional[datetime.date] = None
    message: Optional[str] = Field(None, max_length=2000)


class ShiftExchangeDecision(BaseModel):
    status: Literal["approved", "rejected", "cancelled"]


class ShiftExchangeResponse(BaseModel):
    id: str
    requester_id: str
    target_user_id: str
    requester_date: datetime.date
    target_date: datetime.date
    requester_shift: ScheduleEntryResponse
    target_shift: ScheduleEntryResponse
    status: Literal["pending", "approved", "rejected", "cancelled"]
    message: Optional[str] = None
    admin_notified: bool = False
    user_approved: bool = False
    admin_approved: bool = False
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None
    requester_profile: Optional[ProfileSummary] = None
    target_profile: Optional[ProfileSummary] = None
    approval_status: str = ""

    class Config:
        from_attributes = True
