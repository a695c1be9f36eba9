"""Schedule domain schemas - Pydantic models for validation"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_time_of_day


class DaySchedule(BaseModel):
    """One day of a work schedule"""

    date: datetime.date
    start: str = ""
    end: str = ""

    @field_validator("start", "end", mode="before")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)

    def to_entry(self) -> dict:
        return {"date": self.date.isoformat(), "start": self.start, "end": self.end}


class MultiDaySchedule(BaseModel):
    """Same shift applied to several dates at once"""

    dates: list[datetime.date] = Field(..., min_length=1)
    start: str = ""
    end: str = ""

    @field_validator("start", "end", mode="before")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)


class ScheduleEntryResponse(BaseModel):
    date: str
    start: str = ""
    end: str = ""


class MonthDayResponse(BaseModel):
    date: str
    start: str
    end: str
    is_work_day: bool


class ScheduleProfileResponse(BaseModel):
    """Profile as shown in schedule pickers"""

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    work_schedule: list[ScheduleEntryResponse] = []

    class Config:
        from_attributes = True

    @field_validator("work_schedule", mode="before")
    @classmethod
    def default_schedule(cls, v):
        return v or []
