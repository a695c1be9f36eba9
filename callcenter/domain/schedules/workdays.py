"""
Helpers over a profile's ``work_schedule`` list.

Entries are plain dicts ``{"date": "YYYY-MM-DD", "start": "HH:MM", "end": "HH:MM"}``.
All helpers return new lists and never mutate their input.
"""

import calendar
from datetime import date
from typing import Iterable, Optional


def make_entry(day: str, start: str = "", end: str = "") -> dict:
    return {"date": day, "start": start or "", "end": end or ""}


def find_entry(schedule: Optional[list[dict]], day: str) -> Optional[dict]:
    """First entry for a date, or None"""
    for entry in schedule or []:
        if entry.get("date") == day:
            return entry
    return None


def is_work_day(entry: Optional[dict]) -> bool:
    """A day counts as worked when either boundary is set"""
    return bool(entry and (entry.get("start") or entry.get("end")))


def upsert_day(schedule: Optional[list[dict]], day: str, start: str, end: str) -> list[dict]:
    """Replace the entry for ``day`` or append a new one"""
    return upsert_days(schedule, [day], start, end)


def upsert_days(
    schedule: Optional[list[dict]], days: Iterable[str], start: str, end: str
) -> list[dict]:
    updated = [dict(entry) for entry in schedule or []]
    for day in days:
        new_entry = make_entry(day, start, end)
        for index, entry in enumerate(updated):
            if entry.get("date") == day:
                updated[index] = new_entry
                break
        else:
            updated.append(new_entry)
    return updated


def replace_entry(schedule: Optional[list[dict]], day: str, replacement: dict) -> list[dict]:
    """
    Swap in ``replacement`` wherever an entry is dated ``day``.

    The replacement keeps its own date, so a swapped-in shift from another
    user's calendar lands on that user's original day.
    """
    return [
        dict(replacement) if entry.get("date") == day else dict(entry)
        for entry in schedule or []
    ]


def month_view(schedule: Optional[list[dict]], year: int, month: int) -> list[dict]:
    """One row per calendar day of the month"""
    _, days_in_month = calendar.monthrange(year, month)
    rows = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number).isoformat()
        entry = find_entry(schedule, day)
        rows.append(
            {
                "date": day,
                "start": entry.get("start", "") if entry else "",
                "end": entry.get("end", "") if entry else "",
                "is_work_day": is_work_day(entry),
            }
        )
    return rows
