"""
Clock helpers - attendance days are computed in a fixed UTC offset
"""
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple

from app.core.config import settings


def utc_now() -> datetime:
    """Naive UTC timestamp, matching the TIMESTAMP WITHOUT TIME ZONE columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def local_offset() -> timedelta:
    return timedelta(hours=settings.ATTENDANCE_UTC_OFFSET_HOURS)


def to_local(moment: datetime) -> datetime:
    """Shift a naive UTC timestamp into the attendance timezone"""
    return moment + local_offset()


def local_today(now: Optional[datetime] = None) -> date:
    return to_local(now or utc_now()).date()


def local_yesterday(now: Optional[datetime] = None) -> date:
    return local_today(now) - timedelta(days=1)


def local_day_bounds(day: date) -> Tuple[datetime, datetime]:
    """
    UTC window [start, end) covering one local calendar day

    Returns:
        tuple: naive UTC datetimes usable against created_at columns
    """
    start = datetime(day.year, day.month, day.day) - local_offset()
    return start, start + timedelta(days=1)
