"""
Attendance Schemas for live rows, history rows and scheduled jobs
"""
from typing import Optional, Literal
import datetime as dt
from datetime import datetime
from pydantic import BaseModel, ConfigDict

AttendanceStatus = Literal["present", "late", "early_out", "no_checkout", "absent"]


class AttendanceBase(BaseModel):
    user_id: str
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: AttendanceStatus = "absent"
    location: Optional[str] = None


class AttendanceRecord(AttendanceBase):
    model_config = ConfigDict(from_attributes=True)

    attendance_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AttendanceHistoryRecord(AttendanceBase):
    model_config = ConfigDict(from_attributes=True)

    history_id: str
    attendance_id: str
    attendance_date: dt.date
    archived_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DailyResetResponse(BaseModel):
    """Response schema for the daily reset job"""
    message: str
    date: dt.date
    archived: int
    created: int


class ArchiveResponse(BaseModel):
    """Response schema for the previous-day archive job"""
    message: str
    date: dt.date
    archived: int
    deleted: Optional[int] = None


class NoCheckoutResponse(BaseModel):
    """Response schema for the no-checkout marking job"""
    message: str
    updated: int
    checked: int
