"""
Attendance History Model - Append-only archive of past attendance days
"""
import uuid

from sqlalchemy import Column, String, Date, DateTime, UniqueConstraint

from atams.db import Base
from app.core.clock import utc_now


class AttendanceHistory(Base):
    """Attendance History model - Table: public.attendance_history"""
    __tablename__ = "attendance_history"
    __table_args__ = (
        UniqueConstraint("attendance_id", "attendance_date", name="uq_attendance_history_record_date"),
    )

    history_id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    attendance_id = Column(String(36), nullable=False)
    user_id = Column(String(36), nullable=False, index=True)
    check_in_time = Column(DateTime, nullable=True)
    check_out_time = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False)
    location = Column(String(100), nullable=True)
    attendance_date = Column(Date, nullable=False, index=True)
    archived_at = Column(DateTime, default=utc_now, nullable=False)
    created_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, nullable=True)
