"""
Attendance Model - One live row per user for the day in progress
"""
import uuid

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, UniqueConstraint

from atams.db import Base
from app.core.clock import utc_now, local_today


class Attendance(Base):
    """Attendance model - Table: public.attendance"""
    __tablename__ = "attendance"
    __table_args__ = (
        # Guards the first check-in of the day against concurrent inserts
        UniqueConstraint("user_id", "attendance_date", name="uq_attendance_user_date"),
    )

    attendance_id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    attendance_date = Column(Date, nullable=True, default=lambda: local_today())  # Local (UTC+8) day
    check_in_time = Column(DateTime, nullable=True)
    check_out_time = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="absent")  # present/late/early_out/no_checkout/absent
    location = Column(String(100), nullable=True)  # "lat,lng" captured at check-in
    created_at = Column(DateTime, default=utc_now, nullable=True, index=True)
    updated_at = Column(DateTime, onupdate=utc_now, nullable=True)
