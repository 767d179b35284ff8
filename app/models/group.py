"""
Group Model - Work group with its own location and working hours
"""
import uuid

from sqlalchemy import Column, String, Integer, Time, DateTime, ForeignKey

from atams.db import Base
from app.core.clock import utc_now


class Group(Base):
    """Group model - Table: public.group"""
    __tablename__ = "group"

    group_id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    group_name = Column(String(255), nullable=False)
    group_description = Column(String(1024), nullable=True)
    department_id = Column(String(36), ForeignKey("department.department_id"), nullable=True, index=True)
    group_location = Column(String(100), nullable=True)  # "lat,lng"
    geofence_radius = Column(Integer, nullable=True, default=500)  # Meters
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=True)
    updated_at = Column(DateTime, onupdate=utc_now, nullable=True)
