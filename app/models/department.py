"""
Department Model - Fallback location and working hours for its users
"""
import uuid

from sqlalchemy import Column, String, Integer, Time, DateTime

from atams.db import Base
from app.core.clock import utc_now


class Department(Base):
    """Department model - Table: public.department"""
    __tablename__ = "department"

    department_id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    department_name = Column(String(255), nullable=False)
    department_description = Column(String(1024), nullable=True)
    department_location = Column(String(100), nullable=True)  # "lat,lng"
    geofence_radius = Column(Integer, nullable=True, default=500)  # Meters
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=True)
    updated_at = Column(DateTime, onupdate=utc_now, nullable=True)
