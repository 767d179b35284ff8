"""
User Model - Members and admins that can be matched by face
"""
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey

from atams.db import Base
from app.core.clock import utc_now


class User(Base):
    """User model - Table: public.users"""
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    auth_uuid = Column(String(36), nullable=True, index=True)  # Identity provider account id
    username = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    first_name = Column(String(100), nullable=True)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(String(10), nullable=False, default="member")  # 'admin' or 'member'
    photo_url = Column(String(2048), nullable=True)  # Registered face photo
    group_id = Column(String(36), ForeignKey("group.group_id"), nullable=True, index=True)
    department_id = Column(String(36), ForeignKey("department.department_id"), nullable=True, index=True)
    created_at = Column(DateTime, default=utc_now, nullable=True)
    updated_at = Column(DateTime, onupdate=utc_now, nullable=True)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.middle_name, self.last_name) if part)
