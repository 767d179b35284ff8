"""
Department Repository - Data access layer for departments
"""
from typing import Optional
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from app.models.department import Department


class DepartmentRepository(BaseRepository[Department]):
    def __init__(self):
        super().__init__(Department)

    def get_by_id(self, db: Session, department_id: Optional[str]) -> Optional[Department]:
        if not department_id:
            return None
        return db.query(Department).filter(Department.department_id == department_id).first()
