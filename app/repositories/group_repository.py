"""
Group Repository - Data access layer for work groups
"""
from typing import Optional
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from app.models.group import Group


class GroupRepository(BaseRepository[Group]):
    def __init__(self):
        super().__init__(Group)

    def get_by_id(self, db: Session, group_id: Optional[str]) -> Optional[Group]:
        if not group_id:
            return None
        return db.query(Group).filter(Group.group_id == group_id).first()
