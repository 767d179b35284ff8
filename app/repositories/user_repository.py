"""
User Repository - Data access layer for users
"""
from typing import Optional, List
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from app.models.user import User


class UserRepository(BaseRepository[User]):
    def __init__(self):
        super().__init__(User)

    def get_by_id(self, db: Session, user_id: str) -> Optional[User]:
        """Get user by ID using ORM"""
        return db.query(User).filter(User.user_id == user_id).first()

    def get_users_with_photo(self, db: Session) -> List[User]:
        """Get every user that has a registered face photo"""
        return db.query(User).filter(User.photo_url.isnot(None)).all()

    def get_all_ids(self, db: Session) -> List[str]:
        """Get all user IDs using native SQL"""
        rows = self.execute_raw_sql(db, "SELECT user_id FROM users")
        return [row[0] for row in rows]

    def get_admins_with_email(self, db: Session) -> List[User]:
        return db.query(User).filter(
            User.role == "admin",
            User.email.isnot(None)
        ).all()

    def delete_by_id(self, db: Session, user_id: str) -> bool:
        """Delete user by ID and return success status"""
        user = self.get_by_id(db, user_id)
        if user:
            db.delete(user)
            db.commit()
            return True
        return False
