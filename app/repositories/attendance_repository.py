"""
Attendance Repository - Data access layer for live attendance rows
"""
from typing import Optional, List
from datetime import date, datetime
from sqlalchemy.orm import Session
from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError

from atams.db import BaseRepository
from app.models.attendance import Attendance


class AttendanceRepository(BaseRepository[Attendance]):
    def __init__(self):
        super().__init__(Attendance)

    def get_all(self, db: Session) -> List[Attendance]:
        return db.query(Attendance).all()

    def get_created_between(self, db: Session, start: datetime, end: datetime) -> List[Attendance]:
        """Get rows created in [start, end) using ORM"""
        return db.query(Attendance).filter(
            and_(
                Attendance.created_at >= start,
                Attendance.created_at < end
            )
        ).order_by(Attendance.created_at.asc()).all()

    def get_latest_for_user(
        self,
        db: Session,
        user_id: str,
        start: datetime,
        end: datetime
    ) -> Optional[Attendance]:
        """Most recent row for a user created in [start, end)"""
        return db.query(Attendance).filter(
            and_(
                Attendance.user_id == user_id,
                Attendance.created_at >= start,
                Attendance.created_at < end
            )
        ).order_by(Attendance.created_at.desc()).first()

    def get_open_records(self, db: Session) -> List[Attendance]:
        """Rows that are checked in but not checked out"""
        return db.query(Attendance).filter(
            and_(
                Attendance.check_in_time.isnot(None),
                Attendance.check_out_time.is_(None)
            )
        ).all()

    def create_check_in(
        self,
        db: Session,
        user_id: str,
        attendance_date: date,
        check_in_time: datetime,
        status: str,
        location: Optional[str]
    ) -> bool:
        """
        Insert the first row of the day for a user.
        Returns False if a row for that day already exists (concurrent scan).
        """
        try:
            db.add(Attendance(
                user_id=user_id,
                attendance_date=attendance_date,
                check_in_time=check_in_time,
                status=status,
                location=location
            ))
            db.commit()
            return True
        except IntegrityError:
            db.rollback()
            return False

    def mark_check_in(
        self,
        db: Session,
        attendance_id: str,
        check_in_time: datetime,
        status: str,
        location: Optional[str]
    ) -> bool:
        """
        Record a check-in on an existing row in one conditional UPDATE

        Returns:
            bool: False if the row was already checked in (or is gone)
        """
        updated = db.query(Attendance).filter(
            and_(
                Attendance.attendance_id == attendance_id,
                Attendance.check_in_time.is_(None)
            )
        ).update(
            {"check_in_time": check_in_time, "status": status, "location": location},
            synchronize_session=False
        )
        db.commit()
        return updated == 1

    def mark_check_out(
        self,
        db: Session,
        attendance_id: str,
        check_out_time: datetime,
        status: str
    ) -> bool:
        """
        Record a check-out in one conditional UPDATE

        Returns:
            bool: False if the row has no check-in (or is gone)
        """
        updated = db.query(Attendance).filter(
            and_(
                Attendance.attendance_id == attendance_id,
                Attendance.check_in_time.isnot(None)
            )
        ).update(
            {"check_out_time": check_out_time, "status": status},
            synchronize_session=False
        )
        db.commit()
        return updated == 1

    def update_status(self, db: Session, attendance_id: str, status: str) -> None:
        db.query(Attendance).filter(
            Attendance.attendance_id == attendance_id
        ).update({"status": status}, synchronize_session=False)
        db.commit()

    def create_absent_rows(self, db: Session, user_ids: List[str], attendance_date: date) -> List[Attendance]:
        """Seed one absent row per user for the new day"""
        return self.bulk_create(db, [
            {
                "user_id": user_id,
                "attendance_date": attendance_date,
                "status": "absent",
                "check_in_time": None,
                "check_out_time": None,
                "location": None
            }
            for user_id in user_ids
        ])

    def delete_for_user(self, db: Session, user_id: str) -> int:
        deleted = db.query(Attendance).filter(
            Attendance.user_id == user_id
        ).delete(synchronize_session=False)
        db.commit()
        return deleted
