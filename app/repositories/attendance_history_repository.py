"""
Attendance History Repository - Data access layer for archived attendance
"""
from typing import List
from datetime import date, datetime
from sqlalchemy.orm import Session
from sqlalchemy import and_

from atams.db import BaseRepository
from app.models.attendance import Attendance
from app.models.attendance_history import AttendanceHistory


class AttendanceHistoryRepository(BaseRepository[AttendanceHistory]):
    def __init__(self):
        super().__init__(AttendanceHistory)

    def get_archived_ids(self, db: Session, attendance_ids: List[str], attendance_date: date) -> set:
        """Attendance IDs already archived for the given date"""
        if not attendance_ids:
            return set()
        rows = db.query(AttendanceHistory.attendance_id).filter(
            and_(
                AttendanceHistory.attendance_date == attendance_date,
                AttendanceHistory.attendance_id.in_(attendance_ids)
            )
        ).all()
        return {row[0] for row in rows}

    def archive_records(
        self,
        db: Session,
        records: List[Attendance],
        attendance_date: date,
        archived_at: datetime
    ) -> int:
        """
        Copy live rows into history in one batch

        Rows already archived for attendance_date are skipped, so replaying
        an interrupted reset never duplicates history.

        Returns:
            int: Number of history rows inserted
        """
        already_archived = self.get_archived_ids(
            db, [r.attendance_id for r in records], attendance_date
        )
        pending = [
            {
                "attendance_id": r.attendance_id,
                "user_id": r.user_id,
                "check_in_time": r.check_in_time,
                "check_out_time": r.check_out_time,
                "status": r.status,
                "location": r.location,
                "attendance_date": attendance_date,
                "archived_at": archived_at,
                "created_at": r.created_at,
                "updated_at": r.updated_at
            }
            for r in records
            if r.attendance_id not in already_archived
        ]
        if pending:
            self.bulk_create(db, pending)
        return len(pending)

    def _filtered_query(
        self,
        db: Session,
        user_id: str = None,
        date_from: date = None,
        date_to: date = None,
        status: str = None
    ):
        query = db.query(AttendanceHistory)

        if user_id:
            query = query.filter(AttendanceHistory.user_id == user_id)
        if date_from:
            query = query.filter(AttendanceHistory.attendance_date >= date_from)
        if date_to:
            query = query.filter(AttendanceHistory.attendance_date <= date_to)
        if status:
            query = query.filter(AttendanceHistory.status == status)

        return query

    def get_history_with_filters(
        self,
        db: Session,
        user_id: str = None,
        date_from: date = None,
        date_to: date = None,
        status: str = None,
        skip: int = 0,
        limit: int = 100,
        sort: str = "desc"
    ) -> List[AttendanceHistory]:
        """Get history rows with various filters using ORM"""
        query = self._filtered_query(db, user_id, date_from, date_to, status)

        if sort.lower() == "asc":
            query = query.order_by(AttendanceHistory.attendance_date.asc())
        else:
            query = query.order_by(AttendanceHistory.attendance_date.desc())

        return query.offset(skip).limit(limit).all()

    def count_history_with_filters(
        self,
        db: Session,
        user_id: str = None,
        date_from: date = None,
        date_to: date = None,
        status: str = None
    ) -> int:
        return self._filtered_query(db, user_id, date_from, date_to, status).count()
