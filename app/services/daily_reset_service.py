"""
Daily Reset Service - Archive live attendance and seed the new day

Runs from the scheduler. Each step commits on its own: a failure after
archival never rolls the archive back, it is reported so the rows can be
reconciled.
"""
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.repositories.user_repository import UserRepository
from app.repositories.attendance_repository import AttendanceRepository
from app.repositories.attendance_history_repository import AttendanceHistoryRepository
from app.schemas.attendance import DailyResetResponse, ArchiveResponse
from app.core.clock import utc_now, local_today, local_yesterday, local_day_bounds
from app.core.exceptions import ArchiveError, PartialFailure, CreateError
from app.models.attendance import Attendance
from atams.logging import get_logger

logger = get_logger(__name__)


class DailyResetService:
    def __init__(self) -> None:
        self.user_repo = UserRepository()
        self.attendance_repo = AttendanceRepository()
        self.history_repo = AttendanceHistoryRepository()

    def _archive_and_delete(self, db: Session, records: List[Attendance], attendance_date) -> int:
        """
        Copy rows into history, then delete them from the live table

        Returns:
            int: Number of live rows archived

        Raises:
            ArchiveError: If the history insert fails
            PartialFailure: If history was written but the delete failed
        """
        now = utc_now()
        try:
            inserted = self.history_repo.archive_records(db, records, attendance_date, now)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Archive failed: {str(e)}", exc_info=True)
            raise ArchiveError(details={"error": str(e)})

        logger.info(
            f"Archived {len(records)} attendance records for {attendance_date}",
            extra={'extra_data': {'inserted': inserted, 'skipped': len(records) - inserted}}
        )

        try:
            deleted = self.attendance_repo.delete_many(db, [r.attendance_id for r in records])
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Delete after archive failed: {str(e)}", exc_info=True)
            raise PartialFailure(details={"error": str(e), "archived": len(records)})

        logger.info(f"Deleted {deleted} archived rows from attendance")
        return len(records)

    def reset(self, db: Session) -> DailyResetResponse:
        """
        Archive every live row under yesterday's date, then create one
        absent row per user for today

        Raises:
            ArchiveError: If archival fails (live rows untouched)
            PartialFailure: If archived rows could not be deleted
            CreateError: If the new day's rows could not be created
        """
        today = local_today()
        yesterday = local_yesterday()
        logger.info(f"Starting daily attendance reset for {today}")

        records = self.attendance_repo.get_all(db)
        archived = 0
        if records:
            archived = self._archive_and_delete(db, records, yesterday)
        else:
            logger.info("No attendance records to archive")

        user_ids = self.user_repo.get_all_ids(db)
        if not user_ids:
            logger.warning("Daily reset found no users")
            return DailyResetResponse(
                message="Reset completed but no users found",
                date=today,
                archived=archived,
                created=0
            )

        try:
            created = self.attendance_repo.create_absent_rows(db, user_ids, today)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to create attendance records: {str(e)}", exc_info=True)
            raise CreateError(details={"error": str(e), "archived": archived})

        logger.info(f"Created {len(created)} absent attendance records for {today}")

        return DailyResetResponse(
            message="Daily attendance reset completed successfully",
            date=today,
            archived=archived,
            created=len(created)
        )

    def archive_previous_day(self, db: Session) -> ArchiveResponse:
        """Archive and delete only the rows created during the previous local day"""
        yesterday = local_yesterday()
        start, end = local_day_bounds(yesterday)

        records = self.attendance_repo.get_created_between(db, start, end)
        if not records:
            logger.info(f"No attendance records to archive for {yesterday}")
            return ArchiveResponse(message="No records to archive", date=yesterday, archived=0)

        archived = self._archive_and_delete(db, records, yesterday)
        return ArchiveResponse(
            message="Attendance archived successfully",
            date=yesterday,
            archived=archived,
            deleted=archived
        )
