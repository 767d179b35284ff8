"""
Attendance Service - Check-in/check-out recording and attendance queries
"""
from typing import Dict, List, Optional
from datetime import date, time
from sqlalchemy.orm import Session

from app.repositories.user_repository import UserRepository
from app.repositories.group_repository import GroupRepository
from app.repositories.department_repository import DepartmentRepository
from app.repositories.attendance_repository import AttendanceRepository
from app.repositories.attendance_history_repository import AttendanceHistoryRepository
from app.services.geofence_service import GeofenceService, WorkSchedule
from app.services.status_policy import AttendanceStatusPolicy, NO_CHECKOUT
from app.schemas.attendance import (
    AttendanceRecord,
    AttendanceHistoryRecord,
    NoCheckoutResponse
)
from app.schemas.face_match import FaceScanResponse, MatchedUser
from app.core.clock import utc_now, to_local, local_today, local_day_bounds
from app.core.exceptions import AttendanceConflict
from app.models.attendance import Attendance
from app.models.user import User
from atams.logging import get_logger

logger = get_logger(__name__)

LOCATION_UNVERIFIABLE = "Unable to verify your assigned location. Please check with admin."


class AttendanceService:
    def __init__(self) -> None:
        self.user_repo = UserRepository()
        self.group_repo = GroupRepository()
        self.department_repo = DepartmentRepository()
        self.attendance_repo = AttendanceRepository()
        self.history_repo = AttendanceHistoryRepository()
        self.geofence = GeofenceService()
        self.policy = AttendanceStatusPolicy()

    def schedule_for_user(self, db: Session, user: User) -> WorkSchedule:
        """Resolve location, radius and working hours for a user"""
        group = self.group_repo.get_by_id(db, user.group_id)
        department = self.department_repo.get_by_id(db, user.department_id)
        return self.geofence.resolve_schedule(group, department)

    def get_today_record(self, db: Session, user_id: str) -> Optional[Attendance]:
        """Most recent row the user has for the current local day"""
        start, end = local_day_bounds(local_today())
        return self.attendance_repo.get_latest_for_user(db, user_id, start, end)

    def is_check_out(self, db: Session, user_id: str) -> bool:
        """A scan is a check-out iff today's latest row is checked in and not out"""
        record = self.get_today_record(db, user_id)
        return (
            record is not None
            and record.check_in_time is not None
            and record.check_out_time is None
        )

    def record_scan(
        self,
        db: Session,
        user: User,
        confidence: float,
        latitude: float,
        longitude: float
    ) -> FaceScanResponse:
        """
        Record a check-in or check-out for a matched face

        Args:
            db: Database session
            user: Matched user
            confidence: Face++ confidence for the match
            latitude: Scan latitude
            longitude: Scan longitude

        Returns:
            FaceScanResponse: Action taken and resulting status, or a
            location mismatch result

        Raises:
            AttendanceConflict: If the row changed before the conditional write
        """
        now = utc_now()
        local_now = to_local(now)
        matched_user = MatchedUser(user_id=user.user_id, name=user.full_name)

        schedule = self.schedule_for_user(db, user)
        existing = self.get_today_record(db, user.user_id)
        action = "check-out" if existing is not None and existing.check_in_time is not None else "check-in"

        try:
            fence = self.geofence.check(schedule, latitude, longitude)
        except ValueError as e:
            logger.error(
                f"Invalid assigned location for user {user.user_id}: {str(e)}",
                extra={'extra_data': {'source': schedule.source, 'action': action}}
            )
            return FaceScanResponse(
                matched=True,
                user=matched_user,
                confidence=confidence,
                action=action,
                error="Location unverifiable",
                message=LOCATION_UNVERIFIABLE
            )

        if not fence.allowed:
            logger.info(
                f"Location validation failed for user {user.user_id}",
                extra={'extra_data': {
                    'distance_m': round(fence.distance_m),
                    'radius_m': fence.radius_m,
                    'action': action
                }}
            )
            verb = "Check-out" if action == "check-out" else "Check-in"
            return FaceScanResponse(
                matched=True,
                user=matched_user,
                confidence=confidence,
                action=action,
                error="Location mismatch",
                message=f"{verb} is unsuccessful due to location mismatch. Pls try again, {user.full_name}"
            )

        if action == "check-in":
            status = self.policy.check_in_status(local_now, schedule.start_time)
            location = f"{latitude},{longitude}"
            if existing is None:
                recorded = self.attendance_repo.create_check_in(
                    db, user.user_id, local_now.date(), now, status, location
                )
            else:
                recorded = self.attendance_repo.mark_check_in(
                    db, existing.attendance_id, now, status, location
                )
            if not recorded:
                raise AttendanceConflict("Attendance was already checked in. Please try again.")
        else:
            status = self.policy.check_out_status(local_now, schedule.end_time, existing.status)
            if not self.attendance_repo.mark_check_out(db, existing.attendance_id, now, status):
                raise AttendanceConflict("Attendance record changed. Please try again.")

        logger.info(f"{action} recorded for user {user.user_id} with status {status}")

        return FaceScanResponse(
            matched=True,
            user=matched_user,
            confidence=confidence,
            action=action,
            status=status
        )

    def _end_time_lookup(self, db: Session):
        cache: Dict[str, Optional[time]] = {}

        def end_time_for(user_id: str) -> Optional[time]:
            if user_id not in cache:
                user = self.user_repo.get_by_id(db, user_id)
                cache[user_id] = self.schedule_for_user(db, user).end_time if user else None
            return cache[user_id]

        return end_time_for

    def get_today(self, db: Session) -> List[AttendanceRecord]:
        """Today's live rows, reported with their effective status"""
        now = utc_now()
        local_now = to_local(now)
        today = local_now.date()
        start, end = local_day_bounds(today)
        end_time_for = self._end_time_lookup(db)

        records = []
        for row in self.attendance_repo.get_created_between(db, start, end):
            record = AttendanceRecord.model_validate(row)
            record.status = self.policy.effective_status(
                row, end_time_for(row.user_id), local_now, today
            )
            records.append(record)
        return records

    def mark_no_checkout(self, db: Session) -> NoCheckoutResponse:
        """
        Flag checked-in rows that were never checked out

        Returns:
            NoCheckoutResponse: Number of rows updated and checked
        """
        local_now = to_local(utc_now())
        today = local_now.date()
        end_time_for = self._end_time_lookup(db)

        open_records = self.attendance_repo.get_open_records(db)
        if not open_records:
            return NoCheckoutResponse(message="No attendance records to update", updated=0, checked=0)

        updated = 0
        for record in open_records:
            if record.status == NO_CHECKOUT:
                continue
            status = self.policy.effective_status(record, end_time_for(record.user_id), local_now, today)
            if status == NO_CHECKOUT:
                self.attendance_repo.update_status(db, record.attendance_id, NO_CHECKOUT)
                updated += 1
                logger.info(f"Updated attendance {record.attendance_id} to no_checkout")

        return NoCheckoutResponse(
            message="Attendance status updated successfully",
            updated=updated,
            checked=len(open_records)
        )

    def get_history_admin(
        self,
        db: Session,
        user_id: str = None,
        date_from: date = None,
        date_to: date = None,
        status: str = None,
        skip: int = 0,
        limit: int = 100,
        sort: str = "desc"
    ) -> List[AttendanceHistoryRecord]:
        """Get archived attendance for admin (with filters)"""
        rows = self.history_repo.get_history_with_filters(
            db, user_id, date_from, date_to, status, skip, limit, sort
        )
        return [AttendanceHistoryRecord.model_validate(r) for r in rows]

    def count_history_admin(
        self,
        db: Session,
        user_id: str = None,
        date_from: date = None,
        date_to: date = None,
        status: str = None
    ) -> int:
        """Count archived attendance for admin (with filters)"""
        return self.history_repo.count_history_with_filters(
            db, user_id, date_from, date_to, status
        )
