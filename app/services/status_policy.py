"""
Attendance Status Policy - the single place attendance status is computed

Used by the check-in/check-out write path, the no-checkout job and the
admin read path, so the dashboard never recomputes status on its own.
"""
from datetime import date, datetime, time
from typing import Optional

from app.core.clock import to_local
from app.models.attendance import Attendance

PRESENT = "present"
LATE = "late"
EARLY_OUT = "early_out"
NO_CHECKOUT = "no_checkout"
ABSENT = "absent"

ATTENDED_STATUSES = (PRESENT, LATE, EARLY_OUT, NO_CHECKOUT)


def _minute(moment: datetime) -> time:
    """Times are compared at minute resolution"""
    return moment.time().replace(second=0, microsecond=0)


class AttendanceStatusPolicy:
    def check_in_status(self, local_now: datetime, start_time: Optional[time]) -> str:
        if start_time and _minute(local_now) > start_time:
            return LATE
        return PRESENT

    def check_out_status(
        self,
        local_now: datetime,
        end_time: Optional[time],
        current_status: Optional[str]
    ) -> str:
        if end_time and _minute(local_now) < end_time:
            return EARLY_OUT
        return LATE if current_status == LATE else PRESENT

    def effective_status(
        self,
        record: Attendance,
        end_time: Optional[time],
        local_now: datetime,
        today: date
    ) -> str:
        """
        Status to report for a live row

        A checked-in row without check-out becomes no_checkout once its
        local day is over or the working day has ended.
        """
        if record.check_in_time is None or record.check_out_time is not None:
            return record.status

        if record.created_at is not None and to_local(record.created_at).date() < today:
            return NO_CHECKOUT

        if end_time and _minute(local_now) > end_time:
            return NO_CHECKOUT

        return record.status
