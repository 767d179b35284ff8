"""
Attendance Endpoints - Dashboard reads and scheduled jobs
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.db.session import get_db
from app.services.attendance_service import AttendanceService
from app.services.daily_reset_service import DailyResetService
from app.schemas import (
    AttendanceRecord,
    AttendanceHistoryRecord,
    DailyResetResponse,
    ArchiveResponse,
    NoCheckoutResponse,
    DataResponse,
    PaginationResponse
)
from app.api.deps import require_min_role_level, require_cron_key
from app.core.config import settings
from atams.encryption import encrypt_response_data

router = APIRouter()
attendance_service = AttendanceService()
daily_reset_service = DailyResetService()


@router.get(
    "/today",
    response_model=DataResponse[List[AttendanceRecord]],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def get_today_attendance(
    db: Session = Depends(get_db)
):
    """
    Get today's attendance rows with their effective status

    **Authorization:**
    - Requires role level >= 50 (Admin or above)
    """
    records = attendance_service.get_today(db)

    response = DataResponse(
        success=True,
        message="Today's attendance retrieved successfully",
        data=records
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/history",
    response_model=PaginationResponse[AttendanceHistoryRecord],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(50))]
)
async def get_attendance_history(
    user_id: Optional[str] = Query(None, description="Filter by user ID"),
    date_from: Optional[date] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="End date (YYYY-MM-DD)"),
    status: Optional[str] = Query(None, description="Filter by status"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    sort: str = Query("desc", pattern="^(asc|desc)$", description="Sort order by attendance date"),
    db: Session = Depends(get_db)
):
    """
    Get archived attendance (Admin only)

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Query Parameters:**
    - user_id: Filter by specific user
    - date_from/date_to: Attendance date range (YYYY-MM-DD)
    - status: present, late, early_out, no_checkout or absent
    - limit: Max records (1-1000, default 100)
    - offset: Skip records (default 0)
    - sort: asc or desc (default desc)
    """
    records = attendance_service.get_history_admin(
        db, user_id, date_from, date_to, status, offset, limit, sort
    )

    total = attendance_service.count_history_admin(
        db, user_id, date_from, date_to, status
    )

    response = PaginationResponse(
        success=True,
        message="Attendance history retrieved successfully",
        data=records,
        total=total,
        page=offset // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)


@router.post(
    "/daily-reset",
    response_model=DailyResetResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_cron_key)]
)
async def daily_reset(
    db: Session = Depends(get_db)
):
    """
    Archive all live attendance under yesterday's date and create an
    absent row per user for today

    **Authentication:**
    - Requires X-Cron-Key header matching CRON_API_KEY

    **Errors:**
    - 500: Archive failed, archived but not deleted, or new rows not created
    """
    return daily_reset_service.reset(db)


@router.post(
    "/archive",
    response_model=ArchiveResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_cron_key)]
)
async def archive_previous_day(
    db: Session = Depends(get_db)
):
    """
    Archive and delete the rows created during the previous day

    **Authentication:**
    - Requires X-Cron-Key header matching CRON_API_KEY
    """
    return daily_reset_service.archive_previous_day(db)


@router.post(
    "/mark-no-checkout",
    response_model=NoCheckoutResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_cron_key)]
)
async def mark_no_checkout(
    db: Session = Depends(get_db)
):
    """
    Mark checked-in rows without check-out as no_checkout

    **Authentication:**
    - Requires X-Cron-Key header matching CRON_API_KEY
    """
    return attendance_service.mark_no_checkout(db)
