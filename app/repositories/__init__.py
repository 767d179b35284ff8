from .user_repository import UserRepository
from .group_repository import GroupRepository
from .department_repository import DepartmentRepository
from .attendance_repository import AttendanceRepository
from .attendance_history_repository import AttendanceHistoryRepository

__all__ = [
    "UserRepository",
    "GroupRepository",
    "DepartmentRepository",
    "AttendanceRepository",
    "AttendanceHistoryRepository"
]
