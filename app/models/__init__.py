from .department import Department
from .group import Group
from .user import User
from .attendance import Attendance
from .attendance_history import AttendanceHistory

__all__ = [
    "Department",
    "Group",
    "User",
    "Attendance",
    "AttendanceHistory"
]
