from ..extensions import db
from .user import User, ROLES
from .coursework import Assignment, Submission
from .schedule import TimetableEntry, AttendanceRecord

__all__ = [
    "User", "ROLES", "Assignment", "Submission",
    "TimetableEntry", "AttendanceRecord",
]
