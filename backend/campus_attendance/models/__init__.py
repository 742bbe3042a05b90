"""Models package with all models."""
from .base import BaseModel
from .user import User, UserRole
from .subject import Subject
from .class_session import ClassSession, ClassStatus
from .attendance import AttendanceRecord, AttendanceStatus, MarkedBy

__all__ = [
    'BaseModel', 'User', 'UserRole', 'Subject',
    'ClassSession', 'ClassStatus',
    'AttendanceRecord', 'AttendanceStatus', 'MarkedBy'
]
