"""Data-store gateways used by the attendance engine."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from campus_attendance import db
from campus_attendance.models.attendance import AttendanceRecord, AttendanceStatus
from campus_attendance.models.class_session import ClassSession
from campus_attendance.models.user import User, UserRole

class DuplicateAttendanceError(Exception):
    """A record already exists for this (student, class) pair."""

class UserRepository(ABC):

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    def find_active_by_course_semester(self, course: str, semester: int) -> List[User]:
        """Active students of one course/semester, ordered by id."""

class ClassRepository(ABC):

    @abstractmethod
    def find_by_id(self, class_id: int) -> Optional[ClassSession]:
        ...

    @abstractmethod
    def save(self, session: ClassSession) -> ClassSession:
        ...

class AttendanceRepository(ABC):

    @abstractmethod
    def find(self, student_id: int, class_id: int) -> Optional[AttendanceRecord]:
        ...

    @abstractmethod
    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert a new record; raise DuplicateAttendanceError on a key clash."""

    @abstractmethod
    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        ...

    @abstractmethod
    def mark_class_excused(self, class_id: int, note: str, modified_by: int,
                           modified_at: datetime) -> int:
        """Set every record of a class to excused; return how many rows changed."""

class SqlUserRepository(UserRepository):

    def find_by_id(self, user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    def find_active_by_course_semester(self, course: str, semester: int) -> List[User]:
        return User.query.filter_by(
            role=UserRole.STUDENT,
            course=course,
            semester=semester,
            is_active=True
        ).order_by(User.id).all()

class SqlClassRepository(ClassRepository):

    def find_by_id(self, class_id: int) -> Optional[ClassSession]:
        return db.session.get(ClassSession, class_id)

    def save(self, session: ClassSession) -> ClassSession:
        db.session.add(session)
        db.session.flush()
        return session

class SqlAttendanceRepository(AttendanceRepository):

    def find(self, student_id: int, class_id: int) -> Optional[AttendanceRecord]:
        return AttendanceRecord.query.filter_by(
            student_id=student_id,
            class_id=class_id
        ).first()

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        savepoint = db.session.begin_nested()
        try:
            db.session.add(record)
            db.session.flush()
        except IntegrityError as e:
            savepoint.rollback()
            raise DuplicateAttendanceError(
                f"attendance already recorded for student {record.student_id} "
                f"in class {record.class_id}"
            ) from e
        savepoint.commit()
        return record

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        db.session.add(record)
        db.session.flush()
        return record

    def mark_class_excused(self, class_id: int, note: str, modified_by: int,
                           modified_at: datetime) -> int:
        updated = AttendanceRecord.query.filter_by(class_id=class_id).update(
            {
                AttendanceRecord.status: AttendanceStatus.EXCUSED,
                AttendanceRecord.modification_reason: note,
                AttendanceRecord.last_modified_by: modified_by,
                AttendanceRecord.last_modified_at: modified_at,
            },
            synchronize_session='fetch'
        )
        db.session.flush()
        return updated
