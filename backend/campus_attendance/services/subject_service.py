"""Subject administration: listing and teacher assignment."""
from typing import List, Optional, Tuple

from flask import current_app

from campus_attendance import db
from campus_attendance.models.subject import Subject
from campus_attendance.models.user import User, UserRole

class SubjectService:
    """Admin-side operations on subjects."""

    @staticmethod
    def list_subjects() -> List[Subject]:
        return Subject.query.order_by(Subject.course, Subject.semester, Subject.name).all()

    @staticmethod
    def list_teachers() -> List[User]:
        return User.query.filter_by(role=UserRole.TEACHER).order_by(User.name).all()

    @staticmethod
    def assign_teacher(teacher_id: int, subject_id: int) -> Tuple[Optional[Subject], Optional[str], int]:
        """Assign a teacher to a subject; returns ``(subject, error_message, status_code)``."""
        teacher = db.session.get(User, teacher_id)
        if not teacher or teacher.role != UserRole.TEACHER:
            return None, "Invalid teacher ID", 400

        subject = db.session.get(Subject, subject_id)
        if not subject:
            return None, "Subject not found", 404

        subject.teacher_id = teacher.id
        db.session.commit()

        current_app.logger.info("Subject %s assigned to teacher %s", subject.id, teacher.id)
        return subject, None, 200
