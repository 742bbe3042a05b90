"""Class scheduling service."""
from typing import Dict, List, Optional, Tuple

from flask import current_app

from campus_attendance import db
from campus_attendance.models.class_session import ClassSession, ClassStatus
from campus_attendance.models.subject import Subject
from campus_attendance.models.user import User
from campus_attendance.services.class_window_service import parse_wall_clock
from campus_attendance.utils.validators import ValidationError, Validator

class ClassService:
    """Service for scheduling and listing class sessions."""

    @staticmethod
    def create_class(teacher_id: int, data: Dict) -> Tuple[Optional[ClassSession], Optional[str], int]:
        """
        Schedule a class for a subject assigned to the teacher.

        Returns ``(session, error_message, status_code)``. Malformed input
        raises ``ValidationError`` listing every problem.
        """
        if not isinstance(data, dict):
            raise ValidationError(["Request body must be a JSON object"])

        required = ['subject_id', 'date', 'start_time', 'end_time', 'latitude', 'longitude']
        errors = Validator.validate_required_fields(data, required)['errors']
        if errors:
            raise ValidationError(errors)

        config = current_app.config
        errors.extend(Validator.validate_int(data['subject_id'], 'subject_id', minimum=1))

        class_date = Validator.parse_date(data['date'])
        if class_date is None:
            errors.append("date must use the YYYY-MM-DD format")

        times_valid = True
        for field in ('start_time', 'end_time'):
            if not Validator.validate_time(data[field]):
                errors.append(f"{field} must use the 24-hour HH:MM format")
                times_valid = False
        if times_valid and parse_wall_clock(data['end_time']) <= parse_wall_clock(data['start_time']):
            errors.append("end_time must be after start_time")

        errors.extend(Validator.validate_coordinates(data['latitude'], data['longitude']))

        radius = data.get('attendance_radius_meters', config['DEFAULT_ATTENDANCE_RADIUS'])
        if not Validator.is_number(radius) or not (
                config['MIN_ATTENDANCE_RADIUS'] <= radius <= config['MAX_ATTENDANCE_RADIUS']):
            errors.append(
                f"attendance_radius_meters must be between {config['MIN_ATTENDANCE_RADIUS']} "
                f"and {config['MAX_ATTENDANCE_RADIUS']}"
            )

        late_grace = data.get('late_grace_minutes', config['LATE_GRACE_MINUTES'])
        errors.extend(Validator.validate_int(late_grace, 'late_grace_minutes', 0, 60))
        end_grace = data.get('end_grace_minutes', config['END_GRACE_MINUTES'])
        errors.extend(Validator.validate_int(end_grace, 'end_grace_minutes', 0, 30))

        if errors:
            raise ValidationError(errors)

        subject = db.session.get(Subject, data['subject_id'])
        if not subject:
            return None, "Subject not found", 404
        if subject.teacher_id != teacher_id:
            return None, "You are not assigned to this subject", 403

        session = ClassSession(
            subject_id=subject.id,
            teacher_id=teacher_id,
            course=subject.course,
            semester=subject.semester,
            date=class_date,
            start_time=data['start_time'],
            end_time=data['end_time'],
            latitude=float(data['latitude']),
            longitude=float(data['longitude']),
            attendance_radius_meters=float(radius),
            late_grace_minutes=late_grace,
            end_grace_minutes=end_grace,
            status=ClassStatus.SCHEDULED
        )
        db.session.add(session)
        db.session.commit()

        current_app.logger.info(
            "Class %s scheduled by teacher %s for %s %s-%s",
            session.id, teacher_id, session.date, session.start_time, session.end_time
        )
        return session, None, 201

    @staticmethod
    def get_teacher_classes(teacher_id: int) -> List[ClassSession]:
        """Classes taught by a teacher, earliest first."""
        return ClassSession.query.filter_by(teacher_id=teacher_id).order_by(
            ClassSession.date, ClassSession.start_time
        ).all()

    @staticmethod
    def get_student_classes(student: User) -> List[ClassSession]:
        """Classes for a student's course and semester, earliest first."""
        return ClassSession.query.filter_by(
            course=student.course,
            semester=student.semester
        ).order_by(ClassSession.date, ClassSession.start_time).all()
