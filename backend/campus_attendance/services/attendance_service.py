"""Attendance decision engine: self-marking, teacher corrections and cancellations."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping, Optional

from campus_attendance.models.attendance import AttendanceRecord, AttendanceStatus, MarkedBy
from campus_attendance.models.class_session import ClassSession, ClassStatus
from campus_attendance.models.user import User
from campus_attendance.services.biometric_service import BiometricMatcher
from campus_attendance.services.class_window_service import ClassWindowEvaluator, WindowVerdict
from campus_attendance.services.decision import (
    CancelClassRequest, Decision, MarkAttendanceRequest, RejectionReason,
    UpdateAttendanceRequest
)
from campus_attendance.services.geofence_service import GeofenceChecker, GeoPoint
from campus_attendance.services.repositories import (
    AttendanceRepository, ClassRepository, DuplicateAttendanceError, UserRepository
)

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class EngineSettings:
    """Tunables for the decision engine."""
    match_threshold: float = 0.6
    default_radius_meters: float = 50
    late_grace_minutes: int = 10
    end_grace_minutes: int = 5

    @classmethod
    def from_config(cls, config: Mapping) -> 'EngineSettings':
        """Build settings from a Flask config mapping."""
        return cls(
            match_threshold=config.get('FACE_MATCH_THRESHOLD', cls.match_threshold),
            default_radius_meters=config.get('DEFAULT_ATTENDANCE_RADIUS', cls.default_radius_meters),
            late_grace_minutes=config.get('LATE_GRACE_MINUTES', cls.late_grace_minutes),
            end_grace_minutes=config.get('END_GRACE_MINUTES', cls.end_grace_minutes)
        )

_WINDOW_REJECTIONS = {
    WindowVerdict.REJECTED_EARLY: RejectionReason.REJECTED_EARLY,
    WindowVerdict.REJECTED_CLOSED: RejectionReason.REJECTED_CLOSED,
    WindowVerdict.REJECTED_CANCELLED: RejectionReason.CANCELLED,
}

class AttendanceDecisionEngine:
    """
    Decide whether an attendance event is accepted and with which status.

    Checks run cheapest first: identity, class state, eligibility, time window,
    geofence, duplicate record, then the biometric scan over the class's
    candidate pool. Every expected failure comes back as a rejected
    ``Decision``; only data-store errors propagate as exceptions.

    The engine never commits. Callers own the unit of work.
    """

    def __init__(
        self,
        settings: EngineSettings,
        users: UserRepository,
        classes: ClassRepository,
        attendance: AttendanceRepository,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.settings = settings
        self.users = users
        self.classes = classes
        self.attendance = attendance
        self.clock = clock
        self.matcher = BiometricMatcher(settings.match_threshold)
        self.window_evaluator = ClassWindowEvaluator(
            default_late_grace_minutes=settings.late_grace_minutes,
            default_end_grace_minutes=settings.end_grace_minutes
        )

    # =================== SELF-MARKING ===================

    def mark_attendance(self, request: MarkAttendanceRequest) -> Decision:
        """Run the full marking pipeline for a student's attempt."""
        decision = self._mark(request)
        self._log_decision('mark', request.user_id, request.class_id, decision)
        return decision

    def _mark(self, request: MarkAttendanceRequest) -> Decision:
        student = self.users.find_by_id(request.user_id)
        if student is None or not student.is_student() or not student.is_active:
            return Decision.reject(RejectionReason.UNAUTHORIZED, "Unauthorized")

        session = self.classes.find_by_id(request.class_id)
        if session is None:
            return Decision.reject(RejectionReason.NOT_FOUND, "Class not found")
        if session.is_cancelled():
            return Decision.reject(
                RejectionReason.CANCELLED,
                "This class has been cancelled",
                cancellation_reason=session.cancellation_reason
            )

        rejection = self._check_eligibility(student, session)
        if rejection is not None:
            return rejection

        now = self.clock()
        evaluation = self.window_evaluator.evaluate(session, now)
        if not evaluation.is_open:
            reason = _WINDOW_REJECTIONS[evaluation.verdict]
            return Decision.reject(reason, evaluation.reason.capitalize())

        center = GeoPoint(session.latitude, session.longitude)
        radius = session.attendance_radius_meters
        if radius is None:
            radius = self.settings.default_radius_meters
        location = GeofenceChecker.verify_location(request.location, center, radius)
        if not location['is_inside']:
            return Decision.reject(
                RejectionReason.OUT_OF_RANGE,
                f"You are {location['distance']:.0f}m away; must be within {radius:.0f}m",
                distance_meters=round(location['distance'], 1),
                radius_meters=radius
            )

        if self.attendance.find(student.id, session.id) is not None:
            return Decision.reject(
                RejectionReason.ALREADY_MARKED,
                "Attendance already marked for this class"
            )

        pool = self.users.find_active_by_course_semester(session.course, session.semester)
        match = self.matcher.find_best_match(
            request.face_descriptor,
            ((candidate.id, candidate.face_descriptor) for candidate in pool)
        )
        if match is None:
            return Decision.reject(RejectionReason.FACE_NOT_RECOGNIZED, "Face not recognized")
        if match.candidate_id != student.id:
            logger.warning(
                "Identity mismatch on class %s: claimed user %s matched user %s",
                session.id, student.id, match.candidate_id
            )
            return Decision.reject(
                RejectionReason.IDENTITY_MISMATCH,
                "Face does not match the signed-in account; you cannot mark attendance for others"
            )

        status = (
            AttendanceStatus.PRESENT
            if evaluation.verdict == WindowVerdict.PRESENT
            else AttendanceStatus.LATE
        )
        record = AttendanceRecord(
            student_id=student.id,
            class_id=session.id,
            status=status,
            marked_at=now,
            marked_by=MarkedBy.SELF,
            latitude=request.location.latitude,
            longitude=request.location.longitude,
            biometric_match_score=match.distance
        )
        try:
            self.attendance.create(record)
        except DuplicateAttendanceError:
            return Decision.reject(
                RejectionReason.ALREADY_MARKED,
                "Attendance already marked for this class"
            )

        if session.status == ClassStatus.SCHEDULED:
            session.status = ClassStatus.ONGOING
            self.classes.save(session)

        if status == AttendanceStatus.PRESENT:
            message = "Attendance marked successfully: present"
        else:
            message = "Attendance marked as late: you arrived after the grace period"
        return Decision.accept(message, status=status, record=record)

    # =================== TEACHER CORRECTIONS ===================

    def update_attendance(self, request: UpdateAttendanceRequest) -> Decision:
        """Set a student present or absent for a class the teacher owns."""
        decision = self._update(request)
        self._log_decision('update', request.teacher_id, request.class_id, decision)
        return decision

    def _update(self, request: UpdateAttendanceRequest) -> Decision:
        session = self.classes.find_by_id(request.class_id)
        if session is None:
            return Decision.reject(RejectionReason.NOT_FOUND, "Class not found")
        if not session.is_owned_by(request.teacher_id):
            return Decision.reject(RejectionReason.FORBIDDEN, "You do not teach this class")
        if session.is_cancelled():
            return Decision.reject(
                RejectionReason.CANCELLED,
                "Attendance of a cancelled class cannot be edited"
            )

        student = self.users.find_by_id(request.student_id)
        if student is None or not student.is_student():
            return Decision.reject(RejectionReason.NOT_FOUND, "Student not found")

        rejection = self._check_eligibility(student, session)
        if rejection is not None:
            return rejection

        now = self.clock()
        status = AttendanceStatus.PRESENT if request.present else AttendanceStatus.ABSENT

        record = self.attendance.find(student.id, session.id)
        if record is None:
            record = AttendanceRecord(
                student_id=student.id,
                class_id=session.id,
                marked_at=now,
                marked_by=MarkedBy.teacher(request.teacher_id)
            )
            self._apply_correction(record, status, request, now)
            try:
                self.attendance.create(record)
            except DuplicateAttendanceError:
                # A self-mark landed between the lookup and the insert
                record = self.attendance.find(student.id, session.id)
                self._apply_correction(record, status, request, now)
                self.attendance.save(record)
        else:
            self._apply_correction(record, status, request, now)
            self.attendance.save(record)

        return Decision.accept(
            f"Attendance updated: {status.value}",
            status=status,
            record=record
        )

    @staticmethod
    def _apply_correction(record: AttendanceRecord, status: AttendanceStatus,
                          request: UpdateAttendanceRequest, now: datetime) -> None:
        record.status = status
        record.last_modified_by = request.teacher_id
        record.last_modified_at = now
        record.modification_reason = request.reason or "Manual update by teacher"

    # =================== CLASS LIFECYCLE ===================

    def cancel_class(self, request: CancelClassRequest) -> Decision:
        """Cancel a class and excuse every attendance record already taken."""
        decision = self._cancel(request)
        self._log_decision('cancel', request.teacher_id, request.class_id, decision)
        return decision

    def _cancel(self, request: CancelClassRequest) -> Decision:
        session, rejection = self._owned_session(request.teacher_id, request.class_id)
        if rejection is not None:
            return rejection

        now = self.clock()
        session.cancel(request.teacher_id, request.reason, now)
        self.classes.save(session)

        excused = self.attendance.mark_class_excused(
            session.id,
            note=f"Class cancelled: {request.reason}",
            modified_by=request.teacher_id,
            modified_at=now
        )
        logger.info("Class %s cancelled; %d attendance records excused", session.id, excused)

        return Decision.accept(
            "Class cancelled successfully",
            records_excused=excused
        )

    def complete_class(self, teacher_id: int, class_id: int) -> Decision:
        """Close a class for good."""
        decision = self._complete(teacher_id, class_id)
        self._log_decision('complete', teacher_id, class_id, decision)
        return decision

    def _complete(self, teacher_id: int, class_id: int) -> Decision:
        session, rejection = self._owned_session(teacher_id, class_id)
        if rejection is not None:
            return rejection

        session.status = ClassStatus.COMPLETED
        self.classes.save(session)
        return Decision.accept("Class marked as completed")

    # =================== HELPERS ===================

    def _owned_session(self, teacher_id: int, class_id: int):
        """Load a session the teacher may still change, or a rejection."""
        session = self.classes.find_by_id(class_id)
        if session is None:
            return None, Decision.reject(RejectionReason.NOT_FOUND, "Class not found")
        if not session.is_owned_by(teacher_id):
            return None, Decision.reject(RejectionReason.FORBIDDEN, "You do not teach this class")
        if session.is_cancelled():
            return None, Decision.reject(RejectionReason.CANCELLED, "Class is already cancelled")
        if session.is_completed():
            return None, Decision.reject(RejectionReason.CLASS_COMPLETED, "Class is already completed")
        return session, None

    @staticmethod
    def _check_eligibility(student: User, session: ClassSession) -> Optional[Decision]:
        if student.course != session.course or student.semester != session.semester:
            return Decision.reject(
                RejectionReason.INELIGIBLE_COURSE,
                "This class is not available for your semester/course"
            )
        if not student.is_enrolled_for(session.date):
            return Decision.reject(
                RejectionReason.NOT_ENROLLED,
                "Student was not enrolled on the date of this class"
            )
        return None

    @staticmethod
    def _log_decision(action: str, user_id: int, class_id: int, decision: Decision) -> None:
        if decision.accepted:
            logger.info(
                "%s accepted for user %s on class %s (%s)",
                action, user_id, class_id,
                decision.status.value if decision.status else 'ok'
            )
        else:
            logger.info(
                "%s rejected for user %s on class %s: %s",
                action, user_id, class_id, decision.reason.code
            )
