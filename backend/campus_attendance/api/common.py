"""Shared wiring between the HTTP layer and the attendance engine."""
from datetime import datetime

from flask import current_app

from campus_attendance.services.attendance_service import AttendanceDecisionEngine, EngineSettings
from campus_attendance.services.decision import Decision, RejectionReason
from campus_attendance.services.repositories import (
    SqlAttendanceRepository, SqlClassRepository, SqlUserRepository
)
from campus_attendance.utils.helpers import error_response, success_response

REASON_STATUS_CODES = {
    RejectionReason.UNAUTHORIZED: 401,
    RejectionReason.NOT_FOUND: 404,
    RejectionReason.CANCELLED: 409,
    RejectionReason.INELIGIBLE_COURSE: 403,
    RejectionReason.NOT_ENROLLED: 403,
    RejectionReason.REJECTED_EARLY: 400,
    RejectionReason.REJECTED_CLOSED: 400,
    RejectionReason.OUT_OF_RANGE: 403,
    RejectionReason.ALREADY_MARKED: 409,
    RejectionReason.FACE_NOT_RECOGNIZED: 401,
    RejectionReason.IDENTITY_MISMATCH: 403,
    RejectionReason.FORBIDDEN: 403,
    RejectionReason.CLASS_COMPLETED: 409,
}

def current_time() -> datetime:
    """Naive local wall-clock time, the frame class schedules are stored in."""
    return datetime.now()

def get_engine() -> AttendanceDecisionEngine:
    """Build an engine bound to the current app's settings and database session."""
    return AttendanceDecisionEngine(
        EngineSettings.from_config(current_app.config),
        users=SqlUserRepository(),
        classes=SqlClassRepository(),
        attendance=SqlAttendanceRepository(),
        clock=current_time
    )

def decision_response(decision: Decision, success_code: int = 200):
    """Translate an engine decision into the JSON envelope."""
    if decision.accepted:
        return success_response(
            data=decision.to_dict(),
            message=decision.message,
            status_code=success_code
        )

    extra = {}
    if decision.details:
        extra['details'] = decision.details
    return error_response(
        decision.message,
        REASON_STATUS_CODES[decision.reason],
        reason=decision.reason.code,
        retryable=decision.reason.retryable,
        **extra
    )
