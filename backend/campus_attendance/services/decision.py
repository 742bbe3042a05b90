"""Decision and request types exchanged with the attendance engine."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from campus_attendance.models.attendance import AttendanceRecord, AttendanceStatus
from campus_attendance.services.geofence_service import GeoPoint
from campus_attendance.utils.validators import ValidationError, Validator

class RejectionReason(Enum):
    """Modeled rejection outcomes, with whether the caller may retry."""
    UNAUTHORIZED = ('unauthorized', False)
    NOT_FOUND = ('not_found', False)
    CANCELLED = ('cancelled', False)
    INELIGIBLE_COURSE = ('ineligible_course', False)
    NOT_ENROLLED = ('not_enrolled', False)
    REJECTED_EARLY = ('rejected_early', True)
    REJECTED_CLOSED = ('rejected_closed', True)
    OUT_OF_RANGE = ('out_of_range', True)
    ALREADY_MARKED = ('already_marked', False)
    FACE_NOT_RECOGNIZED = ('face_not_recognized', True)
    IDENTITY_MISMATCH = ('identity_mismatch', False)
    FORBIDDEN = ('forbidden', False)
    CLASS_COMPLETED = ('class_completed', False)

    def __init__(self, code: str, retryable: bool):
        self.code = code
        self.retryable = retryable

@dataclass
class Decision:
    """Outcome of an engine operation."""
    accepted: bool
    message: str
    status: Optional[AttendanceStatus] = None
    reason: Optional[RejectionReason] = None
    details: Dict[str, Any] = field(default_factory=dict)
    record: Optional[AttendanceRecord] = None

    @classmethod
    def accept(cls, message: str, status: AttendanceStatus = None,
               record: AttendanceRecord = None, **details) -> 'Decision':
        return cls(accepted=True, message=message, status=status,
                   record=record, details=details)

    @classmethod
    def reject(cls, reason: RejectionReason, message: str, **details) -> 'Decision':
        return cls(accepted=False, message=message, reason=reason, details=details)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'accepted': self.accepted,
            'message': self.message,
            'status': self.status.value if self.status else None,
            'reason': self.reason.code if self.reason else None,
            'retryable': self.reason.retryable if self.reason else False,
        }
        if self.details:
            data['details'] = self.details
        if self.record is not None:
            data['record'] = self.record.to_dict()
        return data

def _require_json_object(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError(["Request body must be a JSON object"])
    return payload

@dataclass(frozen=True)
class MarkAttendanceRequest:
    """A student's self-marking attempt."""
    user_id: int
    class_id: int
    face_descriptor: List[float]
    location: GeoPoint

    @classmethod
    def from_json(cls, user_id: int, payload: Any) -> 'MarkAttendanceRequest':
        data = _require_json_object(payload)
        required = ['face_descriptor', 'latitude', 'longitude', 'class_id']
        errors = Validator.validate_required_fields(data, required)['errors']
        if not errors:
            errors.extend(Validator.validate_descriptor(data['face_descriptor']))
            errors.extend(Validator.validate_coordinates(data['latitude'], data['longitude']))
            errors.extend(Validator.validate_int(data['class_id'], 'class_id', minimum=1))
        if errors:
            raise ValidationError(errors)

        return cls(
            user_id=user_id,
            class_id=data['class_id'],
            face_descriptor=[float(value) for value in data['face_descriptor']],
            location=GeoPoint(float(data['latitude']), float(data['longitude']))
        )

@dataclass(frozen=True)
class UpdateAttendanceRequest:
    """A teacher's manual correction of one student's attendance."""
    teacher_id: int
    class_id: int
    student_id: int
    present: bool
    reason: Optional[str] = None

    @classmethod
    def from_json(cls, teacher_id: int, payload: Any) -> 'UpdateAttendanceRequest':
        data = _require_json_object(payload)
        errors = Validator.validate_required_fields(data, ['class_id', 'student_id'])['errors']
        if not errors:
            errors.extend(Validator.validate_int(data['class_id'], 'class_id', minimum=1))
            errors.extend(Validator.validate_int(data['student_id'], 'student_id', minimum=1))
        if not isinstance(data.get('present'), bool):
            errors.append("present must be true or false")
        reason = data.get('reason')
        if reason is not None and not isinstance(reason, str):
            errors.append("reason must be a string")
        if errors:
            raise ValidationError(errors)

        return cls(
            teacher_id=teacher_id,
            class_id=data['class_id'],
            student_id=data['student_id'],
            present=data['present'],
            reason=reason.strip() if reason else None
        )

@dataclass(frozen=True)
class CancelClassRequest:
    """A teacher cancelling one of their class sessions."""
    teacher_id: int
    class_id: int
    reason: str

    @classmethod
    def from_json(cls, teacher_id: int, class_id: int, payload: Any) -> 'CancelClassRequest':
        data = _require_json_object(payload if payload is not None else {})
        reason = data.get('reason')
        if not isinstance(reason, str) or not reason.strip():
            raise ValidationError(["reason is required"])
        if len(reason) > 500:
            raise ValidationError(["reason cannot exceed 500 characters"])

        return cls(teacher_id=teacher_id, class_id=class_id, reason=reason.strip())
