"""Attendance record model with marking and audit details."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class AttendanceStatus(Enum):
    """Attendance status enumeration."""
    PRESENT = 'present'
    ABSENT = 'absent'
    LATE = 'late'
    EXCUSED = 'excused'

@dataclass(frozen=True)
class MarkedBy:
    """Who created a record: the student themself or a teacher."""
    teacher_id: Optional[int] = None
    
    @property
    def is_self(self) -> bool:
        return self.teacher_id is None
    
    @classmethod
    def teacher(cls, teacher_id: int) -> 'MarkedBy':
        return cls(teacher_id=teacher_id)
    
    def to_dict(self) -> dict:
        if self.is_self:
            return {'kind': 'self'}
        return {'kind': 'teacher', 'teacher_id': self.teacher_id}

MarkedBy.SELF = MarkedBy()

class AttendanceRecord(BaseModel):
    """One attendance outcome per (student, class session)."""
    
    __tablename__ = 'attendance_records'
    
    student_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    class_id = db.Column(db.Integer, db.ForeignKey('class_sessions.id'), nullable=False, index=True)
    status = db.Column(db.Enum(AttendanceStatus), nullable=False)
    
    marked_at = db.Column(db.DateTime, nullable=False)
    marked_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    
    # Location snapshot at marking time
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    
    # Distance of the accepted face match
    biometric_match_score = db.Column(db.Float, nullable=True)
    
    # Audit trail for manual edits and cancellations
    last_modified_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    last_modified_at = db.Column(db.DateTime, nullable=True)
    modification_reason = db.Column(db.Text, nullable=True)
    
    __table_args__ = (
        db.UniqueConstraint('student_id', 'class_id', name='uq_attendance_student_class'),
    )
    
    @property
    def marked_by(self) -> MarkedBy:
        if self.marked_by_id is None:
            return MarkedBy.SELF
        return MarkedBy.teacher(self.marked_by_id)
    
    @marked_by.setter
    def marked_by(self, value: MarkedBy) -> None:
        self.marked_by_id = value.teacher_id
    
    def to_dict(self):
        """Convert to dictionary."""
        data = super().to_dict(exclude=['latitude', 'longitude', 'marked_by_id'])
        data['marked_by'] = self.marked_by.to_dict()
        data['location'] = None
        if self.latitude is not None and self.longitude is not None:
            data['location'] = {
                'latitude': self.latitude,
                'longitude': self.longitude
            }
        return data
    
    def __repr__(self):
        return f'<AttendanceRecord {self.student_id}-{self.class_id} {self.status.value}>'
