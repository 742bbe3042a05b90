"""Class session model with geofence and marking-window settings."""
from datetime import datetime
from enum import Enum
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class ClassStatus(Enum):
    """Class session lifecycle states."""
    SCHEDULED = 'scheduled'
    ONGOING = 'ongoing'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

class ClassSession(BaseModel):
    """A scheduled teaching session for one course/semester."""
    
    __tablename__ = 'class_sessions'
    
    subject_id = db.Column(db.Integer, db.ForeignKey('subjects.id'), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    course = db.Column(db.String(50), nullable=False)
    semester = db.Column(db.Integer, nullable=False)
    
    # Wall-clock schedule, never converted between time zones
    date = db.Column(db.Date, nullable=False)
    start_time = db.Column(db.String(5), nullable=False)  # HH:MM
    end_time = db.Column(db.String(5), nullable=False)  # HH:MM
    
    # Geofence; unset radius and grace periods fall back to the configured defaults
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    attendance_radius_meters = db.Column(db.Float, nullable=True)
    
    # Marking window
    late_grace_minutes = db.Column(db.Integer, nullable=True)
    end_grace_minutes = db.Column(db.Integer, nullable=True)
    
    status = db.Column(db.Enum(ClassStatus), nullable=False, default=ClassStatus.SCHEDULED)
    cancellation_reason = db.Column(db.Text, nullable=True)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    cancelled_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    
    __table_args__ = (
        db.Index('ix_class_sessions_teacher_date', 'teacher_id', 'date'),
        db.Index('ix_class_sessions_course_semester_date', 'course', 'semester', 'date'),
    )
    
    # Relationships
    subject = db.relationship('Subject', backref=db.backref('class_sessions', lazy='dynamic'))
    teacher = db.relationship('User', foreign_keys=[teacher_id])
    attendance_records = db.relationship('AttendanceRecord', backref='class_session', lazy='dynamic')
    
    def is_cancelled(self) -> bool:
        return self.status == ClassStatus.CANCELLED
    
    def is_completed(self) -> bool:
        return self.status == ClassStatus.COMPLETED
    
    def is_owned_by(self, teacher_id: int) -> bool:
        return self.teacher_id == teacher_id
    
    def cancel(self, teacher_id: int, reason: str, when: datetime) -> None:
        """Move the session to its terminal cancelled state."""
        self.status = ClassStatus.CANCELLED
        self.cancellation_reason = reason
        self.cancelled_at = when
        self.cancelled_by = teacher_id
    
    def to_dict(self):
        """Convert to dictionary."""
        data = super().to_dict(exclude=['latitude', 'longitude'])
        data['location'] = {
            'latitude': self.latitude,
            'longitude': self.longitude
        }
        data['subject_name'] = self.subject.name if self.subject else None
        return data
    
    def __repr__(self):
        return f'<ClassSession {self.id} {self.date} {self.start_time}-{self.end_time}>'
