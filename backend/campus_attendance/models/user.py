"""User model for students, teachers and admins."""
import math
from enum import Enum
from werkzeug.security import generate_password_hash, check_password_hash
from campus_attendance import db
from campus_attendance.models.base import BaseModel

DESCRIPTOR_LENGTH = 128

class UserRole(Enum):
    """User roles enumeration."""
    STUDENT = 'student'
    TEACHER = 'teacher'
    ADMIN = 'admin'

class User(BaseModel):
    """User model for all system users."""
    
    __tablename__ = 'users'
    
    # Basic Information
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(UserRole), nullable=False, default=UserRole.STUDENT, index=True)
    
    # Academic info (students only)
    course = db.Column(db.String(50), nullable=True)
    semester = db.Column(db.Integer, nullable=True)
    enrollment_date = db.Column(db.Date, nullable=True)
    
    # 128 floats produced by the client-side face model
    face_descriptor = db.Column(db.JSON, nullable=True)
    
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    
    __table_args__ = (
        db.Index('ix_users_course_semester', 'course', 'semester'),
    )
    
    # Relationships
    attendance_records = db.relationship(
        'AttendanceRecord',
        backref='student',
        lazy='dynamic',
        foreign_keys='AttendanceRecord.student_id'
    )
    
    def set_password(self, password: str) -> None:
        """Set user password with hashing."""
        self.password_hash = generate_password_hash(password)
    
    def check_password(self, password: str) -> bool:
        """Check if provided password matches user's password."""
        return check_password_hash(self.password_hash, password)
    
    def is_teacher(self) -> bool:
        """Check if user is a teacher."""
        return self.role in [UserRole.TEACHER, UserRole.ADMIN]
    
    def is_student(self) -> bool:
        """Check if user is a student."""
        return self.role == UserRole.STUDENT
    
    def has_valid_descriptor(self) -> bool:
        """A descriptor is usable only when it holds exactly 128 finite numbers."""
        descriptor = self.face_descriptor
        if not isinstance(descriptor, list) or len(descriptor) != DESCRIPTOR_LENGTH:
            return False
        return all(
            isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
            for value in descriptor
        )
    
    def is_enrolled_for(self, class_date) -> bool:
        """Check the student was enrolled on or before ``class_date``."""
        return self.enrollment_date is None or self.enrollment_date <= class_date
    
    def to_dict(self, exclude: list = None) -> dict:
        """Convert to dictionary excluding sensitive data."""
        default_exclude = ['password_hash', 'face_descriptor']
        exclude = (exclude or []) + default_exclude
        
        result = super().to_dict(exclude=exclude)
        result['face_registered'] = self.has_valid_descriptor()
        
        return result
    
    def __repr__(self) -> str:
        return f'<User {self.email}>'
