"""Shared fixtures for the attendance tests."""
import math
from datetime import date, datetime

import pytest
from flask_jwt_extended import create_access_token

from campus_attendance import create_app, db
from campus_attendance.models import (
    AttendanceRecord, AttendanceStatus, ClassSession, ClassStatus, Subject, User, UserRole
)
from campus_attendance.services.attendance_service import AttendanceDecisionEngine, EngineSettings
from campus_attendance.services.repositories import (
    SqlAttendanceRepository, SqlClassRepository, SqlUserRepository
)

CLASS_CENTER = (12.9, 77.6)
CLASS_DATE = date(2025, 3, 10)

def descriptor(value: float = 0.1, delta: float = 0.0):
    """A 128-value descriptor, optionally nudged in its first dimension."""
    values = [value] * 128
    values[0] += delta
    return values

def point_north_of(center, meters: float):
    """Latitude/longitude ``meters`` due north of ``center``."""
    latitude, longitude = center
    return latitude + math.degrees(meters / 6371000), longitude

@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()

@pytest.fixture
def teacher(app):
    user = User(email='teacher@example.com', name='Teacher One', role=UserRole.TEACHER)
    user.set_password('password123')
    return user.save()

@pytest.fixture
def other_teacher(app):
    user = User(email='other@example.com', name='Teacher Two', role=UserRole.TEACHER)
    user.set_password('password123')
    return user.save()

@pytest.fixture
def make_student(app):
    """Factory for students of MCA semester 1 by default."""
    counter = {'n': 0}

    def _make(course='MCA', semester=1, face=None, enrollment_date=date(2025, 1, 1),
              is_active=True, name=None):
        counter['n'] += 1
        user = User(
            email=f"student{counter['n']}@example.com",
            name=name or f"Student {counter['n']}",
            role=UserRole.STUDENT,
            course=course,
            semester=semester,
            face_descriptor=face,
            enrollment_date=enrollment_date,
            is_active=is_active
        )
        user.set_password('password123')
        return user.save()

    return _make

@pytest.fixture
def student(make_student):
    return make_student(face=descriptor(0.1), name='Alice')

@pytest.fixture
def subject(app, teacher):
    return Subject(name='Data Structures', course='MCA', semester=1, teacher_id=teacher.id).save()

@pytest.fixture
def make_class(app, teacher, subject):
    """Factory for class sessions; defaults to 2025-03-10 09:00-10:00 at CLASS_CENTER."""
    def _make(**overrides):
        fields = dict(
            subject_id=subject.id,
            teacher_id=teacher.id,
            course='MCA',
            semester=1,
            date=CLASS_DATE,
            start_time='09:00',
            end_time='10:00',
            latitude=CLASS_CENTER[0],
            longitude=CLASS_CENTER[1],
            attendance_radius_meters=50,
            late_grace_minutes=10,
            end_grace_minutes=5,
            status=ClassStatus.SCHEDULED
        )
        fields.update(overrides)
        return ClassSession(**fields).save()

    return _make

@pytest.fixture
def class_session(make_class):
    return make_class()

@pytest.fixture
def make_record(app):
    def _make(student, session, status=AttendanceStatus.PRESENT):
        return AttendanceRecord(
            student_id=student.id,
            class_id=session.id,
            status=status,
            marked_at=datetime(2025, 3, 10, 9, 5)
        ).save()

    return _make

@pytest.fixture
def make_engine(app):
    """Build an engine over the SQL repositories with a fixed clock."""
    def _make(now=datetime(2025, 3, 10, 9, 5), settings=None, **repositories):
        return AttendanceDecisionEngine(
            settings or EngineSettings(),
            users=repositories.get('users', SqlUserRepository()),
            classes=repositories.get('classes', SqlClassRepository()),
            attendance=repositories.get('attendance', SqlAttendanceRepository()),
            clock=lambda: now
        )

    return _make

@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(identity=str(user.id))
        return {'Authorization': f'Bearer {token}'}

    return _headers
