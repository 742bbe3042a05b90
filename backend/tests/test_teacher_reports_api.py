"""Test teacher reporting endpoints."""
import json
from datetime import date

import pytest

from campus_attendance.models import AttendanceStatus, ClassStatus, Subject
from campus_attendance.services.report_service import ReportService

SUBJECT_FILTERS = {'course': 'MCA', 'semester': 1, 'subject': 'Data Structures'}

@pytest.fixture
def march_classes(make_class):
    """Three Data Structures classes in March and one in April."""
    return [
        make_class(date=date(2025, 3, 10)),
        make_class(date=date(2025, 3, 12)),
        make_class(date=date(2025, 3, 14)),
        make_class(date=date(2025, 4, 2)),
    ]

def test_teacher_analytics(client, auth_headers, make_student, make_record, teacher, march_classes):
    alice = make_student(name='Alice')
    bob = make_student(name='Bob')
    make_record(alice, march_classes[0])
    make_record(alice, march_classes[1], AttendanceStatus.LATE)
    make_record(bob, march_classes[0], AttendanceStatus.ABSENT)

    response = client.get('/api/attendance/teacher/analytics', headers=auth_headers(teacher))

    assert response.status_code == 200
    assert json.loads(response.data)['data'] == [{
        'subject': 'Data Structures',
        'total_classes': 4,
        'students': 2,
        'percentage': 25.0
    }]

def test_teacher_analytics_skips_cancelled_classes(make_class, teacher):
    make_class(status=ClassStatus.CANCELLED)
    make_class(date=date(2025, 3, 11))

    analytics = ReportService.teacher_analytics(teacher.id)

    assert analytics[0]['total_classes'] == 1
    assert analytics[0]['percentage'] == 0

def test_teacher_analytics_without_classes(client, auth_headers, other_teacher):
    response = client.get('/api/attendance/teacher/analytics', headers=auth_headers(other_teacher))

    assert json.loads(response.data)['data'] == []

def test_monthly_students_attendance(client, auth_headers, make_student, make_record,
                                     teacher, march_classes):
    alice = make_student(name='Alice')
    make_student(name='Bob', enrollment_date=date(2025, 3, 11))
    make_student(name='Carol', course='MBA')
    make_record(alice, march_classes[0])
    make_record(alice, march_classes[2], AttendanceStatus.LATE)

    response = client.get('/api/attendance/teacher/students',
        query_string=dict(SUBJECT_FILTERS, month=3, year=2025),
        headers=auth_headers(teacher))

    assert response.status_code == 200
    rows = json.loads(response.data)['data']
    assert [row['student']['name'] for row in rows] == ['Alice', 'Bob']
    alice_row, bob_row = rows
    assert alice_row['attendance'] == {
        '2025-03-10 09:00-10:00': 'present',
        '2025-03-12 09:00-10:00': 'absent',
        '2025-03-14 09:00-10:00': 'late'
    }
    assert alice_row['total_classes'] == 3
    assert alice_row['attended'] == 2
    assert alice_row['percentage'] == 66.67
    assert bob_row['attendance']['2025-03-10 09:00-10:00'] is None
    assert bob_row['total_classes'] == 2
    assert bob_row['percentage'] == 0

def test_overall_students_attendance(client, auth_headers, make_student, teacher, march_classes):
    make_student(name='Alice')

    response = client.get('/api/attendance/teacher/students',
        query_string=dict(SUBJECT_FILTERS, overall='true'),
        headers=auth_headers(teacher))

    rows = json.loads(response.data)['data']
    assert rows[0]['total_classes'] == 4

def test_students_attendance_validation(client, auth_headers, teacher):
    headers = auth_headers(teacher)

    response = client.get('/api/attendance/teacher/students?course=MCA', headers=headers)
    assert response.status_code == 400
    assert json.loads(response.data)['errors'] == ["course, semester and subject are required"]

    response = client.get('/api/attendance/teacher/students',
        query_string=SUBJECT_FILTERS, headers=headers)
    assert response.status_code == 400
    assert json.loads(response.data)['errors'] == [
        "month and year are required for the monthly view"
    ]

    response = client.get('/api/attendance/teacher/students',
        query_string=dict(SUBJECT_FILTERS, month=13, year=2025), headers=headers)
    assert response.status_code == 400

def test_students_attendance_other_teachers_classes_hidden(client, auth_headers, make_student,
                                                           other_teacher, march_classes):
    make_student(name='Alice')

    response = client.get('/api/attendance/teacher/students',
        query_string=dict(SUBJECT_FILTERS, overall='true'),
        headers=auth_headers(other_teacher))

    assert json.loads(response.data)['data'] == []

def test_teacher_options(client, auth_headers, teacher, subject):
    Subject(name='Algorithms', course='MCA', semester=2, teacher_id=teacher.id).save()
    Subject(name='Networks', course='MBA', semester=1).save()

    response = client.get('/api/attendance/teacher/options', headers=auth_headers(teacher))

    assert json.loads(response.data)['data'] == {
        'courses': ['MCA'],
        'semesters': [1, 2],
        'subjects': ['Algorithms', 'Data Structures']
    }

def test_attendance_months(client, auth_headers, teacher, march_classes):
    response = client.get('/api/attendance/teacher/months',
        query_string=SUBJECT_FILTERS, headers=auth_headers(teacher))

    assert response.status_code == 200
    assert json.loads(response.data)['data'] == ['2025-03', '2025-04']

def test_teacher_reports_require_teacher(client, auth_headers, student):
    response = client.get('/api/attendance/teacher/options', headers=auth_headers(student))

    assert response.status_code == 403
