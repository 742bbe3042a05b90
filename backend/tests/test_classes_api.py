"""Test class scheduling and lifecycle endpoints."""
import json
from datetime import datetime

import pytest

from campus_attendance import db
from campus_attendance.api import common
from campus_attendance.models import AttendanceRecord, AttendanceStatus, ClassSession, ClassStatus
from campus_attendance.models.subject import Subject
from conftest import CLASS_CENTER, descriptor

@pytest.fixture
def class_payload(subject):
    return {
        'subject_id': subject.id,
        'date': '2025-03-10',
        'start_time': '09:00',
        'end_time': '10:00',
        'latitude': CLASS_CENTER[0],
        'longitude': CLASS_CENTER[1]
    }

def test_create_class(client, auth_headers, teacher, class_payload):
    """Test scheduling a class with defaults."""
    response = client.post('/api/classes/', json=class_payload, headers=auth_headers(teacher))

    assert response.status_code == 201
    data = json.loads(response.data)['data']
    assert data['status'] == 'scheduled'
    assert data['course'] == 'MCA'
    assert data['attendance_radius_meters'] == 50
    assert data['late_grace_minutes'] == 10
    assert data['end_grace_minutes'] == 5
    assert ClassSession.query.count() == 1

def test_create_class_validation(client, auth_headers, teacher, class_payload):
    headers = auth_headers(teacher)

    response = client.post('/api/classes/', json={}, headers=headers)
    assert response.status_code == 400
    assert 'subject_id is required' in json.loads(response.data)['errors']

    bad = dict(class_payload, start_time='10:00', end_time='09:00')
    response = client.post('/api/classes/', json=bad, headers=headers)
    assert 'end_time must be after start_time' in json.loads(response.data)['errors']

    bad = dict(class_payload, attendance_radius_meters=5)
    response = client.post('/api/classes/', json=bad, headers=headers)
    assert response.status_code == 400

    bad = dict(class_payload, date='10/03/2025')
    response = client.post('/api/classes/', json=bad, headers=headers)
    assert 'date must use the YYYY-MM-DD format' in json.loads(response.data)['errors']

def test_create_class_for_unassigned_subject(client, auth_headers, other_teacher, class_payload):
    response = client.post('/api/classes/', json=class_payload, headers=auth_headers(other_teacher))

    assert response.status_code == 403
    assert json.loads(response.data)['message'] == 'You are not assigned to this subject'

def test_create_class_missing_subject(client, auth_headers, teacher, class_payload):
    payload = dict(class_payload, subject_id=9999)

    response = client.post('/api/classes/', json=payload, headers=auth_headers(teacher))

    assert response.status_code == 404

def test_student_cannot_create_class(client, auth_headers, student, class_payload):
    response = client.post('/api/classes/', json=class_payload, headers=auth_headers(student))

    assert response.status_code == 403

def test_list_teacher_classes(client, auth_headers, teacher, other_teacher, make_class):
    make_class(start_time='11:00', end_time='12:00')
    make_class()
    other_subject = Subject(name='Networks', course='MCA', semester=1,
                            teacher_id=other_teacher.id).save()
    make_class(subject_id=other_subject.id, teacher_id=other_teacher.id)

    response = client.get('/api/classes/teacher', headers=auth_headers(teacher))

    data = json.loads(response.data)['data']
    assert [item['start_time'] for item in data] == ['09:00', '11:00']

def test_list_student_classes(client, auth_headers, make_student, make_class):
    make_class()
    make_class(course='MBA')
    senior = make_student()

    response = client.get('/api/classes/student', headers=auth_headers(senior))

    data = json.loads(response.data)['data']
    assert len(data) == 1
    assert data[0]['course'] == 'MCA'

def test_cancel_class(client, auth_headers, make_student, make_record, teacher, class_session):
    for _ in range(3):
        make_record(make_student(), class_session)

    response = client.post(f'/api/classes/{class_session.id}/cancel',
        json={'reason': 'Power outage'},
        headers=auth_headers(teacher))

    assert response.status_code == 200
    data = json.loads(response.data)
    assert data['message'] == 'Class cancelled successfully'
    assert data['data']['details']['records_excused'] == 3
    assert db.session.get(ClassSession, class_session.id).status == ClassStatus.CANCELLED
    statuses = {record.status for record in AttendanceRecord.query.all()}
    assert statuses == {AttendanceStatus.EXCUSED}

def test_cancel_then_mark(client, monkeypatch, auth_headers, teacher, student, class_session):
    monkeypatch.setattr(common, 'current_time', lambda: datetime(2025, 3, 10, 9, 5))
    client.post(f'/api/classes/{class_session.id}/cancel',
        json={'reason': 'Holiday'},
        headers=auth_headers(teacher))

    response = client.post('/api/attendance/mark',
        json={
            'class_id': class_session.id,
            'face_descriptor': descriptor(0.1),
            'latitude': CLASS_CENTER[0],
            'longitude': CLASS_CENTER[1]
        },
        headers=auth_headers(student))

    assert response.status_code == 409
    data = json.loads(response.data)
    assert data['reason'] == 'cancelled'
    assert data['details']['cancellation_reason'] == 'Holiday'

def test_cancel_requires_reason(client, auth_headers, teacher, class_session):
    response = client.post(f'/api/classes/{class_session.id}/cancel',
        json={}, headers=auth_headers(teacher))

    assert response.status_code == 400
    assert json.loads(response.data)['errors'] == ['reason is required']

def test_cancel_twice(client, auth_headers, teacher, class_session):
    headers = auth_headers(teacher)
    url = f'/api/classes/{class_session.id}/cancel'
    client.post(url, json={'reason': 'Holiday'}, headers=headers)

    response = client.post(url, json={'reason': 'Again'}, headers=headers)

    assert response.status_code == 409
    assert json.loads(response.data)['reason'] == 'cancelled'

def test_cancel_by_other_teacher(client, auth_headers, other_teacher, class_session):
    response = client.post(f'/api/classes/{class_session.id}/cancel',
        json={'reason': 'Holiday'}, headers=auth_headers(other_teacher))

    assert response.status_code == 403
    assert json.loads(response.data)['reason'] == 'forbidden'

def test_complete_class(client, auth_headers, teacher, class_session):
    headers = auth_headers(teacher)
    url = f'/api/classes/{class_session.id}/complete'

    assert client.post(url, headers=headers).status_code == 200
    response = client.post(url, headers=headers)

    assert response.status_code == 409
    assert json.loads(response.data)['reason'] == 'class_completed'
