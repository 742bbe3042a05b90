"""Admin API: subject listing and teacher assignment."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from campus_attendance.services.subject_service import SubjectService
from campus_attendance.utils.decorators import admin_required
from campus_attendance.utils.helpers import success_response, error_response
from campus_attendance.utils.validators import Validator

admin_bp = Blueprint('admin', __name__)

@admin_bp.route('/assign-teacher', methods=['POST'])
@jwt_required()
@admin_required
def assign_teacher():
    """Assign a teacher to a subject."""
    data = request.get_json(silent=True) or {}
    errors = Validator.validate_required_fields(data, ['teacher_id', 'subject_id'])['errors']
    if not errors:
        errors.extend(Validator.validate_int(data['teacher_id'], 'teacher_id', minimum=1))
        errors.extend(Validator.validate_int(data['subject_id'], 'subject_id', minimum=1))
    if errors:
        return error_response("Validation failed", 400, errors=errors)

    subject, error, status_code = SubjectService.assign_teacher(data['teacher_id'], data['subject_id'])
    if error:
        return error_response(error, status_code)
    return success_response(data=subject.to_dict(), message="Teacher assigned successfully")

@admin_bp.route('/subjects', methods=['GET'])
@jwt_required()
@admin_required
def get_subjects():
    """All subjects with their assigned teachers."""
    return success_response(data=[subject.to_dict() for subject in SubjectService.list_subjects()])

@admin_bp.route('/teachers', methods=['GET'])
@jwt_required()
@admin_required
def get_teachers():
    """All teacher accounts."""
    return success_response(data=[teacher.to_dict() for teacher in SubjectService.list_teachers()])
