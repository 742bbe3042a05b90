"""Attendance API endpoints."""
from flask import Blueprint, current_app, g, request
from flask_jwt_extended import jwt_required
from campus_attendance import db, limiter
from campus_attendance.api import common
from campus_attendance.services.decision import MarkAttendanceRequest, UpdateAttendanceRequest
from campus_attendance.services.report_service import ReportService
from campus_attendance.utils.decorators import student_required, teacher_required
from campus_attendance.utils.helpers import success_response, error_response
from campus_attendance.utils.validators import ValidationError

attendance_bp = Blueprint('attendance', __name__)

def _mark_rate_limit() -> str:
    return current_app.config['MARK_ATTENDANCE_RATE_LIMIT']

@attendance_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Attendance service is running')

@attendance_bp.route('/mark', methods=['POST'])
@jwt_required()
@limiter.limit(_mark_rate_limit)
@student_required
def mark_attendance():
    """Mark the signed-in student's attendance with face descriptor and GPS."""
    try:
        mark_request = MarkAttendanceRequest.from_json(
            g.current_user.id, request.get_json(silent=True)
        )
    except ValidationError as e:
        return error_response("Validation failed", 400, errors=e.errors)

    try:
        decision = common.get_engine().mark_attendance(mark_request)
        if decision.accepted:
            db.session.commit()
        else:
            db.session.rollback()
        return common.decision_response(decision, success_code=201)
    except Exception:
        db.session.rollback()
        current_app.logger.exception(
            "Unexpected error marking attendance for user %s", g.current_user.id
        )
        return error_response("Server error", 500)

@attendance_bp.route('/update', methods=['POST'])
@jwt_required()
@teacher_required
def update_attendance():
    """Manually set a student present or absent."""
    try:
        update_request = UpdateAttendanceRequest.from_json(
            g.current_user.id, request.get_json(silent=True)
        )
    except ValidationError as e:
        return error_response("Validation failed", 400, errors=e.errors)

    try:
        decision = common.get_engine().update_attendance(update_request)
        if decision.accepted:
            db.session.commit()
        else:
            db.session.rollback()
        return common.decision_response(decision)
    except Exception:
        db.session.rollback()
        current_app.logger.exception(
            "Unexpected error updating attendance of class %s", update_request.class_id
        )
        return error_response("Server error", 500)

@attendance_bp.route('/student/history', methods=['GET'])
@jwt_required()
@student_required
def get_student_history():
    """Get the signed-in student's attendance history."""
    history = ReportService.student_history(g.current_user.id)
    return success_response(data=history, message=f"Found {len(history)} records")

@attendance_bp.route('/student/analytics', methods=['GET'])
@jwt_required()
@student_required
def get_student_analytics():
    """Per-subject attendance percentages for the signed-in student."""
    today = common.current_time().date()
    analytics = ReportService.student_analytics(g.current_user, today)
    return success_response(data=analytics)

@attendance_bp.route('/pending', methods=['GET'])
@jwt_required()
@student_required
def get_pending_classes():
    """Classes from today onwards that the student has not marked yet."""
    today = common.current_time().date()
    classes = ReportService.pending_classes(g.current_user, today)
    return success_response(
        data=[session.to_dict() for session in classes],
        message=f"Found {len(classes)} pending classes"
    )

@attendance_bp.route('/class/<int:class_id>', methods=['GET'])
@jwt_required()
@teacher_required
def get_class_attendance(class_id):
    """Roster of a class with each student's attendance status."""
    roster, error, status_code = ReportService.class_roster(g.current_user.id, class_id)
    if error:
        return error_response(error, status_code)
    return success_response(data=roster)

def _subject_filters():
    """Read course, semester and subject from the query string."""
    course = (request.args.get('course') or '').strip()
    semester = request.args.get('semester', type=int)
    subject = (request.args.get('subject') or '').strip()
    if not course or semester is None or not subject:
        raise ValidationError(["course, semester and subject are required"])
    return course, semester, subject

@attendance_bp.route('/teacher/analytics', methods=['GET'])
@jwt_required()
@teacher_required
def get_teacher_analytics():
    """Per-subject attendance percentages across the teacher's classes."""
    return success_response(data=ReportService.teacher_analytics(g.current_user.id))

@attendance_bp.route('/teacher/students', methods=['GET'])
@jwt_required()
@teacher_required
def get_teacher_students_attendance():
    """Student-by-class attendance matrix for one subject, monthly or overall."""
    try:
        course, semester, subject = _subject_filters()
        overall = request.args.get('overall', 'false').lower() == 'true'
        month = request.args.get('month', type=int)
        year = request.args.get('year', type=int)
        if not overall:
            if month is None or year is None:
                raise ValidationError(["month and year are required for the monthly view"])
            if not 1 <= month <= 12:
                raise ValidationError(["month must be between 1 and 12"])
    except ValidationError as e:
        return error_response("Validation failed", 400, errors=e.errors)

    matrix = ReportService.student_attendance_matrix(
        g.current_user.id, course, semester, subject,
        month=None if overall else month,
        year=None if overall else year
    )
    return success_response(data=matrix)

@attendance_bp.route('/teacher/options', methods=['GET'])
@jwt_required()
@teacher_required
def get_teacher_options():
    """Courses, semesters and subjects the teacher is assigned to."""
    return success_response(data=ReportService.teacher_options(g.current_user.id))

@attendance_bp.route('/teacher/months', methods=['GET'])
@jwt_required()
@teacher_required
def get_attendance_months():
    """Months with classes for one of the teacher's subjects."""
    try:
        course, semester, subject = _subject_filters()
    except ValidationError as e:
        return error_response("Validation failed", 400, errors=e.errors)

    months = ReportService.attendance_months(g.current_user.id, course, semester, subject)
    return success_response(data=months)
