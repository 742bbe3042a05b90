"""Class session API endpoints."""
from flask import Blueprint, current_app, g, request
from flask_jwt_extended import jwt_required
from campus_attendance import db
from campus_attendance.api import common
from campus_attendance.services.class_service import ClassService
from campus_attendance.services.decision import CancelClassRequest
from campus_attendance.utils.decorators import student_required, teacher_required
from campus_attendance.utils.helpers import success_response, error_response
from campus_attendance.utils.validators import ValidationError

classes_bp = Blueprint('classes', __name__)

@classes_bp.route('/', methods=['POST'])
@jwt_required()
@teacher_required
def create_class():
    """Schedule a class for one of the teacher's subjects."""
    try:
        session, error, status_code = ClassService.create_class(
            g.current_user.id, request.get_json(silent=True)
        )
    except ValidationError as e:
        return error_response("Validation failed", 400, errors=e.errors)

    if error:
        return error_response(error, status_code)
    return success_response(
        data=session.to_dict(),
        message="Class scheduled successfully",
        status_code=status_code
    )

@classes_bp.route('/teacher', methods=['GET'])
@jwt_required()
@teacher_required
def get_teacher_classes():
    """All classes taught by the signed-in teacher."""
    classes = ClassService.get_teacher_classes(g.current_user.id)
    return success_response(data=[session.to_dict() for session in classes])

@classes_bp.route('/student', methods=['GET'])
@jwt_required()
@student_required
def get_student_classes():
    """All classes for the signed-in student's course and semester."""
    classes = ClassService.get_student_classes(g.current_user)
    return success_response(data=[session.to_dict() for session in classes])

@classes_bp.route('/<int:class_id>/cancel', methods=['POST'])
@jwt_required()
@teacher_required
def cancel_class(class_id):
    """Cancel a class and excuse its existing attendance records."""
    try:
        cancel_request = CancelClassRequest.from_json(
            g.current_user.id, class_id, request.get_json(silent=True)
        )
    except ValidationError as e:
        return error_response("Validation failed", 400, errors=e.errors)

    try:
        decision = common.get_engine().cancel_class(cancel_request)
        if decision.accepted:
            db.session.commit()
        else:
            db.session.rollback()
        return common.decision_response(decision)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Unexpected error cancelling class %s", class_id)
        return error_response("Server error", 500)

@classes_bp.route('/<int:class_id>/complete', methods=['POST'])
@jwt_required()
@teacher_required
def complete_class(class_id):
    """Mark a class as completed."""
    try:
        decision = common.get_engine().complete_class(g.current_user.id, class_id)
        if decision.accepted:
            db.session.commit()
        else:
            db.session.rollback()
        return common.decision_response(decision)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Unexpected error completing class %s", class_id)
        return error_response("Server error", 500)
