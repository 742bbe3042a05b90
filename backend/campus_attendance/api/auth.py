"""Authentication API: password login and profile."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from campus_attendance import db, limiter
from campus_attendance.api import common
from campus_attendance.models.user import User
from campus_attendance.utils.helpers import success_response, error_response
from campus_attendance.utils.validators import ValidationError
from campus_attendance.services.auth_service import AuthService

auth_bp = Blueprint("auth", __name__)

@auth_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return success_response(message="Auth service is running")

@auth_bp.route("/register", methods=["POST"])
@limiter.limit("5 per minute")
def register():
    """Register a student or teacher with their face descriptor."""
    try:
        user, error = AuthService.register(
            request.get_json(silent=True),
            today=common.current_time().date()
        )
    except ValidationError as e:
        return error_response("Validation failed", 400, errors=e.errors)

    if error:
        return error_response(error, 400)

    return success_response(
        data=user,
        message="User registered successfully",
        status_code=201
    )

@auth_bp.route("/login", methods=["POST"])
@limiter.limit("5 per minute")
def login():
    """Login for students, teachers and admins."""
    data = request.get_json(silent=True)

    if not data:
        return error_response("Request body must be JSON", 400)

    email = (data.get("email") or "").strip()
    password = data.get("password") or ""

    if not email or not password:
        return error_response("Email and password are required", 400)

    result, error = AuthService.login(email, password)

    if error:
        return error_response(error, 401)

    return success_response(
        data=result,
        message="Login successful"
    )

@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def get_current_user():
    """Get current user profile."""
    try:
        user = db.session.get(User, int(get_jwt_identity()))
    except (TypeError, ValueError):
        user = None

    if not user:
        return error_response("User not found", 404)

    return success_response(data=user.to_dict())
