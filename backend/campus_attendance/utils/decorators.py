"""Custom decorators for authorization."""
from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from campus_attendance import db
from campus_attendance.models.user import User, UserRole
from campus_attendance.utils.helpers import error_response

def _load_current_user():
    """Resolve the JWT subject to an active user, or None."""
    verify_jwt_in_request()
    try:
        user_id = int(get_jwt_identity())
    except (TypeError, ValueError):
        return None
    user = db.session.get(User, user_id)
    if not user or not user.is_active:
        return None
    return user

def role_required(*roles: UserRole):
    """Decorator to require one of the given roles; exposes the user as ``g.current_user``."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = _load_current_user()
            
            if not user:
                return error_response("User not found", 401)
            
            if user.role not in roles:
                allowed = ', '.join(role.value for role in roles)
                return error_response(f"Access restricted to: {allowed}", 403)
            
            g.current_user = user
            return f(*args, **kwargs)
        return decorated_function
    return decorator

def student_required(f):
    """Decorator to require student role."""
    return role_required(UserRole.STUDENT)(f)

def teacher_required(f):
    """Decorator to require teacher role."""
    return role_required(UserRole.TEACHER)(f)

def admin_required(f):
    """Decorator to require admin role."""
    return role_required(UserRole.ADMIN)(f)
