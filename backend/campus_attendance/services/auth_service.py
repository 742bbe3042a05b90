"""Authentication service for user registration and login."""
from datetime import date
from typing import Dict, Optional, Tuple
from flask_jwt_extended import create_access_token
from campus_attendance import db
from campus_attendance.models.user import User, UserRole
from campus_attendance.utils.validators import ValidationError, Validator

SELF_REGISTRATION_ROLES = (UserRole.STUDENT, UserRole.TEACHER)

class AuthService:
    @staticmethod
    def validate_password(password: str) -> Tuple[bool, str]:
        """Validate password strength."""
        if len(password) < 6:
            return False, "Password must be at least 6 characters long"
        if len(password) > 128:
            return False, "Password cannot exceed 128 characters"
        return True, ""

    @staticmethod
    def register(data: Dict, today: date = None) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Register a student or teacher together with their face descriptor.

        Students must supply course, semester and a 128-value descriptor; their
        enrollment date is ``today``. Malformed input raises ``ValidationError``.
        """
        if not isinstance(data, dict):
            raise ValidationError(["Request body must be a JSON object"])

        required = ['name', 'email', 'password', 'role']
        errors = Validator.validate_required_fields(data, required)['errors']
        if errors:
            raise ValidationError(errors)

        name = data['name'].strip() if isinstance(data['name'], str) else ''
        if not 2 <= len(name) <= 100:
            errors.append("Name must be between 2 and 100 characters")

        email = data['email'].lower().strip() if isinstance(data['email'], str) else ''
        if not Validator.validate_email(email):
            errors.append("Invalid email format")

        password = data['password'] if isinstance(data['password'], str) else ''
        is_valid, password_error = AuthService.validate_password(password)
        if not is_valid:
            errors.append(password_error)

        try:
            role = UserRole(data['role'])
        except ValueError:
            role = None
        if role not in SELF_REGISTRATION_ROLES:
            allowed = ', '.join(r.value for r in SELF_REGISTRATION_ROLES)
            errors.append(f"role must be one of: {allowed}")

        descriptor = data.get('face_descriptor')
        if role == UserRole.STUDENT or descriptor is not None:
            if descriptor is None:
                errors.append("face_descriptor is required")
            else:
                errors.extend(Validator.validate_descriptor(descriptor))

        course = data.get('course')
        semester = data.get('semester')
        if role == UserRole.STUDENT:
            if not isinstance(course, str) or not course.strip() or len(course.strip()) > 50:
                errors.append("course is required for students")
            errors.extend(Validator.validate_int(semester, 'semester', minimum=1, maximum=8))

        if errors:
            raise ValidationError(errors)

        if User.query.filter_by(email=email).first():
            return None, "User already exists with this email"

        user = User(
            email=email,
            name=name,
            role=role,
            face_descriptor=[float(value) for value in descriptor] if descriptor is not None else None,
            enrollment_date=today or date.today()
        )
        if role == UserRole.STUDENT:
            user.course = course.strip()
            user.semester = semester
        user.set_password(password)

        db.session.add(user)
        db.session.commit()

        return user.to_dict(), None

    @staticmethod
    def login(email: str, password: str) -> Tuple[Optional[Dict], Optional[str]]:
        """Authenticate user and return an access token."""
        if not email or not password:
            return None, "Email and password are required"

        if not Validator.validate_email(email):
            return None, "Invalid email format"

        user = User.query.filter_by(email=email.lower().strip()).first()

        if not user or not user.check_password(password):
            return None, "Invalid email or password"

        if not user.is_active:
            return None, "Account is deactivated"

        # JWT subjects must be strings
        access_token = create_access_token(
            identity=str(user.id),
            additional_claims={'role': user.role.value}
        )

        return {
            "access_token": access_token,
            "user": user.to_dict()
        }, None
