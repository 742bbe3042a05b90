"""Validation utilities for the application."""
import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

DESCRIPTOR_LENGTH = 128
TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):([0-5]\d)$')

class ValidationError(Exception):
    """Raised when request data fails validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))

class Validator:
    """Validation helper class."""

    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format."""
        if not email:
            return False
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(pattern, email))

    @staticmethod
    def validate_required_fields(data: Dict, required_fields: List[str]) -> Dict[str, Any]:
        """Validate required fields in data."""
        errors = []

        for field in required_fields:
            if field not in data or data[field] is None or data[field] == '':
                errors.append(f"{field} is required")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def is_number(value: Any) -> bool:
        """Accept ints and floats but not booleans."""
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    @staticmethod
    def validate_descriptor(descriptor: Any) -> List[str]:
        """Validate a face descriptor: exactly 128 numbers."""
        if not isinstance(descriptor, list):
            return ["face_descriptor must be a list of numbers"]
        if len(descriptor) != DESCRIPTOR_LENGTH:
            return [f"face_descriptor must contain exactly {DESCRIPTOR_LENGTH} values"]
        if not all(Validator.is_number(value) for value in descriptor):
            return ["face_descriptor must contain only numbers"]
        if not all(math.isfinite(value) for value in descriptor):
            return ["face_descriptor must contain only finite numbers"]
        return []

    @staticmethod
    def validate_coordinates(latitude: Any, longitude: Any) -> List[str]:
        """Validate a latitude/longitude pair in decimal degrees."""
        errors = []
        if not Validator.is_number(latitude) or not -90 <= latitude <= 90:
            errors.append("latitude must be a number between -90 and 90")
        if not Validator.is_number(longitude) or not -180 <= longitude <= 180:
            errors.append("longitude must be a number between -180 and 180")
        return errors

    @staticmethod
    def validate_int(value: Any, field: str, minimum: int = None, maximum: int = None) -> List[str]:
        """Validate an integer field with optional inclusive bounds."""
        if not isinstance(value, int) or isinstance(value, bool):
            return [f"{field} must be an integer"]
        if minimum is not None and value < minimum:
            return [f"{field} must be at least {minimum}"]
        if maximum is not None and value > maximum:
            return [f"{field} cannot exceed {maximum}"]
        return []

    @staticmethod
    def parse_date(value: Any) -> Optional[date]:
        """Parse a YYYY-MM-DD string, returning None when malformed."""
        if not isinstance(value, str):
            return None
        try:
            return datetime.strptime(value, '%Y-%m-%d').date()
        except ValueError:
            return None

    @staticmethod
    def validate_time(value: Any) -> bool:
        """Validate a 24-hour HH:MM wall-clock time."""
        return isinstance(value, str) and bool(TIME_PATTERN.match(value))
