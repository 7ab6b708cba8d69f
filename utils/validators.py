# utils/validators.py
import re
from typing import Any, Dict, Optional

from utils.errors import ValidationError

# Usernames double as blob file names, so keep them path-safe
USERNAME_RE = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]{0,63}$")
MAX_BIO_LENGTH = 2000


def require_json(data: Optional[Dict]) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError("No data provided")
    return data


def validate_username(username: Any) -> str:
    if not isinstance(username, str) or not USERNAME_RE.match(username):
        raise ValidationError(
            "username must be 1-64 characters of letters, digits, '_', '-' or '.'"
        )
    return username


def validate_password(password: Any) -> str:
    if not isinstance(password, str) or not password:
        raise ValidationError("password is required")
    return password


def validate_coordinate(value: Any, name: str, limit: float) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number")
    value = float(value)
    if not -limit <= value <= limit:
        raise ValidationError(f"{name} must be between {-limit} and {limit}")
    return value


def validate_bio(bio: Any) -> str:
    if not isinstance(bio, str):
        raise ValidationError("bio must be a string")
    if len(bio) > MAX_BIO_LENGTH:
        raise ValidationError(f"bio must be at most {MAX_BIO_LENGTH} characters")
    return bio


def validate_swipe(data: Dict[str, Any]):
    swiped = data.get('swiped')
    status = data.get('status')
    if not isinstance(swiped, str) or not swiped:
        raise ValidationError("swiped is required")
    if not isinstance(status, bool):
        raise ValidationError("status must be true or false")
    return swiped, status
