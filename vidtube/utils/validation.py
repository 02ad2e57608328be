"""
Input validation helpers shared by services
"""
from typing import Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from vidtube.core.exceptions import ValidationError
from vidtube.utils.password_validation import validate_password_strength

# Column sizes of the text fields checked before a write
USERNAME_MAX_LENGTH = 50
FULLNAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
TITLE_MAX_LENGTH = 255
NAME_MAX_LENGTH = 255

_email_adapter = TypeAdapter(EmailStr)


def require_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> str:
    """Return the trimmed value or raise when it is missing, blank or too long"""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required", field=field)
    if max_length is not None and len(cleaned) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters", field=field)
    return cleaned


def optional_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> Optional[str]:
    """Trim a patch field; None means "leave unchanged", blank is rejected"""
    if value is None:
        return None
    return require_text(value, field, max_length)


def require_email(value: Optional[str]) -> str:
    """Validate with pydantic's EmailStr and store lowercased"""
    email = require_text(value, "email", EMAIL_MAX_LENGTH)
    try:
        email = _email_adapter.validate_python(email)
    except PydanticValidationError as exc:
        raise ValidationError("email is invalid", field="email") from exc
    return email.lower()


def require_password(value: Optional[str], field: str = "password") -> str:
    result = validate_password_strength(value or "")
    if not result.is_valid:
        raise ValidationError("; ".join(result.errors), field=field)
    return value
