"""
Password validation utility
"""
from typing import List
from pydantic import BaseModel

MIN_PASSWORD_LENGTH = 8
# bcrypt ignores everything past 72 bytes
MAX_PASSWORD_BYTES = 72


class PasswordValidationResult(BaseModel):
    """Result of password validation"""
    is_valid: bool
    errors: List[str] = []


def validate_password_strength(password: str) -> PasswordValidationResult:
    """
    Validate password against the account policy:
    - Not blank
    - Minimum 8 characters
    - At most 72 bytes once UTF-8 encoded
    """
    errors = []

    if not password or not password.strip():
        errors.append("Password is required")
        return PasswordValidationResult(is_valid=False, errors=errors)

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")

    return PasswordValidationResult(
        is_valid=len(errors) == 0,
        errors=errors
    )
