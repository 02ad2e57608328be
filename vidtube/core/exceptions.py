"""
Custom exception classes for API operations and global error handling
"""

from typing import Any, List, Optional
from fastapi import status


class ApiError(Exception):
    """Base exception for every error returned through the response envelope"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors or []
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ApiError):
    """Missing or malformed input"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None, errors: Optional[List[Any]] = None):
        if field and not errors:
            errors = [{"field": field, "message": message or self.default_message}]
        super().__init__(message=message, errors=errors)


class NotFoundError(ApiError):
    """Referenced entity does not exist"""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str = "Resource", entity_id: Any = None):
        if entity_id is not None:
            message = f"{entity} with ID {entity_id} not found"
        else:
            message = f"{entity} not found"
        super().__init__(message=message)


class AuthenticationError(ApiError):
    """Missing, invalid or expired token"""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized request"


class AuthorizationError(ApiError):
    """Authenticated user is not allowed to act on the entity"""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, operation: str = "modify", entity: str = "resource"):
        super().__init__(message=f"Not authorized to {operation} this {entity}")


class ConflictError(ApiError):
    """A unique field is already taken"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "A record with this information already exists"


class UpstreamError(ApiError):
    """The media delegate failed to upload or delete an asset"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Media upload failed"
