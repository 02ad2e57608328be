"""
Dependency functions for FastAPI endpoints
Authentication and shared service dependencies
"""

from typing import Optional

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.database import get_db
from vidtube.models.user import User
from vidtube.services.media_storage import MediaStorage, get_media_storage
from vidtube.services.session_service import SessionService

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

# Bearer scheme; missing header is handled by the cookie fallback
bearer_scheme = HTTPBearer(auto_error=False)


def get_access_token(
    access_cookie: Optional[str] = Cookie(None, alias=ACCESS_TOKEN_COOKIE),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Access token from the auth cookie, else from the Authorization header"""
    if access_cookie:
        return access_cookie
    if credentials is not None:
        return credentials.credentials
    return None


async def get_current_user(
    token: Optional[str] = Depends(get_access_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get current authenticated user

    Raises AuthenticationError (401) if the token is missing, invalid or
    belongs to a user that no longer exists.
    """
    return await SessionService.authenticate(db, token)


def get_media() -> MediaStorage:
    """Media delegate dependency; tests override this"""
    return get_media_storage()
