"""
Session service - token pair issuance, rotation and request authentication
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from vidtube.core.exceptions import AuthenticationError
from vidtube.core.security import (
    REFRESH_TOKEN_TYPE,
    ACCESS_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from vidtube.models.user import User
from vidtube.schemas.auth import TokenPair

logger = structlog.get_logger()


def _user_id_from(payload: dict, token_type: str) -> UUID:
    try:
        return UUID(str(payload["sub"]))
    except (KeyError, ValueError) as exc:
        raise AuthenticationError(f"Invalid {token_type} token") from exc


class SessionService:
    """Access/refresh token lifecycle"""

    @staticmethod
    async def issue_token_pair(db: AsyncSession, user: User) -> TokenPair:
        """
        Sign a new access/refresh pair and persist the refresh token

        Only the most recently issued refresh token is accepted afterwards.
        """
        access_token = create_access_token(user)
        refresh_token = create_refresh_token(user)

        user.refresh_token = refresh_token
        await db.commit()
        await db.refresh(user)

        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    @staticmethod
    async def refresh(db: AsyncSession, incoming: Optional[str]) -> TokenPair:
        """Rotate the token pair; the presented refresh token must be the stored one"""
        if not incoming:
            raise AuthenticationError()

        payload = decode_token(incoming, REFRESH_TOKEN_TYPE)
        user = await db.get(User, _user_id_from(payload, REFRESH_TOKEN_TYPE))
        if user is None:
            raise AuthenticationError("Invalid refresh token")

        if user.refresh_token != incoming:
            logger.warning("Refresh token rejected", user_id=str(user.id), reason="expired_or_used")
            raise AuthenticationError("Refresh token is expired or used")

        pair = await SessionService.issue_token_pair(db, user)
        logger.info("Token pair rotated", user_id=str(user.id))
        return pair

    @staticmethod
    async def authenticate(db: AsyncSession, token: Optional[str]) -> User:
        """Resolve an access token to its user"""
        if not token:
            raise AuthenticationError()

        payload = decode_token(token, ACCESS_TOKEN_TYPE)
        user = await db.get(User, _user_id_from(payload, ACCESS_TOKEN_TYPE))
        if user is None:
            raise AuthenticationError("Invalid access token")
        return user

    @staticmethod
    async def logout(db: AsyncSession, user: User) -> None:
        user.refresh_token = None
        await db.commit()
        logger.info("User logged out", user_id=str(user.id))
