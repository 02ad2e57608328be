"""
Security utilities: password hashing and JWT access/refresh tokens
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from vidtube.core.config import settings
from vidtube.core.exceptions import AuthenticationError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Password hashing context with explicit bcrypt configuration
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)


def hash_password(password: str) -> str:
    """Generate a salted bcrypt hash"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def _encode(claims: Dict[str, Any], secret: str, expires_delta: timedelta, token_type: str) -> str:
    now = datetime.now(timezone.utc)
    to_encode = claims.copy()
    to_encode.update({
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        # Two tokens issued within the same second must still differ
        "jti": secrets.token_urlsafe(16),
    })
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Create a short-lived access token carrying the public identity of the user"""
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "username": user.username,
        "fullname": user.fullname,
    }
    return _encode(
        claims,
        settings.ACCESS_TOKEN_SECRET,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        ACCESS_TOKEN_TYPE,
    )


def create_refresh_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Create a long-lived refresh token that only identifies the user"""
    return _encode(
        {"sub": str(user.id)},
        settings.REFRESH_TOKEN_SECRET,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        REFRESH_TOKEN_TYPE,
    )


def decode_token(token: str, token_type: str = ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
    """
    Verify signature, expiry and type of a token

    Raises:
        AuthenticationError: token is malformed, expired or of the wrong type
    """
    secret = settings.ACCESS_TOKEN_SECRET if token_type == ACCESS_TOKEN_TYPE else settings.REFRESH_TOKEN_SECRET
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise AuthenticationError(f"Invalid {token_type} token") from exc

    if payload.get("type") != token_type:
        raise AuthenticationError(f"Invalid {token_type} token")
    if not payload.get("sub"):
        raise AuthenticationError(f"Invalid {token_type} token")

    return payload
