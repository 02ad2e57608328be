"""
Authentication schemas for request/response models
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional

from vidtube.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login with either username or email"""
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    password: str


class RefreshTokenRequest(BaseModel):
    """Body fallback when the refresh token cookie is absent"""
    refresh_token: Optional[str] = Field(None, alias="refreshToken")

    model_config = ConfigDict(populate_by_name=True)


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., alias="oldPassword")
    new_password: str = Field(..., alias="newPassword")

    model_config = ConfigDict(populate_by_name=True)


class TokenPair(BaseModel):
    access_token: str = Field(..., serialization_alias="accessToken")
    refresh_token: str = Field(..., serialization_alias="refreshToken")


class LoginResponse(BaseModel):
    user: UserResponse
    access_token: str = Field(..., serialization_alias="accessToken")
    refresh_token: str = Field(..., serialization_alias="refreshToken")
