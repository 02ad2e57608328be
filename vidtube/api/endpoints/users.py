"""
User account endpoints: registration, sessions and profile
"""

from typing import Optional

from fastapi import APIRouter, Body, Cookie, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import settings
from vidtube.core.deps import REFRESH_TOKEN_COOKIE, ACCESS_TOKEN_COOKIE, get_current_user, get_media
from vidtube.core.responses import api_response
from vidtube.db.database import get_db
from vidtube.models.user import User
from vidtube.schemas.auth import ChangePasswordRequest, LoginRequest, LoginResponse, RefreshTokenRequest, TokenPair
from vidtube.schemas.user import UserDetailsUpdate, UserResponse
from vidtube.services.media_storage import MediaStorage
from vidtube.services.session_service import SessionService
from vidtube.services.user_service import UserService

router = APIRouter()


def _set_auth_cookies(response, pair: TokenPair):
    cookie_options = {"httponly": True, "secure": settings.COOKIE_SECURE, "samesite": "lax"}
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        pair.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **cookie_options,
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        pair.refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        **cookie_options,
    )
    return response


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_user(
    fullname: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    coverImage: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    media: MediaStorage = Depends(get_media),
):
    """
    Register a new user (multipart form)

    - **avatar** is required, **coverImage** is optional
    """
    user = await UserService.register(db, media, fullname, email, username, password, avatar, coverImage)
    return api_response(
        UserResponse.model_validate(user),
        "User registered successfully",
        status.HTTP_201_CREATED,
    )


@router.post("/login")
async def login_user(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with username or email; sets the auth cookies and returns the token pair"""
    user, pair = await UserService.login(db, credentials.username, credentials.email, credentials.password)
    payload = LoginResponse(
        user=UserResponse.model_validate(user),
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
    )
    return _set_auth_cookies(api_response(payload, "User logged in successfully"), pair)


@router.post("/logout")
async def logout_user(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await SessionService.logout(db, current_user)
    response = api_response({}, "User logged out successfully")
    response.delete_cookie(ACCESS_TOKEN_COOKIE, httponly=True, secure=settings.COOKIE_SECURE, samesite="lax")
    response.delete_cookie(REFRESH_TOKEN_COOKIE, httponly=True, secure=settings.COOKIE_SECURE, samesite="lax")
    return response


@router.post("/refresh-token")
async def refresh_access_token(
    body: Optional[RefreshTokenRequest] = Body(None),
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_TOKEN_COOKIE),
    db: AsyncSession = Depends(get_db),
):
    """Rotate the token pair using the refresh cookie or the ``refreshToken`` body field"""
    incoming = refresh_cookie or (body.refresh_token if body else None)
    pair = await SessionService.refresh(db, incoming)
    return _set_auth_cookies(api_response(pair, "Access token refreshed"), pair)


@router.get("/current-user")
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    return api_response(UserResponse.model_validate(current_user), "Current user fetched successfully")


@router.patch("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await UserService.change_password(db, current_user, payload.old_password, payload.new_password)
    return api_response({}, "Password changed successfully")


@router.patch("/update-user-details")
async def update_user_details(
    patch: UserDetailsUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService.update_details(db, current_user, patch)
    return api_response(UserResponse.model_validate(user), "Account details updated successfully")


@router.patch("/update-user-avatar")
async def update_user_avatar(
    avatar: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: MediaStorage = Depends(get_media),
):
    user = await UserService.replace_profile_image(db, media, current_user, "avatar", avatar)
    return api_response(UserResponse.model_validate(user), "Avatar updated successfully")


@router.patch("/update-user-coverImage")
@router.patch("/update-user-cover-image", include_in_schema=False)
async def update_user_cover_image(
    coverImage: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: MediaStorage = Depends(get_media),
):
    user = await UserService.replace_profile_image(db, media, current_user, "cover_image", coverImage)
    return api_response(UserResponse.model_validate(user), "Cover image updated successfully")


@router.get("/channel/{username}")
async def get_channel_profile(
    username: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await UserService.channel_profile(db, username, current_user)
    return api_response(profile, "Channel profile fetched successfully")


@router.get("/watchHistory")
@router.get("/watch-history", include_in_schema=False)
async def get_watch_history(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    history = await UserService.watch_history(db, current_user)
    return api_response(history, "Watch history fetched successfully")
