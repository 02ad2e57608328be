"""
User service layer - accounts, profile assets, channel profile and watch history
"""

from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import select, func, or_, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from vidtube.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from vidtube.core.security import hash_password, verify_password
from vidtube.models.subscription import Subscription
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.models.watch_history import WatchHistoryEntry
from vidtube.schemas.auth import TokenPair
from vidtube.schemas.user import ChannelProfileResponse, UserDetailsUpdate
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.file_upload import has_file, upload_to_storage
from vidtube.services.media_storage import MediaStorage
from vidtube.services.session_service import SessionService
from vidtube.services.video_service import video_with_owner, visible_to
from vidtube.utils.validation import (
    FULLNAME_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    optional_text,
    require_email,
    require_password,
    require_text,
)

logger = structlog.get_logger()

# Profile image slots: model attribute prefix -> form field name
PROFILE_IMAGES = {
    "avatar": "avatar",
    "cover_image": "coverImage",
}


class UserService:
    """Service for user account operations"""

    @staticmethod
    async def register(
        db: AsyncSession,
        media: MediaStorage,
        fullname: Optional[str],
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
        avatar: Optional[UploadFile],
        cover_image: Optional[UploadFile] = None,
    ) -> User:
        """
        Create an account

        Uniqueness is checked before anything is uploaded; the unique
        constraints still catch a concurrent registration.
        """
        fullname = require_text(fullname, "fullname", FULLNAME_MAX_LENGTH)
        email = require_email(email)
        username = require_text(username, "username", USERNAME_MAX_LENGTH).lower()
        password = require_password(password)
        if not has_file(avatar):
            raise ValidationError("Avatar file is required", field="avatar")

        taken = await db.scalar(
            select(exists().where(or_(User.username == username, User.email == email)))
        )
        if taken:
            raise ConflictError("User with email or username already exists")

        uploaded = []
        try:
            avatar_asset = await upload_to_storage(media, avatar, "image", "avatar")
            uploaded.append(avatar_asset.asset_id)
            cover_asset = None
            if has_file(cover_image):
                cover_asset = await upload_to_storage(media, cover_image, "image", "coverImage")
                uploaded.append(cover_asset.asset_id)

            user = User(
                fullname=fullname,
                email=email,
                username=username,
                password_hash=hash_password(password),
                avatar_url=avatar_asset.url,
                avatar_asset_id=avatar_asset.asset_id,
                cover_image_url=cover_asset.url if cover_asset else None,
                cover_image_asset_id=cover_asset.asset_id if cover_asset else None,
            )
            db.add(user)
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            for asset_id in uploaded:
                await media.delete(asset_id, "image")
            raise ConflictError("User with email or username already exists") from e
        except Exception:
            await db.rollback()
            for asset_id in uploaded:
                await media.delete(asset_id, "image")
            raise

        await db.refresh(user)
        logger.info("User registered", user_id=str(user.id), username=user.username)
        return user

    @staticmethod
    async def login(
        db: AsyncSession,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> Tuple[User, TokenPair]:
        """Authenticate by username or email and issue a token pair"""
        username = (username or "").strip().lower()
        email = (email or "").strip().lower()
        if not username and not email:
            raise ValidationError("username or email is required")

        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email)

        user = await db.scalar(select(User).where(or_(*conditions)).limit(1))
        if user is None:
            raise NotFoundError("User")

        if not verify_password(password or "", user.password_hash):
            logger.warning("Login failed", user_id=str(user.id), reason="bad_password")
            raise AuthenticationError("Invalid user credentials")

        pair = await SessionService.issue_token_pair(db, user)
        logger.info("User logged in", user_id=str(user.id))
        return user, pair

    @staticmethod
    async def change_password(db: AsyncSession, user: User, old_password: str, new_password: str) -> None:
        if not verify_password(old_password, user.password_hash):
            raise ValidationError("Invalid old password", field="oldPassword")
        new_password = require_password(new_password, "newPassword")

        user.password_hash = hash_password(new_password)
        await db.commit()
        logger.info("Password changed", user_id=str(user.id))

    @staticmethod
    async def update_details(db: AsyncSession, user: User, patch: UserDetailsUpdate) -> User:
        fullname = optional_text(patch.fullname, "fullname", FULLNAME_MAX_LENGTH)
        email = require_email(patch.email) if patch.email is not None else None
        if fullname is None and email is None:
            raise ValidationError("Provide fullname or email to update")

        if email is not None and email != user.email:
            taken = await db.scalar(select(exists().where(User.email == email, User.id != user.id)))
            if taken:
                raise ConflictError("Email is already in use")
            user.email = email
        if fullname is not None:
            user.fullname = fullname

        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictError("Email is already in use") from e

        await db.refresh(user)
        return user

    @staticmethod
    async def replace_profile_image(
        db: AsyncSession,
        media: MediaStorage,
        user: User,
        slot: str,
        file: Optional[UploadFile],
    ) -> User:
        """
        Swap the avatar or cover image

        The new asset is uploaded and committed before the old one is deleted.
        """
        field = PROFILE_IMAGES[slot]
        if not has_file(file):
            raise ValidationError(f"{field} file is required", field=field)

        new_asset = await upload_to_storage(media, file, "image", field)
        old_asset_id = getattr(user, f"{slot}_asset_id")
        setattr(user, f"{slot}_url", new_asset.url)
        setattr(user, f"{slot}_asset_id", new_asset.asset_id)

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            await media.delete(new_asset.asset_id, "image")
            raise

        if old_asset_id and not await media.delete(old_asset_id, "image"):
            logger.warning("Old profile image left in storage", user_id=str(user.id), slot=slot, asset_id=old_asset_id)

        await db.refresh(user)
        logger.info("Profile image replaced", user_id=str(user.id), slot=slot)
        return user

    @staticmethod
    async def channel_profile(db: AsyncSession, username: str, viewer: User) -> ChannelProfileResponse:
        username = require_text(username, "username").lower()
        channel = await db.scalar(select(User).where(User.username == username))
        if channel is None:
            raise NotFoundError("Channel")

        subscribers_count = await db.scalar(
            select(func.count()).select_from(Subscription).where(Subscription.channel_id == channel.id)
        )
        subscribed_to_count = await db.scalar(
            select(func.count()).select_from(Subscription).where(Subscription.subscriber_id == channel.id)
        )
        is_subscribed = await db.scalar(
            select(exists().where(
                Subscription.channel_id == channel.id,
                Subscription.subscriber_id == viewer.id,
            ))
        )

        return ChannelProfileResponse(
            id=channel.id,
            username=channel.username,
            fullname=channel.fullname,
            email=channel.email,
            avatar=channel.avatar,
            cover_image=channel.cover_image,
            subscribers_count=subscribers_count or 0,
            channels_subscribed_to_count=subscribed_to_count or 0,
            is_subscribed=bool(is_subscribed),
            created_at=channel.created_at,
        )

    @staticmethod
    async def watch_history(db: AsyncSession, user: User) -> List[VideoWithOwner]:
        """Watched videos in viewing order; deleted videos and other users' drafts drop out"""
        result = await db.execute(
            select(Video, User)
            .join(WatchHistoryEntry, WatchHistoryEntry.video_id == Video.id)
            .join(User, User.id == Video.owner_id)
            .where(WatchHistoryEntry.user_id == user.id, visible_to(user.id))
            .order_by(WatchHistoryEntry.id)
        )
        return [video_with_owner(video, owner) for video, owner in result.all()]

    @staticmethod
    async def get_user(db: AsyncSession, user_id: UUID) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user
