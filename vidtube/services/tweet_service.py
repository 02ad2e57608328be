"""
Tweet service layer - short channel posts
"""

from typing import List
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from vidtube.core.exceptions import AuthorizationError, NotFoundError
from vidtube.models.like import Like
from vidtube.models.tweet import Tweet
from vidtube.models.user import User
from vidtube.schemas.tweet import TweetResponse
from vidtube.utils.validation import require_text

logger = structlog.get_logger()


class TweetService:
    """Service for tweet operations"""

    @staticmethod
    async def _get_owned_tweet(db: AsyncSession, tweet_id: UUID, user: User, operation: str) -> Tweet:
        tweet = await db.get(Tweet, tweet_id)
        if tweet is None:
            raise NotFoundError("Tweet", tweet_id)
        if tweet.owner_id != user.id:
            raise AuthorizationError(operation, "tweet")
        return tweet

    @staticmethod
    async def create_tweet(db: AsyncSession, user: User, content: str) -> TweetResponse:
        tweet = Tweet(content=require_text(content, "content"), owner_id=user.id)
        db.add(tweet)
        await db.commit()
        await db.refresh(tweet)
        logger.info("Tweet created", tweet_id=str(tweet.id), owner_id=str(user.id))
        return TweetResponse.model_validate(tweet)

    @staticmethod
    async def list_user_tweets(db: AsyncSession, user_id: UUID) -> List[TweetResponse]:
        """Tweets of a user, newest first"""
        if await db.get(User, user_id) is None:
            raise NotFoundError("User", user_id)

        result = await db.scalars(
            select(Tweet).where(Tweet.owner_id == user_id).order_by(Tweet.created_at.desc(), Tweet.id.desc())
        )
        return [TweetResponse.model_validate(tweet) for tweet in result.all()]

    @staticmethod
    async def update_tweet(db: AsyncSession, tweet_id: UUID, user: User, content: str) -> TweetResponse:
        content = require_text(content, "content")
        tweet = await TweetService._get_owned_tweet(db, tweet_id, user, "edit")
        tweet.content = content
        await db.commit()
        await db.refresh(tweet)
        return TweetResponse.model_validate(tweet)

    @staticmethod
    async def delete_tweet(db: AsyncSession, tweet_id: UUID, user: User) -> None:
        """Delete a tweet and the likes on it"""
        tweet = await TweetService._get_owned_tweet(db, tweet_id, user, "delete")
        await db.execute(
            delete(Like).where(Like.tweet_id == tweet.id).execution_options(synchronize_session=False)
        )
        await db.delete(tweet)
        await db.commit()
        logger.info("Tweet deleted", tweet_id=str(tweet_id), owner_id=str(user.id))
