"""
Tweet endpoints
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.responses import api_response
from vidtube.db.database import get_db
from vidtube.models.user import User
from vidtube.schemas.tweet import TweetCreate, TweetUpdate
from vidtube.services.tweet_service import TweetService

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tweet(
    payload: TweetCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweet = await TweetService.create_tweet(db, current_user, payload.content)
    return api_response(tweet, "Tweet created successfully", status.HTTP_201_CREATED)


@router.get("/user/{user_id}")
async def get_user_tweets(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweets = await TweetService.list_user_tweets(db, user_id)
    return api_response(tweets, "Tweets fetched successfully")


@router.patch("/{tweet_id}")
async def update_tweet(
    tweet_id: UUID,
    payload: TweetUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweet = await TweetService.update_tweet(db, tweet_id, current_user, payload.content)
    return api_response(tweet, "Tweet updated successfully")


@router.delete("/{tweet_id}")
async def delete_tweet(
    tweet_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await TweetService.delete_tweet(db, tweet_id, current_user)
    return api_response({}, "Tweet deleted successfully")
