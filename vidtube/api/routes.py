"""
Main API router that includes all endpoint routers
"""

from fastapi import APIRouter
from vidtube.api.endpoints import (
    users, videos, comments, likes, tweets, playlists, subscriptions, dashboard, healthcheck
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(healthcheck.router, prefix="/healthcheck", tags=["Healthcheck"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(videos.router, prefix="/videos", tags=["Videos"])
api_router.include_router(comments.router, prefix="/comments", tags=["Comments"])
api_router.include_router(likes.router, prefix="/likes", tags=["Likes"])
api_router.include_router(tweets.router, prefix="/tweets", tags=["Tweets"])
api_router.include_router(playlists.router, prefix="/playlists", tags=["Playlists"])
api_router.include_router(subscriptions.router, prefix="/subscriptions", tags=["Subscriptions"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
