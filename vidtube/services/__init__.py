"""
Services package - Business logic layer
"""

from vidtube.services.session_service import SessionService
from vidtube.services.user_service import UserService
from vidtube.services.video_service import VideoService
from vidtube.services.comment_service import CommentService
from vidtube.services.like_service import LikeService
from vidtube.services.tweet_service import TweetService
from vidtube.services.playlist_service import PlaylistService
from vidtube.services.subscription_service import SubscriptionService
from vidtube.services.dashboard_service import DashboardService

__all__ = [
    'SessionService',
    'UserService',
    'VideoService',
    'CommentService',
    'LikeService',
    'TweetService',
    'PlaylistService',
    'SubscriptionService',
    'DashboardService',
]
