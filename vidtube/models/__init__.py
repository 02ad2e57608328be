"""
Database models for the VidTube platform
"""

from .user import User
from .watch_history import WatchHistoryEntry
from .video import Video
from .comment import Comment
from .tweet import Tweet
from .like import Like
from .playlist import Playlist, PlaylistVideo
from .subscription import Subscription

__all__ = [
    "User",
    "WatchHistoryEntry",
    "Video",
    "Comment",
    "Tweet",
    "Like",
    "Playlist",
    "PlaylistVideo",
    "Subscription",
]
