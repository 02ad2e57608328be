"""Initial schema for VidTube

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, videos, engagement and playlist tables"""

    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('fullname', sa.String(length=100), nullable=False),
        sa.Column('avatar_url', sa.String(length=500), nullable=False),
        sa.Column('avatar_asset_id', sa.String(length=500), nullable=False),
        sa.Column('cover_image_url', sa.String(length=500), nullable=True),
        sa.Column('cover_image_asset_id', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_fullname', 'users', ['fullname'])

    op.create_table('videos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('video_url', sa.String(length=500), nullable=False),
        sa.Column('video_asset_id', sa.String(length=500), nullable=False),
        sa.Column('thumbnail_url', sa.String(length=500), nullable=False),
        sa.Column('thumbnail_asset_id', sa.String(length=500), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('duration', sa.Float(), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('views >= 0', name='ck_videos_views_non_negative'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_videos_owner_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_videos'),
    )
    op.create_index('ix_videos_owner_created', 'videos', ['owner_id', 'created_at'])

    op.create_table('watch_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('watched_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_watch_history_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name='fk_watch_history_video_id_videos', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_watch_history'),
    )
    op.create_index('ix_watch_history_user', 'watch_history', ['user_id', 'id'])

    op.create_table('comments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name='fk_comments_video_id_videos', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_comments_owner_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_comments'),
    )
    op.create_index('ix_comments_video_created', 'comments', ['video_id', 'created_at'])

    op.create_table('tweets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_tweets_owner_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_tweets'),
    )
    op.create_index('ix_tweets_owner_created', 'tweets', ['owner_id', 'created_at'])

    op.create_table('likes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=True),
        sa.Column('comment_id', sa.Uuid(), nullable=True),
        sa.Column('tweet_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            '(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)'
            ' + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)'
            ' + (CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1',
            name='ck_likes_single_target',
        ),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_likes_owner_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name='fk_likes_video_id_videos', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['comment_id'], ['comments.id'], name='fk_likes_comment_id_comments', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tweet_id'], ['tweets.id'], name='fk_likes_tweet_id_tweets', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_likes'),
        sa.UniqueConstraint('owner_id', 'video_id', name='uq_likes_owner_video'),
        sa.UniqueConstraint('owner_id', 'comment_id', name='uq_likes_owner_comment'),
        sa.UniqueConstraint('owner_id', 'tweet_id', name='uq_likes_owner_tweet'),
    )
    op.create_index('ix_likes_video', 'likes', ['video_id'])
    op.create_index('ix_likes_comment', 'likes', ['comment_id'])
    op.create_index('ix_likes_tweet', 'likes', ['tweet_id'])

    op.create_table('playlists',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_playlists_owner_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_playlists'),
    )
    op.create_index('ix_playlists_owner', 'playlists', ['owner_id'])

    op.create_table('playlist_videos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('playlist_id', sa.Uuid(), nullable=False),
        sa.Column('video_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['playlist_id'], ['playlists.id'], name='fk_playlist_videos_playlist_id_playlists', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['video_id'], ['videos.id'], name='fk_playlist_videos_video_id_videos', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_playlist_videos'),
        sa.UniqueConstraint('playlist_id', 'video_id', name='uq_playlist_videos_playlist_video'),
    )
    op.create_index('ix_playlist_videos_video', 'playlist_videos', ['video_id'])

    op.create_table('subscriptions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('subscriber_id', sa.Uuid(), nullable=False),
        sa.Column('channel_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('subscriber_id <> channel_id', name='ck_subscriptions_no_self_subscription'),
        sa.ForeignKeyConstraint(['subscriber_id'], ['users.id'], name='fk_subscriptions_subscriber_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['channel_id'], ['users.id'], name='fk_subscriptions_channel_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_subscriptions'),
        sa.UniqueConstraint('subscriber_id', 'channel_id', name='uq_subscriptions_subscriber_channel'),
    )
    op.create_index('ix_subscriptions_channel', 'subscriptions', ['channel_id'])


def downgrade() -> None:
    """Drop every table created by upgrade"""
    op.drop_table('subscriptions')
    op.drop_table('playlist_videos')
    op.drop_table('playlists')
    op.drop_table('likes')
    op.drop_table('tweets')
    op.drop_table('comments')
    op.drop_table('watch_history')
    op.drop_table('videos')
    op.drop_table('users')
