"""
User model for authentication and channel profiles
"""

from sqlalchemy import Column, String, DateTime, Text, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from vidtube.db.database import Base


class User(Base):
    __tablename__ = "users"

    # Primary key
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Authentication fields
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    refresh_token = Column(Text, nullable=True)

    # Profile fields
    fullname = Column(String(100), nullable=False, index=True)
    avatar_url = Column(String(500), nullable=False)
    avatar_asset_id = Column(String(500), nullable=False)
    cover_image_url = Column(String(500), nullable=True)
    cover_image_asset_id = Column(String(500), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"

    @property
    def avatar(self):
        return {"url": self.avatar_url, "asset_id": self.avatar_asset_id}

    @property
    def cover_image(self):
        if not self.cover_image_url:
            return None
        return {"url": self.cover_image_url, "asset_id": self.cover_image_asset_id}
