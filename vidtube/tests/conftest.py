"""
Test configuration and fixtures
"""

import os
import tempfile

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("UPLOAD_TEMP_DIR", os.path.join(tempfile.gettempdir(), "vidtube-test-uploads"))

import pytest
from pathlib import Path
from typing import AsyncGenerator, Dict, List, Optional
from uuid import uuid4

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vidtube.main import app
from vidtube.core.deps import get_media
from vidtube.core.exceptions import UpstreamError
from vidtube.core.security import create_access_token, hash_password
from vidtube.db.database import Base, get_db
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.services.media_storage import MediaStorage, StoredAsset

TEST_PASSWORD = "password123"


class FakeMediaStorage(MediaStorage):
    """In-memory media delegate recording uploads and deletions"""

    def __init__(self):
        self.uploaded: Dict[str, str] = {}
        self.deleted: List[str] = []
        self.fail_deletes = set()
        self.fail_uploads = False
        self.video_duration = 12.5

    async def upload(self, local_path: Path, kind: str) -> StoredAsset:
        if self.fail_uploads:
            raise UpstreamError()
        asset_id = f"{kind}/{uuid4().hex}{local_path.suffix}"
        self.uploaded[asset_id] = local_path.read_bytes().decode("latin-1")
        return StoredAsset(url=f"https://media.test/{asset_id}", asset_id=asset_id)

    async def store(self, local_path: Path, kind: str) -> StoredAsset:
        asset = await self.upload(local_path, kind)
        if kind == "video":
            asset.duration = self.video_duration
        return asset

    async def delete(self, asset_id: str, kind: str) -> bool:
        if asset_id in self.fail_deletes:
            return False
        self.deleted.append(asset_id)
        return True


@pytest.fixture
async def test_engine(tmp_path):
    """SQLite file database per test"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and checking results; requests get their own sessions"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def media() -> FakeMediaStorage:
    return FakeMediaStorage()


@pytest.fixture
async def client(session_factory, media) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and media dependency overrides"""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media] = lambda: media

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(test_db: AsyncSession):
    """Factory creating users directly in the database"""

    async def _make_user(username: str, email: Optional[str] = None, fullname: Optional[str] = None) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            fullname=fullname or username.title(),
            password_hash=hash_password(TEST_PASSWORD),
            avatar_url=f"https://media.test/image/{username}.png",
            avatar_asset_id=f"image/{username}.png",
        )
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_video(test_db: AsyncSession):
    """Factory creating videos directly in the database"""

    async def _make_video(owner: User, title: str = "Test video", views: int = 0, is_published: bool = True) -> Video:
        suffix = uuid4().hex
        video = Video(
            title=title,
            description=f"About {title}",
            video_url=f"https://media.test/video/{suffix}.mp4",
            video_asset_id=f"video/{suffix}.mp4",
            thumbnail_url=f"https://media.test/image/{suffix}.png",
            thumbnail_asset_id=f"image/{suffix}.png",
            duration=30.0,
            views=views,
            is_published=is_published,
            owner_id=owner.id,
        )
        test_db.add(video)
        await test_db.commit()
        await test_db.refresh(video)
        return video

    return _make_video


@pytest.fixture
async def test_user(make_user) -> User:
    return await make_user("alice")


@pytest.fixture
async def other_user(make_user) -> User:
    return await make_user("bob")


def auth_headers_for(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def headers_for():
    return auth_headers_for


@pytest.fixture
def auth_headers(test_user: User) -> Dict[str, str]:
    return auth_headers_for(test_user)


@pytest.fixture
def other_headers(other_user: User) -> Dict[str, str]:
    return auth_headers_for(other_user)


@pytest.fixture
def image_file():
    return ("avatar.png", b"\x89PNG\r\n\x1a\nfake-image-bytes", "image/png")


@pytest.fixture
def video_file():
    return ("clip.mp4", b"\x00\x00\x00\x18ftypmp42fake-video-bytes", "video/mp4")
