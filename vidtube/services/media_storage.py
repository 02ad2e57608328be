"""
Media storage delegate

Uploads buffered files to the configured backend and deletes them by asset id.
Two backends exist: an S3-compatible bucket (Cloudflare R2, AWS S3, MinIO) and
the local filesystem for development.
"""

import asyncio
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from mutagen import File as MutagenFile
from mutagen import MutagenError
import structlog

from vidtube.core.config import settings
from vidtube.core.exceptions import UpstreamError

logger = structlog.get_logger()

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mov": "video/quicktime",
}


@dataclass
class StoredAsset:
    """Result of an upload"""
    url: str
    asset_id: str
    duration: Optional[float] = None


def probe_duration(path: Path) -> float:
    """Return the playing time in seconds, 0.0 when the container is not understood"""
    try:
        media = MutagenFile(str(path))
    except MutagenError as e:
        logger.warning("Could not read media metadata", path=str(path), error=str(e))
        return 0.0
    if media is None or getattr(media, "info", None) is None:
        return 0.0
    return float(getattr(media.info, "length", 0.0) or 0.0)


def _object_key(kind: str, local_path: Path) -> str:
    return f"{kind}/{uuid4().hex}{local_path.suffix.lower()}"


class MediaStorage(ABC):
    """Interface of a media backend"""

    @abstractmethod
    async def upload(self, local_path: Path, kind: str) -> StoredAsset:
        """Store a local file and return its public reference"""

    @abstractmethod
    async def delete(self, asset_id: str, kind: str) -> bool:
        """Remove an asset; False when the backend no longer has it"""

    async def store(self, local_path: Path, kind: str) -> StoredAsset:
        """Upload and attach the duration for videos"""
        asset = await self.upload(local_path, kind)
        if kind == "video":
            asset.duration = await asyncio.to_thread(probe_duration, local_path)
        return asset


class S3MediaStorage(MediaStorage):
    """S3-compatible object storage"""

    def __init__(self):
        self.bucket = settings.S3_BUCKET_NAME
        self.endpoint = settings.S3_ENDPOINT_URL
        self.access_key = settings.S3_ACCESS_KEY_ID
        self.secret_key = settings.S3_SECRET_ACCESS_KEY
        self.public_base_url = settings.MEDIA_PUBLIC_BASE_URL.rstrip("/")
        self._client = None

    def _get_client(self):
        if self._client is None:
            if not all([self.bucket, self.access_key, self.secret_key]):
                raise UpstreamError("Media storage credentials not configured")
            self._client = boto3.client(
                "s3",
                endpoint_url=self.endpoint,
                aws_access_key_id=self.access_key,
                aws_secret_access_key=self.secret_key,
                region_name=settings.S3_REGION,
            )
        return self._client

    def _put(self, local_path: Path, key: str):
        with open(local_path, "rb") as body:
            self._get_client().put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=CONTENT_TYPES.get(local_path.suffix.lower(), "application/octet-stream"),
            )

    async def upload(self, local_path: Path, kind: str) -> StoredAsset:
        key = _object_key(kind, local_path)
        try:
            await asyncio.to_thread(self._put, local_path, key)
        except (ClientError, BotoCoreError) as e:
            logger.error("Media upload failed", error=str(e), key=key, bucket=self.bucket)
            raise UpstreamError(f"Media upload failed: {str(e)}")

        logger.info("Media uploaded", key=key, bucket=self.bucket, kind=kind)
        return StoredAsset(url=f"{self.public_base_url}/{key}", asset_id=key)

    async def delete(self, asset_id: str, kind: str) -> bool:
        try:
            await asyncio.to_thread(self._get_client().delete_object, Bucket=self.bucket, Key=asset_id)
        except (ClientError, BotoCoreError, UpstreamError) as e:
            logger.error("Media delete failed", error=str(e), key=asset_id, kind=kind)
            return False

        logger.info("Media deleted", key=asset_id, kind=kind)
        return True


class LocalMediaStorage(MediaStorage):
    """Files under MEDIA_ROOT, served from MEDIA_PUBLIC_BASE_URL"""

    def __init__(self, root: Optional[str] = None, public_base_url: Optional[str] = None):
        self.root = Path(root or settings.MEDIA_ROOT)
        self.public_base_url = (public_base_url or settings.MEDIA_PUBLIC_BASE_URL).rstrip("/")

    async def upload(self, local_path: Path, kind: str) -> StoredAsset:
        key = _object_key(kind, local_path)
        target = self.root / key
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copyfile, local_path, target)
        except OSError as e:
            logger.error("Media upload failed", error=str(e), key=key)
            raise UpstreamError(f"Media upload failed: {str(e)}")

        logger.info("Media stored locally", key=key, kind=kind)
        return StoredAsset(url=f"{self.public_base_url}/{key}", asset_id=key)

    async def delete(self, asset_id: str, kind: str) -> bool:
        target = self.root / asset_id
        try:
            target.unlink()
        except FileNotFoundError:
            logger.warning("Media already gone", key=asset_id, kind=kind)
            return False
        except OSError as e:
            logger.error("Media delete failed", error=str(e), key=asset_id)
            return False

        logger.info("Media deleted", key=asset_id, kind=kind)
        return True


@lru_cache()
def get_media_storage() -> MediaStorage:
    """FastAPI dependency returning the configured backend"""
    if settings.MEDIA_BACKEND == "s3":
        return S3MediaStorage()
    return LocalMediaStorage()
