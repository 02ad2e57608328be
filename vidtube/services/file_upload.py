"""
Buffering of multipart uploads to local temp files before they go to media storage
"""

import aiofiles
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional
from uuid import uuid4

from fastapi import UploadFile
import structlog

from vidtube.core.config import settings
from vidtube.core.exceptions import ValidationError

logger = structlog.get_logger()

CHUNK_SIZE = 1024 * 1024

EXTENSION_MAPPING = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/quicktime": ".mov",
}


def _allowed_types(kind: str):
    if kind == "video":
        return settings.ALLOWED_VIDEO_TYPES
    return settings.ALLOWED_IMAGE_TYPES


def _secure_filename(original_filename: str, mime_type: str) -> str:
    extension = EXTENSION_MAPPING.get(mime_type) or Path(original_filename).suffix.lower()
    return f"{uuid4().hex}{extension}"


async def save_to_temp(file: UploadFile, kind: str, field: str) -> Path:
    """
    Stream an uploaded part to the temp directory

    Args:
        file: FastAPI UploadFile object
        kind: "image" or "video"
        field: form field name, used in error messages

    Returns:
        Path of the temp file

    Raises:
        ValidationError: missing file, disallowed type or oversized upload
    """
    if file is None or not file.filename:
        raise ValidationError(f"{field} file is required", field=field)

    mime_type = file.content_type or ""
    allowed = _allowed_types(kind)
    if mime_type not in allowed:
        raise ValidationError(
            f"File type '{mime_type or 'unknown'}' not allowed for {field}. Allowed types: {', '.join(allowed)}",
            field=field,
        )

    temp_dir = Path(settings.UPLOAD_TEMP_DIR)
    temp_dir.mkdir(parents=True, exist_ok=True)
    temp_path = temp_dir / _secure_filename(file.filename, mime_type)

    size = 0
    try:
        async with aiofiles.open(temp_path, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > settings.MAX_UPLOAD_SIZE:
                    raise ValidationError(
                        f"{field} exceeds maximum allowed size ({settings.MAX_UPLOAD_SIZE} bytes)",
                        field=field,
                    )
                await out.write(chunk)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise

    if size == 0:
        temp_path.unlink(missing_ok=True)
        raise ValidationError(f"{field} file is empty", field=field)

    logger.debug("Upload buffered", field=field, path=str(temp_path), size=size, mime_type=mime_type)
    return temp_path


@asynccontextmanager
async def buffered_upload(file: Optional[UploadFile], kind: str, field: str) -> AsyncIterator[Path]:
    """Yield the temp path of an upload and remove it afterwards, whatever happens"""
    temp_path = await save_to_temp(file, kind, field)
    try:
        yield temp_path
    finally:
        temp_path.unlink(missing_ok=True)


async def upload_to_storage(media, file: Optional[UploadFile], kind: str, field: str):
    """Buffer an upload and hand it to the media delegate; the temp file never outlives the call"""
    async with buffered_upload(file, kind, field) as temp_path:
        return await media.store(temp_path, kind)


def has_file(file: Optional[UploadFile]) -> bool:
    """Browsers send an empty part for untouched optional file inputs"""
    return file is not None and bool(file.filename)
