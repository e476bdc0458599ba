"""
Local filesystem storage for company uploads (logos, business licenses).

Stands in for the hosted file storage provider behind the same small
interface: ``save`` returns a public path, ``delete`` removes it again.
"""

import os
from typing import Optional
from uuid import uuid4

import structlog
from fastapi import UploadFile

from jobboard.config import settings
from jobboard.core.constants import ErrorCode
from jobboard.core.exceptions import ValidationError
from jobboard.utils.helpers import sanitize_filename

logger = structlog.get_logger(__name__)

PUBLIC_PREFIX = "/uploads"


class LocalFileStorage:
    """Stores uploads under ``UPLOAD_DIR/<folder>/``."""

    def __init__(self, root_dir: Optional[str] = None, max_size: Optional[int] = None):
        self.root_dir = root_dir or settings.UPLOAD_DIR
        self.max_size = max_size or settings.MAX_UPLOAD_SIZE
        os.makedirs(self.root_dir, exist_ok=True)

    def _path_for(self, uri: str) -> str:
        relative = uri[len(PUBLIC_PREFIX):].lstrip("/") if uri.startswith(PUBLIC_PREFIX) else uri
        path = os.path.normpath(os.path.join(self.root_dir, relative))
        if not path.startswith(os.path.normpath(self.root_dir) + os.sep):
            raise ValueError(f"Path escapes storage root: {uri}")
        return path

    async def save(self, upload: UploadFile, folder: str, field: str) -> str:
        """Validate and persist an upload; returns its public URI.

        Only PDF and image files up to ``max_size`` bytes are accepted.
        """
        content_type = upload.content_type or ""
        if content_type != "application/pdf" and not content_type.startswith("image/"):
            raise ValidationError.for_field(field, "Only PDF or image files are allowed", ErrorCode.INVALID_FILE)

        content = await upload.read()
        if not content:
            raise ValidationError.for_field(field, "File is required", ErrorCode.INVALID_FILE)
        if len(content) > self.max_size:
            raise ValidationError.for_field(field, "File size must be under 5MB", ErrorCode.INVALID_FILE)

        filename = f"{uuid4().hex}-{sanitize_filename(upload.filename or 'upload')}"
        directory = os.path.join(self.root_dir, folder)
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, filename), "wb") as f:
            f.write(content)

        uri = f"{PUBLIC_PREFIX}/{folder}/{filename}"
        logger.info("upload_stored", uri=uri, size=len(content), content_type=content_type)
        return uri

    def delete(self, uri: str) -> bool:
        """Remove a stored file. Failures are logged and reported as ``False``."""
        try:
            os.remove(self._path_for(uri))
            logger.info("upload_deleted", uri=uri)
            return True
        except FileNotFoundError:
            logger.warning("upload_delete_missing", uri=uri)
            return False
        except Exception as e:
            logger.error("upload_delete_failed", uri=uri, error=str(e))
            return False


def get_storage() -> LocalFileStorage:
    """Dependency returning the storage adapter."""
    return LocalFileStorage()
