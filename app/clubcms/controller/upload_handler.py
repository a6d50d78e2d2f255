"""
Image uploads kept on local disk and served under ``/uploads``.
"""

from __future__ import annotations

import logging
import os
import secrets
import time
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile

from clubcms.exceptions import ValidationError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads/"
ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class StoredUpload:
    disk_path: str
    public_path: str


def _size_message(max_bytes: int) -> str:
    return f"File size too large. Maximum {max_bytes // (1024 * 1024)}MB allowed."


def _generated_name(field_name: str, ext: str) -> str:
    return f"{field_name}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


async def store_image(
    upload: Optional[UploadFile],
    *,
    field_name: str,
    upload_dir: str,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> Optional[StoredUpload]:
    """Write an uploaded image to ``upload_dir``.

    Returns None when the request carried no file for ``field_name``.
    """
    if upload is None or not upload.filename:
        return None

    ext = os.path.splitext(upload.filename)[1].lower()
    content_type = (upload.content_type or "").lower()
    if ext not in ALLOWED_EXTENSIONS or content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError("Only images (JPEG, JPG, PNG, GIF) are allowed!")

    os.makedirs(upload_dir, exist_ok=True)
    name = _generated_name(field_name, ext)
    path = os.path.join(upload_dir, name)

    written = 0
    await upload.seek(0)
    try:
        with open(path, "wb") as buffer:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise ValidationError(_size_message(max_bytes))
                buffer.write(chunk)
    except Exception:
        _remove(path)
        raise

    return StoredUpload(disk_path=path, public_path=f"{PUBLIC_PREFIX}{name}")


def _remove(path: str) -> bool:
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False
    except OSError:
        logger.exception("Error deleting file %s", path)
        return False


def discard_upload(stored: Optional[StoredUpload]) -> None:
    """Remove a file stored for a request that was then rejected."""
    if stored is None:
        return
    if _remove(stored.disk_path):
        logger.info("Deleted orphaned upload %s", stored.disk_path)


def delete_public_file(public_path: Optional[str], upload_dir: str) -> bool:
    """Best-effort removal of a previously stored upload.

    Only paths under ``/uploads/`` that resolve inside ``upload_dir`` are
    touched. Failures are logged, never raised.
    """
    if not public_path or not public_path.startswith(PUBLIC_PREFIX):
        return False

    root = os.path.realpath(upload_dir)
    path = os.path.realpath(os.path.join(root, public_path[len(PUBLIC_PREFIX):]))
    if os.path.dirname(path) != root:
        logger.warning("Refusing to delete file outside the upload directory: %s", public_path)
        return False

    deleted = _remove(path)
    if deleted:
        logger.info("Old image file deleted: %s", path)
    else:
        logger.warning("Image file %s could not be deleted", path)
    return deleted
