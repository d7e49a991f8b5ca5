"""Blob Store: durable storage for club photos and receipt images."""

from __future__ import annotations

import asyncio
import os
import secrets
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

import structlog
from werkzeug.utils import secure_filename

from bagtag.core.config import settings
from bagtag.core.exceptions import UploadError

CLUB_PHOTOS = "club-photos"
RECEIPT_PHOTOS = "receipt-photos"

IMAGE_MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/heic": "heic",
    "image/gif": "gif",
}
ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "heic", "gif"}

logger = structlog.get_logger(__name__)


class BlobStore(Protocol):
    async def upload(
        self, data: bytes, mime_type: str, folder_hint: str, filename: str | None = None
    ) -> str: ...


def validate_ext(filename: str | None, mime_type: str) -> str:
    """Pick the object extension from the original filename, else the MIME type."""
    name = secure_filename(filename or "")
    if "." in name:
        ext = name.rsplit(".", 1)[1].lower()
        if ext in ALLOWED_EXTENSIONS:
            return ext
    return IMAGE_MIME_EXTENSIONS[mime_type]


def object_name(folder: str, ext: str, *, now_ms: int | None = None) -> str:
    stamp = int(time.time() * 1000) if now_ms is None else now_ms
    return f"{folder}/{secrets.token_hex(6)}-{stamp}.{ext}"


class LocalBlobStore:
    """Writes uploads under a local directory served as static files.

    Object names are ``<folder>/<random>-<unix ms>.<ext>`` and existing files
    are never overwritten.
    """

    def __init__(
        self,
        root: str | os.PathLike[str] | None = None,
        base_url: str | None = None,
        *,
        max_bytes: int | None = None,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._root = Path(root or settings.upload_dir)
        self._base_url = (base_url if base_url is not None else settings.upload_base_url).rstrip("/")
        self._max_bytes = max_bytes or settings.upload_max_bytes
        self._clock_ms = clock_ms

    @property
    def root(self) -> Path:
        return self._root

    async def upload(
        self, data: bytes, mime_type: str, folder_hint: str, filename: str | None = None
    ) -> str:
        mime = (mime_type or "").split(";", 1)[0].strip().lower()
        if mime not in IMAGE_MIME_EXTENSIONS:
            raise UploadError(f"unsupported file type: {mime_type or 'unknown'}")
        if not data:
            raise UploadError("empty upload")
        if len(data) > self._max_bytes:
            raise UploadError("file too large")
        folder = secure_filename(folder_hint or "") or "uploads"

        name = object_name(
            folder,
            validate_ext(filename, mime),
            now_ms=self._clock_ms() if self._clock_ms else None,
        )
        try:
            await asyncio.to_thread(self._write, name, data)
        except OSError as exc:
            logger.error("upload_failed", folder=folder, error=str(exc))
            raise UploadError("Upload failed.") from exc

        logger.info("upload_stored", object_name=name, size=len(data))
        return f"{self._base_url}/{name}"

    def _write(self, name: str, data: bytes) -> None:
        path = self._root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        # "xb" fails instead of replacing an existing object
        with open(path, "xb") as fh:
            fh.write(data)
