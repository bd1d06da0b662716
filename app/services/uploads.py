# app/services/uploads.py
"""
Validation and sequential upload of multipart files.

Files are pushed to the object store one at a time in the order the client
sent them, so the resulting URL list always matches the input order.
"""

import logging
from typing import Any, Iterable, List, Optional

from starlette.datastructures import UploadFile

from app.core.config import settings
from app.core.s3 import ObjectStore
from app.middleware.error_handler import InvalidArgumentError
from app.utils.sanitize import build_object_path
from app.utils.timestamps import now_ms

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024
MAX_VIDEO_BYTES = 50 * 1024 * 1024


def is_upload(value: Any) -> bool:
    return isinstance(value, UploadFile)


def form_file(form, key: str) -> Optional[UploadFile]:
    value = form.get(key)
    return value if is_upload(value) else None


def form_files(form, key: str) -> List[UploadFile]:
    return [value for value in form.getlist(key) if is_upload(value)]


def file_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, 2)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def check_media(
    upload: UploadFile,
    *,
    max_bytes: int,
    type_prefix: str,
    too_large: str,
    wrong_type: str,
) -> None:
    if file_size(upload) > max_bytes:
        raise InvalidArgumentError(too_large)
    if not (upload.content_type or "").startswith(type_prefix):
        raise InvalidArgumentError(wrong_type)


def check_image(upload: UploadFile, too_large: str, wrong_type: str) -> None:
    check_media(
        upload,
        max_bytes=MAX_IMAGE_BYTES,
        type_prefix="image/",
        too_large=too_large,
        wrong_type=wrong_type,
    )


def check_video(upload: UploadFile, too_large: str, wrong_type: str) -> None:
    check_media(
        upload,
        max_bytes=MAX_VIDEO_BYTES,
        type_prefix="video/",
        too_large=too_large,
        wrong_type=wrong_type,
    )


def media_metadata(upload: UploadFile, url: str) -> dict:
    return {
        "url": url,
        "name": upload.filename or "",
        "type": upload.content_type or "",
        "size": file_size(upload),
    }


class UploadBatch:
    """
    Uploads the files of one request and remembers the objects it wrote.

    Used as a context manager around the uploads and the final database write.
    If the block fails and ``CLEANUP_ORPHANED_UPLOADS`` is enabled, the objects
    already written are deleted on a best-effort basis; otherwise they are
    left in the bucket.
    """

    def __init__(self, store: ObjectStore, owner_id: str, cleanup: Optional[bool] = None):
        self.store = store
        self.owner_id = owner_id
        self.cleanup = settings.CLEANUP_ORPHANED_UPLOADS if cleanup is None else cleanup
        self.paths: List[str] = []
        self.count = 0

    def __enter__(self) -> "UploadBatch":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            self.discard()
        return False

    def upload(self, upload: UploadFile, folder: str, default_name: str = "image") -> str:
        path = build_object_path(
            folder,
            self.owner_id,
            upload.filename or "",
            now_ms(),
            default_name,
            sequence=self.count,
        )
        self.count += 1
        upload.file.seek(0)
        data = upload.file.read()
        url = self.store.upload(
            path, data, upload.content_type or "application/octet-stream"
        )
        self.paths.append(path)
        return url

    def upload_all(
        self, uploads: Iterable[UploadFile], folder: str, default_name: str = "image"
    ) -> List[str]:
        return [self.upload(upload, folder, default_name) for upload in uploads]

    def discard(self) -> None:
        if not self.cleanup or not self.paths:
            return
        for path in reversed(self.paths):
            try:
                self.store.delete(path)
            except Exception:
                logger.warning("Failed to remove orphaned upload %s", path, exc_info=True)
        logger.info("Removed %d orphaned upload(s) for %s", len(self.paths), self.owner_id)
        self.paths = []
