"""Local bucket/object store for uploaded files.

Objects live at ``<STORAGE_DIR>/<bucket>/<object path>``; object paths are
always relative and may not climb out of their bucket.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from nextgen.core.config import settings

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    pass


class ObjectNotFoundError(StorageError):
    pass


def _bucket_root(bucket: str) -> Path:
    return (Path(settings.storage_dir) / bucket).resolve()


def _resolve(bucket: str, object_path: str) -> Path:
    relative = PurePosixPath(object_path.replace("\\", "/"))
    if not object_path or relative.is_absolute() or ".." in relative.parts:
        raise StorageError(f"Invalid object path: {object_path!r}")
    root = _bucket_root(bucket)
    target = (root / Path(*relative.parts)).resolve()
    if root not in target.parents:
        raise StorageError(f"Invalid object path: {object_path!r}")
    return target


def upload(bucket: str, object_path: str, data: bytes) -> str:
    target = _resolve(bucket, object_path)
    if target.exists():
        raise StorageError(f"Object already exists: {object_path}")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    logger.info("storage_upload bucket=%s path=%s bytes=%s", bucket, object_path, len(data))
    return object_path


def download(bucket: str, object_path: str) -> bytes:
    target = _resolve(bucket, object_path)
    if not target.is_file():
        raise ObjectNotFoundError(f"Object not found: {object_path}")
    return target.read_bytes()


def remove(bucket: str, object_path: str) -> bool:
    target = _resolve(bucket, object_path)
    if not target.is_file():
        return False
    target.unlink()
    return True
