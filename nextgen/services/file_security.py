from __future__ import annotations

import re
from io import BytesIO
from pathlib import PurePath
from typing import Any
from zipfile import BadZipFile, ZipFile

ALLOWED_EXTENSIONS = ("pdf", "docx", "txt")

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_str(value: Any, max_len: int = 255) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    return text[:max_len]


def extension_from_filename(filename: str) -> str:
    if "." not in filename:
        return ""
    return _safe_str(filename.rsplit(".", 1)[-1], 20).lower()


def safe_object_name(filename: str) -> str:
    """Basename with anything outside ``[A-Za-z0-9._-]`` collapsed to ``_``."""
    base = PurePath(filename.replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return _safe_str(cleaned, 200) or "resume"


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
        return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)
    except BadZipFile:
        return False


def _is_probably_text_payload(content: bytes) -> bool:
    if not content:
        return False
    sample = content[:4096]
    if b"\x00" in sample:
        return False
    printable = 0
    for byte in sample:
        if byte in (9, 10, 13) or 32 <= byte <= 126 or byte >= 128:
            printable += 1
    return (printable / len(sample)) >= 0.75


def validate_upload_signature(*, filename: str, content: bytes) -> str:
    """Check the payload matches its extension; returns the extension."""
    ext = extension_from_filename(filename)
    if ext == "doc":
        raise ValueError("Legacy .doc is not supported. Convert to .docx.")

    if ext not in ALLOWED_EXTENSIONS:
        raise ValueError(f"Unsupported file type '.{ext}'. Allowed: {', '.join(ALLOWED_EXTENSIONS)}.")

    if ext == "pdf" and not content.startswith(PDF_MAGIC):
        raise ValueError("File signature does not match .pdf content.")

    if ext == "docx" and (not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",))):
        raise ValueError("File signature does not match .docx content.")

    if ext == "txt" and not _is_probably_text_payload(content):
        raise ValueError("File signature does not match .txt text content.")

    return ext
