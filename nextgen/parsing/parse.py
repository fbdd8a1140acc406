from __future__ import annotations

import hashlib
from io import BytesIO
from pathlib import PurePath

from docx import Document
from pypdf import PdfReader

from .models import MIME_TYPES, ParsedBlock, ParsedDoc


class UnsupportedDocumentError(ValueError):
    pass


def detect_source_type(file_name: str) -> str:
    extension = PurePath(file_name).suffix.lower().lstrip(".")
    if extension not in MIME_TYPES:
        raise UnsupportedDocumentError(
            f"Unsupported file type '.{extension}'. Supported types: .pdf, .docx, .txt"
        )
    return extension


def _compute_doc_id(text: str, data: bytes) -> str:
    seed = text.encode("utf-8", errors="ignore") if text.strip() else data
    return hashlib.sha256(seed).hexdigest()[:16]


def _parse_txt(data: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    text = data.decode("utf-8", errors="replace")
    warnings = [] if text.strip() else ["Text file is empty."]
    return text, [], warnings


def _parse_pdf(data: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []
    blocks: list[ParsedBlock] = []

    try:
        reader = PdfReader(BytesIO(data))
        text_parts: list[str] = []
        for index, page in enumerate(reader.pages, start=1):
            page_text = (page.extract_text() or "").strip()
            if page_text:
                text_parts.append(page_text)
                blocks.append(ParsedBlock(page=index, text=page_text))
        if not text_parts:
            warnings.append("No extractable text found in PDF.")
        return "\n".join(text_parts), blocks, warnings
    except Exception as exc:
        warnings.append(f"PDF parsing failed: {exc}")
        return "", blocks, warnings


def _parse_docx(data: bytes) -> tuple[str, list[ParsedBlock], list[str]]:
    warnings: list[str] = []
    blocks: list[ParsedBlock] = []

    try:
        document = Document(BytesIO(data))
        paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
        for paragraph_text in paragraphs:
            blocks.append(ParsedBlock(page=None, text=paragraph_text))
        if not paragraphs:
            warnings.append("No extractable text found in DOCX.")
        return "\n".join(paragraphs), blocks, warnings
    except Exception as exc:
        warnings.append(f"DOCX parsing failed: {exc}")
        return "", blocks, warnings


_PARSERS = {
    "txt": _parse_txt,
    "pdf": _parse_pdf,
    "docx": _parse_docx,
}


def parse_document(data: bytes, file_name: str) -> ParsedDoc:
    """Extract plain text from an uploaded resume held in memory."""
    source_type = detect_source_type(file_name)
    text, blocks, warnings = _PARSERS[source_type](data)
    return ParsedDoc(
        doc_id=_compute_doc_id(text, data),
        source_type=source_type,
        file_name=PurePath(file_name).name,
        text=text,
        blocks=blocks,
        parsing_warnings=warnings,
    )
