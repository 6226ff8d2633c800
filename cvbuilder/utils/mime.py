# cvbuilder/utils/mime.py
from __future__ import annotations
from typing import Optional

DEFAULT_MIME = "application/octet-stream"
PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# What the multimodal endpoint accepts as inline data
SUPPORTED_MIME_TYPES = frozenset({
    PDF_MIME,
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "text/plain",
})

EXTENSION_MIME = {
    "pdf": PDF_MIME,
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "txt": "text/plain",
    "md": "text/plain",
    "csv": "text/csv",
    "rtf": "application/rtf",
    "doc": "application/msword",
    "docx": DOCX_MIME,
}

_GENERIC = {"", DEFAULT_MIME}


def _extension(filename: Optional[str]) -> str:
    name = (filename or "").strip()
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def resolve_mime_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """Declared type if it says something, else a guess from the extension, else the generic default."""
    declared = (content_type or "").split(";", 1)[0].strip().lower()
    if declared not in _GENERIC:
        return declared
    return EXTENSION_MIME.get(_extension(filename), DEFAULT_MIME)


def is_supported(mime_type: str) -> bool:
    return mime_type in SUPPORTED_MIME_TYPES
