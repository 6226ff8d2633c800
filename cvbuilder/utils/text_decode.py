# cvbuilder/utils/text_decode.py
"""
Best-effort local text decoding for uploads the AI endpoint cannot take inline.

Word documents (.docx) are read with python-docx; everything else is decoded as
UTF-8. The caller decides whether the result is good enough to skip the
provider call (see ``is_substantive``).
"""
from __future__ import annotations

import logging
import re
from io import BytesIO

from docx import Document

from cvbuilder.utils.mime import DOCX_MIME

logger = logging.getLogger(__name__)

_WS = re.compile(r"[ \t]+")
_BLANKS = re.compile(r"\n\s*\n\s*\n+")
PRINTABLE_RATIO = 0.85


def _clean(text: str) -> str:
    t = (text or "").replace("\r\n", "\n").replace("\r", "\n").replace("\x00", "")
    t = _WS.sub(" ", t)
    t = _BLANKS.sub("\n\n", t)
    return t.strip()


def _docx_text(data: bytes) -> str:
    doc = Document(BytesIO(data))
    parts = [p.text.strip() for p in doc.paragraphs if p.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [c.text.strip() for c in row.cells if c.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n\n".join(parts)


def decode_text(data: bytes, filename: str, mime_type: str) -> str:
    """Return whatever text can be read locally; empty string when nothing can."""
    if not data:
        return ""
    if mime_type == DOCX_MIME or (filename or "").lower().endswith(".docx"):
        try:
            return _clean(_docx_text(data))
        except Exception as e:  # corrupt/zipped garbage: fall through to plain decode
            logger.warning("python-docx could not read %s: %s", filename, e)
    return _clean(data.decode("utf-8", errors="replace"))


def is_substantive(text: str, min_chars: int) -> bool:
    t = (text or "").strip()
    if len(t) <= min_chars:
        return False
    # U+FFFD comes from undecodable bytes, so it does not count as text
    printable = sum(1 for ch in t if ch != "\ufffd" and (ch.isprintable() or ch in "\n\t"))
    return printable / len(t) >= PRINTABLE_RATIO
