from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any

from docx import Document
from pypdf import PdfReader

from skillforge.parsing.file_security import validate_upload_signature

logger = logging.getLogger(__name__)

_BLANK_LINES_RE = re.compile(r"\n{3,}")


class ExtractionError(ValueError):
    pass


@dataclass(frozen=True)
class ExtractedDocument:
    filename: str
    source_type: str
    text: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def characters(self) -> int:
        return len(self.text)


def _normalize_extracted_text(text: str) -> str:
    value = (text or "").replace("\r\n", "\n").replace("\r", "\n").replace("\x00", "")
    return _BLANK_LINES_RE.sub("\n\n", value).strip()


def _extract_pdf(content: bytes) -> tuple[str, dict[str, Any]]:
    reader = PdfReader(BytesIO(content))
    page_chunks: list[str] = []
    for page in reader.pages:
        page_text = page.extract_text() or ""
        if page_text.strip():
            page_chunks.append(page_text)
    return "\n\n".join(page_chunks), {"pages": len(reader.pages)}


def _extract_docx(content: bytes) -> tuple[str, dict[str, Any]]:
    document = Document(BytesIO(content))
    lines = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(dict.fromkeys(cells)))
    return "\n".join(lines), {"paragraphs": len(document.paragraphs), "tables": len(document.tables)}


def _extract_txt(content: bytes) -> tuple[str, dict[str, Any]]:
    for encoding in ("utf-8", "utf-16", "latin-1"):
        try:
            return content.decode(encoding), {"encoding": encoding}
        except UnicodeDecodeError:
            continue
    return content.decode("utf-8", errors="replace"), {"encoding": "utf-8-replace"}


_EXTRACTORS = {
    "pdf": ("pdf", _extract_pdf),
    "docx": ("word", _extract_docx),
    "txt": ("text", _extract_txt),
}


def extract_resume_text(*, filename: str, ext: str, content: bytes) -> ExtractedDocument:
    """Extract plain text from a PDF, DOCX or TXT upload.

    ``ext`` must already be resolved by the caller (from filename or content
    type). Signature mismatches and parser failures raise ``ExtractionError``.
    """
    if ext not in _EXTRACTORS:
        raise ExtractionError(f"Unsupported file type '.{ext}'.")

    try:
        validate_upload_signature(ext=ext, content=content)
    except ValueError as exc:
        raise ExtractionError(str(exc)) from exc

    source_type, extractor = _EXTRACTORS[ext]
    try:
        raw_text, details = extractor(content)
    except Exception as exc:
        logger.warning("resume_extraction_failed file=%s ext=%s bytes=%s: %s", filename, ext, len(content), exc)
        raise ExtractionError(f"Unable to extract text from this {ext.upper()} file.") from exc

    text = _normalize_extracted_text(raw_text)
    details["extension"] = ext
    logger.info("resume_extracted file=%s ext=%s chars=%s", filename, ext, len(text))
    return ExtractedDocument(filename=filename, source_type=source_type, text=text, details=details)
