from __future__ import annotations

import asyncio

from fastapi import UploadFile, status

from skillforge.core.config import settings
from skillforge.core.errors import ApiError, bad_request
from skillforge.parsing.extract import ExtractedDocument, ExtractionError, extract_resume_text
from skillforge.parsing.file_security import resolve_extension

CHUNK_BYTES = 1024 * 64


def require_file(file: UploadFile | None, message: str = "No file uploaded") -> UploadFile:
    if file is None or not (file.filename or "").strip():
        raise bad_request(message, code="NO_FILE")
    return file


async def read_upload(file: UploadFile, *, max_bytes: int | None = None) -> bytes:
    limit = max_bytes or settings.max_upload_bytes
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise ApiError(
                f"File too large. Maximum allowed size is {limit // (1024 * 1024)} MB.",
                code="FILE_TOO_LARGE",
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )
        chunks.append(chunk)
    payload = b"".join(chunks)
    if not payload:
        raise bad_request("File upload failed - no data received", code="EMPTY_FILE")
    return payload


def upload_extension(file: UploadFile, allowed: frozenset[str], unsupported_message: str) -> str:
    ext = resolve_extension(file.filename or "", file.content_type)
    if ext == "doc" and "docx" in allowed:
        raise bad_request(
            "Please upload a PDF or DOCX file. Legacy .doc format is not supported.",
            code="UNSUPPORTED_FILE",
        )
    if ext not in allowed:
        raise bad_request(unsupported_message, code="UNSUPPORTED_FILE")
    return ext


async def extract_uploaded_resume(
    file: UploadFile,
    *,
    allowed: frozenset[str],
    unsupported_message: str,
    failure_template: str = "Failed to process file: {error}. Please ensure it's a valid PDF or DOCX file.",
) -> tuple[ExtractedDocument, int]:
    ext = upload_extension(file, allowed, unsupported_message)
    content = await read_upload(file)
    filename = file.filename or f"resume.{ext}"
    try:
        document = await asyncio.to_thread(extract_resume_text, filename=filename, ext=ext, content=content)
    except ExtractionError as exc:
        raise bad_request(failure_template.format(error=str(exc).rstrip(".")), code="EXTRACTION_FAILED") from exc
    return document, len(content)
