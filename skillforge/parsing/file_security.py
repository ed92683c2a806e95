from __future__ import annotations

from io import BytesIO
from zipfile import ZipFile

RESUME_EXTENSIONS = frozenset({"pdf", "docx"})
RESUME_FILE_EXTENSIONS = frozenset({"pdf", "docx", "txt"})
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "webp"})

CONTENT_TYPE_EXTENSIONS = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/msword": "doc",
    "text/plain": "txt",
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}

IMAGE_MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}

PDF_MAGIC = b"%PDF-"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"
WEBP_RIFF_MAGIC = b"RIFF"
WEBP_WEBP_MAGIC = b"WEBP"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


def extension_from_filename(filename: str) -> str:
    name = (filename or "").strip()
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()[:20]


def resolve_extension(filename: str, content_type: str | None = None) -> str:
    ext = extension_from_filename(filename)
    if ext:
        return ext
    sanitized = (content_type or "").split(";")[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(sanitized, "")


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
        return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)
    except Exception:
        return False


def _is_probably_text_payload(content: bytes) -> bool:
    if not content:
        return False
    sample = content[:4096]
    if b"\x00" in sample:
        return False
    try:
        sample.decode("utf-8")
        return True
    except UnicodeDecodeError:
        pass
    printable = 0
    for byte in sample:
        if byte in (9, 10, 13) or 32 <= byte <= 126:
            printable += 1
    return (printable / len(sample)) >= 0.75


def validate_upload_signature(*, ext: str, content: bytes) -> None:
    if ext == "doc":
        raise ValueError("Legacy .doc format is not supported. Please upload a PDF or DOCX file.")

    if ext == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise ValueError("File signature does not match .pdf content.")
        return

    if ext == "docx":
        if not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",)):
            raise ValueError("File signature does not match .docx content.")
        return

    if ext == "txt":
        if not _is_probably_text_payload(content):
            raise ValueError("File signature does not match .txt text content.")
        return

    if ext == "png":
        if not content.startswith(PNG_MAGIC):
            raise ValueError("File signature does not match .png content.")
        return

    if ext in {"jpg", "jpeg"}:
        if not content.startswith(JPEG_MAGIC):
            raise ValueError("File signature does not match .jpg/.jpeg content.")
        return

    if ext == "webp":
        if len(content) < 12 or not content.startswith(WEBP_RIFF_MAGIC) or content[8:12] != WEBP_WEBP_MAGIC:
            raise ValueError("File signature does not match .webp content.")
        return

    raise ValueError(f"Unsupported file type '.{ext}'.")
