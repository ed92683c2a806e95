import asyncio

from fastapi import APIRouter, File, Request, UploadFile

from skillforge.api.uploads import read_upload, require_file, upload_extension
from skillforge.core.errors import bad_request
from skillforge.core.rate_limit import rate_limit
from skillforge.parsing.file_security import IMAGE_EXTENSIONS, IMAGE_MIME_TYPES, validate_upload_signature
from skillforge.schemas.common import DataResponse
from skillforge.services.linkedin_service import analyze_screenshot

router = APIRouter()


@router.post("/linkedin", response_model=DataResponse)
@rate_limit()
async def linkedin_screenshot(request: Request, screenshot: UploadFile | None = File(default=None)):
    file = require_file(screenshot, "Image screenshot is required.")
    ext = upload_extension(file, IMAGE_EXTENSIONS, "Please upload a PNG, JPG or WEBP screenshot.")
    content = await read_upload(file)
    try:
        validate_upload_signature(ext=ext, content=content)
    except ValueError as exc:
        raise bad_request(str(exc), code="INVALID_IMAGE") from exc

    data = await asyncio.to_thread(
        analyze_screenshot,
        filename=file.filename or f"screenshot.{ext}",
        content=content,
        mime_type=IMAGE_MIME_TYPES[ext],
    )
    return DataResponse(data=data)
