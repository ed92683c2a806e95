import logging

from fastapi import APIRouter, File, Form, Request, UploadFile

from skillforge.api.uploads import extract_uploaded_resume, require_file
from skillforge.core import resume_store
from skillforge.core.errors import bad_request
from skillforge.core.rate_limit import rate_limit
from skillforge.parsing.file_security import RESUME_FILE_EXTENSIONS
from skillforge.schemas.common import DataResponse
from skillforge.schemas.resume import UploadResumeFileResponse
from skillforge.schemas.tools import GithubRequest
from skillforge.services.github_service import analyze_github

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/github", response_model=DataResponse)
@rate_limit()
async def github_scan(request: Request, payload: GithubRequest):
    return DataResponse(data=await analyze_github(payload.username))


@router.post("/upload-resume-file", response_model=UploadResumeFileResponse)
@rate_limit()
async def upload_resume_file(
    request: Request,
    resume: UploadFile | None = File(default=None),
    github_username: str = Form(default="", alias="githubUsername", max_length=100),
):
    file = require_file(resume)
    document, size = await extract_uploaded_resume(
        file,
        allowed=RESUME_FILE_EXTENSIONS,
        unsupported_message="Unsupported file type. Use PDF, DOCX, or TXT.",
        failure_template="File processing failed: {error}.",
    )
    if not document.text.strip():
        raise bad_request("Could not extract text from this file.", code="EMPTY_TEXT")

    owner = github_username.strip()
    if owner:
        resume_store.save_resume(
            owner_id=owner,
            filename=document.filename,
            content_type=file.content_type or "application/octet-stream",
            extracted_text=document.text,
            size_bytes=size,
        )
    logger.info("resume_file_processed owner=%s file=%s chars=%s", owner or "-", document.filename, document.characters)

    return UploadResumeFileResponse(
        message="Resume processed successfully!",
        data={
            "fileName": document.filename,
            "textLength": document.characters,
            "saved": bool(owner),
        },
    )
