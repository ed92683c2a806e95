import asyncio
import logging

from fastapi import APIRouter, File, Form, Request, UploadFile

from skillforge.api.uploads import extract_uploaded_resume, require_file
from skillforge.core import resume_store
from skillforge.core.errors import bad_request, not_found
from skillforge.core.rate_limit import rate_limit
from skillforge.parsing.file_security import RESUME_EXTENSIONS
from skillforge.schemas.common import DataResponse
from skillforge.schemas.resume import (
    AuditTextRequest,
    ResumeAnalysisResponse,
    RoastRequest,
    SavedResume,
    SavedResumeResponse,
    TailorRequest,
)
from skillforge.services.resume_service import (
    audit_resume,
    audit_resume_document,
    ensure_resume_text,
    roast_resume,
    tailor_resume,
)

logger = logging.getLogger(__name__)

router = APIRouter()

UNSUPPORTED_RESUME_MESSAGE = "Please upload a PDF or DOCX file"


@router.post("/resume/parse", response_model=ResumeAnalysisResponse)
@rate_limit()
async def parse_resume(request: Request, resume: UploadFile | None = File(default=None)):
    file = require_file(resume)
    document, _ = await extract_uploaded_resume(
        file,
        allowed=RESUME_EXTENSIONS,
        unsupported_message=UNSUPPORTED_RESUME_MESSAGE,
    )
    if not document.text:
        raise bad_request("Could not extract text from this file.", code="EMPTY_TEXT")
    return ResumeAnalysisResponse(
        data={
            "filename": document.filename,
            "sourceType": document.source_type,
            "characters": document.characters,
        },
        extracted_text=document.text,
    )


@router.post("/resume/audit", response_model=ResumeAnalysisResponse)
@rate_limit()
async def audit_resume_file(request: Request, resume: UploadFile | None = File(default=None)):
    file = require_file(resume)
    logger.info("resume_upload_received file=%s size=%s", file.filename, file.size)
    document, _ = await extract_uploaded_resume(
        file,
        allowed=RESUME_EXTENSIONS,
        unsupported_message=UNSUPPORTED_RESUME_MESSAGE,
    )
    data = await asyncio.to_thread(audit_resume_document, document)
    return ResumeAnalysisResponse(data=data, extracted_text=document.text)


@router.post("/resume/audit-text", response_model=ResumeAnalysisResponse)
@rate_limit()
def audit_resume_from_text(request: Request, payload: AuditTextRequest):
    resume_text = ensure_resume_text(payload.resume_text, source="text")
    data = audit_resume(resume_text, with_guardrails=True)
    return ResumeAnalysisResponse(data=data, extracted_text=payload.resume_text)


@router.post("/resume/tailor", response_model=DataResponse)
@rate_limit()
def tailor_resume_to_jd(request: Request, payload: TailorRequest):
    return DataResponse(data=tailor_resume(payload.existing_resume_text, payload.job_description))


@router.post("/resume/roast", response_model=DataResponse)
@rate_limit()
def roast(request: Request, payload: RoastRequest):
    return DataResponse(data=roast_resume(payload.resume_text, payload.level))


@router.post("/resume/saved", response_model=SavedResumeResponse)
@rate_limit()
async def save_resume(
    request: Request,
    resume: UploadFile | None = File(default=None),
    owner_id: str = Form(default="", alias="ownerId", max_length=200),
):
    if not owner_id.strip():
        raise bad_request("ownerId is required.", code="NO_OWNER")
    file = require_file(resume)
    document, size = await extract_uploaded_resume(
        file,
        allowed=RESUME_EXTENSIONS,
        unsupported_message=UNSUPPORTED_RESUME_MESSAGE,
    )
    if not document.text:
        raise bad_request("Could not extract text from this file.", code="EMPTY_TEXT")
    record = resume_store.save_resume(
        owner_id=owner_id,
        filename=document.filename,
        content_type=file.content_type or "application/octet-stream",
        extracted_text=document.text,
        size_bytes=size,
    )
    logger.info("resume_saved owner=%s file=%s chars=%s", record["owner_id"], document.filename, document.characters)
    return SavedResumeResponse(resume=_saved_resume(record))


@router.get("/resume/saved/{owner_id}", response_model=SavedResumeResponse)
def get_saved_resume(owner_id: str):
    record = resume_store.get_saved_resume(owner_id)
    if record is None:
        raise not_found("No saved resume found", code="NO_SAVED_RESUME")
    return SavedResumeResponse(resume=_saved_resume(record))


@router.delete("/resume/saved/{owner_id}", response_model=DataResponse)
def delete_saved_resume(owner_id: str):
    return DataResponse(data={"deleted": resume_store.delete_saved_resume(owner_id)})


def _saved_resume(record: dict) -> SavedResume:
    return SavedResume(
        filename=record["filename"],
        extracted_text=record["extracted_text"],
        characters=len(record["extracted_text"]),
        uploaded_at=record["uploaded_at"],
    )
