import asyncio

from fastapi import APIRouter, File, Form, Request, UploadFile

from skillforge.api.uploads import extract_uploaded_resume, require_file
from skillforge.core.errors import bad_request
from skillforge.core.rate_limit import rate_limit
from skillforge.parsing.file_security import RESUME_EXTENSIONS
from skillforge.schemas.common import DataResponse
from skillforge.schemas.resume import MAX_TEXT_CHARS
from skillforge.services.ats_service import analyze_gap

router = APIRouter()


@router.post("/ats", response_model=DataResponse)
@rate_limit()
async def ats_gap_analysis(
    request: Request,
    resume: UploadFile | None = File(default=None),
    job_description: str = Form(default="", alias="jobDescription", max_length=MAX_TEXT_CHARS),
):
    file = require_file(resume, "Resume PDF is required.")
    if not job_description.strip():
        raise bad_request("Job Description text is required.", code="NO_JD")

    document, _ = await extract_uploaded_resume(
        file,
        allowed=RESUME_EXTENSIONS,
        unsupported_message="Please upload a PDF or DOCX file",
        failure_template="Resume text could not be read ({error}). Try a different PDF.",
    )
    data = await asyncio.to_thread(analyze_gap, document.text, job_description)
    return DataResponse(data=data)
