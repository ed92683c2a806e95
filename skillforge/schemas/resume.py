from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

MAX_TEXT_CHARS = 200_000

RoastLevel = Literal["Mild", "Medium", "Spicy"]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AuditTextRequest(CamelModel):
    resume_text: str = Field(default="", alias="resumeText", max_length=MAX_TEXT_CHARS)


class TailorRequest(CamelModel):
    job_description: str = Field(default="", alias="jobDescription", max_length=MAX_TEXT_CHARS)
    existing_resume_text: str = Field(default="", alias="existingResumeText", max_length=MAX_TEXT_CHARS)


class RoastRequest(CamelModel):
    resume_text: str = Field(default="", alias="resumeText", max_length=MAX_TEXT_CHARS)
    level: RoastLevel = "Mild"


class ResumeAnalysisResponse(CamelModel):
    success: Literal[True] = True
    data: dict[str, Any] = Field(default_factory=dict)
    extracted_text: str = Field(alias="extractedText")


class SavedResume(CamelModel):
    filename: str
    extracted_text: str = Field(alias="extractedText")
    characters: int = Field(ge=0)
    uploaded_at: datetime = Field(alias="uploadedAt")


class SavedResumeResponse(CamelModel):
    success: Literal[True] = True
    resume: SavedResume


class UploadResumeFileResponse(CamelModel):
    success: Literal[True] = True
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
