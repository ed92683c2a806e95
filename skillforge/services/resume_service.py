from __future__ import annotations

import logging
from typing import Any

from skillforge.ai.gateway import generate_json
from skillforge.core.config import settings
from skillforge.core.errors import bad_request
from skillforge.parsing.extract import ExtractedDocument
from skillforge.services.prompts import (
    ROAST_LEVELS,
    build_audit_prompt,
    build_roast_prompt,
    build_tailor_prompt,
)
from skillforge.services.result_utils import clamp_int, clamp_score_fields, safe_str_list
from skillforge.services.validation import is_valid_resume

logger = logging.getLogger(__name__)

MIN_TEXT_CHARS = 50
TAILOR_FIELD_CHARS = 3000
AI_SPEAK_WARNING_THRESHOLD = 70

_SHORT_TEXT_MESSAGES = {
    "file": "Resume text is too short or empty. Please upload a valid resume.",
    "text": "Resume text is too short or empty. Please provide at least 50 characters.",
}
_NOT_RESUME_MESSAGES = {
    "file": (
        "The uploaded file doesn't appear to be a resume. Please upload a valid resume with "
        "experience, skills, education, or work history."
    ),
    "text": (
        "The text doesn't appear to be a resume. Please provide a resume with experience, "
        "skills, education, or work history."
    ),
}


def ensure_resume_text(text: str | None, *, source: str = "text") -> str:
    value = (text or "").strip()
    if len(value) < MIN_TEXT_CHARS:
        raise bad_request(_SHORT_TEXT_MESSAGES[source], code="TEXT_TOO_SHORT")
    if not is_valid_resume(value):
        raise bad_request(_NOT_RESUME_MESSAGES[source], code="NOT_A_RESUME")
    return value


def _normalize_audit(payload: dict[str, Any]) -> dict[str, Any]:
    clamp_score_fields(payload, ("atsScore", "aiSpeakScore"))
    if clamp_int(payload.get("aiSpeakScore"), 0) > AI_SPEAK_WARNING_THRESHOLD and not payload.get("aiDetectionWarning"):
        payload["aiDetectionWarning"] = (
            "This resume reads as heavily AI-generated. Rewrite key bullets in your own words."
        )
    jobs = payload.get("recommendedJobs")
    if isinstance(jobs, list):
        for job in jobs:
            if isinstance(job, dict):
                clamp_score_fields(job, ("matchConfidence",))
                job["applyOn"] = safe_str_list(job.get("applyOn"), max_items=4)
    return payload


def audit_resume(resume_text: str, *, with_guardrails: bool = True) -> dict[str, Any]:
    prompt = build_audit_prompt(
        resume_text,
        limit=settings.resume_prompt_chars,
        with_guardrails=with_guardrails,
    )
    logger.info("resume_audit_started chars=%s guardrails=%s", len(resume_text), with_guardrails)
    return _normalize_audit(generate_json(prompt, feature="resume-audit"))


def audit_resume_document(document: ExtractedDocument) -> dict[str, Any]:
    resume_text = ensure_resume_text(document.text, source="file")
    return audit_resume(resume_text, with_guardrails=False)


def tailor_resume(resume_text: str | None, job_description: str | None) -> dict[str, Any]:
    resume_value = (resume_text or "").strip()
    jd_value = (job_description or "").strip()
    if not resume_value or not jd_value:
        raise bad_request("Resume and JD both required", code="MISSING_FIELDS")

    prompt = build_tailor_prompt(resume_value, jd_value, limit=TAILOR_FIELD_CHARS)
    payload = generate_json(prompt, feature="resume-tailor")
    return clamp_score_fields(payload, ("matchScore", "yaltoScore"))


def roast_resume(resume_text: str | None, level: str = "Mild") -> dict[str, Any]:
    value = (resume_text or "").strip()
    if not value:
        raise bad_request("Add or paste a resume to roast.", code="NO_TEXT")
    if level not in ROAST_LEVELS:
        raise bad_request(f"Roast level must be one of: {', '.join(ROAST_LEVELS)}.", code="INVALID_LEVEL")

    payload = generate_json(
        build_roast_prompt(value, level, limit=settings.resume_prompt_chars),
        feature="resume-roast",
        temperature=0.9,
    )
    return {
        "level": level,
        "playful_roast": safe_str_list(payload.get("playful_roast"), max_items=6),
        "strengths": safe_str_list(payload.get("strengths")),
        "gaps": safe_str_list(payload.get("gaps")),
        "actionable_improvements": safe_str_list(payload.get("actionable_improvements")),
        "warnings": safe_str_list(payload.get("warnings")),
    }
