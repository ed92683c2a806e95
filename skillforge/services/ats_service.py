from __future__ import annotations

import logging
import re
from typing import Any

from skillforge.ai.gateway import AIServiceError, generate_json
from skillforge.core.errors import bad_request, server_error
from skillforge.services.prompts import build_ats_prompt
from skillforge.services.result_utils import clamp_int, safe_str_list

logger = logging.getLogger(__name__)

MIN_EXTRACTED_CHARS = 50
RESUME_CHARS = 3000
JD_CHARS = 1500

_WHITESPACE_RE = re.compile(r"\s+")


def _squash(text: str, limit: int) -> str:
    return _WHITESPACE_RE.sub(" ", text or "").strip()[:limit]


def analyze_gap(extracted_text: str, job_description: str | None) -> dict[str, Any]:
    """Compare resume text with a JD the way a keyword-driven ATS would."""
    if not (job_description or "").strip():
        raise bad_request("Job Description text is required.", code="NO_JD")
    if len((extracted_text or "").strip()) < MIN_EXTRACTED_CHARS:
        raise bad_request("Resume text could not be read. Try a different PDF.", code="PDF_ERROR")

    resume_text = _squash(extracted_text, RESUME_CHARS)
    jd_text = _squash(job_description or "", JD_CHARS)

    try:
        analysis = generate_json(build_ats_prompt(resume_text, jd_text), feature="ats-gap", temperature=0.2)
    except AIServiceError as exc:
        logger.error("ats_analysis_failed code=%s: %s", exc.code, exc)
        raise server_error("ATS analysis failed.") from exc

    return {
        **analysis,
        "match_score": clamp_int(analysis.get("match_score"), 0),
        "hard_skills_missing": safe_str_list(analysis.get("hard_skills_missing"), max_items=15),
        "soft_skills_missing": safe_str_list(analysis.get("soft_skills_missing"), max_items=15),
        "formatting_issues": safe_str_list(analysis.get("formatting_issues"), max_items=15),
        "correction": str(analysis.get("correction") or "").strip(),
    }
