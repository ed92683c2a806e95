from __future__ import annotations

import logging
from typing import Any

from skillforge.ai.gateway import AIServiceError, generate_json
from skillforge.ai.types import ImagePart
from skillforge.core.errors import server_error
from skillforge.services.prompts import build_linkedin_prompt
from skillforge.services.result_utils import clamp_int, safe_str_list

logger = logging.getLogger(__name__)


def _normalize_photo_report(value: Any) -> dict[str, Any]:
    report = value if isinstance(value, dict) else {}
    helpful = report.get("helpful_data")
    return {
        "strengths": safe_str_list(report.get("strengths"), max_items=5, max_len=120),
        "issues": safe_str_list(report.get("issues"), max_items=5, max_len=120),
        "suggestions": safe_str_list(report.get("suggestions"), max_items=5, max_len=120),
        "quality_score": clamp_int(report.get("quality_score"), 0),
        "helpful_data": {str(k): str(v)[:120] for k, v in helpful.items()} if isinstance(helpful, dict) else {},
    }


def analyze_screenshot(*, filename: str, content: bytes, mime_type: str) -> dict[str, Any]:
    logger.info("linkedin_vision_started file=%s bytes=%s", filename, len(content))
    try:
        data = generate_json(
            build_linkedin_prompt(),
            feature="linkedin-vision",
            images=[ImagePart(data=content, mime_type=mime_type)],
            temperature=0.5,
            max_output_tokens=900,
            json_mode=True,
        )
    except AIServiceError as exc:
        logger.error("linkedin_vision_failed file=%s code=%s", filename, exc.code)
        raise server_error("Failed to analyze image.", code="VISION_ERROR") from exc

    return {
        **data,
        "visual_score": clamp_int(data.get("visual_score"), 0),
        "critique": str(data.get("critique") or "").strip(),
        "headline_suggestion": str(data.get("headline_suggestion") or "").strip(),
        "action_items": safe_str_list(data.get("action_items"), max_items=5, max_len=120),
        "photo_report": _normalize_photo_report(data.get("photo_report")),
    }
