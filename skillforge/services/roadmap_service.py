from __future__ import annotations

from typing import Any

from skillforge.ai.gateway import generate_json
from skillforge.core.errors import bad_request
from skillforge.services.prompts import ROADMAP_LEVELS, build_roadmap_prompt
from skillforge.services.result_utils import safe_str_list

MAX_SKILL_CHARS = 80


def _normalize_phase(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, dict):
        return None
    title = str(value.get("title") or "").strip()
    if not title:
        return None
    return {
        "title": title,
        "duration": str(value.get("duration") or "").strip(),
        "topics": safe_str_list(value.get("topics"), max_items=12),
        "projects": safe_str_list(value.get("projects"), max_items=5),
    }


def generate_roadmap(skill: str | None, current_level: str = "Beginner") -> dict[str, Any]:
    name = (skill or "").strip()
    if not name:
        raise bad_request("Skill is required.", code="NO_SKILL")
    if len(name) > MAX_SKILL_CHARS:
        raise bad_request(f"Skill must be at most {MAX_SKILL_CHARS} characters.", code="INVALID_SKILL")
    if current_level not in ROADMAP_LEVELS:
        raise bad_request(f"currentLevel must be one of: {', '.join(ROADMAP_LEVELS)}.", code="INVALID_LEVEL")

    payload = generate_json(build_roadmap_prompt(name, current_level), feature="roadmap")
    phases = [phase for phase in map(_normalize_phase, payload.get("phases") or []) if phase]
    return {
        "skill": name,
        "currentLevel": current_level,
        "estimatedDuration": str(payload.get("estimatedDuration") or "").strip(),
        "phases": phases,
        "tips": safe_str_list(payload.get("tips")),
    }
