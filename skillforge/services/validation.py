from __future__ import annotations

import re

MIN_RESUME_CHARS = 100
MIN_KEYWORD_HITS = 4
HEAD_WINDOW_CHARS = 200

RESUME_KEYWORDS = (
    "experience", "skills", "education", "work", "project", "employment",
    "qualification", "technical", "professional", "background", "summary",
    "about", "contact", "email", "phone", "achievement", "responsibility",
    "university", "degree", "certificate", "course", "programming", "language",
    "worked", "developed", "designed", "implemented", "managed", "led",
    "github", "linkedin", "portfolio", "award", "certification",
)

NON_RESUME_PATTERNS = (
    re.compile(r"^chapter\s+\d+", re.IGNORECASE),
    re.compile(r"^the\s+following\s+is\s+an\s+excerpt", re.IGNORECASE),
    re.compile(r"^this\s+article\s+discusses", re.IGNORECASE),
    re.compile(r"^lorem\s+ipsum", re.IGNORECASE),
    re.compile(r"©\s*\d{4}"),
)


def resume_keyword_hits(text: str) -> int:
    lower_text = (text or "").lower()
    return sum(1 for keyword in RESUME_KEYWORDS if keyword in lower_text)


def is_valid_resume(text: str | None) -> bool:
    """Cheap keyword heuristic that rejects obvious non-resume text."""
    if not text or len(text.strip()) < MIN_RESUME_CHARS:
        return False

    if resume_keyword_hits(text) < MIN_KEYWORD_HITS:
        return False

    head = text.lower()[:HEAD_WINDOW_CHARS]
    return not any(pattern.search(head) for pattern in NON_RESUME_PATTERNS)
