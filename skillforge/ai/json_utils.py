from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?", flags=re.IGNORECASE)


class InvalidModelJSON(ValueError):
    pass


def clean_json_text(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def parse_json_object(text: str) -> dict[str, Any]:
    """Parse the JSON object out of a model reply.

    Models often wrap the payload in markdown fences or add a sentence before
    or after it. Fences are stripped first; if that still does not parse, the
    outermost ``{...}`` span is tried.
    """
    cleaned = clean_json_text(text)
    if not cleaned:
        raise InvalidModelJSON("Model returned an empty response.")

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end <= start:
            raise InvalidModelJSON(f"Model response is not JSON: {exc.msg}") from exc
        try:
            parsed = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as inner:
            raise InvalidModelJSON(f"Model response is not JSON: {inner.msg}") from inner

    if not isinstance(parsed, dict):
        raise InvalidModelJSON("Model response must be a JSON object.")
    return parsed
