from __future__ import annotations

from typing import Any


def clamp_int(value: Any, default: int, min_value: int = 0, max_value: int = 100) -> int:
    try:
        parsed = int(round(float(value)))
    except (TypeError, ValueError):
        return default
    return max(min_value, min(max_value, parsed))


def safe_str_list(value: Any, max_items: int = 10, max_len: int = 400) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    items: list[str] = []
    for item in value:
        text = str(item).strip() if item is not None else ""
        if text:
            items.append(text[:max_len])
        if len(items) >= max_items:
            break
    return items


def clamp_score_fields(payload: dict[str, Any], fields: tuple[str, ...], default: int = 0) -> dict[str, Any]:
    for name in fields:
        if name in payload:
            payload[name] = clamp_int(payload[name], default)
    return payload
