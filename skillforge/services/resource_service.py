from __future__ import annotations

import logging
from typing import Any

import httpx

from skillforge.core.config import settings
from skillforge.core.errors import bad_request, server_error

logger = logging.getLogger(__name__)

MAX_RESULTS = 6


def _video_from_item(item: dict[str, Any]) -> dict[str, str] | None:
    snippet = item.get("snippet") or {}
    video_id = (item.get("id") or {}).get("videoId")
    title = snippet.get("title")
    if not video_id or not title:
        return None
    thumbnails = snippet.get("thumbnails") or {}
    thumbnail = (thumbnails.get("medium") or {}).get("url") or (thumbnails.get("default") or {}).get("url") or ""
    return {
        "title": title,
        "channel": snippet.get("channelTitle") or "",
        "url": f"https://www.youtube.com/watch?v={video_id}",
        "thumbnail": thumbnail,
    }


def find_learning_videos(skill: str | None) -> dict[str, list[dict[str, str]]]:
    query = (skill or "").strip()
    if not query:
        raise bad_request("Skill is required.", code="NO_SKILL")
    if not settings.youtube_api_key:
        raise server_error("YouTube API key not configured.", code="NOT_CONFIGURED")

    params = {
        "part": "snippet",
        "maxResults": MAX_RESULTS,
        "type": "video",
        "q": f"{query} tutorial roadmap",
        "key": settings.youtube_api_key,
        "safeSearch": "moderate",
    }
    try:
        with httpx.Client(timeout=settings.youtube_timeout_s) as client:
            response = client.get(settings.youtube_search_url, params=params)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("youtube_search_failed skill=%s: %s", query, exc)
        raise server_error("Could not fetch resources. Please try again.", code="UPSTREAM_ERROR") from exc

    videos = [video for video in map(_video_from_item, data.get("items") or []) if video]
    logger.info("youtube_search_done skill=%s videos=%s", query, len(videos))
    return {"videos": videos}
