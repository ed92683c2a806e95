from __future__ import annotations

import asyncio
import logging
import re
from collections import Counter
from typing import Any

import httpx

from skillforge.ai.gateway import AIServiceError, generate_json
from skillforge.core.config import settings
from skillforge.core.errors import bad_request, not_found, server_error
from skillforge.services.prompts import build_github_prompt
from skillforge.services.result_utils import safe_str_list

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})$")
TOP_LANGUAGE_COUNT = 5
AI_REPO_CONTEXT = 10
PLACEHOLDER_STACK = "Detected"


class GithubUserNotFound(Exception):
    pass


def _headers() -> dict[str, str]:
    headers = {"Accept": "application/vnd.github+json", "User-Agent": "skillforge-api"}
    if settings.github_token:
        headers["Authorization"] = f"token {settings.github_token}"
    return headers


async def fetch_github_data(username: str) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    base = settings.github_api_base
    async with httpx.AsyncClient(timeout=settings.github_timeout_s, headers=_headers()) as client:
        results = await asyncio.gather(
            client.get(f"{base}/users/{username}"),
            client.get(f"{base}/users/{username}/repos", params={"sort": "updated", "per_page": 100}),
            return_exceptions=True,
        )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    user_res, repo_res = results
    if user_res.status_code == 404:
        raise GithubUserNotFound(username)
    user_res.raise_for_status()
    repo_res.raise_for_status()
    repos = repo_res.json()
    return user_res.json(), repos if isinstance(repos, list) else []


def total_stars(repos: list[dict[str, Any]]) -> int:
    return sum(int(repo.get("stargazers_count") or 0) for repo in repos)


def language_breakdown(repos: list[dict[str, Any]], limit: int = TOP_LANGUAGE_COUNT) -> list[dict[str, Any]]:
    counts = Counter(repo["language"] for repo in repos if repo.get("language"))
    total = sum(counts.values())
    if not total:
        return []
    shares = [
        {"language": language, "percentage": int(count * 100 / total + 0.5)}
        for language, count in counts.items()
    ]
    shares.sort(key=lambda item: item["percentage"], reverse=True)
    return shares[:limit]


def repo_context(repos: list[dict[str, Any]], limit: int = AI_REPO_CONTEXT) -> list[dict[str, Any]]:
    return [
        {
            "name": repo.get("name"),
            "desc": repo.get("description"),
            "lang": repo.get("language"),
            "stars": repo.get("stargazers_count"),
        }
        for repo in repos[:limit]
    ]


def _stack_or_fallback(value: Any, fallback: list[str]) -> list[str]:
    items = safe_str_list(value, max_items=12, max_len=60)
    if not items or items[0] == PLACEHOLDER_STACK:
        return list(fallback)
    return items


def merge_tech_stack(analysis: dict[str, Any], language_names: list[str]) -> dict[str, list[str]]:
    stack = analysis.get("tech_stack")
    if not isinstance(stack, dict):
        stack = {}
    return {
        "frontend": _stack_or_fallback(stack.get("frontend"), language_names),
        "backend": _stack_or_fallback(stack.get("backend"), []),
    }


async def analyze_github(username: str | None) -> dict[str, Any]:
    handle = (username or "").strip().lstrip("@")
    if not handle:
        raise bad_request("Username required", code="NO_USERNAME")
    if not USERNAME_RE.match(handle):
        raise bad_request("Invalid GitHub username.", code="INVALID_USERNAME")

    logger.info("github_scan_started username=%s", handle)
    try:
        profile, repos = await fetch_github_data(handle)
    except GithubUserNotFound as exc:
        raise not_found("User not found", code="USER_NOT_FOUND") from exc
    except httpx.HTTPError as exc:
        logger.error("github_fetch_failed username=%s: %s", handle, exc)
        raise server_error("Scan failed", code="GITHUB_ERROR") from exc

    top_languages = language_breakdown(repos)
    language_names = [item["language"] for item in top_languages]

    try:
        analysis = await asyncio.to_thread(
            generate_json,
            build_github_prompt(profile, repo_context(repos), language_names),
            feature="github-analysis",
        )
    except AIServiceError as exc:
        logger.error("github_analysis_failed username=%s code=%s", handle, exc.code)
        raise server_error("Scan failed", code="AI_ERROR") from exc

    return {
        "profile": {
            "name": profile.get("name") or handle,
            "avatar": profile.get("avatar_url"),
            "url": profile.get("html_url"),
            "bio": profile.get("bio"),
            "stats": {
                "followers": int(profile.get("followers") or 0),
                "repos": int(profile.get("public_repos") or 0),
                "stars": total_stars(repos),
                "topLanguages": top_languages,
            },
        },
        "analysis": {
            **analysis,
            "tech_stack": merge_tech_stack(analysis, language_names),
        },
    }
