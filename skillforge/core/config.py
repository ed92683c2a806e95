from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    max_upload_mb: int
    resume_prompt_chars: int
    analytics_enabled: bool
    analytics_db_path: str
    analytics_retention_days: int
    resume_store_db_path: str
    github_api_base: str
    github_token: str | None
    github_timeout_s: float
    youtube_api_key: str | None
    youtube_search_url: str
    youtube_timeout_s: float

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    max_upload_mb=max(1, _get_env_int("MAX_UPLOAD_MB", 10)),
    resume_prompt_chars=_get_env_int("RESUME_PROMPT_CHARS", 4000),
    analytics_enabled=_get_env_bool("ANALYTICS_ENABLED", True),
    analytics_db_path=_get_env("ANALYTICS_DB_PATH", "data/analytics.db") or "data/analytics.db",
    analytics_retention_days=_get_env_int("ANALYTICS_RETENTION_DAYS", 30),
    resume_store_db_path=_get_env("RESUME_STORE_DB_PATH", "data/resumes.db") or "data/resumes.db",
    github_api_base=(_get_env("GITHUB_API_BASE", "https://api.github.com") or "https://api.github.com").rstrip("/"),
    github_token=_get_env("GITHUB_TOKEN"),
    github_timeout_s=float(_get_env("GITHUB_TIMEOUT_S", "10") or "10"),
    youtube_api_key=_get_env("YOUTUBE_API_KEY"),
    youtube_search_url=_get_env("YOUTUBE_SEARCH_URL", "https://www.googleapis.com/youtube/v3/search")
    or "https://www.googleapis.com/youtube/v3/search",
    youtube_timeout_s=float(_get_env("YOUTUBE_TIMEOUT_S", "10") or "10"),
)
