import os
from dataclasses import dataclass

DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash-lite",
    "openai": "gpt-4o-mini",
}

KEY_ENV_VARS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_keys: tuple[str, ...]
    timeout_s: float


def parse_api_keys(raw: str | None) -> tuple[str, ...]:
    keys = [item.strip() for item in (raw or "").split(",")]
    return tuple(dict.fromkeys(key for key in keys if key))


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "gemini").strip().lower()
    model = (os.getenv("AI_MODEL") or DEFAULT_MODELS.get(provider, "")).strip()
    key_env = KEY_ENV_VARS.get(provider, "")
    api_keys = parse_api_keys(os.getenv(key_env)) if key_env else ()
    timeout_s = float(os.getenv("AI_TIMEOUT_S", "30"))
    return AIConfig(provider=provider, model=model, api_keys=api_keys, timeout_s=timeout_s)
