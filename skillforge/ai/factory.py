from skillforge.ai.config import AIConfig
from skillforge.ai.types import AIClient

from skillforge.ai.providers.gemini_provider import GeminiProvider
from skillforge.ai.providers.openai_provider import OpenAIProvider


def get_ai_client(cfg: AIConfig, api_key: str) -> AIClient:
    if cfg.provider == "gemini":
        return GeminiProvider(model=cfg.model, api_key=api_key, timeout_s=cfg.timeout_s)

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, api_key=api_key, timeout_s=cfg.timeout_s)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
