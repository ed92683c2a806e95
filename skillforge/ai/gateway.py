from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Sequence

from skillforge.ai.config import AIConfig, load_ai_config
from skillforge.ai.factory import get_ai_client
from skillforge.ai.json_utils import InvalidModelJSON, parse_json_object
from skillforge.ai.types import GenerationOptions, ImagePart
from skillforge.analytics.db import log_ai_call

logger = logging.getLogger(__name__)


class AIServiceError(RuntimeError):
    def __init__(self, message: str, *, code: str = "ai_unavailable"):
        super().__init__(message)
        self.code = code


def _log_attempt(
    *,
    run_id: str,
    feature: str,
    cfg: AIConfig,
    key_index: int,
    status: str,
    started: float,
    error_code: str | None = None,
) -> None:
    try:
        log_ai_call(
            run_id=run_id,
            feature=feature or "unknown",
            provider=cfg.provider,
            model=cfg.model,
            key_index=key_index,
            status=status,
            error_code=error_code,
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
    except Exception:
        logger.debug("ai_call_logging_failed", exc_info=True)


def generate_json(
    prompt: str,
    *,
    feature: str,
    images: Sequence[ImagePart] = (),
    temperature: float = 0.4,
    max_output_tokens: int = 2048,
    json_mode: bool = False,
) -> dict[str, Any]:
    """Run ``prompt`` against each configured API key until one yields a JSON object.

    A key is skipped when the provider raises (quota, auth, network) or when its
    reply cannot be parsed as a JSON object. Raises ``AIServiceError`` once the
    list is exhausted.
    """
    cfg = load_ai_config()
    if not cfg.api_keys:
        raise AIServiceError("No AI API keys configured.", code="ai_not_configured")

    options = GenerationOptions(
        temperature=temperature,
        max_output_tokens=max_output_tokens,
        json_mode=json_mode,
    )
    run_id = uuid.uuid4().hex
    total = len(cfg.api_keys)
    last_error: Exception | None = None

    for index, api_key in enumerate(cfg.api_keys, start=1):
        started = time.perf_counter()
        try:
            client = get_ai_client(cfg, api_key)
            text = client.generate(prompt, images=images, options=options)
            logger.debug("ai_response feature=%s preview=%r", feature, text[:200])
            payload = parse_json_object(text)
        except InvalidModelJSON as exc:
            logger.warning("ai_invalid_json feature=%s key=%s/%s: %s", feature, index, total, exc)
            _log_attempt(
                run_id=run_id,
                feature=feature,
                cfg=cfg,
                key_index=index,
                status="invalid_json",
                started=started,
                error_code="invalid_json",
            )
            last_error = exc
            continue
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "ai_key_failed feature=%s key=%s/%s provider=%s: %s",
                feature,
                index,
                total,
                cfg.provider,
                str(exc)[:200],
            )
            _log_attempt(
                run_id=run_id,
                feature=feature,
                cfg=cfg,
                key_index=index,
                status="error",
                started=started,
                error_code=type(exc).__name__,
            )
            last_error = exc
            continue

        _log_attempt(run_id=run_id, feature=feature, cfg=cfg, key_index=index, status="success", started=started)
        logger.info("ai_success feature=%s key=%s/%s model=%s", feature, index, total, cfg.model)
        return payload

    raise AIServiceError("All AI API keys exhausted.", code="ai_exhausted") from last_error
