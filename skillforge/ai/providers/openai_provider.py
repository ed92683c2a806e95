from __future__ import annotations

import base64
import os
from typing import Any, Optional, Sequence

from openai import OpenAI

from skillforge.ai.types import GenerationOptions, ImagePart


class OpenAIProvider:
    provider = "openai"

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 0,
    ):
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")
        self.model = model
        self._client = OpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=int(os.getenv("OPENAI_MAX_RETRIES", str(max_retries))),
        )

    def generate(
        self,
        prompt: str,
        *,
        images: Sequence[ImagePart] = (),
        options: GenerationOptions = GenerationOptions(),
    ) -> str:
        content: str | list[dict[str, Any]] = prompt
        if images:
            content = [{"type": "text", "text": prompt}]
            for image in images:
                encoded = base64.b64encode(image.data).decode("utf-8")
                content.append(
                    {"type": "image_url", "image_url": {"url": f"data:{image.mime_type};base64,{encoded}"}}
                )

        create_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": content}],
            "temperature": options.temperature,
            "max_tokens": options.max_output_tokens,
        }
        if options.json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        response = self._client.chat.completions.create(**create_kwargs)
        text = response.choices[0].message.content if response.choices else ""
        return (text or "").strip()
