from __future__ import annotations

from typing import Sequence

from google import genai
from google.genai import types

from skillforge.ai.types import GenerationOptions, ImagePart


class GeminiProvider:
    provider = "gemini"

    def __init__(self, model: str, api_key: str, timeout_s: float = 30.0):
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("GEMINI_API_KEY is missing")
        self.model = model
        self._client = genai.Client(
            api_key=key,
            http_options=types.HttpOptions(timeout=int(timeout_s * 1000)),
        )

    def generate(
        self,
        prompt: str,
        *,
        images: Sequence[ImagePart] = (),
        options: GenerationOptions = GenerationOptions(),
    ) -> str:
        contents: list[types.Part | str] = [
            types.Part.from_bytes(data=image.data, mime_type=image.mime_type) for image in images
        ]
        contents.append(prompt)

        config = types.GenerateContentConfig(
            temperature=options.temperature,
            max_output_tokens=options.max_output_tokens,
            response_mime_type="application/json" if options.json_mode else None,
        )
        response = self._client.models.generate_content(
            model=self.model,
            contents=contents,
            config=config,
        )
        return (response.text or "").strip()
