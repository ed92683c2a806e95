from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True)
class ImagePart:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class GenerationOptions:
    temperature: float = 0.4
    max_output_tokens: int = 2048
    json_mode: bool = False


class AIClient(Protocol):
    provider: str
    model: str

    def generate(
        self,
        prompt: str,
        *,
        images: Sequence[ImagePart] = (),
        options: GenerationOptions = GenerationOptions(),
    ) -> str: ...
