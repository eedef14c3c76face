from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator


class LLMClient(ABC):
    @abstractmethod
    def complete_text(self, prompt: str, temperature: float = 0.0) -> str:
        """Complete a text-only prompt and return raw model output."""

    def stream_text(self, prompt: str, temperature: float = 0.0) -> Iterator[str]:
        """Yield raw model output in chunks as it is produced.

        Clients without streaming support yield the whole completion once.
        """
        yield self.complete_text(prompt, temperature=temperature)
