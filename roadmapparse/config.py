from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GenerationConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    provider: str = "openai"
    model: str = "gpt-4.1-mini"
    api_key: str | None = None
    base_url: str | None = None

    temperature: float = 0.2
    max_retries: int = 3
    retry_backoff_seconds: float = 1.0
    max_generation_attempts: int = 2
    stream: bool = True

    cache_dir: Path | None = Field(default_factory=lambda: Path(".roadmapparse_cache"))

    llm_client: Any | None = None

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("temperature must be between 0.0 and 1.0")
        return value

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_retries must be >= 1")
        return value

    @field_validator("max_generation_attempts")
    @classmethod
    def validate_generation_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_generation_attempts must be >= 1")
        return value

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError("provider cannot be empty")
        return normalized
