from __future__ import annotations

import warnings
from typing import Any, Callable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .cache import DiskCache
from .config import GenerationConfig
from .errors import ProviderError, ValidationError
from .llm import build_llm_client
from .models import GeneratedRoadmap, GeneratedTopicDetail, RoadmapData, TopicDetail
from .postprocess import ensure_roadmap_ids
from .prompts import (
    build_roadmap_prompt,
    build_roadmap_repair_prompt,
    build_topic_detail_prompt,
    build_topic_detail_repair_prompt,
)
from .validation import (
    is_roadmap_shape,
    parse_and_validate_roadmap,
    parse_and_validate_topic_detail,
    topic_detail_variant,
)

_M = TypeVar("_M", bound=BaseModel)

Accepted = tuple[dict[str, Any], Any]


class RoadmapGenerator:
    def __init__(self, config: GenerationConfig) -> None:
        self.config = config
        self.llm_client = build_llm_client(config)
        self.cache = DiskCache(config.cache_dir) if config.cache_dir is not None else None

    def generate_roadmap(
        self,
        goal: str,
        proficiency: str = "beginner",
        known_technologies: list[str] | None = None,
        intent: str | None = None,
        roadmap_id: str | None = None,
    ) -> GeneratedRoadmap:
        goal = goal.strip()
        if not goal:
            raise ValueError("goal cannot be empty")

        prompt = build_roadmap_prompt(goal, proficiency, list(known_technologies or []), intent)
        cache_key = self._cache_key("roadmap", roadmap_id, prompt)
        warnings_list: list[str] = []

        cached = self._cache_get(cache_key)
        if cached is not None and is_roadmap_shape(cached):
            accepted = self._accept_roadmap_payload(cached, [])
            if accepted is not None:
                payload, roadmap = accepted
                return GeneratedRoadmap(
                    roadmap=roadmap,
                    payload=payload,
                    metadata=self._metadata(attempts=0, cached=True, warnings_list=warnings_list),
                )

        (payload, roadmap), attempts = self._generate_validated(
            prompt=prompt,
            accept=self._accept_roadmap,
            build_repair_prompt=build_roadmap_repair_prompt,
            label="roadmap",
            warnings_list=warnings_list,
        )
        self._cache_set(cache_key, payload)

        return GeneratedRoadmap(
            roadmap=roadmap,
            payload=payload,
            metadata=self._metadata(attempts=attempts, cached=False, warnings_list=warnings_list),
        )

    def generate_topic_detail(
        self,
        topic_title: str,
        phase_number: int,
        phase_title: str,
        roadmap_goal: str | None = None,
        roadmap_id: str | None = None,
    ) -> GeneratedTopicDetail:
        topic_title = topic_title.strip()
        if not topic_title:
            raise ValueError("topic_title cannot be empty")

        prompt = build_topic_detail_prompt(topic_title, phase_number, phase_title, roadmap_goal)
        cache_key = self._cache_key("topic_detail", roadmap_id, prompt)
        warnings_list: list[str] = []

        cached = self._cache_get(cache_key)
        if cached is not None:
            accepted = self._project(cached, TopicDetail, "Topic detail", [])
            if accepted is not None and topic_detail_variant(cached) is not None:
                payload, topic = accepted
                metadata = self._metadata(attempts=0, cached=True, warnings_list=warnings_list)
                metadata["variant"] = topic_detail_variant(payload)
                return GeneratedTopicDetail(topic=topic, payload=payload, metadata=metadata)

        (payload, topic), attempts = self._generate_validated(
            prompt=prompt,
            accept=self._accept_topic_detail,
            build_repair_prompt=lambda raw, reason: build_topic_detail_repair_prompt(
                raw, reason, topic_title
            ),
            label="topic detail",
            warnings_list=warnings_list,
        )
        self._cache_set(cache_key, payload)

        metadata = self._metadata(attempts=attempts, cached=False, warnings_list=warnings_list)
        metadata["variant"] = topic_detail_variant(payload)
        return GeneratedTopicDetail(topic=topic, payload=payload, metadata=metadata)

    def _generate_validated(
        self,
        prompt: str,
        accept: Callable[[str, list[str]], Accepted | None],
        build_repair_prompt: Callable[[str, str], str],
        label: str,
        warnings_list: list[str],
    ) -> tuple[Accepted, int]:
        max_attempts = self.config.max_generation_attempts
        raw_output = self._collect(prompt, self.config.temperature, warnings_list)
        reasons: list[str] = []

        for attempt in range(1, max_attempts + 1):
            diagnostics: list[str] = []
            accepted = accept(raw_output, diagnostics)
            if accepted is not None:
                return accepted, attempt

            reason = diagnostics[-1] if diagnostics else f"{label} output was rejected."
            reasons.append(reason)
            if attempt == max_attempts:
                break

            self._warn(
                warnings_list,
                f"The {label} output was invalid on attempt {attempt} ({reason}). Requesting a repair.",
            )
            raw_output = self._collect(
                build_repair_prompt(raw_output, reason),
                0.0,
                warnings_list,
            )

        raise ValidationError(
            f"Failed to generate a valid {label} after {max_attempts} attempt(s). "
            f"Errors: {'; '.join(reasons)}"
        )

    def _collect(self, prompt: str, temperature: float, warnings_list: list[str]) -> str:
        if not self.config.stream:
            return self.llm_client.complete_text(prompt, temperature=temperature)

        chunks: list[str] = []
        try:
            for chunk in self.llm_client.stream_text(prompt, temperature=temperature):
                chunks.append(chunk)
        except ProviderError as exc:
            if not chunks:
                raise
            self._warn(
                warnings_list,
                f"Stream interrupted after {len(chunks)} chunk(s) ({exc}). Parsing partial output.",
            )
        return "".join(chunks)

    def _accept_roadmap(self, raw_output: str, diagnostics: list[str]) -> Accepted | None:
        payload = parse_and_validate_roadmap(raw_output, diagnostics)
        if payload is None:
            return None
        return self._accept_roadmap_payload(payload, diagnostics)

    def _accept_roadmap_payload(
        self,
        payload: dict[str, Any],
        diagnostics: list[str],
    ) -> Accepted | None:
        return self._project(ensure_roadmap_ids(payload), RoadmapData, "Roadmap", diagnostics)

    def _accept_topic_detail(self, raw_output: str, diagnostics: list[str]) -> Accepted | None:
        payload = parse_and_validate_topic_detail(raw_output, diagnostics)
        if payload is None:
            return None
        return self._project(payload, TopicDetail, "Topic detail", diagnostics)

    @staticmethod
    def _project(
        payload: dict[str, Any],
        model: type[_M],
        label: str,
        diagnostics: list[str],
    ) -> tuple[dict[str, Any], _M] | None:
        try:
            return payload, model.model_validate(payload)
        except PydanticValidationError as exc:
            first_error = exc.errors()[0]
            location = ".".join(str(part) for part in first_error["loc"])
            diagnostics.append(
                f"{label} fields are invalid: {exc.error_count()} error(s), "
                f"first at '{location}': {first_error['msg']}"
            )
            return None

    def _cache_key(self, kind: str, owner_id: str | None, prompt: str) -> str | None:
        if self.cache is None:
            return None
        return self.cache.build_key(
            kind=kind,
            owner_id=owner_id or "",
            model=self.config.model,
            prompt=prompt,
        )

    def _cache_get(self, cache_key: str | None) -> dict[str, Any] | None:
        if self.cache is None or cache_key is None:
            return None
        return self.cache.get(cache_key)

    def _cache_set(self, cache_key: str | None, payload: dict[str, Any]) -> None:
        if self.cache is None or cache_key is None:
            return
        self.cache.set(cache_key, payload)

    def _metadata(self, attempts: int, cached: bool, warnings_list: list[str]) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            "provider": self.config.provider,
            "model": self.config.model,
            "attempts": attempts,
            "cached": cached,
        }
        if warnings_list:
            metadata["warnings"] = list(warnings_list)
        return metadata

    @staticmethod
    def _warn(warnings_list: list[str], message: str) -> None:
        warnings.warn(message, RuntimeWarning, stacklevel=3)
        warnings_list.append(message)
