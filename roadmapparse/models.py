from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class RoadmapResource(_Payload):
    title: str = ""
    url: str = ""
    type: str = "other"


class RoadmapTopic(_Payload):
    id: str | None = None
    order: int | None = None
    topic_name: str = ""
    description: str = ""
    resources: list[RoadmapResource] = Field(default_factory=list)
    practice_projects: list[str] = Field(default_factory=list)

    @field_validator("resources", mode="before")
    @classmethod
    def wrap_bare_urls(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [{"url": item} if isinstance(item, str) else item for item in value]


class RoadmapPhase(_Payload):
    id: str | None = None
    phase_number: int | None = None
    phase_title: str = ""
    description: str = ""
    duration: str = ""
    topics: list[RoadmapTopic] = Field(default_factory=list)


class RoadmapData(_Payload):
    goal: str = ""
    intent: str | None = None
    proficiency: str = ""
    total_duration: str = ""
    phases: list[RoadmapPhase] = Field(default_factory=list)


class IntroductionSection(_Payload):
    markdown: str = ""


class DetailedCoreConcept(_Payload):
    title: str = ""
    markdown: str = ""
    key_points: list[str] = Field(default_factory=list)


class CodeExample(_Payload):
    title: str = ""
    language: str = ""
    code: str = ""
    explanation_markdown: str = ""


class TitledMarkdown(_Payload):
    title: str = ""
    markdown: str = ""


class TopicSections(_Payload):
    introduction: IntroductionSection | None = None
    detailed_core_concepts: list[DetailedCoreConcept] = Field(default_factory=list)
    code_examples: list[CodeExample] = Field(default_factory=list)
    real_world_examples: list[TitledMarkdown] = Field(default_factory=list)
    hypothetical_scenario: TitledMarkdown | None = None
    key_characteristics: list[str] = Field(default_factory=list)


class LearningResource(_Payload):
    title: str = ""
    type: str = ""
    url: str | None = None
    estimated_time: str | None = None


class PracticeExercise(_Payload):
    title: str = ""
    description: str = ""
    difficulty: str = ""
    estimated_time: str = ""


class TopicDetail(_Payload):
    title: str
    phase_number: int | None = None
    phase_title: str = ""
    sections: TopicSections | None = None
    overview: str | None = None
    why_important: str = ""
    key_concepts: list[str] = Field(default_factory=list)
    learning_objectives: list[str] = Field(default_factory=list)
    learning_resources: list[LearningResource] = Field(default_factory=list)
    practice_exercises: list[PracticeExercise] = Field(default_factory=list)
    related_topics: list[str] = Field(default_factory=list)
    next_topic: str | None = None
    estimated_hours: float | None = None
    difficulty_level: str = ""
    doc_links: list[str] = Field(default_factory=list)


class GeneratedRoadmap(BaseModel):
    roadmap: RoadmapData
    payload: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)


class GeneratedTopicDetail(BaseModel):
    topic: TopicDetail
    payload: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
