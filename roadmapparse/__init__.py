from .config import GenerationConfig
from .errors import (
    ContainerNotFoundError,
    JSONRecoveryError,
    ProviderError,
    RoadmapParseError,
    ValidationError,
)
from .generator import RoadmapGenerator
from .json_utils import StrategyOutcome, parse_llm_json, recover_json
from .models import (
    GeneratedRoadmap,
    GeneratedTopicDetail,
    RoadmapData,
    RoadmapPhase,
    RoadmapResource,
    RoadmapTopic,
    TopicDetail,
    TopicSections,
)
from .normalize import normalize_llm_json
from .postprocess import ensure_roadmap_ids
from .structure import close_open_structures
from .validation import (
    is_roadmap_shape,
    is_topic_detail_shape,
    parse_and_validate_roadmap,
    parse_and_validate_topic_detail,
)

__all__ = [
    "RoadmapGenerator",
    "GenerationConfig",
    "parse_llm_json",
    "recover_json",
    "StrategyOutcome",
    "normalize_llm_json",
    "close_open_structures",
    "parse_and_validate_roadmap",
    "parse_and_validate_topic_detail",
    "is_roadmap_shape",
    "is_topic_detail_shape",
    "ensure_roadmap_ids",
    "GeneratedRoadmap",
    "GeneratedTopicDetail",
    "RoadmapData",
    "RoadmapPhase",
    "RoadmapResource",
    "RoadmapTopic",
    "TopicDetail",
    "TopicSections",
    "RoadmapParseError",
    "JSONRecoveryError",
    "ContainerNotFoundError",
    "ProviderError",
    "ValidationError",
]
