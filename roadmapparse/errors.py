from __future__ import annotations


class RoadmapParseError(Exception):
    """Base exception for roadmapparse failures."""


class JSONRecoveryError(RoadmapParseError):
    """Raised when no repair strategy could decode the model output."""


class ContainerNotFoundError(JSONRecoveryError):
    """Raised when the text holds no JSON object or array at all."""


class ProviderError(RoadmapParseError):
    """Raised when provider calls fail."""


class ValidationError(RoadmapParseError):
    """Raised when model output cannot be validated."""
