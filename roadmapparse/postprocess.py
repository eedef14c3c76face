from __future__ import annotations

import copy
import uuid
from typing import Any, Callable


def ensure_roadmap_ids(
    roadmap: dict[str, Any],
    id_factory: Callable[[], str] | None = None,
) -> dict[str, Any]:
    """Return a copy of ``roadmap`` where every phase and topic has an id and a position.

    Phases get ``phase_number`` and topics get ``order``, both 1-based, only
    when the field is missing. Values that are already present are kept, so
    running this twice changes nothing.
    """
    make_id = id_factory or _new_id
    result = copy.deepcopy(roadmap)

    phases = result.get("phases") if isinstance(result, dict) else None
    if not isinstance(phases, list):
        return result

    for phase_index, phase in enumerate(phases, start=1):
        if not isinstance(phase, dict):
            continue
        _fill_missing(phase, "id", make_id)
        _fill_missing(phase, "phase_number", lambda: phase_index)

        topics = phase.get("topics")
        if not isinstance(topics, list):
            continue
        for topic_index, topic in enumerate(topics, start=1):
            if not isinstance(topic, dict):
                continue
            _fill_missing(topic, "id", make_id)
            _fill_missing(topic, "order", lambda: topic_index)

    return result


def _fill_missing(item: dict[str, Any], key: str, factory: Callable[[], Any]) -> None:
    if item.get(key) in (None, ""):
        item[key] = factory()


def _new_id() -> str:
    return str(uuid.uuid4())
