from __future__ import annotations

import itertools
import uuid

from roadmapparse.postprocess import ensure_roadmap_ids


def _counter_ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


def test_ensure_roadmap_ids_fills_missing_fields() -> None:
    result = ensure_roadmap_ids({"phases": [{"topics": [{}]}]}, id_factory=_counter_ids())

    phase = result["phases"][0]
    topic = phase["topics"][0]
    assert phase["id"] == "id-1"
    assert phase["phase_number"] == 1
    assert topic["id"] == "id-2"
    assert topic["order"] == 1


def test_ensure_roadmap_ids_is_idempotent() -> None:
    once = ensure_roadmap_ids({"phases": [{"topics": [{}]}]})
    twice = ensure_roadmap_ids(once)

    assert twice == once
    uuid.UUID(once["phases"][0]["id"])
    uuid.UUID(once["phases"][0]["topics"][0]["id"])


def test_ensure_roadmap_ids_keeps_existing_values() -> None:
    roadmap = {
        "phases": [
            {"id": "p1", "phase_number": 7, "topics": [{"id": "t1", "order": 3}, {"order": None}]},
            {"id": "", "topics": "none"},
        ]
    }

    result = ensure_roadmap_ids(roadmap, id_factory=_counter_ids())

    first, second = result["phases"]
    assert first["id"] == "p1"
    assert first["phase_number"] == 7
    assert first["topics"][0] == {"id": "t1", "order": 3}
    assert first["topics"][1] == {"id": "id-1", "order": 2}
    assert second["id"] == "id-2"
    assert second["phase_number"] == 2
    assert second["topics"] == "none"


def test_ensure_roadmap_ids_does_not_mutate_input() -> None:
    roadmap = {"phases": [{"topics": [{}]}]}

    ensure_roadmap_ids(roadmap)

    assert roadmap == {"phases": [{"topics": [{}]}]}


def test_ensure_roadmap_ids_skips_non_mapping_entries() -> None:
    roadmap = {"phases": ["intro", {"topics": ["a", {}]}]}

    result = ensure_roadmap_ids(roadmap, id_factory=_counter_ids())

    assert result["phases"][0] == "intro"
    assert result["phases"][1]["phase_number"] == 2
    assert result["phases"][1]["topics"][0] == "a"
    assert result["phases"][1]["topics"][1]["order"] == 2


def test_ensure_roadmap_ids_without_phases() -> None:
    assert ensure_roadmap_ids({"goal": "x"}) == {"goal": "x"}
