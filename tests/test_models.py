from __future__ import annotations

from roadmapparse.models import RoadmapData, TopicDetail


def test_numeric_ids_are_read_as_strings() -> None:
    roadmap = RoadmapData.model_validate(
        {"phases": [{"id": 1, "phase_number": "2", "topics": [{"id": 7, "order": 1}]}]}
    )

    assert roadmap.phases[0].id == "1"
    assert roadmap.phases[0].phase_number == 2
    assert roadmap.phases[0].topics[0].id == "7"


def test_bare_resource_urls_are_wrapped() -> None:
    roadmap = RoadmapData.model_validate(
        {
            "phases": [
                {
                    "topics": [
                        {"resources": ["https://go.dev", {"title": "Tour", "url": "https://go.dev/tour"}]}
                    ]
                }
            ]
        }
    )

    first, second = roadmap.phases[0].topics[0].resources
    assert first.url == "https://go.dev"
    assert first.type == "other"
    assert second.title == "Tour"


def test_unknown_fields_are_kept() -> None:
    topic = TopicDetail.model_validate({"title": "Hooks", "mood": "upbeat"})

    assert topic.model_extra == {"mood": "upbeat"}
