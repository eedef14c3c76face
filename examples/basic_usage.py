from __future__ import annotations

import os

from roadmapparse import GenerationConfig, RoadmapGenerator, parse_and_validate_roadmap


def main() -> None:
    # Text cut off mid-stream still yields the phases received so far.
    truncated = '```json\n{"goal": "Learn Go", "phases": [{"phase_title": "Basics", "topics": [{"topic_name": "Syntax'
    diagnostics: list[str] = []
    print(parse_and_validate_roadmap(truncated, diagnostics))
    print(diagnostics)

    config = GenerationConfig(
        provider="openai",
        model="gpt-4.1-mini",
        api_key=os.getenv("OPENAI_API_KEY"),
    )

    generator = RoadmapGenerator(config)
    result = generator.generate_roadmap(
        "Become a backend developer",
        proficiency="beginner",
        known_technologies=["python"],
    )
    for phase in result.roadmap.phases:
        print(phase.phase_number, phase.phase_title, [topic.topic_name for topic in phase.topics])
    print(result.metadata)

    phase = result.roadmap.phases[0]
    topic = generator.generate_topic_detail(
        phase.topics[0].topic_name,
        phase_number=phase.phase_number or 1,
        phase_title=phase.phase_title,
        roadmap_goal=result.roadmap.goal,
    )
    print(topic.topic.title, topic.metadata)


if __name__ == "__main__":
    main()
