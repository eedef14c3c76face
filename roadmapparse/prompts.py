from __future__ import annotations

import textwrap


def build_roadmap_prompt(
    goal: str,
    proficiency: str,
    known_technologies: list[str],
    intent: str | None = None,
) -> str:
    known = ", ".join(known_technologies) if known_technologies else "none"
    intent_line = f"- Learner intent: {intent}" if intent else "- Learner intent: not specified"
    return textwrap.dedent(
        f"""
        You are a curriculum designer building a step-by-step learning roadmap.

        Return ONLY valid JSON (no code fences, no commentary).

        Schema:
        {{
          "goal": <string>,
          "intent": <string>,
          "proficiency": <string>,
          "total_duration": <string>,
          "phases": [
            {{
              "phase_number": <int>,
              "phase_title": <string>,
              "description": <string>,
              "duration": <string>,
              "topics": [
                {{
                  "topic_name": <string>,
                  "description": <string>,
                  "resources": [{{"title": <string>, "url": <string>, "type": <string>}}],
                  "practice_projects": [<string>, ...]
                }}
              ]
            }}
          ]
        }}

        Rules:
        - phases MUST be a non-empty array ordered from first to last.
        - resource type is one of documentation, tutorial, video, article, course, other.
        - Skip topics the learner already knows.

        Learner:
        - Goal: {goal}
        - Proficiency: {proficiency}
        - Known technologies: {known}
        {intent_line}
        """
    ).strip()


def build_topic_detail_prompt(
    topic_title: str,
    phase_number: int,
    phase_title: str,
    roadmap_goal: str | None = None,
) -> str:
    goal_line = f"The learner's overall goal is: {roadmap_goal}" if roadmap_goal else ""
    return textwrap.dedent(
        f"""
        You are a technical tutor writing an in-depth lesson for one roadmap topic.

        Return ONLY valid JSON (no code fences around the whole answer).
        Code samples go inside string values; escape quotes and newlines.

        Schema:
        {{
          "title": <string>,
          "phase_number": <int>,
          "phase_title": <string>,
          "sections": {{
            "introduction": {{"markdown": <string>}},
            "detailed_core_concepts": [{{"title": <string>, "markdown": <string>, "key_points": [<string>, ...]}}],
            "code_examples": [{{"title": <string>, "language": <string>, "code": <string>, "explanation_markdown": <string>}}],
            "real_world_examples": [{{"title": <string>, "markdown": <string>}}],
            "hypothetical_scenario": {{"title": <string>, "markdown": <string>}},
            "key_characteristics": [<string>, ...]
          }},
          "why_important": <string>,
          "key_concepts": [<string>, ...],
          "learning_objectives": [<string>, ...],
          "learning_resources": [{{"title": <string>, "type": <string>, "url": <string>, "estimated_time": <string>}}],
          "practice_exercises": [{{"title": <string>, "description": <string>, "difficulty": <string>, "estimated_time": <string>}}],
          "related_topics": [<string>, ...],
          "next_topic": <string>,
          "estimated_hours": <number>,
          "difficulty_level": <string>,
          "doc_links": [<string>, ...]
        }}

        Rules:
        - title MUST be "{topic_title}".
        - phase_number MUST be {phase_number} and phase_title MUST be "{phase_title}".
        {goal_line}
        """
    ).strip()


def build_roadmap_repair_prompt(raw_output: str, reason: str) -> str:
    return textwrap.dedent(
        f"""
        The previous roadmap output is invalid for the required schema.
        Problem: {reason}

        Return ONLY corrected JSON with:
        - goal, proficiency, total_duration as strings
        - phases as a non-empty array of objects with phase_number, phase_title,
          description, duration and topics

        Previous output:
        ---
        {raw_output}
        ---
        """
    ).strip()


def build_topic_detail_repair_prompt(raw_output: str, reason: str, topic_title: str) -> str:
    return textwrap.dedent(
        f"""
        The previous lesson output for topic '{topic_title}' is invalid for the required schema.
        Problem: {reason}

        Return ONLY corrected JSON with a string "title" and a "sections" object
        whose "introduction" has a string "markdown".

        Previous output:
        ---
        {raw_output}
        ---
        """
    ).strip()
