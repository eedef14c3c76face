from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .config import GenerationConfig
from .errors import RoadmapParseError
from .generator import RoadmapGenerator
from .json_utils import recover_json
from .postprocess import ensure_roadmap_ids
from .validation import parse_and_validate_roadmap, parse_and_validate_topic_detail


def build_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roadmapparse",
        description="Recover roadmap and topic JSON from language model output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Repair and decode a saved model output")
    parse_cmd.add_argument("file", help="Path to the raw output, or '-' for stdin")
    parse_cmd.add_argument("--shape", choices=["any", "roadmap", "topic"], default="any")
    parse_cmd.add_argument(
        "--ensure-ids",
        action="store_true",
        help="Assign ids and positions to roadmap phases and topics.",
    )
    parse_cmd.add_argument(
        "--show-strategy",
        action="store_true",
        help="Report which repair strategy decoded the input (shape 'any' only).",
    )

    roadmap_cmd = subparsers.add_parser("roadmap", help="Generate a learning roadmap")
    roadmap_cmd.add_argument("goal")
    roadmap_cmd.add_argument("--proficiency", default="beginner")
    roadmap_cmd.add_argument("--known", nargs="*", default=[], help="Technologies already known")
    roadmap_cmd.add_argument("--intent", default=None)
    roadmap_cmd.add_argument("--roadmap-id", default=None)
    _add_generation_arguments(roadmap_cmd)

    topic_cmd = subparsers.add_parser("topic", help="Generate the detail for one roadmap topic")
    topic_cmd.add_argument("title")
    topic_cmd.add_argument("--phase-number", type=int, required=True)
    topic_cmd.add_argument("--phase-title", required=True)
    topic_cmd.add_argument("--goal", default=None)
    topic_cmd.add_argument("--roadmap-id", default=None)
    _add_generation_arguments(topic_cmd)

    return parser


def _add_generation_arguments(command: argparse.ArgumentParser) -> None:
    command.add_argument("--provider", default="openai")
    command.add_argument("--model", default="gpt-4.1-mini")
    command.add_argument("--api-key", default=os.getenv("OPENAI_API_KEY"))
    command.add_argument("--base-url", default=None)
    command.add_argument("--temperature", type=float, default=0.2)
    command.add_argument("--max-attempts", type=int, default=2)
    command.add_argument("--no-stream", action="store_true")
    command.add_argument("--no-cache", action="store_true")


def main(argv: list[str] | None = None) -> int:
    parser = build_cli()
    args = parser.parse_args(argv)

    if args.command == "parse":
        return _run_parse(args)
    if args.command in {"roadmap", "topic"}:
        return _run_generate(args)

    parser.error(f"Unsupported command: {args.command}")
    return 2


def _run_parse(args: argparse.Namespace) -> int:
    try:
        raw_output = _read_input(args.file)
    except OSError as exc:
        print(f"roadmapparse error: {exc}", file=sys.stderr)
        return 2

    diagnostics: list[str] = []
    value: Any
    if args.shape == "roadmap":
        value = parse_and_validate_roadmap(raw_output, diagnostics)
    elif args.shape == "topic":
        value = parse_and_validate_topic_detail(raw_output, diagnostics)
    else:
        try:
            outcome = recover_json(raw_output)
        except RoadmapParseError as exc:
            diagnostics.append(str(exc))
            value = None
        else:
            value = outcome.value
            if args.show_strategy:
                print(f"Decoded with strategy: {outcome.strategy}", file=sys.stderr)

    if value is None:
        for message in diagnostics:
            print(f"roadmapparse error: {message}", file=sys.stderr)
        return 2

    if args.ensure_ids and isinstance(value, dict):
        value = ensure_roadmap_ids(value)

    print(json.dumps(value, indent=2, ensure_ascii=False))
    return 0


def _run_generate(args: argparse.Namespace) -> int:
    try:
        config = GenerationConfig(
            provider=args.provider,
            model=args.model,
            api_key=args.api_key,
            base_url=args.base_url,
            temperature=args.temperature,
            max_generation_attempts=args.max_attempts,
            stream=not args.no_stream,
            cache_dir=None if args.no_cache else Path(".roadmapparse_cache"),
        )
        generator = RoadmapGenerator(config)
        if args.command == "roadmap":
            result = generator.generate_roadmap(
                args.goal,
                proficiency=args.proficiency,
                known_technologies=args.known,
                intent=args.intent,
                roadmap_id=args.roadmap_id,
            )
        else:
            result = generator.generate_topic_detail(
                args.title,
                phase_number=args.phase_number,
                phase_title=args.phase_title,
                roadmap_goal=args.goal,
                roadmap_id=args.roadmap_id,
            )
    except (RoadmapParseError, ValueError, PydanticValidationError) as exc:
        print(f"roadmapparse error: {exc}", file=sys.stderr)
        return 2

    for message in result.metadata.get("warnings", []):
        print(f"roadmapparse warning: {message}", file=sys.stderr)

    print(json.dumps(result.payload, indent=2, ensure_ascii=False))
    return 0


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")
