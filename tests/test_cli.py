from __future__ import annotations

import io
import json

import roadmapparse.generator as generator_module
from roadmapparse.cli import main
from roadmapparse.llm.base import LLMClient

ROADMAP_TEXT = '```json\n{"goal": "Learn SQL", "phases": [{"phase_title": "Queries", "topics": [{"topic_name": "SELECT"},]},]}\n```'


class FixedLLM(LLMClient):
    def __init__(self, text: str) -> None:
        self.text = text

    def complete_text(self, prompt: str, temperature: float = 0.0) -> str:
        return self.text


def test_parse_prints_recovered_json(tmp_path, capsys) -> None:
    source = tmp_path / "output.txt"
    source.write_text(ROADMAP_TEXT, encoding="utf-8")

    exit_code = main(["parse", str(source), "--show-strategy"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert json.loads(captured.out)["phases"][0]["topics"][0]["topic_name"] == "SELECT"
    assert "Decoded with strategy: trailing_commas" in captured.err


def test_parse_from_stdin_with_ids(monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO('{"phases": [{"phase_title": "Basics"'))

    exit_code = main(["parse", "-", "--shape", "roadmap", "--ensure-ids"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["phases"][0]["phase_number"] == 1
    assert payload["phases"][0]["id"]


def test_parse_rejects_wrong_shape(tmp_path, capsys) -> None:
    source = tmp_path / "output.txt"
    source.write_text('{"title": "Only a topic"}', encoding="utf-8")

    exit_code = main(["parse", str(source), "--shape", "roadmap"])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert captured.out == ""
    assert "roadmapparse error: Roadmap validation failed" in captured.err


def test_parse_missing_file(tmp_path, capsys) -> None:
    exit_code = main(["parse", str(tmp_path / "absent.txt")])

    assert exit_code == 2
    assert "roadmapparse error:" in capsys.readouterr().err


def test_roadmap_command_uses_generator(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(generator_module, "build_llm_client", lambda config: FixedLLM(ROADMAP_TEXT))

    exit_code = main(["roadmap", "Learn SQL", "--known", "excel", "--no-stream"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["phases"][0]["topics"][0]["order"] == 1
    assert list((tmp_path / ".roadmapparse_cache").glob("*.json"))


def test_topic_command_without_cache(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    text = json.dumps({"title": "Joins", "sections": {"introduction": {"markdown": "Combine rows."}}})
    monkeypatch.setattr(generator_module, "build_llm_client", lambda config: FixedLLM(text))

    exit_code = main(
        ["topic", "Joins", "--phase-number", "2", "--phase-title", "Relations", "--no-cache"]
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["sections"]["introduction"]["markdown"] == "Combine rows."
    assert not (tmp_path / ".roadmapparse_cache").exists()


def test_generate_reports_provider_errors(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.chdir(tmp_path)

    exit_code = main(["roadmap", "Learn SQL", "--provider", "mock"])

    assert exit_code == 2
    assert "Unsupported provider 'mock'" in capsys.readouterr().err
