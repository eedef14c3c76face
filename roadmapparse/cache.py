from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any


class DiskCache:
    """Stores validated payloads as JSON files, one file per key.

    A key covers the payload kind, the owning roadmap, the model and the
    exact prompt, so changing any of them forces a fresh generation.
    """

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def hash_prompt(prompt: str) -> str:
        return hashlib.sha256(prompt.encode("utf-8")).hexdigest()

    def build_key(self, kind: str, owner_id: str, model: str, prompt: str) -> str:
        parts = (kind, owner_id, model, self.hash_prompt(prompt))
        return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()

    def get(self, key: str) -> dict[str, Any] | None:
        entry = self._entry_path(key)
        if not entry.is_file():
            return None

        try:
            payload = json.loads(entry.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None
        return payload if isinstance(payload, dict) else None

    def set(self, key: str, value: dict[str, Any]) -> None:
        self._entry_path(key).write_text(
            json.dumps(value, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def _entry_path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"
