from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from guild.domain.repositories import GameStateRepository


DEFAULT_SAVE_FILENAME = "guild_master_save.json"


class SaveFileError(ValueError):
    """Raised when a save file cannot be read, parsed or written."""


def _write_json_atomic(path: Path, payload: Dict[str, Any]) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        raise SaveFileError(f"Cannot write save file {path}: {exc}") from exc


def _read_json_object(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SaveFileError(f"Cannot read save file {path}: {exc}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SaveFileError(f"Invalid save file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SaveFileError(f"Invalid save file {path}: expected a JSON object")
    return payload


class JsonSaveFileStore:
    """Export and import of snapshots as standalone JSON files."""

    def write(self, path: Path, snapshot: Dict[str, Any]) -> Path:
        target = Path(path)
        _write_json_atomic(target, snapshot)
        return target

    def read(self, path: Path) -> Dict[str, Any]:
        return _read_json_object(Path(path))


class JsonFileGameStateRepository(GameStateRepository):
    """Local-device storage: one JSON file holding the latest snapshot."""

    def __init__(self, path: Path | str = DEFAULT_SAVE_FILENAME) -> None:
        self.path = Path(path)

    def load_snapshot(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        return _read_json_object(self.path)

    def save_snapshot(self, snapshot: Dict[str, Any]) -> None:
        _write_json_atomic(self.path, snapshot)

    def has_snapshot(self) -> bool:
        return self.path.exists()
