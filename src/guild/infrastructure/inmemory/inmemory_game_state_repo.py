from __future__ import annotations

import copy
from typing import Any, Dict, Optional

from guild.domain.repositories import GameStateRepository


class InMemoryGameStateRepository(GameStateRepository):
    """Keeps the last saved snapshot for the lifetime of the process."""

    _HISTORY_MAX = 20

    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._snapshot: Optional[Dict[str, Any]] = copy.deepcopy(initial) if initial is not None else None
        self._history: list[int] = []

    def load_snapshot(self) -> Optional[Dict[str, Any]]:
        if self._snapshot is None:
            return None
        return copy.deepcopy(self._snapshot)

    def save_snapshot(self, snapshot: Dict[str, Any]) -> None:
        self._snapshot = copy.deepcopy(snapshot)
        self._history.append(int(snapshot.get("timestamp", 0) or 0))
        if len(self._history) > self._HISTORY_MAX:
            del self._history[:-self._HISTORY_MAX]

    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    def save_timestamps(self) -> list[int]:
        return list(self._history)
