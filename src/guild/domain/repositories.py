from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class GameStateRepository(ABC):
    """Stores the full game-state snapshot (plain JSON-compatible dict)."""

    @abstractmethod
    def load_snapshot(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def save_snapshot(self, snapshot: Dict[str, Any]) -> None:
        raise NotImplementedError

    def has_snapshot(self) -> bool:
        """Optional helper; default loads the snapshot to find out."""
        return self.load_snapshot() is not None
