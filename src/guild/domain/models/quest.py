from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class QuestStatus(str, Enum):
    LOCKED = "locked"
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class Quest:
    id: str
    name: str
    location_id: str = "starter_shack"
    description: str = ""
    base_gold_reward: float = 0
    level: int = 0
    upgrade_cost: int = 0
    gold_per_upgrade: float = 0
    base_time_ms: int = 1000
    running: bool = False
    time_remaining_ms: float = 0
    manager_hired: bool = False
    manager_id: str | None = None
    cost_growth: float = 1.25
    unlocked: bool = True
    unlock_cost: int = 0

    def __post_init__(self) -> None:
        if int(self.level) < 0:
            raise ValueError("Quest level cannot be negative")
        if float(self.cost_growth) <= 1:
            raise ValueError("Quest cost growth must be greater than 1")
        if int(self.base_time_ms) <= 0:
            raise ValueError("Quest base time must be positive")

    @property
    def status(self) -> QuestStatus:
        if not self.unlocked:
            return QuestStatus.LOCKED
        if self.running:
            return QuestStatus.RUNNING
        return QuestStatus.IDLE

    def arm(self) -> None:
        """Begin a fresh run of the quest timer."""

        self.running = True
        self.time_remaining_ms = self.base_time_ms
