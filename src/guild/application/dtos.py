from dataclasses import dataclass, field
from typing import List


@dataclass
class ActionResult:
    ok: bool
    messages: List[str] = field(default_factory=list)


@dataclass
class QuestView:
    id: str
    name: str
    description: str
    location_id: str
    level: int
    reward: int
    upgrade_cost: int
    unlock_cost: int
    base_time_seconds: float
    status: str
    running: bool
    unlocked: bool
    managed: bool
    manager_name: str = ""
    progress_percent: float = 0.0
    seconds_left: int = 0


@dataclass
class AdventurerView:
    id: str
    name: str
    title: str
    bio: str
    strength: int
    agility: int
    intellect: int
    charisma: int
    affection: int
    loyalty: int
    traits: List[str] = field(default_factory=list)
    hobbies: List[str] = field(default_factory=list)
    hire_cost: int = 0
    hired: bool = False
    assignment_label: str = "Unassigned"


@dataclass
class GuildStatusView:
    gold: int
    influence: int
    guild_fame: int
    total_earnings: int
    lifetime_earnings: int
    location_name: str
    time_scale: float
    active_quest_count: int
    roster_size: int


@dataclass
class LoadReport:
    new_game: bool
    offline_gold: int = 0
    offline_elapsed_ms: int = 0
    messages: List[str] = field(default_factory=list)
