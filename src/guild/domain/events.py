from dataclasses import dataclass


@dataclass
class TickAdvanced:
    elapsed_ms: float
    completions: int


@dataclass
class QuestStarted:
    quest_id: str


@dataclass
class QuestCompleted:
    quest_id: str
    reward: int
    auto_restarted: bool


@dataclass
class QuestUnlocked:
    quest_id: str
    cost: int


@dataclass
class QuestUpgraded:
    quest_id: str
    new_level: int
    cost_paid: int
    next_cost: int


@dataclass
class ManagerAssigned:
    quest_id: str
    adventurer_id: str


@dataclass
class AdventurerHired:
    adventurer_id: str
    hire_cost: int
    hire_date: int


@dataclass
class GiftGiven:
    adventurer_id: str
    gift_type: str
    affection_delta: int
    affection_after: int


@dataclass
class OfflineEarningsApplied:
    amount: int
    elapsed_ms: int
