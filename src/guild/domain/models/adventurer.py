from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class GiftType(str, Enum):
    PRACTICAL = "PRACTICAL"
    MAGICAL = "MAGICAL"
    LUXURY = "LUXURY"
    ROMANTIC = "ROMANTIC"
    FOOD = "FOOD"
    WEAPONS = "WEAPONS"


GIFT_TYPES: tuple[str, ...] = tuple(gift.value for gift in GiftType)


@dataclass
class CoreStats:
    strength: int = 40
    agility: int = 40
    intellect: int = 40
    charisma: int = 40


@dataclass
class SocialStats:
    affection: int = 0
    comfort: int = 50
    trust: int = 50
    loyalty: int = 50


@dataclass
class SkillTrack:
    level: int = 1
    xp: int = 0
    max_xp: int = 100


@dataclass
class Skills:
    combat: SkillTrack = field(default_factory=SkillTrack)
    survival: SkillTrack = field(default_factory=SkillTrack)
    leadership: SkillTrack = field(default_factory=SkillTrack)


@dataclass
class GiftPreferences:
    loves: List[str] = field(default_factory=list)
    neutral: List[str] = field(default_factory=list)
    hates: List[str] = field(default_factory=list)

    def covered(self) -> set[str]:
        return set(self.loves) | set(self.neutral) | set(self.hates)


@dataclass
class Adventurer:
    id: str
    name: str
    class_id: str
    specialization: str
    bio: str = ""
    stats: CoreStats = field(default_factory=CoreStats)
    social: SocialStats = field(default_factory=SocialStats)
    skills: Skills = field(default_factory=Skills)
    personality_traits: List[str] = field(default_factory=list)
    hobbies: List[str] = field(default_factory=list)
    gift_preferences: GiftPreferences = field(default_factory=GiftPreferences)
    salary: int = 50
    rank: str = "Recruit"
    hire_cost: int = 100
    hired: bool = False
    hire_date: int | None = None
    assigned_quest_id: str | None = None

    @property
    def title(self) -> str:
        return f"{self.specialization} {self.class_id}"
