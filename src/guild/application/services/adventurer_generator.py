from __future__ import annotations

import random
import string
import time
from typing import Callable, Dict, List, Sequence, Tuple

from guild.application.services.balance_tables import (
    ADVENTURER_HIRE_COST,
    ADVENTURER_SALARY,
    ADVENTURER_START_RANK,
    CORE_STAT_MIN,
    CORE_STAT_SPAN,
)
from guild.domain.models.adventurer import (
    GIFT_TYPES,
    Adventurer,
    CoreStats,
    GiftPreferences,
    SocialStats,
    Skills,
)


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class AdventurerGenerator:
    FIRST_NAMES = ("Kaelen", "Lyra", "Thorne", "Elara", "Garrick", "Sylvia", "Dorian", "Isolde", "Finn", "Morgan")
    LAST_NAMES = ("Ironheart", "Swiftarrow", "Stormweaver", "Blackwood", "Brightblade", "Frostmane", "Shadowstep", "Runebreaker")
    CLASSES: Tuple[Dict[str, object], ...] = (
        {"id": "warrior", "name": "Warrior", "specialties": ("Vanguard", "Berserker", "Guardian")},
        {"id": "mage", "name": "Mage", "specialties": ("Elementalist", "Necromancer", "Illusionist")},
        {"id": "rogue", "name": "Rogue", "specialties": ("Assassin", "Scout", "Trickster")},
        {"id": "ranger", "name": "Ranger", "specialties": ("Beastmaster", "Sharpshooter", "Survivalist")},
    )
    TRAITS = ("Brave", "Cautious", "Ambitious", "Loyal", "Reckless", "Witty", "Stoic", "Cheerful")
    HOBBIES = ("Weapon Maintenance", "Reading", "Fishing", "Cooking", "Music", "Herbology", "Gambling")
    TRAIT_PICKS = 2
    HOBBY_PICKS = 2
    _ID_ALPHABET = string.digits + string.ascii_lowercase
    _ID_SUFFIX_LENGTH = 9

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.clock = clock or wall_clock_ms
        self._issued_ids: set[str] = set()

    def reserve_ids(self, adventurer_ids: Sequence[str]) -> None:
        """Mark ids from a restored save as taken."""
        self._issued_ids.update(str(value) for value in adventurer_ids)

    def generate(self, assigned_quest_id: str | None = None) -> Adventurer:
        first_name = self.rng.choice(self.FIRST_NAMES)
        last_name = self.rng.choice(self.LAST_NAMES)
        adventurer_class = self.rng.choice(self.CLASSES)
        specialty = str(self.rng.choice(adventurer_class["specialties"]))
        class_name = str(adventurer_class["name"])

        return Adventurer(
            id=self._next_id(),
            name=f"{first_name} {last_name}",
            class_id=str(adventurer_class["id"]),
            specialization=specialty,
            bio=f"A {class_name.lower()} specializing in {specialty.lower()}.",
            stats=CoreStats(
                strength=self._roll_core_stat(),
                agility=self._roll_core_stat(),
                intellect=self._roll_core_stat(),
                charisma=self._roll_core_stat(),
            ),
            social=SocialStats(),
            skills=Skills(),
            personality_traits=self._pick_distinct(self.TRAITS, self.TRAIT_PICKS),
            hobbies=self._pick_distinct(self.HOBBIES, self.HOBBY_PICKS),
            gift_preferences=self.generate_gift_preferences(),
            salary=ADVENTURER_SALARY,
            rank=ADVENTURER_START_RANK,
            hire_cost=ADVENTURER_HIRE_COST,
            hired=False,
            assigned_quest_id=assigned_quest_id,
        )

    def generate_gift_preferences(self) -> GiftPreferences:
        # Slot 4 of the shuffle belongs to no bucket; that gift is met with indifference.
        shuffled = self.rng.sample(GIFT_TYPES, len(GIFT_TYPES))
        return GiftPreferences(
            loves=[shuffled[0]],
            neutral=list(shuffled[1:4]),
            hates=[shuffled[5]],
        )

    def _roll_core_stat(self) -> int:
        return CORE_STAT_MIN + self.rng.randrange(CORE_STAT_SPAN)

    def _pick_distinct(self, pool: Sequence[str], count: int) -> List[str]:
        return list(self.rng.sample(pool, min(count, len(pool))))

    def _next_id(self) -> str:
        while True:
            suffix = "".join(self.rng.choice(self._ID_ALPHABET) for _ in range(self._ID_SUFFIX_LENGTH))
            candidate = f"adv_{int(self.clock())}_{suffix}"
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate
