from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from guild.application.services.adventurer_generator import AdventurerGenerator, wall_clock_ms
from guild.application.services.balance_tables import (
    RECRUITMENT_POOL_SIZE,
    clamp_affection,
    gift_affection_delta,
)
from guild.application.services.event_bus import EventBus, publish_if_wired
from guild.application.services.quest_catalog import QuestCatalog
from guild.domain.events import AdventurerHired, GiftGiven
from guild.domain.models.adventurer import Adventurer, GiftType
from guild.domain.models.game_state import GameState


logger = logging.getLogger(__name__)


class AdventurerRoster:
    """Recruitment pool and hired roster.

    An adventurer lives in exactly one of the two collections. Each hire
    puts exactly one fresh recruit into the pool in place of the one hired.
    """

    def __init__(
        self,
        ledger: GameState,
        catalog: QuestCatalog,
        generator: AdventurerGenerator | None = None,
        *,
        hired: Iterable[Adventurer] | None = None,
        pool: Iterable[Adventurer] | None = None,
        event_bus: EventBus | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.ledger = ledger
        self.catalog = catalog
        self.generator = generator or AdventurerGenerator()
        self.event_bus = event_bus
        self.clock = clock or wall_clock_ms
        self._hired: dict[str, Adventurer] = {}
        self._pool: dict[str, Adventurer] = {}
        self.replace_roster(hired or ())
        if pool is None:
            self.initialize_pool()
        else:
            self._pool = {adventurer.id: adventurer for adventurer in pool}
            self.generator.reserve_ids(list(self._pool))

    def initialize_pool(self) -> None:
        self._pool = {}
        self._refill_pool()

    def replace_roster(self, adventurers: Iterable[Adventurer]) -> None:
        self._hired = {adventurer.id: adventurer for adventurer in adventurers}
        self.generator.reserve_ids(list(self._hired))

    def recruitment_pool(self) -> List[Adventurer]:
        return list(self._pool.values())

    def roster(self) -> List[Adventurer]:
        return list(self._hired.values())

    def get(self, adventurer_id: str) -> Optional[Adventurer]:
        return self._hired.get(adventurer_id) or self._pool.get(adventurer_id)

    def get_hired(self, adventurer_id: str) -> Optional[Adventurer]:
        return self._hired.get(adventurer_id)

    def list_by_quest(self, quest_id: str) -> List[Adventurer]:
        return [adventurer for adventurer in self._hired.values() if adventurer.assigned_quest_id == quest_id]

    def list_unassigned(self) -> List[Adventurer]:
        return [adventurer for adventurer in self._hired.values() if not adventurer.assigned_quest_id]

    def hire(self, adventurer_id: str) -> bool:
        candidate = self._pool.get(adventurer_id)
        if candidate is None:
            return False
        if not self.ledger.try_spend(candidate.hire_cost):
            return False

        del self._pool[adventurer_id]
        candidate.hired = True
        candidate.hire_date = int(self.clock())
        self._hired[candidate.id] = candidate
        replacement = self.generator.generate()
        self._pool[replacement.id] = replacement

        logger.info("Hired %s the %s", candidate.name, candidate.title)
        publish_if_wired(
            self.event_bus,
            AdventurerHired(
                adventurer_id=candidate.id,
                hire_cost=int(candidate.hire_cost),
                hire_date=candidate.hire_date,
            ),
        )
        return True

    def assign_to_quest(self, adventurer_id: str, quest_id: str) -> bool:
        adventurer = self._hired.get(adventurer_id)
        quest = self.catalog.get(quest_id)
        if adventurer is None or quest is None or not quest.unlocked:
            return False

        previous_quest_id = adventurer.assigned_quest_id
        if previous_quest_id and previous_quest_id != quest_id:
            previous = self.catalog.get(previous_quest_id)
            if previous is not None and previous.manager_id == adventurer_id:
                self.catalog.release_manager(previous_quest_id)

        if quest.manager_id and quest.manager_id != adventurer_id:
            displaced = self._hired.get(quest.manager_id)
            if displaced is not None and displaced.assigned_quest_id == quest_id:
                displaced.assigned_quest_id = None

        adventurer.assigned_quest_id = quest_id
        return self.catalog.assign_manager(quest_id, adventurer_id)

    def give_gift(self, adventurer_id: str, gift_type: GiftType | str) -> int:
        adventurer = self.get(adventurer_id)
        if adventurer is None:
            return 0

        gift = str(getattr(gift_type, "value", gift_type))
        preferences = adventurer.gift_preferences
        delta = gift_affection_delta(
            gift,
            loves=preferences.loves,
            neutral=preferences.neutral,
            hates=preferences.hates,
        )
        adventurer.social.affection = clamp_affection(adventurer.social.affection + delta)
        logger.debug("Gift %s to %s changed affection by %s", gift, adventurer.id, delta)
        publish_if_wired(
            self.event_bus,
            GiftGiven(
                adventurer_id=adventurer.id,
                gift_type=gift,
                affection_delta=delta,
                affection_after=adventurer.social.affection,
            ),
        )
        return delta

    def _refill_pool(self) -> None:
        while len(self._pool) < RECRUITMENT_POOL_SIZE:
            recruit = self.generator.generate()
            self._pool[recruit.id] = recruit
