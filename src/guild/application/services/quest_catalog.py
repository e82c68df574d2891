from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from guild.application.services.balance_tables import (
    next_upgrade_cost,
    quest_progress_percent,
    quest_reward,
)
from guild.application.services.event_bus import EventBus, publish_if_wired
from guild.domain.events import (
    ManagerAssigned,
    QuestCompleted,
    QuestStarted,
    QuestUnlocked,
    QuestUpgraded,
)
from guild.domain.models.game_state import GameState
from guild.domain.models.quest import Quest


logger = logging.getLogger(__name__)

SEED_QUEST_TEMPLATES = (
    {
        "id": "goblin_patrol",
        "name": "Goblin Patrol",
        "location_id": "starter_shack",
        "description": "Clear goblins from the forest path",
        "base_gold_reward": 25,
        "upgrade_cost": 35,
        "gold_per_upgrade": 2,
        "base_time_ms": 8000,
        "cost_growth": 1.35,
        "unlocked": True,
        "unlock_cost": 0,
    },
    {
        "id": "herb_collection",
        "name": "Herb Collection",
        "location_id": "starter_shack",
        "description": "Gather medicinal herbs for the town healer",
        "base_gold_reward": 15,
        "upgrade_cost": 25,
        "gold_per_upgrade": 1.5,
        "base_time_ms": 5000,
        "cost_growth": 1.3,
        "unlocked": True,
        "unlock_cost": 50,
    },
    {
        "id": "rat_extermination",
        "name": "Rat Extermination",
        "location_id": "starter_shack",
        "description": "Clear rats from the town cellar",
        "base_gold_reward": 10,
        "upgrade_cost": 20,
        "gold_per_upgrade": 1,
        "base_time_ms": 4000,
        "cost_growth": 1.25,
        "unlocked": False,
        "unlock_cost": 30,
    },
)


def default_quests() -> List[Quest]:
    """Fresh copies of the new-game quest board, in board order."""
    return [Quest(**template) for template in SEED_QUEST_TEMPLATES]


class QuestCatalog:
    """Quest definitions plus their runtime state machine.

    Commands validate against the shared ledger and report failure through
    their return value; a failed command never mutates anything.
    """

    def __init__(
        self,
        ledger: GameState,
        quests: Iterable[Quest] | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.ledger = ledger
        self.event_bus = event_bus
        self._quests: dict[str, Quest] = {}
        self.replace_all(default_quests() if quests is None else quests)

    def replace_all(self, quests: Iterable[Quest]) -> None:
        self._quests = {quest.id: quest for quest in quests}

    def get(self, quest_id: str) -> Optional[Quest]:
        return self._quests.get(quest_id)

    def list_all(self) -> List[Quest]:
        return list(self._quests.values())

    def list_by_location(self, location_id: str) -> List[Quest]:
        return [quest for quest in self._quests.values() if quest.location_id == location_id]

    def list_running(self) -> List[Quest]:
        return [quest for quest in self._quests.values() if quest.running]

    def unlock(self, quest_id: str) -> bool:
        quest = self.get(quest_id)
        if quest is None or quest.unlocked:
            return False
        cost = quest.unlock_cost
        if not self.ledger.try_spend(cost):
            return False
        quest.unlocked = True
        logger.info("Unlocked quest %s for %s gold", quest.id, cost)
        publish_if_wired(self.event_bus, QuestUnlocked(quest_id=quest.id, cost=int(cost)))
        return True

    def start(self, quest_id: str) -> bool:
        quest = self.get(quest_id)
        if quest is None or not quest.unlocked or quest.running:
            return False
        quest.arm()
        publish_if_wired(self.event_bus, QuestStarted(quest_id=quest.id))
        return True

    def upgrade(self, quest_id: str) -> bool:
        quest = self.get(quest_id)
        if quest is None:
            return False
        cost = quest.upgrade_cost
        if not self.ledger.try_spend(cost):
            return False
        quest.level += 1
        quest.upgrade_cost = next_upgrade_cost(cost, quest.cost_growth)
        logger.info("Quest %s upgraded to level %s", quest.id, quest.level)
        publish_if_wired(
            self.event_bus,
            QuestUpgraded(
                quest_id=quest.id,
                new_level=quest.level,
                cost_paid=int(cost),
                next_cost=quest.upgrade_cost,
            ),
        )
        return True

    def reward(self, quest_id: str) -> int:
        quest = self.get(quest_id)
        if quest is None:
            return 0
        return quest_reward(quest.base_gold_reward, quest.level, quest.gold_per_upgrade)

    def assign_manager(self, quest_id: str, adventurer_id: str) -> bool:
        quest = self.get(quest_id)
        if quest is None or not quest.unlocked:
            return False
        quest.manager_hired = True
        quest.manager_id = adventurer_id
        quest.arm()
        publish_if_wired(self.event_bus, ManagerAssigned(quest_id=quest.id, adventurer_id=adventurer_id))
        return True

    def release_manager(self, quest_id: str) -> bool:
        quest = self.get(quest_id)
        if quest is None or not quest.manager_hired:
            return False
        quest.manager_hired = False
        quest.manager_id = None
        return True

    def complete(self, quest_id: str) -> int:
        quest = self.get(quest_id)
        if quest is None or not quest.running:
            return 0
        quest.running = False
        reward = self.reward(quest_id)
        self.ledger.credit_earnings(reward)
        logger.debug("Quest %s completed, reward %s gold", quest.id, reward)

        if quest.manager_hired:
            quest.arm()
            logger.debug("Manager %s restarted quest %s", quest.manager_id, quest.id)

        publish_if_wired(
            self.event_bus,
            QuestCompleted(quest_id=quest.id, reward=reward, auto_restarted=quest.manager_hired),
        )
        return reward

    def progress(self, quest_id: str) -> float:
        quest = self.get(quest_id)
        if quest is None or not quest.running:
            return 0.0
        return quest_progress_percent(quest.time_remaining_ms, quest.base_time_ms)
