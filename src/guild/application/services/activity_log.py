from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List

from guild.application.services.event_bus import EventBus
from guild.domain.events import (
    AdventurerHired,
    GiftGiven,
    ManagerAssigned,
    OfflineEarningsApplied,
    QuestCompleted,
    QuestStarted,
    QuestUnlocked,
    QuestUpgraded,
    TickAdvanced,
)


logger = logging.getLogger(__name__)


class ActivityLog:
    """Bounded journal of guild events, newest last."""

    def __init__(self, max_entries: int = 50) -> None:
        self._entries: Deque[str] = deque(maxlen=max(1, int(max_entries)))

    def entries(self) -> List[str]:
        return list(self._entries)

    def record(self, message: str) -> None:
        self._entries.append(message)
        logger.info(message)

    def on_quest_started(self, event: QuestStarted) -> None:
        self.record(f"Quest {event.quest_id} started")

    def on_quest_completed(self, event: QuestCompleted) -> None:
        suffix = " and was restarted by its manager" if event.auto_restarted else ""
        self.record(f"Quest {event.quest_id} paid {event.reward} gold{suffix}")

    def on_quest_unlocked(self, event: QuestUnlocked) -> None:
        self.record(f"Quest {event.quest_id} unlocked for {event.cost} gold")

    def on_quest_upgraded(self, event: QuestUpgraded) -> None:
        self.record(f"Quest {event.quest_id} reached level {event.new_level} (next upgrade {event.next_cost} gold)")

    def on_manager_assigned(self, event: ManagerAssigned) -> None:
        self.record(f"{event.adventurer_id} now manages {event.quest_id}")

    def on_adventurer_hired(self, event: AdventurerHired) -> None:
        self.record(f"Hired {event.adventurer_id} for {event.hire_cost} gold")

    def on_gift_given(self, event: GiftGiven) -> None:
        self.record(
            f"{event.adventurer_id} received {event.gift_type} "
            f"({event.affection_delta:+d} affection, now {event.affection_after})"
        )

    def on_offline_earnings(self, event: OfflineEarningsApplied) -> None:
        self.record(f"Earned {event.amount} gold over {event.elapsed_ms // 1000}s away")

    def on_tick(self, event: TickAdvanced) -> None:
        # Frames fire every 100 ms; only the ones that paid out are worth a line.
        if event.completions:
            logger.debug("Tick of %s ms completed %s quest(s)", event.elapsed_ms, event.completions)


def register_activity_log_handlers(event_bus: EventBus, activity_log: ActivityLog | None = None) -> ActivityLog:
    journal = activity_log or ActivityLog()
    event_bus.subscribe(QuestStarted, journal.on_quest_started)
    event_bus.subscribe(QuestCompleted, journal.on_quest_completed)
    event_bus.subscribe(QuestUnlocked, journal.on_quest_unlocked)
    event_bus.subscribe(QuestUpgraded, journal.on_quest_upgraded)
    event_bus.subscribe(ManagerAssigned, journal.on_manager_assigned)
    event_bus.subscribe(AdventurerHired, journal.on_adventurer_hired)
    event_bus.subscribe(GiftGiven, journal.on_gift_given)
    event_bus.subscribe(OfflineEarningsApplied, journal.on_offline_earnings)
    event_bus.subscribe(TickAdvanced, journal.on_tick)
    return journal
