from __future__ import annotations

from guild.application.services.event_bus import EventBus, publish_if_wired
from guild.application.services.quest_catalog import QuestCatalog
from guild.domain.events import TickAdvanced


class ProgressionEngine:
    """Advances quest timers. Owns no clock; the scheduler drives it."""

    def __init__(self, catalog: QuestCatalog, event_bus: EventBus | None = None) -> None:
        self.catalog = catalog
        self.event_bus = event_bus

    def tick(self, delta_time_ms: float) -> int:
        """Advance every running quest by an already time-scaled delta.

        Each quest is visited once per call, so a quest re-armed by its
        manager during this pass does not complete twice. Returns the gold
        paid out during the tick.
        """
        delta = max(0.0, float(delta_time_ms))
        paid = 0
        completions = 0
        for quest in self.catalog.list_all():
            if not quest.running:
                continue
            quest.time_remaining_ms -= delta
            if quest.time_remaining_ms <= 0:
                paid += self.catalog.complete(quest.id)
                completions += 1

        publish_if_wired(self.event_bus, TickAdvanced(elapsed_ms=delta, completions=completions))
        return paid

    def progress(self, quest_id: str) -> float:
        return self.catalog.progress(quest_id)
