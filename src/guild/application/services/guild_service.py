from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Protocol

from guild.application.dtos import ActionResult, AdventurerView, GuildStatusView, LoadReport, QuestView
from guild.application.mappers.snapshot_mapper import (
    adventurers_from_rows,
    game_state_from_snapshot,
    migrate_snapshot,
    new_game_snapshot,
    quests_from_snapshot,
    to_snapshot,
)
from guild.application.mappers.view_mapper import to_adventurer_view, to_quest_view, to_status_view
from guild.application.services.activity_log import ActivityLog
from guild.application.services.adventurer_generator import AdventurerGenerator, wall_clock_ms
from guild.application.services.balance_tables import GIFT_LOVED_DELTA
from guild.application.services.event_bus import EventBus
from guild.application.services.offline_earnings import apply_offline_earnings, calculate_offline_report
from guild.application.services.progression_engine import ProgressionEngine
from guild.application.services.quest_catalog import QuestCatalog
from guild.application.services.roster_service import AdventurerRoster
from guild.domain.models.game_state import GameState
from guild.domain.repositories import GameStateRepository


logger = logging.getLogger(__name__)


class SaveFileStore(Protocol):
    def write(self, path: Path, snapshot: Dict[str, Any]) -> Path: ...

    def read(self, path: Path) -> Dict[str, Any]: ...


class GuildService:
    """Entry point for the presentation layer and the scheduler.

    Owns one game session: the ledger, the quest catalog, the roster and
    the progression engine, all sharing the same ``GameState``.
    """

    def __init__(
        self,
        state_repo: GameStateRepository,
        *,
        generator: AdventurerGenerator | None = None,
        event_bus: EventBus | None = None,
        clock: Callable[[], int] | None = None,
        save_file_store: SaveFileStore | None = None,
        activity_log: ActivityLog | None = None,
    ) -> None:
        self.state_repo = state_repo
        self.event_bus = event_bus
        self.clock = clock or wall_clock_ms
        self.generator = generator or AdventurerGenerator(clock=self.clock)
        self.save_file_store = save_file_store
        self.activity_log = activity_log
        self.state = GameState(timestamp=int(self.clock()))
        self.catalog = QuestCatalog(self.state, event_bus=event_bus)
        self.roster = AdventurerRoster(
            self.state,
            self.catalog,
            self.generator,
            event_bus=event_bus,
            clock=self.clock,
        )
        self.engine = ProgressionEngine(self.catalog, event_bus=event_bus)
        self._last_save_ms = int(self.clock())

    # -- session lifecycle -------------------------------------------------

    def load(self) -> LoadReport:
        """Restore the persisted session and credit offline earnings once."""
        now = int(self.clock())
        saved = self.state_repo.load_snapshot()
        if saved is None:
            self._hydrate(new_game_snapshot(now))
            logger.info("No saved guild found, started a new game")
            return LoadReport(new_game=True, messages=["A new guild opens its doors."])

        snapshot = migrate_snapshot(saved, now)
        self._hydrate(snapshot)
        report = calculate_offline_report(now, self.state.timestamp, self.catalog.list_all(), self.state.offline_earnings)
        credited = apply_offline_earnings(self.state, report, self.event_bus)
        self.state.timestamp = now
        self._last_save_ms = now

        messages = []
        if credited > 0:
            messages.append(f"Welcome back! You earned {credited} gold while away.")
        return LoadReport(
            new_game=False,
            offline_gold=credited,
            offline_elapsed_ms=report.elapsed_ms,
            messages=messages,
        )

    def new_game(self) -> None:
        self._hydrate(new_game_snapshot(int(self.clock())))

    def _hydrate(self, snapshot: Dict[str, Any], *, keep_pool: bool = False) -> None:
        # Catalog and roster share the ledger, so all three are rebuilt together.
        pool = self.roster.recruitment_pool() if keep_pool else adventurers_from_rows(snapshot.get("recruitmentPool"))
        self.state = game_state_from_snapshot(snapshot)
        self.catalog = QuestCatalog(self.state, quests_from_snapshot(snapshot), event_bus=self.event_bus)
        self.roster = AdventurerRoster(
            self.state,
            self.catalog,
            self.generator,
            hired=adventurers_from_rows(snapshot.get("adventurers")),
            pool=pool or None,
            event_bus=self.event_bus,
            clock=self.clock,
        )
        self.engine = ProgressionEngine(self.catalog, event_bus=self.event_bus)

    def snapshot(self) -> Dict[str, Any]:
        return to_snapshot(
            self.state,
            self.catalog.list_all(),
            self.roster.roster(),
            self.roster.recruitment_pool(),
        )

    def save(self) -> bool:
        now = int(self.clock())
        self.state.timestamp = now
        self.state.time.last_update = now
        self.state_repo.save_snapshot(self.snapshot())
        self._last_save_ms = now
        logger.debug("Guild state saved at %s", now)
        return True

    def maybe_autosave(self, interval_ms: int) -> bool:
        if int(self.clock()) - self._last_save_ms <= int(interval_ms):
            return False
        return self.save()

    def export_save(self, path: Path) -> Path:
        if self.save_file_store is None:
            raise RuntimeError("No save file store configured")
        self.save()
        return self.save_file_store.write(Path(path), self.snapshot())

    def import_save(self, path: Path) -> ActionResult:
        if self.save_file_store is None:
            raise RuntimeError("No save file store configured")
        raw = self.save_file_store.read(Path(path))
        self._hydrate(migrate_snapshot(raw, int(self.clock())), keep_pool=True)
        return ActionResult(ok=True, messages=["Game loaded successfully!"])

    # -- scheduler ---------------------------------------------------------

    def advance(self, real_delta_ms: float) -> int:
        """Apply the session time scale and tick the progression engine."""
        if not self.state.time.enabled:
            return 0
        return self.engine.tick(float(real_delta_ms) * float(self.state.time.time_scale))

    # -- commands ----------------------------------------------------------

    def start_quest(self, quest_id: str) -> ActionResult:
        quest = self.catalog.get(quest_id)
        if quest is None:
            return ActionResult(ok=False, messages=["Unknown quest."])
        if not self.catalog.start(quest_id):
            reason = "is locked" if not quest.unlocked else "is already running"
            return ActionResult(ok=False, messages=[f"{quest.name} {reason}."])
        return ActionResult(ok=True, messages=[f"Started {quest.name}"])

    def upgrade_quest(self, quest_id: str) -> ActionResult:
        quest = self.catalog.get(quest_id)
        if quest is None:
            return ActionResult(ok=False, messages=["Unknown quest."])
        if not self.catalog.upgrade(quest_id):
            return ActionResult(ok=False, messages=["Not enough gold!"])
        return ActionResult(ok=True, messages=[f"Upgraded {quest.name}"])

    def unlock_quest(self, quest_id: str) -> ActionResult:
        quest = self.catalog.get(quest_id)
        if quest is None:
            return ActionResult(ok=False, messages=["Unknown quest."])
        if quest.unlocked:
            return ActionResult(ok=False, messages=[f"{quest.name} is already unlocked."])
        if not self.catalog.unlock(quest_id):
            return ActionResult(ok=False, messages=["Not enough gold!"])
        return ActionResult(ok=True, messages=[f"Unlocked {quest.name}"])

    def hire_adventurer(self, adventurer_id: str) -> ActionResult:
        if self.roster.get(adventurer_id) is None:
            return ActionResult(ok=False, messages=["No such recruit."])
        if not self.roster.hire(adventurer_id):
            return ActionResult(ok=False, messages=["Not enough gold!"])
        return ActionResult(ok=True, messages=["Adventurer hired!"])

    def assign_adventurer(self, adventurer_id: str, quest_id: str) -> ActionResult:
        if not self.roster.assign_to_quest(adventurer_id, quest_id):
            return ActionResult(ok=False, messages=["That assignment is not possible."])
        adventurer = self.roster.get_hired(adventurer_id)
        quest = self.catalog.get(quest_id)
        return ActionResult(ok=True, messages=[f"Assigned {adventurer.name} to manage {quest.name}"])

    def assign_first_available(self, quest_id: str) -> ActionResult:
        available = self.roster.list_unassigned()
        if not available:
            return ActionResult(ok=False, messages=["No available adventurers to assign!"])
        return self.assign_adventurer(available[0].id, quest_id)

    def give_gift(self, adventurer_id: str, gift_type: str) -> ActionResult:
        adventurer = self.roster.get(adventurer_id)
        if adventurer is None:
            return ActionResult(ok=False, messages=["No such adventurer."])
        delta = self.roster.give_gift(adventurer_id, gift_type)
        if delta > 0:
            verdict = "loved it!" if delta >= GIFT_LOVED_DELTA else "appreciated it."
            message = f"{adventurer.name} {verdict} (+{delta} affection)"
        elif delta < 0:
            message = f"{adventurer.name} hated it. ({delta} affection)"
        else:
            message = f"{adventurer.name} seems indifferent."
        return ActionResult(ok=True, messages=[message])

    # -- queries -----------------------------------------------------------

    def quest_progress(self, quest_id: str) -> float:
        return self.engine.progress(quest_id)

    def recent_activity(self) -> List[str]:
        return self.activity_log.entries() if self.activity_log is not None else []

    def status_view(self) -> GuildStatusView:
        return to_status_view(
            state=self.state,
            active_quest_count=len(self.catalog.list_running()),
            roster_size=len(self.roster.roster()),
        )

    def quest_board_view(self) -> List[QuestView]:
        return [self._quest_view(quest.id) for quest in self.catalog.list_all()]

    def active_quests_view(self) -> List[QuestView]:
        return [self._quest_view(quest.id) for quest in self.catalog.list_running()]

    def roster_view(self) -> List[AdventurerView]:
        return [self._adventurer_view(adventurer) for adventurer in self.roster.roster()]

    def recruitment_view(self) -> List[AdventurerView]:
        return [self._adventurer_view(adventurer) for adventurer in self.roster.recruitment_pool()]

    def _quest_view(self, quest_id: str) -> QuestView:
        quest = self.catalog.get(quest_id)
        manager = self.roster.get_hired(quest.manager_id) if quest.manager_id else None
        return to_quest_view(
            quest=quest,
            reward=self.catalog.reward(quest_id),
            progress=self.catalog.progress(quest_id),
            manager_name=manager.name if manager is not None else "",
        )

    def _adventurer_view(self, adventurer) -> AdventurerView:
        quest = self.catalog.get(adventurer.assigned_quest_id) if adventurer.assigned_quest_id else None
        return to_adventurer_view(adventurer=adventurer, assigned_quest_name=quest.name if quest else None)
