import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from guild.application.services.event_bus import EventBus
from guild.application.services.offline_earnings import (
    OfflineEarningsReport,
    apply_offline_earnings,
    calculate_offline_earnings,
    calculate_offline_report,
)
from guild.application.services.quest_catalog import default_quests
from guild.domain.events import OfflineEarningsApplied
from guild.domain.models.game_state import GameState, OfflineEarningsConfig


class OfflineEarningsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.config = OfflineEarningsConfig(enabled=True, max_duration_ms=86_400_000, rate=0.5)
        self.quests = default_quests()

    def _manage(self, quest_id: str, *, running: bool = True):
        quest = next(quest for quest in self.quests if quest.id == quest_id)
        quest.manager_hired = True
        quest.manager_id = "adv_1"
        quest.running = running
        quest.time_remaining_ms = 3000
        return quest

    def test_short_absence_earns_nothing(self) -> None:
        self.assertEqual(0, calculate_offline_earnings(29000, 0, self.quests, self.config))

    def test_baseline_only_after_threshold(self) -> None:
        self.assertEqual(15, calculate_offline_earnings(31000, 0, self.quests, self.config))

    def test_disabled_config_earns_nothing(self) -> None:
        config = OfflineEarningsConfig(enabled=False, max_duration_ms=86_400_000, rate=0.5)
        self.assertEqual(0, calculate_offline_earnings(10_000_000, 0, self.quests, config))

    def test_managed_running_quest_completes_back_to_back(self) -> None:
        self._manage("goblin_patrol")
        report = calculate_offline_report(1_040_000, 1_000_000, self.quests, self.config)

        self.assertEqual(125, report.managed_earnings)
        self.assertEqual(20.0, report.baseline_earnings)
        self.assertEqual(145, report.amount)
        self.assertEqual(40000, report.elapsed_ms)

    def test_managed_quest_that_was_idle_is_ignored(self) -> None:
        self._manage("goblin_patrol", running=False)
        self.assertEqual(20, calculate_offline_earnings(40000, 0, self.quests, self.config))

    def test_elapsed_time_is_capped(self) -> None:
        self._manage("goblin_patrol")
        config = OfflineEarningsConfig(enabled=True, max_duration_ms=60000, rate=0.5)
        report = calculate_offline_report(10_000_000, 0, self.quests, config)

        self.assertEqual(60000, report.elapsed_ms)
        self.assertEqual(7 * 25 + 30, report.amount)

    def test_calculation_leaves_quest_timers_alone(self) -> None:
        quest = self._manage("goblin_patrol")
        calculate_offline_report(500_000, 0, self.quests, self.config)
        self.assertEqual(3000, quest.time_remaining_ms)
        self.assertTrue(quest.running)

    def test_apply_credits_all_counters_and_publishes(self) -> None:
        state = GameState(gold=10)
        bus = EventBus()
        seen = []
        bus.subscribe(OfflineEarningsApplied, seen.append)

        credited = apply_offline_earnings(state, OfflineEarningsReport(amount=15, elapsed_ms=31000), bus)

        self.assertEqual(15, credited)
        self.assertEqual(25, state.gold)
        self.assertEqual(15, state.total_earnings)
        self.assertEqual(15, state.lifetime_earnings)
        self.assertEqual(15, seen[0].amount)

    def test_apply_zero_report_is_noop(self) -> None:
        state = GameState(gold=10)
        self.assertEqual(0, apply_offline_earnings(state, OfflineEarningsReport(amount=0, elapsed_ms=0)))
        self.assertEqual(10, state.gold)
        self.assertEqual(0, state.total_earnings)


if __name__ == "__main__":
    unittest.main()
