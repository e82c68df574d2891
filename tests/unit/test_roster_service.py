import random
import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from guild.application.services.adventurer_generator import AdventurerGenerator
from guild.application.services.event_bus import EventBus
from guild.application.services.quest_catalog import QuestCatalog
from guild.application.services.roster_service import AdventurerRoster
from guild.domain.events import AdventurerHired, GiftGiven
from guild.domain.models.adventurer import GiftPreferences, GiftType
from guild.domain.models.game_state import GameState


class AdventurerRosterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = GameState(gold=1000)
        self.catalog = QuestCatalog(self.state)
        self.bus = EventBus()
        self.roster = AdventurerRoster(
            self.state,
            self.catalog,
            AdventurerGenerator(rng=random.Random(3), clock=lambda: 42),
            event_bus=self.bus,
            clock=lambda: 42,
        )

    def _hire_first(self):
        recruit = self.roster.recruitment_pool()[0]
        self.assertTrue(self.roster.hire(recruit.id))
        return recruit

    def test_pool_starts_with_three_recruits(self) -> None:
        self.assertEqual(3, len(self.roster.recruitment_pool()))
        self.assertEqual([], self.roster.roster())

    def test_hire_moves_recruit_and_adds_one_replacement(self) -> None:
        before = {recruit.id for recruit in self.roster.recruitment_pool()}
        recruit = self._hire_first()

        pool_ids = {candidate.id for candidate in self.roster.recruitment_pool()}
        self.assertEqual(3, len(pool_ids))
        self.assertNotIn(recruit.id, pool_ids)
        self.assertEqual(1, len(pool_ids - before))
        self.assertEqual([recruit.id], [adventurer.id for adventurer in self.roster.roster()])
        self.assertTrue(recruit.hired)
        self.assertEqual(42, recruit.hire_date)
        self.assertEqual(900, self.state.gold)

    def test_hire_without_funds_changes_nothing(self) -> None:
        self.state.gold = 99
        recruit = self.roster.recruitment_pool()[0]
        self.assertFalse(self.roster.hire(recruit.id))
        self.assertEqual(99, self.state.gold)
        self.assertEqual([], self.roster.roster())
        self.assertIn(recruit.id, [candidate.id for candidate in self.roster.recruitment_pool()])

    def test_hire_unknown_or_already_hired_is_rejected(self) -> None:
        self.assertFalse(self.roster.hire("adv_missing"))
        recruit = self._hire_first()
        self.assertFalse(self.roster.hire(recruit.id))
        self.assertEqual(900, self.state.gold)

    def test_hire_publishes_event(self) -> None:
        seen = []
        self.bus.subscribe(AdventurerHired, seen.append)
        recruit = self._hire_first()
        self.assertEqual(recruit.id, seen[0].adventurer_id)
        self.assertEqual(100, seen[0].hire_cost)

    def test_assign_sets_both_sides_and_starts_quest(self) -> None:
        adventurer = self._hire_first()
        self.assertTrue(self.roster.assign_to_quest(adventurer.id, "goblin_patrol"))

        quest = self.catalog.get("goblin_patrol")
        self.assertEqual("goblin_patrol", adventurer.assigned_quest_id)
        self.assertEqual(adventurer.id, quest.manager_id)
        self.assertTrue(quest.manager_hired)
        self.assertTrue(quest.running)
        self.assertEqual([adventurer], self.roster.list_by_quest("goblin_patrol"))
        self.assertEqual([], self.roster.list_unassigned())

    def test_assign_rejects_recruits_unknown_quests_and_locked_quests(self) -> None:
        recruit = self.roster.recruitment_pool()[0]
        self.assertFalse(self.roster.assign_to_quest(recruit.id, "goblin_patrol"))

        adventurer = self._hire_first()
        self.assertFalse(self.roster.assign_to_quest(adventurer.id, "missing"))
        self.assertFalse(self.roster.assign_to_quest(adventurer.id, "rat_extermination"))
        self.assertIsNone(adventurer.assigned_quest_id)

    def test_reassignment_releases_previous_quest(self) -> None:
        adventurer = self._hire_first()
        self.roster.assign_to_quest(adventurer.id, "goblin_patrol")
        self.roster.assign_to_quest(adventurer.id, "herb_collection")

        goblin = self.catalog.get("goblin_patrol")
        self.assertFalse(goblin.manager_hired)
        self.assertIsNone(goblin.manager_id)
        self.assertEqual(adventurer.id, self.catalog.get("herb_collection").manager_id)
        self.assertEqual("herb_collection", adventurer.assigned_quest_id)

    def test_new_manager_displaces_previous_one(self) -> None:
        first = self._hire_first()
        second = self._hire_first()
        self.roster.assign_to_quest(first.id, "goblin_patrol")
        self.roster.assign_to_quest(second.id, "goblin_patrol")

        self.assertIsNone(first.assigned_quest_id)
        self.assertEqual(second.id, self.catalog.get("goblin_patrol").manager_id)
        self.assertEqual([first], self.roster.list_unassigned())

    def test_gift_deltas_follow_preferences(self) -> None:
        adventurer = self._hire_first()
        adventurer.gift_preferences = GiftPreferences(
            loves=["FOOD"],
            neutral=["MAGICAL", "LUXURY", "ROMANTIC"],
            hates=["WEAPONS"],
        )
        self.assertEqual(15, self.roster.give_gift(adventurer.id, "FOOD"))
        self.assertEqual(5, self.roster.give_gift(adventurer.id, "LUXURY"))
        self.assertEqual(0, self.roster.give_gift(adventurer.id, "PRACTICAL"))
        self.assertEqual(20, adventurer.social.affection)
        self.assertEqual(-10, self.roster.give_gift(adventurer.id, "WEAPONS"))
        self.assertEqual(10, adventurer.social.affection)

    def test_gift_enum_members_match_their_buckets(self) -> None:
        seen = []
        self.bus.subscribe(GiftGiven, seen.append)
        adventurer = self._hire_first()
        adventurer.gift_preferences = GiftPreferences(
            loves=["FOOD"],
            neutral=["MAGICAL", "LUXURY", "ROMANTIC"],
            hates=["WEAPONS"],
        )

        self.assertEqual(15, self.roster.give_gift(adventurer.id, GiftType.FOOD))
        self.assertEqual(5, self.roster.give_gift(adventurer.id, GiftType("MAGICAL")))
        self.assertEqual(-10, self.roster.give_gift(adventurer.id, GiftType.WEAPONS))
        self.assertEqual(0, self.roster.give_gift(adventurer.id, GiftType.PRACTICAL))
        self.assertEqual(10, adventurer.social.affection)
        self.assertEqual(["FOOD", "MAGICAL", "WEAPONS", "PRACTICAL"], [event.gift_type for event in seen])

    def test_affection_is_clamped(self) -> None:
        adventurer = self._hire_first()
        adventurer.gift_preferences = GiftPreferences(loves=["FOOD"], neutral=[], hates=["WEAPONS"])

        self.assertEqual(-10, self.roster.give_gift(adventurer.id, "WEAPONS"))
        self.assertEqual(0, adventurer.social.affection)
        for _ in range(10):
            self.roster.give_gift(adventurer.id, "FOOD")
        self.assertEqual(100, adventurer.social.affection)

    def test_recruits_can_receive_gifts(self) -> None:
        recruit = self.roster.recruitment_pool()[0]
        loved = recruit.gift_preferences.loves[0]
        self.assertEqual(15, self.roster.give_gift(recruit.id, loved))
        self.assertEqual(15, recruit.social.affection)

    def test_gift_to_unknown_adventurer_is_zero(self) -> None:
        seen = []
        self.bus.subscribe(GiftGiven, seen.append)
        self.assertEqual(0, self.roster.give_gift("adv_missing", "FOOD"))
        self.assertEqual([], seen)

    def test_restored_pool_is_kept_as_given(self) -> None:
        pool = self.roster.recruitment_pool()[:2]
        restored = AdventurerRoster(self.state, self.catalog, AdventurerGenerator(rng=random.Random(1)), pool=pool)
        self.assertEqual([recruit.id for recruit in pool], [recruit.id for recruit in restored.recruitment_pool()])


if __name__ == "__main__":
    unittest.main()
