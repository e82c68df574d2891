import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from guild.application.services.event_bus import EventBus, publish_if_wired
from guild.domain.events import QuestCompleted, QuestStarted


class EventBusTests(unittest.TestCase):
    def test_handlers_run_in_priority_then_subscription_order(self) -> None:
        bus = EventBus()
        calls = []
        bus.subscribe(QuestStarted, lambda _event: calls.append("late"), priority=200)
        bus.subscribe(QuestStarted, lambda _event: calls.append("first"), priority=10)
        bus.subscribe(QuestStarted, lambda _event: calls.append("second"), priority=10)

        bus.publish(QuestStarted(quest_id="goblin_patrol"))

        self.assertEqual(["first", "second", "late"], calls)

    def test_failing_handler_is_isolated(self) -> None:
        bus = EventBus()
        calls = []

        def broken(_event):
            raise RuntimeError("handler exploded")

        bus.subscribe(QuestCompleted, broken, priority=1)
        bus.subscribe(QuestCompleted, calls.append, priority=2)

        with self.assertLogs("guild.application.services.event_bus", level="ERROR"):
            bus.publish(QuestCompleted(quest_id="goblin_patrol", reward=25, auto_restarted=False))

        self.assertEqual(1, len(calls))
        errors = bus.last_publish_errors()
        self.assertEqual(1, len(errors))
        self.assertIn("handler exploded", str(errors[0]))

    def test_events_only_reach_their_own_type(self) -> None:
        bus = EventBus()
        calls = []
        bus.subscribe(QuestStarted, calls.append)
        bus.publish(QuestCompleted(quest_id="goblin_patrol", reward=25, auto_restarted=False))
        self.assertEqual([], calls)

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        calls = []
        bus.subscribe(QuestStarted, calls.append)
        self.assertTrue(bus.unsubscribe(QuestStarted, calls.append))
        self.assertFalse(bus.unsubscribe(QuestStarted, calls.append))
        bus.publish(QuestStarted(quest_id="goblin_patrol"))
        self.assertEqual([], calls)

    def test_publish_if_wired_tolerates_missing_bus(self) -> None:
        publish_if_wired(None, QuestStarted(quest_id="goblin_patrol"))
        bus = EventBus()
        calls = []
        bus.subscribe(QuestStarted, calls.append)
        publish_if_wired(bus, QuestStarted(quest_id="herb_collection"))
        self.assertEqual("herb_collection", calls[0].quest_id)


if __name__ == "__main__":
    unittest.main()
