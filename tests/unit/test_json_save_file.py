import json
import sys
import tempfile
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from guild.application.mappers.snapshot_mapper import new_game_snapshot
from guild.infrastructure.inmemory.inmemory_game_state_repo import InMemoryGameStateRepository
from guild.infrastructure.save_file.json_save_file import (
    JsonFileGameStateRepository,
    JsonSaveFileStore,
    SaveFileError,
)


class JsonSaveFileTests(unittest.TestCase):
    def test_repository_roundtrip_and_no_tmp_left_behind(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "save.json"
            repo = JsonFileGameStateRepository(path)
            self.assertFalse(repo.has_snapshot())
            self.assertIsNone(repo.load_snapshot())

            snapshot = new_game_snapshot(42)
            repo.save_snapshot(snapshot)

            self.assertTrue(repo.has_snapshot())
            self.assertEqual(snapshot, repo.load_snapshot())
            self.assertEqual(["save.json"], sorted(item.name for item in path.parent.iterdir()))

    def test_store_rejects_malformed_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.json"
            path.write_text("{oops", encoding="utf-8")
            with self.assertRaises(SaveFileError):
                JsonSaveFileStore().read(path)

    def test_store_rejects_non_object_payload(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "list.json"
            path.write_text(json.dumps([1, 2]), encoding="utf-8")
            with self.assertRaises(SaveFileError):
                JsonSaveFileStore().read(path)

    def test_store_reports_missing_file(self) -> None:
        with self.assertRaises(SaveFileError):
            JsonSaveFileStore().read(Path("/nonexistent/guild/save.json"))

    def test_store_reports_unwritable_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "not_a_dir"
            blocker.write_text("", encoding="utf-8")
            with self.assertRaises(SaveFileError):
                JsonSaveFileStore().write(blocker / "save.json", {"gold": 7})

    def test_repository_save_reports_unwritable_target(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "not_a_dir"
            blocker.write_text("", encoding="utf-8")
            with self.assertRaises(SaveFileError):
                JsonFileGameStateRepository(blocker / "save.json").save_snapshot({"gold": 7})

    def test_store_writes_readable_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = JsonSaveFileStore().write(Path(tmp) / "export.json", {"gold": 7})
            self.assertEqual({"gold": 7}, json.loads(target.read_text(encoding="utf-8")))


class InMemoryGameStateRepositoryTests(unittest.TestCase):
    def test_snapshots_are_isolated_copies(self) -> None:
        repo = InMemoryGameStateRepository()
        snapshot = {"gold": 10, "timestamp": 3, "quests": []}
        repo.save_snapshot(snapshot)
        snapshot["quests"].append("mutated")

        loaded = repo.load_snapshot()
        self.assertEqual([], loaded["quests"])
        loaded["gold"] = 0
        self.assertEqual(10, repo.load_snapshot()["gold"])

    def test_save_history_is_bounded(self) -> None:
        repo = InMemoryGameStateRepository()
        for stamp in range(30):
            repo.save_snapshot({"timestamp": stamp})
        self.assertEqual(list(range(10, 30)), repo.save_timestamps())


if __name__ == "__main__":
    unittest.main()
