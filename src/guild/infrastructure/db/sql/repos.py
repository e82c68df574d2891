import json
from typing import Any, Dict, List, Optional

from sqlalchemy import text

from guild.domain.repositories import GameStateRepository
from .connection import SessionLocal


STATE_ROW_ID = 1


def _loads(raw_value, default):
    if raw_value is None:
        return default
    if isinstance(raw_value, (dict, list)):
        return raw_value
    try:
        return json.loads(raw_value)
    except Exception:
        return default


class SqlGameStateRepository(GameStateRepository):
    """Snapshot storage across three tables, written in one transaction.

    Scalar ledger fields get their own columns; quests and adventurers are
    stored as one JSON payload per row so new fields need no migration.
    """

    def __init__(self, session_factory=None) -> None:
        self._session_factory = session_factory or SessionLocal

    def load_snapshot(self) -> Optional[Dict[str, Any]]:
        with self._session_factory() as session:
            state_row = session.execute(
                text(
                    """
                    SELECT version, saved_at, gold, influence, guild_fame, total_earnings,
                           lifetime_earnings, prestige_level, prestige_multiplier,
                           current_location, time_json, offline_earnings_json
                    FROM guild_state
                    WHERE state_id = :sid
                    """
                ),
                {"sid": STATE_ROW_ID},
            ).first()
            if state_row is None:
                return None

            quest_rows = session.execute(
                text("SELECT payload_json FROM guild_quest ORDER BY board_order")
            ).all()
            adventurer_rows = session.execute(
                text("SELECT in_pool, payload_json FROM guild_adventurer ORDER BY list_order")
            ).all()

        hired: List[Dict[str, Any]] = []
        pool: List[Dict[str, Any]] = []
        for row in adventurer_rows:
            payload = _loads(row.payload_json, None)
            if not isinstance(payload, dict):
                continue
            (pool if int(row.in_pool) else hired).append(payload)

        snapshot: Dict[str, Any] = {
            "version": state_row.version,
            "timestamp": int(state_row.saved_at),
            "gold": float(state_row.gold),
            "influence": int(state_row.influence),
            "guildFame": int(state_row.guild_fame),
            "totalEarnings": float(state_row.total_earnings),
            "lifetimeEarnings": float(state_row.lifetime_earnings),
            "prestigeLevel": int(state_row.prestige_level),
            "prestigeMultiplier": float(state_row.prestige_multiplier),
            "currentLocation": state_row.current_location,
            "time": _loads(state_row.time_json, {}),
            "offlineEarnings": _loads(state_row.offline_earnings_json, {}),
            "quests": [payload for payload in (_loads(row.payload_json, None) for row in quest_rows) if isinstance(payload, dict)],
            "adventurers": hired,
        }
        if pool:
            snapshot["recruitmentPool"] = pool
        return snapshot

    def save_snapshot(self, snapshot: Dict[str, Any]) -> None:
        with self._session_factory.begin() as session:
            self._upsert_state_row(session, snapshot)
            session.execute(text("DELETE FROM guild_quest"))
            for order, quest in enumerate(snapshot.get("quests") or []):
                session.execute(
                    text(
                        """
                        INSERT INTO guild_quest (quest_id, board_order, payload_json)
                        VALUES (:qid, :board_order, :payload_json)
                        """
                    ),
                    {"qid": str(quest["id"]), "board_order": order, "payload_json": json.dumps(quest)},
                )

            session.execute(text("DELETE FROM guild_adventurer"))
            rows = [(0, row) for row in snapshot.get("adventurers") or []]
            rows += [(1, row) for row in snapshot.get("recruitmentPool") or []]
            for order, (in_pool, adventurer) in enumerate(rows):
                session.execute(
                    text(
                        """
                        INSERT INTO guild_adventurer (adventurer_id, in_pool, list_order, payload_json)
                        VALUES (:aid, :in_pool, :list_order, :payload_json)
                        """
                    ),
                    {
                        "aid": str(adventurer["id"]),
                        "in_pool": in_pool,
                        "list_order": order,
                        "payload_json": json.dumps(adventurer),
                    },
                )

    @staticmethod
    def _upsert_state_row(session, snapshot: Dict[str, Any]) -> None:
        dialect = session.bind.dialect.name if session.bind is not None else "sqlite"
        columns = (
            "state_id, version, saved_at, gold, influence, guild_fame, total_earnings, lifetime_earnings, "
            "prestige_level, prestige_multiplier, current_location, time_json, offline_earnings_json"
        )
        values = (
            ":sid, :version, :saved_at, :gold, :influence, :guild_fame, :total_earnings, :lifetime_earnings, "
            ":prestige_level, :prestige_multiplier, :current_location, :time_json, :offline_json"
        )
        updated = [
            "version",
            "saved_at",
            "gold",
            "influence",
            "guild_fame",
            "total_earnings",
            "lifetime_earnings",
            "prestige_level",
            "prestige_multiplier",
            "current_location",
            "time_json",
            "offline_earnings_json",
        ]
        if dialect == "mysql":
            assignments = ",\n                ".join(f"{name} = VALUES({name})" for name in updated)
            statement = text(
                f"""
                INSERT INTO guild_state ({columns})
                VALUES ({values})
                ON DUPLICATE KEY UPDATE
                {assignments}
                """
            )
        else:
            assignments = ",\n                ".join(f"{name} = excluded.{name}" for name in updated)
            statement = text(
                f"""
                INSERT INTO guild_state ({columns})
                VALUES ({values})
                ON CONFLICT(state_id) DO UPDATE SET
                {assignments}
                """
            )
        session.execute(
            statement,
            {
                "sid": STATE_ROW_ID,
                "version": str(snapshot.get("version", "1.0.0")),
                "saved_at": int(snapshot.get("timestamp", 0) or 0),
                "gold": float(snapshot.get("gold", 0) or 0),
                "influence": int(snapshot.get("influence", 0) or 0),
                "guild_fame": int(snapshot.get("guildFame", 0) or 0),
                "total_earnings": float(snapshot.get("totalEarnings", 0) or 0),
                "lifetime_earnings": float(snapshot.get("lifetimeEarnings", 0) or 0),
                "prestige_level": int(snapshot.get("prestigeLevel", 0) or 0),
                "prestige_multiplier": float(snapshot.get("prestigeMultiplier", 1) or 1),
                "current_location": str(snapshot.get("currentLocation", "starter_shack")),
                "time_json": json.dumps(snapshot.get("time") or {}),
                "offline_json": json.dumps(snapshot.get("offlineEarnings") or {}),
            },
        )
