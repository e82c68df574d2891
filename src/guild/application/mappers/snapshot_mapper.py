"""Mapping between persisted game-state snapshots and domain objects.

Snapshots are plain JSON-compatible dicts using the save-file key names
(``baseGoldReward``, ``timeRemainingMs`` ...). Loading heals partially
shaped snapshots instead of failing: absent or unusable fields take their
new-game values.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping

from guild.application.services.quest_catalog import SEED_QUEST_TEMPLATES, default_quests
from guild.domain.models.adventurer import (
    Adventurer,
    CoreStats,
    GiftPreferences,
    SkillTrack,
    Skills,
    SocialStats,
)
from guild.domain.models.game_state import (
    DEFAULT_LOCATION_ID,
    SAVE_VERSION,
    GameState,
    OfflineEarningsConfig,
    TimeSettings,
)
from guild.domain.models.quest import Quest


_QUEST_FIELDS = (
    ("id", "id"),
    ("name", "name"),
    ("locationId", "location_id"),
    ("description", "description"),
    ("baseGoldReward", "base_gold_reward"),
    ("level", "level"),
    ("upgradeCost", "upgrade_cost"),
    ("goldPerUpgrade", "gold_per_upgrade"),
    ("baseTimeMs", "base_time_ms"),
    ("running", "running"),
    ("timeRemainingMs", "time_remaining_ms"),
    ("managerHired", "manager_hired"),
    ("managerId", "manager_id"),
    ("costGrowth", "cost_growth"),
    ("unlocked", "unlocked"),
    ("unlockCost", "unlock_cost"),
)
_TEMPLATES_BY_ID = {template["id"]: template for template in SEED_QUEST_TEMPLATES}


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except Exception:
        return default


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except Exception:
        return default


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if item is not None]


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def new_game_snapshot(now_ms: int) -> Dict[str, Any]:
    return {
        "version": SAVE_VERSION,
        "timestamp": int(now_ms),
        "gold": 100,
        "influence": 0,
        "guildFame": 0,
        "totalEarnings": 0,
        "lifetimeEarnings": 0,
        "prestigeLevel": 0,
        "prestigeMultiplier": 1,
        "currentLocation": DEFAULT_LOCATION_ID,
        "locations": [],
        "quests": [quest_to_dict(quest) for quest in default_quests()],
        "adventurers": [],
        "time": {"enabled": True, "timeScale": 1, "lastUpdate": int(now_ms)},
        "offlineEarnings": {"enabled": True, "maxDuration": 86_400_000, "rate": 0.5},
    }


def migrate_snapshot(saved: Mapping[str, Any] | None, now_ms: int) -> Dict[str, Any]:
    """Fill every missing top-level field with its new-game value."""
    defaults = new_game_snapshot(now_ms)
    if not isinstance(saved, Mapping):
        return defaults

    migrated = {**defaults, **copy.deepcopy(dict(saved))}
    for nested_key in ("time", "offlineEarnings"):
        stored = migrated.get(nested_key)
        migrated[nested_key] = {**defaults[nested_key], **(stored if isinstance(stored, Mapping) else {})}

    quests = migrated.get("quests")
    if not isinstance(quests, list) or not quests:
        migrated["quests"] = defaults["quests"]
    if not isinstance(migrated.get("adventurers"), list):
        migrated["adventurers"] = []
    return migrated


def quest_to_dict(quest: Quest) -> Dict[str, Any]:
    return {wire: getattr(quest, attr) for wire, attr in _QUEST_FIELDS}


def quest_from_dict(payload: Mapping[str, Any]) -> Quest | None:
    quest_id = _optional_str(payload.get("id")) if isinstance(payload, Mapping) else None
    if quest_id is None:
        return None
    base = Quest(**_TEMPLATES_BY_ID[quest_id]) if quest_id in _TEMPLATES_BY_ID else Quest(id=quest_id, name=quest_id)

    cost_growth = _as_float(payload.get("costGrowth"), base.cost_growth)
    base_time_ms = _as_int(payload.get("baseTimeMs"), base.base_time_ms)
    quest = Quest(
        id=quest_id,
        name=str(payload.get("name") or base.name),
        location_id=str(payload.get("locationId") or base.location_id),
        description=str(payload.get("description") or base.description),
        base_gold_reward=_as_float(payload.get("baseGoldReward"), base.base_gold_reward),
        level=max(0, _as_int(payload.get("level"), base.level)),
        upgrade_cost=max(0, _as_int(payload.get("upgradeCost"), base.upgrade_cost)),
        gold_per_upgrade=_as_float(payload.get("goldPerUpgrade"), base.gold_per_upgrade),
        base_time_ms=base_time_ms if base_time_ms > 0 else base.base_time_ms,
        running=_as_bool(payload.get("running"), False),
        time_remaining_ms=_as_float(payload.get("timeRemainingMs"), 0.0),
        manager_hired=_as_bool(payload.get("managerHired"), False),
        manager_id=_optional_str(payload.get("managerId")),
        cost_growth=cost_growth if cost_growth > 1 else base.cost_growth,
        unlocked=_as_bool(payload.get("unlocked"), base.unlocked),
        unlock_cost=max(0, _as_int(payload.get("unlockCost"), base.unlock_cost)),
    )
    if not quest.unlocked:
        quest.running = False
    return quest


def quests_from_snapshot(snapshot: Mapping[str, Any]) -> List[Quest]:
    quests = [quest_from_dict(row) for row in snapshot.get("quests") or [] if isinstance(row, Mapping)]
    restored = [quest for quest in quests if quest is not None]
    return restored or default_quests()


def _skill_from_dict(payload: Any) -> SkillTrack:
    if not isinstance(payload, Mapping):
        return SkillTrack()
    return SkillTrack(
        level=_as_int(payload.get("level"), 1),
        xp=_as_int(payload.get("xp"), 0),
        max_xp=_as_int(payload.get("maxXp"), 100),
    )


def _skill_to_dict(skill: SkillTrack) -> Dict[str, int]:
    return {"level": skill.level, "xp": skill.xp, "maxXp": skill.max_xp}


def adventurer_to_dict(adventurer: Adventurer) -> Dict[str, Any]:
    return {
        "id": adventurer.id,
        "name": adventurer.name,
        "class": adventurer.class_id,
        "specialization": adventurer.specialization,
        "bio": adventurer.bio,
        "stats": {
            "strength": adventurer.stats.strength,
            "agility": adventurer.stats.agility,
            "intellect": adventurer.stats.intellect,
            "charisma": adventurer.stats.charisma,
        },
        "social": {
            "affection": adventurer.social.affection,
            "comfort": adventurer.social.comfort,
            "trust": adventurer.social.trust,
            "loyalty": adventurer.social.loyalty,
        },
        "skills": {
            "combat": _skill_to_dict(adventurer.skills.combat),
            "survival": _skill_to_dict(adventurer.skills.survival),
            "leadership": _skill_to_dict(adventurer.skills.leadership),
        },
        "personalityTraits": list(adventurer.personality_traits),
        "hobbies": list(adventurer.hobbies),
        "giftPreferences": {
            "loves": list(adventurer.gift_preferences.loves),
            "neutral": list(adventurer.gift_preferences.neutral),
            "hates": list(adventurer.gift_preferences.hates),
        },
        "salary": adventurer.salary,
        "rank": adventurer.rank,
        "assignedQuestId": adventurer.assigned_quest_id,
        "hireCost": adventurer.hire_cost,
        "hired": adventurer.hired,
        "hireDate": adventurer.hire_date,
    }


def adventurer_from_dict(payload: Mapping[str, Any]) -> Adventurer | None:
    adventurer_id = _optional_str(payload.get("id")) if isinstance(payload, Mapping) else None
    if adventurer_id is None:
        return None

    stats = payload.get("stats") if isinstance(payload.get("stats"), Mapping) else {}
    social = payload.get("social") if isinstance(payload.get("social"), Mapping) else {}
    skills = payload.get("skills") if isinstance(payload.get("skills"), Mapping) else {}
    gifts = payload.get("giftPreferences") if isinstance(payload.get("giftPreferences"), Mapping) else {}
    hire_date = payload.get("hireDate")

    return Adventurer(
        id=adventurer_id,
        name=str(payload.get("name") or "Unknown Adventurer"),
        class_id=str(payload.get("class") or "warrior"),
        specialization=str(payload.get("specialization") or ""),
        bio=str(payload.get("bio") or ""),
        stats=CoreStats(
            strength=_as_int(stats.get("strength"), 40),
            agility=_as_int(stats.get("agility"), 40),
            intellect=_as_int(stats.get("intellect"), 40),
            charisma=_as_int(stats.get("charisma"), 40),
        ),
        social=SocialStats(
            affection=max(0, min(100, _as_int(social.get("affection"), 0))),
            comfort=_as_int(social.get("comfort"), 50),
            trust=_as_int(social.get("trust"), 50),
            loyalty=_as_int(social.get("loyalty"), 50),
        ),
        skills=Skills(
            combat=_skill_from_dict(skills.get("combat")),
            survival=_skill_from_dict(skills.get("survival")),
            leadership=_skill_from_dict(skills.get("leadership")),
        ),
        personality_traits=_as_str_list(payload.get("personalityTraits")),
        hobbies=_as_str_list(payload.get("hobbies")),
        gift_preferences=GiftPreferences(
            loves=_as_str_list(gifts.get("loves")),
            neutral=_as_str_list(gifts.get("neutral")),
            hates=_as_str_list(gifts.get("hates")),
        ),
        salary=_as_int(payload.get("salary"), 50),
        rank=str(payload.get("rank") or "Recruit"),
        hire_cost=_as_int(payload.get("hireCost"), 100),
        hired=_as_bool(payload.get("hired"), False),
        hire_date=None if hire_date is None else _as_int(hire_date, 0),
        assigned_quest_id=_optional_str(payload.get("assignedQuestId")),
    )


def adventurers_from_rows(rows: Any) -> List[Adventurer]:
    if not isinstance(rows, list):
        return []
    restored = [adventurer_from_dict(row) for row in rows if isinstance(row, Mapping)]
    return [adventurer for adventurer in restored if adventurer is not None]


def game_state_from_snapshot(snapshot: Mapping[str, Any]) -> GameState:
    time_row = snapshot.get("time") if isinstance(snapshot.get("time"), Mapping) else {}
    offline_row = snapshot.get("offlineEarnings") if isinstance(snapshot.get("offlineEarnings"), Mapping) else {}
    time_scale = _as_float(time_row.get("timeScale"), 1.0)
    return GameState(
        version=str(snapshot.get("version") or SAVE_VERSION),
        timestamp=_as_int(snapshot.get("timestamp"), 0),
        gold=_as_float(snapshot.get("gold"), 100.0),
        influence=_as_int(snapshot.get("influence"), 0),
        guild_fame=_as_int(snapshot.get("guildFame"), 0),
        total_earnings=_as_float(snapshot.get("totalEarnings"), 0.0),
        lifetime_earnings=_as_float(snapshot.get("lifetimeEarnings"), 0.0),
        prestige_level=_as_int(snapshot.get("prestigeLevel"), 0),
        prestige_multiplier=_as_float(snapshot.get("prestigeMultiplier"), 1.0),
        current_location=str(snapshot.get("currentLocation") or DEFAULT_LOCATION_ID),
        time=TimeSettings(
            enabled=_as_bool(time_row.get("enabled"), True),
            time_scale=time_scale if time_scale >= 0 else 1.0,
            last_update=_as_int(time_row.get("lastUpdate"), 0),
        ),
        offline_earnings=OfflineEarningsConfig(
            enabled=_as_bool(offline_row.get("enabled"), True),
            max_duration_ms=max(0, _as_int(offline_row.get("maxDuration"), 86_400_000)),
            rate=_as_float(offline_row.get("rate"), 0.5),
        ),
    )


def to_snapshot(
    state: GameState,
    quests: List[Quest],
    adventurers: List[Adventurer],
    recruitment_pool: List[Adventurer] | None = None,
) -> Dict[str, Any]:
    snapshot: Dict[str, Any] = {
        "version": state.version,
        "timestamp": int(state.timestamp),
        "gold": state.gold,
        "influence": state.influence,
        "guildFame": state.guild_fame,
        "totalEarnings": state.total_earnings,
        "lifetimeEarnings": state.lifetime_earnings,
        "prestigeLevel": state.prestige_level,
        "prestigeMultiplier": state.prestige_multiplier,
        "currentLocation": state.current_location,
        "locations": [],
        "quests": [quest_to_dict(quest) for quest in quests],
        "adventurers": [adventurer_to_dict(adventurer) for adventurer in adventurers],
        "time": {
            "enabled": state.time.enabled,
            "timeScale": state.time.time_scale,
            "lastUpdate": int(state.time.last_update),
        },
        "offlineEarnings": {
            "enabled": state.offline_earnings.enabled,
            "maxDuration": int(state.offline_earnings.max_duration_ms),
            "rate": state.offline_earnings.rate,
        },
    }
    if recruitment_pool is not None:
        snapshot["recruitmentPool"] = [adventurer_to_dict(adventurer) for adventurer in recruitment_pool]
    return snapshot
