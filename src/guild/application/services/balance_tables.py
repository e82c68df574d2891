from __future__ import annotations

import math


RECRUITMENT_POOL_SIZE = 3
ADVENTURER_HIRE_COST = 100
ADVENTURER_SALARY = 50
ADVENTURER_START_RANK = "Recruit"

CORE_STAT_MIN = 40
CORE_STAT_SPAN = 30

AFFECTION_MIN = 0
AFFECTION_MAX = 100
GIFT_LOVED_DELTA = 15
GIFT_NEUTRAL_DELTA = 5
GIFT_HATED_DELTA = -10

OFFLINE_MIN_ABSENCE_MS = 30_000

PROGRESS_MIN = 0.0
PROGRESS_MAX = 100.0

LOCATION_DISPLAY_NAMES = {
    "starter_shack": "Starter Shack",
    "town_hall": "Town Hall Office",
    "fortified_keep": "Fortified Keep",
}
LOCATION_FALLBACK_NAME = "Guild Hall"


def quest_reward(base_gold_reward: float, level: int, gold_per_upgrade: float) -> int:
    return int(math.floor(base_gold_reward + level * gold_per_upgrade))


def next_upgrade_cost(upgrade_cost: float, cost_growth: float) -> int:
    return int(math.floor(upgrade_cost * cost_growth))


def clamp_affection(value: int) -> int:
    return max(AFFECTION_MIN, min(AFFECTION_MAX, int(value)))


def gift_affection_delta(gift_type: str, *, loves, neutral, hates) -> int:
    if gift_type in loves:
        return GIFT_LOVED_DELTA
    if gift_type in neutral:
        return GIFT_NEUTRAL_DELTA
    if gift_type in hates:
        return GIFT_HATED_DELTA
    return 0


def quest_progress_percent(time_remaining_ms: float, base_time_ms: float) -> float:
    if base_time_ms <= 0:
        return PROGRESS_MIN
    raw = 100.0 * (1.0 - float(time_remaining_ms) / float(base_time_ms))
    return max(PROGRESS_MIN, min(PROGRESS_MAX, raw))


def offline_baseline_earnings(elapsed_ms: float, rate: float) -> float:
    return float(elapsed_ms) * float(rate) / 1000.0


def location_display_name(location_id: str | None) -> str:
    return LOCATION_DISPLAY_NAMES.get(str(location_id or ""), LOCATION_FALLBACK_NAME)
