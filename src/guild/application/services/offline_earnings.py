"""Catch-up earnings for the time a player spent away from the guild.

The calculation is pure. Applying the result is a separate step so the
caller decides when (and that only once per load) the ledger is credited.

Managed quests are modelled as completing back to back for the whole
absence; their live timers are left untouched by the catch-up. Over long
absences this can credit more than live ticking would have.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from guild.application.services.balance_tables import (
    OFFLINE_MIN_ABSENCE_MS,
    offline_baseline_earnings,
    quest_reward,
)
from guild.application.services.event_bus import EventBus, publish_if_wired
from guild.domain.events import OfflineEarningsApplied
from guild.domain.models.game_state import GameState, OfflineEarningsConfig
from guild.domain.models.quest import Quest


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfflineEarningsReport:
    amount: int
    elapsed_ms: int
    managed_earnings: int = 0
    baseline_earnings: float = 0.0


def calculate_offline_report(
    now_ms: float,
    last_timestamp_ms: float,
    quests: Iterable[Quest],
    config: OfflineEarningsConfig,
) -> OfflineEarningsReport:
    if not config.enabled:
        return OfflineEarningsReport(amount=0, elapsed_ms=0)

    elapsed = min(float(now_ms) - float(last_timestamp_ms), float(config.max_duration_ms))
    if elapsed < OFFLINE_MIN_ABSENCE_MS:
        return OfflineEarningsReport(amount=0, elapsed_ms=max(0, int(elapsed)))

    managed_total = 0
    for quest in quests:
        if not (quest.manager_hired and quest.running):
            continue
        completions = int(math.floor(elapsed / quest.base_time_ms))
        managed_total += completions * quest_reward(quest.base_gold_reward, quest.level, quest.gold_per_upgrade)

    baseline = offline_baseline_earnings(elapsed, config.rate)
    return OfflineEarningsReport(
        amount=int(math.floor(managed_total + baseline)),
        elapsed_ms=int(elapsed),
        managed_earnings=managed_total,
        baseline_earnings=baseline,
    )


def calculate_offline_earnings(
    now_ms: float,
    last_timestamp_ms: float,
    quests: Iterable[Quest],
    config: OfflineEarningsConfig,
) -> int:
    return calculate_offline_report(now_ms, last_timestamp_ms, quests, config).amount


def apply_offline_earnings(
    ledger: GameState,
    report: OfflineEarningsReport,
    event_bus: EventBus | None = None,
) -> int:
    if report.amount <= 0:
        return 0
    ledger.credit_earnings(report.amount)
    logger.info("Credited %s offline gold for %s ms away", report.amount, report.elapsed_ms)
    publish_if_wired(event_bus, OfflineEarningsApplied(amount=report.amount, elapsed_ms=report.elapsed_ms))
    return report.amount
