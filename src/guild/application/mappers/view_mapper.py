from __future__ import annotations

import math

from guild.application.dtos import AdventurerView, GuildStatusView, QuestView
from guild.application.services.balance_tables import location_display_name
from guild.domain.models.adventurer import Adventurer
from guild.domain.models.game_state import GameState
from guild.domain.models.quest import Quest


def to_quest_view(*, quest: Quest, reward: int, progress: float, manager_name: str = "") -> QuestView:
    seconds_left = int(math.ceil(max(0.0, quest.time_remaining_ms) / 1000)) if quest.running else 0
    return QuestView(
        id=quest.id,
        name=quest.name,
        description=quest.description,
        location_id=quest.location_id,
        level=quest.level,
        reward=reward,
        upgrade_cost=quest.upgrade_cost,
        unlock_cost=quest.unlock_cost,
        base_time_seconds=quest.base_time_ms / 1000,
        status=quest.status.value,
        running=quest.running,
        unlocked=quest.unlocked,
        managed=quest.manager_hired,
        manager_name=manager_name,
        progress_percent=progress,
        seconds_left=seconds_left,
    )


def to_adventurer_view(*, adventurer: Adventurer, assigned_quest_name: str | None = None) -> AdventurerView:
    if adventurer.assigned_quest_id:
        assignment = f"Assigned to: {assigned_quest_name or 'Unknown Quest'}"
    else:
        assignment = "Unassigned"
    return AdventurerView(
        id=adventurer.id,
        name=adventurer.name,
        title=adventurer.title,
        bio=adventurer.bio,
        strength=adventurer.stats.strength,
        agility=adventurer.stats.agility,
        intellect=adventurer.stats.intellect,
        charisma=adventurer.stats.charisma,
        affection=adventurer.social.affection,
        loyalty=adventurer.social.loyalty,
        traits=list(adventurer.personality_traits),
        hobbies=list(adventurer.hobbies),
        hire_cost=adventurer.hire_cost,
        hired=adventurer.hired,
        assignment_label=assignment,
    )


def to_status_view(*, state: GameState, active_quest_count: int, roster_size: int) -> GuildStatusView:
    return GuildStatusView(
        gold=int(math.floor(state.gold)),
        influence=state.influence,
        guild_fame=state.guild_fame,
        total_earnings=int(math.floor(state.total_earnings)),
        lifetime_earnings=int(math.floor(state.lifetime_earnings)),
        location_name=location_display_name(state.current_location),
        time_scale=state.time.time_scale,
        active_quest_count=active_quest_count,
        roster_size=roster_size,
    )
