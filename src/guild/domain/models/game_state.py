from __future__ import annotations

from dataclasses import dataclass, field


SAVE_VERSION = "1.0.0"
DEFAULT_LOCATION_ID = "starter_shack"


@dataclass
class OfflineEarningsConfig:
    enabled: bool = True
    max_duration_ms: int = 86_400_000
    rate: float = 0.5


@dataclass
class TimeSettings:
    enabled: bool = True
    time_scale: float = 1.0
    last_update: int = 0


@dataclass
class GameState:
    """Currency ledger and guild-wide globals shared by the services."""

    version: str = SAVE_VERSION
    timestamp: int = 0
    gold: float = 100
    influence: int = 0
    guild_fame: int = 0
    total_earnings: float = 0
    lifetime_earnings: float = 0
    prestige_level: int = 0
    prestige_multiplier: float = 1
    current_location: str = DEFAULT_LOCATION_ID
    time: TimeSettings = field(default_factory=TimeSettings)
    offline_earnings: OfflineEarningsConfig = field(default_factory=OfflineEarningsConfig)

    def can_afford(self, cost: float) -> bool:
        return self.gold >= cost

    def try_spend(self, cost: float) -> bool:
        if not self.can_afford(cost):
            return False
        self.gold -= cost
        return True

    def credit_earnings(self, amount: float) -> None:
        self.gold += amount
        self.total_earnings += amount
        self.lifetime_earnings += amount
