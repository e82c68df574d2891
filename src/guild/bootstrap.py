import logging
import os
from pathlib import Path

from guild.application.services.activity_log import register_activity_log_handlers
from guild.application.services.adventurer_generator import AdventurerGenerator, wall_clock_ms
from guild.application.services.event_bus import EventBus
from guild.application.services.guild_service import GuildService
from guild.application.services.seed_policy import build_rng
from guild.infrastructure.inmemory.inmemory_game_state_repo import InMemoryGameStateRepository
from guild.infrastructure.save_file.json_save_file import (
    DEFAULT_SAVE_FILENAME,
    JsonFileGameStateRepository,
    JsonSaveFileStore,
)


logger = logging.getLogger(__name__)

DEFAULT_AUTOSAVE_MS = 30_000


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def _env_seed() -> int | None:
    raw = os.getenv("GUILD_RNG_SEED", "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer GUILD_RNG_SEED=%r", raw)
        return None


def autosave_interval_ms() -> int:
    try:
        return max(1000, int(os.getenv("GUILD_AUTOSAVE_MS", str(DEFAULT_AUTOSAVE_MS))))
    except ValueError:
        return DEFAULT_AUTOSAVE_MS


def save_path() -> Path:
    return Path(os.getenv("GUILD_SAVE_PATH", DEFAULT_SAVE_FILENAME))


def _build_service(state_repo, *, clock=None) -> GuildService:
    clock = clock or wall_clock_ms
    generator = AdventurerGenerator(rng=build_rng(_env_seed()), clock=clock)
    event_bus = EventBus()
    activity_log = register_activity_log_handlers(event_bus)
    return GuildService(
        state_repo,
        generator=generator,
        event_bus=event_bus,
        activity_log=activity_log,
        clock=clock,
        save_file_store=JsonSaveFileStore(),
    )


def _build_sql_guild_service(clock=None) -> GuildService:
    from guild.infrastructure.db.sql.connection import engine
    from guild.infrastructure.db.sql.migrate import apply_schema
    from guild.infrastructure.db.sql.repos import SqlGameStateRepository

    # Fail early so the fallback happens before the session starts.
    try:
        apply_schema(engine)
    except Exception as exc:
        raise RuntimeError(f"Database bootstrap probe failed: {exc}") from exc
    return _build_service(SqlGameStateRepository(), clock=clock)


def create_guild_service(clock=None) -> GuildService:
    if os.getenv("GUILD_DATABASE_URL"):
        try:
            return _build_sql_guild_service(clock=clock)
        except Exception as exc:
            print(f"Database unavailable, falling back to local storage. Reason: {exc}")

    if _env_flag("GUILD_IN_MEMORY"):
        return _build_service(InMemoryGameStateRepository(), clock=clock)
    return _build_service(JsonFileGameStateRepository(save_path()), clock=clock)
