"""Create the guild save tables using SQLAlchemy.

Usage examples:
    set GUILD_DATABASE_URL=sqlite:///guild_master.db
    python -m guild.infrastructure.db.sql.migrate

    python -m guild.infrastructure.db.sql.migrate --dry-run
"""

from __future__ import annotations

import argparse
import os
from typing import Sequence

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError


SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS guild_state (
        state_id INTEGER PRIMARY KEY,
        version VARCHAR(16) NOT NULL,
        saved_at BIGINT NOT NULL,
        gold DOUBLE PRECISION NOT NULL,
        influence INTEGER NOT NULL,
        guild_fame INTEGER NOT NULL,
        total_earnings DOUBLE PRECISION NOT NULL,
        lifetime_earnings DOUBLE PRECISION NOT NULL,
        prestige_level INTEGER NOT NULL,
        prestige_multiplier DOUBLE PRECISION NOT NULL,
        current_location VARCHAR(64) NOT NULL,
        time_json TEXT NOT NULL,
        offline_earnings_json TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS guild_quest (
        quest_id VARCHAR(64) PRIMARY KEY,
        board_order INTEGER NOT NULL,
        payload_json TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS guild_adventurer (
        adventurer_id VARCHAR(64) PRIMARY KEY,
        in_pool INTEGER NOT NULL,
        list_order INTEGER NOT NULL,
        payload_json TEXT NOT NULL
    )
    """,
)


def apply_schema(engine, statements: Sequence[str] = SCHEMA_STATEMENTS) -> int:
    with engine.begin() as conn:
        for statement in statements:
            conn.exec_driver_sql(statement)
    return len(statements)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create guild save tables")
    parser.add_argument("--database-url", default=os.getenv("GUILD_DATABASE_URL", ""))
    parser.add_argument("--dry-run", action="store_true", help="Print the statements without executing them")
    args = parser.parse_args(argv)

    if args.dry_run:
        for statement in SCHEMA_STATEMENTS:
            print(statement.strip() + ";")
        return 0

    if not args.database_url:
        print("GUILD_DATABASE_URL is not set and --database-url was not given.")
        return 2

    try:
        applied = apply_schema(create_engine(args.database_url, future=True))
    except SQLAlchemyError as exc:
        print(f"Schema migration failed: {exc}")
        return 1
    print(f"Applied {applied} schema statements.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
