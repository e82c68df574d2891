import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


DEFAULT_DATABASE_URL = "sqlite:///guild_master.db"


def database_url() -> str:
    return os.getenv("GUILD_DATABASE_URL", DEFAULT_DATABASE_URL)


def build_engine(url: str | None = None):
    return create_engine(url or database_url(), future=True, pool_pre_ping=True)


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
