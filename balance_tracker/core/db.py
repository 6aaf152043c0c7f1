"""Engine and session factory shared by the API, the scheduler and the CLI."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from balance_tracker.core.config import settings

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
