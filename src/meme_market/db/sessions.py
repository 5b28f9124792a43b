"""Database engine and session management."""
import os
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from meme_market.db.models import (  # noqa: F401  # pylint: disable=unused-import
    HoldingRecord, InstrumentRecord, PriceHistoryRecord, TransactionRecord,
    UserRecord)


def create_db_engine(url: str, echo: bool | None = None) -> Engine:
    """Create a synchronous engine for url.

    SQLite connections may be used from worker threads; an in-memory SQLite
    URL gets a single shared connection so every session sees the same data.
    """
    if echo is None:
        echo = os.getenv("SQL_ECHO", "0") == "1"
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


@contextmanager
def get_session(engine: Engine) -> Generator[Session, None, None]:
    """Yield a database session; commits on success, rolls back on error."""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Create all tables. Safe to call on startup (idempotent for existing tables)."""
    SQLModel.metadata.create_all(engine)
