"""Database package: models, session management and the market store."""
from meme_market.db.models import (HoldingRecord, InstrumentRecord,
                                   PriceHistoryRecord, TransactionRecord,
                                   UserRecord)
from meme_market.db.sessions import create_db_engine, get_session, init_db
from meme_market.db.store import MarketStore

__all__ = [
    "HoldingRecord",
    "InstrumentRecord",
    "MarketStore",
    "PriceHistoryRecord",
    "TransactionRecord",
    "UserRecord",
    "create_db_engine",
    "get_session",
    "init_db",
]
