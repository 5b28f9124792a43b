"""MarketStore: the persistence boundary used by the market core and services.

All methods are synchronous; async callers run them via asyncio.to_thread.
"""
import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.engine import Engine
from sqlmodel import col, select

from meme_market.db.models import (HoldingRecord, InstrumentRecord,
                                   PriceHistoryRecord, TransactionRecord,
                                   UserRecord)
from meme_market.db.sessions import get_session
from meme_market.errors import (InvalidNumericInput, UnknownUser,
                                require_finite, require_whole)
from meme_market.market.models import Instrument, VolatilityClass
from meme_market.utils import utcnow

logger = logging.getLogger(__name__)


def _to_instrument(row: InstrumentRecord) -> Instrument:
    return Instrument(
        symbol=row.symbol,
        name=row.name,
        price=row.price,
        ceiling=row.ceiling,
        volatility=VolatilityClass(row.volatility),
        last_change=row.last_change,
        last_update=row.last_update,
    )


class MarketStore:
    """Reads and writes market, user and trade state."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    # ---- Instruments ----
    def read_instrument_state(self) -> list[Instrument]:
        """All instruments, ordered by symbol."""
        with get_session(self._engine) as session:
            rows = session.exec(
                select(InstrumentRecord).order_by(InstrumentRecord.symbol)
            ).all()
            return [_to_instrument(row) for row in rows]

    def write_instrument_state(
        self,
        batch: Sequence[Instrument],
        history: Sequence[PriceHistoryRecord] = (),
    ) -> int:
        """Persist new instrument prices and their history rows in one transaction.

        Returns:
            Number of instruments written.
        """
        with get_session(self._engine) as session:
            for instrument in batch:
                row = session.get(InstrumentRecord, instrument.symbol)
                if row is None:
                    row = InstrumentRecord(
                        symbol=instrument.symbol,
                        price=instrument.price,
                        ceiling=instrument.ceiling,
                        volatility=instrument.volatility.value,
                    )
                row.name = instrument.name
                row.price = instrument.price
                row.ceiling = instrument.ceiling
                row.volatility = instrument.volatility.value
                row.last_change = instrument.last_change
                row.last_update = instrument.last_update
                session.add(row)
            for point in history:
                session.add(point)
        return len(batch)

    def seed_instruments(self, defaults: Sequence[Instrument]) -> int:
        """Insert instruments that do not exist yet; existing prices are kept.

        Returns:
            Number of instruments inserted.
        """
        inserted = 0
        with get_session(self._engine) as session:
            for instrument in defaults:
                if session.get(InstrumentRecord, instrument.symbol) is not None:
                    continue
                session.add(
                    InstrumentRecord(
                        symbol=instrument.symbol,
                        name=instrument.name,
                        price=instrument.price,
                        ceiling=instrument.ceiling,
                        volatility=instrument.volatility.value,
                        last_change=instrument.last_change,
                        last_update=instrument.last_update,
                    )
                )
                inserted += 1
        if inserted:
            logger.info("Seeded %d instruments", inserted)
        return inserted

    def read_price_history(self, symbol: str, limit: int = 50) -> list[PriceHistoryRecord]:
        """Latest price points for symbol, newest first."""
        with get_session(self._engine) as session:
            return list(
                session.exec(
                    select(PriceHistoryRecord)
                    .where(PriceHistoryRecord.symbol == symbol)
                    .order_by(col(PriceHistoryRecord.timestamp).desc(),
                              col(PriceHistoryRecord.id).desc())
                    .limit(limit)
                ).all()
            )

    # ---- Users and holdings ----
    def ensure_user(
        self,
        user_id: str,
        username: str,
        *,
        display_name: str | None = None,
        balance: float = 1000.0,
    ) -> UserRecord:
        """Return the user, creating it with the starting balance if missing."""
        with get_session(self._engine) as session:
            user = session.get(UserRecord, user_id)
            if user is None:
                user = UserRecord(
                    id=user_id,
                    username=username,
                    display_name=display_name,
                    balance=require_finite("balance", balance),
                )
                session.add(user)
            return user

    def read_all_users(self) -> list[UserRecord]:
        """All users, richest balance first, then oldest account first.

        This order is the leaderboard's tie-break for equal total values.
        """
        with get_session(self._engine) as session:
            return list(
                session.exec(
                    select(UserRecord).order_by(
                        col(UserRecord.balance).desc(),
                        col(UserRecord.created_at),
                        col(UserRecord.id),
                    )
                ).all()
            )

    def read_holdings(self, user_id: str) -> list[HoldingRecord]:
        with get_session(self._engine) as session:
            return list(
                session.exec(
                    select(HoldingRecord)
                    .where(HoldingRecord.user_id == user_id)
                    .order_by(HoldingRecord.symbol)
                ).all()
            )

    def read_all_holdings(self) -> dict[str, list[HoldingRecord]]:
        """Holdings grouped by user id."""
        grouped: dict[str, list[HoldingRecord]] = defaultdict(list)
        with get_session(self._engine) as session:
            rows = session.exec(
                select(HoldingRecord).order_by(HoldingRecord.user_id, HoldingRecord.symbol)
            ).all()
            for row in rows:
                grouped[row.user_id].append(row)
        return dict(grouped)

    # ---- Trades ----
    def record_trade(
        self,
        user_id: str,
        symbol: str,
        quantity: int,
        price: float,
        *,
        timestamp: datetime | None = None,
    ) -> TransactionRecord:
        """Apply a trade: move cash, adjust the holding and log the transaction.

        Quantities are whole units: a positive quantity buys, a negative one
        sells. The holding row is deleted when its quantity reaches zero.

        Raises:
            UnknownUser: user_id is not in the store.
            InvalidNumericInput: quantity is zero, fractional or not finite, or price is
                not finite or negative.
        """
        qty = require_whole("quantity", quantity)
        if qty == 0:
            raise InvalidNumericInput("quantity must not be zero")
        unit_price = require_finite("price", price)
        if unit_price < 0:
            raise InvalidNumericInput(f"price must not be negative, got {price!r}")

        with get_session(self._engine) as session:
            user = session.get(UserRecord, user_id)
            if user is None:
                raise UnknownUser(f"User '{user_id}' not found")
            user.balance -= qty * unit_price
            session.add(user)

            holding = session.exec(
                select(HoldingRecord).where(
                    HoldingRecord.user_id == user_id, HoldingRecord.symbol == symbol
                )
            ).first()
            if holding is None:
                session.add(HoldingRecord(user_id=user_id, symbol=symbol, quantity=qty))
            else:
                holding.quantity += qty
                if holding.quantity == 0:
                    session.delete(holding)
                else:
                    session.add(holding)

            transaction = TransactionRecord(
                user_id=user_id,
                symbol=symbol,
                quantity=qty,
                price=unit_price,
                timestamp=timestamp or utcnow(),
            )
            session.add(transaction)
            session.flush()
            return transaction

    def read_transactions(self, limit: int = 50) -> list[TransactionRecord]:
        """Most recent transactions, newest first."""
        with get_session(self._engine) as session:
            return list(
                session.exec(
                    select(TransactionRecord)
                    .order_by(col(TransactionRecord.timestamp).desc(),
                              col(TransactionRecord.id).desc())
                    .limit(limit)
                ).all()
            )
