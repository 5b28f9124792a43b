"""Leaderboard and transaction listing built from stored users and prices."""
import asyncio
import logging

from meme_market.db.models import HoldingRecord, UserRecord
from meme_market.db.store import MarketStore
from meme_market.schemas import (HoldingValue, Leaderboard, LeaderboardEntry,
                                 TransactionView)
from meme_market.utils import round_money, utcnow
from meme_market.valuation.valuator import (HoldingInput, PortfolioValuator,
                                            rank)

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Ranks users by total value at current prices."""

    def __init__(
        self,
        store: MarketStore,
        valuator: PortfolioValuator,
        *,
        max_limit: int = 50,
    ) -> None:
        self._store = store
        self._valuator = valuator
        self._max_limit = max_limit

    async def valuate_leaderboard(
        self, limit: int = 10, include_holdings: bool = False
    ) -> Leaderboard:
        """Top users by total value.

        Raises:
            InvalidNumericInput: limit is below 1, or stored numbers are invalid.
        """
        return await asyncio.to_thread(self._build_leaderboard, limit, include_holdings)

    async def recent_transactions(self, limit: int = 50) -> list[TransactionView]:
        rows = await asyncio.to_thread(self._store.read_transactions, limit)
        return [
            TransactionView(
                id=row.id,
                user_id=row.user_id,
                symbol=row.symbol,
                type="buy" if row.quantity > 0 else "sell",
                quantity=row.quantity,
                price=row.price,
                value=round_money(abs(row.quantity) * row.price),
                timestamp=row.timestamp,
            )
            for row in rows
        ]

    def _build_leaderboard(self, limit: int, include_holdings: bool) -> Leaderboard:
        users = self._store.read_all_users()
        holdings = self._store.read_all_holdings()
        prices = {i.symbol: i.price for i in self._store.read_instrument_state()}

        entries = [
            self._entry(user, holdings.get(user.id, []), prices, include_holdings)
            for user in users
        ]
        ranked = rank(entries, limit, max_limit=self._max_limit)
        return Leaderboard(
            leaderboard=[entry.model_copy(update={"rank": r}) for r, entry in ranked],
            total_users=len(users),
            limit=min(limit, self._max_limit),
            include_holdings=include_holdings,
            timestamp=utcnow(),
        )

    def _entry(
        self,
        user: UserRecord,
        holdings: list[HoldingRecord],
        prices: dict[str, float],
        include_holdings: bool,
    ) -> LeaderboardEntry:
        valuation = self._valuator.valuate(
            user.balance,
            [HoldingInput(h.symbol, h.quantity) for h in holdings],
            prices,
        )
        held = None
        if include_holdings:
            held = [
                HoldingValue(
                    symbol=h.symbol,
                    quantity=h.quantity,
                    price=prices.get(h.symbol, 0.0),
                    value=round_money(h.quantity * prices.get(h.symbol, 0.0)),
                )
                for h in holdings
            ]
        return LeaderboardEntry(
            rank=0,
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            balance=valuation.balance,
            portfolio_value=valuation.portfolio_value,
            total_value=valuation.total_value,
            profit=valuation.profit,
            profit_percentage=valuation.profit_percentage,
            total_invested=valuation.total_invested,
            last_daily=user.last_daily,
            last_message=user.last_message,
            joined_at=user.created_at,
            holdings=held,
        )
