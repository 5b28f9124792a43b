"""Portfolio valuation and leaderboard ranking."""
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TypeVar

from meme_market.errors import (InvalidNumericInput, require_finite,
                                require_non_negative)
from meme_market.utils import round_money

T = TypeVar("T")

# Assumed entry price as a fraction of the current price; there is no
# per-lot cost basis, so invested capital is estimated.
ENTRY_PRICE_ESTIMATE = 0.8
DEFAULT_LIMIT = 10
MAX_LIMIT = 50


@dataclass(frozen=True)
class HoldingInput:
    symbol: str
    quantity: float


@dataclass(frozen=True)
class Valuation:
    """Money figures for one user, each rounded half-up to cents."""

    balance: float
    portfolio_value: float
    total_value: float
    profit: float
    profit_percentage: float
    total_invested: float


class PortfolioValuator:
    """Values holdings at current prices. Pure: same inputs, same outputs."""

    def __init__(self, starting_balance: float = 1000.0) -> None:
        self._starting_balance = require_non_negative("starting_balance", starting_balance)

    @property
    def starting_balance(self) -> float:
        return self._starting_balance

    def valuate(
        self,
        balance: float,
        holdings: Iterable[HoldingInput],
        prices: Mapping[str, float],
        starting_balance: float | None = None,
    ) -> Valuation:
        """Value a user's cash and holdings.

        An unknown symbol is priced at 0. Profit is measured against the
        starting balance plus an estimate of invested capital
        (|quantity| * price * 0.8 per holding).

        Args:
            balance: Cash balance.
            holdings: Signed positions.
            prices: Current price per symbol.
            starting_balance: Override of the valuator's starting balance.

        Raises:
            InvalidNumericInput: balance, a quantity or a price is not
                finite, or a price is negative.
        """
        cash = require_finite("balance", balance)
        start = (
            self._starting_balance
            if starting_balance is None
            else require_finite("starting_balance", starting_balance)
        )

        portfolio_value = 0.0
        invested = 0.0
        for holding in holdings:
            quantity = require_finite(f"quantity[{holding.symbol}]", holding.quantity)
            price = _price_of(prices, holding.symbol)
            portfolio_value += quantity * price
            invested += abs(quantity) * price * ENTRY_PRICE_ESTIMATE

        total_value = cash + portfolio_value
        basis = start + invested
        profit = total_value - basis
        percentage = profit / basis * 100 if basis != 0 else 0.0
        return Valuation(
            balance=round_money(cash),
            portfolio_value=round_money(portfolio_value),
            total_value=round_money(total_value),
            profit=round_money(profit),
            profit_percentage=round_money(percentage),
            total_invested=round_money(invested),
        )


def _price_of(prices: Mapping[str, float], symbol: str) -> float:
    if symbol not in prices:
        return 0.0
    price = require_finite(f"price[{symbol}]", prices[symbol])
    if price < 0:
        raise InvalidNumericInput(f"price[{symbol}] must not be negative, got {price!r}")
    return price


def rank(
    entries: Sequence[T],
    limit: int = DEFAULT_LIMIT,
    *,
    key: Callable[[T], float] = lambda entry: entry.total_value,  # type: ignore[attr-defined]
    max_limit: int = MAX_LIMIT,
) -> list[tuple[int, T]]:
    """Sort entries by key, highest first, and number them from 1.

    Ties keep their input order. At most min(limit, max_limit) entries are
    returned.

    Raises:
        InvalidNumericInput: limit is below 1.
    """
    if limit < 1:
        raise InvalidNumericInput(f"limit must be at least 1, got {limit}")
    ordered = sorted(entries, key=key, reverse=True)
    return list(enumerate(ordered[: min(limit, max_limit)], start=1))
