import math
from dataclasses import dataclass

import pytest

from meme_market.errors import InvalidNumericInput
from meme_market.utils import round_money
from meme_market.valuation import HoldingInput, PortfolioValuator, rank


def test_profit_against_estimated_invested_capital():
    valuation = PortfolioValuator().valuate(1000, [HoldingInput("SUS", 10)], {"SUS": 50})

    assert valuation.portfolio_value == 500.0
    assert valuation.total_invested == 400.0
    assert valuation.total_value == 1500.0
    assert valuation.profit == 100.0
    assert valuation.profit_percentage == 7.14


def test_short_position_reduces_value():
    valuation = PortfolioValuator().valuate(1000, [HoldingInput("SUS", -5)], {"SUS": 10})

    assert valuation.portfolio_value == -50.0
    assert valuation.total_invested == 40.0
    assert valuation.profit == -90.0
    assert valuation.profit_percentage == -8.65


def test_unknown_symbol_is_worthless():
    valuation = PortfolioValuator().valuate(1000, [HoldingInput("GONE", 3)], {})
    assert valuation.portfolio_value == 0.0
    assert valuation.profit == 0.0


def test_zero_balance_is_kept():
    valuation = PortfolioValuator().valuate(0, [], {})
    assert valuation.balance == 0.0
    assert valuation.profit == -1000.0


def test_zero_basis_has_zero_percentage():
    valuation = PortfolioValuator(starting_balance=0).valuate(5, [], {})
    assert valuation.profit_percentage == 0.0


def test_valuation_is_pure():
    valuator = PortfolioValuator()
    holdings = [HoldingInput("SUS", 3), HoldingInput("SKIBI", 7)]
    prices = {"SUS": 1.23, "SKIBI": 4.56}
    assert valuator.valuate(900, holdings, prices) == valuator.valuate(900, holdings, prices)


@pytest.mark.parametrize(
    "balance,holdings,prices",
    [
        (math.nan, [], {}),
        (1000, [HoldingInput("SUS", math.inf)], {"SUS": 1.0}),
        (1000, [HoldingInput("SUS", 1)], {"SUS": -1.0}),
        (1000, [HoldingInput("SUS", 1)], {"SUS": math.nan}),
    ],
)
def test_invalid_numbers_are_rejected(balance, holdings, prices):
    with pytest.raises(InvalidNumericInput):
        PortfolioValuator().valuate(balance, holdings, prices)


@pytest.mark.parametrize("value,expected", [(1.005, 1.01), (2.675, 2.68), (-1.005, -1.01), (7.1428, 7.14)])
def test_money_rounds_half_up(value, expected):
    assert round_money(value) == expected


@dataclass
class Entry:
    name: str
    total_value: float


def test_rank_is_stable_on_ties():
    entries = [Entry("A", 1500.00), Entry("B", 1500.00), Entry("C", 999.99)]

    ranked = rank(entries, limit=2)

    assert [(r, e.name) for r, e in ranked] == [(1, "A"), (2, "B")]


def test_rank_caps_limit():
    entries = [Entry(str(i), float(i)) for i in range(60)]
    ranked = rank(entries, limit=100)
    assert len(ranked) == 50
    assert ranked[0] == (1, entries[-1])


@pytest.mark.parametrize("limit", [0, -1])
def test_rank_rejects_limit_below_one(limit):
    with pytest.raises(InvalidNumericInput):
        rank([], limit=limit)
