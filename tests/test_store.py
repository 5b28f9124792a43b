import math
from datetime import datetime, timedelta

import pytest

from meme_market.db.models import PriceHistoryRecord
from meme_market.errors import InvalidNumericInput, UnknownUser
from meme_market.market.models import VolatilityClass

T0 = datetime(2024, 1, 3, 12, 0)


def test_seed_inserts_only_missing_instruments(store, instruments):
    assert store.seed_instruments(instruments) == 3

    changed = instruments[0].model_copy(update={"price": 9.0})
    store.write_instrument_state([changed])
    assert store.seed_instruments(instruments) == 0

    state = {i.symbol: i for i in store.read_instrument_state()}
    assert state["SKIBI"].price == 9.0
    assert state["SKIBI"].volatility is VolatilityClass.EXTREME


def test_read_state_is_ordered_by_symbol(seeded_store):
    assert [i.symbol for i in seeded_store.read_instrument_state()] == ["LABUB", "SKIBI", "SUS"]


def test_write_batch_with_history(seeded_store, instruments):
    batch = [i.model_copy(update={"price": i.price * 2, "last_change": 100.0}) for i in instruments]
    history = [
        PriceHistoryRecord(symbol=i.symbol, price=i.price, trend_score=0.0, timestamp=T0)
        for i in batch
    ]

    assert seeded_store.write_instrument_state(batch, history) == 3

    state = {i.symbol: i for i in seeded_store.read_instrument_state()}
    assert state["SUS"].price == 4.0
    assert state["SUS"].last_change == 100.0
    assert [p.price for p in seeded_store.read_price_history("SUS")] == [4.0]


def test_instrument_timestamps_round_trip(seeded_store, instruments):
    stamped = instruments[1].model_copy(update={"price": 2.5, "last_update": T0})
    seeded_store.write_instrument_state([stamped])

    state = {i.symbol: i for i in seeded_store.read_instrument_state()}
    assert state["SUS"].last_update == T0


def test_price_history_newest_first(seeded_store):
    seeded_store.write_instrument_state(
        [],
        [
            PriceHistoryRecord(symbol="SKIBI", price=p, trend_score=0.0, timestamp=T0 + timedelta(minutes=m))
            for m, p in enumerate([1.0, 1.1, 1.2])
        ],
    )
    assert [p.price for p in seeded_store.read_price_history("SKIBI", limit=2)] == [1.2, 1.1]


def test_ensure_user_creates_once(store):
    created = store.ensure_user("u1", "alice", display_name="Alice")
    assert created.balance == 1000.0

    store.record_trade("u1", "SKIBI", 10, 2.0)
    again = store.ensure_user("u1", "alice", balance=5000.0)
    assert again.balance == 980.0
    assert [u.id for u in store.read_all_users()] == ["u1"]


def test_buy_then_sell_everything(store):
    store.ensure_user("u1", "alice")

    store.record_trade("u1", "SUS", 10, 2.0)
    assert [(h.symbol, h.quantity) for h in store.read_holdings("u1")] == [("SUS", 10.0)]

    store.record_trade("u1", "SUS", -10, 3.0)
    assert store.read_holdings("u1") == []
    assert store.read_all_users()[0].balance == 1010.0


def test_short_position_is_kept(store):
    store.ensure_user("u1", "alice")
    store.record_trade("u1", "OHIO", -5, 10.0)

    assert store.read_holdings("u1")[0].quantity == -5.0
    assert store.read_all_users()[0].balance == 1050.0


def test_holdings_grouped_by_user(store):
    store.ensure_user("u1", "alice")
    store.ensure_user("u2", "bob")
    store.record_trade("u1", "SUS", 1, 1.0)
    store.record_trade("u1", "SKIBI", 2, 1.0)
    store.record_trade("u2", "SUS", 3, 1.0)

    grouped = store.read_all_holdings()
    assert [h.symbol for h in grouped["u1"]] == ["SKIBI", "SUS"]
    assert [h.quantity for h in grouped["u2"]] == [3.0]


def test_unknown_user_cannot_trade(store):
    with pytest.raises(UnknownUser):
        store.record_trade("ghost", "SUS", 1, 1.0)


@pytest.mark.parametrize(
    "quantity,price",
    [(0, 1.0), (0.5, 1.0), (math.nan, 1.0), (1, -1.0), (1, math.inf)],
)
def test_invalid_trade_numbers(store, quantity, price):
    store.ensure_user("u1", "alice")
    with pytest.raises(InvalidNumericInput):
        store.record_trade("u1", "SUS", quantity, price)
    assert store.read_transactions() == []


def test_transactions_newest_first(store):
    store.ensure_user("u1", "alice")
    for minute, qty in enumerate([1, 2, 3]):
        store.record_trade("u1", "SUS", qty, 1.0, timestamp=T0 + timedelta(minutes=minute))

    latest = store.read_transactions(limit=2)
    assert [t.quantity for t in latest] == [3.0, 2.0]
    assert all(t.id is not None for t in latest)


def test_repeated_buys_then_full_sell_leave_no_holding(store):
    store.ensure_user("u1", "alice")
    for _ in range(3):
        store.record_trade("u1", "SUS", 1, 0.1)

    store.record_trade("u1", "SUS", -3, 0.1)

    assert store.read_holdings("u1") == []
    assert store.read_all_holdings() == {}


def test_fractional_quantity_is_rejected(store):
    store.ensure_user("u1", "alice")
    store.record_trade("u1", "SUS", 1, 1.0)

    with pytest.raises(InvalidNumericInput):
        store.record_trade("u1", "SUS", 0.1, 1.0)
    assert [h.quantity for h in store.read_holdings("u1")] == [1]


def test_whole_float_quantity_is_accepted(store):
    store.ensure_user("u1", "alice")
    store.record_trade("u1", "SUS", 2.0, 1.0)

    holding = store.read_holdings("u1")[0]
    assert holding.quantity == 2
    assert isinstance(holding.quantity, int)


def test_users_ordered_by_balance_then_age(store):
    store.ensure_user("poor", "poor", balance=10.0)
    store.ensure_user("rich", "rich", balance=5000.0)
    store.ensure_user("a", "a", balance=100.0)
    store.ensure_user("b", "b", balance=100.0)

    assert [u.id for u in store.read_all_users()] == ["rich", "a", "b", "poor"]


def test_user_timestamps_round_trip(store):
    created = store.ensure_user("u1", "alice")
    (loaded,) = store.read_all_users()

    assert loaded.created_at == created.created_at
    assert loaded.created_at.tzinfo is None
