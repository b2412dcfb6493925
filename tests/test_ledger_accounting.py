"""Regression tests for moving-average cost accounting transitions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from stonks.domain import Transaction, TransactionKind
from stonks.ledger.accounting import (
    PositionState,
    accounting_apply_transaction,
    accounting_average_price,
    accounting_fold,
)


_DAY_ONE = datetime(2026, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def _buy(quantity: int, price: str, day: int = 0) -> Transaction:
    return Transaction(
        ticker="AAPL",
        kind=TransactionKind.BUY,
        quantity=quantity,
        price=Decimal(price),
        timestamp=_DAY_ONE + timedelta(days=day),
    )


def _sell(quantity: int, price: str, day: int = 0) -> Transaction:
    return Transaction(
        ticker="AAPL",
        kind=TransactionKind.SELL,
        quantity=quantity,
        price=Decimal(price),
        timestamp=_DAY_ONE + timedelta(days=day),
    )


def test_accounting_single_buy_average_equals_price() -> None:
    """Buy 10 @ 100 averages at 100."""

    state = accounting_fold([_buy(10, "100")])

    assert state.quantity == 10
    assert state.cost_value == Decimal("1000")
    assert state.average_price == Decimal("100.00")


def test_accounting_second_buy_moves_weighted_average() -> None:
    """Buy 10 @ 100 then 10 @ 200 gives 20 shares at cost 3000, average 150."""

    state = accounting_fold([_buy(10, "100"), _buy(10, "200", day=1)])

    assert state.quantity == 20
    assert state.cost_value == Decimal("3000")
    assert state.average_price == Decimal("150.00")


def test_accounting_partial_sell_keeps_average_and_ignores_sale_price() -> None:
    """Selling 5 of 20 removes cost at the pre-sale average, whatever the sale price."""

    for sale_price in ("1", "150", "9999.99"):
        state = accounting_fold([_buy(10, "100"), _buy(10, "200", day=1), _sell(5, sale_price, day=2)])

        assert state.quantity == 15
        assert state.cost_value == Decimal("2250")
        assert state.average_price == Decimal("150.00")


def test_accounting_full_liquidation_zeroes_cost_and_average() -> None:
    """Selling the whole remaining position leaves zero quantity, cost and average."""

    state = accounting_fold(
        [_buy(10, "100"), _buy(10, "200", day=1), _sell(5, "300", day=2), _sell(15, "50", day=3)]
    )

    assert state.quantity == 0
    assert state.cost_value == Decimal("0")
    assert state.average_price == Decimal("0")


def test_accounting_full_liquidation_drops_non_terminating_residue() -> None:
    """Liquidating a position with a repeating-decimal average lands on exactly zero cost."""

    state = accounting_fold([_buy(1, "10"), _buy(2, "11"), _sell(1, "12"), _sell(2, "12")])

    assert state.quantity == 0
    assert state.cost_value == Decimal("0")


def test_accounting_buy_only_average_is_quantity_weighted_mean() -> None:
    """Average of buys equals sum(price * quantity) / sum(quantity)."""

    buys = [_buy(3, "10.5"), _buy(7, "11.25", day=1), _buy(5, "9", day=2)]

    state = accounting_fold(buys)

    expected = sum((buy.price * buy.quantity for buy in buys), Decimal("0")) / sum(buy.quantity for buy in buys)
    assert state.average_price == expected
    assert state.average_price == Decimal("10.35")


def test_accounting_sell_preserves_repeating_average_within_precision() -> None:
    """A sell leaves a repeating-decimal average unchanged up to decimal precision."""

    before = accounting_fold([_buy(1, "10"), _buy(2, "11")])
    after = accounting_apply_transaction(before, _sell(1, "500"))

    assert after.quantity == 2
    assert abs(after.average_price - before.average_price) < Decimal("1e-20")


def test_accounting_prices_keep_exact_decimal_values() -> None:
    """Decimal prices such as 0.1 accumulate without binary rounding."""

    state = accounting_fold([_buy(1, "0.1"), _buy(1, "0.2")])

    assert state.cost_value == Decimal("0.3")
    assert state.average_price == Decimal("0.15")


def test_accounting_sell_against_empty_position_removes_no_cost() -> None:
    """Selling with nothing held uses a zero average and leaves a cost-free short."""

    state = accounting_apply_transaction(PositionState(), _sell(5, "100"))

    assert state.quantity == -5
    assert state.cost_value == Decimal("0")
    assert state.average_price == Decimal("0")


def test_accounting_oversell_leaves_short_position_at_prior_average() -> None:
    """Overselling is applied as-is and the short keeps the pre-sale average."""

    state = accounting_fold([_buy(10, "100"), _sell(15, "120", day=1)])

    assert state.quantity == -5
    assert state.cost_value == Decimal("-500")
    assert state.average_price == Decimal("100")


def test_accounting_average_price_zero_fallbacks() -> None:
    """Zero quantity or zero cost yields a zero average instead of dividing."""

    assert accounting_average_price(0, Decimal("123")) == Decimal("0")
    assert accounting_average_price(10, Decimal("0")) == Decimal("0")
    assert accounting_average_price(4, Decimal("10")) == Decimal("2.5")
