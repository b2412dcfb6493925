"""Moving-average cost accounting primitives."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Context, Decimal, localcontext
from typing import Iterable

from stonks.domain import Transaction, TransactionKind


_ZERO = Decimal("0")
_ACCOUNTING_CONTEXT = Context(prec=28)


@dataclass(frozen=True)
class PositionState:
    """Running totals carried across the replay fold.

    Attributes:
        quantity: Net shares held, negative for a short position.
        cost_value: Cost basis of the held quantity.
    """

    quantity: int = 0
    cost_value: Decimal = _ZERO

    @property
    def average_price(self) -> Decimal:
        """Return the moving average cost of the held quantity."""

        return accounting_average_price(self.quantity, self.cost_value)


def accounting_average_price(quantity: int, cost_value: Decimal) -> Decimal:
    """Compute average price with the zero fallback for undefined averages.

    Args:
        quantity: Net shares held.
        cost_value: Cost basis of the held quantity.

    Returns:
        Decimal: `cost_value / quantity`, or zero when either side is zero.
    """

    if quantity == 0 or cost_value == _ZERO:
        return _ZERO
    with localcontext(_ACCOUNTING_CONTEXT):
        return cost_value / Decimal(quantity)


def accounting_apply_transaction(state: PositionState, transaction: Transaction) -> PositionState:
    """Apply one buy or sell to the running position.

    A buy adds `price * quantity` to the cost basis. A sell removes shares at
    the pre-sale average cost; its own price never enters the cost basis, so
    the average of the remaining shares is unchanged by the sale. A sell
    against an empty position removes no cost. A sell larger than the held
    quantity is applied as-is and leaves a short position.

    Args:
        state: Position before the transaction.
        transaction: Transaction to apply.

    Returns:
        PositionState: Position after the transaction.

    Raises:
        ValueError: Raised when the transaction kind is unsupported.
    """

    with localcontext(_ACCOUNTING_CONTEXT):
        if transaction.kind is TransactionKind.BUY:
            return PositionState(
                quantity=state.quantity + transaction.quantity,
                cost_value=state.cost_value + transaction.price * Decimal(transaction.quantity),
            )

        if transaction.kind is TransactionKind.SELL:
            remaining_quantity = state.quantity - transaction.quantity
            if state.quantity == 0:
                return PositionState(quantity=remaining_quantity, cost_value=state.cost_value)
            if remaining_quantity == 0:
                # exact liquidation; drop the residue left by non-terminating averages
                return PositionState(quantity=0, cost_value=_ZERO)
            pre_sale_average = state.cost_value / Decimal(state.quantity)
            return PositionState(
                quantity=remaining_quantity,
                cost_value=state.cost_value - pre_sale_average * Decimal(transaction.quantity),
            )

    raise ValueError(f"unsupported transaction kind={transaction.kind}")


def accounting_fold(transactions: Iterable[Transaction], initial: PositionState | None = None) -> PositionState:
    """Fold transactions, already in replay order, into one position state.

    Args:
        transactions: Ordered transactions.
        initial: Starting state, zero position when omitted.

    Returns:
        PositionState: Final running totals.
    """

    state = initial or PositionState()
    for transaction in transactions:
        state = accounting_apply_transaction(state, transaction)
    return state


__all__ = [
    "PositionState",
    "accounting_apply_transaction",
    "accounting_average_price",
    "accounting_fold",
]
