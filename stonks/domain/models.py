"""Typed domain models shared across runtime layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


PRICE_MAX_FRACTION_DIGITS = 10
PRICE_MAX_INTEGER_DIGITS = 28


def domain_validate_price_scale(price: Decimal) -> None:
    """Check that a price is stored exactly by a `NUMERIC(38, 10)` column.

    Trailing fractional zeros do not count, so `1.500000000000` is accepted.

    Args:
        price: Finite decimal price.

    Raises:
        ValueError: Raised when the price has too many decimal places or integer digits.
    """

    if price.is_zero():
        return
    _, digits, exponent = price.as_tuple()
    significant_digits = list(digits)
    while len(significant_digits) > 1 and significant_digits[-1] == 0 and exponent < 0:
        significant_digits.pop()
        exponent += 1
    if exponent < -PRICE_MAX_FRACTION_DIGITS:
        raise ValueError(f"price must have at most {PRICE_MAX_FRACTION_DIGITS} decimal places")
    if len(significant_digits) + exponent > PRICE_MAX_INTEGER_DIGITS:
        raise ValueError(f"price must have at most {PRICE_MAX_INTEGER_DIGITS} integer digits")


class TransactionKind(str, Enum):
    """Trade direction persisted as `Buy` / `Sell`."""

    BUY = "Buy"
    SELL = "Sell"

    @classmethod
    def domain_parse(cls, value: str) -> TransactionKind:
        """Parse a kind label case-insensitively.

        Args:
            value: Kind label such as `buy` or `Sell`.

        Returns:
            TransactionKind: Matching kind.

        Raises:
            ValueError: Raised when the label is not a known kind.
        """

        normalized_value = str(value).strip().lower()
        for kind in cls:
            if kind.value.lower() == normalized_value:
                return kind
        raise ValueError(f"unknown operation kind={value}")


@dataclass(frozen=True)
class Transaction:
    """Immutable record of one trade.

    Attributes:
        ticker: Instrument identifier, also the logical collection name.
        kind: Buy or Sell.
        quantity: Strictly positive share count.
        price: Exact per-share price.
        timestamp: Offset-aware trade timestamp.
        sequence: Store-assigned insertion number, None before persistence.
    """

    ticker: str
    kind: TransactionKind
    quantity: int
    price: Decimal
    timestamp: datetime
    sequence: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.ticker, str) or not self.ticker.strip():
            raise ValueError("ticker must not be blank")
        if not isinstance(self.kind, TransactionKind):
            raise ValueError(f"unsupported kind={self.kind}")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError("quantity must be a positive integer")
        if not isinstance(self.price, Decimal) or not self.price.is_finite():
            raise ValueError("price must be a finite decimal")
        if self.price < 0:
            raise ValueError("price must not be negative")
        domain_validate_price_scale(self.price)
        if self.timestamp.tzinfo is None or self.timestamp.utcoffset() is None:
            raise ValueError("timestamp must be offset-aware")


@dataclass(frozen=True)
class Position:
    """Derived point-in-time position for one ticker.

    Attributes:
        ticker: Queried ticker.
        quantity: Net shares held at the cutoff.
        cost_value: Cost basis of the held quantity.
        average_price: Moving average cost, zero when undefined.
        as_of: Inclusive cutoff the position was replayed to.
        transaction_count: Number of transactions folded into the position.
        skipped_record_count: Number of anomalous stored records left out of the replay.
    """

    ticker: str
    quantity: int
    cost_value: Decimal
    average_price: Decimal
    as_of: datetime
    transaction_count: int = 0
    skipped_record_count: int = 0


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for store health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str
