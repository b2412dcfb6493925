"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from stonks.domain import HealthStatus


@dataclass(frozen=True)
class StoredTransactionRecord:
    """Raw transaction row as read back from the store.

    Values are kept close to their stored form so that anomalous rows can be
    detected and skipped by the replay layer instead of failing the read.

    Attributes:
        stock_transaction_id: Store insertion sequence.
        ticker: Logical collection the row belongs to.
        kind: Stored kind label, expected `Buy` or `Sell`.
        quantity: Stored share count.
        price: Stored price as exact decimal text.
        transaction_at_utc: Stored trade timestamp.
    """

    stock_transaction_id: int
    ticker: str
    kind: str | None
    quantity: int | None
    price: str | None
    transaction_at_utc: datetime | None


@dataclass(frozen=True)
class TransactionAppendRequest:
    """Insert payload for one transaction.

    Attributes:
        ticker: Logical collection name.
        kind: Kind label, `Buy` or `Sell`.
        quantity: Strictly positive share count.
        price: Exact decimal price.
        transaction_at_utc: Offset-aware trade timestamp.
    """

    ticker: str
    kind: str
    quantity: int
    price: Decimal
    transaction_at_utc: datetime


@dataclass(frozen=True)
class TickerSummaryRecord:
    """Per-ticker aggregation row.

    Attributes:
        ticker: Logical collection name.
        transaction_count: Number of stored transactions for the ticker.
    """

    ticker: str
    transaction_count: int


class TransactionStorePort(Protocol):
    """Port definition for the durable transaction log."""

    def db_transaction_append(self, request: TransactionAppendRequest) -> StoredTransactionRecord:
        """Append one transaction.

        Args:
            request: Insert payload.

        Returns:
            StoredTransactionRecord: Persisted row including its sequence.

        Raises:
            TransactionStoreError: Raised when the insert fails.
        """

    def db_transaction_list_for_ticker(self, ticker: str, through_utc: datetime) -> list[StoredTransactionRecord]:
        """List transactions for one ticker up to an inclusive cutoff.

        Args:
            ticker: Exact ticker.
            through_utc: Inclusive offset-aware upper bound.

        Returns:
            list[StoredTransactionRecord]: Rows ordered by timestamp then sequence.

        Raises:
            TransactionStoreError: Raised when the read fails.
        """

    def db_ticker_summary_list(self) -> list[TickerSummaryRecord]:
        """Group stored transactions by ticker.

        Returns:
            list[TickerSummaryRecord]: One row per distinct ticker, ascending by ticker.

        Raises:
            TransactionStoreError: Raised when the read fails.
        """


class DatabaseHealthPort(Protocol):
    """Port definition for database connectivity checks."""

    def db_connection_label(self) -> str:
        """Return a password-free label of the database target."""

    def db_check_health(self) -> HealthStatus:
        """Verify database connectivity.

        Returns:
            HealthStatus: Health payload with status and diagnostic detail.

        Raises:
            StoreConnectionError: Raised when connectivity check fails.
        """
