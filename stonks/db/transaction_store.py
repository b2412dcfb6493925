"""Database service for the append-only stock transaction log."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import Engine, text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from stonks.domain import StoreConnectionError, TransactionStoreError

from .interfaces import (
    StoredTransactionRecord,
    TickerSummaryRecord,
    TransactionAppendRequest,
    TransactionStorePort,
)

logger = logging.getLogger(__name__)


class SQLAlchemyTransactionStore(TransactionStorePort):
    """SQLAlchemy implementation of the transaction store.

    One table holds every ticker's ledger; the `ticker` column is the logical
    collection. The identity column doubles as the insertion sequence used to
    order transactions sharing a timestamp.
    """

    _TRANSACTION_COLUMNS = "stock_transaction_id, ticker, kind, quantity, price, transaction_at_utc"

    _INSERT_QUERY = (
        "INSERT INTO stock_transaction (ticker, kind, quantity, price, transaction_at_utc) "
        "VALUES (:ticker, :kind, :quantity, :price, :transaction_at_utc) "
        f"RETURNING {_TRANSACTION_COLUMNS}"
    )

    _LIST_FOR_TICKER_QUERY = (
        f"SELECT {_TRANSACTION_COLUMNS} FROM stock_transaction "
        "WHERE ticker = :ticker AND transaction_at_utc <= :through_utc "
        "ORDER BY transaction_at_utc asc, stock_transaction_id asc"
    )

    _TICKER_SUMMARY_QUERY = (
        "SELECT ticker, COUNT(*) AS transaction_count FROM stock_transaction "
        "GROUP BY ticker ORDER BY ticker asc"
    )

    def __init__(self, engine: Engine):
        """Initialize transaction store.

        Args:
            engine: SQLAlchemy engine used for persistence and reads.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_transaction_append(self, request: TransactionAppendRequest) -> StoredTransactionRecord:
        """Insert one transaction and return the persisted row.

        Args:
            request: Insert payload.

        Returns:
            StoredTransactionRecord: Persisted row including its sequence.

        Raises:
            ValueError: Raised when input values are invalid.
            TransactionStoreError: Raised when the insert fails.
        """

        normalized_ticker = self._db_validate_non_empty_text(request.ticker, "ticker")
        normalized_kind = self._db_validate_non_empty_text(request.kind, "kind")
        if request.quantity <= 0:
            raise ValueError("quantity must be positive")
        transaction_at_utc = self._db_validate_aware_timestamp(request.transaction_at_utc, "transaction_at_utc")

        try:
            with self._engine.begin() as connection:
                row = connection.execute(
                    text(self._INSERT_QUERY),
                    {
                        "ticker": normalized_ticker,
                        "kind": normalized_kind,
                        "quantity": request.quantity,
                        "price": request.price,
                        "transaction_at_utc": transaction_at_utc,
                    },
                ).mappings().one()
        except SQLAlchemyError as error:
            raise self._db_wrap_error(error, "transaction_append") from error

        logger.debug(
            "appended transaction ticker=%s kind=%s sequence=%s",
            normalized_ticker,
            normalized_kind,
            row["stock_transaction_id"],
        )
        return self._db_build_transaction_record(row)

    def db_transaction_list_for_ticker(self, ticker: str, through_utc: datetime) -> list[StoredTransactionRecord]:
        """List transactions for one ticker in deterministic replay order.

        Args:
            ticker: Exact ticker.
            through_utc: Inclusive offset-aware upper bound.

        Returns:
            list[StoredTransactionRecord]: Rows ordered by timestamp then sequence.

        Raises:
            ValueError: Raised when input values are invalid.
            TransactionStoreError: Raised when the read fails.
        """

        normalized_ticker = self._db_validate_non_empty_text(ticker, "ticker")
        normalized_through_utc = self._db_validate_aware_timestamp(through_utc, "through_utc")

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(self._LIST_FOR_TICKER_QUERY),
                    {"ticker": normalized_ticker, "through_utc": normalized_through_utc},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise self._db_wrap_error(error, "transaction_list_for_ticker") from error

        return [self._db_build_transaction_record(row) for row in rows]

    def db_ticker_summary_list(self) -> list[TickerSummaryRecord]:
        """Group stored transactions by ticker.

        Returns:
            list[TickerSummaryRecord]: One row per distinct ticker, ascending by ticker.

        Raises:
            TransactionStoreError: Raised when the read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(text(self._TICKER_SUMMARY_QUERY), {}).mappings().all()
        except SQLAlchemyError as error:
            raise self._db_wrap_error(error, "ticker_summary_list") from error

        return [
            TickerSummaryRecord(ticker=row["ticker"], transaction_count=int(row["transaction_count"]))
            for row in rows
        ]

    def _db_build_transaction_record(self, row: Any) -> StoredTransactionRecord:
        return StoredTransactionRecord(
            stock_transaction_id=int(row["stock_transaction_id"]),
            ticker=row["ticker"],
            kind=row["kind"],
            quantity=None if row["quantity"] is None else int(row["quantity"]),
            price=None if row["price"] is None else str(row["price"]),
            transaction_at_utc=row["transaction_at_utc"],
        )

    def _db_wrap_error(self, error: SQLAlchemyError, operation: str) -> TransactionStoreError:
        """Map a SQLAlchemy failure onto the store error taxonomy.

        Args:
            error: Raised SQLAlchemy error.
            operation: Store operation label.

        Returns:
            TransactionStoreError: Connection error for operational failures, generic store error otherwise.
        """

        logger.warning("transaction store operation=%s failed: %s", operation, error)
        if isinstance(error, OperationalError):
            return StoreConnectionError(f"transaction store unreachable during {operation}", operation=operation)
        return TransactionStoreError(f"transaction store {operation} failed", operation=operation)

    def _db_validate_non_empty_text(self, value: str, field_name: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{field_name} must not be blank")
        return value.strip()

    def _db_validate_aware_timestamp(self, value: datetime, field_name: str) -> datetime:
        if not isinstance(value, datetime):
            raise ValueError(f"{field_name} must be a datetime")
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError(f"{field_name} must be offset-aware")
        return value


__all__ = ["SQLAlchemyTransactionStore"]
