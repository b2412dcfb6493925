"""Ledger replay engine reconstructing point-in-time positions."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable

from stonks.db import StoredTransactionRecord, TransactionStorePort
from stonks.domain import (
    Position,
    Transaction,
    TransactionIntegrityError,
    TransactionKind,
    dates_ensure_utc,
    dates_utc_now,
)

from .accounting import accounting_fold

logger = logging.getLogger(__name__)


def replay_parse_stored_transaction(record: StoredTransactionRecord) -> Transaction:
    """Convert a stored row into a validated transaction.

    Args:
        record: Raw stored row.

    Returns:
        Transaction: Immutable domain transaction carrying the store sequence.

    Raises:
        TransactionIntegrityError: Raised when a field is missing or invalid.
    """

    record_reference = f"{record.ticker}#{record.stock_transaction_id}"

    if record.kind is None:
        raise TransactionIntegrityError("missing kind", record_reference=record_reference, field_name="kind")
    try:
        kind = TransactionKind.domain_parse(record.kind)
    except ValueError as error:
        raise TransactionIntegrityError(str(error), record_reference=record_reference, field_name="kind") from error

    if record.quantity is None:
        raise TransactionIntegrityError("missing quantity", record_reference=record_reference, field_name="quantity")
    if record.price is None:
        raise TransactionIntegrityError("missing price", record_reference=record_reference, field_name="price")
    try:
        price = Decimal(record.price)
    except InvalidOperation as error:
        raise TransactionIntegrityError(
            f"invalid price={record.price}",
            record_reference=record_reference,
            field_name="price",
        ) from error
    if record.transaction_at_utc is None:
        raise TransactionIntegrityError(
            "missing transaction timestamp",
            record_reference=record_reference,
            field_name="transaction_at_utc",
        )

    try:
        return Transaction(
            ticker=record.ticker,
            kind=kind,
            quantity=record.quantity,
            price=price,
            timestamp=dates_ensure_utc(record.transaction_at_utc),
            sequence=record.stock_transaction_id,
        )
    except ValueError as error:
        raise TransactionIntegrityError(str(error), record_reference=record_reference) from error


def replay_normalize_ticker(ticker: str) -> str:
    """Strip a ticker, rejecting blank values.

    Raises:
        ValueError: Raised when the ticker is blank.
    """

    if not isinstance(ticker, str) or not ticker.strip():
        raise ValueError("ticker must not be blank")
    return ticker.strip()


def replay_order_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort transactions by timestamp, then insertion sequence, for deterministic replay."""

    return sorted(
        transactions,
        key=lambda transaction: (
            transaction.timestamp,
            transaction.sequence if transaction.sequence is not None else -1,
        ),
    )


class LedgerReplayEngine:
    """Rebuild a ticker's position by replaying its ledger up to a cutoff."""

    def __init__(self, store: TransactionStorePort, clock: Callable[[], datetime] = dates_utc_now):
        """Initialize replay engine dependencies.

        Args:
            store: Transaction store read port.
            clock: Source of the current moment for default cutoffs.

        Raises:
            ValueError: Raised when the store is invalid.
        """

        if store is None:
            raise ValueError("store must not be None")
        self._store = store
        self._clock = clock

    def ledger_load_transactions(self, ticker: str, through_utc: datetime) -> tuple[list[Transaction], int]:
        """Read one ticker's valid transactions up to a cutoff in replay order.

        Anomalous stored records are skipped with a warning rather than
        aborting the read.

        Args:
            ticker: Exact, already normalized ticker.
            through_utc: Inclusive offset-aware cutoff.

        Returns:
            tuple[list[Transaction], int]: Ordered transactions and the number of skipped records.

        Raises:
            TransactionStoreError: Raised when the store read fails.
        """

        records = self._store.db_transaction_list_for_ticker(ticker=ticker, through_utc=through_utc)

        transactions: list[Transaction] = []
        skipped_record_count = 0
        for record in records:
            try:
                transaction = replay_parse_stored_transaction(record)
            except TransactionIntegrityError as error:
                skipped_record_count += 1
                logger.warning(
                    "skipping anomalous record=%s field=%s: %s",
                    error.record_reference,
                    error.field_name,
                    error,
                )
                continue
            if transaction.timestamp > through_utc:
                continue
            transactions.append(transaction)

        return replay_order_transactions(transactions), skipped_record_count

    def ledger_compute_position(self, ticker: str, until: datetime | None = None) -> Position:
        """Replay every transaction at or before the cutoff into a position.

        Anomalous stored records are skipped and counted on the result rather
        than aborting the replay.

        Args:
            ticker: Exact ticker.
            until: Inclusive cutoff; defaults to the current moment.

        Returns:
            Position: Net holdings and moving average cost at the cutoff.

        Raises:
            ValueError: Raised when the ticker is blank.
            TransactionStoreError: Raised when the store read fails.
        """

        normalized_ticker = replay_normalize_ticker(ticker)
        cutoff_utc = dates_ensure_utc(until if until is not None else self._clock())

        transactions, skipped_record_count = self.ledger_load_transactions(normalized_ticker, cutoff_utc)
        state = accounting_fold(transactions)

        logger.debug(
            "replayed ticker=%s transactions=%s skipped=%s quantity=%s",
            normalized_ticker,
            len(transactions),
            skipped_record_count,
            state.quantity,
        )
        return Position(
            ticker=normalized_ticker,
            quantity=state.quantity,
            cost_value=state.cost_value,
            average_price=state.average_price,
            as_of=cutoff_utc,
            transaction_count=len(transactions),
            skipped_record_count=skipped_record_count,
        )


__all__ = [
    "LedgerReplayEngine",
    "replay_normalize_ticker",
    "replay_order_transactions",
    "replay_parse_stored_transaction",
]
