"""Shared test doubles for ledger, command and API tests."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from stonks.db import StoredTransactionRecord, TickerSummaryRecord, TransactionAppendRequest
from stonks.domain import TransactionStoreError


FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def build_stored_record(
    sequence: int,
    ticker: str,
    kind: str | None,
    quantity: int | None,
    price: str | None,
    transaction_at_utc: datetime | None,
) -> StoredTransactionRecord:
    """Build one stored row as the store would return it."""

    return StoredTransactionRecord(
        stock_transaction_id=sequence,
        ticker=ticker,
        kind=kind,
        quantity=quantity,
        price=price,
        transaction_at_utc=transaction_at_utc,
    )


class TransactionStoreStub:
    """In-memory transaction store honoring the store port contract.

    Attributes:
        records: Stored rows in insertion order.
        list_calls: Captured `(ticker, through_utc)` list-query arguments.
        summary_calls: Number of grouping queries issued.
        failure: Error raised by every operation when set.
        ignore_cutoff: Return rows past the cutoff, emulating an over-returning store.
        reverse_order: Return rows in reverse of the contract order.
    """

    def __init__(self, records: list[StoredTransactionRecord] | None = None) -> None:
        self.records: list[StoredTransactionRecord] = list(records or [])
        self.list_calls: list[tuple[str, datetime]] = []
        self.summary_calls = 0
        self.failure: Exception | None = None
        self.ignore_cutoff = False
        self.reverse_order = False

    def db_transaction_append(self, request: TransactionAppendRequest) -> StoredTransactionRecord:
        """Append one row with the next sequence number."""
        self._raise_failure()
        record = build_stored_record(
            sequence=len(self.records) + 1,
            ticker=request.ticker,
            kind=request.kind,
            quantity=request.quantity,
            price=str(request.price),
            transaction_at_utc=request.transaction_at_utc,
        )
        self.records.append(record)
        return record

    def db_transaction_list_for_ticker(self, ticker: str, through_utc: datetime) -> list[StoredTransactionRecord]:
        """Return one ticker's rows up to the cutoff in replay order."""
        self._raise_failure()
        self.list_calls.append((ticker, through_utc))
        rows = [
            record
            for record in self.records
            if record.ticker == ticker
            and (
                self.ignore_cutoff
                or record.transaction_at_utc is None
                or record.transaction_at_utc <= through_utc
            )
        ]
        rows.sort(
            key=lambda record: (
                record.transaction_at_utc or datetime.min.replace(tzinfo=timezone.utc),
                record.stock_transaction_id,
            )
        )
        if self.reverse_order:
            rows.reverse()
        return rows

    def db_ticker_summary_list(self) -> list[TickerSummaryRecord]:
        """Group rows by ticker, ascending."""
        self._raise_failure()
        self.summary_calls += 1
        counts: dict[str, int] = {}
        for record in self.records:
            counts[record.ticker] = counts.get(record.ticker, 0) + 1
        return [TickerSummaryRecord(ticker=ticker, transaction_count=counts[ticker]) for ticker in sorted(counts)]

    def add(self, ticker: str, kind: str, quantity: int, price: str, transaction_at_utc: datetime) -> None:
        """Seed one valid row."""
        self.db_transaction_append(
            TransactionAppendRequest(
                ticker=ticker,
                kind=kind,
                quantity=quantity,
                price=Decimal(price),
                transaction_at_utc=transaction_at_utc,
            )
        )

    def _raise_failure(self) -> None:
        if self.failure is not None:
            raise self.failure


@pytest.fixture
def store() -> TransactionStoreStub:
    """Return an empty in-memory store."""

    return TransactionStoreStub()


@pytest.fixture
def failing_store() -> TransactionStoreStub:
    """Return a store whose every operation fails."""

    stub = TransactionStoreStub()
    stub.failure = TransactionStoreError("transaction store read failed", operation="stub")
    return stub
