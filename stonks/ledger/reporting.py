"""Ledger service combining ticker discovery, replay and the write path."""
# pylint: disable=too-few-public-methods

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Iterator

from stonks.db import TransactionAppendRequest, TransactionStorePort
from stonks.domain import (
    CommandParseError,
    OversellError,
    Position,
    Transaction,
    TransactionKind,
    dates_ensure_utc,
    dates_utc_now,
)

from .accounting import PositionState, accounting_apply_transaction
from .replay import LedgerReplayEngine, replay_parse_stored_transaction

logger = logging.getLogger(__name__)

_LEDGER_END_UTC = datetime.max.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class TickerAveragePrice:
    """Average price report row for one ticker.

    Attributes:
        ticker: Reported ticker.
        average_price: Moving average cost at the cutoff.
        position: Full replayed position backing the row.
    """

    ticker: str
    average_price: Decimal
    position: Position


def reporting_compile_ticker_pattern(pattern: str | None) -> re.Pattern[str]:
    """Compile a ticker filter; absent or empty patterns match every ticker.

    Args:
        pattern: Regular expression searched within ticker names.

    Returns:
        re.Pattern[str]: Compiled filter.

    Raises:
        CommandParseError: Raised when the pattern is not a valid regular expression.
    """

    try:
        return re.compile(pattern or "")
    except re.error as error:
        raise CommandParseError(f"invalid filter pattern: {error}", token=pattern) from error


class LedgerService:
    """Query and record ledger transactions over one transaction store."""

    def __init__(
        self,
        store: TransactionStorePort,
        allow_short_positions: bool = False,
        clock: Callable[[], datetime] = dates_utc_now,
    ):
        """Initialize ledger service dependencies.

        Args:
            store: Transaction store port.
            allow_short_positions: Accept sells that exceed the held quantity.
            clock: Source of the current moment for default dates.

        Raises:
            ValueError: Raised when the store is invalid.
        """

        if store is None:
            raise ValueError("store must not be None")
        self._store = store
        self._allow_short_positions = allow_short_positions
        self._clock = clock
        self._replay_engine = LedgerReplayEngine(store=store, clock=clock)

    def ledger_compute_position(self, ticker: str, until: datetime | None = None) -> Position:
        """Replay one ticker up to an inclusive cutoff.

        Args:
            ticker: Exact ticker.
            until: Inclusive cutoff; defaults to now.

        Returns:
            Position: Replayed position.

        Raises:
            TransactionStoreError: Raised when the store read fails.
        """

        return self._replay_engine.ledger_compute_position(ticker=ticker, until=until)

    def ledger_average_price(self, ticker: str, until: datetime | None = None) -> Decimal:
        """Return the moving average cost of one ticker as of a cutoff."""

        return self.ledger_compute_position(ticker=ticker, until=until).average_price

    def ledger_average_prices_for_filter(
        self,
        ticker_pattern: str | None = None,
        until: datetime | None = None,
    ) -> Iterator[TickerAveragePrice]:
        """Yield average prices for every stored ticker matching a filter.

        Tickers are discovered once through the store's grouping query and
        reported in discovery order. Each ticker is replayed only when the
        consumer asks for its row; all rows share one cutoff.

        Args:
            ticker_pattern: Regular expression searched within ticker names.
            until: Inclusive cutoff; defaults to now.

        Returns:
            Iterator[TickerAveragePrice]: Lazy, single-pass result rows.

        Raises:
            CommandParseError: Raised when the filter is invalid.
            TransactionStoreError: Raised when a store read fails.
        """

        compiled_pattern = reporting_compile_ticker_pattern(ticker_pattern)
        cutoff_utc = dates_ensure_utc(until if until is not None else self._clock())
        return self._ledger_iterate_average_prices(compiled_pattern, cutoff_utc)

    def ledger_list_collections(self, name_pattern: str | None = None) -> list[tuple[str, int]]:
        """List tickers matching a filter with their stored transaction counts.

        Args:
            name_pattern: Regular expression searched within ticker names.

        Returns:
            list[tuple[str, int]]: `(ticker, transaction_count)` pairs.

        Raises:
            CommandParseError: Raised when the filter is invalid.
            TransactionStoreError: Raised when the store read fails.
        """

        compiled_pattern = reporting_compile_ticker_pattern(name_pattern)
        return [
            (summary.ticker, summary.transaction_count)
            for summary in self._store.db_ticker_summary_list()
            if compiled_pattern.search(summary.ticker)
        ]

    def ledger_record_transaction(
        self,
        kind: TransactionKind,
        ticker: str,
        quantity: int,
        price: Decimal,
        timestamp: datetime | None = None,
    ) -> Transaction:
        """Validate and append one buy or sell.

        Sells are checked against the whole ticker ledger, backdated sells
        included, and rejected when they would leave the position short at the
        sell timestamp or any later point, unless short positions are allowed.

        Args:
            kind: Buy or Sell.
            ticker: Ticker to record against.
            quantity: Strictly positive share count.
            price: Exact per-share price.
            timestamp: Trade timestamp; defaults to now.

        Returns:
            Transaction: Persisted transaction including its store sequence.

        Raises:
            ValueError: Raised when the transaction values are invalid.
            OversellError: Raised when a sell exceeds the quantity available from its timestamp on.
            TransactionStoreError: Raised when the store read or insert fails.
        """

        transaction = Transaction(
            ticker=ticker.strip(),
            kind=kind,
            quantity=quantity,
            price=price,
            timestamp=dates_ensure_utc(timestamp if timestamp is not None else self._clock()),
        )

        if transaction.kind is TransactionKind.SELL and not self._allow_short_positions:
            available_quantity = self._ledger_available_quantity(transaction)
            if transaction.quantity > available_quantity:
                raise OversellError(
                    ticker=transaction.ticker,
                    requested_quantity=transaction.quantity,
                    held_quantity=available_quantity,
                )

        stored_record = self._store.db_transaction_append(
            TransactionAppendRequest(
                ticker=transaction.ticker,
                kind=transaction.kind.value,
                quantity=transaction.quantity,
                price=transaction.price,
                transaction_at_utc=transaction.timestamp,
            )
        )
        logger.info(
            "recorded %s ticker=%s quantity=%s sequence=%s",
            transaction.kind.value,
            transaction.ticker,
            transaction.quantity,
            stored_record.stock_transaction_id,
        )
        return replay_parse_stored_transaction(stored_record)

    def _ledger_available_quantity(self, sell: Transaction) -> int:
        """Return how many shares can be sold at the sell's replay position.

        The new sell replays after every stored transaction at or before its
        timestamp. The result is the lowest running quantity from that point
        to the end of the ledger.
        """

        transactions, _ = self._replay_engine.ledger_load_transactions(sell.ticker, _LEDGER_END_UTC)

        state = PositionState()
        available_quantity: int | None = None
        for transaction in transactions:
            if available_quantity is None and transaction.timestamp > sell.timestamp:
                available_quantity = state.quantity
            state = accounting_apply_transaction(state, transaction)
            if available_quantity is not None:
                available_quantity = min(available_quantity, state.quantity)

        if available_quantity is None:
            return state.quantity
        return available_quantity

    def _ledger_iterate_average_prices(
        self,
        compiled_pattern: re.Pattern[str],
        cutoff_utc: datetime,
    ) -> Iterator[TickerAveragePrice]:
        tickers = [
            summary.ticker
            for summary in self._store.db_ticker_summary_list()
            if compiled_pattern.search(summary.ticker)
        ]
        for ticker in tickers:
            position = self.ledger_compute_position(ticker=ticker, until=cutoff_utc)
            yield TickerAveragePrice(ticker=ticker, average_price=position.average_price, position=position)


__all__ = ["LedgerService", "TickerAveragePrice", "reporting_compile_ticker_pattern"]
