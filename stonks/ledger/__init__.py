"""Ledger layer package for replay, accounting and reporting boundaries."""

from .accounting import (
	PositionState,
	accounting_apply_transaction,
	accounting_average_price,
	accounting_fold,
)
from .replay import (
	LedgerReplayEngine,
	replay_normalize_ticker,
	replay_order_transactions,
	replay_parse_stored_transaction,
)
from .reporting import LedgerService, TickerAveragePrice, reporting_compile_ticker_pattern

__all__ = [
	"PositionState",
	"accounting_apply_transaction",
	"accounting_average_price",
	"accounting_fold",
	"LedgerReplayEngine",
	"replay_normalize_ticker",
	"replay_order_transactions",
	"replay_parse_stored_transaction",
	"LedgerService",
	"TickerAveragePrice",
	"reporting_compile_ticker_pattern",
]
