"""Database layer package for all SQL and persistence boundaries."""

from .health import SQLAlchemyDatabaseHealthService
from .interfaces import (
	DatabaseHealthPort,
	StoredTransactionRecord,
	TickerSummaryRecord,
	TransactionAppendRequest,
	TransactionStorePort,
)
from .session import db_create_engine
from .transaction_store import SQLAlchemyTransactionStore

__all__ = [
	"DatabaseHealthPort",
	"StoredTransactionRecord",
	"TickerSummaryRecord",
	"TransactionAppendRequest",
	"TransactionStorePort",
	"SQLAlchemyDatabaseHealthService",
	"SQLAlchemyTransactionStore",
	"db_create_engine",
]
