"""Domain models used across application layer boundaries."""

from .dates import (
    dates_ensure_utc,
    dates_parse_cutoff,
    dates_parse_trade_timestamp,
    dates_resolve_timezone,
    dates_utc_now,
)
from .errors import (
    CommandParseError,
    LedgerError,
    OversellError,
    StoreConnectionError,
    TransactionIntegrityError,
    TransactionStoreError,
)
from .models import (
    PRICE_MAX_FRACTION_DIGITS,
    PRICE_MAX_INTEGER_DIGITS,
    HealthStatus,
    Position,
    Transaction,
    TransactionKind,
    domain_validate_price_scale,
)

__all__ = [
    "PRICE_MAX_FRACTION_DIGITS",
    "PRICE_MAX_INTEGER_DIGITS",
    "CommandParseError",
    "HealthStatus",
    "LedgerError",
    "OversellError",
    "Position",
    "StoreConnectionError",
    "Transaction",
    "TransactionIntegrityError",
    "TransactionKind",
    "TransactionStoreError",
    "dates_ensure_utc",
    "dates_parse_cutoff",
    "dates_parse_trade_timestamp",
    "dates_resolve_timezone",
    "dates_utc_now",
    "domain_validate_price_scale",
]
