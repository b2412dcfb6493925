"""Project-native typed exceptions for ledger failures."""

from __future__ import annotations


class LedgerError(Exception):
    """Base exception for all ledger-level failures."""


class CommandParseError(LedgerError, ValueError):
    """Malformed command or argument.

    Attributes:
        token: Offending input token, when one can be pinpointed.
        usage: Usage line for the command being parsed.
    """

    def __init__(self, message: str, token: str | None = None, usage: str | None = None):
        super().__init__(message)
        self.token = token
        self.usage = usage


class TransactionStoreError(LedgerError, RuntimeError):
    """Transaction store read or write failure.

    Attributes:
        operation: Store operation label that failed.
    """

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class StoreConnectionError(TransactionStoreError, ConnectionError):
    """Transaction store is unreachable."""


class TransactionIntegrityError(LedgerError, ValueError):
    """Stored transaction with a missing field or unrecognized value.

    Attributes:
        record_reference: Store reference of the anomalous record.
        field_name: Field that failed validation.
    """

    def __init__(self, message: str, record_reference: str | None = None, field_name: str | None = None):
        super().__init__(message)
        self.record_reference = record_reference
        self.field_name = field_name


class OversellError(LedgerError, ValueError):
    """Sell quantity would leave the position short at or after the sell timestamp.

    Attributes:
        ticker: Ticker of the rejected sell.
        requested_quantity: Quantity the sell tried to remove.
        held_quantity: Lowest quantity held from the sell timestamp onward.
    """

    def __init__(self, ticker: str, requested_quantity: int, held_quantity: int):
        super().__init__(
            f"cannot sell {requested_quantity} {ticker}: only {held_quantity} available from the sell date on"
        )
        self.ticker = ticker
        self.requested_quantity = requested_quantity
        self.held_quantity = held_quantity
