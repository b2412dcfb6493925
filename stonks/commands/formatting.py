"""User-facing output lines for command results and failures."""

from __future__ import annotations

from decimal import Decimal

from stonks.domain import (
    CommandParseError,
    LedgerError,
    OversellError,
    Transaction,
    TransactionIntegrityError,
    TransactionStoreError,
)


def command_format_collection(ticker: str, transaction_count: int) -> str:
    return f"{ticker} ({transaction_count} operations)"


def command_format_average_price(ticker: str, average_price: Decimal, skipped_record_count: int = 0) -> str:
    """Render one average-price row, flagging replays that skipped anomalous records."""

    line = f"{ticker}\t{average_price:>9.2f}"
    if skipped_record_count:
        line += f"\t(skipped {skipped_record_count} anomalous records)"
    return line


def command_format_transaction(transaction: Transaction) -> str:
    return (
        f"{transaction.kind.value} {transaction.ticker} {transaction.quantity} @ {transaction.price} "
        f"on {transaction.timestamp.isoformat()}"
    )


def command_format_error(error: LedgerError) -> list[str]:
    """Render a ledger error as output lines.

    Args:
        error: Raised ledger error.

    Returns:
        list[str]: Message line, followed by a usage line for parse errors.
    """

    if isinstance(error, CommandParseError):
        lines = [f"Parse error: {error}"]
        if error.usage:
            lines.extend(f"usage: {usage_line}" for usage_line in error.usage.splitlines())
        return lines
    if isinstance(error, OversellError):
        return [f"Rejected: {error}"]
    if isinstance(error, TransactionIntegrityError):
        return [f"Data error: {error} (record {error.record_reference})"]
    if isinstance(error, TransactionStoreError):
        return [f"Store error: {error}"]
    return [f"Error: {error}"]


__all__ = [
    "command_format_average_price",
    "command_format_collection",
    "command_format_error",
    "command_format_transaction",
]
