"""Explicit command grammar producing a closed set of command variants."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from typing import ClassVar, Sequence, Union

from stonks.domain import (
    CommandParseError,
    TransactionKind,
    dates_parse_cutoff,
    dates_parse_trade_timestamp,
    domain_validate_price_scale,
)


_QUANTITY_PATTERN = re.compile(r"^\+?\d+$")
_PRICE_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

COMMAND_USAGE = {
    "ls": "ls [FILTER]",
    "buy": "buy TICKER QUANTITY PRICE [DATE]",
    "sell": "sell TICKER QUANTITY PRICE [DATE]",
    "avgprice": "avgprice [FILTER] [UNTIL]",
}

_COMMAND_ALIASES = {"avg-price": "avgprice"}


@dataclass(frozen=True)
class LsCommand:
    """List tickers matching a filter with their transaction counts."""

    filter: str | None = None


@dataclass(frozen=True)
class BuyCommand:
    """Append one buy.

    Attributes:
        ticker: Ticker to record against.
        quantity: Strictly positive share count.
        price: Exact per-share price.
        date: Trade timestamp in UTC, None for now.
    """

    kind: ClassVar[TransactionKind] = TransactionKind.BUY

    ticker: str
    quantity: int
    price: Decimal
    date: datetime | None = None


@dataclass(frozen=True)
class SellCommand:
    """Append one sell; fields as for `BuyCommand`."""

    kind: ClassVar[TransactionKind] = TransactionKind.SELL

    ticker: str
    quantity: int
    price: Decimal
    date: datetime | None = None


@dataclass(frozen=True)
class AvgPriceCommand:
    """Report average prices for tickers matching a filter as of a cutoff."""

    filter: str | None = None
    until: datetime | None = None


Command = Union[LsCommand, BuyCommand, SellCommand, AvgPriceCommand]


def command_parse_tokens(tokens: Sequence[str], local_timezone: tzinfo = timezone.utc) -> Command | None:
    """Parse a tokenized command line into one command variant.

    Args:
        tokens: Tokens produced by the tokenizer or the process arguments.
        local_timezone: Zone applied to dates entered without an offset.

    Returns:
        Command | None: Parsed command, or None for a blank line.

    Raises:
        CommandParseError: Raised when the command or any argument is invalid.
    """

    if not tokens:
        return None

    command_name = tokens[0].strip().lower()
    command_name = _COMMAND_ALIASES.get(command_name, command_name)
    arguments = list(tokens[1:])

    if command_name == "ls":
        _command_check_arity(command_name, arguments, minimum=0, maximum=1)
        return LsCommand(filter=_command_optional_text(arguments, 0))

    if command_name in ("buy", "sell"):
        _command_check_arity(command_name, arguments, minimum=3, maximum=4)
        usage = COMMAND_USAGE[command_name]
        ticker = arguments[0].strip()
        if not ticker:
            raise CommandParseError("ticker must not be blank", token=arguments[0], usage=usage)
        quantity = command_parse_quantity(arguments[1], usage=usage)
        price = command_parse_price(arguments[2], usage=usage)
        trade_date = None
        if len(arguments) == 4:
            trade_date = _command_parse_date(arguments[3], local_timezone, usage=usage, cutoff=False)
        command_class = BuyCommand if command_name == "buy" else SellCommand
        return command_class(ticker=ticker, quantity=quantity, price=price, date=trade_date)

    if command_name == "avgprice":
        _command_check_arity(command_name, arguments, minimum=0, maximum=2)
        until = None
        if len(arguments) == 2 and arguments[1].strip():
            until = _command_parse_date(arguments[1], local_timezone, usage=COMMAND_USAGE[command_name], cutoff=True)
        return AvgPriceCommand(filter=_command_optional_text(arguments, 0), until=until)

    raise CommandParseError(
        f"unknown command '{tokens[0]}', expected one of: {', '.join(COMMAND_USAGE)}",
        token=tokens[0],
        usage="\n".join(COMMAND_USAGE.values()),
    )


def command_parse_quantity(token: str, usage: str | None = None) -> int:
    """Parse a strictly positive integer share count.

    Raises:
        CommandParseError: Raised when the token is not a positive integer.
    """

    normalized_token = token.strip()
    if not _QUANTITY_PATTERN.match(normalized_token):
        raise CommandParseError(f"quantity must be a positive integer, got '{token}'", token=token, usage=usage)
    quantity = int(normalized_token)
    if quantity <= 0:
        raise CommandParseError(f"quantity must be a positive integer, got '{token}'", token=token, usage=usage)
    return quantity


def command_parse_price(token: str, usage: str | None = None) -> Decimal:
    """Parse an exact, non-negative decimal price written as plain digits.

    Exponents, underscores and special values such as `NaN` are refused, and
    the price must fit the stored scale without rounding.

    Raises:
        CommandParseError: Raised when the token is not a usable decimal.
    """

    normalized_token = token.strip()
    if not _PRICE_PATTERN.match(normalized_token):
        raise CommandParseError(f"price must be a decimal number, got '{token}'", token=token, usage=usage)
    try:
        price = Decimal(normalized_token)
    except InvalidOperation as error:
        raise CommandParseError(f"price must be a decimal number, got '{token}'", token=token, usage=usage) from error
    if price < 0:
        raise CommandParseError(f"price must not be negative, got '{token}'", token=token, usage=usage)
    try:
        domain_validate_price_scale(price)
    except ValueError as error:
        raise CommandParseError(f"{error}, got '{token}'", token=token, usage=usage) from error
    return price


def _command_parse_date(token: str, local_timezone: tzinfo, usage: str, cutoff: bool) -> datetime:
    try:
        if cutoff:
            return dates_parse_cutoff(token, local_timezone)
        return dates_parse_trade_timestamp(token, local_timezone)
    except ValueError as error:
        raise CommandParseError(str(error), token=token, usage=usage) from error


def _command_check_arity(command_name: str, arguments: list[str], minimum: int, maximum: int) -> None:
    usage = COMMAND_USAGE[command_name]
    if len(arguments) < minimum:
        raise CommandParseError(f"{command_name}: missing arguments", usage=usage)
    if len(arguments) > maximum:
        raise CommandParseError(
            f"{command_name}: unexpected argument '{arguments[maximum]}'",
            token=arguments[maximum],
            usage=usage,
        )


def _command_optional_text(arguments: list[str], index: int) -> str | None:
    if len(arguments) <= index or not arguments[index]:
        return None
    return arguments[index]


__all__ = [
    "AvgPriceCommand",
    "BuyCommand",
    "COMMAND_USAGE",
    "Command",
    "LsCommand",
    "SellCommand",
    "command_parse_price",
    "command_parse_quantity",
    "command_parse_tokens",
]
