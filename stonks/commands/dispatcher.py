"""Command dispatch onto the ledger write and read paths."""

from __future__ import annotations

import logging
from datetime import timezone, tzinfo
from typing import Callable, Iterable, Sequence

from stonks.domain import CommandParseError, LedgerError
from stonks.ledger import LedgerService

from .formatting import (
    command_format_average_price,
    command_format_collection,
    command_format_error,
    command_format_transaction,
)
from .parser import AvgPriceCommand, BuyCommand, Command, LsCommand, SellCommand, command_parse_tokens
from .tokenizer import TokenizedLine

logger = logging.getLogger(__name__)

COMMAND_STATUS_OK = 0
COMMAND_STATUS_FAILED = 1
COMMAND_STATUS_USAGE = 2
COMMAND_STATUS_INTERRUPTED = 130


class CommandDispatcher:
    """Parse, route and report commands against one ledger service."""

    def __init__(
        self,
        ledger_service: LedgerService,
        local_timezone: tzinfo = timezone.utc,
        write_line: Callable[[str], None] = print,
    ):
        """Initialize dispatcher dependencies.

        Args:
            ledger_service: Ledger service used by every command.
            local_timezone: Zone applied to dates entered without an offset.
            write_line: Sink for user-facing output lines.

        Raises:
            ValueError: Raised when the ledger service is invalid.
        """

        if ledger_service is None:
            raise ValueError("ledger_service must not be None")
        self._ledger_service = ledger_service
        self._local_timezone = local_timezone
        self._write_line = write_line

    def command_execute_tokens(self, tokens: Sequence[str]) -> int:
        """Parse and execute one tokenized command.

        Args:
            tokens: Command name followed by its arguments.

        Returns:
            int: Exit status, 0 for success or a blank line.
        """

        try:
            command = command_parse_tokens(tokens, local_timezone=self._local_timezone)
        except CommandParseError as error:
            self._command_report_error(error)
            return COMMAND_STATUS_USAGE
        if command is None:
            return COMMAND_STATUS_OK
        return self.command_execute(command)

    def command_execute(self, command: Command) -> int:
        """Execute one parsed command and print its results.

        Failures are reported and turned into a status; nothing is retried.

        Args:
            command: Parsed command variant.

        Returns:
            int: 0 on success, 2 for invalid input, 1 for store, integrity or oversell failures.
        """

        try:
            if isinstance(command, LsCommand):
                for ticker, transaction_count in self._ledger_service.ledger_list_collections(command.filter):
                    self._write_line(command_format_collection(ticker, transaction_count))
            elif isinstance(command, (BuyCommand, SellCommand)):
                transaction = self._ledger_service.ledger_record_transaction(
                    kind=command.kind,
                    ticker=command.ticker,
                    quantity=command.quantity,
                    price=command.price,
                    timestamp=command.date,
                )
                self._write_line(command_format_transaction(transaction))
            elif isinstance(command, AvgPriceCommand):
                for row in self._ledger_service.ledger_average_prices_for_filter(command.filter, command.until):
                    self._write_line(
                        command_format_average_price(
                            row.ticker,
                            row.average_price,
                            row.position.skipped_record_count,
                        )
                    )
            else:
                raise CommandParseError(f"unsupported command={command!r}")
        except CommandParseError as error:
            self._command_report_error(error)
            return COMMAND_STATUS_USAGE
        except LedgerError as error:
            self._command_report_error(error)
            return COMMAND_STATUS_FAILED
        return COMMAND_STATUS_OK

    def command_run_source(self, source: Iterable[TokenizedLine]) -> int:
        """Execute every command produced by a source.

        An interrupt while a command runs abandons that command only; an
        interactive source keeps prompting afterwards.

        Args:
            source: Single-shot or interactive command source.

        Returns:
            int: Status of the last executed command.
        """

        last_status = COMMAND_STATUS_OK
        for tokenized_line in source:
            try:
                last_status = self.command_execute_tokens(tokenized_line.tokens)
            except KeyboardInterrupt:
                logger.info("command interrupted tokens=%s", tokenized_line.tokens)
                self._write_line("Interrupted")
                last_status = COMMAND_STATUS_INTERRUPTED
        return last_status

    def _command_report_error(self, error: LedgerError) -> None:
        logger.info("command failed: %s: %s", type(error).__name__, error)
        for line in command_format_error(error):
            self._write_line(line)


__all__ = [
    "COMMAND_STATUS_FAILED",
    "COMMAND_STATUS_INTERRUPTED",
    "COMMAND_STATUS_OK",
    "COMMAND_STATUS_USAGE",
    "CommandDispatcher",
]
