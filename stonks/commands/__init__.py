"""Command layer package for tokenizing, parsing and dispatching user commands."""

from .dispatcher import (
	COMMAND_STATUS_FAILED,
	COMMAND_STATUS_INTERRUPTED,
	COMMAND_STATUS_OK,
	COMMAND_STATUS_USAGE,
	CommandDispatcher,
)
from .parser import (
	COMMAND_USAGE,
	AvgPriceCommand,
	BuyCommand,
	Command,
	LsCommand,
	SellCommand,
	command_parse_price,
	command_parse_quantity,
	command_parse_tokens,
)
from .sources import command_enable_line_history, command_source_arguments, command_source_interactive
from .tokenizer import TokenizedLine, command_tokenize_line

__all__ = [
	"COMMAND_STATUS_FAILED",
	"COMMAND_STATUS_INTERRUPTED",
	"COMMAND_STATUS_OK",
	"COMMAND_STATUS_USAGE",
	"COMMAND_USAGE",
	"AvgPriceCommand",
	"BuyCommand",
	"Command",
	"CommandDispatcher",
	"LsCommand",
	"SellCommand",
	"TokenizedLine",
	"command_enable_line_history",
	"command_parse_price",
	"command_parse_quantity",
	"command_parse_tokens",
	"command_source_arguments",
	"command_source_interactive",
	"command_tokenize_line",
]
