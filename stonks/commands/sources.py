"""Command sources for single-shot and interactive execution."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Sequence

from .tokenizer import TokenizedLine, command_tokenize_line

logger = logging.getLogger(__name__)


def command_source_arguments(arguments: Sequence[str]) -> Iterator[TokenizedLine]:
    """Yield exactly one command from already-split process arguments."""

    yield TokenizedLine(tokens=tuple(arguments))


def command_source_interactive(
    read_line: Callable[[str], str] = input,
    prompt: str = ">> ",
    write_line: Callable[[str], None] = print,
) -> Iterator[TokenizedLine]:
    """Yield tokenized lines until end of input or interrupt.

    Args:
        read_line: Blocking line reader called with the prompt.
        prompt: Prompt text.
        write_line: Sink for user-facing notices.

    Returns:
        Iterator[TokenizedLine]: One entry per input line, blank lines included.
    """

    while True:
        try:
            line = read_line(prompt)
        except (EOFError, KeyboardInterrupt):
            write_line("")
            return
        tokenized_line = command_tokenize_line(line)
        logger.debug("tokenized line tokens=%s", tokenized_line.tokens)
        if tokenized_line.unterminated_quote:
            write_line("Unmatched quote")
        yield tokenized_line


def command_enable_line_history() -> bool:
    """Turn on line editing and history for `input()` where the platform provides it.

    Returns:
        bool: True when line editing is active.
    """

    try:
        import readline  # noqa: F401  # pylint: disable=import-outside-toplevel,unused-import
    except ImportError:
        logger.info("readline unavailable, interactive history disabled")
        return False
    return True


__all__ = ["command_enable_line_history", "command_source_arguments", "command_source_interactive"]
