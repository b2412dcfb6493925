"""Double-quote aware command line tokenizer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenizedLine:
    """Tokens split from one command line.

    Attributes:
        tokens: Split tokens with quotes removed.
        unterminated_quote: True when the line ended inside a quoted section.
    """

    tokens: tuple[str, ...]
    unterminated_quote: bool = False


def command_tokenize_line(line: str) -> TokenizedLine:
    """Split a line on whitespace, keeping double-quoted sections together.

    Quotes are removed from the output and may appear mid-token
    (`a"b c"` is one token `ab c`). An empty quoted section yields an empty
    token. A line ending inside quotes keeps the partial token and is
    flagged rather than rejected.

    Args:
        line: Raw input line.

    Returns:
        TokenizedLine: Tokens and the unterminated-quote flag.
    """

    tokens: list[str] = []
    current: list[str] = []
    token_started = False
    in_quotes = False

    for character in line:
        if character == '"':
            in_quotes = not in_quotes
            token_started = True
            continue
        if character.isspace() and not in_quotes:
            if token_started:
                tokens.append("".join(current))
                current.clear()
                token_started = False
            continue
        current.append(character)
        token_started = True

    if token_started:
        tokens.append("".join(current))

    return TokenizedLine(tokens=tuple(tokens), unterminated_quote=in_quotes)


__all__ = ["TokenizedLine", "command_tokenize_line"]
