"""
Line printer used by every emitter.

Each ``p()`` call appends its tokens and exactly one newline. Tokens may
be text, booleans, integers, floats or an ``Optional`` of one of those;
anything else means a resolver bug upstream and aborts generation.
"""

from contextlib import contextmanager
from typing import Iterator

from .generator import GeneratorError


class PrinterError(GeneratorError):
    """An unsupported token reached the printer."""

    pass


def format_token(value) -> str:
    """Render one printer token as source text."""
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float(value)
    if value is None:
        raise PrinterError("unset optional value in printer")
    raise PrinterError(f"unknown type in printer: {type(value).__name__}")


def format_float(value: float) -> str:
    """Shortest literal for a float, integral values without a fraction."""
    if value != value or value in (float("inf"), float("-inf")):
        raise PrinterError(f"non-finite number in printer: {value!r}")
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


class Printer:
    """Accumulates emitted lines into output text."""

    def __init__(self, indent_with: str = "\t"):
        self._lines: list[str] = []
        self._depth = 0
        self._indent_with = indent_with

    def p(self, *tokens) -> None:
        """Append one line made of ``tokens``; no tokens gives a blank line."""
        text = "".join(format_token(token) for token in tokens)
        if text:
            text = self._indent_with * self._depth + text
        self._lines.append(text + "\n")

    @contextmanager
    def indent(self, levels: int = 1) -> Iterator["Printer"]:
        """Indent every line printed inside the block."""
        self._depth += levels
        try:
            yield self
        finally:
            self._depth -= levels

    def getvalue(self) -> str:
        return "".join(self._lines)

    def __len__(self) -> int:
        return len(self._lines)
