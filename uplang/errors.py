"""Errors raised while reading UP text."""

from __future__ import annotations


class ParseError(Exception):
    """A malformed UP document.

    ``line`` is 1-based for errors found in source text and ``0`` for
    errors raised while building a tree by hand.
    """

    def __init__(self, message: str, line: int, column: int | None = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}")


class UpSyntaxError(ParseError):
    """Malformed token or an element in a place the grammar does not allow."""


class UnterminatedBlockError(ParseError):
    """End of input before the closing ``}`` or ``]`` of a block, list or table."""


class UnterminatedMultilineError(ParseError):
    """End of input before the closing fence of a multiline string."""


class DuplicateKeyError(ParseError):
    def __init__(self, key: str, line: int = 0, column: int | None = None):
        self.key = key
        super().__init__(f"Duplicate key '{key}'", line, column)


class InvalidAnnotationError(ParseError):
    """Type annotation that is not a valid name."""


class NestingTooDeepError(ParseError):
    def __init__(self, max_depth: int, line: int, column: int | None = None):
        self.max_depth = max_depth
        super().__init__(f"Nesting exceeds the maximum depth of {max_depth}", line, column)


__all__ = [
    "ParseError",
    "UpSyntaxError",
    "UnterminatedBlockError",
    "UnterminatedMultilineError",
    "DuplicateKeyError",
    "InvalidAnnotationError",
    "NestingTooDeepError",
]
