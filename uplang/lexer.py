"""Line-oriented scanner for UP text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterator, NotRequired, Optional, TypedDict

from .errors import InvalidAnnotationError, UpSyntaxError
from .logger import Logger
from .utils import resolve_config


class TokenType(Enum):
    KEY = auto()
    ANNOTATION = auto()
    SCALAR = auto()
    OPEN_BRACE = auto()
    CLOSE_BRACE = auto()
    OPEN_BRACKET = auto()
    CLOSE_BRACKET = auto()
    COMMA = auto()
    FENCE_OPEN = auto()
    TEXT = auto()
    FENCE_CLOSE = auto()
    NEWLINE = auto()
    EOF = auto()


@dataclass(slots=True)
class Token:
    type: TokenType
    value: str | None
    line: int
    column: int


FENCE = "```"
KEY_RE = re.compile(r"[^\s!{}\[\],`]+")
ANNOTATION_RE = re.compile(r"\w[\w.\-]*")


class LexerConfig(TypedDict):
    enable_logger: NotRequired[bool]


class LexerConfigRequired(TypedDict):
    enable_logger: bool


DEFAULT_CONFIG: LexerConfigRequired = {"enable_logger": False}


def is_structural(value: str) -> bool:
    """True if ``value`` opens a block, list or multiline string rather than being scalar text."""
    return value in {"{", "{}", "[", FENCE} or (value.startswith("[") and value.endswith("]"))


class UpLexer:
    """Turns UP text into tokens, one source line at a time.

    Lines inside a multiline list are list items rather than ``key value``
    lines, so the scanner keeps a stack of the ``{`` and ``[`` delimiters
    that are still open across lines. Multiline string bodies are passed
    through as ``TEXT`` tokens until the closing fence.
    """

    def __init__(self, text: str, config: Optional[LexerConfig] = None):
        self.text = text
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "uplang.lexer", "is_enabled": self.config["enable_logger"]}).logger
        self._reset()

    def _reset(self) -> None:
        self._pending: list[Token] = []
        self._delimiters: list[str] = []
        self._fence_open = False
        self._line_text = ""
        self._line = 0
        self._pos = 0

    def tokenize(self) -> list[Token]:
        return list(self.tokens())

    def tokens(self) -> Iterator[Token]:
        """Yield tokens lazily so a consumer sees errors in source order."""
        self._reset()
        self.logger.info("Starting tokenization")
        for number, raw in enumerate(self.text.split("\n"), start=1):
            self._line = number
            self._line_text = raw.removesuffix("\r")
            self._pos = 0
            self._scan_line()
            yield from self._pending
            self._pending.clear()
        self._pos = len(self._line_text)
        self._add_token(TokenType.EOF, None)
        yield from self._pending
        self._pending.clear()
        self.logger.info("Tokenization complete")

    # Lines -------------------------------------------------------------------
    def _scan_line(self) -> None:
        if self._fence_open:
            self._scan_fence_line()
            return
        self._skip_whitespace()
        if self._at_end or self._peek() == "#":
            return
        if self._in_list and self._peek() not in "}]":
            self._drop_trailing_comma()
        value = self._rest
        if not value:
            raise UpSyntaxError("Empty list item", self._line, self._column)
        if value[0] in "}]":
            self._scan_closer()
        elif is_structural(value):
            self._scan_value()
        elif self._in_list:
            self._add_token(TokenType.SCALAR, value)
        else:
            self._scan_entry()
        self._add_token(TokenType.NEWLINE, None)

    def _scan_fence_line(self) -> None:
        stripped = self._line_text.strip()
        if stripped == FENCE or (self._in_list and stripped == FENCE + ","):
            self._skip_whitespace()
            self._add_token(TokenType.FENCE_CLOSE, FENCE)
            self._add_token(TokenType.NEWLINE, None)
            self._fence_open = False
        else:
            self._add_token(TokenType.TEXT, self._line_text, column=1)

    def _drop_trailing_comma(self) -> None:
        text = self._line_text.rstrip()
        if text.endswith(","):
            self._line_text = text[:-1]

    def _scan_closer(self) -> None:
        char = self._peek()
        opener = "{" if char == "}" else "["
        closes = bool(self._delimiters) and self._delimiters[-1] == opener
        # an item of a multiline list may be followed by a comma
        into_list = closes and len(self._delimiters) > 1 and self._delimiters[-2] == "["
        if self._rest != char and not (into_list and self._rest == char + ","):
            raise UpSyntaxError(f"Unexpected text after '{char}'", self._line, self._column)
        token_type = TokenType.CLOSE_BRACE if char == "}" else TokenType.CLOSE_BRACKET
        self._add_token(token_type, char)
        if closes:
            self._delimiters.pop()
        self._advance()

    # Entries -----------------------------------------------------------------
    def _scan_entry(self) -> None:
        start = self._pos
        self._consume_while(lambda c: not c.isspace() and c != "!")
        key = self._line_text[start : self._pos]
        if not key:
            raise UpSyntaxError("Missing key before '!'", self._line, start + 1)
        if not KEY_RE.fullmatch(key):
            raise UpSyntaxError(f"Invalid key '{key}'", self._line, start + 1)
        self._add_token(TokenType.KEY, key, column=start + 1)
        if self._peek() == "!":
            self._advance()
            self._scan_annotation()
        self._skip_whitespace()
        self._scan_value()

    def _scan_annotation(self) -> None:
        start = self._pos
        self._consume_while(lambda c: not c.isspace())
        annotation = self._line_text[start : self._pos]
        if not annotation:
            raise UpSyntaxError("Annotation marker '!' must be followed by a type name", self._line, start)
        if not ANNOTATION_RE.fullmatch(annotation):
            raise InvalidAnnotationError(f"Invalid type annotation '{annotation}'", self._line, start + 1)
        self._add_token(TokenType.ANNOTATION, annotation, column=start + 1)

    def _scan_value(self) -> None:
        value = self._rest
        if value == "{":
            self._add_token(TokenType.OPEN_BRACE, "{")
            self._delimiters.append("{")
        elif value == "{}":
            self._add_token(TokenType.OPEN_BRACE, "{")
            self._advance()
            self._add_token(TokenType.CLOSE_BRACE, "}")
        elif value == "[":
            self._add_token(TokenType.OPEN_BRACKET, "[")
            self._delimiters.append("[")
        elif value == FENCE:
            self._add_token(TokenType.FENCE_OPEN, FENCE)
            self._fence_open = True
        elif value.startswith("[") and value.endswith("]"):
            self._scan_inline_list()
        elif value:
            self._add_token(TokenType.SCALAR, value)
        self._pos = len(self._line_text)

    def _scan_inline_list(self) -> None:
        depth = 0
        while not self._at_end:
            char = self._peek()
            if char == "[":
                self._add_token(TokenType.OPEN_BRACKET, char)
                depth += 1
                self._advance()
            elif char == "]":
                self._add_token(TokenType.CLOSE_BRACKET, char)
                depth -= 1
                self._advance()
                if depth == 0:
                    break
            elif char == ",":
                self._add_token(TokenType.COMMA, char)
                self._advance()
            elif char.isspace():
                self._advance()
            else:
                self._scan_inline_item()
        if depth != 0:
            raise UpSyntaxError("Unterminated inline list", self._line, self._column)
        self._skip_whitespace()
        if not self._at_end:
            raise UpSyntaxError(f"Unexpected text after inline list: '{self._rest}'", self._line, self._column)

    def _scan_inline_item(self) -> None:
        start = self._pos
        self._consume_while(lambda c: c not in ",[]")
        self._add_token(TokenType.SCALAR, self._line_text[start : self._pos].rstrip(), column=start + 1)

    # Helpers -----------------------------------------------------------------
    @property
    def _in_list(self) -> bool:
        return bool(self._delimiters) and self._delimiters[-1] == "["

    @property
    def _at_end(self) -> bool:
        return self._pos >= len(self._line_text)

    @property
    def _column(self) -> int:
        return self._pos + 1

    @property
    def _rest(self) -> str:
        return self._line_text[self._pos :].rstrip()

    def _peek(self, ahead: int = 0) -> str:
        index = self._pos + ahead
        if index >= len(self._line_text):
            return "\0"
        return self._line_text[index]

    def _advance(self) -> None:
        self._pos += 1

    def _consume_while(self, condition: Callable[[str], bool]) -> None:
        while not self._at_end and condition(self._peek()):
            self._advance()

    def _skip_whitespace(self) -> None:
        self._consume_while(str.isspace)

    def _add_token(self, token_type: TokenType, value: str | None, column: Optional[int] = None) -> None:
        column = column or self._column
        self.logger.debug(f"Adding token {token_type} with value '{value}' at line {self._line}, column {column}")
        self._pending.append(Token(token_type, value, self._line, column))


__all__ = ["UpLexer", "LexerConfig", "Token", "TokenType", "FENCE", "is_structural"]
