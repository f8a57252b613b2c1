"""Recursive-descent parser that builds UP documents from scanner tokens."""

from __future__ import annotations

import textwrap
from contextlib import contextmanager
from typing import Iterator, NotRequired, Optional, TypedDict

from .document import UpDocument
from .errors import (
    DuplicateKeyError,
    NestingTooDeepError,
    ParseError,
    UnterminatedBlockError,
    UnterminatedMultilineError,
    UpSyntaxError,
)
from .lexer import Token, TokenType, UpLexer
from .logger import Logger
from .nodes import UpBlock, UpList, UpMultiline, UpNode, UpScalar, UpTable, UpValue, find_duplicate_key
from .utils import resolve_config

TABLE_ANNOTATION = "table"

_TOKEN_NAMES = {
    TokenType.KEY: "a key",
    TokenType.ANNOTATION: "a type annotation",
    TokenType.SCALAR: "a value",
    TokenType.OPEN_BRACE: "'{'",
    TokenType.CLOSE_BRACE: "'}'",
    TokenType.OPEN_BRACKET: "'['",
    TokenType.CLOSE_BRACKET: "']'",
    TokenType.COMMA: "','",
    TokenType.FENCE_OPEN: "'```'",
    TokenType.TEXT: "multiline text",
    TokenType.FENCE_CLOSE: "closing '```'",
    TokenType.NEWLINE: "end of line",
    TokenType.EOF: "end of input",
}


def describe(token: Token) -> str:
    if token.type in {TokenType.KEY, TokenType.ANNOTATION, TokenType.SCALAR}:
        return f"'{token.value}'"
    return _TOKEN_NAMES[token.type]


class ParserConfig(TypedDict):
    enable_logger: NotRequired[bool]
    max_depth: NotRequired[int]


class ParserConfigRequired(TypedDict):
    enable_logger: bool
    max_depth: int


DEFAULT_CONFIG: ParserConfigRequired = {"enable_logger": False, "max_depth": 64}


class UpParser:
    """Builds an ``UpDocument`` from UP text, stopping at the first error.

    Each value kind has its own production. Blocks, lists and tables recurse
    once per nesting level, bounded by ``max_depth``. Each production
    consumes its own closing delimiter.
    """

    def __init__(self, text: str, config: Optional[ParserConfig] = None):
        self.config = resolve_config(config or {}, DEFAULT_CONFIG)
        self.logger = Logger(config={"name": "uplang.parser", "is_enabled": self.config["enable_logger"]}).logger
        self.lexer = UpLexer(text, config={"enable_logger": self.config["enable_logger"]})
        self.depth = 0
        self._tokens: Iterator[Token] = iter(())
        self._current = Token(TokenType.EOF, None, 0, 0)

    @property
    def current_token(self) -> Token:
        return self._current

    def advance(self) -> None:
        if self._current.type != TokenType.EOF:
            self._current = next(self._tokens)

    def expect(self, expected_type: TokenType | list[TokenType]) -> None:
        if not isinstance(expected_type, list):
            expected_type = [expected_type]
        token = self.current_token
        if token.type not in expected_type:
            expected = " or ".join(_TOKEN_NAMES[t] for t in expected_type)
            raise UpSyntaxError(f"Expected {expected}, found {describe(token)}", token.line, token.column)

    def consume(self, expected_type: TokenType | list[TokenType]) -> Token:
        token = self.current_token
        self.expect(expected_type)
        self.advance()
        self.logger.debug(f"Consumed token {token}")
        return token

    def parse_document(self) -> UpDocument:
        self._tokens = self.lexer.tokens()
        self._current = next(self._tokens)
        self.depth = 0
        try:
            document = UpDocument(nodes=self._parse_nodes(opener=None))
        except ParseError as exc:
            self.logger.error(f"Parse failed: {exc}")
            raise
        self.logger.info(f"Parsed document with {len(document.nodes)} nodes")
        return document

    # Productions -------------------------------------------------------------
    def _parse_nodes(self, opener: Optional[Token]) -> tuple[UpNode, ...]:
        nodes: list[UpNode] = []
        lines: list[int] = []
        while True:
            token = self.current_token
            if token.type == TokenType.EOF:
                if opener is not None:
                    raise UnterminatedBlockError("Block is never closed", opener.line, opener.column)
                break
            if opener is not None and token.type == TokenType.CLOSE_BRACE:
                self.advance()
                break
            self.expect(TokenType.KEY)
            nodes.append(self._parse_node())
            lines.append(token.line)
        self._check_unique_keys(nodes, lines)
        return tuple(nodes)

    def _check_unique_keys(self, nodes: list[UpNode], lines: list[int]) -> None:
        seen: set[str] = set()
        for node, line in zip(nodes, lines):
            if node.key in seen:
                raise DuplicateKeyError(node.key, line)
            seen.add(node.key)

    def _parse_node(self) -> UpNode:
        key = self.consume(TokenType.KEY)
        annotation = None
        if self.current_token.type == TokenType.ANNOTATION:
            annotation = self.consume(TokenType.ANNOTATION).value
        value = self._parse_value(key, annotation)
        self.consume(TokenType.NEWLINE)
        return UpNode(key=key.value, annotation=annotation, value=value)

    def _parse_value(self, key: Token, annotation: Optional[str]) -> UpValue:
        token = self.current_token
        if annotation == TABLE_ANNOTATION:
            if token.type != TokenType.OPEN_BRACE:
                raise UpSyntaxError(f"Table '{key.value}' must open with '{{'", token.line, token.column)
            return self._parse_table()
        match token.type:
            case TokenType.SCALAR:
                return UpScalar(text=self.consume(TokenType.SCALAR).value)
            case TokenType.NEWLINE:
                return UpScalar(text="")
            case TokenType.OPEN_BRACE:
                return self._parse_block()
            case TokenType.OPEN_BRACKET:
                return self._parse_list()
            case TokenType.FENCE_OPEN:
                return self._parse_multiline()
            case _:
                raise UpSyntaxError(
                    f"Unexpected {describe(token)} after key '{key.value}'", token.line, token.column
                )

    def _parse_block(self) -> UpBlock:
        opener = self.consume(TokenType.OPEN_BRACE)
        with self._nested(opener):
            if self.current_token.type == TokenType.CLOSE_BRACE:
                self.advance()
                return UpBlock()
            self.consume(TokenType.NEWLINE)
            nodes = self._parse_nodes(opener)
        return UpBlock(nodes=nodes)

    def _parse_list(self) -> UpList:
        opener = self.consume(TokenType.OPEN_BRACKET)
        with self._nested(opener):
            if self.current_token.type == TokenType.NEWLINE:
                self.advance()
                items = self._parse_list_lines(opener)
            else:
                items = self._parse_inline_items()
        return UpList(items=items)

    def _parse_inline_items(self) -> tuple[UpValue, ...]:
        items: list[UpValue] = []
        if self.current_token.type == TokenType.CLOSE_BRACKET:
            self.advance()
            return ()
        while True:
            items.append(self._parse_inline_item())
            if self.consume([TokenType.COMMA, TokenType.CLOSE_BRACKET]).type == TokenType.CLOSE_BRACKET:
                return tuple(items)

    def _parse_inline_item(self) -> UpValue:
        token = self.current_token
        if token.type == TokenType.SCALAR:
            self.advance()
            return UpScalar(text=token.value)
        if token.type == TokenType.OPEN_BRACKET:
            return self._parse_list()
        raise UpSyntaxError(f"Expected a list item, found {describe(token)}", token.line, token.column)

    def _parse_list_lines(self, opener: Token) -> tuple[UpValue, ...]:
        items: list[UpValue] = []
        while True:
            token = self.current_token
            if token.type == TokenType.EOF:
                raise UnterminatedBlockError("List is never closed", opener.line, opener.column)
            if token.type == TokenType.CLOSE_BRACKET:
                self.advance()
                return tuple(items)
            items.append(self._parse_list_item())
            self.consume(TokenType.NEWLINE)

    def _parse_list_item(self) -> UpValue:
        token = self.current_token
        match token.type:
            case TokenType.SCALAR:
                self.advance()
                return UpScalar(text=token.value)
            case TokenType.OPEN_BRACE:
                return self._parse_block()
            case TokenType.OPEN_BRACKET:
                return self._parse_list()
            case TokenType.FENCE_OPEN:
                return self._parse_multiline()
            case _:
                raise UpSyntaxError(f"Expected a list item, found {describe(token)}", token.line, token.column)

    def _parse_multiline(self) -> UpMultiline:
        fence = self.consume(TokenType.FENCE_OPEN)
        self.consume(TokenType.NEWLINE)
        lines: list[str] = []
        while self.current_token.type == TokenType.TEXT:
            lines.append(self.current_token.value)
            self.advance()
        if self.current_token.type == TokenType.EOF:
            raise UnterminatedMultilineError("Multiline string is never closed", fence.line, fence.column)
        self.consume(TokenType.FENCE_CLOSE)
        return UpMultiline(text=textwrap.dedent("\n".join(lines)))

    # Tables ------------------------------------------------------------------
    def _parse_table(self) -> UpTable:
        opener = self.consume(TokenType.OPEN_BRACE)
        columns: Optional[tuple[str, ...]] = None
        rows: Optional[tuple[tuple[str, ...], ...]] = None
        with self._nested(opener):
            if self.current_token.type == TokenType.CLOSE_BRACE:
                raise UpSyntaxError("Table has no columns", opener.line, opener.column)
            self.consume(TokenType.NEWLINE)
            while True:
                token = self.current_token
                if token.type == TokenType.EOF:
                    raise UnterminatedBlockError("Table is never closed", opener.line, opener.column)
                if token.type == TokenType.CLOSE_BRACE:
                    self.advance()
                    break
                section = self.consume(TokenType.KEY)
                if self.current_token.type == TokenType.ANNOTATION:
                    raise UpSyntaxError(
                        f"Table section '{section.value}' cannot have a type annotation",
                        self.current_token.line,
                        self.current_token.column,
                    )
                if section.value == "columns":
                    if columns is not None:
                        raise DuplicateKeyError("columns", section.line, section.column)
                    columns = self._parse_columns()
                elif section.value == "rows":
                    if columns is None:
                        raise UpSyntaxError("Table rows must follow the columns list", section.line, section.column)
                    if rows is not None:
                        raise DuplicateKeyError("rows", section.line, section.column)
                    rows = self._parse_rows(columns)
                else:
                    raise UpSyntaxError(
                        f"Unknown table section '{section.value}', expected 'columns' or 'rows'",
                        section.line,
                        section.column,
                    )
                self.consume(TokenType.NEWLINE)
        if columns is None:
            raise UpSyntaxError("Table has no columns", opener.line, opener.column)
        return UpTable(columns=columns, rows=rows or ())

    def _parse_columns(self) -> tuple[str, ...]:
        token = self.current_token
        self.expect(TokenType.OPEN_BRACKET)
        columns = self._cells(self._parse_list(), token)
        if not columns:
            raise UpSyntaxError("Table columns cannot be empty", token.line, token.column)
        duplicate = find_duplicate_key(columns)
        if duplicate is not None:
            raise DuplicateKeyError(duplicate, token.line, token.column)
        return columns

    def _parse_rows(self, columns: tuple[str, ...]) -> tuple[tuple[str, ...], ...]:
        opener = self.consume(TokenType.OPEN_BRACE)
        rows: list[tuple[str, ...]] = []
        with self._nested(opener):
            if self.current_token.type == TokenType.CLOSE_BRACE:
                self.advance()
                return ()
            self.consume(TokenType.NEWLINE)
            while True:
                token = self.current_token
                if token.type == TokenType.EOF:
                    raise UnterminatedBlockError("Table rows are never closed", opener.line, opener.column)
                if token.type == TokenType.CLOSE_BRACE:
                    self.advance()
                    break
                self.expect(TokenType.OPEN_BRACKET)
                cells = self._cells(self._parse_list(), token)
                if len(cells) != len(columns):
                    raise UpSyntaxError(
                        f"Row has {len(cells)} cells, expected {len(columns)}", token.line, token.column
                    )
                rows.append(cells)
                self.consume(TokenType.NEWLINE)
        return tuple(rows)

    def _cells(self, row: UpList, token: Token) -> tuple[str, ...]:
        cells: list[str] = []
        for item in row.items:
            if not isinstance(item, UpScalar):
                raise UpSyntaxError("Table cells must be plain values", token.line, token.column)
            cells.append(item.text)
        return tuple(cells)

    # Helpers -----------------------------------------------------------------
    @contextmanager
    def _nested(self, opener: Token) -> Iterator[None]:
        self.depth += 1
        if self.depth > self.config["max_depth"]:
            raise NestingTooDeepError(self.config["max_depth"], opener.line, opener.column)
        try:
            yield
        finally:
            self.depth -= 1


def parse(text: str, config: Optional[ParserConfig] = None) -> UpDocument:
    """Parse UP text into a document, raising a ``ParseError`` on malformed input."""
    return UpParser(text, config=config).parse_document()


__all__ = ["UpParser", "ParserConfig", "parse", "TABLE_ANNOTATION"]
