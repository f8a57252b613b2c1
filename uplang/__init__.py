"""Parser for UP (Unified Properties) configuration text."""

from .document import UpDocument
from .errors import (
    DuplicateKeyError,
    InvalidAnnotationError,
    NestingTooDeepError,
    ParseError,
    UnterminatedBlockError,
    UnterminatedMultilineError,
    UpSyntaxError,
)
from .formatter import UpFormatter, format_tree
from .lexer import LexerConfig, Token, TokenType, UpLexer
from .nodes import UpBlock, UpList, UpMultiline, UpNode, UpScalar, UpTable, UpValue
from .parser import ParserConfig, UpParser, parse

__all__ = [
    "parse",
    "UpParser",
    "ParserConfig",
    "UpLexer",
    "LexerConfig",
    "Token",
    "TokenType",
    "UpDocument",
    "UpNode",
    "UpValue",
    "UpScalar",
    "UpMultiline",
    "UpBlock",
    "UpList",
    "UpTable",
    "UpFormatter",
    "format_tree",
    "ParseError",
    "UpSyntaxError",
    "UnterminatedBlockError",
    "UnterminatedMultilineError",
    "DuplicateKeyError",
    "InvalidAnnotationError",
    "NestingTooDeepError",
]
