"""
Lexer module for the Rust to TypeScript generator.

This module provides tokenization of Rust source code.
"""

from .tokens import (
    TokenType,
    Token,
    KEYWORDS,
    THREE_CHAR_OPS,
    TWO_CHAR_OPS,
    SINGLE_CHAR_OPS,
    OPEN_DELIMITERS,
    CLOSE_DELIMITERS,
)
from .lexer import Lexer
from .literals import cook_string_literal, parse_int_literal

__all__ = [
    'TokenType',
    'Token',
    'KEYWORDS',
    'THREE_CHAR_OPS',
    'TWO_CHAR_OPS',
    'SINGLE_CHAR_OPS',
    'OPEN_DELIMITERS',
    'CLOSE_DELIMITERS',
    'Lexer',
    'cook_string_literal',
    'parse_int_literal',
]
