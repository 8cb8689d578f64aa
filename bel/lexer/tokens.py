"""
Token definitions for the Rust lexer.

This module contains the TokenType enum, Token dataclass, and
constant mappings for keywords and punctuation.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Enumeration of all token types recognized by the Rust lexer."""

    # Keywords
    AS = auto()
    ASYNC = auto()
    CONST = auto()
    CRATE = auto()
    DYN = auto()
    ENUM = auto()
    EXTERN = auto()
    FALSE = auto()
    FN = auto()
    FOR = auto()
    IMPL = auto()
    IN = auto()
    LET = auto()
    MOD = auto()
    MUT = auto()
    PUB = auto()
    REF = auto()
    SELF_VALUE = auto()
    SELF_TYPE = auto()
    STATIC = auto()
    STRUCT = auto()
    SUPER = auto()
    TRAIT = auto()
    TRUE = auto()
    TYPE = auto()
    UNSAFE = auto()
    USE = auto()
    WHERE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    CARET = auto()
    BANG = auto()
    AMPERSAND = auto()
    PIPE = auto()
    AMPERSAND_AMPERSAND = auto()
    PIPE_PIPE = auto()
    EQ = auto()
    EQ_EQ = auto()
    BANG_EQ = auto()
    LT = auto()
    GT = auto()
    LT_EQ = auto()
    GT_EQ = auto()
    PLUS_EQ = auto()
    MINUS_EQ = auto()
    STAR_EQ = auto()
    SLASH_EQ = auto()
    PERCENT_EQ = auto()
    CARET_EQ = auto()
    AMPERSAND_EQ = auto()
    PIPE_EQ = auto()
    AT = auto()
    DOT = auto()
    DOT_DOT = auto()
    DOT_DOT_DOT = auto()
    DOT_DOT_EQ = auto()
    COMMA = auto()
    SEMICOLON = auto()
    COLON = auto()
    COLON_COLON = auto()
    ARROW = auto()
    FAT_ARROW = auto()
    POUND = auto()
    DOLLAR = auto()
    QUESTION = auto()
    TILDE = auto()
    UNDERSCORE = auto()

    # Delimiters
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()

    # Literals
    INTEGER = auto()
    FLOAT = auto()
    STRING_LITERAL = auto()
    BYTE_STRING_LITERAL = auto()
    CHAR_LITERAL = auto()
    BYTE_LITERAL = auto()
    LIFETIME = auto()
    IDENTIFIER = auto()

    # Comments
    DOC_COMMENT = auto()
    INNER_DOC_COMMENT = auto()

    # Special
    EOF = auto()


@dataclass
class Token:
    """Represents a single token from the lexer."""
    type: TokenType
    value: str
    line: int
    column: int


# Keyword to TokenType mapping
KEYWORDS = {
    'as': TokenType.AS,
    'async': TokenType.ASYNC,
    'const': TokenType.CONST,
    'crate': TokenType.CRATE,
    'dyn': TokenType.DYN,
    'enum': TokenType.ENUM,
    'extern': TokenType.EXTERN,
    'false': TokenType.FALSE,
    'fn': TokenType.FN,
    'for': TokenType.FOR,
    'impl': TokenType.IMPL,
    'in': TokenType.IN,
    'let': TokenType.LET,
    'mod': TokenType.MOD,
    'mut': TokenType.MUT,
    'pub': TokenType.PUB,
    'ref': TokenType.REF,
    'self': TokenType.SELF_VALUE,
    'Self': TokenType.SELF_TYPE,
    'static': TokenType.STATIC,
    'struct': TokenType.STRUCT,
    'super': TokenType.SUPER,
    'trait': TokenType.TRAIT,
    'true': TokenType.TRUE,
    'type': TokenType.TYPE,
    'unsafe': TokenType.UNSAFE,
    'use': TokenType.USE,
    'where': TokenType.WHERE,
}

# Three-character punctuation
THREE_CHAR_OPS = {
    '...': TokenType.DOT_DOT_DOT,
    '..=': TokenType.DOT_DOT_EQ,
}

# Two-character punctuation. '<<' and '>>' are never single tokens: each '>'
# closes one generic bracket, and the expression parser rebuilds shifts from
# adjacent '<'/'>' tokens.
TWO_CHAR_OPS = {
    '::': TokenType.COLON_COLON,
    '->': TokenType.ARROW,
    '=>': TokenType.FAT_ARROW,
    '..': TokenType.DOT_DOT,
    '&&': TokenType.AMPERSAND_AMPERSAND,
    '||': TokenType.PIPE_PIPE,
    '==': TokenType.EQ_EQ,
    '!=': TokenType.BANG_EQ,
    '<=': TokenType.LT_EQ,
    '>=': TokenType.GT_EQ,
    '+=': TokenType.PLUS_EQ,
    '-=': TokenType.MINUS_EQ,
    '*=': TokenType.STAR_EQ,
    '/=': TokenType.SLASH_EQ,
    '%=': TokenType.PERCENT_EQ,
    '^=': TokenType.CARET_EQ,
    '&=': TokenType.AMPERSAND_EQ,
    '|=': TokenType.PIPE_EQ,
}

# Single-character punctuation and delimiters
SINGLE_CHAR_OPS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '%': TokenType.PERCENT,
    '^': TokenType.CARET,
    '!': TokenType.BANG,
    '&': TokenType.AMPERSAND,
    '|': TokenType.PIPE,
    '=': TokenType.EQ,
    '<': TokenType.LT,
    '>': TokenType.GT,
    '@': TokenType.AT,
    '.': TokenType.DOT,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    ':': TokenType.COLON,
    '#': TokenType.POUND,
    '$': TokenType.DOLLAR,
    '?': TokenType.QUESTION,
    '~': TokenType.TILDE,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
}

# Matching closers for the three delimiter pairs
OPEN_DELIMITERS = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
}

CLOSE_DELIMITERS = frozenset(OPEN_DELIMITERS.values())
