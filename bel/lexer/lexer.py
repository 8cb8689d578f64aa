"""
Lexer implementation for Rust source code.

The Lexer tokenizes Rust source code into a stream of tokens that can be
consumed by the parser. Ordinary comments are dropped; doc comments are kept
as tokens because the parser turns them into `doc` attributes.
"""

from typing import List, Optional, Tuple

from ..errors import SourceSyntaxError
from .tokens import (
    Token,
    TokenType,
    KEYWORDS,
    THREE_CHAR_OPS,
    TWO_CHAR_OPS,
    SINGLE_CHAR_OPS,
)


HEX_DIGITS = '0123456789abcdefABCDEF'
FLOAT_SUFFIXES = ('f32', 'f64')


class Lexer:
    """
    Lexer for Rust source code.

    Converts source text into a list of tokens for parsing.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def peek(self, offset: int = 0) -> str:
        """Look ahead in the source without consuming."""
        pos = self.pos + offset
        if pos >= len(self.source):
            return ''
        return self.source[pos]

    def advance(self) -> str:
        """Consume and return the current character."""
        ch = self.peek()
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def error(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> SourceSyntaxError:
        """Build a syntax error at the given (or current) position."""
        return SourceSyntaxError(
            message,
            self.line if line is None else line,
            self.column if column is None else column,
        )

    def skip_whitespace(self) -> None:
        """Skip over whitespace characters."""
        ch = self.peek()
        while ch and ch.isspace():
            self.advance()
            ch = self.peek()

    def skip_shebang(self) -> None:
        """Skip a leading '#!' interpreter line (but not an inner attribute '#![')."""
        if self.source.startswith('#!') and not self.source[2:].lstrip().startswith('['):
            while self.peek() and self.peek() != '\n':
                self.advance()

    # =========================================================================
    # COMMENTS
    # =========================================================================

    def read_line_comment(self) -> Tuple[TokenType, str]:
        """Read a '//' comment. Returns (doc token type or None, text)."""
        self.advance()  # /
        self.advance()  # /
        kind = None
        if self.peek() == '/' and self.peek(1) != '/':
            self.advance()
            kind = TokenType.DOC_COMMENT
        elif self.peek() == '!':
            self.advance()
            kind = TokenType.INNER_DOC_COMMENT
        text = ''
        while self.peek() and self.peek() != '\n':
            text += self.advance()
        return kind, text.rstrip('\r')

    def read_block_comment(self) -> Tuple[TokenType, str]:
        """Read a (possibly nested) '/* */' comment. Returns (doc token type or None, text)."""
        start_line, start_col = self.line, self.column
        self.advance()  # /
        self.advance()  # *
        kind = None
        if self.peek() == '*' and self.peek(1) not in ('*', '/'):
            self.advance()
            kind = TokenType.DOC_COMMENT
        elif self.peek() == '!':
            self.advance()
            kind = TokenType.INNER_DOC_COMMENT

        depth = 1
        text = ''
        while depth > 0:
            if not self.peek():
                raise self.error('unterminated block comment', start_line, start_col)
            if self.peek() == '/' and self.peek(1) == '*':
                depth += 1
                text += self.advance() + self.advance()
            elif self.peek() == '*' and self.peek(1) == '/':
                depth -= 1
                if depth == 0:
                    self.advance()
                    self.advance()
                else:
                    text += self.advance() + self.advance()
            else:
                text += self.advance()
        return kind, text

    # =========================================================================
    # LITERALS
    # =========================================================================

    def read_quoted(self, quote: str, start_line: int, start_col: int) -> str:
        """Read an escaped literal body up to and including the closing quote."""
        result = self.advance()  # opening quote
        while True:
            ch = self.peek()
            if not ch:
                raise self.error('unterminated literal', start_line, start_col)
            if ch == '\\':
                result += self.advance()
                if not self.peek():
                    raise self.error('unterminated literal', start_line, start_col)
                result += self.advance()
                continue
            result += self.advance()
            if ch == quote:
                return result

    def read_raw_string(self, start_line: int, start_col: int) -> str:
        """Read a raw string body ('#'* '"' ... '"' '#'*), the 'r' already consumed."""
        hashes = 0
        result = ''
        while self.peek() == '#':
            result += self.advance()
            hashes += 1
        if self.peek() != '"':
            raise self.error('expected \'"\' in raw string literal', start_line, start_col)
        result += self.advance()
        terminator = '"' + '#' * hashes
        while True:
            if not self.peek():
                raise self.error('unterminated raw string', start_line, start_col)
            if self.source.startswith(terminator, self.pos):
                for _ in terminator:
                    result += self.advance()
                return result
            result += self.advance()

    def read_number(self) -> Tuple[str, TokenType]:
        """Read an integer or float literal, including any type suffix."""
        start_line, start_col = self.line, self.column
        result = ''
        token_type = TokenType.INTEGER

        if self.peek() == '0' and self.peek(1) in ('x', 'o', 'b') and self.peek(1):
            result += self.advance()  # 0
            prefix = self.advance()
            result += prefix
            allowed = {'x': HEX_DIGITS, 'o': '01234567', 'b': '01'}[prefix]
            digits = ''
            while self.peek() and (self.peek() in allowed or self.peek() == '_'):
                ch = self.advance()
                result += ch
                if ch != '_':
                    digits += ch
            if not digits:
                raise self.error('no valid digits found for number', start_line, start_col)
        else:
            while self.peek() and (self.peek().isdigit() or self.peek() == '_'):
                result += self.advance()
            # Fractional part: '1.5' or a trailing '1.' that is not a range or method call
            if self.peek() == '.' and self.peek(1) != '.' and not self._starts_identifier(self.peek(1)):
                token_type = TokenType.FLOAT
                result += self.advance()
                while self.peek() and (self.peek().isdigit() or self.peek() == '_'):
                    result += self.advance()
            # Exponent
            if self.peek() in ('e', 'E') and self.peek() and (
                self.peek(1).isdigit() or (self.peek(1) in ('+', '-') and self.peek(2).isdigit())
                or self.peek(1) == '_'
            ):
                token_type = TokenType.FLOAT
                result += self.advance()
                if self.peek() in ('+', '-'):
                    result += self.advance()
                while self.peek() and (self.peek().isdigit() or self.peek() == '_'):
                    result += self.advance()

        # Type suffix (u8, i64, usize, f32, ...)
        if self._starts_identifier(self.peek()):
            suffix = self.read_identifier()
            if suffix in FLOAT_SUFFIXES and not result.startswith(('0x', '0o', '0b')):
                token_type = TokenType.FLOAT
            result += suffix

        return result, token_type

    # =========================================================================
    # IDENTIFIERS
    # =========================================================================

    @staticmethod
    def _starts_identifier(ch: str) -> bool:
        return bool(ch) and (ch.isalpha() or ch == '_')

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        result = ''
        while self.peek() and (self.peek().isalnum() or self.peek() == '_'):
            result += self.advance()
        return result

    def add_token(self, token_type: TokenType, value: str, line: int, column: int) -> None:
        """Add a token to the token list."""
        self.tokens.append(Token(token_type, value, line, column))

    # =========================================================================
    # MAIN LOOP
    # =========================================================================

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source and return a list of tokens.

        Returns:
            List of Token objects, ending with an EOF token.

        Raises:
            SourceSyntaxError: on characters or literals that are not valid Rust.
        """
        self.skip_shebang()

        while self.pos < len(self.source):
            self.skip_whitespace()

            if self.pos >= len(self.source):
                break

            start_line = self.line
            start_col = self.column
            ch = self.peek()

            # Comments (doc comments become tokens)
            if ch == '/' and self.peek(1) == '/':
                kind, text = self.read_line_comment()
                if kind:
                    self.add_token(kind, text, start_line, start_col)
                continue
            if ch == '/' and self.peek(1) == '*':
                kind, text = self.read_block_comment()
                if kind:
                    self.add_token(kind, text, start_line, start_col)
                continue

            # Byte, byte-string and raw literals: b'x', b"..", br"..", r"..", r#".."#
            if ch == 'b' and self.peek(1) == "'":
                self.advance()
                value = 'b' + self.read_quoted("'", start_line, start_col)
                self.add_token(TokenType.BYTE_LITERAL, value, start_line, start_col)
                continue
            if ch == 'b' and self.peek(1) == '"':
                self.advance()
                value = 'b' + self.read_quoted('"', start_line, start_col)
                self.add_token(TokenType.BYTE_STRING_LITERAL, value, start_line, start_col)
                continue
            if ch == 'b' and self.peek(1) == 'r' and self.peek(2) in ('"', '#') and self.peek(2):
                self.advance()
                self.advance()
                value = 'br' + self.read_raw_string(start_line, start_col)
                self.add_token(TokenType.BYTE_STRING_LITERAL, value, start_line, start_col)
                continue
            if ch == 'r' and (self.peek(1) == '"' or (self.peek(1) == '#' and self.peek(2) in ('"', '#'))):
                self.advance()
                value = 'r' + self.read_raw_string(start_line, start_col)
                self.add_token(TokenType.STRING_LITERAL, value, start_line, start_col)
                continue
            # Raw identifier: r#type
            if ch == 'r' and self.peek(1) == '#' and self._starts_identifier(self.peek(2)):
                self.advance()
                self.advance()
                value = self.read_identifier()
                self.add_token(TokenType.IDENTIFIER, value, start_line, start_col)
                continue

            # String literals
            if ch == '"':
                value = self.read_quoted('"', start_line, start_col)
                self.add_token(TokenType.STRING_LITERAL, value, start_line, start_col)
                continue

            # Char literals and lifetimes
            if ch == "'":
                if self.peek(1) == '\\' or (self.peek(1) and self.peek(2) == "'"):
                    value = self.read_quoted("'", start_line, start_col)
                    self.add_token(TokenType.CHAR_LITERAL, value, start_line, start_col)
                    continue
                if self._starts_identifier(self.peek(1)):
                    self.advance()
                    value = "'" + self.read_identifier()
                    self.add_token(TokenType.LIFETIME, value, start_line, start_col)
                    continue
                raise self.error('unterminated character literal', start_line, start_col)

            # Numbers
            if ch.isdigit():
                value, token_type = self.read_number()
                self.add_token(token_type, value, start_line, start_col)
                continue

            # Identifiers and keywords
            if self._starts_identifier(ch):
                value = self.read_identifier()
                if value == '_':
                    token_type = TokenType.UNDERSCORE
                else:
                    token_type = KEYWORDS.get(value, TokenType.IDENTIFIER)
                self.add_token(token_type, value, start_line, start_col)
                continue

            # Multi-character punctuation
            three_char = self.source[self.pos:self.pos + 3]
            if three_char in THREE_CHAR_OPS:
                for _ in range(3):
                    self.advance()
                self.add_token(THREE_CHAR_OPS[three_char], three_char, start_line, start_col)
                continue

            two_char = self.source[self.pos:self.pos + 2]
            if two_char in TWO_CHAR_OPS:
                self.advance()
                self.advance()
                self.add_token(TWO_CHAR_OPS[two_char], two_char, start_line, start_col)
                continue

            # Single-character punctuation and delimiters
            if ch in SINGLE_CHAR_OPS:
                self.advance()
                self.add_token(SINGLE_CHAR_OPS[ch], ch, start_line, start_col)
                continue

            raise self.error(f'unknown start of token: {ch!r}', start_line, start_col)

        self.tokens.append(Token(TokenType.EOF, '', self.line, self.column))
        return self.tokens
