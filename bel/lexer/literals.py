"""
Helpers that turn literal token text into Python values.

The lexer keeps literals as raw source text (quotes, prefixes and suffixes
included); these functions apply Rust's escape and integer rules. Malformed
literals raise SourceSyntaxError at the literal's position.
"""

import re
from typing import Optional

from ..errors import SourceSyntaxError


SIMPLE_ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    '\\': '\\',
    '0': '\0',
    "'": "'",
    '"': '"',
}

RADIX_PREFIXES = {'0x': 16, '0o': 8, '0b': 2}

# Leading digits per radix; whatever follows is the type suffix
DIGIT_RUNS = {
    2: re.compile(r'[01]+'),
    8: re.compile(r'[0-7]+'),
    10: re.compile(r'[0-9]+'),
    16: re.compile(r'[0-9a-fA-F]+'),
}

HEX_ESCAPE = re.compile(r'[0-9a-fA-F]{2}')
UNICODE_ESCAPE = re.compile(r'\{([0-9a-fA-F_]*)\}')
MAX_ASCII_ESCAPE = 0x7F
MAX_CODE_POINT = 0x10FFFF
SURROGATES = range(0xD800, 0xE000)


def cook_string_literal(text: str, line: Optional[int] = None, column: Optional[int] = None) -> str:
    """Return the value of a string literal token ("...", r"..." or r#"..."#).

    Args:
        text: The token text, quotes included
        line: Line of the token, for error messages
        column: Column of the token, for error messages

    Raises:
        SourceSyntaxError: on a malformed escape sequence
    """
    if text.startswith('r'):
        body = text[1:]
        hashes = len(body) - len(body.lstrip('#'))
        return body[hashes + 1:len(body) - hashes - 1]
    return _unescape(text[1:-1], line, column)


def _unescape(body: str, line: Optional[int], column: Optional[int]) -> str:
    """Apply Rust escape sequences to a quoted literal body."""
    result = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != '\\':
            result.append(ch)
            i += 1
            continue

        esc = body[i + 1] if i + 1 < len(body) else ''
        if esc in SIMPLE_ESCAPES:
            result.append(SIMPLE_ESCAPES[esc])
            i += 2
        elif esc == 'x':
            match = HEX_ESCAPE.match(body, i + 2)
            if match is None:
                raise SourceSyntaxError('invalid \\x escape: expected two hex digits', line, column)
            code = int(match.group(), 16)
            if code > MAX_ASCII_ESCAPE:
                raise SourceSyntaxError('out of range hex escape: must be at most \\x7F', line, column)
            result.append(chr(code))
            i = match.end()
        elif esc == 'u':
            match = UNICODE_ESCAPE.match(body, i + 2)
            if match is None:
                raise SourceSyntaxError('invalid unicode escape: expected \\u{...}', line, column)
            digits = match.group(1).replace('_', '')
            if not digits or len(digits) > 6:
                raise SourceSyntaxError('invalid unicode escape: expected 1 to 6 hex digits', line, column)
            code = int(digits, 16)
            if code > MAX_CODE_POINT or code in SURROGATES:
                raise SourceSyntaxError(f'invalid unicode character escape: {digits}', line, column)
            result.append(chr(code))
            i = match.end()
        elif esc == '\n':
            # Line continuation: skip the newline and leading whitespace
            i += 2
            while i < len(body) and body[i].isspace():
                i += 1
        else:
            raise SourceSyntaxError(f'unknown character escape: \\{esc}', line, column)
    return ''.join(result)


def parse_int_literal(text: str, line: Optional[int] = None, column: Optional[int] = None) -> int:
    """Return the value of an integer literal token, ignoring any suffix.

    Accepts decimal, hex (0x), octal (0o) and binary (0b) forms with '_'
    separators, e.g. '1_000', '0xFFu8', '0b1010'. Everything after the
    leading run of digits is a suffix and does not change the value, so
    '200abc' is 200.

    Raises:
        SourceSyntaxError: if the literal has no digits
    """
    digits = text.replace('_', '')
    base = RADIX_PREFIXES.get(digits[:2], 10)
    if base != 10:
        digits = digits[2:]
    match = DIGIT_RUNS[base].match(digits)
    if match is None:
        raise SourceSyntaxError(f'invalid integer literal: {text}', line, column)
    return int(match.group(), base)
