"""
Error types raised by the Rust to TypeScript generator.

Every failure that aborts an invocation derives from BelError, so callers
can catch a single exception type. Non-fatal anomalies are never raised;
they are collected by TranspilerDiagnostics instead.
"""

from typing import Optional


class BelError(Exception):
    """Base class for all fatal generator errors."""
    pass


class SourceSyntaxError(BelError):
    """The input is not a syntactically valid Rust source file."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f'{message} at line {line}, column {column}'
        super().__init__(message)


class EnumValueRangeError(BelError):
    """An enum discriminant literal does not fit a 64-bit signed integer."""
    pass


class OutputError(BelError):
    """The output sink rejected a write."""
    pass


class ConfigError(BelError):
    """An options file could not be read or contains invalid values."""
    pass
