"""
Diagnostic/warning system for the generator.

Collects and reports Rust constructs that were approximated or skipped
while extracting TypeScript declarations. None of these abort a run; they
explain where the generated contract is looser than the Rust source.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for generator diagnostics."""
    WARNING = 'warning'
    INFO = 'info'


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    severity: DiagnosticSeverity
    code: str
    message: str
    declaration: str = ''
    line: Optional[int] = None
    construct: str = ''  # e.g., 'type', 'trait item', 'discriminant'

    def __str__(self) -> str:
        location = self.declaration
        if self.line:
            location = f'{location}:{self.line}' if location else f'line {self.line}'
        if location:
            return f'[{self.severity.value}] {location}: {self.message} ({self.code})'
        return f'[{self.severity.value}] {self.message} ({self.code})'


class TranspilerDiagnostics:
    """
    Collects generator warnings/diagnostics during extraction.

    Usage:
        diag = TranspilerDiagnostics()
        extractor = Extractor(options, diagnostics=diag)
        # ... after extraction ...
        diag.print_summary()
    """

    def __init__(self, verbose: bool = False):
        self._diagnostics: List[Diagnostic] = []
        self._verbose = verbose

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        """Get only warning-level diagnostics."""
        return [d for d in self._diagnostics if d.severity == DiagnosticSeverity.WARNING]

    @property
    def count(self) -> int:
        """Get total diagnostic count."""
        return len(self._diagnostics)

    def clear(self) -> None:
        """Clear all diagnostics."""
        self._diagnostics.clear()

    # =========================================================================
    # SPECIFIC WARNING METHODS
    # =========================================================================

    def warn_unsupported_type(
        self,
        shape: str,
        declaration: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a type shape has no TypeScript mapping and became 'any'."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W001',
            message=f'{shape} type is not supported; using "any".',
            declaration=declaration,
            line=line,
            construct='type',
        ))

    def warn_trait_item_skipped(
        self,
        kind: str,
        declaration: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a non-function trait member was skipped."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W002',
            message=f'Trait {kind} item was skipped (only functions are emitted).',
            declaration=declaration,
            line=line,
            construct='trait item',
        ))

    def warn_discriminant_ignored(
        self,
        variant: str,
        declaration: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a discriminant expression was not a literal or identifier."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W003',
            message=f'Discriminant of variant "{variant}" is not a literal or identifier; '
                    f'its ordinal position is used instead.',
            declaration=declaration,
            line=line,
            construct='discriminant',
        ))

    def warn_unnamed_field_skipped(
        self,
        index: int,
        declaration: str = '',
        line: Optional[int] = None,
    ) -> None:
        """Warn that a tuple-struct field was skipped."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W004',
            message=f'Unnamed field {index} was skipped.',
            declaration=declaration,
            line=line,
            construct='tuple field',
        ))

    def info_item_skipped(
        self,
        kind: str,
        line: Optional[int] = None,
    ) -> None:
        """Info that a top-level item produces no declaration."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I001',
            message=f'{kind} item produces no TypeScript declaration.',
            line=line,
            construct='item',
        ))

    def info_reserved_option(self, option: str) -> None:
        """Info that an extraction option was set but has no effect."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I002',
            message=f'Extraction option "{option}" is reserved and has no effect.',
            construct='option',
        ))

    # =========================================================================
    # REPORTING
    # =========================================================================

    def print_summary(self, file=None) -> None:
        """Print a summary of all diagnostics to stderr (or specified file)."""
        if file is None:
            file = sys.stderr

        if not self._diagnostics:
            return

        warnings = self.warnings
        infos = [d for d in self._diagnostics if d.severity == DiagnosticSeverity.INFO]

        if warnings:
            print(f'\nGenerator warnings ({len(warnings)}):', file=file)
            # Group by construct type
            by_construct: dict = {}
            for w in warnings:
                by_construct.setdefault(w.construct or 'other', []).append(w)

            for construct, diags in sorted(by_construct.items()):
                print(f'  {construct}: {len(diags)} occurrence(s)', file=file)
                if self._verbose:
                    for d in diags:
                        print(f'    {d}', file=file)

        if infos and self._verbose:
            print(f'\nGenerator info ({len(infos)}):', file=file)
            for d in infos:
                print(f'  {d}', file=file)

    def get_summary(self) -> str:
        """Get a summary string of all diagnostics."""
        if not self.warnings:
            return 'No generator warnings.'

        by_construct: dict = {}
        for w in self.warnings:
            key = w.construct or 'other'
            by_construct[key] = by_construct.get(key, 0) + 1

        parts = [f'{count} {construct}' for construct, count in sorted(by_construct.items())]
        return f'Generator warnings: {", ".join(parts)}'
