"""
Base generator class with shared utilities.

This module provides the BaseGenerator class that contains common utilities
used by the declaration generators: indentation, ordering and doc blocks.
"""

from typing import List, Optional, Sequence, TypeVar

from .context import CodeGenerationContext


T = TypeVar('T')


class BaseGenerator:
    """
    Base class for all code generators.

    Provides shared utilities for:
    - Indentation management
    - Name ordering
    - Documentation comments
    """

    def __init__(self, ctx: CodeGenerationContext):
        """
        Initialize the base generator.

        Args:
            ctx: The code generation context containing options and state
        """
        self._ctx = ctx

    # =========================================================================
    # INDENTATION
    # =========================================================================

    def indent(self) -> str:
        """Return the current indentation string."""
        return self._ctx.indent()

    @property
    def indent_level(self) -> int:
        """Get the current indentation level."""
        return self._ctx.indent_level

    @indent_level.setter
    def indent_level(self, value: int):
        """Set the current indentation level."""
        self._ctx.indent_level = value

    # =========================================================================
    # ORDERING
    # =========================================================================

    def ordered(self, items: Sequence[T]) -> List[T]:
        """Return items sorted by name when alphabetical sorting is on, else as given.

        The sort is stable and compares names by codepoint.
        """
        if self._ctx.options.sort_alphabetically:
            return sorted(items, key=lambda item: item.name)
        return list(items)

    # =========================================================================
    # DOCUMENTATION
    # =========================================================================

    def doc_block(self, doc: Optional[str]) -> List[str]:
        """Render a /** ... */ block at the current indentation.

        Each line of a multi-line doc gets its own ' * ' line (a leading '*'
        left over from a /** */ doc comment is dropped), and '*/' in the text
        is escaped so the comment cannot close early.
        """
        if not doc:
            return []
        indent = self.indent()
        lines = [f'{indent}/**']
        for i, text in enumerate(doc.replace('*/', '*\\/').splitlines()):
            text = text.strip()
            if i > 0 and text.startswith('*'):
                text = text[1:].strip()
            lines.append(f'{indent} * {text}' if text else f'{indent} *')
        lines.append(f'{indent} */')
        return lines
