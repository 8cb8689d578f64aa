"""
Code generation context for the TypeScript generator.

Holds the options and indentation state shared by the generator classes.
"""

from dataclasses import dataclass, field

from ..config import GeneratorOptions


@dataclass
class CodeGenerationContext:
    """State needed while rendering one set of declarations."""

    options: GeneratorOptions = field(default_factory=GeneratorOptions)

    # Indentation state
    indent_level: int = 0
    indent_str: str = '    '

    def indent(self) -> str:
        """Return the indentation string for the current level."""
        return self.indent_str * self.indent_level
