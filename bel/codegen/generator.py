"""
TypeScript generator.

Writes a declaration mapping as one TypeScript module: the preamble, an
optional namespace wrapper and every declaration followed by a blank line.
"""

import io
from typing import Dict, Optional

from ..config import GeneratorOptions
from ..errors import OutputError
from ..extract.declarations import Declaration
from .context import CodeGenerationContext
from .definition import DefinitionGenerator


class TypeScriptGenerator:
    """
    Renders extracted declarations as TypeScript.

    Output is deterministic: declarations follow the mapping's insertion
    order unless alphabetical sorting is requested.
    """

    def __init__(self, options: Optional[GeneratorOptions] = None):
        self.options = options or GeneratorOptions()

    def generate(self, declarations: Dict[str, Declaration], writer) -> None:
        """
        Write TypeScript for all declarations to writer.

        Args:
            declarations: Mapping from declaration name to declaration
            writer: Any object with a write(str) method

        Raises:
            OutputError: as soon as the writer rejects a write
        """
        ctx = CodeGenerationContext(options=self.options)
        definitions = DefinitionGenerator(ctx)

        if self.options.preamble is not None:
            self._write(writer, f'{self.options.preamble}\n')

        if self.options.namespace is not None:
            self._write(writer, f'export namespace {self.options.namespace} {{\n')

        names = list(declarations)
        if self.options.sort_alphabetically:
            names.sort()

        for name in names:
            self._write(writer, definitions.generate(declarations[name]) + '\n\n')

        if self.options.namespace is not None:
            self._write(writer, ' }\n')

    def generate_string(self, declarations: Dict[str, Declaration]) -> str:
        """Render all declarations and return the TypeScript text."""
        buffer = io.StringIO()
        self.generate(declarations, buffer)
        return buffer.getvalue()

    @staticmethod
    def _write(writer, text: str) -> None:
        try:
            writer.write(text)
        except (OSError, ValueError) as e:
            raise OutputError(f'failed to write output: {e}') from e
