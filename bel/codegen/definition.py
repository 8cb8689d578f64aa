"""
Definition generation for Rust to TypeScript conversion.

This module renders extracted declarations (interfaces, enums and traits)
as TypeScript source text.
"""

from .base import BaseGenerator
from ..extract.declarations import (
    Declaration,
    EnumDeclaration,
    Field,
    InterfaceDeclaration,
    Method,
    TraitDeclaration,
)


class DefinitionGenerator(BaseGenerator):
    """
    Generates TypeScript code from extracted declarations.

    This class handles:
    - Struct interfaces
    - Enums, as numeric enums or as string-literal union types
    - Trait interfaces
    """

    def generate(self, declaration: Declaration) -> str:
        """Render one declaration (without the trailing newline)."""
        if isinstance(declaration, InterfaceDeclaration):
            return self.generate_interface(declaration)
        if isinstance(declaration, EnumDeclaration):
            if self._ctx.options.generate_enums_as_sum_types:
                return self.generate_union(declaration)
            return self.generate_enum(declaration)
        if isinstance(declaration, TraitDeclaration):
            return self.generate_trait(declaration)
        raise TypeError(f'not a declaration: {declaration!r}')

    # =========================================================================
    # INTERFACES
    # =========================================================================

    def generate_interface(self, interface: InterfaceDeclaration) -> str:
        """Generate a TypeScript interface for a struct."""
        lines = self.doc_block(interface.doc)
        lines.append(f'export interface {interface.name} {{')
        self.indent_level += 1
        for field in self.ordered(interface.fields):
            lines.extend(self.generate_field(field))
        self.indent_level -= 1
        lines.append('}')
        return '\n'.join(lines)

    def generate_field(self, field: Field) -> list:
        optional = '?' if field.optional else ''
        lines = self.doc_block(field.doc)
        lines.append(f'{self.indent()}{field.name}{optional}: {field.ts_type}')
        return lines

    # =========================================================================
    # ENUMS
    # =========================================================================

    def generate_enum(self, enum: EnumDeclaration) -> str:
        """Generate a TypeScript enum.

        Variants without an explicit value get their zero-based position.
        """
        lines = self.doc_block(enum.doc)
        lines.append(f'export enum {enum.name} {{')
        self.indent_level += 1
        for i, variant in enumerate(enum.variants):
            value = variant.value.to_typescript() if variant.value is not None else str(i)
            lines.extend(self.doc_block(variant.doc))
            lines.append(f'{self.indent()}{variant.name} = {value},')
        self.indent_level -= 1
        lines.append('}')
        return '\n'.join(lines)

    def generate_union(self, enum: EnumDeclaration) -> str:
        """Generate a string-literal union type.

        Variants without an explicit value render their quoted name; there is
        no ordinal fallback in this mode.
        """
        lines = self.doc_block(enum.doc)
        if not enum.variants:
            lines.append(f'export type {enum.name} = never;')
            return '\n'.join(lines)

        lines.append(f'export type {enum.name} =')
        self.indent_level += 1
        members = []
        for variant in enum.variants:
            if variant.value is not None:
                members.append(variant.value.to_typescript())
            else:
                members.append(f'"{variant.name}"')
        for i, member in enumerate(members):
            terminator = ';' if i == len(members) - 1 else ' |'
            lines.append(f'{self.indent()}{member}{terminator}')
        self.indent_level -= 1
        return '\n'.join(lines)

    # =========================================================================
    # TRAITS
    # =========================================================================

    def generate_trait(self, trait: TraitDeclaration) -> str:
        """Generate a TypeScript interface of method signatures for a trait."""
        lines = self.doc_block(trait.doc)
        lines.append(f'export interface {trait.name} {{')
        self.indent_level += 1
        for method in self.ordered(trait.methods):
            lines.extend(self.generate_method(method))
        self.indent_level -= 1
        lines.append('}')
        return '\n'.join(lines)

    def generate_method(self, method: Method) -> list:
        params = ', '.join(f'{param.name}: {param.ts_type}' for param in method.params)
        lines = self.doc_block(method.doc)
        lines.append(f'{self.indent()}{method.name}({params}): {method.return_type}')
        return lines
