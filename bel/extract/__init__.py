"""
Extraction module for the Rust to TypeScript generator.

This module turns a parsed Rust source file into TypeScript declarations.
"""

from .declarations import (
    Declaration,
    InterfaceDeclaration,
    EnumDeclaration,
    TraitDeclaration,
    Field,
    Method,
    Parameter,
    EnumVariant,
)
from .enums import EnumValue, EnumValueKind, resolve_variant_value
from .naming import snake_to_camel
from .extractor import (
    Extractor,
    extract,
    extract_doc,
    is_optional_field,
    SKIP_IF_ABSENT_MARKER,
)

__all__ = [
    'Declaration',
    'InterfaceDeclaration',
    'EnumDeclaration',
    'TraitDeclaration',
    'Field',
    'Method',
    'Parameter',
    'EnumVariant',
    'EnumValue',
    'EnumValueKind',
    'resolve_variant_value',
    'snake_to_camel',
    'Extractor',
    'extract',
    'extract_doc',
    'is_optional_field',
    'SKIP_IF_ABSENT_MARKER',
]
