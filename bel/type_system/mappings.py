"""
Type mappings and conversion utilities for Rust to TypeScript.

This module contains the primitive table and the resolver that reduces a
Rust type syntax tree to an intermediate TypeScript type.
"""

from typing import Optional, TYPE_CHECKING

from ..parser.ast_nodes import (
    TypeNode,
    TypePath,
    TypeReference,
    TypePointer,
    TypeTuple,
    TypeSlice,
    TypeArray,
    TypeParen,
    TypeTraitObject,
    TypeImplTrait,
    TypeBareFn,
    TypeNever,
    TypeInfer,
    TypeMacro,
    PathSegment,
)
from .model import (
    TsType,
    any_type,
    array_of,
    boolean_type,
    number_type,
    reference_to,
    string_type,
)

if TYPE_CHECKING:
    from ..diagnostics import TranspilerDiagnostics


# =============================================================================
# TYPE MAPPING CONSTANTS
# =============================================================================

OPTION_WRAPPER = 'Option'
SEQUENCE_WRAPPER = 'Vec'

# Last path segment -> TypeScript type
RUST_TO_TS_MAP = {
    # Strings
    'String': string_type(),
    'str': string_type(),
    # Integer and floating point types -> number
    'i8': number_type(),
    'i16': number_type(),
    'i32': number_type(),
    'i64': number_type(),
    'i128': number_type(),
    'isize': number_type(),
    'u8': number_type(),
    'u16': number_type(),
    'u32': number_type(),
    'u64': number_type(),
    'u128': number_type(),
    'usize': number_type(),
    'f32': number_type(),
    'f64': number_type(),
    # Boolean
    'bool': boolean_type(),
    # Vec without a single type argument
    SEQUENCE_WRAPPER: reference_to('Array'),
}

# Human-readable names for the type shapes that resolve to 'any'
UNSUPPORTED_SHAPES = {
    TypeReference: 'Reference',
    TypePointer: 'Raw pointer',
    TypeTuple: 'Tuple',
    TypeSlice: 'Slice',
    TypeArray: 'Array',
    TypeParen: 'Parenthesized',
    TypeTraitObject: 'Trait object',
    TypeImplTrait: 'impl Trait',
    TypeBareFn: 'Function pointer',
    TypeNever: 'Never',
    TypeInfer: 'Inferred',
    TypeMacro: 'Macro',
}


# =============================================================================
# TYPE CONVERSION FUNCTIONS
# =============================================================================

def single_type_argument(segment: PathSegment) -> Optional[TypeNode]:
    """Return the type argument of Name<T>, or None for any other argument list."""
    if segment.argument_style != 'angle' or len(segment.arguments) != 1:
        return None
    argument = segment.arguments[0]
    if argument.kind != 'type':
        return None
    return argument.type


def is_option_type(type_node: TypeNode) -> bool:
    """Check whether a type's last path segment is Option."""
    if not isinstance(type_node, TypePath) or type_node.last_segment is None:
        return False
    return type_node.last_segment.name == OPTION_WRAPPER


def rust_type_to_ts(
    type_node: TypeNode,
    diagnostics: Optional['TranspilerDiagnostics'] = None,
    declaration: str = '',
    line: Optional[int] = None,
) -> TsType:
    """
    Convert a Rust type syntax tree to its TypeScript equivalent.

    Option<T> unwraps to T (optionality is tracked by the caller), Vec<T>
    becomes T[], and any other path is looked up by its last segment in
    RUST_TO_TS_MAP; unknown names (including a bare Option) pass through as
    references and their generic arguments are dropped. Every non-path
    shape becomes 'any'.

    Args:
        type_node: The type AST node to convert
        diagnostics: Optional collector for unsupported shapes
        declaration: Name of the declaration being extracted, for diagnostics
        line: Source line, for diagnostics

    Returns:
        The intermediate TypeScript type
    """
    if not isinstance(type_node, TypePath):
        if diagnostics is not None:
            shape = UNSUPPORTED_SHAPES.get(type(type_node), type(type_node).__name__)
            diagnostics.warn_unsupported_type(shape, declaration, line)
        return any_type()

    segment = type_node.last_segment
    if segment is None:
        return any_type()

    inner = single_type_argument(segment)
    if inner is not None:
        if segment.name == OPTION_WRAPPER:
            return rust_type_to_ts(inner, diagnostics, declaration, line)
        if segment.name == SEQUENCE_WRAPPER:
            return array_of(rust_type_to_ts(inner, diagnostics, declaration, line))

    return RUST_TO_TS_MAP.get(segment.name, reference_to(segment.name))
