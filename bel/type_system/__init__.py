"""
Types module for the Rust to TypeScript generator.

This module provides the intermediate type model and type conversion utilities.
"""

from .model import (
    TsPrimitive,
    TsType,
    PrimitiveType,
    ArrayType,
    TsProperty,
    ObjectType,
    UnionType,
    ReferenceType,
    TsParameter,
    FunctionType,
    GenericType,
    type_to_typescript,
    string_type,
    number_type,
    boolean_type,
    any_type,
    void_type,
    array_of,
    reference_to,
    optional,
)
from .mappings import (
    rust_type_to_ts,
    is_option_type,
    single_type_argument,
    RUST_TO_TS_MAP,
    OPTION_WRAPPER,
    SEQUENCE_WRAPPER,
)

__all__ = [
    'TsPrimitive',
    'TsType',
    'PrimitiveType',
    'ArrayType',
    'TsProperty',
    'ObjectType',
    'UnionType',
    'ReferenceType',
    'TsParameter',
    'FunctionType',
    'GenericType',
    'type_to_typescript',
    'string_type',
    'number_type',
    'boolean_type',
    'any_type',
    'void_type',
    'array_of',
    'reference_to',
    'optional',
    'rust_type_to_ts',
    'is_option_type',
    'single_type_argument',
    'RUST_TO_TS_MAP',
    'OPTION_WRAPPER',
    'SEQUENCE_WRAPPER',
]
