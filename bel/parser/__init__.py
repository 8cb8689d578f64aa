"""
Parser module for the Rust to TypeScript generator.

This module provides AST node definitions and the parser implementation.
"""

from .ast_nodes import (
    # Base
    ASTNode,
    # Attributes
    Attribute,
    # Types
    TypeNode,
    GenericArgument,
    PathSegment,
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
    # Expressions
    Expression,
    Literal,
    PathExpression,
    UnaryExpression,
    BinaryExpression,
    CastExpression,
    CallExpression,
    FieldExpression,
    IndexExpression,
    ParenExpression,
    TupleExpression,
    ArrayExpression,
    BlockExpression,
    MacroExpression,
    TryExpression,
    # Items
    Item,
    FieldDefinition,
    StructItem,
    VariantDefinition,
    EnumItem,
    FnArgument,
    FnSignature,
    TraitItemNode,
    TraitFn,
    TraitOther,
    TraitItem,
    OtherItem,
    SourceFile,
)
from .parser import Parser

__all__ = [
    # Base
    'ASTNode',
    # Attributes
    'Attribute',
    # Types
    'TypeNode',
    'GenericArgument',
    'PathSegment',
    'TypePath',
    'TypeReference',
    'TypePointer',
    'TypeTuple',
    'TypeSlice',
    'TypeArray',
    'TypeParen',
    'TypeTraitObject',
    'TypeImplTrait',
    'TypeBareFn',
    'TypeNever',
    'TypeInfer',
    'TypeMacro',
    # Expressions
    'Expression',
    'Literal',
    'PathExpression',
    'UnaryExpression',
    'BinaryExpression',
    'CastExpression',
    'CallExpression',
    'FieldExpression',
    'IndexExpression',
    'ParenExpression',
    'TupleExpression',
    'ArrayExpression',
    'BlockExpression',
    'MacroExpression',
    'TryExpression',
    # Items
    'Item',
    'FieldDefinition',
    'StructItem',
    'VariantDefinition',
    'EnumItem',
    'FnArgument',
    'FnSignature',
    'TraitItemNode',
    'TraitFn',
    'TraitOther',
    'TraitItem',
    'OtherItem',
    'SourceFile',
    # Parser
    'Parser',
]
