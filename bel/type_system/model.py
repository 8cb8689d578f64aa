"""
Intermediate TypeScript type model.

A closed set of type shapes shared by extraction and rendering. Values are
immutable trees: composite shapes own their nested types, and other
declarations are only ever referenced by name.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class TsPrimitive(Enum):
    """TypeScript primitive types."""
    STRING = 'string'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    ANY = 'any'
    VOID = 'void'
    NULL = 'null'
    UNDEFINED = 'undefined'


# =============================================================================
# TYPE SHAPES
# =============================================================================

@dataclass(frozen=True)
class TsType:
    """Base class for all intermediate types."""
    pass


@dataclass(frozen=True)
class PrimitiveType(TsType):
    primitive: TsPrimitive


@dataclass(frozen=True)
class ArrayType(TsType):
    element: TsType


@dataclass(frozen=True)
class TsProperty:
    """A property of an object type."""
    name: str
    ts_type: TsType
    optional: bool = False
    readonly: bool = False


@dataclass(frozen=True)
class ObjectType(TsType):
    properties: Tuple[TsProperty, ...] = ()


@dataclass(frozen=True)
class UnionType(TsType):
    members: Tuple[TsType, ...] = ()


@dataclass(frozen=True)
class ReferenceType(TsType):
    """A named type, e.g. another generated declaration."""
    name: str


@dataclass(frozen=True)
class TsParameter:
    """A parameter of a function type."""
    name: str
    ts_type: TsType
    optional: bool = False


@dataclass(frozen=True)
class FunctionType(TsType):
    params: Tuple[TsParameter, ...]
    return_type: TsType


@dataclass(frozen=True)
class GenericType(TsType):
    base: str
    args: Tuple[TsType, ...] = ()


# =============================================================================
# RENDERING
# =============================================================================

def type_to_typescript(ts_type: TsType) -> str:
    """
    Render an intermediate type as TypeScript type syntax.

    Args:
        ts_type: The type to render

    Returns:
        The TypeScript type text

    Raises:
        TypeError: if ts_type is not one of the model's type shapes
    """
    if isinstance(ts_type, PrimitiveType):
        return ts_type.primitive.value
    if isinstance(ts_type, ArrayType):
        element = type_to_typescript(ts_type.element)
        # T[] binds tighter than '|' and '=>'
        if isinstance(ts_type.element, (UnionType, FunctionType)):
            element = f'({element})'
        return f'{element}[]'
    if isinstance(ts_type, ObjectType):
        props = []
        for prop in ts_type.properties:
            readonly = 'readonly ' if prop.readonly else ''
            optional = '?' if prop.optional else ''
            props.append(f'{readonly}{prop.name}{optional}: {type_to_typescript(prop.ts_type)}')
        return f'{{ {", ".join(props)} }}'
    if isinstance(ts_type, UnionType):
        return ' | '.join(type_to_typescript(member) for member in ts_type.members)
    if isinstance(ts_type, ReferenceType):
        return ts_type.name
    if isinstance(ts_type, FunctionType):
        params = []
        for param in ts_type.params:
            optional = '?' if param.optional else ''
            params.append(f'{param.name}{optional}: {type_to_typescript(param.ts_type)}')
        return f'({", ".join(params)}) => {type_to_typescript(ts_type.return_type)}'
    if isinstance(ts_type, GenericType):
        args = ', '.join(type_to_typescript(arg) for arg in ts_type.args)
        return f'{ts_type.base}<{args}>'
    raise TypeError(f'not an intermediate type: {ts_type!r}')


# =============================================================================
# CONSTRUCTORS
# =============================================================================

def string_type() -> PrimitiveType:
    return PrimitiveType(TsPrimitive.STRING)


def number_type() -> PrimitiveType:
    return PrimitiveType(TsPrimitive.NUMBER)


def boolean_type() -> PrimitiveType:
    return PrimitiveType(TsPrimitive.BOOLEAN)


def any_type() -> PrimitiveType:
    return PrimitiveType(TsPrimitive.ANY)


def void_type() -> PrimitiveType:
    return PrimitiveType(TsPrimitive.VOID)


def array_of(element: TsType) -> ArrayType:
    return ArrayType(element)


def reference_to(name: str) -> ReferenceType:
    return ReferenceType(name)


def optional(ts_type: TsType) -> UnionType:
    """Return ts_type | undefined."""
    return UnionType((ts_type, PrimitiveType(TsPrimitive.UNDEFINED)))
