"""
Enum discriminant resolution.

Determines whether an enum variant carries an explicit value (a string
literal, an integer literal or a bare identifier) or falls back to its
ordinal position at render time.
"""

import json
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union, TYPE_CHECKING

from ..errors import EnumValueRangeError
from ..lexer import parse_int_literal
from ..parser.ast_nodes import Literal, PathExpression, VariantDefinition

if TYPE_CHECKING:
    from ..diagnostics import TranspilerDiagnostics


I64_MAX = 2 ** 63 - 1


class EnumValueKind(Enum):
    """Kinds of explicit enum variant values."""
    STRING = auto()
    NUMBER = auto()
    IDENTIFIER = auto()


@dataclass(frozen=True)
class EnumValue:
    """An explicit enum variant value."""
    kind: EnumValueKind
    value: Union[str, int]

    @classmethod
    def string(cls, value: str) -> 'EnumValue':
        return cls(EnumValueKind.STRING, value)

    @classmethod
    def number(cls, value: int) -> 'EnumValue':
        return cls(EnumValueKind.NUMBER, value)

    @classmethod
    def identifier(cls, name: str) -> 'EnumValue':
        return cls(EnumValueKind.IDENTIFIER, name)

    def to_typescript(self) -> str:
        """Render the value: strings quoted, numbers and identifiers bare."""
        if self.kind == EnumValueKind.STRING:
            return json.dumps(self.value, ensure_ascii=False)
        return str(self.value)


def resolve_variant_value(
    variant: VariantDefinition,
    diagnostics: Optional['TranspilerDiagnostics'] = None,
    declaration: str = '',
) -> Optional[EnumValue]:
    """
    Resolve the explicit value of an enum variant.

    Args:
        variant: The variant AST node
        diagnostics: Optional collector for discriminants that are ignored
        declaration: Name of the enum, for diagnostics

    Returns:
        The explicit value, or None when the ordinal position applies

    Raises:
        EnumValueRangeError: if an integer discriminant exceeds the i64 range
    """
    expr = variant.discriminant
    if expr is None:
        return None

    if isinstance(expr, Literal):
        if expr.kind == 'str':
            return EnumValue.string(expr.value)
        if expr.kind == 'int':
            value = parse_int_literal(expr.value)
            if value > I64_MAX:
                raise EnumValueRangeError(
                    f'discriminant {expr.value} of {declaration}::{variant.name} '
                    f'does not fit in a 64-bit signed integer'
                )
            return EnumValue.number(value)
    elif isinstance(expr, PathExpression):
        ident = expr.get_ident()
        if ident is not None:
            return EnumValue.identifier(ident)

    if diagnostics is not None:
        diagnostics.warn_discriminant_ignored(variant.name, declaration, variant.line)
    return None
