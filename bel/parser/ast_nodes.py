"""
AST node definitions for Rust parsing.

This module contains the dataclasses representing the item-level Abstract
Syntax Tree produced by the Rust parser: structs, enums and traits in full,
everything else only by kind.
"""

from dataclasses import dataclass, field
from typing import Optional, List


# =============================================================================
# BASE NODE
# =============================================================================

@dataclass
class ASTNode:
    """Base class for all AST nodes."""
    pass


# =============================================================================
# ATTRIBUTES
# =============================================================================

@dataclass
class Attribute(ASTNode):
    """Represents an attribute (#[path ...], #![path ...]) or a doc comment.

    Doc comments are desugared the way rustc does it: `/// text` becomes an
    outer attribute with path 'doc' and string value ' text'.
    """
    path: str
    style: str = 'outer'  # 'outer', 'inner'
    value: Optional['Expression'] = None  # For #[path = value]
    tokens: str = ''  # Raw text of the arguments, e.g. '(skip_serializing_if = "x")'
    is_sugared_doc: bool = False
    line: int = 0

    def debug_text(self) -> str:
        """Return a textual dump of the whole attribute."""
        value = f', value: {self.value}' if self.value is not None else ''
        return f'Attribute {{ style: {self.style}, path: {self.path}, tokens: {self.tokens!r}{value} }}'


# =============================================================================
# TYPE NODES
# =============================================================================

@dataclass
class TypeNode(ASTNode):
    """Base class for all type nodes."""
    pass


@dataclass
class GenericArgument(ASTNode):
    """Represents one argument between angle brackets."""
    kind: str  # 'type', 'lifetime', 'const', 'binding', 'constraint'
    type: Optional[TypeNode] = None  # For 'type' and 'binding'
    name: str = ''  # Lifetime name, or the associated item of a binding/constraint
    value: Optional['Expression'] = None  # For 'const'


@dataclass
class PathSegment(ASTNode):
    """Represents a path segment with optional generic arguments."""
    name: str
    arguments: List[GenericArgument] = field(default_factory=list)
    argument_style: str = 'none'  # 'none', 'angle', 'paren'
    inputs: List[TypeNode] = field(default_factory=list)  # Fn(A, B) sugar
    output: Optional[TypeNode] = None  # Fn(A) -> B sugar


@dataclass
class TypePath(TypeNode):
    """Represents a path type (e.g., String, std::vec::Vec<T>, <T as Trait>::Item)."""
    segments: List[PathSegment] = field(default_factory=list)
    leading_colon: bool = False
    qself: Optional[TypeNode] = None

    @property
    def last_segment(self) -> Optional[PathSegment]:
        return self.segments[-1] if self.segments else None


@dataclass
class TypeReference(TypeNode):
    """Represents a reference type (&T, &'a mut T)."""
    element: TypeNode
    lifetime: Optional[str] = None
    mutable: bool = False


@dataclass
class TypePointer(TypeNode):
    """Represents a raw pointer type (*const T, *mut T)."""
    element: TypeNode
    mutable: bool = False


@dataclass
class TypeTuple(TypeNode):
    """Represents a tuple type, including the unit type ()."""
    elements: List[TypeNode] = field(default_factory=list)


@dataclass
class TypeSlice(TypeNode):
    """Represents a slice type ([T])."""
    element: TypeNode


@dataclass
class TypeArray(TypeNode):
    """Represents a fixed-size array type ([T; N])."""
    element: TypeNode
    length: 'Expression'


@dataclass
class TypeParen(TypeNode):
    """Represents a parenthesized type ((T))."""
    element: TypeNode


@dataclass
class TypeTraitObject(TypeNode):
    """Represents a trait object (dyn Trait + Send, or a bare Trait + Send)."""
    bounds: List[str] = field(default_factory=list)
    has_dyn: bool = True


@dataclass
class TypeImplTrait(TypeNode):
    """Represents an impl Trait type."""
    bounds: List[str] = field(default_factory=list)


@dataclass
class TypeBareFn(TypeNode):
    """Represents a function pointer type (fn(A) -> B)."""
    inputs: List[TypeNode] = field(default_factory=list)
    output: Optional[TypeNode] = None


@dataclass
class TypeNever(TypeNode):
    """Represents the never type (!)."""
    pass


@dataclass
class TypeInfer(TypeNode):
    """Represents an inferred type (_)."""
    pass


@dataclass
class TypeMacro(TypeNode):
    """Represents a macro invocation in type position."""
    name: str


# =============================================================================
# EXPRESSION NODES
# =============================================================================

@dataclass
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass
class Literal(Expression):
    """Represents a literal value."""
    value: str  # Cooked value for 'str', raw token text otherwise
    kind: str  # 'str', 'int', 'float', 'char', 'bool', 'byte', 'byte_str'


@dataclass
class PathExpression(Expression):
    """Represents a path expression (e.g., FOO, Self::BAR, ::std::u8::MAX)."""
    segments: List[str] = field(default_factory=list)
    leading_colon: bool = False
    has_generics: bool = False

    def get_ident(self) -> Optional[str]:
        """Return the identifier if this path is a single plain identifier."""
        if len(self.segments) == 1 and not self.leading_colon and not self.has_generics:
            return self.segments[0]
        return None


@dataclass
class UnaryExpression(Expression):
    """Represents a unary operation (e.g., -x, !x, *x, &x)."""
    operator: str
    operand: Expression


@dataclass
class BinaryExpression(Expression):
    """Represents a binary operation (e.g., 1 << 4)."""
    left: Expression
    operator: str
    right: Expression


@dataclass
class CastExpression(Expression):
    """Represents a cast (e.g., FOO as i64)."""
    expression: Expression
    type: TypeNode


@dataclass
class CallExpression(Expression):
    """Represents a function or method call."""
    function: Expression
    arguments: List[Expression] = field(default_factory=list)


@dataclass
class FieldExpression(Expression):
    """Represents a field access or method receiver (e.g., obj.member)."""
    expression: Expression
    member: str


@dataclass
class IndexExpression(Expression):
    """Represents index access (e.g., arr[i])."""
    base: Expression
    index: Expression


@dataclass
class ParenExpression(Expression):
    """Represents a parenthesized expression."""
    expression: Expression


@dataclass
class TupleExpression(Expression):
    """Represents a tuple expression (e.g., (a, b))."""
    elements: List[Expression] = field(default_factory=list)


@dataclass
class ArrayExpression(Expression):
    """Represents an array expression (e.g., [1, 2] or [0; 4])."""
    elements: List[Expression] = field(default_factory=list)


@dataclass
class BlockExpression(Expression):
    """Represents a block expression ({ ... }); the contents are not kept."""
    pass


@dataclass
class MacroExpression(Expression):
    """Represents a macro invocation in expression position."""
    name: str


@dataclass
class TryExpression(Expression):
    """Represents the ? operator."""
    expression: Expression


# =============================================================================
# ITEM NODES
# =============================================================================

@dataclass
class Item(ASTNode):
    """Base class for all top-level items."""
    pass


@dataclass
class FieldDefinition(ASTNode):
    """Represents a struct or variant field. Tuple fields have no name."""
    name: Optional[str]
    type: TypeNode
    visibility: str = ''
    attributes: List[Attribute] = field(default_factory=list)
    line: int = 0


@dataclass
class StructItem(Item):
    """Represents a struct definition."""
    name: str
    kind: str = 'named'  # 'named', 'tuple', 'unit'
    fields: List[FieldDefinition] = field(default_factory=list)
    generics: List[str] = field(default_factory=list)
    visibility: str = ''
    attributes: List[Attribute] = field(default_factory=list)
    line: int = 0


@dataclass
class VariantDefinition(ASTNode):
    """Represents an enum variant."""
    name: str
    kind: str = 'unit'  # 'unit', 'tuple', 'named'
    fields: List[FieldDefinition] = field(default_factory=list)
    discriminant: Optional[Expression] = None
    attributes: List[Attribute] = field(default_factory=list)
    line: int = 0


@dataclass
class EnumItem(Item):
    """Represents an enum definition."""
    name: str
    variants: List[VariantDefinition] = field(default_factory=list)
    generics: List[str] = field(default_factory=list)
    visibility: str = ''
    attributes: List[Attribute] = field(default_factory=list)
    line: int = 0


@dataclass
class FnArgument(ASTNode):
    """Represents a function input, either a receiver (self) or a typed pattern."""
    is_receiver: bool
    pattern: str = ''  # Source text of the pattern, e.g. 'name', 'mut x', '(a, b)'
    type: Optional[TypeNode] = None  # Explicit type; None for a plain &self / self
    reference: bool = False
    mutable: bool = False
    attributes: List[Attribute] = field(default_factory=list)


@dataclass
class FnSignature(ASTNode):
    """Represents a function signature."""
    name: str
    inputs: List[FnArgument] = field(default_factory=list)
    output: Optional[TypeNode] = None
    generics: List[str] = field(default_factory=list)
    qualifiers: List[str] = field(default_factory=list)  # 'const', 'async', 'unsafe', 'extern'
    is_variadic: bool = False


@dataclass
class TraitItemNode(ASTNode):
    """Base class for members of a trait."""
    pass


@dataclass
class TraitFn(TraitItemNode):
    """Represents a function declared in a trait."""
    signature: FnSignature
    has_default: bool = False
    attributes: List[Attribute] = field(default_factory=list)
    line: int = 0


@dataclass
class TraitOther(TraitItemNode):
    """Represents a non-function trait member (associated type, const, macro)."""
    kind: str  # 'type', 'const', 'macro'
    name: str = ''
    attributes: List[Attribute] = field(default_factory=list)
    line: int = 0


@dataclass
class TraitItem(Item):
    """Represents a trait definition."""
    name: str
    items: List[TraitItemNode] = field(default_factory=list)
    generics: List[str] = field(default_factory=list)
    supertraits: List[str] = field(default_factory=list)
    is_unsafe: bool = False
    is_auto: bool = False
    visibility: str = ''
    attributes: List[Attribute] = field(default_factory=list)
    line: int = 0


@dataclass
class OtherItem(Item):
    """Represents an item that is only consumed structurally (fn, impl, mod, ...)."""
    kind: str
    name: str = ''
    attributes: List[Attribute] = field(default_factory=list)
    line: int = 0


@dataclass
class SourceFile(ASTNode):
    """Root node representing an entire Rust source file."""
    attributes: List[Attribute] = field(default_factory=list)  # Inner attributes
    items: List[Item] = field(default_factory=list)

    @property
    def structs(self) -> List[StructItem]:
        return [item for item in self.items if isinstance(item, StructItem)]

    @property
    def enums(self) -> List[EnumItem]:
        return [item for item in self.items if isinstance(item, EnumItem)]

    @property
    def traits(self) -> List[TraitItem]:
        return [item for item in self.items if isinstance(item, TraitItem)]
