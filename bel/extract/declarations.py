"""
Extracted declaration types.

These are the values the extractor produces and the generator renders.
Types are stored as rendered TypeScript text.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .enums import EnumValue


@dataclass
class Field:
    """An interface field. The name is already camelCase."""
    name: str
    ts_type: str
    optional: bool = False
    doc: Optional[str] = None


@dataclass
class Parameter:
    """A method parameter with a synthesized positional name (arg0, arg1, ...)."""
    name: str
    ts_type: str


@dataclass
class Method:
    """A trait method rendered as an interface member."""
    name: str
    params: List[Parameter] = field(default_factory=list)
    return_type: str = 'void'
    doc: Optional[str] = None


@dataclass
class EnumVariant:
    """An enum variant; value is None when the ordinal position applies."""
    name: str
    value: Optional[EnumValue] = None
    doc: Optional[str] = None


@dataclass
class InterfaceDeclaration:
    """A struct rendered as a TypeScript interface."""
    name: str
    fields: List[Field] = field(default_factory=list)
    doc: Optional[str] = None


@dataclass
class EnumDeclaration:
    """An enum rendered as a TypeScript enum or string-literal union."""
    name: str
    variants: List[EnumVariant] = field(default_factory=list)
    doc: Optional[str] = None


@dataclass
class TraitDeclaration:
    """A trait rendered as a TypeScript interface of method signatures."""
    name: str
    methods: List[Method] = field(default_factory=list)
    doc: Optional[str] = None


Declaration = Union[InterfaceDeclaration, EnumDeclaration, TraitDeclaration]
