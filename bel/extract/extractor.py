"""
Declaration extraction.

The Extractor walks a parsed Rust source file and produces an ordered
mapping from declaration name to Interface, Enum or Trait declaration.
Structs become interfaces, enums keep their variants and explicit values,
and traits become interfaces of method signatures.
"""

from typing import Dict, List, Optional

from ..config import ExtractOptions
from ..diagnostics import TranspilerDiagnostics
from ..lexer import Lexer
from ..parser import Parser
from ..parser.ast_nodes import (
    Attribute,
    EnumItem,
    FieldDefinition,
    Literal,
    SourceFile,
    StructItem,
    TraitFn,
    TraitItem,
)
from ..type_system import is_option_type, rust_type_to_ts, type_to_typescript
from .declarations import (
    Declaration,
    EnumDeclaration,
    EnumVariant,
    Field,
    InterfaceDeclaration,
    Method,
    Parameter,
    TraitDeclaration,
)
from .enums import resolve_variant_value
from .naming import snake_to_camel


# Heuristic: a serde attribute whose debug text contains this marker makes
# the field optional. This is a substring check, not a serde attribute parser.
SKIP_IF_ABSENT_MARKER = 'skip_serializing_if'

SERDE_ATTRIBUTE = 'serde'
DOC_ATTRIBUTE = 'doc'


def extract_doc(attributes: List[Attribute]) -> Optional[str]:
    """Return the first doc comment, trimmed.

    Heuristic: the first doc attribute with a string value wins. Later doc
    lines are not concatenated.
    """
    for attr in attributes:
        if attr.path == DOC_ATTRIBUTE and isinstance(attr.value, Literal) and attr.value.kind == 'str':
            return attr.value.value.strip()
    return None


def is_optional_field(field_def: FieldDefinition) -> bool:
    """Check whether a field is Option<..> or has a serde skip_serializing_if attribute."""
    if is_option_type(field_def.type):
        return True
    for attr in field_def.attributes:
        if attr.path == SERDE_ATTRIBUTE and SKIP_IF_ABSENT_MARKER in attr.debug_text():
            return True
    return False


class Extractor:
    """
    Extracts TypeScript declarations from Rust source.

    Each call to extract() builds a fresh mapping; nothing is kept between
    calls apart from the diagnostics collector.
    """

    def __init__(
        self,
        options: Optional[ExtractOptions] = None,
        diagnostics: Optional[TranspilerDiagnostics] = None,
    ):
        self.options = options or ExtractOptions()
        self.diagnostics = diagnostics if diagnostics is not None else TranspilerDiagnostics()

    def extract(self, source: str) -> Dict[str, Declaration]:
        """
        Extract declarations from Rust source text.

        Raises:
            SourceSyntaxError: if the source is not a valid Rust file
            EnumValueRangeError: if a discriminant does not fit in an i64
        """
        tokens = Lexer(source).tokenize()
        return self.extract_file(Parser(tokens).parse())

    def extract_file(self, source_file: SourceFile) -> Dict[str, Declaration]:
        """Extract declarations from a parsed source file."""
        for flag in self.options.reserved_flags_set():
            self.diagnostics.info_reserved_option(flag)

        result: Dict[str, Declaration] = {}
        for item in source_file.items:
            if isinstance(item, StructItem):
                declaration = self.extract_struct(item)
            elif isinstance(item, EnumItem):
                declaration = self.extract_enum(item)
            elif isinstance(item, TraitItem):
                declaration = self.extract_trait(item)
            else:
                self.diagnostics.info_item_skipped(item.kind, item.line)
                continue

            # Last write wins, and the replacement moves to the later position
            result.pop(declaration.name, None)
            result[declaration.name] = declaration
        return result

    # =========================================================================
    # STRUCTS
    # =========================================================================

    def extract_struct(self, item: StructItem) -> InterfaceDeclaration:
        """Convert a struct to an interface with camelCase fields."""
        fields = []
        for index, field_def in enumerate(item.fields):
            if field_def.name is None:
                self.diagnostics.warn_unnamed_field_skipped(index, item.name, field_def.line)
                continue
            ts_type = rust_type_to_ts(field_def.type, self.diagnostics, item.name, field_def.line)
            fields.append(Field(
                name=snake_to_camel(field_def.name),
                ts_type=type_to_typescript(ts_type),
                optional=is_optional_field(field_def),
                doc=extract_doc(field_def.attributes),
            ))

        return InterfaceDeclaration(
            name=item.name,
            fields=fields,
            doc=extract_doc(item.attributes),
        )

    # =========================================================================
    # ENUMS
    # =========================================================================

    def extract_enum(self, item: EnumItem) -> EnumDeclaration:
        """Convert an enum, keeping variant order and explicit values."""
        variants = [
            EnumVariant(
                name=variant.name,
                value=resolve_variant_value(variant, self.diagnostics, item.name),
                doc=extract_doc(variant.attributes),
            )
            for variant in item.variants
        ]
        return EnumDeclaration(
            name=item.name,
            variants=variants,
            doc=extract_doc(item.attributes),
        )

    # =========================================================================
    # TRAITS
    # =========================================================================

    def extract_trait(self, item: TraitItem) -> TraitDeclaration:
        """Convert a trait to an interface of method signatures."""
        methods = []
        for member in item.items:
            if not isinstance(member, TraitFn):
                self.diagnostics.warn_trait_item_skipped(member.kind, item.name, member.line)
                continue
            methods.append(self.extract_method(member, item.name))

        return TraitDeclaration(
            name=item.name,
            methods=methods,
            doc=extract_doc(item.attributes),
        )

    def extract_method(self, member: TraitFn, trait_name: str) -> Method:
        """Convert a trait fn; parameters are renamed arg0, arg1, ... skipping the receiver.

        Option<T> is unwrapped to T here without marking anything optional,
        unlike fields. This inconsistency is kept so generated signatures stay
        stable.
        """
        signature = member.signature
        params = []
        for argument in signature.inputs:
            if argument.is_receiver:
                continue
            ts_type = rust_type_to_ts(argument.type, self.diagnostics, trait_name, member.line)
            params.append(Parameter(name=f'arg{len(params)}', ts_type=type_to_typescript(ts_type)))

        if signature.output is None:
            return_type = 'void'
        else:
            return_type = type_to_typescript(
                rust_type_to_ts(signature.output, self.diagnostics, trait_name, member.line)
            )

        return Method(
            name=signature.name,
            params=params,
            return_type=return_type,
            doc=extract_doc(member.attributes),
        )


def extract(
    source: str,
    options: Optional[ExtractOptions] = None,
    diagnostics: Optional[TranspilerDiagnostics] = None,
) -> Dict[str, Declaration]:
    """Extract TypeScript declarations from Rust source code."""
    return Extractor(options, diagnostics).extract(source)
