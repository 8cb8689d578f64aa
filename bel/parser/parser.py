"""
Rust parser implementation.

The Parser converts a stream of tokens from the Lexer into an item-level
Abstract Syntax Tree. Structs, enums and traits are parsed in full (fields,
variants, discriminants, signatures, attributes); every other item is
consumed as balanced token trees so that the whole file is still checked for
structural validity.
"""

from typing import List, Optional, Tuple

from ..errors import SourceSyntaxError
from ..lexer import Token, TokenType, OPEN_DELIMITERS, CLOSE_DELIMITERS, cook_string_literal
from .ast_nodes import (
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


# Tokens that may start or continue a path
PATH_SEGMENT_TOKENS = (
    TokenType.IDENTIFIER,
    TokenType.SELF_VALUE,
    TokenType.SELF_TYPE,
    TokenType.SUPER,
    TokenType.CRATE,
)

# Binary operator precedence, lowest first
BINARY_PRECEDENCE = {
    '||': 1,
    '&&': 2,
    '==': 3, '!=': 3, '<': 3, '>': 3, '<=': 3, '>=': 3,
    '|': 4,
    '^': 5,
    '&': 6,
    '<<': 7, '>>': 7,
    '+': 8, '-': 8,
    '*': 9, '/': 9, '%': 9,
}

LITERAL_KINDS = {
    TokenType.INTEGER: 'int',
    TokenType.FLOAT: 'float',
    TokenType.CHAR_LITERAL: 'char',
    TokenType.BYTE_LITERAL: 'byte',
    TokenType.BYTE_STRING_LITERAL: 'byte_str',
}

FN_QUALIFIERS = (TokenType.CONST, TokenType.ASYNC, TokenType.UNSAFE, TokenType.EXTERN)


class Parser:
    """
    Recursive descent parser for Rust source code.

    Parses a stream of tokens into a SourceFile AST.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        """Look ahead in the token stream without consuming."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def current(self) -> Token:
        """Return the current token."""
        return self.peek()

    def advance(self) -> Token:
        """Consume and return the current token."""
        token = self.current()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current().type in types

    def match_keyword(self, word: str) -> bool:
        """Check for a contextual keyword (union, auto, macro_rules, ...)."""
        return self.current().type == TokenType.IDENTIFIER and self.current().value == word

    def error(self, message: str, token: Optional[Token] = None) -> SourceSyntaxError:
        """Build a syntax error located at the given (or current) token."""
        token = token or self.current()
        return SourceSyntaxError(message, token.line, token.column)

    def expect(self, token_type: TokenType, message: str = '') -> Token:
        """Consume the current token if it matches, otherwise raise an error."""
        if self.current().type != token_type:
            detail = f': {message}' if message else ''
            raise self.error(f'expected {token_type.name}, found {self.describe()}{detail}')
        return self.advance()

    def expect_name(self) -> str:
        """Consume an identifier and return its text."""
        return self.expect(TokenType.IDENTIFIER, 'identifier').value

    def describe(self, token: Optional[Token] = None) -> str:
        """Describe a token for error messages."""
        token = token or self.current()
        if token.type == TokenType.EOF:
            return 'end of file'
        return f"'{token.value}'"

    def text_between(self, start: int, end: int) -> str:
        """Return the source text of tokens[start:end], space separated."""
        return ' '.join(token.value for token in self.tokens[start:end])

    def is_adjacent(self, offset: int = 1) -> bool:
        """Check whether the token at offset directly follows the one before it."""
        prev, nxt = self.peek(offset - 1), self.peek(offset)
        return prev.line == nxt.line and nxt.column == prev.column + len(prev.value)

    # =========================================================================
    # TOKEN TREES
    # =========================================================================

    def skip_token_tree(self) -> None:
        """Consume one token, or a whole balanced delimited group."""
        token = self.current()
        if token.type in CLOSE_DELIMITERS:
            raise self.error(f'unexpected closing delimiter {self.describe()}')
        if token.type == TokenType.EOF:
            raise self.error('unexpected end of file')
        if token.type not in OPEN_DELIMITERS:
            self.advance()
            return

        stack = [(OPEN_DELIMITERS[token.type], token)]
        self.advance()
        while stack:
            current = self.current()
            if current.type == TokenType.EOF:
                raise self.error(f"unclosed delimiter '{stack[-1][1].value}'", stack[-1][1])
            if current.type in OPEN_DELIMITERS:
                stack.append((OPEN_DELIMITERS[current.type], current))
            elif current.type in CLOSE_DELIMITERS:
                expected, opener = stack.pop()
                if current.type != expected:
                    raise self.error(
                        f"mismatched closing delimiter {self.describe()} for '{opener.value}' "
                        f"opened at line {opener.line}"
                    )
            self.advance()

    def skip_to_semicolon(self) -> None:
        """Consume token trees up to and including the next top-level ';'."""
        while not self.match(TokenType.SEMICOLON):
            self.skip_token_tree()
        self.advance()

    def skip_to_block_or_semicolon(self) -> None:
        """Consume token trees up to a top-level ';' or through a top-level '{...}' block."""
        while True:
            if self.match(TokenType.SEMICOLON):
                self.advance()
                return
            if self.match(TokenType.LBRACE):
                self.skip_token_tree()
                return
            self.skip_token_tree()

    # =========================================================================
    # ATTRIBUTES
    # =========================================================================

    def parse_outer_attributes(self) -> List[Attribute]:
        """Parse #[...] attributes and outer doc comments."""
        attributes = []
        while True:
            if self.match(TokenType.DOC_COMMENT):
                attributes.append(self.parse_doc_comment('outer'))
            elif self.match(TokenType.POUND) and self.peek(1).type == TokenType.LBRACKET:
                self.advance()
                attributes.append(self.parse_attribute_body('outer'))
            else:
                return attributes

    def parse_inner_attributes(self) -> List[Attribute]:
        """Parse #![...] attributes and inner doc comments."""
        attributes = []
        while True:
            if self.match(TokenType.INNER_DOC_COMMENT):
                attributes.append(self.parse_doc_comment('inner'))
            elif (self.match(TokenType.POUND) and self.peek(1).type == TokenType.BANG
                  and self.peek(2).type == TokenType.LBRACKET):
                self.advance()
                self.advance()
                attributes.append(self.parse_attribute_body('inner'))
            else:
                return attributes

    def parse_doc_comment(self, style: str) -> Attribute:
        """Desugar a doc comment token into a doc attribute."""
        token = self.advance()
        return Attribute(
            path='doc',
            style=style,
            value=Literal(value=token.value, kind='str'),
            tokens=f'= {token.value!r}',
            is_sugared_doc=True,
            line=token.line,
        )

    def parse_attribute_body(self, style: str) -> Attribute:
        """Parse '[path args]' after '#' or '#!'."""
        open_token = self.expect(TokenType.LBRACKET)

        # unsafe(no_mangle) style attributes wrap the real path
        if self.match_keyword('unsafe') or self.match(TokenType.UNSAFE):
            if self.peek(1).type == TokenType.LPAREN:
                self.advance()
                self.advance()
                attribute = self._parse_meta(style, open_token)
                self.expect(TokenType.RPAREN)
                self.expect(TokenType.RBRACKET)
                return attribute

        attribute = self._parse_meta(style, open_token)
        self.expect(TokenType.RBRACKET)
        return attribute

    def _parse_meta(self, style: str, open_token: Token) -> Attribute:
        """Parse an attribute path followed by '= value' or delimited arguments."""
        path = self.parse_simple_path()
        attribute = Attribute(path=path, style=style, line=open_token.line)

        if self.match(TokenType.EQ):
            start = self.pos
            self.advance()
            attribute.value = self.parse_expression()
            attribute.tokens = self.text_between(start, self.pos)
        elif self.match(*OPEN_DELIMITERS):
            start = self.pos
            self.skip_token_tree()
            attribute.tokens = self.text_between(start, self.pos)
        return attribute

    def parse_simple_path(self) -> str:
        """Parse a path without generic arguments (e.g., serde, std::fmt)."""
        parts = []
        if self.match(TokenType.COLON_COLON):
            self.advance()
            parts.append('')
        while True:
            if not self.match(*PATH_SEGMENT_TOKENS):
                raise self.error(f'expected path, found {self.describe()}')
            parts.append(self.advance().value)
            if self.match(TokenType.COLON_COLON) and self.peek(1).type in PATH_SEGMENT_TOKENS:
                self.advance()
            else:
                return '::'.join(parts)

    # =========================================================================
    # TOP-LEVEL PARSING
    # =========================================================================

    def parse(self) -> SourceFile:
        """Parse the entire source file into a SourceFile AST."""
        unit = SourceFile()
        unit.attributes = self.parse_inner_attributes()

        while not self.match(TokenType.EOF):
            unit.items.append(self.parse_item())

        return unit

    def parse_visibility(self) -> str:
        """Parse pub, pub(crate), pub(super), pub(self) or pub(in path)."""
        if not self.match(TokenType.PUB):
            return ''
        self.advance()
        if not self.match(TokenType.LPAREN):
            return 'pub'

        inner = self.peek(1)
        if inner.type in (TokenType.CRATE, TokenType.SUPER, TokenType.SELF_VALUE) \
                and self.peek(2).type == TokenType.RPAREN:
            self.advance()
            self.advance()
            self.advance()
            return f'pub({inner.value})'
        if inner.type == TokenType.IN:
            self.advance()
            self.advance()
            path = self.parse_simple_path()
            self.expect(TokenType.RPAREN)
            return f'pub(in {path})'
        return 'pub'

    def parse_item(self) -> Item:
        """Parse one top-level item."""
        attributes = self.parse_outer_attributes()
        visibility = self.parse_visibility()
        token = self.current()

        if self.match(TokenType.STRUCT):
            item = self.parse_struct()
        elif self.match(TokenType.ENUM):
            item = self.parse_enum()
        elif self._at_trait():
            item = self.parse_trait()
        else:
            item = self.parse_other_item()

        item.attributes = attributes
        if not isinstance(item, OtherItem):
            item.visibility = visibility
        item.line = token.line
        return item

    def _at_trait(self) -> bool:
        """Check for [unsafe] [auto] trait."""
        offset = 0
        if self.peek(offset).type == TokenType.UNSAFE:
            offset += 1
        token = self.peek(offset)
        if token.type == TokenType.IDENTIFIER and token.value == 'auto':
            offset += 1
        return self.peek(offset).type == TokenType.TRAIT

    def _at_macro_invocation(self) -> bool:
        """Check for path! (macro call) at the current position."""
        offset = 0
        if self.peek(offset).type == TokenType.COLON_COLON:
            offset += 1
        while self.peek(offset).type in PATH_SEGMENT_TOKENS:
            offset += 1
            if self.peek(offset).type == TokenType.COLON_COLON:
                offset += 1
            else:
                break
        return offset > 0 and self.peek(offset).type == TokenType.BANG

    def _skip_fn_qualifiers(self) -> List[str]:
        """Consume const/async/unsafe/extern "abi" qualifiers."""
        qualifiers = []
        while self.match(*FN_QUALIFIERS):
            token = self.advance()
            qualifiers.append(token.value)
            if token.type == TokenType.EXTERN and self.match(TokenType.STRING_LITERAL):
                self.advance()
        return qualifiers

    def parse_other_item(self) -> OtherItem:
        """Consume an item that produces no declaration."""
        token = self.current()

        if self.match_keyword('macro_rules') and self.peek(1).type == TokenType.BANG:
            self.advance()
            self.advance()
            name = self.expect_name()
            self.parse_macro_body()
            return OtherItem(kind='macro_rules', name=name)

        if self._at_macro_invocation():
            name = self.parse_simple_path()
            self.expect(TokenType.BANG)
            if self.match(TokenType.IDENTIFIER):
                self.advance()  # macro_rules-like 'name! ident { }' forms
            self.parse_macro_body()
            return OtherItem(kind='macro', name=name)

        if self.match_keyword('union') and self.peek(1).type == TokenType.IDENTIFIER:
            self.advance()
            name = self.advance().value
            self.skip_to_block_or_semicolon()
            return OtherItem(kind='union', name=name)

        if self.match(TokenType.USE):
            self.skip_to_semicolon()
            return OtherItem(kind='use')

        if self.match(TokenType.STATIC):
            self.advance()
            if self.match(TokenType.MUT):
                self.advance()
            name = self.current().value
            self.skip_to_semicolon()
            return OtherItem(kind='static', name=name)

        if self.match(TokenType.TYPE):
            self.advance()
            name = self.expect_name()
            self.skip_to_semicolon()
            return OtherItem(kind='type', name=name)

        if self.match(TokenType.MOD):
            self.advance()
            name = self.expect_name()
            if self.match(TokenType.SEMICOLON):
                self.advance()
            else:
                if not self.match(TokenType.LBRACE):
                    raise self.error(f"expected '{{' or ';' after module name, found {self.describe()}")
                self.skip_token_tree()
            return OtherItem(kind='mod', name=name)

        if self.match(TokenType.CONST) and self.peek(1).type in (TokenType.IDENTIFIER, TokenType.UNDERSCORE):
            self.advance()
            name = self.advance().value
            self.skip_to_semicolon()
            return OtherItem(kind='const', name=name)

        if self.match(TokenType.EXTERN) and self.peek(1).type == TokenType.CRATE:
            self.advance()
            self.advance()
            name = self.current().value
            self.skip_to_semicolon()
            return OtherItem(kind='extern crate', name=name)

        qualifiers = self._skip_fn_qualifiers()
        if self.match(TokenType.FN):
            self.advance()
            name = self.expect_name()
            self.skip_to_block_or_semicolon()
            return OtherItem(kind='fn', name=name)
        if self.match(TokenType.IMPL):
            self.skip_to_block_or_semicolon()
            return OtherItem(kind='impl')
        if qualifiers and qualifiers[-1] == 'extern' and self.match(TokenType.LBRACE):
            self.skip_token_tree()
            return OtherItem(kind='extern block')

        raise self.error(f'expected item, found {self.describe(token)}', token)

    def parse_macro_body(self) -> None:
        """Consume a macro body; (...) and [...] bodies need a trailing ';'."""
        if not self.match(*OPEN_DELIMITERS):
            raise self.error(f'expected macro body, found {self.describe()}')
        braced = self.match(TokenType.LBRACE)
        self.skip_token_tree()
        if not braced:
            self.expect(TokenType.SEMICOLON)

    # =========================================================================
    # GENERICS AND WHERE CLAUSES
    # =========================================================================

    def parse_generics(self) -> List[str]:
        """Parse '<...>' generic parameters and return their names."""
        if not self.match(TokenType.LT):
            return []
        self.advance()
        names = []
        while not self.match(TokenType.GT):
            self.parse_outer_attributes()
            if self.match(TokenType.LIFETIME):
                names.append(self.advance().value)
            elif self.match(TokenType.CONST):
                self.advance()
                names.append(self.expect_name())
            else:
                names.append(self.expect_name())
            self.skip_generic_param_rest()
            if self.match(TokenType.COMMA):
                self.advance()
            elif not self.match(TokenType.GT):
                raise self.error(f"expected ',' or '>' in generic parameters, found {self.describe()}")
        self.expect(TokenType.GT)
        return names

    def skip_generic_param_rest(self) -> None:
        """Skip bounds and defaults of a generic parameter up to ',' or the closing '>'."""
        depth = 0
        while True:
            if self.match(TokenType.EOF):
                raise self.error('unexpected end of file in generic parameters')
            if depth == 0 and self.match(TokenType.COMMA, TokenType.GT):
                return
            if self.match(TokenType.LT):
                depth += 1
            elif self.match(TokenType.GT):
                depth -= 1
            self.skip_token_tree()

    def skip_where_clause(self) -> None:
        """Skip a where clause up to the body '{' or ';'."""
        if not self.match(TokenType.WHERE):
            return
        self.advance()
        while not self.match(TokenType.LBRACE, TokenType.SEMICOLON):
            self.skip_token_tree()

    # =========================================================================
    # STRUCTS AND ENUMS
    # =========================================================================

    def parse_struct(self) -> StructItem:
        """Parse a struct definition (named, tuple or unit)."""
        self.expect(TokenType.STRUCT)
        name = self.expect_name()
        generics = self.parse_generics()
        self.skip_where_clause()

        if self.match(TokenType.LBRACE):
            fields = self.parse_named_fields()
            return StructItem(name=name, kind='named', fields=fields, generics=generics)
        if self.match(TokenType.LPAREN):
            fields = self.parse_tuple_fields()
            self.skip_where_clause()
            self.expect(TokenType.SEMICOLON)
            return StructItem(name=name, kind='tuple', fields=fields, generics=generics)
        if self.match(TokenType.SEMICOLON):
            self.advance()
            return StructItem(name=name, kind='unit', generics=generics)

        raise self.error(f"expected '{{', '(' or ';' after struct name, found {self.describe()}")

    def parse_named_fields(self) -> List[FieldDefinition]:
        """Parse '{ name: Type, ... }'."""
        self.expect(TokenType.LBRACE)
        fields = []
        while not self.match(TokenType.RBRACE):
            attributes = self.parse_outer_attributes()
            visibility = self.parse_visibility()
            token = self.current()
            name = self.expect_name()
            self.expect(TokenType.COLON)
            field_type = self.parse_type()
            fields.append(FieldDefinition(
                name=name,
                type=field_type,
                visibility=visibility,
                attributes=attributes,
                line=token.line,
            ))
            if not self.match(TokenType.COMMA):
                break
            self.advance()
        self.expect(TokenType.RBRACE)
        return fields

    def parse_tuple_fields(self) -> List[FieldDefinition]:
        """Parse '( Type, ... )'."""
        self.expect(TokenType.LPAREN)
        fields = []
        while not self.match(TokenType.RPAREN):
            attributes = self.parse_outer_attributes()
            visibility = self.parse_visibility()
            token = self.current()
            field_type = self.parse_type()
            fields.append(FieldDefinition(
                name=None,
                type=field_type,
                visibility=visibility,
                attributes=attributes,
                line=token.line,
            ))
            if not self.match(TokenType.COMMA):
                break
            self.advance()
        self.expect(TokenType.RPAREN)
        return fields

    def parse_enum(self) -> EnumItem:
        """Parse an enum definition."""
        self.expect(TokenType.ENUM)
        name = self.expect_name()
        generics = self.parse_generics()
        self.skip_where_clause()
        self.expect(TokenType.LBRACE)

        variants = []
        while not self.match(TokenType.RBRACE):
            variants.append(self.parse_variant())
            if not self.match(TokenType.COMMA):
                break
            self.advance()

        self.expect(TokenType.RBRACE)
        return EnumItem(name=name, variants=variants, generics=generics)

    def parse_variant(self) -> VariantDefinition:
        """Parse one enum variant with its optional fields and discriminant."""
        attributes = self.parse_outer_attributes()
        self.parse_visibility()
        token = self.current()
        variant = VariantDefinition(name=self.expect_name(), attributes=attributes, line=token.line)

        if self.match(TokenType.LBRACE):
            variant.kind = 'named'
            variant.fields = self.parse_named_fields()
        elif self.match(TokenType.LPAREN):
            variant.kind = 'tuple'
            variant.fields = self.parse_tuple_fields()

        if self.match(TokenType.EQ):
            self.advance()
            variant.discriminant = self.parse_expression()

        return variant

    # =========================================================================
    # TRAITS
    # =========================================================================

    def parse_trait(self) -> TraitItem:
        """Parse a trait definition."""
        is_unsafe = False
        is_auto = False
        if self.match(TokenType.UNSAFE):
            self.advance()
            is_unsafe = True
        if self.match_keyword('auto'):
            self.advance()
            is_auto = True
        self.expect(TokenType.TRAIT)
        name = self.expect_name()
        generics = self.parse_generics()

        supertraits = []
        if self.match(TokenType.COLON):
            self.advance()
            if not self.match(TokenType.WHERE, TokenType.LBRACE):
                supertraits = self.parse_bounds()
        self.skip_where_clause()

        self.expect(TokenType.LBRACE)
        self.parse_inner_attributes()
        items = []
        while not self.match(TokenType.RBRACE):
            items.append(self.parse_trait_member())
        self.expect(TokenType.RBRACE)

        return TraitItem(
            name=name,
            items=items,
            generics=generics,
            supertraits=supertraits,
            is_unsafe=is_unsafe,
            is_auto=is_auto,
        )

    def parse_trait_member(self) -> TraitItemNode:
        """Parse one member of a trait body."""
        attributes = self.parse_outer_attributes()
        token = self.current()

        if self.match(TokenType.TYPE):
            self.advance()
            name = self.expect_name()
            self.skip_to_semicolon()
            return TraitOther(kind='type', name=name, attributes=attributes, line=token.line)

        if self.match(TokenType.CONST) and self.peek(1).type in (TokenType.IDENTIFIER, TokenType.UNDERSCORE):
            self.advance()
            name = self.advance().value
            self.skip_to_semicolon()
            return TraitOther(kind='const', name=name, attributes=attributes, line=token.line)

        if self._at_macro_invocation():
            name = self.parse_simple_path()
            self.expect(TokenType.BANG)
            self.parse_macro_body()
            return TraitOther(kind='macro', name=name, attributes=attributes, line=token.line)

        if self.match(TokenType.FN, *FN_QUALIFIERS):
            signature = self.parse_fn_signature()
            has_default = False
            if self.match(TokenType.LBRACE):
                self.skip_token_tree()
                has_default = True
            else:
                self.expect(TokenType.SEMICOLON)
            return TraitFn(signature=signature, has_default=has_default, attributes=attributes, line=token.line)

        raise self.error(f'expected trait item, found {self.describe()}')

    # =========================================================================
    # FUNCTION SIGNATURES
    # =========================================================================

    def parse_fn_signature(self) -> FnSignature:
        """Parse '[qualifiers] fn name<generics>(inputs) [-> Type] [where ...]'."""
        qualifiers = self._skip_fn_qualifiers()
        self.expect(TokenType.FN)
        signature = FnSignature(name=self.expect_name(), qualifiers=qualifiers)
        signature.generics = self.parse_generics()

        self.expect(TokenType.LPAREN)
        while not self.match(TokenType.RPAREN):
            attributes = self.parse_outer_attributes()
            if self.match(TokenType.DOT_DOT_DOT):
                self.advance()
                signature.is_variadic = True
            else:
                argument = self.parse_fn_argument()
                argument.attributes = attributes
                signature.inputs.append(argument)
            if not self.match(TokenType.COMMA):
                break
            self.advance()
        self.expect(TokenType.RPAREN)

        if self.match(TokenType.ARROW):
            self.advance()
            signature.output = self.parse_type()
        self.skip_where_clause()
        return signature

    def parse_fn_argument(self) -> FnArgument:
        """Parse a receiver (self, &self, &'a mut self, self: T) or a 'pattern: Type' input."""
        # &self, &mut self, &'a self, &'a mut self
        offset = 0
        if self.peek(offset).type == TokenType.AMPERSAND:
            offset += 1
            if self.peek(offset).type == TokenType.LIFETIME:
                offset += 1
            if self.peek(offset).type == TokenType.MUT:
                offset += 1
            if self.peek(offset).type == TokenType.SELF_VALUE and self.peek(offset + 1).type != TokenType.COLON_COLON:
                mutable = self.peek(offset - 1).type == TokenType.MUT
                for _ in range(offset + 1):
                    self.advance()
                return FnArgument(is_receiver=True, pattern='self', reference=True, mutable=mutable)

        # self, mut self, self: Type, mut self: Type
        offset = 1 if self.match(TokenType.MUT) else 0
        if self.peek(offset).type == TokenType.SELF_VALUE and self.peek(offset + 1).type != TokenType.COLON_COLON:
            mutable = offset == 1
            for _ in range(offset + 1):
                self.advance()
            receiver_type = None
            if self.match(TokenType.COLON):
                self.advance()
                receiver_type = self.parse_type()
            return FnArgument(is_receiver=True, pattern='self', type=receiver_type, mutable=mutable)

        if not self._has_pattern():
            # Anonymous parameter (2015 edition trait methods): the input is just a type
            return FnArgument(is_receiver=False, type=self.parse_type())

        start = self.pos
        while not self.match(TokenType.COLON):
            self.skip_token_tree()
        pattern = self.text_between(start, self.pos)
        self.advance()
        return FnArgument(is_receiver=False, pattern=pattern, type=self.parse_type())

    def _has_pattern(self) -> bool:
        """Check whether a top-level ':' appears before the end of this input."""
        depth = 0
        offset = 0
        while True:
            token = self.peek(offset)
            if token.type == TokenType.EOF:
                return False
            if token.type in OPEN_DELIMITERS:
                depth += 1
            elif token.type in CLOSE_DELIMITERS:
                if depth == 0:
                    return False
                depth -= 1
            elif depth == 0 and token.type == TokenType.COMMA:
                return False
            elif depth == 0 and token.type == TokenType.COLON:
                return True
            offset += 1

    # =========================================================================
    # TYPE PARSING
    # =========================================================================

    def parse_type(self, allow_plus: bool = True) -> TypeNode:
        """Parse a type."""
        token = self.current()

        if self.match(TokenType.LPAREN):
            self.advance()
            if self.match(TokenType.RPAREN):
                self.advance()
                return TypeTuple(elements=[])
            first = self.parse_type()
            if self.match(TokenType.RPAREN):
                self.advance()
                return TypeParen(element=first)
            elements = [first]
            while self.match(TokenType.COMMA):
                self.advance()
                if self.match(TokenType.RPAREN):
                    break
                elements.append(self.parse_type())
            self.expect(TokenType.RPAREN)
            return TypeTuple(elements=elements)

        if self.match(TokenType.LBRACKET):
            self.advance()
            element = self.parse_type()
            if self.match(TokenType.SEMICOLON):
                self.advance()
                length = self.parse_expression()
                self.expect(TokenType.RBRACKET)
                return TypeArray(element=element, length=length)
            self.expect(TokenType.RBRACKET)
            return TypeSlice(element=element)

        if self.match(TokenType.AMPERSAND, TokenType.AMPERSAND_AMPERSAND):
            double = self.advance().type == TokenType.AMPERSAND_AMPERSAND
            lifetime = None
            if self.match(TokenType.LIFETIME):
                lifetime = self.advance().value
            mutable = False
            if self.match(TokenType.MUT):
                self.advance()
                mutable = True
            reference = TypeReference(element=self.parse_type(allow_plus=False), lifetime=lifetime, mutable=mutable)
            return TypeReference(element=reference) if double else reference

        if self.match(TokenType.STAR):
            self.advance()
            if self.match(TokenType.CONST):
                mutable = False
            elif self.match(TokenType.MUT):
                mutable = True
            else:
                raise self.error(f"expected 'mut' or 'const' in raw pointer type, found {self.describe()}")
            self.advance()
            return TypePointer(element=self.parse_type(allow_plus=False), mutable=mutable)

        if self.match(TokenType.BANG):
            self.advance()
            return TypeNever()

        if self.match(TokenType.UNDERSCORE):
            self.advance()
            return TypeInfer()

        if self.match(TokenType.DYN):
            self.advance()
            return TypeTraitObject(bounds=self.parse_bounds(allow_plus), has_dyn=True)

        if self.match(TokenType.IMPL):
            self.advance()
            return TypeImplTrait(bounds=self.parse_bounds(allow_plus))

        if self.match(TokenType.FOR):
            # Higher-ranked: for<'a> fn(&'a T) or for<'a> Fn(&'a T)
            self.advance()
            self.parse_generics()
            return self.parse_type(allow_plus)

        if self.match(TokenType.FN, TokenType.UNSAFE, TokenType.EXTERN):
            return self.parse_bare_fn_type()

        if self.match(TokenType.LT):
            return self.parse_qualified_path_type()

        if self.match(TokenType.COLON_COLON, *PATH_SEGMENT_TOKENS):
            if self._at_macro_invocation():
                name = self.parse_simple_path()
                self.expect(TokenType.BANG)
                if not self.match(*OPEN_DELIMITERS):
                    raise self.error(f'expected macro arguments, found {self.describe()}')
                self.skip_token_tree()
                return TypeMacro(name=name)
            start = self.pos
            path = self.parse_type_path()
            if allow_plus and self.match(TokenType.PLUS):
                bounds = [self.text_between(start, self.pos)]
                self.advance()
                bounds.extend(self.parse_bounds())
                return TypeTraitObject(bounds=bounds, has_dyn=False)
            return path

        raise self.error(f'expected type, found {self.describe(token)}', token)

    def parse_type_path(self) -> TypePath:
        """Parse a path type with optional generic arguments on each segment."""
        path = TypePath()
        if self.match(TokenType.COLON_COLON):
            self.advance()
            path.leading_colon = True

        while True:
            if not self.match(*PATH_SEGMENT_TOKENS):
                raise self.error(f'expected identifier in path, found {self.describe()}')
            segment = PathSegment(name=self.advance().value)

            if self.match(TokenType.COLON_COLON) and self.peek(1).type == TokenType.LT:
                self.advance()  # turbofish-style '::<'
            if self.match(TokenType.LT):
                segment.argument_style = 'angle'
                segment.arguments = self.parse_generic_arguments()
            elif self.match(TokenType.LPAREN):
                # Fn(A, B) -> C sugar
                segment.argument_style = 'paren'
                self.advance()
                while not self.match(TokenType.RPAREN):
                    segment.inputs.append(self.parse_type())
                    if not self.match(TokenType.COMMA):
                        break
                    self.advance()
                self.expect(TokenType.RPAREN)
                if self.match(TokenType.ARROW):
                    self.advance()
                    segment.output = self.parse_type(allow_plus=False)
            path.segments.append(segment)

            if self.match(TokenType.COLON_COLON) and self.peek(1).type in PATH_SEGMENT_TOKENS:
                self.advance()
            else:
                return path

    def parse_qualified_path_type(self) -> TypePath:
        """Parse '<T as Trait>::Name' or '<T>::Name'."""
        self.expect(TokenType.LT)
        qself = self.parse_type()
        segments: List[PathSegment] = []
        if self.match(TokenType.AS):
            self.advance()
            segments = self.parse_type_path().segments
        self.expect(TokenType.GT)
        self.expect(TokenType.COLON_COLON)
        rest = self.parse_type_path()
        return TypePath(segments=segments + rest.segments, qself=qself)

    def parse_generic_arguments(self) -> List[GenericArgument]:
        """Parse '<...>' generic arguments."""
        self.expect(TokenType.LT)
        arguments = []
        while not self.match(TokenType.GT):
            arguments.append(self.parse_generic_argument())
            if self.match(TokenType.COMMA):
                self.advance()
            elif not self.match(TokenType.GT):
                raise self.error(f"expected ',' or '>' in generic arguments, found {self.describe()}")
        self.expect(TokenType.GT)
        return arguments

    def parse_generic_argument(self) -> GenericArgument:
        """Parse one generic argument: lifetime, const, binding, constraint or type."""
        if self.match(TokenType.LIFETIME):
            return GenericArgument(kind='lifetime', name=self.advance().value)

        if self.match(TokenType.LBRACE):
            self.skip_token_tree()
            return GenericArgument(kind='const', value=BlockExpression())

        if self.match(TokenType.MINUS, TokenType.TRUE, TokenType.FALSE, TokenType.STRING_LITERAL, *LITERAL_KINDS):
            return GenericArgument(kind='const', value=self.parse_unary())

        if self.match(TokenType.IDENTIFIER) and self.peek(1).type == TokenType.EQ:
            name = self.advance().value
            self.advance()
            return GenericArgument(kind='binding', name=name, type=self.parse_type())

        if self.match(TokenType.IDENTIFIER) and self.peek(1).type == TokenType.COLON:
            name = self.advance().value
            self.advance()
            self.parse_bounds()
            return GenericArgument(kind='constraint', name=name)

        return GenericArgument(kind='type', type=self.parse_type())

    def parse_bare_fn_type(self) -> TypeBareFn:
        """Parse '[unsafe] [extern "abi"] fn(A, B) -> C'."""
        self._skip_fn_qualifiers()
        self.expect(TokenType.FN)
        self.expect(TokenType.LPAREN)
        bare_fn = TypeBareFn()
        while not self.match(TokenType.RPAREN):
            self.parse_outer_attributes()
            if self.match(TokenType.DOT_DOT_DOT):
                self.advance()
            else:
                if self.match(TokenType.IDENTIFIER, TokenType.UNDERSCORE) and self.peek(1).type == TokenType.COLON:
                    self.advance()
                    self.advance()
                bare_fn.inputs.append(self.parse_type())
            if not self.match(TokenType.COMMA):
                break
            self.advance()
        self.expect(TokenType.RPAREN)
        if self.match(TokenType.ARROW):
            self.advance()
            bare_fn.output = self.parse_type(allow_plus=False)
        return bare_fn

    def parse_bounds(self, allow_plus: bool = True) -> List[str]:
        """Parse trait/lifetime bounds (A + B<T> + 'a + ?Sized) and return their text."""
        bounds = []
        while True:
            start = self.pos
            if self.match(TokenType.LIFETIME):
                self.advance()
            elif self.match(TokenType.LPAREN):
                self.advance()
                self.parse_bounds()
                self.expect(TokenType.RPAREN)
            else:
                if self.match(TokenType.QUESTION, TokenType.TILDE):
                    self.advance()
                    if self.match(TokenType.CONST):
                        self.advance()
                if self.match(TokenType.FOR):
                    self.advance()
                    self.parse_generics()
                self.parse_type_path()
            bounds.append(self.text_between(start, self.pos))

            if allow_plus and self.match(TokenType.PLUS):
                self.advance()
                # A trailing '+' before a closer is allowed
                if self.match(TokenType.GT, TokenType.COMMA, TokenType.RPAREN, TokenType.LBRACE,
                              TokenType.WHERE, TokenType.SEMICOLON, TokenType.EQ):
                    return bounds
            else:
                return bounds

    # =========================================================================
    # EXPRESSION PARSING
    # =========================================================================

    def parse_expression(self) -> Expression:
        """Parse an expression (used for discriminants, attribute values and lengths)."""
        return self.parse_binary(1)

    def _peek_binary_operator(self) -> Tuple[Optional[str], int]:
        """Return (operator, token count) for a binary operator at the current position."""
        token = self.current()
        # '<<' and '>>' arrive as two adjacent '<' / '>' tokens
        if token.type in (TokenType.LT, TokenType.GT) and self.peek(1).type == token.type and self.is_adjacent(1):
            return token.value * 2, 2
        if token.type in (TokenType.IDENTIFIER, TokenType.EOF):
            return None, 0
        if token.value in BINARY_PRECEDENCE:
            return token.value, 1
        return None, 0

    def parse_binary(self, min_precedence: int) -> Expression:
        """Parse binary operations by precedence climbing."""
        left = self.parse_cast()
        while True:
            operator, width = self._peek_binary_operator()
            if operator is None or BINARY_PRECEDENCE[operator] < min_precedence:
                return left
            for _ in range(width):
                self.advance()
            right = self.parse_binary(BINARY_PRECEDENCE[operator] + 1)
            left = BinaryExpression(left=left, operator=operator, right=right)

    def parse_cast(self) -> Expression:
        """Parse 'expr as Type' chains."""
        expr = self.parse_unary()
        while self.match(TokenType.AS):
            self.advance()
            expr = CastExpression(expression=expr, type=self.parse_type(allow_plus=False))
        return expr

    def parse_unary(self) -> Expression:
        """Parse a unary expression."""
        if self.match(TokenType.MINUS, TokenType.BANG, TokenType.STAR):
            operator = self.advance().value
            return UnaryExpression(operator=operator, operand=self.parse_unary())
        if self.match(TokenType.AMPERSAND, TokenType.AMPERSAND_AMPERSAND):
            operator = self.advance().value
            if self.match(TokenType.MUT):
                self.advance()
                operator += 'mut '
            return UnaryExpression(operator=operator, operand=self.parse_unary())
        return self.parse_postfix()

    def parse_postfix(self) -> Expression:
        """Parse calls, field access, indexing and '?'."""
        expr = self.parse_primary()

        while True:
            if self.match(TokenType.DOT):
                self.advance()
                if not self.match(TokenType.IDENTIFIER, TokenType.INTEGER):
                    raise self.error(f'expected field name after \'.\', found {self.describe()}')
                member = self.advance().value
                if self.match(TokenType.COLON_COLON) and self.peek(1).type == TokenType.LT:
                    self.advance()
                    self.parse_generic_arguments()
                expr = FieldExpression(expression=expr, member=member)
            elif self.match(TokenType.LPAREN):
                expr = CallExpression(function=expr, arguments=self.parse_call_arguments())
            elif self.match(TokenType.LBRACKET):
                self.advance()
                index = self.parse_expression()
                self.expect(TokenType.RBRACKET)
                expr = IndexExpression(base=expr, index=index)
            elif self.match(TokenType.QUESTION):
                self.advance()
                expr = TryExpression(expression=expr)
            else:
                return expr

    def parse_call_arguments(self) -> List[Expression]:
        """Parse '(a, b, ...)'."""
        self.expect(TokenType.LPAREN)
        arguments = []
        while not self.match(TokenType.RPAREN):
            arguments.append(self.parse_expression())
            if not self.match(TokenType.COMMA):
                break
            self.advance()
        self.expect(TokenType.RPAREN)
        return arguments

    def parse_primary(self) -> Expression:
        """Parse a primary expression."""
        token = self.current()

        if token.type == TokenType.STRING_LITERAL:
            self.advance()
            return Literal(value=cook_string_literal(token.value, token.line, token.column), kind='str')
        if token.type in LITERAL_KINDS:
            self.advance()
            return Literal(value=token.value, kind=LITERAL_KINDS[token.type])
        if token.type in (TokenType.TRUE, TokenType.FALSE):
            self.advance()
            return Literal(value=token.value, kind='bool')

        # Tuple/Parenthesized expression
        if token.type == TokenType.LPAREN:
            self.advance()
            if self.match(TokenType.RPAREN):
                self.advance()
                return TupleExpression(elements=[])
            first = self.parse_expression()
            if self.match(TokenType.RPAREN):
                self.advance()
                return ParenExpression(expression=first)
            elements = [first]
            while self.match(TokenType.COMMA):
                self.advance()
                if self.match(TokenType.RPAREN):
                    break
                elements.append(self.parse_expression())
            self.expect(TokenType.RPAREN)
            return TupleExpression(elements=elements)

        # Array literal: [a, b] or [value; count]
        if token.type == TokenType.LBRACKET:
            self.advance()
            elements = []
            if not self.match(TokenType.RBRACKET):
                elements.append(self.parse_expression())
                if self.match(TokenType.SEMICOLON):
                    self.advance()
                    elements.append(self.parse_expression())
                else:
                    while self.match(TokenType.COMMA):
                        self.advance()
                        if self.match(TokenType.RBRACKET):
                            break
                        elements.append(self.parse_expression())
            self.expect(TokenType.RBRACKET)
            return ArrayExpression(elements=elements)

        # Blocks: { ... }, unsafe { ... }, const { ... }
        if token.type in (TokenType.UNSAFE, TokenType.CONST) and self.peek(1).type == TokenType.LBRACE:
            self.advance()
        if self.match(TokenType.LBRACE):
            self.skip_token_tree()
            return BlockExpression()

        # Macro invocation or path
        if token.type in PATH_SEGMENT_TOKENS or token.type == TokenType.COLON_COLON:
            if self._at_macro_invocation():
                name = self.parse_simple_path()
                self.expect(TokenType.BANG)
                if not self.match(*OPEN_DELIMITERS):
                    raise self.error(f'expected macro arguments, found {self.describe()}')
                self.skip_token_tree()
                return MacroExpression(name=name)
            return self.parse_path_expression()

        if token.type == TokenType.LT:
            path = self.parse_qualified_path_type()
            return PathExpression(segments=[segment.name for segment in path.segments], has_generics=True)

        raise self.error(f'expected expression, found {self.describe(token)}', token)

    def parse_path_expression(self) -> PathExpression:
        """Parse a path in expression position (FOO, Self::A, Vec::<u8>::new)."""
        path = PathExpression()
        if self.match(TokenType.COLON_COLON):
            self.advance()
            path.leading_colon = True
        while True:
            if not self.match(*PATH_SEGMENT_TOKENS):
                raise self.error(f'expected identifier in path, found {self.describe()}')
            path.segments.append(self.advance().value)
            if self.match(TokenType.COLON_COLON) and self.peek(1).type == TokenType.LT:
                self.advance()
                self.parse_generic_arguments()
                path.has_generics = True
            if self.match(TokenType.COLON_COLON) and self.peek(1).type in PATH_SEGMENT_TOKENS:
                self.advance()
            else:
                return path
