#!/usr/bin/env python3
"""
Unit tests for the rs2ts generator.

Run with: python3 -m pytest bel/test_rs2ts.py
   or: python3 bel/test_rs2ts.py
"""

import sys
import os
# Add parent directory to path so the package imports when run as a script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from bel.lexer import Lexer, TokenType, cook_string_literal, parse_int_literal
from bel.parser import (
    Parser,
    StructItem,
    EnumItem,
    TraitItem,
    TraitFn,
    TraitOther,
    OtherItem,
    TypePath,
    TypeReference,
    TypeTuple,
    Literal,
    BinaryExpression,
    UnaryExpression,
)
from bel.type_system import (
    ArrayType,
    FunctionType,
    GenericType,
    ObjectType,
    TsParameter,
    TsProperty,
    UnionType,
    any_type,
    array_of,
    boolean_type,
    number_type,
    optional,
    reference_to,
    rust_type_to_ts,
    string_type,
    type_to_typescript,
    void_type,
)
from bel.extract import (
    EnumDeclaration,
    EnumValue,
    EnumValueKind,
    EnumVariant,
    Extractor,
    Field,
    InterfaceDeclaration,
    Method,
    Parameter,
    TraitDeclaration,
    extract,
    snake_to_camel,
)
from bel.codegen import TypeScriptGenerator
from bel.config import DEFAULT_PREAMBLE, ExtractOptions, GeneratorOptions, load_options, options_from_dict
from bel.diagnostics import DiagnosticSeverity, TranspilerDiagnostics
from bel.errors import BelError, ConfigError, EnumValueRangeError, OutputError, SourceSyntaxError
from bel.rs2ts import RustToTypeScriptTranspiler, main, transpile, transpile_to


def parse(source):
    return Parser(Lexer(source).tokenize()).parse()


def parse_type(text):
    """Parse the type of a single struct field."""
    unit = parse(f'struct T {{ f: {text} }}')
    return unit.items[0].fields[0].type


def render(source, **generator_options):
    """Transpile without the preamble."""
    return transpile(source, generator_options=GeneratorOptions(preamble=None, **generator_options))


class FailingWriter:
    """A sink that rejects every write."""

    def __init__(self):
        self.calls = 0

    def write(self, text):
        self.calls += 1
        raise OSError('disk full')


class TestLexer(unittest.TestCase):
    """Test tokenization of Rust source."""

    def types(self, source):
        return [t.type for t in Lexer(source).tokenize()]

    def test_nested_generics_close_one_bracket_per_token(self):
        types = self.types('Vec<Vec<u8>>')
        self.assertEqual(types[-3:], [TokenType.GT, TokenType.GT, TokenType.EOF])

    def test_keywords_and_identifiers(self):
        tokens = Lexer('pub struct Self self r#type _').tokenize()
        self.assertEqual(
            [t.type for t in tokens[:-1]],
            [TokenType.PUB, TokenType.STRUCT, TokenType.SELF_TYPE, TokenType.SELF_VALUE,
             TokenType.IDENTIFIER, TokenType.UNDERSCORE],
        )
        self.assertEqual(tokens[4].value, 'type')

    def test_comments_are_skipped_and_doc_comments_kept(self):
        tokens = Lexer('// plain\n/* block /* nested */ */\n/// outer\n//! inner\n/** block doc */').tokenize()
        self.assertEqual(
            [t.type for t in tokens],
            [TokenType.DOC_COMMENT, TokenType.INNER_DOC_COMMENT, TokenType.DOC_COMMENT, TokenType.EOF],
        )
        self.assertEqual(tokens[0].value, ' outer')
        self.assertEqual(tokens[2].value, ' block doc ')

    def test_four_slashes_is_not_a_doc_comment(self):
        self.assertEqual(self.types('//// separator'), [TokenType.EOF])

    def test_lifetimes_and_char_literals(self):
        tokens = Lexer("'a 'b' '\\n'").tokenize()
        self.assertEqual(
            [t.type for t in tokens[:-1]],
            [TokenType.LIFETIME, TokenType.CHAR_LITERAL, TokenType.CHAR_LITERAL],
        )

    def test_string_literal_forms(self):
        tokens = Lexer('"a\\"b" r#"x"y"# b"bytes" br"raw" b\'c\'').tokenize()
        self.assertEqual(
            [t.type for t in tokens[:-1]],
            [TokenType.STRING_LITERAL, TokenType.STRING_LITERAL, TokenType.BYTE_STRING_LITERAL,
             TokenType.BYTE_STRING_LITERAL, TokenType.BYTE_LITERAL],
        )
        self.assertEqual(tokens[1].value, 'r#"x"y"#')

    def test_number_literals(self):
        tokens = Lexer('0xFF 0b1010 1_000u32 1.5 2e10 3f32 1..2').tokenize()
        self.assertEqual(
            [t.type for t in tokens[:-1]],
            [TokenType.INTEGER, TokenType.INTEGER, TokenType.INTEGER, TokenType.FLOAT,
             TokenType.FLOAT, TokenType.FLOAT, TokenType.INTEGER, TokenType.DOT_DOT, TokenType.INTEGER],
        )

    def test_positions(self):
        tokens = Lexer('struct\n  Foo').tokenize()
        self.assertEqual((tokens[1].line, tokens[1].column), (2, 3))

    def test_shebang_is_skipped(self):
        self.assertEqual(self.types('#!/usr/bin/env run-cargo-script\nstruct'),
                         [TokenType.STRUCT, TokenType.EOF])

    def test_inner_attribute_is_not_a_shebang(self):
        self.assertEqual(self.types('#![allow(dead_code)]')[:2], [TokenType.POUND, TokenType.BANG])

    def test_unterminated_string(self):
        with self.assertRaises(SourceSyntaxError):
            Lexer('struct A { a: "oops }').tokenize()

    def test_unterminated_block_comment(self):
        with self.assertRaises(SourceSyntaxError) as cm:
            Lexer('/* never closed').tokenize()
        self.assertEqual(cm.exception.line, 1)

    def test_empty_hex_literal(self):
        with self.assertRaises(SourceSyntaxError):
            Lexer('0x').tokenize()

    def test_unknown_character(self):
        with self.assertRaises(SourceSyntaxError) as cm:
            Lexer('struct A `').tokenize()
        self.assertIn('unknown start of token', str(cm.exception))
        self.assertEqual(cm.exception.column, 10)


class TestLiterals(unittest.TestCase):
    """Test cooking of literal token text."""

    def test_escapes(self):
        self.assertEqual(cook_string_literal('"a\\nb\\t\\\\"'), 'a\nb\t\\')
        self.assertEqual(cook_string_literal('"\\x41\\u{1F600}"'), 'A\U0001F600')

    def test_line_continuation(self):
        self.assertEqual(cook_string_literal('"one \\\n      two"'), 'one two')

    def test_raw_strings(self):
        self.assertEqual(cook_string_literal('r"C:\\path"'), 'C:\\path')
        self.assertEqual(cook_string_literal('r##"a "# b"##'), 'a "# b')

    def test_unknown_escape(self):
        with self.assertRaises(SourceSyntaxError):
            cook_string_literal('"\\q"')

    def test_integers(self):
        self.assertEqual(parse_int_literal('200'), 200)
        self.assertEqual(parse_int_literal('0x1F'), 31)
        self.assertEqual(parse_int_literal('0o17'), 15)
        self.assertEqual(parse_int_literal('0b1010'), 10)
        self.assertEqual(parse_int_literal('1_000u32'), 1000)
        self.assertEqual(parse_int_literal('0xFFu8'), 255)
        self.assertEqual(parse_int_literal('7usize'), 7)

    def test_any_integer_suffix_is_ignored(self):
        self.assertEqual(parse_int_literal('200abc'), 200)
        self.assertEqual(parse_int_literal('0x1Fzz'), 31)
        self.assertEqual(parse_int_literal('0b10_suffix'), 2)

    def test_integer_without_digits(self):
        with self.assertRaises(SourceSyntaxError):
            parse_int_literal('0x')

    def test_malformed_escapes(self):
        malformed = [
            '"\\x"',
            '"\\xZZ"',
            '"\\x8"',
            '"\\x80"',
            '"\\u41"',
            '"\\u{41"',
            '"\\u{}"',
            '"\\u{1234567}"',
            '"\\u{110000}"',
            '"\\u{D800}"',
            '"\\q"',
        ]
        for text in malformed:
            with self.assertRaises(SourceSyntaxError, msg=text):
                cook_string_literal(text)

    def test_escape_error_location(self):
        with self.assertRaises(SourceSyntaxError) as cm:
            cook_string_literal('"\\u{110000}"', 3, 7)
        self.assertEqual((cm.exception.line, cm.exception.column), (3, 7))
        self.assertIn('invalid unicode character escape', str(cm.exception))

    def test_valid_escape_bounds(self):
        self.assertEqual(cook_string_literal('"\\x7F\\u{10FFFF}\\u{1_F6_00}"'), '\x7f\U0010FFFF\U0001F600')


class TestParser(unittest.TestCase):
    """Test parsing of Rust items."""

    def test_struct_kinds(self):
        unit = parse('pub struct A { pub a: u8, b: String } struct B(pub u8, String); struct C;')
        a, b, c = unit.items
        self.assertIsInstance(a, StructItem)
        self.assertEqual((a.kind, b.kind, c.kind), ('named', 'tuple', 'unit'))
        self.assertEqual([f.name for f in a.fields], ['a', 'b'])
        self.assertEqual(a.visibility, 'pub')
        self.assertEqual([f.name for f in b.fields], [None, None])

    def test_visibility_forms(self):
        unit = parse('pub(crate) struct A; pub(in crate::api) struct B; pub(super) struct C;')
        self.assertEqual([item.visibility for item in unit.items],
                         ['pub(crate)', 'pub(in crate::api)', 'pub(super)'])

    def test_generics_and_where_clause(self):
        unit = parse("struct Page<'a, T: Clone + 'a, const N: usize = 4> where T: Send { items: &'a [T; N] }")
        self.assertEqual(unit.items[0].generics, ["'a", 'T', 'N'])
        self.assertIsInstance(unit.items[0].fields[0].type, TypeReference)

    def test_attributes_and_docs(self):
        unit = parse(
            '/// Docs\n'
            '#[derive(Debug, Serialize)]\n'
            '#[doc = "explicit"]\n'
            'struct A {\n'
            '    #[serde(skip_serializing_if = "Option::is_none")]\n'
            '    a: Option<u8>,\n'
            '}\n'
        )
        attrs = unit.items[0].attributes
        self.assertEqual([a.path for a in attrs], ['doc', 'derive', 'doc'])
        self.assertTrue(attrs[0].is_sugared_doc)
        self.assertEqual(attrs[0].value.value, ' Docs')
        self.assertEqual(attrs[2].value, Literal(value='explicit', kind='str'))
        serde = unit.items[0].fields[0].attributes[0]
        self.assertEqual(serde.path, 'serde')
        self.assertIn('skip_serializing_if', serde.debug_text())

    def test_inner_attributes(self):
        unit = parse('#![allow(dead_code)]\n//! Crate docs\nstruct A;')
        self.assertEqual([a.style for a in unit.attributes], ['inner', 'inner'])
        self.assertEqual(len(unit.items), 1)

    def test_enum_variants_and_discriminants(self):
        unit = parse('enum E { A, B(u8, String), C { x: f64 }, D = 1 << 4, F = -1, G = FOO }')
        enum = unit.items[0]
        self.assertIsInstance(enum, EnumItem)
        self.assertEqual([v.kind for v in enum.variants], ['unit', 'tuple', 'named', 'unit', 'unit', 'unit'])
        shift = enum.variants[3].discriminant
        self.assertIsInstance(shift, BinaryExpression)
        self.assertEqual(shift.operator, '<<')
        self.assertIsInstance(enum.variants[4].discriminant, UnaryExpression)

    def test_expression_precedence(self):
        unit = parse('enum E { A = 1 + 2 * 3 }')
        expr = unit.items[0].variants[0].discriminant
        self.assertEqual(expr.operator, '+')
        self.assertEqual(expr.right.operator, '*')

    def test_trait_members(self):
        unit = parse(
            'pub unsafe trait Repo<T>: Send + Sync where T: Clone {\n'
            '    type Item;\n'
            '    const MAX: usize = 4;\n'
            '    fn all(&self) -> Vec<T>;\n'
            "    fn put<'a>(&'a mut self, (key, value): (u8, T), mut count: u32);\n"
            '    async fn fetch(self: Box<Self>) -> Option<T> { None }\n'
            '}\n'
        )
        trait = unit.items[0]
        self.assertIsInstance(trait, TraitItem)
        self.assertTrue(trait.is_unsafe)
        self.assertEqual(trait.supertraits, ['Send', 'Sync'])
        kinds = [type(member) for member in trait.items]
        self.assertEqual(kinds, [TraitOther, TraitOther, TraitFn, TraitFn, TraitFn])
        put = trait.items[3].signature
        self.assertTrue(put.inputs[0].is_receiver)
        self.assertTrue(put.inputs[0].mutable)
        self.assertEqual([a.pattern for a in put.inputs[1:]], ['( key , value )', 'mut count'])
        fetch = trait.items[4]
        self.assertTrue(fetch.has_default)
        self.assertTrue(fetch.signature.inputs[0].is_receiver)
        self.assertEqual(fetch.signature.qualifiers, ['async'])

    def test_other_items_are_consumed(self):
        unit = parse(
            'use std::collections::HashMap;\n'
            'mod api;\n'
            'const LIMIT: u32 = 10;\n'
            'static mut COUNTER: u64 = 0;\n'
            'type Map = HashMap<String, u32>;\n'
            'extern crate serde;\n'
            'macro_rules! square { ($x:expr) => { $x * $x }; }\n'
            'lazy_static! { static ref X: u8 = 1; }\n'
            'impl<T> Display for Page<T> where T: Debug { fn fmt(&self) {} }\n'
            'pub(crate) async unsafe fn run() -> Result<(), ()> { Ok(()) }\n'
            'extern "C" { fn abs(x: i32) -> i32; }\n'
            'union Bits { i: u32, f: f32 }\n'
            '#[cfg(test)]\nmod tests { #[test] fn t() { assert!(true); } }\n'
        )
        self.assertTrue(all(isinstance(item, OtherItem) for item in unit.items))
        self.assertEqual(
            [item.kind for item in unit.items],
            ['use', 'mod', 'const', 'static', 'type', 'extern crate', 'macro_rules', 'macro',
             'impl', 'fn', 'extern block', 'union', 'mod'],
        )

    def test_type_shapes(self):
        self.assertIsInstance(parse_type('(u8, String)'), TypeTuple)
        path = parse_type('std::collections::HashMap<String, Vec<u32>>')
        self.assertIsInstance(path, TypePath)
        self.assertEqual(path.last_segment.name, 'HashMap')
        self.assertEqual(len(path.last_segment.arguments), 2)
        qualified = parse_type('<T as Iterator>::Item')
        self.assertEqual(qualified.last_segment.name, 'Item')
        for text in ('&str', '*const u8', '[u8]', '[u8; 32]', 'dyn Fn(u32) -> u32 + Send',
                     'impl Iterator<Item = u8>', 'fn(u8) -> bool', 'Box<dyn Error>', '!', '(u8)'):
            parse_type(text)

    def test_missing_closing_brace(self):
        with self.assertRaises(SourceSyntaxError):
            parse('struct Foo { a: u8')

    def test_error_location(self):
        with self.assertRaises(SourceSyntaxError) as cm:
            parse('struct A {\n    a: u8\n    b: u8\n}')
        self.assertEqual((cm.exception.line, cm.exception.column), (3, 5))

    def test_mismatched_delimiter(self):
        with self.assertRaises(SourceSyntaxError) as cm:
            parse('fn f() { ( }')
        self.assertIn('mismatched closing delimiter', str(cm.exception))

    def test_stray_closer(self):
        with self.assertRaises(SourceSyntaxError):
            parse('struct A; }')

    def test_not_an_item(self):
        with self.assertRaises(SourceSyntaxError) as cm:
            parse('let x = 5;')
        self.assertIn('expected item', str(cm.exception))


class TestTypeModel(unittest.TestCase):
    """Test rendering of the intermediate type model."""

    def test_primitives(self):
        self.assertEqual(type_to_typescript(string_type()), 'string')
        self.assertEqual(type_to_typescript(number_type()), 'number')
        self.assertEqual(type_to_typescript(boolean_type()), 'boolean')
        self.assertEqual(type_to_typescript(any_type()), 'any')
        self.assertEqual(type_to_typescript(void_type()), 'void')

    def test_composites(self):
        self.assertIsInstance(array_of(string_type()), ArrayType)
        self.assertEqual(type_to_typescript(array_of(array_of(number_type()))), 'number[][]')
        self.assertEqual(type_to_typescript(optional(reference_to('User'))), 'User | undefined')
        self.assertEqual(type_to_typescript(array_of(optional(string_type()))), '(string | undefined)[]')
        obj = ObjectType((
            TsProperty('id', number_type(), readonly=True),
            TsProperty('name', string_type(), optional=True),
        ))
        self.assertEqual(type_to_typescript(obj), '{ readonly id: number, name?: string }')
        fn = FunctionType((TsParameter('a', number_type()), TsParameter('b', string_type(), optional=True)),
                          void_type())
        self.assertEqual(type_to_typescript(fn), '(a: number, b?: string) => void')
        generic = GenericType('Record', (string_type(), array_of(number_type())))
        self.assertEqual(type_to_typescript(generic), 'Record<string, number[]>')

    def test_union_members_render_in_order(self):
        union = UnionType((reference_to('A'), reference_to('B'), string_type()))
        self.assertEqual(type_to_typescript(union), 'A | B | string')

    def test_unknown_shape(self):
        with self.assertRaises(TypeError):
            type_to_typescript('string')


class TestTypeMappings(unittest.TestCase):
    """Test resolution of Rust types."""

    def resolve(self, text):
        return type_to_typescript(rust_type_to_ts(parse_type(text)))

    def test_primitive_table(self):
        for rust in ('String', 'str', 'i8', 'i128', 'u64', 'usize', 'isize', 'f32', 'f64'):
            self.assertIn(self.resolve(rust), ('string', 'number'))
        self.assertEqual(self.resolve('String'), 'string')
        self.assertEqual(self.resolve('u128'), 'number')
        self.assertEqual(self.resolve('bool'), 'boolean')

    def test_sequences(self):
        self.assertEqual(self.resolve('Vec<String>'), 'string[]')
        self.assertEqual(self.resolve('Vec<Vec<f64>>'), 'number[][]')
        self.assertEqual(self.resolve('std::vec::Vec<User>'), 'User[]')

    def test_option_unwraps(self):
        self.assertEqual(self.resolve('Option<u32>'), 'number')
        self.assertEqual(self.resolve('Option<Vec<String>>'), 'string[]')

    def test_names_pass_through(self):
        self.assertEqual(self.resolve('User'), 'User')
        self.assertEqual(self.resolve('crate::model::User'), 'User')
        self.assertEqual(self.resolve('HashMap<String, u32>'), 'HashMap')
        self.assertEqual(self.resolve('Vec'), 'Array')
        self.assertEqual(self.resolve('Option'), 'Option')

    def test_unsupported_shapes_become_any(self):
        diag = TranspilerDiagnostics()
        for text in ('&str', '(u8, u8)', '[u8]', '[u8; 4]', '*mut u8', 'Box<dyn Fn()>', 'fn()'):
            self.assertIn(type_to_typescript(rust_type_to_ts(parse_type(text), diag)), ('any', 'Box'))
        self.assertEqual(self.resolve('&str'), 'any')
        self.assertEqual(len(diag.warnings), 6)
        self.assertEqual(diag.warnings[0].code, 'W001')


class TestNaming(unittest.TestCase):
    """Test snake_case to camelCase translation."""

    def test_snake_to_camel(self):
        self.assertEqual(snake_to_camel('foo_bar_baz'), 'fooBarBaz')

    def test_names_without_underscores_are_unchanged(self):
        for name in ('foo', 'fooBar', 'ID', ''):
            self.assertEqual(snake_to_camel(name), name)
            self.assertEqual(snake_to_camel(snake_to_camel(name)), name)

    def test_empty_segments_are_skipped(self):
        self.assertEqual(snake_to_camel('foo__bar'), 'fooBar')
        self.assertEqual(snake_to_camel('trailing_'), 'trailing')
        self.assertEqual(snake_to_camel('_private'), 'Private')


class TestEnumValues(unittest.TestCase):
    """Test enum discriminant resolution."""

    def variants(self, body, diagnostics=None):
        return extract(f'enum E {{ {body} }}', diagnostics=diagnostics)['E'].variants

    def test_no_discriminant(self):
        self.assertEqual([v.value for v in self.variants('A, B')], [None, None])

    def test_integer_literals(self):
        values = [v.value for v in self.variants('A = 200, B = 0x10, C = 1_000u16, D = 0b11')]
        self.assertEqual(values, [EnumValue.number(200), EnumValue.number(16),
                                  EnumValue.number(1000), EnumValue.number(3)])

    def test_string_literal(self):
        value = self.variants('A = "alpha"')[0].value
        self.assertEqual(value.kind, EnumValueKind.STRING)
        self.assertEqual(value.value, 'alpha')

    def test_identifier(self):
        self.assertEqual(self.variants('A = FOO')[0].value, EnumValue.identifier('FOO'))

    def test_other_expressions_fall_back(self):
        diag = TranspilerDiagnostics()
        variants = self.variants('A = -1, B = 1 << 4, C = Self::X, D = f(), E = (3), F = 1.5', diag)
        self.assertEqual([v.value for v in variants], [None] * 6)
        self.assertEqual([d.code for d in diag.warnings], ['W003'] * 6)

    def test_i64_bounds(self):
        self.assertEqual(self.variants('A = 9223372036854775807')[0].value.value, 2 ** 63 - 1)
        with self.assertRaises(EnumValueRangeError):
            self.variants('A = 9223372036854775808')
        with self.assertRaises(EnumValueRangeError):
            self.variants('A = 0xFFFF_FFFF_FFFF_FFFF')

    def test_integer_suffix_does_not_change_value(self):
        values = [v.value for v in self.variants('A = 200abc, B = 0x10_i64, C = 7usize')]
        self.assertEqual(values, [EnumValue.number(200), EnumValue.number(16), EnumValue.number(7)])
        self.assertIn('    A = 200,\n', render('enum E { A = 200abc }'))

    def test_to_typescript(self):
        self.assertEqual(EnumValue.string('a"b').to_typescript(), '"a\\"b"')
        self.assertEqual(EnumValue.string('héllo').to_typescript(), '"héllo"')
        self.assertEqual(EnumValue.number(-5).to_typescript(), '-5')
        self.assertEqual(EnumValue.identifier('FOO').to_typescript(), 'FOO')


class TestExtractor(unittest.TestCase):
    """Test declaration extraction."""

    def test_struct_fields(self):
        result = extract(
            'pub struct Demo {\n'
            '    pub user_id: u64,\n'
            '    pub nick_name: Option<String>,\n'
            '    #[serde(skip_serializing_if = "Vec::is_empty")]\n'
            '    pub tags: Vec<String>,\n'
            '    #[serde(rename = "x")]\n'
            '    pub plain: bool,\n'
            '}\n'
        )
        self.assertEqual(result['Demo'], InterfaceDeclaration(name='Demo', fields=[
            Field('userId', 'number', False),
            Field('nickName', 'string', True),
            Field('tags', 'string[]', True),
            Field('plain', 'boolean', False),
        ]))

    def test_every_named_field_is_emitted_once(self):
        names = [f'field_{i}' for i in range(7)]
        body = ',\n'.join(f'    {name}: {"Option<u8>" if i % 2 else "u8"}' for i, name in enumerate(names))
        ts = render(f'struct Many {{\n{body}\n}}')
        for i in range(7):
            marker = '?' if i % 2 else ''
            self.assertEqual(ts.count(f'    field{i}{marker}: number\n'), 1)
        self.assertEqual(ts.count(': number'), 7)

    def test_option_path_is_optional(self):
        result = extract('struct A { a: std::option::Option<u8> }')
        self.assertTrue(result['A'].fields[0].optional)

    def test_tuple_fields_are_skipped(self):
        diag = TranspilerDiagnostics()
        result = extract('struct Wrapper(pub u32, String);', diagnostics=diag)
        self.assertEqual(result['Wrapper'].fields, [])
        self.assertEqual([d.code for d in diag.warnings], ['W004', 'W004'])

    def test_first_doc_comment_wins(self):
        result = extract(
            '#[doc(hidden)]\n'
            '///   First line   \n'
            '/// Second line\n'
            'struct A {\n'
            '    /** Field doc */\n'
            '    a: u8,\n'
            '    b: u8,\n'
            '}\n'
        )
        self.assertEqual(result['A'].doc, 'First line')
        self.assertEqual(result['A'].fields[0].doc, 'Field doc')
        self.assertIsNone(result['A'].fields[1].doc)

    def test_enum(self):
        result = extract('/// Status\nenum Status {\n    /// Up\n    Active,\n    Inactive = 5,\n}')
        self.assertEqual(result['Status'], EnumDeclaration(
            name='Status',
            variants=[EnumVariant('Active', None, 'Up'), EnumVariant('Inactive', EnumValue.number(5))],
            doc='Status',
        ))

    def test_trait(self):
        diag = TranspilerDiagnostics()
        result = extract(
            'pub trait Service {\n'
            '    type Output;\n'
            '    /// Look up a user\n'
            '    fn get_user(&self, user_id: u64, nick: Option<String>) -> Option<User>;\n'
            '    fn ping(&mut self);\n'
            '    fn create(name: String) -> Self;\n'
            '}\n',
            diagnostics=diag,
        )
        self.assertEqual(result['Service'], TraitDeclaration(name='Service', methods=[
            Method('get_user', [Parameter('arg0', 'number'), Parameter('arg1', 'string')], 'User',
                   'Look up a user'),
            Method('ping', [], 'void'),
            Method('create', [Parameter('arg0', 'string')], 'Self'),
        ]))
        self.assertEqual([d.code for d in diag.warnings], ['W002'])

    def test_last_write_wins(self):
        result = extract('struct Foo { a: u8 }\nstruct Bar;\nenum Foo { X }')
        self.assertEqual(list(result), ['Bar', 'Foo'])
        self.assertIsInstance(result['Foo'], EnumDeclaration)

    def test_other_items_are_reported(self):
        diag = TranspilerDiagnostics()
        result = extract('use std::fmt;\nfn main() {}\nstruct A;', diagnostics=diag)
        self.assertEqual(list(result), ['A'])
        infos = [d for d in diag.diagnostics if d.severity == DiagnosticSeverity.INFO]
        self.assertEqual([d.code for d in infos], ['I001', 'I001'])

    def test_reserved_options(self):
        diag = TranspilerDiagnostics()
        options = ExtractOptions(embed_structs=True, sort_alphabetically=True)
        result = Extractor(options, diag).extract('struct Zeta;\nstruct Alpha;')
        self.assertEqual(list(result), ['Zeta', 'Alpha'])
        self.assertEqual([d.message for d in diag.diagnostics if d.code == 'I002'], [
            'Extraction option "embed_structs" is reserved and has no effect.',
            'Extraction option "sort_alphabetically" is reserved and has no effect.',
        ])

    def test_syntax_error_aborts_extraction(self):
        with self.assertRaises(SourceSyntaxError):
            extract('struct Good { a: u8 }\nstruct Bad {')

    def test_extract_file(self):
        result = Extractor().extract_file(parse('enum E { A }'))
        self.assertEqual(list(result), ['E'])


class TestGenerator(unittest.TestCase):
    """Test TypeScript rendering."""

    def test_interface_with_namespace_and_preamble(self):
        ts = transpile(
            '/// A user\n'
            'pub struct User {\n'
            '    pub user_id: u64,\n'
            '    /// Display name\n'
            '    pub nick_name: Option<String>,\n'
            '}\n',
            generator_options=GeneratorOptions(namespace='Api'),
        )
        self.assertEqual(ts, (
            '// generated using bel\n'
            '// DO NOT MODIFY\n'
            'export namespace Api {\n'
            '/**\n'
            ' * A user\n'
            ' */\n'
            'export interface User {\n'
            '    userId: number\n'
            '    /**\n'
            '     * Display name\n'
            '     */\n'
            '    nickName?: string\n'
            '}\n'
            '\n'
            ' }\n'
        ))

    def test_default_preamble(self):
        self.assertTrue(transpile('struct A;').startswith(DEFAULT_PREAMBLE + '\n'))

    def test_custom_and_absent_preamble(self):
        self.assertTrue(render('struct A;').startswith('export interface A {'))
        ts = transpile('struct A;', generator_options=GeneratorOptions(preamble='// hi'))
        self.assertTrue(ts.startswith('// hi\nexport interface A {'))

    def test_ordinal_enum(self):
        self.assertEqual(render('enum Status { Active, Inactive }'), (
            'export enum Status {\n'
            '    Active = 0,\n'
            '    Inactive = 1,\n'
            '}\n'
            '\n'
        ))

    def test_union_enum(self):
        ts = render('enum Status { Active, Inactive }', generate_enums_as_sum_types=True)
        self.assertEqual(ts, (
            'export type Status =\n'
            '    "Active" |\n'
            '    "Inactive";\n'
            '\n'
        ))

    def test_explicit_numeric_values(self):
        source = 'enum HttpStatus { Ok = 200, NotFound = 404 }'
        ordinal = render(source)
        self.assertIn('Ok = 200', ordinal)
        self.assertIn('NotFound = 404', ordinal)
        union = render(source, generate_enums_as_sum_types=True)
        self.assertIn('    200 |\n', union)
        self.assertIn('    404;\n', union)
        self.assertNotIn('"200"', union)
        self.assertNotIn('"Ok"', union)

    def test_mixed_values(self):
        source = 'enum Mixed { A, B = "bee", C = OTHER, D }'
        self.assertIn('    A = 0,\n    B = "bee",\n    C = OTHER,\n    D = 3,\n', render(source))
        union = render(source, generate_enums_as_sum_types=True)
        self.assertIn('    "A" |\n    "bee" |\n    OTHER |\n    "D";\n', union)

    def test_empty_enum(self):
        self.assertEqual(render('enum Never {}'), 'export enum Never {\n}\n\n')
        self.assertEqual(render('enum Never {}', generate_enums_as_sum_types=True),
                         'export type Never = never;\n\n')

    def test_variant_docs(self):
        ts = render('enum E {\n    /// First\n    A,\n}')
        self.assertIn('    /**\n     * First\n     */\n    A = 0,', ts)

    def test_trait(self):
        ts = render(
            'trait Service {\n'
            '    fn get_user(&self, id: u64, name: String) -> User;\n'
            '    fn ping(&self);\n'
            '}\n'
        )
        self.assertEqual(ts, (
            'export interface Service {\n'
            '    get_user(arg0: number, arg1: string): User\n'
            '    ping(): void\n'
            '}\n'
            '\n'
        ))

    def test_sort_alphabetically(self):
        source = 'struct Zeta { b: u8, a: u8 }\ntrait Alpha { fn z(&self); fn m(&self); }'
        ts = render(source, sort_alphabetically=True)
        self.assertLess(ts.index('interface Alpha'), ts.index('interface Zeta'))
        self.assertLess(ts.index('    a: number'), ts.index('    b: number'))
        self.assertLess(ts.index('    m(): void'), ts.index('    z(): void'))

    def test_insertion_order_by_default(self):
        ts = render('struct Zeta { b: u8, a: u8 }\nstruct Alpha;')
        self.assertLess(ts.index('interface Zeta'), ts.index('interface Alpha'))
        self.assertLess(ts.index('    b: number'), ts.index('    a: number'))

    def test_redeclaration_renders_once(self):
        ts = render('struct Foo { a: u8 }\nstruct Foo { b: String }')
        self.assertEqual(ts.count('export interface Foo'), 1)
        self.assertIn('b: string', ts)
        self.assertNotIn('a: number', ts)

    def test_multi_line_doc_is_reflowed(self):
        declarations = {'A': InterfaceDeclaration(name='A', doc='First\n  * second */ end')}
        ts = TypeScriptGenerator(GeneratorOptions(preamble=None)).generate_string(declarations)
        self.assertEqual(ts, '/**\n * First\n * second *\\/ end\n */\nexport interface A {\n}\n\n')

    def test_block_doc_comment(self):
        ts = render('/** Block docs\n * more\n */\nstruct A;')
        self.assertTrue(ts.startswith('/**\n * Block docs\n * more\n */\n'))

    def test_generator_does_not_mutate_declarations(self):
        declarations = extract('struct B { z: u8, a: u8 }\nstruct A;')
        before = repr(declarations)
        TypeScriptGenerator(GeneratorOptions(sort_alphabetically=True)).generate_string(declarations)
        self.assertEqual(repr(declarations), before)
        self.assertEqual(list(declarations), ['B', 'A'])

    def test_unknown_declaration(self):
        with self.assertRaises(TypeError):
            TypeScriptGenerator().generate_string({'X': object()})

    def test_writer_failure(self):
        writer = FailingWriter()
        with self.assertRaises(OutputError):
            TypeScriptGenerator().generate(extract('struct A;'), writer)
        self.assertEqual(writer.calls, 1)

    def test_closed_stream(self):
        stream = io.StringIO()
        stream.close()
        with self.assertRaises(OutputError):
            TypeScriptGenerator().generate({}, stream)


class TestFacade(unittest.TestCase):
    """Test the end-to-end pipeline."""

    def test_transpile_to(self):
        out = io.StringIO()
        transpile_to('struct A;', out, generator_options=GeneratorOptions(preamble=None))
        self.assertEqual(out.getvalue(), 'export interface A {\n}\n\n')

    def test_nothing_written_on_failure(self):
        out = io.StringIO()
        with self.assertRaises(EnumValueRangeError):
            transpile_to('struct A;\nenum E { X = 99999999999999999999 }', out)
        self.assertEqual(out.getvalue(), '')

    def test_errors_share_a_base_class(self):
        for source in ('struct {', 'enum E { X = 18446744073709551615 }', 'enum E { A = "\\x" }'):
            with self.assertRaises(BelError):
                transpile(source)

    def test_malformed_string_escape_is_a_syntax_error(self):
        for source in ('enum E { A = "\\x" }', 'enum E { A = "\\xZZ" }', '#[doc = "\\u{110000}"]\nstruct S;'):
            with self.assertRaises(SourceSyntaxError, msg=source) as cm:
                transpile(source)
            self.assertEqual(cm.exception.line, 1)
        with self.assertRaises(SourceSyntaxError) as cm:
            transpile('struct A;\n#[doc = "\\u{110000}"]\nstruct S;')
        self.assertEqual((cm.exception.line, cm.exception.column), (2, 9))

    def test_sink_failure(self):
        with self.assertRaises(OutputError):
            transpile_to('struct A;', FailingWriter())

    def test_transpiler_class(self):
        transpiler = RustToTypeScriptTranspiler(
            generator_options=GeneratorOptions(preamble=None, generate_enums_as_sum_types=True),
        )
        ts = transpiler.transpile_source('enum E { A }\nstruct S { r: &str }')
        self.assertIn('export type E =\n    "A";', ts)
        self.assertIn('r: any', ts)
        self.assertEqual(transpiler.diagnostics.get_summary(), 'Generator warnings: 1 type')

    def test_transpile_and_write_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / 'api.rs'
            source.write_text('struct A { b: bool }', encoding='utf-8')
            transpiler = RustToTypeScriptTranspiler()
            ts = transpiler.transpile_file(source)
            out = Path(tmp) / 'nested' / 'api.ts'
            with redirect_stdout(io.StringIO()) as stdout:
                transpiler.write_output(ts, out)
            self.assertEqual(out.read_text(encoding='utf-8'), ts)
            self.assertIn(f'Written: {out}', stdout.getvalue())


class TestConfig(unittest.TestCase):
    """Test option loading."""

    def write_config(self, tmp, data):
        path = Path(tmp) / 'bel.json'
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding='utf-8')
        return path

    def test_defaults(self):
        extract_options, generator_options = options_from_dict({})
        self.assertEqual(extract_options, ExtractOptions())
        self.assertEqual(generator_options, GeneratorOptions())
        self.assertEqual(generator_options.preamble, DEFAULT_PREAMBLE)

    def test_load_options(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = self.write_config(tmp, {
                'extract': {'follow_structs': True},
                'generate': {'namespace': 'Api', 'preamble': None, 'sort_alphabetically': True},
            })
            extract_options, generator_options = load_options(path)
        self.assertTrue(extract_options.follow_structs)
        self.assertEqual(generator_options, GeneratorOptions(
            namespace='Api', preamble=None, sort_alphabetically=True,
        ))

    def test_invalid_options(self):
        bad = [
            '[1, 2]',
            '{"extract": []}',
            '{"render": {}}',
            '{"generate": {"indent": 2}}',
            '{"generate": {"namespace": 5}}',
            '{"extract": {"embed_structs": 1}}',
            '{"generate": ',
        ]
        with tempfile.TemporaryDirectory() as tmp:
            for text in bad:
                with self.assertRaises(ConfigError, msg=text):
                    load_options(self.write_config(tmp, text))

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ConfigError):
                load_options(Path(tmp) / 'missing.json')


class TestCommandLine(unittest.TestCase):
    """Test the rs2ts command-line interface."""

    SOURCE = 'enum Status { Active, Inactive }\nstruct Demo { user_id: u64, r: &str }\n'

    def run_main(self, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        code = 0
        with redirect_stdout(stdout), redirect_stderr(stderr):
            try:
                main(argv)
            except SystemExit as e:
                code = e.code
        return code, stdout.getvalue(), stderr.getvalue()

    def test_writes_next_to_input(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / 'api.rs'
            source.write_text(self.SOURCE, encoding='utf-8')
            code, stdout, stderr = self.run_main([str(source)])
            output = Path(tmp) / 'api.ts'
            self.assertEqual(code, 0)
            self.assertIn(f'Written: {output}', stdout)
            self.assertIn('export enum Status {', output.read_text(encoding='utf-8'))
            self.assertIn('Generator warnings (1):', stderr)

    def test_stdout_with_flags(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / 'api.rs'
            source.write_text(self.SOURCE, encoding='utf-8')
            code, stdout, _ = self.run_main([
                str(source), '--stdout', '--namespace', 'Api', '--no-preamble', '--sum-types', '--sort',
            ])
        self.assertEqual(code, 0)
        self.assertTrue(stdout.startswith('export namespace Api {\nexport interface Demo {'))
        self.assertIn('export type Status =', stdout)

    def test_stdin(self):
        with mock.patch('sys.stdin', io.StringIO('struct A;')):
            code, stdout, _ = self.run_main(['-', '--preamble', '// header'])
        self.assertEqual(code, 0)
        self.assertEqual(stdout, '// header\nexport interface A {\n}\n\n')

    def test_flags_override_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / 'api.rs'
            source.write_text(self.SOURCE, encoding='utf-8')
            config = Path(tmp) / 'bel.json'
            config.write_text(json.dumps({'generate': {'namespace': 'FromFile', 'preamble': None}}),
                              encoding='utf-8')
            code, stdout, _ = self.run_main([str(source), '--stdout', '--config', str(config),
                                             '--namespace', 'FromFlag'])
        self.assertEqual(code, 0)
        self.assertTrue(stdout.startswith('export namespace FromFlag {'))

    def test_verbose_lists_diagnostics(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / 'api.rs'
            source.write_text(self.SOURCE, encoding='utf-8')
            code, _, stderr = self.run_main([str(source), '--stdout', '-v'])
        self.assertEqual(code, 0)
        self.assertIn('(W001)', stderr)

    def test_syntax_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / 'bad.rs'
            source.write_text('struct Broken {', encoding='utf-8')
            code, stdout, stderr = self.run_main([str(source)])
            self.assertFalse((Path(tmp) / 'bad.ts').exists())
        self.assertEqual(code, 1)
        self.assertTrue(stderr.startswith('Error: expected'))
        self.assertEqual(stdout, '')

    def test_malformed_literal_reports_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / 'bad.rs'
            source.write_text('enum E { A = "\\u{110000}" }', encoding='utf-8')
            code, stdout, stderr = self.run_main([str(source), '--stdout'])
        self.assertEqual(code, 1)
        self.assertEqual(stdout, '')
        self.assertTrue(stderr.startswith('Error: invalid unicode character escape'))

    def test_missing_input(self):
        code, _, stderr = self.run_main(['/nonexistent/input.rs'])
        self.assertEqual(code, 1)
        self.assertIn('is not a valid file', stderr)

    def test_bad_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / 'api.rs'
            source.write_text(self.SOURCE, encoding='utf-8')
            code, _, stderr = self.run_main([str(source), '--config', str(Path(tmp) / 'nope.json')])
        self.assertEqual(code, 1)
        self.assertIn('Error: cannot read options file', stderr)


class TestDiagnostics(unittest.TestCase):
    """Test the diagnostics collector."""

    def test_diagnostics_collect_warnings(self):
        diag = TranspilerDiagnostics()
        diag.warn_unsupported_type('Tuple', 'Demo', 3)
        diag.warn_trait_item_skipped('type', 'Service')
        diag.info_reserved_option('embed_structs')
        self.assertEqual(diag.count, 3)
        self.assertEqual(len(diag.warnings), 2)
        self.assertEqual(str(diag.warnings[0]), '[warning] Demo:3: Tuple type is not supported; using "any". (W001)')

    def test_diagnostics_summary(self):
        diag = TranspilerDiagnostics()
        diag.warn_unsupported_type('Tuple')
        diag.warn_unsupported_type('Slice')
        diag.warn_discriminant_ignored('A', 'E')
        self.assertEqual(diag.get_summary(), 'Generator warnings: 1 discriminant, 2 type')

    def test_diagnostics_no_warnings(self):
        diag = TranspilerDiagnostics()
        diag.info_item_skipped('fn', 4)
        self.assertEqual(diag.get_summary(), 'No generator warnings.')

    def test_diagnostics_clear(self):
        diag = TranspilerDiagnostics()
        diag.warn_unnamed_field_skipped(0, 'Wrapper')
        diag.clear()
        self.assertEqual(diag.count, 0)

    def test_print_summary(self):
        diag = TranspilerDiagnostics(verbose=True)
        diag.warn_unsupported_type('Reference', 'Demo', 2)
        diag.info_item_skipped('impl', 7)
        out = io.StringIO()
        diag.print_summary(out)
        text = out.getvalue()
        self.assertIn('Generator warnings (1):', text)
        self.assertIn('  type: 1 occurrence(s)', text)
        self.assertIn('Generator info (1):', text)
        self.assertIn('line 7', text)

    def test_print_summary_silent_without_diagnostics(self):
        out = io.StringIO()
        TranspilerDiagnostics().print_summary(out)
        self.assertEqual(out.getvalue(), '')


if __name__ == '__main__':
    unittest.main(verbosity=2)
