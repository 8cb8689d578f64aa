"""
Rust to TypeScript declaration generator

This package converts the structs, enums and traits of a Rust source file
to TypeScript interfaces, enums and union types.

Module Structure:
- lexer/: Tokenization (TokenType, Token, Lexer)
- parser/: AST nodes and parsing (Parser, all AST node types)
- type_system/: Intermediate type model and Rust type mappings
- extract/: Declaration extraction (Extractor, EnumValue, declarations)
- codegen/: TypeScript rendering (TypeScriptGenerator)
- rs2ts.py: Pipeline facade and command-line interface

Usage:
    from bel import transpile, GeneratorOptions

    ts_code = transpile(source, generator_options=GeneratorOptions(namespace='Api'))
"""

from .config import ExtractOptions, GeneratorOptions, DEFAULT_PREAMBLE, load_options
from .errors import BelError, SourceSyntaxError, EnumValueRangeError, OutputError, ConfigError
from .diagnostics import TranspilerDiagnostics, Diagnostic, DiagnosticSeverity
from .extract import Extractor, extract
from .codegen import TypeScriptGenerator
from .rs2ts import transpile, transpile_to, RustToTypeScriptTranspiler

__all__ = [
    'ExtractOptions',
    'GeneratorOptions',
    'DEFAULT_PREAMBLE',
    'load_options',
    'BelError',
    'SourceSyntaxError',
    'EnumValueRangeError',
    'OutputError',
    'ConfigError',
    'TranspilerDiagnostics',
    'Diagnostic',
    'DiagnosticSeverity',
    'Extractor',
    'extract',
    'TypeScriptGenerator',
    'transpile',
    'transpile_to',
    'RustToTypeScriptTranspiler',
]
