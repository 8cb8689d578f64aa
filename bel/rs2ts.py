#!/usr/bin/env python3
"""
Rust to TypeScript declaration generator

Reads the structs, enums and traits of a Rust source file and writes the
matching TypeScript declarations, for sharing API contracts (e.g. JSON-RPC
payloads) between a Rust backend and a TypeScript client.

Key features:
- Structs become interfaces with camelCase fields
- Option<T> fields (and serde skip_serializing_if fields) become optional
- Vec<T> becomes T[]
- Enums become numeric enums or string-literal union types
- Traits become interfaces of method signatures

Usage:
    python -m bel.rs2ts src/api.rs -o web/api.ts --namespace Api

The package is split into:
- lexer: Tokenization (tokens.py, lexer.py, literals.py)
- parser: AST nodes and parsing (ast_nodes.py, parser.py)
- type_system: Intermediate type model and mappings (model.py, mappings.py)
- extract: Declaration extraction (extractor.py, enums.py, naming.py)
- codegen: TypeScript rendering (generator.py, definition.py)
"""

import sys
from pathlib import Path
from typing import Dict, Optional, Union

from .codegen import TypeScriptGenerator
from .config import ExtractOptions, GeneratorOptions, load_options
from .diagnostics import TranspilerDiagnostics
from .errors import BelError, OutputError
from .extract import Declaration, Extractor


def transpile(
    source: str,
    extract_options: Optional[ExtractOptions] = None,
    generator_options: Optional[GeneratorOptions] = None,
    diagnostics: Optional[TranspilerDiagnostics] = None,
) -> str:
    """
    Convert Rust source text to TypeScript declarations.

    Returns:
        The complete TypeScript text

    Raises:
        BelError: the first failure of extraction or rendering
    """
    declarations = Extractor(extract_options, diagnostics).extract(source)
    return TypeScriptGenerator(generator_options).generate_string(declarations)


def transpile_to(
    source: str,
    writer,
    extract_options: Optional[ExtractOptions] = None,
    generator_options: Optional[GeneratorOptions] = None,
    diagnostics: Optional[TranspilerDiagnostics] = None,
) -> None:
    """Convert Rust source text and write the result to writer.

    Nothing is written unless extraction and rendering both succeed.
    """
    ts_code = transpile(source, extract_options, generator_options, diagnostics)
    _write(writer, ts_code)


def _write(writer, text: str) -> None:
    try:
        writer.write(text)
    except (OSError, ValueError) as e:
        raise OutputError(f'failed to write output: {e}') from e


class RustToTypeScriptTranspiler:
    """Main transpiler class that orchestrates the conversion process."""

    def __init__(
        self,
        extract_options: Optional[ExtractOptions] = None,
        generator_options: Optional[GeneratorOptions] = None,
        verbose: bool = False,
    ):
        self.extract_options = extract_options or ExtractOptions()
        self.generator_options = generator_options or GeneratorOptions()
        self.diagnostics = TranspilerDiagnostics(verbose=verbose)

    def extract(self, source: str) -> Dict[str, Declaration]:
        """Extract the declaration mapping from Rust source text."""
        return Extractor(self.extract_options, self.diagnostics).extract(source)

    def transpile_source(self, source: str) -> str:
        """Convert Rust source text to TypeScript."""
        return transpile(source, self.extract_options, self.generator_options, self.diagnostics)

    def transpile_file(self, filepath: Union[str, Path]) -> str:
        """Read a Rust file and convert it to TypeScript."""
        with open(filepath, encoding='utf-8') as f:
            source = f.read()
        return self.transpile_source(source)

    def write_output(self, ts_code: str, output_path: Union[str, Path]) -> None:
        """Write generated TypeScript to disk, creating parent directories."""
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                f.write(ts_code)
        except OSError as e:
            raise OutputError(f'cannot write {path}: {e}') from e
        print(f"Written: {path}")


# =============================================================================
# CLI INTERFACE
# =============================================================================

def build_arg_parser():
    import argparse

    parser = argparse.ArgumentParser(description='Rust to TypeScript declaration generator')
    parser.add_argument('input', help="Input Rust file, or '-' for stdin")
    parser.add_argument('-o', '--output', help='Output TypeScript file (default: INPUT with .ts suffix)')
    parser.add_argument('--stdout', action='store_true', help='Print to stdout instead of file')
    parser.add_argument('--namespace', metavar='NS', help='Wrap all declarations in "export namespace NS"')
    preamble = parser.add_mutually_exclusive_group()
    preamble.add_argument('--preamble', metavar='TEXT', help='Text written before the declarations')
    preamble.add_argument('--no-preamble', action='store_true', help='Do not write a preamble')
    parser.add_argument('--sum-types', action='store_true',
                        help='Emit enums as string-literal union types')
    parser.add_argument('--sort', action='store_true',
                        help='Sort declarations, fields and methods alphabetically')
    parser.add_argument('--config', metavar='FILE', help='JSON options file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show every diagnostic')
    return parser


def options_from_args(args):
    """Build both option sets: the config file first, then command-line overrides."""
    if args.config:
        extract_options, generator_options = load_options(args.config)
    else:
        extract_options, generator_options = ExtractOptions(), GeneratorOptions()

    if args.namespace is not None:
        generator_options.namespace = args.namespace
    if args.no_preamble:
        generator_options.preamble = None
    elif args.preamble is not None:
        generator_options.preamble = args.preamble
    if args.sum_types:
        generator_options.generate_enums_as_sum_types = True
    if args.sort:
        generator_options.sort_alphabetically = True
    return extract_options, generator_options


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    from_stdin = args.input == '-'
    input_path = Path(args.input)

    if not from_stdin and not input_path.is_file():
        print(f"Error: {args.input} is not a valid file", file=sys.stderr)
        sys.exit(1)

    try:
        extract_options, generator_options = options_from_args(args)
        transpiler = RustToTypeScriptTranspiler(extract_options, generator_options, verbose=args.verbose)

        if from_stdin:
            ts_code = transpiler.transpile_source(sys.stdin.read())
        else:
            ts_code = transpiler.transpile_file(input_path)
        transpiler.diagnostics.print_summary()

        if args.stdout or (from_stdin and not args.output):
            _write(sys.stdout, ts_code)
        else:
            output_path = Path(args.output) if args.output else input_path.with_suffix('.ts')
            transpiler.write_output(ts_code, output_path)
    except (BelError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
