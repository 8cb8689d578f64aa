"""
Options for extraction and generation.

Both option sets can be built in code or loaded from a JSON options file:

    {
        "extract": {"embed_structs": false},
        "generate": {"namespace": "Api", "generate_enums_as_sum_types": true}
    }
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .errors import ConfigError


DEFAULT_PREAMBLE = '// generated using bel\n// DO NOT MODIFY'


@dataclass
class ExtractOptions:
    """Options for the extraction process.

    All four flags are accepted for compatibility but reserved: extraction
    resolves nested types by name only and keeps declaration order.
    """
    embed_structs: bool = False
    follow_structs: bool = False
    no_anon_structs: bool = False
    sort_alphabetically: bool = False

    def reserved_flags_set(self) -> List[str]:
        """Return the names of the flags that are set."""
        return [f.name for f in fields(self) if getattr(self, f.name)]


@dataclass
class GeneratorOptions:
    """Options for rendering TypeScript."""
    namespace: Optional[str] = None
    preamble: Optional[str] = DEFAULT_PREAMBLE
    generate_enums_as_sum_types: bool = False
    sort_alphabetically: bool = False


# Accepted JSON value types per option
_OPTION_TYPES = {
    ExtractOptions: {
        'embed_structs': (bool,),
        'follow_structs': (bool,),
        'no_anon_structs': (bool,),
        'sort_alphabetically': (bool,),
    },
    GeneratorOptions: {
        'namespace': (str, type(None)),
        'preamble': (str, type(None)),
        'generate_enums_as_sum_types': (bool,),
        'sort_alphabetically': (bool,),
    },
}

_SECTIONS = {
    'extract': ExtractOptions,
    'generate': GeneratorOptions,
}


def _build(options_class, section: str, values) -> Union[ExtractOptions, GeneratorOptions]:
    """Build one options object from a JSON section, validating keys and types."""
    if not isinstance(values, dict):
        raise ConfigError(f'"{section}" must be an object')

    accepted = _OPTION_TYPES[options_class]
    for key, value in values.items():
        if key not in accepted:
            raise ConfigError(f'unknown option "{section}.{key}"')
        if not isinstance(value, accepted[key]):
            expected = ' or '.join('null' if t is type(None) else t.__name__ for t in accepted[key])
            raise ConfigError(f'option "{section}.{key}" must be {expected}')
    return options_class(**values)


def options_from_dict(data) -> Tuple[ExtractOptions, GeneratorOptions]:
    """Build both option sets from a decoded options document."""
    if not isinstance(data, dict):
        raise ConfigError('options file must contain a JSON object')
    for section in data:
        if section not in _SECTIONS:
            raise ConfigError(f'unknown options section "{section}"')

    extract_options = _build(ExtractOptions, 'extract', data.get('extract', {}))
    generator_options = _build(GeneratorOptions, 'generate', data.get('generate', {}))
    return extract_options, generator_options


def load_options(path: Union[str, Path]) -> Tuple[ExtractOptions, GeneratorOptions]:
    """
    Load extraction and generation options from a JSON file.

    Args:
        path: Path of the options file

    Returns:
        (ExtractOptions, GeneratorOptions); missing sections and keys keep
        their defaults

    Raises:
        ConfigError: if the file cannot be read, is not valid JSON, or
            contains unknown sections, unknown keys or wrongly typed values
    """
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f'cannot read options file {path}: {e}') from e
    except json.JSONDecodeError as e:
        raise ConfigError(f'invalid JSON in options file {path}: {e}') from e
    return options_from_dict(data)
