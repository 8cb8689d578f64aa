"""
Naming-convention translation between Rust and TypeScript.
"""


def snake_to_camel(name: str) -> str:
    """Convert a snake_case field name to camelCase for JSON compatibility.

    The first segment is kept as is. Each later segment gets its first
    character upper-cased, and empty segments (from leading, trailing or
    doubled underscores) are dropped:

        foo_bar_baz -> fooBarBaz
        foo__bar_   -> fooBar
        fooBar      -> fooBar
    """
    parts = name.split('_')
    if len(parts) == 1:
        return name

    result = parts[0]
    for part in parts[1:]:
        if part:
            result += part[0].upper() + part[1:]
    return result
