"""Helper functionality that is used in other modules of this package."""

from __future__ import annotations

from typing import Any

from csharp_proxy_generator import dotnet_types


def sanitize_name(name: str) -> str:
    """Sanitize a name to avoid C# keywords.

    If the name is a C# keyword, prefix it with `@`, which makes it a verbatim identifier.
    E.g. 'event' becomes '@event', 'class' becomes '@class'.

    Args:
        name (str): The original name.

    Returns:
        str: The sanitized name.
    """
    if name in dotnet_types.CSHARP_KEYWORDS:
        return f"@{name}"
    return name


def strip_generic_arity(type_name: str) -> str:
    """Remove the arity marker from a CLR generic type name.

    Examples:
        >>> strip_generic_arity("List`1")
        'List'
        >>> strip_generic_arity("Dictionary`2")
        'Dictionary'
        >>> strip_generic_arity("BookDto")
        'BookDto'

    Args:
        type_name (str): The CLR type name, e.g. "List`1".

    Returns:
        str: The name without the arity marker.
    """
    marker_index = type_name.find(dotnet_types.GENERIC_ARITY_MARKER)
    if marker_index < 0:
        return type_name
    return type_name[:marker_index]


def normalize_type_name(type_name: str) -> str:
    """Map a CLR primitive type name to its C# alias.

    Array names alias their element type, so `Int32[]` becomes `int[]`.
    Names without an alias are returned unchanged.

    Args:
        type_name (str): The CLR type name, e.g. "Int32".

    Returns:
        str: The C# type name, e.g. "int".
    """
    element_name = type_name.rstrip("[]")
    rank_suffix = type_name[len(element_name) :]
    return f"{dotnet_types.CLR_TYPE_TO_CSHARP.get(element_name, element_name)}{rank_suffix}"


def simple_name(full_name: str) -> str:
    """The last segment of a dotted full name."""
    return full_name.rsplit(".", 1)[-1]


def to_pascal_case(name: str) -> str:
    """Upper-case the first character of a camelCase JSON property name."""
    if not name:
        return name
    return name[0].upper() + name[1:]


def pascal_case_keys(value: Any) -> Any:
    """Recursively convert the keys of all JSON objects in a value to PascalCase.

    Args:
        value (Any): A decoded JSON value.

    Returns:
        Any: The same structure with PascalCase object keys; key order is preserved.
    """
    if isinstance(value, dict):
        return {to_pascal_case(key): pascal_case_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [pascal_case_keys(item) for item in value]
    return value


def csharp_string_literal(text: str) -> str:
    """Quote a text as a regular C# string literal.

    Args:
        text (str): The raw text.

    Returns:
        str: The text with backslashes and quotes escaped, wrapped in double quotes.
    """
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
