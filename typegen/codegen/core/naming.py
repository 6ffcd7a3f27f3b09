"""
Naming utilities for code generation.

Case conversions, pluralization and the file-item/path conventions shared
by all targets. Every function here is pure and deterministic: stable
output paths are what lets the region engine find the previous version of
an artifact.
"""

import re
from enum import Enum

from pluralizer import Pluralizer

_pluralizer = Pluralizer()


class NamingCase(Enum):
    """Member naming styles of generated front-end code."""
    CAMEL_CASE = "camel"      # orderNumber
    PASCAL_CASE = "pascal"    # OrderNumber
    ORIGINAL = "original"     # unchanged


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    name = name.replace('-', '_')
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
    name = name.lower()
    name = re.sub(r'_+', '_', name)
    return name.strip('_')


def to_camel_case(name: str) -> str:
    """Convert to camelCase."""
    parts = to_snake_case(name).split('_')
    if not parts or not parts[0]:
        return name
    return parts[0].lower() + ''.join(part.capitalize() for part in parts[1:])


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase."""
    return ''.join(part.capitalize() for part in to_snake_case(name).split('_') if part)


def convert_case(name: str, target_case: NamingCase) -> str:
    """
    Convert a member name to the target case style.

    Only the first character changes, so acronyms inside the name
    (``OrderID``, ``IPAddress``) keep their spelling.
    """
    if target_case == NamingCase.CAMEL_CASE:
        return lower_first(name)
    elif target_case == NamingCase.PASCAL_CASE:
        return upper_first(name)
    return name


def lower_first(name: str) -> str:
    """Lower-case only the first character."""
    return name[:1].lower() + name[1:]


def upper_first(name: str) -> str:
    """Upper-case only the first character."""
    return name[:1].upper() + name[1:]


def convert_file_item(file_item: str) -> str:
    """
    Convert a name or relative path into the file-item convention.

    The first character is lower-cased, every later upper-case letter gets
    a '-' in front of it unless it directly follows a path separator, and
    backslashes become '/'. ``CustomerOrderItem`` -> ``customer-order-item``,
    ``Sales\\OrderItem`` -> ``sales/order-item``.
    """
    result = []

    for char in file_item:
        if not result:
            result.append(char.lower())
        elif char in '\\/':
            result.append('/')
        elif char.isupper():
            if result[-1] != '/':
                result.append('-')
            result.append(char.lower())
        else:
            result.append(char.lower())

    return ''.join(result)


def create_sub_path(namespace: str) -> str:
    """Turn a dotted declaring-module path into a file-item sub path."""
    segments = [segment for segment in namespace.split('.') if segment]
    return convert_file_item('/'.join(segments)) if segments else ''


def join_path(*parts: str) -> str:
    """Join non-empty path parts with '/'."""
    return '/'.join(part.strip('/') for part in parts if part and part.strip('/'))


def to_module_identifier(*parts: str, lower: bool = False) -> str:
    """Join name parts into a dotted module identifier, skipping empty parts."""
    segments = []
    for part in parts:
        segments.extend(s for s in re.split(r'[./\\]', part or '') if s)
    identifier = '.'.join(segments)
    return identifier.lower() if lower else identifier


def pluralize(word: str) -> str:
    """Return the plural form of an English word."""
    if not word:
        return word
    return _pluralizer.plural(word)


def strip_interface_prefix(name: str) -> str:
    """Drop the conventional leading 'I' of an interface name (``IAddress`` -> ``Address``)."""
    if len(name) > 1 and name[0] == 'I' and name[1].isupper():
        return name[1:]
    return name
