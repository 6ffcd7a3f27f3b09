"""
C#-specific configuration and validation.

Extends the base configuration system with checks for the
transmission-model target.
"""

import re
from typing import Any, Dict, List

from typegen.codegen.core.config import GeneratorConfig

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

CSHARP_KEYWORDS = {
    "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char",
    "checked", "class", "const", "continue", "decimal", "default", "delegate",
    "do", "double", "else", "enum", "event", "explicit", "extern", "false",
    "finally", "fixed", "float", "for", "foreach", "goto", "if", "implicit",
    "in", "int", "interface", "internal", "is", "lock", "long", "namespace",
    "new", "null", "object", "operator", "out", "override", "params",
    "private", "protected", "public", "readonly", "ref", "return", "sbyte",
    "sealed", "short", "sizeof", "stackalloc", "static", "string", "struct",
    "switch", "this", "throw", "true", "try", "typeof", "uint", "ulong",
    "unchecked", "unsafe", "ushort", "using", "virtual", "void", "volatile",
    "while",
}

VISIBILITIES = {"public", "internal", "protected", "private", "protected internal"}


def is_valid_namespace(namespace: str) -> bool:
    """Check that every dotted part is a C# identifier and not a keyword."""
    parts = namespace.split(".")
    return all(_IDENTIFIER.match(part) and part not in CSHARP_KEYWORDS for part in parts)


def validate_csharp_config(config: GeneratorConfig) -> List[str]:
    """
    Validate the C# relevant parts of a configuration.

    Returns:
        List of validation warnings
    """
    warnings = []

    if not is_valid_namespace(config.root_namespace):
        warnings.append(f"Invalid C# root namespace: {config.root_namespace}")

    if not is_valid_namespace(config.models_folder):
        warnings.append(f"Invalid C# models folder: {config.models_folder}")

    for source, target in config.model_base_class_mapping.items():
        if not _IDENTIFIER.match(target):
            warnings.append(f"Invalid model base class for {source}: {target}")

    return warnings


# Default configuration for the transmission-model target
WEB_API_CONFIG: Dict[str, Any] = {
    "root_namespace": "App",
    "models_folder": "Models",
    "version_properties": ["RowVersion"],
    "add_comments": True,
}
