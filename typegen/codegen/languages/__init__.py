"""
Target-specific code generators.

This module contains the generators for the supported targets.
"""

from .csharp import CSharpGenerator, create_csharp_generator
from .typescript import TypeScriptGenerator, create_typescript_generator

__all__ = [
    "CSharpGenerator",
    "TypeScriptGenerator",
    "create_csharp_generator",
    "create_typescript_generator",
]
