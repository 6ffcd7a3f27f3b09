"""
C# code generator module.

Generates transmission models (partial classes) and their inheritance
stubs from the extracted type graph.
"""

from .config import WEB_API_CONFIG, validate_csharp_config
from .generator import CSharpGenerator, create_csharp_generator
from .types import CSharpType, CSharpTypeMapper

__all__ = [
    "CSharpGenerator",
    "CSharpType",
    "CSharpTypeMapper",
    "WEB_API_CONFIG",
    "create_csharp_generator",
    "validate_csharp_config",
]
