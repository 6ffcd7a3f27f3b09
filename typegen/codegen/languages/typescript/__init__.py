"""
TypeScript code generator module.

Generates Angular enums, interface models and http services from the
extracted type graph.
"""

from .config import ANGULAR_CONFIG, validate_typescript_config
from .generator import TypeScriptGenerator, create_typescript_generator
from .types import TypeScriptTypeMapper

__all__ = [
    "ANGULAR_CONFIG",
    "TypeScriptGenerator",
    "TypeScriptTypeMapper",
    "create_typescript_generator",
    "validate_typescript_config",
]
