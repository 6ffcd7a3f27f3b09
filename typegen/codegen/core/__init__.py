"""
Core code generation components.

Provides base classes and utilities used by all target generators.
"""

from .artifact import GeneratedArtifact, ItemType, RegionState, UnitType
from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .diagnostics import Diagnostic, Diagnostics
from .extractor import (
    ExtractionError,
    MetadataProvider,
    RawProperty,
    RawType,
    TypeGraphExtractor,
    extract_type_graph,
)
from .generator import (
    CodeGenerator,
    GenerationHooks,
    GenerationResult,
    GeneratorError,
    PathCollisionError,
    generate_code,
)
from .imports import ImportCategory, ImportDescriptor, ImportResolver, insert_imports
from .naming import NamingCase, convert_file_item, create_sub_path, pluralize
from .regions import CustomRegion, CustomRegionEngine, RegionKind, read_and_delete
from .schema import (
    EnumMember,
    PropertyDescriptor,
    TypeDescriptor,
    TypeGraph,
    TypeKind,
    ValueKind,
)
from .settings import Setting, SettingsResolver, SettingsStore
from .templates import TemplateEngine, TemplateError, create_template_engine
from .writer import ArtifactWriter

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "PathCollisionError",
    "GenerationHooks",
    "GenerationResult",
    "generate_code",
    # Descriptor graph
    "EnumMember",
    "PropertyDescriptor",
    "TypeDescriptor",
    "TypeGraph",
    "TypeKind",
    "ValueKind",
    # Extraction
    "ExtractionError",
    "MetadataProvider",
    "RawProperty",
    "RawType",
    "TypeGraphExtractor",
    "extract_type_graph",
    # Artifacts
    "GeneratedArtifact",
    "ItemType",
    "RegionState",
    "UnitType",
    # Settings
    "Setting",
    "SettingsResolver",
    "SettingsStore",
    # Naming utilities
    "NamingCase",
    "convert_file_item",
    "create_sub_path",
    "pluralize",
    # Imports and custom regions
    "ImportCategory",
    "ImportDescriptor",
    "ImportResolver",
    "insert_imports",
    "CustomRegion",
    "CustomRegionEngine",
    "RegionKind",
    "read_and_delete",
    # Diagnostics
    "Diagnostic",
    "Diagnostics",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
    # Output
    "ArtifactWriter",
]
