"""
typegen Code Generation Module

Generates transmission models and front-end artifacts from type metadata.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_registry,
    get_target_info,
    is_target_supported,
    list_all_target_info,
    list_supported_targets,
)
from .core.artifact import GeneratedArtifact, ItemType, UnitType
from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.diagnostics import Diagnostics
from .core.extractor import extract_type_graph
from .core.generator import (
    CodeGenerator,
    GenerationHooks,
    GenerationResult,
    GeneratorError,
    PathCollisionError,
    generate_code,
)
from .core.schema import PropertyDescriptor, TypeDescriptor, TypeGraph
from .core.settings import SettingsResolver, SettingsStore
from .core.writer import ArtifactWriter

# Version info
__version__ = "0.1.0"

DEFAULT_TARGETS = ("csharp", "typescript")


# Convenience functions
def generate_from_metadata(
    metadata: Dict[str, Any],
    targets: Sequence[str] = DEFAULT_TARGETS,
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    settings: Optional[Union[SettingsResolver, List[Dict[str, Any]]]] = None,
    hooks: Optional[GenerationHooks] = None,
) -> GenerationResult:
    """
    Generate artifacts from a metadata document.

    Args:
        metadata: Parsed metadata document (``{"types": [...]}``)
        targets: Target names or aliases
        config: Generator configuration (object, dict or file path)
        settings: Settings resolver or raw setting entries
        hooks: Customization hooks shared by all targets

    Returns:
        GenerationResult with the artifacts of every target
    """
    if isinstance(config, GeneratorConfig):
        run_config = config
    elif isinstance(config, (str, Path)):
        run_config = load_config(config_file=config)
    else:
        run_config = load_config(custom_config=config)

    if settings is None or isinstance(settings, SettingsResolver):
        resolver = settings if settings is not None else SettingsResolver()
    else:
        resolver = SettingsResolver(SettingsStore.from_entries(settings))

    diagnostics = Diagnostics()
    marker = len(diagnostics)
    graph = extract_type_graph(metadata, run_config, diagnostics=diagnostics)
    extraction_warnings = diagnostics.messages[marker:]

    generators = [
        get_generator(
            target, run_config, settings=resolver, hooks=hooks, diagnostics=diagnostics
        )
        for target in targets
    ]
    result = generate_code(generators, graph, run_config)
    result.warnings[0:0] = extraction_warnings
    return result


# Export main interfaces
__all__ = [
    "ArtifactWriter",
    "CodeGenerator",
    "ConfigManager",
    "Diagnostics",
    "GeneratedArtifact",
    "GenerationHooks",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "GeneratorRegistry",
    "ItemType",
    "PathCollisionError",
    "PropertyDescriptor",
    "RegistryError",
    "SettingsResolver",
    "SettingsStore",
    "TypeDescriptor",
    "TypeGraph",
    "UnitType",
    "extract_type_graph",
    "generate_code",
    "generate_from_metadata",
    "get_generator",
    "get_registry",
    "get_target_info",
    "is_target_supported",
    "list_all_target_info",
    "list_supported_targets",
    "load_config",
]
