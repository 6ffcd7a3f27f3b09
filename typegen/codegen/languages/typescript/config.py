"""
TypeScript-specific configuration and validation.

Folder layout and import aliases of the Angular front-end project.
"""

from typing import Any, Dict, List

from typegen.codegen.core.config import GeneratorConfig

ENUMS_FOLDER = "enums"
MODELS_FOLDER = "models"
SERVICES_FOLDER = "services/http"

ENTITY_BASE_SERVICE = "ApiEntityBaseService"
VIEW_BASE_SERVICE = "ApiViewBaseService"

VALID_PROPERTY_CASES = {"camel", "pascal", "original"}


def validate_typescript_config(config: GeneratorConfig) -> List[str]:
    """
    Validate the front-end relevant parts of a configuration.

    Returns:
        List of validation warnings
    """
    warnings = []

    for name in ("enum_import_alias", "model_import_alias", "service_import_alias"):
        alias = getattr(config, name)
        if not alias or " " in alias or alias.endswith("/"):
            warnings.append(f"Invalid {name}: {alias!r}")

    if config.property_case not in VALID_PROPERTY_CASES:
        warnings.append(f"Unsupported property_case for TypeScript: {config.property_case}")

    if config.angular_source_path.startswith("/"):
        warnings.append(
            f"angular_source_path must be relative to the project: {config.angular_source_path}"
        )

    return warnings


# Default configuration for the Angular front-end target
ANGULAR_CONFIG: Dict[str, Any] = {
    "angular_source_path": "src/app",
    "enum_import_alias": "@app-enums",
    "model_import_alias": "@app-models",
    "service_import_alias": "@app-services",
    "property_case": "camel",
}
