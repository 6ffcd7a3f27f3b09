"""
Configuration management for code generation.

A single GeneratorConfig is built once per run and handed to every
component. ConfigManager merges defaults, an optional JSON file and
keyword overrides.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


# Region markers, must match bit-exact on read and write
CUSTOM_IMPORT_BEGIN_LABEL = "//@CustomImportBegin"
CUSTOM_IMPORT_END_LABEL = "//@CustomImportEnd"
CUSTOM_CODE_BEGIN_LABEL = "//@CustomCodeBegin"
CUSTOM_CODE_END_LABEL = "//@CustomCodeEnd"
GENERATED_CODE_LABEL = "//@GeneratedCode"

CSHARP_FILE_EXTENSION = ".cs"
TYPESCRIPT_FILE_EXTENSION = ".ts"
CUSTOM_FILE_EXTENSION = ".custom"

ALL_ITEMS = "All"


@dataclass
class GeneratorConfig:
    """Run-wide configuration for all generators."""

    # Output settings
    output_path: Path = field(default_factory=Path.cwd)
    unit_folders: Dict[str, str] = field(
        default_factory=lambda: {"WebApi": "webapi", "AngularApp": "angular"}
    )

    # Transmission model settings
    root_namespace: str = "App"
    models_folder: str = "Models"
    model_base_class_mapping: Dict[str, str] = field(
        default_factory=lambda: {
            "EntityObject": "ModelObject",
            "VersionEntityObject": "VersionModelObject",
            "ViewObject": "ViewModelObject",
        }
    )

    # Front-end settings
    angular_source_path: str = "src/app"
    angular_base_class_mapping: Dict[str, str] = field(
        default_factory=lambda: {
            "EntityObject": "IdentityModel",
            "VersionEntityObject": "VersionModel",
            "ViewObject": "ViewModel",
        }
    )
    enum_import_alias: str = "@app-enums"
    model_import_alias: str = "@app-models"
    service_import_alias: str = "@app-services"
    property_case: str = "camel"  # camel, pascal, original

    # Extraction
    version_properties: Tuple[str, ...] = ("RowVersion",)

    # Custom regions and files
    custom_import_begin_label: str = CUSTOM_IMPORT_BEGIN_LABEL
    custom_import_end_label: str = CUSTOM_IMPORT_END_LABEL
    custom_code_begin_label: str = CUSTOM_CODE_BEGIN_LABEL
    custom_code_end_label: str = CUSTOM_CODE_END_LABEL
    custom_file_extension: str = CUSTOM_FILE_EXTENSION
    customizable_extensions: Tuple[str, ...] = (
        CSHARP_FILE_EXTENSION,
        TYPESCRIPT_FILE_EXTENSION,
    )

    # Writing
    write_info_header: bool = True
    generated_code_label: str = GENERATED_CODE_LABEL
    add_comments: bool = True
    formatter: Optional[Callable[[List[str]], List[str]]] = field(
        default=None, repr=False, compare=False
    )

    # Execution
    max_workers: int = 1

    # Custom settings (target-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.output_path = Path(self.output_path)
        self.version_properties = tuple(self.version_properties)
        self.customizable_extensions = tuple(
            ext.lower() for ext in self.customizable_extensions
        )

    def project_path(self, unit: str) -> Path:
        """Return the output root of a target unit."""
        unit_key = getattr(unit, "value", unit)
        return self.output_path / self.unit_folders.get(unit_key, unit_key.lower())

    @property
    def region_labels(self) -> Tuple[str, str, str, str]:
        return (
            self.custom_import_begin_label,
            self.custom_import_end_label,
            self.custom_code_begin_label,
            self.custom_code_end_label,
        )


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = {}

    def set_defaults(self, **defaults: Any) -> None:
        """Register defaults applied before files and overrides."""
        self._defaults.update(defaults)

    def get_config(self, custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Build a complete configuration.

        Args:
            custom_config: Configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = dict(self._defaults)

        if config_file:
            base_config.update(self._load_config_file(config_file))

        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration file %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get('custom', {}))
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        try:
            return GeneratorConfig(**config_args)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = {
            "output_path": str(config.output_path),
            "unit_folders": config.unit_folders,
            "root_namespace": config.root_namespace,
            "models_folder": config.models_folder,
            "model_base_class_mapping": config.model_base_class_mapping,
            "angular_source_path": config.angular_source_path,
            "angular_base_class_mapping": config.angular_base_class_mapping,
            "enum_import_alias": config.enum_import_alias,
            "model_import_alias": config.model_import_alias,
            "service_import_alias": config.service_import_alias,
            "property_case": config.property_case,
            "version_properties": list(config.version_properties),
            "custom_file_extension": config.custom_file_extension,
            "write_info_header": config.write_info_header,
            "add_comments": config.add_comments,
            "max_workers": config.max_workers,
        }

        config_dict.update(config.custom)

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate a configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.property_case not in {"camel", "pascal", "original"}:
            warnings.append(f"Invalid property_case: {config.property_case}")

        if config.max_workers < 1:
            warnings.append(f"max_workers must be at least 1, got {config.max_workers}")

        labels = config.region_labels
        if len(set(labels)) != len(labels):
            warnings.append("Custom region labels must be distinct")

        if any(label != label.strip() or not label for label in labels):
            warnings.append("Custom region labels must not be empty or carry surrounding whitespace")

        if not config.custom_file_extension.startswith("."):
            warnings.append(
                f"custom_file_extension should start with '.': {config.custom_file_extension}"
            )

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    return get_config_manager().get_config(custom_config, config_file)
