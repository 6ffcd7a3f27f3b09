"""
TypeScript code generator implementation.

Generates the Angular front-end artifacts: enums, interface models and
http services.
"""

from typing import Any, Dict, List, Optional, Tuple

from ...core.artifact import GeneratedArtifact, ItemType, UnitType
from ...core.config import TYPESCRIPT_FILE_EXTENSION, load_config
from ...core.generator import CodeGenerator
from ...core.imports import create_import
from ...core.naming import (
    NamingCase,
    convert_case,
    convert_file_item,
    create_sub_path,
    join_path,
    to_module_identifier,
)
from ...core.schema import PropertyDescriptor, TypeDescriptor, TypeGraph, TypeKind
from .config import (
    ANGULAR_CONFIG,
    ENTITY_BASE_SERVICE,
    ENUMS_FOLDER,
    MODELS_FOLDER,
    SERVICES_FOLDER,
    VIEW_BASE_SERVICE,
    validate_typescript_config,
)
from .types import TypeScriptTypeMapper


class TypeScriptGenerator(CodeGenerator):
    """Code generator for Angular enums, models and services."""

    @property
    def language_name(self) -> str:
        """Return the target name."""
        return "typescript"

    @property
    def file_extension(self) -> str:
        """Return TypeScript file extension."""
        return TYPESCRIPT_FILE_EXTENSION

    @property
    def unit_type(self) -> UnitType:
        return UnitType.ANGULAR_APP

    @property
    def item_types(self) -> Tuple[ItemType, ...]:
        return (ItemType.TYPESCRIPT_ENUM, ItemType.TYPESCRIPT_MODEL, ItemType.TYPESCRIPT_SERVICE)

    def candidates(self, item_type: ItemType, graph: TypeGraph) -> List[TypeDescriptor]:
        if item_type == ItemType.TYPESCRIPT_ENUM:
            return graph.enums
        return graph.models

    # Names and paths

    def property_name(self, prop: PropertyDescriptor) -> str:
        return convert_case(prop.name, NamingCase(self.config.property_case))

    def sub_file_path(self, folder: str, descriptor: TypeDescriptor, file_item: str) -> str:
        """``<source path>/<folder>/<namespace sub path>/<file item>.ts``"""
        return join_path(
            self.config.angular_source_path,
            folder,
            create_sub_path(descriptor.namespace),
            f"{convert_file_item(file_item)}{self.file_extension}",
        )

    def full_name(self, folder: str, descriptor: TypeDescriptor) -> str:
        return to_module_identifier(
            self.config.angular_source_path,
            folder,
            create_sub_path(descriptor.namespace),
            descriptor.name,
        )

    def base_interface(self, descriptor: TypeDescriptor) -> str:
        """First mapped ancestor, nearest first; ``object`` when none maps."""
        for ancestor in descriptor.ancestors:
            if ancestor in self.config.angular_base_class_mapping:
                return self.config.angular_base_class_mapping[ancestor]
        return "object"

    def emit(self, item_type: ItemType, descriptor: TypeDescriptor,
             graph: TypeGraph) -> GeneratedArtifact:
        if item_type == ItemType.TYPESCRIPT_ENUM:
            return self.create_enum(descriptor)
        if item_type == ItemType.TYPESCRIPT_MODEL:
            return self.create_model(descriptor, graph)
        if item_type == ItemType.TYPESCRIPT_SERVICE:
            return self.create_service(descriptor)
        raise ValueError(f"{self.language_name} does not emit {item_type.value}")

    # Enum

    def create_enum(self, descriptor: TypeDescriptor) -> GeneratedArtifact:
        """Create a TypeScript enum with explicit member values."""
        artifact = self.new_artifact(
            ItemType.TYPESCRIPT_ENUM,
            descriptor,
            self.full_name(ENUMS_FOLDER, descriptor),
            self.sub_file_path(ENUMS_FOLDER, descriptor, descriptor.name),
        )
        artifact.supports_custom_imports = False

        if not self.hooks.run_before(ItemType.TYPESCRIPT_ENUM, artifact, descriptor):
            artifact.add(f"export enum {descriptor.name} {{")
            for member in descriptor.members:
                artifact.add(f"  {member.name} = {member.value},")
            artifact.add("}")
        self.hooks.run_after(ItemType.TYPESCRIPT_ENUM, artifact, descriptor)
        return artifact

    # Model

    def create_model(self, descriptor: TypeDescriptor, graph: TypeGraph) -> GeneratedArtifact:
        """Create the interface model of an entity or view."""
        mapper = TypeScriptTypeMapper(graph)
        base = self.base_interface(descriptor)
        artifact = self.new_artifact(
            ItemType.TYPESCRIPT_MODEL,
            descriptor,
            self.full_name(MODELS_FOLDER, descriptor),
            self.sub_file_path(MODELS_FOLDER, descriptor, descriptor.name),
        )

        if base != "object":
            artifact.imports.append(
                create_import(self.config.model_import_alias, base, "")
            )
        artifact.imports.extend(self.import_resolver(graph).statements(descriptor))

        if not self.hooks.run_before(ItemType.TYPESCRIPT_MODEL, artifact, descriptor):
            if base != "object":
                artifact.add(f"export interface {descriptor.name} extends {base} {{")
            else:
                artifact.add(f"export interface {descriptor.name} {{")

            for prop in descriptor.properties:
                ts_type = mapper.map_property(prop)
                if ts_type is None:
                    self.diagnostics.warn(
                        f"{descriptor.name}.{prop.name}",
                        f"no TypeScript type for '{prop.type_name}'; property skipped",
                    )
                    continue
                artifact.add(f"  {self.property_name(prop)}: {ts_type};")

            artifact.add("}")
        self.hooks.run_after(ItemType.TYPESCRIPT_MODEL, artifact, descriptor)
        return artifact

    # Service

    def service_context(self, descriptor: TypeDescriptor) -> Dict[str, Any]:
        base_service = (
            VIEW_BASE_SERVICE if descriptor.kind == TypeKind.VIEW else ENTITY_BASE_SERVICE
        )
        return {
            "entity_name": descriptor.name,
            "model_name": descriptor.name,
            "base_service": base_service,
            "base_service_module": convert_file_item(base_service[: -len("Service")]) + ".service",
            "service_alias": self.config.service_import_alias,
        }

    def create_service(self, descriptor: TypeDescriptor) -> GeneratedArtifact:
        """Create the http service of an entity or view."""
        artifact = self.new_artifact(
            ItemType.TYPESCRIPT_SERVICE,
            descriptor,
            self.full_name(SERVICES_FOLDER, descriptor),
            self.sub_file_path(SERVICES_FOLDER, descriptor, f"{descriptor.name}Service"),
        )
        context = self.service_context(descriptor)

        artifact.imports.extend(self.render_lines("typescript/service_imports.ts", context))
        artifact.imports.append(
            create_import(
                self.config.model_import_alias,
                descriptor.name,
                create_sub_path(descriptor.namespace),
            )
        )

        if not self.hooks.run_before(ItemType.TYPESCRIPT_SERVICE, artifact, descriptor):
            artifact.extend(self.render_lines("typescript/service.ts", context))
        self.hooks.run_after(ItemType.TYPESCRIPT_SERVICE, artifact, descriptor)
        return artifact

    def validate_graph(self, graph: TypeGraph) -> List[str]:
        """Validate the graph and configuration for TypeScript generation."""
        warnings = super().validate_graph(graph)
        warnings.extend(validate_typescript_config(self.config))

        for descriptor in graph.enums:
            if not descriptor.members:
                warnings.append(f"Enum {descriptor.name} has no members")

        return warnings


# Factory functions
def create_typescript_generator(config: Optional[Dict[str, Any]] = None,
                                **kwargs) -> TypeScriptGenerator:
    """Create a TypeScript generator with the default Angular configuration."""
    merged_config = dict(ANGULAR_CONFIG)
    if config:
        merged_config.update(config)

    return TypeScriptGenerator(load_config(custom_config=merged_config), **kwargs)
