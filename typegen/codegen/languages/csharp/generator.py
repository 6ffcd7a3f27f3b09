"""
C# code generator implementation.

Generates transmission models as partial classes: one file with the
properties, factories, copy and equality members, and one inheritance
stub binding the model to its mapped base class.
"""

from typing import Any, Dict, List, Optional, Tuple

from ...core.artifact import GeneratedArtifact, ItemType, UnitType
from ...core.config import CSHARP_FILE_EXTENSION, load_config
from ...core.generator import CodeGenerator
from ...core.naming import join_path, to_module_identifier
from ...core.schema import PropertyDescriptor, TypeDescriptor, TypeGraph
from .config import VISIBILITIES, WEB_API_CONFIG, validate_csharp_config
from .types import CSharpTypeMapper

MODEL_USINGS = (
    "using System;",
    "using System.Collections.Generic;",
    "using System.Linq;",
)


class CSharpGenerator(CodeGenerator):
    """Code generator for C# transmission models."""

    @property
    def language_name(self) -> str:
        """Return the target name."""
        return "csharp"

    @property
    def file_extension(self) -> str:
        """Return C# file extension."""
        return CSHARP_FILE_EXTENSION

    @property
    def unit_type(self) -> UnitType:
        return UnitType.WEB_API

    @property
    def item_types(self) -> Tuple[ItemType, ...]:
        return (ItemType.MODEL, ItemType.MODEL_INHERITANCE)

    def candidates(self, item_type: ItemType, graph: TypeGraph) -> List[TypeDescriptor]:
        return graph.models

    def settings_queries(self, graph: TypeGraph) -> List[Tuple[Any, ...]]:
        queries = super().settings_queries(graph)
        for descriptor in graph.models:
            for prop in descriptor.properties:
                queries.append(
                    (self.unit_type, ItemType.MODEL_PROPERTY, prop.identity, "Generate", "True", bool)
                )
        return queries

    def type_mapper(self, graph: TypeGraph) -> CSharpTypeMapper:
        return CSharpTypeMapper(graph, self.config.root_namespace, self.config.models_folder)

    def sub_file_path(self, descriptor: TypeDescriptor, postfix: str = "") -> str:
        """``<models folder>/<namespace path>/<Name><postfix>.cs``"""
        return join_path(
            self.config.models_folder,
            descriptor.namespace.replace(".", "/"),
            f"{descriptor.name}{postfix}{self.file_extension}",
        )

    def emit(self, item_type: ItemType, descriptor: TypeDescriptor,
             graph: TypeGraph) -> GeneratedArtifact:
        if item_type == ItemType.MODEL:
            return self.create_model(descriptor, graph)
        if item_type == ItemType.MODEL_INHERITANCE:
            return self.create_model_inheritance(descriptor, graph)
        raise ValueError(f"{self.language_name} does not emit {item_type.value}")

    def finish_artifact(self, artifact: GeneratedArtifact, descriptor: TypeDescriptor) -> None:
        namespace = to_module_identifier(
            self.config.root_namespace, self.config.models_folder, descriptor.namespace
        )
        if artifact.item_type == ItemType.MODEL:
            artifact.envelope_with_namespace(namespace, *MODEL_USINGS)
        else:
            artifact.envelope_with_namespace(namespace)

    # Model

    def generation_properties(self, descriptor: TypeDescriptor) -> List[PropertyDescriptor]:
        """Non-navigation properties whose ModelProperty/Generate setting is on."""
        return [
            prop
            for prop in descriptor.properties
            if not prop.is_navigation
            and self.settings.query_bool(
                self.unit_type, ItemType.MODEL_PROPERTY, prop.identity, "Generate", "True"
            )
        ]

    def create_model(self, descriptor: TypeDescriptor, graph: TypeGraph) -> GeneratedArtifact:
        """Create the transmission model of an entity or view."""
        mapper = self.type_mapper(graph)
        identity = descriptor.qualified_name
        artifact = self.new_artifact(
            ItemType.MODEL, descriptor, mapper.model_full_name(descriptor), self.sub_file_path(descriptor)
        )

        visibility = self.settings.query_text(
            self.unit_type, ItemType.MODEL, identity, "Visibility", "public"
        )
        if visibility not in VISIBILITIES:
            self.diagnostics.warn(identity, f"invalid visibility '{visibility}'; using public")
            visibility = "public"

        if self.config.add_comments:
            artifact.extend(self.create_comment(
                f"This model represents a transmission model for the '{descriptor.name}' data unit."
            ))

        if not self.hooks.run_before(ItemType.MODEL, artifact, descriptor):
            attributes = self.settings.query_text(self.unit_type, ItemType.MODEL, identity, "Attribute", "")
            if attributes:
                artifact.add(f"[{attributes}]")
        self.hooks.run_after(ItemType.MODEL, artifact, descriptor)

        artifact.add(f"{visibility} partial class {descriptor.name}")
        artifact.add("{")

        properties = self.generation_properties(descriptor)
        for prop in properties:
            self.create_property_attributes(artifact, prop)
            artifact.add(self.create_property(prop, mapper))

        lambda_expression = self.settings.query_text(
            self.unit_type, ItemType.MODEL, identity, ItemType.LAMBDA.value, ""
        )
        if lambda_expression:
            artifact.add(f"{lambda_expression};")

        compared = [prop for prop in properties if not prop.is_version]
        artifact.extend(self.create_factories(descriptor))
        artifact.extend(self.create_copy_properties(descriptor, compared, mapper))
        artifact.extend(self.create_equals(descriptor, compared))
        artifact.extend(self.create_get_hash_code(compared))
        artifact.add("}")
        return artifact

    def create_comment(self, text: str) -> List[str]:
        return ["/// <summary>", f"/// {text}", "/// </summary>"]

    def create_property_attributes(self, artifact: GeneratedArtifact, prop: PropertyDescriptor) -> None:
        if not self.hooks.run_before(ItemType.MODEL_PROPERTY, artifact, prop):
            attributes = self.settings.query_text(
                self.unit_type, ItemType.MODEL_PROPERTY, prop.identity, "Attribute", ""
            )
            if attributes:
                artifact.add(f"[{attributes}]")
        self.hooks.run_after(ItemType.MODEL_PROPERTY, artifact, prop)

    def create_property(self, prop: PropertyDescriptor, mapper: CSharpTypeMapper) -> str:
        mapped = mapper.map_property(prop)
        line = f"public {mapped.name} {prop.name} {{ get; set; }}"
        if mapped.initializer:
            line += f" = {mapped.initializer};"
        return line

    def create_factories(self, descriptor: TypeDescriptor) -> List[str]:
        name = descriptor.name
        return [
            f"public static {name} Create()",
            "{",
            f"return new {name}();",
            "}",
            f"public static {name} Create(object other)",
            "{",
            "ArgumentNullException.ThrowIfNull(other);",
            f"var result = new {name}();",
            f"if (other is {name} model)",
            "{",
            "result.CopyProperties(model);",
            "}",
            "return result;",
            "}",
        ]

    def create_copy_properties(self, descriptor: TypeDescriptor,
                               properties: List[PropertyDescriptor],
                               mapper: CSharpTypeMapper) -> List[str]:
        lines = [
            f"public void CopyProperties({descriptor.name} other)",
            "{",
            "ArgumentNullException.ThrowIfNull(other);",
        ]
        lines.extend(mapper.copy_statement(prop) for prop in properties)
        lines.append("}")
        return lines

    def create_equals(self, descriptor: TypeDescriptor,
                      properties: List[PropertyDescriptor]) -> List[str]:
        comparison = " && ".join(f"Equals({p.name}, other.{p.name})" for p in properties)
        return [
            "public override bool Equals(object? obj)",
            "{",
            f"if (obj is not {descriptor.name} other)",
            "{",
            "return false;",
            "}",
            f"return {comparison or 'true'};",
            "}",
        ]

    def create_get_hash_code(self, properties: List[PropertyDescriptor]) -> List[str]:
        lines = [
            "public override int GetHashCode()",
            "{",
            "var hashCode = new HashCode();",
        ]
        lines.extend(f"hashCode.Add({prop.name});" for prop in properties)
        lines.append("return hashCode.ToHashCode();")
        lines.append("}")
        return lines

    # Model inheritance

    def base_class(self, descriptor: TypeDescriptor) -> str:
        """First mapped ancestor, nearest first; ``object`` when none maps."""
        for ancestor in descriptor.ancestors:
            if ancestor in self.config.model_base_class_mapping:
                return self.config.model_base_class_mapping[ancestor]
        return "object"

    def create_model_inheritance(self, descriptor: TypeDescriptor,
                                 graph: TypeGraph) -> GeneratedArtifact:
        """Create the partial class part holding the derivation."""
        mapper = self.type_mapper(graph)
        artifact = self.new_artifact(
            ItemType.MODEL_INHERITANCE,
            descriptor,
            mapper.model_full_name(descriptor),
            self.sub_file_path(descriptor, "Inheritance"),
        )
        artifact.supports_custom_regions = False

        if self.config.add_comments:
            artifact.extend(self.create_comment(
                f"This part of the class contains the derivation for the '{descriptor.name}'."
            ))

        if not self.hooks.run_before(ItemType.MODEL_INHERITANCE, artifact, descriptor):
            artifact.extend(self.render_lines(
                "csharp/inheritance.cs",
                {"class_name": descriptor.name, "base_class": self.base_class(descriptor)},
            ))
        self.hooks.run_after(ItemType.MODEL_INHERITANCE, artifact, descriptor)
        return artifact

    def validate_graph(self, graph: TypeGraph) -> List[str]:
        """Validate the graph and configuration for C# generation."""
        warnings = super().validate_graph(graph)
        warnings.extend(validate_csharp_config(self.config))

        for descriptor in graph.models:
            if self.base_class(descriptor) == "object":
                warnings.append(
                    f"No mapped model base class for {descriptor.name}; deriving from object"
                )

        return warnings


# Factory functions
def create_csharp_generator(config: Optional[Dict[str, Any]] = None, **kwargs) -> CSharpGenerator:
    """Create a C# generator with the default transmission-model configuration."""
    merged_config = dict(WEB_API_CONFIG)
    if config:
        merged_config.update(config)

    return CSharpGenerator(load_config(custom_config=merged_config), **kwargs)

