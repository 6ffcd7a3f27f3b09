"""
C# type mapping for transmission models.

Maps property descriptors to C# type literals, initializers and the
statements used by the generated copy method.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ...core.naming import to_module_identifier
from ...core.schema import PropertyDescriptor, TypeDescriptor, TypeGraph, TypeKind, ValueKind

# Value types never get a default initializer
VALUE_TYPES = {
    "bool",
    "char",
    "byte",
    "sbyte",
    "short",
    "ushort",
    "int",
    "uint",
    "long",
    "ulong",
    "float",
    "double",
    "decimal",
    "TimeSpan",
    "DateTime",
    "DateOnly",
    "DateTimeOffset",
    "Guid",
}


@dataclass(frozen=True)
class CSharpType:
    """A mapped C# property type."""

    name: str
    element: Optional[str] = None  # Element type of collections
    initializer: Optional[str] = None  # Expression after '=' in the declaration
    model_element: bool = False  # Element/reference is a generated model


class CSharpTypeMapper:
    """Maps descriptors to C# types in the transmission-model namespace."""

    def __init__(self, graph: TypeGraph, root_namespace: str, models_folder: str):
        self.graph = graph
        self.root_namespace = root_namespace
        self.models_folder = models_folder

    def model_namespace(self, descriptor: TypeDescriptor) -> str:
        return to_module_identifier(self.root_namespace, self.models_folder, descriptor.namespace)

    def model_full_name(self, descriptor: TypeDescriptor) -> str:
        return f"{self.model_namespace(descriptor)}.{descriptor.name}"

    def enum_full_name(self, descriptor: TypeDescriptor) -> str:
        return to_module_identifier(self.root_namespace, descriptor.namespace, descriptor.name)

    def _target_name(self, prop: PropertyDescriptor) -> Tuple[str, bool]:
        """C# name of a referenced type and whether it is a generated model."""
        target = self.graph.resolve(prop)
        if target is None:
            return prop.element_name or prop.type_name, False
        if target.kind == TypeKind.ENUM:
            return self.enum_full_name(target), False
        return self.model_full_name(target), True

    def map_property(self, prop: PropertyDescriptor) -> CSharpType:
        """Map a property to its C# type."""
        kind = prop.value_kind

        if kind == ValueKind.LIST_OF_REFERENCE:
            element, is_model = self._target_name(prop)
            return CSharpType(f"List<{element}>", element, "new()", is_model)

        if kind == ValueKind.ARRAY_OF_REFERENCE:
            element, is_model = self._target_name(prop)
            return CSharpType(f"{element}[]", element, f"Array.Empty<{element}>()", is_model)

        if kind == ValueKind.ENTITY_REFERENCE:
            name, is_model = self._target_name(prop)
            return CSharpType(f"{name}?", name, None, is_model)

        if kind == ValueKind.ENUM:
            name, _ = self._target_name(prop)
            return CSharpType(f"{name}?" if prop.is_nullable else name)

        name = prop.type_name
        if prop.is_nullable:
            return CSharpType(f"{name}?")
        if name == "string":
            return CSharpType(name, initializer="string.Empty")
        if name in VALUE_TYPES or prop.is_numeric:
            return CSharpType(name)
        return CSharpType(f"{name}?")

    def copy_statement(self, prop: PropertyDescriptor) -> str:
        """Statement copying ``prop`` from ``other`` inside CopyProperties."""
        mapped = self.map_property(prop)
        name = prop.name

        if mapped.model_element:
            if prop.value_kind == ValueKind.ARRAY_OF_REFERENCE:
                return f"{name} = other.{name}.Select(e => {mapped.element}.Create((object)e)).ToArray();"
            if prop.value_kind == ValueKind.LIST_OF_REFERENCE:
                return f"{name} = other.{name}.Select(e => {mapped.element}.Create((object)e)).ToList();"
            return (
                f"{name} = other.{name} != null ? "
                f"{mapped.element}.Create((object)other.{name}) : null;"
            )

        return f"{name} = other.{name};"
