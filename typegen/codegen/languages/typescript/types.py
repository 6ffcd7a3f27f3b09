"""
TypeScript type mapping for front-end interface models.
"""

from typing import Optional

from ...core.extractor import DATE_TIME_TYPES, NUMERIC_TYPES, PRIMITIVE_TYPES
from ...core.naming import strip_interface_prefix
from ...core.schema import PropertyDescriptor, TypeGraph, TypeKind, ValueKind

DATE_TYPE = "Date"
STRING_TYPE = "string"
BOOLEAN_TYPE = "boolean"
NUMBER_TYPE = "number"

SCALAR_MAP = {
    "string": STRING_TYPE,
    "bool": BOOLEAN_TYPE,
    "Guid": STRING_TYPE,
}


class TypeScriptTypeMapper:
    """Maps property descriptors to TypeScript type literals."""

    def __init__(self, graph: TypeGraph):
        self.graph = graph

    def map_scalar(self, type_name: str, is_numeric: bool = False) -> Optional[str]:
        """Map a scalar type name; None when it has no TypeScript counterpart."""
        if type_name in DATE_TIME_TYPES:
            return DATE_TYPE
        if type_name in SCALAR_MAP:
            return SCALAR_MAP[type_name]
        if is_numeric or type_name in NUMERIC_TYPES:
            return NUMBER_TYPE
        return None

    def map_property(self, prop: PropertyDescriptor) -> Optional[str]:
        """
        Map a property to its TypeScript type.

        Returns:
            The type literal, or None for shapes that can't be expressed
        """
        kind = prop.value_kind

        if kind == ValueKind.DATE_TIME:
            return DATE_TYPE
        if kind == ValueKind.GUID:
            return STRING_TYPE
        if kind == ValueKind.SCALAR:
            return self.map_scalar(prop.type_name, prop.is_numeric)
        if kind == ValueKind.ENUM:
            target = self.graph.resolve(prop)
            return target.name if target is not None else prop.element_name
        if kind == ValueKind.ENTITY_REFERENCE:
            return self._reference_name(prop)
        if kind.is_collection:
            element = self._element_name(prop)
            return f"{element}[]" if element else None
        return None

    def _reference_name(self, prop: PropertyDescriptor) -> str:
        if prop.is_interface:
            return strip_interface_prefix(prop.element_name or prop.type_name)
        target = self.graph.resolve(prop)
        return target.name if target is not None else prop.element_name or prop.type_name

    def _element_name(self, prop: PropertyDescriptor) -> Optional[str]:
        target = self.graph.resolve(prop)
        if target is not None and (target.kind == TypeKind.ENUM or not prop.is_interface):
            return target.name

        element = prop.element_name or ""
        if prop.is_interface:
            return strip_interface_prefix(element)
        if element in PRIMITIVE_TYPES or element in DATE_TIME_TYPES or element == "Guid":
            return self.map_scalar(element, prop.is_numeric)
        # Opaque external type
        return element or None
