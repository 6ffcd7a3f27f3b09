"""
Core descriptor representation for code generation.

The extractor turns raw type metadata into these normalized, immutable
descriptors. Generators only ever see descriptors, never raw metadata.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
from enum import Enum


class TypeKind(Enum):
    """Kinds of types that take part in generation."""

    ENTITY = "entity"
    VIEW = "view"
    ENUM = "enum"


class ValueKind(Enum):
    """Structural classification of a property value."""

    SCALAR = "scalar"
    DATE_TIME = "date_time"
    GUID = "guid"
    ENUM = "enum"
    ENTITY_REFERENCE = "entity_reference"
    ARRAY_OF_REFERENCE = "array_of_reference"
    LIST_OF_REFERENCE = "list_of_reference"

    @property
    def is_collection(self) -> bool:
        return self in (ValueKind.ARRAY_OF_REFERENCE, ValueKind.LIST_OF_REFERENCE)


@dataclass(frozen=True)
class EnumMember:
    """A single enumeration member with its explicit integer value."""

    name: str
    value: int


@dataclass(frozen=True)
class PropertyDescriptor:
    """Represents a single property of a type descriptor."""

    name: str
    declaring_type: str  # Name key of the declaring type, not an object link
    value_kind: ValueKind
    type_name: str  # Raw type name without nullable marker

    # For references and collections
    element_name: Optional[str] = None  # Raw element/referenced type name
    element_type: Optional[str] = None  # Qualified name in the active graph, None if external

    is_numeric: bool = False
    is_nullable: bool = False
    is_interface: bool = False
    is_navigation: bool = False
    is_version: bool = False

    @property
    def is_external_reference(self) -> bool:
        """True when the property points at a type outside the active graph."""
        return self.element_name is not None and self.element_type is None

    @property
    def identity(self) -> str:
        """Settings identity of the property (``Type.Property``)."""
        return f"{self.declaring_type}.{self.name}"


@dataclass(frozen=True)
class TypeDescriptor:
    """Represents one entity, view or enumeration."""

    name: str
    kind: TypeKind
    namespace: str = ""
    base_name: Optional[str] = None
    ancestors: Tuple[str, ...] = ()  # Nearest first
    properties: Tuple[PropertyDescriptor, ...] = ()
    members: Tuple[EnumMember, ...] = ()
    description: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def is_model(self) -> bool:
        return self.kind in (TypeKind.ENTITY, TypeKind.VIEW)

    def get_property(self, name: str) -> Optional[PropertyDescriptor]:
        """Get property by name."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


@dataclass
class TypeGraph:
    """
    Arena of descriptors addressed by name.

    Cross references between descriptors are plain name keys and are
    resolved by lookup, so cycles (A -> B -> A) never recurse.
    """

    descriptors: Dict[str, TypeDescriptor] = field(default_factory=dict)
    _by_name: Dict[str, str] = field(default_factory=dict, repr=False)

    def add(self, descriptor: TypeDescriptor) -> None:
        """Add a descriptor keyed by its qualified name."""
        self.descriptors[descriptor.qualified_name] = descriptor
        self._by_name.setdefault(descriptor.name, descriptor.qualified_name)

    def get(self, key: Optional[str]) -> Optional[TypeDescriptor]:
        """Look up a descriptor by qualified name or, failing that, by short name."""
        if not key:
            return None
        found = self.descriptors.get(key)
        if found is None and key in self._by_name:
            found = self.descriptors.get(self._by_name[key])
        return found

    def resolve(self, prop: PropertyDescriptor) -> Optional[TypeDescriptor]:
        """Resolve the descriptor a property refers to, or None for opaque types."""
        return self.get(prop.element_type)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self.descriptors.values())

    def __len__(self) -> int:
        return len(self.descriptors)

    def of_kind(self, kind: TypeKind) -> List[TypeDescriptor]:
        return [d for d in self.descriptors.values() if d.kind == kind]

    @property
    def entities(self) -> List[TypeDescriptor]:
        return self.of_kind(TypeKind.ENTITY)

    @property
    def views(self) -> List[TypeDescriptor]:
        return self.of_kind(TypeKind.VIEW)

    @property
    def enums(self) -> List[TypeDescriptor]:
        return self.of_kind(TypeKind.ENUM)

    @property
    def models(self) -> List[TypeDescriptor]:
        """Entities followed by views."""
        return self.entities + self.views
