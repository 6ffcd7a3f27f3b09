"""
Type graph extraction.

Converts raw type metadata (as exported from the data model assembly) into
the immutable descriptor graph consumed by every generator.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ...logging_config import get_logger
from .config import GeneratorConfig
from .diagnostics import Diagnostics
from .schema import (
    EnumMember,
    PropertyDescriptor,
    TypeDescriptor,
    TypeGraph,
    TypeKind,
    ValueKind,
)

logger = get_logger(__name__)


class ExtractionError(Exception):
    """Raised when the metadata document itself is malformed."""

    pass


RAW_KINDS = {"entity", "view", "enum", "abstract"}

DATE_TIME_TYPES = {"DateTime", "DateOnly", "DateTimeOffset"}
GUID_TYPES = {"Guid"}

PRIMITIVE_TYPES = {
    "string",
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
    "object",
}

NUMERIC_TYPES = {
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
}

# Framework type names and their keyword spelling
_CLR_ALIASES = {
    "String": "string",
    "Boolean": "bool",
    "Char": "char",
    "Byte": "byte",
    "SByte": "sbyte",
    "Int16": "short",
    "UInt16": "ushort",
    "Int32": "int",
    "UInt32": "uint",
    "Int64": "long",
    "UInt64": "ulong",
    "Single": "float",
    "Double": "double",
    "Decimal": "decimal",
    "Object": "object",
}


def normalize_type_name(type_name: Optional[str]) -> Tuple[str, bool]:
    """
    Strip nullable markers and framework prefixes from a raw type name.

    Returns:
        Tuple of (clean name, had nullable marker)
    """
    name = (type_name or "").strip()
    nullable = False

    if name.startswith("Nullable<") and name.endswith(">"):
        name = name[len("Nullable<"):-1].strip()
        nullable = True
    if name.endswith("?"):
        name = name[:-1]
        nullable = True
    if name.startswith("System."):
        name = name[len("System."):]

    return _CLR_ALIASES.get(name, name), nullable


@dataclass(frozen=True)
class RawProperty:
    """A property exactly as described in the metadata document."""

    name: str
    type: str
    declared_on: Optional[str] = None
    is_array: bool = False
    is_generic_list: bool = False
    is_enum: bool = False
    is_numeric: bool = False
    is_class: bool = False
    is_interface: bool = False
    is_nullable: bool = False
    element_type: Optional[str] = None
    element_is_interface: bool = False
    generic_arguments: Tuple[str, ...] = ()
    is_navigation: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawProperty":
        if "name" not in data or "type" not in data:
            raise ExtractionError(f"Property entry needs 'name' and 'type': {data!r}")
        return cls(
            name=str(data["name"]),
            type=str(data["type"]),
            declared_on=data.get("declared_on"),
            is_array=bool(data.get("is_array", False)),
            is_generic_list=bool(data.get("is_generic_list", False)),
            is_enum=bool(data.get("is_enum", False)),
            is_numeric=bool(data.get("is_numeric", False)),
            is_class=bool(data.get("is_class", False)),
            is_interface=bool(data.get("is_interface", False)),
            is_nullable=bool(data.get("is_nullable", False)),
            element_type=data.get("element_type"),
            element_is_interface=bool(data.get("element_is_interface", False)),
            generic_arguments=tuple(data.get("generic_arguments") or ()),
            is_navigation=bool(data.get("is_navigation", False)),
        )


@dataclass(frozen=True)
class RawType:
    """A type exactly as described in the metadata document."""

    name: str
    kind: str
    namespace: str = ""
    base: Optional[str] = None
    properties: Tuple[RawProperty, ...] = ()
    members: Tuple[EnumMember, ...] = ()
    description: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawType":
        name = data.get("name")
        if not name:
            raise ExtractionError(f"Type entry without a name: {data!r}")

        kind = str(data.get("kind", "entity")).lower()
        if kind not in RAW_KINDS:
            raise ExtractionError(f"Type {name} has unknown kind '{kind}'")

        members = []
        for index, member in enumerate(data.get("members") or ()):
            value = member.get("value", index)
            try:
                members.append(EnumMember(str(member["name"]), int(value)))
            except (KeyError, TypeError, ValueError) as e:
                raise ExtractionError(f"Invalid enum member in {name}: {member!r}") from e

        return cls(
            name=str(name),
            kind=kind,
            namespace=str(data.get("namespace") or ""),
            base=data.get("base") or None,
            properties=tuple(RawProperty.from_dict(p) for p in data.get("properties") or ()),
            members=tuple(members),
            description=data.get("description"),
        )


class MetadataProvider:
    """
    Read-only access to the raw types of one metadata document.

    Exposes the three candidate sets (entities, views, enumerations) and
    every known type, including abstract bases that are never generated
    themselves but contribute inherited properties.
    """

    def __init__(self, types: Iterable[RawType]):
        self._types: List[RawType] = list(types)
        self._by_name: Dict[str, RawType] = {}
        for raw in self._types:
            self._by_name.setdefault(raw.qualified_name, raw)
            self._by_name.setdefault(raw.name, raw)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetadataProvider":
        """Build a provider from a parsed metadata document."""
        types = data.get("types") if isinstance(data, dict) else None
        if not isinstance(types, list):
            raise ExtractionError("Metadata document must contain a 'types' list")
        return cls(RawType.from_dict(entry) for entry in types)

    def find(self, name: Optional[str]) -> Optional[RawType]:
        if not name:
            return None
        return self._by_name.get(normalize_type_name(name)[0])

    @property
    def all_types(self) -> List[RawType]:
        return list(self._types)

    @property
    def entity_types(self) -> List[RawType]:
        return [t for t in self._types if t.kind == "entity"]

    @property
    def view_types(self) -> List[RawType]:
        return [t for t in self._types if t.kind == "view"]

    @property
    def enum_types(self) -> List[RawType]:
        return [t for t in self._types if t.kind == "enum"]


TypeFilter = Callable[[RawType], bool]

_KIND_MAP = {
    "entity": TypeKind.ENTITY,
    "view": TypeKind.VIEW,
    "enum": TypeKind.ENUM,
}


@dataclass
class _ElementIndex:
    """Short and qualified names of the types accepted into the graph."""

    names: Dict[str, str] = field(default_factory=dict)

    def add(self, raw: RawType) -> None:
        self.names[raw.qualified_name] = raw.qualified_name
        self.names.setdefault(raw.name, raw.qualified_name)

    def lookup(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        return self.names.get(normalize_type_name(name)[0])


class TypeGraphExtractor:
    """Builds a TypeGraph from a MetadataProvider."""

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 diagnostics: Optional[Diagnostics] = None):
        self.config = config or GeneratorConfig()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def extract(self, provider: MetadataProvider,
                type_filter: Optional[TypeFilter] = None) -> TypeGraph:
        """
        Extract the descriptor graph.

        Args:
            provider: Raw metadata source
            type_filter: Optional predicate restricting the candidate types

        Returns:
            TypeGraph holding one descriptor per accepted type
        """
        candidates = [
            raw
            for raw in provider.entity_types + provider.view_types + provider.enum_types
            if type_filter is None or type_filter(raw)
        ]

        index = _ElementIndex()
        for raw in candidates:
            index.add(raw)

        graph = TypeGraph()
        for raw in candidates:
            graph.add(self._build_descriptor(raw, provider, index))

        logger.info(
            "Extracted %d types (%d entities, %d views, %d enums)",
            len(graph), len(graph.entities), len(graph.views), len(graph.enums),
        )
        return graph

    def _build_descriptor(self, raw: RawType, provider: MetadataProvider,
                          index: _ElementIndex) -> TypeDescriptor:
        kind = _KIND_MAP[raw.kind]
        ancestors = self._ancestors(raw, provider)

        properties: Tuple[PropertyDescriptor, ...] = ()
        if kind != TypeKind.ENUM:
            properties = tuple(
                descriptor
                for declaring, prop in self._collect_properties(raw, provider)
                for descriptor in [self._classify(raw, declaring, prop, index)]
                if descriptor is not None
            )

        return TypeDescriptor(
            name=raw.name,
            kind=kind,
            namespace=raw.namespace,
            base_name=raw.base,
            ancestors=ancestors,
            properties=properties,
            members=raw.members if kind == TypeKind.ENUM else (),
            description=raw.description,
        )

    def _ancestors(self, raw: RawType, provider: MetadataProvider) -> Tuple[str, ...]:
        """Names of all base types, nearest first; stops on cycles and unknown bases."""
        ancestors: List[str] = []
        seen = {raw.qualified_name}
        base_name = raw.base

        while base_name:
            base = provider.find(base_name)
            if base is None:
                ancestors.append(normalize_type_name(base_name)[0])
                break
            if base.qualified_name in seen:
                logger.warning("Inheritance cycle at %s while walking %s", base.name, raw.name)
                break
            seen.add(base.qualified_name)
            ancestors.append(base.name)
            base_name = base.base

        return tuple(ancestors)

    def _collect_properties(self, raw: RawType,
                            provider: MetadataProvider) -> List[Tuple[str, RawProperty]]:
        """Own and inherited properties, base-most first; redeclarations replace in place."""
        chain = [raw]
        seen = {raw.qualified_name}
        base = provider.find(raw.base)
        while base is not None and base.qualified_name not in seen:
            chain.append(base)
            seen.add(base.qualified_name)
            base = provider.find(base.base)

        collected: Dict[str, Tuple[str, RawProperty]] = {}
        for owner in reversed(chain):
            for prop in owner.properties:
                declaring = normalize_type_name(prop.declared_on)[0] or owner.name
                collected[prop.name] = (declaring, prop)

        return list(collected.values())

    def _classify(self, raw: RawType, declaring: str, prop: RawProperty,
                  index: _ElementIndex) -> Optional[PropertyDescriptor]:
        type_name, marked_nullable = normalize_type_name(prop.type)
        is_nullable = prop.is_nullable or marked_nullable

        common = dict(
            name=prop.name,
            declaring_type=declaring,
            type_name=type_name,
            is_nullable=is_nullable,
            is_navigation=prop.is_navigation,
            is_version=prop.name in self.config.version_properties,
        )

        if prop.is_enum:
            return PropertyDescriptor(
                value_kind=ValueKind.ENUM,
                element_name=type_name,
                element_type=index.lookup(type_name),
                **common,
            )

        if prop.is_array or prop.is_generic_list:
            return self._classify_collection(raw, prop, index, common)

        if type_name in DATE_TIME_TYPES:
            return PropertyDescriptor(value_kind=ValueKind.DATE_TIME, **common)

        if type_name in GUID_TYPES:
            return PropertyDescriptor(value_kind=ValueKind.GUID, **common)

        if type_name in PRIMITIVE_TYPES or prop.is_numeric:
            return PropertyDescriptor(
                value_kind=ValueKind.SCALAR,
                is_numeric=prop.is_numeric or type_name in NUMERIC_TYPES,
                **common,
            )

        if (prop.is_class or prop.is_interface) and not prop.generic_arguments:
            return PropertyDescriptor(
                value_kind=ValueKind.ENTITY_REFERENCE,
                element_name=type_name,
                element_type=index.lookup(type_name),
                is_interface=prop.is_interface,
                **common,
            )

        return self._anomaly(raw, prop, "unrecognized property shape")

    def _classify_collection(self, raw: RawType, prop: RawProperty, index: _ElementIndex,
                             common: Dict[str, Any]) -> Optional[PropertyDescriptor]:
        if prop.is_generic_list:
            if len(prop.generic_arguments) > 1:
                return self._anomaly(
                    raw, prop, f"generic list with {len(prop.generic_arguments)} type arguments"
                )
            element = prop.element_type or (
                prop.generic_arguments[0] if prop.generic_arguments else None
            )
            value_kind = ValueKind.LIST_OF_REFERENCE
        else:
            element = prop.element_type
            value_kind = ValueKind.ARRAY_OF_REFERENCE

        if not element:
            return self._anomaly(raw, prop, "collection without element type")

        element_name, _ = normalize_type_name(element)

        return PropertyDescriptor(
            value_kind=value_kind,
            element_name=element_name,
            element_type=index.lookup(element_name),
            is_numeric=element_name in NUMERIC_TYPES,
            is_interface=prop.element_is_interface,
            **common,
        )

    def _anomaly(self, raw: RawType, prop: RawProperty, reason: str) -> None:
        self.diagnostics.warn(
            f"{raw.name}.{prop.name}", f"{reason} ({prop.type}); property skipped"
        )
        return None


def extract_type_graph(data: Dict[str, Any], config: Optional[GeneratorConfig] = None,
                       type_filter: Optional[TypeFilter] = None,
                       diagnostics: Optional[Diagnostics] = None) -> TypeGraph:
    """
    Convenience function: metadata document -> TypeGraph.

    Args:
        data: Parsed metadata document
        config: Run configuration
        type_filter: Optional predicate restricting the candidate types
        diagnostics: Sink receiving extraction anomalies

    Returns:
        The extracted TypeGraph
    """
    provider = MetadataProvider.from_dict(data)
    return TypeGraphExtractor(config, diagnostics).extract(provider, type_filter)
