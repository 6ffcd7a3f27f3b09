"""
Import/reference resolution.

Computes the cross-artifact references of one descriptor as a minimal,
deduplicated, deterministically ordered list of import statements.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .config import GeneratorConfig
from .naming import convert_file_item, create_sub_path, join_path
from .schema import PropertyDescriptor, TypeDescriptor, TypeGraph, TypeKind, ValueKind


class ImportCategory(Enum):
    """Kinds of referenced artifacts."""

    ENUM = "enum"
    MODEL = "model"


def create_import(alias: str, name: str, sub_path: str) -> str:
    """Build one import statement: ``import { Name } from '<alias>/<sub>/<file>';``."""
    module = join_path(alias, convert_file_item(sub_path) if sub_path else "", convert_file_item(name))
    return "import { " + name + " } from " + f"'{module}';"


@dataclass(frozen=True)
class ImportDescriptor:
    """One reference from an artifact to another generated artifact."""

    category: ImportCategory
    name: str
    sub_path: str
    alias: str

    @property
    def statement(self) -> str:
        return create_import(self.alias, self.name, self.sub_path)


class ImportResolver:
    """Walks a descriptor's properties once and collects its references."""

    def __init__(self, graph: TypeGraph, config: Optional[GeneratorConfig] = None):
        self.graph = graph
        self.config = config or GeneratorConfig()

    def resolve(self, descriptor: TypeDescriptor) -> List[ImportDescriptor]:
        """
        Resolve the imports of a descriptor.

        Enum properties (and collections of enums) reference the enum
        artifact; references and collections whose element is a model in
        the graph reference the model artifact. References to the
        descriptor itself and to types outside the graph are skipped.

        Returns:
            Import descriptors in first-seen order, without duplicates
        """
        result: List[ImportDescriptor] = []
        seen = set()

        for prop in descriptor.properties:
            found = self._reference_for(prop)
            if found is None or found.name == descriptor.name:
                continue

            statement = found.statement
            if statement not in seen:
                seen.add(statement)
                result.append(found)

        return result

    def statements(self, descriptor: TypeDescriptor) -> List[str]:
        """Resolved imports as statement lines."""
        return [item.statement for item in self.resolve(descriptor)]

    def _reference_for(self, prop: PropertyDescriptor) -> Optional[ImportDescriptor]:
        if prop.value_kind not in (
            ValueKind.ENUM,
            ValueKind.ENTITY_REFERENCE,
            ValueKind.ARRAY_OF_REFERENCE,
            ValueKind.LIST_OF_REFERENCE,
        ):
            return None

        target = self.graph.resolve(prop)
        if target is None:
            return None

        if target.kind == TypeKind.ENUM:
            return ImportDescriptor(
                ImportCategory.ENUM,
                target.name,
                create_sub_path(target.namespace),
                self.config.enum_import_alias,
            )

        if target.is_model and not prop.is_interface:
            return ImportDescriptor(
                ImportCategory.MODEL,
                target.name,
                create_sub_path(target.namespace),
                self.config.model_import_alias,
            )

        return None


def distinct(lines: List[str]) -> List[str]:
    """Drop repeated lines, keeping the first occurrence."""
    seen = set()
    result = []
    for line in lines:
        if line not in seen:
            seen.add(line)
            result.append(line)
    return result


def insert_imports(imports: List[str], lines: List[str]) -> List[str]:
    """
    Push import statements to the top of ``lines``.

    Items are de-duplicated and inserted at index 0 in reverse order, so
    the block at the top of the file reads in the original order.

    Returns:
        The same ``lines`` list, modified in place
    """
    for statement in reversed(distinct(imports)):
        lines.insert(0, statement)
    return lines
