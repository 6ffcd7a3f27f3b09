"""
In-memory representation of one generated output file.

An artifact is owned by the generation task that created it; it is mutated
by its emitter and then by the region engine, in that order, and handed to
the writer afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional


class UnitType(str, Enum):
    """Target units (projects) receiving generated files."""

    WEB_API = "WebApi"
    ANGULAR_APP = "AngularApp"


class ItemType(str, Enum):
    """Kinds of generated items; also the item-kind axis of settings."""

    MODEL = "Model"
    MODEL_INHERITANCE = "ModelInheritance"
    MODEL_PROPERTY = "ModelProperty"
    LAMBDA = "Lambda"
    TYPESCRIPT_ENUM = "TypeScriptEnum"
    TYPESCRIPT_MODEL = "TypeScriptModel"
    TYPESCRIPT_SERVICE = "TypeScriptService"


class RegionState(Enum):
    """Progress of the custom region merge for one artifact."""

    NO_PRIOR_FILE = "no_prior_file"
    PRIOR_FILE_FOUND = "prior_file_found"
    REGIONS_EXTRACTED = "regions_extracted"
    MERGED = "merged"


@dataclass
class GeneratedArtifact:
    """One generated file prior to formatting and writing."""

    unit_type: UnitType
    item_type: ItemType
    full_name: str = ""
    sub_file_path: str = ""
    file_extension: str = ""
    source: List[str] = field(default_factory=list)

    # Resolver-generated import lines, pushed to the top during the merge
    imports: List[str] = field(default_factory=list)

    supports_custom_regions: bool = True
    supports_custom_imports: bool = True
    region_state: Optional[RegionState] = None

    def path(self, project_path) -> Path:
        """Absolute location of the artifact below a unit's project path."""
        return Path(project_path) / self.sub_file_path

    def add(self, line: str) -> None:
        self.source.append(line)

    def extend(self, lines: Iterable[str]) -> None:
        self.source.extend(lines)

    def envelope_with_namespace(self, namespace: str, *usings: str) -> None:
        """Wrap the source in a C#-style namespace block."""
        body = list(self.source)
        self.source = [f"namespace {namespace}", "{"]
        self.source.extend(usings)
        self.source.extend(body)
        self.source.append("}")

    @property
    def text(self) -> str:
        """Source lines joined with newlines, with a trailing newline."""
        return "\n".join(self.source) + "\n"

    def __str__(self) -> str:
        return f"{self.item_type.value}:{self.full_name} -> {self.sub_file_path}"
