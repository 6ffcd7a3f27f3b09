"""
Custom region preservation.

Generated files may carry two hand-edited blocks: an import region and a
code region, each delimited by literal label lines. On regeneration the
blocks are read back from the previous file (or from its ``.custom``
sidecar once the file was externalized) and spliced into the fresh
skeleton.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ...logging_config import get_logger
from .artifact import GeneratedArtifact, RegionState
from .config import GeneratorConfig
from .diagnostics import Diagnostics
from .imports import distinct, insert_imports

logger = get_logger(__name__)

PathLike = Union[str, Path]


class RegionKind(Enum):
    """The two region kinds recognized in a generated file."""

    IMPORT = "import"
    CODE = "code"


@dataclass(frozen=True)
class CustomRegion:
    """Read-only snapshot of one labelled region of a previous file."""

    begin_label: str
    end_label: str
    kind: RegionKind
    lines: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def render(self) -> List[str]:
        """The region including its label lines."""
        return [self.begin_label, *self.lines, self.end_label]


class CustomRegionEngine:
    """Extracts custom regions from prior files and merges them into new skeletons."""

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 diagnostics: Optional[Diagnostics] = None):
        self.config = config or GeneratorConfig()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    @property
    def labels(self) -> Dict[RegionKind, Tuple[str, str]]:
        return {
            RegionKind.IMPORT: (
                self.config.custom_import_begin_label,
                self.config.custom_import_end_label,
            ),
            RegionKind.CODE: (
                self.config.custom_code_begin_label,
                self.config.custom_code_end_label,
            ),
        }

    def empty_region(self, kind: RegionKind) -> CustomRegion:
        begin, end = self.labels[kind]
        return CustomRegion(begin, end, kind)

    def is_customizable_file(self, path: PathLike) -> bool:
        """True for file types that can carry custom regions."""
        return Path(path).suffix.lower() in self.config.customizable_extensions

    def custom_file_path(self, path: PathLike) -> Path:
        """Sidecar path: same directory and stem, custom file extension."""
        path = Path(path)
        return path.with_name(f"{path.stem}{self.config.custom_file_extension}")

    # Reading

    def parse_regions(self, lines: Iterable[str],
                      source: str = "") -> Dict[RegionKind, CustomRegion]:
        """
        Find the labelled regions in a sequence of lines.

        Labels are matched on the stripped line. Only the first labelled
        pair of each kind counts; blank lines inside a region are dropped.
        """
        lines = list(lines)
        regions = {}

        for kind, (begin_label, end_label) in self.labels.items():
            begin = _index_of(lines, begin_label, 0)
            if begin < 0:
                continue

            end = _index_of(lines, end_label, begin + 1)
            if end < 0:
                self.diagnostics.warn(
                    source, f"'{begin_label}' without '{end_label}'; region ignored"
                )
                continue

            inner = tuple(line for line in lines[begin + 1:end] if line.strip())
            regions[kind] = CustomRegion(begin_label, end_label, kind, inner)

        return regions

    def read_regions(self, path: PathLike) -> Dict[RegionKind, CustomRegion]:
        """Read the regions of one file. I/O errors propagate."""
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            text = f.read()
        return self.parse_regions(text.splitlines(), str(path))

    def extract(self, path: PathLike) -> Tuple[RegionState, Dict[RegionKind, CustomRegion]]:
        """
        Extract regions for the artifact at ``path``.

        The file itself is preferred; the sidecar is only consulted when
        the file does not exist. Any read failure counts as no prior file.

        Returns:
            Tuple of (region state, regions found)
        """
        path = Path(path)
        candidate = path if path.exists() else self.custom_file_path(path)

        if not candidate.exists():
            return RegionState.NO_PRIOR_FILE, {}

        try:
            regions = self.read_regions(candidate)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Could not read prior file %s: %s", candidate, e)
            return RegionState.NO_PRIOR_FILE, {}

        logger.debug("Read %d custom region(s) from %s", len(regions), candidate)
        if not regions:
            return RegionState.PRIOR_FILE_FOUND, regions
        return RegionState.REGIONS_EXTRACTED, regions

    # Merging

    def merge(self, artifact: GeneratedArtifact, project_path: PathLike) -> GeneratedArtifact:
        """
        Splice the prior regions into a freshly built skeleton.

        The code region goes directly before the final closing line. The
        import region follows the resolver imports at the top of the file;
        custom imports that are already generated are dropped. Labels are
        written even when a region is empty.
        """
        if not artifact.supports_custom_regions:
            insert_imports(artifact.imports, artifact.source)
            return artifact

        state, regions = self.extract(artifact.path(project_path))
        artifact.region_state = state

        code = regions.get(RegionKind.CODE) or self.empty_region(RegionKind.CODE)
        closing = len(artifact.source) - 1 if artifact.source else 0
        artifact.source[closing:closing] = code.render()

        imports = distinct(artifact.imports)
        if artifact.supports_custom_imports:
            custom = regions.get(RegionKind.IMPORT) or self.empty_region(RegionKind.IMPORT)
            generated = {line.strip() for line in imports}
            kept = tuple(line for line in custom.lines if line.strip() not in generated)
            region = CustomRegion(custom.begin_label, custom.end_label, custom.kind, kept)
            artifact.source[0:0] = region.render()
        elif RegionKind.IMPORT in regions and not regions[RegionKind.IMPORT].is_empty:
            self.diagnostics.warn(
                artifact.sub_file_path, "custom imports found but not supported here; dropped"
            )

        insert_imports(imports, artifact.source)
        if state != RegionState.NO_PRIOR_FILE:
            artifact.region_state = RegionState.MERGED
        return artifact

    # Externalizing

    def save_custom_parts(self, path: PathLike) -> Optional[Path]:
        """
        Move the custom regions of a file into its sidecar.

        A stale sidecar is always deleted; a new one is written only when
        at least one region has content.

        Returns:
            The sidecar path when one was written, else None
        """
        path = Path(path)
        sidecar = self.custom_file_path(path)
        regions = self.read_regions(path) if path.exists() else {}

        lines: List[str] = []
        for kind in (RegionKind.IMPORT, RegionKind.CODE):
            region = regions.get(kind)
            if region is not None and not region.is_empty:
                lines.extend(region.render())

        if sidecar.exists():
            sidecar.unlink()

        if not lines:
            return None

        with sidecar.open("w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        logger.info("Saved custom parts of %s to %s", path, sidecar)
        return sidecar

    def save_all_custom_parts(self, root: PathLike) -> List[Path]:
        """Externalize the custom regions of every customizable file below ``root``."""
        saved = []
        for path in sorted(Path(root).rglob("*")):
            if path.is_file() and self.is_customizable_file(path):
                try:
                    sidecar = self.save_custom_parts(path)
                except (OSError, UnicodeDecodeError) as e:
                    self.diagnostics.warn(str(path), f"custom parts not saved: {e}")
                    continue
                if sidecar is not None:
                    saved.append(sidecar)
        return saved


def read_and_delete(path: PathLike) -> List[str]:
    """Return the lines of a file and delete it; a missing file yields no lines."""
    path = Path(path)
    if not path.exists():
        return []

    with path.open("r", encoding="utf-8") as f:
        lines = f.read().splitlines()
    path.unlink()
    return lines


def _index_of(lines: List[str], label: str, start: int) -> int:
    for index in range(start, len(lines)):
        if lines[index].strip() == label:
            return index
    return -1
