"""
Persisting generated artifacts.

The writer is the only component that touches the output tree: it
applies the configured formatter, prepends the generated-code label and
writes each artifact below its unit's project path.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from ...logging_config import get_logger
from .artifact import GeneratedArtifact
from .config import GeneratorConfig

logger = get_logger(__name__)

PathLike = Union[str, Path]


class ArtifactWriter:
    """Writes artifacts to disk."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()

    def render(self, artifact: GeneratedArtifact) -> str:
        """Final file text of an artifact."""
        lines = list(artifact.source)
        if self.config.formatter is not None:
            lines = list(self.config.formatter(lines))
        if self.config.write_info_header:
            lines.insert(0, self.config.generated_code_label)
        return "\n".join(lines) + "\n"

    def write(self, artifacts: Iterable[GeneratedArtifact]) -> List[Path]:
        """
        Write artifacts below their project paths.

        Returns:
            Paths that were written
        """
        written = []
        for artifact in artifacts:
            path = artifact.path(self.config.project_path(artifact.unit_type))
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="\n") as f:
                f.write(self.render(artifact))
            written.append(path)
            logger.debug("Wrote %s", path)

        logger.info("Wrote %d file(s)", len(written))
        return written

    def is_generated_file(self, path: PathLike) -> bool:
        """True when the first line of the file is the generated-code label."""
        try:
            with Path(path).open("r", encoding="utf-8") as f:
                first = f.readline()
        except (OSError, UnicodeDecodeError):
            return False
        return first.strip() == self.config.generated_code_label

    def delete_generated_files(self, root: PathLike) -> List[Path]:
        """Delete every generated file of a customizable type below ``root``."""
        deleted = []
        for path in sorted(Path(root).rglob("*")):
            if (
                path.is_file()
                and path.suffix.lower() in self.config.customizable_extensions
                and self.is_generated_file(path)
            ):
                path.unlink()
                deleted.append(path)
                logger.debug("Deleted %s", path)

        logger.info("Deleted %d generated file(s) below %s", len(deleted), root)
        return deleted

    def clean_directories(self, root: PathLike) -> List[Path]:
        """Remove empty directories below ``root``, deepest first."""
        removed = []
        directories = [p for p in Path(root).rglob("*") if p.is_dir()]
        for directory in sorted(directories, key=lambda p: len(p.parts), reverse=True):
            if not any(directory.iterdir()):
                directory.rmdir()
                removed.append(directory)
        return removed
