"""
Base generator interface for all code generation targets.

Defines the contract that all target generators must implement, the
customization hooks and the parallel generation run.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from ...logging_config import get_logger
from .artifact import GeneratedArtifact, ItemType, UnitType
from .config import ALL_ITEMS, GeneratorConfig
from .diagnostics import Diagnostics
from .imports import ImportResolver
from .regions import CustomRegionEngine
from .schema import TypeDescriptor, TypeGraph, ValueKind
from .settings import SettingsResolver
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class PathCollisionError(GeneratorError):
    """Two artifacts of one run resolve to the same output path."""

    def __init__(self, path: Path, first: GeneratedArtifact, second: GeneratedArtifact):
        self.path = path
        self.first = first
        self.second = second
        super().__init__(
            f"Artifacts {first.full_name} ({first.item_type.value}) and "
            f"{second.full_name} ({second.item_type.value}) both resolve to {path}"
        )


# A hook receives the artifact under construction and the descriptor (or
# property descriptor) being emitted. Returning True from a before-hook
# marks the default step as handled.
Hook = Callable[[GeneratedArtifact, Any], Optional[bool]]


class GenerationHooks:
    """Ordered before/after callbacks per item kind, plus start/finish callbacks."""

    def __init__(self):
        self._before: Dict[ItemType, List[Hook]] = defaultdict(list)
        self._after: Dict[ItemType, List[Hook]] = defaultdict(list)
        self._start: List[Hook] = []
        self._finish: List[Hook] = []

    def before(self, item_type: ItemType, callback: Hook) -> Hook:
        self._before[item_type].append(callback)
        return callback

    def after(self, item_type: ItemType, callback: Hook) -> Hook:
        self._after[item_type].append(callback)
        return callback

    def on_start(self, callback: Hook) -> Hook:
        self._start.append(callback)
        return callback

    def on_finish(self, callback: Hook) -> Hook:
        self._finish.append(callback)
        return callback

    def run_before(self, item_type: ItemType, artifact: GeneratedArtifact, subject: Any) -> bool:
        """Run before-callbacks in order; stops at and reports the first one that handles the step."""
        for callback in self._before.get(item_type, ()):
            if callback(artifact, subject):
                return True
        return False

    def run_after(self, item_type: ItemType, artifact: GeneratedArtifact, subject: Any) -> None:
        for callback in self._after.get(item_type, ()):
            callback(artifact, subject)

    def start(self, artifact: GeneratedArtifact, subject: Any) -> None:
        for callback in self._start:
            callback(artifact, subject)

    def finish(self, artifact: GeneratedArtifact, subject: Any) -> None:
        for callback in self._finish:
            callback(artifact, subject)


# One planned emission: which item kind for which descriptor
Task = Tuple[ItemType, TypeDescriptor]


class CodeGenerator(ABC):
    """Abstract base class for all target generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 settings: Optional[SettingsResolver] = None,
                 hooks: Optional[GenerationHooks] = None,
                 diagnostics: Optional[Diagnostics] = None):
        """Initialize generator with the run configuration and collaborators."""
        self.config = config or GeneratorConfig()
        self.settings = settings if settings is not None else SettingsResolver()
        self.hooks = hooks if hooks is not None else GenerationHooks()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.regions = CustomRegionEngine(self.config, self.diagnostics)
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target (e.g., 'csharp', 'typescript')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.cs', '.ts')."""
        pass

    @property
    @abstractmethod
    def unit_type(self) -> UnitType:
        """Return the unit receiving the generated files."""
        pass

    @property
    @abstractmethod
    def item_types(self) -> Tuple[ItemType, ...]:
        """Item kinds this generator emits, in emission order."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing template overrides for this generator.

        Returns:
            Path to template directory or None
        """
        template_dir = self.config.custom.get("template_dir")
        return Path(template_dir) if template_dir else None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @property
    def project_path(self) -> Path:
        return self.config.project_path(self.unit_type)

    # Planning

    def generate_default(self, item_type: ItemType) -> bool:
        """Target-wide Generate switch of an item kind."""
        return self.settings.query_bool(self.unit_type, item_type, ALL_ITEMS, "Generate", "True")

    def can_generate(self, item_type: ItemType, descriptor: TypeDescriptor) -> bool:
        """Per-type Generate switch, defaulting to the target-wide one."""
        return self.settings.query_bool(
            self.unit_type,
            item_type,
            descriptor.qualified_name,
            "Generate",
            str(self.generate_default(item_type)),
        )

    @abstractmethod
    def candidates(self, item_type: ItemType, graph: TypeGraph) -> List[TypeDescriptor]:
        """Descriptors that may produce an artifact of ``item_type``."""
        pass

    def plan(self, graph: TypeGraph) -> List[Task]:
        """All (item kind, descriptor) pairs to emit, gated by settings."""
        tasks = []
        for item_type in self.item_types:
            for descriptor in self.candidates(item_type, graph):
                if self.can_generate(item_type, descriptor):
                    tasks.append((item_type, descriptor))
                else:
                    logger.debug("Skipping %s for %s (disabled)", item_type.value, descriptor.name)
        return tasks

    def settings_queries(self, graph: TypeGraph) -> List[Tuple[Any, ...]]:
        """Queries worth resolving before fan-out."""
        queries = []
        for item_type in self.item_types:
            queries.append((self.unit_type, item_type, ALL_ITEMS, "Generate", "True", bool))
        return queries

    # Emission

    @abstractmethod
    def emit(self, item_type: ItemType, descriptor: TypeDescriptor,
             graph: TypeGraph) -> GeneratedArtifact:
        """Build the skeleton artifact (body lines plus pending imports)."""
        pass

    def new_artifact(self, item_type: ItemType, descriptor: TypeDescriptor,
                     full_name: str, sub_file_path: str) -> GeneratedArtifact:
        """Create an artifact for this target and run the start hooks."""
        artifact = GeneratedArtifact(
            unit_type=self.unit_type,
            item_type=item_type,
            full_name=full_name,
            sub_file_path=sub_file_path,
            file_extension=self.file_extension,
        )
        self.hooks.start(artifact, descriptor)
        return artifact

    def finish_artifact(self, artifact: GeneratedArtifact, descriptor: TypeDescriptor) -> None:
        """Target-specific last step after the region merge (e.g. a namespace envelope)."""
        pass

    def build(self, item_type: ItemType, descriptor: TypeDescriptor,
              graph: TypeGraph) -> GeneratedArtifact:
        """Emit, merge custom regions, finish and run the finish hooks."""
        artifact = self.emit(item_type, descriptor, graph)
        self.regions.merge(artifact, self.project_path)
        self.finish_artifact(artifact, descriptor)
        self.hooks.finish(artifact, descriptor)
        logger.debug("Built %s", artifact)
        return artifact

    def generate(self, graph: TypeGraph) -> List[GeneratedArtifact]:
        """Generate all artifacts of this target sequentially."""
        return [self.build(item_type, descriptor, graph)
                for item_type, descriptor in self.plan(graph)]

    def import_resolver(self, graph: TypeGraph) -> ImportResolver:
        return ImportResolver(graph, self.config)

    def validate_graph(self, graph: TypeGraph) -> List[str]:
        """
        Validate the graph for basic structural issues.

        Targets should override this to add their own validation.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for descriptor in graph:
            if descriptor.is_model and not descriptor.properties:
                warnings.append(f"Type '{descriptor.name}' has no properties")

            for prop in descriptor.properties:
                if prop.value_kind == ValueKind.ENTITY_REFERENCE and prop.is_external_reference:
                    warnings.append(
                        f"{descriptor.name}.{prop.name} references {prop.element_name}, "
                        f"which is not part of the generated graph"
                    )

        return warnings

    # Template helper methods

    def render_lines(self, template_name: str, context: Dict[str, Any]) -> List[str]:
        return self.template_engine.render_lines(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        artifacts: List[GeneratedArtifact],
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            artifacts: Generated artifacts in deterministic order
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.artifacts = artifacts
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(artifacts=[])
        result.success = False
        result.error_message = message
        result.exception = exception
        return result

    def by_item_type(self, item_type: ItemType) -> List[GeneratedArtifact]:
        return [a for a in self.artifacts if a.item_type == item_type]

    def find(self, sub_file_path: str) -> Optional[GeneratedArtifact]:
        for artifact in self.artifacts:
            if artifact.sub_file_path == sub_file_path:
                return artifact
        return None


def check_path_collisions(
    artifacts: Sequence[GeneratedArtifact], config: GeneratorConfig
) -> None:
    """Raise PathCollisionError when two artifacts share an output path."""
    seen: Dict[Path, GeneratedArtifact] = {}
    for artifact in artifacts:
        path = artifact.path(config.project_path(artifact.unit_type))
        if path in seen:
            raise PathCollisionError(path, seen[path], artifact)
        seen[path] = artifact


def generate_code(
    generators: Union[CodeGenerator, Sequence[CodeGenerator]],
    graph: TypeGraph,
    config: Optional[GeneratorConfig] = None,
) -> GenerationResult:
    """
    Generate code for every requested target with error handling.

    Artifacts are built in parallel when ``config.max_workers`` is above 1;
    the result order is the planning order either way.

    Args:
        generators: One generator or several
        graph: Extracted type graph
        config: Run configuration (defaults to the first generator's)

    Returns:
        GenerationResult with artifacts, warnings, and metadata

    Raises:
        PathCollisionError: If two artifacts resolve to the same path
    """
    if isinstance(generators, CodeGenerator):
        generators = [generators]
    generators = list(generators)
    if not generators:
        return GenerationResult([], metadata={"targets": [], "artifact_count": 0})

    config = config or generators[0].config

    sinks: List[Diagnostics] = []
    for generator in generators:
        if all(generator.diagnostics is not sink for sink in sinks):
            sinks.append(generator.diagnostics)
    marks = [len(sink) for sink in sinks]

    try:
        warnings = []
        jobs = []
        for generator in generators:
            warnings.extend(generator.validate_graph(graph))
            generator.settings.prewarm(generator.settings_queries(graph))
            jobs.extend((generator, item_type, descriptor)
                        for item_type, descriptor in generator.plan(graph))

        def run(job):
            generator, item_type, descriptor = job
            return generator.build(item_type, descriptor, graph)

        workers = max(1, config.max_workers)
        if workers == 1:
            artifacts = [run(job) for job in jobs]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                artifacts = list(executor.map(run, jobs))

        check_path_collisions(artifacts, config)

    except PathCollisionError:
        raise
    except Exception as e:
        logger.exception("Code generation failed")
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)

    for sink, mark in zip(sinks, marks):
        warnings.extend(sink.messages[mark:])
    # Targets share graph validation, so identical warnings are reported once
    warnings = list(dict.fromkeys(warnings))

    metadata = {
        "targets": [generator.language_name for generator in generators],
        "artifact_count": len(artifacts),
        "type_count": len(graph),
        "workers": workers,
    }
    logger.info("Generated %d artifacts for %s", len(artifacts), ", ".join(metadata["targets"]))

    return GenerationResult(artifacts, warnings, metadata)
