"""
Run-level diagnostics.

Every non-fatal problem found during a run (skipped property shapes,
unmapped types, unterminated regions) is logged and also recorded here so
callers can surface it as a run warning.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Iterator, List, Optional

from ...logging_config import get_logger


@dataclass(frozen=True)
class Diagnostic:
    """A single recorded warning."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.message}" if self.source else self.message


class Diagnostics:
    """Lock-guarded sink shared by all generation tasks of a run."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or get_logger(__name__)
        self._items: List[Diagnostic] = []
        self._lock = threading.Lock()

    def warn(self, source: str, message: str) -> Diagnostic:
        """Record and log a warning."""
        diagnostic = Diagnostic(source, message)
        with self._lock:
            self._items.append(diagnostic)
            self._logger.warning("%s", diagnostic)
        return diagnostic

    @property
    def messages(self) -> List[str]:
        with self._lock:
            return [str(item) for item in self._items]

    def for_source(self, source: str) -> List[Diagnostic]:
        with self._lock:
            return [item for item in self._items if item.source == source]

    def __iter__(self) -> Iterator[Diagnostic]:
        with self._lock:
            return iter(list(self._items))

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
