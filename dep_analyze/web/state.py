"""In-memory state for the analysis service."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime

from dep_analyze.analysis import ArtifactClassInventoryCache


@dataclass
class AnalysisRecord:
    name: str
    manifest: str
    violations: int
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class ServiceState:
    """Owns the inventory cache shared by every request of one app."""

    def __init__(self):
        self._lock = threading.Lock()
        self.cache = ArtifactClassInventoryCache()
        self.history: list[AnalysisRecord] = []

    def reset_cache(self) -> None:
        with self._lock:
            self.cache = ArtifactClassInventoryCache()

    def record(self, entry: AnalysisRecord) -> None:
        with self._lock:
            self.history.append(entry)
