"""Process-wide memo of the classes each artifact provides."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable

from dep_analyze.bytecode import ClassReferenceExtractor
from dep_analyze.models import ArtifactId, ResolvedArtifact

logger = logging.getLogger(__name__)

InventoryFunction = Callable[[ResolvedArtifact], Iterable[str]]


class ArtifactClassInventoryCache:
    """Artifact id -> frozenset of class names, populated on first lookup.

    Construct one per host process and pass it to every analysis so that
    each artifact is read once per process. Entries never change once
    committed; when two threads miss on the same key concurrently, both
    compute and the first commit wins.
    """

    def __init__(self, extractor: ClassReferenceExtractor | None = None):
        self._extractor = extractor or ClassReferenceExtractor()
        self._entries: dict[ArtifactId, frozenset[str]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get_or_compute(
        self,
        artifact: ResolvedArtifact,
        compute: InventoryFunction | None = None,
    ) -> frozenset[str]:
        """Return the inventory of ``artifact``, computing it on a miss.

        ``compute`` defaults to listing the classes in the artifact file.
        """
        with self._lock:
            cached = self._entries.get(artifact.id)
            if cached is not None:
                self._hits += 1
        if cached is not None:
            logger.debug("inventory cache hit for %s", artifact.id)
            return cached

        logger.debug("inventory cache miss for %s (%s)", artifact.id, artifact.file)
        if compute is None:
            classes = self._extractor.defined_classes(artifact.file)
        else:
            classes = frozenset(compute(artifact))
        with self._lock:
            self._misses += 1
            committed = self._entries.setdefault(artifact.id, classes)
            size = len(self._entries)
        logger.debug("inventory cache size is %d", size)
        return committed

    def seed(self, artifact_id: ArtifactId, classes: Iterable[str]) -> frozenset[str]:
        """Commit a precomputed inventory; an existing entry is kept."""
        with self._lock:
            return self._entries.setdefault(artifact_id, frozenset(classes))

    def get(self, artifact_id: ArtifactId) -> frozenset[str] | None:
        with self._lock:
            return self._entries.get(artifact_id)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"size": len(self._entries), "hits": self._hits, "misses": self._misses}

    def __contains__(self, artifact_id: object) -> bool:
        with self._lock:
            return artifact_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
