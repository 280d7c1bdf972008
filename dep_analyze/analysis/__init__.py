"""Core analysis: inventory cache, class-owner indexing and classification."""

from __future__ import annotations

from dep_analyze.analysis.classifier import DependencyClassifier
from dep_analyze.analysis.indexer import DependencyGraphIndexer
from dep_analyze.analysis.inventory_cache import ArtifactClassInventoryCache

__all__ = [
    "ArtifactClassInventoryCache",
    "DependencyClassifier",
    "DependencyGraphIndexer",
]
