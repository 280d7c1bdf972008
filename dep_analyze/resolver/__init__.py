"""Dependency graph loading."""

from __future__ import annotations

from dep_analyze.resolver.graph_loader import (
    ArtifactFileSpec,
    ArtifactSpec,
    GraphManifest,
    LoadedGraph,
    build_graph,
    load_graph,
)

__all__ = [
    "ArtifactFileSpec",
    "ArtifactSpec",
    "GraphManifest",
    "LoadedGraph",
    "build_graph",
    "load_graph",
]
