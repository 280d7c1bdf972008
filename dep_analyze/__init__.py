"""Static detection of used-undeclared and unused-declared JVM dependencies."""

from __future__ import annotations

from dep_analyze.analysis import (
    ArtifactClassInventoryCache,
    DependencyClassifier,
    DependencyGraphIndexer,
)
from dep_analyze.bytecode import ClassReferenceExtractor
from dep_analyze.errors import (
    AmbiguousOwnershipWarning,
    ConfigurationError,
    DependencyAnalysisError,
    DependencyAnalyzeError,
    ParseError,
)
from dep_analyze.models import (
    AnalysisConfig,
    AnalysisResult,
    ArtifactId,
    ClassOwnerIndex,
    ConfigurationRole,
    DependencyNode,
    ProjectAnalysis,
    ResolvedArtifact,
    RoleSets,
)
from dep_analyze.pipeline import ProjectDependencyAnalyzer, run_analysis

__version__ = "0.1.0"

__all__ = [
    "AmbiguousOwnershipWarning",
    "AnalysisConfig",
    "AnalysisResult",
    "ArtifactClassInventoryCache",
    "ArtifactId",
    "ClassOwnerIndex",
    "ClassReferenceExtractor",
    "ConfigurationError",
    "ConfigurationRole",
    "DependencyAnalysisError",
    "DependencyAnalyzeError",
    "DependencyClassifier",
    "DependencyGraphIndexer",
    "DependencyNode",
    "ParseError",
    "ProjectAnalysis",
    "ProjectDependencyAnalyzer",
    "ResolvedArtifact",
    "RoleSets",
    "run_analysis",
]
