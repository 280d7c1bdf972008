"""Data models for dependency analysis."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from dep_analyze.errors import AmbiguousOwnershipWarning, ConfigurationError


@dataclass(frozen=True)
class ArtifactId:
    """Coordinates of a published artifact.

    Equality and hashing use the coordinates only, so two resolutions of
    the same artifact to different files compare equal.
    """
    group: str
    name: str
    version: str
    classifier: str | None = None
    extension: str = "jar"

    @property
    def module(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"

    def sort_key(self) -> tuple[str, str, str, str, str]:
        return (self.group, self.name, self.version, self.classifier or "", self.extension)

    def __str__(self) -> str:
        classifier = f":{self.classifier}" if self.classifier else ""
        return f"{self.module}{classifier}@{self.extension}"


@dataclass(frozen=True)
class ResolvedArtifact:
    """One concrete file published by a dependency node."""
    id: ArtifactId
    file: Path


@dataclass(eq=False)
class DependencyNode:
    """A resolved dependency and its direct children.

    Nodes form a DAG; the same node object may be a child of several
    parents. Identity for traversal is ``id``.
    """
    id: ArtifactId
    artifacts: list[ResolvedArtifact] = field(default_factory=list)
    children: list[DependencyNode] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"DependencyNode({self.id}, children={len(self.children)})"


class ConfigurationRole(enum.Enum):
    REQUIRED = "required"
    ALLOWED_TO_USE = "allowed_to_use"
    ALLOWED_TO_DECLARE = "allowed_to_declare"


@dataclass
class RoleSets:
    """First-level dependency graphs grouped by role."""
    required: list[DependencyNode] = field(default_factory=list)
    allowed_to_use: list[DependencyNode] = field(default_factory=list)
    allowed_to_declare: list[DependencyNode] = field(default_factory=list)

    def __post_init__(self):
        for role in ConfigurationRole:
            nodes = getattr(self, role.value)
            if nodes is None:
                raise ConfigurationError(f"Role '{role.value}' must be a list, got None")
            for position, node in enumerate(nodes):
                if node is None:
                    raise ConfigurationError(
                        f"Role '{role.value}' has a missing dependency at position {position}"
                    )

    def nodes(self, role: ConfigurationRole) -> list[DependencyNode]:
        return getattr(self, role.value)

    def first_level_ids(self, role: ConfigurationRole) -> list[ArtifactId]:
        """Ids of the direct entries of one role, first occurrence order."""
        return list(dict.fromkeys(node.id for node in self.nodes(role)))

    def all_first_level(self) -> Iterator[DependencyNode]:
        for role in ConfigurationRole:
            yield from self.nodes(role)


class ClassOwnerIndex:
    """Class name -> artifacts providing a class with that name."""

    def __init__(self):
        self._owners: dict[str, dict[ArtifactId, None]] = {}
        self.nodes: list[ArtifactId] = []  # expansion order of the indexing pass

    def add(self, class_name: str, owner: ArtifactId) -> None:
        self._owners.setdefault(class_name, {})[owner] = None

    def owners(self, class_name: str) -> tuple[ArtifactId, ...]:
        return tuple(self._owners.get(class_name, ()))

    def ambiguous(self) -> dict[str, tuple[ArtifactId, ...]]:
        return {
            name: tuple(owners)
            for name, owners in self._owners.items()
            if len(owners) > 1
        }

    def items(self) -> Iterator[tuple[str, tuple[ArtifactId, ...]]]:
        for name, owners in self._owners.items():
            yield name, tuple(owners)

    def __contains__(self, class_name: object) -> bool:
        return class_name in self._owners

    def __iter__(self) -> Iterator[str]:
        return iter(self._owners)

    def __len__(self) -> int:
        return len(self._owners)


@dataclass(frozen=True)
class AnalysisResult:
    """The three classification sets, in first-encountered order."""
    used_declared: tuple[ArtifactId, ...] = ()
    used_undeclared: tuple[ArtifactId, ...] = ()
    unused_declared: tuple[ArtifactId, ...] = ()

    @property
    def has_violations(self) -> bool:
        return bool(self.used_undeclared or self.unused_declared)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "used_declared": [str(a) for a in self.used_declared],
            "used_undeclared": [str(a) for a in self.used_undeclared],
            "unused_declared": [str(a) for a in self.unused_declared],
        }


@dataclass(frozen=True)
class Classification:
    """Classifier output: the result plus what it was derived from."""
    result: AnalysisResult
    needed: tuple[ArtifactId, ...]
    ambiguities: tuple[AmbiguousOwnershipWarning, ...] = ()


@dataclass
class ProjectAnalysis:
    """Result of one project analysis together with its audit trail."""
    name: str
    result: AnalysisResult
    usage: frozenset[str]
    index: ClassOwnerIndex
    declared: tuple[ArtifactId, ...]
    needed: tuple[ArtifactId, ...]
    allowed_to_use: tuple[ArtifactId, ...]
    allowed_to_declare: tuple[ArtifactId, ...]
    ambiguities: tuple[AmbiguousOwnershipWarning, ...] = ()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


@dataclass
class AnalysisConfig:
    """Configuration for one analysis run."""
    name: str = "analyzeClassesDependencies"
    output_dir: Path | None = None
    just_warn: bool | None = None
    log_dependency_information_to_files: bool = False

    def __post_init__(self):
        if self.output_dir is None:
            self.output_dir = Path(os.getenv("DEP_ANALYZE_OUTPUT_DIR", "build"))
        if self.just_warn is None:
            self.just_warn = _env_flag("DEP_ANALYZE_JUST_WARN")

    @property
    def report_file(self) -> Path:
        return self.output_dir / "reports" / "dependency-analyze" / self.name

    @property
    def log_dir(self) -> Path:
        return self.output_dir / "dependency-analyze"
