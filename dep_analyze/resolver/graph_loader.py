"""Load resolved dependency graphs from a JSON manifest.

The manifest stands in for a build tool's resolver: every artifact key is
turned into exactly one ``DependencyNode``, so a dependency shared by
several parents stays a single shared node.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from dep_analyze.errors import ConfigurationError
from dep_analyze.models import ArtifactId, DependencyNode, ResolvedArtifact, RoleSets


class ArtifactFileSpec(BaseModel):
    path: str
    classifier: str | None = None
    extension: str | None = None


class ArtifactSpec(BaseModel):
    group: str
    name: str
    version: str
    classifier: str | None = None
    extension: str = "jar"
    files: list[ArtifactFileSpec] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)


class GraphManifest(BaseModel):
    artifacts: dict[str, ArtifactSpec] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    allowed_to_use: list[str] = Field(default_factory=list)
    allowed_to_declare: list[str] = Field(default_factory=list)
    classes_dirs: list[str] = Field(default_factory=list)


@dataclass
class LoadedGraph:
    roles: RoleSets
    classes_dirs: list[Path] = field(default_factory=list)
    nodes: dict[str, DependencyNode] = field(default_factory=dict)


def _resolve(base_dir: Path, path: str) -> Path:
    p = Path(path).expanduser()
    return p if p.is_absolute() else base_dir / p


def build_graph(manifest: GraphManifest, base_dir: Path) -> LoadedGraph:
    nodes: dict[str, DependencyNode] = {}
    for key, spec in manifest.artifacts.items():
        node_id = ArtifactId(spec.group, spec.name, spec.version, spec.classifier, spec.extension)
        artifacts = [
            ResolvedArtifact(
                id=ArtifactId(
                    spec.group, spec.name, spec.version,
                    f.classifier if f.classifier is not None else spec.classifier,
                    f.extension or Path(f.path).suffix.lstrip(".") or spec.extension,
                ),
                file=_resolve(base_dir, f.path),
            )
            for f in spec.files
        ]
        nodes[key] = DependencyNode(id=node_id, artifacts=artifacts)

    def lookup(key: str, referrer: str) -> DependencyNode:
        try:
            return nodes[key]
        except KeyError:
            raise ConfigurationError(f"{referrer} refers to unknown artifact '{key}'") from None

    for key, spec in manifest.artifacts.items():
        nodes[key].children = [lookup(dep, f"artifact '{key}'") for dep in spec.dependencies]

    _check_acyclic(manifest)

    roles = RoleSets(
        required=[lookup(k, "required") for k in manifest.required],
        allowed_to_use=[lookup(k, "allowed_to_use") for k in manifest.allowed_to_use],
        allowed_to_declare=[lookup(k, "allowed_to_declare") for k in manifest.allowed_to_declare],
    )
    classes_dirs = [_resolve(base_dir, d) for d in manifest.classes_dirs]
    return LoadedGraph(roles=roles, classes_dirs=classes_dirs, nodes=nodes)


def _check_acyclic(manifest: GraphManifest) -> None:
    """Reject dependency cycles with an iterative three-colour DFS."""
    state: dict[str, int] = {}  # 1 = on stack, 2 = done
    for start in manifest.artifacts:
        if start in state:
            continue
        stack: list[tuple[str, int]] = [(start, 0)]
        state[start] = 1
        while stack:
            key, position = stack[-1]
            deps = manifest.artifacts[key].dependencies
            if position == len(deps):
                state[key] = 2
                stack.pop()
                continue
            stack[-1] = (key, position + 1)
            child = deps[position]
            if state.get(child) == 1:
                path = [k for k, _ in stack] + [child]
                raise ConfigurationError(f"Dependency cycle: {' -> '.join(path)}")
            if child not in state:
                state[child] = 1
                stack.append((child, 0))


def load_graph(path: Path) -> LoadedGraph:
    """Read and validate a manifest file; relative paths resolve against its directory."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read graph manifest {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Graph manifest {path} is not valid JSON: {e}") from e
    try:
        manifest = GraphManifest.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid graph manifest {path}:\n{e}") from e
    return build_graph(manifest, path.parent)
