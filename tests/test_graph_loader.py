"""Tests for loading dependency graphs from a JSON manifest."""

import json

import pytest

from dep_analyze.errors import ConfigurationError
from dep_analyze.models import ArtifactId
from dep_analyze.resolver import load_graph


def _write_manifest(tmp_path, data):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(data))
    return path


def _artifact(name, deps=(), files=None):
    return {
        "group": "org.example",
        "name": name,
        "version": "1.0",
        "files": files if files is not None else [{"path": f"libs/{name}.jar"}],
        "dependencies": list(deps),
    }


class TestLoadGraph:
    def test_roles_and_paths(self, tmp_path):
        path = _write_manifest(tmp_path, {
            "artifacts": {"a": _artifact("a"), "b": _artifact("b")},
            "required": ["a"],
            "allowed_to_use": ["b"],
            "classes_dirs": ["build/classes"],
        })
        graph = load_graph(path)
        assert [n.id for n in graph.roles.required] == [ArtifactId("org.example", "a", "1.0")]
        assert [n.id.name for n in graph.roles.allowed_to_use] == ["b"]
        assert graph.roles.allowed_to_declare == []
        assert graph.classes_dirs == [tmp_path / "build/classes"]
        assert graph.nodes["a"].artifacts[0].file == tmp_path / "libs/a.jar"

    def test_diamond_nodes_are_shared(self, tmp_path):
        path = _write_manifest(tmp_path, {
            "artifacts": {
                "left": _artifact("left", ["shared"]),
                "right": _artifact("right", ["shared"]),
                "shared": _artifact("shared"),
            },
            "required": ["left", "right"],
        })
        graph = load_graph(path)
        left, right = graph.roles.required
        assert left.children[0] is right.children[0]

    def test_classifier_files(self, tmp_path):
        path = _write_manifest(tmp_path, {
            "artifacts": {"a": _artifact("a", files=[
                {"path": "libs/a.jar"},
                {"path": "libs/a-tests.jar", "classifier": "tests"},
            ])},
            "required": ["a"],
        })
        artifacts = load_graph(path).nodes["a"].artifacts
        assert artifacts[0].id == ArtifactId("org.example", "a", "1.0")
        assert artifacts[1].id == ArtifactId("org.example", "a", "1.0", "tests", "jar")

    def test_unknown_dependency(self, tmp_path):
        path = _write_manifest(tmp_path, {"artifacts": {"a": _artifact("a", ["ghost"])}})
        with pytest.raises(ConfigurationError, match="ghost"):
            load_graph(path)

    def test_unknown_role_entry(self, tmp_path):
        path = _write_manifest(tmp_path, {"artifacts": {}, "required": ["ghost"]})
        with pytest.raises(ConfigurationError):
            load_graph(path)

    def test_cycle_rejected(self, tmp_path):
        path = _write_manifest(tmp_path, {
            "artifacts": {"a": _artifact("a", ["b"]), "b": _artifact("b", ["a"])},
            "required": ["a"],
        })
        with pytest.raises(ConfigurationError, match="cycle"):
            load_graph(path)

    def test_schema_error(self, tmp_path):
        path = _write_manifest(tmp_path, {"artifacts": {"a": {"name": "a"}}})
        with pytest.raises(ConfigurationError, match="Invalid graph manifest"):
            load_graph(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_graph(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_graph(tmp_path / "missing.json")
