"""Plain-text violation report."""

from __future__ import annotations

from typing import Iterable

from dep_analyze.models import AnalysisResult, ArtifactId

_SECTIONS = (
    ("unused_declared", "Unused declared dependency (unusedDeclaredArtifacts):"),
    ("used_undeclared", "Used undeclared dependency (usedUndeclaredArtifacts):"),
)


def sorted_artifacts(artifacts: Iterable[ArtifactId]) -> list[ArtifactId]:
    return sorted(artifacts, key=ArtifactId.sort_key)


def format_violations(result: AnalysisResult) -> str:
    """Render the violation sections; empty string when there are none."""
    lines: list[str] = []
    for attr, heading in _SECTIONS:
        artifacts = getattr(result, attr)
        if not artifacts:
            continue
        lines.append(heading)
        for artifact in sorted_artifacts(artifacts):
            lines.append(f" - {artifact}")
    return "\n".join(lines) + "\n" if lines else ""


def write_report(result: AnalysisResult, path) -> str:
    """Write the report (an empty file when clean) and return its text."""
    text = format_violations(result)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return text
