"""Audit trail of the intermediate sets behind a classification."""

from __future__ import annotations

import logging
from pathlib import Path

from dep_analyze.models import ProjectAnalysis

logger = logging.getLogger(__name__)


def audit_sections(analysis: ProjectAnalysis) -> list[tuple[str, list[str]]]:
    """Section name and rendered lines, in the order they are written."""
    index_lines = [
        f"{name}={{{', '.join(sorted(str(o) for o in owners))}}}"
        for name, owners in sorted(analysis.index.items())
    ]
    return [
        ("classesUsedByClassesDir", [f"'{name}'" for name in sorted(analysis.usage)]),
        ("declaredDependencies", [str(a) for a in analysis.declared]),
        ("moduleByQualifiedClassName", index_lines),
        ("allowedToDeclaredModules", [str(a) for a in analysis.allowed_to_declare]),
        ("allowedToUseModules", [str(a) for a in analysis.allowed_to_use]),
        ("neededDependencies", [str(a) for a in analysis.needed]),
        ("unusedDeclaredDependencies", [str(a) for a in analysis.result.unused_declared]),
        ("usedUndeclaredDependencies", [str(a) for a in analysis.result.used_undeclared]),
    ]


def format_audit_log(analysis: ProjectAnalysis) -> str:
    chunks = []
    for section, lines in audit_sections(analysis):
        chunks.append("\n".join([f"{section}:", *lines]) + "\n")
    return "\n".join(chunks)


def write_audit_log(analysis: ProjectAnalysis, log_dir: Path) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / f"{analysis.name}.log"
    path.write_text(format_audit_log(analysis), encoding="utf-8")
    return path


def log_audit_trail(analysis: ProjectAnalysis) -> None:
    """Emit the audit sections at INFO level instead of writing a file."""
    for section, lines in audit_sections(analysis):
        logger.info("%s = [%s]", section, ", ".join(lines))
