"""Generate the JSON result manifest."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from dep_analyze.models import ProjectAnalysis
from dep_analyze.report.text_report import sorted_artifacts


def build_manifest(analysis: ProjectAnalysis) -> dict:
    result = analysis.result
    return {
        "version": "1.0",
        "generated": datetime.now().isoformat(),
        "name": analysis.name,
        "used_declared": [str(a) for a in sorted_artifacts(result.used_declared)],
        "used_undeclared": [str(a) for a in sorted_artifacts(result.used_undeclared)],
        "unused_declared": [str(a) for a in sorted_artifacts(result.unused_declared)],
        "ambiguous_classes": {
            w.class_name: [str(o) for o in w.owners] for w in analysis.ambiguities
        },
        "counts": {
            "classes_used": len(analysis.usage),
            "classes_indexed": len(analysis.index),
            "dependencies_scanned": len(analysis.index.nodes),
            "used_declared": len(result.used_declared),
            "used_undeclared": len(result.used_undeclared),
            "unused_declared": len(result.unused_declared),
        },
    }


def write_manifest(analysis: ProjectAnalysis, output_dir: Path) -> Path:
    """Write ``<name>.json`` summarizing the analysis."""
    output_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = output_dir / f"{analysis.name}.json"
    manifest_path.write_text(
        json.dumps(build_manifest(analysis), indent=2) + "\n",
        encoding="utf-8",
    )
    return manifest_path
