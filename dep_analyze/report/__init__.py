"""Report writers: text report, audit log, JSON manifest."""

from __future__ import annotations

from dep_analyze.report.audit_log import format_audit_log, log_audit_trail, write_audit_log
from dep_analyze.report.manifest import build_manifest, write_manifest
from dep_analyze.report.text_report import format_violations, sorted_artifacts, write_report

__all__ = [
    "build_manifest",
    "format_audit_log",
    "format_violations",
    "log_audit_trail",
    "sorted_artifacts",
    "write_audit_log",
    "write_manifest",
    "write_report",
]
