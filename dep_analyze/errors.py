"""Exception types raised by dependency analysis."""

from __future__ import annotations

from pathlib import Path


class DependencyAnalyzeError(Exception):
    """Base class for every error raised by this package."""


class ParseError(DependencyAnalyzeError):
    """A compiled class, archive or class directory could not be read."""

    def __init__(self, path: Path | str, reason: str, entry: str | None = None):
        self.path = Path(path)
        self.entry = entry
        self.reason = reason
        location = f"{self.path}!{entry}" if entry else str(self.path)
        super().__init__(f"Cannot parse {location}: {reason}")


class ConfigurationError(DependencyAnalyzeError):
    """A required collaborator or input is missing or malformed."""


class DependencyAnalysisError(DependencyAnalyzeError):
    """Analysis found violations and the run is not in warn-only mode."""

    def __init__(self, message: str, report: str = ""):
        super().__init__(message)
        self.report = report


class AmbiguousOwnershipWarning(UserWarning):
    """A referenced class is provided by more than one artifact.

    Never raised; instances are logged and returned as diagnostics.
    """

    def __init__(self, class_name: str, owners: tuple):
        self.class_name = class_name
        self.owners = owners
        names = ", ".join(str(o) for o in owners)
        super().__init__(f"More than one dependency ({names}) includes the class {class_name}")
