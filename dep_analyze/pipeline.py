"""Project analysis orchestrator: usage -> index -> classification -> report."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from dep_analyze.analysis import (
    ArtifactClassInventoryCache,
    DependencyClassifier,
    DependencyGraphIndexer,
)
from dep_analyze.bytecode import ClassReferenceExtractor
from dep_analyze.errors import ConfigurationError, DependencyAnalysisError
from dep_analyze.models import (
    AnalysisConfig,
    ConfigurationRole,
    ProjectAnalysis,
    RoleSets,
)
from dep_analyze.report import log_audit_trail, write_audit_log, write_report

logger = logging.getLogger(__name__)


class ProjectDependencyAnalyzer:
    """Find undeclared and unused dependencies of one module.

    The classes the module uses come from its compiled output. The declared
    dependencies are the first-level entries of ``required``. Every class in
    the transitive graphs of all three roles is mapped to the artifacts that
    provide it, and the module's usage is resolved through that map.
    """

    def __init__(
        self,
        roles: RoleSets,
        classes_dirs: Iterable[Path],
        cache: ArtifactClassInventoryCache,
        extractor: ClassReferenceExtractor | None = None,
    ):
        if cache is None:
            raise ConfigurationError(
                "A shared artifact class inventory cache must be supplied by the host"
            )
        if roles is None:
            raise ConfigurationError("Role sets are required")
        classes_dirs = list(classes_dirs)
        if any(d is None for d in classes_dirs):
            raise ConfigurationError("classes_dirs contains a missing entry")

        self.roles = roles
        self.classes_dirs = [Path(d) for d in classes_dirs]
        self.cache = cache
        self.extractor = extractor or ClassReferenceExtractor()
        self.indexer = DependencyGraphIndexer(cache)
        self.classifier = DependencyClassifier()

    def usage(self) -> frozenset[str]:
        """Classes referenced by the module's own output, minus those it defines."""
        referenced: set[str] = set()
        defined: set[str] = set()
        for classes_dir in self.classes_dirs:
            if not classes_dir.exists():
                logger.debug("Skipping missing classes dir %s", classes_dir)
                continue
            referenced |= self.extractor.referenced_classes(classes_dir)
            defined |= self.extractor.defined_classes(classes_dir)
        return frozenset(referenced - defined)

    def analyze(self, name: str = "analyzeClassesDependencies") -> ProjectAnalysis:
        logger.info(
            "Analyzing dependencies of %s with class dirs %s for "
            "[required: %d, allowed to use: %d, allowed to declare: %d]",
            name,
            [str(d) for d in self.classes_dirs],
            len(self.roles.required),
            len(self.roles.allowed_to_use),
            len(self.roles.allowed_to_declare),
        )
        usage = self.usage()
        declared = self.roles.first_level_ids(ConfigurationRole.REQUIRED)
        allowed_to_use = self.roles.first_level_ids(ConfigurationRole.ALLOWED_TO_USE)
        allowed_to_declare = self.roles.first_level_ids(ConfigurationRole.ALLOWED_TO_DECLARE)

        index = self.indexer.build_index(self.roles)
        classification = self.classifier.classify(
            usage, index, declared, allowed_to_use, allowed_to_declare,
        )
        result = classification.result
        logger.info(
            "%s: %d used declared, %d used undeclared, %d unused declared",
            name,
            len(result.used_declared),
            len(result.used_undeclared),
            len(result.unused_declared),
        )
        return ProjectAnalysis(
            name=name,
            result=result,
            usage=usage,
            index=index,
            declared=tuple(declared),
            needed=classification.needed,
            allowed_to_use=tuple(allowed_to_use),
            allowed_to_declare=tuple(allowed_to_declare),
            ambiguities=classification.ambiguities,
        )


def run_analysis(
    config: AnalysisConfig,
    roles: RoleSets,
    classes_dirs: Iterable[Path],
    cache: ArtifactClassInventoryCache,
) -> ProjectAnalysis:
    """Analyze, write the report, and apply the warn-or-fail policy."""
    analysis = ProjectDependencyAnalyzer(roles, classes_dirs, cache).analyze(config.name)

    if config.log_dependency_information_to_files:
        log_path = write_audit_log(analysis, config.log_dir)
        logger.info("Wrote dependency information to %s", log_path)
    else:
        log_audit_trail(analysis)

    report = write_report(analysis.result, config.report_file)
    if report:
        message = f"Dependency analysis found issues.\n{report}"
        if config.just_warn:
            logger.warning("%s", message)
        else:
            raise DependencyAnalysisError(message, report=report)
    return analysis
