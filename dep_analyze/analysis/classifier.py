"""Classification of declared dependencies against actual class usage."""

from __future__ import annotations

import logging
from typing import Iterable

from dep_analyze.errors import AmbiguousOwnershipWarning
from dep_analyze.models import AnalysisResult, ArtifactId, Classification, ClassOwnerIndex

logger = logging.getLogger(__name__)


class DependencyClassifier:
    """Split dependencies into used-declared, used-undeclared and unused-declared.

    Classes missing from the index are ignored: they come from the platform
    or from something outside the analyzed graphs. A class provided by
    several artifacts makes every one of them needed.
    """

    def needed_modules(
        self,
        usage: Iterable[str],
        index: ClassOwnerIndex,
    ) -> tuple[tuple[ArtifactId, ...], tuple[AmbiguousOwnershipWarning, ...]]:
        needed: dict[ArtifactId, None] = {}
        ambiguities: list[AmbiguousOwnershipWarning] = []
        for class_name in sorted(usage):
            owners = index.owners(class_name)
            if not owners:
                continue
            if len(owners) > 1:
                warning = AmbiguousOwnershipWarning(class_name, owners)
                logger.warning("%s", warning)
                ambiguities.append(warning)
            for owner in owners:
                needed.setdefault(owner, None)
        return tuple(needed), tuple(ambiguities)

    def classify(
        self,
        usage: Iterable[str],
        index: ClassOwnerIndex,
        declared: Iterable[ArtifactId],
        allowed_to_use: Iterable[ArtifactId] = (),
        allowed_to_declare: Iterable[ArtifactId] = (),
    ) -> Classification:
        declared = list(dict.fromkeys(declared))
        allowed_to_use = set(allowed_to_use)
        allowed_to_declare = set(allowed_to_declare)

        needed, ambiguities = self.needed_modules(usage, index)
        needed_set = set(needed)
        declared_set = set(declared)

        used_declared = tuple(a for a in declared if a in needed_set)
        used_undeclared = tuple(
            a for a in needed
            if a not in declared_set and a not in allowed_to_use
        )
        unused_declared = tuple(
            a for a in declared
            if a not in needed_set
            and a not in allowed_to_declare
            and a not in allowed_to_use
        )

        result = AnalysisResult(
            used_declared=used_declared,
            used_undeclared=used_undeclared,
            unused_declared=unused_declared,
        )
        return Classification(result=result, needed=needed, ambiguities=ambiguities)
