"""Class-owner index builder over role-tagged dependency graphs."""

from __future__ import annotations

import logging

from dep_analyze.analysis.inventory_cache import ArtifactClassInventoryCache
from dep_analyze.errors import ConfigurationError
from dep_analyze.models import ArtifactId, ClassOwnerIndex, DependencyNode, RoleSets

logger = logging.getLogger(__name__)


class DependencyGraphIndexer:
    """Map every class reachable from the role sets to the artifacts providing it."""

    def __init__(self, cache: ArtifactClassInventoryCache):
        if cache is None:
            raise ConfigurationError("An artifact class inventory cache is required")
        self.cache = cache

    def build_index(self, roles: RoleSets) -> ClassOwnerIndex:
        """Walk the transitive closure of every first-level node once.

        The enqueued set is shared by the whole pass and keyed by node, so a
        node reached from several parents or roots is expanded exactly once.
        Distinct nodes sharing coordinates are each expanded; their artifact
        inventories come from the cache.
        """
        index = ClassOwnerIndex()
        enqueued: set[int] = set()
        indexed: set[ArtifactId] = set()

        for root in roles.all_first_level():
            if id(root) in enqueued:
                continue
            enqueued.add(id(root))
            worklist: list[DependencyNode] = [root]
            while worklist:
                node = worklist.pop()
                self._add_node(index, node, indexed)
                for child in node.children:
                    if id(child) not in enqueued:
                        enqueued.add(id(child))
                        worklist.append(child)

        ambiguous = index.ambiguous()
        logger.debug(
            "Indexed %d classes from %d dependencies (%d provided by more than one)",
            len(index), len(index.nodes), len(ambiguous),
        )
        for class_name, owners in ambiguous.items():
            logger.debug("%s is provided by %s", class_name, ", ".join(map(str, owners)))
        return index

    def _add_node(self, index: ClassOwnerIndex, node: DependencyNode, indexed: set[ArtifactId]) -> None:
        if node.id not in indexed:
            indexed.add(node.id)
            index.nodes.append(node.id)
        for artifact in node.artifacts:
            for class_name in self.cache.get_or_compute(artifact):
                index.add(class_name, node.id)
