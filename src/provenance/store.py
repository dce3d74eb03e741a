"""
Provenance store: node id -> TracedValue for one computation run.

The store is read-only and iterates in insertion order. It is built once
per run through ``ProvenanceStoreBuilder``, which refuses duplicate ids.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterator, List, Tuple

from models.traced import TracedValue

logger = logging.getLogger(__name__)


class DuplicateNodeError(Exception):
    """A node id was emitted twice in one run."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Duplicate provenance node id: '{node_id}'")


class ProvenanceStore(Mapping):
    """Read-only mapping of node id to TracedValue."""

    def __init__(self, values: Dict[str, TracedValue]):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, node_id: str) -> TracedValue:
        return self._values[node_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ProvenanceStore({len(self)} nodes)"

    def to_pairs(self) -> List[Tuple[str, TracedValue]]:
        """(node_id, value) pairs in insertion order, for a transport layer."""
        return list(self._values.items())


class ProvenanceStoreBuilder:
    """Accumulates nodes for one run, then freezes them into a store."""

    def __init__(self):
        self._values: Dict[str, TracedValue] = {}

    def add(self, node_id: str, value: TracedValue) -> None:
        """
        Insert a node.

        Raises:
            DuplicateNodeError: If the id was already added
        """
        if node_id in self._values:
            logger.error(f"Provenance node emitted twice: {node_id}")
            raise DuplicateNodeError(node_id)
        self._values[node_id] = value

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._values

    def __len__(self) -> int:
        return len(self._values)

    def build(self) -> ProvenanceStore:
        return ProvenanceStore(self._values)
